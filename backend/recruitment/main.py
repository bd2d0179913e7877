"""FastAPI application factory.

Run with ``uvicorn recruitment.main:create_app --factory``.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import select, text

from recruitment.api.v1 import router as api_v1_router
from recruitment.config import get_settings
from recruitment.errors import InvalidFormDataError, PortalError
from recruitment.models.base import Database
from recruitment.models.competence import Competence, CompetenceTranslation
from recruitment.models.user import ROLE_NAMES, Role

logger = logging.getLogger(__name__)


async def seed_roles(db: Database) -> None:
    """Insert the recruiter and applicant roles when they are missing."""
    async with db.transaction() as session:
        existing = set((await session.execute(select(Role.role_id))).scalars())
        for role_id, name in ROLE_NAMES.items():
            if role_id not in existing:
                session.add(Role(role_id=role_id, name=name))


async def seed_competences(db: Database, catalog: dict[int, tuple[str, dict[str, str]]]) -> int:
    """Insert catalog competences and their translations that are missing.

    ``catalog`` maps competence id to ``(canonical name, {locale: name})``.
    Returns the number of competences added.
    """
    added = 0
    async with db.transaction() as session:
        existing = set((await session.execute(select(Competence.competence_id))).scalars())
        for competence_id, (name, translations) in catalog.items():
            if competence_id in existing:
                continue
            session.add(Competence(competence_id=competence_id, name=name))
            for locale, translated in translations.items():
                session.add(CompetenceTranslation(competence_id=competence_id, locale=locale, name=translated))
            added += 1
    logger.info("Seeded %d of %d catalog competences", added, len(catalog))
    return added


def _error_response(exc: PortalError) -> JSONResponse:
    return JSONResponse(
        {"error": exc.message, "kind": exc.kind, "translationKey": exc.translation_key},
        status_code=exc.status_code,
    )


def create_app(database: Database | None = None) -> FastAPI:
    settings = get_settings()
    db = database or Database.from_settings(settings)

    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application startup and shutdown."""
        logger.info("Starting %s...", settings.app_name)
        if settings.create_schema:
            await db.create_all()
            await seed_roles(db)
            logger.info("Database tables verified")
        yield
        logger.info("Shutting down...")
        await db.dispose()

    app = FastAPI(
        title=settings.app_name,
        description="Recruitment portal: applicant profiles, applications and recruiter review",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.db = db

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[origin.strip() for origin in settings.cors_origins.split(",") if origin.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(PortalError)
    async def portal_error_handler(request: Request, exc: PortalError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return _error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return _error_response(InvalidFormDataError())

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception("Unexpected error during %s %s", request.method, request.url.path)
        return JSONResponse(
            {"error": "An unknown error occurred.", "translationKey": "unknownError"},
            status_code=500,
        )

    app.include_router(api_v1_router)

    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "app": settings.app_name}

    @app.get("/health/detailed")
    async def detailed_health_check():
        try:
            async with db.session() as session:
                await session.execute(text("SELECT 1"))
            database = {"ok": True}
        except Exception as e:
            database = {"ok": False, "message": str(e)}
        return {
            "status": "healthy" if database["ok"] else "degraded",
            "checks": {"database": database},
        }

    return app
