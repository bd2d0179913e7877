"""API v1 router aggregation."""

from fastapi import APIRouter

from recruitment.api.v1.auth import router as auth_router
from recruitment.api.v1.application import router as application_router
from recruitment.api.v1.admin import router as admin_router
from recruitment.api.v1.reset_credentials import router as reset_credentials_router

router = APIRouter(prefix="/api/v1")

router.include_router(auth_router)
router.include_router(application_router)
router.include_router(admin_router)
router.include_router(reset_credentials_router)
