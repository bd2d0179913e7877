"""Authentication dependencies for FastAPI routes."""

from fastapi import Depends, Request

from recruitment.config import get_settings
from recruitment.errors import ForbiddenError, InvalidSessionError
from recruitment.models.base import Database
from recruitment.models.user import ROLE_RECRUITER
from recruitment.schemas import UserData
from recruitment.services.activity_log import ClientInfo
from recruitment.services.session_service import resolve_session


def get_db(request: Request) -> Database:
    """The pooled Database handle created by the app factory."""
    return request.app.state.db


def get_session_token(request: Request) -> str | None:
    return request.cookies.get(get_settings().session_cookie_name)


def get_client_info(request: Request) -> ClientInfo:
    forwarded = request.headers.get("x-forwarded-for")
    ip = forwarded.split(",")[0].strip() if forwarded else (request.client.host if request.client else None)
    return ClientInfo(ip=ip, user_agent=request.headers.get("user-agent"))


async def get_current_user(
    token: str | None = Depends(get_session_token),
    db: Database = Depends(get_db),
) -> UserData | None:
    """Return the logged-in user or None."""
    try:
        return await resolve_session(db, token)
    except InvalidSessionError:
        return None


async def require_user(
    token: str | None = Depends(get_session_token),
    db: Database = Depends(get_db),
) -> UserData:
    """Return the logged-in user or raise InvalidSessionError (401)."""
    return await resolve_session(db, token)


async def require_recruiter(user: UserData = Depends(require_user)) -> UserData:
    """Return the logged-in recruiter or raise ForbiddenError (403)."""
    if user.role_id != ROLE_RECRUITER:
        raise ForbiddenError()
    return user
