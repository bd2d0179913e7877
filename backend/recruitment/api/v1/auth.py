"""Account endpoints: signup, login, logout, whoami and profile updates."""

from fastapi import APIRouter, Depends, Response, status

from recruitment.config import get_settings
from recruitment.dependencies.auth import (
    get_client_info,
    get_current_user,
    get_db,
    get_session_token,
    require_user,
)
from recruitment.models.base import Database
from recruitment.schemas import Credentials, NewUser, ProfileUpdate, SessionData, UserData
from recruitment.services import auth_service, session_service
from recruitment.services.activity_log import ClientInfo, LogLevel, log_activity

router = APIRouter(prefix="/auth", tags=["auth"])


def _set_session_cookie(response: Response, session_data: SessionData) -> None:
    settings = get_settings()
    response.set_cookie(
        settings.session_cookie_name,
        session_data.token,
        httponly=True,
        secure=settings.secure_cookies,
        samesite="lax",
        path="/",
        expires=session_data.expires_at,
    )


@router.post("/signup", status_code=status.HTTP_201_CREATED)
async def signup(
    new_user: NewUser,
    response: Response,
    db: Database = Depends(get_db),
    client: ClientInfo = Depends(get_client_info),
):
    """Register an applicant and start a session."""
    user_id, session_data = await auth_service.register_user(db, new_user, client=client)
    _set_session_cookie(response, session_data)
    return {"userID": user_id}


@router.post("/login", response_model=UserData)
async def login(
    credentials: Credentials,
    response: Response,
    db: Database = Depends(get_db),
    client: ClientInfo = Depends(get_client_info),
):
    user_data, session_data = await auth_service.authenticate_user(db, credentials, client=client)
    _set_session_cookie(response, session_data)
    return user_data


@router.get("/logout")
async def logout(
    response: Response,
    token: str | None = Depends(get_session_token),
    user: UserData | None = Depends(get_current_user),
    db: Database = Depends(get_db),
    client: ClientInfo = Depends(get_client_info),
):
    """Delete the presented session and clear the cookie."""
    await session_service.delete_session(db, token)
    response.delete_cookie(get_settings().session_cookie_name, path="/")
    user_id = user.id if user else None
    await log_activity(
        db, LogLevel.INFO, "SESSION_LOGOUT",
        f"User ({user_id or 'Unknown'}) logged out.", actor_id=user_id, client=client,
    )
    return {"loggedOut": True}


@router.post("/whoami", response_model=UserData)
async def whoami(user: UserData | None = Depends(get_current_user)):
    """Identity of the session owner, or 204 when there is no valid session."""
    if user is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return user


@router.put("/profile", status_code=status.HTTP_201_CREATED)
async def update_profile(
    profile: ProfileUpdate,
    user: UserData = Depends(require_user),
    db: Database = Depends(get_db),
    client: ClientInfo = Depends(get_client_info),
):
    await auth_service.update_user_profile(db, user.id, profile, client=client)
    return {"message": "Profile updated successfully"}
