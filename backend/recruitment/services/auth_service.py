"""Authentication service: password hashing with bcrypt, signup, login and profile updates."""

import asyncio
import secrets
from functools import lru_cache
from typing import Any

import bcrypt
from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError

from recruitment.config import get_settings
from recruitment.errors import ConflictingSignupDataError, InvalidCredentialsError, NotFoundError
from recruitment.models.base import Database
from recruitment.models.user import ROLE_APPLICANT, Person, Role
from recruitment.schemas import Credentials, NewUser, ProfileUpdate, SessionData, UserData, validate_form
from recruitment.services.activity_log import ClientInfo, LogLevel, log_activity
from recruitment.services.session_service import insert_session


def hash_password(password: str) -> str:
    """Hash a plaintext password using bcrypt."""
    rounds = get_settings().password_hash_rounds
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """Check a plaintext password against a bcrypt hash."""
    return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))


@lru_cache
def _dummy_password_hash() -> str:
    # Checked when the username is unknown so both failure paths cost one bcrypt round
    return hash_password(secrets.token_urlsafe(16))


async def build_person_assignments(username=None, email=None, pnr=None, password=None) -> dict[str, Any]:
    """Map the optional person fields that are present to column assignments.

    The password is re-hashed before it is stored.
    """
    assignments: dict[str, Any] = {}
    if username:
        assignments["username"] = username
    if email:
        assignments["email"] = email
    if pnr:
        assignments["pnr"] = pnr
    if password:
        assignments["password_hash"] = await asyncio.to_thread(hash_password, password)
    return assignments


async def register_user(
    db: Database, new_user: NewUser | dict, client: ClientInfo | None = None
) -> tuple[int, SessionData]:
    """Create an applicant account and log it in.

    Returns the new person id and the issued session.
    """
    new_user = validate_form(NewUser, new_user)
    password_hash = await asyncio.to_thread(hash_password, new_user.password)

    try:
        async with db.transaction() as session:
            result = await session.execute(
                insert(Person)
                .values(
                    name=new_user.name,
                    surname=new_user.surname,
                    pnr=new_user.pnr,
                    email=new_user.email,
                    username=new_user.username,
                    password_hash=password_hash,
                    role_id=ROLE_APPLICANT,
                )
                .returning(Person.person_id)
            )
            user_id = result.scalar_one()
            session_data = await insert_session(session, user_id)
    except IntegrityError:
        await log_activity(
            db, LogLevel.INFO, "USER_SIGNUP_CONFLICT",
            "Failed attempt to create user due to conflicting data.", client=client,
        )
        raise ConflictingSignupDataError() from None

    await log_activity(
        db, LogLevel.INFO, "USER_SIGNUP",
        f"New user ({new_user.username}) has been created.", actor_id=user_id, client=client,
    )
    return user_id, session_data


async def authenticate_user(
    db: Database, credentials: Credentials | dict, client: ClientInfo | None = None
) -> tuple[UserData, SessionData]:
    """Verify username and password and issue a new session.

    Unknown usernames and wrong passwords raise the same InvalidCredentialsError.
    """
    credentials = validate_form(Credentials, credentials)

    async with db.session() as session:
        result = await session.execute(
            select(Person.person_id, Person.username, Person.password_hash, Role.role_id, Role.name.label("role_name"))
            .join(Role, Role.role_id == Person.role_id)
            .where(Person.username == credentials.username)
        )
        user = result.one_or_none()

    # bcrypt runs with no pooled connection checked out
    if user is None:
        await asyncio.to_thread(verify_password, credentials.password, _dummy_password_hash())
        verified = False
    else:
        verified = await asyncio.to_thread(verify_password, credentials.password, user.password_hash)

    if not verified:
        await log_activity(
            db, LogLevel.INFO, "USER_LOGIN_FAILED",
            f"Client failed to authenticate with username ({credentials.username}).",
            actor_id=user.person_id if user else None, client=client,
        )
        raise InvalidCredentialsError()

    async with db.transaction() as session:
        session_data = await insert_session(session, user.person_id)

    await log_activity(
        db, LogLevel.INFO, "USER_LOGIN_SUCCESS",
        f"Client successfully authenticated with username ({credentials.username}).",
        actor_id=user.person_id, client=client,
    )
    user_data = UserData(
        id=user.person_id,
        username=user.username,
        role_id=int(user.role_id),
        role=user.role_name,
    )
    return user_data, session_data


async def update_user_profile(
    db: Database, user_id: int, profile: ProfileUpdate | dict, client: ClientInfo | None = None
) -> None:
    """Apply a partial update of username, email, personal number and password."""
    profile = validate_form(ProfileUpdate, profile)
    assignments = await build_person_assignments(
        username=profile.username,
        email=profile.email,
        pnr=profile.pnr,
        password=profile.password,
    )
    if not assignments:
        return

    try:
        async with db.transaction() as session:
            result = await session.execute(
                update(Person)
                .where(Person.person_id == user_id)
                .values(**assignments)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise NotFoundError()
    except IntegrityError:
        raise ConflictingSignupDataError() from None

    changed = ", ".join(sorted(assignments))
    await log_activity(
        db, LogLevel.INFO, "PROFILE_UPDATED",
        f"User ({user_id}) updated profile fields: {changed}.", actor_id=user_id, client=client,
    )
