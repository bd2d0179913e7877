"""Session tokens: generation, HMAC hashing, lookup and deletion.

Raw tokens only ever live in the client's cookie. The datastore holds the
HMAC-SHA256 of the token keyed with ``SESSION_SECRET``; lookups hash the
presented token and match on the hash. Expired rows are filtered out at
query time.
"""

import hashlib
import hmac
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from recruitment.config import get_settings
from recruitment.errors import InvalidSessionError, SessionConfigurationError
from recruitment.models.base import Database
from recruitment.models.session import UserSession
from recruitment.models.user import Person, Role
from recruitment.schemas.user import SessionData, UserData


@dataclass(frozen=True)
class GeneratedSession:
    token: str
    token_hash: str
    expires_at: datetime


def hash_token(token: str) -> str:
    secret = get_settings().session_secret
    if not secret:
        raise SessionConfigurationError()
    return hmac.new(secret.encode("utf-8"), token.encode("utf-8"), hashlib.sha256).hexdigest()


def generate_session() -> GeneratedSession:
    """Create a random URL-safe token, its hash and its expiry."""
    settings = get_settings()
    token = secrets.token_urlsafe(32)
    expires_at = datetime.now(timezone.utc) + timedelta(days=settings.session_duration_days)
    return GeneratedSession(token=token, token_hash=hash_token(token), expires_at=expires_at)


async def insert_session(session: AsyncSession, person_id: int) -> SessionData:
    """Issue a new session for ``person_id`` inside the caller's transaction."""
    generated = generate_session()
    result = await session.execute(
        insert(UserSession)
        .values(
            person_id=person_id,
            token_hash=generated.token_hash,
            expires_at=generated.expires_at,
        )
        .returning(UserSession.session_id)
    )
    return SessionData(
        id=result.scalar_one(),
        person_id=person_id,
        token=generated.token,
        expires_at=generated.expires_at,
    )


async def resolve_session(db: Database, token: str | None) -> UserData:
    """Map a raw session token to the identity of its owner."""
    if not token:
        raise InvalidSessionError()

    token_hash = hash_token(token)
    async with db.session() as session:
        result = await session.execute(
            select(Person.person_id, Person.username, Role.role_id, Role.name.label("role_name"))
            .join(UserSession, UserSession.person_id == Person.person_id)
            .join(Role, Role.role_id == Person.role_id)
            .where(
                UserSession.token_hash == token_hash,
                UserSession.expires_at > datetime.now(timezone.utc),
            )
        )
        row = result.one_or_none()

    if row is None:
        raise InvalidSessionError()

    return UserData(
        id=row.person_id,
        username=row.username,
        role_id=int(row.role_id),
        role=row.role_name,
    )


async def delete_session(db: Database, token: str | None) -> None:
    """Delete the session tied to ``token``. Missing or unknown tokens are a no-op."""
    if not token:
        return
    token_hash = hash_token(token)
    async with db.transaction() as session:
        await session.execute(delete(UserSession).where(UserSession.token_hash == token_hash))
