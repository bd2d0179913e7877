"""Credential reset: single-use tokens that allow changing username and password.

Email delivery is mocked: the raw token is returned to the caller, and only
its SHA-256 hash is stored.
"""

import hashlib
import secrets
from datetime import datetime, timedelta, timezone

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import IntegrityError

from recruitment.config import get_settings
from recruitment.errors import ConflictingSignupDataError, InvalidFormDataError, InvalidResetTokenError
from recruitment.models.base import Database
from recruitment.models.password_reset_token import PasswordResetToken
from recruitment.models.user import Person
from recruitment.schemas import ResetCredentialsUpdate, ResetRequest, ResetTokenRequest, validate_form
from recruitment.services.activity_log import ClientInfo, LogLevel, log_activity
from recruitment.services.auth_service import build_person_assignments


def hash_reset_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


async def request_credential_reset(db: Database, email: str, client: ClientInfo | None = None) -> str:
    """Issue a reset token for the account registered with ``email``."""
    form = validate_form(ResetRequest, {"email": email})
    token = secrets.token_hex(14)
    expires_at = datetime.now(timezone.utc) + timedelta(minutes=get_settings().reset_token_ttl_minutes)

    async with db.transaction() as session:
        result = await session.execute(select(Person.person_id).where(Person.email == form.email))
        person_id = result.scalar_one_or_none()
        if person_id is None:
            raise InvalidResetTokenError("Email is not registered.")
        await session.execute(
            insert(PasswordResetToken).values(
                person_id=person_id,
                token_hash=hash_reset_token(token),
                expires_at=expires_at,
            )
        )

    await log_activity(
        db, LogLevel.INFO, "CREDENTIALS_RESET_REQUESTED",
        f"Credential reset requested for user ({person_id}).", actor_id=person_id, client=client,
    )
    return token


async def validate_reset_token(db: Database, token: str) -> int:
    """Return the person id the unexpired ``token`` was issued to."""
    form = validate_form(ResetTokenRequest, {"token": token})
    async with db.session() as session:
        result = await session.execute(
            select(PasswordResetToken.person_id).where(
                PasswordResetToken.token_hash == hash_reset_token(form.token),
                PasswordResetToken.expires_at >= datetime.now(timezone.utc),
            )
        )
        person_id = result.scalar_one_or_none()

    if person_id is None:
        raise InvalidResetTokenError()
    return person_id


async def reset_credentials(
    db: Database, update_form: ResetCredentialsUpdate | dict, client: ClientInfo | None = None
) -> int:
    """Apply a new username and/or password and consume the person's reset tokens.

    The token is deleted with ``DELETE ... RETURNING`` in the same transaction
    as the update, so concurrent requests with one token apply at most once.
    """
    form = validate_form(ResetCredentialsUpdate, update_form)
    if not (form.username or form.password):
        raise InvalidFormDataError()

    # Unknown or expired tokens fail here, before paying for a bcrypt hash
    await validate_reset_token(db, form.token)
    assignments = await build_person_assignments(username=form.username, password=form.password)

    try:
        async with db.transaction() as session:
            result = await session.execute(
                delete(PasswordResetToken)
                .where(
                    PasswordResetToken.token_hash == hash_reset_token(form.token),
                    PasswordResetToken.expires_at >= datetime.now(timezone.utc),
                )
                .returning(PasswordResetToken.person_id)
                .execution_options(synchronize_session=False)
            )
            person_id = result.scalar_one_or_none()
            if person_id is None:
                raise InvalidResetTokenError()

            await session.execute(
                update(Person)
                .where(Person.person_id == person_id)
                .values(**assignments)
                .execution_options(synchronize_session=False)
            )
            await session.execute(
                delete(PasswordResetToken)
                .where(PasswordResetToken.person_id == person_id)
                .execution_options(synchronize_session=False)
            )
    except IntegrityError:
        raise ConflictingSignupDataError() from None

    await log_activity(
        db, LogLevel.INFO, "CREDENTIALS_RESET",
        f"User ({person_id}) reset credentials: {', '.join(sorted(assignments))}.",
        actor_id=person_id, client=client,
    )
    return person_id
