import asyncio
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import update

from recruitment.errors import (
    ConflictingSignupDataError,
    InvalidCredentialsError,
    InvalidFormDataError,
    InvalidResetTokenError,
)
from recruitment.models import PasswordResetToken
from recruitment.services import auth_service
from recruitment.services.auth_service import authenticate_user
from recruitment.services.reset_credentials_service import (
    request_credential_reset,
    reset_credentials,
    validate_reset_token,
)

from conftest import PASSWORD, create_applicant


@pytest.mark.asyncio
async def test_reset_flow_changes_password_and_consumes_token(db):
    user_id, _ = await create_applicant(db, "alice")

    token = await request_credential_reset(db, "alice@recruit.se")
    assert await validate_reset_token(db, token) == user_id

    assert await reset_credentials(db, {"token": token, "password": "Brandnew99"}) == user_id

    with pytest.raises(InvalidCredentialsError):
        await authenticate_user(db, {"username": "alice", "password": PASSWORD})
    user, _ = await authenticate_user(db, {"username": "alice", "password": "Brandnew99"})
    assert user.id == user_id
    with pytest.raises(InvalidResetTokenError):
        await validate_reset_token(db, token)


@pytest.mark.asyncio
async def test_reset_can_change_username(db):
    await create_applicant(db, "alice")
    token = await request_credential_reset(db, "alice@recruit.se")

    await reset_credentials(db, {"token": token, "username": "alice2"})

    user, _ = await authenticate_user(db, {"username": "alice2", "password": PASSWORD})
    assert user.username == "alice2"


@pytest.mark.asyncio
async def test_reset_request_for_unknown_email(db):
    with pytest.raises(InvalidResetTokenError):
        await request_credential_reset(db, "nobody@recruit.se")


@pytest.mark.asyncio
async def test_expired_reset_token_is_rejected(db):
    await create_applicant(db, "alice")
    token = await request_credential_reset(db, "alice@recruit.se")
    async with db.transaction() as session:
        await session.execute(
            update(PasswordResetToken).values(expires_at=datetime.now(timezone.utc) - timedelta(minutes=1))
        )

    with pytest.raises(InvalidResetTokenError):
        await reset_credentials(db, {"token": token, "password": "Brandnew99"})


@pytest.mark.asyncio
async def test_reset_without_changes_is_invalid(db):
    await create_applicant(db, "alice")
    token = await request_credential_reset(db, "alice@recruit.se")

    with pytest.raises(InvalidFormDataError):
        await reset_credentials(db, {"token": token, "username": "", "password": ""})
    assert await validate_reset_token(db, token)


@pytest.mark.asyncio
async def test_reset_to_taken_username_conflicts(db):
    await create_applicant(db, "alice", 1)
    await create_applicant(db, "bob", 2)
    token = await request_credential_reset(db, "bob@recruit.se")

    with pytest.raises(ConflictingSignupDataError):
        await reset_credentials(db, {"token": token, "username": "alice"})


@pytest.mark.asyncio
async def test_concurrent_resets_with_one_token_apply_once(db):
    user_id, _ = await create_applicant(db, "alice")
    token = await request_credential_reset(db, "alice@recruit.se")

    results = await asyncio.gather(
        reset_credentials(db, {"token": token, "password": "Brandnew99"}),
        reset_credentials(db, {"token": token, "password": "Another99"}),
        return_exceptions=True,
    )

    assert results.count(user_id) == 1
    assert sum(isinstance(r, InvalidResetTokenError) for r in results) == 1
    winner = "Brandnew99" if results[0] == user_id else "Another99"
    user, _ = await authenticate_user(db, {"username": "alice", "password": winner})
    assert user.id == user_id


@pytest.mark.asyncio
async def test_unknown_reset_token_skips_password_hashing(db, monkeypatch):
    def fail_hash(password):
        raise AssertionError("password hashed for an invalid token")

    monkeypatch.setattr(auth_service, "hash_password", fail_hash)

    with pytest.raises(InvalidResetTokenError):
        await reset_credentials(db, {"token": "not-a-real-token", "password": "Brandnew99"})
