from __future__ import annotations

from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy import update

from recruitment.config import get_settings
from recruitment.main import seed_competences, seed_roles
from recruitment.models import (
    ROLE_RECRUITER,
    Database,
    Person,
)
from recruitment.services.auth_service import register_user

PASSWORD = "Secret123"

CATALOG = {
    1: ("ticket sales", {"sv": "biljettförsäljning"}),
    2: ("lotteries", {}),
    3: ("roller coaster operation", {}),
}


@pytest.fixture(autouse=True)
def settings_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    monkeypatch.setenv("SESSION_SECRET", "test-session-secret")
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'portal.sqlite3'}")
    monkeypatch.setenv("PASSWORD_HASH_ROUNDS", "4")
    monkeypatch.setenv("CREATE_SCHEMA", "true")
    monkeypatch.delenv("STATUS_TRANSITION_POLICY", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


async def seed_catalog(db: Database) -> None:
    await seed_competences(db, CATALOG)


@pytest_asyncio.fixture
async def db():
    database = Database.from_settings(get_settings())
    await database.create_all()
    await seed_roles(database)
    await seed_catalog(database)
    yield database
    await database.dispose()


def new_user_payload(username: str, number: int = 1, password: str = PASSWORD) -> dict:
    return {
        "name": "Ada",
        "surname": "Lovelace",
        "pnr": f"19900101-{number:04d}",
        "email": f"{username}@recruit.se",
        "password": password,
        "username": username,
    }


async def create_applicant(db: Database, username: str, number: int = 1) -> tuple[int, str]:
    """Register an applicant and return its id and raw session token."""
    user_id, session_data = await register_user(db, new_user_payload(username, number))
    return user_id, session_data.token


async def promote_to_recruiter(db: Database, user_id: int) -> None:
    async with db.transaction() as session:
        await session.execute(update(Person).where(Person.person_id == user_id).values(role_id=ROLE_RECRUITER))
