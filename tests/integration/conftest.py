import os
import uuid
from collections.abc import Generator
from pathlib import Path
from typing import Any

import psycopg
import pytest

from studybot.config.settings import Settings
from studybot.context import UserContext
from studybot.database.connection import close_pool, get_connection, init_pool
from studybot.database.repositories.profiles_repository import ProfilesRepository

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "sql" / "schema.sql"


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "studybot_test")
    return Settings(ai_provider="example")


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
        with get_connection() as conn:
            conn.execute(SCHEMA_PATH.read_text(encoding="utf-8"))
            conn.commit()
    except Exception as e:
        close_pool()
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to run these tests")
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


def _seed_profile(email: str) -> Generator[UserContext, None, None]:
    user = UserContext(user_id=str(uuid.uuid4()), email=email)
    ProfilesRepository().create(user, {"email": email})
    try:
        yield user
    finally:
        # cascades to every artifact the user owns
        with get_connection(user) as conn:
            conn.execute("DELETE FROM profiles WHERE id = %s", (user.user_id,))
            conn.commit()


@pytest.fixture
def user(integration_pool: None) -> Generator[UserContext, None, None]:
    yield from _seed_profile("ada@example.com")


@pytest.fixture
def other_user(integration_pool: None) -> Generator[UserContext, None, None]:
    yield from _seed_profile("bob@example.com")


@pytest.fixture
def files_root(tmp_path: Path) -> Path:
    return tmp_path
