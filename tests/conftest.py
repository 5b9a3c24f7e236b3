"""Pytest configuration and fixtures for recims.

Every test gets its own SQLite file (aiosqlite), so bootstrap and API tests
never share state. Tokens are minted locally with the test SECRET_KEY, the
way the external auth service would.
"""

import os
from collections.abc import AsyncIterator
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-pytest-only-0123456789")
os.environ.setdefault("REDIS_ENABLED", "false")
os.environ.setdefault("TELEMETRY_ENABLED", "false")

import pytest
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.core.config import Settings, get_settings
from app.infrastructure.persistence.bootstrap import bootstrap_database
from app.infrastructure.persistence.database import get_engine
from app.infrastructure.persistence.models import User
from app.infrastructure.security.password import get_password_hash

SUPER_ADMIN_EMAIL = "admin@recims.com"
RESTRICTED_ADMIN_EMAIL = "admin@clnenv.com"
TENANT_ADMIN_EMAIL = "manager@clnenv.com"


def _sqlite_url(path: Path) -> str:
    return f"sqlite+aiosqlite:///{path}"


@pytest.fixture
def settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Settings pointing at a fresh SQLite file for this test."""
    monkeypatch.setenv("DATABASE_URL", _sqlite_url(tmp_path / "recims.db"))
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


@pytest.fixture
async def engine(settings: Settings) -> AsyncIterator[AsyncEngine]:
    """Standalone async engine on the test database (not the app's engine)."""
    eng = create_async_engine(settings.database_url)
    yield eng
    await eng.dispose()


@pytest.fixture
async def bootstrapped_engine(engine: AsyncEngine, settings: Settings) -> AsyncEngine:
    """Engine whose database has been bootstrapped once."""
    await bootstrap_database(engine, settings)
    return engine


@pytest.fixture
async def db_session(bootstrapped_engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    """Session on the bootstrapped database. Rolls back after the test."""
    session_factory = async_sessionmaker(bootstrapped_engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def client(settings: Settings) -> AsyncIterator[AsyncClient]:
    """Async HTTP client against a fresh app, with startup and shutdown run."""
    from app.main import create_app

    application = create_app()
    async with application.router.lifespan_context(application):
        transport = ASGITransport(app=application)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac


def make_token(subject: str | int, **claims: Any) -> str:
    """Sign a bearer token the way the auth service does (HS256, exp required)."""
    s = get_settings()
    payload = {
        "sub": str(subject),
        "exp": datetime.now(UTC) + timedelta(minutes=10),
        **claims,
    }
    return jwt.encode(payload, s.secret_key.get_secret_value(), algorithm=s.algorithm)


def auth_header(subject: str | int, **claims: Any) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(subject, **claims)}"}


@pytest.fixture
def super_admin_headers(settings: Settings) -> dict[str, str]:
    return auth_header(SUPER_ADMIN_EMAIL)


@pytest.fixture
def restricted_admin_headers(settings: Settings) -> dict[str, str]:
    return auth_header(RESTRICTED_ADMIN_EMAIL)


@pytest.fixture
async def tenant_admin_headers(client: AsyncClient) -> dict[str, str]:
    """Bearer header for a TNT-002 user with detailed_role admin, added after startup."""
    session_factory = async_sessionmaker(get_engine(), expire_on_commit=False)
    async with session_factory() as session:
        session.add(
            User(
                email=TENANT_ADMIN_EMAIL,
                password=get_password_hash("manager-pass"),
                full_name="CT Metals Admin",
                tenant_id="TNT-002",
                role="admin",
                detailed_role="admin",
            )
        )
        await session.commit()
    return auth_header(TENANT_ADMIN_EMAIL)
