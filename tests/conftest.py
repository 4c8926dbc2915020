"""Shared test fixtures."""

from __future__ import annotations

import os

# Must be set before joinup.main builds the app at import time
os.environ["JOINUP_DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JOINUP_REDIS_URL"] = ""
os.environ["JOINUP_LEVEL_UP_EMAILS_ENABLED"] = "false"
os.environ["JOINUP_LOG_FORMAT"] = "console"

from collections.abc import AsyncGenerator
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from joinup.config import get_settings
from joinup.database import close_db, create_schema, get_engine, get_session, init_db
from joinup.db.models import Registration, User
from joinup.email.service import reset_email_service
from joinup.gamification.level_thresholds import compute_level
from joinup.gamification.xp_service import create_gamification_profile

get_settings.cache_clear()


@pytest_asyncio.fixture
async def db_engine() -> AsyncGenerator[None, None]:
    """Fresh in-memory database with the ORM schema, one per test."""
    settings = get_settings()
    await init_db(settings.database_url)
    await create_schema()
    yield
    reset_email_service()
    await close_db()


@pytest_asyncio.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Get a direct database session for setup and assertions."""
    async for session in get_session():
        yield session
        break


@pytest.fixture
def session_factory(db_engine) -> async_sessionmaker[AsyncSession]:
    """Independent sessions, for simulating concurrent requests."""
    return async_sessionmaker(get_engine(), class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def client(db_engine) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client against the app, sharing the test database."""
    from joinup.main import create_app

    app = create_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def user_factory(db_session: AsyncSession):
    """Create a user (and by default their stats record), committed."""

    async def _create(
        user_id: str = "student-1",
        *,
        name: str = "Ada Lovelace",
        email: str | None = None,
        department: str | None = "Computer Science",
        year: int | None = 3,
        points: int = 0,
        profile: bool = True,
        **stats: object,
    ) -> str:
        db_session.add(User(
            id=user_id,
            email=email or f"{user_id}@joinup.test",
            name=name,
            department=department,
            year=year,
        ))
        await db_session.flush()
        if profile:
            gam = await create_gamification_profile(db_session, user_id)
            info = compute_level(points)
            gam.points = points
            gam.level = info.level
            gam.level_name = info.name
            for field, value in stats.items():
                setattr(gam, field, value)
        await db_session.commit()
        return user_id

    return _create


@pytest.fixture
def registration_factory(db_session: AsyncSession):
    """Insert a registration row directly, committed."""

    async def _create(
        user_id: str,
        hackathon_id: str,
        *,
        status: str = "approved",
        team_members: list[dict] | None = None,
    ) -> Registration:
        registration = Registration(
            hackathon_id=hackathon_id,
            user_id=user_id,
            team_name="Team " + hackathon_id if team_members else None,
            team_members=team_members or [],
            status=status,
            submitted_at=datetime.now(timezone.utc),
        )
        db_session.add(registration)
        await db_session.commit()
        return registration

    return _create


@pytest.fixture
def fake_redis() -> MagicMock:
    """Redis stand-in recording publish calls."""
    redis = MagicMock()
    redis.publish = AsyncMock(return_value=1)
    return redis


@pytest.fixture
def mock_email_service() -> MagicMock:
    """Email service stand-in that never sends."""
    service = MagicMock()
    service.send_level_up = AsyncMock(return_value=True)
    service.send_email = AsyncMock(return_value=True)
    return service
