"""Shared FastAPI dependencies."""

from collections.abc import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from joinup.database import get_session as _get_session
from joinup.email.service import get_email_service
from joinup.gamification.engine import GamificationEngine
from joinup.redis_client import get_redis_or_none as _get_redis_or_none

get_db = _get_session


async def get_redis_dep() -> AsyncGenerator[object | None, None]:
    """Yield the Redis client, or None when it is not configured."""
    yield _get_redis_or_none()


async def get_gamification_engine(
    db: AsyncSession = Depends(get_db),  # noqa: B008
    redis: object | None = Depends(get_redis_dep),  # noqa: B008
) -> GamificationEngine:
    """Per-request unit of work bound to the request's session."""
    return GamificationEngine(db, redis=redis, email_service=get_email_service(redis))
