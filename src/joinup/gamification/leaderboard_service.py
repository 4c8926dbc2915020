"""Points leaderboard with optional department and year filters."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from joinup.config import get_settings
from joinup.db.models import User, UserGamification


async def get_leaderboard(
    db: AsyncSession,
    limit: int | None = None,
    department: str | None = None,
    year: int | None = None,
) -> list[dict]:
    """Users ranked by points (ties broken by user id). Ranks are 1-based."""
    settings = get_settings()
    if limit is None:
        limit = settings.leaderboard_default_limit
    limit = max(1, min(limit, settings.leaderboard_max_limit))

    query = select(UserGamification, User).join(User, UserGamification.user_id == User.id)
    if department:
        query = query.where(User.department == department)
    if year is not None:
        query = query.where(User.year == year)

    result = await db.execute(
        query.order_by(UserGamification.points.desc(), UserGamification.user_id).limit(limit)
    )

    return [
        {
            "rank": i + 1,
            "user_id": row.User.id,
            "user_name": row.User.name,
            "department": row.User.department,
            "year": row.User.year,
            "points": row.UserGamification.points,
            "level": row.UserGamification.level,
            "total_participations": row.UserGamification.total_participations,
            "total_wins": row.UserGamification.total_wins,
            "daily_streak": row.UserGamification.daily_streak,
        }
        for i, row in enumerate(result)
    ]
