"""Daily login streak tracking.

Calendar days are UTC days. Timestamps without tzinfo (SQLite hands them
back naive) are read as UTC. A stored login later than the current time
(clock skew between writers) is treated like a same-day login.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from joinup.gamification.events import EventBuffer
from joinup.gamification.xp_service import POINTS, AwardResult, award_points, get_gamification

logger = logging.getLogger(__name__)

ACTIVITY_TYPES = ("login", "weekly", "hackathon")

# Streak length -> (bonus points, reason)
STREAK_MILESTONES: dict[int, tuple[int, str]] = {
    7: (POINTS["LOGIN_STREAK_7_DAYS"], "7-day login streak bonus"),
    30: (POINTS["LOGIN_STREAK_30_DAYS"], "30-day login streak bonus"),
    100: (POINTS["LOGIN_STREAK_100_DAYS"], "100-day login streak bonus"),
}


@dataclass
class StreakResult:
    user_id: str
    activity_type: str
    daily_streak: int
    changed: bool
    bonus: AwardResult | None = None


def utc_day(dt: datetime) -> date:
    """Calendar day of a timestamp in UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).date()


def next_daily_streak(current: int, last_login: datetime | None, now: datetime) -> int | None:
    """Streak value after a login at ``now``.

    - Same UTC day as the last counted login, or a last login dated after
      ``now`` -> None (nothing to record)
    - Last counted login yesterday -> current + 1
    - Gap of two or more days, or first login ever -> 1
    """
    today = utc_day(now)
    if last_login is None:
        return 1

    last_day = utc_day(last_login)
    if last_day >= today:
        return None
    if last_day == today - timedelta(days=1):
        return current + 1
    return 1


async def record_activity(
    db: AsyncSession,
    user_id: str,
    activity_type: str = "login",
    events: EventBuffer | None = None,
    now: datetime | None = None,
) -> StreakResult:
    """Update the user's streak for an observed activity.

    Only ``login`` is tracked. ``weekly`` and ``hackathon`` are reserved names
    with no update rule yet.
    """
    if activity_type not in ACTIVITY_TYPES:
        msg = f"Unknown activity type: {activity_type}"
        raise ValueError(msg)
    if activity_type != "login":
        msg = f"Streak type {activity_type!r} is reserved and not tracked"
        raise ValueError(msg)

    if events is None:
        events = EventBuffer()
    if now is None:
        now = datetime.now(timezone.utc)

    gam = await get_gamification(db, user_id)
    new_streak = next_daily_streak(gam.daily_streak, gam.last_daily_login, now)
    if new_streak is None:
        return StreakResult(user_id, activity_type, gam.daily_streak, changed=False)

    gam.daily_streak = new_streak
    gam.last_daily_login = now
    gam.streak_updated_at = now
    gam.updated_at = now
    await db.flush()

    result = StreakResult(user_id, activity_type, new_streak, changed=True)

    milestone = STREAK_MILESTONES.get(new_streak)
    if milestone is not None:
        bonus, reason = milestone
        logger.info("User %s reached a %d-day login streak", user_id, new_streak)
        result.bonus = await award_points(db, user_id, bonus, reason, events=events, now=now)

    return result
