"""Points ledger: point awards, history entries and level-up detection."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from joinup.db.models import PointsHistory, UserGamification
from joinup.gamification.errors import NotFoundError
from joinup.gamification.events import EventBuffer, LevelUpEvent
from joinup.gamification.level_thresholds import compute_level
from joinup.notifications.service import create_notification

logger = logging.getLogger(__name__)

# Points awarded for platform actions
POINTS: dict[str, int] = {
    "REGISTER_COMPETITION": 50,
    "COMPLETE_TEAM_REGISTRATION": 75,
    "SUBMIT_ON_TIME": 100,
    "SUBMIT_LATE": 50,
    "WINNER": 500,
    "RUNNER_UP": 350,
    "THIRD_PLACE": 250,
    "TOP_10": 150,
    "PARTICIPATION_COMPLETION": 100,
    "SPECIAL_RECOGNITION": 200,
    "FIRST_TIME_PARTICIPANT": 100,
    "TEAM_LEADER_ROLE": 50,
    "MENTOR_TEAM": 150,
    "DETAILED_DOCUMENTATION": 75,
    "PUBLIC_PRESENTATION": 100,
    "POSITIVE_FACULTY_FEEDBACK": 50,
    "DAILY_LOGIN": 10,
    "LOGIN_STREAK_7_DAYS": 50,
    "LOGIN_STREAK_30_DAYS": 200,
    "LOGIN_STREAK_100_DAYS": 500,
}


@dataclass
class AwardResult:
    user_id: str
    points: int
    previous_total: int
    new_total: int
    leveled_up: bool
    old_level: int
    new_level: int
    level_name: str
    badges_awarded: list[str] = field(default_factory=list)


async def get_gamification(
    db: AsyncSession,
    user_id: str,
    lock: bool = True,
) -> UserGamification:
    """Load a user's GameStats record, row-locked for the rest of the transaction.

    Raises NotFoundError if the user has no record.
    """
    query = select(UserGamification).where(UserGamification.user_id == user_id)
    if lock:
        query = query.with_for_update()
    result = await db.execute(query)
    gam = result.scalar_one_or_none()
    if gam is None:
        raise NotFoundError(user_id)
    return gam


async def create_gamification_profile(db: AsyncSession, user_id: str) -> UserGamification:
    """Create the zeroed GameStats record for a newly registered user.

    Returns the existing record unchanged if there already is one.
    """
    result = await db.execute(
        select(UserGamification).where(UserGamification.user_id == user_id)
    )
    gam = result.scalar_one_or_none()
    if gam is not None:
        return gam

    now = datetime.now(timezone.utc)
    base = compute_level(0)
    gam = UserGamification(
        user_id=user_id,
        points=0,
        level=base.level,
        level_name=base.name,
        daily_streak=0,
        weekly_streak=0,
        hackathon_streak=0,
        last_daily_login=None,
        streak_updated_at=now,
        total_participations=0,
        total_wins=0,
        updated_at=now,
    )
    db.add(gam)
    await db.flush()
    return gam


async def award_points(
    db: AsyncSession,
    user_id: str,
    delta: int,
    reason: str,
    events: EventBuffer | None = None,
    now: datetime | None = None,
) -> AwardResult:
    """Apply a point delta to a user's total.

    1. Lock and read user_gamification (NotFoundError before any write)
    2. new_total = max(0, current + delta)
    3. Recompute level, persist total and level
    4. Append a points_history entry with the before/after snapshot
    5. If the level went up, persist a notification and queue a level-up event
    6. Re-run badge evaluation; its failures never undo this award
    """
    if events is None:
        events = EventBuffer()
    if now is None:
        now = datetime.now(timezone.utc)

    gam = await get_gamification(db, user_id)

    previous_total = gam.points
    old_level = compute_level(previous_total)
    new_total = max(0, previous_total + delta)
    new_level = compute_level(new_total)
    leveled_up = new_level.level > old_level.level

    gam.points = new_total
    gam.level = new_level.level
    gam.level_name = new_level.name
    gam.updated_at = now

    db.add(PointsHistory(
        user_id=user_id,
        points=new_total - previous_total,
        requested_points=delta,
        reason=reason,
        previous_total=previous_total,
        new_total=new_total,
        leveled_up=leveled_up,
        old_level=old_level.level,
        new_level=new_level.level,
        created_at=now,
    ))
    await db.flush()

    logger.info(
        "Awarded %d points to %s (%s): %d -> %d",
        delta, user_id, reason, previous_total, new_total,
    )

    if leveled_up:
        await _emit_level_up(db, events, user_id, old_level.level, new_level.level, new_level.name, new_total)

    result = AwardResult(
        user_id=user_id,
        points=new_total - previous_total,
        previous_total=previous_total,
        new_total=new_total,
        leveled_up=leveled_up,
        old_level=old_level.level,
        new_level=new_level.level,
        level_name=new_level.name,
    )
    result.badges_awarded = await evaluate_badges_safely(db, events, user_id, now)
    return result


async def evaluate_badges_safely(
    db: AsyncSession,
    events: EventBuffer,
    user_id: str,
    now: datetime,
) -> list[str]:
    """Run badge evaluation inside a savepoint; log and drop any failure."""
    from joinup.gamification.badge_service import evaluate_badges

    marks = (len(events.notifications), len(events.badges))
    try:
        async with db.begin_nested():
            return await evaluate_badges(db, user_id, events=events, now=now)
    except Exception:
        del events.notifications[marks[0]:]
        del events.badges[marks[1]:]
        logger.exception("Badge evaluation failed for %s after point award", user_id)
        return []


async def _emit_level_up(
    db: AsyncSession,
    events: EventBuffer,
    user_id: str,
    old_level: int,
    new_level: int,
    level_name: str,
    total_points: int,
) -> None:
    """Persist the level-up notification and queue the broadcast and email."""
    notification = await create_notification(
        db,
        user_id,
        subtype="level_up",
        title=f"Level Up! You're now {level_name}!",
        message=(
            f"Congratulations! You've reached level {new_level} "
            f'and earned the title "{level_name}".'
        ),
        action_url="/profile",
        metadata={"old_level": old_level, "new_level": new_level, "total_points": total_points},
    )
    events.notifications.append(notification)
    events.level_ups.append(LevelUpEvent(
        user_id=user_id,
        old_level=old_level,
        new_level=new_level,
        level_name=level_name,
        total_points=total_points,
    ))
    logger.info("User %s leveled up: %d -> %d (%s)", user_id, old_level, new_level, level_name)


async def get_points_history(
    db: AsyncSession,
    user_id: str,
    limit: int = 20,
) -> list[PointsHistory]:
    """Most recent points_history entries, newest first."""
    result = await db.execute(
        select(PointsHistory)
        .where(PointsHistory.user_id == user_id)
        .order_by(PointsHistory.created_at.desc(), PointsHistory.id.desc())
        .limit(limit)
    )
    return list(result.scalars().all())
