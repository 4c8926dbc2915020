"""Badge evaluation with at-most-once awarding and notification."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from joinup.db.models import Registration, UserBadge
from joinup.gamification.badge_catalog import BADGE_DEFINITIONS, BadgeDefinition, BadgeStats
from joinup.gamification.errors import EvaluationFailure
from joinup.gamification.events import BadgeEarnedEvent, EventBuffer
from joinup.gamification.xp_service import get_gamification
from joinup.notifications.service import create_notification

logger = logging.getLogger(__name__)


async def get_user_badges(db: AsyncSession, user_id: str) -> list[UserBadge]:
    """Held badges in the order they were earned."""
    result = await db.execute(
        select(UserBadge).where(UserBadge.user_id == user_id).order_by(UserBadge.id)
    )
    return list(result.scalars().all())


async def load_badge_stats(db: AsyncSession, user_id: str, total_wins: int) -> BadgeStats:
    """Count approved registrations and approved team registrations."""
    result = await db.execute(
        select(Registration.team_members).where(
            Registration.user_id == user_id,
            Registration.status == "approved",
        )
    )
    rows = result.scalars().all()
    return BadgeStats(
        total_participations=len(rows),
        team_participations=sum(1 for members in rows if members),
        total_wins=total_wins,
    )


def check_criteria(badge: BadgeDefinition, stats: BadgeStats) -> bool:
    """Run one badge predicate. Raises EvaluationFailure if the predicate raises."""
    if badge.predicate is None:
        return False
    try:
        return bool(badge.predicate(stats))
    except Exception as exc:
        raise EvaluationFailure(badge.id, exc) from exc


def qualifying_badges(held: set[str], stats: BadgeStats) -> list[BadgeDefinition]:
    """Catalog badges not yet held whose criteria are met, in catalog order.

    A failing criteria check is logged and treated as not met.
    """
    earned: list[BadgeDefinition] = []
    for badge in BADGE_DEFINITIONS:
        if badge.id in held:
            continue
        try:
            if check_criteria(badge, stats):
                earned.append(badge)
        except EvaluationFailure:
            logger.exception("Skipping badge %s during evaluation", badge.id)
    return earned


async def evaluate_badges(
    db: AsyncSession,
    user_id: str,
    events: EventBuffer | None = None,
    now: datetime | None = None,
) -> list[str]:
    """Award every newly qualifying badge exactly once.

    Returns the ids awarded by this call (empty when nothing changed).
    Raises NotFoundError if the user has no gamification record.
    """
    if events is None:
        events = EventBuffer()
    if now is None:
        now = datetime.now(timezone.utc)

    gam = await get_gamification(db, user_id)
    held = {ub.badge_id for ub in await get_user_badges(db, user_id)}
    stats = await load_badge_stats(db, user_id, gam.total_wins)

    new_badges = qualifying_badges(held, stats)
    if not new_badges:
        return []

    for badge in new_badges:
        db.add(UserBadge(user_id=user_id, badge_id=badge.id, earned_at=now))
    gam.updated_at = now
    await db.flush()

    for badge in new_badges:
        await _emit_badge_earned(db, events, user_id, badge)

    awarded = [b.id for b in new_badges]
    logger.info("Awarded badges to %s: %s", user_id, awarded)
    return awarded


async def _emit_badge_earned(
    db: AsyncSession,
    events: EventBuffer,
    user_id: str,
    badge: BadgeDefinition,
) -> None:
    """Persist the badge notification and queue the broadcast."""
    notification = await create_notification(
        db,
        user_id,
        subtype="badge_earned",
        title=f"New Badge Earned: {badge.name}!",
        message=f"You've earned the {badge.name} badge: {badge.description}",
        action_url="/profile/achievements",
        metadata={"badge_id": badge.id, "rarity": badge.rarity},
    )
    events.notifications.append(notification)
    events.badges.append(BadgeEarnedEvent(
        user_id=user_id,
        badge_id=badge.id,
        badge_name=badge.name,
        rarity=badge.rarity,
        description=badge.description,
    ))
