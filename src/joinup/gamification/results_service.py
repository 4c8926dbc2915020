"""Competition result processing. Sole writer of the participation and win counters."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from joinup.gamification.badge_service import evaluate_badges
from joinup.gamification.events import EventBuffer
from joinup.gamification.xp_service import POINTS, AwardResult, award_points, get_gamification

logger = logging.getLogger(__name__)

ACHIEVEMENT_POINTS: dict[str, int] = {
    "winner": POINTS["WINNER"],
    "runner_up": POINTS["RUNNER_UP"],
    "third_place": POINTS["THIRD_PLACE"],
    "top_10": POINTS["TOP_10"],
    "participation": POINTS["PARTICIPATION_COMPLETION"],
    "special_recognition": POINTS["SPECIAL_RECOGNITION"],
}


@dataclass
class CompetitionAchievement:
    type: str
    title: str


@dataclass
class ResultOutcome:
    user_id: str
    hackathon_id: str
    total_points: int
    awards: list[AwardResult] = field(default_factory=list)
    badges_awarded: list[str] = field(default_factory=list)


async def process_competition_result(
    db: AsyncSession,
    user_id: str,
    hackathon_id: str,
    achievements: list[CompetitionAchievement],
    events: EventBuffer | None = None,
    now: datetime | None = None,
) -> ResultOutcome:
    """Record a user's result in one competition.

    Counters are bumped before the point awards so the badge checks that
    follow each award already see the new win.
    """
    if events is None:
        events = EventBuffer()
    if now is None:
        now = datetime.now(timezone.utc)

    unknown = [a.type for a in achievements if a.type not in ACHIEVEMENT_POINTS]
    if unknown:
        msg = f"Unknown achievement type(s): {', '.join(unknown)}"
        raise ValueError(msg)

    gam = await get_gamification(db, user_id)
    gam.total_participations += 1
    if any(a.type == "winner" for a in achievements):
        gam.total_wins += 1
    gam.updated_at = now
    await db.flush()

    outcome = ResultOutcome(user_id=user_id, hackathon_id=hackathon_id, total_points=0)
    for achievement in achievements:
        points = ACHIEVEMENT_POINTS[achievement.type]
        award = await award_points(
            db, user_id, points, f"{achievement.title} - {achievement.type}", events=events, now=now,
        )
        outcome.awards.append(award)
        outcome.badges_awarded.extend(award.badges_awarded)
        outcome.total_points += award.points

    if not outcome.awards:
        outcome.badges_awarded = await evaluate_badges(db, user_id, events=events, now=now)

    logger.info(
        "Awarded %d points to user %s for competition %s",
        outcome.total_points, user_id, hackathon_id,
    )
    return outcome
