"""Unit of work around the gamification services.

Each public method runs one service call in the request's session, commits,
and only then delivers the side-effects the call queued: Redis broadcasts,
per-user notification pushes and the level-up email. A rolled-back call
delivers nothing.
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from joinup.config import get_settings
from joinup.db.models import User, UserGamification
from joinup.gamification import badge_service, results_service, streak_service, xp_service
from joinup.gamification.errors import NotFoundError, PersistenceFailure
from joinup.gamification.events import EventBuffer, LevelUpEvent
from joinup.notifications.push import publish_event, push_notification_to_user

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from joinup.email.service import EmailService
    from joinup.gamification.results_service import CompetitionAchievement, ResultOutcome
    from joinup.gamification.streak_service import StreakResult
    from joinup.gamification.xp_service import AwardResult

logger = logging.getLogger(__name__)

LEVEL_UP_CHANNEL = "pubsub:level_up"
BADGE_EARNED_CHANNEL = "pubsub:badge_earned"


class GamificationEngine:
    """Per-request unit of work over the gamification services."""

    def __init__(
        self,
        db: AsyncSession,
        redis: object | None = None,
        email_service: EmailService | None = None,
    ) -> None:
        self.db = db
        self.redis = redis
        self.email_service = email_service

    async def award_points(
        self, user_id: str, delta: int, reason: str, now: datetime | None = None,
    ) -> AwardResult:
        return await self.run(
            lambda events: xp_service.award_points(self.db, user_id, delta, reason, events=events, now=now)
        )

    async def record_activity(
        self, user_id: str, activity_type: str = "login", now: datetime | None = None,
    ) -> StreakResult:
        return await self.run(
            lambda events: streak_service.record_activity(
                self.db, user_id, activity_type, events=events, now=now,
            )
        )

    async def evaluate_badges(self, user_id: str, now: datetime | None = None) -> list[str]:
        return await self.run(
            lambda events: badge_service.evaluate_badges(self.db, user_id, events=events, now=now)
        )

    async def process_competition_result(
        self,
        user_id: str,
        hackathon_id: str,
        achievements: list[CompetitionAchievement],
        now: datetime | None = None,
    ) -> ResultOutcome:
        return await self.run(
            lambda events: results_service.process_competition_result(
                self.db, user_id, hackathon_id, achievements, events=events, now=now,
            )
        )

    async def create_profile(self, user_id: str) -> UserGamification:
        """Create the zeroed stats record for an existing user."""

        async def _create(_events: EventBuffer) -> UserGamification:
            if await self.db.get(User, user_id) is None:
                raise NotFoundError(user_id)
            return await xp_service.create_gamification_profile(self.db, user_id)

        return await self.run(_create)

    async def run(self, call: Callable[[EventBuffer], Awaitable[Any]]) -> Any:
        """Run ``call`` as one transaction, then dispatch what it queued."""
        events = EventBuffer()
        try:
            result = await call(events)
            await self.db.commit()
        except (SQLAlchemyError, OverflowError) as exc:
            await self.db.rollback()
            logger.exception("Gamification write rolled back")
            raise PersistenceFailure(str(exc)) from exc
        except Exception:
            await self.db.rollback()
            raise

        await self.dispatch(events)
        return result

    async def dispatch(self, events: EventBuffer) -> None:
        """Deliver committed side-effects. Failures are logged, never raised."""
        for notification in events.notifications:
            await push_notification_to_user(self.redis, notification)

        for level_up in events.level_ups:
            await publish_event(self.redis, LEVEL_UP_CHANNEL, asdict(level_up))
            await self._send_level_up_email(level_up)

        for badge in events.badges:
            await publish_event(self.redis, BADGE_EARNED_CHANNEL, asdict(badge))

        if events.notifications or events.level_ups or events.badges:
            logger.info("Dispatched gamification events: %s", events.summary())
        events.clear()

    async def _send_level_up_email(self, event: LevelUpEvent) -> None:
        if self.email_service is None or not get_settings().level_up_emails_enabled:
            return
        try:
            user = await self.db.get(User, event.user_id)
            if user is None or not user.email:
                return
            await self.email_service.send_level_up(
                user.email,
                user_name=user.name,
                old_level=event.old_level,
                new_level=event.new_level,
                level_name=event.level_name,
                total_points=event.total_points,
            )
        except Exception:
            logger.warning("Level-up email failed for %s", event.user_id, exc_info=True)
