"""Competition registrations and the point awards they trigger."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from joinup.db.models import Registration
from joinup.gamification.events import EventBuffer
from joinup.gamification.xp_service import POINTS, AwardResult, award_points, evaluate_badges_safely

logger = logging.getLogger(__name__)

STATUSES = ("pending", "approved", "rejected", "waitlisted")


class RegistrationError(Exception):
    """Base class for registration failures."""


class DuplicateRegistrationError(RegistrationError):
    """The user is already registered for this competition."""


class RegistrationNotFoundError(RegistrationError):
    """No registration with the given id."""


async def register(
    db: AsyncSession,
    user_id: str,
    hackathon_id: str,
    team_name: str | None = None,
    team_members: list[dict[str, Any]] | None = None,
    events: EventBuffer | None = None,
    now: datetime | None = None,
) -> tuple[Registration, AwardResult]:
    """Record a pending registration and award the registration points.

    Team registrations (any team members) earn more than solo ones.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    existing = await db.execute(
        select(Registration.id).where(
            Registration.user_id == user_id,
            Registration.hackathon_id == hackathon_id,
        )
    )
    if existing.scalar_one_or_none() is not None:
        msg = "Already registered for this hackathon"
        raise DuplicateRegistrationError(msg)

    members = team_members or []
    registration = Registration(
        hackathon_id=hackathon_id,
        user_id=user_id,
        team_name=team_name,
        team_members=members,
        status="pending",
        submitted_at=now,
    )
    db.add(registration)
    await db.flush()

    points = POINTS["COMPLETE_TEAM_REGISTRATION"] if members else POINTS["REGISTER_COMPETITION"]
    award = await award_points(
        db, user_id, points, f"Registered for {hackathon_id}", events=events, now=now,
    )
    logger.info("User %s registered for %s (%s)", user_id, hackathon_id, "team" if members else "solo")
    return registration, award


async def update_status(
    db: AsyncSession,
    registration_id: int,
    status: str,
    feedback: str | None = None,
    events: EventBuffer | None = None,
    now: datetime | None = None,
) -> tuple[Registration, list[str]]:
    """Review a registration.

    Approval changes badge eligibility, so it re-runs badge evaluation;
    evaluation failures never undo the review.
    """
    if status not in STATUSES:
        msg = f"Invalid registration status: {status}"
        raise ValueError(msg)
    if events is None:
        events = EventBuffer()
    if now is None:
        now = datetime.now(timezone.utc)

    registration = await db.get(Registration, registration_id)
    if registration is None:
        msg = f"Registration {registration_id} not found"
        raise RegistrationNotFoundError(msg)

    registration.status = status
    registration.feedback = feedback
    registration.reviewed_at = now
    await db.flush()

    awarded: list[str] = []
    if status == "approved":
        awarded = await evaluate_badges_safely(db, events, registration.user_id, now)
    return registration, awarded
