"""Registration endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from joinup.dependencies import get_gamification_engine
from joinup.gamification.engine import GamificationEngine
from joinup.registrations import service
from joinup.registrations.schemas import (
    RegistrationCreatedResponse,
    RegistrationCreateRequest,
    RegistrationResponse,
    RegistrationReviewedResponse,
    RegistrationStatusRequest,
)

router = APIRouter(prefix="/api/v1/registrations", tags=["Registrations"])


def _to_response(reg) -> RegistrationResponse:
    return RegistrationResponse(
        id=reg.id,
        hackathon_id=reg.hackathon_id,
        user_id=reg.user_id,
        team_name=reg.team_name,
        team_members=reg.team_members or [],
        status=reg.status,
        submitted_at=reg.submitted_at,
        reviewed_at=reg.reviewed_at,
        feedback=reg.feedback,
    )


@router.post("", response_model=RegistrationCreatedResponse, status_code=201)
async def create_registration(
    body: RegistrationCreateRequest,
    engine: GamificationEngine = Depends(get_gamification_engine),
):
    """Register for a competition and receive the registration points."""
    try:
        registration, award = await engine.run(
            lambda events: service.register(
                engine.db,
                body.user_id,
                body.hackathon_id,
                team_name=body.team_name,
                team_members=body.team_members,
                events=events,
            )
        )
    except service.DuplicateRegistrationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return RegistrationCreatedResponse(
        registration=_to_response(registration),
        points_awarded=award.points,
        new_total=award.new_total,
        leveled_up=award.leveled_up,
        badges_awarded=award.badges_awarded,
    )


@router.patch("/{registration_id}/status", response_model=RegistrationReviewedResponse)
async def update_registration_status(
    registration_id: int,
    body: RegistrationStatusRequest,
    engine: GamificationEngine = Depends(get_gamification_engine),
):
    """Review a registration. Approval re-runs badge evaluation for the user."""
    try:
        registration, awarded = await engine.run(
            lambda events: service.update_status(
                engine.db, registration_id, body.status, body.feedback, events=events,
            )
        )
    except service.RegistrationNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Registration not found") from exc

    return RegistrationReviewedResponse(registration=_to_response(registration), badges_awarded=awarded)
