"""Pydantic models for registration endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


class RegistrationCreateRequest(BaseModel):
    user_id: str = Field(min_length=1, max_length=128)
    hackathon_id: str = Field(min_length=1, max_length=128)
    team_name: str | None = Field(None, max_length=128)
    team_members: list[dict[str, Any]] = []


class RegistrationStatusRequest(BaseModel):
    status: Literal["pending", "approved", "rejected", "waitlisted"]
    feedback: str | None = Field(None, max_length=2000)


class RegistrationResponse(BaseModel):
    id: int
    hackathon_id: str
    user_id: str
    team_name: str | None = None
    team_members: list[dict[str, Any]] = []
    status: str
    submitted_at: datetime
    reviewed_at: datetime | None = None
    feedback: str | None = None


class RegistrationCreatedResponse(BaseModel):
    registration: RegistrationResponse
    points_awarded: int
    new_total: int
    leveled_up: bool
    badges_awarded: list[str] = []


class RegistrationReviewedResponse(BaseModel):
    registration: RegistrationResponse
    badges_awarded: list[str] = []
