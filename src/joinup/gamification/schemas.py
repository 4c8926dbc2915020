"""Pydantic request and response models for gamification endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


# --- Levels ---


class LevelEntry(BaseModel):
    level: int
    name: str
    min_points: int


class AllLevelsResponse(BaseModel):
    levels: list[LevelEntry]


# --- Badges ---


class BadgeDefinitionResponse(BaseModel):
    id: str
    name: str
    description: str
    icon: str
    rarity: str
    category: str
    criteria: str
    color: str
    auto_awarded: bool


class AllBadgesResponse(BaseModel):
    badges: list[BadgeDefinitionResponse]


class EarnedBadgeResponse(BaseModel):
    badge_id: str
    name: str | None = None
    rarity: str | None = None
    earned_at: datetime


class EvaluateBadgesResponse(BaseModel):
    user_id: str
    badges_awarded: list[str]


# --- Points ---


# Signed 64-bit, the width of the points columns
MIN_DELTA = -(2**63)
MAX_DELTA = 2**63 - 1


class AwardPointsRequest(BaseModel):
    delta: int = Field(ge=MIN_DELTA, le=MAX_DELTA)
    reason: str = Field(min_length=1, max_length=256)


class AwardPointsResponse(BaseModel):
    user_id: str
    points: int
    previous_total: int
    new_total: int
    leveled_up: bool
    old_level: int
    new_level: int
    level_name: str
    badges_awarded: list[str] = []


class PointsHistoryEntry(BaseModel):
    points: int
    requested_points: int
    reason: str
    previous_total: int
    new_total: int
    leveled_up: bool
    old_level: int
    new_level: int
    created_at: datetime


class PointsHistoryResponse(BaseModel):
    entries: list[PointsHistoryEntry]


# --- Streaks ---


class ActivityRequest(BaseModel):
    activity_type: str = "login"


class ActivityResponse(BaseModel):
    user_id: str
    activity_type: str
    daily_streak: int
    changed: bool
    bonus_points: int = 0
    badges_awarded: list[str] = []


# --- Stats ---


class LevelProgress(BaseModel):
    points_into_level: int
    points_to_next_level: int
    percent: float


class GameStatsResponse(BaseModel):
    user_id: str
    points: int
    level: int
    level_name: str
    progress: LevelProgress
    daily_streak: int
    weekly_streak: int
    hackathon_streak: int
    last_daily_login: datetime | None = None
    total_participations: int
    total_wins: int
    badges: list[EarnedBadgeResponse]
    recent_history: list[PointsHistoryEntry]


class ProfileResponse(BaseModel):
    user_id: str
    points: int
    level: int
    level_name: str


# --- Competition results ---


class AchievementItem(BaseModel):
    type: str
    title: str = Field(min_length=1, max_length=200)


class CompetitionResultRequest(BaseModel):
    hackathon_id: str = Field(min_length=1, max_length=128)
    achievements: list[AchievementItem] = []


class CompetitionResultResponse(BaseModel):
    user_id: str
    hackathon_id: str
    total_points: int
    new_total: int | None = None
    badges_awarded: list[str] = []


# --- Leaderboard ---


class LeaderboardEntry(BaseModel):
    rank: int
    user_id: str
    user_name: str
    department: str | None = None
    year: int | None = None
    points: int
    level: int
    total_participations: int
    total_wins: int
    daily_streak: int


class LeaderboardResponse(BaseModel):
    entries: list[LeaderboardEntry]


# --- Notifications ---


class NotificationItem(BaseModel):
    id: int
    type: str
    subtype: str
    title: str
    message: str | None = None
    action_url: str | None = None
    is_read: bool
    created_at: datetime


class NotificationsResponse(BaseModel):
    notifications: list[NotificationItem]
    unread_count: int
