"""Gamification API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from joinup.database import get_session
from joinup.dependencies import get_gamification_engine
from joinup.gamification.badge_catalog import BADGE_DEFINITIONS, get_badge
from joinup.gamification.badge_service import get_user_badges
from joinup.gamification.engine import GamificationEngine
from joinup.gamification.leaderboard_service import get_leaderboard
from joinup.gamification.level_thresholds import LEVEL_THRESHOLDS, level_progress
from joinup.gamification.results_service import CompetitionAchievement
from joinup.gamification.schemas import (
    ActivityRequest,
    ActivityResponse,
    AllBadgesResponse,
    AllLevelsResponse,
    AwardPointsRequest,
    AwardPointsResponse,
    BadgeDefinitionResponse,
    CompetitionResultRequest,
    CompetitionResultResponse,
    EarnedBadgeResponse,
    EvaluateBadgesResponse,
    GameStatsResponse,
    LeaderboardEntry,
    LeaderboardResponse,
    LevelEntry,
    LevelProgress,
    NotificationItem,
    NotificationsResponse,
    PointsHistoryEntry,
    PointsHistoryResponse,
    ProfileResponse,
)
from joinup.gamification.xp_service import get_gamification, get_points_history
from joinup.notifications.service import get_notifications, get_unread_count

router = APIRouter(prefix="/api/v1", tags=["Gamification"])

RECENT_HISTORY_LIMIT = 20


def _history_entry(entry) -> PointsHistoryEntry:
    return PointsHistoryEntry(
        points=entry.points,
        requested_points=entry.requested_points,
        reason=entry.reason,
        previous_total=entry.previous_total,
        new_total=entry.new_total,
        leveled_up=entry.leveled_up,
        old_level=entry.old_level,
        new_level=entry.new_level,
        created_at=entry.created_at,
    )


# ── Catalog endpoints ──


@router.get("/levels", response_model=AllLevelsResponse)
async def list_levels():
    """Get the level table."""
    return AllLevelsResponse(
        levels=[
            LevelEntry(level=t["level"], name=t["name"], min_points=t["min_points"])
            for t in LEVEL_THRESHOLDS
        ]
    )


@router.get("/badges", response_model=AllBadgesResponse)
async def list_badges():
    """Get all badge definitions."""
    return AllBadgesResponse(
        badges=[BadgeDefinitionResponse(**b.as_dict()) for b in BADGE_DEFINITIONS]
    )


@router.get("/leaderboard", response_model=LeaderboardResponse)
async def leaderboard(
    limit: int | None = Query(None, ge=1),
    department: str | None = Query(None),
    year: int | None = Query(None),
    db: AsyncSession = Depends(get_session),
):
    """Users ranked by points."""
    rows = await get_leaderboard(db, limit=limit, department=department, year=year)
    return LeaderboardResponse(entries=[LeaderboardEntry(**row) for row in rows])


# ── Per-user reads ──


@router.get("/users/{user_id}/gamestats", response_model=GameStatsResponse)
async def get_game_stats(user_id: str, db: AsyncSession = Depends(get_session)):
    """Stats, level progress, held badges and recent point history."""
    gam = await get_gamification(db, user_id, lock=False)
    badges = await get_user_badges(db, user_id)
    history = await get_points_history(db, user_id, limit=RECENT_HISTORY_LIMIT)

    earned = []
    for ub in badges:
        definition = get_badge(ub.badge_id)
        earned.append(EarnedBadgeResponse(
            badge_id=ub.badge_id,
            name=definition.name if definition else None,
            rarity=definition.rarity if definition else None,
            earned_at=ub.earned_at,
        ))

    return GameStatsResponse(
        user_id=gam.user_id,
        points=gam.points,
        level=gam.level,
        level_name=gam.level_name,
        progress=LevelProgress(**level_progress(gam.points)),
        daily_streak=gam.daily_streak,
        weekly_streak=gam.weekly_streak,
        hackathon_streak=gam.hackathon_streak,
        last_daily_login=gam.last_daily_login,
        total_participations=gam.total_participations,
        total_wins=gam.total_wins,
        badges=earned,
        recent_history=[_history_entry(e) for e in history],
    )


@router.get("/users/{user_id}/points/history", response_model=PointsHistoryResponse)
async def points_history(
    user_id: str,
    limit: int = Query(RECENT_HISTORY_LIMIT, ge=1, le=200),
    db: AsyncSession = Depends(get_session),
):
    """Point history, newest first."""
    await get_gamification(db, user_id, lock=False)
    entries = await get_points_history(db, user_id, limit=limit)
    return PointsHistoryResponse(entries=[_history_entry(e) for e in entries])


@router.get("/users/{user_id}/notifications", response_model=NotificationsResponse)
async def list_notifications(
    user_id: str,
    unread_only: bool = Query(False),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_session),
):
    """Newest-first notifications with the unread count."""
    items = await get_notifications(db, user_id, unread_only=unread_only, limit=limit)
    return NotificationsResponse(
        notifications=[
            NotificationItem(
                id=n.id,
                type=n.type,
                subtype=n.subtype,
                title=n.title,
                message=n.message,
                action_url=n.action_url,
                is_read=n.is_read,
                created_at=n.created_at,
            )
            for n in items
        ],
        unread_count=await get_unread_count(db, user_id),
    )


# ── Per-user writes ──


@router.post("/users/{user_id}/profile", response_model=ProfileResponse, status_code=201)
async def create_profile(
    user_id: str,
    engine: GamificationEngine = Depends(get_gamification_engine),
):
    """Create the zeroed stats record for a newly registered user."""
    gam = await engine.create_profile(user_id)
    return ProfileResponse(
        user_id=gam.user_id, points=gam.points, level=gam.level, level_name=gam.level_name,
    )


@router.post("/users/{user_id}/points", response_model=AwardPointsResponse)
async def award_points(
    user_id: str,
    body: AwardPointsRequest,
    engine: GamificationEngine = Depends(get_gamification_engine),
):
    """Apply a point delta (negative deltas are clamped at zero)."""
    result = await engine.award_points(user_id, body.delta, body.reason)
    return AwardPointsResponse(
        user_id=result.user_id,
        points=result.points,
        previous_total=result.previous_total,
        new_total=result.new_total,
        leveled_up=result.leveled_up,
        old_level=result.old_level,
        new_level=result.new_level,
        level_name=result.level_name,
        badges_awarded=result.badges_awarded,
    )


@router.post("/users/{user_id}/activity", response_model=ActivityResponse)
async def record_activity(
    user_id: str,
    body: ActivityRequest,
    engine: GamificationEngine = Depends(get_gamification_engine),
):
    """Record an activity and update the matching streak."""
    try:
        result = await engine.record_activity(user_id, body.activity_type)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return ActivityResponse(
        user_id=result.user_id,
        activity_type=result.activity_type,
        daily_streak=result.daily_streak,
        changed=result.changed,
        bonus_points=result.bonus.points if result.bonus else 0,
        badges_awarded=result.bonus.badges_awarded if result.bonus else [],
    )


@router.post("/users/{user_id}/badges/evaluate", response_model=EvaluateBadgesResponse)
async def evaluate_badges(
    user_id: str,
    engine: GamificationEngine = Depends(get_gamification_engine),
):
    """Award any badges the user newly qualifies for."""
    awarded = await engine.evaluate_badges(user_id)
    return EvaluateBadgesResponse(user_id=user_id, badges_awarded=awarded)


@router.post("/users/{user_id}/results", response_model=CompetitionResultResponse)
async def record_result(
    user_id: str,
    body: CompetitionResultRequest,
    engine: GamificationEngine = Depends(get_gamification_engine),
):
    """Record a user's achievements in one competition."""
    achievements = [CompetitionAchievement(type=a.type, title=a.title) for a in body.achievements]
    try:
        outcome = await engine.process_competition_result(user_id, body.hackathon_id, achievements)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return CompetitionResultResponse(
        user_id=outcome.user_id,
        hackathon_id=outcome.hackathon_id,
        total_points=outcome.total_points,
        new_total=outcome.awards[-1].new_total if outcome.awards else None,
        badges_awarded=outcome.badges_awarded,
    )
