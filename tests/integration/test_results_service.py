"""Integration tests for competition result processing."""

from __future__ import annotations

import pytest

from joinup.gamification.errors import NotFoundError
from joinup.gamification.results_service import CompetitionAchievement, process_competition_result
from joinup.gamification.xp_service import get_gamification, get_points_history


class TestProcessCompetitionResult:

    @pytest.mark.asyncio
    async def test_winner_bumps_counters_and_awards_points(self, db_session, user_factory):
        uid = await user_factory()

        outcome = await process_competition_result(db_session, uid, "hack-7", [
            CompetitionAchievement(type="winner", title="Spring Hack"),
            CompetitionAchievement(type="participation", title="Spring Hack"),
        ])
        await db_session.commit()

        assert outcome.total_points == 600
        gam = await get_gamification(db_session, uid, lock=False)
        assert gam.total_participations == 1
        assert gam.total_wins == 1
        assert gam.points == 600
        reasons = sorted(e.reason for e in await get_points_history(db_session, uid))
        assert reasons == ["Spring Hack - participation", "Spring Hack - winner"]

    @pytest.mark.asyncio
    async def test_non_winning_result_counts_participation_only(self, db_session, user_factory):
        uid = await user_factory()

        await process_competition_result(db_session, uid, "hack-8", [
            CompetitionAchievement(type="top_10", title="Autumn Hack"),
        ])
        await db_session.commit()

        gam = await get_gamification(db_session, uid, lock=False)
        assert gam.total_participations == 1
        assert gam.total_wins == 0
        assert gam.points == 150

    @pytest.mark.asyncio
    async def test_tenth_win_awards_champion(self, db_session, user_factory):
        uid = await user_factory(total_wins=9, total_participations=9)

        outcome = await process_competition_result(db_session, uid, "hack-10", [
            CompetitionAchievement(type="winner", title="Finals"),
        ])
        await db_session.commit()

        assert "champion" in outcome.badges_awarded

    @pytest.mark.asyncio
    async def test_no_achievements_still_evaluates_badges(self, db_session, user_factory):
        uid = await user_factory(total_wins=10)

        outcome = await process_competition_result(db_session, uid, "hack-11", [])
        await db_session.commit()

        assert outcome.total_points == 0
        assert outcome.badges_awarded == ["champion"]

    @pytest.mark.asyncio
    async def test_unknown_achievement_rejected_before_any_change(self, db_session, user_factory):
        uid = await user_factory()

        with pytest.raises(ValueError, match="gold_medal"):
            await process_competition_result(db_session, uid, "hack-9", [
                CompetitionAchievement(type="gold_medal", title="Nope"),
            ])

        gam = await get_gamification(db_session, uid, lock=False)
        assert gam.total_participations == 0

    @pytest.mark.asyncio
    async def test_unknown_user_raises_not_found(self, db_session, user_factory):
        await user_factory()
        with pytest.raises(NotFoundError):
            await process_competition_result(db_session, "ghost", "hack-1", [])
