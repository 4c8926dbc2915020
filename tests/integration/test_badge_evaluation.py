"""Integration tests for badge evaluation against stored registrations."""

from __future__ import annotations

import pytest
from sqlalchemy import select

from joinup.db.models import Notification
from joinup.gamification.badge_service import evaluate_badges, get_user_badges, load_badge_stats
from joinup.gamification.errors import NotFoundError
from joinup.gamification.events import EventBuffer

TEAM = [{"name": "Grace"}, {"name": "Alan"}]


class TestLoadBadgeStats:

    @pytest.mark.asyncio
    async def test_counts_only_approved_registrations(self, db_session, user_factory, registration_factory):
        uid = await user_factory()
        await registration_factory(uid, "h1", status="approved")
        await registration_factory(uid, "h2", status="approved", team_members=TEAM)
        await registration_factory(uid, "h3", status="pending", team_members=TEAM)
        await registration_factory(uid, "h4", status="rejected")

        stats = await load_badge_stats(db_session, uid, total_wins=4)

        assert stats.total_participations == 2
        assert stats.team_participations == 1
        assert stats.total_wins == 4


class TestEvaluateBadges:

    @pytest.mark.asyncio
    async def test_no_qualifying_activity_awards_nothing(self, db_session, user_factory):
        uid = await user_factory()
        assert await evaluate_badges(db_session, uid) == []

    @pytest.mark.asyncio
    async def test_first_approved_registration_awards_first_timer(
        self, db_session, user_factory, registration_factory,
    ):
        uid = await user_factory()
        await registration_factory(uid, "h1")
        events = EventBuffer()

        awarded = await evaluate_badges(db_session, uid, events=events)
        await db_session.commit()

        assert awarded == ["first-timer"]
        assert [b.badge_id for b in await get_user_badges(db_session, uid)] == ["first-timer"]
        notification = (await db_session.execute(
            select(Notification).where(Notification.user_id == uid)
        )).scalar_one()
        assert notification.subtype == "badge_earned"
        assert notification.title == "New Badge Earned: First Timer!"
        assert [e.badge_id for e in events.badges] == ["first-timer"]

    @pytest.mark.asyncio
    async def test_second_run_is_empty(self, db_session, user_factory, registration_factory):
        uid = await user_factory()
        await registration_factory(uid, "h1")

        first = await evaluate_badges(db_session, uid)
        second = await evaluate_badges(db_session, uid)
        await db_session.commit()

        assert first == ["first-timer"]
        assert second == []

    @pytest.mark.asyncio
    async def test_held_badge_not_awarded_again(self, db_session, user_factory, registration_factory):
        uid = await user_factory()
        await registration_factory(uid, "h1")
        await evaluate_badges(db_session, uid)
        await db_session.commit()

        await registration_factory(uid, "h2")
        awarded = await evaluate_badges(db_session, uid)
        await db_session.commit()

        assert awarded == []
        assert len(await get_user_badges(db_session, uid)) == 1

    @pytest.mark.asyncio
    async def test_team_player_after_three_team_registrations(
        self, db_session, user_factory, registration_factory,
    ):
        uid = await user_factory()
        for hackathon in ("h1", "h2", "h3"):
            await registration_factory(uid, hackathon, team_members=TEAM)

        awarded = await evaluate_badges(db_session, uid)
        await db_session.commit()

        assert awarded == ["first-timer", "team-player"]

    @pytest.mark.asyncio
    async def test_champion_at_ten_wins(self, db_session, user_factory):
        uid = await user_factory(total_wins=10)

        awarded = await evaluate_badges(db_session, uid)
        await db_session.commit()

        assert awarded == ["champion"]

    @pytest.mark.asyncio
    async def test_unknown_user_raises_not_found(self, db_session, user_factory):
        await user_factory()
        with pytest.raises(NotFoundError):
            await evaluate_badges(db_session, "ghost")
