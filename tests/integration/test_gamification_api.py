"""Integration tests for gamification API endpoints."""

from __future__ import annotations

import pytest
from httpx import AsyncClient


class TestCatalogEndpoints:

    @pytest.mark.asyncio
    async def test_list_levels(self, client: AsyncClient):
        response = await client.get("/api/v1/levels")
        assert response.status_code == 200
        levels = response.json()["levels"]
        assert len(levels) == 10
        assert levels[0] == {"level": 1, "name": "Newcomer", "min_points": 0}
        assert levels[-1]["name"] == "Hall of Fame"

    @pytest.mark.asyncio
    async def test_list_badges(self, client: AsyncClient):
        response = await client.get("/api/v1/badges")
        assert response.status_code == 200
        badges = response.json()["badges"]
        assert len(badges) == 12
        first = badges[0]
        assert first["id"] == "first-timer"
        assert first["auto_awarded"] is True

    @pytest.mark.asyncio
    async def test_leaderboard(self, client: AsyncClient, user_factory):
        await user_factory("alice", points=300)
        await user_factory("bob", points=700)

        response = await client.get("/api/v1/leaderboard", params={"limit": 10})

        assert response.status_code == 200
        entries = response.json()["entries"]
        assert [e["user_id"] for e in entries] == ["bob", "alice"]
        assert entries[0]["rank"] == 1


class TestPointsEndpoints:

    @pytest.mark.asyncio
    async def test_award_points(self, client: AsyncClient, user_factory):
        uid = await user_factory(points=480)

        response = await client.post(f"/api/v1/users/{uid}/points", json={"delta": 100, "reason": "submit on time"})

        assert response.status_code == 200
        data = response.json()
        assert data["new_total"] == 580
        assert data["leveled_up"] is True
        assert data["new_level"] == 2
        assert data["level_name"] == "Explorer"

    @pytest.mark.asyncio
    async def test_negative_delta_clamped(self, client: AsyncClient, user_factory):
        uid = await user_factory()

        response = await client.post(f"/api/v1/users/{uid}/points", json={"delta": -50, "reason": "Correction"})

        assert response.status_code == 200
        assert response.json()["new_total"] == 0

    @pytest.mark.asyncio
    async def test_unknown_user_is_404(self, client: AsyncClient, user_factory):
        await user_factory()

        response = await client.post("/api/v1/users/ghost/points", json={"delta": 10, "reason": "x"})

        assert response.status_code == 404
        assert response.json() == {"detail": "User not found"}

    @pytest.mark.asyncio
    async def test_empty_reason_is_422(self, client: AsyncClient, user_factory):
        uid = await user_factory()

        response = await client.post(f"/api/v1/users/{uid}/points", json={"delta": 10, "reason": ""})

        assert response.status_code == 422
        assert response.json()["detail"] == "Validation error"

    @pytest.mark.asyncio
    async def test_delta_beyond_64_bits_is_422(self, client: AsyncClient, user_factory):
        uid = await user_factory(points=100)

        response = await client.post(f"/api/v1/users/{uid}/points", json={"delta": 2**70, "reason": "x"})

        assert response.status_code == 422
        history = await client.get(f"/api/v1/users/{uid}/points/history")
        assert history.json()["entries"] == []
        stats = await client.get(f"/api/v1/users/{uid}/gamestats")
        assert stats.json()["points"] == 100

    @pytest.mark.asyncio
    async def test_delta_beyond_32_bits_is_recorded(self, client: AsyncClient, user_factory):
        uid = await user_factory()

        response = await client.post(f"/api/v1/users/{uid}/points", json={"delta": 2**40, "reason": "bulk import"})

        assert response.status_code == 200
        assert response.json()["new_total"] == 2**40
        history = await client.get(f"/api/v1/users/{uid}/points/history")
        assert history.json()["entries"][0]["points"] == 2**40

    @pytest.mark.asyncio
    async def test_history(self, client: AsyncClient, user_factory):
        uid = await user_factory()
        await client.post(f"/api/v1/users/{uid}/points", json={"delta": 10, "reason": "first"})
        await client.post(f"/api/v1/users/{uid}/points", json={"delta": 20, "reason": "second"})

        response = await client.get(f"/api/v1/users/{uid}/points/history", params={"limit": 1})

        assert response.status_code == 200
        entries = response.json()["entries"]
        assert len(entries) == 1
        assert entries[0]["reason"] == "second"
        assert entries[0]["new_total"] == 30


class TestGameStats:

    @pytest.mark.asyncio
    async def test_gamestats(self, client: AsyncClient, user_factory, registration_factory):
        uid = await user_factory()
        await registration_factory(uid, "h1")
        await client.post(f"/api/v1/users/{uid}/points", json={"delta": 750, "reason": "Winner"})

        response = await client.get(f"/api/v1/users/{uid}/gamestats")

        assert response.status_code == 200
        data = response.json()
        assert data["points"] == 750
        assert data["level"] == 2
        assert data["progress"]["points_into_level"] == 250
        assert [b["badge_id"] for b in data["badges"]] == ["first-timer"]
        assert data["badges"][0]["name"] == "First Timer"
        assert len(data["recent_history"]) == 1

    @pytest.mark.asyncio
    async def test_gamestats_unknown_user(self, client: AsyncClient, user_factory):
        await user_factory()
        response = await client.get("/api/v1/users/ghost/gamestats")
        assert response.status_code == 404


class TestActivityEndpoint:

    @pytest.mark.asyncio
    async def test_login_twice_same_day(self, client: AsyncClient, user_factory):
        uid = await user_factory()

        first = await client.post(f"/api/v1/users/{uid}/activity", json={"activity_type": "login"})
        second = await client.post(f"/api/v1/users/{uid}/activity", json={})

        assert first.status_code == 200
        assert first.json()["daily_streak"] == 1
        assert first.json()["changed"] is True
        assert second.json()["changed"] is False
        assert second.json()["daily_streak"] == 1

    @pytest.mark.asyncio
    async def test_reserved_activity_type_is_400(self, client: AsyncClient, user_factory):
        uid = await user_factory()

        response = await client.post(f"/api/v1/users/{uid}/activity", json={"activity_type": "weekly"})

        assert response.status_code == 400


class TestBadgesAndResults:

    @pytest.mark.asyncio
    async def test_evaluate_badges(self, client: AsyncClient, user_factory, registration_factory):
        uid = await user_factory()
        await registration_factory(uid, "h1")

        first = await client.post(f"/api/v1/users/{uid}/badges/evaluate")
        second = await client.post(f"/api/v1/users/{uid}/badges/evaluate")

        assert first.json()["badges_awarded"] == ["first-timer"]
        assert second.json()["badges_awarded"] == []

    @pytest.mark.asyncio
    async def test_record_result(self, client: AsyncClient, user_factory):
        uid = await user_factory()

        response = await client.post(f"/api/v1/users/{uid}/results", json={
            "hackathon_id": "hack-1",
            "achievements": [{"type": "runner_up", "title": "Spring Hack"}],
        })

        assert response.status_code == 200
        data = response.json()
        assert data["total_points"] == 350
        assert data["new_total"] == 350

    @pytest.mark.asyncio
    async def test_unknown_achievement_is_400(self, client: AsyncClient, user_factory):
        uid = await user_factory()

        response = await client.post(f"/api/v1/users/{uid}/results", json={
            "hackathon_id": "hack-1",
            "achievements": [{"type": "mvp", "title": "Spring Hack"}],
        })

        assert response.status_code == 400


class TestProfileAndNotifications:

    @pytest.mark.asyncio
    async def test_create_profile(self, client: AsyncClient, user_factory):
        uid = await user_factory(profile=False)

        response = await client.post(f"/api/v1/users/{uid}/profile")

        assert response.status_code == 201
        assert response.json() == {"user_id": uid, "points": 0, "level": 1, "level_name": "Newcomer"}
        stats = await client.get(f"/api/v1/users/{uid}/gamestats")
        assert stats.status_code == 200

    @pytest.mark.asyncio
    async def test_create_profile_for_unknown_user(self, client: AsyncClient, user_factory):
        await user_factory()
        response = await client.post("/api/v1/users/ghost/profile")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_notifications_after_level_up(self, client: AsyncClient, user_factory):
        uid = await user_factory(points=480)
        await client.post(f"/api/v1/users/{uid}/points", json={"delta": 100, "reason": "submit on time"})

        response = await client.get(f"/api/v1/users/{uid}/notifications")

        assert response.status_code == 200
        data = response.json()
        assert data["unread_count"] == 1
        assert data["notifications"][0]["subtype"] == "level_up"
        assert data["notifications"][0]["is_read"] is False
