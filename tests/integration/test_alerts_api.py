"""Integration tests: alert listing and read state."""

from __future__ import annotations

import pytest
from httpx import AsyncClient

from rideback.alerts.service import create_alert
from rideback.database import get_session


async def _create_test_alert(user_id: int, title: str, type_: str = "notification") -> int:
    """Create an alert directly in the DB."""
    async for db in get_session():
        alert = await create_alert(db, user_id, title=title, message=f"{title} body", type_=type_)
        await db.commit()
        return alert.id
    msg = "no session"
    raise RuntimeError(msg)


class TestAlertsAPI:
    @pytest.mark.asyncio
    async def test_list_empty(self, authed_client: AsyncClient):
        response = await authed_client.get("/api/alerts")
        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_list_newest_first(self, authed_client: AsyncClient, alice: dict):
        await _create_test_alert(alice["id"], "Welcome!")
        await _create_test_alert(alice["id"], "Possible match", type_="match")

        data = (await authed_client.get("/api/alerts")).json()
        assert [a["title"] for a in data] == ["Possible match", "Welcome!"]
        assert data[0]["type"] == "match"
        assert data[0]["read"] is False

    @pytest.mark.asyncio
    async def test_only_own_alerts(self, authed_client: AsyncClient, bob: dict):
        await _create_test_alert(bob["id"], "For bob")
        assert (await authed_client.get("/api/alerts")).json() == []

    @pytest.mark.asyncio
    async def test_mark_read_idempotent(self, authed_client: AsyncClient, alice: dict):
        alert_id = await _create_test_alert(alice["id"], "Hello")

        first = await authed_client.patch(f"/api/alerts/{alert_id}/read")
        assert first.status_code == 200
        assert first.json()["success"] is True
        assert first.json()["alert"]["read"] is True

        second = await authed_client.patch(f"/api/alerts/{alert_id}/read")
        assert second.status_code == 200
        assert second.json()["alert"]["read"] is True

    @pytest.mark.asyncio
    async def test_mark_other_users_alert_is_404(self, authed_client: AsyncClient, bob: dict):
        alert_id = await _create_test_alert(bob["id"], "For bob")
        response = await authed_client.patch(f"/api/alerts/{alert_id}/read")
        assert response.status_code == 404
        assert response.json() == {"message": "Alert not found"}

    @pytest.mark.asyncio
    async def test_unread_count(self, authed_client: AsyncClient, alice: dict):
        first = await _create_test_alert(alice["id"], "One")
        await _create_test_alert(alice["id"], "Two")
        assert (await authed_client.get("/api/alerts/unread-count")).json() == {"unreadCount": 2}

        await authed_client.patch(f"/api/alerts/{first}/read")
        assert (await authed_client.get("/api/alerts/unread-count")).json() == {"unreadCount": 1}

    @pytest.mark.asyncio
    async def test_invalid_type_is_programming_error(self, client: AsyncClient, alice: dict):
        with pytest.raises(ValueError, match="Invalid alert type"):
            await _create_test_alert(alice["id"], "Oops", type_="spam")
