"""
Unit tests for NotificationService
"""

import json
from datetime import datetime, timezone

import httpx
import pytest

from app.models.season import SeasonConfig
from app.services.notification_service import NotificationService


@pytest.fixture
def captured():
    return []


@pytest.fixture
def ok_transport(captured):
    def handler(request):
        captured.append(request)
        return httpx.Response(200, json={"ok": True})
    return httpx.MockTransport(handler)


class TestNotificationService:
    """Test suite for the push dispatcher client."""

    @pytest.mark.asyncio
    async def test_not_configured(self):
        service = NotificationService(None)

        assert await service.notify_all("Title", "Body") is False

    @pytest.mark.asyncio
    async def test_notify_all_posts_payload(self, ok_transport, captured):
        service = NotificationService(
            "https://push.test/notify-all/", secret="s3cret", transport=ok_transport
        )

        sent = await service.notify_all("Title", "Body")

        assert sent is True
        request = captured[0]
        assert str(request.url) == "https://push.test/notify-all"
        assert request.headers["Authorization"] == "Bearer s3cret"
        assert json.loads(request.content) == {"title": "Title", "body": "Body"}

    @pytest.mark.asyncio
    async def test_dispatch_failure_returns_false(self):
        service = NotificationService(
            "https://push.test/notify-all",
            transport=httpx.MockTransport(lambda request: httpx.Response(502))
        )

        assert await service.notify_all("Title", "Body") is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize("notify_url", ["http://[::1", "not a url at all"])
    async def test_malformed_url_returns_false(self, notify_url):
        """A broken NOTIFY_URL is reported as a failed dispatch, never raised."""
        service = NotificationService(notify_url)

        assert await service.notify_all("Title", "Body") is False

    @pytest.mark.asyncio
    async def test_prediction_reminder_in_eastern_time(self, ok_transport, captured):
        """Deadline 17:00 UTC in September is 1:00 PM Eastern."""
        service = NotificationService("https://push.test/notify-all", transport=ok_transport)
        config = SeasonConfig(
            season_year=2025,
            season_type="Regular",
            week=3,
            deadline=datetime(2025, 9, 21, 17, 0, tzinfo=timezone.utc),
        )

        result = await service.send_prediction_reminder(config)

        assert result == {"success": True}
        body = json.loads(captured[0].content)["body"]
        assert body == "Get your predictions in for Regular Week 3 before 1:00 PM ET."

    @pytest.mark.asyncio
    async def test_prediction_reminder_without_deadline(self, ok_transport, captured):
        service = NotificationService("https://push.test/notify-all", transport=ok_transport)
        config = SeasonConfig(season_year=2025, season_type="Regular", week=3)

        result = await service.send_prediction_reminder(config)

        assert result == {"success": False, "message": "No deadline configured."}
        assert captured == []

    @pytest.mark.asyncio
    async def test_results_ready(self, ok_transport, captured):
        service = NotificationService("https://push.test/notify-all", transport=ok_transport)
        config = SeasonConfig(season_year=2025, season_type="Postseason", week=2)

        assert await service.send_results_ready(config) is True
        assert "Postseason Week 2" in json.loads(captured[0].content)["body"]
