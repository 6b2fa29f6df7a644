"""
Fixtures for integration tests
"""

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from app.core.config import Settings, get_settings
from app.core.dependencies import get_notification_service, get_scoreboard_client
from app.database import Database
from app.main import app
from app.services.notification_service import NotificationService
from app.services.scoreboard_client import ScoreboardClient

JOB_SECRET = "scheduler-secret"


@pytest.fixture
def test_settings():
    """Settings for the API under test (no real Mongo, no real feed)."""
    return Settings(
        mongodb_uri="mongodb://localhost:27017",
        mongodb_db_name="nfl_pickem_test",
        job_secret=JOB_SECRET,
        notify_url="https://push.test/notify-all",
    )


@pytest.fixture
def sent_notifications():
    return []


@pytest.fixture
async def client(test_db, test_settings, sent_notifications):
    """
    HTTP client for testing API endpoints.

    Overrides the database, settings and external clients.
    """
    def notify_handler(request):
        sent_notifications.append(request)
        return httpx.Response(200, json={"ok": True})

    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_scoreboard_client] = lambda: ScoreboardClient(
        "https://feed.test/scoreboard",
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json={"events": []}))
    )
    app.dependency_overrides[get_notification_service] = lambda: NotificationService(
        test_settings.notify_url,
        transport=httpx.MockTransport(notify_handler)
    )

    # Store original db connection
    original_db = Database.db
    Database.db = test_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    # Restore original db and dependencies
    Database.db = original_db
    app.dependency_overrides.clear()


@pytest.fixture
def job_headers():
    """Authorization headers for the /jobs endpoints."""
    return {"Authorization": f"Bearer {JOB_SECRET}"}
