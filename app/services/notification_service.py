"""
NotificationService - Push "notify all subscribers" via the dispatcher endpoint.

Fire-and-forget: a failed dispatch is logged and reported as False, never
raised, so it can't fail the job that triggered it.
"""

import logging
from typing import Optional
from zoneinfo import ZoneInfo

import httpx

from app.models.season import SeasonConfig

logger = logging.getLogger(__name__)

EASTERN = ZoneInfo("America/New_York")


class NotificationService:
    def __init__(
        self,
        notify_url: Optional[str],
        secret: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.notify_url = notify_url.rstrip("/") if notify_url else None
        self.secret = secret
        self.timeout = timeout
        self.transport = transport

    async def notify_all(self, title: str, body: str) -> bool:
        """Send a notification to every subscriber. Returns True if accepted."""
        if not self.notify_url:
            logger.info("🔕 Notifications not configured, skipping")
            return False

        headers = {"Content-Type": "application/json"}
        if self.secret:
            headers["Authorization"] = f"Bearer {self.secret}"

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    self.notify_url,
                    json={"title": title, "body": body},
                    headers=headers
                )
                response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            # ValueError: httpx no siempre envuelve una URL mal formada en InvalidURL
            logger.warning(f"⚠️ Notification dispatch failed: {e}")
            return False

        logger.info(f"📣 Sent notification: {title}")
        return True

    async def send_results_ready(self, config: SeasonConfig) -> bool:
        return await self.notify_all(
            "📊 Results are in!",
            f"{config.season_type.value} Week {config.week} results and leaderboard are ready."
        )

    async def send_prediction_reminder(self, config: SeasonConfig) -> dict:
        """Last-chance reminder with the deadline in Eastern time."""
        if config.deadline is None:
            return {"success": False, "message": "No deadline configured."}

        deadline = config.deadline
        if deadline.tzinfo is None:
            deadline = deadline.replace(tzinfo=ZoneInfo("UTC"))
        local = deadline.astimezone(EASTERN)
        formatted_time = local.strftime("%I:%M %p").lstrip("0")

        sent = await self.notify_all(
            "⏰ Last Chance!",
            f"Get your predictions in for {config.season_type.value} Week {config.week} "
            f"before {formatted_time} ET."
        )
        return {"success": sent}
