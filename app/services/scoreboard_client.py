"""
ScoreboardClient - Read-only client for the external NFL scoreboard feed.

The feed is ESPN-shaped JSON: `events[].competitions[0].competitors[]` with
team ids, scores and an optional `winner` flag. Only what the outcome
resolver needs is parsed; a malformed event is skipped (its game simply
stays unresolved) instead of failing the whole payload.
"""

import logging
from typing import Any, Optional

import httpx
from pydantic import BaseModel, Field

from app.models.season import SeasonType

logger = logging.getLogger(__name__)


class FeedCompetitor(BaseModel):
    team_id: str
    home_away: Optional[str] = None
    score: Optional[int] = None
    winner: Optional[bool] = None


class FeedEvent(BaseModel):
    id: str
    date: Optional[str] = None
    competitors: list[FeedCompetitor] = Field(default_factory=list)

    completed: Optional[bool] = None
    state: Optional[str] = None  # pre | in | post
    status_name: Optional[str] = None  # STATUS_FINAL, STATUS_IN_PROGRESS...

    @property
    def is_final(self) -> bool:
        """
        Whether the event is over.

        Falls back from the explicit completion flag to the state, and from
        the state to the status name when the feed omits them.
        """
        return bool(self.completed) or self.state == "post" or self.status_name == "STATUS_FINAL"


def _parse_score(raw: Any) -> Optional[int]:
    """Scores come as "24", 24 or {"value": 24.0}."""
    if isinstance(raw, dict):
        raw = raw.get("value", raw.get("displayValue"))
    if raw is None or raw == "":
        return None
    try:
        return int(float(raw))
    except (TypeError, ValueError):
        return None


def _status_fields(event: dict, competition: dict) -> tuple[Optional[bool], Optional[str], Optional[str]]:
    completed = state = name = None
    for status in (competition.get("status") or {}, event.get("status") or {}):
        status_type = status.get("type") or {}
        if completed is None and isinstance(status_type.get("completed"), bool):
            completed = status_type["completed"]
        if state is None and status_type.get("state"):
            state = status_type["state"]
        if name is None and status_type.get("name"):
            name = status_type["name"]
    return completed, state, name


def parse_event(event: dict) -> Optional[FeedEvent]:
    """Parse one scoreboard event; None when it is too broken to use."""
    event_id = event.get("id")
    if event_id in (None, ""):
        return None

    competitions = event.get("competitions") or []
    competition = competitions[0] if competitions else {}

    competitors = []
    for raw in competition.get("competitors") or []:
        team_id = (raw.get("team") or {}).get("id") or raw.get("id")
        if team_id in (None, ""):
            continue
        winner = raw.get("winner")
        competitors.append(FeedCompetitor(
            team_id=str(team_id),
            home_away=raw.get("homeAway"),
            score=_parse_score(raw.get("score")),
            winner=winner if isinstance(winner, bool) else None,
        ))

    completed, state, status_name = _status_fields(event, competition)

    return FeedEvent(
        id=str(event_id),
        date=event.get("date"),
        competitors=competitors,
        completed=completed,
        state=state,
        status_name=status_name,
    )


def parse_scoreboard(payload: dict) -> dict[str, FeedEvent]:
    """Parse a full scoreboard payload into `event_id -> FeedEvent`."""
    events: dict[str, FeedEvent] = {}
    for raw in (payload or {}).get("events") or []:
        if not isinstance(raw, dict):
            continue
        try:
            parsed = parse_event(raw)
        except (AttributeError, TypeError, ValueError) as e:
            logger.warning(f"⚠️ Skipping malformed scoreboard event {raw.get('id')}: {e}")
            continue
        if parsed is None:
            logger.warning("⚠️ Skipping scoreboard event without id")
            continue
        events[parsed.id] = parsed
    return events


class ScoreboardClient:
    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = base_url
        self.timeout = timeout
        self.transport = transport

    async def fetch_events(
        self,
        season_year: Optional[int] = None,
        season_type: Optional[SeasonType] = None,
        week: Optional[int] = None
    ) -> dict[str, FeedEvent]:
        """
        Fetch the scoreboard for a week (or the current one when no filter).

        Raises httpx.HTTPError on network errors or non-2xx responses.
        """
        params = {}
        if season_year is not None:
            params["year"] = season_year
        if season_type is not None:
            params["seasontype"] = season_type.feed_code
        if week is not None:
            params["week"] = week

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.get(self.base_url, params=params)
            response.raise_for_status()
            payload = response.json()

        events = parse_scoreboard(payload)
        logger.info(f"📡 Scoreboard returned {len(events)} events")
        return events
