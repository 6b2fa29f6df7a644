"""
Unit tests for the scoreboard client and payload parsing
"""

import httpx
import pytest

from app.models.season import SeasonType
from app.services.scoreboard_client import ScoreboardClient, parse_event, parse_scoreboard


@pytest.fixture
def scoreboard_payload():
    """Two ESPN-shaped events: one final, one in progress."""
    return {
        "events": [
            {
                "id": "401671789",
                "date": "2025-09-21T17:00Z",
                "status": {"type": {"name": "STATUS_FINAL", "state": "post", "completed": True}},
                "competitions": [{
                    "competitors": [
                        {"homeAway": "home", "winner": True, "team": {"id": "12"}, "score": "27"},
                        {"homeAway": "away", "winner": False, "team": {"id": "4"}, "score": "20"},
                    ]
                }],
            },
            {
                "id": "401671790",
                "date": "2025-09-21T20:25Z",
                "competitions": [{
                    "status": {"type": {"name": "STATUS_IN_PROGRESS", "state": "in", "completed": False}},
                    "competitors": [
                        {"homeAway": "home", "team": {"id": "25"}, "score": {"value": 10.0}},
                        {"homeAway": "away", "team": {"id": "9"}, "score": {"value": 7.0}},
                    ]
                }],
            },
        ]
    }


class TestParseScoreboard:
    """Test suite for scoreboard payload parsing."""

    def test_parse_final_event(self, scoreboard_payload):
        """Final event keeps scores, winner flags and status."""
        events = parse_scoreboard(scoreboard_payload)

        event = events["401671789"]
        assert event.is_final
        assert [c.team_id for c in event.competitors] == ["12", "4"]
        assert event.competitors[0].score == 27
        assert event.competitors[0].winner is True

    def test_parse_in_progress_event(self, scoreboard_payload):
        """Competition-level status and dict scores are understood."""
        event = parse_scoreboard(scoreboard_payload)["401671790"]

        assert not event.is_final
        assert event.state == "in"
        assert event.competitors[0].score == 10
        assert event.competitors[0].winner is None

    def test_is_final_falls_back_to_status_name(self):
        """Without completed flag or state, STATUS_FINAL still marks final."""
        event = parse_event({
            "id": "1",
            "status": {"type": {"name": "STATUS_FINAL"}},
            "competitions": [{"competitors": []}],
        })

        assert event.completed is None
        assert event.is_final

    def test_malformed_events_are_skipped(self):
        """Events without id or of the wrong shape do not break the payload."""
        payload = {
            "events": [
                {"competitions": []},
                "not-an-event",
                {"id": "7", "competitions": [{"competitors": [{"team": {"id": "1"}, "score": "abc"}]}]},
            ]
        }

        events = parse_scoreboard(payload)

        assert list(events) == ["7"]
        assert events["7"].competitors[0].score is None

    def test_empty_payload(self):
        """Missing events key yields no events."""
        assert parse_scoreboard({}) == {}


class TestScoreboardClient:
    """Test suite for ScoreboardClient HTTP access."""

    @pytest.mark.asyncio
    async def test_fetch_events_sends_week_params(self, scoreboard_payload):
        """The week filter is sent as year/seasontype/week query params."""
        seen = {}

        def handler(request):
            seen.update(dict(request.url.params))
            return httpx.Response(200, json=scoreboard_payload)

        client = ScoreboardClient("https://feed.test/scoreboard", transport=httpx.MockTransport(handler))

        events = await client.fetch_events(2025, SeasonType.POSTSEASON, 2)

        assert seen == {"year": "2025", "seasontype": "3", "week": "2"}
        assert len(events) == 2

    @pytest.mark.asyncio
    async def test_fetch_events_raises_on_error_status(self):
        """Non-2xx responses raise httpx.HTTPStatusError."""
        client = ScoreboardClient(
            "https://feed.test/scoreboard",
            transport=httpx.MockTransport(lambda request: httpx.Response(500))
        )

        with pytest.raises(httpx.HTTPStatusError):
            await client.fetch_events(2025, SeasonType.REGULAR, 3)
