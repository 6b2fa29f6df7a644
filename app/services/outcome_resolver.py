"""
OutcomeResolver - Decides winner-or-tie for every game of a week.

Resolution order per game:
1. Stored result (`winner_id` with `has_result`, or a stored final tie).
2. Scoreboard feed: explicit `winner` flag on a finished event.
3. Scoreboard feed: finished event without flag -> higher score wins.
4. Scoreboard feed: finished event with equal scores -> final tie.

Anything else stays unresolved. The feed is only requested when the stored
records leave something unresolved.
"""

import logging
from typing import Optional

import httpx
from pydantic import BaseModel, Field

from app.models.game import FeedResult, Game
from app.models.season import SeasonConfig
from app.services.scoreboard_client import FeedEvent, ScoreboardClient

logger = logging.getLogger(__name__)


class OutcomeResolution(BaseModel):
    winners: dict[str, str] = Field(default_factory=dict)  # game_id -> team_id
    ties: set[str] = Field(default_factory=set)
    unresolved: list[str] = Field(default_factory=list)
    from_feed: dict[str, FeedResult] = Field(default_factory=dict)

    @property
    def decided_count(self) -> int:
        return len(self.winners) + len(self.ties)

    @property
    def is_complete(self) -> bool:
        return not self.unresolved

    def winner_for(self, game_id: str) -> Optional[str]:
        return self.winners.get(str(game_id))

    def is_tie(self, game_id: str) -> bool:
        return str(game_id) in self.ties


def _resolve_from_feed(event: FeedEvent) -> tuple[Optional[str], bool]:
    """Return (winner_team_id, is_tie) for a feed event."""
    if not event.is_final or len(event.competitors) < 2:
        return None, False

    flagged = [c for c in event.competitors if c.winner is True]
    if len(flagged) == 1:
        return flagged[0].team_id, False

    first, second = event.competitors[0], event.competitors[1]
    if first.score is None or second.score is None:
        return None, False
    if first.score == second.score:
        return None, True
    return (first.team_id if first.score > second.score else second.team_id), False


def resolve_outcomes(
    games: list[Game],
    feed_events: Optional[dict[str, FeedEvent]] = None
) -> OutcomeResolution:
    """Resolve every game using stored results first, then the feed."""
    resolution = OutcomeResolution()
    feed_events = feed_events or {}

    for game in games:
        if game.has_result and game.winner_id:
            resolution.winners[game.id] = game.winner_id
            continue
        if game.is_stored_tie:
            resolution.ties.add(game.id)
            continue

        event = feed_events.get(game.id)
        if event is None:
            resolution.unresolved.append(game.id)
            continue

        winner_id, is_tie = _resolve_from_feed(event)
        if winner_id:
            resolution.winners[game.id] = winner_id
        elif is_tie:
            resolution.ties.add(game.id)
        else:
            resolution.unresolved.append(game.id)
            continue

        scores = {c.team_id: c.score for c in event.competitors}
        resolution.from_feed[game.id] = FeedResult(
            winner_id=winner_id,
            home_score=scores.get(game.home_team.id),
            away_score=scores.get(game.away_team.id),
        )

    return resolution


async def resolve_week(
    games: list[Game],
    config: SeasonConfig,
    scoreboard: Optional[ScoreboardClient] = None
) -> OutcomeResolution:
    """
    Resolve a week, hitting the scoreboard only when stored data is not enough.

    A feed failure is logged and leaves the pending games unresolved.
    """
    resolution = resolve_outcomes(games)
    if resolution.is_complete or scoreboard is None:
        return resolution

    logger.info(f"📡 {len(resolution.unresolved)} games without stored result, checking scoreboard")
    try:
        events = await scoreboard.fetch_events(
            season_year=config.season_year,
            season_type=config.season_type,
            week=config.week,
        )
    except (httpx.HTTPError, ValueError) as e:
        logger.warning(f"⚠️ Scoreboard unavailable, games stay unresolved: {e}")
        return resolution

    return resolve_outcomes(games, events)
