"""
Recap Service - Weekly superlatives and history snapshots.

Extremes include every tied entry, not just the first one found.
"""

from datetime import datetime, timezone
from typing import Optional

from app.models.leaderboard import LeaderboardEntry
from app.models.recap import (
    GradedPickSummary,
    HistorySnapshot,
    RecapSummary,
    UserWeeklyScore,
    WeeklyRecap,
)
from app.models.season import SeasonConfig
from app.services.outcome_resolver import OutcomeResolution


def build_summary(
    entries: list[LeaderboardEntry],
    user_scores: dict[str, int],
    scores: list[UserWeeklyScore]
) -> RecapSummary:
    """
    Compute score and rank-movement extremes over the users who played.

    An empty week yields zeros and empty lists.
    """
    played = [e for e in entries if e.uid in user_scores]
    if not played:
        return RecapSummary(scores=scores)

    week_points = [e.last_week_points for e in played]
    highest, lowest = max(week_points), min(week_points)

    changes = [e.position_change for e in played]
    max_rise, max_drop = max(changes), min(changes)

    return RecapSummary(
        highest_score=highest,
        lowest_score=lowest,
        top_scorers=[e for e in played if e.last_week_points == highest],
        lowest_scorers=[e for e in played if e.last_week_points == lowest],
        max_rise=max_rise,
        max_drop=max_drop,
        biggest_risers=[e for e in played if e.position_change == max_rise],
        biggest_fallers=[e for e in played if e.position_change == max_drop],
        scores=scores,
    )


def build_recap(
    config: SeasonConfig,
    summary: RecapSummary,
    created_at: Optional[datetime] = None
) -> WeeklyRecap:
    return WeeklyRecap(
        _id=config.week_key,
        season_year=config.season_year,
        season_type=config.season_type.slug,
        week=config.week,
        created_at=created_at or datetime.now(timezone.utc),
        **summary.model_dump(),
    )


def build_history(
    config: SeasonConfig,
    summary: RecapSummary,
    leaderboard: list[LeaderboardEntry],
    picks: list[GradedPickSummary],
    resolution: OutcomeResolution,
    created_at: Optional[datetime] = None
) -> HistorySnapshot:
    return HistorySnapshot(
        _id=config.week_key,
        season_year=config.season_year,
        season_type=config.season_type.slug,
        week=config.week,
        leaderboard=leaderboard,
        recap=summary,
        picks=picks,
        winners=dict(resolution.winners),
        ties=sorted(resolution.ties),
        created_at=created_at or datetime.now(timezone.utc),
    )
