from .season import SeasonType, SeasonConfig, WagerSettings, WagerMode, TieBehavior
from .game import FeedResult, Game, GameStatus, TeamRef
from .pick import Pick, Prediction, PredictionOutcome, Wager, WagerOutcome, WagerResult
from .leaderboard import LeaderboardEntry, LeaderboardType, LifetimeEntry
from .recap import WeeklyRecap, HistorySnapshot, RecapSummary, UserWeeklyScore, GradedPickSummary

__all__ = [
    "SeasonType",
    "SeasonConfig",
    "WagerSettings",
    "WagerMode",
    "TieBehavior",
    "Game",
    "GameStatus",
    "TeamRef",
    "FeedResult",
    "Pick",
    "Prediction",
    "PredictionOutcome",
    "Wager",
    "WagerOutcome",
    "WagerResult",
    "LeaderboardEntry",
    "LeaderboardType",
    "LifetimeEntry",
    "WeeklyRecap",
    "HistorySnapshot",
    "RecapSummary",
    "UserWeeklyScore",
    "GradedPickSummary",
]
