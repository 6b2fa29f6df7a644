from .config_repository import ConfigRepository
from .game_repository import GameRepository
from .pick_repository import PickRepository
from .leaderboard_repository import LeaderboardRepository, LifetimeRepository
from .recap_repository import RecapRepository

__all__ = [
    "ConfigRepository",
    "GameRepository",
    "PickRepository",
    "LeaderboardRepository",
    "LifetimeRepository",
    "RecapRepository",
]
