from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel

from app.models.season import SeasonType


class LeaderboardType(str, Enum):
    """Cada instancia de leaderboard vive en su propia colección"""

    REGULAR = "leaderboard"
    POSTSEASON = "leaderboard_postseason"
    ALL_TIME = "leaderboard_all_time"

    @classmethod
    def for_season(cls, season_type: SeasonType) -> "LeaderboardType":
        return cls.POSTSEASON if season_type is SeasonType.POSTSEASON else cls.REGULAR


class LeaderboardEntry(BaseModel):
    """Entrada en una tabla de clasificación (una por usuario por instancia)"""

    uid: str
    display_name: str = ""
    avatar_ref: Optional[str] = None

    total_points: int = 0
    last_week_points: int = 0

    current_rank: int = 0
    previous_rank: int = 0
    position_change: int = 0  # previous_rank - current_rank (positivo = subió)

    # Semana (week key) del último aporte, para que re-correr la misma semana no sume doble
    scored_week: Optional[str] = None
    season_reset_at: Optional[datetime] = None

    class Config:
        populate_by_name = True


class LifetimeEntry(BaseModel):
    """Acumulado histórico de un usuario entre temporadas"""

    uid: str
    display_name: str = ""
    avatar_ref: Optional[str] = None

    lifetime_total: int = 0
    seasons_played: int = 0
    last_season_points: int = 0

    last_folded_run: Optional[str] = None  # Prefijo del rollover que sumó la última temporada
    updated_at: Optional[datetime] = None

    class Config:
        populate_by_name = True
