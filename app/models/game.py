from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from app.models.season import SeasonType, normalize_season_type


class GameStatus(str, Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    FINAL = "final"


_FEED_STATUS_MAP = {
    "status_final": GameStatus.FINAL,
    "status_final_overtime": GameStatus.FINAL,
    "final": GameStatus.FINAL,
    "completed": GameStatus.FINAL,
    "status_in_progress": GameStatus.IN_PROGRESS,
    "status_halftime": GameStatus.IN_PROGRESS,
    "status_end_period": GameStatus.IN_PROGRESS,
    "in_progress": GameStatus.IN_PROGRESS,
}


def normalize_game_status(value) -> GameStatus:
    """Convierte nombres de estado del feed ("STATUS_FINAL", ...) al enum"""
    if isinstance(value, GameStatus):
        return value
    if not value:
        return GameStatus.SCHEDULED
    return _FEED_STATUS_MAP.get(str(value).strip().lower(), GameStatus.SCHEDULED)


class TeamRef(BaseModel):
    """Equipo tal como se guardó para un partido"""

    id: str
    name: str = ""
    abbreviation: str = ""
    logo: str = ""
    record: str = ""
    score: Optional[int] = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_string(cls, value):
        return str(value)


class Game(BaseModel):
    """Partido de una semana. Lo crea/actualiza la ingesta del feed"""

    id: str  # ID externo del evento
    season_year: int
    season_type: SeasonType
    week: int

    home_team: TeamRef
    away_team: TeamRef

    kickoff: Optional[datetime] = None
    status: GameStatus = GameStatus.SCHEDULED

    winner_id: Optional[str] = None
    has_result: bool = False

    last_updated: Optional[datetime] = Field(default=None)

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_string(cls, value):
        return str(value)

    @field_validator("season_type", mode="before")
    @classmethod
    def _normalize_season_type(cls, value):
        return normalize_season_type(value)

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, value):
        return normalize_game_status(value)

    @field_validator("winner_id", mode="before")
    @classmethod
    def _winner_as_string(cls, value):
        return str(value) if value not in (None, "") else None

    @property
    def is_stored_tie(self) -> bool:
        """Final, sin ganador y con marcador igualado"""
        home, away = self.home_team.score, self.away_team.score
        return (
            self.status is GameStatus.FINAL
            and self.winner_id is None
            and home is not None
            and away is not None
            and home == away
        )

    class Config:
        populate_by_name = True


class FeedResult(BaseModel):
    """Resultado final tomado del feed, para guardarlo en el partido"""

    winner_id: Optional[str] = None
    home_score: Optional[int] = None
    away_score: Optional[int] = None
