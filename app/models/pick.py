from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from app.models.season import SeasonType, make_week_key, normalize_season_type


class PredictionOutcome(str, Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    PUSH = "push"  # Empate: no suma ni resta
    UNGRADED = "ungraded"

    @property
    def is_correct(self) -> Optional[bool]:
        """Valor legacy `is_correct` (None para push y sin calificar)"""
        if self is PredictionOutcome.CORRECT:
            return True
        if self is PredictionOutcome.INCORRECT:
            return False
        return None


class Prediction(BaseModel):
    """Elección de un usuario para un partido"""

    team_id: str
    is_correct: Optional[bool] = None
    outcome: PredictionOutcome = PredictionOutcome.UNGRADED

    @field_validator("team_id", mode="before")
    @classmethod
    def _team_as_string(cls, value):
        return str(value)


class WagerOutcome(str, Enum):
    WIN = "win"
    LOSE = "lose"
    PUSH = "push"
    ZERO = "zero"


class Wager(BaseModel):
    """Apuesta de puntos sobre el Game of the Week"""

    game_id: str
    team_id: str
    points: int
    placed_at: Optional[datetime] = None

    @field_validator("game_id", "team_id", mode="before")
    @classmethod
    def _as_string(cls, value):
        return str(value)


class WagerResult(BaseModel):
    outcome: WagerOutcome
    applied: int
    graded_at: Optional[datetime] = None


class Pick(BaseModel):
    """Picks de un usuario para una semana completa (uno por usuario por semana)"""

    id: str = Field(..., alias="_id")  # {week_key}-{user_id}

    user_id: str
    full_name: str = ""

    season_year: int
    season_type: SeasonType
    week: int

    predictions: dict[str, Prediction] = Field(default_factory=dict)

    wager: Optional[Wager] = None
    wager_result: Optional[WagerResult] = None

    @field_validator("season_type", mode="before")
    @classmethod
    def _normalize_season_type(cls, value):
        return normalize_season_type(value)

    @field_validator("predictions", mode="before")
    @classmethod
    def _drop_empty_predictions(cls, value):
        if not value:
            return {}
        return {str(game_id): pred for game_id, pred in value.items() if pred}

    @property
    def week_key(self) -> str:
        return make_week_key(self.season_year, self.season_type, self.week)

    class Config:
        populate_by_name = True


def make_pick_id(season_year: int, season_type: SeasonType, week: int, user_id: str) -> str:
    return f"{make_week_key(season_year, season_type, week)}-{user_id}"
