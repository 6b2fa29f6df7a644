from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class SeasonType(str, Enum):
    REGULAR = "Regular"
    POSTSEASON = "Postseason"

    @property
    def slug(self) -> str:
        return self.value.lower()

    @property
    def feed_code(self) -> int:
        """Código de tipo de temporada en el scoreboard (2 = regular, 3 = postseason)"""
        return 3 if self is SeasonType.POSTSEASON else 2

    @classmethod
    def stored_variants(cls, season_type: "SeasonType") -> list[str]:
        """Todas las formas en que documentos viejos pueden tener guardado el tipo"""
        if season_type is cls.POSTSEASON:
            return ["Postseason", "postseason", "POSTSEASON", "Post", "post", "Playoffs", "playoffs"]
        return ["Regular", "regular", "REGULAR", "Regular Season", "regular season", "REG", "reg"]


_POSTSEASON_ALIASES = {"postseason", "post", "post season", "playoffs", "playoff", "3"}
_REGULAR_ALIASES = {"regular", "regular season", "reg", "2"}


def normalize_season_type(value: Any) -> SeasonType:
    """
    Única función de normalización para el tipo de temporada.

    Acepta "Regular", "regular", "Regular Season", "REG", 2, "Postseason",
    "post", "Playoffs", 3...
    """
    if isinstance(value, SeasonType):
        return value

    key = str(value).strip().lower()
    if key in _POSTSEASON_ALIASES:
        return SeasonType.POSTSEASON
    if key in _REGULAR_ALIASES:
        return SeasonType.REGULAR

    raise ValueError(f"Unknown season type: {value!r}")


def make_week_key(season_year: int, season_type: SeasonType, week: int) -> str:
    """Clave de la semana: "2025-regular-week3" """
    return f"{season_year}-{normalize_season_type(season_type).slug}-week{week}"


class WagerMode(str, Enum):
    WIN_LOSE = "win_lose"  # Gana +N / pierde -N
    WIN_ZERO = "win_zero"  # Gana +N / pierde 0


class TieBehavior(str, Enum):
    PUSH = "push"
    WRONG = "wrong"
    ZERO = "zero"


class WagerSettings(BaseModel):
    enabled: bool = False
    max_points: int = 0
    mode: WagerMode = WagerMode.WIN_LOSE
    tie_behavior: TieBehavior = TieBehavior.PUSH


class SeasonConfig(BaseModel):
    """Documento singleton `config/config`, lo edita solo el admin"""

    season_year: int
    season_type: SeasonType
    week: int

    deadline: Optional[datetime] = None
    recap_week: int = 0
    game_of_the_week_id: Optional[str] = None

    wager: WagerSettings = Field(default_factory=WagerSettings)

    @field_validator("season_type", mode="before")
    @classmethod
    def _normalize_season_type(cls, value):
        return normalize_season_type(value)

    @field_validator("game_of_the_week_id", mode="before")
    @classmethod
    def _gotw_as_string(cls, value):
        return str(value) if value not in (None, "") else None

    @property
    def week_key(self) -> str:
        return make_week_key(self.season_year, self.season_type, self.week)

    class Config:
        populate_by_name = True
