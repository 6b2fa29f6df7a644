from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.models.leaderboard import LeaderboardEntry
from app.models.pick import PredictionOutcome, WagerResult


class UserWeeklyScore(BaseModel):
    uid: str
    full_name: str = ""
    score: int
    wager_applied: int = 0


class GradedPickSummary(BaseModel):
    """Resumen de un pick calificado, para auditoría en history"""

    id: str
    user_id: str
    full_name: str = ""
    graded: dict[str, PredictionOutcome] = Field(default_factory=dict)
    wager_result: Optional[WagerResult] = None


class RecapSummary(BaseModel):
    highest_score: int = 0
    lowest_score: int = 0
    top_scorers: list[LeaderboardEntry] = Field(default_factory=list)
    lowest_scorers: list[LeaderboardEntry] = Field(default_factory=list)

    max_rise: int = 0
    max_drop: int = 0
    biggest_risers: list[LeaderboardEntry] = Field(default_factory=list)
    biggest_fallers: list[LeaderboardEntry] = Field(default_factory=list)

    scores: list[UserWeeklyScore] = Field(default_factory=list)


class WeeklyRecap(RecapSummary):
    """Documento `weekly_recap/{week_key}`"""

    id: str = Field(..., alias="_id")
    season_year: int
    season_type: str  # slug: regular | postseason
    week: int
    created_at: datetime

    class Config:
        populate_by_name = True


class HistorySnapshot(BaseModel):
    """Documento `history/{week_key}`: recap + estado completo para auditoría"""

    id: str = Field(..., alias="_id")
    season_year: int
    season_type: str
    week: int

    leaderboard: list[LeaderboardEntry]
    recap: RecapSummary
    picks: list[GradedPickSummary]

    winners: dict[str, str] = Field(default_factory=dict)
    ties: list[str] = Field(default_factory=list)

    created_at: datetime

    class Config:
        populate_by_name = True
