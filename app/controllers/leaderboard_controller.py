"""
Controlador de leaderboards - Endpoints de clasificación

Las tablas y recaps los generan los jobs semanales.
Este controlador solo sirve lo que ya está calculado.
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel

from app.core.dependencies import Database
from app.models.leaderboard import LeaderboardType
from app.models.recap import WeeklyRecap
from app.models.season import make_week_key, normalize_season_type
from app.repositories.leaderboard_repository import LeaderboardRepository
from app.repositories.recap_repository import RecapRepository


router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])

BOARDS = {
    "regular": LeaderboardType.REGULAR,
    "postseason": LeaderboardType.POSTSEASON,
    "all-time": LeaderboardType.ALL_TIME,
}


class LeaderboardEntryResponse(BaseModel):
    """Entrada del leaderboard (usuario y puntos)."""
    rank: Optional[int] = None
    uid: str
    display_name: str
    avatar_ref: Optional[str] = None
    total_points: int
    last_week_points: int
    position_change: int


class LeaderboardResponse(BaseModel):
    board: str
    entries: list[LeaderboardEntryResponse]


@router.get("/{board}", response_model=LeaderboardResponse)
async def get_leaderboard(
    board: str,
    db: Database,
    limit: int = Query(100, ge=1, le=500)
):
    """
    Obtener un leaderboard: regular, postseason o all-time.

    El all-time no guarda posiciones: se devuelve ordenado, sin rank.
    """
    board_type = BOARDS.get(board)
    if board_type is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Leaderboard {board} no encontrado"
        )

    entries = await LeaderboardRepository(db, board_type).get_all()
    ranked = board_type is not LeaderboardType.ALL_TIME

    return LeaderboardResponse(
        board=board,
        entries=[
            LeaderboardEntryResponse(
                rank=e.current_rank if ranked else None,
                uid=e.uid,
                display_name=e.display_name,
                avatar_ref=e.avatar_ref,
                total_points=e.total_points,
                last_week_points=e.last_week_points,
                position_change=e.position_change if ranked else 0
            )
            for e in entries[:limit]
        ]
    )


@router.get("/recap/{season_year}/{season_type}/{week}", response_model=WeeklyRecap)
async def get_weekly_recap(
    season_year: int,
    season_type: str,
    week: int,
    db: Database
):
    """
    Obtener el recap de una semana (mejores/peores puntajes, subidas y bajadas).
    """
    try:
        week_key = make_week_key(season_year, normalize_season_type(season_type), week)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    recap = await RecapRepository(db).get_recap(week_key)
    if not recap:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Recap {week_key} no encontrado"
        )
    return recap
