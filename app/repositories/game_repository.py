"""
🏈 GameRepository - Partidos de cada semana

Los documentos los crea la ingesta del scoreboard (fuera de este servicio).
IDs compuestos: {season_year}-{slug}-week{week}-{game_id}
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import UpdateOne

from app.models.game import FeedResult, Game, GameStatus
from app.models.season import SeasonType, make_week_key, normalize_season_type
from app.repositories.batching import DEFAULT_BATCH_SIZE, modified_count, write_in_batches

logger = logging.getLogger(__name__)


def make_game_doc_id(season_year: int, season_type: SeasonType, week: int, game_id: str) -> str:
    return f"{make_week_key(season_year, season_type, week)}-{game_id}"


class GameRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["games"]

    # ============================================
    # 📌 READ
    # ============================================

    async def get_games_for_week(
        self,
        season_year: int,
        season_type: SeasonType,
        week: int
    ) -> list[Game]:
        """Obtiene todos los partidos de una semana"""
        season_type = normalize_season_type(season_type)
        cursor = self.collection.find({
            "season_year": season_year,
            "season_type": {"$in": SeasonType.stored_variants(season_type)},
            "week": week,
        })
        docs = await cursor.to_list(length=None)
        return [self._to_game(doc) for doc in docs]

    # ============================================
    # 📌 WRITE
    # ============================================

    async def save_feed_results(
        self,
        season_year: int,
        season_type: SeasonType,
        week: int,
        results: dict[str, FeedResult],
        batch_size: int = DEFAULT_BATCH_SIZE,
        updated_at: Optional[datetime] = None
    ) -> int:
        """
        Guarda en cada partido el resultado final que vino del feed

        Después de esto el partido queda resuelto desde la BD y el feed ya
        no se vuelve a consultar para él. Un empate queda sin ganador y con
        el marcador igualado.
        """
        if not results:
            return 0

        updated_at = updated_at or datetime.now(timezone.utc)
        operations = []
        for game_id, result in results.items():
            fields = {
                "winner_id": result.winner_id,
                "has_result": result.winner_id is not None,
                "status": GameStatus.FINAL.value,
                "last_updated": updated_at,
            }
            if result.home_score is not None:
                fields["home_team.score"] = result.home_score
            if result.away_score is not None:
                fields["away_team.score"] = result.away_score

            operations.append(UpdateOne(
                {"_id": make_game_doc_id(season_year, season_type, week, game_id)},
                {"$set": fields}
            ))

        results_written = await write_in_batches(self.collection, operations, batch_size)
        logger.info(f"💾 Stored feed results for {len(operations)} games")
        return modified_count(results_written)

    @staticmethod
    def _to_game(doc: dict) -> Game:
        doc = dict(doc)
        doc_id = doc.pop("_id", "")
        # Documentos viejos pueden no tener `id`: se usa el sufijo del _id
        doc.setdefault("id", str(doc_id).split("-")[-1])
        return Game(**doc)
