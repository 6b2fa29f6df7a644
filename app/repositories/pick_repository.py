"""
🎯 PickRepository - Picks semanales de usuarios

Un documento por usuario por semana.
IDs compuestos: {season_year}-{slug}-week{week}-{user_id}
"""

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import UpdateOne

from app.models.pick import Pick, make_pick_id
from app.models.season import SeasonType, normalize_season_type
from app.repositories.batching import DEFAULT_BATCH_SIZE, modified_count, write_in_batches

logger = logging.getLogger(__name__)


class PickRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["picks"]

    # ============================================
    # 📌 READ
    # ============================================

    async def get_picks_for_week(
        self,
        season_year: int,
        season_type: SeasonType,
        week: int
    ) -> list[Pick]:
        """Obtiene TODOS los picks de una semana (todos los usuarios)"""
        season_type = normalize_season_type(season_type)
        cursor = self.collection.find({
            "season_year": season_year,
            "season_type": {"$in": SeasonType.stored_variants(season_type)},
            "week": week,
        })
        docs = await cursor.to_list(length=None)
        return [Pick(**doc) for doc in docs]

    async def get_by_id(self, pick_id: str) -> Optional[Pick]:
        doc = await self.collection.find_one({"_id": pick_id})
        return Pick(**doc) if doc else None

    # ============================================
    # 📌 UPSERT (lado del usuario)
    # ============================================

    async def save_prediction(
        self,
        user_id: str,
        season_year: int,
        season_type: SeasonType,
        week: int,
        game_id: str,
        team_id: str,
        full_name: str = ""
    ) -> str:
        """
        Guarda la predicción de UN partido sin tocar las demás

        Usa paths con punto ("predictions.<game_id>") así el merge nunca
        pisa otras predicciones del mismo documento.
        """
        season_type = normalize_season_type(season_type)
        pick_id = make_pick_id(season_year, season_type, week, user_id)

        await self.collection.update_one(
            {"_id": pick_id},
            {
                "$set": {
                    "user_id": user_id,
                    "season_year": season_year,
                    "season_type": season_type.value,
                    "week": week,
                    f"predictions.{game_id}.team_id": str(team_id),
                    f"predictions.{game_id}.is_correct": None,
                    f"predictions.{game_id}.outcome": "ungraded",
                },
                "$setOnInsert": {"full_name": full_name},
            },
            upsert=True
        )
        return pick_id

    # ============================================
    # 📌 UPDATE (calificación)
    # ============================================

    async def apply_grading(
        self,
        updates: list[tuple[str, dict]],
        batch_size: int = DEFAULT_BATCH_SIZE
    ) -> int:
        """
        🔥 Escribe los campos de calificación en batches acotados

        `updates` es una lista de (pick_id, {"predictions.X.is_correct": ..., ...}).
        Los batches se mandan en orden; si uno falla, la excepción sube y el
        job se puede volver a correr (las escrituras son idempotentes).
        """
        if not updates:
            return 0

        operations = [
            UpdateOne({"_id": pick_id}, {"$set": fields})
            for pick_id, fields in updates
        ]
        results = await write_in_batches(self.collection, operations, batch_size)
        logger.debug(f"💾 Flushed {len(operations)} pick updates in {len(results)} batches")

        return modified_count(results)
