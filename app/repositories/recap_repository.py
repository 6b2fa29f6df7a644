"""
RecapRepository - weekly_recap e history

Ambos documentos se escriben con replace_one(upsert=True) por week key:
re-correr la misma semana sobrescribe, nunca agrega.
"""

from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from app.models.recap import HistorySnapshot, WeeklyRecap


class RecapRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.recaps = db["weekly_recap"]
        self.history = db["history"]

    async def save_recap(self, recap: WeeklyRecap) -> None:
        doc = recap.model_dump(by_alias=True)
        await self.recaps.replace_one({"_id": recap.id}, doc, upsert=True)

    async def save_history(self, snapshot: HistorySnapshot) -> None:
        doc = snapshot.model_dump(by_alias=True)
        await self.history.replace_one({"_id": snapshot.id}, doc, upsert=True)

    async def get_recap(self, week_key: str) -> Optional[WeeklyRecap]:
        doc = await self.recaps.find_one({"_id": week_key})
        return WeeklyRecap(**doc) if doc else None

    async def get_history(self, week_key: str) -> Optional[HistorySnapshot]:
        doc = await self.history.find_one({"_id": week_key})
        return HistorySnapshot(**doc) if doc else None
