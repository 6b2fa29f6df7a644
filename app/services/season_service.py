"""
SeasonService - Cierre de temporada (rollover)

1. Archiva games, picks y weekly_recap en colecciones "<prefix>_<nombre>"
   y borra los originales.
2. Suma el all-time de cada usuario al lifetime_leaderboard.
3. Resetea los tres leaderboards dejando solo la identidad.

No es atómico entre colecciones: si falla a mitad, se vuelve a correr.
Un rollover sin terminar (config/last_archive con completed=False) se
retoma con el mismo prefijo; la suma al lifetime se marca por prefijo,
así ningún usuario suma la misma temporada dos veces.
"""

import logging
import time
from datetime import datetime, timezone

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReplaceOne

from app.models.leaderboard import LeaderboardEntry, LeaderboardType
from app.repositories.batching import DEFAULT_BATCH_SIZE, chunked, write_in_batches
from app.repositories.config_repository import ConfigRepository
from app.repositories.leaderboard_repository import LeaderboardRepository, LifetimeRepository

logger = logging.getLogger(__name__)

COLLECTIONS_TO_ARCHIVE = ("games", "picks", "weekly_recap")
# El all-time va primero: es la fuente de la suma al lifetime
LEADERBOARDS_TO_RESET = (
    LeaderboardType.ALL_TIME,
    LeaderboardType.REGULAR,
    LeaderboardType.POSTSEASON,
)


def make_archive_prefix(now_ms: int | None = None) -> str:
    return f"archive_{now_ms if now_ms is not None else int(time.time() * 1000)}"


def needs_lifetime_fold(entry: LeaderboardEntry) -> bool:
    """Una entrada ya reseteada y sin puntos desde entonces no se vuelve a sumar"""
    return not (entry.season_reset_at is not None and entry.scored_week is None)


class SeasonService:
    def __init__(self, db: AsyncIOMotorDatabase, batch_size: int = DEFAULT_BATCH_SIZE):
        self.db = db
        self.batch_size = batch_size
        self.config_repo = ConfigRepository(db)
        self.lifetime_repo = LifetimeRepository(db, batch_size)

    async def archive_collection(self, name: str, prefix: str) -> int:
        """
        Copia todos los documentos de `name` a `<prefix>_<name>` y borra los originales

        La copia es por _id con upsert: retomar un archivado a medias no
        duplica documentos.
        """
        source = self.db[name]
        docs = await source.find({}).to_list(length=None)
        if not docs:
            logger.info(f"⚠️ No data in {name} to archive.")
            return 0

        target = self.db[f"{prefix}_{name}"]
        for batch in chunked(docs, self.batch_size):
            await write_in_batches(
                target,
                [ReplaceOne({"_id": doc["_id"]}, doc, upsert=True) for doc in batch],
                self.batch_size
            )
            await source.delete_many({"_id": {"$in": [doc["_id"] for doc in batch]}})

        logger.info(f"✅ Archived and cleared {name}: {len(docs)} docs")
        return len(docs)

    async def _start_or_resume(self) -> tuple[str, datetime]:
        last = await self.config_repo.get_last_archive()
        if last and last.get("completed") is False:
            logger.info(f"↩️ Resuming unfinished rollover {last['prefix']}")
            return last["prefix"], last["created_at"]

        now = datetime.now(timezone.utc)
        prefix = make_archive_prefix()
        await self.config_repo.set_last_archive(prefix, now)
        return prefix, now

    async def reset_for_new_season(self) -> dict:
        """Archiva la temporada y deja todo listo para la siguiente"""
        prefix, now = await self._start_or_resume()

        logger.info("📦 Archiving & clearing old data...")
        archived = {}
        for name in COLLECTIONS_TO_ARCHIVE:
            archived[name] = await self.archive_collection(name, prefix)

        logger.info("🧮 Updating lifetime leaderboard...")
        all_time = await LeaderboardRepository(
            self.db, LeaderboardType.ALL_TIME, self.batch_size
        ).get_all()
        folded = await self.lifetime_repo.fold_season(
            [entry for entry in all_time if needs_lifetime_fold(entry)],
            run_id=prefix,
            updated_at=now
        )

        logger.info("🔄 Resetting leaderboards...")
        reset = {}
        for board in LEADERBOARDS_TO_RESET:
            reset[board.value] = await LeaderboardRepository(
                self.db, board, self.batch_size
            ).reset_all(reset_at=now)

        await self.config_repo.complete_last_archive(prefix)
        logger.info("🎉 All data reset and archived. Ready for a new season!")
        return {
            "success": True,
            "archive_prefix": prefix,
            "archived": archived,
            "lifetime_updated": folded,
            "reset": reset,
        }
