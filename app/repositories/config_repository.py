"""
ConfigRepository - Lectura del documento singleton `config/config`

El documento lo escribe solo el admin. Los jobs lo leen una vez y
pasan el SeasonConfig explícitamente a cada función del core.
"""

from datetime import datetime, timezone
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import ValidationError

from app.models.season import SeasonConfig

CONFIG_DOC_ID = "config"
LAST_ARCHIVE_DOC_ID = "last_archive"


class ConfigError(Exception):
    """Base: la configuración es precondición de cualquier job"""
    pass


class ConfigNotFoundError(ConfigError):
    """No existe el documento config/config"""
    pass


class InvalidConfigError(ConfigError):
    """El documento existe pero le faltan campos o son inválidos"""
    pass


class ConfigRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["config"]

    async def get_config(self) -> SeasonConfig:
        """
        Obtiene la configuración de la temporada

        Lanza ConfigNotFoundError / InvalidConfigError si no se puede usar
        """
        doc = await self.collection.find_one({"_id": CONFIG_DOC_ID})
        if not doc:
            raise ConfigNotFoundError("Config not found")

        doc.pop("_id", None)
        try:
            return SeasonConfig(**doc)
        except ValidationError as e:
            raise InvalidConfigError(f"Config is missing required fields: {e}") from e

    async def set_last_archive(self, prefix: str, created_at: Optional[datetime] = None) -> None:
        """Registra el prefijo del rollover en curso (completed=False hasta que termine)"""
        await self.collection.replace_one(
            {"_id": LAST_ARCHIVE_DOC_ID},
            {
                "_id": LAST_ARCHIVE_DOC_ID,
                "prefix": prefix,
                "created_at": created_at or datetime.now(timezone.utc),
                "completed": False,
            },
            upsert=True
        )

    async def complete_last_archive(self, prefix: str) -> None:
        await self.collection.update_one(
            {"_id": LAST_ARCHIVE_DOC_ID, "prefix": prefix},
            {"$set": {"completed": True}}
        )

    async def get_last_archive(self) -> Optional[dict]:
        return await self.collection.find_one({"_id": LAST_ARCHIVE_DOC_ID})
