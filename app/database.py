"""
🔌 Database Connection Setup - MongoDB

Configuración centralizada para conectar a MongoDB
"""

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from app.core.config import get_settings

logger = logging.getLogger(__name__)


class Database:
    """Singleton para la conexión a MongoDB"""

    client: Optional[AsyncIOMotorClient] = None
    db: Optional[AsyncIOMotorDatabase] = None

    @classmethod
    async def connect(cls):
        """Conecta a MongoDB"""
        if cls.client is None:
            settings = get_settings()

            cls.client = AsyncIOMotorClient(
                settings.mongodb_uri,
                maxPoolSize=10,
                minPoolSize=2,
            )
            cls.db = cls.client[settings.mongodb_db_name]

            # Test de conexión
            await cls.client.admin.command("ping")
            logger.info(f"✅ Connected to MongoDB: {settings.mongodb_db_name}")

    @classmethod
    async def disconnect(cls):
        """Cierra la conexión"""
        if cls.client is not None:
            cls.client.close()
            cls.client = None
            cls.db = None
            logger.info("❌ Disconnected from MongoDB")

    @classmethod
    def get_db(cls) -> AsyncIOMotorDatabase:
        """Retorna la instancia de la base de datos"""
        if cls.db is None:
            raise RuntimeError("Database not connected. Call Database.connect() first.")
        return cls.db


# ============================================
# 🎯 DEPENDENCY para FastAPI
# ============================================

async def get_database() -> AsyncIOMotorDatabase:
    """
    FastAPI dependency para inyectar la DB

    Uso:
        @router.get("/leaderboard/{board}")
        async def get_leaderboard(board: str, db: Database):
            repo = LeaderboardRepository(db, LeaderboardType.REGULAR)
            return await repo.get_all()
    """
    return Database.get_db()


# ============================================
# 🏗️ CREAR ÍNDICES (run once al deployment)
# ============================================

async def create_indexes(db: Optional[AsyncIOMotorDatabase] = None):
    """
    Crea los índices que usan los jobs semanales

    Llamar una vez al hacer deploy o en un script de inicialización
    """
    db = db if db is not None else Database.get_db()

    week_index = [("season_year", 1), ("season_type", 1), ("week", 1)]

    await db.games.create_index(week_index)
    await db.picks.create_index(week_index)
    await db.picks.create_index([("user_id", 1), ("season_year", 1), ("week", 1)])

    for name in ("leaderboard", "leaderboard_postseason", "leaderboard_all_time"):
        await db[name].create_index([("total_points", -1)])

    logger.info("✅ Indexes created successfully")
