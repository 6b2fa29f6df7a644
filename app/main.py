"""
Entry point de la API
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import get_settings
from app.database import Database, create_indexes

from app.controllers.jobs_controller import router as jobs_router
from app.controllers.leaderboard_controller import router as leaderboard_router
from app.controllers.health_controller import router as health_router

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Parse CORS origins
CORS_ORIGINS = [origin.strip() for origin in settings.cors_origins.split(",")]


@asynccontextmanager
async def lifespan(app: FastAPI):
    await Database.connect()
    await create_indexes()
    yield
    await Database.disconnect()

# Creo la app
app = FastAPI(
    title="NFL Pick'em API",
    description="Backend de la app familiar de pick'em de la NFL: calificación semanal, leaderboards y rollover de temporada",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["GET"],
    allow_headers=["Authorization", "Content-Type"],
)

# Agrego todos los routers de los controllers al app
app.include_router(health_router)
app.include_router(jobs_router)
app.include_router(leaderboard_router)


@app.get("/")
async def root():
    # Endpoint raíz, sirve para verificar que la API está levantada
    return {
        "name": "NFL Pick'em API",
        "version": "1.0.0",
        "docs": "/docs"  # Link a la documentación interactiva de Swagger
    }
