"""
Controlador de salud - Estado del servicio y de sus colaboradores
"""

from fastapi import APIRouter
from pydantic import BaseModel

from app.core.dependencies import AppSettings
from app.database import Database


router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    status: str
    database: str
    notifications: str
    strict_all_final: bool


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: AppSettings):
    """
    Estado de la API: conexión a la BD, si hay dispatcher de notificaciones
    y si el cálculo semanal corre en modo estricto.
    """
    return HealthResponse(
        status="ok",
        database="connected" if Database.db is not None else "disconnected",
        notifications="configured" if settings.notify_url else "disabled",
        strict_all_final=settings.strict_all_final
    )
