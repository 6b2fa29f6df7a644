"""
Dependencies de FastAPI para inyeccion de BD, clientes externos y
proteccion de los endpoints de jobs
"""

from typing import Annotated, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.config import Settings, get_settings
from app.database import get_database
from app.services.notification_service import NotificationService
from app.services.scoreboard_client import ScoreboardClient

# auto_error=False: si no hay job_secret configurado, el header es opcional
security = HTTPBearer(auto_error=False)


async def verify_job_secret(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    settings: Annotated[Settings, Depends(get_settings)]
) -> None:
    """
    Dependency que valida el secreto del scheduler.

    Solo se exige cuando JOB_SECRET esta configurado.
    """
    if not settings.job_secret:
        return

    if credentials is None or credentials.credentials != settings.job_secret:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )


def get_scoreboard_client(
    settings: Annotated[Settings, Depends(get_settings)]
) -> ScoreboardClient:
    return ScoreboardClient(settings.scoreboard_url, timeout=settings.scoreboard_timeout)


def get_notification_service(
    settings: Annotated[Settings, Depends(get_settings)]
) -> NotificationService:
    return NotificationService(settings.notify_url, settings.notification_secret)


# Alias de tipos para que se vea mas limpio en los endpoints
Database = Annotated[AsyncIOMotorDatabase, Depends(get_database)]
AppSettings = Annotated[Settings, Depends(get_settings)]
Scoreboard = Annotated[ScoreboardClient, Depends(get_scoreboard_client)]
Notifier = Annotated[NotificationService, Depends(get_notification_service)]
JobAuth = Depends(verify_job_secret)
