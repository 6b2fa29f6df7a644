"""
Controlador de jobs - Disparadores HTTP para el scheduler

Cada endpoint es un GET sin argumentos que devuelve
{success, message?, ...conteos}. "No está listo" (success: false con
status 200) es un no-op deliberado; los errores de precondición
(config faltante) devuelven 500.
"""

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from app.core.dependencies import AppSettings, Database, JobAuth, Notifier, Scoreboard
from app.repositories.config_repository import ConfigError, ConfigRepository
from app.services.season_service import SeasonService
from app.services.weekly_results_service import WeeklyResultsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/jobs", tags=["jobs"], dependencies=[JobAuth])


def _precondition_failed(job: str, error: Exception) -> JSONResponse:
    logger.error(f"❌ Error running {job}: {error}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "error": str(error)}
    )


@router.get("/calculate-weekly-results")
async def calculate_weekly_results(
    db: Database,
    settings: AppSettings,
    scoreboard: Scoreboard,
    notifier: Notifier
):
    """
    Calificar la semana configurada y recalcular leaderboards y recap.

    Si todo sale bien, se avisa a los suscriptores (si el aviso falla,
    el job igual cuenta como exitoso).
    """
    service = WeeklyResultsService(
        db,
        scoreboard=scoreboard,
        strict_all_final=settings.strict_all_final,
        batch_size=settings.write_batch_size
    )

    try:
        config = await ConfigRepository(db).get_config()
        result = await service.calculate_weekly_results(config)
    except ConfigError as e:
        return _precondition_failed("calculateWeeklyResults", e)

    if result["success"]:
        result["notified"] = await notifier.send_results_ready(config)

    return result


@router.get("/update-is-correct")
async def update_is_correct(
    db: Database,
    settings: AppSettings,
    scoreboard: Scoreboard
):
    """
    Marcar aciertos de los partidos ya terminados (sin tocar leaderboards).
    """
    service = WeeklyResultsService(
        db,
        scoreboard=scoreboard,
        strict_all_final=False,
        batch_size=settings.write_batch_size
    )

    try:
        config = await ConfigRepository(db).get_config()
    except ConfigError as e:
        return _precondition_failed("updateIsCorrect", e)

    return await service.update_is_correct(config)


@router.get("/clear-for-new-season")
async def clear_for_new_season(db: Database, settings: AppSettings):
    """
    Archivar la temporada y resetear leaderboards.
    """
    service = SeasonService(db, batch_size=settings.write_batch_size)
    return await service.reset_for_new_season()


@router.get("/send-prediction-reminder")
async def send_prediction_reminder(db: Database, notifier: Notifier):
    """
    Recordatorio de último momento antes del deadline de la semana.
    """
    try:
        config = await ConfigRepository(db).get_config()
    except ConfigError as e:
        return _precondition_failed("sendPredictionReminder", e)

    return await notifier.send_prediction_reminder(config)
