"""
Grading Service - Califica los picks de una semana contra los resultados

Sistema de puntos:
- 1 punto por cada partido acertado
- Empate (push): 0 puntos, is_correct queda en None
- Apuesta del Game of the Week (opcional): +N si gana; -N o 0 si pierde
  según el modo; el empate lo decide `tie_behavior`

Todo aquí es puro (sin BD): recibe SeasonConfig y la resolución de
partidos, y devuelve los puntajes y los `$set` pendientes. El job
decide cuándo y en qué batches escribirlos.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field

from app.models.pick import (
    Pick,
    Prediction,
    PredictionOutcome,
    Wager,
    WagerOutcome,
    WagerResult,
)
from app.models.recap import GradedPickSummary, UserWeeklyScore
from app.models.season import SeasonConfig, TieBehavior, WagerMode, WagerSettings
from app.services.outcome_resolver import OutcomeResolution

logger = logging.getLogger(__name__)


class GradedPick(BaseModel):
    """Resultado de calificar un documento de picks"""

    pick_id: str
    uid: str
    full_name: str = ""
    score: int = 0
    wager_applied: int = 0
    updates: dict = Field(default_factory=dict)  # $set con paths "predictions.X.*"
    summary: GradedPickSummary


class GradingResult(BaseModel):
    user_scores: dict[str, int] = Field(default_factory=dict)
    details: list[UserWeeklyScore] = Field(default_factory=list)
    summaries: list[GradedPickSummary] = Field(default_factory=list)
    updates: list[tuple[str, dict]] = Field(default_factory=list)

    @property
    def graded_predictions(self) -> int:
        return sum(
            1
            for _, fields in self.updates
            for path in fields
            if path.endswith(".outcome")
        )


def grade_prediction(
    game_id: str,
    prediction: Prediction,
    resolution: OutcomeResolution
) -> Optional[PredictionOutcome]:
    """None cuando el partido no está resuelto (no se toca)"""
    if resolution.is_tie(game_id):
        return PredictionOutcome.PUSH

    winner_id = resolution.winner_for(game_id)
    if winner_id is None:
        return None

    if str(prediction.team_id) == str(winner_id):
        return PredictionOutcome.CORRECT
    return PredictionOutcome.INCORRECT


def _wager_points(wager: Wager, settings: WagerSettings) -> int:
    points = max(0, wager.points)
    if settings.max_points > 0:
        points = min(points, settings.max_points)
    return points


def _loss(points: int, mode: WagerMode) -> int:
    return -points if mode is WagerMode.WIN_LOSE else 0


def resolve_wager(
    wager: Optional[Wager],
    resolution: OutcomeResolution,
    config: SeasonConfig,
    graded_at: datetime
) -> Optional[WagerResult]:
    """
    Resuelve la apuesta del GOTW

    Retorna None si no hay apuesta, si las apuestas están apagadas, si
    apunta a otro partido que no es el GOTW o si el partido no terminó.
    """
    settings = config.wager
    if wager is None or not settings.enabled:
        return None

    if not config.game_of_the_week_id or wager.game_id != config.game_of_the_week_id:
        logger.debug(f"Ignoring wager on {wager.game_id}: not the game of the week")
        return None

    points = _wager_points(wager, settings)

    if resolution.is_tie(wager.game_id):
        if settings.tie_behavior is TieBehavior.WRONG:
            return WagerResult(outcome=WagerOutcome.LOSE, applied=_loss(points, settings.mode), graded_at=graded_at)
        if settings.tie_behavior is TieBehavior.ZERO:
            return WagerResult(outcome=WagerOutcome.ZERO, applied=0, graded_at=graded_at)
        return WagerResult(outcome=WagerOutcome.PUSH, applied=0, graded_at=graded_at)

    winner_id = resolution.winner_for(wager.game_id)
    if winner_id is None:
        return None

    if wager.team_id == winner_id:
        return WagerResult(outcome=WagerOutcome.WIN, applied=points, graded_at=graded_at)
    return WagerResult(outcome=WagerOutcome.LOSE, applied=_loss(points, settings.mode), graded_at=graded_at)


def grade_pick(
    pick: Pick,
    resolution: OutcomeResolution,
    config: SeasonConfig,
    graded_at: Optional[datetime] = None,
    include_wager: bool = True
) -> GradedPick:
    """
    Califica un pick

    Solo genera `$set` para los campos que cambian, así re-correr la
    misma semana no escribe nada.
    """
    graded_at = graded_at or datetime.now(timezone.utc)

    score = 0
    updates: dict = {}
    graded: dict[str, PredictionOutcome] = {}

    for game_id, prediction in pick.predictions.items():
        outcome = grade_prediction(game_id, prediction, resolution)
        if outcome is None:
            continue

        graded[game_id] = outcome
        if outcome is PredictionOutcome.CORRECT:
            score += 1

        if prediction.outcome is not outcome or prediction.is_correct != outcome.is_correct:
            updates[f"predictions.{game_id}.is_correct"] = outcome.is_correct
            updates[f"predictions.{game_id}.outcome"] = outcome.value

    wager_applied = 0
    wager_result = None
    if include_wager:
        wager_result = resolve_wager(pick.wager, resolution, config, graded_at)
        if wager_result is not None:
            wager_applied = wager_result.applied
            previous = pick.wager_result
            if (
                previous is None
                or previous.outcome is not wager_result.outcome
                or previous.applied != wager_result.applied
            ):
                updates["wager_result"] = wager_result.model_dump()
            else:
                wager_result = previous

    return GradedPick(
        pick_id=pick.id,
        uid=pick.user_id,
        full_name=pick.full_name,
        score=score + wager_applied,
        wager_applied=wager_applied,
        updates=updates,
        summary=GradedPickSummary(
            id=pick.id,
            user_id=pick.user_id,
            full_name=pick.full_name,
            graded=graded,
            wager_result=wager_result,
        ),
    )


def grade_week(
    picks: list[Pick],
    resolution: OutcomeResolution,
    config: SeasonConfig,
    graded_at: Optional[datetime] = None,
    include_wager: bool = True
) -> GradingResult:
    """Califica todos los picks de la semana"""
    graded_at = graded_at or datetime.now(timezone.utc)
    result = GradingResult()

    for pick in picks:
        graded = grade_pick(pick, resolution, config, graded_at, include_wager)

        result.user_scores[graded.uid] = result.user_scores.get(graded.uid, 0) + graded.score
        result.details.append(UserWeeklyScore(
            uid=graded.uid,
            full_name=graded.full_name,
            score=graded.score,
            wager_applied=graded.wager_applied,
        ))
        result.summaries.append(graded.summary)
        if graded.updates:
            result.updates.append((graded.pick_id, graded.updates))

    return result
