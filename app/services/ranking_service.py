"""
Ranking Service - Recalcula totales y posiciones del leaderboard

Regla de totales (idempotente):
    nuevo_total = total - puntos_de_esta_semana_ya_sumados + puntaje_semanal

El aporte anterior solo se resta si la entrada ya fue puntuada para la
MISMA semana (`scored_week`); así re-correr una semana corrige en lugar
de sumar doble, y una semana nueva suma normalmente.

Posiciones: empates comparten posición; el siguiente puntaje distinto
toma su posición en la lista ordenada (1, 1, 3...).
"""

from typing import Optional

from app.models.leaderboard import LeaderboardEntry
from app.models.recap import UserWeeklyScore


def apply_weekly_scores(
    entries: list[LeaderboardEntry],
    user_scores: dict[str, int],
    week_key: str,
    details: Optional[list[UserWeeklyScore]] = None
) -> list[LeaderboardEntry]:
    """
    Aplica los puntajes semanales a cada entrada

    Usuarios con picks pero sin entrada reciben una entrada nueva (con
    el nombre del pick). Quien no jugó la semana aporta 0.
    """
    names = {d.uid: d.full_name for d in details or []}
    by_uid = {entry.uid: entry for entry in entries}

    for uid in user_scores:
        if uid not in by_uid:
            by_uid[uid] = LeaderboardEntry(uid=uid, display_name=names.get(uid, ""))

    updated = []
    for uid, entry in by_uid.items():
        weekly = user_scores.get(uid, 0)
        already_counted = entry.last_week_points if entry.scored_week == week_key else 0

        updated.append(entry.model_copy(update={
            "total_points": entry.total_points - already_counted + weekly,
            "last_week_points": weekly,
            "scored_week": week_key,
        }))

    return updated


def sort_for_display(entries: list[LeaderboardEntry]) -> list[LeaderboardEntry]:
    """Mayor total primero; desempate estable por uid"""
    return sorted(entries, key=lambda e: (-e.total_points, e.uid))


def assign_ranks(
    entries: list[LeaderboardEntry],
    week_key: Optional[str] = None,
    previously_scored: Optional[set[str]] = None
) -> list[LeaderboardEntry]:
    """
    Asigna current_rank / previous_rank / position_change

    `previously_scored` son los uid cuya entrada ya estaba puntuada para
    `week_key` antes de esta corrida: para ellos la posición "anterior"
    es la guardada en previous_rank (la de antes de la semana), no la
    que dejó la corrida previa.
    """
    previously_scored = previously_scored or set()
    ranked: list[LeaderboardEntry] = []

    for index, entry in enumerate(sort_for_display(entries)):
        if index > 0 and entry.total_points == ranked[-1].total_points:
            new_rank = ranked[-1].current_rank
        else:
            new_rank = index + 1

        if week_key is not None and entry.uid in previously_scored and entry.previous_rank > 0:
            previous_rank = entry.previous_rank
        elif entry.current_rank > 0:
            previous_rank = entry.current_rank
        else:
            previous_rank = new_rank  # Nunca rankeado

        ranked.append(entry.model_copy(update={
            "current_rank": new_rank,
            "previous_rank": previous_rank,
            "position_change": previous_rank - new_rank,
        }))

    return ranked


def recompute_leaderboard(
    entries: list[LeaderboardEntry],
    user_scores: dict[str, int],
    week_key: str,
    details: Optional[list[UserWeeklyScore]] = None
) -> list[LeaderboardEntry]:
    """Totales + posiciones para el leaderboard de la temporada"""
    previously_scored = {e.uid for e in entries if e.scored_week == week_key}
    totals = apply_weekly_scores(entries, user_scores, week_key, details)
    return assign_ranks(totals, week_key, previously_scored)


def recompute_all_time(
    entries: list[LeaderboardEntry],
    user_scores: dict[str, int],
    week_key: str,
    details: Optional[list[UserWeeklyScore]] = None
) -> list[LeaderboardEntry]:
    """Solo totales: el all-time no guarda posiciones, se ordena para mostrar"""
    return sort_for_display(apply_weekly_scores(entries, user_scores, week_key, details))
