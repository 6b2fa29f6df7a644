"""
WeeklyResultsService - Runs the weekly scoring cycle.

    resolve outcomes -> grade picks -> rank leaderboards -> recap/history

Every step is idempotent, so a failed run is recovered by running it again.
Nothing is written until outcomes are known to be usable (strict mode
aborts while any game of the week is still open).
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from app.models.leaderboard import LeaderboardType
from app.models.season import SeasonConfig
from app.repositories.batching import DEFAULT_BATCH_SIZE
from app.repositories.config_repository import ConfigRepository
from app.repositories.game_repository import GameRepository
from app.repositories.leaderboard_repository import (
    LeaderboardRepository,
    RANKED_FIELDS,
    TOTAL_FIELDS,
)
from app.repositories.pick_repository import PickRepository
from app.repositories.recap_repository import RecapRepository
from app.services.grading_service import grade_week
from app.services.outcome_resolver import OutcomeResolution, resolve_week
from app.services.ranking_service import recompute_all_time, recompute_leaderboard
from app.services.recap_service import build_history, build_recap, build_summary
from app.services.scoreboard_client import ScoreboardClient

logger = logging.getLogger(__name__)


class WeeklyResultsService:
    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        scoreboard: Optional[ScoreboardClient] = None,
        strict_all_final: bool = True,
        batch_size: int = DEFAULT_BATCH_SIZE
    ):
        self.db = db
        self.scoreboard = scoreboard
        self.strict_all_final = strict_all_final
        self.batch_size = batch_size

        self.config_repo = ConfigRepository(db)
        self.game_repo = GameRepository(db)
        self.pick_repo = PickRepository(db)
        self.recap_repo = RecapRepository(db)

    async def _resolve(self, config: SeasonConfig) -> tuple[int, OutcomeResolution]:
        games = await self.game_repo.get_games_for_week(
            config.season_year, config.season_type, config.week
        )
        resolution = await resolve_week(games, config, self.scoreboard)
        return len(games), resolution

    async def _store_feed_results(self, config: SeasonConfig, resolution: OutcomeResolution) -> None:
        await self.game_repo.save_feed_results(
            config.season_year, config.season_type, config.week,
            resolution.from_feed, self.batch_size
        )

    async def calculate_weekly_results(self, config: Optional[SeasonConfig] = None) -> dict:
        """
        Grade the configured week and rebuild leaderboards and recap.

        `config` is read from the store when not given; raises ConfigError
        when it is missing or invalid.
        Returns `{"success": False, "message": ...}` when the week is not
        ready; nothing is written in that case.
        """
        logger.info("📊 Starting weekly results calculation...")
        config = config or await self.config_repo.get_config()
        week_key = config.week_key

        games_count, resolution = await self._resolve(config)
        if games_count == 0:
            logger.info(f"⚠️ No games stored for {week_key}")
            return {"success": False, "message": "No games found for this week."}

        if self.strict_all_final and resolution.unresolved:
            logger.info(f"⚠️ Some games have no result yet; aborting grading: {resolution.unresolved}")
            return {
                "success": False,
                "message": "Not all games are final yet.",
                "unresolved_games": resolution.unresolved,
            }

        if resolution.decided_count == 0:
            logger.info("⚠️ No completed games with results, exiting.")
            return {"success": False, "message": "No completed games available."}

        now = datetime.now(timezone.utc)
        await self._store_feed_results(config, resolution)

        # Grading
        picks = await self.pick_repo.get_picks_for_week(
            config.season_year, config.season_type, config.week
        )
        grading = grade_week(picks, resolution, config, graded_at=now)
        updated_picks = await self.pick_repo.apply_grading(grading.updates, self.batch_size)
        logger.info(f"✅ Graded {len(picks)} picks ({len(grading.updates)} needed writes)")

        # Season leaderboard
        board = LeaderboardType.for_season(config.season_type)
        season_repo = LeaderboardRepository(self.db, board, self.batch_size)
        ranked = recompute_leaderboard(
            await season_repo.get_all(), grading.user_scores, week_key, grading.details
        )
        await season_repo.save_entries(ranked, RANKED_FIELDS)

        # All-time leaderboard
        all_time_repo = LeaderboardRepository(self.db, LeaderboardType.ALL_TIME, self.batch_size)
        all_time = recompute_all_time(
            await all_time_repo.get_all(), grading.user_scores, week_key, grading.details
        )
        await all_time_repo.save_entries(all_time, TOTAL_FIELDS)
        logger.info(f"🏆 Updated {board.value} ({len(ranked)} entries) and all-time ({len(all_time)})")

        # Recap + history
        summary = build_summary(ranked, grading.user_scores, grading.details)
        await self.recap_repo.save_recap(build_recap(config, summary, created_at=now))
        await self.recap_repo.save_history(
            build_history(config, summary, ranked, grading.summaries, resolution, created_at=now)
        )

        logger.info("✅ Weekly results calculation completed.")
        return {
            "success": True,
            "week": week_key,
            "picks_graded": len(picks),
            "picks_updated": updated_picks,
            "leaderboard_entries": len(ranked),
            "unresolved_games": resolution.unresolved,
        }

    async def update_is_correct(self, config: Optional[SeasonConfig] = None) -> dict:
        """
        Live grading: mark `is_correct` for games already decided.

        Feed results are stored on the games. Never touches wagers, totals,
        ranks or recaps; partial weeks are fine.
        """
        logger.info("🔄 Starting updateIsCorrect job...")
        config = config or await self.config_repo.get_config()

        _, resolution = await self._resolve(config)
        if resolution.decided_count == 0:
            return {"success": False, "message": "No completed games yet."}

        await self._store_feed_results(config, resolution)

        picks = await self.pick_repo.get_picks_for_week(
            config.season_year, config.season_type, config.week
        )
        grading = grade_week(picks, resolution, config, include_wager=False)
        updated_picks = await self.pick_repo.apply_grading(grading.updates, self.batch_size)

        return {
            "success": True,
            "resolved_games": resolution.decided_count,
            "updated_picks": updated_picks,
        }
