"""
Unit tests for PickRepository
"""

import pytest

from app.models.pick import PredictionOutcome
from app.models.season import SeasonType
from app.repositories.pick_repository import PickRepository


class TestPickRepository:
    """Test suite for PickRepository database operations."""

    @pytest.mark.asyncio
    async def test_get_picks_for_week(self, test_db, sample_picks_data, make_pick_data):
        """Only picks of the requested week are returned."""
        await test_db["picks"].insert_many(sample_picks_data)
        await test_db["picks"].insert_one(make_pick_data("uid1", "Alice", {"Z": "T"}, week=4))
        repo = PickRepository(test_db)

        picks = await repo.get_picks_for_week(2025, SeasonType.REGULAR, 3)

        assert sorted(p.user_id for p in picks) == ["uid1", "uid2"]
        assert all(p.week == 3 for p in picks)

    @pytest.mark.asyncio
    async def test_get_picks_matches_legacy_season_type(self, test_db, make_pick_data):
        """Documents stored as "regular season" still belong to the regular week."""
        doc = make_pick_data("uid9", "Old", {"A": "X"})
        doc["season_type"] = "regular season"
        await test_db["picks"].insert_one(doc)
        repo = PickRepository(test_db)

        picks = await repo.get_picks_for_week(2025, "Regular", 3)

        assert [p.user_id for p in picks] == ["uid9"]
        assert picks[0].season_type is SeasonType.REGULAR

    @pytest.mark.asyncio
    async def test_save_prediction_merges(self, test_db):
        """Saving one game's pick keeps the other predictions."""
        repo = PickRepository(test_db)

        pick_id = await repo.save_prediction("uid1", 2025, "Regular", 3, "A", "X", full_name="Alice")
        await repo.save_prediction("uid1", 2025, "Regular", 3, "B", "Y", full_name="Ignored")

        assert pick_id == "2025-regular-week3-uid1"
        pick = await repo.get_by_id(pick_id)
        assert pick.full_name == "Alice"
        assert pick.predictions["A"].team_id == "X"
        assert pick.predictions["B"].team_id == "Y"
        assert pick.predictions["B"].outcome is PredictionOutcome.UNGRADED

    @pytest.mark.asyncio
    async def test_apply_grading_in_batches(self, test_db, sample_picks_data):
        await test_db["picks"].insert_many(sample_picks_data)
        repo = PickRepository(test_db)
        updates = [
            ("2025-regular-week3-uid1", {"predictions.A.is_correct": True, "predictions.A.outcome": "correct"}),
            ("2025-regular-week3-uid2", {"predictions.B.is_correct": False, "predictions.B.outcome": "incorrect"}),
        ]

        modified = await repo.apply_grading(updates, batch_size=1)

        assert modified == 2
        uid1 = await repo.get_by_id("2025-regular-week3-uid1")
        assert uid1.predictions["A"].is_correct is True
        assert uid1.predictions["B"].is_correct is None

    @pytest.mark.asyncio
    async def test_apply_grading_nothing_to_do(self, test_db):
        repo = PickRepository(test_db)

        assert await repo.apply_grading([]) == 0
