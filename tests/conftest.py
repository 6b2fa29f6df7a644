"""
Pytest fixtures and configuration for all tests.
"""

import os
import uuid

# Settings() exige MONGODB_URI; app.main lo lee al importarse
os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017")

import pytest
from mongomock_motor import AsyncMongoMockClient

TEST_DB_NAME = "nfl_pickem_test"


@pytest.fixture(scope="function")
async def test_db():
    """
    Provide a clean in-memory database for each test.

    Each test gets its own database name, so nothing leaks between tests.
    """
    client = AsyncMongoMockClient()
    db = client[f"{TEST_DB_NAME}_{uuid.uuid4().hex[:8]}"]
    yield db


@pytest.fixture
def sample_config_data():
    """Season config for 2025 regular season, week 3, GOTW = game A."""
    return {
        "_id": "config",
        "season_year": 2025,
        "season_type": "Regular",
        "week": 3,
        "recap_week": 2,
        "game_of_the_week_id": "A",
        "wager": {
            "enabled": True,
            "max_points": 10,
            "mode": "win_lose",
            "tie_behavior": "push",
        },
    }


@pytest.fixture
def make_game_data():
    """Factory for stored game documents of week 3."""
    def _make(
        game_id,
        home_id,
        away_id,
        home_score=None,
        away_score=None,
        status="final",
        winner_id=None,
        week=3,
        season_type="Regular",
    ):
        slug = season_type.lower()
        return {
            "_id": f"2025-{slug}-week{week}-{game_id}",
            "id": game_id,
            "season_year": 2025,
            "season_type": season_type,
            "week": week,
            "home_team": {"id": home_id, "name": f"Team {home_id}", "score": home_score},
            "away_team": {"id": away_id, "name": f"Team {away_id}", "score": away_score},
            "status": status,
            "winner_id": winner_id,
            "has_result": winner_id is not None,
        }
    return _make


@pytest.fixture
def sample_games_data(make_game_data):
    """Game A: TeamX beat TeamW. Game B: TeamY beat TeamZ."""
    return [
        make_game_data("A", "X", "W", 24, 10, winner_id="X"),
        make_game_data("B", "Y", "Z", 31, 17, winner_id="Y"),
    ]


@pytest.fixture
def make_pick_data():
    """Factory for pick documents of week 3."""
    def _make(user_id, full_name, predictions, wager=None, week=3, season_type="Regular"):
        slug = season_type.lower()
        doc = {
            "_id": f"2025-{slug}-week{week}-{user_id}",
            "user_id": user_id,
            "full_name": full_name,
            "season_year": 2025,
            "season_type": season_type,
            "week": week,
            "predictions": {
                game_id: {"team_id": team_id, "is_correct": None}
                for game_id, team_id in predictions.items()
            },
        }
        if wager:
            doc["wager"] = wager
        return doc
    return _make


@pytest.fixture
def sample_picks_data(make_pick_data):
    """
    uid1 picks A:X (right), B:Z (wrong) and wagers 5 on A:W (loses).
    uid2 picks A:X, B:Y (both right).
    """
    return [
        make_pick_data(
            "uid1", "Alice", {"A": "X", "B": "Z"},
            wager={"game_id": "A", "team_id": "W", "points": 5},
        ),
        make_pick_data("uid2", "Bob", {"A": "X", "B": "Y"}),
    ]


@pytest.fixture
async def seeded_db(test_db, sample_config_data, sample_games_data, sample_picks_data):
    """Database with config, two final games and two users' picks."""
    await test_db["config"].insert_one(sample_config_data)
    await test_db["games"].insert_many(sample_games_data)
    await test_db["picks"].insert_many(sample_picks_data)
    await test_db["leaderboard"].insert_many([
        {"_id": "uid1", "uid": "uid1", "display_name": "Alice", "total_points": 10, "current_rank": 1},
        {"_id": "uid2", "uid": "uid2", "display_name": "Bob", "total_points": 8, "current_rank": 2},
    ])
    await test_db["leaderboard_all_time"].insert_many([
        {"_id": "uid1", "uid": "uid1", "display_name": "Alice", "total_points": 10},
        {"_id": "uid2", "uid": "uid2", "display_name": "Bob", "total_points": 8},
    ])
    return test_db
