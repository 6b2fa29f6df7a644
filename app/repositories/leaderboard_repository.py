"""
LeaderboardRepository - MongoDB access for the leaderboard collections.

One document per user (`_id = uid`) in each of `leaderboard`,
`leaderboard_postseason` and `leaderboard_all_time`, plus the
`lifetime_leaderboard` aggregate kept across seasons.
"""

from datetime import datetime, timezone
from typing import Iterable, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReplaceOne, UpdateOne

from app.models.leaderboard import LeaderboardEntry, LeaderboardType, LifetimeEntry
from app.repositories.batching import DEFAULT_BATCH_SIZE, modified_count, write_in_batches

IDENTITY_FIELDS = ("uid", "display_name", "avatar_ref")

RANKED_FIELDS = (
    "total_points",
    "last_week_points",
    "current_rank",
    "previous_rank",
    "position_change",
    "scored_week",
)
TOTAL_FIELDS = ("total_points", "last_week_points", "scored_week")


def _to_entry(doc: dict) -> LeaderboardEntry:
    doc = dict(doc)
    doc_id = doc.pop("_id", None)
    if not doc.get("uid"):
        doc["uid"] = str(doc_id)
    return LeaderboardEntry(**doc)


class LeaderboardRepository:
    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        board: LeaderboardType,
        batch_size: int = DEFAULT_BATCH_SIZE
    ):
        self.db = db
        self.board = board
        self.batch_size = batch_size
        self.collection = db[board.value]

    async def get_all(self) -> list[LeaderboardEntry]:
        """Get every entry, highest total first."""
        cursor = self.collection.find({}).sort([("total_points", -1), ("_id", 1)])
        docs = await cursor.to_list(length=None)
        return [_to_entry(doc) for doc in docs]

    async def get(self, uid: str) -> Optional[LeaderboardEntry]:
        doc = await self.collection.find_one({"_id": uid})
        return _to_entry(doc) if doc else None

    async def save_entries(
        self,
        entries: Iterable[LeaderboardEntry],
        fields: tuple[str, ...] = RANKED_FIELDS
    ) -> int:
        """
        Merge-write the given fields of each entry.

        Only `fields` are `$set`; identity is written with `$setOnInsert`
        so an existing display name or avatar is never overwritten.
        """
        operations = []
        for entry in entries:
            data = entry.model_dump()
            operations.append(UpdateOne(
                {"_id": entry.uid},
                {
                    "$set": {name: data[name] for name in fields},
                    "$setOnInsert": {name: data[name] for name in IDENTITY_FIELDS},
                },
                upsert=True
            ))

        await write_in_batches(self.collection, operations, self.batch_size)
        return len(operations)

    async def reset_all(self, reset_at: Optional[datetime] = None) -> int:
        """
        Reset every entry to zero, keeping only identity fields.

        Returns the number of entries reset.
        """
        reset_at = reset_at or datetime.now(timezone.utc)
        entries = await self.get_all()

        operations = []
        for entry in entries:
            fresh = LeaderboardEntry(
                uid=entry.uid,
                display_name=entry.display_name,
                avatar_ref=entry.avatar_ref,
                season_reset_at=reset_at,
            )
            operations.append(ReplaceOne(
                {"_id": entry.uid},
                {"_id": entry.uid, **fresh.model_dump()},
                upsert=True
            ))

        await write_in_batches(self.collection, operations, self.batch_size)
        return len(operations)


class LifetimeRepository:
    def __init__(self, db: AsyncIOMotorDatabase, batch_size: int = DEFAULT_BATCH_SIZE):
        self.db = db
        self.batch_size = batch_size
        self.collection = db["lifetime_leaderboard"]

    async def get(self, uid: str) -> Optional[LifetimeEntry]:
        doc = await self.collection.find_one({"_id": uid})
        if not doc:
            return None
        doc.pop("_id", None)
        return LifetimeEntry(**doc)

    async def fold_season(
        self,
        entries: Iterable[LeaderboardEntry],
        run_id: str,
        updated_at: Optional[datetime] = None
    ) -> int:
        """
        Add each season total to the user's lifetime aggregate.

        Every user is folded at most once per `run_id`: the `$inc` only
        matches documents whose `last_folded_run` is a different run, so
        resuming an interrupted rollover never counts a season twice.
        Returns the number of users actually folded.
        """
        updated_at = updated_at or datetime.now(timezone.utc)
        entries = list(entries)

        # Primero se asegura que exista el documento (el $inc va sin upsert)
        ensure = [
            UpdateOne(
                {"_id": entry.uid},
                {"$setOnInsert": {
                    "uid": entry.uid,
                    "lifetime_total": 0,
                    "seasons_played": 0,
                }},
                upsert=True
            )
            for entry in entries
        ]
        await write_in_batches(self.collection, ensure, self.batch_size)

        fold = [
            UpdateOne(
                {"_id": entry.uid, "last_folded_run": {"$ne": run_id}},
                {
                    "$inc": {
                        "lifetime_total": entry.total_points,
                        "seasons_played": 1,
                    },
                    "$set": {
                        "display_name": entry.display_name,
                        "avatar_ref": entry.avatar_ref,
                        "last_season_points": entry.total_points,
                        "last_folded_run": run_id,
                        "updated_at": updated_at,
                    },
                }
            )
            for entry in entries
        ]
        results = await write_in_batches(self.collection, fold, self.batch_size)
        return modified_count(results)
