"""
Unit tests for the bulk write helpers
"""

import pytest
from pymongo import UpdateOne
from pymongo.results import BulkWriteResult

from app.repositories.batching import chunked, modified_count, write_in_batches


class RecordingCollection:
    """Collection double that keeps every bulk_write call."""

    def __init__(self):
        self.calls = []

    async def bulk_write(self, requests, ordered=True):
        self.calls.append((list(requests), ordered))
        return BulkWriteResult({"nModified": len(requests)}, True)


def _ops(count):
    return [UpdateOne({"_id": f"doc{i}"}, {"$set": {"n": i}}) for i in range(count)]


class TestChunked:
    def test_splits_in_order(self):
        assert list(chunked([1, 2, 3, 4, 5], 2)) == [[1, 2], [3, 4], [5]]

    def test_rejects_non_positive_size(self):
        with pytest.raises(ValueError):
            list(chunked([1], 0))


class TestWriteInBatches:
    """One ordered bulk_write per chunk."""

    @pytest.mark.asyncio
    async def test_one_bulk_write_per_batch(self):
        collection = RecordingCollection()
        operations = _ops(5)

        results = await write_in_batches(collection, operations, batch_size=2)

        assert [len(batch) for batch, _ in collection.calls] == [2, 2, 1]
        assert all(ordered for _, ordered in collection.calls)
        assert [op for batch, _ in collection.calls for op in batch] == operations
        assert modified_count(results) == 5

    @pytest.mark.asyncio
    async def test_nothing_to_write(self):
        collection = RecordingCollection()

        results = await write_in_batches(collection, [], batch_size=2)

        assert results == []
        assert collection.calls == []
        assert modified_count(results) == 0

    @pytest.mark.asyncio
    async def test_against_database(self, test_db):
        await test_db["docs"].insert_many([{"_id": f"doc{i}", "n": -1} for i in range(3)])

        results = await write_in_batches(test_db["docs"], _ops(3), batch_size=2)

        assert len(results) == 2
        assert modified_count(results) == 3
        assert await test_db["docs"].count_documents({"n": {"$gte": 0}}) == 3
