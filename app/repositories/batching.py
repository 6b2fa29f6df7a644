"""
Escrituras en batches acotados

Cada batch es un solo `bulk_write(ordered=True)` de como máximo
`batch_size` operaciones; los batches van uno detrás del otro. Si uno
falla, la excepción sube: no se reintenta, el job se vuelve a correr.
"""

from typing import Iterable

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.results import BulkWriteResult

DEFAULT_BATCH_SIZE = 450


def chunked(items: list, size: int) -> Iterable[list]:
    """Parte una lista en bloques de `size` elementos"""
    if size <= 0:
        raise ValueError("Batch size must be positive")
    for start in range(0, len(items), size):
        yield items[start:start + size]


async def write_in_batches(
    collection: AsyncIOMotorCollection,
    operations: list,
    batch_size: int = DEFAULT_BATCH_SIZE
) -> list[BulkWriteResult]:
    """Manda `operations` (UpdateOne, ReplaceOne...) de a `batch_size`, en orden"""
    results = []
    for batch in chunked(operations, batch_size):
        results.append(await collection.bulk_write(batch, ordered=True))
    return results


def modified_count(results: list[BulkWriteResult]) -> int:
    return sum(result.modified_count for result in results)
