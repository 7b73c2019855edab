from __future__ import annotations

from collections.abc import AsyncIterable, AsyncIterator, Iterable, Iterator
from typing import TypeVar

from .config import DEFAULT_BATCH_SIZE

T = TypeVar("T")


def _check_size(size: int) -> None:
    if size < 1:
        raise ValueError(f"batch size must be >= 1, got {size}")


async def abatched(items: AsyncIterable[T], size: int = DEFAULT_BATCH_SIZE) -> AsyncIterator[list[T]]:
    """Group an async sequence into lists of at most `size` items."""

    _check_size(size)
    batch: list[T] = []
    async for item in items:
        batch.append(item)
        if len(batch) >= size:
            yield batch
            batch = []
    if batch:
        yield batch


def batched(items: Iterable[T], size: int = DEFAULT_BATCH_SIZE) -> Iterator[list[T]]:
    _check_size(size)
    batch: list[T] = []
    for item in items:
        batch.append(item)
        if len(batch) >= size:
            yield batch
            batch = []
    if batch:
        yield batch
