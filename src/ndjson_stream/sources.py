from __future__ import annotations

import asyncio
from collections.abc import AsyncIterable, AsyncIterator, Iterable, Iterator
from pathlib import Path
from typing import BinaryIO, TypeVar

from .config import DEFAULT_CHUNK_SIZE

T = TypeVar("T")


def iter_file_chunks(f: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
    """Yield raw reads from a binary file object until EOF.

    Uses read1() where available so pipes and sockets hand over whatever has
    arrived instead of blocking for a full chunk.
    """

    read = getattr(f, "read1", None) or f.read
    while True:
        chunk = read(chunk_size)
        if not chunk:
            return
        yield chunk


def iter_path_chunks(path: Path, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
    # The file is closed when the generator finishes or is closed early.
    with path.open("rb") as f:
        yield from iter_file_chunks(f, chunk_size)


async def aiter_stream_reader(
    reader: asyncio.StreamReader, chunk_size: int = DEFAULT_CHUNK_SIZE
) -> AsyncIterator[bytes]:
    while True:
        chunk = await reader.read(chunk_size)
        if not chunk:
            return
        yield chunk


async def _lift(items: Iterable[T]) -> AsyncIterator[T]:
    it = iter(items)
    try:
        for item in it:
            yield item
    finally:
        close = getattr(it, "close", None)
        if close is not None:
            close()


def aiter_chunks(source: AsyncIterable[T] | Iterable[T]) -> AsyncIterator[T]:
    """Return an async iterator over `source`, lifting plain iterables."""

    if isinstance(source, AsyncIterable):
        return aiter(source)
    if isinstance(source, (bytes, str)):
        raise TypeError("expected an iterable of chunks, not a single bytes/str value")
    return _lift(source)
