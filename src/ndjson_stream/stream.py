from __future__ import annotations

import logging
from collections import deque
from collections.abc import AsyncIterable, AsyncIterator, Iterable, Iterator
from typing import Any, Generic, TypeVar

from .config import DecodeOptions
from .decoder import DecodedLine, LineDecoder
from .diagnostics import DiagnosticObserver, log_diagnostic
from .sources import aiter_chunks

logger = logging.getLogger(__name__)

T = TypeVar("T")

Chunk = bytes | str
ChunkSource = AsyncIterable[Chunk] | Iterable[Chunk]


class NdjsonStream(Generic[T]):
    """Async sequence of values decoded from an NDJSON chunk source.

    One-shot: iterate it once. A chunk is pulled from the source only when no
    decoded value is ready and the consumer asks for the next one, so memory
    stays at one pending record plus the lines of a single chunk.

        async with decode(response.aiter_bytes(), on_diagnostic=collector) as records:
            async for rec in records:
                ...

    Malformed lines go to `on_diagnostic` (logged at WARNING by default) at
    their position in the input, when the consumer reaches them. They never
    appear in, or end, the value sequence. Errors raised by the source
    propagate to the consumer unchanged.
    """

    def __init__(
        self,
        source: ChunkSource,
        *,
        options: DecodeOptions | None = None,
        on_diagnostic: DiagnosticObserver | None = None,
    ):
        opts = options or DecodeOptions()
        self._chunks: AsyncIterator[Chunk] | None = aiter_chunks(source)
        self._decoder = LineDecoder.from_options(opts)
        self._on_diagnostic = on_diagnostic if on_diagnostic is not None else log_diagnostic

        self._ready: deque[DecodedLine] = deque()
        self._diagnostic_count = 0
        self._done = False

    @property
    def record_index(self) -> int:
        return self._decoder.record_index

    @property
    def diagnostic_count(self) -> int:
        return self._diagnostic_count

    @property
    def done(self) -> bool:
        return self._done and not self._ready

    def __aiter__(self) -> "NdjsonStream[T]":
        return self

    async def __anext__(self) -> T:
        while True:
            while not self._ready:
                if self._done:
                    raise StopAsyncIteration
                await self._pull()

            line = self._ready.popleft()
            if line.diagnostic is None:
                return line.value
            self._diagnostic_count += 1
            self._on_diagnostic(line.diagnostic)

    async def __aenter__(self) -> "NdjsonStream[T]":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Stop decoding and release the source; safe to call more than once."""

        self._ready.clear()
        chunks, self._chunks = self._chunks, None
        if chunks is None:
            return

        if not self._done:
            logger.debug("NDJSON stream abandoned after %d lines", self._decoder.record_index)
        self._done = True
        await _close_iterator(chunks)

    async def _pull(self) -> None:
        assert self._chunks is not None
        try:
            chunk = await self._chunks.__anext__()
        except StopAsyncIteration:
            self._chunks = None
            self._done = True
            lines = self._decoder.flush()
            logger.debug("NDJSON stream finished: %d lines", self._decoder.record_index)
        except BaseException:
            # No partial-record recovery on source failure; aclose() still releases the source.
            self._done = True
            raise
        else:
            lines = self._decoder.feed(chunk)

        self._ready.extend(lines)


async def _close_iterator(it: Any) -> None:
    aclose = getattr(it, "aclose", None)
    if aclose is not None:
        await aclose()
        return
    close = getattr(it, "close", None)
    if close is not None:
        close()


def decode(
    source: ChunkSource,
    *,
    options: DecodeOptions | None = None,
    on_diagnostic: DiagnosticObserver | None = None,
) -> NdjsonStream[Any]:
    return NdjsonStream(source, options=options, on_diagnostic=on_diagnostic)


async def collect(
    source: ChunkSource,
    *,
    options: DecodeOptions | None = None,
    on_diagnostic: DiagnosticObserver | None = None,
) -> list[Any]:
    """Decode a whole source into a list; meant for tests and small payloads."""

    async with decode(source, options=options, on_diagnostic=on_diagnostic) as stream:
        return [rec async for rec in stream]


def iter_decode(
    chunks: Iterable[Chunk],
    *,
    options: DecodeOptions | None = None,
    on_diagnostic: DiagnosticObserver | None = None,
) -> Iterator[Any]:
    """Iterate a blocking chunk source (file, pipe) producing NDJSON values."""

    decoder = LineDecoder.from_options(options or DecodeOptions())
    report = on_diagnostic if on_diagnostic is not None else log_diagnostic

    def lines() -> Iterator[DecodedLine]:
        for chunk in chunks:
            yield from decoder.feed(chunk)
        yield from decoder.flush()

    for line in lines():
        if line.diagnostic is None:
            yield line.value
        else:
            report(line.diagnostic)
