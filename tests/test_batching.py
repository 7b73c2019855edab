from __future__ import annotations

import pytest

from ndjson_stream.batching import abatched, batched
from ndjson_stream.stream import decode


def test_batched_groups_with_short_tail() -> None:
    assert list(batched(range(7), 3)) == [[0, 1, 2], [3, 4, 5], [6]]
    assert list(batched([], 3)) == []


def test_batched_rejects_bad_size() -> None:
    with pytest.raises(ValueError):
        list(batched([1], 0))


@pytest.mark.asyncio
async def test_abatched_over_decoded_stream() -> None:
    data = b"".join(f'{{"n":{i}}}\n'.encode() for i in range(5))

    batches = [batch async for batch in abatched(decode([data]), 2)]

    assert batches == [[{"n": 0}, {"n": 1}], [{"n": 2}, {"n": 3}], [{"n": 4}]]


@pytest.mark.asyncio
async def test_abatched_default_size_is_25() -> None:
    sizes = [len(batch) async for batch in abatched(decode([b"1\n" * 30]))]

    assert sizes == [25, 5]
