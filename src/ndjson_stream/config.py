from __future__ import annotations

import codecs
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import yaml

DEFAULT_BATCH_SIZE = 25
DEFAULT_CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class DecodeOptions:
    encoding: str = "utf-8"

    # Codec error handler: strict|replace|ignore|...
    errors: str = "replace"

    # Longest record (in characters) the decoder will buffer; None means unbounded.
    max_record_chars: int | None = None

    # Read size used by the built-in chunk sources.
    chunk_size: int = DEFAULT_CHUNK_SIZE

    # Hint for consumers that group records; the decoder itself never reads it.
    batch_size: int = DEFAULT_BATCH_SIZE

    def __post_init__(self) -> None:
        codecs.lookup(self.encoding)
        codecs.lookup_error(self.errors)
        if self.max_record_chars is not None and self.max_record_chars < 1:
            raise ValueError(f"max_record_chars must be >= 1, got {self.max_record_chars}")
        if self.chunk_size < 1:
            raise ValueError(f"chunk_size must be >= 1, got {self.chunk_size}")
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {self.batch_size}")

    def with_overrides(self, **overrides: Any) -> "DecodeOptions":
        """Return a copy with the non-None overrides applied."""

        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def _as_str(v: Any) -> str | None:
    return v if isinstance(v, str) and v else None


def _as_int(v: Any) -> int | None:
    # bool is an int subclass; `batch_size: true` is not a size.
    return v if isinstance(v, int) and not isinstance(v, bool) else None


def load_decode_options(path: Path | None) -> DecodeOptions:
    """Load decode options from a YAML mapping if present; otherwise return defaults."""

    data: dict[str, Any] = {}
    if path is not None and path.exists():
        loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
        if isinstance(loaded, dict):
            data = loaded

    # Only values of the wrong type fall back; 0 or negatives reach __post_init__ and are rejected.
    return DecodeOptions().with_overrides(
        encoding=_as_str(data.get("encoding")),
        errors=_as_str(data.get("errors")),
        max_record_chars=_as_int(data.get("max_record_chars")),
        chunk_size=_as_int(data.get("chunk_size")),
        batch_size=_as_int(data.get("batch_size")),
    )
