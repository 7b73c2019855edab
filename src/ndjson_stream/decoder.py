from __future__ import annotations

import codecs
import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, NamedTuple

if TYPE_CHECKING:
    from .config import DecodeOptions


class DecoderStateError(RuntimeError):
    """Raised when a decoder is used after it has been finalized."""


@dataclass(frozen=True)
class ParseDiagnostic:
    # 1-based line number, counting blank and malformed lines.
    index: int
    message: str

    def __str__(self) -> str:
        return f"line {self.index}: {self.message}"


@dataclass(frozen=True)
class DecodedLine:
    """One non-blank line: either a parsed value or a diagnostic."""

    index: int
    value: Any = None
    diagnostic: ParseDiagnostic | None = None

    @property
    def ok(self) -> bool:
        return self.diagnostic is None


class DecodeResult(NamedTuple):
    records: list[Any]
    diagnostics: list[ParseDiagnostic]

    @classmethod
    def from_lines(cls, lines: list[DecodedLine]) -> "DecodeResult":
        return cls(
            [line.value for line in lines if line.ok],
            [line.diagnostic for line in lines if line.diagnostic is not None],
        )


def _reject_constant(name: str) -> Any:
    # json.loads accepts NaN/Infinity by default; they are not JSON.
    raise ValueError(f"invalid JSON constant {name!r}")


class LineDecoder:
    """Incremental NDJSON decoder.

    Feed chunks with `ingest()` in arrival order, then call `finalize()` once
    when the source is exhausted. Neither call raises on malformed lines; bad
    records come back as `ParseDiagnostic` values next to the parsed ones.

    `feed()` and `flush()` are the same operations returning the lines in
    input order, records and diagnostics interleaved.
    """

    def __init__(
        self,
        *,
        encoding: str = "utf-8",
        errors: str = "replace",
        max_record_chars: int | None = None,
    ):
        self._codec = codecs.getincrementaldecoder(encoding)(errors=errors)
        self._max_record_chars = max_record_chars

        # Text after the last newline seen, kept as fragments until a newline arrives.
        self._carry: list[str] = []
        self._carry_len = 0
        self._overflow = False

        self._record_index = 0
        self._finalized = False

    @classmethod
    def from_options(cls, options: DecodeOptions) -> "LineDecoder":
        return cls(
            encoding=options.encoding,
            errors=options.errors,
            max_record_chars=options.max_record_chars,
        )

    @property
    def record_index(self) -> int:
        return self._record_index

    @property
    def finalized(self) -> bool:
        return self._finalized

    @property
    def pending(self) -> int:
        return self._carry_len

    def ingest(self, chunk: bytes | str) -> DecodeResult:
        return DecodeResult.from_lines(self.feed(chunk))

    def finalize(self) -> DecodeResult:
        return DecodeResult.from_lines(self.flush())

    def feed(self, chunk: bytes | str) -> list[DecodedLine]:
        self._check_open("ingest")

        text = chunk if isinstance(chunk, str) else self._codec.decode(chunk)
        out: list[DecodedLine] = []
        if "\n" not in text:
            self._extend_carry(text)
            return out

        segments = text.split("\n")
        tail = segments.pop()

        self._extend_carry(segments[0])
        first = self._drain_carry()
        self._consume(first, out)
        for segment in segments[1:]:
            self._consume(segment, out)

        self._extend_carry(tail)
        return out

    def flush(self) -> list[DecodedLine]:
        self._check_open("finalize")
        self._extend_carry(self._codec.decode(b"", final=True))
        self._finalized = True

        out: list[DecodedLine] = []
        tail = self._drain_carry()
        if tail is None or tail.strip():
            self._consume(tail, out)
        return out

    def _check_open(self, op: str) -> None:
        if self._finalized:
            raise DecoderStateError(f"{op}() called on a finalized decoder")

    def _extend_carry(self, text: str) -> None:
        if self._overflow or not text:
            return
        self._carry.append(text)
        self._carry_len += len(text)
        if self._max_record_chars is not None and self._carry_len > self._max_record_chars:
            # Drop what we have; the rest of the record is skipped up to the next newline.
            self._carry.clear()
            self._carry_len = 0
            self._overflow = True

    def _drain_carry(self) -> str | None:
        """Return the pending record text, or None if it overflowed."""

        if self._overflow:
            self._overflow = False
            return None
        text = "".join(self._carry)
        self._carry.clear()
        self._carry_len = 0
        return text

    def _consume(self, line: str | None, out: list[DecodedLine]) -> None:
        self._record_index += 1
        index = self._record_index

        limit = self._max_record_chars
        if line is None or (limit is not None and len(line) > limit):
            diag = ParseDiagnostic(index, f"record exceeds max_record_chars ({limit})")
            out.append(DecodedLine(index, diagnostic=diag))
            return

        if not line.strip():
            return

        try:
            obj = json.loads(line, parse_constant=_reject_constant)
        except (ValueError, RecursionError) as e:
            # ValueError covers json.JSONDecodeError.
            out.append(DecodedLine(index, diagnostic=ParseDiagnostic(index, f"json_decode_error: {e}")))
            return
        out.append(DecodedLine(index, value=obj))
