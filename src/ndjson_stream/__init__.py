"""Incremental NDJSON decoding for chunked byte streams."""

from .batching import abatched, batched
from .config import DecodeOptions, load_decode_options
from .decoder import DecodedLine, DecodeResult, DecoderStateError, LineDecoder, ParseDiagnostic
from .diagnostics import DiagnosticCollector, log_diagnostic
from .stream import NdjsonStream, collect, decode, iter_decode

__all__ = [
    "DecodeOptions",
    "DecodedLine",
    "DecodeResult",
    "DecoderStateError",
    "DiagnosticCollector",
    "LineDecoder",
    "NdjsonStream",
    "ParseDiagnostic",
    "abatched",
    "batched",
    "collect",
    "decode",
    "iter_decode",
    "load_decode_options",
    "log_diagnostic",
]
