from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from pathlib import Path

import typer

from .batching import batched
from .config import DecodeOptions, load_decode_options
from .decoder import ParseDiagnostic
from .diagnostics import DiagnosticCollector
from .paths import find_config_file
from .sources import iter_file_chunks, iter_path_chunks
from .stream import iter_decode

app = typer.Typer(add_completion=False, help="ndjson-stream: incremental NDJSON decoder")

logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _fail(message: str) -> typer.Exit:
    typer.secho(message, fg=typer.colors.RED, err=True)
    return typer.Exit(code=2)


def _resolve_options(config: Path | None, **overrides: object) -> DecodeOptions:
    path = config if config is not None else find_config_file()
    if config is not None and not config.exists():
        raise _fail(f"Config file not found: {config}")
    if path is not None:
        logger.debug("Loading options from %s", path)

    try:
        return load_decode_options(path).with_overrides(**overrides)
    except (ValueError, LookupError) as e:
        raise _fail(f"Invalid options: {e}") from e


def _open_chunks(source: str, chunk_size: int) -> Iterator[bytes]:
    if source == "-":
        return iter_file_chunks(typer.get_binary_stream("stdin"), chunk_size)
    path = Path(source)
    if not path.is_file():
        raise _fail(f"Input file not found: {path}")
    return iter_path_chunks(path, chunk_size)


def _report(diag: ParseDiagnostic) -> None:
    typer.secho(str(diag), fg=typer.colors.YELLOW, err=True)


def _emit_records(chunks: Iterator[bytes], opts: DecodeOptions, *, batches: bool) -> int:
    """Print decoded values to stdout and return how many lines were malformed."""

    collector = DiagnosticCollector()

    def report(diag: ParseDiagnostic) -> None:
        collector(diag)
        _report(diag)

    records = iter_decode(chunks, options=opts, on_diagnostic=report)
    count = 0
    if batches:
        for batch in batched(records, opts.batch_size):
            typer.echo(json.dumps(batch, ensure_ascii=True))
            count += len(batch)
    else:
        for rec in records:
            typer.echo(json.dumps(rec, ensure_ascii=True))
            count += 1
    logger.debug("Emitted %d records, %d malformed", count, len(collector.diagnostics))
    return len(collector.diagnostics)


@app.command()
def decode(
    source: str = typer.Argument("-", help="NDJSON file path, or '-' for stdin"),
    config: Path | None = typer.Option(
        None,
        "--config",
        help="YAML options file (defaults to the nearest ndjson-stream.yaml)",
    ),
    batch_size: int | None = typer.Option(None, "--batch-size", help="Records per batch with --batches"),
    batches: bool = typer.Option(False, "--batches", help="Emit one JSON array per batch"),
    max_record_chars: int | None = typer.Option(
        None, "--max-record-chars", help="Skip (and report) records longer than this"
    ),
    chunk_size: int | None = typer.Option(None, "--chunk-size", help="Bytes per read from the input"),
    encoding: str | None = typer.Option(None, "--encoding", help="Input text encoding"),
    strict: bool = typer.Option(False, "--strict", help="Exit with code 1 if any line was malformed"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Decode NDJSON and print one compact JSON value per line."""

    _setup_logging(verbose)
    opts = _resolve_options(
        config,
        batch_size=batch_size,
        max_record_chars=max_record_chars,
        chunk_size=chunk_size,
        encoding=encoding,
    )
    chunks = _open_chunks(source, opts.chunk_size)

    try:
        malformed = _emit_records(chunks, opts, batches=batches)
    except UnicodeDecodeError as e:
        raise _fail(f"Input is not valid {opts.encoding}: {e}") from e

    if strict and malformed:
        raise typer.Exit(code=1)


@app.command()
def check(
    source: str = typer.Argument("-", help="NDJSON file path, or '-' for stdin"),
    config: Path | None = typer.Option(None, "--config", help="YAML options file"),
    max_record_chars: int | None = typer.Option(None, "--max-record-chars"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Validate NDJSON line by line and list every malformed line."""

    _setup_logging(verbose)
    opts = _resolve_options(config, max_record_chars=max_record_chars)
    chunks = _open_chunks(source, opts.chunk_size)

    collector = DiagnosticCollector()
    try:
        records = sum(1 for _ in iter_decode(chunks, options=opts, on_diagnostic=collector))
    except UnicodeDecodeError as e:
        raise _fail(f"Input is not valid {opts.encoding}: {e}") from e

    for diag in collector.diagnostics:
        _report(diag)

    if collector.diagnostics:
        typer.secho(f"records: {records}, malformed: {len(collector.diagnostics)}", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    typer.secho(f"records: {records}, malformed: 0", fg=typer.colors.GREEN)


def main() -> None:
    # Entry point for console script.
    app()


if __name__ == "__main__":
    main()
