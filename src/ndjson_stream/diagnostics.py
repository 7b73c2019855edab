from __future__ import annotations

import logging
from collections.abc import Callable

from .decoder import ParseDiagnostic

logger = logging.getLogger(__name__)

DiagnosticObserver = Callable[[ParseDiagnostic], None]


def log_diagnostic(diag: ParseDiagnostic) -> None:
    logger.warning("Skipping malformed NDJSON record at line %d: %s", diag.index, diag.message)


class DiagnosticCollector:
    """Observer that keeps every diagnostic it receives, in order."""

    def __init__(self) -> None:
        self.diagnostics: list[ParseDiagnostic] = []

    def __call__(self, diag: ParseDiagnostic) -> None:
        self.diagnostics.append(diag)

    @property
    def indices(self) -> list[int]:
        return [d.index for d in self.diagnostics]
