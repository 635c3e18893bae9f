"""Non-fatal diagnostics reported by the layout engine."""

import logging
from enum import Enum

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class DiagnosticKind(str, Enum):
    """Categories of non-fatal problems found while laying out a snapshot."""
    REFERENCE_MISS = "reference_miss"
    LOOKUP_MISS = "lookup_miss"


class Diagnostic(BaseModel):
    kind: DiagnosticKind
    message: str


class DiagnosticLog:
    """Collects diagnostics and mirrors each one to the module logger."""

    def __init__(self) -> None:
        # Insertion-ordered, one entry per (kind, message)
        self._entries: dict[tuple[DiagnosticKind, str], Diagnostic] = {}

    def reference_miss(self, message: str) -> None:
        self._record(DiagnosticKind.REFERENCE_MISS, message)

    def lookup_miss(self, message: str) -> None:
        self._record(DiagnosticKind.LOOKUP_MISS, message)

    @property
    def entries(self) -> list[Diagnostic]:
        return list(self._entries.values())

    def messages(self, kind: DiagnosticKind | None = None) -> list[str]:
        return [d.message for d in self._entries.values() if kind is None or d.kind == kind]

    def clear(self) -> None:
        self._entries.clear()

    def _record(self, kind: DiagnosticKind, message: str) -> None:
        key = (kind, message)
        if key in self._entries:
            # Repeated queries report the same miss once
            logger.debug("%s: %s", kind.value, message)
            return
        logger.warning("%s: %s", kind.value, message)
        self._entries[key] = Diagnostic(kind=kind, message=message)
