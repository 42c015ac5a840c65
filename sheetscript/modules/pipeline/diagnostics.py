from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Literal

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger("sheetscript.diagnostics")

DiagnosticLevel = Literal["INFO", "WARN", "ERROR"]

_LOG_LEVELS: dict[str, int] = {
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
}

UNPARSABLE_SPEAKER = "UNPARSABLE_SPEAKER"
DANGLING_LINK = "DANGLING_LINK"
DUPLICATE_NODE_KEY = "DUPLICATE_NODE_KEY"
RESERVED_START_REMOVED = "RESERVED_START_REMOVED"
CROSS_LINK_MALFORMED = "CROSS_LINK_MALFORMED"
CROSS_LINK_UNKNOWN_DOCUMENT = "CROSS_LINK_UNKNOWN_DOCUMENT"
CROSS_LINK_UNKNOWN_NODE = "CROSS_LINK_UNKNOWN_NODE"
CROSS_LINK_RESOLVED = "CROSS_LINK_RESOLVED"
DOCUMENT_COMPILED = "DOCUMENT_COMPILED"
CATALOG_UPDATED = "CATALOG_UPDATED"
LEGACY_ITEMS_REMOVED = "LEGACY_ITEMS_REMOVED"
RUN_SUMMARY = "RUN_SUMMARY"


class Diagnostic(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    level: DiagnosticLevel
    code: str
    message: str
    document: str | None = None
    row_number: int | None = None

    def format(self) -> str:
        location = ""
        if self.document and self.row_number is not None:
            location = f"{self.document} row {self.row_number}: "
        elif self.document:
            location = f"{self.document}: "
        elif self.row_number is not None:
            location = f"row {self.row_number}: "
        return f"[{self.level}] {location}{self.message}"


class DiagnosticLog:
    """Ordered record of the non-fatal anomalies and progress notes of one run."""

    def __init__(self) -> None:
        self.entries: list[Diagnostic] = []

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.entries)

    def add(
        self,
        level: DiagnosticLevel,
        code: str,
        message: str,
        *,
        document: str | None = None,
        row_number: int | None = None,
    ) -> Diagnostic:
        entry = Diagnostic(level=level, code=code, message=message, document=document, row_number=row_number)
        self.entries.append(entry)
        logger.log(_LOG_LEVELS[level], entry.format())
        return entry

    def info(self, code: str, message: str, **location) -> Diagnostic:
        return self.add("INFO", code, message, **location)

    def warn(self, code: str, message: str, **location) -> Diagnostic:
        return self.add("WARN", code, message, **location)

    def error(self, code: str, message: str, **location) -> Diagnostic:
        return self.add("ERROR", code, message, **location)

    def by_level(self, level: DiagnosticLevel) -> list[Diagnostic]:
        return [entry for entry in self.entries if entry.level == level]

    def by_code(self, code: str) -> list[Diagnostic]:
        return [entry for entry in self.entries if entry.code == code]
