from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path

from sheetscript.errors import MalformedHeaderError

BYTE_ORDER_MARK = "\ufeff"


def clean_header_cell(value: str) -> str:
    return str(value or "").strip(BYTE_ORDER_MARK).strip()


class HeaderIndex:
    """Case-insensitive column lookup built once from a header record.

    The first occurrence of a repeated column name wins.
    """

    def __init__(self, header: Sequence[str]) -> None:
        self.columns = [clean_header_cell(cell) for cell in header]
        self._positions: dict[str, int] = {}
        for idx, name in enumerate(self.columns):
            key = name.lower()
            if key and key not in self._positions:
                self._positions[key] = idx

    def position(self, column: str) -> int | None:
        return self._positions.get(str(column).lower())

    def require(self, columns: Iterable[str], *, path: str | Path) -> dict[str, int]:
        out: dict[str, int] = {}
        for column in columns:
            idx = self.position(column)
            if idx is None:
                raise MalformedHeaderError(path, column)
            out[column] = idx
        return out

    def get(self, record: Sequence[str], column: str) -> str:
        idx = self.position(column)
        if idx is None or idx >= len(record):
            return ""
        return record[idx]
