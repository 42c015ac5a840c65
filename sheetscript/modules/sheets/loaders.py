from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from sheetscript.errors import MalformedHeaderError
from sheetscript.modules.sheets.header import HeaderIndex
from sheetscript.modules.sheets.reader import DEFAULT_SEPARATOR, load_records
from sheetscript.utils.tokens import parse_int

logger = logging.getLogger(__name__)

ACTOR_ID_COLUMN = "id"
ACTOR_NAME_COLUMN = "displayName"
STANDING_COLUMNS = ("actorId", "expression", "resourcePath")


@dataclass(slots=True)
class KeyValueRow:
    id: str
    value: str


@dataclass(slots=True)
class StandingRow:
    actor_id: str
    expression: str
    resource_path: str


def read_sheet(
    path: str | Path,
    required: Sequence[str],
    *,
    separator: str = DEFAULT_SEPARATOR,
    encoding: str = "utf-8",
) -> tuple[HeaderIndex, dict[str, int], list[list[str]]]:
    records = load_records(path, separator=separator, encoding=encoding)
    if not records:
        raise MalformedHeaderError(path, required[0], detail="sheet is empty")
    header = HeaderIndex(records[0])
    positions = header.require(required, path=path)
    return header, positions, records[1:]


def load_actor_sheet(
    path: str | Path,
    *,
    separator: str = DEFAULT_SEPARATOR,
    encoding: str = "utf-8",
) -> dict[int, str]:
    _, positions, rows = read_sheet(
        path,
        (ACTOR_ID_COLUMN, ACTOR_NAME_COLUMN),
        separator=separator,
        encoding=encoding,
    )
    id_idx = positions[ACTOR_ID_COLUMN]
    name_idx = positions[ACTOR_NAME_COLUMN]
    width = max(id_idx, name_idx)

    actors: dict[int, str] = {}
    for record in rows:
        if len(record) <= width:
            continue
        actor_id = parse_int(record[id_idx])
        if actor_id is None:
            continue
        actors[actor_id] = record[name_idx].strip()
    logger.debug("loaded %d actors from %s", len(actors), path)
    return actors


def load_key_value_sheet(
    path: str | Path,
    key_column: str,
    value_column: str,
    *,
    separator: str = DEFAULT_SEPARATOR,
    encoding: str = "utf-8",
) -> list[KeyValueRow]:
    _, positions, rows = read_sheet(
        path,
        (key_column, value_column),
        separator=separator,
        encoding=encoding,
    )
    key_idx = positions[key_column]
    value_idx = positions[value_column]
    width = max(key_idx, value_idx)
    return [
        KeyValueRow(id=record[key_idx].strip(), value=record[value_idx].strip())
        for record in rows
        if len(record) > width
    ]


def load_standing_sheet(
    path: str | Path,
    *,
    separator: str = DEFAULT_SEPARATOR,
    encoding: str = "utf-8",
) -> list[StandingRow]:
    _, positions, rows = read_sheet(path, STANDING_COLUMNS, separator=separator, encoding=encoding)
    actor_idx, expression_idx, resource_idx = (positions[name] for name in STANDING_COLUMNS)
    width = max(actor_idx, expression_idx, resource_idx)

    out: list[StandingRow] = []
    for record in rows:
        if len(record) <= width:
            continue
        row = StandingRow(
            actor_id=record[actor_idx].strip(),
            expression=record[expression_idx].strip(),
            resource_path=record[resource_idx].strip(),
        )
        if not (row.actor_id or row.expression or row.resource_path):
            continue
        out.append(row)
    return out
