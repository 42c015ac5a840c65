from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from pathlib import Path

from sheetscript.modules.script.constants import LINK_TARGET_SEPARATORS, STORY_COLUMNS
from sheetscript.modules.script.schemas import ScriptRow
from sheetscript.modules.sheets.header import HeaderIndex
from sheetscript.modules.sheets.loaders import read_sheet
from sheetscript.modules.sheets.reader import DEFAULT_SEPARATOR

logger = logging.getLogger(__name__)

_LINK_SPLIT_RE = re.compile("|".join(re.escape(sep) for sep in LINK_TARGET_SEPARATORS))


def normalize_dialogue(value: str | None) -> str:
    if not value:
        return ""
    return value.replace("\\n", "\n").replace("\\r", "\r").rstrip()


def split_link_targets(value: str | None) -> list[str]:
    out: list[str] = []
    for token in _LINK_SPLIT_RE.split(str(value or "")):
        cleaned = token.strip()
        if cleaned:
            out.append(cleaned)
    return out


def script_row_from_record(header: HeaderIndex, record: Sequence[str], row_number: int) -> ScriptRow:
    def field(column: str) -> str:
        return header.get(record, column).strip()

    return ScriptRow(
        row_number=row_number,
        speaker_token=field("Actor"),
        text=normalize_dialogue(header.get(record, "DialogueText")),
        node_key=field("NodeID"),
        link_targets=split_link_targets(field("LinkToID")),
        choice_group_token=field("ChoiceGroup"),
        background_id=field("BG"),
        music_id=field("BGM"),
        sound_effect_id=field("SFX"),
        expression_id=field("Expression"),
        sequence_token=field("Sequence"),
        auto_progress_locked=field("AutoProgressLocked"),
        standing_left=field("StandingLeft"),
        standing_center=field("StandingCenter"),
        standing_right=field("StandingRight"),
    )


def load_story_rows(
    path: str | Path,
    *,
    separator: str = DEFAULT_SEPARATOR,
    encoding: str = "utf-8",
    required_columns: Sequence[str] = STORY_COLUMNS,
) -> list[ScriptRow]:
    header, _, records = read_sheet(path, required_columns, separator=separator, encoding=encoding)
    rows: list[ScriptRow] = []
    for row_number, record in enumerate(records, start=1):
        if not "".join(record).strip():
            continue
        rows.append(script_row_from_record(header, record, row_number))
    logger.debug("loaded %d story rows from %s", len(rows), path)
    return rows
