from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from sheetscript.modules.pipeline.schemas import CompileSources, StorySource
from sheetscript.modules.script.constants import STORY_COLUMNS
from sheetscript.modules.script.schemas import ScriptRow


def quote_field(value: str) -> str:
    text = str(value)
    if any(char in text for char in (",", '"', "\n", "\r")):
        return '"' + text.replace('"', '""') + '"'
    return text


def sheet_text(header: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    lines = [",".join(quote_field(cell) for cell in header)]
    lines.extend(",".join(quote_field(cell) for cell in row) for row in rows)
    return "\n".join(lines) + "\n"


def write_sheet(path: Path, header: Sequence[str], rows: Sequence[Sequence[str]]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(sheet_text(header, rows), encoding="utf-8")
    return path


def write_story_sheet(path: Path, rows: Sequence[dict[str, str]]) -> Path:
    return write_sheet(
        path,
        STORY_COLUMNS,
        [[row.get(column, "") for column in STORY_COLUMNS] for row in rows],
    )


def story_rows(*specs: dict) -> list[ScriptRow]:
    """Build ScriptRows numbered from 1 in the given order."""
    return [ScriptRow(row_number=idx, **spec) for idx, spec in enumerate(specs, start=1)]


def write_resource_sheets(root: Path) -> dict[str, Path]:
    return {
        "actor_sheet": write_sheet(
            root / "ID_Actor.csv",
            ["id", "displayName"],
            [["1", "Player"], ["2", "Roa"], ["3", "Mina"], ["7", "Narrator"], ["99", "Choice"]],
        ),
        "background_sheet": write_sheet(
            root / "ID_BG.csv",
            ["id", "description"],
            [["BG_Classroom", "Classroom, morning"], ["BG_Roof", "School roof"]],
        ),
        "music_sheet": write_sheet(root / "ID_BGM.csv", ["id", "resourceName"], [["BGM_Calm", "calm_theme"]]),
        "sound_effect_sheet": write_sheet(root / "ID_SFX.csv", ["id", "resourceName"], [["SFX_Bell", "bell_01"]]),
        "sequence_sheet": write_sheet(
            root / "ID_Sequence.csv",
            ["id", "dsuCommand"],
            [["SEQ_Shake", "LoveAlgoStandingShake(Center);"]],
        ),
        "standing_sheet": write_sheet(
            root / "ID_Standing.csv",
            ["actorId", "expression", "resourcePath"],
            [["3", "Smile", "Standing/Mina/smile"], ["3", "Angry", "Standing/Mina/angry"]],
        ),
    }


def compile_sources(root: Path, stories: dict[str, Path]) -> CompileSources:
    return CompileSources(
        stories=[StorySource(path=path, title=title) for title, path in stories.items()],
        **write_resource_sheets(root),
    )
