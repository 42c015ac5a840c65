from __future__ import annotations

import json
from pathlib import Path

import pytest
import typer
from typer.testing import CliRunner

from sheetscript.cli import app, parse_story_option
from sheetscript.config import settings
from tests.support.sheets import write_resource_sheets, write_sheet, write_story_sheet

runner = CliRunner()


@pytest.fixture()
def source_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    root = tmp_path / "sheets"
    for field_name, path in write_resource_sheets(root).items():
        monkeypatch.setattr(settings, field_name, path.name)
    write_story_sheet(
        root / "day01.csv",
        [
            {"Actor": "3", "DialogueText": "Hello!", "NodeID": "hello"},
            {"Actor": "1", "DialogueText": "Hi.", "LinkToID": "Day02:start"},
        ],
    )
    write_story_sheet(root / "day02.csv", [{"Actor": "3", "DialogueText": "Next day."}])
    return root


def _compile_args(root: Path, output: Path, *extra: str) -> list[str]:
    return [
        "compile",
        "--root",
        str(root),
        "--output",
        str(output),
        "--story",
        "day01.csv=Day01",
        "--story",
        "day02.csv=Day02",
        *extra,
    ]


def test_compile_writes_database_and_catalog(source_root: Path, tmp_path: Path) -> None:
    output = tmp_path / "build"
    result = runner.invoke(app, _compile_args(source_root, output))

    assert result.exit_code == 0, result.output
    assert "documents: 2 rows: 3" in result.output
    assert result.output.strip().endswith("ok")

    database = json.loads((output / "dialogue_database.json").read_text(encoding="utf-8"))
    assert [doc["title"] for doc in database["documents"]] == ["Day01", "Day02"]
    reply = database["documents"][0]["nodes"][2]
    assert reply["outgoing_edges"][0]["destination_document"] == 2
    assert reply["outgoing_edges"][0]["destination_node"] == 0

    catalog = json.loads((output / "resource_catalog.json").read_text(encoding="utf-8"))
    assert catalog["backgrounds"][0]["id"] == "BG_Classroom"


def test_dry_run_writes_nothing(source_root: Path, tmp_path: Path) -> None:
    output = tmp_path / "build"
    result = runner.invoke(app, _compile_args(source_root, output, "--dry-run"))
    assert result.exit_code == 0, result.output
    assert not output.exists()


def test_fatal_error_exits_with_single_message(source_root: Path, tmp_path: Path) -> None:
    write_sheet(source_root / "ID_Actor.csv", ["id", "name"], [["1", "Player"]])
    result = runner.invoke(app, _compile_args(source_root, tmp_path / "build"))
    assert result.exit_code == 1
    assert "error:" in result.output
    assert "displayName" in result.output


def test_warnings_are_printed(source_root: Path, tmp_path: Path) -> None:
    write_story_sheet(source_root / "day02.csv", [{"Actor": "3", "DialogueText": "Lost", "LinkToID": "nowhere"}])
    result = runner.invoke(app, _compile_args(source_root, tmp_path / "build"))
    assert result.exit_code == 0, result.output
    assert "[WARN] Day02 row 1:" in result.output
    assert "completed with warnings" in result.output


def test_inspect_lists_nodes_and_edges(source_root: Path, tmp_path: Path) -> None:
    output = tmp_path / "build"
    assert runner.invoke(app, _compile_args(source_root, output)).exit_code == 0

    result = runner.invoke(app, ["inspect", str(output / "dialogue_database.json"), "--document", "day01"])

    assert result.exit_code == 0, result.output
    assert "[1] Day01" in result.output
    assert "'hello' -> [1:2]" in result.output
    assert "Day02" not in result.output.splitlines()[0]


def test_parse_story_option() -> None:
    parsed = parse_story_option("Story/Day 01.csv=Test_Day01")
    assert (parsed.path, parsed.title) == ("Story/Day 01.csv", "Test_Day01")
    with pytest.raises(typer.BadParameter):
        parse_story_option("no-title")
