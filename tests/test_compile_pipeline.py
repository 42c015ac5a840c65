from __future__ import annotations

from pathlib import Path

import pytest

from sheetscript.errors import MalformedHeaderError, SourceNotFoundError
from sheetscript.modules.pipeline.schemas import DatabaseItem, DialogueDatabase
from sheetscript.modules.pipeline.service import build_actor_roster, run_compilation
from tests.support.sheets import compile_sources, write_sheet, write_story_sheet


def _write_days(root: Path) -> dict[str, Path]:
    day01 = write_story_sheet(
        root / "Story_Day01.csv",
        [
            {"Actor": "3", "DialogueText": "Good morning!", "BG": "BG_Classroom", "StandingCenter": "3_Smile"},
            {"Actor": "", "DialogueText": "Ready for the test?"},
            {"Actor": "99", "DialogueText": "Of course."},
            {"Actor": "99", "DialogueText": "Not at all..."},
            {"Actor": "3", "DialogueText": "See you after class.", "LinkToID": "Day02:start"},
            {"Actor": "3", "DialogueText": "Wrong turn.", "LinkToID": "Day09:start"},
        ],
    )
    day02 = write_story_sheet(
        root / "Story_Day02.csv",
        [
            {"Actor": "7", "DialogueText": "The next day..."},
            {"Actor": "3", "DialogueText": "Hi again.", "NodeID": "greet"},
        ],
    )
    return {"Day01": day01, "Day02": day02}


def test_full_run_compiles_documents_catalog_and_cross_links(tmp_path: Path) -> None:
    sources = compile_sources(tmp_path, _write_days(tmp_path))

    result = run_compilation(sources)

    database = result.database
    assert [graph.title for graph in database.documents] == ["Day01", "Day02"]
    assert [graph.document_id for graph in database.documents] == [1, 2]
    assert result.total_rows == 8
    assert [actor.id for actor in database.actors] == [1, 2, 3, 7, 99]
    assert [actor.is_player for actor in database.actors] == [True, False, False, False, False]

    day01 = database.document("day01")
    farewell = day01.node(5)
    assert farewell.body_text == "See you after class."
    assert [(edge.destination_document, edge.destination_node) for edge in farewell.outgoing_edges] == [(2, 0)]
    assert result.cross_links_added == 1

    errors = [entry for entry in result.diagnostics if entry.level == "ERROR"]
    assert len(errors) == 1
    assert errors[0].code == "CROSS_LINK_UNKNOWN_DOCUMENT"
    assert result.status == "ok_with_warnings"

    assert result.catalog.background_path("BG_Classroom") == "Backgrounds/BG_Classroom"
    assert result.catalog.standing_resource_path(3, "smile") == "Standing/Mina/smile"
    assert day01.node(1).sequence_script == "ChangeBG(BG_Classroom);\nShowStanding(Center, 3, Smile);"


def test_clean_run_reports_ok(tmp_path: Path) -> None:
    story = write_story_sheet(tmp_path / "Story.csv", [{"Actor": "3", "DialogueText": "Hello."}])
    result = run_compilation(compile_sources(tmp_path, {"Solo": story}))
    assert result.status == "ok"
    assert [entry.code for entry in result.diagnostics][-1] == "RUN_SUMMARY"


def test_missing_story_file_aborts_before_compiling(tmp_path: Path) -> None:
    sources = compile_sources(tmp_path, {"Ghost": tmp_path / "missing.csv"})
    with pytest.raises(SourceNotFoundError) as exc_info:
        run_compilation(sources)
    assert exc_info.value.path == tmp_path / "missing.csv"


def test_missing_actor_column_aborts_run(tmp_path: Path) -> None:
    sources = compile_sources(tmp_path, _write_days(tmp_path))
    write_sheet(sources.actor_sheet, ["id", "name"], [["1", "Player"]])
    with pytest.raises(MalformedHeaderError) as exc_info:
        run_compilation(sources)
    assert exc_info.value.column == "displayName"


def test_previous_database_keeps_variables_and_non_resource_items(tmp_path: Path) -> None:
    sources = compile_sources(tmp_path, _write_days(tmp_path))
    previous = DialogueDatabase(
        variables=[{"name": "Affection_Mina", "value": 0}],
        items=[
            DatabaseItem(name="BG_Roof", fields={"Category": "BG"}),
            DatabaseItem(name="Umbrella", fields={"Category": "Gift"}),
        ],
    )

    result = run_compilation(sources, previous=previous)

    assert result.database.variables == [{"name": "Affection_Mina", "value": 0}]
    assert [item.name for item in result.database.items] == ["Umbrella"]
    assert any(entry.code == "LEGACY_ITEMS_REMOVED" for entry in result.diagnostics)


def test_rebuild_is_deterministic(tmp_path: Path) -> None:
    sources = compile_sources(tmp_path, _write_days(tmp_path))
    first = run_compilation(sources)
    second = run_compilation(sources)
    for left, right in zip(first.database.documents, second.database.documents):
        assert left.edge_set() == right.edge_set()
        assert len(left.nodes) == len(right.nodes)


def test_build_actor_roster_sorts_by_id() -> None:
    roster = build_actor_roster({7: "Narrator", 1: "Player", 3: "Mina"})
    assert [(actor.id, actor.name, actor.is_player) for actor in roster] == [
        (1, "Player", True),
        (3, "Mina", False),
        (7, "Narrator", False),
    ]
