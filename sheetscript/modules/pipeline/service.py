from __future__ import annotations

import logging
from collections.abc import Mapping

from sheetscript.errors import SourceNotFoundError
from sheetscript.modules.catalog.builder import build_resource_catalog, purge_legacy_resource_items
from sheetscript.modules.graph.compiler import compile_document
from sheetscript.modules.graph.linker import resolve_cross_document_links
from sheetscript.modules.graph.schemas import PendingCrossLink
from sheetscript.modules.pipeline.diagnostics import (
    CATALOG_UPDATED,
    LEGACY_ITEMS_REMOVED,
    RUN_SUMMARY,
    DiagnosticLog,
)
from sheetscript.modules.pipeline.schemas import (
    ActorRecord,
    CompileRunResult,
    CompileSources,
    DialogueDatabase,
)
from sheetscript.modules.script.constants import PLAYER_ACTOR_ID
from sheetscript.modules.script.rows import load_story_rows
from sheetscript.modules.sheets.loaders import (
    load_actor_sheet,
    load_key_value_sheet,
    load_standing_sheet,
)
from sheetscript.modules.sheets.reader import DEFAULT_SEPARATOR

logger = logging.getLogger(__name__)


def build_actor_roster(actors: Mapping[int, str]) -> list[ActorRecord]:
    return [
        ActorRecord(id=actor_id, name=name, is_player=actor_id == PLAYER_ACTOR_ID)
        for actor_id, name in sorted(actors.items())
    ]


def ensure_sources_exist(sources: CompileSources) -> None:
    for path in sources.all_paths():
        if not path.is_file():
            raise SourceNotFoundError(path)


def run_compilation(
    sources: CompileSources,
    *,
    previous: DialogueDatabase | None = None,
    separator: str = DEFAULT_SEPARATOR,
    encoding: str = "utf-8",
) -> CompileRunResult:
    """Load every sheet, compile each story document, rebuild the catalog, then
    resolve cross-document links.

    Missing sheets and missing required columns raise before any graph is built;
    everything else is reported through the returned diagnostics.
    """
    ensure_sources_exist(sources)
    read_opts = {"separator": separator, "encoding": encoding}

    actors = load_actor_sheet(sources.actor_sheet, **read_opts)
    backgrounds = load_key_value_sheet(sources.background_sheet, "id", "description", **read_opts)
    music = load_key_value_sheet(sources.music_sheet, "id", "resourceName", **read_opts)
    sound_effects = load_key_value_sheet(sources.sound_effect_sheet, "id", "resourceName", **read_opts)
    sequences = load_key_value_sheet(sources.sequence_sheet, "id", "dsuCommand", **read_opts)
    standings = load_standing_sheet(sources.standing_sheet, **read_opts)
    story_rows = [(story, load_story_rows(story.path, **read_opts)) for story in sources.stories]

    diagnostics = DiagnosticLog()
    database = DialogueDatabase(actors=build_actor_roster(actors))
    if previous is not None:
        database.variables = [dict(item) for item in previous.variables]
        database.items, removed = purge_legacy_resource_items(previous.items)
        if removed:
            diagnostics.info(
                LEGACY_ITEMS_REMOVED,
                f"Removed {removed} legacy resource item(s); the resource catalog now owns them.",
            )

    pending: list[PendingCrossLink] = []
    total_rows = 0
    for document_id, (story, rows) in enumerate(story_rows, start=1):
        result = compile_document(rows, document_id=document_id, title=story.title, diagnostics=diagnostics)
        database.documents.append(result.graph)
        pending.extend(result.pending_links)
        total_rows += len(rows)
        logger.debug("compiled %s from %s (%d rows)", story.title, story.path, len(rows))

    catalog = build_resource_catalog(
        backgrounds=backgrounds,
        music=music,
        sound_effects=sound_effects,
        sequences=sequences,
        standings=standings,
    )
    counts = catalog.counts()
    diagnostics.info(
        CATALOG_UPDATED,
        "Resource catalog updated: "
        f"BG {counts['backgrounds']}, BGM {counts['music_tracks']}, SFX {counts['sound_effects']}, "
        f"Sequence {counts['sequence_templates']}, Standing {counts['standing_poses']}.",
    )

    added = resolve_cross_document_links(database.documents, pending, diagnostics=diagnostics)

    diagnostics.info(
        RUN_SUMMARY,
        f"Compiled {len(database.documents)} document(s) from {total_rows} row(s).",
    )
    return CompileRunResult(
        database=database,
        catalog=catalog,
        diagnostics=list(diagnostics),
        total_rows=total_rows,
        cross_links_added=added,
    )
