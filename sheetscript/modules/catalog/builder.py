from __future__ import annotations

from collections.abc import Iterable, Sequence

from sheetscript.modules.catalog.schemas import (
    BackgroundEntry,
    MusicEntry,
    ResourceCatalog,
    SequenceEntry,
    SoundEffectEntry,
    StandingEntry,
)
from sheetscript.modules.pipeline.schemas import DatabaseItem
from sheetscript.modules.script.constants import LEGACY_RESOURCE_CATEGORIES
from sheetscript.modules.sheets.loaders import KeyValueRow, StandingRow
from sheetscript.utils.tokens import parse_int


def update_resource_catalog(
    catalog: ResourceCatalog,
    *,
    backgrounds: Sequence[KeyValueRow],
    music: Sequence[KeyValueRow],
    sound_effects: Sequence[KeyValueRow],
    sequences: Sequence[KeyValueRow],
    standings: Sequence[StandingRow],
) -> ResourceCatalog:
    """Replace all five catalog tables with the freshly loaded sheets."""
    catalog.set_backgrounds(BackgroundEntry(id=row.id, description=row.value) for row in backgrounds)
    catalog.set_music_tracks(MusicEntry(id=row.id, resource_name=row.value) for row in music)
    catalog.set_sound_effects(SoundEffectEntry(id=row.id, resource_name=row.value) for row in sound_effects)
    catalog.set_sequence_templates(SequenceEntry(id=row.id, command=row.value) for row in sequences)
    catalog.set_standing_poses(
        StandingEntry(
            actor_id=parse_int(row.actor_id) or 0,
            expression=row.expression,
            resource_path=row.resource_path,
        )
        for row in standings
    )
    return catalog


def build_resource_catalog(**tables: Sequence) -> ResourceCatalog:
    return update_resource_catalog(ResourceCatalog(), **tables)


def purge_legacy_resource_items(items: Iterable[DatabaseItem]) -> tuple[list[DatabaseItem], int]:
    kept: list[DatabaseItem] = []
    removed = 0
    for item in items:
        if item.category in LEGACY_RESOURCE_CATEGORIES:
            removed += 1
            continue
        kept.append(item)
    return kept, removed
