from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TypeVar

from pydantic import BaseModel, ConfigDict, Field

BACKGROUND_ROOT = "Backgrounds"
MUSIC_ROOT = "Audio/BGM"
SOUND_EFFECT_ROOT = "Audio/SFX"


class BackgroundEntry(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str = ""
    description: str = ""


class MusicEntry(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str = ""
    resource_name: str = ""


class SoundEffectEntry(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str = ""
    resource_name: str = ""


class SequenceEntry(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str = ""
    command: str = ""


class StandingEntry(BaseModel):
    model_config = ConfigDict(extra="forbid")

    actor_id: int = 0
    expression: str = ""
    resource_path: str = ""


_EntryT = TypeVar("_EntryT", BackgroundEntry, MusicEntry, SoundEffectEntry, SequenceEntry)


def _find_by_id(entries: Sequence[_EntryT], entry_id: str | None) -> _EntryT | None:
    token = str(entry_id or "").strip()
    if not token:
        return None
    lowered = token.lower()
    for entry in entries:
        if entry.id.lower() == lowered:
            return entry
    return None


class ResourceCatalog(BaseModel):
    """Background, audio, sequence-template and standing-pose lookups for the runtime."""

    model_config = ConfigDict(extra="forbid")

    backgrounds: list[BackgroundEntry] = Field(default_factory=list)
    music_tracks: list[MusicEntry] = Field(default_factory=list)
    sound_effects: list[SoundEffectEntry] = Field(default_factory=list)
    sequence_templates: list[SequenceEntry] = Field(default_factory=list)
    standing_poses: list[StandingEntry] = Field(default_factory=list)

    def set_backgrounds(self, entries: Iterable[BackgroundEntry]) -> None:
        self.backgrounds = list(entries)

    def set_music_tracks(self, entries: Iterable[MusicEntry]) -> None:
        self.music_tracks = list(entries)

    def set_sound_effects(self, entries: Iterable[SoundEffectEntry]) -> None:
        self.sound_effects = list(entries)

    def set_sequence_templates(self, entries: Iterable[SequenceEntry]) -> None:
        self.sequence_templates = list(entries)

    def set_standing_poses(self, entries: Iterable[StandingEntry]) -> None:
        self.standing_poses = list(entries)

    def background(self, background_id: str | None) -> BackgroundEntry | None:
        return _find_by_id(self.backgrounds, background_id)

    def music_track(self, music_id: str | None) -> MusicEntry | None:
        return _find_by_id(self.music_tracks, music_id)

    def sound_effect(self, sound_id: str | None) -> SoundEffectEntry | None:
        return _find_by_id(self.sound_effects, sound_id)

    def sequence_template(self, sequence_id: str | None) -> SequenceEntry | None:
        return _find_by_id(self.sequence_templates, sequence_id)

    def standing_pose(self, actor_id: int, expression: str | None) -> StandingEntry | None:
        lowered = str(expression or "").lower()
        for entry in self.standing_poses:
            if entry.actor_id == actor_id and entry.expression.lower() == lowered:
                return entry
        return None

    def background_path(self, background_id: str | None) -> str:
        entry = self.background(background_id)
        return f"{BACKGROUND_ROOT}/{background_id}" if entry is not None else ""

    def music_path(self, music_id: str | None) -> str:
        entry = self.music_track(music_id)
        return f"{MUSIC_ROOT}/{music_id}" if entry is not None else ""

    def sound_effect_path(self, sound_id: str | None) -> str:
        entry = self.sound_effect(sound_id)
        return f"{SOUND_EFFECT_ROOT}/{sound_id}" if entry is not None else ""

    def sequence_command(self, sequence_id: str | None) -> str:
        entry = self.sequence_template(sequence_id)
        return entry.command if entry is not None else ""

    def standing_resource_path(self, actor_id: int, expression: str | None) -> str:
        entry = self.standing_pose(actor_id, expression)
        return entry.resource_path if entry is not None else ""

    def counts(self) -> dict[str, int]:
        return {
            "backgrounds": len(self.backgrounds),
            "music_tracks": len(self.music_tracks),
            "sound_effects": len(self.sound_effects),
            "sequence_templates": len(self.sequence_templates),
            "standing_poses": len(self.standing_poses),
        }
