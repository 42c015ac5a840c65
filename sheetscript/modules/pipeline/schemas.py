from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from sheetscript.modules.catalog.schemas import ResourceCatalog
from sheetscript.modules.graph.schemas import DialogueGraph
from sheetscript.modules.pipeline.diagnostics import Diagnostic

CATEGORY_FIELD = "Category"


class StorySource(BaseModel):
    model_config = ConfigDict(extra="forbid")

    path: Path
    title: str = Field(min_length=1)


class CompileSources(BaseModel):
    model_config = ConfigDict(extra="forbid")

    stories: list[StorySource] = Field(default_factory=list)
    actor_sheet: Path
    background_sheet: Path
    music_sheet: Path
    sound_effect_sheet: Path
    sequence_sheet: Path
    standing_sheet: Path

    def all_paths(self) -> list[Path]:
        return [story.path for story in self.stories] + [
            self.actor_sheet,
            self.background_sheet,
            self.music_sheet,
            self.sound_effect_sheet,
            self.sequence_sheet,
            self.standing_sheet,
        ]


class ActorRecord(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: int
    name: str
    is_player: bool = False


class DatabaseItem(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = ""
    fields: dict[str, str] = Field(default_factory=dict)

    @property
    def category(self) -> str:
        return self.fields.get(CATEGORY_FIELD, "")


class DialogueDatabase(BaseModel):
    model_config = ConfigDict(extra="forbid")

    actors: list[ActorRecord] = Field(default_factory=list)
    documents: list[DialogueGraph] = Field(default_factory=list)
    variables: list[dict[str, Any]] = Field(default_factory=list)
    items: list[DatabaseItem] = Field(default_factory=list)

    def document(self, title: str) -> DialogueGraph | None:
        lowered = str(title or "").lower()
        for graph in self.documents:
            if graph.title.lower() == lowered:
                return graph
        return None


class CompileRunResult(BaseModel):
    model_config = ConfigDict(extra="forbid")

    database: DialogueDatabase
    catalog: ResourceCatalog
    diagnostics: list[Diagnostic] = Field(default_factory=list)
    total_rows: int = 0
    cross_links_added: int = 0

    @property
    def status(self) -> Literal["ok", "ok_with_warnings"]:
        if any(entry.level != "INFO" for entry in self.diagnostics):
            return "ok_with_warnings"
        return "ok"
