from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from sheetscript.modules.pipeline.schemas import CompileSources, StorySource

DEFAULT_SOURCE_DIR = "Docs/Database_Source"


class StoryFileSetting(BaseModel):
    path: str
    title: str


def _default_story_files() -> list[StoryFileSetting]:
    return [
        StoryFileSetting(path=f"{DEFAULT_SOURCE_DIR}/Story_Demo.csv", title="Story_Demo"),
        StoryFileSetting(path=f"{DEFAULT_SOURCE_DIR}/Story/Test/Story_Test_Day01.csv", title="Test_Day01"),
        StoryFileSetting(path=f"{DEFAULT_SOURCE_DIR}/Story/Test/Story_Test_Day02.csv", title="Test_Day02"),
        StoryFileSetting(path=f"{DEFAULT_SOURCE_DIR}/Story/Test/Story_Test_Day03.csv", title="Test_Day03"),
        StoryFileSetting(path=f"{DEFAULT_SOURCE_DIR}/Story/Test/Story_Test_Day04.csv", title="Test_Day04"),
    ]


class Settings(BaseSettings):
    source_root: Path = Path(".")
    story_files: list[StoryFileSetting] = Field(default_factory=_default_story_files)

    actor_sheet: str = f"{DEFAULT_SOURCE_DIR}/ID_Actor.csv"
    background_sheet: str = f"{DEFAULT_SOURCE_DIR}/ID_BG.csv"
    music_sheet: str = f"{DEFAULT_SOURCE_DIR}/ID_BGM.csv"
    sound_effect_sheet: str = f"{DEFAULT_SOURCE_DIR}/ID_SFX.csv"
    sequence_sheet: str = f"{DEFAULT_SOURCE_DIR}/ID_Sequence.csv"
    standing_sheet: str = f"{DEFAULT_SOURCE_DIR}/ID_Standing.csv"

    output_dir: Path = Path("build")
    database_file: str = "dialogue_database.json"
    catalog_file: str = "resource_catalog.json"

    field_separator: str = Field(default=",", min_length=1, max_length=1)
    source_encoding: str = "utf-8"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="SHEETSCRIPT_", env_file=".env", extra="ignore")

    def compile_sources(self, source_root: Path | None = None) -> CompileSources:
        root = Path(source_root) if source_root is not None else self.source_root
        return CompileSources(
            stories=[StorySource(path=root / item.path, title=item.title) for item in self.story_files],
            actor_sheet=root / self.actor_sheet,
            background_sheet=root / self.background_sheet,
            music_sheet=root / self.music_sheet,
            sound_effect_sheet=root / self.sound_effect_sheet,
            sequence_sheet=root / self.sequence_sheet,
            standing_sheet=root / self.standing_sheet,
        )

    def database_path(self, output_dir: Path | None = None) -> Path:
        return Path(output_dir or self.output_dir) / self.database_file

    def catalog_path(self, output_dir: Path | None = None) -> Path:
        return Path(output_dir or self.output_dir) / self.catalog_file


settings = Settings()
