from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from sheetscript.modules.script.constants import CHOICE_ACTOR_ID, STANDING_SLOTS
from sheetscript.utils.tokens import is_blank, parse_int


class ScriptRow(BaseModel):
    model_config = ConfigDict(extra="forbid")

    row_number: int = Field(ge=1)
    speaker_token: str = ""
    text: str = ""
    node_key: str = ""
    link_targets: list[str] = Field(default_factory=list)
    choice_group_token: str = ""
    background_id: str = ""
    music_id: str = ""
    sound_effect_id: str = ""
    expression_id: str = ""
    sequence_token: str = ""
    auto_progress_locked: str = ""
    standing_left: str = ""
    standing_center: str = ""
    standing_right: str = ""

    @property
    def is_meaningful(self) -> bool:
        return not all(
            is_blank(value)
            for value in (
                self.text,
                self.node_key,
                " ".join(self.link_targets),
                self.background_id,
                self.music_id,
                self.sound_effect_id,
                self.sequence_token,
                self.speaker_token,
            )
        )

    @property
    def is_choice(self) -> bool:
        return parse_int(self.speaker_token) == CHOICE_ACTOR_ID

    @property
    def standing_slots(self) -> list[tuple[str, str]]:
        values = (self.standing_left, self.standing_center, self.standing_right)
        return list(zip(STANDING_SLOTS, values))
