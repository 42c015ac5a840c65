from __future__ import annotations

from sheetscript.modules.graph.sequence import build_sequence_script, standing_command
from sheetscript.modules.script.schemas import ScriptRow


def test_commands_follow_fixed_emission_order() -> None:
    row = ScriptRow(
        row_number=4,
        sequence_token="Delay(1);",
        sound_effect_id="SFX_Bell",
        music_id="BGM_Calm",
        standing_right="hide",
        standing_left="3_smile",
        background_id="BG_Roof",
    )
    assert build_sequence_script(row).split("\n") == [
        "ChangeBG(BG_Roof);",
        "ShowStanding(Left, 3, smile);",
        "HideStanding(Right);",
        "PlaySound(BGM_Calm);",
        "PlaySound(SFX_Bell);",
        "Delay(1);",
    ]


def test_standing_hide_is_case_insensitive() -> None:
    assert standing_command("Center", "HIDE") == "HideStanding(Center);"


def test_malformed_standing_values_are_ignored() -> None:
    assert standing_command("Left", "mina_smile") is None
    assert standing_command("Left", "3_smile_big") is None
    assert standing_command("Left", "3") is None
    assert standing_command("Left", "") is None


def test_row_without_directives_has_empty_script() -> None:
    assert build_sequence_script(ScriptRow(row_number=1, text="just talk")) == ""
