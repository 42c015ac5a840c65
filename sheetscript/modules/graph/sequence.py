from __future__ import annotations

import logging

from sheetscript.modules.script.constants import STANDING_HIDE_TOKEN
from sheetscript.modules.script.schemas import ScriptRow
from sheetscript.utils.tokens import parse_int

logger = logging.getLogger(__name__)


def change_background_command(background_id: str) -> str:
    return f"ChangeBG({background_id});"


def show_standing_command(slot: str, actor_id: int, pose: str) -> str:
    return f"ShowStanding({slot}, {actor_id}, {pose});"


def hide_standing_command(slot: str) -> str:
    return f"HideStanding({slot});"


def play_sound_command(sound_id: str) -> str:
    return f"PlaySound({sound_id});"


def standing_command(slot: str, value: str) -> str | None:
    token = str(value or "").strip()
    if not token:
        return None
    if token.lower() == STANDING_HIDE_TOKEN:
        return hide_standing_command(slot)
    parts = token.split("_")
    if len(parts) != 2:
        return None
    actor_id = parse_int(parts[0])
    if actor_id is None:
        return None
    return show_standing_command(slot, actor_id, parts[1])


def build_sequence_script(row: ScriptRow) -> str:
    commands: list[str | None] = []
    if row.background_id:
        commands.append(change_background_command(row.background_id))
    for slot, value in row.standing_slots:
        commands.append(standing_command(slot, value))
    if row.music_id:
        commands.append(play_sound_command(row.music_id))
    if row.sound_effect_id:
        commands.append(play_sound_command(row.sound_effect_id))
    if row.sequence_token:
        commands.append(row.sequence_token)

    script = "\n".join(command for command in commands if command and command.strip())
    if script:
        logger.debug("row %d sequence:\n%s", row.row_number, script)
    return script
