PLAYER_ACTOR_ID = 1
NARRATOR_ACTOR_ID = 7
CHOICE_ACTOR_ID = 99
DEFAULT_COUNTERPART_ACTOR_ID = 2

ROOT_NODE_ID = 0
ROOT_NODE_TITLE = "START"
START_TOKEN = "start"

CROSS_LINK_SEPARATOR = ":"
LINK_TARGET_SEPARATORS = ("|", ";", ",")
SYNTHETIC_KEY_PREFIX = "__row_"

STANDING_HIDE_TOKEN = "hide"
STANDING_SLOTS = ("Left", "Center", "Right")

LEGACY_RESOURCE_CATEGORIES = {"BG", "BGM", "SFX", "Sequence"}

STORY_COLUMNS = (
    "Actor",
    "DialogueText",
    "NodeID",
    "LinkToID",
    "ChoiceGroup",
    "BG",
    "BGM",
    "SFX",
    "Expression",
    "Sequence",
    "AutoProgressLocked",
    "StandingLeft",
    "StandingCenter",
    "StandingRight",
)
