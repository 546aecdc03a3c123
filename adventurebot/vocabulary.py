"""Closed vocabularies: player commands and authorable actions.

The enum values are the canonical wire names used in adventure files and
skill intents. Matching is case-insensitive.

Numbered options have three accepted spellings:

    "OptionOne"  "One"  "1"
"""

from __future__ import annotations

from enum import Enum


class Command(str, Enum):
    OPTION_ONE = "OptionOne"
    OPTION_TWO = "OptionTwo"
    OPTION_THREE = "OptionThree"
    OPTION_FOUR = "OptionFour"
    OPTION_FIVE = "OptionFive"
    OPTION_SIX = "OptionSix"
    OPTION_SEVEN = "OptionSeven"
    OPTION_EIGHT = "OptionEight"
    OPTION_NINE = "OptionNine"
    YES = "Yes"
    NO = "No"
    DESCRIBE = "Describe"
    HELP = "Help"
    HINT = "Hint"
    RESTART = "Restart"
    QUIT = "Quit"

    @classmethod
    def parse(cls, text: str) -> Command | None:
        """Match *text* against the vocabulary. Returns None when unrecognized."""
        return _COMMAND_LOOKUP.get(text.strip().lower())


class ActionKind(str, Enum):
    GOTO = "Goto"
    SAY = "Say"
    PAUSE = "Pause"
    PLAY = "Play"

    @classmethod
    def parse(cls, text: str) -> ActionKind | None:
        return _ACTION_LOOKUP.get(text.strip().lower())


# Commands a place may leave undefined without the player hearing "not understood"
OPTIONAL_COMMANDS = frozenset({
    Command.DESCRIBE,
    Command.HELP,
    Command.HINT,
    Command.RESTART,
    Command.QUIT,
})

_NUMBERED = [
    Command.OPTION_ONE,
    Command.OPTION_TWO,
    Command.OPTION_THREE,
    Command.OPTION_FOUR,
    Command.OPTION_FIVE,
    Command.OPTION_SIX,
    Command.OPTION_SEVEN,
    Command.OPTION_EIGHT,
    Command.OPTION_NINE,
]

_COMMAND_LOOKUP: dict[str, Command] = {c.value.lower(): c for c in Command}
for _number, _command in enumerate(_NUMBERED, start=1):
    _COMMAND_LOOKUP[str(_number)] = _command
    _COMMAND_LOOKUP[_command.value[len("Option"):].lower()] = _command

_ACTION_LOOKUP: dict[str, ActionKind] = {a.value.lower(): a for a in ActionKind}
