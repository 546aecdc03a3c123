"""Execution engine: runs one player command against a place graph.

Turn flow:
  1. Count the command.
  2. Resolve the current place (missing → PlaceNotFound).
  3. If the place has a choice for the command, run its actions in order:
       Goto   → move to the target; describe it if it is a different place,
                and mark Finished when the target is an ending
       Say    → Say(text)
       Pause  → Delay(seconds)
       Play   → Play(sound id)
     Otherwise, a required command (numbered options, Yes, No) yields
     NotUnderstood.
  4. Apply the command's own effect:
       Describe → describe the current place
       Help     → Say(instructions)
       Hint     → nothing yet
       Restart  → new attempt; back to "start" unless the choice navigated,
                  then describe the place unless a Goto already did.
                  A Restart choice ending in Goto("room1") therefore
                  describes room1 once, not a second time afterwards.
       Quit     → Bye
  5. Commit the navigation to the session and return the directives.

The engine performs no I/O and keeps no state of its own; everything it
changes lives on the SessionState passed in. Errors abort the command and
leave current_place_id as it was.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Callable

from adventurebot.models import START_PLACE_ID, Place, PlaceGraph, SessionState, utcnow
from adventurebot.responses import (
    Bye,
    Delay,
    Finished,
    NotUnderstood,
    Play,
    Response,
    Say,
    collapse,
)
from adventurebot.vocabulary import OPTIONAL_COMMANDS, ActionKind, Command

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class EngineError(RuntimeError):
    """Raised when a command cannot be executed against the graph."""


class PlaceNotFound(EngineError):
    def __init__(self, place_id: str, message: str | None = None) -> None:
        super().__init__(message or f"Cannot find place: '{place_id}'")
        self.place_id = place_id


class InvalidDelayValue(EngineError):
    def __init__(self, value: str) -> None:
        super().__init__(f"Delay must be a non-negative number: '{value}'")
        self.value = value


# ---------------------------------------------------------------------------
# Execute
# ---------------------------------------------------------------------------

def execute(
    graph: PlaceGraph,
    state: SessionState,
    command: Command,
    *,
    clock: Clock = utcnow,
) -> Response:
    """Run *command* for the player in *state* and return the directives."""
    state.commands_issued += 1
    logger.debug(
        "execute record=%s place=%s command=%s",
        state.record_id, state.current_place_id, command.value,
    )

    place = graph.get(state.current_place_id)
    if place is None:
        raise PlaceNotFound(
            state.current_place_id,
            f"Cannot find current place: '{state.current_place_id}'",
        )

    responses: list[Response] = []
    reached_ending = False
    described = False
    choice = place.choices.get(command)

    if choice is not None:
        for action in choice:
            if action.kind is ActionKind.GOTO:
                target = graph.get(action.argument)
                if target is None:
                    raise PlaceNotFound(
                        action.argument, f"Cannot find goto place: '{action.argument}'"
                    )
                # a self-loop is silent
                if target.id != place.id:
                    place = target
                    _describe(place, responses)
                    described = True
                    if place.finished:
                        responses.append(Finished())
                        reached_ending = True
            elif action.kind is ActionKind.SAY:
                responses.append(Say(text=action.argument))
            elif action.kind is ActionKind.PAUSE:
                responses.append(Delay(seconds=_parse_delay(action.argument)))
            elif action.kind is ActionKind.PLAY:
                responses.append(Play(sound_id=action.argument))
            else:
                raise EngineError(f"Unhandled action kind: {action.kind!r}")
    elif command not in OPTIONAL_COMMANDS:
        responses.append(NotUnderstood())

    if command is Command.DESCRIBE:
        _describe(place, responses)
    elif command is Command.HELP:
        if place.instructions is not None:
            responses.append(Say(text=place.instructions))
    elif command is Command.HINT:
        pass
    elif command is Command.RESTART:
        # an authored Goto takes precedence over the jump back to start
        if not (choice and any(a.kind is ActionKind.GOTO for a in choice)):
            start = graph.get(START_PLACE_ID)
            if start is None:
                raise PlaceNotFound(START_PLACE_ID)
            place = start
            _describe(place, responses)
        elif not described:
            _describe(place, responses)
        state.attempts += 1
        state.start = clock()
        state.end = None
        reached_ending = False
    elif command is Command.QUIT:
        responses.append(Bye())
        if state.end is None:
            state.end = clock()

    state.current_place_id = place.id
    if reached_ending:
        state.end = clock()
        logger.info("record=%s finished at place=%s", state.record_id, place.id)

    return collapse(responses)


def _describe(place: Place, responses: list[Response]) -> None:
    if place.description is not None:
        responses.append(Say(text=place.description))
    if place.instructions is not None:
        responses.append(Say(text=place.instructions))


def _parse_delay(value: str) -> float:
    try:
        seconds = float(value)
    except ValueError as e:
        raise InvalidDelayValue(value) from e
    if seconds < 0 or not math.isfinite(seconds):
        raise InvalidDelayValue(value)
    return seconds
