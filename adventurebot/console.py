"""Interactive terminal player.

Reads one command per line, runs it through the engine and renders the
directives as console text. Said text is typed out character by character
unless typing is disabled. The session starts with a Restart and ends on
Bye or end of input.
"""

from __future__ import annotations

import logging
import random
import sys
import time
from typing import Callable, TextIO

from adventurebot.engine import EngineError, execute
from adventurebot.models import PlaceGraph, SessionState, SessionStatus
from adventurebot.responses import NotUnderstood, Response, Say, dispatch
from adventurebot.vocabulary import Command

logger = logging.getLogger(__name__)

NOT_UNDERSTOOD_TEXT = "Sorry, I don't know what that means."
APOLOGY_TEXT = "Oops, something went wrong. Please try again."
PROMPT = "> "


class ConsoleRenderer:
    """ResponseHandler that writes to a text stream."""

    def __init__(
        self,
        out: TextIO | None = None,
        *,
        typing: bool = True,
        sleep: Callable[[float], None] = time.sleep,
        rng: random.Random | None = None,
    ) -> None:
        self._out = out or sys.stdout
        self._typing = typing
        self._sleep = sleep
        self._rng = rng or random.Random()
        self.quit = False

    def say(self, text: str) -> None:
        if not self._typing:
            self._out.write(text + "\n")
            return
        for char in text:
            self._sleep(self._rng.random() * 0.01)
            self._out.write(char)
            self._out.flush()
        self._out.write("\n")

    def delay(self, seconds: float) -> None:
        self._sleep(seconds)

    def play(self, sound_id: str) -> None:
        self._out.write(f"({sound_id})\n")

    def not_understood(self) -> None:
        self.say(NOT_UNDERSTOOD_TEXT)

    def bye(self) -> None:
        self.quit = True

    def finished(self) -> None:
        # the ending place was already described
        pass


def run_console(
    graph: PlaceGraph,
    state: SessionState | None = None,
    *,
    read_line: Callable[[str], str] | None = None,
    renderer: ConsoleRenderer | None = None,
) -> SessionState:
    """Play until the player quits. Returns the final session state."""
    state = state or SessionState(record_id="console")
    read_line = read_line or input
    renderer = renderer or ConsoleRenderer()

    response: Response = _try_execute(graph, state, Command.RESTART)
    while True:
        dispatch(response, renderer)
        if renderer.quit:
            return state

        try:
            text = read_line(PROMPT)
        except EOFError:
            text = Command.QUIT.value

        command = Command.parse(text)
        if command is None:
            logger.debug("unrecognized input %r", text)
            response = NotUnderstood()
            continue
        response = _try_execute(graph, state, command)


def _try_execute(graph: PlaceGraph, state: SessionState, command: Command) -> Response:
    try:
        response = execute(graph, state, command)
    except EngineError:
        logger.exception("command %s failed", command.value)
        return Say(text=APOLOGY_TEXT)
    state.status = SessionStatus.IN_PROGRESS
    return response
