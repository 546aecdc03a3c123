"""Tests for adventurebot.console: ConsoleRenderer and run_console."""

import io
import random

from adventurebot.console import (
    APOLOGY_TEXT,
    NOT_UNDERSTOOD_TEXT,
    PROMPT,
    ConsoleRenderer,
    run_console,
)
from adventurebot.loader import parse_yaml
from adventurebot.models import SessionStatus
from adventurebot.responses import Delay, Multiple, Play, Say, dispatch

GRAPH = parse_yaml("""
places:
  start:
    description: A dusty road.
    instructions: Say one to walk.
    choices:
      OptionOne:
        - Play: steps.mp3
        - Pause: 0.5
        - Goto: inn
      OptionTwo:
        - Goto: nowhere
  inn:
    description: A warm inn.
    finished: true
""")


def _script(*lines: str):
    """read_line stub returning *lines* in order, then EOF."""
    prompts: list[str] = []
    remaining = list(lines)

    def read_line(prompt: str) -> str:
        prompts.append(prompt)
        if not remaining:
            raise EOFError
        return remaining.pop(0)

    read_line.prompts = prompts  # type: ignore[attr-defined]
    return read_line


def _renderer(out: io.StringIO, sleeps: list[float] | None = None) -> ConsoleRenderer:
    sleeps = sleeps if sleeps is not None else []
    return ConsoleRenderer(out, typing=False, sleep=sleeps.append)


# ---------------------------------------------------------------------------
# ConsoleRenderer
# ---------------------------------------------------------------------------

class TestConsoleRenderer:
    def test_say_without_typing(self) -> None:
        out = io.StringIO()
        sleeps: list[float] = []
        _renderer(out, sleeps).say("Hello.")
        assert out.getvalue() == "Hello.\n"
        assert sleeps == []

    def test_say_with_typing_sleeps_per_character(self) -> None:
        out = io.StringIO()
        sleeps: list[float] = []
        renderer = ConsoleRenderer(out, sleep=sleeps.append, rng=random.Random(7))
        renderer.say("abc")
        assert out.getvalue() == "abc\n"
        assert len(sleeps) == 3
        assert all(0 <= s < 0.01 for s in sleeps)

    def test_delay_and_play(self) -> None:
        out = io.StringIO()
        sleeps: list[float] = []
        dispatch(Multiple(responses=(Delay(seconds=1.5), Play(sound_id="bell.mp3"))), _renderer(out, sleeps))
        assert sleeps == [1.5]
        assert out.getvalue() == "(bell.mp3)\n"

    def test_not_understood_text(self) -> None:
        out = io.StringIO()
        _renderer(out).not_understood()
        assert out.getvalue() == NOT_UNDERSTOOD_TEXT + "\n"

    def test_finished_is_silent_and_bye_quits(self) -> None:
        out = io.StringIO()
        renderer = _renderer(out)
        renderer.finished()
        assert not renderer.quit
        renderer.bye()
        assert renderer.quit
        assert out.getvalue() == ""


# ---------------------------------------------------------------------------
# run_console
# ---------------------------------------------------------------------------

class TestRunConsole:
    def test_opens_with_start_description(self) -> None:
        out = io.StringIO()
        read_line = _script("quit")
        run_console(GRAPH, read_line=read_line, renderer=_renderer(out))
        assert out.getvalue().startswith("A dusty road.\nSay one to walk.\n")
        assert read_line.prompts == [PROMPT]

    def test_playthrough_to_ending(self) -> None:
        out = io.StringIO()
        sleeps: list[float] = []
        renderer = _renderer(out, sleeps)
        state = run_console(GRAPH, read_line=_script("1", "quit"), renderer=renderer)
        assert "(steps.mp3)\nA warm inn.\n" in out.getvalue()
        assert sleeps == [0.5]
        assert state.current_place_id == "inn"
        assert state.end is not None
        assert state.status is SessionStatus.IN_PROGRESS

    def test_unknown_input_is_not_understood(self) -> None:
        out = io.StringIO()
        state = run_console(GRAPH, read_line=_script("dance", "quit"), renderer=_renderer(out))
        assert NOT_UNDERSTOOD_TEXT in out.getvalue()
        # Restart and Quit only; unparsed text never reaches the engine
        assert state.commands_issued == 2

    def test_commands_are_case_insensitive(self) -> None:
        state = run_console(GRAPH, read_line=_script("OPTIONONE", "Quit"), renderer=_renderer(io.StringIO()))
        assert state.current_place_id == "inn"

    def test_end_of_input_quits(self) -> None:
        renderer = _renderer(io.StringIO())
        state = run_console(GRAPH, read_line=_script(), renderer=renderer)
        assert renderer.quit
        assert state.end is not None

    def test_engine_error_is_reported_and_play_continues(self) -> None:
        out = io.StringIO()
        state = run_console(GRAPH, read_line=_script("2", "1", "quit"), renderer=_renderer(out))
        assert APOLOGY_TEXT in out.getvalue()
        assert state.current_place_id == "inn"

    def test_restart_counts_attempts(self) -> None:
        state = run_console(GRAPH, read_line=_script("restart", "quit"), renderer=_renderer(io.StringIO()))
        assert state.attempts == 2
        assert state.current_place_id == "start"


def test_say_directive_is_written():
    out = io.StringIO()
    dispatch(Say(text="Plain."), _renderer(out))
    assert out.getvalue() == "Plain.\n"
