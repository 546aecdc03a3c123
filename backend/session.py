"""Player session restore and guarded command execution for the skill backend.

Restore policy:
  - new skill session  → resume the stored player (status Restored) or start fresh
  - running session    → read the player from the session attributes
  - anything unusable (missing, invalid, or pointing at a place the current
    adventure no longer has) → fresh player at "start" with status New
"""

import logging
from typing import Any

from pydantic import ValidationError

from adventurebot.engine import EngineError, execute
from adventurebot.models import PlaceGraph, SessionState, SessionStatus
from adventurebot.responses import Response, Say
from adventurebot.vocabulary import Command

from backend import storage

logger = logging.getLogger(__name__)

APOLOGY_TEXT = "Oops, something went wrong. Please try again."


def new_player(record_id: str) -> SessionState:
    return SessionState(record_id=record_id)


def restore_player(
    graph: PlaceGraph,
    record_id: str,
    *,
    new_session: bool,
    attributes: dict[str, Any] | None = None,
) -> SessionState:
    if new_session:
        stored = storage.get_player(record_id) if record_id else None
        if stored is None:
            logger.info("new player session started record=%s", record_id)
            return new_player(record_id)
        state = _validate(stored, record_id)
        if state is None:
            return new_player(record_id)
        if state.current_place_id not in graph:
            logger.warning(
                "stored player place %r no longer exists, resetting record=%s",
                state.current_place_id, record_id,
            )
            return new_player(record_id)
        state.status = SessionStatus.RESTORED
        logger.info("player restored record=%s place=%s", record_id, state.current_place_id)
        return state

    player = (attributes or {}).get("player")
    if not isinstance(player, dict):
        logger.warning(
            "unable to find player state in session (type: %s) record=%s",
            type(player).__name__, record_id,
        )
        return new_player(record_id)
    state = _validate(player, record_id)
    if state is None:
        return new_player(record_id)
    if state.current_place_id not in graph:
        logger.warning(
            "unable to find matching place for restored player (value: %r) record=%s",
            state.current_place_id, record_id,
        )
        return new_player(record_id)
    return state


def try_execute(graph: PlaceGraph, state: SessionState, command: Command) -> Response:
    """Run a command; failures become an apology instead of an exception."""
    try:
        response = execute(graph, state, command)
    except EngineError:
        logger.exception("adventure error for record=%s command=%s", state.record_id, command.value)
        return Say(text=APOLOGY_TEXT)
    except Exception:
        logger.exception("unexpected error for record=%s command=%s", state.record_id, command.value)
        return Say(text=APOLOGY_TEXT)
    state.status = SessionStatus.IN_PROGRESS
    return response


def serialize_player(state: SessionState) -> dict[str, Any]:
    return state.model_dump(mode="json")


def save_player(state: SessionState) -> None:
    """Persist the player; anonymous players (empty record id) live only in the session."""
    if not state.record_id:
        logger.debug("not saving anonymous player")
        return
    storage.save_player(state.record_id, serialize_player(state))


def _validate(data: dict[str, Any], record_id: str) -> SessionState | None:
    try:
        state = SessionState.model_validate(data)
    except ValidationError as e:
        logger.warning("invalid player state record=%s: %s", record_id, e)
        return None
    state.record_id = record_id
    return state
