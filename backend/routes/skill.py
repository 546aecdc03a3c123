"""Voice-assistant skill endpoint.

Request routing:
  LaunchRequest              → Restart, reprompt with Help
  IntentRequest <command>    → that command, reprompt with Help
  AMAZON.HelpIntent          → Help
  AMAZON.StopIntent/Cancel   → Quit, session ends
  unknown intent             → NotUnderstood, reprompt with Help
  SessionEndedRequest        → empty response
  System.ExceptionEncountered → empty response

The player travels in the session attributes and is also saved to storage
so a later session can resume where the player left off.
"""

import logging
from typing import Any

from fastapi import APIRouter

from adventurebot.loader import LoaderError
from adventurebot.models import PlaceGraph, SessionState
from adventurebot.notify import HttpNotifier, LogNotifier, Notifier, NotifyError, player_summary
from adventurebot.responses import Finished, NotUnderstood, Response, Say, dispatch, flatten
from adventurebot.vocabulary import Command
from backend import storage
from backend.adventure import get_adventure
from backend.session import (
    APOLOGY_TEXT,
    restore_player,
    save_player,
    serialize_player,
    try_execute,
)
from backend.speech import SsmlBuilder, to_ssml

from .models import SkillRequest

logger = logging.getLogger(__name__)

router = APIRouter()

HELP_INTENT = "AMAZON.HelpIntent"
STOP_INTENTS = {"AMAZON.StopIntent", "AMAZON.CancelIntent"}


@router.post("/skill")
async def skill(body: SkillRequest):
    """Handle one skill request and return speech plus the updated player."""
    request = body.request
    if request.type == "SessionEndedRequest":
        logger.info("session ended")
        return _empty()
    if request.type == "System.ExceptionEncountered":
        logger.warning("system exception reported for previous response")
        return _empty()
    if request.type not in ("LaunchRequest", "IntentRequest"):
        logger.warning("unrecognized skill request type %r", request.type)
        return _empty()

    config = storage.get_config()
    try:
        graph = get_adventure()
    except (LoaderError, OSError):
        logger.exception("unable to load adventure")
        apology = to_ssml(Say(text=APOLOGY_TEXT), config.get("sound_files_url", ""))
        return _build(apology, None, None, end_session=True)

    record_id = body.session.user.user_id or body.session.session_id
    player = restore_player(
        graph, record_id,
        new_session=body.session.new,
        attributes=body.session.attributes,
    )

    reprompt: Response | None = None
    if request.type == "LaunchRequest":
        logger.info("launch record=%s", record_id)
        response = try_execute(graph, player, Command.RESTART)
        reprompt = _help(graph, player)
    else:
        name = request.intent.name if request.intent else ""
        command = Command.parse(name)
        if command is not None:
            logger.info("adventure intent (%s) record=%s", name, record_id)
            response = try_execute(graph, player, command)
            reprompt = _help(graph, player)
        elif name == HELP_INTENT:
            logger.info("built-in help intent (%s) record=%s", name, record_id)
            response = try_execute(graph, player, Command.HELP)
            reprompt = _help(graph, player)
        elif name in STOP_INTENTS:
            logger.info("built-in stop/cancel intent (%s) record=%s", name, record_id)
            response = try_execute(graph, player, Command.QUIT)
        else:
            logger.warning("intent not recognized (%s) record=%s", name, record_id)
            response = NotUnderstood()
            reprompt = _help(graph, player)

    save_player(player)
    if any(isinstance(d, Finished) for d in flatten(response)):
        await _notify_finished(player, config)

    speech = _render(response, config)
    end_session = reprompt is None or speech.ended
    reprompt_ssml = None if end_session else _render(reprompt, config).to_string()
    return _build(speech.to_string(), reprompt_ssml, player, end_session)


def _help(graph: PlaceGraph, player: SessionState) -> Response:
    # reprompts must not count as player commands
    return try_execute(graph, player.model_copy(), Command.HELP)


async def _notify_finished(player: SessionState, config: dict[str, Any]) -> None:
    notifier: Notifier
    if config.get("finished_webhook_url"):
        notifier = HttpNotifier(
            config["finished_webhook_url"],
            api_key=config.get("finished_webhook_api_key", ""),
        )
    else:
        notifier = LogNotifier()
    try:
        await notifier(player_summary(player))
    except NotifyError as e:
        logger.warning("finished notification failed record=%s: %s", player.record_id, e)


def _render(response: Response, config: dict[str, Any]) -> SsmlBuilder:
    builder = SsmlBuilder(config.get("sound_files_url", ""))
    dispatch(response, builder)
    return builder


def _build(
    ssml: str,
    reprompt_ssml: str | None,
    player: SessionState | None,
    end_session: bool,
) -> dict[str, Any]:
    body: dict[str, Any] = {
        "outputSpeech": {"type": "SSML", "ssml": ssml},
        "shouldEndSession": end_session,
    }
    if reprompt_ssml is not None:
        body["reprompt"] = {"outputSpeech": {"type": "SSML", "ssml": reprompt_ssml}}
    return {
        "version": "1.0",
        "sessionAttributes": {"player": serialize_player(player)} if player else {},
        "response": body,
    }


def _empty() -> dict[str, Any]:
    return {"version": "1.0", "sessionAttributes": {}, "response": {}}
