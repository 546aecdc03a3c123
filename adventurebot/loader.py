"""Adventure definition loader.

Turns JSON or YAML source text into a PlaceGraph:

    {
      "places": {
        "<place-id>": {
          "description": "...",        optional
          "instructions": "...",       optional
          "finished": false,           optional
          "choices": {
            "<command>": [ {"<action>": "<argument>"}, ... ]
          }
        }
      }
    }

Command and action names are matched case-insensitively. Scalar values are
read as text (a JSON number 2.5 becomes the argument "2.5"), which is also
how YAML is read: plain YAML scalars are never converted to booleans or
numbers, so a `Yes:` choice key stays the Yes command.

Any structural problem raises a LoaderError subclass carrying the dotted
path of the offending node; no partial graph is ever returned. A graph that
does not define the "start" place gets a placeholder one.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any

import yaml

from adventurebot.models import START_PLACE_ID, Action, Place, PlaceGraph
from adventurebot.vocabulary import ActionKind, Command

logger = logging.getLogger(__name__)

MISSING_START_DESCRIPTION = (
    "No start place is defined for this adventure. "
    "Please check your adventure file and try again."
)
MISSING_START_INSTRUCTIONS = "Please check your adventure file and try again."

_JSON_FORMATS = {"json"}
_YAML_FORMATS = {"yaml", "yml"}


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class LoaderError(ValueError):
    """Raised when an adventure definition cannot be loaded."""

    def __init__(self, message: str, path: str = "") -> None:
        super().__init__(message)
        self.path = path


class UnsupportedFormat(LoaderError):
    def __init__(self, fmt: str | None) -> None:
        super().__init__(f"Unsupported file format: {fmt!r}")
        self.format = fmt


class MalformedStructure(LoaderError):
    pass


class InvalidCommandName(LoaderError):
    def __init__(self, name: str, path: str) -> None:
        super().__init__(f"Illegal value for choice ({name}) at {path}", path)
        self.name = name


class InvalidActionName(LoaderError):
    def __init__(self, name: str, path: str) -> None:
        super().__init__(f"Illegal key for action ({name}) at {path}", path)
        self.name = name


class InvalidActionShape(LoaderError):
    pass


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------

def load_from(path: Path | str) -> PlaceGraph:
    """Read a definition file; the extension selects the format."""
    path = Path(path)
    return parse(path.read_text(encoding="utf-8"), path.suffix)


def parse(source: str, fmt: str | None) -> PlaceGraph:
    """Parse *source* using a format hint such as ".json", "yaml" or ".yml"."""
    key = (fmt or "").strip().lower().lstrip(".")
    if key in _JSON_FORMATS:
        return parse_json(source)
    if key in _YAML_FORMATS:
        return parse_yaml(source)
    raise UnsupportedFormat(fmt)


def parse_json(source: str) -> PlaceGraph:
    try:
        data = json.loads(source)
    except json.JSONDecodeError as e:
        raise MalformedStructure(f"Invalid JSON: {e}") from e
    return build_graph(data)


def parse_yaml(source: str) -> PlaceGraph:
    try:
        data = yaml.load(source, Loader=_TextLoader)
    except yaml.YAMLError as e:
        raise MalformedStructure(f"Invalid YAML: {e}") from e
    return build_graph(data)


def build_graph(data: Any) -> PlaceGraph:
    """Validate already-decoded definition data and build the graph."""
    if not isinstance(data, dict):
        raise MalformedStructure(
            f"Expected object at top level but found {_type_name(data)} instead."
        )

    places: dict[str, Place] = {}
    for place_id, place_cfg in _optional_object(data, "places", "").items():
        place_id = str(place_id)
        places[place_id] = _parse_place(place_id, place_cfg, _child("places", place_id))

    if START_PLACE_ID not in places:
        logger.warning("Adventure has no %r place, using placeholder", START_PLACE_ID)
        places[START_PLACE_ID] = Place(
            id=START_PLACE_ID,
            description=MISSING_START_DESCRIPTION,
            instructions=MISSING_START_INSTRUCTIONS,
        )

    logger.debug("Loaded adventure with %d places", len(places))
    return PlaceGraph(places=places)


# ---------------------------------------------------------------------------
# Serialisation (same schema the loader reads)
# ---------------------------------------------------------------------------

def dump_graph(graph: PlaceGraph) -> dict[str, Any]:
    places: dict[str, Any] = {}
    for place_id in graph.ids():
        place = graph[place_id]
        entry: dict[str, Any] = {}
        if place.description is not None:
            entry["description"] = place.description
        if place.instructions is not None:
            entry["instructions"] = place.instructions
        if place.finished:
            entry["finished"] = True
        if place.choices:
            entry["choices"] = {
                command.value: [{action.kind.value: action.argument} for action in actions]
                for command, actions in place.choices.items()
            }
        places[place_id] = entry
    return {"places": places}


def dumps(graph: PlaceGraph, fmt: str = "json") -> str:
    key = fmt.strip().lower().lstrip(".")
    data = dump_graph(graph)
    if key in _JSON_FORMATS:
        return json.dumps(data, indent=2)
    if key in _YAML_FORMATS:
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    raise UnsupportedFormat(fmt)


# ---------------------------------------------------------------------------
# Place parsing
# ---------------------------------------------------------------------------

def _parse_place(place_id: str, cfg: Any, path: str) -> Place:
    if not isinstance(cfg, dict):
        raise MalformedStructure(
            f"Expected object at {path} but found {_type_name(cfg)} instead.", path
        )

    choices: dict[Command, tuple[Action, ...]] = {}
    choices_path = _child(path, "choices")
    for name, actions_cfg in _optional_object(cfg, "choices", path).items():
        name = str(name)
        choice_path = _child(choices_path, name)
        command = Command.parse(name)
        if command is None:
            raise InvalidCommandName(name, choice_path)
        if not isinstance(actions_cfg, list):
            raise MalformedStructure(
                f"Expected array at {choice_path} but found {_type_name(actions_cfg)} instead.",
                choice_path,
            )
        choices[command] = tuple(
            _parse_action(item, f"{choice_path}[{i}]") for i, item in enumerate(actions_cfg)
        )

    return Place(
        id=place_id,
        description=_optional_text(cfg, "description", path),
        instructions=_optional_text(cfg, "instructions", path),
        finished=_optional_flag(cfg, "finished", path),
        choices=choices,
    )


def _parse_action(item: Any, path: str) -> Action:
    if not isinstance(item, dict) or len(item) != 1:
        raise InvalidActionShape(
            f"Expected object with a single action key at {path} but found {_describe_shape(item)} instead.",
            path,
        )
    name, argument = next(iter(item.items()))
    name = str(name)
    kind = ActionKind.parse(name)
    if kind is None:
        raise InvalidActionName(name, _child(path, name))
    if argument is None or isinstance(argument, (dict, list)):
        raise InvalidActionShape(
            f"Expected string at {_child(path, name)} but found {_type_name(argument)} instead.",
            _child(path, name),
        )
    return Action(kind=kind, argument=_as_text(argument))


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------

def _optional_object(cfg: dict, key: str, path: str) -> dict:
    value = cfg.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        where = _child(path, key)
        raise MalformedStructure(
            f"Expected object at {where} but found {_type_name(value)} instead.", where
        )
    return value


def _optional_text(cfg: dict, key: str, path: str) -> str | None:
    value = cfg.get(key)
    if value is None:
        return None
    if isinstance(value, (dict, list)):
        where = _child(path, key)
        raise MalformedStructure(
            f"Expected string at {where} but found {_type_name(value)} instead.", where
        )
    return _as_text(value)


def _optional_flag(cfg: dict, key: str, path: str) -> bool:
    value = cfg.get(key)
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() == "true"
    if isinstance(value, (dict, list)):
        where = _child(path, key)
        raise MalformedStructure(
            f"Expected boolean at {where} but found {_type_name(value)} instead.", where
        )
    return False


def _as_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _child(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, dict):
        return "object"
    if isinstance(value, list):
        return "array"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (int, float)):
        return "number"
    return type(value).__name__


def _describe_shape(value: Any) -> str:
    if isinstance(value, dict):
        return f"object with {len(value)} keys"
    return _type_name(value)


# ---------------------------------------------------------------------------
# YAML loader that keeps plain scalars as text (null aside)
# ---------------------------------------------------------------------------

class _TextLoader(yaml.SafeLoader):
    pass


_TextLoader.yaml_implicit_resolvers = {}
_TextLoader.add_implicit_resolver(
    "tag:yaml.org,2002:null",
    re.compile(r"^(?:~|null|Null|NULL|)$"),
    ["~", "n", "N", ""],
)
