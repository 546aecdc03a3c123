"""Core domain models.

The place graph (Action, Place, PlaceGraph) is built once by the loader and
never mutated afterwards, so one graph can be shared by every session.
SessionState is the only mutable record; the engine updates it in place and
the front end persists it between turns.

Pydantic is used for validation and serialisation at every data boundary.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from adventurebot.vocabulary import ActionKind, Command

START_PLACE_ID = "start"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Action(BaseModel):
    """One authored effect inside a choice, e.g. Goto("cellar")."""

    model_config = ConfigDict(frozen=True)

    kind: ActionKind
    argument: str


class Place(BaseModel):
    """A node of the adventure graph."""

    model_config = ConfigDict(frozen=True)

    id: str
    description: str | None = None
    instructions: str | None = None
    finished: bool = False
    choices: dict[Command, tuple[Action, ...]] = Field(default_factory=dict)


class PlaceGraph(BaseModel):
    """Read-only mapping of place id → Place."""

    model_config = ConfigDict(frozen=True)

    places: dict[str, Place] = Field(default_factory=dict)

    def __getitem__(self, place_id: str) -> Place:
        return self.places[place_id]

    def __contains__(self, place_id: object) -> bool:
        return place_id in self.places

    def __len__(self) -> int:
        return len(self.places)

    def get(self, place_id: str) -> Place | None:
        return self.places.get(place_id)

    def ids(self) -> list[str]:
        return list(self.places)


class SessionStatus(str, Enum):
    NEW = "New"
    IN_PROGRESS = "InProgress"
    RESTORED = "Restored"


class SessionState(BaseModel):
    """Per-player progress record. Owned by exactly one session at a time."""

    record_id: str = ""
    current_place_id: str = START_PLACE_ID
    status: SessionStatus = SessionStatus.NEW
    commands_issued: int = 0
    attempts: int = 0
    start: datetime = Field(default_factory=utcnow)
    end: datetime | None = None  # set when a finished place is reached or the player quits
