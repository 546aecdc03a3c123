"""Response directives emitted by the engine.

Every turn produces an ordered sequence of directives. A turn that produced
exactly one directive returns it directly; anything else is wrapped in
Multiple. Use flatten() to treat both shapes the same way.

    Say              speak/print text
    Delay            pause for a number of seconds
    Play             play a sound, identified by an id (front ends resolve URLs)
    NotUnderstood    the command has no meaning at the current place
    Bye              the player ended the session
    Finished         the player reached an ending
    Multiple         ordered list of the above

Front ends that prefer a push style implement ResponseHandler and call
dispatch(); the engine itself never calls back into the front end.
"""

from __future__ import annotations

from typing import Annotated, Literal, Protocol, Union

from pydantic import BaseModel, ConfigDict, Field


class Say(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["say"] = "say"
    text: str


class Delay(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["delay"] = "delay"
    seconds: float


class Play(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["play"] = "play"
    sound_id: str


class NotUnderstood(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["not_understood"] = "not_understood"


class Bye(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["bye"] = "bye"


class Finished(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["finished"] = "finished"


class Multiple(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["multiple"] = "multiple"
    responses: tuple[Response, ...] = ()


Response = Annotated[
    Union[Say, Delay, Play, NotUnderstood, Bye, Finished, Multiple],
    Field(discriminator="kind"),
]

Multiple.model_rebuild()


def collapse(responses: list[Response]) -> Response:
    """One directive is returned as-is; zero or several are wrapped in Multiple."""
    if len(responses) == 1:
        return responses[0]
    return Multiple(responses=tuple(responses))


def flatten(response: Response) -> list[Response]:
    """Return the leaf directives of *response* in order."""
    if isinstance(response, Multiple):
        result: list[Response] = []
        for item in response.responses:
            result.extend(flatten(item))
        return result
    return [response]


# ---------------------------------------------------------------------------
# Push-style adapter
# ---------------------------------------------------------------------------

class ResponseHandler(Protocol):
    def say(self, text: str) -> None: ...

    def delay(self, seconds: float) -> None: ...

    def play(self, sound_id: str) -> None: ...

    def not_understood(self) -> None: ...

    def bye(self) -> None: ...

    def finished(self) -> None: ...


def dispatch(response: Response, handler: ResponseHandler) -> None:
    """Invoke the matching handler method for every directive, in order."""
    for item in flatten(response):
        if isinstance(item, Say):
            handler.say(item.text)
        elif isinstance(item, Delay):
            handler.delay(item.seconds)
        elif isinstance(item, Play):
            handler.play(item.sound_id)
        elif isinstance(item, NotUnderstood):
            handler.not_understood()
        elif isinstance(item, Bye):
            handler.bye()
        elif isinstance(item, Finished):
            handler.finished()
        else:
            raise TypeError(f"Unhandled response type {type(item).__name__}")
