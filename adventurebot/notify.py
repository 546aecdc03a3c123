"""Completion notifications, sent when a player reaches an ending.

Front ends inject a notifier matching the protocol:

    async def __call__(self, summary: dict) -> None: ...

`summary` is built by player_summary() from the SessionState.

Two implementations are provided:

    HttpNotifier   POSTs the summary as JSON to a webhook URL.
    LogNotifier    logs the summary; used when no webhook is configured.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx

from adventurebot.models import SessionState

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    async def __call__(self, summary: dict[str, Any]) -> None: ...


def player_summary(state: SessionState) -> dict[str, Any]:
    return {
        "record_id": state.record_id,
        "place_id": state.current_place_id,
        "attempts": state.attempts,
        "commands_issued": state.commands_issued,
        "start": state.start.isoformat(),
        "end": state.end.isoformat() if state.end else None,
    }


# ---------------------------------------------------------------------------
# HttpNotifier
# ---------------------------------------------------------------------------

class HttpNotifier:
    """Async webhook client.

    Args:
        url:      Endpoint receiving the JSON summary.
        api_key:  Bearer token, or empty string if not required.
        timeout:  HTTP timeout in seconds. Defaults to 10.
    """

    def __init__(self, url: str, api_key: str = "", timeout: float = 10.0) -> None:
        self._url = url
        self._api_key = api_key
        self._timeout = timeout

    def _headers(self) -> dict[str, str]:
        headers: dict[str, str] = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    async def __call__(self, summary: dict[str, Any]) -> None:
        logger.debug("notify url=%s record=%s", self._url, summary.get("record_id"))
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.post(self._url, json=summary, headers=self._headers())
                resp.raise_for_status()
        except httpx.ConnectError as e:
            raise NotifyError(f"Cannot connect to notification endpoint at {self._url}") from e
        except httpx.HTTPStatusError as e:
            raise NotifyError(
                f"Notification endpoint returned HTTP {e.response.status_code}"
            ) from e
        except httpx.TimeoutException as e:
            raise NotifyError(f"Notification endpoint timed out after {self._timeout}s") from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise NotifyError(f"Notification to {self._url} failed: {e}") from e


class LogNotifier:
    async def __call__(self, summary: dict[str, Any]) -> None:
        logger.info(
            "adventure finished record=%s attempts=%s commands=%s",
            summary.get("record_id"), summary.get("attempts"), summary.get("commands_issued"),
        )


class NotifyError(RuntimeError):
    """Raised by HttpNotifier when the endpoint cannot be reached or rejects the call."""
