"""Player state persistence (one JSON file per player record)."""

import json
from pathlib import Path
from typing import Any

from .core import players_dir, slugify


def _player_path(record_id: str) -> Path:
    return players_dir() / f"{slugify(record_id)}.json"


def list_players() -> list[dict[str, Any]]:
    results = []
    for path in sorted(players_dir().glob("*.json")):
        results.append(json.loads(path.read_text()))
    return results


def get_player(record_id: str) -> dict[str, Any] | None:
    """Load a stored player. Returns None if the player was never saved."""
    path = _player_path(record_id)
    if not path.is_file():
        return None
    return json.loads(path.read_text())


def save_player(record_id: str, player: dict[str, Any]) -> None:
    """Overwrite the stored player for a record id."""
    _player_path(record_id).write_text(json.dumps(player, indent=2))


def delete_player(record_id: str) -> bool:
    path = _player_path(record_id)
    if not path.is_file():
        return False
    path.unlink()
    return True
