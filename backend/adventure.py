"""Adventure definition served by the skill backend.

The definition file is parsed once and cached against its modification
time; editing the file makes the next request reload it. Players whose
saved place disappeared in the update are reset by backend.session.
"""

import logging
import os
from pathlib import Path

from adventurebot.loader import load_from
from adventurebot.models import PlaceGraph

from backend import storage

logger = logging.getLogger(__name__)

ROOT = Path(__file__).parent.parent

_cache: dict[Path, tuple[float, PlaceGraph]] = {}


def adventure_path() -> Path:
    """ADVENTURE_FILE env var wins over the stored setting; relative paths are repo-relative."""
    configured = Path(os.getenv("ADVENTURE_FILE") or storage.get_config()["adventure_file"])
    if not configured.is_absolute():
        configured = ROOT / configured
    return configured


def get_adventure(path: Path | None = None) -> PlaceGraph:
    """Return the parsed graph, reloading when the file changed on disk."""
    path = (path or adventure_path()).resolve()
    mtime = path.stat().st_mtime
    cached = _cache.get(path)
    if cached is not None and cached[0] == mtime:
        return cached[1]

    logger.info("loading adventure from %s", path)
    graph = load_from(path)
    _cache[path] = (mtime, graph)
    return graph


def clear_cache() -> None:
    _cache.clear()
