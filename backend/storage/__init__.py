"""File-based JSON storage.

Data layout:
  data/
    players/
      <slug>.json        Saved SessionState per player record id
    config.json          App settings (adventure file, sound files URL, webhook)

Slug rules: record id → Unicode normalize → strip non-ASCII → lowercase →
replace non-alnum runs with hyphen → strip leading/trailing hyphens.

Config: get_config() returns defaults merged with stored values.
update_config() applies partial updates; unknown keys are ignored.
"""

# Re-export all public symbols so `from backend import storage` keeps working.

from .core import (  # noqa: F401
    data_dir,
    init_storage,
    players_dir,
    slugify,
)

from .players import (  # noqa: F401
    delete_player,
    get_player,
    list_players,
    save_player,
)

from .config import (  # noqa: F401
    get_config,
    update_config,
)
