import os
import shutil
from pathlib import Path

import pytest

TEST_DATA_DIR = Path("data-tests")

# backend.app builds its default instance at import time
os.environ["DATA_DIR"] = str(TEST_DATA_DIR)

from backend import storage  # noqa: E402
from backend.adventure import clear_cache  # noqa: E402


@pytest.fixture(autouse=True)
def clean_test_data(monkeypatch):
    """Wipe and re-init data-tests/ before every test."""
    monkeypatch.delenv("ADVENTURE_FILE", raising=False)
    if TEST_DATA_DIR.exists():
        shutil.rmtree(TEST_DATA_DIR)
    storage.init_storage(TEST_DATA_DIR)
    clear_cache()
    yield
    # leave data-tests around after tests for inspection; CI can ignore it
