"""Default file locations.

Scan history is stored in ``~/.phytoscan/history.json`` unless the
``PHYTOSCAN_HOME`` environment variable names another directory.
"""

import os
from pathlib import Path

HISTORY_FILENAME = "history.json"


def get_history_path() -> Path:
    """Return the default history file path, creating its directory.

    The file itself is not created.
    """
    home = os.environ.get("PHYTOSCAN_HOME")
    home_dir = Path(home) if home else Path.home() / ".phytoscan"
    home_dir.mkdir(parents=True, exist_ok=True)
    return home_dir / HISTORY_FILENAME
