"""Schema loading utility.

JSON Schemas ship in the package's ``schemas/`` directory and are looked
up by file name.
"""

import json
from functools import lru_cache
from pathlib import Path

SCHEMA_DIR = Path(__file__).resolve().parent.parent / "schemas"


def load_schema(path: Path) -> dict:
    """Load a JSON Schema file and return as dict."""
    with open(path) as f:
        return json.load(f)


@lru_cache(maxsize=None)
def bundled_schema(name: str) -> dict:
    """Load one of the package's JSON Schemas by file name (cached)."""
    return load_schema(SCHEMA_DIR / name)
