"""Static configuration for querybook.

User-editable settings (database location, result limit, logging) live in a
single JSON file. The path can be overridden with QUERYBOOK_CONFIG, which is
also read from a .env file.
"""

import json
import os

from dotenv import load_dotenv

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

load_dotenv()

CONFIG_PATH = os.getenv("QUERYBOOK_CONFIG", os.path.join(PROJECT_ROOT, "config.json"))


def load_json_config(path: str) -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(path):
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r", encoding="utf-8") as handle:
        loaded = json.load(handle)
    if not isinstance(loaded, dict):
        raise ValueError(f"{path}: config root must be an object")
    return loaded


def resolve_path(path: str) -> str:
    """Resolve config-relative paths against the project root."""

    if path == ":memory:" or os.path.isabs(path):
        return path
    return os.path.join(PROJECT_ROOT, path)


_CONFIG = load_json_config(CONFIG_PATH)

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Where to store the SQLite database.
_database = _CONFIG.get("database", {})
DB_PATH = resolve_path(_database.get("path", "querybook.db"))

# Upper bound for every list query.
_query = _CONFIG.get("query", {})
MAX_RESULTS = int(_query.get("max_results", 10))

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
