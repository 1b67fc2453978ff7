"""Pre-DB bootstrap configuration. Zero imports from the rest of the app.

Stores preferences that must be known before opening the DB (db_folder,
log_level, auto-generation interval, detection threshold).
Config lives in ~/.budget_recurring/config.json to avoid a bootstrapping problem.
"""
import json
import os
from pathlib import Path

CONFIG_DIR = Path.home() / ".budget_recurring"
CONFIG_FILE = CONFIG_DIR / "config.json"

DEFAULT_LOG_LEVEL = "INFO"


def load_config() -> dict:
    """Returns {} on missing or corrupt file; never raises."""
    try:
        with open(CONFIG_FILE, "r", encoding="utf-8") as f:
            data = json.load(f)
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def save_config(config: dict) -> None:
    """Creates the config dir if needed; atomic write via .tmp + os.replace()."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    tmp = CONFIG_FILE.with_suffix(".tmp")
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2)
        os.replace(tmp, CONFIG_FILE)
    except Exception:
        try:
            tmp.unlink(missing_ok=True)
        except Exception:
            pass


def get_db_folder() -> str | None:
    """Return config["db_folder"] or None if not set."""
    return load_config().get("db_folder")


def get_log_level() -> str:
    level = load_config().get("log_level", DEFAULT_LOG_LEVEL)
    return str(level).upper()


def get_auto_generate_interval_minutes() -> int:
    """Minutes between batch runs; 0 means run once at startup only."""
    try:
        return max(0, int(load_config().get("auto_generate_interval_minutes", 0)))
    except (TypeError, ValueError):
        return 0


def get_min_occurrences(default: int = 2) -> int:
    try:
        value = int(load_config().get("min_occurrences", default))
    except (TypeError, ValueError):
        return default
    return value if value >= 1 else default
