"""Pre-DB bootstrap configuration. Zero imports from the rest of the app.

Stores user preferences that must be known before opening the DB (db_path,
log_level). Config lives in ~/.family_budget/config.json unless the
FAMILY_BUDGET_CONFIG_DIR environment variable points elsewhere.
"""
import json
import os
from pathlib import Path

DEFAULT_LOG_LEVEL = "INFO"


def config_dir() -> Path:
    override = os.environ.get("FAMILY_BUDGET_CONFIG_DIR")
    return Path(override) if override else Path.home() / ".family_budget"


def config_file() -> Path:
    return config_dir() / "config.json"


def load_config() -> dict:
    """Returns {} on missing or corrupt file; never raises."""
    try:
        with open(config_file(), "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(config: dict) -> None:
    """Creates the config dir if needed; atomic write via .tmp + os.replace()."""
    target = config_file()
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp = target.with_suffix(".tmp")
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2)
        os.replace(tmp, target)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


def get_db_path() -> str | None:
    """Return config["db_path"] or None if not set."""
    return load_config().get("db_path")


def set_db_path(path: str | None) -> None:
    config = load_config()
    if path is None:
        config.pop("db_path", None)
    else:
        config["db_path"] = path
    save_config(config)


def get_log_level() -> str:
    level = load_config().get("log_level") or DEFAULT_LOG_LEVEL
    return str(level).upper()
