from __future__ import annotations

"""Configuration loading and validation for pilotmath.

Loads YAML configuration, applies section defaults, and replaces
unsupported values with defaults (logging a warning for each).
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..problems.schema import ProblemCategory

logger = logging.getLogger(__name__)

ALLOWED_DURATIONS = {5, 10, 15, 20, 30, 45, 60}
ALLOWED_BACKENDS = {"local", "remote"}
ALL_CATEGORIES = "all"


def _load_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return data


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from YAML or the packaged defaults.

    Args:
        path: Optional path to a YAML config. If None, use package defaults.

    Raises:
        FileNotFoundError: the given path does not exist.
    """
    if path:
        return _load_yaml(Path(path).expanduser())
    return _load_yaml(Path(__file__).with_name("defaults.yml"))


def _positive_int(section: Dict[str, Any], key: str, default: int) -> None:
    value = section.get(key)
    try:
        ivalue = int(value)
    except (TypeError, ValueError):
        ivalue = 0
    if ivalue <= 0 or isinstance(value, bool):
        logger.warning("Invalid %s '%s', using %s.", key, value, default)
        ivalue = default
    section[key] = ivalue


def validate_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Apply defaults and validate configuration values.

    Args:
        cfg: The raw configuration dictionary.

    Returns:
        The validated and merged configuration dictionary.
    """
    # Shallow defaults for missing sections
    for name in ("session", "storage", "stats"):
        if not isinstance(cfg.get(name), dict):
            cfg[name] = {}

    session = cfg["session"]
    storage = cfg["storage"]
    stats = cfg["stats"]

    session.setdefault("duration_minutes", 15)
    session.setdefault("category", ALL_CATEGORIES)

    storage.setdefault("backend", "local")
    storage.setdefault("data_dir", "~/.pilotmath")
    storage.setdefault("max_results", 1000)
    storage.setdefault("max_sessions", 100)

    stats.setdefault("weak_min_attempts", 5)
    stats.setdefault("weak_limit", 5)
    stats.setdefault("calendar_days", 365)
    stats.setdefault("missed_min_total", 5)

    # Enum validations
    duration = session.get("duration_minutes")
    if duration not in ALLOWED_DURATIONS or isinstance(duration, bool):
        logger.warning("Unsupported duration_minutes '%s', using 15.", duration)
        session["duration_minutes"] = 15

    category = str(session.get("category"))
    if category != ALL_CATEGORIES:
        try:
            ProblemCategory(category)
        except ValueError:
            logger.warning("Unknown category '%s', using all categories.", category)
            category = ALL_CATEGORIES
    session["category"] = category

    backend = storage.get("backend")
    if backend not in ALLOWED_BACKENDS:
        logger.warning("Unsupported storage backend '%s', falling back to 'local'.", backend)
        storage["backend"] = "local"

    storage["data_dir"] = str(storage.get("data_dir") or "~/.pilotmath")
    _positive_int(storage, "max_results", 1000)
    _positive_int(storage, "max_sessions", 100)

    _positive_int(stats, "weak_min_attempts", 5)
    _positive_int(stats, "weak_limit", 5)
    _positive_int(stats, "calendar_days", 365)
    _positive_int(stats, "missed_min_total", 5)

    return cfg
