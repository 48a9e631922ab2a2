from __future__ import annotations

"""Application settings.

Defaults live in the `Settings` dataclass. An optional `config.yaml` at the
project root overrides them, and a handful of environment variables take
precedence over both:

- `GAME_TRACKER_STORAGE`: path of the JSON key-value storage file
- `GAME_TRACKER_DEBUG`: enable DEBUG logging when set to 1/true/yes
- `RAWG_API_KEY`: API key for the game search service

Example `config.yaml`:

    storage_file: data/storage.json
    autosave_interval_seconds: 30
    search:
      api_key: "..."
      debounce_seconds: 0.5
"""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
import logging
import os

import yaml

from .io_paths import CONFIG_FILE, DEFAULT_STORAGE_FILE, PROJECT_ROOT

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class SearchSettings:
    """Settings for the external game search collaborator."""
    base_url: str = "https://api.rawg.io/api/games"
    api_key: str = ""
    timeout_seconds: float = 10.0
    debounce_seconds: float = 0.5
    min_query_length: int = 3
    max_results: int = 5


@dataclass
class Settings:
    """Top-level application settings with safe defaults."""
    storage_file: Path = DEFAULT_STORAGE_FILE
    slot_key: str = "gameTrackerData"
    autosave_interval_seconds: float = 30.0
    notification_seconds: float = 3.0
    truncate_length: int = 30
    debug: bool = False
    search: SearchSettings = field(default_factory=SearchSettings)


def _apply_mapping(target: Any, data: Mapping[str, Any]) -> None:
    known = {f.name for f in fields(target)}
    for key, value in data.items():
        if key not in known:
            logger.warning(f"Ignoring unknown setting '{key}'")
            continue
        current = getattr(target, key)
        if isinstance(current, Path):
            path = Path(str(value))
            setattr(target, key, path if path.is_absolute() else PROJECT_ROOT / path)
        elif isinstance(current, bool):
            setattr(target, key, str(value).strip().lower() in _TRUTHY if not isinstance(value, bool) else value)
        elif isinstance(current, (int, float)) and not isinstance(current, bool):
            setattr(target, key, type(current)(value))
        else:
            setattr(target, key, value if value is not None else current)


def load_settings(config_path: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build `Settings` from defaults, `config.yaml` and the environment.

    Args:
        config_path: YAML file to read; defaults to `config.yaml` at the project root
        environ: Environment mapping; defaults to `os.environ`

    Returns:
        Fully resolved Settings. A missing or malformed YAML file is logged and
        the defaults are used instead.
    """
    settings = Settings()
    path = Path(config_path) if config_path is not None else CONFIG_FILE
    env = os.environ if environ is None else environ

    raw: Dict[str, Any] = {}
    if path.exists():
        try:
            with path.open("r", encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
            if not isinstance(raw, dict):
                logger.error(f"Settings file {path} must contain a mapping; using defaults")
                raw = {}
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Error reading settings file {path}: {e}")
            raw = {}

    search_raw = raw.pop("search", None) or {}
    try:
        _apply_mapping(settings, raw)
        if isinstance(search_raw, dict):
            _apply_mapping(settings.search, search_raw)
    except (TypeError, ValueError) as e:
        logger.error(f"Invalid value in settings file {path}: {e}; using defaults")
        settings = Settings()

    if env.get("GAME_TRACKER_STORAGE"):
        settings.storage_file = Path(env["GAME_TRACKER_STORAGE"])
    if env.get("GAME_TRACKER_DEBUG"):
        settings.debug = env["GAME_TRACKER_DEBUG"].strip().lower() in _TRUTHY
    if env.get("RAWG_API_KEY"):
        settings.search.api_key = env["RAWG_API_KEY"]

    return settings
