"""Persistent JSON config helpers.

Stores scheduler sizing, index-watch polling, and matching preferences.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path

from platformdirs import user_config_dir

logger = logging.getLogger(__name__)

APP_NAME = "gitglance"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH

LOG_LEVEL_NAMES = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


@dataclass(frozen=True)
class EngineConfig:
    """Tunables for the status scheduler and its helpers."""

    queue_depth: int = 100
    max_tracked_repositories: int = 15
    index_watch_poll_seconds: float = 0.5
    respect_gitignore: bool = True
    canonicalize_paths: bool = False
    log_level: str = "WARNING"


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Any filesystem/serialization error is logged and ignored to keep runtime
    behavior non-fatal when config cannot be written.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except (OSError, TypeError, ValueError) as exc:
        logger.warning("Failed to write config. path=%s error=%s", CONFIG_PATH, exc)


def _positive_int(value: object, default: int) -> int:
    """Booleans and non-integers are treated as invalid."""
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return default
    return value


def _positive_float(value: object, default: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        return default
    return float(value)


def _bool(value: object, default: bool) -> bool:
    return value if isinstance(value, bool) else default


def _log_level(value: object, default: str) -> str:
    if not isinstance(value, str):
        return default
    normalized = value.strip().upper()
    return normalized if normalized in LOG_LEVEL_NAMES else default


def load_engine_config() -> EngineConfig:
    """Load ``EngineConfig`` with per-key validation and defaults."""
    data = load_config()
    defaults = EngineConfig()
    return EngineConfig(
        queue_depth=_positive_int(data.get("queue_depth"), defaults.queue_depth),
        max_tracked_repositories=_positive_int(
            data.get("max_tracked_repositories"),
            defaults.max_tracked_repositories,
        ),
        index_watch_poll_seconds=_positive_float(
            data.get("index_watch_poll_seconds"),
            defaults.index_watch_poll_seconds,
        ),
        respect_gitignore=_bool(data.get("respect_gitignore"), defaults.respect_gitignore),
        canonicalize_paths=_bool(data.get("canonicalize_paths"), defaults.canonicalize_paths),
        log_level=_log_level(data.get("log_level"), defaults.log_level),
    )


def save_engine_config(engine_config: EngineConfig) -> None:
    """Merge ``engine_config`` into the persisted config object."""
    config = load_config()
    config.update(asdict(engine_config))
    save_config(config)


__all__ = [
    "CONFIG_PATH",
    "EngineConfig",
    "load_config",
    "load_engine_config",
    "save_config",
    "save_engine_config",
]
