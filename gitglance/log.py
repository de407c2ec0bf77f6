"""Process-level logging setup for the command-line front door.

Library modules only create module loggers; handlers are installed here.
"""

from __future__ import annotations

import logging

LOG_FORMAT = "[%(asctime)s][%(levelname)s][%(name)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def init_logging(level: str) -> None:
    """Install a single stderr handler on the root logger at ``level``."""
    level_value = logging.getLevelName(level.strip().upper())
    if not isinstance(level_value, int):
        raise ValueError(f"Invalid logging level: {level}")

    root_logger = logging.getLogger()
    root_logger.setLevel(level_value)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(level_value)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    root_logger.addHandler(handler)


__all__ = ["init_logging"]
