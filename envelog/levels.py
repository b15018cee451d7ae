"""
Severity levels and threshold filtering.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any, Dict

from loguru import logger

__all__ = ["Level", "LEVEL_LABELS", "parse_level", "should_emit"]


class Level(IntEnum):
    TRACE = 1
    DEBUG = 2
    INFO = 3
    WARN = 4
    ERROR = 5
    PANIC = 6
    FATAL = 7

    @property
    def label(self) -> str:
        return self.name.lower()


LEVEL_LABELS: Dict[str, Level] = {level.label: level for level in Level}

_ALIASES: Dict[str, Level] = {"warning": Level.WARN}


def parse_level(name: Any) -> Level:
    """
    Resolve a level name (or an existing Level) to a Level.

    Never raises: anything unrecognized falls back to INFO.
    """
    if isinstance(name, Level):
        return name
    if isinstance(name, str):
        key = name.strip().lower()
        level = LEVEL_LABELS.get(key) or _ALIASES.get(key)
        if level is not None:
            return level

    logger.debug(f"Unrecognized log level {name!r}, falling back to info")
    return Level.INFO


def should_emit(level: Level, threshold: Level) -> bool:
    """True iff a call at `level` passes the active threshold."""
    return level >= threshold
