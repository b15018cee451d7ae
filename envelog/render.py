"""
Envelope assembly and serialization.

render_record() turns a normalized message into the final text for the sink:
one JSON object (compact, or indented when pretty-print is on), optionally
wrapped in the level's color escape, always terminated by a single newline.
It performs no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from loguru import logger

from envelog.caller import CallerInfo
from envelog.colors import Color
from envelog.config import Settings
from envelog.encoding import ENCODE_ERRORS, dumps
from envelog.levels import Level

__all__ = ["TIME_FORMAT", "Envelope", "format_time", "render_record"]

TIME_FORMAT = "%Y-%m-%d %H:%M:%S %z"


@dataclass
class Envelope:
    level: str
    message: Any
    time: str
    file: Optional[str] = None
    function: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "level": self.level,
            "message": self.message,
            "time": self.time,
        }
        if self.file is not None:
            data["file"] = self.file
        if self.function is not None:
            data["function"] = self.function
        return data


def format_time(now: Optional[datetime] = None) -> str:
    """Local wall-clock time, whole seconds, with UTC offset."""
    now = now or datetime.now()
    if now.tzinfo is None:
        now = now.astimezone()
    return now.replace(microsecond=0).strftime(TIME_FORMAT)


def render_record(
    level: Level,
    message: Any,
    settings: Settings,
    caller: Optional[CallerInfo] = None,
    now: Optional[datetime] = None,
) -> str:
    envelope = Envelope(level=level.label, message=message, time=format_time(now))
    if caller is not None:
        envelope.file = caller.file
        envelope.function = caller.function

    try:
        text = dumps(envelope.to_dict(), pretty=settings.json_pretty_print)
    except ENCODE_ERRORS as e:
        logger.warning(f"Could not serialize {type(message).__name__} message: {e}")
        envelope.message = repr(message)
        text = dumps(envelope.to_dict(), pretty=settings.json_pretty_print)

    if settings.colors:
        text = settings.color_map.get(level, Color()).wrap(text)

    return text + "\n"
