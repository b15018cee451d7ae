"""
Output sink that serializes concurrent writes.
"""

from __future__ import annotations

import io
import sys
import threading
from typing import Any, Optional

from loguru import logger

__all__ = ["LockedSink", "as_sink"]


class LockedSink:
    """
    Wrap a text or binary stream so each record is written and flushed whole.

    With no stream, writes go to whatever sys.stdout is at write time.
    """

    def __init__(self, stream: Optional[Any] = None):
        self._stream = stream
        self._lock = threading.Lock()

    @property
    def stream(self) -> Any:
        return self._stream if self._stream is not None else sys.stdout

    def write(self, text: str) -> None:
        stream = self.stream
        data: Any = text.encode("utf-8") if _is_binary(stream) else text

        with self._lock:
            try:
                try:
                    stream.write(data)
                except TypeError:
                    # A bytes-only stream that does not advertise itself as binary
                    if not isinstance(data, str):
                        raise
                    stream.write(data.encode("utf-8"))
                flush = getattr(stream, "flush", None)
                if callable(flush):
                    flush()
            except (OSError, ValueError, TypeError) as e:
                logger.warning(f"Failed to write log record to {type(stream).__name__}: {e}")

    def __repr__(self) -> str:
        return f"LockedSink({self._stream!r})"


def as_sink(output: Any) -> LockedSink:
    if isinstance(output, LockedSink):
        return output
    return LockedSink(output)


def _is_binary(stream: Any) -> bool:
    if isinstance(stream, (io.RawIOBase, io.BufferedIOBase)):
        return True
    mode = getattr(stream, "mode", "")
    return isinstance(mode, str) and "b" in mode
