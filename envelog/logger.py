"""
Leveled entry points.

Logger binds a ConfigStore and exposes one method per severity. Each call reads
the settings snapshot once, so a concurrent setter never changes the
configuration halfway through a record.

Panic and fatal are the only entry points with side effects beyond writing:
    panic  renders regardless of threshold and raises LogPanic carrying the
           record; nothing is written.
    fatal  writes regardless of threshold, then ends the process with status 1:
           SystemExit(1) on the main thread, os._exit(1) from any other thread
           so a worker cannot log fatal and carry on.

Caller frames:
    resolve_caller() runs inside _render(), so the user's frame is
    _LEVEL_DEPTH frames out for the leveled methods (_render <- _log <- info)
    and _DIRECT_DEPTH for panic/compose (_render <- panic). Module-level
    functions in envelog are bound methods of default_logger, so they add no
    frame of their own.
"""

from __future__ import annotations

import os
import threading
from typing import Any, Optional, Tuple, Union

from envelog.caller import CallerInfo, resolve_caller
from envelog.compose import compose_message
from envelog.config import ConfigStore, Settings, default_store
from envelog.errors import LogPanic
from envelog.levels import Level, parse_level, should_emit
from envelog.render import render_record

__all__ = ["Logger", "default_logger"]

_LEVEL_DEPTH = 3
_DIRECT_DEPTH = 2


class Logger:
    """Structured logger writing one JSON envelope per call."""

    def __init__(self, store: Optional[ConfigStore] = None):
        self.store = store if store is not None else default_store

    def trace(self, *args: Any) -> None:
        self._log(Level.TRACE, args)

    def debug(self, *args: Any) -> None:
        self._log(Level.DEBUG, args)

    def info(self, *args: Any) -> None:
        self._log(Level.INFO, args)

    def warn(self, *args: Any) -> None:
        self._log(Level.WARN, args)

    warning = warn

    def error(self, *args: Any) -> None:
        self._log(Level.ERROR, args)

    def panic(self, *args: Any) -> None:
        raise LogPanic(self._render(Level.PANIC, args, self.store.settings, _DIRECT_DEPTH))

    def fatal(self, *args: Any) -> None:
        self._log(Level.FATAL, args, force=True)
        if threading.current_thread() is threading.main_thread():
            raise SystemExit(1)
        # SystemExit would only end this thread; the record is already flushed
        os._exit(1)

    def compose(self, level: Union[str, Level], *args: Any) -> str:
        """Render a record without writing it."""
        return self._render(parse_level(level), args, self.store.settings, _DIRECT_DEPTH)

    # -------------------------------------------------------------------------
    # Pipeline
    # -------------------------------------------------------------------------
    def _log(self, level: Level, args: Tuple[Any, ...], force: bool = False) -> None:
        settings = self.store.settings
        if force or should_emit(level, settings.log_level):
            settings.output.write(self._render(level, args, settings, _LEVEL_DEPTH))

    def _render(
        self, level: Level, args: Tuple[Any, ...], settings: Settings, depth: int
    ) -> str:
        caller: Optional[CallerInfo] = None
        if settings.trace_caller:
            skip = settings.tracing_skip if settings.single_point_tracing else 0
            caller = resolve_caller(depth, skip)

        message = compose_message(args, settings)
        return render_record(level, message, settings, caller)


default_logger = Logger(default_store)
