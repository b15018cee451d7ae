"""
Process-wide configuration for envelog.

Settings is an immutable snapshot. ConfigStore holds the current snapshot and
swaps it under a lock on every change, so a log call reading the snapshot once
always sees a consistent configuration even while setup code is changing it.

Every narrow setter is a one-field call to set_configs(); absent (None) fields
of a Configs leave the current value untouched.

Usage:
    from envelog.config import Configs, default_store

    default_store.set_configs(Configs(log_level="debug", json_pretty_print=True))
"""

from __future__ import annotations

import os
import sys
import threading
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional, Union

from loguru import logger

from envelog.colors import DEFAULT_COLOR_MAP, Color, CustomColors, merge_custom_colors
from envelog.levels import Level, parse_level
from envelog.masking import RedactionStrategy
from envelog.sink import LockedSink, as_sink

__all__ = [
    "Settings",
    "Configs",
    "ConfigStore",
    "default_store",
    "setup_diagnostics",
]


# -----------------------------------------------------------------------------
# Snapshot and partial update
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class Settings:
    log_level: Level = Level.INFO
    output: LockedSink = field(default_factory=LockedSink)
    json_pretty_print: bool = False
    trace_caller: bool = False
    single_point_tracing: bool = False
    tracing_skip: int = 1
    colors: bool = False
    color_map: Mapping[Level, Color] = field(default_factory=lambda: DEFAULT_COLOR_MAP)
    obscure_sensitive_data: bool = False
    sensitive_params: FrozenSet[str] = frozenset()
    redaction_strategy: RedactionStrategy = RedactionStrategy.PATTERN

    def __post_init__(self) -> None:
        if not isinstance(self.color_map, MappingProxyType):
            object.__setattr__(self, "color_map", MappingProxyType(dict(self.color_map)))

    @property
    def redacting(self) -> bool:
        return self.obscure_sensitive_data and bool(self.sensitive_params)


@dataclass
class Configs:
    """All-optional configuration; None means "leave as it is"."""

    log_level: Optional[Union[str, Level]] = None
    json_pretty_print: Optional[bool] = None
    trace_caller: Optional[bool] = None
    single_point_tracing: Optional[bool] = None
    tracing_skip: Optional[int] = None
    colors: Optional[bool] = None
    custom_colors: Optional[CustomColors] = None
    obscure_sensitive_data: Optional[bool] = None
    sensitive_params: Optional[Iterable[str]] = None
    redaction_strategy: Optional[Union[str, RedactionStrategy]] = None
    output: Optional[Any] = None


def _freeze_params(params: Iterable[str]) -> FrozenSet[str]:
    if isinstance(params, str):
        return frozenset([params])
    return frozenset(str(p) for p in params)


def _apply(current: Settings, configs: Configs) -> Settings:
    changes: Dict[str, Any] = {}

    if configs.log_level is not None:
        changes["log_level"] = parse_level(configs.log_level)
    if configs.json_pretty_print is not None:
        changes["json_pretty_print"] = bool(configs.json_pretty_print)
    if configs.trace_caller is not None:
        changes["trace_caller"] = bool(configs.trace_caller)
    if configs.single_point_tracing is not None:
        changes["single_point_tracing"] = bool(configs.single_point_tracing)
    if configs.tracing_skip is not None:
        changes["tracing_skip"] = max(0, int(configs.tracing_skip))
    if configs.colors is not None:
        changes["colors"] = bool(configs.colors)
    if configs.custom_colors is not None:
        changes["color_map"] = merge_custom_colors(current.color_map, configs.custom_colors)
    if configs.obscure_sensitive_data is not None:
        changes["obscure_sensitive_data"] = bool(configs.obscure_sensitive_data)
    if configs.sensitive_params is not None:
        changes["sensitive_params"] = _freeze_params(configs.sensitive_params)
    if configs.redaction_strategy is not None:
        changes["redaction_strategy"] = RedactionStrategy.parse(configs.redaction_strategy)
    if configs.output is not None:
        changes["output"] = as_sink(configs.output)

    return replace(current, **changes) if changes else current


# -----------------------------------------------------------------------------
# Store
# -----------------------------------------------------------------------------
class ConfigStore:
    """Holds the current Settings snapshot; all writes go through one lock."""

    def __init__(self, settings: Optional[Settings] = None):
        self._lock = threading.Lock()
        self._settings = settings if settings is not None else Settings()

    @property
    def settings(self) -> Settings:
        return self._settings

    def get_settings(self) -> Settings:
        return self._settings

    def set_configs(self, configs: Configs) -> Settings:
        with self._lock:
            self._settings = _apply(self._settings, configs)
            return self._settings

    def reset(self) -> Settings:
        with self._lock:
            self._settings = Settings()
            return self._settings

    def log_level(self, level: Union[str, Level]) -> None:
        self.set_configs(Configs(log_level=level))

    def log_writer(self, output: Any) -> None:
        self.set_configs(Configs(output=output))

    def enable_json_pretty_print(self) -> None:
        self.set_configs(Configs(json_pretty_print=True))

    def disable_json_pretty_print(self) -> None:
        self.set_configs(Configs(json_pretty_print=False))

    def enable_trace_caller(self) -> None:
        self.set_configs(Configs(trace_caller=True))

    def disable_trace_caller(self) -> None:
        self.set_configs(Configs(trace_caller=False))

    def enable_single_point_tracing(self, skip: int = 1) -> None:
        self.set_configs(Configs(single_point_tracing=True, tracing_skip=skip))

    def disable_single_point_tracing(self) -> None:
        self.set_configs(Configs(single_point_tracing=False))

    def enable_colors(self) -> None:
        self.set_configs(Configs(colors=True))

    def disable_colors(self) -> None:
        self.set_configs(Configs(colors=False))

    def set_custom_colors(self, colors: CustomColors) -> None:
        self.set_configs(Configs(custom_colors=colors))

    def enable_obscure_sensitive_data(self, params: Optional[Iterable[str]] = None) -> None:
        self.set_configs(Configs(obscure_sensitive_data=True, sensitive_params=params))

    def disable_obscure_sensitive_data(self) -> None:
        self.set_configs(Configs(obscure_sensitive_data=False))

    def set_sensitive_params(self, params: Iterable[str]) -> None:
        self.set_configs(Configs(sensitive_params=params))

    def set_redaction_strategy(self, strategy: Union[str, RedactionStrategy]) -> None:
        self.set_configs(Configs(redaction_strategy=strategy))


default_store = ConfigStore()


# -----------------------------------------------------------------------------
# Diagnostics
# -----------------------------------------------------------------------------
def setup_diagnostics(level: Optional[str] = None, sink: Optional[Any] = None) -> Optional[int]:
    """
    Route envelog's own diagnostics (fallbacks, sink failures) through loguru.

    Diagnostics are disabled on import. The level comes from the argument, then
    ENVELOG_DIAGNOSTICS, then WARNING; OFF/NONE/SILENT/0 keep them disabled.

    Returns:
        The loguru handler id, or None when diagnostics stay disabled.
    """
    log_level = (level or os.getenv("ENVELOG_DIAGNOSTICS", "WARNING")).upper()

    if log_level in {"0", "OFF", "NONE", "SILENT"}:
        logger.disable("envelog")
        return None

    logger.enable("envelog")
    return logger.add(
        sink if sink is not None else sys.stderr,
        level=log_level,
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | {message}",
        filter="envelog",
        backtrace=False,
        diagnose=False,  # keep local variables (payloads) out of tracebacks
    )
