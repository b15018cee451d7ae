"""
Configuration loaded from environment variables.

Only variables that are set are applied; everything else keeps its current
value. Unparseable values degrade the same way the setters do.
"""

from __future__ import annotations

import os
from typing import List, Mapping, Optional

from envelog.config import Configs, ConfigStore, Settings, default_store

__all__ = ["ENV_PREFIX", "configure_from_env"]

ENV_PREFIX = "ENVELOG_"

_TRUTHY = {"1", "true", "yes", "on"}


# -----------------------------------------------------------------------------
# Helpers: read optional environment values
# -----------------------------------------------------------------------------
def _env_flag(environ: Mapping[str, str], name: str) -> Optional[bool]:
    raw = environ.get(ENV_PREFIX + name)
    if raw is None:
        return None
    return raw.strip().lower() in _TRUTHY


def _env_list(environ: Mapping[str, str], name: str) -> Optional[List[str]]:
    raw = environ.get(ENV_PREFIX + name)
    if raw is None:
        return None
    return [item.strip() for item in raw.split(",") if item.strip()]


def configure_from_env(
    environ: Optional[Mapping[str, str]] = None,
    store: Optional[ConfigStore] = None,
) -> Settings:
    """
    Apply ENVELOG_* variables to the store (default: the process-wide one).

    Variables: LEVEL, PRETTY, COLORS, TRACE_CALLER, SINGLE_POINT_TRACING,
    OBSCURE, SENSITIVE_PARAMS (comma-separated), REDACTION.
    """
    env = os.environ if environ is None else environ
    target = store if store is not None else default_store

    configs = Configs(
        log_level=env.get(ENV_PREFIX + "LEVEL"),
        json_pretty_print=_env_flag(env, "PRETTY"),
        colors=_env_flag(env, "COLORS"),
        trace_caller=_env_flag(env, "TRACE_CALLER"),
        single_point_tracing=_env_flag(env, "SINGLE_POINT_TRACING"),
        obscure_sensitive_data=_env_flag(env, "OBSCURE"),
        sensitive_params=_env_list(env, "SENSITIVE_PARAMS"),
        redaction_strategy=env.get(ENV_PREFIX + "REDACTION"),
    )
    return target.set_configs(configs)
