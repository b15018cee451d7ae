"""
envelog: structured JSON logging.

Every call produces one self-contained JSON record:
- Mixed arguments normalized into one message (text, %-format, chaining)
- JSON text embedded as native structure, never as an escaped string
- Sensitive field masking applied before the message is parsed
- Optional pretty-printing, terminal colors and caller tracing

Usage:
    import envelog

    envelog.set_configs(envelog.Configs(log_level="debug", colors=True))
    envelog.enable_obscure_sensitive_data(["password"])

    envelog.info('{"user": "ada", "password": "hunter2"}')
    envelog.warn("%d retries left", 2)
    envelog.debug("loaded", 3, "plugins")
"""

from loguru import logger as _diagnostics

from envelog.colors import COLOR_RESET, Color, CustomColors, Palette
from envelog.config import Configs, ConfigStore, Settings, default_store, setup_diagnostics
from envelog.errors import EnvelogError, LogPanic
from envelog.levels import Level
from envelog.logger import Logger, default_logger
from envelog.masking import MASK, RedactionStrategy
from envelog.settings import configure_from_env

# Diagnostics stay silent until the application opts in via setup_diagnostics()
_diagnostics.disable("envelog")

# Leveled entry points (bound methods of the default logger)
trace = default_logger.trace
debug = default_logger.debug
info = default_logger.info
warn = default_logger.warn
warning = default_logger.warning
error = default_logger.error
panic = default_logger.panic
fatal = default_logger.fatal
compose_record = default_logger.compose

# Configuration of the default store
set_configs = default_store.set_configs
get_settings = default_store.get_settings
log_level = default_store.log_level
log_writer = default_store.log_writer
enable_json_pretty_print = default_store.enable_json_pretty_print
disable_json_pretty_print = default_store.disable_json_pretty_print
enable_trace_caller = default_store.enable_trace_caller
disable_trace_caller = default_store.disable_trace_caller
enable_single_point_tracing = default_store.enable_single_point_tracing
disable_single_point_tracing = default_store.disable_single_point_tracing
enable_colors = default_store.enable_colors
disable_colors = default_store.disable_colors
set_custom_colors = default_store.set_custom_colors
enable_obscure_sensitive_data = default_store.enable_obscure_sensitive_data
disable_obscure_sensitive_data = default_store.disable_obscure_sensitive_data
set_sensitive_params = default_store.set_sensitive_params
set_redaction_strategy = default_store.set_redaction_strategy

# Define public API
__all__ = [
    # Logging
    "trace",
    "debug",
    "info",
    "warn",
    "warning",
    "error",
    "panic",  # raises LogPanic with the record
    "fatal",  # writes, then SystemExit(1)
    "compose_record",
    "Logger",
    "default_logger",
    # Configuration
    "Configs",
    "Settings",
    "ConfigStore",
    "default_store",
    "set_configs",
    "get_settings",
    "log_level",
    "log_writer",
    "enable_json_pretty_print",
    "disable_json_pretty_print",
    "enable_trace_caller",
    "disable_trace_caller",
    "enable_single_point_tracing",
    "disable_single_point_tracing",
    "enable_colors",
    "disable_colors",
    "set_custom_colors",
    "enable_obscure_sensitive_data",
    "disable_obscure_sensitive_data",
    "set_sensitive_params",
    "set_redaction_strategy",
    "configure_from_env",
    "setup_diagnostics",
    # Types
    "Level",
    "Color",
    "Palette",
    "CustomColors",
    "COLOR_RESET",
    "MASK",
    "RedactionStrategy",
    "EnvelogError",
    "LogPanic",
]
