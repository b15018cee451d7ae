"""
Normalization of log call arguments into one loggable message.

The positional arguments of a log call are first classified into one of four
shapes, then normalized:

    Empty      no arguments                      -> ""
    Single     one argument                      -> adapted (JSON detection, redaction)
    Formatted  "%"-template plus arguments       -> substituted text, final as is
    Chained    anything else                     -> str() of each non-None, space-joined

A string (or bytes) holding valid JSON becomes the parsed value, so the
envelope embeds it natively instead of as an escaped JSON string. Redaction
runs on serialized text before that parse, which is what lets masks survive
into the structured message.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Tuple, Union

from loguru import logger

from envelog.config import Settings
from envelog.encoding import ENCODE_ERRORS, dumps, loads_strict
from envelog.masking import RedactionStrategy, mask_sensitive_data, obscure_sensitive_data

__all__ = [
    "Empty",
    "Single",
    "Formatted",
    "Chained",
    "classify",
    "compose_message",
    "adapt_message",
    "str_to_obj",
    "stringify",
]

# printf-style conversion: %[(key)][flags][width][.precision]type
FORMAT_DIRECTIVE = re.compile(
    r"%(?:\([^)]*\))?[#0\- +]*(?:\*|\d+)?(?:\.(?:\*|\d+))?[diouxXeEfFgGcrsa%]"
)


# -----------------------------------------------------------------------------
# Argument shapes
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class Empty:
    pass


@dataclass(frozen=True)
class Single:
    value: Any


@dataclass(frozen=True)
class Formatted:
    template: str
    args: Tuple[Any, ...]


@dataclass(frozen=True)
class Chained:
    values: Tuple[Any, ...]


Variant = Union[Empty, Single, Formatted, Chained]


def classify(args: Tuple[Any, ...]) -> Variant:
    if not args:
        return Empty()
    if len(args) == 1:
        return Single(args[0])
    first = args[0]
    if isinstance(first, str) and FORMAT_DIRECTIVE.search(first):
        return Formatted(first, tuple(args[1:]))
    return Chained(tuple(args))


# -----------------------------------------------------------------------------
# Normalization
# -----------------------------------------------------------------------------
def compose_message(args: Tuple[Any, ...], settings: Settings) -> Any:
    variant = classify(args)

    if isinstance(variant, Empty):
        return ""
    if isinstance(variant, Single):
        return adapt_message(variant.value, settings)
    if isinstance(variant, Formatted):
        return _format(variant)
    return stringify(variant.values)


def _format(variant: Formatted) -> str:
    args: Any = variant.args
    # "%(name)s" templates take their values from a single mapping
    if len(args) == 1 and isinstance(args[0], Mapping) and "%(" in variant.template:
        args = args[0]
    try:
        return variant.template % args
    except (TypeError, ValueError, KeyError) as e:
        logger.warning(f"Format substitution failed ({e}), logging arguments as chained text")
        return stringify((variant.template,) + variant.args)


def stringify(values: Tuple[Any, ...]) -> str:
    return " ".join(str(v) for v in values if v is not None)


def str_to_obj(text: str) -> Any:
    """Parsed value if `text` is valid JSON, otherwise `text` unchanged."""
    try:
        return loads_strict(text)
    except (ValueError, RecursionError):
        return text


def adapt_message(value: Any, settings: Settings) -> Any:
    if isinstance(value, (bytes, bytearray)):
        value = bytes(value).decode("utf-8", errors="replace")

    if isinstance(value, str):
        if settings.redacting:
            return _redact_text(value, settings)
        return str_to_obj(value)

    if not settings.redacting:
        return value

    # Non-finite floats survive this round-trip; the renderer handles them after masking
    try:
        serialized = dumps(value, strict=False)
    except ENCODE_ERRORS as e:
        logger.warning(f"Could not serialize {type(value).__name__} for redaction: {e}")
        return repr(value)

    if settings.redaction_strategy is RedactionStrategy.STRUCTURAL:
        return mask_sensitive_data(json.loads(serialized), settings.sensitive_params)
    return json.loads(obscure_sensitive_data(serialized, settings.sensitive_params))


def _redact_text(text: str, settings: Settings) -> Any:
    if settings.redaction_strategy is RedactionStrategy.STRUCTURAL:
        parsed = str_to_obj(text)
        if parsed is not text:
            return mask_sensitive_data(parsed, settings.sensitive_params)
        return obscure_sensitive_data(text, settings.sensitive_params)
    return str_to_obj(obscure_sensitive_data(text, settings.sensitive_params))
