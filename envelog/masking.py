"""
Sensitive data masking for serialized log payloads.

Two strategies share one contract: only string values of the configured
fields are replaced with MASK. Numbers, booleans and null are left as they are.

- pattern: regular expressions over serialized JSON text, covering both the
  plain form ("password":"x") and the escaped form that appears when JSON text
  is itself embedded in a JSON string (\\"password\\":\\"x\\").
- structural: walks dicts and lists and masks matching keys; string leaves are
  still run through the pattern pass so embedded JSON text is covered too.
"""

from __future__ import annotations

import re
from enum import Enum
from functools import lru_cache
from typing import Any, Iterable, Pattern, Set, Tuple

__all__ = [
    "MASK",
    "COMMON_SENSITIVE_FIELDS",
    "RedactionStrategy",
    "obscure_param",
    "obscure_sensitive_data",
    "mask_sensitive_data",
]

MASK = "**********"

# Convenience preset; nothing is masked unless configured
COMMON_SENSITIVE_FIELDS: Set[str] = {
    "password",
    "secret",
    "token",
    "authorization",
    "access_token",
    "refresh_token",
    "api_key",
    "private_key",
    "client_secret",
}


class RedactionStrategy(str, Enum):
    PATTERN = "pattern"
    STRUCTURAL = "structural"

    @classmethod
    def parse(cls, value: Any) -> "RedactionStrategy":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.PATTERN


# -----------------------------------------------------------------------------
# Pattern strategy
# -----------------------------------------------------------------------------
@lru_cache(maxsize=256)
def _patterns(field: str) -> Tuple[Pattern[str], Pattern[str]]:
    name = re.escape(field)
    # Escaped form: a quote at this nesting depth is the run \1 followed by '"',
    # and a backslash is \1 plus one more. The value is read as plain characters
    # or escape pairs at that depth, so it ends exactly at its own closing quote.
    escaped = re.compile(
        r'(?<!\\)(\\+)"' + name + r'\1"\s*:\s*\1"'
        r'(?P<value>(?:[^"\\]|\1\\(?:\1"|\1\\|[^"\\]))*)\1"'
    )
    plain = re.compile(r'(?<!\\)"' + name + r'"\s*:\s*"(?P<value>(?:[^"\\]|\\.)*)"')
    return escaped, plain


def _replace_value(match: "re.Match[str]") -> str:
    text = match.group(0)
    offset = match.start(0)
    start, end = match.span("value")
    return text[: start - offset] + MASK + text[end - offset :]


def obscure_param(text: str, field: str) -> str:
    """Mask every string value of `field` in serialized JSON text."""
    escaped, plain = _patterns(field)
    text = escaped.sub(_replace_value, text)
    return plain.sub(_replace_value, text)


def obscure_sensitive_data(text: str, fields: Iterable[str]) -> str:
    for field in fields:
        text = obscure_param(text, field)
    return text


# -----------------------------------------------------------------------------
# Structural strategy
# -----------------------------------------------------------------------------
def mask_sensitive_data(data: Any, fields: Iterable[str], max_depth: int = 64) -> Any:
    """
    Recursively mask string values of sensitive keys in dicts and lists.

    Args:
        data: Parsed JSON value (dict, list, str, or primitive)
        fields: Field names to mask (matched exactly)
        max_depth: Nesting beyond this depth is returned unchanged

    Returns:
        Copy of `data` with sensitive string values replaced by MASK
    """
    names = fields if isinstance(fields, (set, frozenset)) else set(fields)
    return _walk(data, names, max_depth)


def _walk(data: Any, names: Set[str], depth: int) -> Any:
    if depth <= 0:
        return data

    if isinstance(data, dict):
        return {
            k: (
                MASK
                if k in names and isinstance(v, str)
                else _walk(v, names, depth - 1)
            )
            for k, v in data.items()
        }

    elif isinstance(data, list):
        return [_walk(item, names, depth - 1) for item in data]

    elif isinstance(data, str):
        return obscure_sensitive_data(data, names)

    else:
        return data
