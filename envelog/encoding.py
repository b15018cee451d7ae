"""
JSON encoding shared by the composer and the renderer.
"""

from __future__ import annotations

import dataclasses
import json
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any

__all__ = ["json_default", "dumps", "loads_strict"]

# Errors json.dumps raises for values it cannot encode
ENCODE_ERRORS = (TypeError, ValueError, RecursionError)


def json_default(value: Any) -> Any:
    """Best-effort conversion of values json does not know how to encode."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)

    for attr in ("model_dump", "to_dict", "_asdict"):
        method = getattr(value, attr, None)
        if callable(method):
            return method()

    if isinstance(value, (set, frozenset)):
        return list(value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    if isinstance(value, Enum):
        return value.value

    return str(value)


def dumps(value: Any, pretty: bool = False, strict: bool = True) -> str:
    """
    Encode `value` as JSON text.

    When strict, NaN and Infinity raise ValueError instead of producing the
    non-standard tokens, so rendered records always parse as JSON.
    """
    if pretty:
        return json.dumps(
            value, default=json_default, ensure_ascii=False, allow_nan=not strict, indent=3
        )
    return json.dumps(
        value,
        default=json_default,
        ensure_ascii=False,
        allow_nan=not strict,
        separators=(",", ":"),
    )


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def loads_strict(text: str) -> Any:
    """Parse JSON text, rejecting the NaN/Infinity extensions. Raises ValueError."""
    return json.loads(text, parse_constant=_reject_constant)
