"""
Exception hierarchy for envelog.

All exceptions raised by the facility inherit from EnvelogError, which carries
an error code so embedding applications can map them without string matching.
"""

from __future__ import annotations


class EnvelogError(Exception):
    """Base exception for all envelog errors."""

    def __init__(self, message: str, *, code: str = "ENVELOG_ERROR") -> None:
        super().__init__(message)
        self.code = code


class LogPanic(EnvelogError):
    """
    Raised by the panic entry point instead of writing the record.

    The rendered record travels with the exception; the caller decides whether
    to let it terminate the program or to catch it and write it somewhere.
    """

    def __init__(self, record: str) -> None:
        super().__init__(record.rstrip("\n"), code="LOG_PANIC")
        self.record = record
