"""
Caller resolution for traced records.
"""

from __future__ import annotations

import sys
from typing import NamedTuple

from loguru import logger

__all__ = ["CallerInfo", "resolve_caller"]


class CallerInfo(NamedTuple):
    file: str
    function: str


def resolve_caller(depth: int = 0, extra_skip: int = 0) -> CallerInfo:
    """
    Resolve the source file and function of a frame further up the stack.

    Args:
        depth: Frames to walk outward from the function calling resolve_caller
            (0 is that function itself).
        extra_skip: Additional frames to skip, so a project-level wrapper
            around the logger reports its own caller instead of itself.

    Returns:
        CallerInfo with the file path and qualified function name, or empty
        strings when the stack is not that deep.
    """
    try:
        frame = sys._getframe(1 + max(0, depth) + max(0, extra_skip))
    except ValueError:
        logger.debug(f"Call stack exhausted resolving caller (depth={depth}, skip={extra_skip})")
        return CallerInfo("", "")

    code = frame.f_code
    function = getattr(code, "co_qualname", code.co_name)
    return CallerInfo(code.co_filename, function)
