"""
Terminal color model for rendered records.

A Color is a foreground plus an optional background, each either a named
palette entry or an RGB triplet. Colors are immutable; attaching a background
returns a new Color.

Usage:
    from envelog.colors import Color, Palette

    Color(Palette.RED)                       # red text
    Color(Palette.WHITE).background(Palette.RED)
    Color.rgb(255, 136, 0)                   # 24-bit foreground
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple, Union

from envelog.levels import Level

__all__ = [
    "Palette",
    "Color",
    "CustomColors",
    "COLOR_RESET",
    "DEFAULT_COLOR_MAP",
    "merge_custom_colors",
]

COLOR_RESET = "\x1b[0m"

RGB = Tuple[int, int, int]
Shade = Union["Palette", RGB]


class Palette(Enum):
    """Named colors as (foreground, background) SGR codes."""

    DEFAULT = (0, 49)
    BLACK = (30, 40)
    RED = (31, 41)
    GREEN = (32, 42)
    YELLOW = (33, 43)
    BLUE = (34, 44)
    PURPLE = (35, 45)
    CYAN = (36, 46)
    GRAY = (37, 47)
    WHITE = (97, 107)


def _clamp(channel: int) -> int:
    return max(0, min(255, int(channel)))


def _sgr(shade: Shade, *, background: bool) -> str:
    if isinstance(shade, Palette):
        code = shade.value[1] if background else shade.value[0]
        return f"\x1b[{code}m"
    r, g, b = (_clamp(c) for c in shade)
    return f"\x1b[{48 if background else 38};2;{r};{g};{b}m"


# -----------------------------------------------------------------------------
# Color
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class Color:
    foreground: Shade = Palette.DEFAULT
    bg: Optional[Shade] = None

    @classmethod
    def rgb(cls, r: int, g: int, b: int) -> "Color":
        return cls((_clamp(r), _clamp(g), _clamp(b)))

    @classmethod
    def from_hex(cls, value: str) -> "Color":
        """Build an RGB foreground from '#rrggbb' (the '#' is optional)."""
        digits = value.lstrip("#")
        if len(digits) != 6:
            raise ValueError(f"Expected a 6-digit hex color, got {value!r}")
        return cls.rgb(int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))

    def background(self, shade: Union[Shade, "Color"]) -> "Color":
        """Return a copy of this color with `shade` as background."""
        if isinstance(shade, Color):
            shade = shade.foreground
        return Color(self.foreground, shade)

    @property
    def escape(self) -> str:
        code = _sgr(self.foreground, background=False)
        if self.bg is not None:
            code += _sgr(self.bg, background=True)
        return code

    def wrap(self, text: str) -> str:
        return f"{self.escape}{text}{COLOR_RESET}"


DEFAULT_COLOR_MAP: Mapping[Level, Color] = MappingProxyType(
    {
        Level.TRACE: Color(Palette.DEFAULT),
        Level.DEBUG: Color(Palette.GREEN),
        Level.INFO: Color(Palette.DEFAULT),
        Level.WARN: Color(Palette.YELLOW),
        Level.ERROR: Color(Palette.RED),
        Level.PANIC: Color(Palette.RED),
        Level.FATAL: Color(Palette.RED),
    }
)


# -----------------------------------------------------------------------------
# Per-level overrides
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class CustomColors:
    """Per-level color overrides; None leaves that level's color as it is."""

    trace: Optional[Color] = None
    debug: Optional[Color] = None
    info: Optional[Color] = None
    warn: Optional[Color] = None
    error: Optional[Color] = None
    panic: Optional[Color] = None
    fatal: Optional[Color] = None


def merge_custom_colors(
    current: Mapping[Level, Color], custom: CustomColors
) -> Mapping[Level, Color]:
    merged: Dict[Level, Color] = dict(current)
    for f in fields(custom):
        color = getattr(custom, f.name)
        if color is not None:
            merged[Level[f.name.upper()]] = color
    return MappingProxyType(merged)
