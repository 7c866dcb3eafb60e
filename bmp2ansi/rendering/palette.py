#!/usr/bin/env python3
# bmp2ansi/rendering/palette.py
"""
xterm 256-color palette and nearest-color lookup.

Index layout:
  0-15     system colors (terminal themes redefine these)
  16-231   6x6x6 color cube
  232-255  24-step gray ramp

Lookups only consider indices 16-255 so output looks the same regardless
of the user's terminal theme.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import List, Tuple

import numpy as np

__all__ = [
    "PALETTE",
    "CUBE_LEVELS",
    "nearest_palette_index",
    "palette_rgb",
]

# xterm defaults
_SYSTEM_COLORS: List[Tuple[int, int, int]] = [
    (0, 0, 0), (128, 0, 0), (0, 128, 0), (128, 128, 0),
    (0, 0, 128), (128, 0, 128), (0, 128, 128), (192, 192, 192),
    (128, 128, 128), (255, 0, 0), (0, 255, 0), (255, 255, 0),
    (0, 0, 255), (255, 0, 255), (0, 255, 255), (255, 255, 255),
]

CUBE_LEVELS = (0, 95, 135, 175, 215, 255)

FIRST_SEARCHED = 16

_HEX_RE = re.compile(r"[0-9a-f]{6}")


def _build_palette() -> np.ndarray:
    rows = list(_SYSTEM_COLORS)
    for r in CUBE_LEVELS:
        for g in CUBE_LEVELS:
            for b in CUBE_LEVELS:
                rows.append((r, g, b))
    for i in range(24):
        v = 8 + 10 * i
        rows.append((v, v, v))
    return np.array(rows, dtype=np.int32)


PALETTE = _build_palette()  # (256, 3)


def palette_rgb(index: int) -> Tuple[int, int, int]:
    """Return the (r, g, b) triple for a palette index."""
    r, g, b = PALETTE[index].tolist()
    return r, g, b


@lru_cache(maxsize=4096)
def nearest_palette_index(hex_color: str) -> int:
    """
    Map a 6-digit lowercase hex color ("rrggbb") to the closest palette index
    by squared RGB distance. Ties resolve to the lower index.
    """
    if not _HEX_RE.fullmatch(hex_color):
        raise ValueError(f"expected 6 lowercase hex digits, got {hex_color!r}")
    rgb = np.array([int(hex_color[i:i + 2], 16) for i in (0, 2, 4)], dtype=np.int32)
    dist = ((PALETTE[FIRST_SEARCHED:] - rgb) ** 2).sum(axis=1)
    return FIRST_SEARCHED + int(np.argmin(dist))
