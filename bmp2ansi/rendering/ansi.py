#!/usr/bin/env python3
# bmp2ansi/rendering/ansi.py
"""
ANSI escape sequences for 256-color foreground/background.
"""

from __future__ import annotations

from typing import Callable

from bmp2ansi.rendering.palette import nearest_palette_index

__all__ = [
    "ESC",
    "RESET",
    "FOREGROUND",
    "BACKGROUND",
    "Quantizer",
    "color_hex",
    "ansi_color",
    "fg_color",
    "bg_color",
]

ESC = "\x1b"
RESET = ESC + "[0m"
FOREGROUND = "38"
BACKGROUND = "48"

# "rrggbb" -> palette index
Quantizer = Callable[[str], int]


def color_hex(color: int) -> str:
    """Packed aRGB -> 6 lowercase hex digits, alpha dropped."""
    return f"{color & 0xFFFFFF:06x}"


def ansi_color(color: int, role: str, quantizer: Quantizer = nearest_palette_index) -> str:
    return ESC + "[" + role + ";5;" + str(quantizer(color_hex(color))) + "m"


def fg_color(color: int, quantizer: Quantizer = nearest_palette_index) -> str:
    return ansi_color(color, FOREGROUND, quantizer)


def bg_color(color: int, quantizer: Quantizer = nearest_palette_index) -> str:
    return ansi_color(color, BACKGROUND, quantizer)
