#!/usr/bin/env python3
# bmp2ansi/rendering/halfblock.py
"""
Half-block (1x2) renderer.

Each terminal cell covers two source pixels stacked vertically. The brighter
pixel becomes the foreground color of an upper or lower half-block glyph and
the other pixel fills the cell background, which doubles vertical resolution
using only 256-color fg/bg pairs.

Pixels must already be opaque (see Framebuffer.render_alpha); alpha is
ignored here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from bmp2ansi.errors import OddHeight
from bmp2ansi.framebuffer import Framebuffer
from bmp2ansi.rendering.ansi import RESET, Quantizer, bg_color, fg_color
from bmp2ansi.rendering.palette import nearest_palette_index

__all__ = [
    "BLOCK_TOP",
    "BLOCK_BOTTOM",
    "SPACE",
    "ODD_HEIGHT_POLICIES",
    "render_row",
    "render_framebuffer",
    "HalfBlockRenderer",
]

log = logging.getLogger(__name__)

BLOCK_TOP = "\u2580"     # ▀
BLOCK_BOTTOM = "\u2584"  # ▄
SPACE = " "

# "pad": a missing last row reads as transparent black
# "error": refuse odd-height buffers
ODD_HEIGHT_POLICIES = ("pad", "error")
_VIRTUAL_PIXEL = 0x00000000


def _check_policy(odd_height: str) -> None:
    if odd_height not in ODD_HEIGHT_POLICIES:
        raise ValueError(f"unknown odd-height policy {odd_height!r}; expected one of {ODD_HEIGHT_POLICIES}")


def render_row(
    fb: Framebuffer,
    y: int,
    cutoff: float,
    quantizer: Quantizer = nearest_palette_index,
    odd_height: str = "pad",
) -> str:
    """
    Render source rows y and y+1 as one line of text, ending in a reset.

    cutoff is the intensity (0..1) at or below which a pixel is too dim to
    draw; a cell where both pixels are that dim becomes a plain space.
    """
    _check_policy(odd_height)
    has_bottom = y + 1 < fb.height
    if not has_bottom and odd_height == "error":
        raise OddHeight(f"row {y} has no partner row in a buffer of height {fb.height}")

    buf: List[str] = []
    for x in range(fb.width):
        top = fb.get_pixel(x, y)
        top_intensity = fb.get_pixel_as_gray(x, y) / 255
        if has_bottom:
            bottom = fb.get_pixel(x, y + 1)
            bottom_intensity = fb.get_pixel_as_gray(x, y + 1) / 255
        else:
            bottom = _VIRTUAL_PIXEL
            bottom_intensity = 0.0

        # don't draw anything if both halves are too dim.
        # otherwise the brighter half is the glyph, ties go to the top.
        if top_intensity <= cutoff and bottom_intensity <= cutoff:
            buf.append(RESET + SPACE)
        elif top_intensity >= bottom_intensity:
            buf.append(fg_color(top, quantizer) + bg_color(bottom, quantizer) + BLOCK_TOP)
        else:
            buf.append(fg_color(bottom, quantizer) + bg_color(top, quantizer) + BLOCK_BOTTOM)
    buf.append(RESET)
    return "".join(buf)


def render_framebuffer(
    fb: Framebuffer,
    cutoff: float,
    quantizer: Quantizer = nearest_palette_index,
    odd_height: str = "pad",
) -> str:
    """Render the whole buffer, one newline-terminated line per row pair."""
    _check_policy(odd_height)
    if fb.height % 2:
        if odd_height == "error":
            raise OddHeight(f"{fb!r} has an odd number of rows")
        log.debug("Padding last row of %r with transparent pixels", fb)

    lines = [render_row(fb, y, cutoff, quantizer, odd_height) + "\n" for y in range(0, fb.height, 2)]
    return "".join(lines)


@dataclass
class HalfBlockRenderer:
    """Renderer settings bundled for repeated use across many buffers."""

    cutoff: float = 0.1
    odd_height: str = "pad"
    quantizer: Quantizer = nearest_palette_index

    name = "halfblock"

    def __post_init__(self):
        _check_policy(self.odd_height)

    def render(self, fb: Framebuffer) -> str:
        return render_framebuffer(fb, self.cutoff, self.quantizer, self.odd_height)

    def render_row(self, fb: Framebuffer, y: int) -> str:
        return render_row(fb, y, self.cutoff, self.quantizer, self.odd_height)
