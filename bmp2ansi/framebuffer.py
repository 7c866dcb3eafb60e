#!/usr/bin/env python3
# bmp2ansi/framebuffer.py
"""
In-memory aRGB pixel buffer.

Pixels are packed 32-bit values, 8 bits per channel, alpha in the top byte
and blue in the lowest. Storage is a flat numpy uint32 array in row-major
order (top to bottom, left to right), addressed as ``y * width + x``.

Provides channel math (gray level), alpha compositing against a solid
background, and a generic 4-connected flood-fill traversal.
"""

from __future__ import annotations

import logging
from typing import Callable, List

import numpy as np

from bmp2ansi.errors import InvalidDimensions, OutOfBounds

__all__ = ["Framebuffer", "Visitor"]

log = logging.getLogger(__name__)

# visitor(x, y, pixel) -> True to keep exploring past this pixel
Visitor = Callable[[int, int, int], bool]

OPAQUE = 0xFF000000


class Framebuffer:
    """
    Fixed-size pixel buffer. ``color_depth`` is informational only.
    """

    def __init__(self, width: int, height: int, color_depth: int = 32):
        if not isinstance(width, int) or not isinstance(height, int) or width <= 0 or height <= 0:
            raise InvalidDimensions(f"invalid framebuffer size {width!r}x{height!r}")
        self.width = width
        self.height = height
        self.color_depth = color_depth
        self.pixels = np.zeros(width * height, dtype=np.uint32)

    @classmethod
    def from_array(cls, argb: np.ndarray, color_depth: int = 32) -> "Framebuffer":
        """Build a buffer from a (height, width) array of packed aRGB values."""
        height, width = (int(n) for n in argb.shape)
        fb = cls(width, height, color_depth)
        fb.pixels[:] = argb.astype(np.uint32, copy=False).reshape(-1)
        return fb

    def __repr__(self) -> str:
        return f"Framebuffer(width={self.width}, height={self.height}, depth={self.color_depth})"

    # -------------
    # Pixel access
    # -------------

    def offset(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise OutOfBounds(x, y, self.width, self.height)
        return y * self.width + x

    def set_pixel(self, x: int, y: int, color: int) -> None:
        self.pixels[self.offset(x, y)] = color & 0xFFFFFFFF

    def get_pixel(self, x: int, y: int) -> int:
        return int(self.pixels[self.offset(x, y)])

    def get_pixel_as_gray(self, x: int, y: int) -> float:
        # 0.21 R + 0.72 G + 0.07 B
        pixel = self.get_pixel(x, y)
        return 0.21 * ((pixel >> 16) & 0xFF) + 0.72 * ((pixel >> 8) & 0xFF) + 0.07 * (pixel & 0xFF)

    def is_on(self, x: int, y: int) -> bool:
        return self.get_pixel_as_gray(x, y) >= 127

    # -------------
    # Compositing
    # -------------

    def render_alpha(self, background_color: int) -> None:
        """
        Remove the alpha channel by blending every pixel over an opaque
        background color. Fully opaque pixels (alpha == 255) are untouched.

        Each blended channel is truncated toward zero, not rounded.
        """
        pixels = self.pixels
        translucent = ((pixels >> 24) & 0xFF) != 0xFF
        count = int(np.count_nonzero(translucent))
        if count == 0:
            return
        log.debug("Compositing %d of %d pixels over #%06x", count, pixels.size, background_color & 0xFFFFFF)

        src = pixels[translucent]
        blend = ((src >> 24) & 0xFF).astype(np.float64) / 255.0
        out = np.full(src.shape, OPAQUE, dtype=np.uint32)
        for shift in (16, 8, 0):
            pc = ((src >> shift) & 0xFF).astype(np.float64)
            bc = float((background_color >> shift) & 0xFF)
            mixed = pc * blend + bc * (1.0 - blend)
            out |= (mixed.astype(np.int32) & 0xFF).astype(np.uint32) << shift
        pixels[translucent] = out

    # -------------
    # Flood fill
    # -------------

    def walk(self, visitor: Visitor, x: int = 0, y: int = 0) -> None:
        """
        Flood-fill traversal starting from (x, y).

        ``visitor(x, y, pixel)`` is called once per reached pixel and returns
        True if the pixel is "inside" the region, in which case its
        neighbours are explored. The visitor may modify the buffer; each
        pixel is read at the moment it is visited.
        """
        width, height = self.width, self.height
        visited = np.zeros(width * height, dtype=np.uint8)
        work: List[int] = [self.offset(x, y)]

        while work:
            offset = work.pop()
            if visited[offset]:
                continue
            visited[offset] = 1
            cy, cx = divmod(offset, width)
            if visitor(cx, cy, int(self.pixels[offset])):
                # left, right, up, down: down is popped first
                if cx > 0:
                    work.append(offset - 1)
                if cx < width - 1:
                    work.append(offset + 1)
                if cy > 0:
                    work.append(offset - width)
                if cy < height - 1:
                    work.append(offset + width)
