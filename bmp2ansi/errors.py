#!/usr/bin/env python3
# bmp2ansi/errors.py
"""
Exception types raised by the pixel buffer, decoder and renderer.
"""

__all__ = [
    "Bmp2AnsiError",
    "InvalidDimensions",
    "OutOfBounds",
    "DecodeError",
    "OddHeight",
]


class Bmp2AnsiError(Exception):
    """Base class for all bmp2ansi failures."""


class InvalidDimensions(Bmp2AnsiError, ValueError):
    """Width or height is not a positive integer."""


class OutOfBounds(Bmp2AnsiError, IndexError):
    """Pixel coordinate lies outside the buffer."""

    def __init__(self, x: int, y: int, width: int, height: int):
        super().__init__(f"pixel ({x}, {y}) outside {width}x{height} buffer")
        self.x = x
        self.y = y


class DecodeError(Bmp2AnsiError):
    """Source image could not be decoded."""


class OddHeight(Bmp2AnsiError, ValueError):
    """Buffer height leaves a final row without a partner."""
