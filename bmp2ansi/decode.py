#!/usr/bin/env python3
# bmp2ansi/decode.py
"""
Image decoding into a Framebuffer.

Pillow handles the file formats (BMP included); the decoded image is
converted to RGBA and packed into aRGB uint32 pixels.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Dict, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from bmp2ansi.errors import DecodeError
from bmp2ansi.framebuffer import Framebuffer

__all__ = ["decode", "read_image", "from_image"]

log = logging.getLogger(__name__)

# bits per pixel of the source, kept as Framebuffer.color_depth
_MODE_DEPTH: Dict[str, int] = {
    "1": 1,
    "L": 8,
    "P": 8,
    "RGB": 24,
    "RGBA": 32,
}


def from_image(img: Image.Image) -> Framebuffer:
    """Pack a Pillow image into a new Framebuffer."""
    depth = _MODE_DEPTH.get(img.mode, 32)
    if img.mode != "RGBA":
        img = img.convert("RGBA")
    arr = np.asarray(img, dtype=np.uint8).astype(np.uint32)  # (H, W, 4)
    argb = (arr[..., 3] << 24) | (arr[..., 0] << 16) | (arr[..., 1] << 8) | arr[..., 2]
    return Framebuffer.from_array(argb, depth)


def decode(data: bytes) -> Framebuffer:
    """Decode raw image bytes. Raises DecodeError on malformed input."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            fb = from_image(img)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError) as e:
        raise DecodeError(f"cannot decode image: {e}") from e
    log.debug("Decoded %r", fb)
    return fb


def read_image(path: Union[str, Path]) -> Framebuffer:
    p = Path(path)
    try:
        data = p.read_bytes()
    except OSError as e:
        raise DecodeError(f"{p}: {e.strerror or e}") from e
    try:
        return decode(data)
    except DecodeError as e:
        raise DecodeError(f"{p}: {e}") from e.__cause__
