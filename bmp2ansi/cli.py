#!/usr/bin/env python3
# bmp2ansi/cli.py
"""
Entry point for bmp2ansi.
Decodes each image argument, flattens it over a background color and writes
the half-block ANSI rendering to stdout.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional, TextIO

from bmp2ansi.config import Config, parse_color
from bmp2ansi.decode import read_image
from bmp2ansi.errors import Bmp2AnsiError
from bmp2ansi.logging_conf import setup_logging
from bmp2ansi.rendering.halfblock import ODD_HEIGHT_POLICIES, HalfBlockRenderer
from bmp2ansi.version import version_info

log = logging.getLogger(__name__)


def _color_arg(value: str) -> int:
    color = parse_color(value)
    if color is None:
        raise argparse.ArgumentTypeError(f"not a hex color: {value!r}")
    return color


def _cutoff_arg(value: str) -> float:
    try:
        cutoff = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}") from None
    if not 0.0 <= cutoff <= 1.0:
        raise argparse.ArgumentTypeError("cutoff must be between 0 and 1")
    return cutoff


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="bmp2ansi",
        usage="bmp2ansi [options] <filename.bmp> [...]",
        description="Render images as 256-color ANSI half-block text.",
    )
    p.add_argument("files", nargs="*", metavar="FILE", help="image files to render")
    p.add_argument("--cutoff", type=_cutoff_arg, default=None,
                   help="intensity (0..1) at or below which cells are left blank")
    p.add_argument("--background", type=_color_arg, default=None, metavar="HEX",
                   help="background color for transparent pixels, e.g. #000000")
    p.add_argument("--odd-height", choices=ODD_HEIGHT_POLICIES, default=None,
                   help="pad the last row of odd-height images, or reject them")
    p.add_argument("--fail-fast", action="store_true", default=None,
                   help="stop at the first image that fails")
    p.add_argument("--config", default=None, metavar="PATH", help="config file to load")
    p.add_argument("-v", "--verbose", action="count", default=0, help="more logging (repeatable)")
    p.add_argument("--version", action="version", version=version_info())
    return p


def render_file(path: str, renderer: HalfBlockRenderer, background: int) -> str:
    fb = read_image(path)
    log.info("Rendering %s: %r", path, fb)
    fb.render_alpha(background)
    return renderer.render(fb)


def run(files: List[str], cfg: Config, out: TextIO) -> int:
    """Render each file to out. Returns the process exit status."""
    renderer = HalfBlockRenderer(cutoff=cfg.cutoff, odd_height=cfg.odd_height)
    background = cfg.background_color
    failed = 0
    for path in files:
        try:
            text = render_file(path, renderer, background)
        except Bmp2AnsiError as e:
            failed += 1
            log.error("%s", e)
            if cfg.fail_fast:
                return 1
            continue
        out.write(text)
        out.flush()
    if failed:
        log.warning("%d of %d file(s) failed", failed, len(files))
        return 1
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.files:
        parser.print_usage(sys.stderr)
        sys.stderr.write("  writes ansi codes to stdout\n")
        return 1

    if args.config and not os.path.exists(os.path.expanduser(args.config)):
        log.warning("Config file %s not found; using defaults", args.config)
    cfg = Config.load(args.config)
    overrides = {"render": {}, "batch": {}}
    if args.cutoff is not None:
        overrides["render"]["cutoff"] = args.cutoff
    if args.background is not None:
        overrides["render"]["background"] = args.background
    if args.odd_height is not None:
        overrides["render"]["odd_height"] = args.odd_height
    if args.fail_fast:
        overrides["batch"]["fail_fast"] = True
    cfg.update(overrides)

    setup_logging(cfg, args.verbose)
    return run(args.files, cfg, sys.stdout)


if __name__ == "__main__":
    sys.exit(main())
