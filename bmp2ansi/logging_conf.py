#!/usr/bin/env python3
# bmp2ansi/logging_conf.py
"""
Central logging setup for bmp2ansi.
Logs go to stderr (stdout carries only rendered output), plus an optional
rotating file log.
"""

import logging
from logging.handlers import RotatingFileHandler

from bmp2ansi.config import Config

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def setup_logging(cfg: Config, verbose: int = 0) -> None:
    level_name = cfg["logging"].get("level", "WARNING").upper()
    level = getattr(logging, level_name, logging.WARNING)
    # each -v is one step more detail
    if verbose:
        level = max(logging.DEBUG, min(level, logging.WARNING) - 10 * verbose)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)

    log_file = cfg["logging"].get("file")
    if log_file:
        handler = RotatingFileHandler(
            log_file,
            maxBytes=int(cfg["logging"].get("rotate_bytes", 5 * 1024 * 1024)),
            backupCount=int(cfg["logging"].get("rotate_keep", 3)),
            encoding="utf-8",
        )
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logging.getLogger().addHandler(handler)
