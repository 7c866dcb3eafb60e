#!/usr/bin/env python3
# bmp2ansi/config.py
"""
Config loader/saver and defaults for bmp2ansi.

Goals:
- Single optional JSON file per user.
- Safe atomic writes.
- Deep-merge of user config over defaults.
- Basic validation with sane fallbacks.

Usage:
    from bmp2ansi.config import Config
    cfg = Config.load()                 # ~/.config/bmp2ansi/bmp2ansi.json or OS-specific
    cutoff = cfg["render"]["cutoff"]
    cfg.update({"render": {"background": "#202020"}})
    cfg.save()
"""

from __future__ import annotations

import copy
import json
import logging
import os
import platform
import shutil
import tempfile
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

log = logging.getLogger(__name__)

# ----------------------------
# Defaults
# ----------------------------

DEFAULT_CONFIG: Dict[str, Any] = {
    "render": {
        "background": "#000000",          # composited under translucent pixels
        "cutoff": 0.1,                    # intensity 0..1 at or below which cells stay blank
        "odd_height": "pad",              # pad | error
    },
    "batch": {
        "fail_fast": False,               # stop at the first file that fails
    },
    "logging": {
        "level": "WARNING",
        "file": None,                     # path or None
        "rotate_bytes": 5 * 1024 * 1024,
        "rotate_keep": 3,
    },
}

# ----------------------------
# Helpers
# ----------------------------

def _os_config_home() -> str:
    """Return per-OS config base directory."""
    if platform.system() == "Windows":
        base = os.environ.get("APPDATA") or os.path.expanduser("~\\AppData\\Roaming")
        return os.path.join(base, "bmp2ansi")
    if platform.system() == "Darwin":
        return os.path.join(os.path.expanduser("~/Library/Application Support"), "bmp2ansi")
    return os.path.join(os.path.expanduser("~/.config"), "bmp2ansi")

def _default_config_path() -> str:
    """Resolve default config path, honoring BMP2ANSI_CONFIG env override."""
    env = os.environ.get("BMP2ANSI_CONFIG")
    if env:
        return os.path.expanduser(env)
    return os.path.join(_os_config_home(), "bmp2ansi.json")

def _deep_merge(a: Dict[str, Any], b: Dict[str, Any]) -> Dict[str, Any]:
    """Return deep-merged copy of dicts: values in b override a."""
    out = dict(a)
    for k, v in b.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out

def _atomic_write_json(path: str, data: Dict[str, Any]) -> None:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=".tmp_cfg_", dir=os.path.dirname(path) or ".")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, sort_keys=True)
            f.write("\n")
        os.replace(tmp, path)
    except BaseException:
        try:
            os.remove(tmp)
        except OSError:
            pass
        raise

def _coerce_num(v: Any, default: float, minmax: Optional[Tuple[float, float]] = None) -> float:
    try:
        x = float(v)
    except (TypeError, ValueError):
        return float(default)
    if x != x:  # NaN
        return float(default)
    if minmax:
        lo, hi = minmax
        if x < lo: x = lo
        if x > hi: x = hi
    return x

def _coerce_int(v: Any, default: int, minmax: Optional[Tuple[int, int]] = None) -> int:
    try:
        x = int(v)
    except (TypeError, ValueError):
        return int(default)
    if minmax:
        lo, hi = minmax
        if x < lo: x = lo
        if x > hi: x = hi
    return x

def _coerce_bool(v: Any, default: bool) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, str):
        s = v.strip().lower()
        if s in ("1", "true", "yes", "on"): return True
        if s in ("0", "false", "no", "off"): return False
    return default

def parse_color(v: Any) -> Optional[int]:
    """
    Parse "#rrggbb", "rrggbb" or "0xrrggbb" (any case), or an int, into a
    24-bit color. Returns None if v is not a color.
    """
    if isinstance(v, bool):
        return None
    if isinstance(v, int):
        return v & 0xFFFFFF if v >= 0 else None
    if not isinstance(v, str):
        return None
    s = v.strip().lower()
    if s.startswith("#"):
        s = s[1:]
    elif s.startswith("0x"):
        s = s[2:]
    if len(s) != 6:
        return None
    try:
        return int(s, 16)
    except ValueError:
        return None

def format_color(color: int) -> str:
    return f"#{color & 0xFFFFFF:06x}"

# ----------------------------
# Validation
# ----------------------------

def _validate(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Return validated copy with fallbacks applied."""
    c = _deep_merge(copy.deepcopy(DEFAULT_CONFIG), copy.deepcopy(cfg or {}))
    for section, defaults in DEFAULT_CONFIG.items():
        if not isinstance(c.get(section), dict):
            c[section] = copy.deepcopy(defaults)

    # render
    r = c["render"]
    bg = parse_color(r.get("background"))
    if bg is None:
        bg = parse_color(DEFAULT_CONFIG["render"]["background"])
    r["background"] = format_color(bg)
    r["cutoff"] = _coerce_num(r.get("cutoff"), DEFAULT_CONFIG["render"]["cutoff"], (0.0, 1.0))
    if r.get("odd_height") not in ("pad", "error"):
        r["odd_height"] = DEFAULT_CONFIG["render"]["odd_height"]

    # batch
    b = c["batch"]
    b["fail_fast"] = _coerce_bool(b.get("fail_fast"), DEFAULT_CONFIG["batch"]["fail_fast"])

    # logging
    lg = c["logging"]
    level = str(lg.get("level") or "").upper()
    if level not in ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"):
        level = DEFAULT_CONFIG["logging"]["level"]
    lg["level"] = level
    lf = lg.get("file")
    lg["file"] = str(lf) if lf else None
    lg["rotate_bytes"] = _coerce_int(lg.get("rotate_bytes"), DEFAULT_CONFIG["logging"]["rotate_bytes"], (256 * 1024, 50 * 1024 * 1024))
    lg["rotate_keep"]  = _coerce_int(lg.get("rotate_keep"), DEFAULT_CONFIG["logging"]["rotate_keep"], (0, 50))

    return c

# ----------------------------
# Public API
# ----------------------------

@dataclass
class Config:
    """Thin wrapper around a nested dict with load/save/merge."""
    data: Dict[str, Any] = field(default_factory=lambda: _validate(DEFAULT_CONFIG))
    path: str = field(default_factory=_default_config_path)

    # --- Mapping-style access
    def __getitem__(self, k: str) -> Any:
        return self.data[k]

    def __setitem__(self, k: str, v: Any) -> None:
        self.data[k] = v

    def get(self, k: str, default: Any = None) -> Any:
        return self.data.get(k, default)

    # --- Ops
    @classmethod
    def load(cls, path: Optional[str] = None, create_if_missing: bool = False) -> "Config":
        cfg_path = os.path.expanduser(path) if path else _default_config_path()
        if not os.path.exists(cfg_path):
            cfg = _validate(DEFAULT_CONFIG)
            if create_if_missing:
                _atomic_write_json(cfg_path, cfg)
            return cls(cfg, cfg_path)

        try:
            with open(cfg_path, "r", encoding="utf-8") as f:
                user_cfg = json.load(f)
            if not isinstance(user_cfg, dict):
                raise ValueError("top level is not an object")
        except (OSError, ValueError) as e:
            # Corrupt file. Backup and fall back to defaults.
            backup = cfg_path + ".corrupt.bak"
            log.warning("Ignoring unreadable config %s (%s); backed up to %s", cfg_path, e, backup)
            try:
                shutil.copyfile(cfg_path, backup)
            except OSError:
                pass
            user_cfg = {}

        return cls(_validate(user_cfg), cfg_path)

    def save(self) -> None:
        """Persist to JSON atomically."""
        full = _validate(self.data)
        _atomic_write_json(self.path, full)
        self.data = full  # sync in-memory with normalized values

    def update(self, partial: Dict[str, Any]) -> None:
        """Deep-merge a partial config then validate."""
        merged = _deep_merge(self.data, partial)
        self.data = _validate(merged)

    # Convenience getters
    @property
    def background_color(self) -> int:
        return parse_color(self.data["render"]["background"])

    @property
    def cutoff(self) -> float:
        return self.data["render"]["cutoff"]

    @property
    def odd_height(self) -> str:
        return self.data["render"]["odd_height"]

    @property
    def fail_fast(self) -> bool:
        return self.data["batch"]["fail_fast"]


__all__ = [
    "Config",
    "DEFAULT_CONFIG",
    "parse_color",
    "format_color",
]
