#!/usr/bin/env python3
# bmp2ansi/version.py
"""
Version metadata for bmp2ansi.
"""

__version__ = "1.0.0"
__license__ = "MIT"

def version_info() -> str:
    """Return human-readable version string."""
    return f"bmp2ansi v{__version__}"
