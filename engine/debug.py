"""
Debug output for the planner calendar engine.

Messages go to stderr as "[HH:MM:SS] TAG: message" and are off by default.
"""

import sys
from datetime import datetime


_enabled: bool = False


def set_debug(enabled: bool):
    """Turn debug output on or off for the whole process."""
    global _enabled
    _enabled = enabled


def is_debug() -> bool:
    return _enabled


def debug_print(tag: str, msg: str) -> None:
    if not _enabled:
        return
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] {tag}: {msg}", file=sys.stderr)
