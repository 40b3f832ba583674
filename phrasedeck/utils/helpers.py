"""Utility functions."""

import math
from pathlib import Path
from typing import Tuple


def format_countdown(seconds: float) -> str:
    """Format remaining seconds as MM:SS (whole seconds, rounded down)."""
    total = max(0, int(math.floor(seconds)))
    minutes, secs = divmod(total, 60)
    return f"{minutes:02d}:{secs:02d}"


def format_counter(counter: Tuple[int, int]) -> str:
    """Format a (position, total) pair as '3/10'."""
    return f"{counter[0]}/{counter[1]}"


def ensure_dir(path: str) -> None:
    """Ensure directory exists."""
    Path(path).mkdir(parents=True, exist_ok=True)
