"""Utility modules."""

from .helpers import ensure_dir, format_countdown, format_counter
from .parsing import TextParser

__all__ = [
    'ensure_dir',
    'format_countdown',
    'format_counter',
    'TextParser',
]
