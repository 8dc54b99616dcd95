"""
CLI helper functions and utilities.
"""

from .display import format_file_size, level_badge, log_table
from .errors import handle_errors

__all__ = [
    "format_file_size",
    "level_badge",
    "log_table",
    "handle_errors",
]
