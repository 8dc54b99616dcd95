"""
CLI command modules for yamcp-dashboard.
"""

from .config import config_commands
from .logs import logs_commands
from .server import server_commands

__all__ = [
    "config_commands",
    "logs_commands",
    "server_commands",
]
