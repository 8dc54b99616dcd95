"""Utility modules for yamcp-dashboard."""

from yamcp_dashboard.utils.logging import get_logger, setup_logging
from yamcp_dashboard.utils.config import Config, get_config, load_config

__all__ = [
    "get_logger",
    "setup_logging",
    "Config",
    "get_config",
    "load_config",
]
