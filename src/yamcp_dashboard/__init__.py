"""
yamcp-dashboard - Administrative dashboard for the yamcp workspace manager.

Serves a REST API over the manager's provider and workspace configuration
files and surfaces the log files its runtime writes to disk.
"""

__version__ = "1.0.0"
__description__ = "Administrative dashboard for the yamcp workspace manager"

# Public API
from yamcp_dashboard.core.exceptions import DashboardError
from yamcp_dashboard.core.models import LogEntry, Provider, ProviderType, Workspace

__all__ = [
    "__version__",
    "__description__",
    "DashboardError",
    "LogEntry",
    "Provider",
    "ProviderType",
    "Workspace",
]
