"""
API module for yamcp-dashboard.

REST endpoints over the manager's configuration and log files.
"""

from .endpoints import DashboardEndpoints
from .middleware import ErrorHandlingMiddleware, RequestLoggingMiddleware, SecurityMiddleware
from .server import DashboardServer, create_api_server, create_app

__all__ = [
    "DashboardEndpoints",
    "ErrorHandlingMiddleware",
    "RequestLoggingMiddleware",
    "SecurityMiddleware",
    "DashboardServer",
    "create_api_server",
    "create_app",
]
