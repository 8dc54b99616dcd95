"""
Exception classes for yamcp-dashboard.

Defines the exception hierarchy raised by the configuration store, the
managers and the log viewer. The API layer maps each class to an HTTP
status code and the CLI reports them through ``handle_errors``.
"""

from typing import Any, Dict, Optional


class DashboardError(Exception):
    """Base exception for all dashboard errors."""
    
    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize DashboardError.
        
        Args:
            message: Error message
            error_code: Optional error code for categorization
            details: Optional additional error details
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        
    def __str__(self) -> str:
        """String representation of the error."""
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message
        
    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details,
        }


class ConfigError(DashboardError):
    """Dashboard configuration errors."""
    pass


class StoreError(DashboardError):
    """Unreadable or malformed manager configuration files."""
    pass


class NotFoundError(DashboardError):
    """Requested server, workspace or log file does not exist."""
    pass


class ConflictError(DashboardError):
    """A record with the same name already exists."""
    pass


class ValidationError(DashboardError):
    """Data validation errors."""
    pass


class ManagerCLIError(DashboardError):
    """Manager CLI interaction errors."""
    pass
