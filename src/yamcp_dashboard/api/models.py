"""
API models for the dashboard REST endpoints.

Record bodies (servers, workspaces) reuse the core models directly; this
module holds the response envelopes and the log viewer payloads.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from yamcp_dashboard.core.models import LogEntry


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class APIResponse(BaseModel):
    """Base API response model."""
    
    success: bool = Field(description="Request success status")
    message: str = Field(description="Response message")
    data: Optional[Any] = Field(default=None, description="Response data")
    timestamp: datetime = Field(default_factory=_utcnow, description="Response timestamp")


class ErrorResponse(APIResponse):
    """API error response model."""
    
    success: bool = Field(default=False, description="Always false for errors")
    error_code: Optional[str] = Field(default=None, description="Error code identifier")
    details: Optional[Dict[str, Any]] = Field(default=None, description="Error details")


class HealthCheckResponse(APIResponse):
    """Response model for health check."""
    
    status: str = Field(description="Health status")
    version: str = Field(description="Dashboard version")
    uptime_seconds: float = Field(description="Uptime in seconds")
    providers_file: bool = Field(description="providers.json exists")
    workspaces_file: bool = Field(description="workspaces.json exists")
    logs_dir: bool = Field(description="Logs directory exists")


class LogGroup(BaseModel):
    """Log entries of one workspace."""
    
    workspace: str = Field(description="Workspace name")
    count: int = Field(description="Number of entries")
    entries: List[LogEntry] = Field(description="Entries, newest first")


class ExportFormat(str, Enum):
    """Log export formats."""
    
    JSON = "json"
    CSV = "csv"
    YAML = "yaml"
