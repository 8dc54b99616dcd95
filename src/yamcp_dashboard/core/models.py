"""
Data models for yamcp-dashboard.

Pydantic models for the records kept in the manager's configuration files
(providers and workspaces) and for the log entries and log files derived
from the manager's runtime logs.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class ProviderType(str, Enum):
    """MCP provider transport type."""
    
    STDIO = "stdio"
    SSE = "sse"


WARNING_ALIASES = {"warn", "warning"}


def normalize_level(level: Optional[str]) -> str:
    """
    Normalize a log level for comparison.
    
    Levels are compared case-insensitively after trimming whitespace, and
    ``warn`` is treated as ``warning``.
    
    Args:
        level: Raw level string
        
    Returns:
        Normalized level, empty string for missing levels
    """
    if not level:
        return ""
    normalized = str(level).strip().lower()
    if normalized in WARNING_ALIASES:
        return "warning"
    return normalized


def _validate_record_name(kind: str, v: str) -> str:
    v = v.strip() if isinstance(v, str) else v
    if not v:
        raise ValueError(f"{kind} name cannot be empty")
    if len(v) > 100:
        raise ValueError(f"{kind} name too long (max 100 characters)")
    if "/" in v or "\\" in v:
        raise ValueError(f"{kind} name cannot contain path separators")
    return v


class Provider(BaseModel):
    """MCP provider (server) definition as configured in the manager."""
    
    name: str = Field(description="Provider name")
    namespace: Optional[str] = Field(default=None, description="Tool namespace, defaults to the name")
    type: ProviderType = Field(default=ProviderType.STDIO, description="Transport type")
    command: Optional[str] = Field(default=None, description="Command for stdio providers")
    args: List[str] = Field(default_factory=list, description="Command arguments")
    env: Dict[str, str] = Field(default_factory=dict, description="Environment variables")
    url: Optional[str] = Field(default=None, description="Endpoint URL for sse providers")
    
    @model_validator(mode="after")
    def validate_connection(self) -> "Provider":
        """Check the connection settings required by the transport type."""
        if not self.namespace or not self.namespace.strip():
            self.namespace = self.name
            
        if self.type == ProviderType.STDIO:
            if not self.command or not self.command.strip():
                raise ValueError("stdio servers require a command")
            self.url = None
        else:
            if not self.url or not self.url.strip():
                raise ValueError("sse servers require a url")
            self.command = None
            self.args = []
            self.env = {}
        return self
    
    def __str__(self) -> str:
        """String representation."""
        return f"{self.name} ({self.type.value})"
    
    @classmethod
    def from_store(cls, name: str, data: Any) -> "Provider":
        """
        Build a provider from its ``providers.json`` record.
        
        Args:
            name: Key of the record in the file
            data: Record value
            
        Returns:
            Parsed provider
            
        Raises:
            ValueError: If the record does not have the expected shape
        """
        if not isinstance(data, dict):
            raise ValueError(f"expected an object, got {type(data).__name__}")
        
        params = data.get("providerParameters") or {}
        if not isinstance(params, dict):
            raise ValueError("providerParameters must be an object")
        
        return cls(
            name=name,
            namespace=data.get("namespace"),
            type=data.get("type", ProviderType.STDIO.value),
            command=params.get("command"),
            args=params.get("args") or [],
            env=params.get("env") or {},
            url=params.get("url"),
        )
    
    def to_store(self) -> Dict[str, Any]:
        """Convert to the ``providers.json`` record format."""
        if self.type == ProviderType.STDIO:
            params: Dict[str, Any] = {
                "command": self.command,
                "args": list(self.args),
            }
            if self.env:
                params["env"] = dict(self.env)
        else:
            params = {"url": self.url}
            
        return {
            "namespace": self.namespace,
            "type": self.type.value,
            "providerParameters": params,
        }


class ProviderInput(Provider):
    """
    Server definition submitted through the dashboard.
    
    Records read from ``providers.json`` are taken as the manager wrote
    them; only new or edited definitions go through these rules.
    """
    
    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate provider name."""
        return _validate_record_name("Server", v)
    
    @model_validator(mode="after")
    def normalize_input(self) -> "ProviderInput":
        """Trim connection settings and check the sse url scheme."""
        namespace = (self.namespace or "").strip()
        self.namespace = namespace or self.name
        
        if self.type == ProviderType.STDIO:
            self.command = (self.command or "").strip()
        else:
            self.url = (self.url or "").strip()
            if not self.url.startswith(("http://", "https://")):
                raise ValueError("sse url must start with http:// or https://")
        return self


class Workspace(BaseModel):
    """Named grouping of providers."""
    
    name: str = Field(description="Workspace name")
    servers: List[str] = Field(default_factory=list, description="Member server names")
    
    @field_validator("servers")
    @classmethod
    def dedupe_servers(cls, v: List[str]) -> List[str]:
        """Strip member names and drop empty or repeated entries, keeping order."""
        seen = []
        for server in v:
            server = server.strip()
            if server and server not in seen:
                seen.append(server)
        return seen
    
    @classmethod
    def from_store(cls, name: str, data: Any) -> "Workspace":
        """Build a workspace from its ``workspaces.json`` record."""
        if not isinstance(data, list):
            raise ValueError(f"expected a list of server names, got {type(data).__name__}")
        if not all(isinstance(item, str) for item in data):
            raise ValueError("server names must be strings")
        return cls(name=name, servers=data)
    
    def to_store(self) -> List[str]:
        """Convert to the ``workspaces.json`` record format."""
        return list(self.servers)


class WorkspaceInput(Workspace):
    """Workspace submitted through the dashboard."""
    
    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate workspace name."""
        return _validate_record_name("Workspace", v)


class LogEntry(BaseModel):
    """Single entry parsed from a manager log file."""
    
    id: str = Field(description="Stable identifier: <workspace>/<file>:<line>")
    timestamp: Optional[str] = Field(default=None, description="Timestamp as written in the log")
    level: str = Field(default="info", description="Level as written in the log")
    server: str = Field(description="Originating workspace")
    message: str = Field(default="", description="Message text")
    file: Optional[str] = Field(default=None, description="Log file name relative to the logs directory")
    line: Optional[int] = Field(default=None, description="1-based line number of the entry header")
    
    @property
    def normalized_level(self) -> str:
        """Level normalized for filtering."""
        return normalize_level(self.level)


class LogFile(BaseModel):
    """Log file written by the manager runtime."""
    
    name: str = Field(description="<workspace>/<filename>")
    size: int = Field(description="File size in bytes")
    modified: str = Field(description="Last modification time (ISO-8601)")
    path: str = Field(description="Absolute file path")
