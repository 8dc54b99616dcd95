"""
Configuration management for yamcp-dashboard.

Provides hierarchical configuration loading with validation using Pydantic.
Supports TOML configuration files and environment variable overrides
(``YAMCP_DASHBOARD_`` prefix, ``__`` for nested sections).
"""

import os
from pathlib import Path
from typing import Any, List, Optional, Union

import toml
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator
from pydantic_settings import BaseSettings

from yamcp_dashboard.core.exceptions import ConfigError
from yamcp_dashboard.utils.logging import get_logger

logger = get_logger(__name__)


def _expand(path: Union[str, Path]) -> Path:
    return Path(os.path.expanduser(str(path)))


class LoggingConfig(BaseModel):
    """Logging configuration for the dashboard process itself."""
    
    enabled: bool = Field(default=True, description="Enable logging completely")
    level: str = Field(default="INFO", description="File logging level")
    console_level: str = Field(default="WARNING", description="Console logging level")
    format_type: str = Field(default="text", description="Log format (text/json)")
    file: Optional[str] = Field(default="yamcp-dashboard.log", description="Log file path")
    enable_rich: bool = Field(default=True, description="Enable Rich console output")
    max_bytes: int = Field(default=10 * 1024 * 1024, description="Max log file size")
    backup_count: int = Field(default=5, description="Number of backup files")
    suppress_http: bool = Field(default=True, description="Quieten HTTP client loggers")
    
    @field_validator("level", "console_level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate logging level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()
        
    @field_validator("format_type")
    @classmethod
    def validate_format_type(cls, v: str) -> str:
        """Validate format type."""
        if v not in ["text", "json"]:
            raise ValueError(f"Invalid format type: {v}")
        return v


class ManagerConfig(BaseModel):
    """Location of the manager's files and CLI."""
    
    store_dir: str = Field(
        default="~/.local/share/yamcp",
        description="Directory holding the manager's JSON configuration"
    )
    providers_file: str = Field(default="providers.json", description="Providers file name")
    workspaces_file: str = Field(default="workspaces.json", description="Workspaces file name")
    logs_dir: str = Field(
        default="~/.local/state/yamcp",
        description="Directory the manager runtime writes logs to"
    )
    cli_path: str = Field(default="yamcp", description="Manager CLI executable")
    cli_timeout: int = Field(default=10, description="Manager CLI timeout in seconds")
    backup_on_write: bool = Field(
        default=True,
        description="Keep a timestamped copy of a file before rewriting it"
    )
    
    @field_validator("cli_timeout")
    @classmethod
    def validate_timeout(cls, v: int) -> int:
        """Validate CLI timeout."""
        if v < 1:
            raise ValueError("CLI timeout must be at least 1 second")
        return v


class ServerConfig(BaseModel):
    """HTTP server configuration."""
    
    host: str = Field(default="127.0.0.1", description="Bind address")
    port: int = Field(default=8000, description="Bind port")
    allowed_origins: List[str] = Field(
        default_factory=lambda: [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:3000",
        ],
        description="Origins allowed by CORS"
    )
    static_dir: Optional[str] = Field(
        default=None,
        description="Built frontend directory served at /"
    )
    
    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate port range."""
        if not 1 <= v <= 65535:
            raise ValueError(f"Invalid port: {v}")
        return v


class LogViewerConfig(BaseModel):
    """Log viewer configuration."""
    
    pattern: str = Field(default="*.log", description="Glob for manager log files")
    max_entries: int = Field(default=5000, description="Maximum entries returned by /api/logs")
    
    @field_validator("max_entries")
    @classmethod
    def validate_max_entries(cls, v: int) -> int:
        """Validate entry cap."""
        if v < 1:
            raise ValueError("max_entries must be positive")
        return v


class Config(BaseSettings):
    """Main configuration class."""
    
    debug: bool = Field(default=False, description="Enable debug mode")
    config_dir: str = Field(
        default="~/.config/yamcp-dashboard",
        description="Dashboard configuration directory"
    )
    
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    manager: ManagerConfig = Field(default_factory=ManagerConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logs: LogViewerConfig = Field(default_factory=LogViewerConfig)
    
    model_config = {
        "env_prefix": "YAMCP_DASHBOARD_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
    }
        
    def get_config_dir(self) -> Path:
        """Get configuration directory path."""
        return _expand(self.config_dir)
        
    def get_log_file(self) -> Optional[Path]:
        """Get the dashboard's own log file path."""
        if self.logging.file:
            log_path = _expand(self.logging.file)
            if not log_path.is_absolute():
                log_path = self.get_config_dir() / log_path
            return log_path
        return None
    
    def get_store_dir(self) -> Path:
        """Get the manager's configuration directory."""
        return _expand(self.manager.store_dir)
        
    def get_providers_path(self) -> Path:
        """Get the providers file path."""
        return self.get_store_dir() / self.manager.providers_file
    
    def get_workspaces_path(self) -> Path:
        """Get the workspaces file path."""
        return self.get_store_dir() / self.manager.workspaces_file
    
    def get_logs_dir(self) -> Path:
        """Get the manager's logs directory."""
        return _expand(self.manager.logs_dir)
    
    def get_static_dir(self) -> Optional[Path]:
        """Get the built frontend directory, if configured."""
        if self.server.static_dir:
            return _expand(self.server.static_dir)
        return None


class ConfigManager:
    """Configuration manager with hierarchical loading."""
    
    def __init__(self):
        self._config: Optional[Config] = None
        
    def load_config(
        self,
        config_files: Optional[List[Union[str, Path]]] = None,
        **overrides: Any,
    ) -> Config:
        """
        Load configuration from multiple sources.
        
        Later files override earlier ones section by section; keyword
        overrides are applied last.
        
        Args:
            config_files: List of configuration files to load
            **overrides: Configuration overrides
            
        Returns:
            Loaded configuration
            
        Raises:
            ConfigError: If the merged values fail validation
        """
        if self._config is not None:
            return self._config
            
        if config_files is None:
            config_files = [
                "/etc/yamcp-dashboard/config.toml",
                "~/.config/yamcp-dashboard/config.toml",
                "./.yamcp-dashboard.toml",
            ]
            
        config_data: dict = {}
        
        for config_file in config_files:
            file_path = _expand(config_file)
            if file_path.exists():
                try:
                    file_data = toml.load(file_path)
                except (toml.TomlDecodeError, OSError) as e:
                    logger.warning(f"Failed to load config from {file_path}: {e}")
                    continue
                _merge(config_data, file_data)
                logger.debug(f"Loaded configuration from {file_path}")
                    
        _merge(config_data, overrides)
        
        try:
            self._config = Config(**config_data)
        except PydanticValidationError as e:
            raise ConfigError(
                f"Invalid configuration: {e}",
                error_code="INVALID_CONFIG",
                details={"errors": [str(err.get("msg", "")) for err in e.errors()]},
            ) from e
        
        return self._config
        
    def get_config(self) -> Config:
        """Get current configuration."""
        if self._config is None:
            return self.load_config()
        return self._config
        
    def reload_config(self, **overrides: Any) -> Config:
        """Reload configuration."""
        self._config = None
        return self.load_config(**overrides)


def _merge(target: dict, source: dict) -> None:
    for key, value in source.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            _merge(target[key], value)
        else:
            target[key] = value


# Global configuration manager
_config_manager = ConfigManager()

# Convenience functions
load_config = _config_manager.load_config
get_config = _config_manager.get_config
reload_config = _config_manager.reload_config
