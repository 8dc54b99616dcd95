"""
Logging setup for yamcp-dashboard.

Configures the root logger with a Rich console handler and an optional
rotating file handler, in text or JSON format. The dashboard's own log file
is kept apart from the manager logs it displays.
"""

import json
import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Union

from rich.console import Console
from rich.logging import RichHandler

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RECORD_ATTRS = {
    "name", "msg", "args", "levelname", "levelno", "pathname",
    "filename", "module", "lineno", "funcName", "created",
    "msecs", "relativeCreated", "thread", "threadName", "taskName",
    "processName", "process", "getMessage", "exc_info",
    "exc_text", "stack_info", "message", "asctime",
}

HTTP_LOGGERS = ["httpx", "httpcore", "h11", "urllib3", "multipart"]


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""
    
    def format(self, record: logging.LogRecord) -> str:
        """Format log record as a single JSON line."""
        log_entry = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
            
        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRS:
                log_entry[key] = value
                
        return json.dumps(log_entry, default=str)


class ExtraFormatter(logging.Formatter):
    """Text formatter that appends ``extra`` fields as key=value pairs."""
    
    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        extras = {
            key: value for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS
        }
        if not extras:
            return base
        pairs = " ".join(f"{key}={value}" for key, value in extras.items())
        return f"{base} | {pairs}"


class DashboardLogger:
    """Logging manager for the dashboard process."""
    
    def __init__(self):
        self._loggers: Dict[str, logging.Logger] = {}
        self._setup_done = False
        
    def setup_logging(
        self,
        enabled: bool = True,
        level: Union[str, int] = logging.INFO,
        console_level: Union[str, int] = logging.WARNING,
        log_file: Optional[Path] = None,
        format_type: str = "text",
        enable_rich: bool = True,
        max_bytes: int = 10 * 1024 * 1024,  # 10MB
        backup_count: int = 5,
        suppress_http: bool = True,
        force: bool = False,
        **kwargs: Any,
    ) -> None:
        """
        Setup logging configuration.
        
        Args:
            enabled: Enable logging completely
            level: File logging level
            console_level: Console logging level
            log_file: Path to log file (optional)
            format_type: Format type ('text', 'json')
            enable_rich: Enable Rich console output
            max_bytes: Maximum log file size before rotation
            backup_count: Number of backup files to keep
            suppress_http: Quieten HTTP client library loggers
            force: Reconfigure even if logging was already set up
            **kwargs: Ignored, allows passing a whole config section
        """
        if self._setup_done and not force:
            return
        
        root_logger = logging.getLogger()
        root_logger.handlers.clear()
        
        if not enabled:
            root_logger.setLevel(logging.CRITICAL)
            for logger_name in HTTP_LOGGERS:
                logging.getLogger(logger_name).setLevel(logging.CRITICAL)
            self._setup_done = True
            return
            
        if isinstance(level, str):
            level = getattr(logging, level.upper())
        if isinstance(console_level, str):
            console_level = getattr(logging, console_level.upper())
            
        root_logger.setLevel(min(level, console_level))
        
        if enable_rich:
            console_handler: logging.Handler = RichHandler(
                console=Console(stderr=True),
                rich_tracebacks=True,
                markup=False,
                show_path=False,
            )
        else:
            console_handler = logging.StreamHandler(sys.stderr)
            if format_type == "json":
                console_handler.setFormatter(JSONFormatter())
            else:
                console_handler.setFormatter(ExtraFormatter(
                    "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
                ))
                
        console_handler.setLevel(console_level)
        root_logger.addHandler(console_handler)
        
        if log_file:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            
            file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
            
            if format_type == "json":
                file_handler.setFormatter(JSONFormatter())
            else:
                file_handler.setFormatter(ExtraFormatter(
                    "%(asctime)s | %(levelname)s | %(name)s | "
                    "%(module)s:%(funcName)s:%(lineno)d | %(message)s"
                ))
                
            file_handler.setLevel(level)
            root_logger.addHandler(file_handler)
        
        if suppress_http:
            for logger_name in HTTP_LOGGERS:
                logging.getLogger(logger_name).setLevel(logging.WARNING)
                
        self._setup_done = True
        
    def get_logger(self, name: str) -> logging.Logger:
        """
        Get or create a logger instance.
        
        Args:
            name: Logger name
            
        Returns:
            Logger instance
        """
        if name not in self._loggers:
            self._loggers[name] = logging.getLogger(name)
            
        return self._loggers[name]


# Global logger instance
_logger_manager = DashboardLogger()

# Convenience functions
setup_logging = _logger_manager.setup_logging
get_logger = _logger_manager.get_logger
