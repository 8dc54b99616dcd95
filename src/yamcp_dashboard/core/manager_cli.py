"""
Bridge to the external manager CLI.

The dashboard never runs servers or workspaces itself; it only probes the
``yamcp`` executable so the UI can tell whether the manager is installed.
"""

import os
import shutil
import subprocess
from typing import Any, Dict, Optional

from yamcp_dashboard.core.exceptions import ManagerCLIError
from yamcp_dashboard.utils.logging import get_logger

logger = get_logger(__name__)


class ManagerCLI:
    """Thin wrapper around the manager executable."""
    
    def __init__(self, cli_path: str = "yamcp", timeout: int = 10):
        self.cli_path = cli_path
        self.timeout = timeout
        self._resolved: Optional[str] = None
    
    def discover(self) -> Optional[str]:
        """
        Locate the manager executable.
        
        Absolute or relative paths are used as given when executable;
        bare names are looked up on PATH.
        """
        if self._resolved:
            return self._resolved
        
        if os.sep in self.cli_path:
            path = os.path.expanduser(self.cli_path)
            if os.path.isfile(path) and os.access(path, os.X_OK):
                self._resolved = path
        else:
            self._resolved = shutil.which(self.cli_path)
        
        if self._resolved:
            logger.debug(f"Found manager CLI at: {self._resolved}")
        return self._resolved
    
    def is_available(self) -> bool:
        """Check whether the manager executable can be found."""
        return self.discover() is not None
    
    def version(self) -> str:
        """
        Ask the manager for its version.
        
        Raises:
            ManagerCLIError: If the executable is missing, times out or fails
        """
        path = self.discover()
        if not path:
            raise ManagerCLIError(
                f"Manager CLI '{self.cli_path}' not found",
                error_code="CLI_NOT_FOUND",
            )
        
        try:
            result = subprocess.run(
                [path, "--version"],
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            raise ManagerCLIError(
                f"Manager CLI timed out after {self.timeout}s",
                error_code="CLI_TIMEOUT",
            )
        except OSError as e:
            raise ManagerCLIError(f"Manager CLI not runnable: {e}", error_code="CLI_FAILED")
        
        if result.returncode != 0:
            raise ManagerCLIError(
                f"Manager CLI exited with status {result.returncode}",
                error_code="CLI_FAILED",
                details={"stderr": result.stderr.strip()},
            )
        
        return result.stdout.strip().splitlines()[0] if result.stdout.strip() else ""
    
    def info(self) -> Dict[str, Any]:
        """Availability, path and version of the manager CLI, without raising."""
        info: Dict[str, Any] = {
            "available": False,
            "path": None,
            "version": None,
        }
        path = self.discover()
        if not path:
            return info
        
        info["available"] = True
        info["path"] = path
        try:
            info["version"] = self.version()
        except ManagerCLIError as e:
            logger.warning("Manager CLI version check failed", extra={"error": str(e)})
        return info
