"""
JSON file store for the manager's configuration files.

The manager owns ``providers.json`` and ``workspaces.json``; the dashboard
reads them on every request and rewrites them whole on every change.
"""

import json
import os
import shutil
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any, Dict

from yamcp_dashboard.core.exceptions import StoreError
from yamcp_dashboard.utils.logging import get_logger

logger = get_logger(__name__)


class JSONFileStore:
    """Reads and rewrites a single JSON object file."""
    
    def __init__(self, path: Path, backup: bool = True):
        self.path = Path(path)
        self.backup = backup
    
    def __repr__(self) -> str:
        return f"JSONFileStore({str(self.path)!r})"
    
    def exists(self) -> bool:
        """Check whether the file exists."""
        return self.path.is_file()
    
    def load(self) -> Dict[str, Any]:
        """
        Load the file contents.
        
        Returns:
            The top-level JSON object, or an empty dict if the file is missing
            
        Raises:
            StoreError: If the file cannot be read, is not valid JSON, or its
                top level is not an object
        """
        if not self.path.exists():
            return {}
        
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error("Malformed JSON in store file", extra={
                "path": str(self.path),
                "error": str(e)
            })
            raise StoreError(
                f"Malformed JSON in {self.path.name}: {e.msg} (line {e.lineno})",
                error_code="MALFORMED_JSON",
                details={"path": str(self.path), "line": e.lineno, "column": e.colno},
            )
        except OSError as e:
            raise StoreError(
                f"Failed to read {self.path.name}: {e}",
                error_code="READ_FAILED",
                details={"path": str(self.path)},
            )
        
        if not isinstance(data, dict):
            raise StoreError(
                f"Unexpected content in {self.path.name}: top level must be an object",
                error_code="INVALID_SHAPE",
                details={"path": str(self.path), "found": type(data).__name__},
            )
        
        return data
    
    def save(self, data: Dict[str, Any]) -> None:
        """
        Replace the file contents.
        
        The previous file is copied aside first when backups are enabled.
        The new content is written to a temporary file in the same directory
        and renamed over the target.
        
        Raises:
            StoreError: If the file cannot be written
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            
            if self.backup and self.path.exists():
                backup_path = self.path.with_name(
                    f"{self.path.name}.backup.{datetime.now().strftime('%Y%m%d_%H%M%S')}"
                )
                shutil.copy2(self.path, backup_path)
                logger.debug(f"Created backup: {backup_path}")
            
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent)
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2)
                    f.write("\n")
                os.replace(tmp_name, self.path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
            
            logger.debug(f"Saved {self.path}")
            
        except OSError as e:
            logger.error(f"Failed to save {self.path}: {e}")
            raise StoreError(
                f"Failed to write {self.path.name}: {e}",
                error_code="WRITE_FAILED",
                details={"path": str(self.path)},
            )
