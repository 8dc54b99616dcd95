"""
Workspace management over ``workspaces.json``.
"""

from typing import Dict, Iterable, List

from pydantic import ValidationError as PydanticValidationError

from yamcp_dashboard.core.exceptions import ConflictError, NotFoundError, StoreError
from yamcp_dashboard.core.models import Workspace
from yamcp_dashboard.core.store import JSONFileStore
from yamcp_dashboard.utils.logging import get_logger

logger = get_logger(__name__)


class WorkspaceManager:
    """CRUD operations on the manager's workspaces."""
    
    def __init__(self, store: JSONFileStore):
        self.store = store
    
    def _load(self) -> Dict[str, Workspace]:
        data = self.store.load()
        workspaces = {}
        for name, record in data.items():
            try:
                workspaces[name] = Workspace.from_store(name, record)
            except (PydanticValidationError, ValueError) as e:
                raise StoreError(
                    f"Invalid workspace record '{name}' in {self.store.path.name}: {e}",
                    error_code="INVALID_RECORD",
                    details={"workspace": name},
                )
        return workspaces
    
    def _save(self, workspaces: Dict[str, Workspace]) -> None:
        self.store.save({name: ws.to_store() for name, ws in workspaces.items()})
    
    def list_workspaces(self) -> List[Workspace]:
        """List workspaces sorted by name."""
        return sorted(self._load().values(), key=lambda w: w.name)
    
    def get_workspace(self, name: str) -> Workspace:
        """Get a workspace by name."""
        workspaces = self._load()
        if name not in workspaces:
            raise NotFoundError(f"Workspace '{name}' not found", error_code="WORKSPACE_NOT_FOUND")
        return workspaces[name]
    
    def create_workspace(self, workspace: Workspace) -> Workspace:
        """
        Add a new workspace.
        
        Raises:
            ConflictError: If a workspace with the same name exists
        """
        workspaces = self._load()
        if workspace.name in workspaces:
            raise ConflictError(
                f"Workspace '{workspace.name}' already exists",
                error_code="WORKSPACE_EXISTS",
            )
        
        workspaces[workspace.name] = workspace
        self._save(workspaces)
        
        logger.info("Workspace created", extra={
            "workspace": workspace.name,
            "servers": len(workspace.servers)
        })
        return workspace
    
    def update_workspace(self, name: str, workspace: Workspace) -> Workspace:
        """
        Replace a workspace, renaming it when the names differ.
        
        Raises:
            NotFoundError: If ``name`` does not exist
            ConflictError: If renaming onto an existing workspace
        """
        workspaces = self._load()
        if name not in workspaces:
            raise NotFoundError(f"Workspace '{name}' not found", error_code="WORKSPACE_NOT_FOUND")
        
        if workspace.name != name and workspace.name in workspaces:
            raise ConflictError(
                f"Cannot rename '{name}': workspace '{workspace.name}' already exists",
                error_code="WORKSPACE_EXISTS",
            )
        
        updated = {}
        for key, value in workspaces.items():
            if key == name:
                updated[workspace.name] = workspace
            else:
                updated[key] = value
        self._save(updated)
        
        logger.info("Workspace updated", extra={"workspace": name, "new_name": workspace.name})
        return workspace
    
    def delete_workspace(self, name: str) -> None:
        """
        Remove a workspace.
        
        Raises:
            NotFoundError: If the workspace does not exist
        """
        workspaces = self._load()
        if name not in workspaces:
            raise NotFoundError(f"Workspace '{name}' not found", error_code="WORKSPACE_NOT_FOUND")
        
        del workspaces[name]
        self._save(workspaces)
        
        logger.info("Workspace deleted", extra={"workspace": name})
    
    def find_missing_servers(self, known_servers: Iterable[str]) -> Dict[str, List[str]]:
        """
        Report workspace members that are not configured servers.
        
        Args:
            known_servers: Names of configured servers
            
        Returns:
            Mapping of workspace name to unknown member names; workspaces
            without unknown members are omitted
        """
        known = set(known_servers)
        missing = {}
        for workspace in self.list_workspaces():
            unknown = [s for s in workspace.servers if s not in known]
            if unknown:
                missing[workspace.name] = unknown
        return missing
