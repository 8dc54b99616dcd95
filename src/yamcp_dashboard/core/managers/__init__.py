"""Managers for the manager's configuration records."""

from .server_manager import ServerManager
from .workspace_manager import WorkspaceManager

__all__ = ["ServerManager", "WorkspaceManager"]
