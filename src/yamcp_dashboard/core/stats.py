"""
Dashboard overview statistics.
"""

from collections import Counter
from typing import Any, Dict

from yamcp_dashboard.core.log_viewer import LogViewer, count_by_level
from yamcp_dashboard.core.manager_cli import ManagerCLI
from yamcp_dashboard.core.managers import ServerManager, WorkspaceManager


class StatsService:
    """Aggregates counts shown on the dashboard overview."""
    
    def __init__(
        self,
        servers: ServerManager,
        workspaces: WorkspaceManager,
        log_viewer: LogViewer,
        manager_cli: ManagerCLI,
    ):
        self.servers = servers
        self.workspaces = workspaces
        self.log_viewer = log_viewer
        self.manager_cli = manager_cli
    
    def collect(self) -> Dict[str, Any]:
        """Collect overview statistics from the store, the logs and the CLI."""
        servers = self.servers.list_servers()
        workspaces = self.workspaces.list_workspaces()
        
        by_type = Counter(server.type.value for server in servers)
        missing = self.workspaces.find_missing_servers(server.name for server in servers)
        
        return {
            "totalServers": len(servers),
            "totalWorkspaces": len(workspaces),
            "serversByType": dict(by_type),
            "totalLogFiles": len(self.log_viewer.list_log_files()),
            "logLevels": count_by_level(self.log_viewer.load_entries()),
            "missingReferences": missing,
            "manager": self.manager_cli.info(),
        }
