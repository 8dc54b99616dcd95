"""
REST API endpoints for yamcp-dashboard.

Each method backs one route; ``DashboardServer`` wires them into FastAPI.
Domain errors propagate as ``DashboardError`` subclasses and are turned
into HTTP responses by the server's exception handlers.
"""

import io
import json
import time
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

import pandas as pd
import yaml
from fastapi.responses import FileResponse, StreamingResponse

from yamcp_dashboard import __version__
from yamcp_dashboard.api.models import APIResponse, ExportFormat, HealthCheckResponse, LogGroup
from yamcp_dashboard.core.log_viewer import (
    LogViewer, filter_entries, group_by_workspace, unique_workspaces
)
from yamcp_dashboard.core.manager_cli import ManagerCLI
from yamcp_dashboard.core.managers import ServerManager, WorkspaceManager
from yamcp_dashboard.core.models import LogEntry, LogFile, Provider, ProviderType, Workspace
from yamcp_dashboard.core.stats import StatsService
from yamcp_dashboard.core.store import JSONFileStore
from yamcp_dashboard.utils.config import Config, get_config
from yamcp_dashboard.utils.logging import get_logger

logger = get_logger(__name__)

LOG_EXPORT_COLUMNS = ["id", "timestamp", "level", "server", "message", "file", "line"]

MEDIA_TYPES = {
    ExportFormat.JSON: "application/json",
    ExportFormat.CSV: "text/csv",
    ExportFormat.YAML: "application/x-yaml",
}


def _attachment(content: str, media_type: str, filename: str) -> StreamingResponse:
    def generate():
        yield content.encode("utf-8")
    
    return StreamingResponse(
        generate(),
        media_type=media_type,
        headers={"Content-Disposition": f"attachment; filename={filename}"}
    )


class DashboardEndpoints:
    """Main API endpoints controller."""
    
    def __init__(self, config: Optional[Config] = None):
        """Initialize endpoints and the services behind them."""
        self.config = config or get_config()
        
        backup = self.config.manager.backup_on_write
        self.providers_store = JSONFileStore(self.config.get_providers_path(), backup=backup)
        self.workspaces_store = JSONFileStore(self.config.get_workspaces_path(), backup=backup)
        
        self.servers = ServerManager(self.providers_store)
        self.workspaces = WorkspaceManager(self.workspaces_store)
        self.log_viewer = LogViewer(
            self.config.get_logs_dir(),
            pattern=self.config.logs.pattern,
            max_entries=self.config.logs.max_entries,
        )
        self.manager_cli = ManagerCLI(
            self.config.manager.cli_path,
            timeout=self.config.manager.cli_timeout,
        )
        self.stats_service = StatsService(
            self.servers, self.workspaces, self.log_viewer, self.manager_cli
        )
        self._start_time = time.time()
        
        logger.info("API endpoints initialized", extra={
            "providers_file": str(self.providers_store.path),
            "workspaces_file": str(self.workspaces_store.path),
            "logs_dir": str(self.log_viewer.logs_dir)
        })
    
    # Health and overview
    
    def health_check(self) -> HealthCheckResponse:
        """Report whether the manager's files are where the dashboard expects them."""
        providers_file = self.providers_store.exists()
        workspaces_file = self.workspaces_store.exists()
        logs_dir = self.log_viewer.logs_dir.is_dir()
        
        status = "healthy" if providers_file and workspaces_file else "degraded"
        
        return HealthCheckResponse(
            success=True,
            message="Dashboard is running",
            status=status,
            version=__version__,
            uptime_seconds=time.time() - self._start_time,
            providers_file=providers_file,
            workspaces_file=workspaces_file,
            logs_dir=logs_dir,
        )
    
    def get_stats(self) -> Dict[str, Any]:
        """Overview statistics."""
        return self.stats_service.collect()
    
    # Servers
    
    def list_servers(self, server_type: Optional[ProviderType] = None) -> List[Provider]:
        """List configured servers."""
        return self.servers.list_servers(server_type)
    
    def get_server(self, name: str) -> Provider:
        """Get one server."""
        return self.servers.get_server(name)
    
    def create_server(self, provider: Provider) -> APIResponse:
        """Create a server."""
        created = self.servers.create_server(provider)
        return APIResponse(success=True, message=f"Server '{created.name}' created", data=created)
    
    def update_server(self, name: str, provider: Provider) -> APIResponse:
        """Update or rename a server."""
        updated = self.servers.update_server(name, provider)
        return APIResponse(success=True, message=f"Server '{name}' updated", data=updated)
    
    def delete_server(self, name: str) -> APIResponse:
        """Delete a server."""
        self.servers.delete_server(name)
        return APIResponse(success=True, message=f"Server '{name}' deleted")
    
    # Workspaces
    
    def list_workspaces(self) -> List[Workspace]:
        """List workspaces."""
        return self.workspaces.list_workspaces()
    
    def get_workspace(self, name: str) -> Workspace:
        """Get one workspace."""
        return self.workspaces.get_workspace(name)
    
    def create_workspace(self, workspace: Workspace) -> APIResponse:
        """Create a workspace."""
        created = self.workspaces.create_workspace(workspace)
        return APIResponse(success=True, message=f"Workspace '{created.name}' created", data=created)
    
    def update_workspace(self, name: str, workspace: Workspace) -> APIResponse:
        """Update or rename a workspace."""
        updated = self.workspaces.update_workspace(name, workspace)
        return APIResponse(success=True, message=f"Workspace '{name}' updated", data=updated)
    
    def delete_workspace(self, name: str) -> APIResponse:
        """Delete a workspace."""
        self.workspaces.delete_workspace(name)
        return APIResponse(success=True, message=f"Workspace '{name}' deleted")
    
    # Logs
    
    def list_logs(
        self,
        workspace: Optional[str] = None,
        level: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[LogEntry]:
        """Log entries, newest first, filtered by workspace and level."""
        entries = filter_entries(self.log_viewer.load_entries(), workspace, level)
        if limit is not None:
            entries = entries[:limit]
        return entries
    
    def grouped_logs(
        self,
        workspace: Optional[str] = None,
        level: Optional[str] = None,
    ) -> List[LogGroup]:
        """Filtered log entries grouped by workspace."""
        groups = group_by_workspace(self.list_logs(workspace, level))
        return [
            LogGroup(workspace=name, count=len(entries), entries=entries)
            for name, entries in groups.items()
        ]
    
    def log_workspaces(self) -> List[str]:
        """Workspaces that have log entries."""
        return unique_workspaces(self.log_viewer.load_entries())
    
    def export_logs(
        self,
        export_format: ExportFormat = ExportFormat.JSON,
        workspace: Optional[str] = None,
        level: Optional[str] = None,
    ) -> StreamingResponse:
        """Download filtered log entries as JSON, CSV or YAML."""
        entries = self.list_logs(workspace, level)
        rows = [entry.model_dump() for entry in entries]
        
        logger.info("Log export requested", extra={
            "format": export_format.value,
            "entries": len(rows)
        })
        
        if export_format == ExportFormat.JSON:
            content = json.dumps(rows, indent=2)
        elif export_format == ExportFormat.CSV:
            output = io.StringIO()
            pd.DataFrame(rows, columns=LOG_EXPORT_COLUMNS).to_csv(output, index=False)
            content = output.getvalue()
        else:
            content = yaml.safe_dump(rows, default_flow_style=False, sort_keys=False)
        
        filename = f"yamcp-logs-{date.today().isoformat()}.{export_format.value}"
        return _attachment(content, MEDIA_TYPES[export_format], filename)
    
    def list_log_files(self) -> List[LogFile]:
        """Log files, most recently modified first."""
        return self.log_viewer.list_log_files()
    
    def download_log_file(self, workspace: str, filename: str) -> FileResponse:
        """Raw log file download."""
        path = self.log_viewer.resolve_log_file(workspace, filename)
        return FileResponse(
            path,
            media_type="text/plain",
            filename=f"{workspace}_{filename}",
        )
    
    # Configuration files
    
    def config_paths(self) -> Dict[str, Any]:
        """Where the dashboard reads and writes the manager's files."""
        return {
            "storeDir": str(self.config.get_store_dir()),
            "providersFile": str(self.providers_store.path),
            "workspacesFile": str(self.workspaces_store.path),
            "logsDir": str(self.log_viewer.logs_dir),
            "managerCli": self.config.manager.cli_path,
        }
    
    def raw_providers(self) -> Dict[str, Any]:
        """Raw contents of providers.json."""
        return self.providers_store.load()
    
    def raw_workspaces(self) -> Dict[str, Any]:
        """Raw contents of workspaces.json."""
        return self.workspaces_store.load()
    
    def export_config(self) -> StreamingResponse:
        """Both configuration files in a single JSON attachment."""
        payload = {
            "providers": self.providers_store.load(),
            "workspaces": self.workspaces_store.load(),
            "exportedAt": datetime.now(timezone.utc).isoformat(),
        }
        filename = f"yamcp-config-{date.today().isoformat()}.json"
        return _attachment(json.dumps(payload, indent=2), "application/json", filename)
