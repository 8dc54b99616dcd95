"""
FastAPI server for yamcp-dashboard.

Builds the application: middleware stack, exception handlers mapping
``DashboardError`` subclasses to HTTP status codes, the ``/api`` routes
and, when configured, the built frontend served at ``/``.
"""

from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from yamcp_dashboard import __version__
from yamcp_dashboard.api.endpoints import DashboardEndpoints
from yamcp_dashboard.api.middleware import (
    ErrorHandlingMiddleware, RequestLoggingMiddleware, SecurityMiddleware
)
from yamcp_dashboard.api.models import (
    APIResponse, ErrorResponse, ExportFormat, HealthCheckResponse, LogGroup
)
from yamcp_dashboard.core.exceptions import (
    ConflictError, DashboardError, ManagerCLIError, NotFoundError, ValidationError
)
from yamcp_dashboard.core.models import (
    LogEntry, LogFile, Provider, ProviderInput, ProviderType, Workspace, WorkspaceInput
)
from yamcp_dashboard.utils.config import Config, get_config
from yamcp_dashboard.utils.logging import get_logger

logger = get_logger(__name__)

# Checked in order; anything else is a 500.
ERROR_STATUS_CODES = [
    (NotFoundError, 404),
    (ConflictError, 409),
    (ValidationError, 400),
    (ManagerCLIError, 502),
]


def status_code_for(error: DashboardError) -> int:
    """HTTP status code for a dashboard error."""
    for error_class, status_code in ERROR_STATUS_CODES:
        if isinstance(error, error_class):
            return status_code
    return 500


class DashboardServer:
    """yamcp-dashboard API server."""
    
    def __init__(self, config: Optional[Config] = None):
        """Initialize API server."""
        self.config = config or get_config()
        self.endpoints = DashboardEndpoints(self.config)
        self.app = self._create_app()
        
        logger.info("API server initialized", extra={
            "allowed_origins": self.config.server.allowed_origins,
            "static_dir": self.config.server.static_dir
        })
    
    @asynccontextmanager
    async def lifespan(self, app: FastAPI):
        """Manage application lifespan."""
        logger.info("API server starting up")
        yield
        logger.info("API server shutting down")
    
    def _create_app(self) -> FastAPI:
        """Create and configure FastAPI application."""
        app = FastAPI(
            title="yamcp Dashboard API",
            description="REST API over the yamcp provider, workspace and log files",
            version=__version__,
            docs_url="/docs",
            redoc_url="/redoc",
            lifespan=self.lifespan
        )
        
        self._add_middleware(app)
        self._add_exception_handlers(app)
        self._add_routes(app)
        self._mount_frontend(app)
        
        return app
    
    def _add_middleware(self, app: FastAPI):
        """Add middleware stack; the last one added runs outermost."""
        app.add_middleware(
            CORSMiddleware,
            allow_origins=self.config.server.allowed_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "DELETE"],
            allow_headers=["Content-Type"],
        )
        app.add_middleware(SecurityMiddleware)
        app.add_middleware(RequestLoggingMiddleware)
        app.add_middleware(ErrorHandlingMiddleware)
    
    def _add_exception_handlers(self, app: FastAPI):
        """Map domain and request validation errors to JSON error responses."""
        
        @app.exception_handler(DashboardError)
        async def dashboard_error_handler(request: Request, exc: DashboardError):
            status_code = status_code_for(exc)
            log = logger.error if status_code >= 500 else logger.warning
            log("Request failed", extra={
                "path": request.url.path,
                "status_code": status_code,
                "error": str(exc)
            })
            body = ErrorResponse(
                message=exc.message,
                error_code=exc.error_code,
                details=exc.details or None,
            )
            return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))
        
        @app.exception_handler(RequestValidationError)
        async def validation_error_handler(request: Request, exc: RequestValidationError):
            errors = [
                {"loc": [str(part) for part in error.get("loc", ())], "msg": error.get("msg", ""),
                 "type": error.get("type", "")}
                for error in exc.errors()
            ]
            body = ErrorResponse(
                message="Request validation failed",
                error_code="INVALID_REQUEST",
                details={"errors": errors},
            )
            return JSONResponse(status_code=422, content=body.model_dump(mode="json"))
    
    def _add_routes(self, app: FastAPI):
        """Add API routes to FastAPI app."""
        endpoints = self.endpoints
        
        @app.get("/health", response_model=HealthCheckResponse)
        def health_check():
            """Health check endpoint."""
            return endpoints.health_check()
        
        @app.get("/api/stats")
        def get_stats() -> Dict[str, Any]:
            """Dashboard overview statistics."""
            return endpoints.get_stats()
        
        # Servers
        
        @app.get("/api/servers", response_model=List[Provider])
        def list_servers(
            server_type: Optional[ProviderType] = Query(None, alias="type", description="Filter by type")
        ):
            """List configured servers."""
            return endpoints.list_servers(server_type)
        
        @app.get("/api/servers/{name}", response_model=Provider)
        def get_server(name: str):
            """Get one server."""
            return endpoints.get_server(name)
        
        @app.post("/api/servers", response_model=APIResponse, status_code=201)
        def create_server(provider: ProviderInput):
            """Create a server."""
            return endpoints.create_server(provider)
        
        @app.put("/api/servers/{name}", response_model=APIResponse)
        def update_server(name: str, provider: ProviderInput):
            """Update or rename a server."""
            return endpoints.update_server(name, provider)
        
        @app.delete("/api/servers/{name}", response_model=APIResponse)
        def delete_server(name: str):
            """Delete a server."""
            return endpoints.delete_server(name)
        
        # Workspaces
        
        @app.get("/api/workspaces", response_model=List[Workspace])
        def list_workspaces():
            """List workspaces."""
            return endpoints.list_workspaces()
        
        @app.get("/api/workspaces/{name}", response_model=Workspace)
        def get_workspace(name: str):
            """Get one workspace."""
            return endpoints.get_workspace(name)
        
        @app.post("/api/workspaces", response_model=APIResponse, status_code=201)
        def create_workspace(workspace: WorkspaceInput):
            """Create a workspace."""
            return endpoints.create_workspace(workspace)
        
        @app.put("/api/workspaces/{name}", response_model=APIResponse)
        def update_workspace(name: str, workspace: WorkspaceInput):
            """Update or rename a workspace."""
            return endpoints.update_workspace(name, workspace)
        
        @app.delete("/api/workspaces/{name}", response_model=APIResponse)
        def delete_workspace(name: str):
            """Delete a workspace."""
            return endpoints.delete_workspace(name)
        
        # Logs
        
        @app.get("/api/logs", response_model=List[LogEntry])
        def list_logs(
            workspace: str = Query("all", description="Workspace filter"),
            level: str = Query("all", description="Level filter"),
            limit: Optional[int] = Query(None, ge=1, description="Maximum entries"),
        ):
            """Log entries, newest first."""
            return endpoints.list_logs(workspace, level, limit)
        
        @app.get("/api/logs/grouped", response_model=List[LogGroup])
        def grouped_logs(
            workspace: str = Query("all", description="Workspace filter"),
            level: str = Query("all", description="Level filter"),
        ):
            """Log entries grouped by workspace."""
            return endpoints.grouped_logs(workspace, level)
        
        @app.get("/api/logs/workspaces", response_model=List[str])
        def log_workspaces():
            """Workspaces present in the logs."""
            return endpoints.log_workspaces()
        
        @app.get("/api/logs/export")
        def export_logs(
            export_format: ExportFormat = Query(ExportFormat.JSON, alias="format"),
            workspace: str = Query("all", description="Workspace filter"),
            level: str = Query("all", description="Level filter"),
        ):
            """Download log entries."""
            return endpoints.export_logs(export_format, workspace, level)
        
        @app.get("/api/log-files", response_model=List[LogFile])
        def list_log_files():
            """Log files written by the manager."""
            return endpoints.list_log_files()
        
        @app.get("/api/log-files/{workspace}/{filename}")
        def download_log_file(workspace: str, filename: str):
            """Download a log file."""
            return endpoints.download_log_file(workspace, filename)
        
        # Configuration files
        
        @app.get("/api/config/paths")
        def config_paths() -> Dict[str, Any]:
            """File locations used by the dashboard."""
            return endpoints.config_paths()
        
        @app.get("/api/config/providers")
        def raw_providers() -> Dict[str, Any]:
            """Raw providers.json."""
            return endpoints.raw_providers()
        
        @app.get("/api/config/workspaces")
        def raw_workspaces() -> Dict[str, Any]:
            """Raw workspaces.json."""
            return endpoints.raw_workspaces()
        
        @app.get("/api/config/export")
        def export_config():
            """Download both configuration files."""
            return endpoints.export_config()
    
    def _mount_frontend(self, app: FastAPI):
        """Serve the built frontend at / when its directory exists."""
        static_dir = self.config.get_static_dir()
        if static_dir is None:
            return
        if not static_dir.is_dir():
            logger.warning(f"Frontend directory not found: {static_dir}")
            return
        app.mount("/", StaticFiles(directory=str(static_dir), html=True), name="frontend")
    
    def run(self, host: Optional[str] = None, port: Optional[int] = None, log_level: str = "info"):
        """Run the API server."""
        import uvicorn
        
        host = host or self.config.server.host
        port = port or self.config.server.port
        
        logger.info("Starting API server", extra={
            "host": host,
            "port": port,
            "docs_url": f"http://{host}:{port}/docs"
        })
        
        uvicorn.run(
            self.app,
            host=host,
            port=port,
            log_level=log_level
        )


def create_app(config: Optional[Config] = None) -> FastAPI:
    """Factory returning the FastAPI application, for ASGI servers and tests."""
    return DashboardServer(config).app


def create_api_server(config: Optional[Config] = None) -> DashboardServer:
    """Factory function to create API server."""
    return DashboardServer(config)
