"""
Dashboard server commands.

Runs the REST API (and the frontend, when configured) and checks on a
running instance.
"""

import sys
from typing import Optional

import click
import httpx
from rich.console import Console
from rich.markup import escape

from yamcp_dashboard.cli.helpers import handle_errors

console = Console()


def server_commands(cli_context):
    """Build the server commands."""
    
    @click.command("serve")
    @click.option("--host", "-h", help="Bind address (defaults to the configured host)")
    @click.option("--port", "-p", type=int, help="Bind port (defaults to the configured port)")
    @click.option(
        "--log-level",
        type=click.Choice(["critical", "error", "warning", "info", "debug"]),
        default="info",
        help="Uvicorn log level"
    )
    @handle_errors
    def serve(host: Optional[str], port: Optional[int], log_level: str):
        """Start the dashboard server."""
        from yamcp_dashboard.api.server import create_api_server
        
        config = cli_context.get_config()
        host = host or config.server.host
        port = port or config.server.port
        
        console.print("[blue]Starting yamcp dashboard...[/blue]")
        console.print(f"   Providers: [cyan]{config.get_providers_path()}[/cyan]")
        console.print(f"   Workspaces: [cyan]{config.get_workspaces_path()}[/cyan]")
        console.print(f"   Logs: [cyan]{config.get_logs_dir()}[/cyan]")
        console.print(f"   API docs: [cyan]http://{host}:{port}/docs[/cyan]")
        console.print("[dim]Press Ctrl+C to stop[/dim]")
        
        server = create_api_server(config)
        server.run(host=host, port=port, log_level=log_level)
    
    @click.command("status")
    @click.option("--host", "-h", help="Dashboard host (defaults to the configured host)")
    @click.option("--port", "-p", type=int, help="Dashboard port (defaults to the configured port)")
    @click.option("--timeout", default=5.0, show_default=True, help="Request timeout in seconds")
    @handle_errors
    def status(host: Optional[str], port: Optional[int], timeout: float):
        """Check a running dashboard."""
        config = cli_context.get_config()
        base_url = f"http://{host or config.server.host}:{port or config.server.port}"
        
        try:
            with httpx.Client(timeout=timeout) as client:
                response = client.get(f"{base_url}/health")
        except httpx.RequestError as e:
            console.print(f"[red]Dashboard not reachable at {base_url}: {escape(str(e))}[/red]")
            sys.exit(1)
        
        if response.status_code != 200:
            console.print(f"[red]Health check failed: HTTP {response.status_code}[/red]")
            sys.exit(1)
        
        health = response.json()
        status_value = health.get("status", "unknown")
        color = "green" if status_value == "healthy" else "yellow"
        
        console.print("[bold blue]yamcp dashboard[/bold blue]")
        console.print(f"URL: [cyan]{base_url}[/cyan]")
        console.print(f"Status: [{color}]{status_value}[/{color}]")
        console.print(f"Version: [cyan]{health.get('version', 'unknown')}[/cyan]")
        console.print(f"Uptime: [cyan]{health.get('uptime_seconds', 0):.0f}s[/cyan]")
        for key, label in (
            ("providers_file", "providers.json"),
            ("workspaces_file", "workspaces.json"),
            ("logs_dir", "logs directory"),
        ):
            mark = "[green]found[/green]" if health.get(key) else "[yellow]missing[/yellow]"
            console.print(f"  {label}: {mark}")
    
    return [serve, status]
