"""
Configuration views: servers, workspaces and file locations.
"""

import json
from typing import Optional

import click
from rich.console import Console
from rich.table import Table
from rich.text import Text

from yamcp_dashboard.cli.helpers import handle_errors
from yamcp_dashboard.core.models import ProviderType

console = Console()


def config_commands(cli_context):
    """Build the configuration commands."""
    
    @click.command("servers")
    @click.option(
        "--type", "server_type",
        type=click.Choice([t.value for t in ProviderType], case_sensitive=False),
        help="Only show servers of this type"
    )
    @click.option(
        "--output-format", "-o",
        type=click.Choice(["table", "json"], case_sensitive=False),
        default="table",
        help="Output format"
    )
    @handle_errors
    def servers(server_type: Optional[str], output_format: str):
        """List configured servers."""
        type_filter = ProviderType(server_type.lower()) if server_type else None
        providers = cli_context.get_servers().list_servers(type_filter)
        
        if output_format == "json":
            click.echo(json.dumps([p.model_dump(mode="json") for p in providers], indent=2))
            return
        
        if not providers:
            console.print("[yellow]No servers configured[/yellow]")
            console.print("[dim]Add servers with the manager CLI or the dashboard[/dim]")
            return
        
        table = Table(
            title=f"Servers ({len(providers)} total)",
            show_header=True,
            header_style="bold cyan",
            title_style="bold cyan"
        )
        table.add_column("Name", style="green")
        table.add_column("Namespace", style="blue")
        table.add_column("Type", style="yellow")
        table.add_column("Connection", style="dim", overflow="fold")
        
        for provider in providers:
            if provider.type == ProviderType.STDIO:
                connection = " ".join([provider.command or ""] + provider.args)
            else:
                connection = provider.url or ""
            table.add_row(
                Text(provider.name),
                Text(provider.namespace or ""),
                provider.type.value,
                Text(connection),
            )
        
        console.print(table)
    
    @click.command("workspaces")
    @click.option(
        "--output-format", "-o",
        type=click.Choice(["table", "json"], case_sensitive=False),
        default="table",
        help="Output format"
    )
    @handle_errors
    def workspaces(output_format: str):
        """List workspaces and their servers."""
        workspace_manager = cli_context.get_workspaces()
        items = workspace_manager.list_workspaces()
        
        if output_format == "json":
            click.echo(json.dumps([w.model_dump(mode="json") for w in items], indent=2))
            return
        
        if not items:
            console.print("[yellow]No workspaces configured[/yellow]")
            return
        
        known = [p.name for p in cli_context.get_servers().list_servers()]
        missing = workspace_manager.find_missing_servers(known)
        
        table = Table(
            title=f"Workspaces ({len(items)} total)",
            show_header=True,
            header_style="bold cyan",
            title_style="bold cyan"
        )
        table.add_column("Name", style="green")
        table.add_column("Servers", overflow="fold")
        
        for workspace in items:
            members = Text()
            for index, server in enumerate(workspace.servers):
                if index:
                    members.append(", ")
                style = "red" if server in missing.get(workspace.name, []) else ""
                members.append(server, style=style)
            table.add_row(Text(workspace.name), members)
        
        console.print(table)
        if missing:
            console.print("[dim]Servers in red are not configured[/dim]")
    
    @click.command("paths")
    @handle_errors
    def paths():
        """Show the files the dashboard reads and the manager CLI it uses."""
        config = cli_context.get_config()
        manager_info = cli_context.get_manager_cli().info()
        
        rows = [
            ("Providers", config.get_providers_path()),
            ("Workspaces", config.get_workspaces_path()),
            ("Logs", config.get_logs_dir()),
            ("Dashboard log", config.get_log_file() or "-"),
        ]
        
        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Item", style="green")
        table.add_column("Location")
        table.add_column("Exists")
        for label, path in rows:
            exists = "" if path == "-" else ("yes" if path.exists() else "no")
            table.add_row(label, Text(str(path)), exists)
        console.print(table)
        
        if manager_info["available"]:
            version = manager_info["version"] or "unknown version"
            console.print(f"Manager CLI: [green]{manager_info['path']}[/green] ({version})")
        else:
            console.print(f"Manager CLI: [yellow]'{config.manager.cli_path}' not found[/yellow]")
    
    return [servers, workspaces, paths]
