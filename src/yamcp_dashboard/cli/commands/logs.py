"""
Log commands: filtered log entries and log file listing.
"""

import json
from typing import Optional

import click
from rich.console import Console
from rich.table import Table
from rich.text import Text

from yamcp_dashboard.cli.helpers import format_file_size, handle_errors, log_table
from yamcp_dashboard.core.log_viewer import filter_entries, group_by_workspace

console = Console()


def logs_commands(cli_context):
    """Build the log commands."""
    
    @click.command("logs")
    @click.option("--workspace", "-w", default="all", help="Only show this workspace")
    @click.option("--level", "-l", default="all", help="Only show this level (warn and warning are equivalent)")
    @click.option("--limit", "-n", type=click.IntRange(min=1), default=50, show_default=True, help="Maximum entries")
    @click.option("--grouped", "-g", is_flag=True, help="Group entries by workspace")
    @click.option(
        "--output-format", "-o",
        type=click.Choice(["table", "json"], case_sensitive=False),
        default="table",
        help="Output format"
    )
    @handle_errors
    def logs(workspace: str, level: str, limit: int, grouped: bool, output_format: str):
        """Show log entries, newest first."""
        entries = filter_entries(cli_context.get_log_viewer().load_entries(), workspace, level)
        entries = entries[:limit]
        
        if output_format == "json":
            if grouped:
                payload = {
                    name: [e.model_dump() for e in group]
                    for name, group in group_by_workspace(entries).items()
                }
            else:
                payload = [e.model_dump() for e in entries]
            click.echo(json.dumps(payload, indent=2))
            return
        
        if not entries:
            console.print("[yellow]No log entries found[/yellow]")
            console.print("[dim]Log files are created when workspaces are run[/dim]")
            return
        
        if grouped:
            for name, group in group_by_workspace(entries).items():
                console.print(log_table(group, title=f"{name} ({len(group)} entries)"))
        else:
            console.print(log_table(entries, title=f"Log entries ({len(entries)} shown)"))
    
    @click.command("log-files")
    @handle_errors
    def log_files():
        """List log files written by the manager."""
        files = cli_context.get_log_viewer().list_log_files()
        
        if not files:
            console.print("[yellow]No log files found[/yellow]")
            return
        
        table = Table(
            title=f"Log files ({len(files)} total)",
            show_header=True,
            header_style="bold cyan",
            title_style="bold cyan"
        )
        table.add_column("Name", style="green")
        table.add_column("Size", justify="right")
        table.add_column("Modified", style="dim")
        
        for log_file in files:
            table.add_row(Text(log_file.name), format_file_size(log_file.size), log_file.modified)
        
        console.print(table)
    
    return [logs, log_files]
