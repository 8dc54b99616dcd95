"""
Error handling utilities for CLI commands.
"""

import functools
import sys

import click
from rich.console import Console
from rich.markup import escape

from yamcp_dashboard.core.exceptions import DashboardError

console = Console(stderr=True)


def handle_errors(func):
    """Decorator to report dashboard errors and exit with status 1."""
    
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except click.ClickException:
            raise
        except KeyboardInterrupt:
            console.print("\n[yellow]Operation cancelled by user[/yellow]")
            sys.exit(1)
        except DashboardError as e:
            console.print(f"[red]Error: {escape(e.message)}[/red]")
            sys.exit(1)
        except Exception as e:
            console.print(f"[red]Error: {escape(str(e))}[/red]")
            console.print("[dim]Use --debug for more details[/dim]")
            sys.exit(1)
    
    return wrapper
