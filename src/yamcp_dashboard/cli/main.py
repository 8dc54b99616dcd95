"""
Main CLI interface for yamcp-dashboard.

Starts the dashboard server and offers terminal views of the same data the
dashboard shows: servers, workspaces, log entries and log files.
"""

from typing import Optional, Tuple

import click
from rich.console import Console

from yamcp_dashboard import __version__
from yamcp_dashboard.cli.commands.config import config_commands
from yamcp_dashboard.cli.commands.logs import logs_commands
from yamcp_dashboard.cli.commands.server import server_commands
from yamcp_dashboard.core.exceptions import ConfigError
from yamcp_dashboard.core.log_viewer import LogViewer
from yamcp_dashboard.core.manager_cli import ManagerCLI
from yamcp_dashboard.core.managers import ServerManager, WorkspaceManager
from yamcp_dashboard.core.store import JSONFileStore
from yamcp_dashboard.utils.config import Config, ConfigManager
from yamcp_dashboard.utils.logging import get_logger, setup_logging

console = Console()
logger = get_logger(__name__)


class CLIContext:
    """CLI context for passing state between commands."""
    
    def __init__(self):
        self.config: Optional[Config] = None
        
    def get_config(self) -> Config:
        """Get the configuration loaded for this invocation."""
        if self.config is None:
            self.config = ConfigManager().load_config()
        return self.config
    
    def get_servers(self) -> ServerManager:
        """Server manager over the configured providers file."""
        config = self.get_config()
        return ServerManager(JSONFileStore(
            config.get_providers_path(), backup=config.manager.backup_on_write
        ))
    
    def get_workspaces(self) -> WorkspaceManager:
        """Workspace manager over the configured workspaces file."""
        config = self.get_config()
        return WorkspaceManager(JSONFileStore(
            config.get_workspaces_path(), backup=config.manager.backup_on_write
        ))
    
    def get_log_viewer(self) -> LogViewer:
        """Log viewer over the configured logs directory."""
        config = self.get_config()
        return LogViewer(
            config.get_logs_dir(),
            pattern=config.logs.pattern,
            max_entries=config.logs.max_entries,
        )
    
    def get_manager_cli(self) -> ManagerCLI:
        """Manager CLI bridge."""
        config = self.get_config()
        return ManagerCLI(config.manager.cli_path, timeout=config.manager.cli_timeout)


# Global CLI context
cli_context = CLIContext()


@click.group()
@click.option("--debug", "-d", is_flag=True, help="Enable debug logging")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option(
    "--config-file", "-c",
    multiple=True,
    type=click.Path(exists=True, dir_okay=False),
    help="TOML configuration file (can be used multiple times)"
)
@click.option(
    "--store-dir",
    type=click.Path(file_okay=False),
    help="Directory holding providers.json and workspaces.json"
)
@click.option(
    "--logs-dir",
    type=click.Path(file_okay=False),
    help="Directory the manager writes logs to"
)
@click.version_option(version=__version__, prog_name="yamcp-dashboard")
def cli(
    debug: bool,
    verbose: bool,
    config_file: Tuple[str, ...],
    store_dir: Optional[str],
    logs_dir: Optional[str],
):
    """
    Administrative dashboard for the yamcp workspace manager.

    Serves a REST API and web UI over the manager's server and workspace
    configuration and the log files its runtime writes.
    """
    manager_overrides = {}
    if store_dir:
        manager_overrides["store_dir"] = store_dir
    if logs_dir:
        manager_overrides["logs_dir"] = logs_dir
    overrides = {"manager": manager_overrides} if manager_overrides else {}
    
    try:
        config = ConfigManager().load_config(
            config_files=list(config_file) or None,
            **overrides
        )
    except ConfigError as e:
        raise click.ClickException(e.message)
    cli_context.config = config
    
    logging_config = config.logging
    console_level = "DEBUG" if debug else "INFO" if verbose else logging_config.console_level
    setup_logging(
        enabled=logging_config.enabled,
        level="DEBUG" if debug else logging_config.level,
        console_level=console_level,
        log_file=config.get_log_file(),
        format_type=logging_config.format_type,
        enable_rich=logging_config.enable_rich,
        max_bytes=logging_config.max_bytes,
        backup_count=logging_config.backup_count,
        suppress_http=logging_config.suppress_http,
    )


def register_commands():
    """Register all command modules with the CLI."""
    for cmd in server_commands(cli_context):
        cli.add_command(cmd)
    
    for cmd in config_commands(cli_context):
        cli.add_command(cmd)
    
    for cmd in logs_commands(cli_context):
        cli.add_command(cmd)


register_commands()


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
