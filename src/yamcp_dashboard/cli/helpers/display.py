"""
Display helpers shared by CLI commands.
"""

from typing import Iterable, Optional

from rich.markup import escape
from rich.table import Table
from rich.text import Text

from yamcp_dashboard.core.models import LogEntry, normalize_level

LEVEL_STYLES = {
    "error": ("Error", "bold red"),
    "warning": ("Warning", "yellow"),
    "info": ("Info", "blue"),
    "debug": ("Debug", "dim"),
}


def level_badge(level: str) -> str:
    """Rich markup for a log level; unknown levels are shown as written."""
    label, style = LEVEL_STYLES.get(normalize_level(level), (level, "white"))
    return f"[{style}]{escape(label)}[/{style}]"


def format_file_size(size: int) -> str:
    """Human readable file size in binary units, e.g. ``1.5 KB``."""
    if size <= 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    value = float(size)
    index = 0
    while value >= 1024 and index < len(units) - 1:
        value /= 1024
        index += 1
    return f"{round(value, 2):g} {units[index]}"


def log_table(entries: Iterable[LogEntry], title: Optional[str] = None) -> Table:
    """Build a table of log entries."""
    table = Table(
        title=title,
        show_header=True,
        header_style="bold cyan",
        title_style="bold cyan"
    )
    table.add_column("Time", style="dim", no_wrap=True)
    table.add_column("Level", width=9)
    table.add_column("Workspace", style="green")
    table.add_column("Message", overflow="fold")
    
    for entry in entries:
        table.add_row(
            Text(entry.timestamp or "-"),
            level_badge(entry.level),
            Text(entry.server),
            Text(entry.message),
        )
    return table
