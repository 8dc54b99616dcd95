"""
Log viewer over the manager's logs directory.

The manager writes one directory per workspace under its logs directory:
``<logs_dir>/<workspace>/<file>.log``. Entries are parsed on every read;
nothing is cached or stored by the dashboard.
"""

import fnmatch
from collections import Counter
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from yamcp_dashboard.core.exceptions import NotFoundError, ValidationError
from yamcp_dashboard.core.log_parser import parse_file
from yamcp_dashboard.core.models import LogEntry, LogFile, normalize_level
from yamcp_dashboard.utils.logging import get_logger

logger = get_logger(__name__)

ALL = "all"


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 style timestamp for ordering.
    
    Aware timestamps are converted to naive UTC so they compare with naive
    ones. Returns None when the value cannot be parsed.
    """
    if not value:
        return None
    text = value.strip().replace(",", ".")
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def filter_entries(
    entries: Iterable[LogEntry],
    workspace: Optional[str] = ALL,
    level: Optional[str] = ALL,
) -> List[LogEntry]:
    """
    Narrow entries to one workspace and one level.
    
    ``"all"``, an empty string or None disables the corresponding filter.
    Workspaces match exactly; levels match after normalization, so ``WARN``
    and ``warning`` select the same entries.
    """
    filtered = list(entries)
    
    if workspace and workspace != ALL:
        filtered = [e for e in filtered if e.server == workspace]
    
    wanted = normalize_level(level)
    if wanted and wanted != ALL:
        filtered = [e for e in filtered if e.normalized_level == wanted]
    
    return filtered


def group_by_workspace(entries: Iterable[LogEntry]) -> Dict[str, List[LogEntry]]:
    """
    Group entries by workspace.
    
    Groups appear in the order their first entry does, so newest-first input
    puts the most recently active workspace first. Entry order is preserved.
    """
    groups: Dict[str, List[LogEntry]] = {}
    for entry in entries:
        groups.setdefault(entry.server, []).append(entry)
    return groups


def unique_workspaces(entries: Iterable[LogEntry]) -> List[str]:
    """Sorted workspace names present in the entries."""
    return sorted({entry.server for entry in entries})


def count_by_level(entries: Iterable[LogEntry]) -> Dict[str, int]:
    """Count entries per normalized level."""
    return dict(Counter(entry.normalized_level for entry in entries))


class LogViewer:
    """Lists and parses the manager's log files."""
    
    def __init__(self, logs_dir: Path, pattern: str = "*.log", max_entries: int = 5000):
        self.logs_dir = Path(logs_dir)
        self.pattern = pattern
        self.max_entries = max_entries
    
    def _iter_files(self) -> List[Tuple[str, Path]]:
        """(workspace, path) pairs for every log file."""
        if not self.logs_dir.is_dir():
            return []
        
        files = []
        for workspace_dir in sorted(self.logs_dir.iterdir()):
            if not workspace_dir.is_dir():
                continue
            for path in sorted(workspace_dir.glob(self.pattern)):
                if path.is_file():
                    files.append((workspace_dir.name, path))
        return files
    
    def list_log_files(self) -> List[LogFile]:
        """List log files, most recently modified first."""
        log_files = []
        for workspace, path in self._iter_files():
            try:
                stat = path.stat()
            except OSError as e:
                logger.warning(f"Cannot stat log file {path}: {e}")
                continue
            log_files.append((stat.st_mtime, LogFile(
                name=f"{workspace}/{path.name}",
                size=stat.st_size,
                modified=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc).isoformat(),
                path=str(path.resolve()),
            )))
        
        log_files.sort(key=lambda item: item[0], reverse=True)
        return [log_file for _, log_file in log_files]
    
    def resolve_log_file(self, workspace: str, filename: str) -> Path:
        """
        Resolve a download request to a file inside the logs directory.
        
        Raises:
            ValidationError: If the names escape the logs directory or the
                file does not match the log file pattern
            NotFoundError: If the file does not exist
        """
        for part in (workspace, filename):
            if not part or part in (".", "..") or "/" in part or "\\" in part:
                raise ValidationError(
                    f"Invalid log file path: {workspace}/{filename}",
                    error_code="INVALID_PATH",
                )
        
        if not fnmatch.fnmatch(filename, self.pattern):
            raise ValidationError(
                f"Not a log file: {filename}",
                error_code="INVALID_PATH",
            )
        
        root = self.logs_dir.resolve()
        path = (root / workspace / filename).resolve()
        try:
            path.relative_to(root)
        except ValueError:
            raise ValidationError(
                f"Invalid log file path: {workspace}/{filename}",
                error_code="INVALID_PATH",
            )
        
        if not path.is_file():
            raise NotFoundError(
                f"Log file '{workspace}/{filename}' not found",
                error_code="LOG_FILE_NOT_FOUND",
            )
        return path
    
    def load_entries(self) -> List[LogEntry]:
        """
        Parse every log file.
        
        Returns:
            Entries newest first, capped at ``max_entries``. Entries whose
            timestamp cannot be parsed follow the dated ones in file order.
        """
        dated = []
        undated = []
        for workspace, path in self._iter_files():
            try:
                for entry in parse_file(path, workspace, f"{workspace}/{path.name}"):
                    moment = parse_timestamp(entry.timestamp)
                    if moment is None:
                        undated.append(entry)
                    else:
                        dated.append((moment, entry))
            except OSError as e:
                logger.warning(f"Cannot read log file {path}: {e}")
        
        dated.sort(key=lambda item: item[0], reverse=True)
        entries = [entry for _, entry in dated] + undated
        
        if len(entries) > self.max_entries:
            logger.debug("Log entries truncated", extra={
                "total": len(entries),
                "max_entries": self.max_entries
            })
        return entries[:self.max_entries]
