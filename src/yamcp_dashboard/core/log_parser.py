"""
Parser for the plain-text log files written by the manager runtime.

Each non-blank line becomes one entry. Recognised headers:

* JSON objects carrying ``timestamp``/``time``, ``level`` and ``message``/``msg``
* ``[<timestamp>] [<LEVEL>] message``
* ``<timestamp> [<LEVEL>] message`` and ``<timestamp> <LEVEL>: message``
* ``<timestamp> | <LEVEL> | message``

Lines without a recognised header are ``info`` entries holding the whole
line. Indented lines directly after an entry (stack traces, wrapped output)
are appended to that entry's message.
"""

import json
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, NamedTuple, Optional

from yamcp_dashboard.core.models import LogEntry

KNOWN_LEVELS = {
    "trace", "debug", "info", "notice", "warn", "warning",
    "error", "fatal", "critical",
}

# Numeric levels used by pino-style JSON loggers.
NUMERIC_LEVELS = {10: "trace", 20: "debug", 30: "info", 40: "warn", 50: "error", 60: "fatal"}

_TIMESTAMP = r"\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}(?::\d{2}(?:[.,]\d+)?)?(?:Z|[+-]\d{2}:?\d{2})?"

_BRACKETED = re.compile(r"^\[(?P<ts>[^\]]+)\]\s*\[(?P<level>[A-Za-z]+)\]\s?(?P<msg>.*)$")
_TS_BRACKET_LEVEL = re.compile(rf"^(?P<ts>{_TIMESTAMP})\s+\[(?P<level>[A-Za-z]+)\]\s?(?P<msg>.*)$")
_TS_COLON_LEVEL = re.compile(rf"^(?P<ts>{_TIMESTAMP})\s+(?P<level>[A-Za-z]+):\s?(?P<msg>.*)$")
_TS_PIPE_LEVEL = re.compile(rf"^(?P<ts>{_TIMESTAMP})\s*\|\s*(?P<level>[A-Za-z]+)\s*\|\s?(?P<msg>.*)$")

_TEXT_PATTERNS = [_BRACKETED, _TS_BRACKET_LEVEL, _TS_COLON_LEVEL, _TS_PIPE_LEVEL]


class ParsedLine(NamedTuple):
    """Header fields extracted from one log line."""
    
    timestamp: Optional[str]
    level: str
    message: str


def _epoch_to_iso(value: float) -> str:
    # Millisecond epochs are the common case for JSON loggers.
    seconds = value / 1000.0 if value > 1e11 else value
    try:
        moment = datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        # Kept as written; unparseable timestamps sort as undated.
        return str(value)
    return moment.isoformat().replace("+00:00", "Z")


def _parse_json(line: str) -> Optional[ParsedLine]:
    try:
        obj = json.loads(line)
    except ValueError:
        return None
    if not isinstance(obj, dict):
        return None
    
    timestamp = obj.get("timestamp", obj.get("time"))
    if isinstance(timestamp, (int, float)) and not isinstance(timestamp, bool):
        timestamp = _epoch_to_iso(timestamp)
    elif timestamp is not None:
        timestamp = str(timestamp)
    
    level = obj.get("level") or "info"
    if isinstance(level, int):
        level = NUMERIC_LEVELS.get(level, str(level))
    
    message = obj.get("message", obj.get("msg", ""))
    if not isinstance(message, str):
        message = json.dumps(message, default=str)
    
    return ParsedLine(timestamp, str(level), message)


def parse_line(line: str) -> Optional[ParsedLine]:
    """
    Parse a single log line.
    
    Args:
        line: Raw line, with or without trailing newline
        
    Returns:
        Parsed fields, or None for blank lines
    """
    line = line.rstrip("\r\n")
    stripped = line.strip()
    if not stripped:
        return None
    
    if stripped.startswith("{"):
        parsed = _parse_json(stripped)
        if parsed:
            return parsed
    
    for pattern in _TEXT_PATTERNS:
        match = pattern.match(stripped)
        if match and match.group("level").lower() in KNOWN_LEVELS:
            return ParsedLine(match.group("ts").strip(), match.group("level"), match.group("msg"))
    
    return ParsedLine(None, "info", stripped)


def _is_continuation(line: str) -> bool:
    return line[:1] in (" ", "\t") and bool(line.strip())


def parse_file(path: Path, workspace: str, name: Optional[str] = None) -> Iterator[LogEntry]:
    """
    Parse every entry in a log file.
    
    Args:
        path: Log file path
        workspace: Workspace the file belongs to, stored as the entry's server
        name: File name relative to the logs directory, used in entry ids
        
    Yields:
        Log entries in file order
    """
    name = name or f"{workspace}/{path.name}"
    current: Optional[LogEntry] = None
    
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        for lineno, raw in enumerate(f, start=1):
            line = raw.rstrip("\r\n")
            
            if current is not None and _is_continuation(line):
                current.message = f"{current.message}\n{line}"
                continue
            
            parsed = parse_line(line)
            if parsed is None:
                continue
            
            if current is not None:
                yield current
            current = LogEntry(
                id=f"{name}:{lineno}",
                timestamp=parsed.timestamp,
                level=parsed.level,
                server=workspace,
                message=parsed.message,
                file=name,
                line=lineno,
            )
    
    if current is not None:
        yield current
