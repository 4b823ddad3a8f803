"""
Read-only queries over recorded session logs.

Safe to run while a recorder is appending: files are only read.
"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from ttm.config import Settings, date_of
from ttm.record.codec import CommandEntry, decode, is_boundary_line


@dataclass
class SessionFile:
    """A day's log file with a few facts for listing."""

    path: Path
    date: str
    modified: datetime
    sessions: int


def list_sessions(settings: Settings) -> List[SessionFile]:
    """
    Session files, newest date first.

    The session count is the number of session-started boundary lines.
    """
    result = []
    for path in settings.list_session_files():
        text = path.read_text(encoding="utf-8", errors="replace")
        started = sum(1 for line in text.split("\n") if is_boundary_line(line) == "started")
        result.append(SessionFile(
            path=path,
            date=date_of(path),
            modified=datetime.fromtimestamp(path.stat().st_mtime),
            sessions=started,
        ))
    return result


def read_log(settings: Settings, date: str) -> Optional[str]:
    """
    Raw text of a day's log.

    Returns:
        File contents, or None if there is no log for that date
    """
    path = settings.session_file_for_date(date)
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except FileNotFoundError:
        return None


def search_entries(entries: Iterable[CommandEntry], pattern: str) -> List[CommandEntry]:
    """Entries whose command contains pattern (case-sensitive substring)."""
    return [entry for entry in entries if pattern in entry.command]


def search_all(settings: Settings, pattern: str) -> List[Tuple[str, CommandEntry]]:
    """
    Search every session file.

    Returns:
        (date, entry) pairs, newest day first, entries in file order
    """
    matches = []
    for path in settings.list_session_files():
        text = path.read_text(encoding="utf-8", errors="replace")
        for entry in search_entries(decode(text), pattern):
            matches.append((date_of(path), entry))
    return matches
