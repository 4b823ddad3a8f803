"""
Directory and file resolution for TTM.

Session logs live in one directory, one file per day:

    <sessions_dir>/session-2026-10-18.log
    <sessions_dir>/session-2026-10-18.md      (export)
    <sessions_dir>/summary-2026-10-18.txt     (summarize)

The state file sits next to the sessions directory by default.
"""

import os
import re
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional

SESSION_FILE_RE = re.compile(r"^session-(\d{4}-\d{2}-\d{2})\.log$")

DEFAULT_TOOL_NAME = "TTM"
DEFAULT_SUMMARY_MODEL = "gpt-4o-mini"


def today() -> str:
    """Current local date as YYYY-MM-DD."""
    return datetime.now().strftime("%Y-%m-%d")


def now_time() -> str:
    """Current local time of day as HH:MM:SS."""
    return datetime.now().strftime("%H:%M:%S")


@dataclass
class Settings:
    """
    Resolved paths and names used by every command.

    Example:
        settings = Settings.resolve()
        log_file = settings.session_file_for_date(today())
    """

    sessions_dir: Path
    state_file: Path
    tool_name: str = DEFAULT_TOOL_NAME
    summary_model: str = DEFAULT_SUMMARY_MODEL

    @classmethod
    def resolve(
        cls,
        sessions_dir: Optional[str] = None,
        state_file: Optional[str] = None,
        summary_model: Optional[str] = None,
    ) -> "Settings":
        """
        Resolve settings from arguments, falling back to defaults.

        Args:
            sessions_dir: Explicit sessions directory (CLI option or
                TTM_SESSIONS_DIR). Otherwise ./sessions if it exists,
                else ~/.ttm/sessions.
            state_file: Explicit state file path (TTM_STATE_FILE).
                Otherwise ttm-state.json beside the sessions directory.
            summary_model: Model name for summaries (TTM_SUMMARY_MODEL).

        Returns:
            Settings with the sessions directory created.
        """
        if sessions_dir:
            directory = Path(sessions_dir).expanduser()
        else:
            directory = cls._default_sessions_dir()

        directory = directory.resolve()
        directory.mkdir(parents=True, exist_ok=True)

        if state_file:
            state_path = Path(state_file).expanduser().resolve()
        else:
            state_path = directory.parent / "ttm-state.json"

        return cls(
            sessions_dir=directory,
            state_file=state_path,
            summary_model=summary_model or DEFAULT_SUMMARY_MODEL,
        )

    @staticmethod
    def _default_sessions_dir() -> Path:
        local = Path(os.getcwd()) / "sessions"
        if local.is_dir():
            return local
        return Path.home() / ".ttm" / "sessions"

    def session_file_for_date(self, date: str) -> Path:
        return self.sessions_dir / f"session-{date}.log"

    def export_file_for_date(self, date: str) -> Path:
        return self.sessions_dir / f"session-{date}.md"

    def summary_file_for_date(self, date: str) -> Path:
        return self.sessions_dir / f"summary-{date}.txt"

    def list_session_files(self) -> List[Path]:
        """All session-<date>.log files, newest date first."""
        files = [
            path for path in self.sessions_dir.iterdir()
            if path.is_file() and SESSION_FILE_RE.match(path.name)
        ]
        return sorted(files, key=lambda p: p.name, reverse=True)


def date_of(path: Path) -> Optional[str]:
    """Date encoded in a session file name, or None."""
    match = SESSION_FILE_RE.match(path.name)
    return match.group(1) if match else None
