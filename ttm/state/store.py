"""
Active session state.

Tracks the one recording session allowed at a time in a small JSON file:

    {
      "activeSession": {"pid": 4242, "logFile": "/home/me/.ttm/sessions/session-2026-10-18.log"}
    }

A missing or unreadable file means no session is active.
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ttm.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ActiveSession:
    """The currently recording process and the log it writes."""

    pid: int
    log_file: str

    def to_dict(self) -> dict:
        return {"pid": self.pid, "logFile": self.log_file}

    @classmethod
    def from_dict(cls, data: dict) -> "ActiveSession":
        pid = int(data["pid"])
        if pid <= 0:
            # 0 and negatives address process groups in os.kill
            raise ValueError(f"invalid pid {pid}")
        return cls(pid=pid, log_file=str(data["logFile"]))


class SessionConflict(Exception):
    """Raised when a session is started while another is active."""

    def __init__(self, active: ActiveSession):
        self.active = active
        super().__init__(
            f"A session is already active: pid {active.pid}, logging to {active.log_file}"
        )


class SessionStateStore:
    """
    File-backed store for the single ActiveSession record.

    Example:
        store = SessionStateStore(settings.state_file)
        store.acquire(ActiveSession(os.getpid(), str(log_file)))
        ...
        store.release(os.getpid())
    """

    def __init__(self, path: Path):
        """
        Initialize state store.

        Args:
            path: State file location (parent created on save)
        """
        self.path = Path(path)

    def load(self) -> Optional[ActiveSession]:
        """
        Read the active session.

        Returns:
            ActiveSession, or None if the file is missing or corrupt
        """
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning("Cannot read state file %s: %s", self.path, e)
            return None

        try:
            data = json.loads(raw)
            return ActiveSession.from_dict(data["activeSession"])
        except (ValueError, KeyError, TypeError) as e:
            logger.debug("Ignoring unparsable state file %s: %s", self.path, e)
            return None

    def save(self, session: ActiveSession) -> None:
        """Rewrite the state file with the given session."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps({"activeSession": session.to_dict()}, indent=2)
        self.path.write_text(payload + "\n", encoding="utf-8")

    def clear(self) -> None:
        """Remove the state file. Missing file is fine."""
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass

    def acquire(self, session: ActiveSession) -> None:
        """
        Record session as active, refusing if another one is.

        Args:
            session: Session about to start

        Raises:
            SessionConflict: A session is already recorded; the state
                file is left untouched.
        """
        existing = self.load()
        if existing is not None:
            raise SessionConflict(existing)
        self.save(session)
        logger.debug("Acquired session lease for pid %s", session.pid)

    def release(self, pid: Optional[int] = None) -> bool:
        """
        Clear the active session if it belongs to pid.

        Args:
            pid: Owner to check (default: this process). The record is
                left alone if someone else now owns it.

        Returns:
            True if the state file was cleared
        """
        if pid is None:
            pid = os.getpid()
        existing = self.load()
        if existing is not None and existing.pid != pid:
            logger.debug("State owned by pid %s, not releasing for %s", existing.pid, pid)
            return False
        self.clear()
        return True
