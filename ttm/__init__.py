__version__ = "0.1.0"

from ttm.config import Settings
from ttm.record import CommandEntry, SessionRecorder, decode, encode, mask, stop_session
from ttm.replay import ReplayEngine
from ttm.state import ActiveSession, SessionConflict, SessionStateStore
from ttm.logging import get_logger, get_ttm_logger, setup_logging

"""
Foundations of TTM:
    Settings resolves where session logs and the state file live.
    SessionRecorder runs an interactive prompt and logs each command with its output.
    CommandEntry is one recorded command; encode/decode convert entries to and from log text.
    mask redacts likely secrets before anything is written.
    SessionStateStore guarantees at most one recording session at a time.
    ReplayEngine plays a recorded log back with simulated pacing.
"""

__all__ = [
    "Settings",
    "CommandEntry",
    "SessionRecorder",
    "decode",
    "encode",
    "mask",
    "stop_session",
    "ReplayEngine",
    "ActiveSession",
    "SessionConflict",
    "SessionStateStore",
    "get_logger",
    "get_ttm_logger",
    "setup_logging",
]
