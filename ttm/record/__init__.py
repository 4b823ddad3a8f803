"""
Recording mode - capture a terminal session into a daily log.

Components:
- masking: Redact likely secrets before anything reaches disk
- codec: Session log format (encode entries, decode files)
- recorder: Interactive loop spawning one shell command at a time

Usage:
    ttm start
    ttm> make test
    ttm> exit
"""

from ttm.record.codec import CommandEntry, DecodedLog, decode, encode, encode_entry
from ttm.record.masking import mask
from ttm.record.recorder import SessionRecorder, StopResult, stop_session

__all__ = [
    "CommandEntry",
    "DecodedLog",
    "decode",
    "encode",
    "encode_entry",
    "mask",
    "SessionRecorder",
    "StopResult",
    "stop_session",
]
