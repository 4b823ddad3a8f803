"""
State persistence for TTM.

Tracks the single active recording session in a JSON side file.
"""

from ttm.state.store import ActiveSession, SessionConflict, SessionStateStore

__all__ = ["ActiveSession", "SessionConflict", "SessionStateStore"]
