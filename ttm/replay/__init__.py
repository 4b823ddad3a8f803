"""
Replay of recorded sessions.
"""

from ttm.replay.engine import ReplayEngine

__all__ = ["ReplayEngine"]
