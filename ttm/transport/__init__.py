"""
Transport layer for spawning recorded commands.

Provides abstraction for:
- Local shell execution
"""

from ttm.transport.base import ChildProcess, Transport
from ttm.transport.local import LocalProcess, LocalTransport

__all__ = ["ChildProcess", "Transport", "LocalProcess", "LocalTransport"]
