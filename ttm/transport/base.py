"""
Base transport interface.

A transport turns a command line into a running child process. The
recorder never interprets shell syntax itself.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Optional


class ChildProcess(ABC):
    """
    A spawned command.

    Exposes the two output channels as text line iterables and an exit
    notification via wait().
    """

    pid: Optional[int] = None

    @property
    @abstractmethod
    def stdout(self) -> Iterable[str]:
        """Success stream, one line per item (newline kept)."""
        pass

    @property
    @abstractmethod
    def stderr(self) -> Iterable[str]:
        """Error stream, one line per item (newline kept)."""
        pass

    @abstractmethod
    def wait(self) -> int:
        """
        Block until the child exits.

        Returns:
            Exit code
        """
        pass


class Transport(ABC):
    """
    Abstract base class for spawning recorded commands.

    Implementations:
    - LocalTransport: Run commands through the local shell
    """

    @abstractmethod
    def spawn(self, command: str) -> ChildProcess:
        """
        Start a command via shell.

        Args:
            command: Command line exactly as typed

        Returns:
            Running ChildProcess

        Example:
            child = transport.spawn("ls -la /tmp")
            for line in child.stdout:
                ...
        """
        pass

    def close(self) -> None:
        """Release transport resources. No-op by default."""
        pass

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - closes transport."""
        self.close()
