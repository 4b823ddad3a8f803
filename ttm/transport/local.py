"""
Local transport - run commands on local machine.
"""

import io
import locale
import subprocess
from typing import Iterable, Optional

from ttm.transport.base import ChildProcess, Transport


def _text_lines(pipe) -> io.TextIOWrapper:
    # newline="" splits on \r as well but keeps endings untranslated,
    # so progress redraws reach the terminal as written
    return io.TextIOWrapper(
        pipe,
        encoding=locale.getpreferredencoding(False),
        errors="replace",
        newline="",
    )


class LocalProcess(ChildProcess):
    """ChildProcess backed by subprocess.Popen."""

    def __init__(self, popen: subprocess.Popen):
        self._popen = popen
        self.pid = popen.pid
        self._stdout = _text_lines(popen.stdout)
        self._stderr = _text_lines(popen.stderr)

    @property
    def stdout(self) -> Iterable[str]:
        return self._stdout

    @property
    def stderr(self) -> Iterable[str]:
        return self._stderr

    def wait(self) -> int:
        return self._popen.wait()


class LocalTransport(Transport):
    """
    Local transport for running commands on the local machine.

    Uses subprocess with shell=True so pipes, globs and redirects behave
    as the user expects. stdin is closed: recorded commands are not
    interactive.
    """

    def __init__(self, cwd: Optional[str] = None):
        """
        Args:
            cwd: Working directory for spawned commands (default: current)
        """
        self.cwd = cwd

    def spawn(self, command: str) -> LocalProcess:
        """
        Run command via shell.

        Args:
            command: Shell command string

        Returns:
            LocalProcess whose pipes yield lines with their original endings
        """
        popen = subprocess.Popen(
            command,
            shell=True,
            cwd=self.cwd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
        return LocalProcess(popen)
