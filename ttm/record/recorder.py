"""
Interactive session recorder.

Reads command lines from the operator, runs each one through a shell and
streams its output to the terminal (raw) and to the day's log (masked).

States:
    IDLE -> PROMPTING           session lease acquired, boundary written
    PROMPTING -> PROMPTING      empty line
    PROMPTING -> RUNNING        any other line except "exit"
    RUNNING -> PROMPTING        child exited, entry sealed
    * -> CLOSING -> CLOSED      "exit", EOF, SIGINT/SIGTERM

Every path out of a session goes through _finalize(): seal the open
entry, append the session-ended line, release the state lease.
"""

import os
import queue
import signal
import sys
import threading
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, Optional, TextIO

from ttm.config import Settings, now_time, today
from ttm.logging import get_ttm_logger
from ttm.record.codec import (
    format_end,
    format_header,
    format_output_line,
    session_ended_line,
    session_started_line,
)
from ttm.record.masking import mask
from ttm.state.store import ActiveSession, SessionStateStore
from ttm.transport import LocalTransport, Transport

logger = get_ttm_logger(__name__)

EXIT_KEYWORD = "exit"
DEFAULT_PROMPT = "ttm> "

STDOUT = "stdout"
STDERR = "stderr"


class RecorderState(Enum):
    IDLE = "idle"
    PROMPTING = "prompting"
    RUNNING = "running"
    CLOSING = "closing"
    CLOSED = "closed"


class SessionRecorder:
    """
    Records one interactive session into the day's log file.

    Example:
        settings = Settings.resolve()
        store = SessionStateStore(settings.state_file)
        recorder = SessionRecorder(settings, store)
        recorder.record()
    """

    def __init__(
        self,
        settings: Settings,
        store: SessionStateStore,
        transport: Optional[Transport] = None,
        input_fn: Optional[Callable[[str], str]] = None,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
        prompt: str = DEFAULT_PROMPT,
        poll_interval: float = 0.1,
    ):
        """
        Initialize recorder.

        Args:
            settings: Resolved paths; the log file is today's session file
            store: State store holding the single-session lease
            transport: Spawns commands (default: LocalTransport)
            input_fn: Reads one line given a prompt (default: input)
            stdout: Terminal sink for the success stream
            stderr: Terminal sink for the error stream
            prompt: Interactive prompt text
            poll_interval: Seconds between cancellation checks while a
                command runs
        """
        self.settings = settings
        self.store = store
        self.transport = transport or LocalTransport()
        self.input_fn = input_fn or input
        self.stdout = stdout or sys.stdout
        self.stderr = stderr or sys.stderr
        self.prompt = prompt
        self.poll_interval = poll_interval

        self.pid = os.getpid()
        self.log_file: Path = settings.session_file_for_date(today())
        self.cancelled = threading.Event()
        self.commands_recorded = 0

        self._state = RecorderState.IDLE
        self._entry_open = False

    @property
    def state(self) -> RecorderState:
        return self._state

    def record(self, install_signals: bool = True) -> Path:
        """
        Run a full session: start, prompt loop, finalize.

        Args:
            install_signals: Route SIGINT/SIGTERM to cancel() for the
                duration of the session (main thread only)

        Returns:
            Path of the log file written

        Raises:
            SessionConflict: Another session is active (nothing written)
            OSError: The log file could not be created or appended to
        """
        self.start()

        previous = self._install_signal_handlers() if install_signals else {}
        try:
            self._loop()
        except KeyboardInterrupt:
            logger.debug("Interrupted while waiting for input")
        finally:
            try:
                self._finalize()
            finally:
                self._restore_signal_handlers(previous)

        logger.success(f"Session ended. {self.commands_recorded} command(s) recorded in {self.log_file}")
        return self.log_file

    def start(self) -> None:
        """
        Acquire the session lease and write the session-started line.

        Raises:
            SessionConflict: Another session is active
            OSError: The log file could not be written; lease released
        """
        self.store.acquire(ActiveSession(pid=self.pid, log_file=str(self.log_file)))
        try:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
            self._append(session_started_line(self.settings.tool_name, now_time()))
        except OSError:
            self.store.release(self.pid)
            raise

        self._state = RecorderState.PROMPTING
        logger.info("Session started by pid %s", self.pid)
        logger.success(f"{self.settings.tool_name} started, logging to {self.log_file}")

    def cancel(self) -> None:
        """Ask the recorder to close at the next opportunity."""
        self.cancelled.set()

    def _loop(self) -> None:
        while not self.cancelled.is_set():
            self._state = RecorderState.PROMPTING
            try:
                line = self.input_fn(self.prompt)
            except EOFError:
                logger.debug("End of input")
                break

            command = line.strip()
            if not command:
                continue
            if command.lower() == EXIT_KEYWORD:
                break

            self._run_command(command)

    def _run_command(self, command: str) -> None:
        """Open an entry, stream the child's output into it, seal it."""
        self._state = RecorderState.RUNNING
        self._append(format_header(now_time(), mask(command)))
        self._entry_open = True
        self.commands_recorded += 1

        try:
            child = self.transport.spawn(command)
        except OSError as e:
            logger.warning("Could not start %r: %s", command, e)
            self._write_output(f"{e}\n", is_error=True)
            self._seal()
            return

        logger.debug("Spawned pid %s for %r", child.pid, command)

        events: "queue.Queue" = queue.Queue()
        self._start_reader(child.stdout, STDOUT, events)
        self._start_reader(child.stderr, STDERR, events)

        open_streams = 2
        while open_streams:
            if self.cancelled.is_set():
                logger.debug("Cancelled while pid %s still running", child.pid)
                break
            try:
                stream, chunk = events.get(timeout=self.poll_interval)
            except queue.Empty:
                continue
            if chunk is None:
                open_streams -= 1
                continue
            self._write_output(chunk, is_error=(stream == STDERR))
        else:
            code = child.wait()
            logger.debug("pid %s exited with %s", child.pid, code)

        self._seal()

    def _start_reader(self, lines: Iterable[str], stream: str, events: "queue.Queue") -> None:
        """Pump one output channel into the event queue from a daemon thread."""

        def pump():
            try:
                for line in lines:
                    events.put((stream, line))
            finally:
                events.put((stream, None))

        thread = threading.Thread(target=pump, name=f"ttm-{stream}", daemon=True)
        thread.start()

    def _write_output(self, chunk: str, is_error: bool = False) -> None:
        """Raw copy to the terminal, masked copy to the log."""
        sink = self.stderr if is_error else self.stdout
        sink.write(chunk)
        sink.flush()
        self._append(format_output_line(mask(chunk), is_error=is_error))

    def _seal(self) -> None:
        if self._entry_open:
            self._append(format_end())
            self._entry_open = False

    def _finalize(self) -> None:
        self._state = RecorderState.CLOSING
        try:
            self._seal()
            self._append(session_ended_line(self.settings.tool_name, now_time()))
        finally:
            self.store.release(self.pid)
            self._state = RecorderState.CLOSED
            logger.info("Session closed for pid %s", self.pid)

    def _append(self, text: str) -> None:
        with open(self.log_file, "a", encoding="utf-8") as f:
            f.write(text)

    def _handle_signal(self, signum, frame) -> None:
        logger.debug("Received signal %s in state %s", signum, self._state.value)
        self.cancel()
        if self._state is RecorderState.PROMPTING:
            # Unblock the pending line read
            raise KeyboardInterrupt

    def _install_signal_handlers(self) -> dict:
        previous = {}
        for signum in (signal.SIGINT, signal.SIGTERM):
            previous[signum] = signal.signal(signum, self._handle_signal)
        return previous

    def _restore_signal_handlers(self, previous: dict) -> None:
        for signum, handler in previous.items():
            signal.signal(signum, handler)


@dataclass
class StopResult:
    """Outcome of a stop request."""

    session: Optional[ActiveSession]
    signalled: bool = False
    error: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.session is not None


def stop_session(
    store: SessionStateStore,
    send_signal: Callable[[int, int], None] = os.kill,
    signum: int = signal.SIGTERM,
) -> StopResult:
    """
    Signal the recording process and clear the active session.

    State is cleared even when the signal cannot be delivered, so a
    record naming a dead process never blocks the next start.

    Args:
        store: State store to read and clear
        send_signal: Signal delivery function (default: os.kill)
        signum: Signal to send

    Returns:
        StopResult; session is None if nothing was active
    """
    active = store.load()
    if active is None:
        return StopResult(session=None)

    try:
        send_signal(active.pid, signum)
        result = StopResult(session=active, signalled=True)
    except OSError as e:
        logger.debug("Signal to pid %s failed: %s", active.pid, e)
        result = StopResult(session=active, signalled=False, error=str(e))

    store.clear()
    return result
