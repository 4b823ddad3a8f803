"""
Session log format.

A session log is plain text, one file per day, appended block by block:

    === TTM session started at 09:14:02 ===

    === [09:14:10] COMMAND: git status ===
    On branch main
    ERROR: fatal: not a git repository
    === END ===

    === TTM session ended at 09:30:55 ===

Every write is a complete line, so a reader scanning from the top never
needs locking. A crash mid-command leaves an entry without its END
marker; decode() drops it and keeps everything before it.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Tuple

ENTRY_OPEN = "=== ["
COMMAND_MARKER = "COMMAND:"
HEADER_CLOSE = " ==="
END_MARKER = "=== END ==="
ERROR_PREFIX = "ERROR: "


@dataclass(frozen=True)
class CommandEntry:
    """
    One recorded command and its output.

    Output lines are stored as persisted: masked, and stderr lines
    carrying the ERROR_PREFIX.
    """

    timestamp: str
    command: str
    output_lines: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def had_error(self) -> bool:
        """True if any line came from the error stream."""
        return any(line.startswith(ERROR_PREFIX) for line in self.output_lines)


def format_header(timestamp: str, command: str) -> str:
    """Entry-open line for a command (command must already be masked)."""
    return f"{ENTRY_OPEN}{timestamp}] {COMMAND_MARKER} {command}{HEADER_CLOSE}\n"


def format_output_line(line: str, is_error: bool = False) -> str:
    """
    Normalize one output chunk for the log.

    Strips the trailing line break, adds the error prefix for stderr
    and terminates with exactly one newline.
    """
    line = line.rstrip("\r\n")
    if is_error:
        line = ERROR_PREFIX + line
    return line + "\n"


def format_end() -> str:
    """End marker plus the blank separator line."""
    return f"{END_MARKER}\n\n"


def session_started_line(tool: str, time: str) -> str:
    return f"=== {tool} session started at {time} ===\n\n"


def session_ended_line(tool: str, time: str) -> str:
    return f"=== {tool} session ended at {time} ===\n"


def encode_entry(entry: CommandEntry) -> str:
    """Serialize a sealed entry to its full log block."""
    parts = [format_header(entry.timestamp, entry.command)]
    parts.extend(line + "\n" for line in entry.output_lines)
    parts.append(format_end())
    return "".join(parts)


def encode(entries: List[CommandEntry]) -> str:
    """Serialize a sequence of entries (no session boundary lines)."""
    return "".join(encode_entry(entry) for entry in entries)


def is_entry_header(line: str) -> bool:
    return line.startswith(ENTRY_OPEN) and COMMAND_MARKER in line


def parse_header(line: str) -> Tuple[str, str]:
    """
    Split an entry-open line into (timestamp, command).

    Exactly one trailing " ===" is removed, so commands that themselves
    end in "===" survive.
    """
    timestamp = ""
    close = line.find("]", len(ENTRY_OPEN))
    if close != -1:
        timestamp = line[len(ENTRY_OPEN):close]

    command = line.split(COMMAND_MARKER, 1)[1].rstrip()
    if command.endswith(HEADER_CLOSE):
        command = command[: -len(HEADER_CLOSE)]
    elif command.strip() == HEADER_CLOSE.strip():
        command = ""
    return timestamp, command.strip()


class _State(Enum):
    OUTSIDE = "outside"
    COLLECTING = "collecting"


class DecodedLog:
    """
    Entries decoded from raw log text.

    Iterating scans the text from the start each time, so the same
    DecodedLog can be iterated any number of times. Incomplete entries
    (no END marker, or cut short by the next header) are skipped.
    """

    def __init__(self, text: str):
        self.text = text

    def __iter__(self) -> Iterator[CommandEntry]:
        state = _State.OUTSIDE
        timestamp = command = ""
        lines: List[str] = []

        for line in self.text.split("\n"):
            if is_entry_header(line):
                # A header while collecting abandons the open entry.
                timestamp, command = parse_header(line)
                lines = []
                state = _State.COLLECTING
            elif line.rstrip("\r") == END_MARKER:
                if state is _State.COLLECTING:
                    yield CommandEntry(timestamp, command, tuple(lines))
                state = _State.OUTSIDE
            elif state is _State.COLLECTING:
                lines.append(line)

    def __repr__(self) -> str:
        return f"DecodedLog({len(self.text)} chars)"


def decode(text: str) -> DecodedLog:
    """
    Decode raw log text into entries.

    Never raises on malformed input.
    """
    return DecodedLog(text)


def scan_commands(text: str) -> List[str]:
    """
    Every command header in file order, terminated or not.

    Raw-scan fallback for listing what was typed, including the command
    that was running when a recorder crashed.
    """
    return [parse_header(line)[1] for line in text.split("\n") if is_entry_header(line)]


def is_boundary_line(line: str) -> Optional[str]:
    """Return "started" or "ended" for a session boundary line, else None."""
    if not line.startswith("=== ") or not line.endswith(" ==="):
        return None
    if " session started at " in line:
        return "started"
    if " session ended at " in line:
        return "ended"
    return None
