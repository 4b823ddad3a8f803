"""
Replay of recorded sessions.

Prints decoded entries in order as they would have appeared in the
terminal, pausing between commands unless running in fast mode.
Replay never touches the log file.
"""

import random
import re
import time
from typing import Callable, Iterable, Optional

from rich.console import Console
from rich.markup import escape

from ttm.logging import TTM_THEME, get_logger
from ttm.record.codec import CommandEntry

logger = get_logger(__name__)

ERROR_LINE_RE = re.compile(r"error|failed", re.IGNORECASE)

DEFAULT_DELAY = 1.5


class ReplayEngine:
    """
    Sequential, forward-only replay of CommandEntry values.

    Example:
        engine = ReplayEngine(fast=True)
        engine.replay(decode(log_text))
    """

    def __init__(
        self,
        console: Optional[Console] = None,
        fast: bool = False,
        delay: float = DEFAULT_DELAY,
        jitter: float = 0.0,
        speed: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize replay engine.

        Args:
            console: Where to print (default: stdout with the TTM theme)
            fast: Skip all pauses
            delay: Base pause between entries in seconds
            jitter: Random +/- spread added to each pause
            speed: Playback multiplier; 2.0 halves every pause
            sleep: Pause function
        """
        if speed <= 0:
            raise ValueError(f"speed must be positive, got {speed}")

        self.console = console or Console(theme=TTM_THEME, emoji=False)
        self.fast = fast
        self.delay = delay
        self.jitter = jitter
        self.speed = speed
        self.sleep = sleep

    def pause_for(self) -> float:
        """Seconds to wait before the next entry."""
        if self.fast:
            return 0.0
        pause = self.delay
        if self.jitter:
            pause += random.uniform(-self.jitter, self.jitter)
        return max(pause, 0.0) / self.speed

    def replay(self, entries: Iterable[CommandEntry]) -> int:
        """
        Print every entry, pausing between consecutive entries.

        Args:
            entries: Decoded entries (any iterable, consumed once)

        Returns:
            Number of entries replayed
        """
        count = 0
        for entry in entries:
            if count and not self.fast:
                pause = self.pause_for()
                logger.debug("Pausing %.2fs before entry %d", pause, count + 1)
                self.sleep(pause)
            self.show_entry(entry)
            count += 1

        self.console.print("\nReplay finished.")
        return count

    def show_entry(self, entry: CommandEntry) -> None:
        """Print one entry header and its non-blank output lines."""
        self.console.print(
            f"\n[ttm.timestamp]\\[{escape(entry.timestamp)}][/ttm.timestamp] "
            f"$ [ttm.command]{escape(entry.command)}[/ttm.command]",
            highlight=False,
            emoji=False,
        )
        for line in entry.output_lines:
            if not line.strip():
                continue
            if ERROR_LINE_RE.search(line):
                self.console.print(f"[ttm.error_line]{escape(line)}[/ttm.error_line]", highlight=False, emoji=False)
            else:
                self.console.print(escape(line), highlight=False, emoji=False)
