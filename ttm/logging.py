"""
Logging for TTM.

Example:
    from ttm.logging import get_logger

    logger = get_logger(__name__)
    logger.info("Session started")
    logger.warning("State file unreadable, ignoring")
    logger.error("Failed to append to log", exc_info=True)
"""

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.theme import Theme

# Custom theme for TTM
TTM_THEME = Theme({
    "log.time": "dim cyan",
    "log.level.debug": "dim blue",
    "log.level.info": "green",
    "log.level.warning": "yellow",
    "log.level.error": "bold red",
    "log.level.critical": "bold white on red",
    "ttm.success": "bold green",
    "ttm.timestamp": "cyan",
    "ttm.command": "bold",
    "ttm.error_line": "red",
})

# Global console instance
console = Console(theme=TTM_THEME, stderr=True)

# Flag to track if logging has been initialized
_initialized = False


def setup_logging(
    level: str = "WARNING",
    show_time: bool = True,
    show_path: bool = False,
    rich_tracebacks: bool = True,
    force: bool = False,
) -> None:
    """
    init TTM's logging

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        show_time: Show timestamps in log output
        show_path: Show file path in log output
        rich_tracebacks: Use rich formatting for tracebacks
        force: Reconfigure even if logging was already set up

    Note:
        Modules call get_logger() at import, which sets up defaults.
        Later calls are ignored unless force=True, so handlers are
        never duplicated.
    """
    global _initialized

    if _initialized and not force:
        return

    numeric_level = getattr(logging, level.upper(), logging.WARNING)

    handler = RichHandler(
        console=console,
        show_time=show_time,
        show_path=show_path,
        rich_tracebacks=rich_tracebacks,
        markup=True,
    )

    handler.setFormatter(
        logging.Formatter(
            "%(message)s",
            datefmt="[%X]",
        )
    )

    logging.basicConfig(
        level=numeric_level,
        handlers=[handler],
        force=True,  # Override any existing configuration
    )

    _initialized = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a given module.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    if not _initialized:
        setup_logging()

    return logging.getLogger(name)


class TTMLogger:
    """
    TTM-specific logger

    Wraps standard logger with a console helper for the start and end
    notices of a session. Log records go through the handler; notices go
    straight to the console.
    """

    def __init__(self, name: str):
        self.logger = get_logger(name)
        self.console = console

    def debug(self, message: str, *args, **kwargs) -> None:
        self.logger.debug(message, *args, **kwargs)

    def info(self, message: str, *args, **kwargs) -> None:
        self.logger.info(message, *args, **kwargs)

    def warning(self, message: str, *args, **kwargs) -> None:
        self.logger.warning(message, *args, **kwargs)

    def error(self, message: str, *args, **kwargs) -> None:
        self.logger.error(message, *args, **kwargs)

    def success(self, message: str) -> None:
        """
        Print success notice.

        Args:
            message: Plain text; markup characters are escaped
        """
        self.console.print(f"[ttm.success]✓[/ttm.success] {escape(message)}")


def get_ttm_logger(name: str) -> TTMLogger:
    """
    Get a TTMLogger instance for the given module.

    Example:
        logger = get_ttm_logger(__name__)
        logger.success("Session started")
    """
    return TTMLogger(name)
