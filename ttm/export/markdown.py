"""
Markdown export of session logs.

The whole log is masked again before export, catching secrets that were
split across output chunks at record time.
"""

from pathlib import Path
from typing import List, Optional

from ttm.config import Settings, date_of
from ttm.logging import get_logger
from ttm.record.masking import mask

logger = get_logger(__name__)


def render_markdown(date: str, raw: str) -> str:
    """Markdown document for one day's log."""
    return f"# Session Log - {date}\n\n```\n{mask(raw).strip()}\n```\n"


def export_markdown(settings: Settings, date: str) -> Optional[Path]:
    """
    Write session-<date>.md next to the log.

    Returns:
        Path written, or None if there is no log for that date
    """
    source = settings.session_file_for_date(date)
    if not source.exists():
        return None

    raw = source.read_text(encoding="utf-8", errors="replace")
    target = settings.export_file_for_date(date)
    target.write_text(render_markdown(date, raw), encoding="utf-8")
    logger.debug("Exported %s -> %s", source, target)
    return target


def export_all(settings: Settings) -> List[Path]:
    """Export every session log. Returns paths written, newest first."""
    written = []
    for path in settings.list_session_files():
        exported = export_markdown(settings, date_of(path))
        if exported:
            written.append(exported)
    return written
