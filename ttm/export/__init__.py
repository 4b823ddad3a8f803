"""
Export collaborators - turn session logs into documents.

Components:
- markdown: Fenced Markdown copy of a day's log
- summarize: Natural-language summary via the OpenAI API
"""

from ttm.export.markdown import export_all, export_markdown, render_markdown
from ttm.export.summarize import Summarizer, SummaryError, summarize_session

__all__ = [
    "export_all",
    "export_markdown",
    "render_markdown",
    "Summarizer",
    "SummaryError",
    "summarize_session",
]
