"""
AI summaries of session logs.

Sends a day's log (masked again) to the OpenAI chat completions API and
saves the answer as summary-<date>.txt. The client reads OPENAI_API_KEY
from the environment.
"""

from typing import Any, Optional

import openai

from ttm.config import Settings
from ttm.logging import get_logger
from ttm.record.masking import mask

logger = get_logger(__name__)

SYSTEM_PROMPT = (
    "You are an assistant that summarizes terminal sessions clearly and "
    "concisely for a developer journal."
)
USER_PROMPT = "Summarize this terminal log in 5-6 sentences:\n\n{log}"


class SummaryError(Exception):
    """Raised when the summarization service fails."""

    pass


class Summarizer:
    """
    Summarize session logs with a chat model.

    Example:
        summarizer = Summarizer(model="gpt-4o-mini")
        text = summarizer.summarize(log_text)
    """

    def __init__(self, model: str, client: Any = None):
        """
        Args:
            model: Chat model name
            client: OpenAI client (default: created on first use)
        """
        self.model = model
        self._client = client

    def _get_client(self) -> Any:
        """Lazily initialize and return the OpenAI client."""
        if self._client is None:
            self._client = openai.OpenAI()
        return self._client

    def summarize(self, log_text: str) -> str:
        """
        Summarize raw log text.

        Raises:
            SummaryError: Client could not be created, the request
                failed, or the response had no text
        """
        try:
            response = self._get_client().chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": USER_PROMPT.format(log=mask(log_text))},
                ],
            )
        except openai.OpenAIError as e:
            raise SummaryError(str(e)) from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise SummaryError("Empty response from summarization service")
        return content.strip()


def summarize_session(
    settings: Settings,
    date: str,
    summarizer: Optional[Summarizer] = None,
) -> Optional[str]:
    """
    Summarize a day's log and save summary-<date>.txt.

    Args:
        settings: Resolved paths and model name
        date: YYYY-MM-DD
        summarizer: Summarizer to use (default: settings.summary_model)

    Returns:
        Summary text, or None if there is no log for that date

    Raises:
        SummaryError: Nothing is written in this case
    """
    source = settings.session_file_for_date(date)
    if not source.exists():
        return None

    summarizer = summarizer or Summarizer(settings.summary_model)
    summary = summarizer.summarize(source.read_text(encoding="utf-8", errors="replace"))

    target = settings.summary_file_for_date(date)
    target.write_text(summary + "\n", encoding="utf-8")
    logger.debug("Saved summary to %s", target)
    return summary
