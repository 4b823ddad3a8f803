"""
Masking pipeline for recorded sessions.

Redacts likely secrets from command text and output before they reach
the log file. Rules are applied in MASK_RULES order, one pass each:

    1. key/value credentials   token=..., password: ..., api_key=...
    2. email addresses
    3. hex strings of 32+ characters (hashes, API keys)
    4. base64-like tokens of 20+ characters

Earlier rules replace with text the later rules never match, so a
redacted span is never re-exposed.

Redaction is heuristic. It is not a guarantee that nothing sensitive
reaches disk.
"""

import re
from typing import List, Tuple

REDACTED = "***"

# (pattern, replacement) in application order
MASK_RULES: List[Tuple[str, str]] = [
    (r"(?i)(api[_-]?key|token|key|password|passwd|pwd|secret)([ \t]*[:=][ \t]*)[^\s]+",
     r"\1\2" + REDACTED),
    (r"(?<![a-zA-Z0-9._%+-])[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}", "*****@*****"),
    (r"(?i)\b[a-f0-9]{32,}\b", REDACTED),
    (r"\b[A-Za-z0-9+/=]{20,}\b", REDACTED),
]

# Compiled once at import; mask() runs once per output line.
# The email rule only starts at the beginning of a local-part run, so a
# long run with no "@" is scanned once instead of once per position.
_COMPILED_RULES = [(re.compile(p), r) for p, r in MASK_RULES]


def mask(text: str) -> str:
    """
    Replace likely secrets in text with a redaction marker.

    Args:
        text: Any string (command, output line, whole log file)

    Returns:
        Masked text. Empty input is returned unchanged.
    """
    if not text:
        return text
    for pattern, replacement in _COMPILED_RULES:
        text = pattern.sub(replacement, text)
    return text
