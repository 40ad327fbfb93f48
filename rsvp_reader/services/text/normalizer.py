"""
Text normalization for consistent tokenization.

Key behavior:
- Canonical Unicode composition (NFC, never NFKC, so scientific and
  mathematical glyphs such as "₂" or "µ" keep their meaning)
- Whitespace variants folded into plain spaces
- Runs of whitespace collapsed, leading/trailing whitespace trimmed

The function is total and idempotent:
``normalize_text(normalize_text(x)) == normalize_text(x)``.
"""
import re
import unicodedata
from typing import Optional

from .constants import WHITESPACE_VARIANTS

_VARIANT_PATTERN = re.compile("[" + "".join(sorted(WHITESPACE_VARIANTS)) + "]")
_WHITESPACE_RUN = re.compile(r"\s+")


def normalize_text(raw_text: Optional[str]) -> str:
    """
    Normalize pasted text for tokenization.

    Args:
        raw_text: The input text. ``None`` is treated as empty.

    Returns:
        NFC-composed text with single spaces between words and no
        leading or trailing whitespace.

    Examples:
        >>> normalize_text("  Hello\\u00a0\\u00a0world \\n")
        'Hello world'
        >>> normalize_text("")
        ''
    """
    if not raw_text:
        return ""

    text = unicodedata.normalize("NFC", raw_text)
    text = _VARIANT_PATTERN.sub(" ", text)
    text = _WHITESPACE_RUN.sub(" ", text)
    return text.strip()
