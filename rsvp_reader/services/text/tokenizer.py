"""
Display tokenizer for RSVP reading.

Turns pasted plain text into an ordered list of display tokens. Tokens never
contain whitespace and no character other than the separating spaces is
dropped: ``"".join(tokens) == normalized.replace(" ", "")``.

The scanner handles the edge cases that show up in scientific prose:

    >>> tokenize("p < 0.05")
    ['p', '<', '0.05']
    >>> tokenize("(n = 1,048)")
    ['(n', '=', '1,048)']
    >>> tokenize("methodology\\u2014while CO\\u2082-equivalent")
    ['methodology—', 'while', 'CO₂-equivalent']

Every pass of the outer loop consumes at least one character, so the scan
terminates on any finite input and ``len(tokens) <= len(normalized)``.
"""

from typing import List, Optional, Tuple

from .constants import (
    APOSTROPHE_LIKE,
    ATTACHABLE_PREFIXES,
    EM_DASH,
    HYPHEN_LIKE,
    NUMERIC_GLUE,
    OPENERS,
    SEPARATORS,
    TRAILING_ATTACHABLE,
)
from .normalizer import normalize_text
from .text_utils import is_number, is_word_char


class _Scanner:
    """Left-to-right scanner over normalized text."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.length = len(text)
        self.pos = 0

    def peek(self, offset: int = 0) -> str:
        index = self.pos + offset
        if 0 <= index < self.length:
            return self.text[index]
        return ""

    def at_end(self) -> bool:
        return self.pos >= self.length

    def skip_separators(self) -> None:
        while self.pos < self.length and self.text[self.pos] in SEPARATORS:
            self.pos += 1

    def take(self) -> str:
        ch = self.text[self.pos]
        self.pos += 1
        return ch

    def next_token(self) -> Optional[str]:
        """Scan one display token, or return None at the end of input."""
        self.skip_separators()
        if self.at_end():
            return None

        # Leading openers attach to the core that follows: “The, (n, [see
        token = ""
        while not self.at_end() and self.peek() in OPENERS:
            token += self.take()
        if self.at_end():
            return token

        core_start = self.pos

        # A sign stays with the core only if a letter or digit follows: ~12.7%, -5
        if self.peek() in ATTACHABLE_PREFIXES and is_word_char(self.peek(1)):
            token += self.take()

        # Em dash between separators is a token of its own
        if self.peek() == EM_DASH:
            return token + self.take()

        token = self._scan_core(token)

        if self.pos == core_start and not token:
            return self.take()

        if self.peek() == EM_DASH:
            token += self.take()

        while not self.at_end() and self.peek() in TRAILING_ATTACHABLE:
            token += self.take()

        return token

    def _scan_core(self, token: str) -> str:
        while not self.at_end():
            ch = self.peek()
            if ch in SEPARATORS or ch == EM_DASH:
                break

            if is_word_char(ch):
                token += self.take()
                continue

            prev = token[-1] if token else ""
            nxt = self.peek(1)

            # Internal joiners: don't, CO₂-equivalent, 2024–2025
            if ch in APOSTROPHE_LIKE or ch in HYPHEN_LIKE:
                if is_word_char(prev) and is_word_char(nxt):
                    token += self.take()
                    continue
                break

            # Numeric glue: 1,048 / 12.7 / 0.05
            if ch in NUMERIC_GLUE:
                if is_number(prev) and is_number(nxt):
                    token += self.take()
                    continue
                break

            # Comparators (p < 0.05) and any other symbol end the core
            break
        return token


def tokenize(text: Optional[str]) -> List[str]:
    """
    Split text into RSVP display tokens.

    The input is normalized first; normalizing already-normalized text is a
    no-op, so callers may pass either raw or normalized text.

    Args:
        text: Raw or normalized text.

    Returns:
        Ordered list of non-empty, whitespace-free display tokens.
    """
    return tokenize_with_normalized(text)[1]


def tokenize_with_normalized(text: Optional[str]) -> Tuple[str, List[str]]:
    """
    Normalize and tokenize text in one pass.

    Returns:
        Tuple of (normalized_text, tokens).
    """
    normalized = normalize_text(text)
    tokens: List[str] = []
    if not normalized:
        return normalized, tokens

    scanner = _Scanner(normalized)
    while True:
        token = scanner.next_token()
        if token is None:
            break
        if token:
            tokens.append(token)

    return normalized, tokens


def preview_tokens(text: Optional[str], limit: int = 12) -> Tuple[List[str], int]:
    """
    Tokenize ``text`` once for a paste preview.

    Returns:
        Tuple of (first ``limit`` tokens, total token count).
    """
    tokens = tokenize(text)
    return tokens[: max(0, limit)], len(tokens)
