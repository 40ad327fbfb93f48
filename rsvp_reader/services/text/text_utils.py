"""
Shared character-class helpers for the text package.

These functions are used by the tokenizer, the ORP calculator and the
pacing policy so that all three agree on what a letter or digit is.
Classification follows Unicode general categories, so subscripts such as
"₂" and superscripts such as "²" count as digits.
"""

import unicodedata
from typing import Iterable

from .constants import ELLIPSIS_STRINGS, PACING_TRAILING_CLOSERS


def is_letter(ch: str) -> bool:
    """Return True for any Unicode letter (category L*)."""
    return bool(ch) and unicodedata.category(ch).startswith("L")


def is_number(ch: str) -> bool:
    """Return True for any Unicode number (category N*)."""
    return bool(ch) and unicodedata.category(ch).startswith("N")


def is_mark(ch: str) -> bool:
    """Return True for a combining mark (category M*)."""
    return bool(ch) and unicodedata.category(ch).startswith("M")


def is_word_char(ch: str) -> bool:
    """
    Return True for characters that always belong to a token core.

    Examples:
        >>> is_word_char("a"), is_word_char("₂"), is_word_char("\\u0301")
        (True, True, True)
        >>> is_word_char("-")
        False
    """
    return is_letter(ch) or is_number(ch) or is_mark(ch)


def strip_non_alphanumeric(word: str) -> str:
    """
    Strip leading and trailing characters that are neither letters nor numbers.

    Examples:
        >>> strip_non_alphanumeric('“Hello,”')
        'Hello'
        >>> strip_non_alphanumeric("(n,048)")
        'n,048'
        >>> strip_non_alphanumeric("—")
        ''
    """
    start = 0
    end = len(word)
    while start < end and not (is_letter(word[start]) or is_number(word[start])):
        start += 1
    while end > start and not (is_letter(word[end - 1]) or is_number(word[end - 1])):
        end -= 1
    return word[start:end]


def strip_trailing_closers(word: str, closers: Iterable[str] = PACING_TRAILING_CLOSERS) -> str:
    """
    Remove trailing quotes, brackets and footnote markers.

    Examples:
        >>> strip_trailing_closers('said."')
        'said.'
        >>> strip_trailing_closers("result.²")
        'result.'
    """
    return word.rstrip("".join(closers))


def ends_with_ellipsis(word: str) -> bool:
    """Return True if the word is or ends with an ellipsis ("…" or "...")."""
    return any(word.endswith(ellipsis) for ellipsis in ELLIPSIS_STRINGS)


def contains_letter(word: str) -> bool:
    return any(is_letter(ch) for ch in word)


def contains_digit(word: str) -> bool:
    return any(is_number(ch) for ch in word)
