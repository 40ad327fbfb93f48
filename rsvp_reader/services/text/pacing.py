"""
Pacing policy for RSVP playback.

This module computes how long a token stays on screen. The base interval is
derived from the reading speed (``60000 / wpm`` ms) and a set of additive
bonuses is applied depending on the token's shape.

The bonuses are a blend, not a priority list: every matching rule adds its
bonus, so "(1,048)." collects the sentence-end, numeric and bracket
bonuses together.
"""

from dataclasses import dataclass
from typing import Callable, Iterable, List, Tuple

from .constants import (
    ALPHANUMERIC_MIX_BONUS_MS,
    ATTACHED_EM_DASH_BONUS_MS,
    BRACKETED_BONUS_MS,
    CLAUSE_END_BONUS_MS,
    CLAUSE_PUNCTUATION,
    CLOSING_BRACKETS,
    COMPARATOR_BONUS_MS,
    COMPARATORS,
    ELLIPSIS_BONUS_MS,
    EM_DASH,
    LONG_TOKEN_BONUS_MS,
    LONG_TOKEN_THRESHOLD,
    MS_PER_MINUTE,
    NUMERIC_BONUS_MS,
    NUMERIC_MARKS,
    OPENING_BRACKETS,
    SENTENCE_END_BONUS_MS,
    SENTENCE_PUNCTUATION,
    STANDALONE_EM_DASH_BONUS_MS,
)
from .text_utils import (
    contains_digit,
    contains_letter,
    ends_with_ellipsis,
    strip_trailing_closers,
)


def base_interval_ms(wpm: int) -> float:
    """
    Calculate the base token display duration from WPM (words per minute).

    Raises:
        ValueError: If wpm is not positive.

    Examples:
        >>> base_interval_ms(600)
        100.0
        >>> base_interval_ms(300)
        200.0
    """
    if wpm <= 0:
        raise ValueError(f"WPM must be positive, got {wpm}")

    return MS_PER_MINUTE / wpm


def _ends_with_sentence_punctuation(token: str) -> bool:
    stripped = strip_trailing_closers(token)
    return bool(stripped) and stripped[-1] in SENTENCE_PUNCTUATION


def _ends_with_clause_punctuation(token: str) -> bool:
    stripped = strip_trailing_closers(token)
    return bool(stripped) and stripped[-1] in CLAUSE_PUNCTUATION


def _ends_with_attached_em_dash(token: str) -> bool:
    stripped = strip_trailing_closers(token)
    return len(stripped) > 1 and stripped.endswith(EM_DASH)


def _is_em_dash(token: str) -> bool:
    return token == EM_DASH


def _has_comparator(token: str) -> bool:
    return any(ch in COMPARATORS for ch in token)


def _is_numeric_looking(token: str) -> bool:
    return contains_digit(token) and any(ch in NUMERIC_MARKS for ch in token)


def _mixes_letters_and_digits(token: str) -> bool:
    return contains_letter(token) and contains_digit(token)


def _is_bracketed(token: str) -> bool:
    return bool(token) and (token[0] in OPENING_BRACKETS or token[-1] in CLOSING_BRACKETS)


def _is_long(token: str) -> bool:
    return len(token) >= LONG_TOKEN_THRESHOLD


@dataclass(frozen=True)
class PacingRule:
    """A named additive bonus applied when ``matches(token)`` holds."""

    name: str
    bonus_ms: int
    matches: Callable[[str], bool]


DEFAULT_RULES: Tuple[PacingRule, ...] = (
    PacingRule("sentence_end", SENTENCE_END_BONUS_MS, _ends_with_sentence_punctuation),
    PacingRule("clause_end", CLAUSE_END_BONUS_MS, _ends_with_clause_punctuation),
    PacingRule("attached_em_dash", ATTACHED_EM_DASH_BONUS_MS, _ends_with_attached_em_dash),
    PacingRule("em_dash", STANDALONE_EM_DASH_BONUS_MS, _is_em_dash),
    PacingRule("ellipsis", ELLIPSIS_BONUS_MS, ends_with_ellipsis),
    PacingRule("comparator", COMPARATOR_BONUS_MS, _has_comparator),
    PacingRule("numeric", NUMERIC_BONUS_MS, _is_numeric_looking),
    PacingRule("alphanumeric", ALPHANUMERIC_MIX_BONUS_MS, _mixes_letters_and_digits),
    PacingRule("bracketed", BRACKETED_BONUS_MS, _is_bracketed),
    PacingRule("long_token", LONG_TOKEN_BONUS_MS, _is_long),
)


class PacingPolicy:
    """
    Calculate dwell times for RSVP token display.

    Example usage:
        >>> policy = PacingPolicy()
        >>> policy.dwell_ms("word", 600)
        100.0
        >>> policy.dwell_ms("word.", 600)
        320.0
        >>> policy.explain("(n")
        ['bracketed']
    """

    def __init__(self, rules: Iterable[PacingRule] = DEFAULT_RULES) -> None:
        self.rules: Tuple[PacingRule, ...] = tuple(rules)

    def explain(self, token: str) -> List[str]:
        """Return the names of all rules that match ``token``, in rule order."""
        if not token:
            return []
        return [rule.name for rule in self.rules if rule.matches(token)]

    def bonus_ms(self, token: str) -> float:
        """Sum of every matching rule's bonus."""
        if not token:
            return 0.0
        return float(sum(rule.bonus_ms for rule in self.rules if rule.matches(token)))

    def dwell_ms(self, token: str, wpm: int) -> float:
        """
        Calculate how long ``token`` stays on screen at ``wpm``.

        Args:
            token: The display token.
            wpm: Reading speed in words per minute (must be positive).

        Returns:
            Dwell time in milliseconds, always positive.
        """
        return base_interval_ms(wpm) + self.bonus_ms(token)


_default_policy = PacingPolicy()


def dwell_ms(token: str, wpm: int) -> float:
    """Dwell time for ``token`` at ``wpm`` using the default rule set."""
    return _default_policy.dwell_ms(token, wpm)


def estimate_reading_time_ms(tokens: Iterable[str], wpm: int) -> float:
    """
    Estimate total playback time for a token sequence.

    Examples:
        >>> estimate_reading_time_ms(["Hello", "world."], 600)
        420.0
    """
    return sum(dwell_ms(token, wpm) for token in tokens)


def estimate_reading_time_formatted(tokens: Iterable[str], wpm: int) -> str:
    """
    Estimate total playback time and return it as a formatted string.

    Returns:
        Formatted string like "5 min" or "1 hr 23 min".
    """
    total_ms = estimate_reading_time_ms(tokens, wpm)
    total_minutes = int(total_ms / 1000 / 60)

    if total_minutes < 60:
        return f"{max(1, total_minutes)} min"

    hours = total_minutes // 60
    minutes = total_minutes % 60

    if minutes == 0:
        return f"{hours} hr"

    return f"{hours} hr {minutes} min"
