"""
Text package for RSVP processing.

This package contains the pure, side-effect-free text functions:
- normalizer: Unicode/whitespace normalization of pasted text
- tokenizer: Display tokenization (primary entry point)
- orp: Optimal Recognition Point calculation
- pacing: Dwell-time policy used by the playback scheduler
- constants: Character classes and pacing bonuses

Primary usage:
    >>> from rsvp_reader.services.text import tokenize, orp_index, dwell_ms
    >>> tokens = tokenize("Hello world.")
    >>> [orp_index(t) for t in tokens]
    [1, 1]
    >>> dwell_ms(tokens[-1], 600)
    320.0
"""

from .constants import TOKENIZER_VERSION
from .normalizer import normalize_text
from .orp import orp_index, orp_indexes_for, split_for_display
from .pacing import (
    DEFAULT_RULES,
    PacingPolicy,
    PacingRule,
    base_interval_ms,
    dwell_ms,
    estimate_reading_time_formatted,
    estimate_reading_time_ms,
)
from .tokenizer import preview_tokens, tokenize, tokenize_with_normalized


def get_tokenizer_version() -> str:
    """Return the current tokenizer version string."""
    return TOKENIZER_VERSION


__all__ = [
    # Normalizer
    "normalize_text",
    # Tokenizer
    "tokenize",
    "tokenize_with_normalized",
    "preview_tokens",
    "get_tokenizer_version",
    "TOKENIZER_VERSION",
    # ORP
    "orp_index",
    "orp_indexes_for",
    "split_for_display",
    # Pacing
    "PacingPolicy",
    "PacingRule",
    "DEFAULT_RULES",
    "base_interval_ms",
    "dwell_ms",
    "estimate_reading_time_ms",
    "estimate_reading_time_formatted",
]
