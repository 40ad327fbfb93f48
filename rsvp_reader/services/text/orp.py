"""ORP (Optimal Recognition Point) calculator for RSVP reading."""

from typing import Iterable, List, Tuple

from .constants import ORP_MAX_INDEX, ORP_STEPS
from .text_utils import strip_non_alphanumeric


def orp_index(token: str) -> int:
    """
    Calculate the ORP index for a display token.

    Leading and trailing characters that are neither letters nor numbers are
    stripped before measuring, and the index is looked up from the step table
    by the stripped core length. Callers apply the result to the original,
    unstripped token, so a token with leading punctuation such as "(n,048)"
    anchors one character earlier than its core would suggest.

    Args:
        token: The display token.

    Returns:
        The 0-indexed anchor position.

    Examples:
        >>> orp_index("hello"), orp_index("beautiful"), orp_index("extraordinary")
        (1, 2, 3)
        >>> orp_index("")
        0
    """
    length = len(strip_non_alphanumeric(token or ""))
    for max_length, index in ORP_STEPS:
        if length <= max_length:
            return index
    return ORP_MAX_INDEX


def orp_indexes_for(tokens: Iterable[str]) -> List[int]:
    """Return the parallel ORP index list for a token sequence."""
    return [orp_index(token) for token in tokens]


def split_for_display(token: str, index: int) -> Tuple[str, str, str]:
    """
    Split a token into three parts for anchored ORP display.

    The left part is rendered right-aligned, the anchor character sits at the
    fixation point and the right part is rendered left-aligned.

    Args:
        token: The token to split.
        index: The anchor index within ``token``.

    Returns:
        Tuple of (before_orp, orp_char, after_orp). ``orp_char`` is empty when
        the index falls outside the token.

    Example:
        >>> split_for_display("reading", 2)
        ('re', 'a', 'ding')
    """
    if not token:
        return ("", "", "")

    index = max(0, index)
    before = token[:index]
    orp_char = token[index] if index < len(token) else ""
    after = token[index + 1:]

    return (before, orp_char, after)
