"""
Value types shared by the playback scheduler and the persistence boundary.

The scheduler hands these out as copies; nothing here is a shared mutable
reference to the scheduler's own state.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Tuple

from rsvp_reader.services.text import split_for_display

DEFAULT_IDX = 0
DEFAULT_WPM = 600
EXTENSIONS_VERSION = 1


class PlaybackState(str, Enum):
    """Scheduler state machine: IDLE -> PLAYING <-> PAUSED."""

    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"


@dataclass
class ReadingStateData:
    """Reading position of one document.

    Attributes:
        document_id: The document this state belongs to.
        idx: Cursor position (token index).
        wpm: Reading speed in words per minute.
        extensions: Opaque map reserved for theme and pacing parameters.
        extensions_version: Schema version of ``extensions``.
    """

    document_id: str
    idx: int = DEFAULT_IDX
    wpm: int = DEFAULT_WPM
    extensions: Dict[str, Any] = field(default_factory=dict)
    extensions_version: int = EXTENSIONS_VERSION


@dataclass(frozen=True)
class ReadingStateChanged:
    """Emitted on every cursor or speed change."""

    document_id: str
    idx: int
    wpm: int


@dataclass(frozen=True)
class RenderFrame:
    """What the renderer shows for the current cursor position."""

    token: str
    orp_index: int
    position: int
    total: int

    @property
    def parts(self) -> Tuple[str, str, str]:
        """(left, anchor, right) split of ``token`` around ``orp_index``."""
        return split_for_display(self.token, self.orp_index)
