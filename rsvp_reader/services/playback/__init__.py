"""
Playback package for RSVP reading.

- scheduler: PlaybackScheduler state machine (primary entry point)
- debounce: DebouncedStateWriter for coalesced reading-state writes
- persistence: ReadingStateStore protocol and its SQL/in-memory adapters
- session: TickDriver and ReadingSession runtime
- types: value types exchanged with renderers and stores
"""

from .debounce import DebouncedStateWriter
from .persistence import InMemoryReadingStateStore, ReadingStateStore, SqlReadingStateStore
from .scheduler import PlaybackScheduler
from .session import ReadingSession, TickDriver
from .types import (
    DEFAULT_IDX,
    DEFAULT_WPM,
    EXTENSIONS_VERSION,
    PlaybackState,
    ReadingStateChanged,
    ReadingStateData,
    RenderFrame,
)

__all__ = [
    # Scheduler
    "PlaybackScheduler",
    "PlaybackState",
    # Persistence
    "ReadingStateStore",
    "SqlReadingStateStore",
    "InMemoryReadingStateStore",
    "DebouncedStateWriter",
    # Runtime
    "ReadingSession",
    "TickDriver",
    # Types
    "ReadingStateData",
    "ReadingStateChanged",
    "RenderFrame",
    "DEFAULT_IDX",
    "DEFAULT_WPM",
    "EXTENSIONS_VERSION",
]
