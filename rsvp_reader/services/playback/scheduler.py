"""
Playback scheduler for RSVP reading.

The scheduler owns the live reading position of one document: the cursor,
the speed, the elapsed-time accumulator and the last tick timestamp. It has
no timers or threads of its own; an external tick source calls ``tick()``
periodically (for example at display refresh rate) and all mutation happens
inside the serially invoked public methods.

State machine::

    IDLE --load()--> PAUSED <--play()/pause()--> PLAYING
                       ^                            |
                       +------ last token shown ----+

Example usage:
    >>> scheduler = PlaybackScheduler()
    >>> scheduler.load(document)
    >>> scheduler.play()
    >>> scheduler.tick(0.0)       # first tick only records the timestamp
    False
    >>> scheduler.tick(100.0)     # "word" at 600 WPM dwells 100 ms
    True
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from rsvp_reader.services.documents import DocumentData
from rsvp_reader.services.playback.types import (
    DEFAULT_IDX,
    DEFAULT_WPM,
    PlaybackState,
    ReadingStateChanged,
    ReadingStateData,
    RenderFrame,
)
from rsvp_reader.services.text import PacingPolicy

logger = logging.getLogger(__name__)

DEFAULT_MIN_WPM = 200
DEFAULT_MAX_WPM = 1200

ChangeListener = Callable[[ReadingStateChanged], None]
FrameListener = Callable[[RenderFrame], None]


def _coerce_int(value: Any) -> Optional[int]:
    """Return ``value`` as an int, or None if it is not an integral number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _state_field(state: Any, name: str) -> Any:
    if state is None:
        return None
    if isinstance(state, Mapping):
        return state.get(name)
    return getattr(state, name, None)


class PlaybackScheduler:
    """
    Advance a cursor through a document's tokens over wall-clock time.

    Every cursor or speed change is reported to change listeners as a
    ``ReadingStateChanged`` event, in mutation order. Every cursor change is
    also reported to frame listeners as a ``RenderFrame``.
    """

    def __init__(
        self,
        policy: Optional[PacingPolicy] = None,
        *,
        default_wpm: int = DEFAULT_WPM,
        min_wpm: int = DEFAULT_MIN_WPM,
        max_wpm: int = DEFAULT_MAX_WPM,
    ) -> None:
        """
        Initialize the scheduler.

        Args:
            policy: Pacing policy used to compute dwell times.
            default_wpm: Speed used when no valid persisted speed exists.
            min_wpm: Lower bound applied to speed changes.
            max_wpm: Upper bound applied to speed changes.
        """
        if min_wpm <= 0 or min_wpm > max_wpm:
            raise ValueError(f"Invalid WPM bounds: min={min_wpm} max={max_wpm}")

        self._policy = policy or PacingPolicy()
        self.default_wpm = default_wpm
        self.min_wpm = min_wpm
        self.max_wpm = max_wpm

        self._document: Optional[DocumentData] = None
        self._state = PlaybackState.IDLE
        self._cursor = 0
        self._wpm = default_wpm
        self._extensions: Dict[str, Any] = {}
        self._accumulated_ms = 0.0
        self._last_tick_ms: Optional[float] = None

        self._change_listeners: List[ChangeListener] = []
        self._frame_listeners: List[FrameListener] = []

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def add_change_listener(self, listener: ChangeListener) -> None:
        self._change_listeners.append(listener)

    def remove_change_listener(self, listener: ChangeListener) -> None:
        if listener in self._change_listeners:
            self._change_listeners.remove(listener)

    def add_frame_listener(self, listener: FrameListener) -> None:
        self._frame_listeners.append(listener)

    def remove_frame_listener(self, listener: FrameListener) -> None:
        if listener in self._frame_listeners:
            self._frame_listeners.remove(listener)

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def is_playing(self) -> bool:
        return self._state is PlaybackState.PLAYING

    @property
    def document(self) -> Optional[DocumentData]:
        return self._document

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def wpm(self) -> int:
        return self._wpm

    @property
    def total(self) -> int:
        return self._document.total if self._document else 0

    @property
    def accumulated_ms(self) -> float:
        return self._accumulated_ms

    @property
    def current_token(self) -> str:
        if not self._document or not self._document.tokens:
            return ""
        return self._document.tokens[self._cursor]

    @property
    def current_orp_index(self) -> int:
        if not self._document:
            return 0
        return self._document.orp_at(self._cursor)

    def current_dwell_ms(self) -> float:
        """Dwell time of the current token at the current speed."""
        return self._policy.dwell_ms(self.current_token, self._wpm)

    def frame(self) -> RenderFrame:
        """Render frame for the current cursor position."""
        return RenderFrame(
            token=self.current_token,
            orp_index=self.current_orp_index,
            position=self._cursor,
            total=self.total,
        )

    def snapshot(self) -> Optional[ReadingStateData]:
        """Copy of the live reading state, or None before ``load()``."""
        if not self._document:
            return None
        return ReadingStateData(
            document_id=self._document.id,
            idx=self._cursor,
            wpm=self._wpm,
            extensions=dict(self._extensions),
        )

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def load(self, document: DocumentData, state: Any = None) -> None:
        """
        Load a document and its persisted reading state, then pause.

        ``state`` may be a ``ReadingStateData``, a mapping with ``idx`` and
        ``wpm`` keys, or None. Missing or corrupt fields fall back to the
        defaults; an out-of-range cursor is clamped and an out-of-range speed
        is bounded.
        """
        self._document = document

        idx = _coerce_int(_state_field(state, "idx"))
        if idx is None:
            idx = DEFAULT_IDX

        wpm = _coerce_int(_state_field(state, "wpm"))
        if wpm is None or wpm <= 0:
            if state is not None:
                logger.debug(
                    "Ignoring persisted wpm %r for %s", _state_field(state, "wpm"), document.id
                )
            wpm = self.default_wpm

        extensions = _state_field(state, "extensions")
        self._extensions = dict(extensions) if isinstance(extensions, Mapping) else {}

        self._cursor = self._clamp(idx)
        self._wpm = self._bound_wpm(wpm)
        self._reset_timing()
        self._state = PlaybackState.PAUSED

        logger.debug(
            "Loaded document %s at %d/%d, %d wpm",
            document.id,
            self._cursor,
            self.total,
            self._wpm,
        )
        self._emit_frame()

    def play(self) -> None:
        """Start or resume playback from the current cursor."""
        if self._state is PlaybackState.PLAYING:
            return
        if not self._document or not self._document.tokens:
            logger.debug("play() ignored: no tokens loaded")
            return

        self._reset_timing()
        self._state = PlaybackState.PLAYING

    def pause(self) -> None:
        """Pause playback; the cursor is preserved exactly."""
        if self._state is not PlaybackState.PLAYING:
            return
        self._state = PlaybackState.PAUSED
        self._last_tick_ms = None

    def toggle(self) -> None:
        if self.is_playing:
            self.pause()
        else:
            self.play()

    def tick(self, now_ms: float) -> bool:
        """
        Advance playback to ``now_ms``.

        At most one token is advanced per call. Time beyond the current
        token's dwell is kept in the accumulator, so the average pace holds
        under an irregular tick cadence.

        Args:
            now_ms: Monotonic timestamp in milliseconds.

        Returns:
            True if the cursor advanced.
        """
        if self._state is not PlaybackState.PLAYING or not self._document:
            return False

        if self._last_tick_ms is None:
            self._last_tick_ms = now_ms
            return False

        elapsed = max(0.0, now_ms - self._last_tick_ms)
        self._last_tick_ms = now_ms
        self._accumulated_ms += elapsed

        dwell = self.current_dwell_ms()
        if self._accumulated_ms < dwell:
            return False

        if self._cursor >= self._last_index():
            # Last token shown for its full dwell: stop here, no wrap-around
            self._accumulated_ms = 0.0
            self._state = PlaybackState.PAUSED
            self._last_tick_ms = None
            logger.debug("Reached end of document %s", self._document.id)
            return False

        self._accumulated_ms -= dwell
        self._cursor += 1
        self._emit_cursor_change()
        return True

    def seek(self, delta: int) -> None:
        """
        Move the cursor by ``delta`` tokens, clamped to the document.

        Seeking past the last token pauses playback.
        """
        if not self._document:
            return

        target = self._cursor + delta
        self._accumulated_ms = 0.0

        if target > self._last_index() and self._state is PlaybackState.PLAYING:
            self._state = PlaybackState.PAUSED
            self._last_tick_ms = None

        self._move_to(self._clamp(target))

    def jump_to(self, index: int) -> None:
        """Move the cursor to ``index``, clamped to the document."""
        if not self._document:
            return

        self._accumulated_ms = 0.0
        self._move_to(self._clamp(index))

    def set_speed(self, wpm: int) -> None:
        """
        Change the reading speed.

        The accumulator is kept, so a partially elapsed dwell continues
        toward the threshold recomputed at the new speed. Non-integral or
        non-positive values are ignored.
        """
        value = _coerce_int(wpm)
        if value is None or value <= 0:
            logger.warning("Ignoring invalid reading speed %r", wpm)
            return

        value = self._bound_wpm(value)
        if value == self._wpm:
            return

        self._wpm = value
        self._emit_change()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _last_index(self) -> int:
        return max(0, self.total - 1)

    def _clamp(self, index: int) -> int:
        return max(0, min(self._last_index(), index))

    def _bound_wpm(self, wpm: int) -> int:
        return max(self.min_wpm, min(self.max_wpm, wpm))

    def _reset_timing(self) -> None:
        self._accumulated_ms = 0.0
        self._last_tick_ms = None

    def _move_to(self, index: int) -> None:
        if index == self._cursor:
            return
        self._cursor = index
        self._emit_cursor_change()

    def _emit_cursor_change(self) -> None:
        self._emit_frame()
        self._emit_change()

    def _emit_change(self) -> None:
        if not self._document:
            return
        event = ReadingStateChanged(
            document_id=self._document.id,
            idx=self._cursor,
            wpm=self._wpm,
        )
        for listener in list(self._change_listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Reading-state change listener failed")

    def _emit_frame(self) -> None:
        frame = self.frame()
        for listener in list(self._frame_listeners):
            try:
                listener(frame)
            except Exception:
                logger.exception("Render frame listener failed")
