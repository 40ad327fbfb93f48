"""
Reading-session runtime.

Wires one document to a ``PlaybackScheduler``, a periodic ``TickDriver``,
a ``DebouncedStateWriter`` and a reading-state store. Everything runs on a
single asyncio loop; the scheduler itself never awaits.

Example usage:
    >>> async with ReadingSession(document, store, on_frame=render) as session:
    ...     session.play()
    ...     await asyncio.sleep(5)
    ... # leaving the block cancels timers and flushes the final position
"""

import asyncio
import logging
from typing import Any, Callable, Optional

from rsvp_reader.config import Settings, get_settings
from rsvp_reader.services.documents import DocumentData
from rsvp_reader.services.playback.debounce import DebouncedStateWriter
from rsvp_reader.services.playback.persistence import ReadingStateStore
from rsvp_reader.services.playback.scheduler import PlaybackScheduler
from rsvp_reader.services.playback.types import (
    ReadingStateChanged,
    ReadingStateData,
    RenderFrame,
)

logger = logging.getLogger(__name__)


class TickDriver:
    """
    Periodic tick source backed by an asyncio task.

    The callback receives a monotonic timestamp in milliseconds and returns a
    truthy value to keep ticking; a falsy return stops the driver.
    """

    def __init__(
        self,
        callback: Callable[[float], Any],
        *,
        interval_ms: float = 16.0,
    ) -> None:
        self._callback = callback
        self.interval_ms = interval_ms
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start ticking on the running loop; no-op if already running."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    def stop(self) -> None:
        """Cancel the tick task synchronously."""
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        interval = self.interval_ms / 1000.0
        while True:
            try:
                keep_going = self._callback(loop.time() * 1000.0)
            except Exception:
                logger.exception("Tick callback failed")
                keep_going = True
            if not keep_going:
                break
            await asyncio.sleep(interval)
        self._task = None


class ReadingSession:
    """Single-reader, single-document playback session."""

    def __init__(
        self,
        document: DocumentData,
        store: ReadingStateStore,
        *,
        settings: Optional[Settings] = None,
        scheduler: Optional[PlaybackScheduler] = None,
        writer: Optional[DebouncedStateWriter] = None,
        on_frame: Optional[Callable[[RenderFrame], None]] = None,
    ) -> None:
        settings = settings or get_settings()

        self.document = document
        self.store = store
        self.seek_step = settings.seek_step
        self.scheduler = scheduler or PlaybackScheduler(
            default_wpm=settings.default_wpm,
            min_wpm=settings.min_wpm,
            max_wpm=settings.max_wpm,
        )
        self.writer = writer or DebouncedStateWriter(
            store, delay_ms=settings.persist_debounce_ms
        )
        self.ticker = TickDriver(self._on_tick, interval_ms=settings.tick_interval_ms)

        if on_frame is not None:
            self.scheduler.add_frame_listener(on_frame)

        self._opened = False
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def open(self) -> RenderFrame:
        """Load the persisted state (or defaults) and pause at that position."""
        if self._opened:
            return self.scheduler.frame()

        state = self._load_state()
        self.scheduler.load(self.document, state)
        if state is not None:
            self.writer.mark_saved(self.document.id, state.idx, state.wpm)
        self.scheduler.add_change_listener(self.writer.submit)
        self._opened = True

        logger.info(
            "Opened reading session for %s at %d/%d (%d wpm)",
            self.document.id,
            self.scheduler.cursor,
            self.scheduler.total,
            self.scheduler.wpm,
        )
        return self.scheduler.frame()

    def play(self) -> None:
        if self._closed:
            return
        self.scheduler.play()
        if self.scheduler.is_playing:
            self.ticker.start()

    def pause(self) -> None:
        self.scheduler.pause()
        self.ticker.stop()

    def toggle(self) -> None:
        if self.scheduler.is_playing:
            self.pause()
        else:
            self.play()

    def seek_forward(self, steps: Optional[int] = None) -> None:
        self.scheduler.seek(steps if steps is not None else self.seek_step)

    def seek_back(self, steps: Optional[int] = None) -> None:
        self.scheduler.seek(-(steps if steps is not None else self.seek_step))

    def jump_to(self, index: int) -> None:
        self.scheduler.jump_to(index)

    def set_speed(self, wpm: int) -> None:
        self.scheduler.set_speed(wpm)

    def close(self) -> bool:
        """
        Tear the session down.

        Cancels the tick task and the pending debounce timer synchronously,
        then makes a best-effort synchronous write of the final position.

        Returns:
            True if the final position is durable.
        """
        if self._closed:
            return True
        self._closed = True

        self.ticker.stop()
        self.writer.cancel(self.document.id)
        self.scheduler.pause()
        self.scheduler.remove_change_listener(self.writer.submit)

        snapshot = self.scheduler.snapshot()
        if snapshot is None:
            return True

        flushed = self.writer.flush(
            self.document.id,
            ReadingStateChanged(
                document_id=snapshot.document_id,
                idx=snapshot.idx,
                wpm=snapshot.wpm,
            ),
        )
        if flushed:
            self.writer.release(self.document.id)
        logger.info(
            "Closed reading session for %s at %d (%s)",
            self.document.id,
            snapshot.idx,
            "saved" if flushed else "not saved",
        )
        return flushed

    async def __aenter__(self) -> "ReadingSession":
        self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _on_tick(self, now_ms: float) -> bool:
        self.scheduler.tick(now_ms)
        return self.scheduler.is_playing

    def _load_state(self) -> Optional[ReadingStateData]:
        try:
            return self.store.load(self.document.id)
        except Exception:
            logger.warning(
                "Could not load reading state for %s; using defaults",
                self.document.id,
                exc_info=True,
            )
            return None
