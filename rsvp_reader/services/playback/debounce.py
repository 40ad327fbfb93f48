"""
Debounced, coalescing writes of reading-state change events.

Each document has a single pending slot: a new event cancels the pending
timer and reschedules it, so only the newest ``(idx, wpm)`` is written once
the quiescence window passes without further changes (last-write-wins).

Timers are ``loop.call_later`` handles on the running asyncio loop. When a
timer fires the write is handed to the loop's default executor and never
awaited by the caller. Writes are serialized and stamped with a sequence
number, so an older write that finishes late can never overwrite a newer one.
"""

import asyncio
import itertools
import logging
import threading
from typing import Dict, Optional, Set, Tuple

from rsvp_reader.services.playback.persistence import ReadingStateStore
from rsvp_reader.services.playback.types import ReadingStateChanged

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_MS = 400.0


class DebouncedStateWriter:
    """Coalesce reading-state change events into debounced store writes."""

    def __init__(
        self,
        store: ReadingStateStore,
        *,
        delay_ms: float = DEFAULT_DEBOUNCE_MS,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        """
        Initialize the writer.

        Args:
            store: Durable reading-state store.
            delay_ms: Quiescence window in milliseconds.
            loop: Event loop for timers; defaults to the running loop.
        """
        self.store = store
        self.delay_ms = delay_ms
        self._loop = loop

        self._sequence = itertools.count(1)
        self._latest: Dict[str, Tuple[int, ReadingStateChanged]] = {}
        self._timers: Dict[str, asyncio.TimerHandle] = {}
        self._in_flight: Set[asyncio.Future] = set()

        # Guards the two dicts below; held for the duration of a store write
        self._write_lock = threading.Lock()
        self._written_seq: Dict[str, int] = {}
        self._last_saved: Dict[str, Tuple[int, int]] = {}

    def submit(self, event: ReadingStateChanged) -> None:
        """Record ``event`` as the newest state and (re)start its timer."""
        document_id = event.document_id
        self._cancel_timer(document_id)
        self._latest[document_id] = (next(self._sequence), event)

        loop = self._get_loop()
        if loop is None:
            logger.warning(
                "No running event loop; reading state for %s is kept until flush",
                document_id,
            )
            return

        self._timers[document_id] = loop.call_later(
            self.delay_ms / 1000.0, self._fire, document_id
        )
        logger.debug(
            "Scheduled reading-state write for %s (idx=%d, wpm=%d)",
            document_id,
            event.idx,
            event.wpm,
        )

    def has_pending(self, document_id: str) -> bool:
        return document_id in self._timers

    def mark_saved(self, document_id: str, idx: int, wpm: int) -> None:
        """Record ``(idx, wpm)`` as already durable so identical writes are skipped."""
        with self._write_lock:
            self._last_saved[document_id] = (idx, wpm)

    def cancel(self, document_id: str) -> None:
        """Drop the pending timer for ``document_id``; the latest event is kept."""
        self._cancel_timer(document_id)

    def cancel_all(self) -> None:
        for document_id in list(self._timers):
            self._cancel_timer(document_id)

    def release(self, document_id: str) -> None:
        """
        Forget everything held for ``document_id``.

        Called once the final state is durable. A write still queued in the
        executor for the document is skipped.
        """
        self._cancel_timer(document_id)
        self._latest.pop(document_id, None)
        with self._write_lock:
            self._written_seq.pop(document_id, None)
            self._last_saved.pop(document_id, None)

    def flush(
        self,
        document_id: str,
        event: Optional[ReadingStateChanged] = None,
    ) -> bool:
        """
        Synchronously write the newest state for ``document_id``.

        Args:
            document_id: Document to flush.
            event: Optional final state; it supersedes any pending event.

        Returns:
            True if the state is durable (written now or already saved).
        """
        self._cancel_timer(document_id)
        if event is not None:
            self._latest[document_id] = (next(self._sequence), event)

        entry = self._latest.get(document_id)
        if entry is None:
            return True

        sequence, latest = entry
        return self._write(sequence, latest)

    async def drain(self) -> None:
        """Wait for writes already handed to the executor."""
        if self._in_flight:
            await asyncio.gather(*list(self._in_flight), return_exceptions=True)

    def _get_loop(self) -> Optional[asyncio.AbstractEventLoop]:
        if self._loop is not None:
            return self._loop
        try:
            return asyncio.get_running_loop()
        except RuntimeError:
            return None

    def _cancel_timer(self, document_id: str) -> None:
        handle = self._timers.pop(document_id, None)
        if handle is not None:
            handle.cancel()

    def _fire(self, document_id: str) -> None:
        self._timers.pop(document_id, None)
        entry = self._latest.get(document_id)
        if entry is None:
            return

        sequence, event = entry
        loop = self._get_loop()
        future = loop.run_in_executor(None, self._write, sequence, event)
        self._in_flight.add(future)
        future.add_done_callback(self._in_flight.discard)

    def _write(self, sequence: int, event: ReadingStateChanged) -> bool:
        document_id = event.document_id
        with self._write_lock:
            latest = self._latest.get(document_id)
            if latest is None or sequence < latest[0]:
                # Released, or superseded by a newer event
                return True
            if sequence <= self._written_seq.get(document_id, 0):
                return True
            if self._last_saved.get(document_id) == (event.idx, event.wpm):
                self._written_seq[document_id] = sequence
                return True

            try:
                saved = self.store.save(document_id, event.idx, event.wpm)
            except Exception:
                logger.warning(
                    "Reading-state write failed for %s", document_id, exc_info=True
                )
                return False

            if saved is False:
                logger.warning("Reading-state store rejected write for %s", document_id)
                return False

            self._written_seq[document_id] = sequence
            self._last_saved[document_id] = (event.idx, event.wpm)
            return True
