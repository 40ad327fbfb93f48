"""
Reading-state persistence adapters.

The durable copy of a reading state lives behind the ``ReadingStateStore``
protocol. Stores report write failures by returning False or raising; the
callers on the playback side log and swallow both, so a failed write never
interrupts playback and a later successful write simply overwrites it.
"""

import logging
import threading
from typing import Any, Callable, Dict, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from rsvp_reader.models import ReadingState
from rsvp_reader.services.playback.types import EXTENSIONS_VERSION, ReadingStateData

logger = logging.getLogger(__name__)


class ReadingStateStore(Protocol):
    """Durable store for (document id, cursor index, speed)."""

    def load(self, document_id: str) -> Optional[ReadingStateData]:
        ...

    def save(
        self,
        document_id: str,
        idx: int,
        wpm: int,
        extensions: Optional[Dict[str, Any]] = None,
    ) -> bool:
        ...


class InMemoryReadingStateStore:
    """Process-local store, safe to call from executor threads."""

    def __init__(self) -> None:
        self._states: Dict[str, ReadingStateData] = {}
        self._lock = threading.Lock()

    def load(self, document_id: str) -> Optional[ReadingStateData]:
        with self._lock:
            state = self._states.get(document_id)
            if state is None:
                return None
            return ReadingStateData(
                document_id=state.document_id,
                idx=state.idx,
                wpm=state.wpm,
                extensions=dict(state.extensions),
                extensions_version=state.extensions_version,
            )

    def save(
        self,
        document_id: str,
        idx: int,
        wpm: int,
        extensions: Optional[Dict[str, Any]] = None,
    ) -> bool:
        with self._lock:
            previous = self._states.get(document_id)
            if extensions is None:
                extensions = previous.extensions if previous else {}
            self._states[document_id] = ReadingStateData(
                document_id=document_id,
                idx=idx,
                wpm=wpm,
                extensions=dict(extensions),
            )
        return True


class SqlReadingStateStore:
    """SQLAlchemy-backed store; one row per document (upsert on save)."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def load(self, document_id: str) -> Optional[ReadingStateData]:
        with self._session_factory() as db:
            row = db.get(ReadingState, document_id)
            if row is None:
                return None

            extensions = row.extensions if isinstance(row.extensions, dict) else {}
            if row.extensions_version != EXTENSIONS_VERSION:
                logger.warning(
                    "Reading state for %s has extensions version %s; ignoring extensions",
                    document_id,
                    row.extensions_version,
                )
                extensions = {}

            return ReadingStateData(
                document_id=row.document_id,
                idx=row.idx,
                wpm=row.wpm,
                extensions=dict(extensions),
                extensions_version=EXTENSIONS_VERSION,
            )

    def save(
        self,
        document_id: str,
        idx: int,
        wpm: int,
        extensions: Optional[Dict[str, Any]] = None,
    ) -> bool:
        try:
            with self._session_factory() as db:
                row = db.get(ReadingState, document_id)
                if row is None:
                    row = ReadingState(
                        document_id=document_id,
                        extensions={},
                        extensions_version=EXTENSIONS_VERSION,
                    )
                    db.add(row)
                row.idx = idx
                row.wpm = wpm
                if extensions is not None:
                    row.extensions = dict(extensions)
                    row.extensions_version = EXTENSIONS_VERSION
                db.commit()
        except SQLAlchemyError:
            logger.warning("Failed to save reading state for %s", document_id, exc_info=True)
            return False
        return True
