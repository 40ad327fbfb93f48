"""Shared FastAPI dependencies."""

from typing import Callable

from fastapi import Depends
from sqlalchemy.orm import Session

from rsvp_reader.database import SessionLocal
from rsvp_reader.services.documents import DocumentStore
from rsvp_reader.services.playback import SqlReadingStateStore


def get_session_factory() -> Callable[[], Session]:
    """Return the session factory used by the stores."""
    return SessionLocal


def get_document_store(
    session_factory: Callable[[], Session] = Depends(get_session_factory),
) -> DocumentStore:
    return DocumentStore(session_factory)


def get_reading_state_store(
    session_factory: Callable[[], Session] = Depends(get_session_factory),
) -> SqlReadingStateStore:
    return SqlReadingStateStore(session_factory)
