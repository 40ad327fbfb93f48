"""Database models for the RSVP reader."""

from rsvp_reader.models.document import Document
from rsvp_reader.models.reading_state import ReadingState

__all__ = [
    "Document",
    "ReadingState",
]
