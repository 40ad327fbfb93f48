"""Pydantic schemas for the RSVP reader API."""

from rsvp_reader.schemas.document import (
    DocumentCreateRequest,
    DocumentRead,
    TokenPreviewRequest,
    TokenPreviewResponse,
)
from rsvp_reader.schemas.reading_state import ReadingStateRead, ReadingStateUpdate

__all__ = [
    # Document schemas
    "DocumentCreateRequest",
    "DocumentRead",
    "TokenPreviewRequest",
    "TokenPreviewResponse",
    # Reading state schemas
    "ReadingStateRead",
    "ReadingStateUpdate",
]
