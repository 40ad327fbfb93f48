"""Reading-state API routes."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from rsvp_reader.api.dependencies import get_document_store, get_reading_state_store
from rsvp_reader.schemas import ReadingStateRead, ReadingStateUpdate
from rsvp_reader.services.documents import DocumentData, DocumentStore
from rsvp_reader.services.playback import SqlReadingStateStore

router = APIRouter()
logger = logging.getLogger(__name__)


def _require_document(document_id: str, store: DocumentStore) -> DocumentData:
    document = store.get(document_id)
    if document is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")
    return document


@router.get(
    "/documents/{document_id}/reading-state",
    response_model=ReadingStateRead | None,
)
def get_reading_state(
    document_id: str,
    documents: DocumentStore = Depends(get_document_store),
    states: SqlReadingStateStore = Depends(get_reading_state_store),
) -> ReadingStateRead | None:
    """Return the stored reading state, or null if reading never started."""
    _require_document(document_id, documents)
    state = states.load(document_id)
    if state is None:
        return None
    return ReadingStateRead.model_validate(state)


@router.put("/documents/{document_id}/reading-state", response_model=ReadingStateRead)
def put_reading_state(
    document_id: str,
    update: ReadingStateUpdate,
    documents: DocumentStore = Depends(get_document_store),
    states: SqlReadingStateStore = Depends(get_reading_state_store),
) -> ReadingStateRead:
    """Store the reading position; the index is clamped to the document."""
    document = _require_document(document_id, documents)
    idx = max(0, min(document.total - 1, update.idx))

    if not states.save(document_id, idx, update.wpm, update.extensions):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Reading state could not be saved",
        )

    state = states.load(document_id)
    return ReadingStateRead.model_validate(state)
