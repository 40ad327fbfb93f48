"""Document API routes: paste preview, create and read."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from rsvp_reader.api.dependencies import get_document_store
from rsvp_reader.config import Settings, get_settings
from rsvp_reader.schemas import (
    DocumentCreateRequest,
    DocumentRead,
    TokenPreviewRequest,
    TokenPreviewResponse,
)
from rsvp_reader.services.documents import DocumentData, DocumentStore, build_document
from rsvp_reader.services.text import estimate_reading_time_formatted, preview_tokens

router = APIRouter()
logger = logging.getLogger(__name__)


def _to_read(document: DocumentData, settings: Settings) -> DocumentRead:
    return DocumentRead(
        id=document.id,
        title=document.title,
        tokens=list(document.tokens),
        orp_indexes=list(document.orp_indexes),
        total_tokens=document.total,
        tokenizer_version=document.tokenizer_version,
        estimated_reading_time=estimate_reading_time_formatted(
            document.tokens, settings.default_wpm
        ),
    )


def _check_size(text: str, settings: Settings) -> None:
    if len(text) > settings.max_input_chars:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=(
                f"Input text exceeds maximum size of {settings.max_input_chars:,} characters "
                f"(got {len(text):,} characters)"
            ),
        )


@router.post("/documents/preview", response_model=TokenPreviewResponse)
def preview_document(
    request: TokenPreviewRequest,
    settings: Settings = Depends(get_settings),
) -> TokenPreviewResponse:
    """Tokenize pasted text and return the first few tokens."""
    _check_size(request.text, settings)
    tokens, total = preview_tokens(request.text, settings.preview_token_count)
    return TokenPreviewResponse(tokens=tokens, total=total)


@router.post(
    "/documents",
    response_model=DocumentRead,
    status_code=status.HTTP_201_CREATED,
)
def create_document(
    request: DocumentCreateRequest,
    store: DocumentStore = Depends(get_document_store),
    settings: Settings = Depends(get_settings),
) -> DocumentRead:
    """Tokenize pasted text, compute ORP indexes and store the document."""
    _check_size(request.text, settings)
    try:
        document = build_document(request.text, request.title)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        ) from exc

    store.add(document)
    logger.info("Created document %s %r", document.id, document.title)
    return _to_read(document, settings)


@router.get("/documents/{document_id}", response_model=DocumentRead)
def get_document(
    document_id: str,
    store: DocumentStore = Depends(get_document_store),
    settings: Settings = Depends(get_settings),
) -> DocumentRead:
    document = store.get(document_id)
    if document is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")
    return _to_read(document, settings)
