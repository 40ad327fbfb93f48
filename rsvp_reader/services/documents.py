"""
Document building and storage.

A document is built once from pasted text: the text is normalized and
tokenized, an ORP index is computed for every token, and the result is
treated as read-only from then on.
"""

import logging
import uuid
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from sqlalchemy.orm import Session

from rsvp_reader.models import Document
from rsvp_reader.services.text import (
    TOKENIZER_VERSION,
    orp_indexes_for,
    tokenize_with_normalized,
)

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled"


@dataclass(frozen=True)
class DocumentData:
    """Immutable core view of a tokenized document.

    Attributes:
        id: Document identifier.
        title: Display title.
        tokens: Ordered display tokens.
        orp_indexes: Anchor index per token, parallel to ``tokens``.
        raw_text: The text as originally pasted.
        normalized_text: The normalized text the tokens were cut from.
        tokenizer_version: Version of the tokenizer that produced the tokens.
    """

    id: str
    title: str
    tokens: tuple[str, ...]
    orp_indexes: tuple[int, ...]
    raw_text: str = ""
    normalized_text: str = ""
    tokenizer_version: str = field(default=TOKENIZER_VERSION)

    @property
    def total(self) -> int:
        return len(self.tokens)

    def orp_at(self, index: int) -> int:
        """Stored ORP index for ``index``, or 0 if the position is unknown."""
        if 0 <= index < len(self.orp_indexes):
            return self.orp_indexes[index]
        return 0


def validate_document_invariants(tokens: Sequence[str], orp_indexes: Sequence[int]) -> None:
    """
    Validate the token/ORP invariants and raise explicit errors on violations.

    Raises:
        ValueError: If the lists differ in length, a token is empty or
            contains whitespace, or an ORP index is out of bounds.
    """
    if len(tokens) != len(orp_indexes):
        raise ValueError(
            f"tokens/orp_indexes length mismatch: {len(tokens)} != {len(orp_indexes)}"
        )

    for position, (token, orp) in enumerate(zip(tokens, orp_indexes)):
        if not token:
            raise ValueError(f"empty token at position {position}")
        if any(ch.isspace() for ch in token):
            raise ValueError(f"token contains whitespace at position {position}: {token!r}")
        if not (0 <= orp < max(1, len(token))):
            raise ValueError(
                f"orp_index out of bounds at position {position}: "
                f"orp_index={orp} token={token!r}"
            )


def build_document(
    raw_text: str,
    title: Optional[str] = None,
    *,
    document_id: Optional[str] = None,
) -> DocumentData:
    """
    Tokenize pasted text into a document.

    Args:
        raw_text: The text as pasted.
        title: Optional title; blank titles become "Untitled".
        document_id: Optional identifier; a UUID4 is generated if omitted.

    Returns:
        DocumentData with parallel token and ORP index tuples.

    Raises:
        ValueError: If the text contains no tokens.
    """
    normalized, tokens = tokenize_with_normalized(raw_text)
    if not tokens:
        raise ValueError("Text contains no readable tokens")

    orp_indexes = orp_indexes_for(tokens)
    validate_document_invariants(tokens, orp_indexes)

    return DocumentData(
        id=document_id or str(uuid.uuid4()),
        title=(title or "").strip() or DEFAULT_TITLE,
        tokens=tuple(tokens),
        orp_indexes=tuple(orp_indexes),
        raw_text=raw_text,
        normalized_text=normalized,
    )


def document_from_row(row: Document) -> DocumentData:
    """Convert a stored ``Document`` row into the core view."""
    return DocumentData(
        id=row.id,
        title=row.title,
        tokens=tuple(row.tokens or ()),
        orp_indexes=tuple(row.orp_indexes or ()),
        raw_text=row.raw_text,
        normalized_text=row.normalized_text,
        tokenizer_version=row.tokenizer_version,
    )


class DocumentStore:
    """SQLAlchemy-backed document storage (create and read only)."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def add(self, document: DocumentData) -> DocumentData:
        with self._session_factory() as db:
            row = Document(
                id=document.id,
                title=document.title,
                raw_text=document.raw_text,
                normalized_text=document.normalized_text,
                tokens=list(document.tokens),
                orp_indexes=list(document.orp_indexes),
                total_tokens=document.total,
                tokenizer_version=document.tokenizer_version,
            )
            db.add(row)
            db.commit()
        logger.info("Stored document %s (%d tokens)", document.id, document.total)
        return document

    def get(self, document_id: str) -> Optional[DocumentData]:
        with self._session_factory() as db:
            row = db.get(Document, document_id)
            if row is None:
                return None
            return document_from_row(row)
