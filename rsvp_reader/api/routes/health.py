"""Health check API route."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from rsvp_reader import __version__
from rsvp_reader.database import get_db
from rsvp_reader.models import Document
from rsvp_reader.services.text import get_tokenizer_version

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
def health_check(db: Session = Depends(get_db)) -> dict:
    """Report database reachability, stored document count and tokenizer version."""
    documents = None
    try:
        documents = db.scalar(select(func.count()).select_from(Document))
    except SQLAlchemyError:
        logger.exception("Health check could not query documents")

    return {
        "status": "ok" if documents is not None else "degraded",
        "database": "connected" if documents is not None else "unavailable",
        "documents": documents,
        "tokenizer_version": get_tokenizer_version(),
        "version": __version__,
    }
