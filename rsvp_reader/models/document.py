"""Document model for storing pasted text and its display tokens."""

from datetime import UTC, datetime
import uuid

from sqlalchemy import JSON, Column, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship

from rsvp_reader.database import Base


class Document(Base):
    """SQLAlchemy model for tokenized documents.

    ``tokens`` and ``orp_indexes`` are parallel lists of equal length.
    """

    __tablename__ = "documents"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    title = Column(String(500), nullable=False)
    raw_text = Column(Text, nullable=False)
    normalized_text = Column(Text, nullable=False)

    tokens = Column(JSON, nullable=False, default=list)
    orp_indexes = Column(JSON, nullable=False, default=list)
    total_tokens = Column(Integer, nullable=False)
    tokenizer_version = Column(String(50), nullable=False)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC))
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    reading_state = relationship(
        "ReadingState",
        back_populates="document",
        cascade="all, delete-orphan",
        uselist=False,
    )
