"""Reading state model for tracking a reader's position in a document."""

from datetime import UTC, datetime

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from rsvp_reader.database import Base


class ReadingState(Base):
    """SQLAlchemy model for the single reading position of a document."""

    __tablename__ = "reading_states"

    document_id = Column(
        String(36),
        ForeignKey("documents.id", ondelete="CASCADE"),
        primary_key=True,
        nullable=False,
    )

    idx = Column(Integer, nullable=False, default=0)
    wpm = Column(Integer, nullable=False, default=600)

    # Reserved for theme/pacing parameters
    extensions = Column(JSON, nullable=False, default=dict)
    extensions_version = Column(Integer, nullable=False, default=1)

    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    document = relationship("Document", back_populates="reading_state")
