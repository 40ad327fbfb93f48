"""Shared pytest fixtures."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from rsvp_reader.api.dependencies import get_session_factory
from rsvp_reader.database import Base, get_db
from rsvp_reader.main import app
from rsvp_reader.services.documents import build_document


@pytest.fixture
def engine():
    """In-memory SQLite engine shared across connections."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    import rsvp_reader.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def client(session_factory):
    """TestClient with the database dependencies pointed at the test engine."""

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def document_factory():
    """Factory for tokenized documents.

    Usage:
        def test_example(document_factory):
            document = document_factory("one two three")
    """

    def _make_document(text: str = "The quick brown fox jumps.", document_id: str = "doc-1"):
        return build_document(text, "Test", document_id=document_id)

    return _make_document
