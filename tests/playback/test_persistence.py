"""Tests for the reading-state stores."""

import pytest
from sqlalchemy.exc import OperationalError

from rsvp_reader.models import ReadingState
from rsvp_reader.services.documents import DocumentStore
from rsvp_reader.services.playback import (
    InMemoryReadingStateStore,
    ReadingStateData,
    SqlReadingStateStore,
)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def sql_store(session_factory, document_factory):
    DocumentStore(session_factory).add(document_factory())
    return SqlReadingStateStore(session_factory)


@pytest.fixture(params=["memory", "sql"])
def store(request, session_factory, document_factory):
    if request.param == "memory":
        return InMemoryReadingStateStore()
    DocumentStore(session_factory).add(document_factory())
    return SqlReadingStateStore(session_factory)


# =============================================================================
# Shared behaviour
# =============================================================================


class TestStoreContract:

    def test_load_unknown_returns_none(self, store):
        assert store.load("doc-1") is None

    def test_save_then_load(self, store):
        assert store.save("doc-1", 12, 450) is True
        state = store.load("doc-1")
        assert isinstance(state, ReadingStateData)
        assert (state.document_id, state.idx, state.wpm) == ("doc-1", 12, 450)
        assert state.extensions == {}

    def test_save_overwrites(self, store):
        store.save("doc-1", 1, 600)
        store.save("doc-1", 2, 300)
        state = store.load("doc-1")
        assert (state.idx, state.wpm) == (2, 300)

    def test_extensions_are_kept_when_not_given(self, store):
        store.save("doc-1", 1, 600, {"theme": "dark"})
        store.save("doc-1", 5, 600)
        assert store.load("doc-1").extensions == {"theme": "dark"}

    def test_loaded_state_is_a_copy(self, store):
        store.save("doc-1", 1, 600, {"theme": "dark"})
        store.load("doc-1").extensions["theme"] = "light"
        assert store.load("doc-1").extensions == {"theme": "dark"}


# =============================================================================
# SQL store behaviour
# =============================================================================


class TestSqlStore:

    def test_unknown_extensions_version_is_ignored(self, sql_store, session_factory):
        with session_factory() as db:
            db.add(
                ReadingState(
                    document_id="doc-1",
                    idx=3,
                    wpm=500,
                    extensions={"future": True},
                    extensions_version=99,
                )
            )
            db.commit()

        state = sql_store.load("doc-1")
        assert (state.idx, state.wpm) == (3, 500)
        assert state.extensions == {}

    def test_database_error_returns_false(self):
        def broken_factory():
            raise OperationalError("SELECT 1", {}, Exception("database is locked"))

        store = SqlReadingStateStore(broken_factory)
        assert store.save("doc-1", 1, 600) is False
