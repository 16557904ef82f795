"""Tests for the URI-addressed SQL row store."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from sensable.storage.errors import StoreUnavailableError, UnknownUriError
from sensable.storage.row_store import (
    FAVOURITE_ENTRIES_URI,
    PENDING_SCHEDULED_ENTRIES_URI,
    SCHEDULED_ENTRIES_URI,
    SQLRowStore,
    favourite_entry_uri,
    resolve_uri,
    scheduled_entry_uri,
)
from sensable.storage.tables import favourite_entries, scheduled_entries


class TestResolveUri:
    """Test URI to table/condition mapping."""

    def test_collection_uris(self):
        assert resolve_uri(SCHEDULED_ENTRIES_URI).table is scheduled_entries
        assert resolve_uri(FAVOURITE_ENTRIES_URI).table is favourite_entries
        assert resolve_uri(SCHEDULED_ENTRIES_URI).conditions == ()

    def test_pending_view_is_not_row_scoped(self):
        resolved = resolve_uri(PENDING_SCHEDULED_ENTRIES_URI)

        assert resolved.table is scheduled_entries
        assert len(resolved.conditions) == 1
        assert resolved.row_scoped is False

    def test_row_uris_are_row_scoped(self):
        assert resolve_uri(scheduled_entry_uri(5)).row_scoped is True
        assert resolve_uri(favourite_entry_uri("temp-1")).row_scoped is True

    @pytest.mark.parametrize(
        "uri",
        ["unknown", "scheduled_entries/abc", "sensables/1", "favourite_entries/", "scheduled_entries/"],
    )
    def test_unknown_uris_raise(self, uri):
        with pytest.raises(UnknownUriError):
            resolve_uri(uri)


class TestSQLRowStore:
    """Test CRUD operations against in-memory SQLite."""

    def test_insert_returns_row_id(self, store):
        first = store.insert(SCHEDULED_ENTRIES_URI, {"feed_id": "a", "pending": 0})
        second = store.insert(SCHEDULED_ENTRIES_URI, {"feed_id": "b", "pending": 0})

        assert isinstance(first, int)
        assert second != first

    def test_insert_into_scoped_uri_is_rejected(self, store):
        with pytest.raises(UnknownUriError):
            store.insert(scheduled_entry_uri(1), {"feed_id": "a"})
        with pytest.raises(UnknownUriError):
            store.insert(PENDING_SCHEDULED_ENTRIES_URI, {"feed_id": "a"})

    def test_unknown_column_is_rejected(self, store):
        with pytest.raises(ValueError):
            store.insert(SCHEDULED_ENTRIES_URI, {"feed_id": "a", "colour": "red"})

    def test_cursor_is_lazy_and_restartable(self, store):
        cursor = store.query(SCHEDULED_ENTRIES_URI)
        assert list(cursor) == []

        store.insert(SCHEDULED_ENTRIES_URI, {"feed_id": "a", "pending": 0})

        rows = list(cursor)
        assert [row["feed_id"] for row in rows] == ["a"]
        assert cursor.count() == 1
        assert [row["feed_id"] for row in cursor] == ["a"]

    def test_pending_view_counts_only_pending_rows(self, store):
        store.insert(SCHEDULED_ENTRIES_URI, {"feed_id": "a", "pending": 1})
        store.insert(SCHEDULED_ENTRIES_URI, {"feed_id": "b", "pending": 0})
        store.insert(SCHEDULED_ENTRIES_URI, {"feed_id": "c", "pending": 1})

        assert store.query(PENDING_SCHEDULED_ENTRIES_URI).count() == 2
        assert store.query(SCHEDULED_ENTRIES_URI).count() == 3

    def test_query_with_filters(self, store):
        store.insert(SCHEDULED_ENTRIES_URI, {"feed_id": "a", "pending": 0})
        store.insert(SCHEDULED_ENTRIES_URI, {"feed_id": "b", "pending": 0})

        rows = list(store.query(SCHEDULED_ENTRIES_URI, {"feed_id": "b"}))

        assert len(rows) == 1
        assert rows[0]["feed_id"] == "b"

    def test_update_and_delete_by_row_uri(self, store):
        entry_id = store.insert(SCHEDULED_ENTRIES_URI, {"feed_id": "a", "pending": 0})

        assert store.update(scheduled_entry_uri(entry_id), {"pending": 1}) == 1
        assert store.query(scheduled_entry_uri(entry_id)).first()["pending"] == 1

        assert store.delete(scheduled_entry_uri(entry_id)) == 1
        assert store.delete(scheduled_entry_uri(entry_id)) == 0
        assert store.update(scheduled_entry_uri(entry_id), {"pending": 0}) == 0

    def test_favourite_uri_handles_reserved_characters(self, store):
        feed_id = "garden/soil moisture?#1"
        store.insert(FAVOURITE_ENTRIES_URI, {"feed_id": feed_id})

        rows = list(store.query(favourite_entry_uri(feed_id)))

        assert len(rows) == 1
        assert rows[0]["feed_id"] == feed_id

    def test_first_returns_none_when_empty(self, store):
        assert store.query(scheduled_entry_uri(99)).first() is None

    def test_sqlalchemy_errors_become_store_unavailable(self):
        conn = MagicMock()
        conn.execute.side_effect = OperationalError("stmt", {}, Exception("disk I/O error"))
        store = SQLRowStore(conn)

        with pytest.raises(StoreUnavailableError):
            store.update(scheduled_entry_uri(1), {"pending": 1})
        with pytest.raises(StoreUnavailableError):
            store.query(SCHEDULED_ENTRIES_URI).count()
        with pytest.raises(StoreUnavailableError):
            list(store.query(SCHEDULED_ENTRIES_URI))

        conn.commit.assert_not_called()


def test_favourite_uri_rejects_empty_feed_id():
    with pytest.raises(UnknownUriError):
        favourite_entry_uri("")
