"""Registry of scheduled sensables backed by the row store."""

from __future__ import annotations

from ..domain.models import ScheduledEntry
from ..storage.codec import deserialize_scheduled_entry, serialize_scheduled_entry
from ..storage.row_store import (
    PENDING_SCHEDULED_ENTRIES_URI,
    SCHEDULED_ENTRIES_URI,
    RowCursor,
    RowStore,
    scheduled_entry_uri,
)


class ScheduleRegistry:
    """CRUD facade over the ``scheduled_entries`` collection.

    No duplicate detection by feed id is performed: the same feed may be
    scheduled more than once.
    """

    def __init__(self, store: RowStore):
        """Initialize registry.

        Args:
            store: Row store holding the scheduled entries
        """
        self._store = store

    def add(self, entry: ScheduledEntry) -> bool:
        """Insert a scheduled entry.

        The row id assigned by the store is written back to ``entry.id``
        when the backend reports one.

        Args:
            entry: Entry to schedule

        Returns:
            True once the insert went through

        Raises:
            ValueError: If the entry has an empty feed id
        """
        if not entry.feed_id or not entry.feed_id.strip():
            raise ValueError("Scheduled entry needs a non-empty feed id")

        entry_id = self._store.insert(SCHEDULED_ENTRIES_URI, serialize_scheduled_entry(entry))
        if entry_id is not None:
            entry.id = entry_id
        return True

    def remove(self, entry: ScheduledEntry | int) -> bool:
        """Delete a scheduled entry by id.

        Args:
            entry: Entry or its row id

        Returns:
            True if at least one row was deleted
        """
        entry_id = entry.id if isinstance(entry, ScheduledEntry) else entry
        if entry_id is None:
            return False
        return self._store.delete(scheduled_entry_uri(entry_id)) > 0

    def get(self, entry_id: int) -> ScheduledEntry | None:
        """Return the entry stored under ``entry_id``, or None."""
        return self._store.query(scheduled_entry_uri(entry_id)).map(
            deserialize_scheduled_entry
        ).first()

    def list_all(self) -> RowCursor[ScheduledEntry]:
        """Return a lazy, restartable view of all scheduled entries."""
        return self._store.query(SCHEDULED_ENTRIES_URI).map(deserialize_scheduled_entry)

    def list_pending(self) -> RowCursor[ScheduledEntry]:
        """Return a lazy view of the entries whose pending flag is set."""
        return self._store.query(PENDING_SCHEDULED_ENTRIES_URI).map(
            deserialize_scheduled_entry
        )

    def count_all(self) -> int:
        return self.list_all().count()

    def count_pending(self) -> int:
        """Count pending entries with a query against the store."""
        return self._store.query(PENDING_SCHEDULED_ENTRIES_URI).count()
