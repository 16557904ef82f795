"""Pending flag transitions and the update-and-propagate step."""

from __future__ import annotations

from logging import Logger

from ..domain.models import PendingState, ScheduledEntry
from ..storage.codec import deserialize_scheduled_entry, serialize_scheduled_entry
from ..storage.row_store import PENDING_SCHEDULED_ENTRIES_URI, RowStore, scheduled_entry_uri
from .propagation import FavouritePropagator


class PendingStateManager:
    """Owns every write of a scheduled entry.

    Each transition is scoped to a single entry and is immediately followed
    by a store write and a favourite propagation attempt.
    """

    def __init__(self, store: RowStore, propagator: FavouritePropagator, logger: Logger):
        """Initialize manager.

        Args:
            store: Row store holding the scheduled entries
            propagator: Propagator invoked after every entry write
            logger: Logger instance
        """
        self._store = store
        self._propagator = propagator
        self.logger = logger

    def mark_pending(self, entry: ScheduledEntry) -> bool:
        """Set the pending flag and write the entry.

        Returns:
            Result of :meth:`update`
        """
        entry.pending = PendingState.PENDING
        return self.update(entry)

    def clear_pending(self, entry: ScheduledEntry) -> bool:
        """Clear the pending flag and write the entry.

        Returns:
            Result of :meth:`update`
        """
        entry.pending = PendingState.IDLE
        return self.update(entry)

    def update(self, entry: ScheduledEntry) -> bool:
        """Write ``entry`` to its row, then propagate its sample to favourites.

        Propagation runs even when no scheduled row was updated (for example
        when the entry was removed meanwhile). Its outcome does not affect the
        return value.

        Args:
            entry: Scheduled entry with the values to persist

        Returns:
            True if the scheduled row was updated
        """
        rows_updated = 0
        if entry.id is None:
            self.logger.warning(
                "Scheduled entry for feed %s has no id; skipping row update",
                entry.feed_id,
            )
        else:
            rows_updated = self._store.update(
                scheduled_entry_uri(entry.id), serialize_scheduled_entry(entry)
            )
            if rows_updated == 0:
                self.logger.warning(
                    "Scheduled entry %s (feed %s) was not updated; it may have been removed",
                    entry.id,
                    entry.feed_id,
                )

        propagated = self._propagator.propagate_if_favourited(entry)
        self.logger.debug(
            "Updated scheduled entry %s (pending=%d, rows=%d, favourite=%s)",
            entry.id,
            int(entry.pending),
            rows_updated,
            propagated,
        )
        return rows_updated > 0

    def reconcile_stale_pending(self) -> int:
        """Clear pending flags left behind by a previous process.

        Meant to run once at start-up, before the trigger is started. Each
        entry goes through :meth:`clear_pending`, so favourites are refreshed
        too.

        Returns:
            Number of entries whose flag was cleared
        """
        stale = list(
            self._store.query(PENDING_SCHEDULED_ENTRIES_URI).map(deserialize_scheduled_entry)
        )
        cleared = sum(1 for entry in stale if self.clear_pending(entry))
        if stale:
            self.logger.info("Reconciled %d of %d stale pending entries", cleared, len(stale))
        return cleared
