"""Copies fresh samples from scheduled entries onto matching favourites."""

from __future__ import annotations

from logging import Logger

from ..domain.models import FavouriteEntry, ScheduledEntry
from ..storage.codec import serialize_favourite_sample
from ..storage.row_store import RowStore, favourite_entry_uri


class FavouritePropagator:
    """Keeps the denormalized favourite sample in step with the schedule.

    Favourites are never created or deleted here; only the ``sample`` of an
    existing favourite with the same feed id is overwritten.
    """

    def __init__(self, store: RowStore, logger: Logger):
        self._store = store
        self.logger = logger

    def propagate_if_favourited(self, entry: ScheduledEntry) -> bool:
        """Overwrite the favourite sample of ``entry.feed_id`` if one exists.

        Every favourite row of the feed receives the same sample.

        Args:
            entry: Scheduled entry carrying the latest sample

        Returns:
            True if at least one favourite row was updated
        """
        if not entry.feed_id:
            self.logger.warning("Scheduled entry %s has no feed id; not propagating", entry.id)
            return False

        uri = favourite_entry_uri(entry.feed_id)

        if self._store.query(uri).count() == 0:
            self.logger.debug("Feed %s is not favourited", entry.feed_id)
            return False

        favourite = FavouriteEntry(feed_id=entry.feed_id, sample=entry.sample)
        rows_updated = self._store.update(uri, serialize_favourite_sample(favourite))

        self.logger.debug(
            "Copied sample of feed %s to %d favourite row(s)",
            entry.feed_id,
            rows_updated,
        )
        return rows_updated > 0
