"""Fetch cycle run on every firing of the scheduled sensables trigger."""
from __future__ import annotations

import threading
from logging import Logger

import requests

from sensable.domain.models import ScheduledEntry
from sensable.scheduler.pending import PendingStateManager
from sensable.scheduler.registry import ScheduleRegistry
from sensable.service.base_service import BaseService
from sensable.service.sensable_api_service import SensableApiService
from sensable.storage.errors import StoreUnavailableError


class SensableSyncService(BaseService):
    """Refreshes every scheduled entry with the latest sample of its feed.

    For each entry the pending flag is set, the sample is fetched and the
    flag is cleared again; clearing writes the new sample and copies it to a
    matching favourite. Row store failures are logged per entry and never
    retried here.
    """

    def __init__(
        self,
        registry: ScheduleRegistry,
        pending_manager: PendingStateManager,
        api_service: SensableApiService,
        logger: Logger,
    ):
        """Initialize sync service.

        Args:
            registry: Registry listing the scheduled entries
            pending_manager: Manager performing all entry writes
            api_service: Source of fresh samples
            logger: Logger instance
        """
        super().__init__(logger)
        self.registry = registry
        self.pending_manager = pending_manager
        self.api_service = api_service
        self._cycle_lock = threading.Lock()

    def run_cycle(self) -> dict:
        """Refresh all scheduled entries once.

        A call made while another cycle is still running returns immediately,
        so no entry is processed by two cycles at the same time.

        Returns:
            Dictionary with counts: {total, updated, unchanged, failed} and
            a ``skipped`` flag
        """
        stats = {"total": 0, "updated": 0, "unchanged": 0, "failed": 0, "skipped": False}

        if not self._cycle_lock.acquire(blocking=False):
            self.logger.warning("Previous sync cycle still running; skipping this one")
            stats["skipped"] = True
            return stats

        try:
            try:
                entries = list(self.registry.list_all())
            except StoreUnavailableError as e:
                self.logger.error("Cannot list scheduled sensables: %s", e)
                return stats

            stats["total"] = len(entries)
            self.logger.info("Sync cycle started for %d scheduled sensable(s)", len(entries))

            for entry in entries:
                stats[self._sync_entry(entry)] += 1

            self.logger.info(
                "Sync cycle complete: %d updated, %d unchanged, %d failed",
                stats["updated"],
                stats["unchanged"],
                stats["failed"],
            )
            return stats
        finally:
            self._cycle_lock.release()

    def _sync_entry(self, entry: ScheduledEntry) -> str:
        """Refresh one entry and return the stats key describing the outcome."""
        try:
            if not self.pending_manager.mark_pending(entry):
                self.logger.info(
                    "Scheduled entry %s (feed %s) is gone; not fetching", entry.id, entry.feed_id
                )
                return "unchanged"
        except StoreUnavailableError as e:
            self.logger.error("Cannot mark feed %s pending: %s", entry.feed_id, e)
            return "failed"

        outcome = "unchanged"
        try:
            sample = self.api_service.fetch_latest(entry.feed_id)
        except (requests.RequestException, ValueError) as e:
            self.logger.warning("Fetching feed %s failed: %s", entry.feed_id, e)
            outcome = "failed"
        else:
            if sample is not None:
                entry.sample = sample
                outcome = "updated"

        try:
            self.pending_manager.clear_pending(entry)
        except StoreUnavailableError as e:
            # The flag stays set until the next cycle or the start-up reconciliation.
            self.logger.error("Cannot store sample of feed %s: %s", entry.feed_id, e)
            return "failed"

        return outcome
