"""Tests for PendingStateManager and the update-and-propagate step."""

from logging import Logger
from unittest.mock import MagicMock, Mock

from sensable.domain.models import PendingState, Sample, ScheduledEntry
from sensable.scheduler.pending import PendingStateManager


class TestPendingTransitions:
    """Test mark/clear against the store."""

    def test_mark_pending_persists_flag(self, registry, pending_manager):
        entry = ScheduledEntry(feed_id="temp-1")
        registry.add(entry)

        assert pending_manager.mark_pending(entry) is True

        assert entry.pending is PendingState.PENDING
        assert registry.get(entry.id).pending is PendingState.PENDING
        assert registry.count_pending() == 1

    def test_clear_pending_persists_flag(self, registry, pending_manager):
        entry = ScheduledEntry(feed_id="temp-1", pending=PendingState.PENDING)
        registry.add(entry)

        assert pending_manager.clear_pending(entry) is True

        assert entry.pending is PendingState.IDLE
        assert registry.get(entry.id).pending is PendingState.IDLE
        assert registry.count_pending() == 0

    def test_update_writes_sample_and_propagates(
        self, registry, pending_manager, add_favourite, get_favourite
    ):
        add_favourite("temp-1")
        entry = ScheduledEntry(feed_id="temp-1")
        registry.add(entry)

        entry.sample = Sample(value=21.5, timestamp=1700000000000)
        assert pending_manager.update(entry) is True

        assert registry.get(entry.id).sample == entry.sample
        assert get_favourite("temp-1").sample == entry.sample


class TestBestEffortPropagation:
    """Propagation is attempted regardless of the scheduled row update."""

    def test_propagates_even_when_entry_was_removed(
        self, registry, pending_manager, add_favourite, get_favourite
    ):
        add_favourite("temp-1")
        entry = ScheduledEntry(feed_id="temp-1")
        registry.add(entry)
        registry.remove(entry)

        entry.sample = Sample(value=9.0, timestamp=10)
        assert pending_manager.clear_pending(entry) is False

        assert get_favourite("temp-1").sample == Sample(value=9.0, timestamp=10)

    def test_result_ignores_propagation_outcome(self):
        store = MagicMock()
        store.update.return_value = 0
        propagator = Mock()
        propagator.propagate_if_favourited.return_value = True
        logger = Mock(spec=Logger)
        manager = PendingStateManager(store, propagator, logger)
        entry = ScheduledEntry(id=3, feed_id="temp-1")

        assert manager.update(entry) is False

        propagator.propagate_if_favourited.assert_called_once_with(entry)
        logger.warning.assert_called_once()

    def test_entry_without_id_still_propagates(self):
        store = MagicMock()
        propagator = Mock()
        manager = PendingStateManager(store, propagator, Mock(spec=Logger))
        entry = ScheduledEntry(feed_id="temp-1")

        assert manager.mark_pending(entry) is False

        store.update.assert_not_called()
        propagator.propagate_if_favourited.assert_called_once_with(entry)


class TestReconcileStalePending:
    """Test clearing flags left behind by a previous process."""

    def test_clears_every_pending_entry(self, registry, pending_manager):
        registry.add(ScheduledEntry(feed_id="a", pending=PendingState.PENDING))
        registry.add(ScheduledEntry(feed_id="b", pending=PendingState.PENDING))
        registry.add(ScheduledEntry(feed_id="c"))

        assert pending_manager.reconcile_stale_pending() == 2

        assert registry.count_pending() == 0
        assert registry.count_all() == 3

    def test_refreshes_favourites_of_reconciled_entries(
        self, registry, pending_manager, add_favourite, get_favourite
    ):
        sample = Sample(value=4.0, timestamp=4)
        add_favourite("a")
        registry.add(ScheduledEntry(feed_id="a", sample=sample, pending=PendingState.PENDING))

        pending_manager.reconcile_stale_pending()

        assert get_favourite("a").sample == sample

    def test_nothing_pending(self, registry, pending_manager, logger):
        registry.add(ScheduledEntry(feed_id="a"))

        assert pending_manager.reconcile_stale_pending() == 0
        logger.info.assert_not_called()
