"""End-to-end flow: schedule a favourited feed, sync it, unschedule it."""

from __future__ import annotations

from logging import Logger
from unittest.mock import Mock

import pytest
from apscheduler.schedulers.background import BackgroundScheduler

from sensable.app import create_scheduler_app
from sensable.domain.models import PendingState, Sample, ScheduledEntry
from sensable.scheduler.trigger import SCHEDULER_TRIGGER_ID, APSchedulerTriggerFacility
from sensable.service.sensable_api_service import SensableApiService

SAMPLE_TIME = 1700000000000


@pytest.fixture()
def facility():
    facility = APSchedulerTriggerFacility(Mock(spec=Logger), BackgroundScheduler())
    facility.start(paused=True)
    yield facility
    facility.shutdown(wait=False)


@pytest.fixture()
def api_service() -> Mock:
    api_service = Mock(spec=SensableApiService)
    api_service.fetch_latest.return_value = Sample(value=21.5, timestamp=SAMPLE_TIME)
    return api_service


@pytest.fixture()
def app(store, logger, facility, api_service):
    return create_scheduler_app(store, logger, facility=facility, api_service=api_service)


def test_schedule_sync_and_unschedule(app, facility, add_favourite, get_favourite):
    add_favourite("temp-1", name="Kitchen", unit="C")
    entry = ScheduledEntry(feed_id="temp-1", name="Kitchen", unit="C")

    assert app.registry.add(entry) is True
    app.controller.start()
    assert app.registry.count_all() == 1
    assert app.controller.is_running()

    facility.lookup(SCHEDULER_TRIGGER_ID).func()

    stored = app.registry.get(entry.id)
    assert stored.sample == Sample(value=21.5, timestamp=SAMPLE_TIME)
    assert stored.pending is PendingState.IDLE
    favourite = get_favourite("temp-1")
    assert favourite.sample == Sample(value=21.5, timestamp=SAMPLE_TIME)
    assert favourite.name == "Kitchen"
    assert app.controller.is_running()

    assert app.registry.remove(entry) is True
    assert app.controller.stop_if_idle() is True

    assert app.registry.count_all() == 0
    assert not app.controller.is_running()


def test_firing_with_empty_registry_cancels_trigger(app, facility, api_service):
    app.controller.start()

    facility.lookup(SCHEDULER_TRIGGER_ID).func()

    api_service.fetch_latest.assert_not_called()
    assert facility.lookup(SCHEDULER_TRIGGER_ID) is None


def test_restart_reconciles_and_registers_once(app, store, logger, facility, api_service):
    app.registry.add(ScheduledEntry(feed_id="temp-1", pending=PendingState.PENDING))
    app.controller.start()

    restarted = create_scheduler_app(store, logger, facility=facility, api_service=api_service)
    assert restarted.pending_manager.reconcile_stale_pending() == 1
    restarted.controller.start()

    assert restarted.registry.count_pending() == 0
    assert len(facility.scheduler.get_jobs()) == 1
