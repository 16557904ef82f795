"""Recurring wake-up that drives the scheduled sensable sync.

The controller keeps at most one recurring trigger registered under a
well-known id, so repeated ``start()`` calls (one per process start) never
stack up duplicate jobs.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from logging import Logger
from typing import Any, Callable, Optional, Protocol

from apscheduler.job import Job
from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.triggers.interval import IntervalTrigger

from ..storage.errors import StoreUnavailableError
from .registry import ScheduleRegistry

SCHEDULER_TRIGGER_ID = "scheduled-sensables"
SCHEDULE_INTERVAL = timedelta(minutes=15)


class TriggerFacility(Protocol):
    """Timer facility able to run a callable at a recurring interval."""

    def register(
        self, trigger_id: str, interval: timedelta, target: Callable[[], Any]
    ) -> Any:
        """Register a recurring trigger and return its handle."""

    def lookup(self, trigger_id: str) -> Optional[Any]:
        """Return the handle registered under ``trigger_id`` without creating one."""

    def cancel(self, handle: Any) -> None:
        """Cancel a registered trigger."""


class APSchedulerTriggerFacility:
    """Trigger facility backed by an APScheduler scheduler.

    Firing is best effort: missed runs are coalesced into one, a run may be
    shifted by up to ``JITTER_SECONDS`` and runs later than the misfire grace
    time are skipped.
    """

    MISFIRE_GRACE_SECONDS = 5 * 60
    JITTER_SECONDS = 60

    def __init__(self, logger: Logger, scheduler: BaseScheduler | None = None):
        """Initialize facility.

        Args:
            logger: Logger instance
            scheduler: Scheduler to register jobs on (a new
                BackgroundScheduler if None)
        """
        self.logger = logger
        self.scheduler = scheduler or BackgroundScheduler()

    def start(self, paused: bool = False) -> None:
        """Start the underlying scheduler if it is not running yet."""
        if not self.scheduler.running:
            self.scheduler.start(paused=paused)

    def shutdown(self, wait: bool = True) -> None:
        """Shut the underlying scheduler down if it is running."""
        if self.scheduler.running:
            self.scheduler.shutdown(wait=wait)

    def register(
        self, trigger_id: str, interval: timedelta, target: Callable[[], Any]
    ) -> Job:
        """Add an interval job whose first run is due immediately."""
        return self.scheduler.add_job(
            target,
            trigger=IntervalTrigger(
                seconds=interval.total_seconds(), jitter=self.JITTER_SECONDS
            ),
            id=trigger_id,
            name=trigger_id,
            next_run_time=datetime.now(timezone.utc),
            coalesce=True,
            max_instances=1,
            misfire_grace_time=self.MISFIRE_GRACE_SECONDS,
        )

    def lookup(self, trigger_id: str) -> Optional[Job]:
        return self.scheduler.get_job(trigger_id)

    def cancel(self, handle: Job) -> None:
        try:
            self.scheduler.remove_job(handle.id)
        except JobLookupError:
            self.logger.debug("Trigger %s was already cancelled", handle.id)


class PeriodicTriggerController:
    """Starts and stops the recurring sync trigger.

    States:
    - Idle: no trigger is registered under the trigger id
    - Running: a trigger fires every ``SCHEDULE_INTERVAL``

    Idle -> Running only through :meth:`start`; Running -> Idle only through
    :meth:`stop_if_idle` when the registry is empty.
    """

    def __init__(
        self,
        facility: TriggerFacility,
        registry: ScheduleRegistry,
        target: Callable[[], Any],
        logger: Logger,
        trigger_id: str = SCHEDULER_TRIGGER_ID,
    ):
        """Initialize controller.

        Args:
            facility: Timer facility holding the recurring trigger
            registry: Registry consulted by :meth:`stop_if_idle`
            target: Fetch cycle invoked on every firing
            logger: Logger instance
            trigger_id: Well-known id the trigger is registered under
        """
        self._facility = facility
        self._registry = registry
        self._target = target
        self.logger = logger
        self.trigger_id = trigger_id

    def is_running(self) -> bool:
        return self._facility.lookup(self.trigger_id) is not None

    def start(self) -> None:
        """Register the recurring trigger unless one already exists."""
        if self._facility.lookup(self.trigger_id) is not None:
            self.logger.debug(
                "Trigger %s already registered. Exit without recreating it.",
                self.trigger_id,
            )
            return

        self.logger.info(
            "Trigger %s not registered. Registering it every %s.",
            self.trigger_id,
            SCHEDULE_INTERVAL,
        )
        self._facility.register(self.trigger_id, SCHEDULE_INTERVAL, self._fire)

    def stop_if_idle(self) -> bool:
        """Cancel the trigger when no entries are scheduled.

        Returns:
            Always True; whether a cancellation happened is not reported
        """
        if self._registry.count_all() == 0:
            handle = self._facility.lookup(self.trigger_id)
            if handle is not None:
                self._facility.cancel(handle)
                self.logger.info("No scheduled sensables left; trigger %s cancelled", self.trigger_id)
        return True

    def _fire(self) -> None:
        """Run one fetch cycle, then re-evaluate whether to keep running."""
        self.logger.debug("Trigger %s fired", self.trigger_id)
        try:
            self._target()
            self.stop_if_idle()
        except StoreUnavailableError as e:
            self.logger.error("Scheduled run aborted, row store unavailable: %s", e)
