"""Scheduling and synchronization core for scheduled sensables."""
from .pending import PendingStateManager
from .propagation import FavouritePropagator
from .registry import ScheduleRegistry
from .trigger import (
    SCHEDULE_INTERVAL,
    SCHEDULER_TRIGGER_ID,
    APSchedulerTriggerFacility,
    PeriodicTriggerController,
    TriggerFacility,
)

__all__ = [
    "APSchedulerTriggerFacility",
    "FavouritePropagator",
    "PendingStateManager",
    "PeriodicTriggerController",
    "SCHEDULER_TRIGGER_ID",
    "SCHEDULE_INTERVAL",
    "ScheduleRegistry",
    "TriggerFacility",
]
