"""Wiring of the scheduling core, its collaborators and the sync service."""
from __future__ import annotations

from dataclasses import dataclass
from logging import Logger
from typing import Optional

from sensable.scheduler import (
    APSchedulerTriggerFacility,
    FavouritePropagator,
    PendingStateManager,
    PeriodicTriggerController,
    ScheduleRegistry,
    TriggerFacility,
)
from sensable.service import SensableApiService, SensableSyncService
from sensable.storage.row_store import RowStore


@dataclass
class SchedulerApp:
    """All components of one scheduler process, sharing one row store."""
    registry: ScheduleRegistry
    propagator: FavouritePropagator
    pending_manager: PendingStateManager
    sync_service: SensableSyncService
    facility: TriggerFacility
    controller: PeriodicTriggerController


def create_scheduler_app(
    store: RowStore,
    logger: Logger,
    facility: Optional[TriggerFacility] = None,
    api_service: Optional[SensableApiService] = None,
) -> SchedulerApp:
    """
    Build the scheduler components with dependency injection.

    Args:
        store: Row store shared by all components
        logger: Logger instance passed to every component
        facility: Trigger facility (APScheduler-backed if None)
        api_service: Sample source (configured SensableApiService if None)

    Returns:
        SchedulerApp holding the wired components

    Example:
        >>> app = create_scheduler_app(create_row_store(), setup_logger())
        >>> app.pending_manager.reconcile_stale_pending()
        >>> app.controller.start()
    """
    registry = ScheduleRegistry(store)
    propagator = FavouritePropagator(store, logger)
    pending_manager = PendingStateManager(store, propagator, logger)
    sync_service = SensableSyncService(
        registry,
        pending_manager,
        api_service or SensableApiService(logger),
        logger,
    )
    facility = facility or APSchedulerTriggerFacility(logger)
    controller = PeriodicTriggerController(
        facility, registry, target=sync_service.run_cycle, logger=logger
    )

    return SchedulerApp(
        registry=registry,
        propagator=propagator,
        pending_manager=pending_manager,
        sync_service=sync_service,
        facility=facility,
        controller=controller,
    )
