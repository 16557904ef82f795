"""Pytest fixtures for the sensable scheduler."""

from __future__ import annotations

from logging import Logger
from typing import Iterator
from unittest.mock import Mock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from sensable.domain.models import FavouriteEntry, Sample
from sensable.scheduler.pending import PendingStateManager
from sensable.scheduler.propagation import FavouritePropagator
from sensable.scheduler.registry import ScheduleRegistry
from sensable.storage.adapters.sqlalchemy_adapter import SQLAlchemyConnection
from sensable.storage.codec import deserialize_favourite_entry, serialize_favourite_entry
from sensable.storage.row_store import FAVOURITE_ENTRIES_URI, SQLRowStore, favourite_entry_uri
from sensable.storage.tables import metadata


@pytest.fixture()
def db_conn() -> Iterator[SQLAlchemyConnection]:
    """Return a DBConnection bound to a fresh in-memory SQLite database."""

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    metadata.create_all(engine)

    session = sessionmaker(bind=engine)()
    try:
        yield SQLAlchemyConnection(session)
    finally:
        session.close()
        engine.dispose()


@pytest.fixture()
def store(db_conn) -> SQLRowStore:
    return SQLRowStore(db_conn)


@pytest.fixture()
def logger() -> Mock:
    return Mock(spec=Logger)


@pytest.fixture()
def registry(store) -> ScheduleRegistry:
    return ScheduleRegistry(store)


@pytest.fixture()
def propagator(store, logger) -> FavouritePropagator:
    return FavouritePropagator(store, logger)


@pytest.fixture()
def pending_manager(store, propagator, logger) -> PendingStateManager:
    return PendingStateManager(store, propagator, logger)


@pytest.fixture()
def add_favourite(store):
    """Return a helper inserting a favourite the way the favourites manager does."""

    def _add(
        feed_id: str,
        sample: Sample | None = None,
        name: str | None = None,
        unit: str | None = None,
    ) -> None:
        favourite = FavouriteEntry(feed_id=feed_id, sample=sample, name=name, unit=unit)
        store.insert(FAVOURITE_ENTRIES_URI, serialize_favourite_entry(favourite))

    return _add


@pytest.fixture()
def get_favourite(store):
    """Return a helper reading the favourite of a feed back from the store."""

    def _get(feed_id: str) -> FavouriteEntry | None:
        return store.query(favourite_entry_uri(feed_id)).map(deserialize_favourite_entry).first()

    return _get
