"""
Storage layer for scheduled and favourite sensables using SQLAlchemy Core.

The scheduling core talks to storage only through the URI-addressed
row store defined in :mod:`.row_store`.
"""
from .database import get_connection, get_database_adapter
from .base_repository import BaseRepository, DBConnection
from .errors import StoreUnavailableError, UnknownUriError
from .row_store import (
    FAVOURITE_ENTRIES_URI,
    PENDING_SCHEDULED_ENTRIES_URI,
    SCHEDULED_ENTRIES_URI,
    RowCursor,
    RowStore,
    SQLRowStore,
    favourite_entry_uri,
    scheduled_entry_uri,
)

__all__ = [
    "BaseRepository",
    "DBConnection",
    "FAVOURITE_ENTRIES_URI",
    "PENDING_SCHEDULED_ENTRIES_URI",
    "SCHEDULED_ENTRIES_URI",
    "RowCursor",
    "RowStore",
    "SQLRowStore",
    "StoreUnavailableError",
    "UnknownUriError",
    "create_row_store",
    "favourite_entry_uri",
    "get_connection",
    "get_database_adapter",
    "scheduled_entry_uri",
]


def create_row_store() -> SQLRowStore:
    """
    Create a row store on a fresh connection from the configured adapter.

    Returns:
        SQLRowStore; call ``close()`` on it to release the connection

    Example:
        >>> store = create_row_store()
        >>> # ... use store
        >>> store.close()
    """
    return SQLRowStore(get_connection())
