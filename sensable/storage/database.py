"""Database adapter factory."""

from __future__ import annotations

from .adapters import DatabaseAdapter, SQLAlchemyAdapter
from .base_repository import DBConnection


_adapter: DatabaseAdapter | None = None
_adapter_url: str | None = None
_adapter_schema: str | None = None
_initialized: bool = False


def get_database_adapter() -> DatabaseAdapter:
    """Return the configured database adapter.

    Connection details are taken from `DATABASE_URL` (or `DATABASE_PATH`
    for the default SQLite file) and `DB_SCHEMA` by `sensable.config`.

    Returns:
        DatabaseAdapter (a SQLAlchemyAdapter) for the configured database.
    """

    from ..config import get_config

    global _adapter, _adapter_url, _adapter_schema, _initialized

    config = get_config()
    if not config.database_url:
        raise ValueError("DATABASE_URL (or DATABASE_PATH) is required.")

    # Schema is part of the identity: a changed DB_SCHEMA needs a new adapter
    # and a fresh initialization.
    if (
        _adapter is None
        or _adapter_url != config.database_url
        or _adapter_schema != config.database_schema
    ):
        _adapter = SQLAlchemyAdapter(config.database_url, schema=config.database_schema)
        _adapter_url = config.database_url
        _adapter_schema = config.database_schema
        _initialized = False

    return _adapter


def get_connection() -> DBConnection:
    """
    Return a database connection from the configured adapter.

    Tables are created on first use.

    Returns:
        DBConnection instance usable by the row store

    Example:
        >>> from sensable.storage.database import get_connection
        >>> from sensable.storage.row_store import SQLRowStore
        >>>
        >>> conn = get_connection()
        >>> store = SQLRowStore(conn)
        >>> # ... use store
        >>> conn.close()
    """
    global _initialized

    adapter = get_database_adapter()
    if not _initialized:
        adapter.initialize()
        _initialized = True

    return adapter.get_connection()
