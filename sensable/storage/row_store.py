"""URI-addressed row store over the scheduled and favourite entry tables.

URIs name either a whole collection or a scope inside it:

    scheduled_entries               all scheduled entries
    scheduled_entries/pending       scheduled entries with pending = 1
    scheduled_entries/{id}          one scheduled entry by row id
    favourite_entries               all favourite entries
    favourite_entries/{feed_id}     favourite entries of one feed
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterator, Mapping, Optional, Protocol, TypeVar
from urllib.parse import quote, unquote

from sqlalchemy import Table, and_, delete, func, insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from ..domain.models import PendingState
from .base_repository import BaseRepository
from .errors import StoreUnavailableError, UnknownUriError
from .tables import favourite_entries, scheduled_entries

T = TypeVar("T")
U = TypeVar("U")

SCHEDULED_ENTRIES_URI = scheduled_entries.name
PENDING_SCHEDULED_ENTRIES_URI = f"{SCHEDULED_ENTRIES_URI}/pending"
FAVOURITE_ENTRIES_URI = favourite_entries.name


def scheduled_entry_uri(entry_id: int) -> str:
    """Return the row URI of a scheduled entry."""
    return f"{SCHEDULED_ENTRIES_URI}/{entry_id}"


def favourite_entry_uri(feed_id: str) -> str:
    """Return the URI scoping favourite entries to one feed.

    Raises:
        UnknownUriError: If ``feed_id`` is empty.
    """
    if not feed_id:
        raise UnknownUriError("Favourite URI needs a non-empty feed id")
    return f"{FAVOURITE_ENTRIES_URI}/{quote(feed_id, safe='')}"


@dataclass(frozen=True)
class ResolvedUri:
    """Table and row conditions a URI maps to."""

    table: Table
    conditions: tuple[Any, ...] = ()
    row_scoped: bool = False


def resolve_uri(uri: str) -> ResolvedUri:
    """Map a row store URI to its table and WHERE conditions.

    Raises:
        UnknownUriError: If the URI names no known collection or scope.
    """
    collection, separator, scope = uri.lstrip("/").partition("/")
    if separator and not scope:
        # "favourite_entries/" is an empty scope, not the whole collection.
        raise UnknownUriError(f"Empty scope in URI: {uri}")

    if collection == SCHEDULED_ENTRIES_URI:
        if not scope:
            return ResolvedUri(scheduled_entries)
        if scope == "pending":
            return ResolvedUri(
                scheduled_entries,
                (scheduled_entries.c.pending == int(PendingState.PENDING),),
            )
        try:
            entry_id = int(scope)
        except ValueError:
            raise UnknownUriError(f"Invalid scheduled entry id in URI: {uri}") from None
        return ResolvedUri(
            scheduled_entries, (scheduled_entries.c.id == entry_id,), row_scoped=True
        )

    if collection == FAVOURITE_ENTRIES_URI:
        if not scope:
            return ResolvedUri(favourite_entries)
        return ResolvedUri(
            favourite_entries,
            (favourite_entries.c.feed_id == unquote(scope),),
            row_scoped=True,
        )

    raise UnknownUriError(f"Unknown URI: {uri}")


class RowCursor(Generic[T]):
    """Lazy, restartable view over the rows a query selects.

    Nothing is executed until the cursor is iterated or counted, and every
    iteration runs the query again so it reflects the latest committed state.
    """

    def __init__(
        self,
        store: "SQLRowStore",
        statement: Any,
        row_factory: Callable[[dict[str, Any]], T] = dict,  # type: ignore[assignment]
    ):
        self._store = store
        self._statement = statement
        self._row_factory = row_factory

    def __iter__(self) -> Iterator[T]:
        result = self._store._run(self._statement)
        try:
            for row in result:
                yield self._row_factory(dict(row._mapping))
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f"Row store read failed: {e}") from e

    def count(self) -> int:
        """Return the number of selected rows using ``COUNT(*)`` in the store."""
        stmt = select(func.count()).select_from(self._statement.subquery())
        return self._store._scalar_guarded(stmt) or 0

    def first(self) -> Optional[T]:
        """Return the first row, or None when the query selects nothing."""
        for row in self:
            return row
        return None

    def map(self, row_factory: Callable[[T], U]) -> "RowCursor[U]":
        """Return a cursor over the same query yielding ``row_factory(row)``."""
        inner = self._row_factory
        return RowCursor(self._store, self._statement, lambda row: row_factory(inner(row)))


class RowStore(Protocol):
    """CRUD boundary the scheduling core is written against."""

    def query(self, uri: str, filters: Mapping[str, Any] | None = None) -> RowCursor[dict[str, Any]]:
        ...

    def insert(self, uri: str, fields: Mapping[str, Any]) -> Any:
        ...

    def update(
        self, uri: str, fields: Mapping[str, Any], filters: Mapping[str, Any] | None = None
    ) -> int:
        ...

    def delete(self, uri: str, filters: Mapping[str, Any] | None = None) -> int:
        ...


class SQLRowStore(BaseRepository):
    """Row store backed by SQLAlchemy Core statements on a :class:`DBConnection`.

    Every SQLAlchemy failure is raised as :class:`StoreUnavailableError`.
    Writes are committed immediately; there are no cross-table transactions.
    """

    def query(
        self, uri: str, filters: Mapping[str, Any] | None = None
    ) -> RowCursor[dict[str, Any]]:
        """Return a lazy cursor over the rows addressed by ``uri``.

        Args:
            uri: Collection or scoped URI
            filters: Optional column equality filters

        Returns:
            RowCursor yielding rows as dictionaries
        """
        resolved = resolve_uri(uri)
        conditions = self._conditions(resolved, filters)
        stmt = select(resolved.table)
        if conditions:
            stmt = stmt.where(and_(*conditions))
        return RowCursor(self, stmt.order_by(resolved.table.c.id))

    def insert(self, uri: str, fields: Mapping[str, Any]) -> Any:
        """Insert a row into a collection.

        Args:
            uri: Collection URI (row-scoped URIs are rejected)
            fields: Column values

        Returns:
            Primary key of the new row, or None if the backend did not report one
        """
        resolved = resolve_uri(uri)
        if resolved.row_scoped or resolved.conditions:
            raise UnknownUriError(f"Cannot insert into scoped URI: {uri}")
        self._check_columns(resolved.table, fields)

        result = self._run(insert(resolved.table).values(**fields), commit=True)
        primary_key = getattr(result, "inserted_primary_key", None)
        return primary_key[0] if primary_key else None

    def update(
        self, uri: str, fields: Mapping[str, Any], filters: Mapping[str, Any] | None = None
    ) -> int:
        """Update the rows addressed by ``uri``.

        Returns:
            Number of rows affected
        """
        resolved = resolve_uri(uri)
        self._check_columns(resolved.table, fields)
        conditions = self._conditions(resolved, filters)

        stmt = update(resolved.table).values(**fields)
        if conditions:
            stmt = stmt.where(and_(*conditions))
        return self._rowcount(self._run(stmt, commit=True))

    def delete(self, uri: str, filters: Mapping[str, Any] | None = None) -> int:
        """Delete the rows addressed by ``uri``.

        Returns:
            Number of rows deleted
        """
        resolved = resolve_uri(uri)
        conditions = self._conditions(resolved, filters)

        stmt = delete(resolved.table)
        if conditions:
            stmt = stmt.where(and_(*conditions))
        return self._rowcount(self._run(stmt, commit=True))

    def _run(self, statement: Any, *, commit: bool = False) -> Any:
        try:
            if commit:
                return self._execute_and_commit(statement)
            return self._execute(statement)
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f"Row store operation failed: {e}") from e

    def _scalar_guarded(self, statement: Any) -> Any:
        try:
            return self._scalar(statement)
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f"Row store read failed: {e}") from e

    @staticmethod
    def _check_columns(table: Table, fields: Mapping[str, Any]) -> None:
        unknown = set(fields) - set(table.c.keys())
        if unknown:
            raise ValueError(f"Unknown columns for {table.name}: {sorted(unknown)}")

    def _conditions(
        self, resolved: ResolvedUri, filters: Mapping[str, Any] | None
    ) -> list[Any]:
        conditions = list(resolved.conditions)
        if filters:
            self._check_columns(resolved.table, filters)
            conditions.extend(resolved.table.c[name] == value for name, value in filters.items())
        return conditions
