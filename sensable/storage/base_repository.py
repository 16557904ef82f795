"""Base repository abstractions shared by the storage layer."""

from abc import ABC
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class DBConnection(Protocol):
    """Abstract database connection used by repositories.

    This protocol defines the minimal surface that repositories rely on.
    It mirrors the SQLAlchemy Session API used in the storage layer so
    repositories stay backend-agnostic at call sites.
    """

    def execute(self, statement: Any, parameters: Any | None = None) -> Any:
        """Execute a statement and return a result-like object."""

    def commit(self) -> None:
        """Commit the current transaction."""

    def close(self) -> None:
        """Close the underlying database connection."""


class BaseRepository(ABC):
    """Abstract base repository providing common database operations."""

    def __init__(self, conn: DBConnection):
        """Initialize repository with database connection.

        Args:
            conn: Database connection object implementing :class:`DBConnection`.
        """

        self._conn = conn

    @property
    def conn(self) -> DBConnection:
        """Return the associated database connection abstraction."""

        return self._conn

    def close(self) -> None:
        """Close the underlying database connection, if present."""

        if self._conn:
            self._conn.close()

    def _execute(self, statement: Any, parameters: Any | None = None) -> Any:
        """Execute a statement using the underlying connection."""

        return self._conn.execute(statement, parameters)

    def _execute_and_commit(
        self, statement: Any, parameters: Any | None = None
    ) -> Any:
        """Execute a statement and commit the transaction."""

        result = self._execute(statement, parameters)
        self._conn.commit()
        return result

    def _scalar(self, statement: Any, parameters: Any | None = None) -> Any:
        """Execute a statement and return scalar value.

        Works with SQLAlchemy result objects.
        """

        result = self._execute(statement, parameters)
        if hasattr(result, "scalar"):
            return result.scalar()
        row = result.fetchone()
        return None if row is None else row[0]

    def _rowcount(self, result: Any) -> int:
        """Return rowcount from a result, if available."""

        if hasattr(result, "rowcount"):
            rowcount = result.rowcount
            return 0 if rowcount is None else int(rowcount)
        return 0
