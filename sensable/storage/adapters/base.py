"""Protocol every storage backend of the row store satisfies."""

from typing import Optional, Protocol, runtime_checkable

from ..base_repository import DBConnection


@runtime_checkable
class DatabaseAdapter(Protocol):
    """A database the row store can run on.

    ``dialect`` is the SQLAlchemy backend name (``"sqlite"``,
    ``"postgresql"``); ``schema`` is only set where the backend has schemas.
    """

    dialect: str
    schema: Optional[str]

    def initialize(self) -> None:
        """Create the scheduled and favourite entry tables if missing. Safe to repeat."""
        ...

    def get_connection(self) -> DBConnection:
        """Open a connection the caller owns and must close."""
        ...
