"""Storage layer exceptions."""


class StoreUnavailableError(RuntimeError):
    """A CRUD call to the row store failed outright.

    Not retried by the storage layer; callers own retry and backoff.
    """


class UnknownUriError(ValueError):
    """A row store URI does not name a known collection or row scope."""
