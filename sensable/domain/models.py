"""Domain models for the sensable scheduler."""
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional


class PendingState(IntEnum):
    """Pending flag of a scheduled entry.

    Stored as 0/1 in the ``pending`` column:
    - IDLE: No fetch cycle is expected for the entry
    - PENDING: A fetch-and-update cycle is in flight for the entry
    """
    IDLE = 0
    PENDING = 1


@dataclass
class Sample:
    """One reading from a sensor feed."""
    value: float
    timestamp: int  # Epoch milliseconds
    data: Optional[str] = None  # Opaque payload attached by the feed


@dataclass
class ScheduledEntry:
    """A feed the user asked to refresh in the background."""
    feed_id: str  # Remote sensor feed identifier, not unique across entries
    sample: Optional[Sample] = None
    pending: PendingState = PendingState.IDLE
    name: Optional[str] = None
    unit: Optional[str] = None

    # Database fields
    id: Optional[int] = None  # Assigned by the row store on insert

    @property
    def is_pending(self) -> bool:
        return self.pending == PendingState.PENDING


@dataclass
class FavouriteEntry:
    """A feed pinned as favourite, holding a denormalized copy of its sample."""
    feed_id: str  # At most one favourite per feed
    sample: Optional[Sample] = None
    name: Optional[str] = None
    unit: Optional[str] = None

    # Database fields
    favourite_id: Optional[int] = None
