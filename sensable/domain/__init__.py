"""Domain models and enums."""
from .models import FavouriteEntry, PendingState, Sample, ScheduledEntry

__all__ = ["FavouriteEntry", "PendingState", "Sample", "ScheduledEntry"]
