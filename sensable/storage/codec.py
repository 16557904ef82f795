"""Conversion between domain entries and row store field/value mappings.

All functions here are pure: they never touch the store.
"""

from __future__ import annotations

import json
from typing import Any, Mapping

from ..domain.models import FavouriteEntry, PendingState, Sample, ScheduledEntry


def encode_sample(sample: Sample | None) -> str | None:
    """Encode a sample as a compact JSON string for the ``sample`` column."""
    if sample is None:
        return None
    payload: dict[str, Any] = {"value": sample.value, "timestamp": sample.timestamp}
    if sample.data is not None:
        payload["data"] = sample.data
    return json.dumps(payload, separators=(",", ":"))


def decode_sample(raw: str | None) -> Sample | None:
    """Decode the ``sample`` column back into a :class:`Sample`."""
    if not raw:
        return None
    payload = json.loads(raw)
    return Sample(
        value=payload["value"],
        timestamp=int(payload["timestamp"]),
        data=payload.get("data"),
    )


def serialize_scheduled_entry(entry: ScheduledEntry) -> dict[str, Any]:
    """Return the column values of a scheduled entry.

    The row id is left out: it is assigned on insert and addressed through
    the row URI on update.
    """
    return {
        "feed_id": entry.feed_id,
        "name": entry.name,
        "unit": entry.unit,
        "sample": encode_sample(entry.sample),
        "pending": int(entry.pending),
    }


def deserialize_scheduled_entry(row: Mapping[str, Any]) -> ScheduledEntry:
    return ScheduledEntry(
        id=row["id"],
        feed_id=row["feed_id"],
        name=row.get("name"),
        unit=row.get("unit"),
        sample=decode_sample(row.get("sample")),
        pending=PendingState(int(row["pending"] or 0)),
    )


def serialize_favourite_entry(favourite: FavouriteEntry) -> dict[str, Any]:
    """Return all column values of a favourite entry."""
    return {
        "feed_id": favourite.feed_id,
        "name": favourite.name,
        "unit": favourite.unit,
        "sample": encode_sample(favourite.sample),
    }


def serialize_favourite_sample(favourite: FavouriteEntry) -> dict[str, Any]:
    """Return only the feed id and sample of a favourite entry.

    Used when refreshing a favourite so its other columns stay untouched.
    """
    return {
        "feed_id": favourite.feed_id,
        "sample": encode_sample(favourite.sample),
    }


def deserialize_favourite_entry(row: Mapping[str, Any]) -> FavouriteEntry:
    return FavouriteEntry(
        favourite_id=row.get("id"),
        feed_id=row["feed_id"],
        name=row.get("name"),
        unit=row.get("unit"),
        sample=decode_sample(row.get("sample")),
    )
