"""Fetches the latest sample of a feed from the sensable API."""
from __future__ import annotations

from logging import Logger
from typing import Any, Optional
from urllib.parse import quote

from sensable.domain.models import Sample
from sensable.service.base_service import BaseService
from sensable.service.http_client import SensableHttpClient


class SensableApiService(BaseService):
    """Reads sensed feeds from ``GET {api_base_url}/sensed/{feed_id}``.

    The response carries the feed's recent readings in a ``samples`` array;
    the one with the highest timestamp is the feed's latest sample.
    """

    def __init__(
        self,
        logger: Logger,
        http_client: Optional[SensableHttpClient] = None,
        base_url: Optional[str] = None,
        timeout: Optional[int] = None,
    ):
        """Initialize API service.

        Args:
            logger: Logger instance
            http_client: HTTP client (created if None)
            base_url: API base URL (config ``api_base_url`` if None)
            timeout: Request timeout in seconds (config ``http_timeout`` if None)
        """
        super().__init__(logger, http_client or SensableHttpClient(logger))
        self._base_url = base_url.rstrip("/") if base_url else None
        self._timeout = timeout

    @property
    def base_url(self) -> str:
        return self._base_url or self.config.api_base_url

    @property
    def timeout(self) -> int:
        return self._timeout or self.config.http_timeout

    def fetch_latest(self, feed_id: str) -> Sample | None:
        """Fetch the latest sample of a feed.

        Args:
            feed_id: Remote sensor feed identifier

        Returns:
            Latest Sample, or None if the feed has no samples yet

        Raises:
            requests.RequestException: If the request fails
            ValueError: If the response payload is malformed
        """
        url = f"{self.base_url}/sensed/{quote(feed_id, safe='')}"
        response = self.http_client.get(url, timeout=self.timeout)
        return self._latest_sample(feed_id, response.json())

    @staticmethod
    def _latest_sample(feed_id: str, payload: Any) -> Sample | None:
        if not isinstance(payload, dict):
            raise ValueError(f"Unexpected payload for feed {feed_id}: {type(payload).__name__}")

        samples = payload.get("samples") or []
        if not samples:
            return None

        try:
            latest = max(samples, key=lambda item: int(item["timestamp"]))
            return Sample(
                value=float(latest["value"]),
                timestamp=int(latest["timestamp"]),
                data=latest.get("data"),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Malformed sample for feed {feed_id}: {e}") from e
