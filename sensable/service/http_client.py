"""HTTP client for the sensable API with retry on transient errors."""

import time
from logging import Logger
from typing import Any, Optional

import requests


class SensableHttpClient:
    """HTTP client used for all sensable API requests.

    Features:
    - Automatic retry with exponential backoff for transient errors
    - Retry-After header compliance for 429 and 503
    - Centralized error logging
    """

    # Retry configuration
    MAX_RETRIES = 3
    BASE_RETRY_DELAY = 2  # seconds
    MAX_BACKOFF_DELAY = 30  # seconds

    # HTTP status codes that should trigger retry
    RETRYABLE_STATUS_CODES = {429, 502, 503, 504}

    def __init__(self, logger: Logger, enable_retry: bool = True) -> None:
        """Initialize HTTP client.

        Args:
            logger: Logger instance for request/error logging
            enable_retry: Enable automatic retry logic (default: True)
        """
        self.logger = logger
        self.enable_retry = enable_retry

    def _sleep(self, delay: int, *, reason: str) -> None:
        self.logger.debug("Sleeping %s seconds (%s)", delay, reason)
        time.sleep(delay)

    def get(
        self,
        url: str,
        params: Optional[dict[str, Any]] = None,
        timeout: int = 30,
        **kwargs: Any,
    ) -> requests.Response:
        """Execute GET request with retry logic.

        Args:
            url: Request URL
            params: Query parameters
            timeout: Request timeout in seconds
            **kwargs: Additional arguments passed to requests.request

        Returns:
            Response object

        Raises:
            requests.RequestException: After max retries exceeded or non-retryable error
        """
        return self._request_with_retry(
            method="GET",
            url=url,
            params=params,
            timeout=timeout,
            **kwargs,
        )

    def _request_with_retry(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> requests.Response:
        """Execute HTTP request, retrying transient failures.

        Network errors (connection errors, timeouts) and the statuses in
        RETRYABLE_STATUS_CODES are retried; any other HTTP error is raised
        on the first attempt.

        Raises:
            requests.RequestException: After max retries exceeded or non-retryable error
        """
        retry_count = 0

        while True:
            self.logger.debug(
                "HTTP %s %s (attempt %d/%d)",
                method,
                url,
                retry_count + 1,
                self.MAX_RETRIES + 1,
            )

            try:
                response = requests.request(method, url, **kwargs)
            except (requests.ConnectionError, requests.Timeout) as e:
                if not self.enable_retry or retry_count >= self.MAX_RETRIES:
                    self.logger.error(
                        "HTTP %s %s failed: %s (max retries exceeded)", method, url, e
                    )
                    raise

                retry_count += 1
                delay = self._calculate_backoff_delay(retry_count)
                self.logger.warning(
                    "HTTP %s network error: %s (attempt %d/%d), retrying in %d seconds",
                    method,
                    e,
                    retry_count,
                    self.MAX_RETRIES,
                    delay,
                )
                self._sleep(delay, reason="retry after network error")
                continue

            if response.status_code in self.RETRYABLE_STATUS_CODES:
                if self.enable_retry and retry_count < self.MAX_RETRIES:
                    retry_count += 1
                    delay = self._calculate_retry_delay(response, retry_count)
                    self.logger.warning(
                        "HTTP %s %s: %s (attempt %d/%d), retrying in %d seconds",
                        method,
                        response.status_code,
                        response.text[:100],
                        retry_count,
                        self.MAX_RETRIES,
                        delay,
                    )
                    self._sleep(delay, reason=f"retry after HTTP {response.status_code}")
                    continue

                self.logger.error(
                    "HTTP %s failed: %s %s (max retries exceeded)",
                    method,
                    response.status_code,
                    response.text[:200],
                )
            elif response.status_code >= 400:
                self.logger.error(
                    "HTTP %s failed: %s %s",
                    method,
                    response.status_code,
                    response.text[:200],
                )

            response.raise_for_status()
            self.logger.debug("HTTP %s %s: success", method, url)
            return response

    def _calculate_retry_delay(
        self, response: requests.Response, retry_count: int
    ) -> int:
        """Calculate delay before retry from Retry-After or exponential backoff.

        Args:
            response: HTTP response object
            retry_count: Current retry attempt number

        Returns:
            Delay in seconds
        """
        retry_after = response.headers.get("Retry-After")
        if retry_after:
            try:
                return min(int(retry_after), self.MAX_BACKOFF_DELAY)
            except ValueError:
                self.logger.warning(
                    "Invalid Retry-After header: %s, using exponential backoff",
                    retry_after,
                )

        return self._calculate_backoff_delay(retry_count)

    def _calculate_backoff_delay(self, retry_count: int) -> int:
        """Return BASE_RETRY_DELAY * 2^(retry_count-1), capped at MAX_BACKOFF_DELAY."""
        delay = self.BASE_RETRY_DELAY * (2 ** (retry_count - 1))
        return min(delay, self.MAX_BACKOFF_DELAY)
