"""Base service with common initialization logic for all services.

Unifies logger setup, optional HTTP client injection and lazy
configuration access.
"""
from __future__ import annotations

from abc import ABC
from logging import Logger
from typing import Optional

from sensable.config import get_config
from sensable.service.http_client import SensableHttpClient


class BaseService(ABC):
    """Base class for all services with common initialization logic.

    Provides:
    - Logger initialization
    - HTTP client injection
    - Config lazy loading property
    """

    def __init__(
        self,
        logger: Logger,
        http_client: Optional[SensableHttpClient] = None,
    ):
        """Initialize base service.

        Args:
            logger: Logger instance for this service
            http_client: Optional HTTP client for services talking to the API
        """
        self.logger = logger
        self.http_client = http_client
        self._config = None

    @property
    def config(self):
        """Lazy-load config if not provided during initialization.

        Returns:
            Application configuration instance from get_config()
        """
        if self._config is None:
            self._config = get_config()
        return self._config
