"""Service layer for application logic."""
from .http_client import SensableHttpClient
from .sensable_api_service import SensableApiService
from .sync_service import SensableSyncService

__all__ = [
    "SensableApiService",
    "SensableHttpClient",
    "SensableSyncService",
]
