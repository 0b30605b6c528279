import logging
from typing import Optional

import requests

from .cache_manager import CacheManager
from .config import Settings
from .credentials import CredentialStore
from .errors import CredentialsMissing, DashboardError
from .mock_data import MOCK_ENDPOINTS
from .models import Degraded, EndpointDataResult, Mock, Ok
from .normalizer import deduplicate_endpoints, normalize_endpoints
from .sophos_client import SophosClient

logger = logging.getLogger(__name__)


class EndpointService:
    """
    Orchestrates one fetch cycle: credentials -> token -> inventory -> normalize -> dedupe.

    Every failure is turned into a fallback result carrying the sample
    dataset; nothing raises to the caller. Not safe for overlapping calls.
    """

    def __init__(
        self,
        settings: Settings,
        store: Optional[CredentialStore] = None,
        client: Optional[SophosClient] = None,
        cache_manager: Optional[CacheManager] = None,
    ):
        self.settings = settings
        self.cache_manager = cache_manager or CacheManager(
            cache_dir=settings.cache_dir,
            ttl_hours=settings.cache_ttl_hours,
        )
        self.store = store or CredentialStore(settings.secrets_file, default_region=settings.default_region)
        self.client = client or SophosClient(settings, cache_manager=self.cache_manager)

    def _fetch_live(self) -> Ok:
        credentials = self.store.load()
        if credentials is None:
            raise CredentialsMissing(f"No Sophos credentials found at {self.store.path}")

        token = self.client.get_access_token(credentials)
        raw_items = self.client.fetch_endpoints(token, credentials)

        endpoints = normalize_endpoints(raw_items)
        unique = deduplicate_endpoints(endpoints)
        if len(unique) != len(endpoints):
            logger.warning("%s duplicate endpoints removed", len(endpoints) - len(unique))

        logger.info("Successfully fetched %s endpoints from Sophos Central", len(unique))
        return Ok(data=tuple(unique))

    def get_endpoint_data(self) -> EndpointDataResult:
        if self.settings.use_mock_data:
            logger.info("Using mock data (forced by USE_MOCK_DATA)")
            return Mock(data=MOCK_ENDPOINTS, reason="Mock data forced by configuration")

        logger.info("Attempting to fetch data from Sophos Central API...")
        try:
            return self._fetch_live()
        except CredentialsMissing as exc:
            logger.info("%s; using mock data", exc)
            return Mock(data=MOCK_ENDPOINTS, reason=str(exc))
        except (DashboardError, requests.RequestException) as exc:
            logger.error("Failed to fetch from Sophos API, falling back to mock data: %s", exc)
            return Degraded(data=MOCK_ENDPOINTS, reason=str(exc) or type(exc).__name__)

    def clear_cache(self) -> bool:
        try:
            status = self.cache_manager.clear()
        except DashboardError as exc:
            logger.error("Error clearing cache: %s", exc)
            return False
        logger.info("%s", status)
        return True
