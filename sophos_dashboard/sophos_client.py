import logging
import time
from typing import Any, Dict, List, Optional

import requests
import urllib3

from .cache_manager import CacheManager
from .config import Settings, normalize_region
from .errors import AuthError, FetchError
from .models import Credentials

logger = logging.getLogger(__name__)

ENDPOINTS_PATH = "/endpoint/v1/endpoints"


def _api_base_url(region: str) -> str:
    try:
        region = normalize_region(region)
    except RuntimeError as exc:
        raise FetchError(str(exc)) from exc
    return f"https://api-{region}.central.sophos.com"


class SophosClient:
    """Minimal Sophos Central client for retrieving the managed endpoint inventory."""

    def __init__(
        self,
        settings: Settings,
        cache_manager: Optional[CacheManager] = None,
        session: Optional[requests.Session] = None,
        page_delay: float = 0.1,
    ):
        self.token_url = settings.token_url
        self.timeout = settings.request_timeout
        self.page_size = settings.page_size
        self.verify_ssl = settings.verify_ssl
        self.cache_manager = cache_manager
        self.page_delay = page_delay

        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})

        if not self.verify_ssl:
            # disable insecure HTTPS warnings (intercepting proxies)
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    def get_access_token(self, credentials: Credentials) -> str:
        """Exchange client credentials for a bearer token. Not retried."""
        logger.info("Requesting Sophos access token for client %s", credentials.client_id)
        try:
            resp = self.session.post(
                self.token_url,
                data={
                    "grant_type": "client_credentials",
                    "client_id": credentials.client_id,
                    "client_secret": credentials.client_secret,
                    "scope": "token",
                },
                verify=self.verify_ssl,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise AuthError(f"Token request failed: {exc}") from exc

        if not 200 <= resp.status_code < 300:
            raise AuthError(f"Authentication failed: HTTP {resp.status_code}")

        try:
            body = resp.json()
        except ValueError as exc:
            raise AuthError("Failed to parse token response") from exc

        token = body.get("access_token") if isinstance(body, dict) else None
        if not isinstance(token, str) or not token:
            raise AuthError("Token response did not contain an access_token")

        logger.info(
            "Successfully authenticated with Sophos Central (token_type=%s, expires_in=%s)",
            body.get("token_type"),
            body.get("expires_in"),
        )
        return token

    def _get_page(self, url: str, params: Dict[str, Any], headers: Dict[str, str], page: int) -> Dict[str, Any]:
        try:
            resp = self.session.get(
                url,
                params=params,
                headers=headers,
                verify=self.verify_ssl,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise FetchError(f"Request failed on page {page}: {exc}") from exc

        if not 200 <= resp.status_code < 300:
            raise FetchError(f"API request failed on page {page} ({resp.status_code}): {resp.text[:200]}")

        try:
            data = resp.json()
        except ValueError as exc:
            raise FetchError(f"Failed to parse response on page {page}") from exc

        if not isinstance(data, dict):
            raise FetchError(f"Unexpected response format on page {page}: {type(data).__name__}")
        return data

    def fetch_endpoints(self, access_token: str, credentials: Credentials) -> List[Dict[str, Any]]:
        """
        Return the raw endpoint inventory for the tenant as one flat list.

        Pages are followed via pages.nextKey -> pageFromKey until the API
        stops returning a next key or a page comes back empty. Results are
        cached per tenant.
        """
        cache_key = f"sophos_endpoints_{credentials.tenant_id}"

        if self.cache_manager:
            cached = self.cache_manager.get(cache_key)
            if cached is not None:
                logger.info("Using cached endpoint inventory (%s endpoints)", len(cached))
                return cached

        url = f"{_api_base_url(credentials.region)}{ENDPOINTS_PATH}"
        headers = {
            "Authorization": f"Bearer {access_token}",
            "X-Tenant-ID": credentials.tenant_id,
        }

        logger.info("Fetching endpoint inventory from %s (page size %s)", url, self.page_size)
        items: List[Dict[str, Any]] = []
        page_key: Optional[str] = None
        page = 0

        while True:
            page += 1
            params: Dict[str, Any] = {"pageSize": self.page_size}
            if page_key:
                params["pageFromKey"] = page_key

            data = self._get_page(url, params, headers, page)
            page_items = data.get("items") or []
            if not isinstance(page_items, list):
                raise FetchError(f"Unexpected 'items' value on page {page}")

            if not page_items:
                logger.info("Page %s returned no endpoints, stopping pagination", page)
                break

            items.extend(page_items)
            logger.debug("Page %s: %s endpoints (running total %s)", page, len(page_items), len(items))

            pages = data.get("pages")
            next_key = pages.get("nextKey") if isinstance(pages, dict) else None
            if not isinstance(next_key, str) or not next_key:
                break
            page_key = next_key

            if self.page_delay:
                time.sleep(self.page_delay)

        logger.info("Pagination complete: %s endpoints across %s pages", len(items), page)

        if self.cache_manager:
            self.cache_manager.set(cache_key, items)

        return items
