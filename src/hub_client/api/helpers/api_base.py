import logging
import threading
from typing import Any, Dict, List, Optional

import requests

from ...config import ProxyInfo
from ...exceptions import (
    ApiError,
    NetworkError,
    ConfigurationError,
    AuthenticationError,
)
from .links import get_href, find_link, get_link

# Assume logger is configured in main.py
logger = logging.getLogger("hub-client")

DEFAULT_PAGE_SIZE = 100


class APIBase:
    """
    Base class with helper methods for Hub REST API interactions.
    Contains methods that handle the "how" of API operations: authentication,
    GET requests, paging and link discovery.
    """

    def __init__(
        self,
        hub_url: str,
        api_token: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        proxy_info: Optional[ProxyInfo] = None,
        timeout: int = 120,
    ):
        """
        Initialize the base Hub API client with authentication details.

        Args:
            hub_url: Base URL of the Hub (e.g. https://hub.example.com)
            api_token: API token; preferred over username/password when both are given
            username: Hub username for form login
            password: Hub password for form login
            proxy_info: Optional validated proxy settings
            timeout: Request timeout in seconds
        """
        base_url = hub_url.rstrip('/')
        if base_url.endswith('/api'):
            base_url = base_url[:-len('/api')]
            print(f"Warning: Hub URL adjusted to: {base_url}")
        self.hub_url = base_url
        self.api_token = api_token
        self.username = username
        self.password = password
        self.timeout = timeout
        self.session = requests.Session()  # Use a session for connection reuse
        self.session.trust_env = False  # Do not trust .netrc file
        if proxy_info is not None and proxy_info.should_use_proxy(self.hub_url):
            self.session.proxies.update(proxy_info.to_requests_proxies())
        self._auth_headers: Dict[str, str] = {}
        self._authenticated = False
        self._auth_lock = threading.Lock()

## Authentication
    def _ensure_authenticated(self) -> None:
        if self._authenticated:
            return
        with self._auth_lock:
            if not self._authenticated:
                self._authenticate()
                self._authenticated = True

    def _authenticate(self) -> None:
        """
        Obtain session credentials from the Hub.

        Raises:
            ConfigurationError: If neither an API token nor username/password is configured
            AuthenticationError: If the Hub rejects the credentials
            NetworkError: For connection issues
        """
        if self.api_token:
            url = f"{self.hub_url}/api/tokens/authenticate"
            logger.debug("Authenticating with API token at %s", url)
            response = self._request(
                "POST", url, headers={"Authorization": f"token {self.api_token}", "Accept": "application/json"}
            )
            if response.status_code in (401, 403):
                raise AuthenticationError("Invalid or expired API token", details={"status_code": response.status_code})
            if response.status_code >= 400:
                raise AuthenticationError(
                    f"Token authentication failed with HTTP {response.status_code}",
                    details={"status_code": response.status_code},
                )
            try:
                bearer_token = response.json().get("bearerToken")
            except (ValueError, AttributeError):
                bearer_token = None
            if not bearer_token:
                raise AuthenticationError("Token authentication response did not contain a bearer token")
            self._auth_headers = {"Authorization": f"Bearer {bearer_token}"}
        elif self.username and self.password:
            url = f"{self.hub_url}/j_security_check"
            logger.debug("Authenticating user '%s' at %s", self.username, url)
            response = self._request(
                "POST", url, data={"j_username": self.username, "j_password": self.password}
            )
            if response.status_code >= 400:
                raise AuthenticationError(
                    "Invalid username or password", details={"status_code": response.status_code}
                )
            csrf_token = response.headers.get("X-CSRF-TOKEN")
            self._auth_headers = {"X-CSRF-TOKEN": csrf_token} if csrf_token else {}
        else:
            raise ConfigurationError("Either an API token or a username and password must be configured")
        logger.debug("Authenticated against %s", self.hub_url)

## General API Operations
    def _absolute_url(self, url: str) -> str:
        if url.startswith("http://") or url.startswith("https://"):
            return url
        return f"{self.hub_url}/{url.lstrip('/')}"

    def _request(self, method: str, url: str, **kwargs) -> requests.Response:
        """
        Sends a request through the session, translating transport failures.

        Raises:
            NetworkError: For connection issues, timeouts, etc.
        """
        try:
            return self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.ConnectionError as e:
            logger.error("Hub connection failed: %s", e, exc_info=True)
            raise NetworkError("Failed to connect to the Hub", details={"error": str(e), "url": url})
        except requests.exceptions.Timeout as e:
            logger.error("Hub request timed out: %s", e, exc_info=True)
            raise NetworkError("Request to the Hub timed out", details={"error": str(e), "url": url})
        except requests.exceptions.RequestException as e:
            raise NetworkError(f"Network error while calling the Hub: {e}", details={"url": url}) from e

    def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None, media_type: Optional[str] = None) -> Any:
        """
        Sends a GET request and returns the parsed JSON body.

        Args:
            url: Absolute URL or path relative to the Hub URL
            params: Optional query parameters
            media_type: Accept header to send (defaults to application/json)

        Returns:
            The parsed JSON document

        Raises:
            AuthenticationError: For HTTP 401
            ApiError: For HTTP errors (code "not_found" for 404) and unparseable bodies
            NetworkError: For connection issues
        """
        self._ensure_authenticated()
        url = self._absolute_url(url)
        headers = {"Accept": media_type or "application/json"}
        headers.update(self._auth_headers)
        logger.debug("GET %s params=%s", url, params)

        response = self._request("GET", url, headers=headers, params=params)
        logger.debug("Response Status Code: %s", response.status_code)

        if response.status_code == 401:
            raise AuthenticationError("The Hub rejected the session credentials", details={"url": url})
        if response.status_code == 404:
            raise ApiError(f"Resource not found: {url}", code="not_found", details={"url": url, "status_code": 404})
        if response.status_code >= 400:
            text = response.text[:500] if hasattr(response, 'text') else ''
            raise ApiError(
                f"Hub returned HTTP {response.status_code} for {url}",
                code="http_error",
                details={"url": url, "status_code": response.status_code, "response_text": text},
            )

        try:
            return response.json()
        except ValueError as e:
            text = response.text[:500] if hasattr(response, 'text') else ''
            logger.error("Failed to decode JSON response from %s: %s", url, text)
            raise ApiError(
                f"Invalid JSON received from the Hub: {e}",
                code="invalid_json",
                details={"url": url, "response_text": text},
            )

    def _get_all_items(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        media_type: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        Fetches every item of a paged Hub collection (``totalCount`` / ``items``).

        Raises:
            ApiError: If a page does not have the expected shape
        """
        all_items: List[Dict[str, Any]] = []
        offset = 0
        while True:
            page_params = dict(params or {})
            page_params.update({"offset": offset, "limit": page_size})
            page = self._get_json(url, params=page_params, media_type=media_type)
            if not isinstance(page, dict):
                raise ApiError(f"Unexpected page format from {url}", code="invalid_page", details={"page": page})

            items = page.get("items") or []
            all_items.extend(items)
            total_count = int(page.get("totalCount", len(all_items)))
            logger.debug("Fetched %d/%d items from %s", len(all_items), total_count, url)

            offset += page_size
            if not items or len(all_items) >= total_count:
                return all_items

## Link discovery
    @staticmethod
    def get_href(resource: Dict[str, Any]) -> Optional[str]:
        return get_href(resource)

    @staticmethod
    def find_link(resource: Dict[str, Any], rel: str) -> Optional[str]:
        return find_link(resource, rel)

    @staticmethod
    def get_link(resource: Dict[str, Any], rel: str) -> str:
        return get_link(resource, rel)
