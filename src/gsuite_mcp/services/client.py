"""Authenticated HTTP access to the Google REST APIs.

All adapters share one ``GoogleApiClient``: one connection pool and one
``OAuthManager`` supplying bearer tokens.
"""

import logging
from typing import Any

import httpx

from gsuite_mcp.auth import OAuthManager

logger = logging.getLogger(__name__)

# Google API base URLs
DRIVE_API_BASE = "https://www.googleapis.com/drive/v3"
DRIVE_UPLOAD_BASE = "https://www.googleapis.com/upload/drive/v3"
DOCS_API_BASE = "https://docs.googleapis.com/v1"
SHEETS_API_BASE = "https://sheets.googleapis.com/v4"


class GoogleApiClient:
    """Bearer-token HTTP client for Google APIs.

    Attributes:
        manager: OAuthManager providing access tokens.
    """

    def __init__(
        self,
        manager: OAuthManager,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            manager: OAuthManager used to obtain (and refresh) tokens.
            http_client: Preconfigured httpx client. A pooled HTTP/2 client is
                created lazily if not provided.
        """
        self.manager = manager
        self._http_client = http_client

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Get or create shared HTTP client with connection pooling.

        Returns:
            Shared httpx.AsyncClient instance.
        """
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                http2=True,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
                timeout=httpx.Timeout(30.0, connect=10.0),
            )
        return self._http_client

    async def close(self) -> None:
        """Close the shared HTTP client and release resources."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def _get_access_token(self) -> str:
        """Get a valid access token, refreshing if necessary.

        Raises:
            AuthenticationError: If no usable credentials are available.
        """
        credentials = await self.manager.authenticate()
        return credentials.token

    async def request(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        json_data: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Make an authenticated request and decode the JSON response.

        Args:
            method: HTTP method (GET, POST, etc.).
            url: Full URL to request.
            params: Optional query parameters.
            json_data: Optional JSON body data.

        Returns:
            JSON response as a dictionary (empty for empty bodies).

        Raises:
            httpx.HTTPStatusError: If the request fails.
        """
        response = await self.raw_request(
            method,
            url,
            params=params,
            json_data=json_data,
            headers={"Accept": "application/json"},
        )
        if not response.content:
            return {}
        result: dict[str, Any] = response.json()
        return result

    async def raw_request(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        json_data: dict[str, Any] | None = None,
        content: bytes | str | None = None,
        headers: dict[str, str] | None = None,
        timeout: float = 30.0,
    ) -> httpx.Response:
        """Make an authenticated request returning the raw response.

        Args:
            method: HTTP method (GET, POST, etc.).
            url: Full URL to request.
            params: Optional query parameters. None values are dropped.
            json_data: Optional JSON body data.
            content: Optional raw body content.
            headers: Optional additional headers.
            timeout: Request timeout in seconds.

        Returns:
            Raw httpx.Response object.

        Raises:
            httpx.HTTPStatusError: If the request fails.
        """
        access_token = await self._get_access_token()
        client = await self._get_http_client()

        request_headers = {"Authorization": f"Bearer {access_token}"}
        if headers:
            request_headers.update(headers)

        if params:
            params = {k: v for k, v in params.items() if v is not None}

        logger.debug(f"{method} {url}")
        response = await client.request(
            method=method,
            url=url,
            params=params,
            json=json_data,
            content=content,
            headers=request_headers,
            timeout=timeout,
        )
        response.raise_for_status()
        return response
