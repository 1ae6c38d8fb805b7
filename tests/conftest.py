"""Shared pytest fixtures for gsuite-mcp tests.

This module provides reusable fixtures for testing credential storage, the
OAuth manager, and the Google API adapters against a mocked HTTP transport.
"""

import json
from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone
from pathlib import Path
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
import pytest_asyncio

from gsuite_mcp.auth.models import StoredCredentials
from gsuite_mcp.services.client import GoogleApiClient


def epoch_ms(delta: timedelta) -> int:
    """Milliseconds since the epoch, ``delta`` from now."""
    return int((datetime.now(timezone.utc) + delta).timestamp() * 1000)


# =============================================================================
# Credential Fixtures
# =============================================================================


@pytest.fixture
def valid_credentials() -> StoredCredentials:
    """Credentials whose access token is good for another hour."""
    return StoredCredentials(
        access_token="test_access_token_abc123",
        refresh_token="test_refresh_token_xyz789",
        expiry_date=epoch_ms(timedelta(hours=1)),
        scope=(
            "https://www.googleapis.com/auth/drive.file "
            "https://www.googleapis.com/auth/documents "
            "https://www.googleapis.com/auth/spreadsheets"
        ),
        token_type="Bearer",
    )


@pytest.fixture
def expiring_credentials() -> StoredCredentials:
    """Credentials whose access token expires in two minutes."""
    return StoredCredentials(
        access_token="expiring_access_token",
        refresh_token="test_refresh_token",
        expiry_date=epoch_ms(timedelta(minutes=2)),
        scope="https://www.googleapis.com/auth/drive.file",
    )


@pytest.fixture
def client_secrets() -> dict[str, Any]:
    """Downloaded "installed app" client-secrets JSON."""
    return {
        "installed": {
            "client_id": "test-client-id.apps.googleusercontent.com",
            "client_secret": "test-client-secret",  # pragma: allowlist secret
            "redirect_uris": ["http://localhost"],
            "auth_uri": "https://accounts.google.com/o/oauth2/auth",
            "token_uri": "https://oauth2.googleapis.com/token",
        }
    }


# =============================================================================
# Storage Fixtures
# =============================================================================


@pytest.fixture
def temp_google_dir(tmp_path: Path) -> Path:
    """Create a temporary directory standing in for ~/.google."""
    google_dir = tmp_path / ".google"
    google_dir.mkdir(parents=True, mode=0o700)
    return google_dir


@pytest.fixture
def credentials_path(temp_google_dir: Path) -> Path:
    return temp_google_dir / "server-creds.json"


@pytest.fixture
def oauth_path(temp_google_dir: Path, client_secrets: dict[str, Any]) -> Path:
    """Path to a client-config file that exists."""
    path = temp_google_dir / "oauth.keys.json"
    path.write_text(json.dumps(client_secrets))
    return path


@pytest.fixture
def token_storage(credentials_path: Path, oauth_path: Path):
    """Create a TokenStorage instance with temporary files."""
    from gsuite_mcp.auth.token_storage import TokenStorage

    return TokenStorage(credentials_path=credentials_path, oauth_path=oauth_path)


@pytest.fixture
def oauth_manager(token_storage):
    """Create an OAuthManager with temporary storage."""
    from gsuite_mcp.auth.oauth_manager import OAuthManager

    return OAuthManager(storage=token_storage)


# =============================================================================
# Google API Mocks
# =============================================================================


class FakeGoogleApi:
    """Routes requests made through ``httpx.MockTransport``.

    Responses are registered per (method, path). Registering the same route
    more than once queues the responses; the last one is then repeated.
    Unrouted requests get a Google-style 404.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], list[dict[str, Any]]] = {}
        self.requests: list[httpx.Request] = []

    def add(
        self,
        method: str,
        path: str,
        json_data: Any = None,
        status_code: int = 200,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        response: dict[str, Any] = {"status_code": status_code, "headers": headers}
        if content is not None:
            response["content"] = content
        else:
            response["json"] = json_data
        self.routes.setdefault((method, path), []).append(response)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(
                404,
                json={
                    "error": {
                        "code": 404,
                        "message": f"No route for {request.method} {request.url.path}",
                    }
                },
            )
        response = queue.pop(0) if len(queue) > 1 else queue[0]
        return httpx.Response(**response)

    def sent(self, method: str, path: str) -> list[httpx.Request]:
        """Requests sent to a route, in order."""
        return [r for r in self.requests if r.method == method and r.url.path == path]

    @staticmethod
    def body(request: httpx.Request) -> Any:
        return json.loads(request.content)


@pytest.fixture
def fake_api() -> FakeGoogleApi:
    return FakeGoogleApi()


@pytest.fixture
def mock_manager() -> MagicMock:
    """OAuthManager stand-in that always hands out a valid token."""
    manager = MagicMock()
    manager.authenticate = AsyncMock(return_value=SimpleNamespace(token="mock_access_token"))
    return manager


@pytest_asyncio.fixture
async def api_client(
    fake_api: FakeGoogleApi, mock_manager: MagicMock
) -> AsyncGenerator[GoogleApiClient, None]:
    """GoogleApiClient whose HTTP traffic goes to ``fake_api``."""
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(fake_api.handler))
    client = GoogleApiClient(mock_manager, http_client=http_client)
    yield client
    await client.close()
