"""OAuth credential lifecycle for Google Drive, Docs, and Sheets.

The manager holds one google-auth ``Credentials`` object for the process.
It is constructed once by the entry point and handed to the API client,
so every adapter shares the same token source.

Lifecycle: nothing loaded -> loaded from disk (or freshly authorized)
-> refreshed (repeatable) -> invalid once a refresh fails, after which
``gsuite-mcp auth`` must be run again.
"""

import asyncio
import logging
from datetime import timezone
from pathlib import Path

from google.auth.exceptions import RefreshError, TransportError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from gsuite_mcp.auth.models import (
    AuthenticationError,
    AuthErrorCode,
    CredentialStatus,
    OAuthClientConfig,
    StoredCredentials,
)
from gsuite_mcp.auth.token_storage import AUTH_HINT, TokenStorage

logger = logging.getLogger(__name__)

GSUITE_SCOPES = [
    "https://www.googleapis.com/auth/drive.file",
    "https://www.googleapis.com/auth/drive.metadata.readonly",
    "https://www.googleapis.com/auth/documents",
    "https://www.googleapis.com/auth/spreadsheets",
]


class OAuthManager:
    """OAuth authentication manager for the Google Suite APIs.

    Attributes:
        storage: Storage for the credential and client-config files.
        scopes: Scopes requested by the consent flow.

    Example:
        ```python
        manager = OAuthManager()

        # Interactive consent, once per machine
        await manager.perform_full_authentication()

        # Later, before every API call
        credentials = await manager.authenticate()
        headers = {"Authorization": f"Bearer {credentials.token}"}
        ```
    """

    def __init__(
        self,
        storage: TokenStorage | None = None,
        scopes: list[str] | None = None,
    ) -> None:
        """Initialize OAuth manager.

        Args:
            storage: Token storage instance. Creates default if not provided.
            scopes: OAuth scopes. Uses GSUITE_SCOPES if not provided.
        """
        self.storage = storage or TokenStorage()
        self.scopes = scopes or list(GSUITE_SCOPES)
        self._credentials: Credentials | None = None

    @property
    def credentials_path(self) -> Path:
        """Path to the persisted credential file."""
        return self.storage.credentials_path

    @property
    def oauth_path(self) -> Path:
        """Path to the OAuth client-config file."""
        return self.storage.oauth_path

    def _stored_to_credentials(
        self, stored: StoredCredentials, config: OAuthClientConfig
    ) -> Credentials:
        """Convert persisted credentials to google-auth Credentials.

        google-auth compares ``expiry`` against a naive UTC datetime, so the
        timezone is stripped here.
        """
        expiry = stored.expires_at
        return Credentials(
            token=stored.access_token,
            refresh_token=stored.refresh_token,
            id_token=stored.id_token,
            token_uri=config.token_uri,
            client_id=config.client_id,
            client_secret=config.client_secret,
            scopes=stored.scopes or None,
            expiry=expiry.replace(tzinfo=None) if expiry else None,
        )

    def _credentials_to_stored(self, credentials: Credentials) -> StoredCredentials:
        """Convert google-auth Credentials to the persisted shape."""
        expiry_date = None
        if credentials.expiry:
            expires_at = credentials.expiry
            if expires_at.tzinfo is None:
                expires_at = expires_at.replace(tzinfo=timezone.utc)
            expiry_date = int(expires_at.timestamp() * 1000)

        scopes = credentials.granted_scopes or credentials.scopes or []
        id_token = credentials.id_token if isinstance(credentials.id_token, str) else None

        return StoredCredentials(  # nosec B106 - "Bearer" is OAuth token type, not a password
            access_token=credentials.token,
            refresh_token=credentials.refresh_token,
            expiry_date=expiry_date,
            scope=" ".join(scopes) or None,
            token_type="Bearer",
            id_token=id_token,
        )

    def load_saved_credentials(self) -> Credentials | None:
        """Load credentials and client config from disk.

        Returns:
            Credentials, or None if no credential file exists yet (the caller
            should require interactive authorization).

        Raises:
            AuthenticationError: NO_OAUTH_KEYS if the client config is
                missing, LOAD_FAILED if either file is malformed.
        """
        if not self.storage.has_credentials():
            return None

        config = self.storage.load_client_config()
        stored = self.storage.load_credentials()
        if stored is None:
            return None

        self._credentials = self._stored_to_credentials(stored, config)
        logger.debug(f"Loaded credentials from {self.credentials_path}")
        return self._credentials

    async def authenticate(self) -> Credentials:
        """Return usable credentials, refreshing the access token if needed.

        Tokens with more than five minutes left are returned untouched.

        Returns:
            The shared Credentials object.

        Raises:
            AuthenticationError: NO_CREDENTIALS, NO_REFRESH_TOKEN,
                REFRESH_FAILED or SAVE_FAILED.
        """
        credentials = self._credentials or self.load_saved_credentials()
        if credentials is None:
            raise AuthenticationError(
                f"No saved credentials found. {AUTH_HINT}",
                AuthErrorCode.NO_CREDENTIALS,
            )

        if not self._credentials_to_stored(credentials).is_expired():
            return credentials

        if not credentials.refresh_token:
            raise AuthenticationError(
                f"No refresh token available. {AUTH_HINT}",
                AuthErrorCode.NO_REFRESH_TOKEN,
            )

        logger.info("Access token expired or expiring soon, refreshing...")
        try:
            # Run refresh in executor (blocking)
            loop = asyncio.get_event_loop()
            await loop.run_in_executor(None, credentials.refresh, Request())
        except (RefreshError, TransportError) as e:
            raise AuthenticationError(
                "Failed to refresh access token. Your refresh token may have expired. "
                f"{AUTH_HINT}",
                AuthErrorCode.REFRESH_FAILED,
            ) from e

        self.save_credentials(credentials)
        return credentials

    async def perform_full_authentication(self) -> Credentials:
        """Run the browser-based consent flow and persist the result.

        Returns:
            Freshly issued Credentials.

        Raises:
            AuthenticationError: NO_OAUTH_KEYS if the client config is
                missing, AUTH_FAILED if the flow fails, SAVE_FAILED if the
                result can't be written.
        """
        config = self.storage.load_client_config()

        try:
            # Run OAuth flow in executor (it's blocking)
            loop = asyncio.get_event_loop()
            credentials = await loop.run_in_executor(
                None, self._run_oauth_flow, config, self.scopes
            )
        except Exception as e:
            raise AuthenticationError(
                "Failed to complete browser-based authentication. Please try again.",
                AuthErrorCode.AUTH_FAILED,
            ) from e

        self._credentials = credentials
        self.save_credentials(credentials)
        return credentials

    def _run_oauth_flow(self, config: OAuthClientConfig, scopes: list[str]) -> Credentials:
        """Run the installed-app consent flow (blocking).

        Opens the browser and waits for the loopback redirect on a free port.
        """
        flow = InstalledAppFlow.from_client_config(config.to_client_secrets(), scopes=scopes)
        return flow.run_local_server(port=0, open_browser=True)

    def save_credentials(self, credentials: Credentials) -> None:
        """Persist credentials to the credential file.

        Raises:
            AuthenticationError: SAVE_FAILED on I/O error.
        """
        self.storage.save_credentials(self._credentials_to_stored(credentials))

    def get_status(self) -> tuple[CredentialStatus, StoredCredentials | None]:
        """Get the status of the persisted credentials.

        Returns:
            Tuple of (CredentialStatus, StoredCredentials or None).
        """
        status = self.storage.get_status()
        stored = None
        if status in (CredentialStatus.VALID, CredentialStatus.EXPIRED):
            stored = self.storage.load_credentials()
        return (status, stored)
