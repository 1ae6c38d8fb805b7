"""Data models for OAuth credentials and client configuration.

The credential file mirrors the OAuth token JSON shape written by
Google's client libraries (``access_token``, ``refresh_token``,
``expiry_date`` in epoch milliseconds, space-separated ``scope``), so
files produced by other tools load unchanged.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

# Refresh when the access token is this close to expiry
EXPIRY_BUFFER_SECONDS = 5 * 60

GOOGLE_AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"  # nosec B105


class CredentialStatus(str, Enum):
    """State of the persisted credential file."""

    VALID = "valid"
    EXPIRED = "expired"
    MISSING = "missing"
    INVALID = "invalid"


class AuthErrorCode(str, Enum):
    """Failure kinds raised by the credential store and auth manager."""

    NO_OAUTH_KEYS = "NO_OAUTH_KEYS"
    NO_CREDENTIALS = "NO_CREDENTIALS"
    REFRESH_FAILED = "REFRESH_FAILED"
    NO_REFRESH_TOKEN = "NO_REFRESH_TOKEN"
    SAVE_FAILED = "SAVE_FAILED"
    LOAD_FAILED = "LOAD_FAILED"
    AUTH_FAILED = "AUTH_FAILED"


class AuthenticationError(Exception):
    """Raised when credentials cannot be loaded, refreshed, or saved.

    Attributes:
        code: Machine-readable failure kind.
    """

    def __init__(self, message: str, code: AuthErrorCode) -> None:
        super().__init__(message)
        self.code = code

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.args[0]}"


class StoredCredentials(BaseModel):
    """Persisted OAuth token.

    Attributes:
        access_token: Bearer token for API requests.
        refresh_token: Long-lived token used to obtain new access tokens.
        expiry_date: Access token expiry in milliseconds since the epoch.
        scope: Space-separated granted scopes.
        token_type: Token type, always "Bearer" for Google.
        id_token: OpenID Connect ID token, if one was issued.
    """

    access_token: str = Field(..., description="OAuth access token")
    refresh_token: str | None = Field(default=None, description="OAuth refresh token")
    expiry_date: int | None = Field(default=None, description="Expiry in epoch milliseconds")
    scope: str | None = Field(default=None, description="Space-separated scopes")
    token_type: str = Field(default="Bearer", description="Token type")
    id_token: str | None = Field(default=None, description="OpenID Connect ID token")

    model_config = {"extra": "ignore"}

    @property
    def expires_at(self) -> datetime | None:
        """Expiry as a timezone-aware UTC datetime, or None if unknown."""
        if self.expiry_date is None:
            return None
        return datetime.fromtimestamp(self.expiry_date / 1000, tz=timezone.utc)

    @property
    def scopes(self) -> list[str]:
        """Granted scopes as a list."""
        return self.scope.split() if self.scope else []

    def is_expired(self, buffer_seconds: int = EXPIRY_BUFFER_SECONDS) -> bool:
        """Check whether the access token is expired or about to expire.

        A token without a known expiry is treated as expired.

        Args:
            buffer_seconds: Seconds before the real expiry at which the
                token is already considered expired.

        Returns:
            True if the token expires within ``buffer_seconds``.
        """
        if self.expiry_date is None:
            return True
        now_ms = datetime.now(timezone.utc).timestamp() * 1000
        return self.expiry_date <= now_ms + buffer_seconds * 1000


class OAuthClientConfig(BaseModel):
    """OAuth client identity from a downloaded client-secrets file."""

    client_id: str
    client_secret: str
    redirect_uris: list[str] = Field(default_factory=list)
    auth_uri: str = GOOGLE_AUTH_URI
    token_uri: str = GOOGLE_TOKEN_URI

    model_config = {"frozen": True, "extra": "ignore"}

    @classmethod
    def from_client_secrets(cls, data: dict[str, Any]) -> "OAuthClientConfig":
        """Build from the Google Cloud Console JSON shape.

        Accepts both ``{"installed": {...}}`` and ``{"web": {...}}``.

        Raises:
            ValueError: If neither client type key is present.
        """
        for client_type in ("installed", "web"):
            if client_type in data:
                return cls.model_validate(data[client_type])
        raise ValueError("Client secrets must contain an 'installed' or 'web' section")

    def to_client_secrets(self) -> dict[str, Any]:
        """Return the ``installed`` client-secrets shape used by the consent flow."""
        return {"installed": self.model_dump()}
