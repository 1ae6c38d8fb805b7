"""OAuth credential and client-config file storage for gsuite-mcp.

Two JSON files are involved:

- the credential file (``GOOGLE_CREDENTIALS_PATH``, default
  ``~/.google/server-creds.json``) holding the OAuth token, written by
  this package;
- the client-config file (``GOOGLE_OAUTH_PATH``, default
  ``~/.google/oauth.keys.json``), the "installed app" JSON downloaded from
  the Google Cloud Console, read only.

Tokens are stored unencrypted with owner-only permissions.
"""

import json
import logging
import os
from pathlib import Path

from pydantic import ValidationError

from gsuite_mcp.auth.models import (
    AuthenticationError,
    AuthErrorCode,
    CredentialStatus,
    OAuthClientConfig,
    StoredCredentials,
)

logger = logging.getLogger(__name__)

DEFAULT_CREDENTIALS_PATH = Path.home() / ".google" / "server-creds.json"
DEFAULT_OAUTH_PATH = Path.home() / ".google" / "oauth.keys.json"

AUTH_HINT = "Run `gsuite-mcp auth` to authenticate."


def get_credentials_path() -> Path:
    """Get the credential file path from the environment or the default."""
    value = os.environ.get("GOOGLE_CREDENTIALS_PATH")
    return Path(value).expanduser() if value else DEFAULT_CREDENTIALS_PATH


def get_oauth_path() -> Path:
    """Get the OAuth client-config path from the environment or the default."""
    value = os.environ.get("GOOGLE_OAUTH_PATH")
    return Path(value).expanduser() if value else DEFAULT_OAUTH_PATH


class TokenStorage:
    """JSON file storage for OAuth credentials and client config.

    Attributes:
        credentials_path: Path to the persisted token file.
        oauth_path: Path to the OAuth client-config file.

    Example:
        ```python
        storage = TokenStorage()
        creds = storage.load_credentials()
        if creds is None:
            print("Not authenticated yet")
        ```
    """

    def __init__(
        self,
        credentials_path: Path | None = None,
        oauth_path: Path | None = None,
    ) -> None:
        """Initialize storage.

        Args:
            credentials_path: Custom credential file path. Defaults to
                ``GOOGLE_CREDENTIALS_PATH`` or ``~/.google/server-creds.json``.
            oauth_path: Custom client-config path. Defaults to
                ``GOOGLE_OAUTH_PATH`` or ``~/.google/oauth.keys.json``.
        """
        self.credentials_path = credentials_path or get_credentials_path()
        self.oauth_path = oauth_path or get_oauth_path()

    def _ensure_credentials_dir(self) -> None:
        """Create the credential directory with owner-only permissions if needed."""
        creds_dir = self.credentials_path.parent
        if not creds_dir.exists():
            creds_dir.mkdir(parents=True, mode=0o700)

    def has_credentials(self) -> bool:
        """Check whether a credential file exists."""
        return self.credentials_path.exists()

    def has_client_config(self) -> bool:
        """Check whether the OAuth client-config file exists."""
        return self.oauth_path.exists()

    def load_credentials(self) -> StoredCredentials | None:
        """Load the persisted credentials.

        Returns:
            StoredCredentials, or None if no credential file exists yet.

        Raises:
            AuthenticationError: LOAD_FAILED if the file can't be read or parsed.
        """
        if not self.credentials_path.exists():
            return None

        try:
            with open(self.credentials_path) as f:
                data = json.load(f)
            return StoredCredentials.model_validate(data)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            raise AuthenticationError(
                f"Failed to load saved credentials from {self.credentials_path}. {AUTH_HINT}",
                AuthErrorCode.LOAD_FAILED,
            ) from e

    def save_credentials(self, credentials: StoredCredentials) -> None:
        """Write credentials, overwriting any existing file.

        Args:
            credentials: Credentials to persist.

        Raises:
            AuthenticationError: SAVE_FAILED on any filesystem error.
        """
        try:
            self._ensure_credentials_dir()
            with open(self.credentials_path, "w") as f:
                json.dump(credentials.model_dump(exclude_none=True), f, indent=2)
            self.credentials_path.chmod(0o600)
        except OSError as e:
            raise AuthenticationError(
                f"Failed to save credentials to {self.credentials_path}. "
                "Please check file permissions.",
                AuthErrorCode.SAVE_FAILED,
            ) from e

        logger.debug(f"Saved credentials to {self.credentials_path}")

    def load_client_config(self) -> OAuthClientConfig:
        """Load the OAuth client config.

        Raises:
            AuthenticationError: NO_OAUTH_KEYS if the file is missing,
                LOAD_FAILED if it is malformed.
        """
        if not self.oauth_path.exists():
            raise AuthenticationError(
                f"OAuth keys file not found at {self.oauth_path}. "
                "Please set up your OAuth credentials first.",
                AuthErrorCode.NO_OAUTH_KEYS,
            )

        try:
            with open(self.oauth_path) as f:
                data = json.load(f)
            return OAuthClientConfig.from_client_secrets(data)
        except (OSError, ValueError) as e:
            # json.JSONDecodeError and ValidationError are both ValueErrors
            raise AuthenticationError(
                f"Failed to read OAuth keys file at {self.oauth_path}.",
                AuthErrorCode.LOAD_FAILED,
            ) from e

    def get_status(self) -> CredentialStatus:
        """Get the status of the persisted credentials."""
        try:
            stored = self.load_credentials()
        except AuthenticationError:
            return CredentialStatus.INVALID

        if stored is None:
            return CredentialStatus.MISSING

        if stored.is_expired():
            return CredentialStatus.EXPIRED

        return CredentialStatus.VALID
