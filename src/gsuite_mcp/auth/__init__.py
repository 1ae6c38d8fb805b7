"""OAuth authentication for gsuite-mcp.

Quick Start:
    ```python
    from gsuite_mcp.auth import OAuthManager

    manager = OAuthManager()

    # Interactive consent (writes the credential file)
    await manager.perform_full_authentication()

    # Usable credentials, refreshed when close to expiry
    credentials = await manager.authenticate()
    ```
"""

from gsuite_mcp.auth.models import (
    AuthenticationError,
    AuthErrorCode,
    CredentialStatus,
    OAuthClientConfig,
    StoredCredentials,
)
from gsuite_mcp.auth.oauth_manager import GSUITE_SCOPES, OAuthManager
from gsuite_mcp.auth.token_storage import AUTH_HINT, TokenStorage

__all__ = [
    "OAuthManager",
    "TokenStorage",
    "StoredCredentials",
    "OAuthClientConfig",
    "CredentialStatus",
    "AuthenticationError",
    "AuthErrorCode",
    "GSUITE_SCOPES",
    "AUTH_HINT",
]
