"""Unit tests for credential and client-config models."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from gsuite_mcp.auth.models import (
    AuthenticationError,
    AuthErrorCode,
    OAuthClientConfig,
    StoredCredentials,
)


@pytest.mark.unit
class TestStoredCredentials:
    """Tests for StoredCredentials model."""

    def test_should_create_valid_credentials(self, valid_credentials: StoredCredentials) -> None:
        """Verify credentials creation with valid data."""
        assert valid_credentials.access_token == "test_access_token_abc123"
        assert valid_credentials.refresh_token == "test_refresh_token_xyz789"
        assert valid_credentials.token_type == "Bearer"
        assert len(valid_credentials.scopes) == 3

    def test_should_detect_non_expired_credentials(
        self, valid_credentials: StoredCredentials
    ) -> None:
        """Verify is_expired returns False for an hour-long token."""
        assert valid_credentials.is_expired() is False

    def test_should_treat_token_within_five_minutes_as_expired(
        self, expiring_credentials: StoredCredentials
    ) -> None:
        """Verify the default buffer is five minutes."""
        assert expiring_credentials.is_expired() is True
        assert expiring_credentials.is_expired(buffer_seconds=60) is False

    def test_should_treat_missing_expiry_as_expired(self) -> None:
        """Verify a token without expiry is never trusted."""
        creds = StoredCredentials(access_token="test")
        assert creds.expires_at is None
        assert creds.is_expired() is True

    def test_should_convert_expiry_to_aware_datetime(self) -> None:
        """Verify expiry_date milliseconds become a UTC datetime."""
        creds = StoredCredentials(access_token="test", expiry_date=1_700_000_000_000)
        assert creds.expires_at == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)

    def test_should_ignore_unknown_keys(self) -> None:
        """Verify token files from other tools still load."""
        creds = StoredCredentials.model_validate(
            {"access_token": "test", "refresh_token_expires_in": 604799}
        )
        assert creds.access_token == "test"

    def test_should_require_access_token(self) -> None:
        """Verify access_token is mandatory."""
        with pytest.raises(ValidationError):
            StoredCredentials.model_validate({"refresh_token": "only_refresh"})

    def test_should_split_scopes(self) -> None:
        """Verify space-separated scope string is split."""
        creds = StoredCredentials(access_token="test", scope="a b  c")
        assert creds.scopes == ["a", "b", "c"]
        assert StoredCredentials(access_token="test").scopes == []


@pytest.mark.unit
class TestOAuthClientConfig:
    """Tests for OAuthClientConfig model."""

    def test_should_load_installed_client(self, client_secrets: dict) -> None:
        """Verify the installed-app shape is accepted."""
        config = OAuthClientConfig.from_client_secrets(client_secrets)
        assert config.client_id == "test-client-id.apps.googleusercontent.com"
        assert config.token_uri == "https://oauth2.googleapis.com/token"

    def test_should_load_web_client(self) -> None:
        """Verify the web shape is accepted and defaults fill the URIs."""
        config = OAuthClientConfig.from_client_secrets(
            {"web": {"client_id": "web-id", "client_secret": "web-secret"}}
        )
        assert config.client_id == "web-id"
        assert config.auth_uri == "https://accounts.google.com/o/oauth2/auth"

    def test_should_reject_unknown_shape(self) -> None:
        """Verify a file without a client section is rejected."""
        with pytest.raises(ValueError):
            OAuthClientConfig.from_client_secrets({"service_account": {}})

    def test_should_be_immutable(self, client_secrets: dict) -> None:
        """Verify the config is frozen."""
        config = OAuthClientConfig.from_client_secrets(client_secrets)
        with pytest.raises(ValidationError):
            config.client_id = "other"  # type: ignore[misc]

    def test_should_round_trip_to_installed_shape(self, client_secrets: dict) -> None:
        """Verify to_client_secrets produces what the consent flow expects."""
        config = OAuthClientConfig.from_client_secrets(client_secrets)
        assert config.to_client_secrets() == client_secrets


@pytest.mark.unit
class TestAuthenticationError:
    """Tests for AuthenticationError."""

    def test_should_include_code_in_message(self) -> None:
        error = AuthenticationError("No saved credentials found.", AuthErrorCode.NO_CREDENTIALS)
        assert error.code is AuthErrorCode.NO_CREDENTIALS
        assert str(error) == "[NO_CREDENTIALS] No saved credentials found."
