"""Pytest configuration and fixtures for Gmail MCP Manager tests."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from gmail_mcp_manager.auth.storage import TokenStore
from gmail_mcp_manager.auth.tokens import CredentialRecord
from gmail_mcp_manager.config import ManagerConfig, OAuth2Config


@pytest.fixture
def oauth_config() -> OAuth2Config:
    """Fixture providing a configured OAuth2 client."""
    return OAuth2Config(
        client_id="test-client-id.apps.googleusercontent.com",
        client_secret="test-client-secret",
        redirect_uri="http://localhost:3000/oauth2callback",
    )


@pytest.fixture
def token_path(tmp_path: Path) -> Path:
    """Fixture providing a token file location inside a temp directory."""
    return tmp_path / "tokens" / "gmail-mcp-tokens.json"


@pytest.fixture
def token_store(token_path: Path) -> TokenStore:
    """Fixture providing a token store backed by a temp file."""
    return TokenStore(token_path)


@pytest.fixture
def manager_config(oauth_config: OAuth2Config, token_path: Path) -> ManagerConfig:
    """Fixture providing manager configuration with a temp token file."""
    return ManagerConfig(oauth2=oauth_config, token_storage_path=token_path)


@pytest.fixture
def fresh_record() -> CredentialRecord:
    """Fixture providing a credential that expires in an hour."""
    return CredentialRecord(
        access_token="mock-access-token",
        refresh_token="mock-refresh-token",
        scope="https://www.googleapis.com/auth/gmail.modify",
        expiry=datetime.now(UTC) + timedelta(hours=1),
    )


@pytest.fixture
def sample_email() -> dict:
    """Fixture providing sample email data for testing."""
    return {
        "id": "18abc123def",
        "threadId": "18abc123def",
        "labelIds": ["INBOX", "UNREAD"],
        "snippet": "This is a test email snippet...",
        "payload": {
            "headers": [
                {"name": "From", "value": "sender@example.com"},
                {"name": "To", "value": "recipient@example.com"},
                {"name": "Subject", "value": "Test Email Subject"},
                {"name": "Date", "value": "Mon, 20 Jan 2026 10:00:00 -0500"},
            ],
            "mimeType": "text/plain",
            "body": {
                "data": "VGhpcyBpcyB0aGUgZW1haWwgYm9keSBjb250ZW50Lg==",
            },
        },
    }


@pytest.fixture
def mock_gmail_service(mocker):
    """Fixture providing a mocked Gmail API service."""
    mock_service = mocker.MagicMock()
    return mock_service
