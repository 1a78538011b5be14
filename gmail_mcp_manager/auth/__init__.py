"""Authentication module for Gmail MCP Manager.

This module provides OAuth 2.0 authentication for the Gmail API, including:

- Credential records and their JSON form
- Owner-only file-based token persistence
- A one-shot loopback listener for the OAuth redirect
- The coordinator that loads, refreshes, validates, or interactively
  obtains credentials

Usage:
    >>> from gmail_mcp_manager.auth import OAuthCoordinator, TokenStore
    >>>
    >>> coordinator = OAuthCoordinator(config.oauth2, TokenStore())
    >>> credentials = coordinator.authenticate()  # may open a browser
"""

from gmail_mcp_manager.auth.callback import CallbackListener, CallbackResult
from gmail_mcp_manager.auth.oauth import (
    GOOGLE_AUTH_URI,
    GOOGLE_REVOKE_URI,
    GOOGLE_TOKEN_URI,
    GOOGLE_TOKENINFO_URI,
    OAuthCoordinator,
)
from gmail_mcp_manager.auth.storage import TokenStore
from gmail_mcp_manager.auth.tokens import REFRESH_THRESHOLD, CredentialRecord

__all__ = [
    # OAuth
    "OAuthCoordinator",
    "GOOGLE_AUTH_URI",
    "GOOGLE_TOKEN_URI",
    "GOOGLE_TOKENINFO_URI",
    "GOOGLE_REVOKE_URI",
    # Callback listener
    "CallbackListener",
    "CallbackResult",
    # Token storage
    "TokenStore",
    "CredentialRecord",
    "REFRESH_THRESHOLD",
]
