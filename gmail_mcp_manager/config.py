"""Configuration for Gmail MCP Manager.

Settings are read from environment variables, optionally populated from a
``.env`` file. The OAuth2 client configuration is immutable for the
lifetime of the process.

Environment variables:
    GOOGLE_CLIENT_ID: OAuth client ID (required).
    GOOGLE_CLIENT_SECRET: OAuth client secret (required).
    GOOGLE_REDIRECT_URI: Loopback callback URI
        (default: http://localhost:3000/oauth2callback).
    GOOGLE_SCOPES: Comma-separated scopes (default: gmail.modify).
    TOKEN_STORAGE_PATH: Token file path (default: ~/.gmail-mcp-tokens.json).
    DEFAULT_USER_ID: Gmail user id for API calls (default: "me").
    CONTEXT7_ENABLED: Set to "false" to disable documentation lookups.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import urlparse

from dotenv import load_dotenv

from gmail_mcp_manager.utils.errors import AuthenticationError

logger = logging.getLogger(__name__)

DEFAULT_REDIRECT_URI = "http://localhost:3000/oauth2callback"
SCHEME_DEFAULT_PORTS = {"http": 80, "https": 443}
DEFAULT_CALLBACK_PATH = "/oauth2callback"
DEFAULT_SCOPES = ("https://www.googleapis.com/auth/gmail.modify",)
DEFAULT_TOKEN_FILENAME = ".gmail-mcp-tokens.json"
DEFAULT_USER_ID = "me"


def default_token_path() -> Path:
    """Default token file location in the user's home directory."""
    return Path.home() / DEFAULT_TOKEN_FILENAME


def parse_scopes(raw: str | None) -> tuple[str, ...]:
    """Split a comma-separated scope string, dropping blanks."""
    if not raw:
        return DEFAULT_SCOPES
    scopes = tuple(s.strip() for s in raw.split(",") if s.strip())
    return scopes or DEFAULT_SCOPES


@dataclass(frozen=True)
class OAuth2Config:
    """OAuth2 client configuration.

    Attributes:
        client_id: Google OAuth client ID.
        client_secret: Google OAuth client secret.
        redirect_uri: Loopback redirect URI the callback listener serves.
        scopes: Requested Gmail API scopes.
    """

    client_id: str
    client_secret: str
    redirect_uri: str = DEFAULT_REDIRECT_URI
    scopes: tuple[str, ...] = DEFAULT_SCOPES

    @property
    def is_configured(self) -> bool:
        """True if both client ID and secret are set."""
        return bool(self.client_id and self.client_secret)

    @property
    def callback_port(self) -> int:
        """Port of the redirect URI, or the scheme's default when none is given."""
        parsed = urlparse(self.redirect_uri)
        if parsed.port is not None:
            return parsed.port
        return SCHEME_DEFAULT_PORTS.get(parsed.scheme, 80)

    @property
    def callback_path(self) -> str:
        """Path of the redirect URI (default /oauth2callback)."""
        return urlparse(self.redirect_uri).path or DEFAULT_CALLBACK_PATH

    def require_configured(self) -> None:
        """Raise AuthenticationError unless client ID and secret are set."""
        if not self.is_configured:
            raise AuthenticationError(
                "Missing required environment variables: "
                "GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET",
                details={
                    "hint": "Set GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET "
                    "environment variables"
                },
            )


@dataclass
class ManagerConfig:
    """Top-level configuration for GmailManager."""

    oauth2: OAuth2Config
    token_storage_path: Path = field(default_factory=default_token_path)
    default_user_id: str = DEFAULT_USER_ID
    context7_enabled: bool = True

    @classmethod
    def from_environment(cls, env_file: str | None = None) -> ManagerConfig:
        """Build configuration from environment variables.

        Loads a ``.env`` file first if present. Existing environment
        variables take precedence over values in the file.

        Args:
            env_file: Optional explicit path to a ``.env`` file.

        Returns:
            Populated ManagerConfig.

        Raises:
            AuthenticationError: If client ID or secret is missing.
        """
        load_dotenv(env_file)

        oauth2 = OAuth2Config(
            client_id=os.getenv("GOOGLE_CLIENT_ID", ""),
            client_secret=os.getenv("GOOGLE_CLIENT_SECRET", ""),
            redirect_uri=os.getenv("GOOGLE_REDIRECT_URI") or DEFAULT_REDIRECT_URI,
            scopes=parse_scopes(os.getenv("GOOGLE_SCOPES")),
        )
        oauth2.require_configured()

        token_path = os.getenv("TOKEN_STORAGE_PATH")
        config = cls(
            oauth2=oauth2,
            token_storage_path=(
                Path(token_path).expanduser() if token_path else default_token_path()
            ),
            default_user_id=os.getenv("DEFAULT_USER_ID") or DEFAULT_USER_ID,
            context7_enabled=os.getenv("CONTEXT7_ENABLED", "true").lower() != "false",
        )
        logger.debug(
            "Loaded configuration (redirect_uri=%s, scopes=%d, token_path=%s)",
            oauth2.redirect_uri,
            len(oauth2.scopes),
            config.token_storage_path,
        )
        return config


__all__ = [
    "OAuth2Config",
    "ManagerConfig",
    "parse_scopes",
    "default_token_path",
    "DEFAULT_REDIRECT_URI",
    "DEFAULT_SCOPES",
    "DEFAULT_USER_ID",
]
