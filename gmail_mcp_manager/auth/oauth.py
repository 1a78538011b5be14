"""Google OAuth 2.0 authentication for Gmail API access.

This module coordinates everything needed to hand the Gmail client a
usable credential:

1. Load the persisted credential record from the token store.
2. Refresh it proactively when it expires within five minutes.
3. Validate it against Google's token introspection endpoint.
4. Otherwise run the interactive flow: open the consent page in a browser,
   capture the redirect on a loopback listener, and exchange the code.

Failure policy:
- Token load, refresh and validation failures are absorbed and lead to the
  interactive flow.
- Interactive flow failures and token save failures are raised as
  AuthenticationError (TokenError for save failures).
"""

from __future__ import annotations

import logging
import sys
import threading
import webbrowser
from datetime import UTC
from typing import Any
from urllib.parse import urlencode

import requests
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow

from gmail_mcp_manager.auth.callback import DEFAULT_FLOW_TIMEOUT, CallbackListener
from gmail_mcp_manager.auth.storage import TokenStore
from gmail_mcp_manager.auth.tokens import REFRESH_THRESHOLD, CredentialRecord
from gmail_mcp_manager.config import OAuth2Config
from gmail_mcp_manager.utils.errors import AuthenticationError, TokenError

logger = logging.getLogger(__name__)

# Google OAuth endpoints
GOOGLE_AUTH_URI = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"
GOOGLE_TOKENINFO_URI = "https://oauth2.googleapis.com/tokeninfo"
GOOGLE_REVOKE_URI = "https://oauth2.googleapis.com/revoke"

HTTP_TIMEOUT_SECONDS = 30


class OAuthCoordinator:
    """Produces a valid Gmail API credential, authenticating if needed.

    Attributes:
        _config: Immutable OAuth2 client configuration.
        _store: Token store the credential record is persisted to.
        _record: Credential record currently installed, if any.

    Example:
        >>> coordinator = OAuthCoordinator(config, TokenStore())
        >>> credentials = coordinator.authenticate()
        >>> service = build("gmail", "v1", credentials=credentials)
    """

    def __init__(
        self,
        config: OAuth2Config,
        token_store: TokenStore | None = None,
        flow_timeout: float = DEFAULT_FLOW_TIMEOUT,
    ) -> None:
        """Initialize the coordinator.

        Args:
            config: OAuth2 client configuration.
            token_store: Where the credential is persisted.
            flow_timeout: Seconds to wait for the browser redirect.

        Raises:
            AuthenticationError: If client ID or secret is missing.
        """
        config.require_configured()

        self._config = config
        self._store = token_store or TokenStore()
        self._flow_timeout = flow_timeout
        self._record: CredentialRecord | None = None
        # Serializes authenticate/refresh/logout; one interactive flow at a time
        self._lock = threading.RLock()

    @property
    def config(self) -> OAuth2Config:
        """OAuth2 client configuration."""
        return self._config

    @property
    def token_store(self) -> TokenStore:
        """Token store backing this coordinator."""
        return self._store

    @property
    def record(self) -> CredentialRecord | None:
        """Currently installed credential record."""
        return self._record

    @property
    def is_authenticated(self) -> bool:
        """True if a credential with an access token is installed."""
        return self._record is not None and self._record.is_usable

    def _get_client_config(self) -> dict[str, Any]:
        """Build OAuth client configuration dictionary.

        Returns:
            Client configuration in the format expected by google-auth-oauthlib.
        """
        # "installed" = Desktop app client type (required by Google for
        # loopback OAuth flows).
        return {
            "installed": {
                "client_id": self._config.client_id,
                "client_secret": self._config.client_secret,
                "auth_uri": GOOGLE_AUTH_URI,
                "token_uri": GOOGLE_TOKEN_URI,
                "redirect_uris": [self._config.redirect_uri],
            }
        }

    def build_auth_url(self) -> str:
        """Create the consent page URL.

        ``access_type=offline`` together with ``prompt=consent`` makes Google
        issue a refresh token even when the user has consented before.
        """
        params = {
            "client_id": self._config.client_id,
            "redirect_uri": self._config.redirect_uri,
            "response_type": "code",
            "scope": " ".join(self._config.scopes),
            "access_type": "offline",
            "prompt": "consent",
        }
        return f"{GOOGLE_AUTH_URI}?{urlencode(params)}"

    def build_credentials(self, record: CredentialRecord) -> Credentials:
        """Build a google-auth Credentials object from a record."""
        expiry = record.expiry
        if expiry is not None:
            # google-auth compares against naive UTC timestamps
            expiry = expiry.astimezone(UTC).replace(tzinfo=None)
        return Credentials(  # type: ignore[no-untyped-call]
            token=record.access_token,
            refresh_token=record.refresh_token,
            token_uri=GOOGLE_TOKEN_URI,
            client_id=self._config.client_id,
            client_secret=self._config.client_secret,
            scopes=list(self._config.scopes),
            expiry=expiry,
        )

    # =========================================================================
    # Token endpoint operations
    # =========================================================================

    def exchange_code(self, code: str) -> CredentialRecord:
        """Exchange an authorization code for tokens.

        Raises:
            AuthenticationError: If the token endpoint rejects the code.
        """
        flow = Flow.from_client_config(
            self._get_client_config(),
            scopes=list(self._config.scopes),
            redirect_uri=self._config.redirect_uri,
        )

        try:
            flow.fetch_token(code=code)
        except Exception as e:
            logger.error("Failed to exchange authorization code: %s", e)
            raise AuthenticationError(
                f"Failed to exchange authorization code: {e}",
                details={"error_type": type(e).__name__},
            ) from e

        logger.info("Tokens acquired successfully")
        return CredentialRecord.from_credentials(flow.credentials)

    def _refresh_access_token(self, record: CredentialRecord) -> CredentialRecord:
        """Call the token endpoint with the refresh token."""
        if not record.refresh_token:
            raise AuthenticationError(
                "No refresh token available",
                details={"hint": "Re-authenticate to obtain a refresh token"},
            )

        credentials = self.build_credentials(record)
        try:
            credentials.refresh(Request())
        except Exception as e:
            logger.error("Failed to refresh token: %s", e)
            raise AuthenticationError(
                f"Token refresh failed: {e}",
                details={"error_type": type(e).__name__},
            ) from e

        return CredentialRecord.from_credentials(credentials, previous=record)

    def refresh(self) -> CredentialRecord:
        """Refresh the installed credential and persist the result.

        Returns:
            The refreshed credential record.

        Raises:
            AuthenticationError: If nothing is installed or refresh fails.
            TokenError: If the refreshed record cannot be saved.
        """
        with self._lock:
            if self._record is None:
                raise AuthenticationError("No credential to refresh")

            refreshed = self._refresh_access_token(self._record)
            self._store.save(refreshed)
            self._record = refreshed
            logger.info("Token refreshed successfully")
            return refreshed

    def introspect(self, access_token: str) -> dict[str, Any]:
        """Look up an access token at Google's tokeninfo endpoint.

        Raises:
            AuthenticationError: If Google rejects the token or the call fails.
        """
        try:
            response = requests.get(
                GOOGLE_TOKENINFO_URI,
                params={"access_token": access_token},
                timeout=HTTP_TIMEOUT_SECONDS,
            )
        except requests.RequestException as e:
            raise AuthenticationError(
                f"Network error validating token: {e}",
                details={"error_type": type(e).__name__},
            ) from e

        if response.status_code != 200:
            raise AuthenticationError(
                f"Token validation failed: {response.text}",
                details={"status_code": response.status_code},
            )

        data: dict[str, Any] = response.json()
        return data

    # =========================================================================
    # Authentication
    # =========================================================================

    def _ensure_fresh(self) -> bool:
        """Refresh the installed record if it expires within the threshold.

        Returns:
            False if a needed refresh was impossible or failed.
        """
        record = self._record
        assert record is not None
        if not record.expires_within(REFRESH_THRESHOLD):
            return True

        logger.info("Token expires soon, refreshing...")
        try:
            self.refresh()
        except TokenError:
            raise
        except AuthenticationError as e:
            logger.warning("Token refresh failed, will re-authenticate: %s", e)
            return False
        return True

    def _is_token_valid(self) -> bool:
        """Validate the installed access token; any failure means invalid."""
        record = self._record
        assert record is not None
        try:
            info = self.introspect(record.access_token)
        except Exception as e:
            logger.warning("Token validation failed, will re-authenticate: %s", e)
            return False
        return bool(info)

    def authenticate(self) -> Credentials:
        """Return a usable credential, authenticating interactively if needed.

        Returns:
            Authorized google-auth Credentials.

        Raises:
            AuthenticationError: If the interactive flow fails, times out, or
                is denied, or if the code exchange fails.
            TokenError: If the credential cannot be persisted.
        """
        with self._lock:
            record = self._store.load()
            if record is not None:
                self._record = record
                if self._ensure_fresh() and self._is_token_valid():
                    logger.info("Using existing valid tokens")
                    return self.build_credentials(self._record)

            self._record = None
            logger.info("Starting OAuth2 authentication flow...")
            try:
                record = self._run_interactive_flow()
            except AuthenticationError:
                raise
            except Exception as e:
                logger.error("Authentication failed: %s", e)
                raise AuthenticationError(
                    f"Authentication failed: {e}",
                    details={"error_type": type(e).__name__},
                ) from e

            self._store.save(record)
            self._record = record
            logger.info("Authentication successful and tokens saved")
            return self.build_credentials(record)

    def _launch_browser(self, auth_url: str) -> None:
        """Open the consent page; the URL is printed in case this fails."""
        print(
            f"If your browser does not open, visit:\n{auth_url}",
            file=sys.stderr,
        )
        try:
            if not webbrowser.open(auth_url):
                logger.warning("No browser available to open the consent page")
        except webbrowser.Error as e:
            logger.warning("Failed to open browser: %s", e)

    def _run_interactive_flow(self) -> CredentialRecord:
        """Run the browser consent flow and exchange the resulting code."""
        auth_url = self.build_auth_url()

        with CallbackListener(
            self._config.callback_port, self._config.callback_path
        ) as listener:
            logger.info("Opening browser for authentication...")
            self._launch_browser(auth_url)
            code = listener.wait(self._flow_timeout)

        return self.exchange_code(code)

    # =========================================================================
    # Session helpers
    # =========================================================================

    def authorized_credentials(self) -> Credentials:
        """Credentials for the installed record.

        Raises:
            AuthenticationError: If no access token is installed.
        """
        if not self.is_authenticated:
            raise AuthenticationError(
                "No valid authentication. Please run authenticate() first."
            )
        assert self._record is not None
        return self.build_credentials(self._record)

    def token_info(self) -> dict[str, Any]:
        """Introspection data for the installed or stored access token.

        Raises:
            AuthenticationError: If there is no token or Google rejects it.
        """
        record = self._record or self._store.load()
        if record is None or not record.is_usable:
            raise AuthenticationError("No access token available")
        return self.introspect(record.access_token)

    def logout(self) -> None:
        """Revoke the access token and forget the stored credential.

        Revocation is best-effort; the token file is always removed.

        Raises:
            TokenError: If the token file cannot be removed.
        """
        with self._lock:
            record = self._record or self._store.load()
            if record is not None and record.is_usable:
                try:
                    response = requests.post(
                        GOOGLE_REVOKE_URI,
                        params={"token": record.access_token},
                        headers={"content-type": "application/x-www-form-urlencoded"},
                        timeout=HTTP_TIMEOUT_SECONDS,
                    )
                    if response.status_code != 200:
                        logger.warning(
                            "Token revocation returned %d: %s",
                            response.status_code,
                            response.text,
                        )
                except requests.RequestException as e:
                    logger.warning("Token revocation failed: %s", e)

            self._store.delete()
            self._record = None
            logger.info("Logout successful - tokens revoked and cleared")


__all__ = [
    "OAuthCoordinator",
    "GOOGLE_AUTH_URI",
    "GOOGLE_TOKEN_URI",
    "GOOGLE_TOKENINFO_URI",
    "GOOGLE_REVOKE_URI",
]
