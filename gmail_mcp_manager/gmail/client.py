"""Authenticated Gmail API client factory."""

from __future__ import annotations

import logging
import threading

from googleapiclient.discovery import Resource, build

from gmail_mcp_manager.auth.oauth import OAuthCoordinator
from gmail_mcp_manager.config import DEFAULT_USER_ID
from gmail_mcp_manager.utils.errors import APIError, AuthenticationError

logger = logging.getLogger(__name__)


class GmailClient:
    """Builds the Gmail API service once and caches it.

    The service is created lazily on first use from the coordinator's
    credential, so constructing a client never opens a browser.
    """

    def __init__(
        self, coordinator: OAuthCoordinator, user_id: str = DEFAULT_USER_ID
    ) -> None:
        self._coordinator = coordinator
        self._user_id = user_id
        self._service: Resource | None = None
        self._lock = threading.Lock()

    @property
    def user_id(self) -> str:
        return self._user_id

    @property
    def coordinator(self) -> OAuthCoordinator:
        return self._coordinator

    def get_service(self) -> Resource:
        """Get the authenticated Gmail API service.

        Returns:
            Gmail API Resource object.

        Raises:
            AuthenticationError: If authentication fails.
            APIError: If the service object cannot be built.
        """
        with self._lock:
            if self._service is not None:
                return self._service

            credentials = self._coordinator.authenticate()
            try:
                self._service = build("gmail", "v1", credentials=credentials)
            except AuthenticationError:
                raise
            except Exception as e:
                logger.error("Failed to initialize Gmail service: %s", e)
                raise APIError(
                    f"Failed to initialize Gmail service: {e}", status_code=500
                ) from e

            logger.debug("Created Gmail service for user %s", self._user_id)
            return self._service

    def invalidate(self) -> None:
        """Drop the cached service, e.g. after logout."""
        with self._lock:
            self._service = None
        logger.debug("Invalidated Gmail service for user %s", self._user_id)

    @property
    def has_service(self) -> bool:
        return self._service is not None
