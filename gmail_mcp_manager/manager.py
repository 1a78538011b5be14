"""Unified Gmail manager.

GmailManager wires the OAuth coordinator, the Gmail client and the
documentation cache together. Every mail operation first looks up advisory
documentation for itself and hands it to an optional callback, then runs
the Gmail API call. A failed lookup never blocks the operation.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Any

from gmail_mcp_manager.auth.oauth import OAuthCoordinator
from gmail_mcp_manager.auth.storage import TokenStore
from gmail_mcp_manager.config import ManagerConfig
from gmail_mcp_manager.docs.cache import DocumentationCache
from gmail_mcp_manager.docs.provider import DocumentationFetcher, DocumentationResult
from gmail_mcp_manager.docs.render import as_code_comments
from gmail_mcp_manager.gmail import batch, drafts, labels, messages, threads
from gmail_mcp_manager.gmail.client import GmailClient
from gmail_mcp_manager.gmail.models import BatchOperation, EmailComposition, EmailStats
from gmail_mcp_manager.middleware.validator import (
    validate_batch_operation,
    validate_composition,
    validate_gmail_id,
    validate_max_results,
)

logger = logging.getLogger(__name__)

DocumentationCallback = Callable[[DocumentationResult, str], None]


class GmailManager:
    """Gmail operations with documentation lookups attached.

    Example:
        >>> manager = GmailManager.from_environment()
        >>> manager.initialize()
        >>> manager.list_messages(query="is:unread", max_results=5)
    """

    def __init__(
        self,
        config: ManagerConfig,
        coordinator: OAuthCoordinator | None = None,
        client: GmailClient | None = None,
        docs_cache: DocumentationCache | None = None,
        on_documentation: DocumentationCallback | None = None,
        fetcher: DocumentationFetcher | None = None,
    ) -> None:
        """Initialize the manager.

        Args:
            config: Manager configuration.
            coordinator: OAuth coordinator. Built from config if omitted.
            client: Gmail client. Built around the coordinator if omitted.
            docs_cache: Documentation cache. Built from config if omitted.
            on_documentation: Called with (result, operation) whenever a
                lookup produced documentation.
            fetcher: Documentation strategy for a cache built here.

        Raises:
            AuthenticationError: If the OAuth client is not configured.
        """
        self._config = config
        self._coordinator = coordinator or OAuthCoordinator(
            config.oauth2, TokenStore(config.token_storage_path)
        )
        self._client = client or GmailClient(
            self._coordinator, config.default_user_id
        )
        self._docs = docs_cache or DocumentationCache(
            fetcher=fetcher, enabled=config.context7_enabled
        )
        self._on_documentation = on_documentation

    @classmethod
    def from_environment(
        cls,
        env_file: str | None = None,
        on_documentation: DocumentationCallback | None = None,
    ) -> GmailManager:
        """Build a manager from environment variables (and ``.env``).

        Raises:
            AuthenticationError: If GOOGLE_CLIENT_ID or GOOGLE_CLIENT_SECRET
                is missing.
        """
        return cls(
            ManagerConfig.from_environment(env_file),
            on_documentation=on_documentation,
        )

    @property
    def config(self) -> ManagerConfig:
        return self._config

    @property
    def coordinator(self) -> OAuthCoordinator:
        return self._coordinator

    @property
    def client(self) -> GmailClient:
        return self._client

    @property
    def user_id(self) -> str:
        return self._client.user_id

    # =========================================================================
    # Documentation
    # =========================================================================

    def _announce(self, operation: str, context: str | None = None) -> None:
        """Look up documentation for an operation and pass it on."""
        result = self._docs.get_or_fetch(operation, context)
        if result is not None and self._on_documentation is not None:
            try:
                self._on_documentation(result, operation)
            except Exception as e:
                logger.warning("Documentation callback failed for %s: %s", operation, e)

    def get_documentation(
        self, operation: str, context: str | None = None
    ) -> DocumentationResult | None:
        """Documentation for an operation, or None if unavailable."""
        return self._docs.get_or_fetch(operation, context)

    def get_documentation_as_comments(
        self, operation: str, context: str | None = None
    ) -> str:
        """Documentation for an operation as a comment block ("" if none)."""
        return as_code_comments(self._docs.get_or_fetch(operation, context))

    def enable_context7(self) -> None:
        self._docs.set_enabled(True)

    def disable_context7(self) -> None:
        self._docs.set_enabled(False)

    def clear_context7_cache(self) -> None:
        self._docs.clear()

    def context7_stats(self) -> dict[str, object]:
        return self._docs.stats()

    @property
    def context7_enabled(self) -> bool:
        return self._docs.is_enabled()

    # =========================================================================
    # Session
    # =========================================================================

    def initialize(self) -> None:
        """Authenticate and build the Gmail service.

        Raises:
            AuthenticationError: If authentication fails.
            APIError: If the Gmail service cannot be built.
        """
        logger.info("Initializing Gmail MCP Manager...")
        self._announce("initialize")
        self._client.get_service()
        logger.info("Gmail MCP Manager initialized successfully")

    def logout(self) -> None:
        """Revoke and delete stored tokens, dropping the cached service."""
        logger.info("Logging out...")
        self._coordinator.logout()
        self._client.invalidate()

    def token_info(self) -> dict[str, Any]:
        """Google's introspection data for the current access token."""
        return self._coordinator.token_info()

    # =========================================================================
    # Messages
    # =========================================================================

    def list_messages(
        self,
        query: str | None = None,
        label_ids: list[str] | None = None,
        max_results: int = 10,
        page_token: str | None = None,
        include_spam_trash: bool = False,
    ) -> dict[str, Any]:
        """List one page of messages."""
        validate_max_results(max_results)
        options: dict[str, Any] = {
            "maxResults": max_results,
            "includeSpamTrash": include_spam_trash,
        }
        if query:
            options["query"] = query
        if label_ids:
            options["labelIds"] = label_ids
        if page_token:
            options["pageToken"] = page_token
        self._announce("listMessages", json.dumps(options))

        return messages.list_messages(
            self._client.get_service(),
            self.user_id,
            query=query,
            label_ids=label_ids,
            max_results=max_results,
            page_token=page_token,
            include_spam_trash=include_spam_trash,
        )

    def get_message(self, message_id: str, format: str = "full") -> dict[str, Any]:
        """Get a message in the given format (full, metadata or minimal)."""
        message_id = validate_gmail_id(message_id, "message_id")
        self._announce("getMessage", f"format: {format}")
        return messages.get_message(
            self._client.get_service(), self.user_id, message_id, format=format
        )

    def send_message(self, email: EmailComposition) -> dict[str, Any]:
        """Send an email; returns the sent message resource."""
        validate_composition(email)
        context = f"{'HTML' if email.is_html else 'text'} email"
        if email.attachments:
            context += " with attachments"
        self._announce("sendMessage", context)
        return messages.send_message(self._client.get_service(), self.user_id, email)

    def get_email_stats(self) -> EmailStats:
        self._announce("getStats")
        return messages.get_email_stats(self._client.get_service(), self.user_id)

    # =========================================================================
    # Drafts
    # =========================================================================

    def list_drafts(
        self, max_results: int = 10, page_token: str | None = None
    ) -> dict[str, Any]:
        validate_max_results(max_results)
        self._announce("listDrafts")
        return drafts.list_drafts(
            self._client.get_service(),
            self.user_id,
            max_results=max_results,
            page_token=page_token,
        )

    def create_draft(self, email: EmailComposition) -> dict[str, Any]:
        validate_composition(email)
        self._announce("createDraft")
        return drafts.create_draft(self._client.get_service(), self.user_id, email)

    def update_draft(self, draft_id: str, email: EmailComposition) -> dict[str, Any]:
        draft_id = validate_gmail_id(draft_id, "draft_id")
        validate_composition(email)
        self._announce("updateDraft")
        return drafts.update_draft(
            self._client.get_service(), self.user_id, draft_id, email
        )

    def send_draft(self, draft_id: str) -> dict[str, Any]:
        draft_id = validate_gmail_id(draft_id, "draft_id")
        self._announce("sendDraft")
        return drafts.send_draft(self._client.get_service(), self.user_id, draft_id)

    # =========================================================================
    # Threads, labels and batch changes
    # =========================================================================

    def get_thread(self, thread_id: str, format: str = "full") -> dict[str, Any]:
        thread_id = validate_gmail_id(thread_id, "thread_id")
        self._announce("getThread", f"format: {format}")
        return threads.get_thread(
            self._client.get_service(), self.user_id, thread_id, format=format
        )

    def list_threads(
        self,
        query: str | None = None,
        label_ids: list[str] | None = None,
        max_results: int = 10,
        page_token: str | None = None,
        include_spam_trash: bool = False,
    ) -> dict[str, Any]:
        validate_max_results(max_results)
        options: dict[str, Any] = {
            "maxResults": max_results,
            "includeSpamTrash": include_spam_trash,
        }
        if query:
            options["query"] = query
        if label_ids:
            options["labelIds"] = label_ids
        self._announce("listThreads", json.dumps(options))

        return threads.list_threads(
            self._client.get_service(),
            self.user_id,
            query=query,
            label_ids=label_ids,
            max_results=max_results,
            page_token=page_token,
            include_spam_trash=include_spam_trash,
        )

    def get_labels(self) -> dict[str, Any]:
        self._announce("getLabels")
        return labels.list_labels(self._client.get_service(), self.user_id)

    def perform_batch_operation(self, operation: BatchOperation) -> None:
        """Apply a batch action to a set of messages.

        Raises:
            ValidationError: If the IDs or the action are invalid.
            APIError: If a Gmail call fails.
        """
        validate_batch_operation(operation)
        self._announce("batchOperation", operation.action.value)
        batch.perform_batch_operation(
            self._client.get_service(), self.user_id, operation
        )


__all__ = [
    "GmailManager",
    "DocumentationCallback",
]
