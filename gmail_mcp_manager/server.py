"""FastMCP server for Gmail MCP Manager.

This module builds the FastMCP server and registers 8 tools:

- Read Tools (5): list_messages, get_message, search_messages, get_labels,
  get_email_stats
- Write Tools (3): send_message, create_draft, batch_operation

The GmailManager behind the tools is created on the first tool call, so the
server can start before the OAuth consent flow has run.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Any

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from gmail_mcp_manager import VERSION
from gmail_mcp_manager.manager import GmailManager
from gmail_mcp_manager.schemas.tools import (
    BatchOperationParams,
    CreateDraftParams,
    GetMessageParams,
    ListMessagesParams,
    MessageFormat,
    SearchMessagesParams,
    SendMessageParams,
)
from gmail_mcp_manager.tools import (
    ManagerProvider,
    gmail_batch_operation,
    gmail_create_draft,
    gmail_get_email_stats,
    gmail_get_labels,
    gmail_get_message,
    gmail_list_messages,
    gmail_search_messages,
    gmail_send_message,
)

logger = logging.getLogger(__name__)

SERVER_NAME = "gmail-mcp-manager"
TOOL_COUNT = 8


# =============================================================================
# Lifespan Context Manager
# =============================================================================


@asynccontextmanager
async def server_lifespan(server: FastMCP) -> AsyncIterator[dict[str, Any]]:
    """Log startup and shutdown.

    Args:
        server: The FastMCP server instance.

    Yields:
        Empty context dict (no shared state needed).
    """
    logger.info("Gmail MCP server starting up...")
    yield {}
    logger.info("Gmail MCP server shutting down...")


# =============================================================================
# Read Tool Wrappers
# =============================================================================


def _register_read_tools(mcp: FastMCP, provider: ManagerProvider) -> None:
    """Register read-only tools with the FastMCP server.

    Args:
        mcp: The FastMCP server instance.
        provider: Supplies the shared GmailManager.
    """

    @mcp.tool(
        name="list_messages",
        annotations=ToolAnnotations(
            readOnlyHint=True,
            destructiveHint=False,
            idempotentHint=True,
        ),
    )
    async def list_messages_tool(
        query: str | None = None,
        max_results: int = 10,
        label_ids: list[str] | None = None,
        include_spam_trash: bool = False,
    ) -> dict[str, Any]:
        """List Gmail messages with optional search query and filters.

        Args:
            query: Search query (e.g., 'is:unread', 'from:example@gmail.com').
            max_results: Maximum number of results to return (1-100).
            label_ids: Label IDs to filter by.
            include_spam_trash: Include spam and trash in results.

        Returns:
            Success: {status, data: {messages, nextPageToken, resultSizeEstimate}, message}
            Error: {status, error, error_code}
        """
        params = ListMessagesParams(
            query=query,
            max_results=max_results,
            label_ids=label_ids,
            include_spam_trash=include_spam_trash,
        )
        return await gmail_list_messages(provider, params)

    @mcp.tool(
        name="get_message",
        annotations=ToolAnnotations(
            readOnlyHint=True,
            destructiveHint=False,
            idempotentHint=True,
        ),
    )
    async def get_message_tool(
        message_id: str,
        format: MessageFormat = "full",
    ) -> dict[str, Any]:
        """Get detailed information about a specific Gmail message.

        Args:
            message_id: The ID of the message to retrieve.
            format: Level of detail: "full", "metadata" or "minimal".

        Returns:
            Success: {status, data: <message resource>, message}
            Error: {status, error, error_code}
        """
        params = GetMessageParams(message_id=message_id, format=format)
        return await gmail_get_message(provider, params)

    @mcp.tool(
        name="search_messages",
        annotations=ToolAnnotations(
            readOnlyHint=True,
            destructiveHint=False,
            idempotentHint=True,
        ),
    )
    async def search_messages_tool(
        query: str,
        max_results: int = 20,
        include_spam_trash: bool = False,
    ) -> dict[str, Any]:
        """Advanced search for Gmail messages with complex queries.

        Args:
            query: Gmail search syntax (e.g., 'from:boss has:attachment').
            max_results: Maximum number of results (1-100, default 20).
            include_spam_trash: Include spam and trash in search.

        Returns:
            Success: {status, data: {total_found, messages, detailed_sample, query}, message}
            Error: {status, error, error_code}
        """
        params = SearchMessagesParams(
            query=query,
            max_results=max_results,
            include_spam_trash=include_spam_trash,
        )
        return await gmail_search_messages(provider, params)

    @mcp.tool(
        name="get_labels",
        annotations=ToolAnnotations(
            readOnlyHint=True,
            destructiveHint=False,
            idempotentHint=True,
        ),
    )
    async def get_labels_tool() -> dict[str, Any]:
        """Get all Gmail labels and folders.

        Returns:
            Success: {status, data: {labels: [...]}, message, count}
        """
        return await gmail_get_labels(provider)

    @mcp.tool(
        name="get_email_stats",
        annotations=ToolAnnotations(
            readOnlyHint=True,
            destructiveHint=False,
            idempotentHint=True,
        ),
    )
    async def get_email_stats_tool() -> dict[str, Any]:
        """Get statistics about the Gmail account (total, unread, etc.).

        Returns:
            Success: {status, data: {total, unread, archived, spam, trash}, message}
        """
        return await gmail_get_email_stats(provider)


# =============================================================================
# Write Tool Wrappers
# =============================================================================


def _register_write_tools(mcp: FastMCP, provider: ManagerProvider) -> None:
    """Register tools that send mail or change labels.

    Args:
        mcp: The FastMCP server instance.
        provider: Supplies the shared GmailManager.
    """

    @mcp.tool(
        name="send_message",
        annotations=ToolAnnotations(
            readOnlyHint=False,
            destructiveHint=False,
            idempotentHint=False,
            openWorldHint=True,
        ),
    )
    async def send_message_tool(
        to: list[str],
        subject: str,
        body: str,
        cc: list[str] | None = None,
        bcc: list[str] | None = None,
        is_html: bool = False,
    ) -> dict[str, Any]:
        """Send a new email message via Gmail.

        Args:
            to: Recipient email addresses.
            subject: Email subject line.
            body: Email body content.
            cc: CC email addresses.
            bcc: BCC email addresses.
            is_html: Whether the body is HTML formatted.

        Returns:
            Success: {status, data: {message_id, thread_id}, message}
            Error: {status, error, error_code}
        """
        params = SendMessageParams(
            to=to,
            subject=subject,
            body=body,
            cc=cc or [],
            bcc=bcc or [],
            is_html=is_html,
        )
        return await gmail_send_message(provider, params)

    @mcp.tool(
        name="create_draft",
        annotations=ToolAnnotations(
            readOnlyHint=False,
            destructiveHint=False,
            idempotentHint=False,
        ),
    )
    async def create_draft_tool(
        to: list[str],
        subject: str,
        body: str,
        cc: list[str] | None = None,
        bcc: list[str] | None = None,
        is_html: bool = False,
    ) -> dict[str, Any]:
        """Create a new email draft.

        Args:
            to: Recipient email addresses.
            subject: Email subject line.
            body: Email body content.
            cc: CC email addresses.
            bcc: BCC email addresses.
            is_html: Whether the body is HTML formatted.

        Returns:
            Success: {status, data: {draft_id, message_id}, message}
            Error: {status, error, error_code}
        """
        params = CreateDraftParams(
            to=to,
            subject=subject,
            body=body,
            cc=cc or [],
            bcc=bcc or [],
            is_html=is_html,
        )
        return await gmail_create_draft(provider, params)

    @mcp.tool(
        name="batch_operation",
        annotations=ToolAnnotations(
            readOnlyHint=False,
            destructiveHint=True,
            idempotentHint=True,
        ),
    )
    async def batch_operation_tool(
        message_ids: list[str],
        action: str,
        label_ids: list[str] | None = None,
    ) -> dict[str, Any]:
        """Perform batch operations on multiple Gmail messages.

        Args:
            message_ids: Message IDs to operate on.
            action: One of read, unread, archive, delete, trash, spam.
                "delete" moves messages to the trash.
            label_ids: Label IDs to add after the action.

        Returns:
            Success: {status, data: {processed_count, action, message_ids}, message}
            Error: {status, error, error_code}
        """
        params = BatchOperationParams(
            message_ids=message_ids,
            action=action,
            label_ids=label_ids or [],
        )
        return await gmail_batch_operation(provider, params)


# =============================================================================
# Server Factory
# =============================================================================


def create_server(
    manager_factory: Callable[[], GmailManager] = GmailManager.from_environment,
) -> FastMCP:
    """Create and configure the FastMCP server instance.

    Args:
        manager_factory: Builds the GmailManager on the first tool call.
            Defaults to reading the environment.

    Returns:
        Configured FastMCP server instance.
    """
    provider = ManagerProvider(manager_factory)

    server = FastMCP(
        name=SERVER_NAME,
        lifespan=server_lifespan,
    )

    _register_read_tools(server, provider)
    _register_write_tools(server, provider)

    logger.info(
        "Gmail MCP server %s created with %d tools registered", VERSION, TOOL_COUNT
    )
    return server


__all__ = [
    "create_server",
    "server_lifespan",
    "SERVER_NAME",
    "TOOL_COUNT",
]
