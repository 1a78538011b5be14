"""Message listing, retrieval and search tools."""

from __future__ import annotations

import logging
from typing import Any

from gmail_mcp_manager.middleware.validator import sanitize_search_query
from gmail_mcp_manager.schemas.tools import (
    GetMessageParams,
    ListMessagesParams,
    SearchMessagesParams,
)
from gmail_mcp_manager.tools.base import (
    ManagerProvider,
    build_error_response,
    build_success_response,
    execute_tool,
)

logger = logging.getLogger(__name__)

# Matches fetched in detail by search_messages
DETAILED_SAMPLE_SIZE = 5


async def gmail_list_messages(
    provider: ManagerProvider, params: ListMessagesParams
) -> dict[str, Any]:
    """List messages with optional query and label filters.

    Returns:
        Success: {status, data: {messages, nextPageToken, resultSizeEstimate}, message}
        Error: {status, error, error_code}
    """

    def _execute() -> dict[str, Any]:
        result = provider.get().list_messages(
            query=params.query,
            label_ids=params.label_ids,
            max_results=params.max_results,
            include_spam_trash=params.include_spam_trash,
        )
        return build_success_response(
            data=result,
            message=f"Found {result.get('resultSizeEstimate', 0)} messages",
        )

    return await execute_tool("list_messages", params.model_dump(), _execute)


async def gmail_get_message(
    provider: ManagerProvider, params: GetMessageParams
) -> dict[str, Any]:
    """Get one message in full, metadata or minimal format."""

    def _execute() -> dict[str, Any]:
        message = provider.get().get_message(params.message_id, params.format)
        return build_success_response(
            data=message,
            message=f"Retrieved message {params.message_id}",
        )

    return await execute_tool("get_message", params.model_dump(), _execute)


async def gmail_search_messages(
    provider: ManagerProvider, params: SearchMessagesParams
) -> dict[str, Any]:
    """Search messages with Gmail query syntax.

    Gmail query syntax examples:
    - from:sender@example.com - Messages from specific sender
    - subject:keyword - Messages with keyword in subject
    - after:2024/01/01 - Messages after date
    - has:attachment - Messages with attachments
    - is:unread - Unread messages

    Metadata for the first few matches is included as ``detailed_sample``;
    matches that cannot be fetched are left out of the sample.

    Example response:
        {
            "status": "success",
            "data": {
                "total_found": 15,
                "messages": [{"id": "abc123", "threadId": "t456"}, ...],
                "detailed_sample": [...],
                "query": "is:unread"
            },
            "message": "Search found 15 messages for query: \"is:unread\""
        }
    """

    def _execute() -> dict[str, Any]:
        query = sanitize_search_query(params.query)
        if not query:
            return build_error_response(
                error="Search query cannot be empty",
                error_code="ValidationError",
            )

        manager = provider.get()
        result = manager.list_messages(
            query=query,
            max_results=params.max_results,
            include_spam_trash=params.include_spam_trash,
        )
        found = result.get("messages", [])

        detailed: list[dict[str, Any]] = []
        for ref in found[:DETAILED_SAMPLE_SIZE]:
            message_id = ref.get("id")
            if not message_id:
                continue
            try:
                detailed.append(manager.get_message(message_id, "metadata"))
            except Exception as e:
                logger.warning("Skipping message %s in search sample: %s", message_id, e)

        total = result.get("resultSizeEstimate", 0)
        return build_success_response(
            data={
                "total_found": total,
                "messages": found,
                "detailed_sample": detailed,
                "query": query,
            },
            message=f'Search found {total} messages for query: "{query}"',
            count=len(found),
        )

    return await execute_tool("search_messages", params.model_dump(), _execute)


__all__ = [
    "gmail_list_messages",
    "gmail_get_message",
    "gmail_search_messages",
    "DETAILED_SAMPLE_SIZE",
]
