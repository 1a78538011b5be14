"""Send message and create draft tools."""

from __future__ import annotations

import logging
from typing import Any

from gmail_mcp_manager.schemas.tools import CreateDraftParams, SendMessageParams
from gmail_mcp_manager.tools.base import (
    ManagerProvider,
    build_success_response,
    execute_tool,
)

logger = logging.getLogger(__name__)


async def gmail_send_message(
    provider: ManagerProvider, params: SendMessageParams
) -> dict[str, Any]:
    """Send a new email.

    Returns:
        Success: {status, data: {message_id, thread_id}, message}
        Error: {status, error, error_code}
    """

    def _execute() -> dict[str, Any]:
        sent = provider.get().send_message(params.to_composition())
        recipients = ", ".join(str(a) for a in params.to)
        return build_success_response(
            data={
                "message_id": sent.get("id"),
                "thread_id": sent.get("threadId"),
            },
            message=f"Email sent successfully to {recipients}",
        )

    return await execute_tool("send_message", params.model_dump(), _execute)


async def gmail_create_draft(
    provider: ManagerProvider, params: CreateDraftParams
) -> dict[str, Any]:
    """Create a new draft.

    Returns:
        Success: {status, data: {draft_id, message_id}, message}
        Error: {status, error, error_code}
    """

    def _execute() -> dict[str, Any]:
        draft = provider.get().create_draft(params.to_composition())
        return build_success_response(
            data={
                "draft_id": draft.get("id"),
                "message_id": draft.get("message", {}).get("id"),
            },
            message="Draft created successfully",
        )

    return await execute_tool("create_draft", params.model_dump(), _execute)


__all__ = [
    "gmail_send_message",
    "gmail_create_draft",
]
