"""Mailbox overview tools: labels and statistics."""

from __future__ import annotations

import logging
from typing import Any

from gmail_mcp_manager.tools.base import (
    ManagerProvider,
    build_success_response,
    execute_tool,
)

logger = logging.getLogger(__name__)


async def gmail_get_labels(provider: ManagerProvider) -> dict[str, Any]:
    """Get all labels and folders."""

    def _execute() -> dict[str, Any]:
        result = provider.get().get_labels()
        labels = result.get("labels", [])
        return build_success_response(
            data=result,
            message=f"Found {len(labels)} labels",
            count=len(labels),
        )

    return await execute_tool("get_labels", {}, _execute)


async def gmail_get_email_stats(provider: ManagerProvider) -> dict[str, Any]:
    """Total and unread message counts."""

    def _execute() -> dict[str, Any]:
        stats = provider.get().get_email_stats()
        return build_success_response(
            data=stats.to_dict(),
            message=f"Total: {stats.total}, Unread: {stats.unread}",
        )

    return await execute_tool("get_email_stats", {}, _execute)


__all__ = [
    "gmail_get_labels",
    "gmail_get_email_stats",
]
