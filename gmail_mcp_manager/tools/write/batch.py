"""Batch operation tool."""

from __future__ import annotations

import logging
from typing import Any

from gmail_mcp_manager.gmail.models import BatchOperation
from gmail_mcp_manager.schemas.tools import BatchOperationParams
from gmail_mcp_manager.tools.base import (
    ManagerProvider,
    build_success_response,
    execute_tool,
)

logger = logging.getLogger(__name__)


async def gmail_batch_operation(
    provider: ManagerProvider, params: BatchOperationParams
) -> dict[str, Any]:
    """Apply read/unread/archive/delete/trash/spam to many messages."""

    def _execute() -> dict[str, Any]:
        operation = BatchOperation(
            message_ids=list(params.message_ids),
            action=params.action,
            label_ids=list(params.label_ids),
        )
        provider.get().perform_batch_operation(operation)
        count = len(operation.message_ids)
        return build_success_response(
            data={
                "processed_count": count,
                "action": params.action.value,
                "message_ids": operation.message_ids,
            },
            message=f"Batch {params.action.value} operation completed on {count} messages",
            count=count,
        )

    return await execute_tool(
        "batch_operation", params.model_dump(mode="json"), _execute
    )


__all__ = ["gmail_batch_operation"]
