"""Pydantic schemas for Gmail MCP Manager tools."""

from gmail_mcp_manager.schemas.tools import (
    BatchOperationParams,
    ComposeParams,
    CreateDraftParams,
    GetMessageParams,
    ListMessagesParams,
    SearchMessagesParams,
    SendMessageParams,
)

__all__ = [
    "ListMessagesParams",
    "GetMessageParams",
    "SearchMessagesParams",
    "ComposeParams",
    "SendMessageParams",
    "CreateDraftParams",
    "BatchOperationParams",
]
