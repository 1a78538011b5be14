"""Gmail MCP Manager tools package.

Tools are organized into two categories:

- Read Tools: list, fetch, search, labels and statistics
- Write Tools: send, draft and batch label changes
"""

from gmail_mcp_manager.tools.base import (
    ManagerProvider,
    build_error_response,
    build_success_response,
    execute_tool,
)
from gmail_mcp_manager.tools.read import (
    gmail_get_email_stats,
    gmail_get_labels,
    gmail_get_message,
    gmail_list_messages,
    gmail_search_messages,
)
from gmail_mcp_manager.tools.write import (
    gmail_batch_operation,
    gmail_create_draft,
    gmail_send_message,
)

__all__ = [
    # Base utilities
    "ManagerProvider",
    "build_error_response",
    "build_success_response",
    "execute_tool",
    # Read tools
    "gmail_list_messages",
    "gmail_get_message",
    "gmail_search_messages",
    "gmail_get_labels",
    "gmail_get_email_stats",
    # Write tools
    "gmail_send_message",
    "gmail_create_draft",
    "gmail_batch_operation",
]
