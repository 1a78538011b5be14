"""Read-only Gmail tools."""

from gmail_mcp_manager.tools.read.labels import gmail_get_email_stats, gmail_get_labels
from gmail_mcp_manager.tools.read.search import (
    gmail_get_message,
    gmail_list_messages,
    gmail_search_messages,
)

__all__ = [
    "gmail_list_messages",
    "gmail_get_message",
    "gmail_search_messages",
    "gmail_get_labels",
    "gmail_get_email_stats",
]
