"""Gmail tools that send mail or change message labels."""

from gmail_mcp_manager.tools.write.batch import gmail_batch_operation
from gmail_mcp_manager.tools.write.send import gmail_create_draft, gmail_send_message

__all__ = [
    "gmail_send_message",
    "gmail_create_draft",
    "gmail_batch_operation",
]
