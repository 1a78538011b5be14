"""Gmail API operations module."""

from gmail_mcp_manager.gmail.batch import BATCH_LABEL_CHANGES, perform_batch_operation
from gmail_mcp_manager.gmail.client import GmailClient
from gmail_mcp_manager.gmail.drafts import (
    create_draft,
    list_drafts,
    send_draft,
    update_draft,
)
from gmail_mcp_manager.gmail.labels import get_label_by_name, list_labels
from gmail_mcp_manager.gmail.messages import (
    build_mime_message,
    build_raw_message,
    decode_body,
    get_email_stats,
    get_message,
    list_messages,
    parse_headers,
    send_message,
)
from gmail_mcp_manager.gmail.models import (
    BatchAction,
    BatchOperation,
    EmailAttachment,
    EmailComposition,
    EmailStats,
)
from gmail_mcp_manager.gmail.threads import get_thread, list_threads

__all__ = [
    "GmailClient",
    "EmailAttachment",
    "EmailComposition",
    "BatchAction",
    "BatchOperation",
    "EmailStats",
    "list_messages",
    "get_message",
    "send_message",
    "build_mime_message",
    "build_raw_message",
    "get_email_stats",
    "parse_headers",
    "decode_body",
    "list_drafts",
    "create_draft",
    "update_draft",
    "send_draft",
    "list_threads",
    "get_thread",
    "list_labels",
    "get_label_by_name",
    "BATCH_LABEL_CHANGES",
    "perform_batch_operation",
]
