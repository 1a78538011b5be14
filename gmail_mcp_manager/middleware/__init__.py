"""Middleware module for Gmail MCP Manager."""

from gmail_mcp_manager.middleware.validator import (
    sanitize_search_query,
    split_comma_list,
    validate_batch_operation,
    validate_composition,
    validate_email,
    validate_email_list,
    validate_gmail_id,
    validate_max_results,
    validate_message_ids,
)

__all__ = [
    "validate_email",
    "validate_email_list",
    "split_comma_list",
    "validate_gmail_id",
    "validate_message_ids",
    "validate_max_results",
    "sanitize_search_query",
    "validate_composition",
    "validate_batch_operation",
]
