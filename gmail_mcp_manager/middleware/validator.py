"""Input validation for manager, CLI and MCP tool arguments."""

from __future__ import annotations

import logging
import re

from gmail_mcp_manager.gmail.models import BatchAction, BatchOperation, EmailComposition
from gmail_mcp_manager.utils.errors import ValidationError

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
GMAIL_ID_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")

MAX_EMAIL_LENGTH = 254
MAX_ID_LENGTH = 64
MAX_QUERY_LENGTH = 500
MAX_PAGE_SIZE = 500


def validate_email(email: str, field: str = "to") -> str:
    """Validate email address format.

    Args:
        email: Email address to validate.
        field: Name of the argument, reported on failure.

    Returns:
        Validated email address (stripped).

    Raises:
        ValidationError: If email format is invalid.
    """
    email = email.strip()
    if not email:
        raise ValidationError("Email address cannot be empty", field=field)

    if len(email) > MAX_EMAIL_LENGTH:
        raise ValidationError(
            f"Email address too long (max {MAX_EMAIL_LENGTH} characters)", field=field
        )

    if not EMAIL_PATTERN.match(email):
        raise ValidationError(f"Invalid email format: {email}", field=field)

    return email


def validate_email_list(emails: list[str], field: str = "to") -> list[str]:
    """Validate a list of email addresses."""
    return [validate_email(e, field) for e in emails]


def split_comma_list(raw: str) -> list[str]:
    """Split a comma-separated string (recipients, label IDs), dropping blanks."""
    return [part.strip() for part in raw.split(",") if part.strip()]


def validate_gmail_id(value: str, field: str = "message_id") -> str:
    """Validate a Gmail message, thread or draft ID.

    Raises:
        ValidationError: If the ID is empty, too long or malformed.
    """
    value = value.strip()
    if not value:
        raise ValidationError(f"{field} cannot be empty", field=field)

    if len(value) > MAX_ID_LENGTH:
        raise ValidationError(f"{field} too long", field=field)

    if not GMAIL_ID_PATTERN.match(value):
        raise ValidationError(f"Invalid {field} format: {value}", field=field)

    return value


def validate_message_ids(message_ids: list[str]) -> list[str]:
    """Validate a non-empty list of message IDs."""
    if not message_ids:
        raise ValidationError("Message ID list cannot be empty", field="message_ids")

    return [validate_gmail_id(mid, "message_id") for mid in message_ids]


def validate_max_results(max_results: int) -> int:
    """Page sizes accepted by the Gmail list endpoints are 1-500."""
    if not 1 <= max_results <= MAX_PAGE_SIZE:
        raise ValidationError(
            f"max_results must be between 1 and {MAX_PAGE_SIZE}",
            field="max_results",
        )
    return max_results


def sanitize_search_query(query: str) -> str:
    """Strip and normalize whitespace in a Gmail search query.

    Raises:
        ValidationError: If query is too long.
    """
    query = " ".join(query.split())

    if len(query) > MAX_QUERY_LENGTH:
        raise ValidationError(
            f"Search query too long (max {MAX_QUERY_LENGTH} characters)",
            field="query",
        )

    return query


def validate_composition(email: EmailComposition) -> EmailComposition:
    """Validate recipients of an outgoing message.

    At least one ``to`` address is required; the subject may be empty.

    Raises:
        ValidationError: If there are no recipients or any is malformed.
    """
    if not email.to:
        raise ValidationError("At least one recipient is required", field="to")

    email.to = validate_email_list(email.to, "to")
    email.cc = validate_email_list(email.cc, "cc")
    email.bcc = validate_email_list(email.bcc, "bcc")
    return email


def validate_batch_operation(operation: BatchOperation) -> BatchOperation:
    """Validate the IDs and action of a batch operation."""
    operation.message_ids = validate_message_ids(operation.message_ids)
    try:
        operation.action = BatchAction(operation.action)
    except ValueError as e:
        valid = ", ".join(a.value for a in BatchAction)
        raise ValidationError(
            f"Unknown action: {operation.action} (expected one of: {valid})",
            field="action",
        ) from e
    return operation


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
