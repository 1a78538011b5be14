"""Gmail message operations."""

from __future__ import annotations

import base64
import logging
from email import encoders
from email.mime.base import MIMEBase
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Any

from googleapiclient.discovery import Resource

from gmail_mcp_manager.gmail.models import EmailComposition, EmailStats
from gmail_mcp_manager.utils.errors import APIError

logger = logging.getLogger(__name__)


def list_messages(
    service: Resource,
    user_id: str = "me",
    query: str | None = None,
    label_ids: list[str] | None = None,
    max_results: int = 10,
    page_token: str | None = None,
    include_spam_trash: bool = False,
) -> dict[str, Any]:
    """List one page of messages matching query and labels.

    Returns the raw list response: ``messages``, ``nextPageToken`` and
    ``resultSizeEstimate``.
    """
    params: dict[str, Any] = {
        "userId": user_id,
        "maxResults": max_results,
        "includeSpamTrash": include_spam_trash,
    }
    if query:
        params["q"] = query
    if label_ids:
        params["labelIds"] = label_ids
    if page_token:
        params["pageToken"] = page_token

    try:
        response: dict[str, Any] = service.users().messages().list(**params).execute()
        logger.info("Found %s messages", response.get("resultSizeEstimate", 0))
        return response
    except Exception as e:
        logger.error("Failed to list messages: %s", e)
        raise APIError.from_exception("Failed to list messages", e) from e


def get_message(
    service: Resource, user_id: str, message_id: str, format: str = "full"
) -> dict[str, Any]:
    """Get a specific message by ID."""
    try:
        message: dict[str, Any] = (
            service.users()
            .messages()
            .get(userId=user_id, id=message_id, format=format)
            .execute()
        )
        logger.debug("Retrieved message %s", message_id)
        return message
    except Exception as e:
        logger.error("Failed to get message %s: %s", message_id, e)
        raise APIError.from_exception(f"Failed to get message {message_id}", e) from e


def build_mime_message(email: EmailComposition) -> MIMEText | MIMEMultipart:
    """Build the MIME structure for an outgoing message.

    A single text part when there are no attachments, otherwise
    multipart/mixed with the body first and one base64 part per attachment.
    """
    body_part = MIMEText(email.body, "html" if email.is_html else "plain", "utf-8")

    message: MIMEText | MIMEMultipart
    if email.attachments:
        message = MIMEMultipart("mixed")
        message.attach(body_part)
        for attachment in email.attachments:
            maintype, _, subtype = attachment.content_type.partition("/")
            part = MIMEBase(maintype or "application", subtype or "octet-stream")
            content = attachment.content
            if isinstance(content, str):
                content = content.encode("utf-8")
            part.set_payload(content)
            encoders.encode_base64(part)
            part.add_header(
                "Content-Disposition", "attachment", filename=attachment.filename
            )
            message.attach(part)
    else:
        message = body_part

    message["To"] = ", ".join(email.to)
    if email.cc:
        message["Cc"] = ", ".join(email.cc)
    if email.bcc:
        message["Bcc"] = ", ".join(email.bcc)
    message["Subject"] = email.subject
    return message


def build_raw_message(email: EmailComposition) -> str:
    """Base64url-encoded RFC 2822 message for the ``raw`` field."""
    return base64.urlsafe_b64encode(build_mime_message(email).as_bytes()).decode()


def send_message(
    service: Resource, user_id: str, email: EmailComposition
) -> dict[str, Any]:
    """Send an email message."""
    recipients = ", ".join(email.to)
    try:
        sent: dict[str, Any] = (
            service.users()
            .messages()
            .send(userId=user_id, body={"raw": build_raw_message(email)})
            .execute()
        )
        logger.info("Email sent successfully: %s to %s", sent.get("id"), recipients)
        return sent
    except Exception as e:
        logger.error("Failed to send message to %s: %s", recipients, e)
        raise APIError.from_exception("Failed to send message", e) from e


def get_email_stats(service: Resource, user_id: str = "me") -> EmailStats:
    """Total and unread counts from the list endpoint's size estimate.

    Archived, spam and trash counts would need additional queries and are
    reported as zero.
    """
    try:
        messages = service.users().messages()
        unread = messages.list(userId=user_id, q="is:unread", maxResults=1).execute()
        everything = messages.list(userId=user_id, maxResults=1).execute()
    except Exception as e:
        logger.error("Failed to get email stats: %s", e)
        raise APIError.from_exception("Failed to get email stats", e) from e

    stats = EmailStats(
        total=everything.get("resultSizeEstimate", 0),
        unread=unread.get("resultSizeEstimate", 0),
    )
    logger.info("Email stats: %d total, %d unread", stats.total, stats.unread)
    return stats


def parse_headers(message: dict[str, Any]) -> dict[str, str]:
    """Extract common headers from message payload."""
    headers = {}
    payload = message.get("payload", {})
    for header in payload.get("headers", []):
        name = header.get("name", "").lower()
        if name in ("from", "to", "subject", "date", "cc", "bcc"):
            headers[name.capitalize()] = header.get("value", "")
    return headers


def _safe_base64_decode(data: str) -> str:
    """Decode base64url body data, returning "" if it is malformed."""
    try:
        return base64.urlsafe_b64decode(data).decode("utf-8", errors="replace")
    except (ValueError, UnicodeDecodeError) as e:
        logger.warning("Failed to decode base64 body data: %s", e)
        return ""


def decode_body(message: dict[str, Any]) -> str:
    """Decode message body, preferring text/plain over text/html."""
    payload = message.get("payload", {})

    if "body" in payload and payload["body"].get("data"):
        return _safe_base64_decode(payload["body"]["data"])

    parts = payload.get("parts", [])
    for mime_type in ("text/plain", "text/html"):
        for part in parts:
            if part.get("mimeType", "") == mime_type and part.get("body", {}).get(
                "data"
            ):
                return _safe_base64_decode(part["body"]["data"])

    # Nested multipart
    for part in parts:
        if "parts" in part:
            result = decode_body({"payload": part})
            if result:
                return result

    return ""
