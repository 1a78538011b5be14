"""Gmail draft operations."""

from __future__ import annotations

import logging
from typing import Any

from googleapiclient.discovery import Resource

from gmail_mcp_manager.gmail.messages import build_raw_message
from gmail_mcp_manager.gmail.models import EmailComposition
from gmail_mcp_manager.utils.errors import APIError

logger = logging.getLogger(__name__)


def list_drafts(
    service: Resource,
    user_id: str = "me",
    max_results: int = 10,
    page_token: str | None = None,
) -> dict[str, Any]:
    """List one page of drafts."""
    params: dict[str, Any] = {"userId": user_id, "maxResults": max_results}
    if page_token:
        params["pageToken"] = page_token

    try:
        response: dict[str, Any] = service.users().drafts().list(**params).execute()
        logger.info("Found %s drafts", response.get("resultSizeEstimate", 0))
        return response
    except Exception as e:
        logger.error("Failed to list drafts: %s", e)
        raise APIError.from_exception("Failed to list drafts", e) from e


def create_draft(
    service: Resource, user_id: str, email: EmailComposition
) -> dict[str, Any]:
    """Create a draft from a composition."""
    try:
        draft: dict[str, Any] = (
            service.users()
            .drafts()
            .create(
                userId=user_id,
                body={"message": {"raw": build_raw_message(email)}},
            )
            .execute()
        )
        logger.info("Draft created: %s", draft.get("id"))
        return draft
    except Exception as e:
        logger.error("Failed to create draft: %s", e)
        raise APIError.from_exception("Failed to create draft", e) from e


def update_draft(
    service: Resource, user_id: str, draft_id: str, email: EmailComposition
) -> dict[str, Any]:
    """Replace the content of an existing draft."""
    try:
        draft: dict[str, Any] = (
            service.users()
            .drafts()
            .update(
                userId=user_id,
                id=draft_id,
                body={"message": {"raw": build_raw_message(email)}},
            )
            .execute()
        )
        logger.info("Draft updated: %s", draft_id)
        return draft
    except Exception as e:
        logger.error("Failed to update draft %s: %s", draft_id, e)
        raise APIError.from_exception(f"Failed to update draft {draft_id}", e) from e


def send_draft(service: Resource, user_id: str, draft_id: str) -> dict[str, Any]:
    """Send an existing draft; returns the sent message."""
    try:
        sent: dict[str, Any] = (
            service.users()
            .drafts()
            .send(userId=user_id, body={"id": draft_id})
            .execute()
        )
        logger.info("Draft sent: %s", draft_id)
        return sent
    except Exception as e:
        logger.error("Failed to send draft %s: %s", draft_id, e)
        raise APIError.from_exception(f"Failed to send draft {draft_id}", e) from e
