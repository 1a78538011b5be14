"""Gmail label operations."""

from __future__ import annotations

import logging
from typing import Any

from googleapiclient.discovery import Resource

from gmail_mcp_manager.utils.errors import APIError

logger = logging.getLogger(__name__)


def list_labels(service: Resource, user_id: str = "me") -> dict[str, Any]:
    """List all labels in the mailbox; returns the raw ``{labels: [...]}``."""
    try:
        response: dict[str, Any] = service.users().labels().list(userId=user_id).execute()
        logger.info("Found %d labels", len(response.get("labels", [])))
        return response
    except Exception as e:
        logger.error("Failed to get labels: %s", e)
        raise APIError.from_exception("Failed to get labels", e) from e


def get_label_by_name(
    service: Resource, name: str, user_id: str = "me"
) -> dict[str, Any] | None:
    """Find a label by name."""
    for label in list_labels(service, user_id).get("labels", []):
        if label.get("name") == name:
            return label
    return None
