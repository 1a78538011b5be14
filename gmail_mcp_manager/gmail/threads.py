"""Gmail thread operations."""

from __future__ import annotations

import logging
from typing import Any

from googleapiclient.discovery import Resource

from gmail_mcp_manager.utils.errors import APIError

logger = logging.getLogger(__name__)


def list_threads(
    service: Resource,
    user_id: str = "me",
    query: str | None = None,
    label_ids: list[str] | None = None,
    max_results: int = 10,
    page_token: str | None = None,
    include_spam_trash: bool = False,
) -> dict[str, Any]:
    """List one page of threads matching query and labels."""
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
        response: dict[str, Any] = service.users().threads().list(**params).execute()
        logger.info("Found %s threads", response.get("resultSizeEstimate", 0))
        return response
    except Exception as e:
        logger.error("Failed to list threads: %s", e)
        raise APIError.from_exception("Failed to list threads", e) from e


def get_thread(
    service: Resource, user_id: str, thread_id: str, format: str = "full"
) -> dict[str, Any]:
    """Get a thread with all its messages."""
    try:
        thread: dict[str, Any] = (
            service.users()
            .threads()
            .get(userId=user_id, id=thread_id, format=format)
            .execute()
        )
        msg_count = len(thread.get("messages", []))
        logger.debug("Retrieved thread %s with %d messages", thread_id, msg_count)
        return thread
    except Exception as e:
        logger.error("Failed to get thread %s: %s", thread_id, e)
        raise APIError.from_exception(f"Failed to get thread {thread_id}", e) from e
