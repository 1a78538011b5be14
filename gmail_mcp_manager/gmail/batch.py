"""Batch label changes across many messages."""

from __future__ import annotations

import logging

from googleapiclient.discovery import Resource

from gmail_mcp_manager.gmail.models import BatchAction, BatchOperation
from gmail_mcp_manager.utils.errors import APIError

logger = logging.getLogger(__name__)

# (addLabelIds, removeLabelIds) per action; TRASH is handled per message
BATCH_LABEL_CHANGES: dict[BatchAction, tuple[list[str], list[str]]] = {
    BatchAction.READ: ([], ["UNREAD"]),
    BatchAction.UNREAD: (["UNREAD"], []),
    BatchAction.ARCHIVE: ([], ["INBOX"]),
    BatchAction.DELETE: (["TRASH"], ["INBOX"]),
    BatchAction.SPAM: (["SPAM"], ["INBOX"]),
}


def _batch_modify(
    service: Resource,
    user_id: str,
    message_ids: list[str],
    add_labels: list[str],
    remove_labels: list[str],
) -> None:
    body: dict[str, list[str]] = {"ids": message_ids}
    if add_labels:
        body["addLabelIds"] = add_labels
    if remove_labels:
        body["removeLabelIds"] = remove_labels
    service.users().messages().batchModify(userId=user_id, body=body).execute()


def perform_batch_operation(
    service: Resource, user_id: str, operation: BatchOperation
) -> None:
    """Apply a batch action, then add any extra labels.

    ``delete`` only moves messages to the trash; nothing is permanently
    deleted.

    Raises:
        APIError: If any underlying call fails (400 for an unknown action).
    """
    try:
        action = BatchAction(operation.action)
    except ValueError as e:
        raise APIError(f"Unknown action: {operation.action}", status_code=400) from e

    ids = operation.message_ids
    try:
        if action is BatchAction.TRASH:
            for message_id in ids:
                service.users().messages().trash(userId=user_id, id=message_id).execute()
        else:
            add_labels, remove_labels = BATCH_LABEL_CHANGES[action]
            _batch_modify(service, user_id, ids, add_labels, remove_labels)

        if operation.label_ids:
            _batch_modify(service, user_id, ids, operation.label_ids, [])

    except Exception as e:
        logger.error("Failed to perform batch operation '%s': %s", action.value, e)
        raise APIError.from_exception("Failed to perform batch operation", e) from e

    logger.info(
        "Batch operation '%s' completed for %d messages", action.value, len(ids)
    )
