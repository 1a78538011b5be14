"""Data types passed to Gmail operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


@dataclass
class EmailAttachment:
    """File attached to an outgoing message."""

    filename: str
    content: bytes | str
    content_type: str = "application/octet-stream"


@dataclass
class EmailComposition:
    """Outgoing message, used for sending and for drafts."""

    to: list[str]
    subject: str
    body: str
    cc: list[str] = field(default_factory=list)
    bcc: list[str] = field(default_factory=list)
    is_html: bool = False
    attachments: list[EmailAttachment] = field(default_factory=list)


class BatchAction(str, Enum):
    """Actions applied to a set of messages at once.

    Attributes:
        READ: Remove the UNREAD label.
        UNREAD: Add the UNREAD label.
        ARCHIVE: Remove the INBOX label.
        DELETE: Add TRASH and remove INBOX via batchModify.
        TRASH: Trash each message individually.
        SPAM: Add SPAM and remove INBOX.
    """

    READ = "read"
    UNREAD = "unread"
    ARCHIVE = "archive"
    DELETE = "delete"
    TRASH = "trash"
    SPAM = "spam"


@dataclass
class BatchOperation:
    """A batch action plus optional extra labels to add afterwards."""

    message_ids: list[str]
    action: BatchAction
    label_ids: list[str] = field(default_factory=list)


@dataclass
class EmailStats:
    """Mailbox overview."""

    total: int = 0
    unread: int = 0
    archived: int = 0
    spam: int = 0
    trash: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "unread": self.unread,
            "archived": self.archived,
            "spam": self.spam,
            "trash": self.trash,
        }


__all__ = [
    "EmailAttachment",
    "EmailComposition",
    "BatchAction",
    "BatchOperation",
    "EmailStats",
]
