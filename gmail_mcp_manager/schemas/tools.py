"""Pydantic parameter models for Gmail MCP Manager tools.

Models are divided into two categories:

- Read Tools: list, fetch and search operations
- Write Tools: operations that send mail or change message labels
"""

from typing import Literal

from pydantic import BaseModel, EmailStr, Field

from gmail_mcp_manager.gmail.models import BatchAction, EmailComposition

MessageFormat = Literal["full", "metadata", "minimal"]

# =============================================================================
# Read Tool Parameter Models
# =============================================================================


class ListMessagesParams(BaseModel):
    """Parameters for list_messages tool."""

    query: str | None = Field(
        None,
        description="Search query (e.g., 'is:unread', 'from:example@gmail.com')",
    )
    max_results: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum number of results to return",
    )
    label_ids: list[str] | None = Field(
        None,
        description="Label IDs to filter by",
    )
    include_spam_trash: bool = Field(
        default=False,
        description="Include spam and trash in results",
    )


class GetMessageParams(BaseModel):
    """Parameters for get_message tool."""

    message_id: str = Field(
        ...,
        min_length=1,
        description="The ID of the message to retrieve",
    )
    format: MessageFormat = Field(
        default="full",
        description="Level of detail to return",
    )


class SearchMessagesParams(BaseModel):
    """Parameters for search_messages tool.

    The first few matches are fetched with metadata as a detailed sample.
    """

    query: str = Field(
        ...,
        min_length=1,
        description="Advanced search query (Gmail search syntax)",
    )
    max_results: int = Field(
        default=20,
        ge=1,
        le=100,
        description="Maximum number of results",
    )
    include_spam_trash: bool = Field(
        default=False,
        description="Include spam and trash in search",
    )


# =============================================================================
# Write Tool Parameter Models
# =============================================================================


class ComposeParams(BaseModel):
    """Recipients and content shared by send_message and create_draft."""

    to: list[EmailStr] = Field(
        ...,
        min_length=1,
        description="Recipient email addresses",
    )
    subject: str = Field(
        ...,
        description="Email subject line",
    )
    body: str = Field(
        ...,
        description="Email body content",
    )
    cc: list[EmailStr] = Field(
        default_factory=list,
        description="CC email addresses",
    )
    bcc: list[EmailStr] = Field(
        default_factory=list,
        description="BCC email addresses",
    )
    is_html: bool = Field(
        default=False,
        description="Whether the body is HTML formatted",
    )

    def to_composition(self) -> EmailComposition:
        return EmailComposition(
            to=[str(a) for a in self.to],
            subject=self.subject,
            body=self.body,
            cc=[str(a) for a in self.cc],
            bcc=[str(a) for a in self.bcc],
            is_html=self.is_html,
        )


class SendMessageParams(ComposeParams):
    """Parameters for send_message tool."""


class CreateDraftParams(ComposeParams):
    """Parameters for create_draft tool."""


class BatchOperationParams(BaseModel):
    """Parameters for batch_operation tool.

    ``delete`` moves messages to the trash; nothing is permanently deleted.
    """

    message_ids: list[str] = Field(
        ...,
        min_length=1,
        description="Message IDs to operate on",
    )
    action: BatchAction = Field(
        ...,
        description="Action to perform (read, unread, archive, delete, trash, spam)",
    )
    label_ids: list[str] = Field(
        default_factory=list,
        description="Label IDs to add after the action",
    )
