"""Documentation lookup strategy.

Maps manager operations to search phrases and supplies the default fetch
strategy, which answers from canned Gmail API notes. Any callable taking a
search term and returning a DocumentationResult can replace it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass
class DocumentationResult:
    """Documentation attached to an operation."""

    documentation: str
    examples: list[str] = field(default_factory=list)
    relevant_links: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return {
            "documentation": self.documentation,
            "examples": list(self.examples),
            "relevant_links": list(self.relevant_links),
        }


DocumentationFetcher = Callable[[str], DocumentationResult | None]

OPERATION_SEARCH_TERMS: dict[str, str] = {
    "authenticate": "Gmail API OAuth2 authentication",
    "listMessages": "Gmail API list messages",
    "getMessage": "Gmail API get message details",
    "sendMessage": "Gmail API send email",
    "createDraft": "Gmail API create draft",
    "updateDraft": "Gmail API update draft",
    "sendDraft": "Gmail API send draft",
    "listDrafts": "Gmail API list drafts",
    "batchOperation": "Gmail API batch modify messages",
    "getLabels": "Gmail API list labels",
    "getThread": "Gmail API get thread",
    "listThreads": "Gmail API list threads",
    "getStats": "Gmail API mailbox statistics",
}


def build_search_term(operation: str, context: str | None = None) -> str:
    """Search phrase for an operation, with the context appended."""
    base = OPERATION_SEARCH_TERMS.get(operation, f"Gmail API {operation}")
    return f"{base} {context}" if context else base


CANNED_DOCUMENTATION: dict[str, DocumentationResult] = {
    "Gmail API OAuth2 authentication": DocumentationResult(
        documentation="""OAuth2 authentication for Gmail API requires:
1. Client ID and Client Secret from Google Cloud Console
2. Redirect URI configured in OAuth consent screen
3. Appropriate scopes (gmail.modify, gmail.readonly, etc.)
4. Token storage for refresh tokens

Security considerations:
- Store tokens with owner-only file permissions
- Use refresh tokens to avoid repeated authentication
- Check token expiry and refresh before it lapses""",
        examples=[
            "coordinator = OAuthCoordinator(config.oauth2, TokenStore()); "
            "coordinator.authenticate()",
            "manager = GmailManager.from_environment()  # reads .env",
        ],
        relevant_links=[
            "https://developers.google.com/gmail/api/auth/about-auth",
            "https://googleapis.dev/python/google-auth/latest/",
        ],
    ),
    "Gmail API list messages": DocumentationResult(
        documentation="""List messages supports filtering and pagination:
- Use the 'q' parameter for Gmail search queries
- Filter by label with labelIds
- Paginate with maxResults and pageToken
- includeSpamTrash includes spam and trash messages

Query examples:
- 'is:unread' - unread messages
- 'from:example@gmail.com' - from a specific sender
- 'subject:important' - 'important' in the subject
- 'has:attachment' - messages with attachments""",
        examples=[
            'manager.list_messages(query="is:unread", max_results=50)',
            'manager.list_messages(label_ids=["INBOX"], include_spam_trash=False)',
        ],
        relevant_links=[
            "https://developers.google.com/gmail/api/reference/rest/v1/users.messages/list",
            "https://developers.google.com/gmail/api/guides/filtering",
        ],
    ),
    "Gmail API send email": DocumentationResult(
        documentation="""Send email as a base64url-encoded RFC 2822 message:
- Set To, Cc, Bcc and Subject headers
- Plain text or HTML body
- Attachments as base64-encoded MIME parts
- multipart/mixed when attachments are present

MIME structure:
1. Headers (To, From, Subject, etc.)
2. Content-Type declaration
3. Message body (text/html or text/plain)
4. Attachments, if any""",
        examples=[
            'manager.send_message(EmailComposition(to=["user@example.com"], '
            'subject="Test", body="Hello!"))',
            'manager.send_message(EmailComposition(to=["user@example.com"], '
            'subject="HTML", body="<h1>Hello!</h1>", is_html=True))',
        ],
        relevant_links=[
            "https://developers.google.com/gmail/api/reference/rest/v1/users.messages/send",
            "https://developers.google.com/gmail/api/guides/sending",
        ],
    ),
}


def _placeholder(search_term: str) -> DocumentationResult:
    return DocumentationResult(
        documentation=f"""Documentation for: {search_term}

This is a placeholder response. A live documentation service would
return up-to-date content from the official Gmail API documentation.

Key points:
- Always check the official Gmail API documentation
- Handle API errors explicitly
- Respect rate limits and retry with backoff
- Keep OAuth tokens private""",
        examples=[
            "Check the official Gmail API documentation for examples",
            "Refer to the google-api-python-client documentation",
        ],
        relevant_links=[
            "https://developers.google.com/gmail/api",
            "https://github.com/googleapis/google-api-python-client",
        ],
    )


class StaticDocumentationProvider:
    """Default fetch strategy backed by canned documentation.

    A canned entry matches when the search term contains the last two
    words of its phrase ("send email", "list messages", ...).
    """

    def __init__(
        self, entries: dict[str, DocumentationResult] | None = None
    ) -> None:
        self._entries = entries if entries is not None else CANNED_DOCUMENTATION

    def __call__(self, search_term: str) -> DocumentationResult:
        term = search_term.lower()
        for phrase, result in self._entries.items():
            suffix = " ".join(phrase.lower().split()[-2:])
            if suffix in term:
                logger.debug("Matched canned documentation '%s'", phrase)
                return result
        return _placeholder(search_term)


__all__ = [
    "DocumentationResult",
    "DocumentationFetcher",
    "StaticDocumentationProvider",
    "OPERATION_SEARCH_TERMS",
    "build_search_term",
]
