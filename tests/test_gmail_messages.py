"""Tests for Gmail message, draft, thread and label operations."""

from __future__ import annotations

import base64
import email
from unittest.mock import MagicMock

import pytest

from gmail_mcp_manager.gmail.drafts import (
    create_draft,
    list_drafts,
    send_draft,
    update_draft,
)
from gmail_mcp_manager.gmail.labels import get_label_by_name, list_labels
from gmail_mcp_manager.gmail.messages import (
    build_mime_message,
    build_raw_message,
    decode_body,
    get_email_stats,
    get_message,
    list_messages,
    parse_headers,
    send_message,
)
from gmail_mcp_manager.gmail.models import EmailAttachment, EmailComposition
from gmail_mcp_manager.gmail.threads import get_thread, list_threads
from gmail_mcp_manager.utils.errors import APIError


class FakeHttpError(Exception):
    """Stand-in carrying a response status like googleapiclient's HttpError."""

    def __init__(self, status: int) -> None:
        super().__init__(f"HTTP {status}")
        self.resp = MagicMock(status=status)


def _decode_raw(raw: str) -> email.message.Message:
    return email.message_from_bytes(base64.urlsafe_b64decode(raw))


@pytest.fixture
def composition() -> EmailComposition:
    return EmailComposition(
        to=["alice@example.com", "bob@example.com"],
        subject="Quarterly report",
        body="Numbers attached.",
        cc=["carol@example.com"],
    )


class TestListMessages:
    """Tests for list_messages()."""

    def test_passes_query_and_labels(self, mock_gmail_service) -> None:
        """Query, labels and paging map to the list parameters."""
        list_call = mock_gmail_service.users().messages().list
        list_call.return_value.execute.return_value = {
            "messages": [{"id": "m1", "threadId": "t1"}],
            "resultSizeEstimate": 1,
        }

        response = list_messages(
            mock_gmail_service,
            "me",
            query="is:unread",
            label_ids=["INBOX"],
            max_results=25,
            page_token="next",
        )

        list_call.assert_called_with(
            userId="me",
            maxResults=25,
            includeSpamTrash=False,
            q="is:unread",
            labelIds=["INBOX"],
            pageToken="next",
        )
        assert response["resultSizeEstimate"] == 1

    def test_omits_empty_filters(self, mock_gmail_service) -> None:
        """Unset query, labels and page token are not sent."""
        list_call = mock_gmail_service.users().messages().list
        list_call.return_value.execute.return_value = {}

        list_messages(mock_gmail_service)

        list_call.assert_called_with(userId="me", maxResults=10, includeSpamTrash=False)

    def test_api_failure_keeps_status(self, mock_gmail_service) -> None:
        """HTTP status from the client library is carried on APIError."""
        list_call = mock_gmail_service.users().messages().list
        list_call.return_value.execute.side_effect = FakeHttpError(403)

        with pytest.raises(APIError) as exc_info:
            list_messages(mock_gmail_service)

        assert exc_info.value.status_code == 403
        assert exc_info.value.message.startswith("Failed to list messages")

    def test_get_message_format(self, mock_gmail_service, sample_email) -> None:
        """get_message passes the id and format through."""
        get_call = mock_gmail_service.users().messages().get
        get_call.return_value.execute.return_value = sample_email

        message = get_message(mock_gmail_service, "me", "18abc123def", "metadata")

        get_call.assert_called_with(userId="me", id="18abc123def", format="metadata")
        assert message["id"] == "18abc123def"

    def test_get_message_failure_defaults_to_500(self, mock_gmail_service) -> None:
        """Errors without an HTTP status become 500."""
        get_call = mock_gmail_service.users().messages().get
        get_call.return_value.execute.side_effect = RuntimeError("socket closed")

        with pytest.raises(APIError) as exc_info:
            get_message(mock_gmail_service, "me", "x")

        assert exc_info.value.status_code == 500
        assert "socket closed" in exc_info.value.message


class TestMimeBuilding:
    """Tests for outgoing message construction."""

    def test_plain_text_message(self, composition: EmailComposition) -> None:
        """Without attachments the message is a single text part."""
        message = _decode_raw(build_raw_message(composition))

        assert message.get_content_type() == "text/plain"
        assert message["To"] == "alice@example.com, bob@example.com"
        assert message["Cc"] == "carol@example.com"
        assert message["Bcc"] is None
        assert message["Subject"] == "Quarterly report"
        assert message.get_payload(decode=True).decode() == "Numbers attached."

    def test_html_message(self, composition: EmailComposition) -> None:
        """is_html switches the body part to text/html."""
        composition.is_html = True
        composition.body = "<h1>Hi</h1>"

        message = build_mime_message(composition)

        assert message.get_content_type() == "text/html"

    def test_attachments_make_multipart_mixed(
        self, composition: EmailComposition
    ) -> None:
        """Attachments produce multipart/mixed with the body first."""
        composition.attachments = [
            EmailAttachment(
                filename="report.csv", content="a,b\n1,2\n", content_type="text/csv"
            ),
            EmailAttachment(filename="blob.bin", content=b"\x00\x01\x02"),
        ]

        message = _decode_raw(build_raw_message(composition))
        parts = message.get_payload()

        assert message.get_content_type() == "multipart/mixed"
        assert len(parts) == 3
        assert parts[0].get_content_type() == "text/plain"
        assert parts[1].get_content_type() == "text/csv"
        assert parts[1].get_filename() == "report.csv"
        assert parts[1].get_payload(decode=True) == b"a,b\n1,2\n"
        assert parts[2].get_content_type() == "application/octet-stream"
        assert parts[2].get("Content-Transfer-Encoding") == "base64"
        assert parts[2].get_payload(decode=True) == b"\x00\x01\x02"

    def test_send_message(
        self, mock_gmail_service, composition: EmailComposition
    ) -> None:
        """send_message posts the encoded message and returns the result."""
        send_call = mock_gmail_service.users().messages().send
        send_call.return_value.execute.return_value = {"id": "sent1", "threadId": "t1"}

        sent = send_message(mock_gmail_service, "me", composition)

        assert sent == {"id": "sent1", "threadId": "t1"}
        body = send_call.call_args.kwargs["body"]
        assert _decode_raw(body["raw"])["Subject"] == "Quarterly report"

    def test_send_failure(
        self, mock_gmail_service, composition: EmailComposition
    ) -> None:
        send_call = mock_gmail_service.users().messages().send
        send_call.return_value.execute.side_effect = FakeHttpError(400)

        with pytest.raises(APIError, match="Failed to send message"):
            send_message(mock_gmail_service, "me", composition)


class TestEmailStats:
    """Tests for get_email_stats()."""

    def test_counts_from_size_estimates(self, mock_gmail_service) -> None:
        """Total and unread come from two size estimates; the rest are zero."""
        list_call = mock_gmail_service.users().messages().list
        list_call.return_value.execute.side_effect = [
            {"resultSizeEstimate": 7},
            {"resultSizeEstimate": 120},
        ]

        stats = get_email_stats(mock_gmail_service)

        assert stats.to_dict() == {
            "total": 120,
            "unread": 7,
            "archived": 0,
            "spam": 0,
            "trash": 0,
        }

    def test_failure_is_wrapped(self, mock_gmail_service) -> None:
        list_call = mock_gmail_service.users().messages().list
        list_call.return_value.execute.side_effect = FakeHttpError(429)

        with pytest.raises(APIError) as exc_info:
            get_email_stats(mock_gmail_service)

        assert exc_info.value.status_code == 429


class TestMessageParsing:
    """Tests for header and body extraction."""

    def test_parse_headers(self, sample_email) -> None:
        headers = parse_headers(sample_email)

        assert headers["From"] == "sender@example.com"
        assert headers["Subject"] == "Test Email Subject"
        assert "Date" in headers

    def test_decode_single_part_body(self, sample_email) -> None:
        assert decode_body(sample_email) == "This is the email body content."

    def test_decode_prefers_plain_text(self) -> None:
        """text/plain wins over text/html in multipart messages."""
        plain = base64.urlsafe_b64encode(b"plain body").decode()
        html = base64.urlsafe_b64encode(b"<p>html body</p>").decode()
        message = {
            "payload": {
                "parts": [
                    {"mimeType": "text/html", "body": {"data": html}},
                    {"mimeType": "text/plain", "body": {"data": plain}},
                ]
            }
        }

        assert decode_body(message) == "plain body"

    def test_decode_nested_multipart(self) -> None:
        data = base64.urlsafe_b64encode(b"nested").decode()
        message = {
            "payload": {
                "parts": [
                    {
                        "mimeType": "multipart/alternative",
                        "parts": [{"mimeType": "text/plain", "body": {"data": data}}],
                    }
                ]
            }
        }

        assert decode_body(message) == "nested"

    def test_decode_malformed_body_returns_empty(self) -> None:
        assert decode_body({"payload": {"body": {"data": "***"}}}) == ""


class TestDrafts:
    """Tests for draft operations."""

    def test_list_drafts(self, mock_gmail_service) -> None:
        list_call = mock_gmail_service.users().drafts().list
        list_call.return_value.execute.return_value = {"drafts": [{"id": "d1"}]}

        response = list_drafts(mock_gmail_service, "me", max_results=5, page_token="p")

        list_call.assert_called_with(userId="me", maxResults=5, pageToken="p")
        assert response["drafts"] == [{"id": "d1"}]

    def test_create_draft_wraps_raw_message(
        self, mock_gmail_service, composition: EmailComposition
    ) -> None:
        """The encoded message is sent under message.raw."""
        create_call = mock_gmail_service.users().drafts().create
        create_call.return_value.execute.return_value = {
            "id": "d1",
            "message": {"id": "m1"},
        }

        draft = create_draft(mock_gmail_service, "me", composition)

        assert draft["id"] == "d1"
        raw = create_call.call_args.kwargs["body"]["message"]["raw"]
        assert _decode_raw(raw)["To"] == "alice@example.com, bob@example.com"

    def test_update_draft(
        self, mock_gmail_service, composition: EmailComposition
    ) -> None:
        update_call = mock_gmail_service.users().drafts().update
        update_call.return_value.execute.return_value = {"id": "d1"}

        update_draft(mock_gmail_service, "me", "d1", composition)

        assert update_call.call_args.kwargs["id"] == "d1"
        assert "raw" in update_call.call_args.kwargs["body"]["message"]

    def test_send_draft(self, mock_gmail_service) -> None:
        send_call = mock_gmail_service.users().drafts().send
        send_call.return_value.execute.return_value = {"id": "m9"}

        sent = send_draft(mock_gmail_service, "me", "d1")

        send_call.assert_called_with(userId="me", body={"id": "d1"})
        assert sent["id"] == "m9"

    def test_send_missing_draft(self, mock_gmail_service) -> None:
        send_call = mock_gmail_service.users().drafts().send
        send_call.return_value.execute.side_effect = FakeHttpError(404)

        with pytest.raises(APIError) as exc_info:
            send_draft(mock_gmail_service, "me", "gone")

        assert exc_info.value.status_code == 404
        assert "gone" in exc_info.value.message


class TestThreadsAndLabels:
    """Tests for thread and label operations."""

    def test_list_threads(self, mock_gmail_service) -> None:
        list_call = mock_gmail_service.users().threads().list
        list_call.return_value.execute.return_value = {"threads": []}

        list_threads(
            mock_gmail_service, "me", query="from:boss", include_spam_trash=True
        )

        list_call.assert_called_with(
            userId="me", maxResults=10, includeSpamTrash=True, q="from:boss"
        )

    def test_get_thread(self, mock_gmail_service) -> None:
        get_call = mock_gmail_service.users().threads().get
        get_call.return_value.execute.return_value = {
            "id": "t1",
            "messages": [{"id": "m1"}, {"id": "m2"}],
        }

        thread = get_thread(mock_gmail_service, "me", "t1", "minimal")

        get_call.assert_called_with(userId="me", id="t1", format="minimal")
        assert len(thread["messages"]) == 2

    def test_list_labels_returns_raw_response(self, mock_gmail_service) -> None:
        labels_call = mock_gmail_service.users().labels().list
        labels_call.return_value.execute.return_value = {
            "labels": [{"id": "INBOX", "name": "INBOX", "type": "system"}]
        }

        assert list_labels(mock_gmail_service)["labels"][0]["id"] == "INBOX"

    def test_get_label_by_name(self, mock_gmail_service) -> None:
        labels_call = mock_gmail_service.users().labels().list
        labels_call.return_value.execute.return_value = {
            "labels": [
                {"id": "Label_1", "name": "Receipts"},
                {"id": "Label_2", "name": "Travel"},
            ]
        }

        assert get_label_by_name(mock_gmail_service, "Travel")["id"] == "Label_2"
        assert get_label_by_name(mock_gmail_service, "Missing") is None
