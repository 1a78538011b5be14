"""Tests for input validation."""

from __future__ import annotations

import pytest

from gmail_mcp_manager.gmail.models import BatchAction, BatchOperation, EmailComposition
from gmail_mcp_manager.middleware.validator import (
    MAX_QUERY_LENGTH,
    sanitize_search_query,
    split_comma_list,
    validate_batch_operation,
    validate_composition,
    validate_email,
    validate_gmail_id,
    validate_max_results,
    validate_message_ids,
)
from gmail_mcp_manager.utils.errors import ValidationError


class TestEmailValidation:
    """Tests for address validation."""

    @pytest.mark.parametrize(
        "address",
        [
            "user@example.com",
            "first.last+tag@sub.example.co.uk",
            "  padded@example.org ",
        ],
    )
    def test_valid_addresses(self, address: str) -> None:
        assert validate_email(address) == address.strip()

    @pytest.mark.parametrize(
        "address",
        ["", "   ", "no-at-sign", "user@", "@example.com", "user@example"],
    )
    def test_invalid_addresses(self, address: str) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_email(address, field="cc")

        assert exc_info.value.field == "cc"

    def test_too_long(self) -> None:
        with pytest.raises(ValidationError, match="too long"):
            validate_email("a" * 250 + "@example.com")

    def test_split_comma_list(self) -> None:
        assert split_comma_list(" a@x.com, ,b@y.com,") == ["a@x.com", "b@y.com"]


class TestIdValidation:
    """Tests for Gmail ID and paging checks."""

    def test_valid_id(self) -> None:
        assert validate_gmail_id(" 18abc123def ") == "18abc123def"

    @pytest.mark.parametrize("value", ["", "has space", "semi;colon", "x" * 65])
    def test_invalid_id(self, value: str) -> None:
        with pytest.raises(ValidationError):
            validate_gmail_id(value, "draft_id")

    def test_empty_message_id_list(self) -> None:
        with pytest.raises(ValidationError, match="cannot be empty"):
            validate_message_ids([])

    @pytest.mark.parametrize("value", [1, 10, 500])
    def test_max_results_in_range(self, value: int) -> None:
        assert validate_max_results(value) == value

    @pytest.mark.parametrize("value", [0, -1, 501])
    def test_max_results_out_of_range(self, value: int) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_max_results(value)

        assert exc_info.value.field == "max_results"


class TestQuerySanitizing:
    """Tests for search query normalization."""

    def test_collapses_whitespace(self) -> None:
        query = sanitize_search_query("  from:boss \n  is:unread ")

        assert query == "from:boss is:unread"

    def test_rejects_long_query(self) -> None:
        with pytest.raises(ValidationError):
            sanitize_search_query("x" * (MAX_QUERY_LENGTH + 1))


class TestCompositionAndBatch:
    """Tests for composite validators."""

    def test_composition_requires_recipient(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_composition(EmailComposition(to=[], subject="s", body="b"))

        assert exc_info.value.field == "to"

    def test_composition_allows_empty_subject(self) -> None:
        email = EmailComposition(to=[" a@example.com"], subject="", body="b")

        assert validate_composition(email).to == ["a@example.com"]

    def test_composition_checks_bcc(self) -> None:
        email = EmailComposition(
            to=["a@example.com"], subject="s", body="b", bcc=["broken"]
        )

        with pytest.raises(ValidationError) as exc_info:
            validate_composition(email)

        assert exc_info.value.field == "bcc"

    def test_batch_action_string_is_coerced(self) -> None:
        operation = BatchOperation(message_ids=["m1"], action="archive")  # type: ignore[arg-type]

        assert validate_batch_operation(operation).action is BatchAction.ARCHIVE

    def test_batch_unknown_action(self) -> None:
        operation = BatchOperation(message_ids=["m1"], action="explode")  # type: ignore[arg-type]

        with pytest.raises(ValidationError) as exc_info:
            validate_batch_operation(operation)

        assert exc_info.value.field == "action"
        assert "read, unread, archive, delete, trash, spam" in exc_info.value.message
