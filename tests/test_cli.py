"""Tests for the gmail-mcp command-line interface."""

from __future__ import annotations

import io
import logging
from unittest.mock import MagicMock

import pytest

from gmail_mcp_manager.cli import build_parser, main, print_documentation
from gmail_mcp_manager.gmail.models import BatchAction, EmailStats
from gmail_mcp_manager.utils.errors import (
    APIError,
    AuthenticationError,
    ValidationError,
)

SEND_ARGS = ("messages", "send", "--to", "a@example.com", "--subject", "Hi")


@pytest.fixture(autouse=True)
def quiet_logging(mocker):
    """Keep main() from reconfiguring the root logger during tests."""
    return mocker.patch("gmail_mcp_manager.cli.configure_logging")


@pytest.fixture
def manager() -> MagicMock:
    manager = MagicMock()
    manager.context7_enabled = True
    return manager


def run_cli(manager: MagicMock, *argv: str) -> int:
    return main(list(argv), manager_factory=lambda **kwargs: manager)


class TestParser:
    """Tests for argument parsing."""

    def test_no_command_prints_help(self, capsys) -> None:
        assert main([], manager_factory=MagicMock()) == 1
        assert "usage: gmail-mcp" in capsys.readouterr().out

    def test_aliases(self) -> None:
        parser = build_parser()

        assert parser.parse_args(["msg", "list"]).command == "msg"
        assert parser.parse_args(["docs", "status"]).command == "docs"

    def test_group_requires_subcommand(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["auth"])

        assert exc_info.value.code == 2

    def test_version(self, capsys) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--version"])

        assert "gmail-mcp 1.3.3" in capsys.readouterr().out


class TestAuthCommands:
    """Tests for auth login/logout/status."""

    def test_login(self, manager: MagicMock, capsys) -> None:
        assert run_cli(manager, "auth", "login") == 0

        manager.initialize.assert_called_once()
        assert "Authentication successful!" in capsys.readouterr().out

    def test_login_failure_exits_1(self, manager: MagicMock, capsys) -> None:
        manager.initialize.side_effect = AuthenticationError(
            "OAuth2 error: access_denied"
        )

        assert run_cli(manager, "auth", "login") == 1

        err = capsys.readouterr().err
        assert "Authentication error: OAuth2 error: access_denied" in err
        assert "gmail-mcp auth login" in err

    def test_logout(self, manager: MagicMock) -> None:
        assert run_cli(manager, "auth", "logout") == 0
        manager.logout.assert_called_once()

    def test_status_authenticated(self, manager: MagicMock, capsys) -> None:
        manager.token_info.return_value = {"expires_in": "3599"}

        assert run_cli(manager, "auth", "status") == 0
        assert '"expires_in": "3599"' in capsys.readouterr().out

    def test_status_not_authenticated(self, manager: MagicMock, capsys) -> None:
        manager.token_info.side_effect = AuthenticationError(
            "No access token available"
        )

        assert run_cli(manager, "auth", "status") == 1
        assert "Not authenticated" in capsys.readouterr().out


class TestMessageCommands:
    """Tests for messages list/get/send."""

    def test_list(self, manager: MagicMock, capsys) -> None:
        manager.list_messages.return_value = {
            "messages": [{"id": "m1", "threadId": "t1"}],
            "resultSizeEstimate": 1,
        }

        code = run_cli(
            manager, "msg", "list", "-q", "is:unread", "-l", "INBOX,Label_1", "-m", "5"
        )

        assert code == 0
        manager.list_messages.assert_called_once_with(
            query="is:unread",
            label_ids=["INBOX", "Label_1"],
            max_results=5,
            include_spam_trash=False,
        )
        out = capsys.readouterr().out
        assert "Found 1 messages:" in out
        assert "1. ID: m1 | Thread: t1" in out

    def test_list_empty(self, manager: MagicMock, capsys) -> None:
        manager.list_messages.return_value = {"resultSizeEstimate": 0}

        assert run_cli(manager, "msg", "list") == 0
        assert "No messages found" in capsys.readouterr().out

    def test_get(self, manager: MagicMock, sample_email, capsys) -> None:
        manager.get_message.return_value = sample_email

        assert run_cli(manager, "messages", "get", "18abc123def", "-f", "full") == 0

        manager.get_message.assert_called_once_with("18abc123def", "full")
        out = capsys.readouterr().out
        assert "Test Email Subject" in out
        assert "This is the email body content." in out

    def test_send_with_body(self, manager: MagicMock, capsys) -> None:
        manager.send_message.return_value = {"id": "sent1"}

        code = run_cli(
            manager,
            "messages",
            "send",
            "--to",
            "a@example.com, b@example.com",
            "--cc",
            "c@example.com",
            "--subject",
            "Hi",
            "--body",
            "<b>Hello</b>",
            "--html",
        )

        assert code == 0
        email = manager.send_message.call_args.args[0]
        assert email.to == ["a@example.com", "b@example.com"]
        assert email.cc == ["c@example.com"]
        assert email.bcc == []
        assert email.is_html
        assert "sent1" in capsys.readouterr().out

    def test_send_reads_body_from_stdin(
        self, manager: MagicMock, monkeypatch
    ) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO("Body from pipe\n"))
        manager.send_message.return_value = {"id": "sent1"}

        assert run_cli(manager, *SEND_ARGS) == 0
        assert manager.send_message.call_args.args[0].body == "Body from pipe\n"

    def test_send_empty_body_is_rejected(
        self, manager: MagicMock, monkeypatch, capsys
    ) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO("  \n"))

        assert run_cli(manager, *SEND_ARGS) == 1

        manager.send_message.assert_not_called()
        assert "Invalid input: Body is required" in capsys.readouterr().err

    def test_api_error_shows_status(self, manager: MagicMock, capsys) -> None:
        manager.get_message.side_effect = APIError(
            "Failed to get message x: gone", status_code=404
        )

        assert run_cli(manager, "messages", "get", "x") == 1
        assert "Gmail API error (404)" in capsys.readouterr().err

    def test_validation_error(self, manager: MagicMock, capsys) -> None:
        manager.get_message.side_effect = ValidationError(
            "Invalid message_id format: x y"
        )

        assert run_cli(manager, "messages", "get", "x y") == 1
        err = capsys.readouterr().err
        assert "Invalid input" in err
        assert "auth login" not in err


class TestOtherCommands:
    """Tests for drafts, batch, labels, stats and docs."""

    def test_drafts(self, manager: MagicMock, capsys) -> None:
        manager.list_drafts.return_value = {
            "drafts": [{"id": "d1", "message": {"id": "m1"}}],
            "resultSizeEstimate": 1,
        }
        manager.send_draft.return_value = {"id": "m1"}

        assert run_cli(manager, "drafts", "list", "-m", "3") == 0
        assert run_cli(manager, "drafts", "send", "d1") == 0

        manager.list_drafts.assert_called_once_with(max_results=3)
        manager.send_draft.assert_called_once_with("d1")
        out = capsys.readouterr().out
        assert "1. ID: d1 | Message ID: m1" in out
        assert "Draft sent successfully!" in out

    def test_draft_create(self, manager: MagicMock) -> None:
        manager.create_draft.return_value = {"id": "d2"}

        code = run_cli(
            manager, "drafts", "create", "--to", "a@example.com", "--subject", "s",
            "--body", "b",
        )

        assert code == 0
        assert manager.create_draft.call_args.args[0].subject == "s"

    @pytest.mark.parametrize(
        ("command", "action"),
        [("mark-read", BatchAction.READ), ("archive", BatchAction.ARCHIVE)],
    )
    def test_batch(
        self, manager: MagicMock, command: str, action: BatchAction
    ) -> None:
        assert run_cli(manager, "batch", command, "m1", "m2") == 0

        operation = manager.perform_batch_operation.call_args.args[0]
        assert operation.action is action
        assert operation.message_ids == ["m1", "m2"]

    def test_labels_and_stats(self, manager: MagicMock, capsys) -> None:
        manager.get_labels.return_value = {
            "labels": [{"id": "INBOX", "name": "INBOX", "type": "system"}]
        }
        manager.get_email_stats.return_value = EmailStats(total=10, unread=2)

        assert run_cli(manager, "labels") == 0
        assert run_cli(manager, "stats") == 0

        out = capsys.readouterr().out
        assert "1. INBOX (INBOX) - Type: system" in out
        assert "Unread messages: 2" in out

    def test_docs_commands(self, manager: MagicMock, capsys) -> None:
        manager.context7_stats.return_value = {"size": 0, "keys": []}
        manager.get_documentation.return_value = None

        assert run_cli(manager, "docs", "status") == 0
        assert run_cli(manager, "context7", "clear-cache") == 0
        assert run_cli(manager, "docs", "get", "sendMessage", "-c", "HTML") == 0

        manager.clear_context7_cache.assert_called_once()
        manager.get_documentation.assert_called_once_with("sendMessage", "HTML")
        out = capsys.readouterr().out
        assert "Cached operations: None" in out
        assert "No documentation found" in out

    def test_no_context7_flag(self, manager: MagicMock, capsys) -> None:
        manager.get_labels.return_value = {"labels": []}

        assert run_cli(manager, "--no-context7", "labels") == 0

        manager.disable_context7.assert_called_once()
        assert "Context7 integration disabled" in capsys.readouterr().out


class TestMainErrors:
    """Tests for top-level failure handling."""

    def test_factory_failure(self, capsys) -> None:
        def factory(**kwargs):
            raise AuthenticationError("Missing required environment variables")

        assert main(["labels"], manager_factory=factory) == 1
        err = capsys.readouterr().err
        assert "Initialization failed: Missing required environment variables" in err
        assert "auth login" not in err

    def test_factory_receives_documentation_printer(self, manager: MagicMock) -> None:
        factory = MagicMock(return_value=manager)
        manager.get_labels.return_value = {"labels": []}

        main(["labels"], manager_factory=factory)

        factory.assert_called_once_with(on_documentation=print_documentation)

    def test_unexpected_error(self, manager: MagicMock, capsys) -> None:
        manager.get_labels.side_effect = RuntimeError("kaboom")

        assert run_cli(manager, "labels") == 1
        assert "Unexpected error: kaboom" in capsys.readouterr().err

    def test_keyboard_interrupt(self, manager: MagicMock, capsys) -> None:
        manager.get_labels.side_effect = KeyboardInterrupt

        assert run_cli(manager, "labels") == 1
        assert "interrupted" in capsys.readouterr().err

    def test_verbose_sets_debug(self, manager: MagicMock, quiet_logging) -> None:
        manager.get_labels.return_value = {"labels": []}

        run_cli(manager, "-v", "labels")

        quiet_logging.assert_called_once_with(logging.DEBUG)
