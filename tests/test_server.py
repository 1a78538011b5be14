"""Tests for the Gmail MCP server.

Tests cover:
- Server creation and tool registration (all 8 tools)
- Tool annotations
- Lazy manager creation behind the tools
- Main entry point validation and transport selection
"""

from __future__ import annotations

import os
from unittest.mock import MagicMock, patch

import pytest

READ_TOOLS = [
    "list_messages",
    "get_message",
    "search_messages",
    "get_labels",
    "get_email_stats",
]
WRITE_TOOLS = ["send_message", "create_draft", "batch_operation"]


@pytest.fixture
def manager() -> MagicMock:
    return MagicMock()


@pytest.fixture
def server(manager: MagicMock):
    from gmail_mcp_manager.server import create_server

    return create_server(manager_factory=lambda: manager)


class TestServerCreation:
    """Tests for server creation and tool registration."""

    def test_create_server_returns_named_instance(self, server) -> None:
        from gmail_mcp_manager.server import SERVER_NAME

        assert server.name == SERVER_NAME

    def test_all_eight_tools_registered(self, server) -> None:
        """5 read tools and 3 write tools."""
        from gmail_mcp_manager.server import TOOL_COUNT

        names = {tool.name for tool in server._tool_manager.list_tools()}

        assert len(names) == TOOL_COUNT
        assert names == set(READ_TOOLS + WRITE_TOOLS)

    def test_creating_server_does_not_build_manager(self) -> None:
        """The manager is created on the first tool call, not at startup."""
        from gmail_mcp_manager.server import create_server

        factory = MagicMock()
        create_server(manager_factory=factory)

        factory.assert_not_called()


class TestToolAnnotations:
    """Tests for tool annotation hints."""

    def test_read_tools_are_read_only(self, server) -> None:
        for tool in server._tool_manager.list_tools():
            if tool.name in READ_TOOLS:
                assert tool.annotations is not None, f"{tool.name} has no annotations"
                assert tool.annotations.readOnlyHint is True, tool.name
                assert tool.annotations.idempotentHint is True, tool.name

    def test_write_tools_are_not_read_only(self, server) -> None:
        for tool in server._tool_manager.list_tools():
            if tool.name in WRITE_TOOLS:
                assert tool.annotations is not None, f"{tool.name} has no annotations"
                assert tool.annotations.readOnlyHint is False, tool.name

    def test_batch_operation_is_destructive(self, server) -> None:
        tool = server._tool_manager.get_tool("batch_operation")

        assert tool.annotations.destructiveHint is True


class TestToolWrappers:
    """Tests calling the registered tool functions directly."""

    @pytest.mark.asyncio
    async def test_first_call_initializes_manager_once(
        self, server, manager: MagicMock
    ) -> None:
        manager.get_labels.return_value = {"labels": [{"id": "INBOX"}]}
        get_labels = server._tool_manager.get_tool("get_labels").fn

        first = await get_labels()
        second = await get_labels()

        assert first["status"] == "success"
        assert first["count"] == 1
        assert second["status"] == "success"
        manager.initialize.assert_called_once()

    @pytest.mark.asyncio
    async def test_batch_tool_converts_action(self, server, manager: MagicMock) -> None:
        from gmail_mcp_manager.gmail.models import BatchAction

        batch = server._tool_manager.get_tool("batch_operation").fn

        result = await batch(message_ids=["m1", "m2"], action="archive")

        assert result["data"] == {
            "processed_count": 2,
            "action": "archive",
            "message_ids": ["m1", "m2"],
        }
        operation = manager.perform_batch_operation.call_args.args[0]
        assert operation.action is BatchAction.ARCHIVE

    @pytest.mark.asyncio
    async def test_auth_failure_becomes_error_response(self) -> None:
        from gmail_mcp_manager.server import create_server
        from gmail_mcp_manager.utils.errors import AuthenticationError

        def factory():
            raise AuthenticationError("Missing required environment variables")

        server = create_server(manager_factory=factory)
        list_messages = server._tool_manager.get_tool("list_messages").fn

        result = await list_messages(query="is:unread")

        assert result["status"] == "error"
        assert result["error_code"] == "AuthenticationError"


class TestServerLifespan:
    """Tests for the server lifespan."""

    @pytest.mark.asyncio
    async def test_lifespan_yields_empty_context(self, server) -> None:
        from gmail_mcp_manager.server import server_lifespan

        async with server_lifespan(server) as context:
            assert context == {}


class TestMainEntryPoint:
    """Tests for the main entry point and environment validation."""

    def test_validate_environment_success(self) -> None:
        env = {"GOOGLE_CLIENT_ID": "test-id", "GOOGLE_CLIENT_SECRET": "test-secret"}
        with patch.dict(os.environ, env, clear=False):
            from gmail_mcp_manager.__main__ import validate_environment

            assert validate_environment() is True

    @pytest.mark.parametrize("missing", ["GOOGLE_CLIENT_ID", "GOOGLE_CLIENT_SECRET"])
    def test_validate_environment_missing_variable(self, missing: str) -> None:
        env = {"GOOGLE_CLIENT_ID": "test-id", "GOOGLE_CLIENT_SECRET": "test-secret"}
        env[missing] = ""
        with patch.dict(os.environ, env, clear=False):
            from gmail_mcp_manager.__main__ import validate_environment

            assert validate_environment() is False

    def test_main_exits_when_environment_invalid(self) -> None:
        from gmail_mcp_manager import __main__ as main_module

        with (
            patch.object(main_module, "load_dotenv"),
            patch.object(main_module, "configure_logging"),
            patch.object(main_module, "validate_environment", return_value=False),
        ):
            with pytest.raises(SystemExit) as exc_info:
                main_module.main()

        assert exc_info.value.code == 1

    @pytest.mark.parametrize(
        ("transport", "expected"),
        [(None, "stdio"), ("stdio", "stdio"), ("streamable-http", "streamable-http")],
    )
    def test_main_selects_transport(
        self, monkeypatch, transport: str | None, expected: str
    ) -> None:
        from gmail_mcp_manager import __main__ as main_module

        if transport is None:
            monkeypatch.delenv("TRANSPORT", raising=False)
        else:
            monkeypatch.setenv("TRANSPORT", transport)
        mock_server = MagicMock()

        with (
            patch.object(main_module, "load_dotenv"),
            patch.object(main_module, "configure_logging"),
            patch.object(main_module, "validate_environment", return_value=True),
            patch("gmail_mcp_manager.server.create_server", return_value=mock_server),
        ):
            main_module.main()

        mock_server.run.assert_called_once_with(transport=expected)
