"""Fixtures for tool tests."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from gmail_mcp_manager.tools.base import ManagerProvider


@pytest.fixture
def mock_manager() -> MagicMock:
    """Mock GmailManager behind the tools."""
    return MagicMock()


@pytest.fixture
def provider(mock_manager: MagicMock) -> ManagerProvider:
    """Provider handing out the mock manager."""
    return ManagerProvider(lambda: mock_manager)
