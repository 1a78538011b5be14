"""Utility functions and helpers for Gmail MCP Manager.

This module provides the custom exception hierarchy and logging setup.
"""

from gmail_mcp_manager.utils.errors import (
    APIError,
    AuthenticationError,
    GmailManagerError,
    TokenError,
    ValidationError,
)
from gmail_mcp_manager.utils.logs import configure_logging

__all__ = [
    "GmailManagerError",
    "AuthenticationError",
    "TokenError",
    "APIError",
    "ValidationError",
    "configure_logging",
]
