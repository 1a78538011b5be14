"""Base utilities for Gmail MCP Manager tools.

This module provides shared utilities used by all tools including:
- Standardized response builders
- A lazily created, shared GmailManager
- An execution wrapper that times each call and maps errors to responses
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from gmail_mcp_manager.utils.errors import GmailManagerError

if TYPE_CHECKING:
    from gmail_mcp_manager.manager import GmailManager

logger = logging.getLogger(__name__)


# =============================================================================
# Standard Response Keys
# =============================================================================


class ResponseKeys:
    """Standard keys for tool responses."""

    STATUS = "status"
    DATA = "data"
    MESSAGE = "message"
    COUNT = "count"
    ERROR = "error"
    ERROR_CODE = "error_code"


# =============================================================================
# Response Builders
# =============================================================================


def build_success_response(
    data: Any,
    message: str | None = None,
    count: int | None = None,
) -> dict[str, Any]:
    """Build standardized success response.

    Args:
        data: Tool-specific payload.
        message: Optional human-readable message.
        count: Optional item count.

    Returns:
        Standardized success response dict.
    """
    response: dict[str, Any] = {
        ResponseKeys.STATUS: "success",
        ResponseKeys.DATA: data,
    }
    if message:
        response[ResponseKeys.MESSAGE] = message
    if count is not None:
        response[ResponseKeys.COUNT] = count
    return response


def build_error_response(
    error: str,
    error_code: str | None = None,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build standardized error response.

    Args:
        error: Human-readable error message.
        error_code: Optional error code for programmatic handling.
        details: Optional additional error details.

    Returns:
        Standardized error response dict.
    """
    response: dict[str, Any] = {
        ResponseKeys.STATUS: "error",
        ResponseKeys.ERROR: error,
    }
    if error_code:
        response[ResponseKeys.ERROR_CODE] = error_code
    if details:
        response.update(details)
    return response


# =============================================================================
# Manager Provider
# =============================================================================


class ManagerProvider:
    """Creates the GmailManager on first use and initializes it once.

    Construction is deferred so the server can start (and list its tools)
    before the browser consent flow has run.
    """

    def __init__(self, factory: Callable[[], GmailManager]) -> None:
        self._factory = factory
        self._manager: GmailManager | None = None
        self._lock = threading.Lock()

    def get(self) -> GmailManager:
        """Return the initialized manager, creating it if needed.

        Raises:
            AuthenticationError: If configuration or authentication fails.
        """
        with self._lock:
            if self._manager is None:
                manager = self._factory()
                manager.initialize()
                self._manager = manager
            return self._manager

    @property
    def ready(self) -> bool:
        return self._manager is not None


# =============================================================================
# Tool Execution Wrapper
# =============================================================================


async def execute_tool(
    tool_name: str,
    params: dict[str, Any],
    operation: Callable[[], dict[str, Any]],
) -> dict[str, Any]:
    """Run a blocking tool operation and convert failures to responses.

    The operation runs in a worker thread so Gmail API calls do not block
    the event loop.

    Args:
        tool_name: Name of the tool being executed.
        params: Tool parameters (logged at debug level).
        operation: Sync callable returning a success response.

    Returns:
        The operation's response, or an error response whose error_code is
        the exception class name.
    """
    start_time = time.perf_counter()
    logger.debug("Executing %s with %s", tool_name, params)

    try:
        return await asyncio.to_thread(operation)
    except GmailManagerError as e:
        logger.error("%s failed: %s", tool_name, e)
        return build_error_response(
            error=e.message,
            error_code=e.__class__.__name__,
        )
    except Exception as e:
        logger.exception("Unexpected error in %s", tool_name)
        return build_error_response(
            error=f"Unexpected error: {e}",
            error_code="UnexpectedError",
        )
    finally:
        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.info("%s completed in %.1f ms", tool_name, duration_ms)


__all__ = [
    "ResponseKeys",
    "build_success_response",
    "build_error_response",
    "ManagerProvider",
    "execute_tool",
]
