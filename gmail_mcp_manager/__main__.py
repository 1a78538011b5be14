"""Entry point for the Gmail MCP Manager server."""

from __future__ import annotations

import logging
import os
import sys

from dotenv import load_dotenv

from gmail_mcp_manager.utils.logs import configure_logging


def validate_environment() -> bool:
    """Validate required environment variables.

    Returns:
        True if the OAuth client ID and secret are both set.
    """
    logger = logging.getLogger(__name__)

    required = ["GOOGLE_CLIENT_ID", "GOOGLE_CLIENT_SECRET"]
    missing = [var for var in required if not os.getenv(var)]

    if missing:
        logger.error("Missing required environment variables: %s", ", ".join(missing))
        return False

    return True


def main() -> None:
    """Main entry point.

    Loads environment, validates configuration, and starts the MCP server
    with the transport selected by TRANSPORT (stdio, sse/http or
    streamable-http).
    """
    # Load .env file if present
    load_dotenv()

    configure_logging()
    logger = logging.getLogger(__name__)

    if not validate_environment():
        logger.error("Environment validation failed. Exiting.")
        sys.exit(1)

    # Import server after environment is validated
    from gmail_mcp_manager.server import create_server

    mcp = create_server()
    transport = os.getenv("TRANSPORT", "stdio").lower()

    match transport:
        case "sse" | "http":
            host = os.getenv("HOST", "127.0.0.1")
            port = int(os.getenv("PORT", "8000"))
            logger.info(
                "Starting Gmail MCP Server with SSE transport on %s:%d", host, port
            )
            try:
                import uvicorn
            except ImportError:
                logger.error("uvicorn required for SSE transport: pip install uvicorn")
                sys.exit(1)
            uvicorn.run(mcp.sse_app(), host=host, port=port, log_level="info")
        case "streamable-http":
            logger.info("Starting Gmail MCP Server with streamable-http transport")
            mcp.run(transport="streamable-http")
        case _:
            logger.info("Starting Gmail MCP Server with STDIO transport")
            mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
