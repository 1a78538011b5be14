"""Command-line interface for Gmail MCP Manager.

Examples:
    gmail-mcp auth login
    gmail-mcp messages list -q "is:unread" -m 5
    gmail-mcp msg get 18c2f0a1b2c3d4e5 -f metadata
    echo "Hello" | gmail-mcp messages send --to a@example.com --subject Hi
    gmail-mcp batch archive 18c2f0a1b2c3d4e5 18c2f0a1b2c3d4e6
    gmail-mcp docs get sendMessage -c "HTML email"
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from collections.abc import Callable
from typing import Any, TextIO

from gmail_mcp_manager import VERSION
from gmail_mcp_manager.docs.provider import DocumentationResult
from gmail_mcp_manager.docs.render import format_for_terminal
from gmail_mcp_manager.gmail.messages import decode_body, parse_headers
from gmail_mcp_manager.gmail.models import BatchAction, BatchOperation, EmailComposition
from gmail_mcp_manager.manager import GmailManager
from gmail_mcp_manager.middleware.validator import split_comma_list
from gmail_mcp_manager.utils.errors import (
    APIError,
    AuthenticationError,
    GmailManagerError,
    ValidationError,
)
from gmail_mcp_manager.utils.logs import configure_logging

logger = logging.getLogger(__name__)

ManagerFactory = Callable[..., GmailManager]
Handler = Callable[[GmailManager, argparse.Namespace], "int | None"]

# =============================================================================
# Terminal colors
# =============================================================================

RESET = "\033[0m"
RED = "\033[31m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
BLUE = "\033[34m"
GRAY = "\033[90m"


def _color_enabled(stream: TextIO) -> bool:
    return stream.isatty() and "NO_COLOR" not in os.environ


def style(text: str, *codes: str, stream: TextIO | None = None) -> str:
    """Wrap text in ANSI codes when the stream is a terminal."""
    if not _color_enabled(stream or sys.stdout):
        return text
    return f"{''.join(codes)}{text}{RESET}"


def _field(label: str, value: object) -> None:
    print(f"{style(label, GRAY)} {value}")


def print_documentation(result: DocumentationResult, operation: str) -> None:
    print(style(format_for_terminal(result, operation), BLUE))


def print_error(error: BaseException, action: str | None = None) -> None:
    """Categorized, colorized error on stderr."""
    match error:
        case ValidationError():
            category = "Invalid input"
        case AuthenticationError():
            category = "Authentication error"
        case APIError():
            category = f"Gmail API error ({error.status_code})"
        case GmailManagerError():
            category = "Error"
        case _:
            category = "Unexpected error"

    prefix = f"{action}: " if action else ""
    message = error.message if isinstance(error, GmailManagerError) else str(error)
    print(
        style(f"{category}: {prefix}{message}", RED, stream=sys.stderr),
        file=sys.stderr,
    )
    if isinstance(error, AuthenticationError) and action is None:
        print(
            style('Run "gmail-mcp auth login" to authenticate', YELLOW, stream=sys.stderr),
            file=sys.stderr,
        )


# =============================================================================
# Authentication commands
# =============================================================================


def cmd_auth_login(manager: GmailManager, args: argparse.Namespace) -> None:
    print(style("Starting authentication...", BLUE))
    manager.initialize()
    print(style("Authentication successful!", GREEN))


def cmd_auth_logout(manager: GmailManager, args: argparse.Namespace) -> None:
    manager.logout()
    print(style("Logged out successfully!", GREEN))


def cmd_auth_status(manager: GmailManager, args: argparse.Namespace) -> int:
    try:
        info = manager.token_info()
    except AuthenticationError as e:
        logger.debug("Token introspection failed: %s", e)
        print(style("Not authenticated or token invalid", RED))
        print(style('Run "gmail-mcp auth login" to authenticate', YELLOW))
        return 1

    print(style("Authentication Status:", GREEN))
    _field("Token Info:", json.dumps(info, indent=2))
    return 0


# =============================================================================
# Message commands
# =============================================================================


def cmd_messages_list(manager: GmailManager, args: argparse.Namespace) -> None:
    response = manager.list_messages(
        query=args.query,
        label_ids=split_comma_list(args.labels) if args.labels else None,
        max_results=args.max,
        include_spam_trash=args.include_spam_trash,
    )
    print(style(f"Found {response.get('resultSizeEstimate', 0)} messages:", GREEN))

    found = response.get("messages", [])
    if not found:
        print(style("No messages found", YELLOW))
    for index, message in enumerate(found, start=1):
        print(style(f"{index}. ID: {message['id']} | Thread: {message.get('threadId')}", GRAY))


def cmd_messages_get(manager: GmailManager, args: argparse.Namespace) -> None:
    message = manager.get_message(args.message_id, args.format)
    headers = parse_headers(message)

    print(style("Message Details:", GREEN))
    _field("ID:", message.get("id"))
    _field("Thread ID:", message.get("threadId"))
    _field("Snippet:", message.get("snippet", ""))
    if headers:
        _field("Subject:", headers.get("Subject", "No subject"))
        _field("From:", headers.get("From", "Unknown sender"))
        _field("Date:", headers.get("Date", "Unknown date"))

    body = decode_body(message)
    if body:
        _field("Body:", "")
        print(body)


def _composition_from_args(args: argparse.Namespace) -> EmailComposition:
    """Build a composition from --to/--cc/--bcc/--subject/--body.

    The body is read from stdin when --body is not given.
    """
    body = args.body
    if body is None:
        if sys.stdin.isatty():
            print(style("Enter the message body, then Ctrl-D:", GRAY), file=sys.stderr)
        body = sys.stdin.read()
    if not body.strip():
        raise ValidationError("Body is required", field="body")

    return EmailComposition(
        to=split_comma_list(args.to),
        subject=args.subject,
        body=body,
        cc=split_comma_list(args.cc) if args.cc else [],
        bcc=split_comma_list(args.bcc) if args.bcc else [],
        is_html=args.html,
    )


def cmd_messages_send(manager: GmailManager, args: argparse.Namespace) -> None:
    sent = manager.send_message(_composition_from_args(args))
    print(style("Email sent successfully!", GREEN))
    _field("Message ID:", sent.get("id"))


# =============================================================================
# Draft commands
# =============================================================================


def cmd_drafts_list(manager: GmailManager, args: argparse.Namespace) -> None:
    response = manager.list_drafts(max_results=args.max)
    print(style(f"Found {response.get('resultSizeEstimate', 0)} drafts:", GREEN))

    found = response.get("drafts", [])
    if not found:
        print(style("No drafts found", YELLOW))
    for index, draft in enumerate(found, start=1):
        message_id = draft.get("message", {}).get("id")
        print(style(f"{index}. ID: {draft['id']} | Message ID: {message_id}", GRAY))


def cmd_drafts_create(manager: GmailManager, args: argparse.Namespace) -> None:
    draft = manager.create_draft(_composition_from_args(args))
    print(style("Draft created successfully!", GREEN))
    _field("Draft ID:", draft.get("id"))


def cmd_drafts_send(manager: GmailManager, args: argparse.Namespace) -> None:
    sent = manager.send_draft(args.draft_id)
    print(style("Draft sent successfully!", GREEN))
    _field("Message ID:", sent.get("id"))


# =============================================================================
# Batch and mailbox commands
# =============================================================================


def cmd_batch_mark_read(manager: GmailManager, args: argparse.Namespace) -> None:
    manager.perform_batch_operation(
        BatchOperation(message_ids=args.message_ids, action=BatchAction.READ)
    )
    print(style(f"Marked {len(args.message_ids)} messages as read", GREEN))


def cmd_batch_archive(manager: GmailManager, args: argparse.Namespace) -> None:
    manager.perform_batch_operation(
        BatchOperation(message_ids=args.message_ids, action=BatchAction.ARCHIVE)
    )
    print(style(f"Archived {len(args.message_ids)} messages", GREEN))


def cmd_labels(manager: GmailManager, args: argparse.Namespace) -> None:
    labels = manager.get_labels().get("labels", [])
    print(style(f"Found {len(labels)} labels:", GREEN))
    for index, label in enumerate(labels, start=1):
        line = f"{index}. {label.get('name')} ({label.get('id')}) - Type: {label.get('type')}"
        print(style(line, GRAY))


def cmd_stats(manager: GmailManager, args: argparse.Namespace) -> None:
    stats = manager.get_email_stats()
    print(style("Email Statistics:", GREEN))
    _field("Total messages:", stats.total)
    _field("Unread messages:", stats.unread)
    _field("Archived messages:", stats.archived)
    _field("Spam messages:", stats.spam)
    _field("Trash messages:", stats.trash)


# =============================================================================
# Documentation commands
# =============================================================================


def cmd_docs_status(manager: GmailManager, args: argparse.Namespace) -> None:
    stats: dict[str, Any] = manager.context7_stats()
    state = "enabled" if manager.context7_enabled else "disabled"
    print(style(f"Context7 Status ({state}):", GREEN))
    _field("Cache size:", stats["size"])
    _field("Cached operations:", ", ".join(stats["keys"]) or "None")


def cmd_docs_clear_cache(manager: GmailManager, args: argparse.Namespace) -> None:
    manager.clear_context7_cache()
    print(style("Context7 cache cleared", GREEN))


def cmd_docs_get(manager: GmailManager, args: argparse.Namespace) -> None:
    docs = manager.get_documentation(args.operation, args.context)
    if docs is None:
        print(style("No documentation found for this operation", YELLOW))
        return

    print(style(f"Documentation for: {args.operation}", GREEN))
    _field("Documentation:", docs.documentation)
    if docs.examples:
        _field("Examples:", "\n".join(docs.examples))
    if docs.relevant_links:
        _field("Links:", "\n".join(docs.relevant_links))


# =============================================================================
# Parser
# =============================================================================


def _add_compose_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--to", required=True, help="Recipients (comma-separated)")
    parser.add_argument("--cc", help="CC recipients (comma-separated)")
    parser.add_argument("--bcc", help="BCC recipients (comma-separated)")
    parser.add_argument("--subject", required=True, help="Subject line")
    parser.add_argument("--body", help="Message body (default: read from stdin)")
    parser.add_argument("--html", action="store_true", help="Send the body as HTML")


def _require_subcommand(parser: argparse.ArgumentParser) -> argparse._SubParsersAction:
    subparsers = parser.add_subparsers(dest="subcommand", metavar="COMMAND")
    subparsers.required = True
    return subparsers


def build_parser() -> argparse.ArgumentParser:
    """Build the ``gmail-mcp`` argument parser."""
    parser = argparse.ArgumentParser(
        prog="gmail-mcp",
        description="Gmail MCP Manager - Manage Gmail via command line "
        "with Context7 documentation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__.split("Examples:", 1)[1] if __doc__ else None,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging"
    )
    parser.add_argument(
        "--no-context7",
        dest="context7",
        action="store_false",
        help="Disable Context7 documentation lookups",
    )
    commands = parser.add_subparsers(dest="command", metavar="COMMAND")

    # auth
    auth = commands.add_parser("auth", help="Authentication management")
    auth_commands = _require_subcommand(auth)
    auth_commands.add_parser(
        "login", help="Authenticate with Google OAuth2"
    ).set_defaults(handler=cmd_auth_login)
    auth_commands.add_parser(
        "logout", help="Logout and revoke tokens"
    ).set_defaults(handler=cmd_auth_logout)
    auth_commands.add_parser(
        "status", help="Show authentication status"
    ).set_defaults(handler=cmd_auth_status)

    # messages
    messages = commands.add_parser(
        "messages", aliases=["msg"], help="Message management"
    )
    message_commands = _require_subcommand(messages)

    msg_list = message_commands.add_parser("list", help="List messages")
    msg_list.add_argument("-q", "--query", help='Search query (e.g., "is:unread")')
    msg_list.add_argument("-l", "--labels", help="Comma-separated label IDs")
    msg_list.add_argument("-m", "--max", type=int, default=10, help="Maximum results")
    msg_list.add_argument(
        "--include-spam-trash", action="store_true", help="Include spam and trash"
    )
    msg_list.set_defaults(handler=cmd_messages_list)

    msg_get = message_commands.add_parser("get", help="Get message details")
    msg_get.add_argument("message_id")
    msg_get.add_argument(
        "-f",
        "--format",
        choices=["full", "metadata", "minimal"],
        default="full",
        help="Message format",
    )
    msg_get.set_defaults(handler=cmd_messages_get)

    msg_send = message_commands.add_parser("send", help="Send an email")
    _add_compose_arguments(msg_send)
    msg_send.set_defaults(handler=cmd_messages_send)

    # drafts
    drafts = commands.add_parser("drafts", help="Draft management")
    draft_commands = _require_subcommand(drafts)

    draft_list = draft_commands.add_parser("list", help="List drafts")
    draft_list.add_argument("-m", "--max", type=int, default=10, help="Maximum results")
    draft_list.set_defaults(handler=cmd_drafts_list)

    draft_create = draft_commands.add_parser("create", help="Create a new draft")
    _add_compose_arguments(draft_create)
    draft_create.set_defaults(handler=cmd_drafts_create)

    draft_send = draft_commands.add_parser("send", help="Send a draft")
    draft_send.add_argument("draft_id")
    draft_send.set_defaults(handler=cmd_drafts_send)

    # batch
    batch = commands.add_parser("batch", help="Batch operations on messages")
    batch_commands = _require_subcommand(batch)

    mark_read = batch_commands.add_parser("mark-read", help="Mark messages as read")
    mark_read.add_argument("message_ids", nargs="+")
    mark_read.set_defaults(handler=cmd_batch_mark_read)

    archive = batch_commands.add_parser("archive", help="Archive messages")
    archive.add_argument("message_ids", nargs="+")
    archive.set_defaults(handler=cmd_batch_archive)

    # labels, stats
    commands.add_parser("labels", help="List all labels").set_defaults(
        handler=cmd_labels
    )
    commands.add_parser("stats", help="Show email statistics").set_defaults(
        handler=cmd_stats
    )

    # context7
    docs = commands.add_parser(
        "context7", aliases=["docs"], help="Context7 documentation management"
    )
    docs_commands = _require_subcommand(docs)
    docs_commands.add_parser(
        "status", help="Show Context7 status and cache stats"
    ).set_defaults(handler=cmd_docs_status)
    docs_commands.add_parser(
        "clear-cache", help="Clear Context7 documentation cache"
    ).set_defaults(handler=cmd_docs_clear_cache)
    docs_get = docs_commands.add_parser(
        "get", help="Get documentation for specific operation"
    )
    docs_get.add_argument("operation")
    docs_get.add_argument("-c", "--context", help="Additional context")
    docs_get.set_defaults(handler=cmd_docs_get)

    return parser


def main(
    argv: list[str] | None = None,
    manager_factory: ManagerFactory = GmailManager.from_environment,
) -> int:
    """Run the CLI.

    Args:
        argv: Arguments (defaults to sys.argv[1:]).
        manager_factory: Called with ``on_documentation=`` to build the
            manager for this invocation.

    Returns:
        Process exit code: 0 on success, 1 on any failure.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    configure_logging(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        manager = manager_factory(on_documentation=print_documentation)
    except GmailManagerError as e:
        print_error(e, "Initialization failed")
        return 1

    if not args.context7:
        manager.disable_context7()
        print(style("Context7 integration disabled", YELLOW))

    handler: Handler = args.handler
    try:
        return handler(manager, args) or 0
    except KeyboardInterrupt:
        print("\nOperation interrupted by user.", file=sys.stderr)
        return 1
    except GmailManagerError as e:
        print_error(e)
        return 1
    except Exception as e:
        logger.debug("Unhandled error", exc_info=True)
        print_error(e)
        return 1


def run() -> None:
    sys.exit(main())


__all__ = [
    "build_parser",
    "main",
    "run",
    "print_error",
    "print_documentation",
    "style",
]


if __name__ == "__main__":
    run()
