"""Text renderings of documentation results."""

from __future__ import annotations

from gmail_mcp_manager.docs.provider import DocumentationResult

BANNER_WIDTH = 80


def format_for_terminal(result: DocumentationResult, operation: str) -> str:
    """Banner-framed block for display before an operation runs."""
    rule = "=" * BANNER_WIDTH
    lines = ["", rule, f"CONTEXT7 DOCUMENTATION: {operation.upper()}", rule]

    if result.documentation:
        lines.append("")
        lines.append("Documentation:")
        lines.extend(f"   {line}" for line in result.documentation.split("\n"))

    if result.examples:
        lines.append("")
        lines.append("Examples:")
        for index, example in enumerate(result.examples, start=1):
            lines.append(f"{index}. {example}")

    if result.relevant_links:
        lines.append("")
        lines.append("Relevant Links:")
        lines.extend(f"   - {link}" for link in result.relevant_links)

    lines.extend(["", rule, ""])
    return "\n".join(lines)


def as_code_comments(result: DocumentationResult | None) -> str:
    """The same content as a ``/** ... */`` comment block.

    Returns an empty string when there is no documentation.
    """
    if result is None:
        return ""

    lines = ["/**", " * CONTEXT7 DOCUMENTATION", " * "]

    if result.documentation:
        lines.append(" * Documentation:")
        lines.extend(f" * {line}" for line in result.documentation.split("\n"))
        lines.append(" * ")

    if result.examples:
        lines.append(" * Examples:")
        for index, example in enumerate(result.examples, start=1):
            lines.append(f" * {index}. {example}")
        lines.append(" * ")

    if result.relevant_links:
        lines.append(" * Relevant Links:")
        lines.extend(f" * - {link}" for link in result.relevant_links)

    lines.append(" */")
    return "\n".join(lines)


__all__ = [
    "format_for_terminal",
    "as_code_comments",
]
