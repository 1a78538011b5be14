"""Documentation lookups attached to Gmail operations."""

from gmail_mcp_manager.docs.cache import (
    CACHE_TTL_SECONDS,
    CacheEntry,
    DocumentationCache,
    cache_key,
)
from gmail_mcp_manager.docs.provider import (
    DocumentationFetcher,
    DocumentationResult,
    StaticDocumentationProvider,
    build_search_term,
)
from gmail_mcp_manager.docs.render import as_code_comments, format_for_terminal

__all__ = [
    "DocumentationCache",
    "CacheEntry",
    "cache_key",
    "CACHE_TTL_SECONDS",
    "DocumentationResult",
    "DocumentationFetcher",
    "StaticDocumentationProvider",
    "build_search_term",
    "format_for_terminal",
    "as_code_comments",
]
