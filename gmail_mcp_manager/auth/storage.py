"""File-based token storage.

Persists the OAuth credential record as JSON in a single file that only
the owner can read or write.

Storage location: ``TOKEN_STORAGE_PATH`` or ``~/.gmail-mcp-tokens.json``.

Failure policy:
- load() never raises; a missing, unreadable or malformed file counts as
  "no credential" so the caller falls back to the interactive flow.
- save() and delete() raise TokenError.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from gmail_mcp_manager.auth.tokens import CredentialRecord
from gmail_mcp_manager.config import default_token_path
from gmail_mcp_manager.utils.errors import TokenError

logger = logging.getLogger(__name__)

TOKEN_FILE_MODE = 0o600


class TokenStore:
    """Owner-only JSON token file.

    Attributes:
        _path: Location of the token file.

    Example:
        >>> store = TokenStore(Path("/tmp/tokens.json"))
        >>> store.save(CredentialRecord(access_token="ya29..."))
        >>> store.load().access_token
        'ya29...'
    """

    def __init__(self, path: Path | None = None) -> None:
        """Initialize token storage.

        Args:
            path: Token file path. Defaults to ~/.gmail-mcp-tokens.json.
        """
        self._path = Path(path) if path is not None else default_token_path()
        logger.debug("TokenStore initialized at %s", self._path)

    @property
    def path(self) -> Path:
        """Location of the token file."""
        return self._path

    def exists(self) -> bool:
        """Check if a token file exists."""
        return self._path.exists()

    def load(self) -> CredentialRecord | None:
        """Load the stored credential record.

        Returns:
            The stored record, or None if there is no usable record.
        """
        if not self._path.exists():
            logger.debug("No token file at %s", self._path)
            return None

        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            logger.warning("Token file %s contains invalid JSON: %s", self._path, e)
            return None
        except OSError as e:
            logger.warning("Failed to read token file %s: %s", self._path, e)
            return None

        if not isinstance(data, dict):
            logger.warning("Token file %s does not hold a JSON object", self._path)
            return None

        record = CredentialRecord.from_dict(data)
        if not record.is_usable:
            logger.warning("Token file %s has no access_token", self._path)
            return None

        logger.debug("Loaded token from %s", self._path)
        return record

    def save(self, record: CredentialRecord) -> None:
        """Write the credential record with owner-only permissions.

        Args:
            record: Record to persist. Overwrites any existing file.

        Raises:
            TokenError: If the file cannot be written.
        """
        payload = json.dumps(record.to_dict(), indent=2)

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(
                self._path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, TOKEN_FILE_MODE
            )
            # os.open only applies the mode when creating the file
            os.fchmod(fd, TOKEN_FILE_MODE)
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)

            logger.info("Saved token to %s", self._path)

        except PermissionError as e:
            logger.error("Permission denied writing token file: %s", e)
            raise TokenError(
                "Permission denied writing token file",
                details={"path": str(self._path), "error": str(e)},
            ) from e
        except OSError as e:
            logger.error("Failed to save token to %s: %s", self._path, e)
            raise TokenError(
                f"Failed to save tokens: {e}",
                details={"path": str(self._path), "error_type": type(e).__name__},
            ) from e

    def delete(self) -> bool:
        """Delete the token file.

        Returns:
            True if a file was deleted, False if none existed.

        Raises:
            TokenError: If the file exists but cannot be removed.
        """
        if not self._path.exists():
            logger.debug("No token file to delete at %s", self._path)
            return False

        try:
            self._path.unlink()
            logger.info("Deleted token file %s", self._path)
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.error("Failed to delete token file %s: %s", self._path, e)
            raise TokenError(
                f"Failed to delete token file: {e}",
                details={"path": str(self._path), "error_type": type(e).__name__},
            ) from e


__all__ = [
    "TokenStore",
    "TOKEN_FILE_MODE",
]
