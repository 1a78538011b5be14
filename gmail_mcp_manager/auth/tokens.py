"""OAuth credential record and its JSON form.

A credential record is the persisted token bundle: access token, optional
refresh token, granted scope, token type and expiry. A record without an
access token is never used to authorize API calls.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

from google.oauth2.credentials import Credentials

logger = logging.getLogger(__name__)

# Tokens expiring within this window are refreshed before use
REFRESH_THRESHOLD = timedelta(minutes=5)


def _parse_expiry(data: dict[str, Any]) -> datetime | None:
    """Read expiry as ISO string, or as epoch milliseconds (``expiry_date``)."""
    raw = data.get("expiry")
    if raw:
        try:
            expiry = datetime.fromisoformat(str(raw))
        except ValueError as e:
            logger.warning("Failed to parse token expiry '%s': %s", raw, e)
            return None
        return expiry if expiry.tzinfo else expiry.replace(tzinfo=UTC)

    millis = data.get("expiry_date")
    if millis:
        try:
            return datetime.fromtimestamp(int(millis) / 1000, tz=UTC)
        except (TypeError, ValueError, OverflowError) as e:
            logger.warning("Failed to parse token expiry_date '%s': %s", millis, e)
    return None


@dataclass
class CredentialRecord:
    """Persisted OAuth2 token bundle.

    Attributes:
        access_token: Short-lived bearer token.
        refresh_token: Long-lived refresh token, if granted.
        scope: Space-separated granted scopes.
        token_type: Token type, normally "Bearer".
        expiry: Expiry as an aware UTC datetime, if known.
    """

    access_token: str
    refresh_token: str | None = None
    scope: str = ""
    token_type: str = "Bearer"
    expiry: datetime | None = None

    @property
    def is_usable(self) -> bool:
        """True if the record carries an access token."""
        return bool(self.access_token)

    def expires_within(
        self, window: timedelta = REFRESH_THRESHOLD, now: datetime | None = None
    ) -> bool:
        """Check whether the token expires within ``window`` (inclusive).

        Records without an expiry are treated as not expiring.
        """
        if self.expiry is None:
            return False
        now = now or datetime.now(UTC)
        return self.expiry - now <= window

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the JSON token file shape."""
        return {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "scope": self.scope,
            "token_type": self.token_type,
            "expiry": self.expiry.isoformat() if self.expiry else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CredentialRecord:
        """Build a record from its JSON form."""
        scope = data.get("scope")
        if not scope and isinstance(data.get("scopes"), list):
            scope = " ".join(str(s) for s in data["scopes"])
        return cls(
            access_token=str(data.get("access_token") or ""),
            refresh_token=data.get("refresh_token") or None,
            scope=str(scope or ""),
            token_type=str(data.get("token_type") or "Bearer"),
            expiry=_parse_expiry(data),
        )

    @classmethod
    def from_credentials(
        cls, credentials: Credentials, previous: CredentialRecord | None = None
    ) -> CredentialRecord:
        """Build a record from google-auth credentials.

        google-auth keeps ``expiry`` as a naive UTC datetime. A refresh
        response may omit the refresh token, so the previous one is kept.
        """
        expiry = credentials.expiry
        if expiry is not None and expiry.tzinfo is None:
            expiry = expiry.replace(tzinfo=UTC)

        refresh_token = credentials.refresh_token
        if not refresh_token and previous is not None:
            refresh_token = previous.refresh_token

        scopes = getattr(credentials, "granted_scopes", None) or credentials.scopes
        if scopes:
            scope = " ".join(scopes)
        else:
            scope = previous.scope if previous else ""

        return cls(
            access_token=credentials.token or "",
            refresh_token=refresh_token,
            scope=scope,
            token_type="Bearer",
            expiry=expiry,
        )


__all__ = [
    "CredentialRecord",
    "REFRESH_THRESHOLD",
]
