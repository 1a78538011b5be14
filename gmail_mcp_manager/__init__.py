"""Gmail API manager with OAuth2, a CLI, an MCP server and documentation lookups."""

VERSION = "1.3.3"

# Common Gmail scopes
GMAIL_SCOPES = {
    "READONLY": "https://www.googleapis.com/auth/gmail.readonly",
    "MODIFY": "https://www.googleapis.com/auth/gmail.modify",
    "COMPOSE": "https://www.googleapis.com/auth/gmail.compose",
    "SEND": "https://www.googleapis.com/auth/gmail.send",
    "LABELS": "https://www.googleapis.com/auth/gmail.labels",
    "SETTINGS_BASIC": "https://www.googleapis.com/auth/gmail.settings.basic",
    "SETTINGS_SHARING": "https://www.googleapis.com/auth/gmail.settings.sharing",
}

__all__ = ["VERSION", "GMAIL_SCOPES"]
