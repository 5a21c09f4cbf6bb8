"""
Typed data models for credential sources, client credentials and secret metadata.

All classes are plain dataclasses with no Google dependencies, so they are safe to
import anywhere. Loading and persistence live in the store and auth modules.
"""
from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from datetime import date, timedelta
from pathlib import Path
from typing import Any, Optional, Union

from .errors import ConfigurationError

# Google's standard endpoints for "installed" (desktop/CLI) OAuth clients
DEFAULT_AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
DEFAULT_TOKEN_URI = "https://oauth2.googleapis.com/token"


# ── Locations ─────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class FileLocation:
    """Client credentials and token kept as two JSON files on disk."""

    creds_path: Path
    token_path: Path


@dataclass(frozen=True)
class SecretLocation:
    """Client credentials and token kept as two Secret Manager secrets in one project."""

    project_id: str
    creds_secret_id: str
    token_secret_id: str

    def secret_name(self, secret_id: str) -> str:
        return f"projects/{self.project_id}/secrets/{secret_id}"


Location = Union[FileLocation, SecretLocation]


# ── Client credentials ────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ClientCredentials:
    """
    The OAuth client registered in Cloud Console (the "installed" block of creds.json).

    Only the first redirect URI is used when building the authorization flow.
    """

    client_id: str
    client_secret: str
    redirect_uris: tuple[str, ...]
    auth_uri: str = DEFAULT_AUTH_URI
    token_uri: str = DEFAULT_TOKEN_URI

    @property
    def redirect_uri(self) -> str:
        return self.redirect_uris[0]

    @classmethod
    def from_json(cls, payload: dict[str, Any]) -> "ClientCredentials":
        """
        Build from the parsed creds.json payload:
            {"installed": {"client_id": ..., "client_secret": ..., "redirect_uris": [...]}}
        """
        try:
            installed = payload["installed"]
            client_id = installed["client_id"]
            client_secret = installed["client_secret"]
            redirect_uris = tuple(installed["redirect_uris"])
        except (KeyError, TypeError) as exc:
            raise ConfigurationError(
                f"Client credentials are missing a required field: {exc}"
            ) from exc
        if not redirect_uris:
            raise ConfigurationError("Client credentials list no redirect_uris.")
        return cls(
            client_id=client_id,
            client_secret=client_secret,
            redirect_uris=redirect_uris,
            auth_uri=installed.get("auth_uri") or DEFAULT_AUTH_URI,
            token_uri=installed.get("token_uri") or DEFAULT_TOKEN_URI,
        )

    def to_client_config(self) -> dict[str, Any]:
        """Return the client config dict accepted by google_auth_oauthlib's Flow."""
        return {
            "installed": {
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "redirect_uris": list(self.redirect_uris),
                "auth_uri": self.auth_uri,
                "token_uri": self.token_uri,
            }
        }


# ── Token state ───────────────────────────────────────────────────────────────

class TokenState(enum.Enum):
    NO_TOKEN = "no_token"
    TOKEN_LOADED = "token_loaded"


# ── Secret metadata ───────────────────────────────────────────────────────────

_LABEL_INVALID = re.compile(r"[^a-z0-9_-]+")
_LABEL_MAX = 63


def _label_value(value: str) -> str:
    """Coerce a value into the Secret Manager label charset."""
    return _LABEL_INVALID.sub("-", value.lower()).strip("-")[:_LABEL_MAX]


@dataclass(frozen=True)
class SecretLabels:
    """
    Metadata attached to secrets this package creates.

    Informational only; nothing reads these back or enforces expiry.
    user and host are supplied by the caller (see Settings) rather than read
    from the process environment here.
    """

    user: str
    host: str
    tier: str = "dev"
    scheme: str = "oauth2"
    context: str = "local-cli"
    format: str = "application/json"
    encoding: str = "utf8"
    usage: str = "api-client"
    created: date = field(default_factory=date.today)
    expires: Optional[date] = None

    @classmethod
    def with_ttl(
        cls, user: str, host: str, tier: str = "dev", ttl_days: Optional[int] = None
    ) -> "SecretLabels":
        today = date.today()
        expires = today + timedelta(days=ttl_days) if ttl_days else None
        return cls(user=user, host=host, tier=tier, created=today, expires=expires)

    def to_labels(self) -> dict[str, str]:
        """Return a label dict valid for the Secret Manager API."""
        raw = {
            "scheme": self.scheme,
            "context": self.context,
            "format": self.format,
            "encoding": self.encoding,
            "usage": self.usage,
            "tier": self.tier,
            "user": self.user,
            "host": self.host,
            "created": self.created.strftime("%Y%m%d"),
        }
        if self.expires is not None:
            raw["expires"] = self.expires.strftime("%Y%m%d")
        labels: dict[str, str] = {}
        for key, value in raw.items():
            cleaned = _label_value(value or "")
            if cleaned:
                labels[key] = cleaned
        return labels
