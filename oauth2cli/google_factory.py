"""
GoogleServiceFactory — googleapiclient service objects built on one set of credentials.

Services are built lazily and cached, so several API clients sharing a factory
trigger at most one authorization and one build per (api_name, version).

Usage:
    auth    = GoogleOAuth2CLI(SHEETS_SCOPES, "~/cred/sheets")
    factory = GoogleServiceFactory(auth)

    sheets_svc = factory.sheets
    drive_svc  = factory.service("drive", "v3")

    # Or pass the factory to a typed client class:
    from oauth2cli.sheets_client import SheetsClient
    client = SheetsClient(factory)
"""
from __future__ import annotations

import logging
from typing import Any, Union

from google.auth.credentials import Credentials
from googleapiclient.discovery import build

from .google_auth import GoogleOAuth2CLI

logger = logging.getLogger(__name__)


class GoogleServiceFactory:
    """
    Constructs and caches Google API service objects.

    Accepts either a GoogleOAuth2CLI (user credentials) or any google-auth
    Credentials object, e.g. a service account from google.auth.default().
    """

    def __init__(self, auth: Union[GoogleOAuth2CLI, Credentials]) -> None:
        self._auth = auth
        self._services: dict[str, Any] = {}

    # ── Credentials ───────────────────────────────────────────────────────────

    @property
    def credentials(self) -> Credentials:
        if isinstance(self._auth, GoogleOAuth2CLI):
            return self._auth.auth_client
        return self._auth

    # ── Builder ───────────────────────────────────────────────────────────────

    def service(self, name: str, version: str) -> Any:
        """Build and cache a googleapiclient service object."""
        key = f"{name}/{version}"
        if key not in self._services:
            logger.debug("Building %s service", key)
            self._services[key] = build(
                name, version, credentials=self.credentials, cache_discovery=False
            )
        return self._services[key]

    @property
    def sheets(self) -> Any:
        """Google Sheets API v4 service object."""
        return self.service("sheets", "v4")
