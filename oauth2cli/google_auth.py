"""
GoogleOAuth2CLI — user-authorized access to Google APIs from a command-line tool.

Wraps google-auth / google-auth-oauthlib and adds two things:
  1. A naming convention for where the OAuth client creds and the user token live
     (a directory, a filename prefix, or a pair of Secret Manager secrets).
  2. A console flow to obtain the token the first time: print the consent URL,
     read back the code, exchange it, and persist the token for later runs.

Usage:
    from googleapiclient.discovery import build
    from oauth2cli import GoogleOAuth2CLI

    gaxs = GoogleOAuth2CLI("https://www.googleapis.com/auth/spreadsheets", "~/cred/sheets")
    sheets = build("sheets", "v4", credentials=gaxs.auth_client)

Token refresh is not handled here; google-auth refreshes the credentials
transparently when a request finds them expired.
"""
from __future__ import annotations

import json
import logging
import os
from typing import Any, Optional, Sequence, Union
from urllib.parse import parse_qs, urlparse

from google.api_core.exceptions import GoogleAPICallError
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow

from .errors import AuthorizationError, ConfigurationError, PersistenceError
from .locator import resolve_location
from .models import ClientCredentials, TokenState
from .settings import Settings, load_settings
from .stores import open_stores

logger = logging.getLogger(__name__)

Scopes = Union[str, Sequence[str]]


def _normalize_scopes(scopes: Scopes) -> list[str]:
    if isinstance(scopes, str):
        scopes = [scopes]
    try:
        result = [s for s in scopes if s]
    except TypeError as exc:
        raise ConfigurationError(f"Can't understand scopes {scopes!r}.") from exc
    if not result or not all(isinstance(s, str) for s in result):
        raise ConfigurationError(f"Can't understand scopes {scopes!r}.")
    return result


def _extract_code(answer: str) -> str:
    """Accept either the bare code or the full redirect URL pasted from the browser."""
    answer = answer.strip()
    if "://" in answer:
        query = parse_qs(urlparse(answer).query)
        if "error" in query:
            logger.error("Authorization was refused: %s", query["error"][0])
            raise AuthorizationError(f"Authorization was refused: {query['error'][0]}")
        values = query.get("code")
        return values[0] if values else ""
    return answer


class GoogleOAuth2CLI:
    """
    Establishes OAuth2 credentials for the given scopes and exposes them as auth_client.

    Args:
        scopes:   A single scope URI or a list of them.
                  See https://developers.google.com/identity/protocols/oauth2/scopes
        creds:    Where the creds and token live:
                    None / ""          → ./creds.json and ./token.json
                    a directory        → <dir>/creds.json and <dir>/token.json
                    a filename prefix  → <prefix>_creds.json and <prefix>_token.json
                    sm://PROJECT/NAME  → Secret Manager secrets NAME-creds and NAME-token
                  None falls back to Settings.creds when that is configured.
        settings: Explicit configuration; defaults to load_settings().
        secret_client: A SecretManagerServiceClient to use for sm:// locators.

    Raises:
        ConfigurationError:  the locator or the client credentials are unusable.
        AuthorizationError:  no token was stored and the console exchange failed.

    Construction only returns once credentials are in place. When no token is
    stored this blocks on console input.
    """

    def __init__(
        self,
        scopes: Scopes,
        creds: Union[str, os.PathLike, None] = None,
        *,
        settings: Optional[Settings] = None,
        secret_client: Any = None,
    ) -> None:
        self.settings = settings if settings is not None else load_settings()
        self.scopes = _normalize_scopes(scopes)

        # Locate and load the client creds
        locator = creds if creds is not None else self.settings.creds
        self.location = resolve_location(locator)
        self._creds_store, self._token_store = open_stores(
            self.location, self.settings, secret_client
        )
        self.client_credentials = self._load_client_credentials()

        self._flow = Flow.from_client_config(
            self.client_credentials.to_client_config(),
            scopes=self.scopes,
            redirect_uri=self.client_credentials.redirect_uri,
        )

        # Then a persisted token, if there is a usable one
        self._credentials: Optional[Credentials] = self._load_token()
        if self._credentials is None:
            self.get_new_token_cli()

    def __repr__(self) -> str:
        return (
            f"GoogleOAuth2CLI(scopes={self.scopes!r}, "
            f"token={str(self._token_store)!r}, state={self.state.value})"
        )

    # ── Accessors ─────────────────────────────────────────────────────────────

    @property
    def auth_client(self) -> Credentials:
        """The configured google-auth credentials, for build(..., credentials=...)."""
        if self._credentials is None:
            raise AuthorizationError("No credentials have been established.")
        return self._credentials

    @property
    def state(self) -> TokenState:
        return TokenState.NO_TOKEN if self._credentials is None else TokenState.TOKEN_LOADED

    @property
    def token(self) -> Optional[dict[str, Any]]:
        """The token record in its persisted JSON shape, or None before authorization."""
        if self._credentials is None:
            return None
        return json.loads(self._credentials.to_json())

    @property
    def token_store(self) -> Any:
        return self._token_store

    # ── Loading ───────────────────────────────────────────────────────────────

    def _load_client_credentials(self) -> ClientCredentials:
        payload = self._creds_store.read()
        if payload is None:
            raise ConfigurationError(
                f'Can\'t access "{self._creds_store}" to obtain access credentials.'
            )
        return ClientCredentials.from_json(payload)

    def _load_token(self) -> Optional[Credentials]:
        """Return credentials from the token store, or None if it is missing or unusable."""
        try:
            payload = self._token_store.read()
        except (ValueError, OSError, GoogleAPICallError) as exc:
            logger.warning("Ignoring unreadable token %s: %s", self._token_store, exc)
            return None
        if payload is None:
            logger.debug("No token at %s", self._token_store)
            return None
        if not isinstance(payload, dict):
            logger.warning("Ignoring token %s: expected a JSON object", self._token_store)
            return None

        # Older tokens may carry only the token fields; the client comes from creds.json
        info = {
            "client_id": self.client_credentials.client_id,
            "client_secret": self.client_credentials.client_secret,
            "token_uri": self.client_credentials.token_uri,
            **payload,
        }
        try:
            creds = Credentials.from_authorized_user_info(info, self.scopes)
        except ValueError as exc:
            logger.warning("Ignoring token %s: %s", self._token_store, exc)
            return None
        logger.debug("Loaded token from %s", self._token_store)
        return creds

    # ── Console flow ──────────────────────────────────────────────────────────

    def get_new_token_cli(self) -> Credentials:
        """
        Obtain a new token by prompting the user, then persist it.

        Prints the consent URL, waits for the code (or the full redirect URL),
        exchanges it and stores the result. A failed exchange raises
        AuthorizationError; a failed write is logged and the token is kept.
        """
        auth_url, _ = self._flow.authorization_url(access_type="offline")
        print(f"Authorize this app by visiting: {auth_url}")
        code = _extract_code(input("Enter the code from that page here: "))
        if not code:
            logger.error("No authorization code entered")
            raise AuthorizationError("No authorization code entered.")

        try:
            self._flow.fetch_token(code=code)
        except Exception as exc:
            logger.error("Error while trying to retrieve access token: %s", exc)
            raise AuthorizationError(f"Error while trying to retrieve access token: {exc}") from exc

        self._credentials = self._flow.credentials
        self._save_token()
        return self._credentials

    def _save_token(self) -> None:
        try:
            self._token_store.write(self.token)
        except PersistenceError as exc:
            logger.error("Token obtained but not stored: %s", exc)
            return
        print(f"✓ Token stored to {self._token_store}")

    def invalidate_token(self) -> bool:
        """
        Remove the persisted token so the next construction prompts again.

        The credentials already held by this instance stay usable.
        """
        removed = self._token_store.delete()
        if removed:
            logger.info("Invalidated token at %s", self._token_store)
        return removed
