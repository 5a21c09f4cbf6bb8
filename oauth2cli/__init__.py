"""
oauth2cli — user-authorized Google API access for command-line tools.

Package structure:
    oauth2cli.google_auth     — GoogleOAuth2CLI (locate, load, bootstrap and expose credentials)
    oauth2cli.locator         — creds locator → file paths or Secret Manager secrets
    oauth2cli.stores          — FileStore / SecretManagerStore for creds and tokens
    oauth2cli.models          — Typed dataclasses (locations, client creds, secret labels)
    oauth2cli.settings        — Settings loaded from the environment / .env
    oauth2cli.errors          — Exception hierarchy
    oauth2cli.google_factory  — GoogleServiceFactory (one credential, lazy services)
    oauth2cli.sheets_client   — SheetsClient used by the sample script
    oauth2cli.base            — BaseScript abstract class (logging, timing, CLI)
"""
from .errors import AuthorizationError, ConfigurationError, OAuth2CLIError, PersistenceError
from .google_auth import GoogleOAuth2CLI
from .models import ClientCredentials, FileLocation, SecretLabels, SecretLocation, TokenState
from .settings import Settings, load_settings

__all__ = [
    "AuthorizationError",
    "ClientCredentials",
    "ConfigurationError",
    "FileLocation",
    "GoogleOAuth2CLI",
    "OAuth2CLIError",
    "PersistenceError",
    "SecretLabels",
    "SecretLocation",
    "Settings",
    "TokenState",
    "load_settings",
]
