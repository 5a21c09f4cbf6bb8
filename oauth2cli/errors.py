"""
Exception types raised by oauth2cli.

    OAuth2CLIError
      ├── ConfigurationError  — bad creds locator, unreadable/malformed client credentials, bad scopes
      ├── AuthorizationError  — the interactive code exchange failed
      └── PersistenceError    — a token store could not be written
"""
from __future__ import annotations


class OAuth2CLIError(Exception):
    """Base class for every error this package raises."""


class ConfigurationError(OAuth2CLIError):
    """Raised at construction when the credential sources cannot be resolved or loaded."""


class AuthorizationError(OAuth2CLIError):
    """Raised when an authorization code cannot be exchanged for a token."""


class PersistenceError(OAuth2CLIError):
    """Raised by a store when a token cannot be written or removed."""
