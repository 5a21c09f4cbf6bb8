"""
Resolve a creds locator into the two sources GoogleOAuth2CLI reads.

Naming convention, for a locator L:
    None / ""          → ./creds.json,   ./token.json
    L is a directory   → L/creds.json,   L/token.json
    L_creds.json exists→ L_creds.json,   L_token.json
    sm://PROJECT/NAME  → secrets NAME-creds and NAME-token in PROJECT

A leading ~ in a file locator is expanded to the user's home directory.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Union

from .errors import ConfigurationError
from .models import FileLocation, Location, SecretLocation

logger = logging.getLogger(__name__)

SECRET_SCHEME = "sm://"
CREDS_NAME = "creds"
TOKEN_NAME = "token"


def resolve_location(creds: Union[str, os.PathLike, None]) -> Location:
    """
    Map a locator onto a FileLocation or SecretLocation.

    Raises ConfigurationError for an unsupported argument type, a malformed
    sm:// locator, or a prefix whose <prefix>_creds.json is not readable.
    """
    if creds is not None and not isinstance(creds, (str, os.PathLike)):
        raise ConfigurationError("Invalid creds parameter.")

    locator = os.path.expanduser(os.fspath(creds)) if creds is not None else ""

    if locator.startswith(SECRET_SCHEME):
        return _resolve_secret(locator)

    if not locator:
        base = Path(".")
        location = FileLocation(base / f"{CREDS_NAME}.json", base / f"{TOKEN_NAME}.json")
    elif os.path.isdir(locator):
        base = Path(locator)
        location = FileLocation(base / f"{CREDS_NAME}.json", base / f"{TOKEN_NAME}.json")
    else:
        creds_path = Path(f"{locator}_{CREDS_NAME}.json")
        if not os.access(creds_path, os.R_OK):
            raise ConfigurationError(
                f'Can\'t access "{creds_path}" to obtain access credentials.'
            )
        location = FileLocation(creds_path, Path(f"{locator}_{TOKEN_NAME}.json"))

    logger.debug("Resolved %r → %s, %s", locator, location.creds_path, location.token_path)
    return location


def _resolve_secret(locator: str) -> SecretLocation:
    project, _, name = locator[len(SECRET_SCHEME):].strip("/").partition("/")
    if not project or not name or "/" in name:
        raise ConfigurationError(
            f"Invalid secret locator {locator!r}; expected sm://PROJECT/NAME."
        )
    location = SecretLocation(
        project_id=project,
        creds_secret_id=f"{name}-{CREDS_NAME}",
        token_secret_id=f"{name}-{TOKEN_NAME}",
    )
    logger.debug("Resolved %r → secrets %s, %s in %s", locator,
                 location.creds_secret_id, location.token_secret_id, project)
    return location
