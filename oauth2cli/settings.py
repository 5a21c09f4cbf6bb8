from __future__ import annotations

import os
import socket
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from .errors import ConfigurationError
from .models import SecretLabels


@dataclass(frozen=True)
class Settings:
    # Default locator when the caller passes creds=None (dir, prefix or sm://project/name)
    creds: Optional[str] = None

    # Secret metadata
    home: str = ""
    hostname: str = ""
    tier: str = "dev"
    secret_ttl_days: Optional[int] = None

    # Service account key used by the Secret Manager client (None = application default)
    service_account_file: Optional[str] = None

    # Script logging
    log_dir: Path = Path("~/.oauth2cli/logs").expanduser()
    log_level: str = "INFO"

    def secret_labels(self) -> SecretLabels:
        return SecretLabels.with_ttl(
            user=self.home,
            host=self.hostname,
            tier=self.tier,
            ttl_days=self.secret_ttl_days,
        )


def _env(name: str, default: str | None = None) -> str | None:
    v = os.getenv(name)
    if v is None or v == "":
        return default
    return v


def load_settings(env_file: str | os.PathLike | None = None) -> Settings:
    """
    Build Settings from the environment, after loading a .env file.

    Existing environment variables win over values in the .env file.
    """
    load_dotenv(env_file or _env("OAUTH2CLI_ENV_FILE") or find_dotenv(usecwd=True))

    ttl = _env("OAUTH2CLI_SECRET_TTL_DAYS")
    try:
        ttl_days = int(ttl) if ttl else None
    except ValueError as exc:
        raise ConfigurationError(
            f"OAUTH2CLI_SECRET_TTL_DAYS must be a whole number of days, got {ttl!r}."
        ) from exc

    return Settings(
        creds=_env("OAUTH2CLI_CREDS"),
        home=_env("HOME", "") or "",
        hostname=_env("HOSTNAME") or socket.gethostname(),
        tier=_env("OAUTH2CLI_TIER", "dev") or "dev",
        secret_ttl_days=ttl_days,
        service_account_file=_env("GOOGLE_APPLICATION_CREDENTIALS"),
        log_dir=Path(_env("OAUTH2CLI_LOG_DIR", "~/.oauth2cli/logs") or "~/.oauth2cli/logs").expanduser(),
        log_level=(_env("LOG_LEVEL", "INFO") or "INFO").upper(),
    )
