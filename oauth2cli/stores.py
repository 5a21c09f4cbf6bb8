"""
JSON stores for client credentials and tokens.

Two backends share one small interface (read / write / delete):
    FileStore           — a JSON file on disk
    SecretManagerStore  — the latest version of a Google Secret Manager secret

read() returns None when the source does not exist; every other failure propagates.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from google.api_core.exceptions import AlreadyExists, GoogleAPICallError, NotFound

from .errors import PersistenceError
from .models import FileLocation, Location, SecretLabels, SecretLocation
from .settings import Settings

logger = logging.getLogger(__name__)

JsonPayload = dict[str, Any]


# ── File backend ──────────────────────────────────────────────────────────────

class FileStore:
    """A JSON document kept in a single file."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def __repr__(self) -> str:
        return f"FileStore({str(self.path)!r})"

    def __str__(self) -> str:
        return str(self.path)

    def read(self) -> Optional[JsonPayload]:
        """Parse the file. Returns None if it does not exist; bad JSON raises ValueError."""
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        return json.loads(text)

    def write(self, payload: JsonPayload) -> None:
        try:
            self.path.write_text(json.dumps(payload), encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(f"Failed to write {self.path}: {exc}") from exc
        logger.info("Wrote %s", self.path)

    def delete(self) -> bool:
        """Remove the file. Returns False if there was nothing to remove."""
        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        logger.info("Deleted %s", self.path)
        return True


# ── Secret Manager backend ────────────────────────────────────────────────────

class SecretManagerStore:
    """
    A JSON document kept as the payload of a Secret Manager secret.

    Each write() adds a new secret version; read() always fetches versions/latest.
    The secret is created (automatic replication, with labels) on first write.
    """

    def __init__(
        self,
        client: Any,
        location: SecretLocation,
        secret_id: str,
        labels: Optional[SecretLabels] = None,
    ) -> None:
        self._client = client
        self._project_parent = f"projects/{location.project_id}"
        self._secret_id = secret_id
        self.name = location.secret_name(secret_id)
        self._labels = labels

    def __repr__(self) -> str:
        return f"SecretManagerStore({self.name!r})"

    def __str__(self) -> str:
        return self.name

    def read(self) -> Optional[JsonPayload]:
        try:
            response = self._client.access_secret_version(
                request={"name": f"{self.name}/versions/latest"}
            )
        except NotFound:
            return None
        # payload.data is bytes; we keep UTF-8 JSON in there
        return json.loads(response.payload.data.decode("utf-8"))

    def write(self, payload: JsonPayload) -> None:
        data = json.dumps(payload).encode("utf-8")
        try:
            try:
                self._client.create_secret(
                    request={
                        "parent": self._project_parent,
                        "secret_id": self._secret_id,
                        "secret": {
                            "replication": {"automatic": {}},
                            "labels": self._labels.to_labels() if self._labels else {},
                        },
                    }
                )
                logger.info("Created secret %s", self.name)
            except AlreadyExists:
                pass
            version = self._client.add_secret_version(
                request={"parent": self.name, "payload": {"data": data}}
            )
        except GoogleAPICallError as exc:
            raise PersistenceError(f"Failed to write {self.name}: {exc}") from exc
        logger.info("Added secret version %s", getattr(version, "name", self.name))

    def delete(self) -> bool:
        try:
            self._client.delete_secret(request={"name": self.name})
        except NotFound:
            return False
        logger.info("Deleted secret %s", self.name)
        return True


def secret_manager_client(settings: Settings) -> Any:
    """
    Build a SecretManagerServiceClient.

    Uses the service account key in settings.service_account_file when set,
    otherwise application default credentials.
    """
    from google.cloud import secretmanager

    if settings.service_account_file:
        return secretmanager.SecretManagerServiceClient.from_service_account_file(
            settings.service_account_file
        )
    return secretmanager.SecretManagerServiceClient()


# ── Factory ───────────────────────────────────────────────────────────────────

def open_stores(
    location: Location,
    settings: Settings,
    secret_client: Any = None,
) -> tuple[Any, Any]:
    """Return (creds_store, token_store) for a resolved location."""
    if isinstance(location, FileLocation):
        return FileStore(location.creds_path), FileStore(location.token_path)

    client = secret_client if secret_client is not None else secret_manager_client(settings)
    labels = settings.secret_labels()
    return (
        SecretManagerStore(client, location, location.creds_secret_id, labels),
        SecretManagerStore(client, location, location.token_secret_id, labels),
    )
