from __future__ import annotations

import json
import time
from pathlib import Path
from types import SimpleNamespace

import pytest
from google.api_core.exceptions import AlreadyExists, NotFound
from google_auth_oauthlib.flow import Flow

from oauth2cli.settings import Settings

SHEETS = "https://www.googleapis.com/auth/spreadsheets"
DRIVE = "https://www.googleapis.com/auth/drive.readonly"

CLIENT_PAYLOAD = {
    "installed": {
        "client_id": "1234-abc.apps.googleusercontent.com",
        "client_secret": "s3cret",
        "redirect_uris": ["http://localhost", "urn:ietf:wg:oauth:2.0:oob"],
    }
}

TOKEN_RESPONSE = {
    "access_token": "ya29.fresh",
    "refresh_token": "1//refresh",
    "token_type": "Bearer",
    "expires_in": 3599,
}

STORED_TOKEN = {
    "token": "ya29.stored",
    "refresh_token": "1//stored",
    "token_uri": "https://oauth2.googleapis.com/token",
    "client_id": "1234-abc.apps.googleusercontent.com",
    "client_secret": "s3cret",
    "scopes": [SHEETS],
}


def write_json(path: Path, payload) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


@pytest.fixture
def settings(tmp_path):
    return Settings(home="/home/tester", hostname="devbox", log_dir=tmp_path / "logs")


@pytest.fixture
def creds_dir(tmp_path):
    d = tmp_path / "cred"
    d.mkdir()
    write_json(d / "creds.json", CLIENT_PAYLOAD)
    return d


@pytest.fixture
def prompt(monkeypatch):
    """Replace input(); answers are consumed in order and every prompt is recorded."""
    state = SimpleNamespace(answers=["4/0AbCdEf"], prompts=[])

    def fake_input(message=""):
        state.prompts.append(message)
        if not state.answers:
            raise AssertionError("unexpected prompt")
        return state.answers.pop(0)

    monkeypatch.setattr("builtins.input", fake_input)
    return state


@pytest.fixture
def no_prompt(monkeypatch):
    def fail(message=""):
        raise AssertionError(f"unexpected prompt: {message}")

    monkeypatch.setattr("builtins.input", fail)


@pytest.fixture
def token_exchange(monkeypatch):
    """Stand in for the network call in Flow.fetch_token; records the kwargs it got."""
    state = SimpleNamespace(calls=[], error=None)

    def fake_fetch_token(self, **kwargs):
        state.calls.append(kwargs)
        if state.error is not None:
            raise state.error
        self.oauth2session.token = dict(TOKEN_RESPONSE, expires_at=time.time() + 3599)
        return self.oauth2session.token

    monkeypatch.setattr(Flow, "fetch_token", fake_fetch_token)
    return state


class FakeSecretClient:
    """In-memory stand-in for SecretManagerServiceClient."""

    def __init__(self):
        self.secrets: dict[str, dict] = {}

    def put(self, name: str, payload) -> None:
        secret = self.secrets.setdefault(name, {"labels": {}, "versions": []})
        secret["versions"].append(json.dumps(payload).encode("utf-8"))

    def latest(self, name: str):
        return json.loads(self.secrets[name]["versions"][-1].decode("utf-8"))

    def access_secret_version(self, request):
        name = request["name"].rsplit("/versions/", 1)[0]
        if name not in self.secrets or not self.secrets[name]["versions"]:
            raise NotFound(f"Secret [{name}] not found")
        return SimpleNamespace(payload=SimpleNamespace(data=self.secrets[name]["versions"][-1]))

    def create_secret(self, request):
        name = f"{request['parent']}/secrets/{request['secret_id']}"
        if name in self.secrets:
            raise AlreadyExists(f"Secret [{name}] already exists")
        self.secrets[name] = {"labels": dict(request["secret"]["labels"]), "versions": []}
        return SimpleNamespace(name=name)

    def add_secret_version(self, request):
        secret = self.secrets[request["parent"]]
        secret["versions"].append(request["payload"]["data"])
        return SimpleNamespace(name=f"{request['parent']}/versions/{len(secret['versions'])}")

    def delete_secret(self, request):
        if request["name"] not in self.secrets:
            raise NotFound(f"Secret [{request['name']}] not found")
        del self.secrets[request["name"]]


@pytest.fixture
def secret_client():
    return FakeSecretClient()
