from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest
from google.oauth2.credentials import Credentials

from oauth2cli.base import BaseScript

import reauth
from scripts import sheets_sample

from conftest import SHEETS, STORED_TOKEN, write_json


@pytest.fixture
def script_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("OAUTH2CLI_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("OAUTH2CLI_CREDS", "")
    monkeypatch.setenv("LOG_LEVEL", "INFO")
    return tmp_path


class Echo(BaseScript):
    """Echo the --word argument back as JSON."""

    @classmethod
    def add_arguments(cls, parser):
        parser.add_argument("--word", default="hello")

    def run(self):
        self.logger.info("echoing %s", self.args.word)
        return {"word": self.args.word}


class Broken(BaseScript):
    """Always fails."""

    def run(self):
        raise RuntimeError("boom")


def test_base_script_prints_json_and_logs_to_file(script_env, capsys):
    result = Echo.main(["--word", "hi"])

    assert result == {"word": "hi"}
    assert json.loads(capsys.readouterr().out) == {"word": "hi"}
    assert "echoing hi" in (script_env / "logs" / "echo.log").read_text()


def test_base_script_reraises_failures(script_env):
    with pytest.raises(RuntimeError, match="boom"):
        Broken.main([])
    assert "Script failed" in (script_env / "logs" / "broken.log").read_text()


def test_reauth_replaces_stored_token(script_env, creds_dir, prompt, token_exchange, capsys):
    write_json(creds_dir / "token.json", STORED_TOKEN)

    result = reauth.Reauth.main(["--creds", str(creds_dir), "--scope", SHEETS])

    assert result["state"] == "token_loaded"
    assert result["scopes"] == [SHEETS]
    assert len(prompt.prompts) == 1
    assert json.loads((creds_dir / "token.json").read_text())["token"] == "ya29.fresh"


def test_sheets_sample_with_service_account(script_env, monkeypatch, capsys):
    creds = Credentials("ya29.service")
    monkeypatch.setattr("google.auth.default", lambda scopes=None: (creds, "gchome"))

    svc = MagicMock()
    spreadsheets = svc.spreadsheets.return_value
    spreadsheets.get.return_value.execute.return_value = {
        "properties": {"title": "Roster"},
        "sheets": [{"properties": {"title": "Sheet1"}}],
    }
    spreadsheets.values.return_value.get.return_value.execute.return_value = {"values": [["x"]]}
    built = []

    def fake_build(name, version, credentials=None, cache_discovery=True):
        built.append(credentials)
        return svc

    monkeypatch.setattr("oauth2cli.google_factory.build", fake_build)

    result = sheets_sample.SheetsSample.main(
        ["--spreadsheet-id", "sid", "--range", "A1:B2", "--service-account"]
    )

    assert built == [creds]
    assert result == {
        "spreadsheet_id": "sid",
        "title": "Roster",
        "sheets": ["Sheet1"],
        "range": "A1:B2",
        "rows": [["x"]],
    }
