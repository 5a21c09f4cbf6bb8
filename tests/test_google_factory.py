from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from google.oauth2.credentials import Credentials

from oauth2cli.google_auth import GoogleOAuth2CLI
from oauth2cli.google_factory import GoogleServiceFactory
from oauth2cli.sheets_client import SheetsClient

from conftest import SHEETS, STORED_TOKEN, write_json


@pytest.fixture
def builds(monkeypatch):
    calls = []

    def fake_build(name, version, credentials=None, cache_discovery=True):
        calls.append((name, version, credentials))
        return MagicMock(name=f"{name}/{version}")

    monkeypatch.setattr("oauth2cli.google_factory.build", fake_build)
    return calls


def test_services_are_built_once(builds):
    creds = Credentials("ya29.token")
    factory = GoogleServiceFactory(creds)

    assert factory.sheets is factory.sheets
    assert factory.service("drive", "v3") is not factory.sheets
    assert builds == [("sheets", "v4", creds), ("drive", "v3", creds)]


def test_factory_uses_oauth_cli_credentials(builds, creds_dir, settings, no_prompt):
    write_json(creds_dir / "token.json", STORED_TOKEN)
    auth = GoogleOAuth2CLI(SHEETS, str(creds_dir), settings=settings)

    GoogleServiceFactory(auth).sheets

    assert builds[0][2] is auth.auth_client


def test_sheets_client_reads_metadata_and_values():
    svc = MagicMock()
    spreadsheets = svc.spreadsheets.return_value
    spreadsheets.get.return_value.execute.return_value = {
        "properties": {"title": "Budget"},
        "sheets": [{"properties": {"title": "Jan"}}, {"properties": {"title": "Feb"}}],
    }
    spreadsheets.values.return_value.get.return_value.execute.return_value = {
        "values": [["a", "b"], ["c"]]
    }
    factory = MagicMock(sheets=svc)

    client = SheetsClient(factory)

    assert client.list_sheet_names("sid") == ["Jan", "Feb"]
    assert client.read_range("sid", "Jan!A1:B2") == [["a", "b"], ["c"]]
    spreadsheets.values.return_value.get.assert_called_with(spreadsheetId="sid", range="Jan!A1:B2")

    client.get_spreadsheet("sid", "Jan!A1")
    spreadsheets.get.assert_called_with(spreadsheetId="sid", ranges=["Jan!A1"])


def test_sheets_client_empty_range():
    svc = MagicMock()
    svc.spreadsheets.return_value.values.return_value.get.return_value.execute.return_value = {}
    assert SheetsClient(MagicMock(sheets=svc)).read_range("sid", "A1:B2") == []
