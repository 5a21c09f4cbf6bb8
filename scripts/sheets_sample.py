"""
sheets_sample.py — fetch a spreadsheet and one range of values.

Two ways to authorize:

  # As the user, through GoogleOAuth2CLI (prompts once, then reuses the token):
  python scripts/sheets_sample.py --creds ~/cred/sheets \\
    --spreadsheet-id 1a0utkUppwAOeNdbUuKT9RZW2X5EQyaPxrJSS7rvRvlE --range A1:M50

  # As a service account named by GOOGLE_APPLICATION_CREDENTIALS. The service
  # account needs access to the spreadsheet:
  python scripts/sheets_sample.py --service-account \\
    --spreadsheet-id 1a0utkUppwAOeNdbUuKT9RZW2X5EQyaPxrJSS7rvRvlE

Output: JSON  { spreadsheet_id, title, sheets, range, rows }
"""
from __future__ import annotations

from typing import Any

import google.auth

from oauth2cli.base import BaseScript
from oauth2cli.google_auth import GoogleOAuth2CLI
from oauth2cli.google_factory import GoogleServiceFactory
from oauth2cli.sheets_client import SHEETS_SCOPE, SheetsClient


class SheetsSample(BaseScript):
    """Fetch spreadsheet metadata and a range of values from Google Sheets."""

    @classmethod
    def add_arguments(cls, parser) -> None:
        parser.add_argument("--spreadsheet-id", required=True, metavar="ID")
        parser.add_argument("--range", default="A1:M50",
                            help="A1-notation range to read (default: A1:M50)")
        auth = parser.add_mutually_exclusive_group()
        auth.add_argument("--creds", default=None,
                          help="Directory, filename prefix or sm://PROJECT/NAME")
        auth.add_argument("--service-account", action="store_true",
                          help="Use application default credentials instead of a user token")

    def build_factory(self) -> GoogleServiceFactory:
        if self.args.service_account:
            credentials, project = google.auth.default(scopes=[SHEETS_SCOPE])
            self.logger.info("Using application default credentials (project %s)", project)
            return GoogleServiceFactory(credentials)
        return GoogleServiceFactory(
            GoogleOAuth2CLI(SHEETS_SCOPE, self.args.creds, settings=self.settings)
        )

    def run(self) -> dict[str, Any]:
        sheets = SheetsClient(self.build_factory())
        meta = sheets.get_spreadsheet(self.args.spreadsheet_id)
        rows = sheets.read_range(self.args.spreadsheet_id, self.args.range)
        self.logger.info("Read %d rows from %s", len(rows), self.args.range)
        return {
            "spreadsheet_id": self.args.spreadsheet_id,
            "title": meta.get("properties", {}).get("title"),
            "sheets": [s["properties"]["title"] for s in meta.get("sheets", [])],
            "range": self.args.range,
            "rows": rows,
        }


if __name__ == "__main__":
    SheetsSample.main()
