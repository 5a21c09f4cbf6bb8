"""
SheetsClient — the small slice of the Google Sheets API v4 used by the sample script.
"""
from __future__ import annotations

import logging
from typing import Any

from .google_factory import GoogleServiceFactory

logger = logging.getLogger(__name__)

SHEETS_SCOPE = "https://www.googleapis.com/auth/spreadsheets"
SHEETS_READONLY_SCOPE = "https://www.googleapis.com/auth/spreadsheets.readonly"

# Type alias for a 2-D grid of cell values
ValueMatrix = list[list[Any]]


class SheetsClient:
    """
    Read-only Google Sheets operations.

    Usage:
        factory = GoogleServiceFactory(GoogleOAuth2CLI(SHEETS_SCOPE))
        sheets  = SheetsClient(factory)
        rows    = sheets.read_range("spreadsheet_id", "TabName!A2:E")
    """

    def __init__(self, factory: GoogleServiceFactory) -> None:
        self._svc = factory.sheets

    def get_spreadsheet(self, spreadsheet_id: str, range_name: str | None = None) -> dict[str, Any]:
        """Return spreadsheet metadata, optionally restricted to one range."""
        kwargs: dict[str, Any] = {"spreadsheetId": spreadsheet_id}
        if range_name:
            kwargs["ranges"] = [range_name]
        meta = self._svc.spreadsheets().get(**kwargs).execute()
        logger.info("Fetched spreadsheet %s", spreadsheet_id)
        return meta

    def read_range(self, spreadsheet_id: str, range_name: str) -> ValueMatrix:
        """
        Return cell values as a list of rows (list of lists).
        Trailing empty cells are omitted by the API.
        """
        resp = self._svc.spreadsheets().values().get(
            spreadsheetId=spreadsheet_id,
            range=range_name,
        ).execute()
        return resp.get("values", [])

    def list_sheet_names(self, spreadsheet_id: str) -> list[str]:
        """Return the names of all sheet tabs in a spreadsheet."""
        meta = self.get_spreadsheet(spreadsheet_id)
        return [
            s["properties"]["title"]
            for s in meta.get("sheets", [])
        ]
