"""
Re-authorize a creds location from scratch.

Run this after adding new scopes to the OAuth consent screen in Cloud Console, or
when a stored token has been revoked. Deletes the persisted token (file or secret)
and runs the console authorization flow again.

Usage:
    python reauth.py --creds ~/cred/sheets --scope https://www.googleapis.com/auth/spreadsheets
    python reauth.py --creds sm://my-project/sheets-cli --scope ... --scope ...
"""
from __future__ import annotations

from typing import Any

from oauth2cli.base import BaseScript
from oauth2cli.google_auth import GoogleOAuth2CLI
from oauth2cli.locator import resolve_location
from oauth2cli.stores import open_stores


class Reauth(BaseScript):
    """Delete the stored token and obtain a fresh one through the console flow."""

    @classmethod
    def add_arguments(cls, parser) -> None:
        parser.add_argument("--creds", default=None,
                            help="Directory, filename prefix or sm://PROJECT/NAME")
        parser.add_argument("--scope", action="append", required=True,
                            help="Scope URI to request (repeatable)")

    def run(self) -> dict[str, Any]:
        locator = self.args.creds if self.args.creds is not None else self.settings.creds
        _, token_store = open_stores(resolve_location(locator), self.settings)
        if token_store.delete():
            self.logger.info("Deleted old token: %s", token_store)

        self.logger.info("Requesting %d scope(s): %s", len(self.args.scope), ", ".join(self.args.scope))
        auth = GoogleOAuth2CLI(self.args.scope, locator, settings=self.settings)
        return {
            "token": str(auth.token_store),
            "scopes": auth.scopes,
            "state": auth.state.value,
        }


if __name__ == "__main__":
    Reauth.main()
