"""Google Sheets session: OAuth credentials and read-only sheet access.

The catalog only needs four capabilities from a spreadsheet backend, captured
by the SheetsSession protocol. GoogleSheetsSession implements them with the
Google client libraries; blocking client calls run in worker threads so the
event loop keeps serving other providers.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Protocol

import google.auth.exceptions
import google.auth.transport.requests
import google.oauth2.credentials
import google_auth_oauthlib.flow
from googleapiclient.discovery import build

from ..errors import SheetsAuthError
from ..paths import get_token_path

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets.readonly"]

# Columns read from every tab
READ_COLUMNS = "A:Z"


class SheetsSession(Protocol):
    """Capability surface the spreadsheet provider depends on."""

    def is_signed_in(self) -> bool: ...

    async def sign_in(self) -> None: ...

    async def list_sheet_names(self) -> list[str]: ...

    async def read_range(self, sheet_name: str) -> list[list[str]]: ...


class GoogleSheetsSession:
    """SheetsSession backed by google-auth-oauthlib and the Sheets v4 API."""

    def __init__(
        self,
        client_id: str,
        client_secret: str | None,
        api_key: str | None,
        sheet_id: str,
        token_path: Path | None = None,
    ) -> None:
        """Initialize session.

        Args:
            client_id: OAuth client id
            client_secret: OAuth client secret for the installed-app flow
            api_key: API key sent as developerKey
            sheet_id: Spreadsheet to read
            token_path: Where authorized credentials are persisted
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self.api_key = api_key
        self.sheet_id = sheet_id
        self.token_path = token_path or get_token_path()
        self._creds: google.oauth2.credentials.Credentials | None = None
        self._service: Any = None

    def _load_stored_creds(self) -> google.oauth2.credentials.Credentials | None:
        if not self.token_path.exists():
            return None
        try:
            return google.oauth2.credentials.Credentials.from_authorized_user_file(
                str(self.token_path), SCOPES
            )
        except (ValueError, json.JSONDecodeError) as e:
            logger.error(f"Stored credentials invalid, removing {self.token_path}: {e}")
            self.token_path.unlink(missing_ok=True)
            return None

    def _save_creds(self, creds: google.oauth2.credentials.Credentials) -> None:
        self.token_path.parent.mkdir(parents=True, exist_ok=True)
        self.token_path.write_text(creds.to_json(), encoding="utf-8")
        logger.debug(f"Credentials saved to {self.token_path}")

    def is_signed_in(self) -> bool:
        """Return True when valid credentials are held or stored."""
        if self._creds is None:
            self._creds = self._load_stored_creds()
        return self._creds is not None and self._creds.valid

    def _sign_in_blocking(self) -> None:
        creds = self._creds or self._load_stored_creds()

        if creds and creds.expired and creds.refresh_token:
            try:
                creds.refresh(google.auth.transport.requests.Request())
                logger.debug("Refreshed stored credentials")
            except google.auth.exceptions.RefreshError as e:
                logger.error(f"Refresh failed: {e}; will perform new flow")
                creds = None

        if not creds or not creds.valid:
            if not self.client_id or not self.client_secret:
                raise SheetsAuthError(
                    "Google client id and secret are required for sign-in. Set "
                    "JAAP_SHEETS_CLIENT_ID and JAAP_SHEETS_CLIENT_SECRET."
                )
            client_config = {
                "installed": {
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "auth_uri": "https://accounts.google.com/o/oauth2/auth",
                    "token_uri": "https://oauth2.googleapis.com/token",
                    "redirect_uris": ["http://localhost"],
                }
            }
            flow = google_auth_oauthlib.flow.InstalledAppFlow.from_client_config(
                client_config, SCOPES
            )
            try:
                creds = flow.run_local_server(port=0)
            except Exception as e:
                raise SheetsAuthError(f"Sign-in was not completed: {e}", e) from e
            if not creds or not creds.token:
                raise SheetsAuthError("Sign-in did not return a token")

        self._save_creds(creds)
        self._creds = creds
        self._service = None

    async def sign_in(self) -> None:
        """Authorize interactively, reusing or refreshing stored credentials.

        Raises:
            SheetsAuthError: If the flow cannot run or is rejected
        """
        await asyncio.to_thread(self._sign_in_blocking)

    def sign_out(self) -> None:
        """Forget held and stored credentials."""
        self._creds = None
        self._service = None
        self.token_path.unlink(missing_ok=True)

    def _get_service(self) -> Any:
        if self._service is None:
            if self._creds is None:
                raise SheetsAuthError("Not signed in to Google Sheets")
            self._service = build(
                "sheets",
                "v4",
                credentials=self._creds,
                developerKey=self.api_key,
                cache_discovery=False,
            )
            logger.debug("Google Sheets service client created")
        return self._service

    async def list_sheet_names(self) -> list[str]:
        """Return the titles of every tab in the spreadsheet."""

        def _sync_list() -> list[str]:
            result = (
                self._get_service()
                .spreadsheets()
                .get(spreadsheetId=self.sheet_id, fields="sheets(properties(title))")
                .execute()
            )
            return [
                sheet.get("properties", {}).get("title", "")
                for sheet in result.get("sheets", [])
            ]

        return await asyncio.to_thread(_sync_list)

    async def read_range(self, sheet_name: str) -> list[list[str]]:
        """Return the rows of one tab; the first row holds the headers."""

        def _sync_read() -> list[list[str]]:
            result = (
                self._get_service()
                .spreadsheets()
                .values()
                .get(spreadsheetId=self.sheet_id, range=f"{sheet_name}!{READ_COLUMNS}")
                .execute()
            )
            return result.get("values", [])

        return await asyncio.to_thread(_sync_read)

    async def test_connection(self) -> dict[str, Any]:
        """Sign in and list tabs, reporting the outcome instead of raising.

        Returns:
            {"success": bool, "message": str, "sheet_names": list[str]}
        """
        try:
            if not self.is_signed_in():
                await self.sign_in()
            names = await self.list_sheet_names()
        except Exception as e:
            return {"success": False, "message": str(e), "sheet_names": []}
        return {
            "success": True,
            "message": f"Connected, found {len(names)} sheet(s)",
            "sheet_names": names,
        }
