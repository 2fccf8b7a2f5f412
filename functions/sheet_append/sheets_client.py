"""
functions/sheet_append/sheets_client.py

WHAT THIS FILE IS FOR
---------------------
A thin, synchronous adapter around the Google Sheets v4 `values` API,
exposing exactly the three range operations the row appender needs:

- read_header(tab)           -> values.get    '<tab>'!1:1
- write_header(tab, headers) -> values.update '<tab>'!1:1   (RAW)
- append_row(tab, row)       -> values.append '<tab>'       (RAW, INSERT_ROWS)

AUTHENTICATION
--------------
Uses a Google service account (client email + PEM private key) with the
spreadsheets scope. Private keys stored in env vars usually carry literal
"\\n" sequences; they are unescaped before use.

The discovery client is built lazily on first use so that importing the
API module never requires credentials.

ERROR HANDLING RULES
--------------------
- Missing spreadsheet id / credentials -> SheetsConfigError
- googleapiclient.errors.HttpError and transport errors propagate as-is
- No retries are performed here

WHAT THIS FILE IS NOT FOR
-------------------------
- Header reconciliation or row layout (see row_appender.py)
- HTTP routing or response formatting
"""

from __future__ import annotations

import threading
from typing import Any, List, Optional, Sequence

import structlog
from google.oauth2 import service_account
from googleapiclient.discovery import build

from functions.utils.settings import Settings

logger = structlog.get_logger(__name__)

SHEETS_SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
TOKEN_URI = "https://oauth2.googleapis.com/token"


class SheetsConfigError(RuntimeError):
    """Raised when the spreadsheet backend is not configured."""


def a1_range(tab: str, cells: Optional[str] = None) -> str:
    """
    Build an A1 range for `tab`, quoting the tab name.

        a1_range("Sheet1", "1:1")  -> "'Sheet1'!1:1"
        a1_range("Bob's tab")      -> "'Bob''s tab'"
    """
    quoted = "'" + tab.replace("'", "''") + "'"
    return f"{quoted}!{cells}" if cells else quoted


class GoogleSheetsClient:
    """
    Range operations over one spreadsheet.

    `service` may be injected (tests pass a fake with the same
    `spreadsheets().values().<op>(...).execute()` chain).
    """

    def __init__(self, settings: Settings, service: Any = None) -> None:
        self.settings = settings
        self._service = service
        self._service_lock = threading.Lock()

    @property
    def spreadsheet_id(self) -> str:
        if not self.settings.sheet_id:
            raise SheetsConfigError("sheet_id is not configured")
        return self.settings.sheet_id

    def read_header(self, tab: str) -> List[str]:
        resp = (
            self._values()
            .get(
                spreadsheetId=self.spreadsheet_id,
                range=a1_range(tab, "1:1"),
                majorDimension="ROWS",
            )
            .execute()
        )
        rows = resp.get("values") or []
        if not rows:
            return []
        return ["" if cell is None else str(cell) for cell in rows[0]]

    def write_header(self, tab: str, headers: Sequence[str]) -> None:
        self._values().update(
            spreadsheetId=self.spreadsheet_id,
            range=a1_range(tab, "1:1"),
            valueInputOption="RAW",
            body={"values": [list(headers)]},
        ).execute()
        logger.info("sheet_header_written", tab=tab, column_count=len(headers))

    def append_row(self, tab: str, row: Sequence[Any]) -> None:
        self._values().append(
            spreadsheetId=self.spreadsheet_id,
            range=a1_range(tab),
            valueInputOption="RAW",
            insertDataOption="INSERT_ROWS",
            body={"values": [list(row)]},
        ).execute()
        logger.info("sheet_row_appended", tab=tab, cell_count=len(row))

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #
    def _values(self) -> Any:
        return self._get_service().spreadsheets().values()

    def _get_service(self) -> Any:
        with self._service_lock:
            if self._service is None:
                self._service = build(
                    "sheets",
                    "v4",
                    credentials=self._credentials(),
                    cache_discovery=False,
                )
                logger.info("sheets_service_built")
            return self._service

    def _credentials(self) -> service_account.Credentials:
        email = self.settings.google_client_email
        key = self.settings.google_private_key
        if not email or key is None:
            raise SheetsConfigError("google_client_email and google_private_key are required")

        info = {
            "type": "service_account",
            "client_email": email,
            "private_key": key.get_secret_value().replace("\\n", "\n"),
            "token_uri": TOKEN_URI,
        }
        return service_account.Credentials.from_service_account_info(info, scopes=SHEETS_SCOPES)
