"""
Google Sheets fetcher.

A spreadsheet URL looks like https://docs.google.com/spreadsheets/d/<ID>/edit.
The whole A:Z range of one sheet is fetched; the header row is the first row
whose first cell is "category" (any case), or row 0 when there is none.
"""

from __future__ import annotations

import http.client
import logging
from pathlib import Path
from typing import Any, Callable, List, Protocol, Sequence

import httplib2
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient import errors as api_errors

from .errors import InvalidReference, SourceUnreachable
from .rules import CATEGORY_MARKER, DEFAULT_SHEET, SHEET_RANGE

logger = logging.getLogger(__name__)

SCOPES = ("https://www.googleapis.com/auth/spreadsheets.readonly",)


class SheetsClient(Protocol):
    """Authenticated access to spreadsheet values."""

    def get_values(self, spreadsheet_id: str, range_spec: str) -> List[List[Any]]:
        ...


ClientFactory = Callable[[], SheetsClient]


class GoogleSheetsClient:
    """Sheets v4 client authenticated with a service-account key file."""

    def __init__(self, credentials_path: Path):
        self.credentials_path = Path(credentials_path)

    def _service(self):
        credentials = service_account.Credentials.from_service_account_file(
            str(self.credentials_path), scopes=SCOPES
        )
        return build("sheets", "v4", credentials=credentials, cache_discovery=False)

    def get_values(self, spreadsheet_id: str, range_spec: str) -> List[List[Any]]:
        response = (
            self._service()
            .spreadsheets()
            .values()
            .get(spreadsheetId=spreadsheet_id, range=range_spec)
            .execute()
        )
        return response.get("values", [])


def extract_spreadsheet_id(url: str) -> str:
    parts = url.split("/")
    for i, part in enumerate(parts[:-1]):
        if part == "d":
            return parts[i + 1]
    raise InvalidReference(f"no spreadsheet id in {url!r}")


def sheet_range(sheet_name: str) -> str:
    return f"{sheet_name or DEFAULT_SHEET}!{SHEET_RANGE}"


def locate_header_row(values: Sequence[Sequence[str]]) -> int:
    """Index of the category row, falling back to 0."""
    for i, row in enumerate(values):
        if row and row[0].casefold() == CATEGORY_MARKER:
            return i
    return 0


def fetch_cloud_rows(url: str, sheet_name: str, client_factory: ClientFactory):
    """
    Fetch (raw header, raw rows) for one sheet.

    Raises InvalidReference for a bad URL, SourceUnreachable for any
    authentication or transport failure. An empty sheet gives empty rows.
    """
    spreadsheet_id = extract_spreadsheet_id(url)
    range_spec = sheet_range(sheet_name)

    try:
        values = client_factory().get_values(spreadsheet_id, range_spec)
    except (
        api_errors.Error,
        httplib2.HttpLib2Error,
        http.client.HTTPException,
        GoogleAuthError,
        OSError,
        ValueError,
    ) as exc:
        raise SourceUnreachable(f"fetching {range_spec} of {spreadsheet_id} failed: {exc}") from exc

    values = [[str(cell) for cell in row] for row in values]
    if not values:
        return [], []

    start = locate_header_row(values)
    logger.debug("Header row of %s resolved to %d", range_spec, start)
    relevant = values[start:]
    return relevant[0], relevant[1:]
