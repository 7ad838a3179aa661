import http.client

import pytest
from google.auth.exceptions import GoogleAuthError
from googleapiclient.errors import Error as ApiError

from score_viewer.cloud import (
    GoogleSheetsClient,
    extract_spreadsheet_id,
    fetch_cloud_rows,
    locate_header_row,
    sheet_range,
)
from score_viewer.errors import InvalidReference, SourceUnreachable
from score_viewer.models import CloudSource, Table
from score_viewer.sources import CloudTableSource


def fetch_cloud_table(url, sheet_name, client_factory):
    return CloudTableSource(CloudSource(url=url, sheet_name=sheet_name), client_factory).read_table()


def test_extract_spreadsheet_id(sheet_url):
    assert extract_spreadsheet_id(sheet_url) == "1AbCdEfGh"
    assert extract_spreadsheet_id("https://docs.google.com/spreadsheets/d/XYZ") == "XYZ"


@pytest.mark.parametrize("url", [
    "https://docs.google.com/spreadsheets/e/XYZ/edit",
    "https://docs.google.com/spreadsheets/d",
    "",
    "XYZ",
])
def test_extract_spreadsheet_id_without_d_segment(url):
    with pytest.raises(InvalidReference):
        extract_spreadsheet_id(url)


def test_sheet_range_defaults_to_sheet1():
    assert sheet_range("") == "Sheet1!A:Z"
    assert sheet_range("Finals") == "Finals!A:Z"


def test_locate_header_row():
    values = [["Competition"], [], ["Date", "2025-01-01"], ["Category", "first_name"], ["U10", "Jane"]]
    assert locate_header_row(values) == 3
    assert locate_header_row([["CATEGORY"]]) == 0
    assert locate_header_row([["first_name"], ["Jane"]]) == 0
    # exact match only
    assert locate_header_row([["x"], ["categoryx"], ["category "]]) == 0


def test_rows_before_category_row_discarded(fake_sheets, sheet_url):
    client, factory = fake_sheets([
        ["Spring Cup"],
        ["Hall B"],
        [],
        ["Category", "first_name", "team_name", "result"],
        ["U10", "Jane", "Red", "12.3"],
        ["", "", "", ""],
        ["U12", "John"],
    ])
    table = fetch_cloud_table(sheet_url, "Finals", factory)
    assert client.calls == [("1AbCdEfGh", "Finals!A:Z")]
    assert table.headers == ["Series", "Name", "Result"]
    assert table.rows == [["U10", "Jane", "12.3"], ["U12", "John"]]


def test_row_zero_is_header_without_category_row(fake_sheets, sheet_url):
    _, factory = fake_sheets([["first_name", "result"], ["Jane", "1"]])
    header, rows = fetch_cloud_rows(sheet_url, "", factory)
    assert header == ["first_name", "result"]
    assert rows == [["Jane", "1"]]


def test_cells_are_stringified(fake_sheets, sheet_url):
    _, factory = fake_sheets([["first_name", "result"], ["Jane", 12.5], ["John", 7]])
    assert fetch_cloud_table(sheet_url, "", factory).rows == [["Jane", "12.5"], ["John", "7"]]


def test_empty_sheet_gives_empty_table(fake_sheets, sheet_url):
    _, factory = fake_sheets([])
    assert fetch_cloud_table(sheet_url, "", factory) == Table.empty()


def test_bad_url_never_calls_client(fake_sheets):
    client, factory = fake_sheets([["a"]])
    with pytest.raises(InvalidReference):
        fetch_cloud_table("https://example.com/sheet", "", factory)
    assert client.calls == []


def test_auth_failure_is_unreachable(fake_sheets, sheet_url):
    _, factory = fake_sheets(GoogleAuthError("invalid_grant"))
    with pytest.raises(SourceUnreachable):
        fetch_cloud_table(sheet_url, "", factory)


@pytest.mark.parametrize("failure", [
    http.client.IncompleteRead(b""),
    ApiError("discovery document unavailable"),
], ids=["incomplete-read", "api-error"])
def test_transport_failures_are_unreachable(fake_sheets, sheet_url, failure):
    _, factory = fake_sheets(failure)
    with pytest.raises(SourceUnreachable) as excinfo:
        fetch_cloud_rows(sheet_url, "", factory)
    assert excinfo.value.__cause__ is failure


def test_missing_credentials_file_is_unreachable(tmp_path, sheet_url):
    client = GoogleSheetsClient(tmp_path / "credentials.json")
    with pytest.raises(SourceUnreachable) as excinfo:
        fetch_cloud_table(sheet_url, "", lambda: client)
    assert isinstance(excinfo.value.__cause__, OSError)
