import pytest


SHEET_URL = "https://docs.google.com/spreadsheets/d/1AbCdEfGh/edit#gid=0"


class FakeSheets:
    """Stands in for GoogleSheetsClient; hands out one response per call."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def get_values(self, spreadsheet_id, range_spec):
        self.calls.append((spreadsheet_id, range_spec))
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def sheet_url():
    return SHEET_URL


@pytest.fixture
def fake_sheets():
    """Build a FakeSheets and return (client, factory)."""

    def make(*responses):
        client = FakeSheets(*responses)
        return client, lambda: client

    return make


@pytest.fixture
def write_csv(tmp_path):
    def write(text, name="results.csv", encoding="utf-8"):
        path = tmp_path / name
        path.write_bytes(text.encode(encoding))
        return path

    return write
