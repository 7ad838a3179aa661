"""
Ingestion error kinds.

None of these ever reaches an API caller: readers and the poller turn them
into an empty Table (or a skipped row) and log them.
"""


class IngestError(Exception):
    """Base exception for ingestion errors"""
    pass


class SourceUnreachable(IngestError):
    """File missing or unopenable, or the remote service failed"""
    pass


class MalformedRow(IngestError):
    """A single row could not be parsed"""

    def __init__(self, line: int, reason: str):
        super().__init__(f"line {line}: {reason}")
        self.line = line
        self.reason = reason


class InvalidReference(IngestError):
    """Spreadsheet URL has no `/d/<id>` segment, or nothing usable was fetched"""
    pass
