"""
Local delimited-file reader.

The first line decides the delimiter (";" if present, "," otherwise), rows
may have any number of fields, and the first parsed row is always the header.
read_local_rows raises SourceUnreachable for an unreadable file; an
unparsable row is skipped.
"""

from __future__ import annotations

import csv
import io
import logging
import os
from pathlib import Path
from typing import List, Optional, Tuple

from charset_normalizer import from_bytes

from .errors import MalformedRow, SourceUnreachable
from .rules import DELIMITERS

logger = logging.getLogger(__name__)

RawRows = Tuple[List[str], List[List[str]]]


def decode_bytes(raw: bytes) -> str:
    """
    Decode file bytes to text.

    Rules:
    - Detect encoding best-effort via charset-normalizer.
    - A UTF-8 BOM is stripped.
    - If decode fails, fall back to UTF-8 with replacement characters.
    """
    match = from_bytes(raw).best()
    encoding = match.encoding if match is not None else "utf-8"

    if raw.startswith(b"\xef\xbb\xbf") and encoding.lower().replace("-", "_") in ("utf_8", "utf8"):
        encoding = "utf-8-sig"

    try:
        return raw.decode(encoding)
    except (UnicodeDecodeError, LookupError):
        return raw.decode("utf-8", errors="replace")


def detect_delimiter(text: str) -> str:
    default, alternative = DELIMITERS
    first_line = text.split("\n", 1)[0]
    return alternative if alternative in first_line else default


def read_local_rows(path: Path, skipped: Optional[List[MalformedRow]] = None) -> RawRows:
    """
    Parse a local file into (raw header, raw rows).

    Raises SourceUnreachable if the file cannot be read or has no header row.
    Rows the csv module rejects are logged and skipped; pass a list as
    `skipped` to collect them as MalformedRow errors.
    """
    try:
        raw = Path(path).read_bytes()
    except OSError as exc:
        raise SourceUnreachable(f"cannot read {path}: {exc}") from exc

    text = decode_bytes(raw)
    delimiter = detect_delimiter(text)
    logger.debug("Reading %s with delimiter %r", path, delimiter)

    reader = csv.reader(io.StringIO(text, newline=""), delimiter=delimiter)

    try:
        header = next(reader)
    except StopIteration:
        raise SourceUnreachable(f"{path} has no header row") from None
    except csv.Error as exc:
        raise SourceUnreachable(f"cannot parse header of {path}: {exc}") from exc

    rows: List[List[str]] = []
    while True:
        try:
            row = next(reader)
        except StopIteration:
            break
        except csv.Error as exc:
            logger.warning("Skipping row in %s at line %d: %s", path, reader.line_num, exc)
            if skipped is not None:
                skipped.append(MalformedRow(reader.line_num, str(exc)))
            continue
        rows.append(row)

    return header, rows


def modification_marker(path: Path) -> Optional[float]:
    """File mtime, or None when the file cannot be stat-ed."""
    try:
        return os.stat(path).st_mtime
    except OSError:
        return None
