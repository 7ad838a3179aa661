"""
Row normalization shared by both sources.

Responsibilities:
- hide columns whose header matches a hide keyword
- rename the remaining headers (part-/psum- first, then the replacement table)
- drop rows that are blank in every cell
- restrict each kept row to the visible column positions

The functions here are pure: the same header and rows always give the same Table.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

from .models import Table
from .rules import HEADER_REPLACEMENTS, HIDDEN_COLUMNS, PART_PREFIX, PSUM_PREFIX


def is_hidden(header: str) -> bool:
    lowered = header.lower()
    return any(keyword in lowered for keyword in HIDDEN_COLUMNS)


def replace_header(header: str) -> str:
    """
    Map a raw header to its display name.

    Rules, first match wins (all case-insensitive):
    - contains "part-": "S" + the token after the first "-"
    - contains "psum-": "P" + the token after the first "-"
    - first substring found in HEADER_REPLACEMENTS
    - otherwise the header is returned unchanged
    """
    lowered = header.lower()

    for marker, prefix in (PART_PREFIX, PSUM_PREFIX):
        if marker in lowered:
            # token between the first and second "-", original casing kept
            return prefix + header.split("-")[1]

    for original, replacement in HEADER_REPLACEMENTS:
        if original in lowered:
            return replacement

    return header


def process_headers(headers: Sequence[str]) -> Tuple[List[str], List[bool]]:
    """Return (display headers, visibility mask). The mask has one entry per raw header."""
    processed: List[str] = []
    visible: List[bool] = []

    for header in headers:
        hidden = is_hidden(header)
        visible.append(not hidden)
        if not hidden:
            processed.append(replace_header(header))

    return processed, visible


def is_blank_row(row: Sequence[str]) -> bool:
    return all(not cell.strip() for cell in row)


def filter_row(row: Sequence[str], visible: Sequence[bool]) -> List[str]:
    # Cells past the end of the header row have no visibility entry and are dropped.
    return [cell for cell, keep in zip(row, visible) if keep]


def normalize_rows(header: Sequence[str], rows: Sequence[Sequence[str]]) -> Table:
    headers, visible = process_headers(header)
    kept = [filter_row(row, visible) for row in rows if not is_blank_row(row)]
    return Table(headers=headers, rows=kept)
