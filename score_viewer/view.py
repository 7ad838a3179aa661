from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Sequence, Union

from .models import CloudSource, LocalSource, Table, TableResponse
from .rules import RESULT_HEADER

logger = logging.getLogger(__name__)


def find_result_column(headers: Sequence[str]) -> Optional[int]:
    for i, header in enumerate(headers):
        if header.lower() == RESULT_HEADER:
            return i
    return None


@dataclass(frozen=True)
class Snapshot:
    table: Table
    result_column: Optional[int]
    source: Optional[Union[LocalSource, CloudSource]]
    generation: int
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class TableView:
    """
    Consumer of published tables.

    Holds only the latest snapshot; each publish replaces it whole.
    """

    def __init__(self):
        self._snapshot: Optional[Snapshot] = None

    def publish(self, table: Table, source=None, generation: int = 0) -> Snapshot:
        snapshot = Snapshot(
            table=table,
            result_column=find_result_column(table.headers),
            source=source,
            generation=generation,
        )
        self._snapshot = snapshot
        logger.info(
            "Published table: %d columns, %d rows (generation %d)",
            len(table.headers), len(table.rows), generation,
        )
        return snapshot

    def snapshot(self) -> Optional[Snapshot]:
        return self._snapshot

    def to_response(self) -> TableResponse:
        snapshot = self._snapshot
        if snapshot is None:
            return TableResponse()
        return TableResponse(
            headers=snapshot.table.headers,
            rows=snapshot.table.rows,
            result_column=snapshot.result_column,
            source=snapshot.source,
            updated_at=snapshot.updated_at,
            loaded=True,
        )
