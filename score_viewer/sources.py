"""
Source variants behind one capability interface.

A TableSource wraps an immutable descriptor (LocalSource or CloudSource) and
knows how to fetch its raw rows, turn them into a Table, and report whether
it may have changed.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Protocol, Tuple, Union, runtime_checkable

from .cloud import ClientFactory, fetch_cloud_rows
from .errors import SourceUnreachable
from .local import modification_marker, read_local_rows
from .models import CloudSource, LocalSource, Table
from .normalize import normalize_rows

logger = logging.getLogger(__name__)

Descriptor = Union[LocalSource, CloudSource]


@runtime_checkable
class TableSource(Protocol):
    """
    Protocol for table sources.

    A source provides:
    - the descriptor it was opened from
    - its raw header and rows (may raise an IngestError)
    - a normalized Table
    - a modification marker, or None when staleness is not tracked
    - whether it may have changed since a previously observed marker
    """

    @property
    def descriptor(self) -> Descriptor:
        ...

    def fetch_rows(self) -> Tuple[List[str], List[List[str]]]:
        ...

    def read_table(self) -> Table:
        ...

    def modification_marker(self) -> Optional[float]:
        ...

    def changed_since(self, marker: Optional[float]) -> bool:
        ...


class LocalTableSource:
    def __init__(self, descriptor: LocalSource):
        self._descriptor = descriptor

    @property
    def descriptor(self) -> LocalSource:
        return self._descriptor

    def fetch_rows(self):
        return read_local_rows(self._descriptor.path)

    def read_table(self) -> Table:
        # Never raises: an unreadable file is an empty table.
        try:
            return normalize_rows(*self.fetch_rows())
        except SourceUnreachable as exc:
            logger.warning("Local source degraded to an empty table: %s", exc)
            return Table.empty()

    def modification_marker(self) -> Optional[float]:
        return modification_marker(self._descriptor.path)

    def changed_since(self, marker: Optional[float]) -> bool:
        current = self.modification_marker()
        if current is None:
            logger.debug("Cannot stat %s, treating it as unchanged", self._descriptor.path)
            return False
        return marker is None or current > marker


class CloudTableSource:
    def __init__(self, descriptor: CloudSource, client_factory: ClientFactory):
        self._descriptor = descriptor
        self._client_factory = client_factory

    @property
    def descriptor(self) -> CloudSource:
        return self._descriptor

    def fetch_rows(self):
        return fetch_cloud_rows(self._descriptor.url, self._descriptor.sheet_name, self._client_factory)

    def read_table(self) -> Table:
        return normalize_rows(*self.fetch_rows())

    def modification_marker(self) -> Optional[float]:
        return None

    def changed_since(self, marker: Optional[float]) -> bool:
        # Remote sheets expose no cheap change marker.
        return True


def open_source(descriptor: Descriptor, client_factory: ClientFactory) -> TableSource:
    if isinstance(descriptor, LocalSource):
        return LocalTableSource(descriptor)
    if isinstance(descriptor, CloudSource):
        return CloudTableSource(descriptor, client_factory)
    raise TypeError(f"Unsupported source descriptor: {descriptor!r}")


class SourceSelector:
    """Holds the active source. Every selection bumps the generation."""

    def __init__(self, client_factory: ClientFactory):
        self._client_factory = client_factory
        self.active: Optional[TableSource] = None
        self.generation = 0

    def select(self, descriptor: Descriptor) -> TableSource:
        self.active = open_source(descriptor, self._client_factory)
        self.generation += 1
        logger.info("Selected %s source (generation %d)", descriptor.kind, self.generation)
        return self.active
