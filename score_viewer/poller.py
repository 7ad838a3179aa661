"""
Timer-driven refresh of the active source.

The control loop ticks every `tick_seconds`; only every `gate_ticks`-th tick
may trigger work. Reads and fetches run in an executor so a slow fetch never
delays the next tick.

Key rules:
- Local sources refresh only when the file's mtime is strictly newer.
- Cloud sources refresh on every gated tick; a failed fetch publishes an empty table.
- No queue: overlapping refreshes all run, and the one that completes last wins.
- A refresh that completes after its source was replaced is discarded.
"""

from __future__ import annotations

import asyncio
import logging
import time
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional, Set

from .errors import IngestError
from .models import Table
from .sources import Descriptor, SourceSelector, TableSource
from .view import TableView

logger = logging.getLogger(__name__)


@dataclass
class PollState:
    """Staleness tracking for one selected source. Discarded when the source changes."""
    source: TableSource
    generation: int
    last_modified: Optional[float] = None   # always None for cloud sources
    table: Optional[Table] = None           # last-known table
    last_tick: Optional[float] = None       # time.monotonic() of the last tick
    in_flight: int = 0

    @property
    def refreshing(self) -> bool:
        return self.in_flight > 0


class Poller:
    """
    Owns the poll state and pushes fresh tables to a TableView.

    Usage:
        poller = Poller(selector, view, tick_seconds=1.0, gate_ticks=5)
        await poller.select(LocalSource(path=Path("results.csv")))
        runner = asyncio.create_task(poller.run())
    """

    def __init__(
        self,
        selector: SourceSelector,
        view: TableView,
        tick_seconds: float = 1.0,
        gate_ticks: int = 5,
        executor: Optional[Executor] = None,
        workers: int = 4,
    ):
        self.selector = selector
        self.view = view
        self.tick_seconds = tick_seconds
        self.gate_ticks = gate_ticks
        self.state: Optional[PollState] = None

        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=workers, thread_name_prefix="ingest")
        self._ticks = 0
        self._tasks: Set[asyncio.Task] = set()

    async def select(self, descriptor: Descriptor) -> Table:
        """Replace the active source and ingest it right away."""
        source = self.selector.select(descriptor)
        marker = source.modification_marker()
        state = PollState(source=source, generation=self.selector.generation, last_modified=marker)
        self.state = state
        return await asyncio.shield(self._spawn(state, marker))

    def tick(self) -> Optional[asyncio.Task]:
        """Handle one timer tick. Returns the dispatched refresh, if any."""
        self._ticks += 1
        state = self.state
        if state is None:
            return None

        state.last_tick = time.monotonic()
        if self._ticks % self.gate_ticks:
            return None

        source = state.source
        if not source.changed_since(state.last_modified):
            return None

        return self._spawn(state, source.modification_marker())

    async def run(self) -> None:
        while True:
            await asyncio.sleep(self.tick_seconds)
            self.tick()

    def close(self) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=False)

    def _spawn(self, state: PollState, marker: Optional[float]) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(self._refresh(state, marker))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _refresh(self, state: PollState, marker: Optional[float]) -> Table:
        loop = asyncio.get_running_loop()
        state.in_flight += 1
        try:
            table = await loop.run_in_executor(self._executor, state.source.read_table)
        except IngestError as exc:
            logger.warning("Refresh of %s failed, publishing an empty table: %s", state.source.descriptor, exc)
            table = Table.empty()
        except Exception:
            logger.exception("Unexpected error refreshing %s, publishing an empty table", state.source.descriptor)
            table = Table.empty()
        finally:
            state.in_flight -= 1

        if state is not self.state:
            logger.warning("Discarding table for replaced source (generation %d)", state.generation)
            return table

        state.table = table
        if marker is not None:
            state.last_modified = marker
        self.view.publish(table, state.source.descriptor, state.generation)
        return table
