# File: /taskviews/locator/locator.py | Version: 1.0 | Title: Cross-view record locator
"""
Find the view and partition that would display a given record, switch the
store to it and highlight the record once its data has actually loaded.

Every partition is fetched once per search (concurrently). Each view then
replays its own search term, status filter and filter clauses against that
data, so a match means the user will see the record after the switch. Views
are enumerated in store order with partitions inner; the first match wins.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from taskviews.core.config import settings
from taskviews.core.errors import RecordFetchError
from taskviews.engine.query import filter_records
from taskviews.engine.records import ID_FIELD, Record, record_id
from taskviews.locator.loader import ActiveViewLoader
from taskviews.schemas.view import ViewConfig
from taskviews.store.view_store import ViewStore

log = logging.getLogger("taskviews.locator")

ID_FIELDS_CHECKED = (ID_FIELD, "_id")

FetchKey = Tuple[str, Optional[str]]


class LocatorState(str, Enum):
    idle = "idle"
    searching = "searching"
    pending_highlight = "pending_highlight"
    found = "found"
    not_found = "not_found"


@dataclass
class PairCheck:
    view_id: str
    view_title: str
    partition: str
    subject_id: Optional[str] = None
    fetched: int = 0
    visible: int = 0
    error: Optional[str] = None


@dataclass
class LocateDiagnostic:
    record_id: str
    id_fields: Tuple[str, ...] = ID_FIELDS_CHECKED
    checks: List[PairCheck] = field(default_factory=list)

    def summary(self) -> str:
        failed = [c for c in self.checks if c.error]
        return (
            f"record {self.record_id} not visible in {len(self.checks)} view/partition pairs "
            f"(fields checked: {', '.join(self.id_fields)}; {len(failed)} fetch failures)"
        )


@dataclass
class LocateResult:
    record_id: str
    state: LocatorState
    view_id: Optional[str] = None
    partition: Optional[str] = None
    diagnostic: Optional[LocateDiagnostic] = None
    superseded: bool = False

    @property
    def found(self) -> bool:
        return self.view_id is not None and not self.superseded


@dataclass
class _PendingMatch:
    record_id: str
    view_id: str
    future: asyncio.Future


class CrossViewLocator:
    def __init__(
        self,
        store: ViewStore,
        source,
        *,
        partitions: Optional[Sequence[str]] = None,
        subject_id: Optional[str] = None,
        highlight_seconds: Optional[float] = None,
        loader: Optional[ActiveViewLoader] = None,
    ):
        self.store = store
        self.source = source
        self.partitions: List[str] = list(partitions or settings.PARTITIONS)
        self.subject_id = subject_id
        self.highlight_seconds = (
            settings.HIGHLIGHT_SECONDS if highlight_seconds is None else highlight_seconds
        )
        self.state = LocatorState.idle
        self.highlighted_id: Optional[str] = None

        self._generation = 0
        self._pending: Optional[_PendingMatch] = None
        self._last_future: Optional[asyncio.Future] = None
        self._clear_handle: Optional[asyncio.TimerHandle] = None
        self._loader = loader
        if loader is not None:
            loader.add_listener(self.on_view_data)

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------
    async def locate(self, target_id) -> LocateResult:
        target = str(target_id)
        self._reset()
        generation = self._generation
        self.state = LocatorState.searching
        log.info("Locating record %s across %d views", target, len(self.store.views))

        # One fetch per (partition, subject) pair; views scoped to the same subject share it
        keys = list(
            dict.fromkeys(
                (partition, self.subject_for(view))
                for view in self.store.views
                for partition in self.partitions
            )
        )
        fetched = await asyncio.gather(*(self._fetch(p, s) for p, s in keys))
        if generation != self._generation:
            log.debug("Search for %s superseded", target)
            return LocateResult(target, self.state, superseded=True)
        by_key: Dict[FetchKey, Tuple[List[Record], Optional[str]]] = dict(zip(keys, fetched))

        diagnostic = LocateDiagnostic(record_id=target)
        for view in self.store.views:
            subject = self.subject_for(view)
            for partition in self.partitions:
                records, error = by_key[(partition, subject)]
                check = PairCheck(
                    view.id, view.title, partition, subject, fetched=len(records), error=error
                )
                diagnostic.checks.append(check)
                if error is not None:
                    continue
                scoped = view.model_copy(update={"partition": partition})
                visible = filter_records(records, scoped, subject)
                check.visible = len(visible)
                if any(record_id(r) == target for r in visible):
                    return self._commit_match(target, view.id, partition)

        return self._fallback(diagnostic)

    def subject_for(self, view: ViewConfig) -> Optional[str]:
        return self.subject_id if self.subject_id is not None else view.selected_subject_id

    async def _fetch(
        self, partition: str, subject_id: Optional[str]
    ) -> Tuple[List[Record], Optional[str]]:
        try:
            records = await self.source.fetch(partition, subject_id)
        except RecordFetchError as e:
            log.warning("Locator fetch for %s (subject %s) failed: %s", partition, subject_id, e)
            return [], str(e)
        return list(records), None

    def _commit_match(self, target: str, view_id: str, partition: str) -> LocateResult:
        self.state = LocatorState.pending_highlight
        future = asyncio.get_running_loop().create_future()
        self._pending = _PendingMatch(target, view_id, future)
        self._last_future = future

        self.store.activate_view(view_id)
        if self.store.get_view(view_id).partition != partition:
            self.store.patch_view(view_id, partition=partition)
        log.info("Record %s found in view %s (%s)", target, view_id, partition)

        # Same view and partition as before: nothing else triggers a reload.
        if self._loader is not None and not self._loader.refresh_pending:
            self._loader.schedule_refresh()
        return LocateResult(target, self.state, view_id=view_id, partition=partition)

    def _fallback(self, diagnostic: LocateDiagnostic) -> LocateResult:
        self.state = LocatorState.not_found
        first = self.store.views[0]
        self.store.activate_view(first.id)
        if first.partition != settings.DEFAULT_PARTITION:
            self.store.patch_view(first.id, partition=settings.DEFAULT_PARTITION)
        log.warning("Locate failed: %s", diagnostic.summary())
        for check in diagnostic.checks:
            log.debug("  %s", check)
        return LocateResult(diagnostic.record_id, self.state, diagnostic=diagnostic)

    # ------------------------------------------------------------------
    # Highlight
    # ------------------------------------------------------------------
    def on_view_data(self, view_id: str, records: Sequence[Record], loaded: bool) -> None:
        pending = self._pending
        if pending is None or pending.future.done():
            return
        if self.store.active_view_id != pending.view_id or view_id != pending.view_id:
            return
        if not loaded or not any(record_id(r) == pending.record_id for r in records):
            return

        self._pending = None
        self.state = LocatorState.found
        self.highlighted_id = pending.record_id
        pending.future.set_result(True)

        generation = self._generation
        loop = asyncio.get_running_loop()
        self._clear_handle = loop.call_later(self.highlight_seconds, self._clear_highlight, generation)

    async def wait_for_highlight(self, timeout: Optional[float] = None) -> bool:
        future = self._last_future
        if future is None:
            return False
        if timeout is None:
            timeout = settings.LOCATOR_READY_TIMEOUT_SECONDS
        try:
            return await asyncio.wait_for(asyncio.shield(future), timeout)
        except asyncio.TimeoutError:
            return False

    def _clear_highlight(self, generation: int) -> None:
        if generation == self._generation:
            self.highlighted_id = None
            self._clear_handle = None

    def _reset(self) -> None:
        self._generation += 1
        if self._pending is not None and not self._pending.future.done():
            self._pending.future.set_result(False)
        self._pending = None
        self._last_future = None
        if self._clear_handle is not None:
            self._clear_handle.cancel()
            self._clear_handle = None
        self.highlighted_id = None
        self.state = LocatorState.idle
