# File: /taskviews/locator/loader.py | Version: 1.0 | Title: Active-view data loader
from __future__ import annotations

import asyncio
import logging
from typing import Callable, List, Optional, Tuple

from taskviews.core.errors import RecordFetchError
from taskviews.engine.records import Record
from taskviews.engine.query import filter_and_sort
from taskviews.engine.row_order import apply_row_order
from taskviews.engine.sorting import RankTable
from taskviews.store.view_store import ViewStore

log = logging.getLogger(__name__)

DataListener = Callable[[str, List[Record], bool], None]


class ActiveViewLoader:
    """
    Keeps the records of the active view's partition loaded.

    Switching the active view, its partition or its subject schedules a refetch on the
    running loop. Listeners receive ``(view_id, records, loaded)`` after every
    refresh, which is what the locator waits on before highlighting.
    """

    def __init__(
        self,
        store: ViewStore,
        source,
        *,
        rank_table: Optional[RankTable] = None,
        subject_id: Optional[str] = None,
    ):
        self.store = store
        self.source = source
        self.subject_id = subject_id
        self._rank_table = rank_table

        self.records: List[Record] = []
        self.loaded = False
        self.error: Optional[RecordFetchError] = None
        self.view_id: Optional[str] = None
        self.partition: Optional[str] = None
        self.loaded_subject_id: Optional[str] = None

        self._listeners: List[DataListener] = []
        self._task: Optional[asyncio.Task] = None
        self._unsubscribe = store.subscribe(self._on_store_change)

    @property
    def rank_table(self) -> RankTable:
        return self._rank_table if self._rank_table is not None else self.store.rank_table

    @property
    def refresh_pending(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def rows(self) -> List[Record]:
        """Rendered rows for the loaded view; empty while loading or after a failed fetch."""
        if not self.loaded or self.error is not None or self.view_id is None:
            return []
        try:
            view = self.store.get_view(self.view_id)
        except KeyError:
            return []
        ordered = apply_row_order(self.records, view.row_order)
        return filter_and_sort(ordered, view, self.rank_table, self.loaded_subject_id)

    def add_listener(self, listener: DataListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    def close(self) -> None:
        self._unsubscribe()
        if self.refresh_pending:
            self._task.cancel()
        self._listeners.clear()

    def _active_key(self) -> Tuple[str, str, Optional[str]]:
        view = self.store.active_view
        subject = self.subject_id if self.subject_id is not None else view.selected_subject_id
        return view.id, view.partition, subject

    def _on_store_change(self, store: ViewStore) -> None:
        if self._active_key() != (self.view_id, self.partition, self.loaded_subject_id):
            self.schedule_refresh()

    def schedule_refresh(self) -> Optional[asyncio.Task]:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            log.debug("No running event loop; refresh deferred until refresh() is awaited")
            return None
        if self.refresh_pending:
            self._task.cancel()
        self._task = loop.create_task(self.refresh())
        return self._task

    async def refresh(self) -> List[Record]:
        self.view_id, self.partition, self.loaded_subject_id = self._active_key()
        view_id, partition, subject = self.view_id, self.partition, self.loaded_subject_id
        self.loaded = False
        self.error = None
        try:
            records = await self.source.fetch(partition, subject)
        except RecordFetchError as e:
            log.warning("Loading %s for view %s failed: %s", partition, view_id, e)
            self.error = e
            self.records = []
        else:
            self.records = list(records)
        self.loaded = True

        for listener in list(self._listeners):
            listener(view_id, self.records, self.loaded)
        return self.records
