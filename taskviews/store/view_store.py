# File: /taskviews/store/view_store.py | Version: 1.0 | Title: Multi-view (tab) store with write-through persistence
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence
from uuid import uuid4

from pydantic import ValidationError

from taskviews.core.config import settings
from taskviews.core.errors import PersistenceError
from taskviews.engine.predicate import check_clause
from taskviews.engine.sorting import (
    PRIORITY_FIELD,
    RankTable,
    build_priority_rank_table,
    priority_group_order,
)
from taskviews.schemas.view import KnownColumn, StoreSnapshot, ViewConfig
from taskviews.store.columns import BUILTIN_COLUMNS
from taskviews.store.persistence import PersistenceBridge, validate_store_key
from taskviews.store.reconciler import reconcile_view

log = logging.getLogger(__name__)

Listener = Callable[["ViewStore"], None]

_PATCHABLE = frozenset(ViewConfig.model_fields) - {"id"}


def parse_snapshot(raw: Any) -> Optional[StoreSnapshot]:
    if not isinstance(raw, Mapping) or not raw:
        return None
    try:
        snapshot = StoreSnapshot.model_validate(raw)
    except ValidationError as e:
        log.warning("Discarding unreadable view state: %s", e.error_count())
        return None
    return snapshot if snapshot.views else None


def new_view(
    title: str,
    known_columns: Sequence[KnownColumn] = BUILTIN_COLUMNS,
    view_id: Optional[str] = None,
) -> ViewConfig:
    ids = [c.id for c in known_columns]
    return ViewConfig(
        id=view_id or str(uuid4()),
        title=title,
        sort_by="createdAt",
        sort_order="desc",
        visible_columns=list(ids),
        column_order=list(ids),
        column_widths={c.id: c.default_width for c in known_columns},
        partition=settings.DEFAULT_PARTITION,
        seen_columns=list(ids),
    )


def _merged_column_order(current: Sequence[str], visible: Sequence[str]) -> List[str]:
    keep = [c for c in current if c in visible]
    keep.extend(c for c in visible if c not in keep)
    return keep


class ViewStore:
    """
    Owns every view of one dashboard plus the active-view pointer.

    Mutations are synchronous. Each one swaps in the new view list, saves the
    full snapshot through the bridge and then notifies listeners. A failing
    save is logged and otherwise ignored.
    """

    def __init__(
        self,
        views: Sequence[ViewConfig],
        active_view_id: Optional[str] = None,
        *,
        bridge: Optional[PersistenceBridge] = None,
        store_key: Optional[str] = None,
        known_columns: Optional[Sequence[KnownColumn]] = None,
        rank_table: Optional[RankTable] = None,
    ):
        self.known_columns: List[KnownColumn] = list(known_columns or BUILTIN_COLUMNS)
        self._views: List[ViewConfig] = list(views) or [new_view("Tab 1", self.known_columns)]
        self._active_view_id = active_view_id
        self._bridge = bridge
        self.store_key = store_key
        self.rank_table: RankTable = dict(rank_table or build_priority_rank_table())
        self._listeners: List[Listener] = []

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    @classmethod
    def hydrate(
        cls,
        bridge: PersistenceBridge,
        store_key: str,
        *,
        known_columns: Optional[Sequence[KnownColumn]] = None,
        rank_table: Optional[RankTable] = None,
    ) -> "ViewStore":
        validate_store_key(store_key)
        # Remote state we could not read is left alone until the user changes something
        leave_remote = False
        try:
            raw = bridge.load(store_key)
        except PersistenceError as e:
            log.warning("Could not load view state %s: %s", store_key, e)
            raw = None
            leave_remote = True

        snapshot = parse_snapshot(raw)
        views: List[ViewConfig] = []
        active = None
        if snapshot is not None:
            views = snapshot.views
            active = snapshot.active_view_id
        elif isinstance(raw, Mapping) and (raw.get("views") or raw.get("tabs")):
            log.error("View state %s is unreadable; using a default view without saving", store_key)
            leave_remote = True
        else:
            log.info("No usable view state for %s; starting with a default view", store_key)

        store = cls(
            views,
            active,
            bridge=bridge,
            store_key=store_key,
            known_columns=known_columns,
            rank_table=rank_table,
        )
        # Without a registry listing, saved custom column ids are kept as they are
        changed = store._reconcile(store.known_columns, keep_unknown=known_columns is None)
        dangling = store._active_view_id != store.active_view_id
        store._active_view_id = store.active_view_id
        if not leave_remote and (snapshot is None or changed or dangling):
            store._persist()
        return store

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------
    @property
    def views(self) -> List[ViewConfig]:
        return list(self._views)

    @property
    def active_view(self) -> ViewConfig:
        for v in self._views:
            if v.id == self._active_view_id:
                return v
        return self._views[0]

    @property
    def active_view_id(self) -> str:
        return self.active_view.id

    def get_view(self, view_id: str) -> ViewConfig:
        for v in self._views:
            if v.id == str(view_id):
                return v
        raise KeyError(view_id)

    def snapshot(self) -> StoreSnapshot:
        return StoreSnapshot(views=list(self._views), active_view_id=self.active_view_id)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # ------------------------------------------------------------------
    # Tab operations
    # ------------------------------------------------------------------
    def add_view(self, title: Optional[str] = None) -> ViewConfig:
        view = new_view(title or f"Tab {len(self._views) + 1}", self.known_columns)
        self._views = [*self._views, view]
        self._active_view_id = view.id
        self._commit()
        return view

    def close_view(self, view_id: str) -> bool:
        if len(self._views) == 1:
            return False
        ids = [v.id for v in self._views]
        if str(view_id) not in ids:
            return False
        idx = ids.index(str(view_id))
        was_active = self.active_view_id == str(view_id)
        self._views = [v for v in self._views if v.id != str(view_id)]
        if was_active:
            self._active_view_id = self._views[max(0, idx - 1)].id
        self._commit()
        return True

    def rename_view(self, view_id: str, title: str) -> ViewConfig:
        return self.patch_view(view_id, title=title)

    def reorder_views(self, new_order: Sequence[str]) -> List[str]:
        by_id = {v.id: v for v in self._views}
        ordered = [by_id[str(i)] for i in dict.fromkeys(str(i) for i in new_order) if str(i) in by_id]
        placed = {v.id for v in ordered}
        ordered.extend(v for v in self._views if v.id not in placed)
        self._views = ordered
        self._commit()
        return [v.id for v in self._views]

    def activate_view(self, view_id: str) -> ViewConfig:
        view = self.get_view(view_id)
        self._active_view_id = view.id
        self._commit()
        return view

    def patch_active_view(self, **changes: Any) -> ViewConfig:
        return self.patch_view(self.active_view_id, **changes)

    def patch_view(self, view_id: str, **changes: Any) -> ViewConfig:
        current = self.get_view(view_id)
        unknown = set(changes) - _PATCHABLE
        if unknown:
            raise ValueError(f"Unknown view settings: {sorted(unknown)}")

        merged: Dict[str, Any] = {**current.model_dump(), **changes}
        if "visible_columns" in changes:
            base_order = changes.get("column_order", current.column_order)
            merged["column_order"] = _merged_column_order(base_order, changes["visible_columns"])
        elif "column_order" in changes:
            order = list(changes["column_order"])
            order.extend(c for c in current.visible_columns if c not in order)
            merged["column_order"] = order
        if PRIORITY_FIELD in (changes.get("group_by"), changes.get("sort_by")):
            merged["group_order"] = priority_group_order(self.rank_table)

        updated = ViewConfig.model_validate(merged)
        if "filters" in changes:
            for clause in updated.filters:
                check_clause(clause)

        self._replace(updated)
        self._commit()
        return updated

    def set_row_order(self, view_id: str, order: Sequence[str]) -> ViewConfig:
        return self.patch_view(view_id, row_order=[str(i) for i in order])

    # ------------------------------------------------------------------
    # Schema / registry refresh
    # ------------------------------------------------------------------
    def refresh_priorities(self, rank_table: RankTable) -> None:
        """Priority definitions changed; rebuild cached group orders."""
        self.rank_table = dict(rank_table)
        group_order = priority_group_order(self.rank_table)
        changed = False
        views = []
        for v in self._views:
            if PRIORITY_FIELD in (v.group_by, v.sort_by) and v.group_order != group_order:
                v = v.model_copy(update={"group_order": group_order})
                changed = True
            views.append(v)
        if changed:
            self._views = views
            self._commit()

    def reconcile_columns(self, known_columns: Sequence[KnownColumn]) -> bool:
        changed = self._reconcile(known_columns)
        if changed:
            self._commit()
        return changed

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _reconcile(self, known_columns: Sequence[KnownColumn], keep_unknown: bool = False) -> bool:
        self.known_columns = list(known_columns)
        reconciled = [
            reconcile_view(v, self.known_columns, keep_unknown=keep_unknown) for v in self._views
        ]
        changed = any(a is not b for a, b in zip(reconciled, self._views))
        self._views = reconciled
        return changed

    def _replace(self, view: ViewConfig) -> None:
        self._views = [view if v.id == view.id else v for v in self._views]

    def _commit(self) -> None:
        self._persist()
        for listener in list(self._listeners):
            listener(self)

    def _persist(self) -> None:
        if self._bridge is None or self.store_key is None:
            return
        payload = self.snapshot().dump()
        try:
            self._bridge.save(self.store_key, payload)
        except PersistenceError as e:
            log.warning("Saving view state %s failed: %s", self.store_key, e)
