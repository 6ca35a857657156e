# File: /taskviews/store/reconciler.py | Version: 1.0 | Title: Column schema reconciliation for saved views
"""
Saved views outlive the column set they were created with. ``reconcile_view``
brings one view in line with the current known columns without undoing the
user's choices:

* required columns are shown, right after their anchor column
* columns the view has never seen are appended (visible, default width)
* columns that no longer exist are dropped everywhere, unless
  ``keep_unknown`` is set (no registry listing loaded yet)
* every visible column has a slot in ``column_order``

Running it twice gives the same result as running it once.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Set

from taskviews.schemas.view import KnownColumn, ViewConfig
from taskviews.store.columns import (
    BUILTIN_COLUMNS,
    REQUIRED_COLUMNS,
    RequiredColumn,
    builtin_column_ids,
)

log = logging.getLogger(__name__)


def _insert_after(ids: List[str], new_id: str, anchor: str) -> None:
    if anchor in ids:
        ids.insert(ids.index(anchor) + 1, new_id)
    else:
        ids.append(new_id)


def _seen_columns(view: ViewConfig) -> Set[str]:
    if view.seen_columns:
        return set(view.seen_columns)
    # Views saved before seen-column tracking: assume the built-ins were on offer
    return (
        set(builtin_column_ids())
        | set(view.visible_columns)
        | set(view.column_order)
        | set(view.column_widths)
    )


def reconcile_view(
    view: ViewConfig,
    known_columns: Optional[Sequence[KnownColumn]] = None,
    required: Sequence[RequiredColumn] = REQUIRED_COLUMNS,
    keep_unknown: bool = False,
) -> ViewConfig:
    known = list(known_columns) if known_columns is not None else list(BUILTIN_COLUMNS)
    known_ids = [c.id for c in known]
    for req in required:
        if req.id not in known_ids:
            known_ids.append(req.id)
    known_set = set(known_ids)
    default_widths: Dict[str, int] = {c.id: c.default_width for c in known}
    for req in required:
        default_widths.setdefault(req.id, req.default_width)

    def keep(col_id: str) -> bool:
        return keep_unknown or col_id in known_set

    seen = _seen_columns(view)
    visible = [c for c in dict.fromkeys(view.visible_columns) if keep(c)]
    order = [c for c in dict.fromkeys(view.column_order) if keep(c)]
    widths = {k: v for k, v in view.column_widths.items() if keep(k)}
    seen_out = list(known_ids)
    if keep_unknown:
        saved = [*view.seen_columns, *view.visible_columns, *view.column_order, *view.column_widths]
        seen_out.extend(c for c in dict.fromkeys(saved) if c not in known_set)

    for req in required:
        if req.id not in visible:
            _insert_after(visible, req.id, req.anchor)
        if req.id not in order:
            _insert_after(order, req.id, req.anchor)
        widths.setdefault(req.id, req.default_width)

    for col_id in known_ids:
        if col_id in seen:
            continue
        if col_id not in visible:
            visible.append(col_id)
        if col_id not in order:
            order.append(col_id)
        widths.setdefault(col_id, default_widths[col_id])

    order.extend(c for c in visible if c not in order)

    changes = {}
    if visible != view.visible_columns:
        changes["visible_columns"] = visible
    if order != view.column_order:
        changes["column_order"] = order
    if widths != view.column_widths:
        changes["column_widths"] = widths
    if seen_out != view.seen_columns:
        changes["seen_columns"] = seen_out
    if not changes:
        return view
    log.debug("Reconciled view %s columns: %s", view.id, sorted(changes))
    return view.model_copy(update=changes)


def reconcile_views(
    views: Sequence[ViewConfig],
    known_columns: Optional[Sequence[KnownColumn]] = None,
    keep_unknown: bool = False,
) -> List[ViewConfig]:
    return [reconcile_view(v, known_columns, keep_unknown=keep_unknown) for v in views]
