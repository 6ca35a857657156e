# File: /taskviews/crud/view_state.py | Version: 1.0 | Title: CRUD helpers for per-user view state
from __future__ import annotations

import copy
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import flag_modified

from taskviews.core.errors import StateNotInitializedError
from taskviews.models.view_state import ViewState

_LEGACY_ROW_ORDER = "taskOrder"


def _views_key(state: Dict[str, Any]) -> str:
    return "tabs" if "tabs" in state and "views" not in state else "views"


def _views(state: Dict[str, Any]) -> List[Dict[str, Any]]:
    views = state.get(_views_key(state))
    return views if isinstance(views, list) else []


def get_state(db: Session, *, owner_id: str, store_key: str) -> Optional[ViewState]:
    return (
        db.query(ViewState)
        .filter(ViewState.owner_id == str(owner_id), ViewState.store_key == store_key)
        .first()
    )


def merge_orders(existing: Dict[str, Any], incoming: Dict[str, Any]) -> Dict[str, Any]:
    """
    Keep stored row/group orders for views whose incoming copy carries none,
    so a client that never loaded them cannot wipe them out.
    """
    merged = copy.deepcopy(incoming)
    old_by_id = {
        str(v.get("id")): v
        for v in _views(existing)
        if isinstance(v, dict) and v.get("id") is not None
    }
    if not old_by_id:
        return merged
    for view in _views(merged):
        if not isinstance(view, dict):
            continue
        old = old_by_id.get(str(view.get("id")))
        if old is None:
            continue
        old_rows = old.get("rowOrder") or old.get(_LEGACY_ROW_ORDER)
        if old_rows and not (view.get("rowOrder") or view.get(_LEGACY_ROW_ORDER)):
            view["rowOrder"] = copy.deepcopy(old_rows)
        if old.get("groupOrder") and not view.get("groupOrder"):
            view["groupOrder"] = copy.deepcopy(old["groupOrder"])
    return merged


def save_state(db: Session, *, owner_id: str, store_key: str, state: Dict[str, Any]) -> ViewState:
    row = get_state(db, owner_id=owner_id, store_key=store_key)
    if row is None:
        row = ViewState(owner_id=str(owner_id), store_key=store_key, state=copy.deepcopy(state))
        db.add(row)
    else:
        row.state = merge_orders(row.state or {}, state)
        flag_modified(row, "state")
    db.commit()
    db.refresh(row)
    return row


def _target_view(state: Dict[str, Any], view_id: Optional[str]) -> Dict[str, Any]:
    key = _views_key(state)
    if not isinstance(state.get(key), list):
        state[key] = []
    views = state[key]
    if view_id is not None:
        for view in views:
            if isinstance(view, dict) and str(view.get("id")) == str(view_id):
                return view
        view = {"id": str(view_id)}
        views.append(view)
        return view
    if not views:
        views.append({"id": "default"})
    return views[0]


def _initialized(db: Session, owner_id: str, store_key: str) -> ViewState:
    row = get_state(db, owner_id=owner_id, store_key=store_key)
    if row is None:
        raise StateNotInitializedError(
            "View state must be initialized before updating its orderings."
        )
    return row


def update_row_order(
    db: Session,
    *,
    owner_id: str,
    store_key: str,
    order: List[str],
    view_id: Optional[str] = None,
    group_order: Optional[List[str]] = None,
) -> ViewState:
    row = _initialized(db, owner_id, store_key)
    state = copy.deepcopy(row.state or {})
    view = _target_view(state, view_id)
    view["rowOrder"] = [str(i) for i in order]
    view.pop(_LEGACY_ROW_ORDER, None)
    if group_order is not None:
        view["groupOrder"] = list(group_order)
    row.state = state
    flag_modified(row, "state")
    db.commit()
    db.refresh(row)
    return row


def update_column_order(
    db: Session,
    *,
    owner_id: str,
    store_key: str,
    order: List[str],
    view_id: Optional[str] = None,
) -> ViewState:
    row = _initialized(db, owner_id, store_key)
    state = copy.deepcopy(row.state or {})
    view = _target_view(state, view_id)
    new_order = list(dict.fromkeys(order))
    new_order.extend(c for c in view.get("visibleColumns") or [] if c not in new_order)
    view["columnOrder"] = new_order
    row.state = state
    flag_modified(row, "state")
    db.commit()
    db.refresh(row)
    return row
