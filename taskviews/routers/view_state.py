# File: /taskviews/routers/view_state.py | Version: 1.0 | Title: Per-user view state (load/save + ordering patches)
from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from taskviews.core.errors import StateNotInitializedError
from taskviews.crud.view_state import (
    get_state,
    save_state,
    update_column_order,
    update_row_order,
)
from taskviews.dependencies import get_current_owner, get_db, valid_store_key
from taskviews.schemas.view_state import ColumnOrderUpdate, RowOrderUpdate, ViewStateSave

log = logging.getLogger(__name__)

router = APIRouter(prefix="/view-state", tags=["View State"])


@router.get("/{store_key}", summary="Load the stored view state for one dashboard")
def read_view_state(
    store_key: str = Depends(valid_store_key),
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner),
) -> Dict[str, Any]:
    row = get_state(db, owner_id=owner_id, store_key=store_key)
    return row.state if row is not None and row.state else {}


@router.post("/{store_key}", summary="Save view state (stored row/group orders are kept)")
def write_view_state(
    payload: ViewStateSave,
    store_key: str = Depends(valid_store_key),
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner),
) -> Dict[str, Any]:
    row = save_state(db, owner_id=owner_id, store_key=store_key, state=payload.state)
    return {"success": True, "updatedAt": row.updated_at}


@router.patch("/{store_key}/row-order", summary="Replace a view's explicit row order")
def patch_row_order(
    payload: RowOrderUpdate,
    store_key: str = Depends(valid_store_key),
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner),
) -> Dict[str, Any]:
    try:
        row = update_row_order(
            db,
            owner_id=owner_id,
            store_key=store_key,
            order=payload.order,
            view_id=payload.view_id,
            group_order=payload.group_order,
        )
    except StateNotInitializedError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return {"success": True, "state": row.state}


@router.patch("/{store_key}/column-order", summary="Replace a view's column order")
def patch_column_order(
    payload: ColumnOrderUpdate,
    store_key: str = Depends(valid_store_key),
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner),
) -> Dict[str, Any]:
    try:
        row = update_column_order(
            db,
            owner_id=owner_id,
            store_key=store_key,
            order=payload.order,
            view_id=payload.view_id,
        )
    except StateNotInitializedError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return {"success": True, "state": row.state}
