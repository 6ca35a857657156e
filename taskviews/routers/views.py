# File: /taskviews/routers/views.py | Version: 1.0 | Title: Apply a view configuration to a record set
from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from taskviews.core.errors import InvalidFilterError
from taskviews.engine.predicate import check_clause
from taskviews.engine.query import filter_and_sort
from taskviews.engine.records import normalize_records
from taskviews.engine.row_order import apply_row_order
from taskviews.engine.sorting import build_priority_rank_table, rank_table_from_definitions
from taskviews.schemas.view_state import ApplyViewRequest, ApplyViewResponse

router = APIRouter(prefix="/views", tags=["Views"])


@router.post("/apply", response_model=ApplyViewResponse, summary="Filter and sort records with a view")
def apply_view(payload: ApplyViewRequest):
    view = payload.view
    try:
        for clause in view.filters:
            check_clause(clause)
    except InvalidFilterError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    rank_table = (
        rank_table_from_definitions(payload.priorities)
        if payload.priorities
        else build_priority_rank_table()
    )
    records = apply_row_order(normalize_records(payload.records), view.row_order)
    items = filter_and_sort(records, view, rank_table, payload.subject_id)
    return ApplyViewResponse(total=len(items), items=items)
