# File: /taskviews/schemas/view_state.py | Version: 1.0 | Title: View-state service payloads
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import Field

from taskviews.schemas._base import BaseSchema
from taskviews.schemas.view import PriorityDefinition, ViewConfig


class ViewStateSave(BaseSchema):
    state: Dict[str, Any]


class RowOrderUpdate(BaseSchema):
    view_id: Optional[str] = None
    order: List[str]
    group_order: Optional[List[str]] = None


class ColumnOrderUpdate(BaseSchema):
    view_id: Optional[str] = None
    order: List[str]


class ApplyViewRequest(BaseSchema):
    records: List[Dict[str, Any]] = Field(default_factory=list)
    view: ViewConfig
    priorities: List[PriorityDefinition] = Field(default_factory=list)
    subject_id: Optional[str] = None


class ApplyViewResponse(BaseSchema):
    total: int
    items: List[Dict[str, Any]]
