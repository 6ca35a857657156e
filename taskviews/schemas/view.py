# File: /taskviews/schemas/view.py | Version: 1.0 | Title: View (tab) configuration + store snapshot schemas
from __future__ import annotations

import logging
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import (
    AliasChoices,
    BeforeValidator,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from taskviews.core.config import settings
from taskviews.schemas._base import BaseSchema
from taskviews.schemas.filters import FilterClause

log = logging.getLogger(__name__)

SortOrder = Literal["asc", "desc"]


def _str_id(v: Any) -> Any:
    # Older dashboards used Date.now() numbers as tab ids
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return str(int(v))
    return v


StrId = Annotated[str, BeforeValidator(_str_id)]


class KnownColumn(BaseSchema):
    id: str
    label: str
    default_width: int = 150
    is_custom: bool = False


class PriorityDefinition(BaseSchema):
    name: str
    rank: int = Field(validation_alias=AliasChoices("rank", "order"))
    is_default: bool = False


class ViewConfig(BaseSchema):
    model_config = ConfigDict(extra="allow")

    id: StrId
    title: str = "Tab 1"
    filters: List[FilterClause] = Field(default_factory=list)
    sort_by: str = ""
    sort_order: SortOrder = "desc"
    search_term: str = ""
    status_filter: str = "all"
    visible_columns: List[str] = Field(default_factory=list)
    column_order: List[str] = Field(default_factory=list)
    column_widths: Dict[str, Union[int, float]] = Field(default_factory=dict)
    row_order: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("rowOrder", "taskOrder", "row_order"),
    )
    partition: str = Field(
        default_factory=lambda: settings.DEFAULT_PARTITION,
        validation_alias=AliasChoices("partition", "activeTab"),
    )
    selected_subject_id: Optional[str] = None
    group_by: str = ""
    group_order: List[str] = Field(default_factory=list)
    seen_columns: List[str] = Field(default_factory=list)

    @field_validator("sort_by", "search_term", "status_filter", mode="before")
    @classmethod
    def _none_to_default(cls, v: Any, info) -> Any:
        if v is None:
            return "all" if info.field_name == "status_filter" else ""
        return v

    @field_validator("sort_order", mode="before")
    @classmethod
    def _normalize_order(cls, v: Any) -> Any:
        if isinstance(v, str) and v.strip().lower() in ("asc", "desc"):
            return v.strip().lower()
        return "desc"

    @field_validator("filters", mode="before")
    @classmethod
    def _drop_unreadable_clauses(cls, v: Any) -> Any:
        # One broken saved clause must not make the whole view unreadable
        if v is None:
            return []
        if not isinstance(v, list):
            return v
        kept = []
        for raw in v:
            if isinstance(raw, FilterClause):
                kept.append(raw)
                continue
            try:
                kept.append(FilterClause.model_validate(raw))
            except ValidationError:
                log.warning("Dropping unreadable filter clause: %r", raw)
        return kept

    @field_validator("row_order", mode="before")
    @classmethod
    def _flatten_row_order(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, dict):
            # legacy per-group ordering {groupKey: [ids]}
            v = [rid for ids in v.values() for rid in (ids or [])]
        return [str(_str_id(rid)) for rid in v]

    @field_validator("visible_columns", "column_order", "group_order", "seen_columns", mode="before")
    @classmethod
    def _none_to_list(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("selected_subject_id", mode="before")
    @classmethod
    def _subject_str(cls, v: Any) -> Any:
        return _str_id(v)


class StoreSnapshot(BaseSchema):
    model_config = ConfigDict(extra="allow")

    views: List[ViewConfig] = Field(
        default_factory=list, validation_alias=AliasChoices("views", "tabs")
    )
    active_view_id: Optional[StrId] = Field(
        default=None,
        validation_alias=AliasChoices("activeViewId", "activeTabId", "active_view_id"),
    )

    @model_validator(mode="before")
    @classmethod
    def _adopt_page_row_order(cls, data: Any) -> Any:
        # Pages once persisted a single page-level rowOrder next to the tabs
        if not isinstance(data, dict):
            return data
        page_order = data.get("rowOrder")
        tabs = data.get("views", data.get("tabs"))
        if not isinstance(page_order, list) or not page_order or not isinstance(tabs, list):
            return data
        active = data.get("activeViewId", data.get("activeTabId"))
        tabs = [dict(t) for t in tabs if isinstance(t, dict)]
        target = next((t for t in tabs if str(t.get("id")) == str(active)), None)
        if target is None and tabs:
            target = tabs[0]
        if target is not None and not (target.get("rowOrder") or target.get("taskOrder")):
            target["rowOrder"] = page_order
        data = {k: v for k, v in data.items() if k not in ("rowOrder", "tabs")}
        data["views"] = tabs
        return data
