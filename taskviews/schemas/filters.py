# File: /taskviews/schemas/filters.py | Version: 1.0 | Title: Filter clause schemas
from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional, Union

from pydantic import field_validator, model_validator

from taskviews.schemas._base import BaseSchema


class FilterOperator(str, Enum):
    is_ = "is"
    is_not = "is_not"
    contains = "contains"
    does_not_contain = "does_not_contain"
    is_empty = "is_empty"
    is_not_empty = "is_not_empty"
    any_of = "any_of"
    before = "before"
    after = "after"
    on_or_before = "on_or_before"
    on_or_after = "on_or_after"


DATE_OPERATORS = frozenset(
    {
        FilterOperator.is_,
        FilterOperator.is_not,
        FilterOperator.before,
        FilterOperator.after,
        FilterOperator.on_or_before,
        FilterOperator.on_or_after,
        FilterOperator.is_empty,
        FilterOperator.is_not_empty,
    }
)


class LogicTag(str, Enum):
    and_ = "AND"
    or_ = "OR"
    any_of = "ANY_OF"


Scalar = Union[str, int, float, bool, None]


class FilterClause(BaseSchema):
    column: str
    # Unknown operator strings survive loading; the evaluator treats them permissively.
    operator: Union[FilterOperator, str]
    value: Union[Scalar, List[Scalar]] = None
    logic: Optional[LogicTag] = None

    @field_validator("operator", mode="before")
    @classmethod
    def _coerce_operator(cls, v: Any) -> Any:
        if isinstance(v, str) and not isinstance(v, FilterOperator):
            try:
                return FilterOperator(v.strip().lower())
            except ValueError:
                return v
        return v

    @field_validator("logic", mode="before")
    @classmethod
    def _upper_logic(cls, v: Any) -> Any:
        if isinstance(v, str) and not isinstance(v, LogicTag):
            v = v.strip().upper()
            # unknown tags fold as AND
            return v if v in {t.value for t in LogicTag} else None
        return v

    @model_validator(mode="after")
    def _wrap_any_of_value(self) -> "FilterClause":
        if self.operator == FilterOperator.any_of and not isinstance(self.value, list):
            self.value = [] if self.value in (None, "") else [self.value]
        return self

    @property
    def malformed(self) -> bool:
        """A list value only belongs to `any_of`; saved clauses breaking that are ignored."""
        return isinstance(self.value, list) and self.operator != FilterOperator.any_of

    @property
    def known_operator(self) -> Optional[FilterOperator]:
        if isinstance(self.operator, FilterOperator):
            return self.operator
        try:
            return FilterOperator(self.operator)
        except ValueError:
            return None
