# File: /taskviews/engine/predicate.py | Version: 1.0 | Title: Single filter clause evaluation
from __future__ import annotations

import logging
from typing import Any, Mapping

from taskviews.core.errors import InvalidFilterError
from taskviews.engine.dates import parse_day
from taskviews.engine.records import DATE_FIELDS, Record, display_name, reference_id
from taskviews.schemas.filters import DATE_OPERATORS, FilterClause, FilterOperator

log = logging.getLogger(__name__)


def resolve_path(record: Any, column: str) -> Any:
    """Dotted lookup (`assignedTo.team`); a missing hop yields None."""
    value = record
    for key in column.split("."):
        if value is None:
            return None
        if isinstance(value, Mapping):
            value = value.get(key)
        else:
            value = getattr(value, key, None)
    return value


def stringify(value: Any) -> str:
    """String form matching what the dashboard UI compares against."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, Mapping):
        return display_name(value)
    if isinstance(value, (list, tuple)):
        return ",".join(stringify(v) for v in value)
    return str(value)


def _is_blank(value: Any) -> bool:
    return value is None or value == ""


def _compare_days(resolved: Any, wanted: Any, op: FilterOperator) -> bool:
    left, right = parse_day(resolved), parse_day(wanted)
    if left is None or right is None:
        return False
    match op:
        case FilterOperator.before:
            return left < right
        case FilterOperator.after:
            return left > right
        case FilterOperator.on_or_before:
            return left <= right
        case FilterOperator.on_or_after:
            return left >= right
        case FilterOperator.is_:
            return left == right
        case _:
            return left != right


def evaluate(record: Record, clause: FilterClause) -> bool:
    if clause.malformed:
        log.warning(
            "Filter on %r has a list value for operator %r; clause ignored",
            clause.column,
            clause.operator,
        )
        return True

    resolved = resolve_path(record, clause.column)
    op = clause.known_operator

    if resolved is None:
        # Absent values only ever match the emptiness operators
        return op == FilterOperator.is_empty

    if op is None:
        log.warning(
            "Unknown filter operator %r on column %r; clause ignored",
            clause.operator,
            clause.column,
        )
        return True

    wanted = clause.value
    match op:
        case FilterOperator.any_of:
            options = {stringify(v) for v in (wanted or [])}
            if stringify(resolved) in options:
                return True
            rid = reference_id(resolved) if isinstance(resolved, Mapping) else None
            return rid is not None and rid in options
        case FilterOperator.is_ | FilterOperator.is_not:
            if isinstance(resolved, Mapping):
                same = reference_id(resolved) == stringify(wanted)
            elif clause.column in DATE_FIELDS:
                return _compare_days(resolved, wanted, op)
            else:
                same = stringify(resolved) == stringify(wanted)
            return same if op == FilterOperator.is_ else not same
        case FilterOperator.contains:
            return stringify(wanted).lower() in stringify(resolved).lower()
        case FilterOperator.does_not_contain:
            return stringify(wanted).lower() not in stringify(resolved).lower()
        case FilterOperator.is_empty:
            return _is_blank(resolved)
        case FilterOperator.is_not_empty:
            return not _is_blank(resolved)
        case (
            FilterOperator.before
            | FilterOperator.after
            | FilterOperator.on_or_before
            | FilterOperator.on_or_after
        ):
            return _compare_days(resolved, wanted, op)


def allowed_operators(column: str) -> frozenset:
    if column in DATE_FIELDS:
        return DATE_OPERATORS
    return frozenset(FilterOperator)


def check_clause(clause: FilterClause) -> None:
    """Reject clauses that cannot be applied as written."""
    if clause.malformed:
        raise InvalidFilterError(
            f"A list value is only allowed with the 'any_of' operator (column '{clause.column}')"
        )
    op = clause.known_operator
    if op is not None and op not in allowed_operators(clause.column):
        raise InvalidFilterError(
            f"Operator '{op.value}' is not supported on date column '{clause.column}'"
        )
