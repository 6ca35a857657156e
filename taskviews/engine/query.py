# File: /taskviews/engine/query.py | Version: 1.0 | Title: View query engine (exclusions, search, filters, sort)
"""
``filter_and_sort`` is what every dashboard view renders from. Steps run in a
fixed order:

1. records awaiting approval (``verificationStatus == "pending"``) are dropped
2. partition-specific rules (guidance / completed / receivedVerification)
3. free-text search
4. status filter (``"all"`` disables it)
5. filter clauses, folded left to right
6. optional stable sort
"""
from __future__ import annotations

from typing import Any, List, Mapping, Optional, Sequence

from taskviews.engine.combinator import combine
from taskviews.engine.records import (
    ASSIGNEE_FIELD,
    SEARCH_FIELDS,
    VERIFIER_FIELDS,
    Record,
    reference_id,
)
from taskviews.engine.sorting import sort_records
from taskviews.schemas.view import ViewConfig

PENDING_VERIFICATION = "pending"
COMPLETED_STATUS = "completed"
ALL_STATUSES = "all"

GUIDANCE = "guidance"
COMPLETED = "completed"
RECEIVED_VERIFICATION = "receivedVerification"


def latest_verifier(record: Record) -> Optional[str]:
    """The most senior verifier slot that is filled."""
    for field in reversed(VERIFIER_FIELDS):
        rid = reference_id(record.get(field))
        if rid:
            return rid
    return None


def _passes_partition(record: Record, partition: str, subject_id: Optional[str]) -> bool:
    status = record.get("status")
    if partition == GUIDANCE:
        return status != COMPLETED_STATUS
    if partition == COMPLETED:
        if status != COMPLETED_STATUS:
            return False
        if subject_id is None:
            return True
        involved = [reference_id(record.get(f)) for f in (ASSIGNEE_FIELD, *VERIFIER_FIELDS)]
        return str(subject_id) in involved
    if partition == RECEIVED_VERIFICATION:
        if status == COMPLETED_STATUS:
            return False
        if subject_id is None:
            return True
        return latest_verifier(record) == str(subject_id)
    return True


def _search_text(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    return value if isinstance(value, str) else ""


def matches_search(record: Record, term: str) -> bool:
    if not term:
        return True
    needle = term.lower()
    return any(needle in _search_text(record.get(f)).lower() for f in SEARCH_FIELDS)


def filter_records(
    records: Sequence[Record],
    view: ViewConfig,
    subject_id: Optional[str] = None,
) -> List[Record]:
    subject = subject_id if subject_id is not None else view.selected_subject_id
    out: List[Record] = []
    for rec in records:
        if rec.get("verificationStatus") == PENDING_VERIFICATION:
            continue
        if not _passes_partition(rec, view.partition, subject):
            continue
        if not matches_search(rec, view.search_term):
            continue
        if view.status_filter != ALL_STATUSES and rec.get("status") != view.status_filter:
            continue
        if not combine(rec, view.filters):
            continue
        out.append(rec)
    return out


def filter_and_sort(
    records: Sequence[Record],
    view: ViewConfig,
    rank_table: Mapping[str, int],
    subject_id: Optional[str] = None,
) -> List[Record]:
    filtered = filter_records(records, view, subject_id)
    if not view.sort_by:
        return filtered
    return sort_records(filtered, view.sort_by, view.sort_order, rank_table)
