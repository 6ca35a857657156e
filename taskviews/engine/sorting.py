# File: /taskviews/engine/sorting.py | Version: 1.0 | Title: Record comparator + priority rank table
from __future__ import annotations

from functools import cmp_to_key
from typing import Any, Dict, Iterable, List, Mapping, Sequence

from taskviews.engine.dates import parse_timestamp
from taskviews.engine.records import DATE_FIELDS, Record, display_name
from taskviews.schemas.view import PriorityDefinition

PRIORITY_FIELD = "priority"

DEFAULT_PRIORITIES = (
    "urgent",
    "today",
    "lessThan3Days",
    "thisWeek",
    "thisMonth",
    "regular",
    "filed",
    "dailyWorksOffice",
    "monthlyWorks",
)
CUSTOM_RANK_START = 100
UNRANKED = 999

RankTable = Dict[str, int]


def build_priority_rank_table(custom_names: Iterable[str] = ()) -> RankTable:
    table: RankTable = {name: i for i, name in enumerate(DEFAULT_PRIORITIES, start=1)}
    rank = CUSTOM_RANK_START
    for name in custom_names:
        if name in table:
            continue
        table[name] = rank
        rank += 1
    return table


def rank_table_from_definitions(definitions: Iterable[PriorityDefinition]) -> RankTable:
    # registry order is kept for custom priorities; stored ranks are not trusted
    return build_priority_rank_table(d.name for d in definitions if not d.is_default)


def priority_group_order(table: Mapping[str, int]) -> List[str]:
    return [name for name, _ in sorted(table.items(), key=lambda kv: kv[1])]


def _sort_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        return display_name(value)
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    return value


def _generic_cmp(a: Any, b: Any) -> int:
    # None sorts lowest; mixed types fall back to their string form
    if a is None or b is None:
        return (a is not None) - (b is not None)
    try:
        if a < b:
            return -1
        if a > b:
            return 1
        return 0
    except TypeError:
        sa, sb = str(a), str(b)
        return (sa > sb) - (sa < sb)


def compare(
    a: Record,
    b: Record,
    sort_by: str,
    sort_order: str,
    rank_table: Mapping[str, int],
) -> int:
    if not sort_by:
        return 0

    if sort_by == PRIORITY_FIELD:
        ar = rank_table.get(a.get(sort_by), UNRANKED)
        br = rank_table.get(b.get(sort_by), UNRANKED)
        # Inverted on purpose: "desc" puts rank 1 (most urgent) first
        if ar < br:
            return -1 if sort_order == "desc" else 1
        if ar > br:
            return 1 if sort_order == "desc" else -1
        return 0

    if sort_by in DATE_FIELDS:
        av, bv = parse_timestamp(a.get(sort_by)), parse_timestamp(b.get(sort_by))
    else:
        av, bv = _sort_value(a.get(sort_by)), _sort_value(b.get(sort_by))

    result = _generic_cmp(av, bv)
    return result if sort_order == "asc" else -result


def sort_records(
    records: Sequence[Record],
    sort_by: str,
    sort_order: str,
    rank_table: Mapping[str, int],
) -> List[Record]:
    if not sort_by:
        return list(records)
    key = cmp_to_key(lambda a, b: compare(a, b, sort_by, sort_order, rank_table))
    return sorted(records, key=key)
