# File: /taskviews/engine/row_order.py | Version: 1.0 | Title: Persisted row order merge
from __future__ import annotations

from typing import List, Optional, Sequence

from taskviews.engine.records import Record, record_id


def apply_row_order(records: Sequence[Record], order: Optional[Sequence[str]]) -> List[Record]:
    """
    Records named in `order` come first, in that order; the rest follow in
    their original relative order. Ids no longer present are dropped.
    """
    if not order:
        return list(records)

    by_id = {}
    for rec in records:
        by_id.setdefault(record_id(rec), rec)

    placed = set()
    ordered: List[Record] = []
    for rid in order:
        rid = str(rid)
        if rid in by_id and rid not in placed:
            ordered.append(by_id[rid])
            placed.add(rid)

    ordered.extend(rec for rec in records if record_id(rec) not in placed)
    return ordered
