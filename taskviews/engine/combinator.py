# File: /taskviews/engine/combinator.py | Version: 1.0 | Title: Left-to-right AND/OR clause fold
from __future__ import annotations

from typing import Sequence

from taskviews.engine.predicate import evaluate
from taskviews.engine.records import Record
from taskviews.schemas.filters import FilterClause, LogicTag

_OR_TAGS = (LogicTag.or_, LogicTag.any_of)


def combine(record: Record, clauses: Sequence[FilterClause]) -> bool:
    """
    Strict left fold with no precedence: ``A AND B OR C`` is ``(A AND B) OR C``.
    Saved filter sets depend on this order, so it must not be regrouped.
    """
    if not clauses:
        return True
    result = evaluate(record, clauses[0])
    for clause in clauses[1:]:
        if clause.logic in _OR_TAGS:
            result = result or evaluate(record, clause)
        else:
            result = result and evaluate(record, clause)
    return result
