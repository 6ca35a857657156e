# File: /taskviews/engine/__init__.py | Version: 1.0 | Path: /taskviews/engine/__init__.py
from .combinator import combine
from .predicate import evaluate, resolve_path
from .query import filter_and_sort, filter_records
from .row_order import apply_row_order
from .sorting import build_priority_rank_table, compare, sort_records

__all__ = [
    "apply_row_order",
    "build_priority_rank_table",
    "combine",
    "compare",
    "evaluate",
    "filter_and_sort",
    "filter_records",
    "resolve_path",
    "sort_records",
]
