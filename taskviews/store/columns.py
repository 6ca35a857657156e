# File: /taskviews/store/columns.py | Version: 1.0 | Title: Built-in task table columns
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Tuple

from taskviews.schemas.view import KnownColumn

DEFAULT_COLUMN_WIDTH = 150


def _col(id: str, label: str, width: int = DEFAULT_COLUMN_WIDTH) -> KnownColumn:
    return KnownColumn(id=id, label=label, default_width=width)


BUILTIN_COLUMNS: Tuple[KnownColumn, ...] = (
    _col("title", "Title", 256),
    _col("description", "Status", 180),
    _col("clientName", "Client Name"),
    _col("clientGroup", "Client Group"),
    _col("workType", "Work Type"),
    _col("workDoneBy", "Work Done"),
    _col("billed", "Internal Works", 80),
    _col("status", "Stages", 120),
    _col("priority", "Priority", 120),
    _col("verification", "Verifications", 130),
    _col("selfVerification", "Self Verification", 120),
    _col("inwardEntryDate", "Inward Entry Date"),
    _col("dueDate", "Due Date", 120),
    _col("targetDate", "Target Date", 120),
    _col("assignedBy", "Assigned By"),
    _col("assignedTo", "Assigned To"),
    _col("verificationAssignedTo", "First Verifier"),
    _col("secondVerificationAssignedTo", "Second Verifier"),
    _col("thirdVerificationAssignedTo", "Third Verifier"),
    _col("fourthVerificationAssignedTo", "Fourth Verifier"),
    _col("fifthVerificationAssignedTo", "Fifth Verifier"),
    _col("guides", "Guide", 200),
    _col("files", "Files", 120),
    _col("comments", "Comments", 120),
)


@dataclass(frozen=True)
class RequiredColumn:
    """A column every view must show, placed right after `anchor`."""

    id: str
    anchor: str
    default_width: int


REQUIRED_COLUMNS: Tuple[RequiredColumn, ...] = (
    RequiredColumn(id="verification", anchor="priority", default_width=130),
)


def builtin_column_ids() -> List[str]:
    return [c.id for c in BUILTIN_COLUMNS]


def merge_known_columns(custom: Iterable[KnownColumn]) -> List[KnownColumn]:
    """Built-ins first, then custom columns the built-ins don't shadow."""
    out = list(BUILTIN_COLUMNS)
    taken = {c.id for c in out}
    for col in custom:
        if col.id in taken:
            continue
        taken.add(col.id)
        out.append(col)
    return out
