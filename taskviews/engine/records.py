# File: /taskviews/engine/records.py | Version: 1.0 | Title: Record shape helpers (field names + boundary normalization)
"""
Records arrive from the dashboard API as loosely shaped JSON. Reference fields
may be a bare id (unpopulated) or an expanded object (populated), and ids may be
under ``_id``. ``normalize_record`` is applied once at the fetch boundary so the
evaluator only ever sees ``{"id": ...}`` mappings for references.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional

Record = Mapping[str, Any]

ID_FIELD = "id"

ASSIGNEE_FIELD = "assignedTo"
ASSIGNER_FIELD = "assignedBy"

# Ordered least to most senior
VERIFIER_FIELDS = (
    "verificationAssignedTo",
    "secondVerificationAssignedTo",
    "thirdVerificationAssignedTo",
    "fourthVerificationAssignedTo",
    "fifthVerificationAssignedTo",
)

REFERENCE_FIELDS = frozenset(
    {ASSIGNEE_FIELD, ASSIGNER_FIELD, "approvedBy", *VERIFIER_FIELDS}
)

DATE_FIELDS = frozenset(
    {"createdAt", "updatedAt", "dueDate", "targetDate", "inwardEntryDate"}
)

SEARCH_FIELDS = ("title", "description", "clientName", "clientGroup", "workType")


def reference_id(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, Mapping):
        rid = value.get(ID_FIELD, value.get("_id"))
        return None if rid is None else str(rid)
    return str(value)


def display_name(ref: Mapping[str, Any]) -> str:
    """Text shown for a populated reference: full name, else name, else id."""
    name = " ".join(str(ref[k]) for k in ("firstName", "lastName") if ref.get(k))
    if name:
        return name
    if ref.get("name"):
        return str(ref["name"])
    return reference_id(ref) or ""


def _normalize_reference(value: Any) -> Any:
    if value is None or value == "":
        return None
    if isinstance(value, Mapping):
        if ID_FIELD in value:
            return dict(value)
        out = dict(value)
        if "_id" in out:
            out[ID_FIELD] = str(out["_id"])
        return out
    return {ID_FIELD: str(value)}


def normalize_record(raw: Mapping[str, Any]) -> Dict[str, Any]:
    rec = dict(raw)
    if ID_FIELD not in rec and "_id" in rec:
        rec[ID_FIELD] = rec["_id"]
    if rec.get(ID_FIELD) is not None:
        rec[ID_FIELD] = str(rec[ID_FIELD])
    for field in REFERENCE_FIELDS:
        if field in rec:
            rec[field] = _normalize_reference(rec[field])
    if isinstance(rec.get("guides"), list):
        rec["guides"] = [_normalize_reference(g) for g in rec["guides"] if g is not None]
    return rec


def normalize_records(raw: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    return [normalize_record(r) for r in raw]


def record_id(record: Record) -> Optional[str]:
    rid = record.get(ID_FIELD, record.get("_id"))
    return None if rid is None else str(rid)
