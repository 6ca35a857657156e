# File: tests/test_predicate.py | Version: 1.0 | Path: /tests/test_predicate.py
import logging

import pytest

from taskviews.core.errors import InvalidFilterError
from taskviews.engine.predicate import check_clause, evaluate, resolve_path, stringify
from taskviews.engine.records import normalize_record
from taskviews.schemas.filters import FilterClause, FilterOperator


def _clause(column, operator, value=None, logic=None):
    return FilterClause(column=column, operator=operator, value=value, logic=logic)


@pytest.mark.parametrize("op", [o for o in FilterOperator])
def test_missing_field_only_matches_is_empty(op):
    record = {"id": "1", "status": "urgent"}
    value = ["x"] if op == FilterOperator.any_of else "x"
    got = evaluate(record, _clause("clientName", op, value))
    assert got is (op == FilterOperator.is_empty)


def test_missing_intermediate_short_circuits():
    record = {"id": "1", "assignedTo": None}
    assert resolve_path(record, "assignedTo.team") is None
    assert evaluate(record, _clause("assignedTo.team", "is_empty")) is True
    assert evaluate(record, _clause("assignedTo.team", "is", "audit")) is False


def test_dotted_path_lookup():
    record = {"id": "1", "assignedTo": {"id": "u1", "team": "audit"}}
    assert evaluate(record, _clause("assignedTo.team", "is", "audit")) is True
    assert evaluate(record, _clause("assignedTo.team", "is_not", "audit")) is False


def test_is_compares_strings():
    record = {"id": "1", "billed": True, "hours": 3.0}
    assert evaluate(record, _clause("billed", "is", "true")) is True
    assert evaluate(record, _clause("hours", "is", "3")) is True
    assert evaluate(record, _clause("hours", "is_not", 4)) is True


def test_is_on_reference_column_compares_id():
    record = {"id": "1", "assignedTo": {"id": "u7", "firstName": "Ana"}}
    assert evaluate(record, _clause("assignedTo", "is", "u7")) is True
    assert evaluate(record, _clause("assignedTo", "is", "Ana")) is False
    assert evaluate(record, _clause("assignedTo", "is_not", "u8")) is True


def test_any_of_matches_scalar_or_reference_id():
    record = {"id": "1", "status": "today", "assignedBy": {"id": "u2"}}
    assert evaluate(record, _clause("status", "any_of", ["urgent", "today"])) is True
    assert evaluate(record, _clause("status", "any_of", ["urgent"])) is False
    assert evaluate(record, _clause("assignedBy", "any_of", ["u1", "u2"])) is True


def test_contains_is_case_insensitive():
    record = {"id": "1", "title": "Quarterly GST Return"}
    assert evaluate(record, _clause("title", "contains", "gst")) is True
    assert evaluate(record, _clause("title", "does_not_contain", "GST")) is False
    assert evaluate(record, _clause("title", "does_not_contain", "audit")) is True


def test_contains_on_list_field_uses_joined_text():
    record = {"id": "1", "workType": ["Audit", "Tax"]}
    assert evaluate(record, _clause("workType", "contains", "tax")) is True


def test_empty_string_counts_as_empty():
    record = {"id": "1", "clientGroup": ""}
    assert evaluate(record, _clause("clientGroup", "is_empty")) is True
    assert evaluate(record, _clause("clientGroup", "is_not_empty")) is False


def test_date_operators_compare_days_inclusively():
    record = {"id": "1", "dueDate": "2024-03-10T18:30:00.000Z"}
    assert evaluate(record, _clause("dueDate", "on_or_before", "2024-03-10")) is True
    assert evaluate(record, _clause("dueDate", "on_or_after", "2024-03-10")) is True
    assert evaluate(record, _clause("dueDate", "before", "2024-03-10")) is False
    assert evaluate(record, _clause("dueDate", "after", "2024-03-09")) is True
    assert evaluate(record, _clause("dueDate", "is", "2024-03-10")) is True
    assert evaluate(record, _clause("dueDate", "is_not", "2024-03-10")) is False


def test_unparseable_date_never_matches():
    record = {"id": "1", "dueDate": "not a date"}
    assert evaluate(record, _clause("dueDate", "before", "2024-03-10")) is False


def test_unknown_operator_is_permissive_and_logged(caplog):
    record = {"id": "1", "status": "urgent"}
    with caplog.at_level(logging.WARNING):
        assert evaluate(record, _clause("status", "sounds_like", "urgnt")) is True
    assert "sounds_like" in caplog.text


def test_check_clause_rejects_text_operator_on_date_column():
    with pytest.raises(InvalidFilterError):
        check_clause(_clause("dueDate", "contains", "2024"))
    check_clause(_clause("dueDate", "before", "2024-01-01"))
    check_clause(_clause("title", "contains", "x"))


def test_stringify_matches_ui_text():
    assert stringify(None) == ""
    assert stringify(False) == "false"
    assert stringify(2.0) == "2"
    assert stringify(["a", 1]) == "a,1"


def test_list_value_with_scalar_operator_lets_records_through(caplog):
    clause = _clause("status", "is", ["x", "y"])
    with caplog.at_level(logging.WARNING):
        assert evaluate({"id": "1", "status": "urgent"}, clause) is True
        assert evaluate({"id": "2"}, clause) is True
    assert "list value" in caplog.text
    with pytest.raises(InvalidFilterError):
        check_clause(clause)


def test_is_on_verifier_column_compares_id():
    populated = normalize_record({"_id": "1", "verificationAssignedTo": {"_id": "u1", "firstName": "Ravi"}})
    raw_id = normalize_record({"_id": "2", "secondVerificationAssignedTo": "u1"})
    assert evaluate(populated, _clause("verificationAssignedTo", "is", "u1")) is True
    assert evaluate(populated, _clause("verificationAssignedTo", "is_not", "u1")) is False
    assert evaluate(raw_id, _clause("secondVerificationAssignedTo", "is", "u1")) is True
    assert evaluate(raw_id, _clause("secondVerificationAssignedTo", "is", "u2")) is False


def test_contains_on_reference_uses_display_name():
    record = normalize_record({"_id": "1", "assignedTo": {"_id": "u1", "firstName": "Ravi", "lastName": "Iyer"}})
    assert evaluate(record, _clause("assignedTo", "contains", "iyer")) is True
    assert evaluate(record, _clause("assignedTo", "contains", "firstName")) is False
    assert stringify({"id": "u9"}) == "u9"
    assert stringify({"id": "c1", "name": "Acme"}) == "Acme"
