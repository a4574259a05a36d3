import math

import pytest

from axiom_governance.policy.conditions import (
    MISSING,
    ConditionTables,
    evaluate_condition,
    loose_equals,
    resolve_field,
    to_number,
)
from axiom_governance.policy.types import PolicyCondition


def make_condition(field: str, operator: str, value=None) -> PolicyCondition:
    return PolicyCondition(field=field, operator=operator, value=value)


def test_resolve_field_walks_nested_mappings_and_lists():
    context = {"user": {"roles": ["viewer", "admin"]}, "input": "hi"}
    assert resolve_field(context, "input") == "hi"
    assert resolve_field(context, "user.roles.1") == "admin"
    assert resolve_field(context, "user.roles.5") is MISSING
    assert resolve_field(context, "user.name") is MISSING
    assert resolve_field(context, "input.length") is MISSING


def test_missing_field_only_satisfies_not_equals():
    context = {"agentId": "bot-1"}
    assert evaluate_condition(make_condition("user.role", "not_equals", "admin"), context) == 1.0
    for operator in ("equals", "contains", "not_contains", "regex", "gt", "lt", "in_list", "is_toxic"):
        assert evaluate_condition(make_condition("user.role", operator, "x"), context) == 0.0


def test_none_value_counts_as_missing():
    context = {"output": None}
    assert evaluate_condition(make_condition("output", "not_equals", "x"), context) == 1.0
    assert evaluate_condition(make_condition("output", "equals", None), context) == 0.0


def test_equals_coerces_numeric_strings():
    assert loose_equals("10", 10)
    assert loose_equals(1, True)
    assert not loose_equals("abc", 0)
    assert evaluate_condition(make_condition("amount", "equals", 5), {"amount": "5"}) == 1.0
    assert evaluate_condition(make_condition("amount", "not_equals", 5), {"amount": "5"}) == 0.0


def test_contains_requires_string_field():
    assert evaluate_condition(make_condition("input", "contains", "DROP"), {"input": "DROP TABLE"}) == 1.0
    assert evaluate_condition(make_condition("input", "contains", "1"), {"input": 123}) == 0.0
    assert evaluate_condition(make_condition("input", "not_contains", "x"), {"input": 123}) == 0.0
    assert evaluate_condition(make_condition("input", "not_contains", "x"), {"input": "abc"}) == 1.0


def test_regex_is_case_insensitive():
    condition = make_condition("input", "regex", r"drop\s+table")
    assert evaluate_condition(condition, {"input": "please DROP   TABLE users"}) == 1.0


def test_invalid_regex_raises_for_dispatcher_to_isolate():
    import re

    with pytest.raises(re.error):
        evaluate_condition(make_condition("input", "regex", "(unclosed"), {"input": "abc"})


def test_numeric_comparisons_and_rate_limit():
    context = {"usage": {"calls": "51"}, "score": "n/a"}
    assert evaluate_condition(make_condition("usage.calls", "gt", 50), context) == 1.0
    assert evaluate_condition(make_condition("usage.calls", "lt", 50), context) == 0.0
    assert evaluate_condition(make_condition("usage.calls", "rate_limit_exceeded", 51), context) == 0.0
    assert evaluate_condition(make_condition("usage.calls", "rate_limit_exceeded", 50), context) == 1.0
    assert evaluate_condition(make_condition("score", "gt", 0), context) == 0.0
    assert evaluate_condition(make_condition("score", "lt", 0), context) == 0.0


def test_to_number_edge_cases():
    assert to_number("") == 0.0
    assert to_number(True) == 1.0
    assert math.isnan(to_number("abc"))
    assert math.isnan(to_number(None))


def test_in_list_membership():
    condition = PolicyCondition.from_dict({"field": "role", "operator": "in_list", "value": ["a", "b"]})
    assert evaluate_condition(condition, {"role": "b"}) == 1.0
    assert evaluate_condition(condition, {"role": "c"}) == 0.0
    assert evaluate_condition(make_condition("role", "in_list", "abc"), {"role": "a"}) == 0.0


def test_in_list_does_not_mix_booleans_and_numbers():
    numbers = make_condition("flag", "in_list", (1, 2))
    assert evaluate_condition(numbers, {"flag": True}) == 0.0
    assert evaluate_condition(numbers, {"flag": 1.0}) == 1.0
    flags = make_condition("flag", "in_list", (True,))
    assert evaluate_condition(flags, {"flag": 1}) == 0.0
    assert evaluate_condition(flags, {"flag": True}) == 1.0


def test_pii_detection():
    ssn = make_condition("output", "matches_pii", "ssn")
    email = make_condition("output", "matches_pii", "email")
    assert evaluate_condition(ssn, {"output": "SSN: 123-45-6789"}) == 1.0
    assert evaluate_condition(ssn, {"output": "no numbers here"}) == 0.0
    assert evaluate_condition(email, {"output": "mail jane.doe@example.com"}) == 1.0
    assert evaluate_condition(make_condition("output", "matches_pii", "passport"), {"output": "X1"}) == 0.0


def test_toxicity_uses_keyword_table():
    condition = make_condition("output", "is_toxic")
    assert evaluate_condition(condition, {"output": "That is EVIL"}) == 1.0
    assert evaluate_condition(condition, {"output": "That is fine"}) == 0.0


def test_custom_tables_are_honoured():
    tables = ConditionTables(version="custom", toxic_keywords=("rude",))
    condition = make_condition("output", "is_toxic")
    assert evaluate_condition(condition, {"output": "so rude"}, tables=tables) == 1.0
    assert evaluate_condition(condition, {"output": "evil"}, tables=tables) == 0.0


def test_unknown_operator_scores_zero():
    assert evaluate_condition(make_condition("input", "sounds_like", "x"), {"input": "x"}) == 0.0
