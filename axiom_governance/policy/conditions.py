"""
Leaf-level condition scoring for policy rule trees.

PII and toxicity checks are plain pattern tables; pass a different
`ConditionTables` to the evaluator to change them.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Tuple

from axiom_governance.policy.types import PolicyCondition


class _Missing:
    """Sentinel for a context field that could not be resolved."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


DEFAULT_PII_PATTERNS: Dict[str, re.Pattern[str]] = {
    "email": re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}"),
    "phone": re.compile(r"(\+\d{1,2}\s?)?\(?\d{3}\)?[\s.-]?\d{3}[\s.-]?\d{4}"),
    "ssn": re.compile(r"\d{3}-\d{2}-\d{4}"),
}

DEFAULT_TOXIC_KEYWORDS: Tuple[str, ...] = ("bad", "evil", "harm", "kill")


@dataclass(slots=True, frozen=True)
class ConditionTables:
    """Versioned pattern tables backing `matches_pii` and `is_toxic`."""

    version: str = "2024.1"
    pii_patterns: Mapping[str, re.Pattern[str]] = field(
        default_factory=lambda: dict(DEFAULT_PII_PATTERNS)
    )
    toxic_keywords: Tuple[str, ...] = DEFAULT_TOXIC_KEYWORDS

    def matches_pii(self, pii_type: Any, text: str) -> bool:
        pattern = self.pii_patterns.get(str(pii_type))
        if pattern is None:
            return False
        return bool(pattern.search(text))

    def is_toxic(self, text: str) -> bool:
        lowered = text.lower()
        return any(word.lower() in lowered for word in self.toxic_keywords)


DEFAULT_TABLES = ConditionTables()


def resolve_field(context: Mapping[str, Any], path: str) -> Any:
    """Walk a dot-path through nested mappings; return MISSING when any hop fails."""
    current: Any = context
    for key in path.split("."):
        if isinstance(current, Mapping):
            if key not in current:
                return MISSING
            current = current[key]
        elif isinstance(current, (list, tuple)) and key.isdigit():
            index = int(key)
            if index >= len(current):
                return MISSING
            current = current[index]
        else:
            return MISSING
    return current


def to_number(value: Any) -> float:
    """Numeric coercion; anything unparseable becomes NaN so comparisons fail."""
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        try:
            return float(text)
        except ValueError:
            return math.nan
    return math.nan


def loose_equals(actual: Any, expected: Any) -> bool:
    """Equality that lets numeric strings and booleans compare against numbers."""
    if actual == expected:
        return True
    if expected is None:
        return False
    numeric = (int, float)
    if isinstance(actual, numeric) or isinstance(expected, numeric):
        if isinstance(actual, (numeric, str)) and isinstance(expected, (numeric, str)):
            left, right = to_number(actual), to_number(expected)
            return not math.isnan(left) and left == right
    return False


def _contains(actual: Any, expected: Any) -> bool:
    return isinstance(actual, str) and str(expected) in actual


def _not_contains(actual: Any, expected: Any) -> bool:
    return isinstance(actual, str) and str(expected) not in actual


def _regex(actual: Any, expected: Any) -> bool:
    # re.error on a bad pattern propagates to the dispatcher, which skips the policy
    return re.search(str(expected), str(actual), flags=re.IGNORECASE) is not None


def _greater(actual: Any, expected: Any) -> bool:
    return to_number(actual) > to_number(expected)


def _less(actual: Any, expected: Any) -> bool:
    return to_number(actual) < to_number(expected)


def _in_list(actual: Any, expected: Any) -> bool:
    """Strict membership: True does not match 1, while 1 matches 1.0."""
    if not isinstance(expected, (list, tuple)):
        return False
    is_bool = isinstance(actual, bool)
    return any(item == actual and isinstance(item, bool) == is_bool for item in expected)


COMPARATORS: Dict[str, Callable[[Any, Any], bool]] = {
    "equals": loose_equals,
    "not_equals": lambda actual, expected: not loose_equals(actual, expected),
    "contains": _contains,
    "not_contains": _not_contains,
    "regex": _regex,
    "gt": _greater,
    "lt": _less,
    "in_list": _in_list,
    # usage counter strictly above the configured threshold
    "rate_limit_exceeded": _greater,
}


def evaluate_condition(
    condition: PolicyCondition,
    context: Mapping[str, Any],
    *,
    tables: ConditionTables = DEFAULT_TABLES,
) -> float:
    """Score a single condition as 1.0 (match) or 0.0."""
    actual = resolve_field(context, condition.field)

    # Absence can only satisfy a negative assertion.
    if actual is MISSING or actual is None:
        return 1.0 if condition.operator == "not_equals" else 0.0

    operator = condition.operator
    if operator == "matches_pii":
        return 1.0 if tables.matches_pii(condition.value, str(actual)) else 0.0
    if operator == "is_toxic":
        return 1.0 if tables.is_toxic(str(actual)) else 0.0

    comparator = COMPARATORS.get(operator)
    if comparator is None:
        return 0.0
    return 1.0 if comparator(actual, condition.value) else 0.0


__all__ = [
    "COMPARATORS",
    "ConditionTables",
    "DEFAULT_PII_PATTERNS",
    "DEFAULT_TABLES",
    "DEFAULT_TOXIC_KEYWORDS",
    "MISSING",
    "evaluate_condition",
    "loose_equals",
    "resolve_field",
    "to_number",
]
