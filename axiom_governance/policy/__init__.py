"""
Policy evaluation engine.

Turns a declarative rule set plus a runtime context into an
allow/deny/warn decision with a confidence score and a traceable reason.
"""

from .conditions import MISSING, ConditionTables, evaluate_condition, resolve_field
from .evaluator import IMPLICIT_DENY_REASON, RuleEvaluator, evaluate, evaluate_group
from .store import DirectoryPolicySource, PolicySnapshot, PolicyStore, StaticPolicySource
from .types import (
    EvaluationResult,
    Policy,
    PolicyCondition,
    PolicyGroup,
    PolicyValidationError,
)

__all__ = [
    "ConditionTables",
    "DirectoryPolicySource",
    "EvaluationResult",
    "IMPLICIT_DENY_REASON",
    "MISSING",
    "Policy",
    "PolicyCondition",
    "PolicyGroup",
    "PolicySnapshot",
    "PolicyStore",
    "PolicyValidationError",
    "RuleEvaluator",
    "StaticPolicySource",
    "evaluate",
    "evaluate_condition",
    "evaluate_group",
    "resolve_field",
]
