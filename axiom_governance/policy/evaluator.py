"""
Policy dispatcher and rule-tree scoring.

`evaluate` walks policies in priority order and returns the first policy
whose rule tree scores above zero. When nothing matches the result is an
implicit deny: the absence of an explicit allow never grants access.

Group scoring:

* AND returns the arithmetic mean of its children (not the minimum), but
  any child scoring exactly 0 short-circuits the group to 0.
* OR returns the score of the first child above 0 (not the maximum).
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional

from axiom_governance.policy.conditions import DEFAULT_TABLES, ConditionTables, evaluate_condition
from axiom_governance.policy.types import EvaluationResult, Policy, PolicyCondition, PolicyGroup, RuleNode

logger = logging.getLogger("axiom_governance.policy.evaluator")

IMPLICIT_DENY_REASON = "Implicit Deny: No matching policy with 'allow' or 'warn' effect found"

# Context keys consulted for agent/task scoped policies
SCOPE_KEYS = {
    "agent": ("agentId", "agent_id"),
    "task": ("taskType", "task_type"),
}


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000.0, 3)


@dataclass(slots=True)
class RuleEvaluator:
    """Scores rule trees and dispatches a policy set against a context."""

    tables: ConditionTables = field(default_factory=lambda: DEFAULT_TABLES)

    def evaluate(self, policies: Iterable[Policy], context: Mapping[str, Any]) -> EvaluationResult:
        if policies is None:
            raise TypeError("policies must be a sequence of Policy objects, not None")
        start = time.perf_counter()

        # sorted() is stable, so equal priorities keep their input order
        ordered = sorted(policies, key=lambda policy: policy.priority, reverse=True)

        for policy in ordered:
            if not self.matches_scope(policy, context):
                continue
            try:
                score = self.evaluate_group(policy.rules, context)
            except Exception:
                logger.exception("Error evaluating policy %s; treating it as non-matching", policy.id)
                continue
            if score > 0:
                return EvaluationResult(
                    allowed=policy.effect != "deny",
                    status=policy.effect,
                    reason=f"Matched policy: {policy.name} ({policy.id})",
                    policy_id=policy.id,
                    actions=list(policy.actions),
                    latency_ms=_elapsed_ms(start),
                    confidence=score,
                )

        return EvaluationResult(
            allowed=False,
            status="deny",
            reason=IMPLICIT_DENY_REASON,
            policy_id=None,
            actions=[],
            latency_ms=_elapsed_ms(start),
            confidence=1.0,
        )

    @staticmethod
    def matches_scope(policy: Policy, context: Mapping[str, Any]) -> bool:
        if policy.scope == "global":
            return True
        keys = SCOPE_KEYS.get(policy.scope)
        if not keys or policy.target is None:
            return False
        return any(context.get(key) == policy.target for key in keys if key in context)

    def evaluate_group(self, group: PolicyGroup, context: Mapping[str, Any]) -> float:
        """Return a 0..1 confidence for a group of conditions."""
        if not group.conditions:
            return 1.0

        if group.logic == "AND":
            total = 0.0
            for item in group.conditions:
                score = self.evaluate_node(item, context)
                if score == 0:
                    return 0.0
                total += score
            return total / len(group.conditions)

        for item in group.conditions:
            score = self.evaluate_node(item, context)
            if score > 0:
                return score
        return 0.0

    def evaluate_node(self, node: RuleNode, context: Mapping[str, Any]) -> float:
        if node.kind == "group":
            return self.evaluate_group(node, context)  # type: ignore[arg-type]
        return self.evaluate_condition(node, context)  # type: ignore[arg-type]

    def evaluate_condition(self, condition: PolicyCondition, context: Mapping[str, Any]) -> float:
        return evaluate_condition(condition, context, tables=self.tables)


_DEFAULT_EVALUATOR = RuleEvaluator()


def evaluate(
    policies: Iterable[Policy],
    context: Mapping[str, Any],
    *,
    evaluator: Optional[RuleEvaluator] = None,
) -> EvaluationResult:
    """Evaluate `policies` against `context` with the default pattern tables."""
    return (evaluator or _DEFAULT_EVALUATOR).evaluate(policies, context)


def evaluate_group(group: PolicyGroup, context: Mapping[str, Any]) -> float:
    return _DEFAULT_EVALUATOR.evaluate_group(group, context)


__all__ = ["IMPLICIT_DENY_REASON", "RuleEvaluator", "evaluate", "evaluate_group"]
