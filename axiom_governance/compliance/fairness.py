"""
Cohort statistics and fairness metrics over a batch of credit decisions.

Decisions are grouped by the string value of one protected attribute.
Only APPROVED and DENIED outcomes count toward a cohort; a group made up
entirely of MANUAL_REVIEW decisions is not populated and is dropped.
"""

from __future__ import annotations

from typing import Dict, List, Sequence

import numpy as np

from axiom_governance.compliance.types import (
    CohortStatistics,
    CreditDecisionOutcome,
    CreditScoringDecision,
    FairnessMetrics,
)


def group_by_attribute(
    decisions: Sequence[CreditScoringDecision], attribute: str
) -> Dict[str, List[CreditScoringDecision]]:
    groups: Dict[str, List[CreditScoringDecision]] = {}
    for decision in decisions:
        attributes = decision.protected_attributes
        value = attributes.get(attribute) if attributes is not None else None
        if value is None:
            continue
        groups.setdefault(str(value), []).append(decision)
    return groups


def build_cohorts(groups: Dict[str, List[CreditScoringDecision]]) -> List[CohortStatistics]:
    """Per-group approval rates; insertion order of `groups` is preserved."""
    names = list(groups)
    approved = np.array(
        [_count(groups[name], CreditDecisionOutcome.APPROVED) for name in names], dtype=float
    )
    denied = np.array(
        [_count(groups[name], CreditDecisionOutcome.DENIED) for name in names], dtype=float
    )
    totals = approved + denied
    rates = np.divide(approved, totals, out=np.zeros_like(approved), where=totals > 0)

    cohorts: List[CohortStatistics] = []
    for index, name in enumerate(names):
        if totals[index] == 0:
            continue
        cohorts.append(
            CohortStatistics(
                group_name=name,
                total_applications=int(totals[index]),
                approved_count=int(approved[index]),
                denied_count=int(denied[index]),
                approval_rate=float(rates[index]),
            )
        )
    return cohorts


def _count(decisions: Sequence[CreditScoringDecision], outcome: CreditDecisionOutcome) -> int:
    return sum(1 for decision in decisions if decision.decision == outcome)


def overall_approval_rate(decisions: Sequence[CreditScoringDecision]) -> float:
    if not decisions:
        return 0.0
    return _count(decisions, CreditDecisionOutcome.APPROVED) / len(decisions)


def compute_fairness_metrics(
    decisions: Sequence[CreditScoringDecision], cohorts: Sequence[CohortStatistics]
) -> FairnessMetrics:
    rates = np.array([cohort.approval_rate for cohort in cohorts], dtype=float)
    highest = float(rates.max()) if rates.size else 0.0
    lowest = float(rates.min()) if rates.size else 0.0
    # no approvals anywhere: cohorts count as equal
    ratio = lowest / highest if highest > 0 else 1.0
    return FairnessMetrics(
        overall_approval_rate=overall_approval_rate(decisions),
        approval_rates_by_group={cohort.group_name: cohort.approval_rate for cohort in cohorts},
        disparate_impact_ratio=ratio,
        statistical_parity_difference=highest - lowest,
    )


__all__ = [
    "build_cohorts",
    "compute_fairness_metrics",
    "group_by_attribute",
    "overall_approval_rate",
]
