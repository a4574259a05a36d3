"""
Status transitions for compliance violations.

Each helper returns an updated copy; the input violation is left untouched.
RESOLVED is terminal.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Dict, FrozenSet, Optional

from axiom_governance.compliance.types import ComplianceViolation, ViolationStatus, utcnow

ALLOWED_TRANSITIONS: Dict[ViolationStatus, FrozenSet[ViolationStatus]] = {
    ViolationStatus.OPEN: frozenset(
        {ViolationStatus.UNDER_REVIEW, ViolationStatus.ESCALATED, ViolationStatus.RESOLVED}
    ),
    ViolationStatus.UNDER_REVIEW: frozenset({ViolationStatus.ESCALATED, ViolationStatus.RESOLVED}),
    ViolationStatus.ESCALATED: frozenset({ViolationStatus.UNDER_REVIEW, ViolationStatus.RESOLVED}),
    ViolationStatus.RESOLVED: frozenset(),
}


def _ensure_transition(violation: ComplianceViolation, target: ViolationStatus) -> None:
    if target not in ALLOWED_TRANSITIONS[violation.status]:
        raise ValueError(
            f"Cannot move violation {violation.violation_id} from "
            f"{violation.status.value} to {target.value}"
        )


def start_review(violation: ComplianceViolation) -> ComplianceViolation:
    _ensure_transition(violation, ViolationStatus.UNDER_REVIEW)
    return replace(violation, status=ViolationStatus.UNDER_REVIEW)


def escalate_violation(violation: ComplianceViolation) -> ComplianceViolation:
    _ensure_transition(violation, ViolationStatus.ESCALATED)
    return replace(violation, status=ViolationStatus.ESCALATED)


def resolve_violation(
    violation: ComplianceViolation,
    resolved_by: str,
    resolution: str,
    now: Optional[datetime] = None,
) -> ComplianceViolation:
    if not resolved_by:
        raise ValueError("resolved_by is required to resolve a violation")
    _ensure_transition(violation, ViolationStatus.RESOLVED)
    return replace(
        violation,
        status=ViolationStatus.RESOLVED,
        resolved_by=resolved_by,
        resolution=resolution,
        resolved_at=now or utcnow(),
        context=dict(violation.context),
    )


__all__ = ["ALLOWED_TRANSITIONS", "escalate_violation", "resolve_violation", "start_review"]
