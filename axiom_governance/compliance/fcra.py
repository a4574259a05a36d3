"""
FCRA (Fair Credit Reporting Act) checks for credit decisions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from axiom_governance.compliance.tables import DEFAULT_COMPLIANCE_TABLES, ComplianceTables
from axiom_governance.compliance.types import (
    ComplianceViolation,
    CreditDecisionOutcome,
    CreditScoringDecision,
    FactorImpact,
    RegulatoryFramework,
    SourceType,
    ValidationResult,
    ViolationSeverity,
    new_violation_id,
)
from axiom_governance.config.settings import ComplianceSettings, load_settings

# FICO-style range; scores outside it only warn
CREDIT_SCORE_RANGE = (300, 850)
NOTICE_FACTOR_LIMIT = 4


@dataclass(slots=True)
class AdverseActionNotice:
    """Data for a consumer-facing adverse action notice."""

    code: str
    reason: str
    factors: List[str]
    rights_notice: str


@dataclass(slots=True)
class DisputeReviewResult:
    is_compliant: bool
    issues: List[str] = field(default_factory=list)


@dataclass(slots=True)
class FCRAValidator:
    """Validates explainability, adverse action and review requirements."""

    settings: ComplianceSettings = field(default_factory=load_settings)
    tables: ComplianceTables = DEFAULT_COMPLIANCE_TABLES

    def validate(self, decision: CreditScoringDecision) -> ValidationResult:
        violations: List[ComplianceViolation] = []
        warnings: List[str] = []
        recommendations: List[str] = []
        denied = decision.decision == CreditDecisionOutcome.DENIED

        violations.extend(self._check_explainability(decision))

        if denied:
            violations.extend(self._check_adverse_action(decision))

        if not decision.model_version or not decision.model_name:
            warnings.append("Model version or name not documented - required for audits")

        if decision.human_review_required and not decision.reviewed_by:
            violations.append(
                self._create_violation(
                    decision,
                    "FCRA-REVIEW-001",
                    "Required Human Review Not Completed",
                    "Decision flagged for human review but no reviewer documented",
                    ViolationSeverity.VIOLATION,
                )
            )

        low, high = CREDIT_SCORE_RANGE
        if not low <= decision.credit_score <= high:
            warnings.append(
                f"Unusual credit score value: {decision.credit_score} (expected {low}-{high})"
            )

        if denied and len(decision.primary_factors) < self.settings.recommended_denial_factors:
            recommendations.append(
                "Consider providing more detailed explanation factors for denied applications"
            )

        return ValidationResult(
            is_compliant=not violations,
            violations=violations,
            warnings=warnings,
            recommendations=recommendations,
        )

    def _check_explainability(self, decision: CreditScoringDecision) -> List[ComplianceViolation]:
        factors = decision.primary_factors
        if not factors:
            return [
                self._create_violation(
                    decision,
                    "FCRA-EXPL-001",
                    "Missing Decision Factors",
                    "No primary factors documented for credit decision",
                    ViolationSeverity.CRITICAL,
                )
            ]

        violations: List[ComplianceViolation] = []
        denied = decision.decision == CreditDecisionOutcome.DENIED
        minimum = self.settings.min_explanation_factors

        if denied and len(factors) < minimum:
            violations.append(
                self._create_violation(
                    decision,
                    "FCRA-EXPL-002",
                    "Insufficient Explanation Factors",
                    f"Denied decision has {len(factors)} factors, minimum {minimum} required",
                    ViolationSeverity.VIOLATION,
                )
            )

        # reported once per decision
        if any(not factor.factor or factor.weight is None for factor in factors):
            violations.append(
                self._create_violation(
                    decision,
                    "FCRA-EXPL-003",
                    "Invalid Factor Structure",
                    "Decision factor missing required fields (factor name or weight)",
                    ViolationSeverity.VIOLATION,
                )
            )

        if denied and not any(factor.impact == FactorImpact.NEGATIVE for factor in factors):
            violations.append(
                self._create_violation(
                    decision,
                    "FCRA-EXPL-004",
                    "No Negative Factors for Denial",
                    "Denied decision must include negative factors that led to denial",
                    ViolationSeverity.VIOLATION,
                )
            )

        return violations

    def _check_adverse_action(self, decision: CreditScoringDecision) -> List[ComplianceViolation]:
        violations: List[ComplianceViolation] = []

        if not decision.adverse_action_code:
            violations.append(
                self._create_violation(
                    decision,
                    "FCRA-ADV-001",
                    "Missing Adverse Action Code",
                    "Denied decision must include adverse action code",
                    ViolationSeverity.CRITICAL,
                )
            )
        elif decision.adverse_action_code not in self.tables.adverse_action_reasons:
            violations.append(
                self._create_violation(
                    decision,
                    "FCRA-ADV-003",
                    "Invalid Adverse Action Code",
                    (
                        f'Adverse action code "{decision.adverse_action_code}" '
                        "is not a recognized FCRA code"
                    ),
                    ViolationSeverity.WARNING,
                )
            )

        if not decision.adverse_action_reason:
            violations.append(
                self._create_violation(
                    decision,
                    "FCRA-ADV-002",
                    "Missing Adverse Action Reason",
                    "Denied decision must include human-readable adverse action reason",
                    ViolationSeverity.CRITICAL,
                )
            )

        return violations

    def generate_adverse_action_notice(self, decision: CreditScoringDecision) -> AdverseActionNotice:
        """Top negative factors by weight plus the standard consumer rights text."""
        negative = [
            factor for factor in decision.primary_factors if factor.impact == FactorImpact.NEGATIVE
        ]
        negative.sort(key=lambda factor: factor.weight or 0.0, reverse=True)
        return AdverseActionNotice(
            code=decision.adverse_action_code or "UNKNOWN",
            reason=decision.adverse_action_reason or "Application did not meet approval criteria",
            factors=[factor.description or factor.factor for factor in negative[:NOTICE_FACTOR_LIMIT]],
            rights_notice=self.tables.credit_rights_notice,
        )

    def validate_dispute_response(
        self,
        original_decision: CreditScoringDecision,
        dispute_reason: Optional[str],
        response_days: float,
    ) -> DisputeReviewResult:
        issues: List[str] = []
        max_days = self.settings.max_dispute_response_days

        if response_days > max_days:
            issues.append(
                f"Response time exceeded {max_days} days requirement "
                f"(decision {original_decision.decision_id})"
            )
        if not dispute_reason or len(dispute_reason) < self.settings.min_dispute_reason_length:
            issues.append("Dispute reason not adequately documented")

        return DisputeReviewResult(is_compliant=not issues, issues=issues)

    def _create_violation(
        self,
        decision: CreditScoringDecision,
        rule_id: str,
        rule_name: str,
        description: str,
        severity: ViolationSeverity,
    ) -> ComplianceViolation:
        return ComplianceViolation(
            violation_id=new_violation_id(rule_id),
            agent_id=decision.agent_id,
            framework=RegulatoryFramework.FCRA,
            severity=severity,
            rule_id=rule_id,
            rule_name=rule_name,
            description=description,
            context={
                "decision_id": decision.decision_id,
                "applicant_id": decision.applicant_id,
                "decision": decision.decision.value,
                "model_version": decision.model_version,
            },
            source_type=SourceType.CREDIT_DECISION,
            source_id=decision.decision_id,
        )


__all__ = ["AdverseActionNotice", "DisputeReviewResult", "FCRAValidator"]
