"""
ECOA (Equal Credit Opportunity Act) checks: per-decision prohibited factors
and batch-level disparate impact.

Insufficient data is never turned into a violation; it only produces a
warning and the batch stays compliant.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from axiom_governance.compliance.fairness import (
    build_cohorts,
    compute_fairness_metrics,
    group_by_attribute,
    overall_approval_rate,
)
from axiom_governance.compliance.tables import (
    DEFAULT_COMPLIANCE_TABLES,
    ComplianceTables,
    mentions_term,
)
from axiom_governance.compliance.types import (
    ComplianceViolation,
    CreditDecisionOutcome,
    CreditScoringDecision,
    FactorImpact,
    FairnessMetrics,
    RegulatoryFramework,
    SourceType,
    ValidationResult,
    ViolationSeverity,
    new_violation_id,
)
from axiom_governance.config.settings import ComplianceSettings, load_settings

logger = logging.getLogger("axiom_governance.compliance.ecoa")

MONITORING_WARNING = "Protected attributes not monitored - fairness analysis not possible"
REPORT_ATTRIBUTES = ("race", "gender", "age")
BATCH_SOURCE_ID = "BATCH_ANALYSIS"


@dataclass(slots=True)
class FairLendingReport:
    summary: str
    metrics: Dict[str, FairnessMetrics] = field(default_factory=dict)
    recommendations: List[str] = field(default_factory=list)


@dataclass(slots=True)
class ECOAValidator:
    """Fair-lending validator for single decisions and decision batches."""

    settings: ComplianceSettings = field(default_factory=load_settings)
    tables: ComplianceTables = DEFAULT_COMPLIANCE_TABLES

    def validate_decision(self, decision: CreditScoringDecision) -> ValidationResult:
        violations: List[ComplianceViolation] = []
        warnings: List[str] = []

        prohibited = self._check_prohibited_factors(decision)
        if prohibited:
            violations.append(prohibited)

        if decision.protected_attributes is None:
            warnings.append(MONITORING_WARNING)

        age_violation = self._check_age(decision)
        if age_violation:
            violations.append(age_violation)

        marital_violation = self._check_marital_status(decision)
        if marital_violation:
            violations.append(marital_violation)

        return ValidationResult(is_compliant=not violations, violations=violations, warnings=warnings)

    def _check_prohibited_factors(
        self, decision: CreditScoringDecision
    ) -> Optional[ComplianceViolation]:
        for factor in decision.primary_factors:
            for term in self.tables.prohibited_factor_terms:
                if not mentions_term(factor.factor, term):
                    continue
                return self._decision_violation(
                    decision,
                    "ECOA-PROH-001",
                    "Prohibited Factor in Decision",
                    (
                        f'Credit decision factor "{factor.factor}" appears to reference '
                        f"prohibited class: {term}"
                    ),
                    {"factor": factor.factor, "prohibited_term": term},
                )
        return None

    def _check_age(self, decision: CreditScoringDecision) -> Optional[ComplianceViolation]:
        attributes = decision.protected_attributes
        age = attributes.age if attributes is not None else None
        if age is None or age < self.settings.protected_age:
            return None
        if decision.decision != CreditDecisionOutcome.DENIED:
            return None

        age_factors = [
            factor.factor
            for factor in decision.primary_factors
            if factor.impact == FactorImpact.NEGATIVE
            and any(mentions_term(factor.factor, term) for term in self.tables.age_factor_terms)
        ]
        if not age_factors:
            return None
        return self._decision_violation(
            decision,
            "ECOA-AGE-001",
            "Potential Age Discrimination",
            (
                f"Applicant age ({age}) is {self.settings.protected_age}+ and denied "
                "with negative age-related factors"
            ),
            {"applicant_age": age, "age_factors": age_factors},
        )

    def _check_marital_status(
        self, decision: CreditScoringDecision
    ) -> Optional[ComplianceViolation]:
        marital = [
            factor
            for factor in decision.primary_factors
            if any(mentions_term(factor.factor, term) for term in self.tables.marital_factor_terms)
        ]
        if not any(factor.impact == FactorImpact.NEGATIVE for factor in marital):
            return None
        return self._decision_violation(
            decision,
            "ECOA-MARITAL-001",
            "Marital Status Discrimination",
            "Credit decision includes negative marital status-related factors",
            {"marital_factors": [factor.factor for factor in marital]},
        )

    def analyze_disparate_impact(
        self, decisions: Sequence[CreditScoringDecision], protected_attribute: str
    ) -> ValidationResult:
        """Four-fifths rule across cohorts of `protected_attribute`."""
        cohorts = build_cohorts(group_by_attribute(decisions, protected_attribute))
        if len(cohorts) < 2:
            return ValidationResult(
                is_compliant=True,
                warnings=[
                    f"Insufficient diversity in {protected_attribute} for disparate impact analysis"
                ],
            )

        violations: List[ComplianceViolation] = []
        warnings: List[str] = []
        threshold = self.settings.disparate_impact_threshold
        majority_rate = max(cohort.approval_rate for cohort in cohorts)
        agent_id = decisions[0].agent_id if decisions and decisions[0].agent_id else "BATCH"

        if majority_rate > 0:
            for cohort in cohorts:
                impact_ratio = cohort.approval_rate / majority_rate
                if impact_ratio >= threshold:
                    continue
                violations.append(
                    ComplianceViolation(
                        violation_id=new_violation_id("ECOA-DISP-001"),
                        agent_id=agent_id,
                        framework=RegulatoryFramework.ECOA,
                        severity=ViolationSeverity.CRITICAL,
                        rule_id="ECOA-DISP-001",
                        rule_name="Disparate Impact Detected",
                        description=(
                            f'Disparate impact detected for {protected_attribute}="{cohort.group_name}": '
                            f"Impact ratio {impact_ratio * 100:.1f}% is below "
                            f"{threshold * 100:.0f}% threshold"
                        ),
                        context={
                            "protected_attribute": protected_attribute,
                            "group_name": cohort.group_name,
                            "group_approval_rate": cohort.approval_rate,
                            "majority_approval_rate": majority_rate,
                            "impact_ratio": impact_ratio,
                            "total_applications": cohort.total_applications,
                        },
                        source_type=SourceType.OTHER,
                        source_id=BATCH_SOURCE_ID,
                    )
                )

        metrics = compute_fairness_metrics(decisions, cohorts)
        parity_threshold = self.settings.statistical_parity_threshold
        if metrics.statistical_parity_difference > parity_threshold:
            warnings.append(
                f"Statistical parity difference ({metrics.statistical_parity_difference * 100:.1f}%) "
                f"exceeds recommended threshold ({parity_threshold * 100:.1f}%)"
            )

        if violations:
            logger.info(
                "Disparate impact on %s: %d cohort(s) below %.2f",
                protected_attribute,
                len(violations),
                threshold,
            )
        return ValidationResult(
            is_compliant=not violations,
            violations=violations,
            warnings=warnings,
            fairness_metrics=metrics,
        )

    def generate_fair_lending_report(
        self,
        decisions: Sequence[CreditScoringDecision],
        attributes: Sequence[str] = REPORT_ATTRIBUTES,
    ) -> FairLendingReport:
        report = FairLendingReport(
            summary=(
                f"Analyzed {len(decisions)} credit decisions. "
                f"Overall approval rate: {overall_approval_rate(decisions) * 100:.1f}%"
            )
        )
        threshold = self.settings.disparate_impact_threshold
        for attribute in attributes:
            metrics = self.analyze_disparate_impact(decisions, attribute).fairness_metrics
            if metrics is None:
                continue
            report.metrics[attribute] = metrics
            if metrics.disparate_impact_ratio < threshold:
                report.recommendations.append(
                    f"Review {attribute}-based disparate impact "
                    f"(ratio: {metrics.disparate_impact_ratio * 100:.1f}%)"
                )
        return report

    def _decision_violation(
        self,
        decision: CreditScoringDecision,
        rule_id: str,
        rule_name: str,
        description: str,
        extra_context: Dict[str, Any],
    ) -> ComplianceViolation:
        context: Dict[str, Any] = {"decision_id": decision.decision_id}
        context.update(extra_context)
        return ComplianceViolation(
            violation_id=new_violation_id(rule_id),
            agent_id=decision.agent_id,
            framework=RegulatoryFramework.ECOA,
            severity=ViolationSeverity.CRITICAL,
            rule_id=rule_id,
            rule_name=rule_name,
            description=description,
            context=context,
            source_type=SourceType.CREDIT_DECISION,
            source_id=decision.decision_id,
        )


__all__ = ["ECOAValidator", "FairLendingReport", "MONITORING_WARNING"]
