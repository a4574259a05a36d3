import pytest

from axiom_governance.compliance import (
    CreditDecisionOutcome,
    CreditScoringDecision,
    DecisionFactor,
    ECOAValidator,
    FactorImpact,
    ProtectedAttributes,
    SourceType,
    ViolationSeverity,
)
from axiom_governance.compliance.ecoa import MONITORING_WARNING
from axiom_governance.config import ComplianceSettings

APPROVED = CreditDecisionOutcome.APPROVED
DENIED = CreditDecisionOutcome.DENIED


def make_decision(
    outcome=DENIED,
    factors=None,
    attributes: ProtectedAttributes | None = None,
    decision_id: str = "d-1",
) -> CreditScoringDecision:
    return CreditScoringDecision(
        decision_id=decision_id,
        agent_id="underwriter",
        applicant_id=f"app-{decision_id}",
        decision=outcome,
        credit_score=640,
        primary_factors=factors or [],
        protected_attributes=attributes,
    )


def negative(name: str) -> DecisionFactor:
    return DecisionFactor(factor=name, impact=FactorImpact.NEGATIVE, weight=0.3)


def positive(name: str) -> DecisionFactor:
    return DecisionFactor(factor=name, impact=FactorImpact.POSITIVE, weight=0.3)


def make_cohort(race: str, approved: int, denied: int) -> list[CreditScoringDecision]:
    outcomes = [APPROVED] * approved + [DENIED] * denied
    return [
        make_decision(outcome, attributes=ProtectedAttributes(race=race), decision_id=f"{race}-{index}")
        for index, outcome in enumerate(outcomes)
    ]


def make_validator() -> ECOAValidator:
    return ECOAValidator(settings=ComplianceSettings())


def test_prohibited_factor_is_critical():
    decision = make_decision(factors=[negative("Applicant gender")], attributes=ProtectedAttributes())
    result = make_validator().validate_decision(decision)
    assert [v.rule_id for v in result.violations] == ["ECOA-PROH-001"]
    violation = result.violations[0]
    assert violation.severity == ViolationSeverity.CRITICAL
    assert violation.context["prohibited_term"] == "gender"
    assert violation.source_type == SourceType.CREDIT_DECISION


def test_protected_terms_match_whole_words():
    factors = [negative("mortgage balance"), negative("singleton account flag"), positive("raceway income")]
    decision = make_decision(factors=factors, attributes=ProtectedAttributes(age=70))
    result = make_validator().validate_decision(decision)
    assert result.is_compliant


def test_age_discrimination_for_protected_age_denial():
    decision = make_decision(factors=[negative("Applicant age")], attributes=ProtectedAttributes(age=65))
    result = make_validator().validate_decision(decision)
    assert [v.rule_id for v in result.violations] == ["ECOA-AGE-001"]
    assert result.violations[0].context["applicant_age"] == 65


def test_age_rule_needs_denial_and_protected_age():
    validator = make_validator()
    young = make_decision(factors=[negative("Applicant age")], attributes=ProtectedAttributes(age=61))
    approved = make_decision(APPROVED, factors=[negative("Applicant age")], attributes=ProtectedAttributes(age=70))
    assert validator.validate_decision(young).is_compliant
    assert validator.validate_decision(approved).is_compliant


def test_marital_factor_only_flagged_when_negative():
    validator = make_validator()
    flagged = make_decision(factors=[negative("Spouse income")], attributes=ProtectedAttributes())
    assert [v.rule_id for v in validator.validate_decision(flagged).violations] == ["ECOA-MARITAL-001"]
    neutral = make_decision(factors=[positive("Spouse income")], attributes=ProtectedAttributes())
    assert validator.validate_decision(neutral).is_compliant


def test_missing_protected_attributes_warns():
    result = make_validator().validate_decision(make_decision(factors=[negative("dti")]))
    assert result.is_compliant
    assert result.warnings == [MONITORING_WARNING]


def test_four_fifths_rule_flags_minority_cohort():
    decisions = make_cohort("group-a", 9, 1) + make_cohort("group-b", 6, 4)
    result = make_validator().analyze_disparate_impact(decisions, "race")

    assert not result.is_compliant
    assert len(result.violations) == 1
    violation = result.violations[0]
    assert violation.rule_id == "ECOA-DISP-001"
    assert violation.severity == ViolationSeverity.CRITICAL
    assert violation.source_id == "BATCH_ANALYSIS"
    assert violation.agent_id == "underwriter"
    assert violation.context["group_name"] == "group-b"
    assert violation.context["impact_ratio"] == pytest.approx(0.6667, abs=1e-4)
    assert violation.context["majority_approval_rate"] == pytest.approx(0.9)
    assert violation.context["total_applications"] == 10
    assert 'race="group-b"' in violation.description
    assert "66.7% is below 80% threshold" in violation.description

    metrics = result.fairness_metrics
    assert metrics.overall_approval_rate == pytest.approx(0.75)
    assert metrics.approval_rates_by_group == {"group-a": pytest.approx(0.9), "group-b": pytest.approx(0.6)}
    assert metrics.disparate_impact_ratio == pytest.approx(0.6667, abs=1e-4)
    assert metrics.statistical_parity_difference == pytest.approx(0.3)
    assert any("Statistical parity difference (30.0%)" in w for w in result.warnings)


def test_close_cohorts_are_compliant():
    decisions = make_cohort("group-a", 8, 2) + make_cohort("group-b", 8, 2)
    result = make_validator().analyze_disparate_impact(decisions, "race")
    assert result.is_compliant
    assert result.warnings == []
    assert result.fairness_metrics.disparate_impact_ratio == pytest.approx(1.0)


def test_single_group_is_insufficient_diversity():
    decisions = make_cohort("group-a", 1, 9)
    result = make_validator().analyze_disparate_impact(decisions, "race")
    assert result.is_compliant
    assert result.violations == []
    assert result.fairness_metrics is None
    assert result.warnings == ["Insufficient diversity in race for disparate impact analysis"]


def test_unpopulated_groups_and_missing_values_are_ignored():
    decisions = make_cohort("group-a", 5, 5)
    decisions.append(make_decision(CreditDecisionOutcome.MANUAL_REVIEW, attributes=ProtectedAttributes(race="group-c")))
    decisions.append(make_decision(APPROVED, attributes=None))
    result = make_validator().analyze_disparate_impact(decisions, "race")
    assert result.fairness_metrics is None
    assert "Insufficient diversity" in result.warnings[0]


def test_zero_approvals_everywhere_yields_no_violation():
    decisions = make_cohort("group-a", 0, 3) + make_cohort("group-b", 0, 3)
    result = make_validator().analyze_disparate_impact(decisions, "race")
    assert result.is_compliant
    assert result.fairness_metrics.disparate_impact_ratio == 1.0
    assert result.fairness_metrics.statistical_parity_difference == 0.0


def test_fair_lending_report():
    decisions = make_cohort("group-a", 9, 1) + make_cohort("group-b", 6, 4)
    report = make_validator().generate_fair_lending_report(decisions)
    assert report.summary == "Analyzed 20 credit decisions. Overall approval rate: 75.0%"
    assert list(report.metrics) == ["race"]
    assert report.recommendations == ["Review race-based disparate impact (ratio: 66.7%)"]


def test_fair_lending_report_on_empty_batch():
    report = make_validator().generate_fair_lending_report([])
    assert report.summary == "Analyzed 0 credit decisions. Overall approval rate: 0.0%"
    assert report.metrics == {}
    assert report.recommendations == []
