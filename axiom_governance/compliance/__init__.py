"""
Regulatory validators for banking agents.

Validators audit calls and credit decisions after the fact and return
findings as data; they never gate execution themselves.
"""

from .ecoa import ECOAValidator, FairLendingReport
from .fairness import build_cohorts, compute_fairness_metrics, group_by_attribute
from .fcra import AdverseActionNotice, DisputeReviewResult, FCRAValidator
from .fdcpa import CallPermission, FDCPAValidator, hour_in_timezone
from .review import escalate_violation, resolve_violation, start_review
from .tables import (
    AGENT_REGULATORY_MAPPING,
    DEFAULT_COMPLIANCE_TABLES,
    ComplianceTables,
    frameworks_for_agent,
)
from .types import (
    BankingAgentType,
    CallOutcome,
    CallSentiment,
    CohortStatistics,
    ComplianceViolation,
    CreditDecisionOutcome,
    CreditScoringDecision,
    DecisionFactor,
    FactorImpact,
    FairnessMetrics,
    FDCPACallContext,
    LoanRecoveryCall,
    ProtectedAttributes,
    RegulatoryFramework,
    SourceType,
    ValidationResult,
    ViolationSeverity,
    ViolationStatus,
)

__all__ = [
    "AGENT_REGULATORY_MAPPING",
    "AdverseActionNotice",
    "BankingAgentType",
    "CallOutcome",
    "CallPermission",
    "CallSentiment",
    "CohortStatistics",
    "ComplianceTables",
    "ComplianceViolation",
    "CreditDecisionOutcome",
    "CreditScoringDecision",
    "DEFAULT_COMPLIANCE_TABLES",
    "DecisionFactor",
    "DisputeReviewResult",
    "ECOAValidator",
    "FCRAValidator",
    "FDCPACallContext",
    "FDCPAValidator",
    "FactorImpact",
    "FairLendingReport",
    "FairnessMetrics",
    "LoanRecoveryCall",
    "ProtectedAttributes",
    "RegulatoryFramework",
    "SourceType",
    "ValidationResult",
    "ViolationSeverity",
    "ViolationStatus",
    "build_cohorts",
    "compute_fairness_metrics",
    "escalate_violation",
    "frameworks_for_agent",
    "group_by_attribute",
    "hour_in_timezone",
    "resolve_violation",
    "start_review",
]
