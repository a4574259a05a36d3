"""
Dataclasses describing banking records, compliance findings and fairness aggregates.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional
from uuid import uuid4


class RegulatoryFramework(str, Enum):
    FDCPA = "FDCPA"  # Fair Debt Collection Practices Act
    FCRA = "FCRA"  # Fair Credit Reporting Act
    ECOA = "ECOA"  # Equal Credit Opportunity Act
    CFPB = "CFPB"
    TCPA = "TCPA"  # Telephone Consumer Protection Act
    GLBA = "GLBA"  # Gramm-Leach-Bliley Act
    DODD_FRANK = "DODD_FRANK"
    BSA_AML = "BSA_AML"


class ViolationSeverity(str, Enum):
    INFO = "INFO"
    WARNING = "WARNING"
    VIOLATION = "VIOLATION"
    CRITICAL = "CRITICAL"


class ViolationStatus(str, Enum):
    OPEN = "OPEN"
    UNDER_REVIEW = "UNDER_REVIEW"
    RESOLVED = "RESOLVED"
    ESCALATED = "ESCALATED"


class SourceType(str, Enum):
    CALL = "CALL"
    CREDIT_DECISION = "CREDIT_DECISION"
    TRANSACTION = "TRANSACTION"
    OTHER = "OTHER"


class CreditDecisionOutcome(str, Enum):
    APPROVED = "APPROVED"
    DENIED = "DENIED"
    MANUAL_REVIEW = "MANUAL_REVIEW"


class FactorImpact(str, Enum):
    POSITIVE = "POSITIVE"
    NEGATIVE = "NEGATIVE"


class CallSentiment(str, Enum):
    POSITIVE = "POSITIVE"
    NEUTRAL = "NEUTRAL"
    NEGATIVE = "NEGATIVE"
    HOSTILE = "HOSTILE"


class CallOutcome(str, Enum):
    ANSWERED = "ANSWERED"
    VOICEMAIL = "VOICEMAIL"
    NO_ANSWER = "NO_ANSWER"
    BUSY = "BUSY"
    DISCONNECTED = "DISCONNECTED"
    DO_NOT_CALL = "DO_NOT_CALL"


class BankingAgentType(str, Enum):
    LOAN_RECOVERY_VOICE = "LOAN_RECOVERY_VOICE"
    LOAN_RECOVERY_SMS = "LOAN_RECOVERY_SMS"
    LOAN_RECOVERY_EMAIL = "LOAN_RECOVERY_EMAIL"
    CREDIT_SCORING = "CREDIT_SCORING"
    LOAN_UNDERWRITING = "LOAN_UNDERWRITING"
    FRAUD_DETECTION = "FRAUD_DETECTION"
    CUSTOMER_SERVICE_CHAT = "CUSTOMER_SERVICE_CHAT"
    VIRTUAL_ASSISTANT = "VIRTUAL_ASSISTANT"
    AML_MONITORING = "AML_MONITORING"
    KYC_VERIFICATION = "KYC_VERIFICATION"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Accept datetimes, ISO-8601 strings or epoch milliseconds; naive values are UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
    elif isinstance(value, str):
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    else:
        raise ValueError(f"Unsupported timestamp value: {value!r}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _pick(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first present key; records arrive in camelCase or snake_case."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


@dataclass(slots=True)
class ComplianceViolation:
    """Single regulatory finding produced by a validator."""

    violation_id: str
    agent_id: str
    framework: RegulatoryFramework
    severity: ViolationSeverity
    rule_id: str
    rule_name: str
    description: str
    context: Dict[str, Any] = field(default_factory=dict)
    source_type: SourceType = SourceType.OTHER
    source_id: str = ""
    status: ViolationStatus = ViolationStatus.OPEN
    created_at: datetime = field(default_factory=utcnow)
    resolved_at: Optional[datetime] = None
    resolved_by: Optional[str] = None
    resolution: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        for key in ("framework", "severity", "source_type", "status"):
            payload[key] = payload[key].value
        for key in ("created_at", "resolved_at"):
            if payload[key] is not None:
                payload[key] = payload[key].isoformat()
        return payload


def new_violation_id(rule_id: str) -> str:
    return f"{rule_id}-{uuid4().hex[:12]}"


@dataclass(slots=True)
class LoanRecoveryCall:
    """Debt-collection call record."""

    call_id: str
    agent_id: str
    borrower_id: str
    loan_id: str
    start_time: datetime
    phone_number: str = ""
    end_time: Optional[datetime] = None
    transcript: Optional[str] = None
    sentiment: CallSentiment = CallSentiment.NEUTRAL
    outcome: CallOutcome = CallOutcome.ANSWERED
    loan_type: Optional[str] = None
    amount_overdue: float = 0.0
    days_past_due: int = 0
    payment_promised: bool = False
    dispute_filed: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LoanRecoveryCall":
        return cls(
            call_id=str(_pick(data, "callId", "call_id", default="")),
            agent_id=str(_pick(data, "agentId", "agent_id", default="")),
            borrower_id=str(_pick(data, "borrowerId", "borrower_id", default="")),
            loan_id=str(_pick(data, "loanId", "loan_id", default="")),
            start_time=parse_timestamp(_pick(data, "startTime", "start_time")) or utcnow(),
            phone_number=str(_pick(data, "phoneNumber", "phone_number", default="")),
            end_time=parse_timestamp(_pick(data, "endTime", "end_time")),
            transcript=_pick(data, "transcript"),
            sentiment=CallSentiment(_pick(data, "sentiment", default="NEUTRAL")),
            outcome=CallOutcome(_pick(data, "outcome", default="ANSWERED")),
            loan_type=_pick(data, "loanType", "loan_type"),
            amount_overdue=float(_pick(data, "amountOverdue", "amount_overdue", default=0.0)),
            days_past_due=int(_pick(data, "daysPastDue", "days_past_due", default=0)),
            payment_promised=bool(_pick(data, "paymentPromised", "payment_promised", default=False)),
            dispute_filed=bool(_pick(data, "disputeFiled", "dispute_filed", default=False)),
        )


@dataclass(slots=True)
class FDCPACallContext:
    """Call-frequency and disclosure facts known at validation time."""

    borrower_timezone: str
    calls_today: int = 0
    calls_this_week: int = 0
    has_disclosure: bool = True

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FDCPACallContext":
        return cls(
            borrower_timezone=str(_pick(data, "borrowerTimezone", "borrower_timezone", default="UTC")),
            calls_today=int(_pick(data, "callsToday", "calls_today", default=0)),
            calls_this_week=int(_pick(data, "callsThisWeek", "calls_this_week", default=0)),
            has_disclosure=bool(_pick(data, "hasDisclosure", "has_disclosure", default=True)),
        )


@dataclass(slots=True)
class DecisionFactor:
    """Explainability factor attached to a credit decision."""

    factor: str
    impact: FactorImpact
    weight: Optional[float]
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DecisionFactor":
        weight = data.get("weight")
        return cls(
            factor=str(data.get("factor") or ""),
            impact=FactorImpact(data.get("impact", "POSITIVE")),
            weight=float(weight) if weight is not None else None,
            description=data.get("description"),
        )


@dataclass(slots=True)
class ProtectedAttributes:
    """Monitored for fairness only; never an input to the decision."""

    race: Optional[str] = None
    gender: Optional[str] = None
    age: Optional[int] = None
    marital_status: Optional[str] = None
    national_origin: Optional[str] = None
    religion: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ProtectedAttributes":
        age = data.get("age")
        return cls(
            race=data.get("race"),
            gender=data.get("gender"),
            age=int(age) if age is not None else None,
            marital_status=_pick(data, "maritalStatus", "marital_status"),
            national_origin=_pick(data, "nationalOrigin", "national_origin"),
            religion=data.get("religion"),
        )

    def get(self, attribute: str) -> Any:
        key = PROTECTED_ATTRIBUTE_ALIASES.get(attribute, attribute)
        return getattr(self, key, None)


PROTECTED_ATTRIBUTE_ALIASES = {
    "maritalStatus": "marital_status",
    "nationalOrigin": "national_origin",
}


@dataclass(slots=True)
class CreditScoringDecision:
    """Credit decision produced by a scoring or underwriting agent."""

    decision_id: str
    agent_id: str
    applicant_id: str
    decision: CreditDecisionOutcome
    credit_score: int
    primary_factors: List[DecisionFactor] = field(default_factory=list)
    protected_attributes: Optional[ProtectedAttributes] = None
    loan_amount: float = 0.0
    loan_purpose: str = ""
    applicant_income: float = 0.0
    debt_to_income: float = 0.0
    approved_amount: Optional[float] = None
    interest_rate: Optional[float] = None
    adverse_action_code: Optional[str] = None
    adverse_action_reason: Optional[str] = None
    model_name: Optional[str] = None
    model_version: Optional[str] = None
    regulatory_review_required: bool = False
    human_review_required: bool = False
    reviewed_by: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CreditScoringDecision":
        attributes = _pick(data, "protectedAttributes", "protected_attributes")
        return cls(
            decision_id=str(_pick(data, "decisionId", "decision_id", default="")),
            agent_id=str(_pick(data, "agentId", "agent_id", default="")),
            applicant_id=str(_pick(data, "applicantId", "applicant_id", default="")),
            decision=CreditDecisionOutcome(data["decision"]),
            credit_score=int(_pick(data, "creditScore", "credit_score", default=0)),
            primary_factors=[
                DecisionFactor.from_dict(item)
                for item in _pick(data, "primaryFactors", "primary_factors", default=[])
            ],
            protected_attributes=(
                ProtectedAttributes.from_dict(attributes) if isinstance(attributes, Mapping) else None
            ),
            loan_amount=float(_pick(data, "loanAmount", "loan_amount", default=0.0)),
            loan_purpose=str(_pick(data, "loanPurpose", "loan_purpose", default="")),
            applicant_income=float(_pick(data, "applicantIncome", "applicant_income", default=0.0)),
            debt_to_income=float(_pick(data, "debtToIncome", "debt_to_income", default=0.0)),
            approved_amount=_pick(data, "approvedAmount", "approved_amount"),
            interest_rate=_pick(data, "interestRate", "interest_rate"),
            adverse_action_code=_pick(data, "adverseActionCode", "adverse_action_code"),
            adverse_action_reason=_pick(data, "adverseActionReason", "adverse_action_reason"),
            model_name=_pick(data, "modelName", "model_name"),
            model_version=_pick(data, "modelVersion", "model_version"),
            regulatory_review_required=bool(
                _pick(data, "regulatoryReviewRequired", "regulatory_review_required", default=False)
            ),
            human_review_required=bool(
                _pick(data, "humanReviewRequired", "human_review_required", default=False)
            ),
            reviewed_by=_pick(data, "reviewedBy", "reviewed_by"),
            created_at=parse_timestamp(_pick(data, "createdAt", "created_at")) or utcnow(),
        )


@dataclass(slots=True)
class CohortStatistics:
    group_name: str
    total_applications: int
    approved_count: int
    denied_count: int
    approval_rate: float


@dataclass(slots=True)
class FairnessMetrics:
    overall_approval_rate: float
    approval_rates_by_group: Dict[str, float]
    disparate_impact_ratio: float
    statistical_parity_difference: float


@dataclass(slots=True)
class ValidationResult:
    """Common outcome shape for every validator."""

    is_compliant: bool
    violations: List[ComplianceViolation] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    fairness_metrics: Optional[FairnessMetrics] = None


__all__ = [
    "BankingAgentType",
    "CallOutcome",
    "CallSentiment",
    "CohortStatistics",
    "ComplianceViolation",
    "CreditDecisionOutcome",
    "CreditScoringDecision",
    "DecisionFactor",
    "FDCPACallContext",
    "FactorImpact",
    "FairnessMetrics",
    "LoanRecoveryCall",
    "ProtectedAttributes",
    "RegulatoryFramework",
    "SourceType",
    "ValidationResult",
    "ViolationSeverity",
    "ViolationStatus",
    "new_violation_id",
    "parse_timestamp",
]
