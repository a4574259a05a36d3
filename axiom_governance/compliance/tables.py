"""
Regulation-backed rule tables consumed by the validators.

Validators take a `ComplianceTables` bundle; pass a different one to change
the rules. Bump `TABLES_VERSION` whenever an entry changes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Tuple

from axiom_governance.compliance.types import BankingAgentType, RegulatoryFramework

TABLES_VERSION = "2024.1"

# FDCPA: threatening, harassing or abusive collection language
PROHIBITED_LANGUAGE_PATTERNS: Tuple[re.Pattern[str], ...] = (
    re.compile(r"threat(en|ening|s)?", re.IGNORECASE),
    re.compile(r"lawsuit|legal action|sue you", re.IGNORECASE),
    re.compile(r"arrest|jail|prison|warrant", re.IGNORECASE),
    re.compile(r"garnish(ment)?|wage garnishment", re.IGNORECASE),
    re.compile(r"destroy your credit", re.IGNORECASE),
    re.compile(r"tell your (employer|family|friends)", re.IGNORECASE),
    re.compile(r"you('re| are) (a )?liar", re.IGNORECASE),
    re.compile(r"deadbeat|loser|scam", re.IGNORECASE),
    re.compile(r"we('ll| will) (come to|visit) your (home|house|workplace)", re.IGNORECASE),
    re.compile(r"violence|hurt you", re.IGNORECASE),
)

# FDCPA mini-Miranda phrases; any one of them counts as a verifiable disclosure
REQUIRED_DISCLOSURES: Tuple[str, ...] = (
    "debt collector",
    "collecting a debt",
    "any information obtained will be used for that purpose",
)

# FCRA adverse action reason codes
ADVERSE_ACTION_REASONS: Dict[str, str] = {
    "AA001": "Credit score does not meet minimum requirements",
    "AA002": "Insufficient credit history length",
    "AA003": "Debt-to-income ratio exceeds guidelines",
    "AA004": "Recent late payments or delinquencies on credit report",
    "AA005": "Too many recent credit inquiries",
    "AA006": "Bankruptcy appears on credit report",
    "AA007": "Income does not meet minimum requirements",
    "AA008": "Employment history indicates instability",
    "AA009": "Existing financial obligations are too high",
    "AA010": "Collection accounts appear on credit report",
}

CREDIT_RIGHTS_NOTICE = (
    "You have the right to:\n"
    "1. Obtain a free copy of your credit report from the credit bureau(s) within 60 days\n"
    "2. Dispute any inaccurate information in your credit report\n"
    "3. Request the creditor reconsider their decision if your situation has changed\n"
    "4. Contact the Consumer Financial Protection Bureau with any complaints\n"
    "\n"
    "For more information, visit: www.consumerfinance.gov/learnmore"
)

# ECOA protected classes as they tend to appear in factor names
PROHIBITED_FACTOR_TERMS: Tuple[str, ...] = (
    "race",
    "color",
    "religion",
    "national origin",
    "nationality",
    "sex",
    "gender",
    "marital status",
    "married",
    "single",
    "divorced",
    "welfare",
    "public assistance",
    "food stamps",
)

AGE_FACTOR_TERMS: Tuple[str, ...] = ("age",)
MARITAL_FACTOR_TERMS: Tuple[str, ...] = ("marital", "married", "spouse")


@dataclass(slots=True, frozen=True)
class ComplianceTables:
    """Bundle of the tables above; validators take one of these."""

    version: str = TABLES_VERSION
    prohibited_language: Tuple[re.Pattern[str], ...] = PROHIBITED_LANGUAGE_PATTERNS
    required_disclosures: Tuple[str, ...] = REQUIRED_DISCLOSURES
    adverse_action_reasons: Dict[str, str] = field(default_factory=lambda: dict(ADVERSE_ACTION_REASONS))
    credit_rights_notice: str = CREDIT_RIGHTS_NOTICE
    prohibited_factor_terms: Tuple[str, ...] = PROHIBITED_FACTOR_TERMS
    age_factor_terms: Tuple[str, ...] = AGE_FACTOR_TERMS
    marital_factor_terms: Tuple[str, ...] = MARITAL_FACTOR_TERMS


DEFAULT_COMPLIANCE_TABLES = ComplianceTables()


def mentions_term(text: str, term: str) -> bool:
    """Whole-word, case-insensitive match so 'age' does not fire on 'mortgage'."""
    return re.search(rf"\b{re.escape(term)}\b", text, flags=re.IGNORECASE) is not None


AGENT_REGULATORY_MAPPING: Dict[BankingAgentType, Tuple[RegulatoryFramework, ...]] = {
    BankingAgentType.LOAN_RECOVERY_VOICE: (
        RegulatoryFramework.FDCPA,
        RegulatoryFramework.TCPA,
        RegulatoryFramework.CFPB,
    ),
    BankingAgentType.LOAN_RECOVERY_SMS: (
        RegulatoryFramework.FDCPA,
        RegulatoryFramework.TCPA,
        RegulatoryFramework.CFPB,
    ),
    BankingAgentType.LOAN_RECOVERY_EMAIL: (RegulatoryFramework.FDCPA, RegulatoryFramework.CFPB),
    BankingAgentType.CREDIT_SCORING: (
        RegulatoryFramework.FCRA,
        RegulatoryFramework.ECOA,
        RegulatoryFramework.CFPB,
    ),
    BankingAgentType.LOAN_UNDERWRITING: (
        RegulatoryFramework.FCRA,
        RegulatoryFramework.ECOA,
        RegulatoryFramework.CFPB,
        RegulatoryFramework.DODD_FRANK,
    ),
    BankingAgentType.FRAUD_DETECTION: (RegulatoryFramework.BSA_AML, RegulatoryFramework.GLBA),
    BankingAgentType.CUSTOMER_SERVICE_CHAT: (RegulatoryFramework.GLBA, RegulatoryFramework.CFPB),
    BankingAgentType.VIRTUAL_ASSISTANT: (RegulatoryFramework.GLBA, RegulatoryFramework.CFPB),
    BankingAgentType.AML_MONITORING: (RegulatoryFramework.BSA_AML,),
    BankingAgentType.KYC_VERIFICATION: (RegulatoryFramework.BSA_AML, RegulatoryFramework.GLBA),
}


def frameworks_for_agent(agent_type: BankingAgentType | str) -> Tuple[RegulatoryFramework, ...]:
    """Frameworks an agent of the given type must be audited against."""
    return AGENT_REGULATORY_MAPPING.get(BankingAgentType(agent_type), ())


__all__ = [
    "ADVERSE_ACTION_REASONS",
    "AGENT_REGULATORY_MAPPING",
    "CREDIT_RIGHTS_NOTICE",
    "ComplianceTables",
    "DEFAULT_COMPLIANCE_TABLES",
    "PROHIBITED_FACTOR_TERMS",
    "PROHIBITED_LANGUAGE_PATTERNS",
    "REQUIRED_DISCLOSURES",
    "TABLES_VERSION",
    "frameworks_for_agent",
    "mentions_term",
]
