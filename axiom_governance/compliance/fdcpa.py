"""
FDCPA (Fair Debt Collection Practices Act) checks for loan-recovery calls.

`FDCPAValidator.validate` audits a call after the fact and returns
violations; `FDCPAValidator.can_make_call` is the preventive gate to use
before dialing and returns an allowed/reason pair instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from axiom_governance.compliance.tables import DEFAULT_COMPLIANCE_TABLES, ComplianceTables
from axiom_governance.compliance.types import (
    CallSentiment,
    ComplianceViolation,
    FDCPACallContext,
    LoanRecoveryCall,
    RegulatoryFramework,
    SourceType,
    ValidationResult,
    ViolationSeverity,
    new_violation_id,
)
from axiom_governance.config.settings import ComplianceSettings, load_settings

logger = logging.getLogger("axiom_governance.compliance.fdcpa")

DISCLOSURE_WARNING = (
    "FDCPA-DISC-002: Standard disclosure phrases not found in transcript - manual review recommended"
)
HOSTILE_SENTIMENT_WARNING = "Call marked with hostile sentiment - review recommended"


def hour_in_timezone(moment: datetime, tz_name: str) -> int:
    """Local hour for `moment` in an IANA zone; falls back to the UTC hour on a bad zone."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    try:
        return moment.astimezone(ZoneInfo(tz_name)).hour
    except (ZoneInfoNotFoundError, ValueError, TypeError, OSError):
        logger.debug("Unknown timezone %r; using UTC hour", tz_name)
        return moment.astimezone(timezone.utc).hour


@dataclass(slots=True)
class CallPermission:
    allowed: bool
    reason: Optional[str] = None


@dataclass(slots=True)
class FDCPAValidator:
    """Validates loan-recovery calls against FDCPA time, frequency and language rules."""

    settings: ComplianceSettings = field(default_factory=load_settings)
    tables: ComplianceTables = DEFAULT_COMPLIANCE_TABLES

    def validate(self, call: LoanRecoveryCall, context: FDCPACallContext) -> ValidationResult:
        violations: List[ComplianceViolation] = []
        warnings: List[str] = []

        time_violation = self._check_call_time(call, context)
        if time_violation:
            violations.append(time_violation)

        violations.extend(self._check_call_frequency(call, context))

        if call.transcript:
            violations.extend(self._check_transcript(call))

        if not context.has_disclosure:
            violations.append(
                self._create_violation(
                    call,
                    "FDCPA-DISC-001",
                    "Missing Required Disclosure",
                    "Required FDCPA disclosure not provided during call",
                    ViolationSeverity.VIOLATION,
                )
            )
        elif call.transcript and not self._transcript_has_disclosure(call.transcript):
            # flag set but no disclosure phrase in the transcript: warn only
            warnings.append(DISCLOSURE_WARNING)

        if call.sentiment == CallSentiment.HOSTILE:
            warnings.append(HOSTILE_SENTIMENT_WARNING)

        return ValidationResult(is_compliant=not violations, violations=violations, warnings=warnings)

    def can_make_call(
        self,
        agent_id: str,
        borrower_timezone: str,
        calls_today: int,
        calls_this_week: int,
        *,
        now: Optional[datetime] = None,
    ) -> CallPermission:
        """Pre-dial gate: time window plus daily and weekly caps."""
        moment = now or datetime.now(timezone.utc)
        hour = hour_in_timezone(moment, borrower_timezone)
        settings = self.settings

        if not self._within_window(hour):
            return CallPermission(
                allowed=False,
                reason=(
                    f"Current time ({hour}:00) is outside FDCPA allowed hours "
                    f"({self._window_label()})"
                ),
            )
        if calls_today >= settings.max_calls_per_day:
            return CallPermission(
                allowed=False,
                reason=f"Daily call limit reached ({calls_today}/{settings.max_calls_per_day})",
            )
        if calls_this_week >= settings.max_calls_per_week:
            return CallPermission(
                allowed=False,
                reason=f"Weekly call limit reached ({calls_this_week}/{settings.max_calls_per_week})",
            )
        logger.debug("Agent %s cleared to call (tz=%s, hour=%d)", agent_id, borrower_timezone, hour)
        return CallPermission(allowed=True)

    def _within_window(self, hour: int) -> bool:
        return self.settings.call_start_hour <= hour < self.settings.call_end_hour

    def _window_label(self) -> str:
        return f"{self.settings.call_start_hour}:00 - {self.settings.call_end_hour}:00"

    def _check_call_time(
        self, call: LoanRecoveryCall, context: FDCPACallContext
    ) -> Optional[ComplianceViolation]:
        hour = hour_in_timezone(call.start_time, context.borrower_timezone)
        if self._within_window(hour):
            return None
        return self._create_violation(
            call,
            "FDCPA-TIME-001",
            "Call Time Violation",
            (
                f"Call placed at {hour}:00 {context.borrower_timezone}, "
                f"outside allowed hours ({self._window_label()})"
            ),
            ViolationSeverity.VIOLATION,
            {"local_hour": hour, "borrower_timezone": context.borrower_timezone},
        )

    def _check_call_frequency(
        self, call: LoanRecoveryCall, context: FDCPACallContext
    ) -> List[ComplianceViolation]:
        violations: List[ComplianceViolation] = []
        settings = self.settings

        if context.calls_today >= settings.max_calls_per_day:
            violations.append(
                self._create_violation(
                    call,
                    "FDCPA-FREQ-001",
                    "Daily Call Limit Exceeded",
                    (
                        f"Daily call limit exceeded: {context.calls_today} calls today "
                        f"(max: {settings.max_calls_per_day})"
                    ),
                    ViolationSeverity.VIOLATION,
                )
            )
        if context.calls_this_week >= settings.max_calls_per_week:
            violations.append(
                self._create_violation(
                    call,
                    "FDCPA-FREQ-002",
                    "Weekly Call Limit Exceeded",
                    (
                        f"Weekly call limit exceeded: {context.calls_this_week} calls this week "
                        f"(max: {settings.max_calls_per_week})"
                    ),
                    ViolationSeverity.VIOLATION,
                )
            )
        return violations

    def _check_transcript(self, call: LoanRecoveryCall) -> List[ComplianceViolation]:
        transcript = call.transcript or ""
        violations: List[ComplianceViolation] = []
        for pattern in self.tables.prohibited_language:
            match = pattern.search(transcript)
            if not match:
                continue
            violations.append(
                self._create_violation(
                    call,
                    "FDCPA-LANG-001",
                    "Prohibited Language Detected",
                    f'Prohibited language detected in transcript: "{match.group(0)}"',
                    ViolationSeverity.CRITICAL,
                    {"matched_pattern": pattern.pattern, "matched_text": match.group(0)},
                )
            )
        return violations

    def _transcript_has_disclosure(self, transcript: str) -> bool:
        lowered = transcript.lower()
        return any(phrase.lower() in lowered for phrase in self.tables.required_disclosures)

    def _create_violation(
        self,
        call: LoanRecoveryCall,
        rule_id: str,
        rule_name: str,
        description: str,
        severity: ViolationSeverity,
        extra_context: Optional[Dict[str, Any]] = None,
    ) -> ComplianceViolation:
        context: Dict[str, Any] = {
            "call_id": call.call_id,
            "borrower_id": call.borrower_id,
            "loan_id": call.loan_id,
            "tables_version": self.tables.version,
        }
        context.update(extra_context or {})
        return ComplianceViolation(
            violation_id=new_violation_id(rule_id),
            agent_id=call.agent_id,
            framework=RegulatoryFramework.FDCPA,
            severity=severity,
            rule_id=rule_id,
            rule_name=rule_name,
            description=description,
            context=context,
            source_type=SourceType.CALL,
            source_id=call.call_id,
        )


__all__ = ["CallPermission", "FDCPAValidator", "hour_in_timezone"]
