from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from axiom_governance.compliance import (
    CallOutcome,
    CallSentiment,
    FDCPACallContext,
    FDCPAValidator,
    LoanRecoveryCall,
    ViolationSeverity,
    hour_in_timezone,
)
from axiom_governance.compliance.fdcpa import DISCLOSURE_WARNING, HOSTILE_SENTIMENT_WARNING
from axiom_governance.config import ComplianceSettings

NEW_YORK = ZoneInfo("America/New_York")
CLEAN_TRANSCRIPT = "Hello, this is a debt collector calling about your account balance."


def make_call(start_time: datetime, transcript: str | None = CLEAN_TRANSCRIPT, **overrides) -> LoanRecoveryCall:
    payload = dict(
        call_id="call-1",
        agent_id="voice-agent",
        borrower_id="b-1",
        loan_id="loan-1",
        start_time=start_time,
        transcript=transcript,
    )
    payload.update(overrides)
    return LoanRecoveryCall(**payload)


def make_validator() -> FDCPAValidator:
    return FDCPAValidator(settings=ComplianceSettings())


def rule_ids(result) -> list[str]:
    return [violation.rule_id for violation in result.violations]


def test_call_at_22_local_is_flagged():
    call = make_call(datetime(2024, 3, 12, 22, 0, tzinfo=NEW_YORK))
    result = make_validator().validate(call, FDCPACallContext(borrower_timezone="America/New_York"))
    assert rule_ids(result) == ["FDCPA-TIME-001"]
    assert not result.is_compliant
    assert result.violations[0].context["local_hour"] == 22


def test_call_at_2059_local_is_allowed():
    call = make_call(datetime(2024, 3, 12, 20, 59, tzinfo=NEW_YORK))
    result = make_validator().validate(call, FDCPACallContext(borrower_timezone="America/New_York"))
    assert result.is_compliant
    assert result.violations == []
    assert result.warnings == []


def test_call_time_uses_borrower_timezone():
    # 14:00 UTC is 07:00 in Los Angeles during daylight saving time
    call = make_call(datetime(2024, 7, 1, 14, 0, tzinfo=timezone.utc))
    result = make_validator().validate(call, FDCPACallContext(borrower_timezone="America/Los_Angeles"))
    assert rule_ids(result) == ["FDCPA-TIME-001"]


def test_invalid_timezone_falls_back_to_utc():
    assert hour_in_timezone(datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc), "Mars/Olympus_Mons") == 12
    call = make_call(datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc))
    result = make_validator().validate(call, FDCPACallContext(borrower_timezone="Mars/Olympus_Mons"))
    assert result.is_compliant


def test_frequency_caps_are_inclusive():
    call = make_call(datetime(2024, 3, 12, 10, 0, tzinfo=NEW_YORK))
    context = FDCPACallContext(borrower_timezone="America/New_York", calls_today=7, calls_this_week=21)
    result = make_validator().validate(call, context)
    assert rule_ids(result) == ["FDCPA-FREQ-001", "FDCPA-FREQ-002"]

    under = FDCPACallContext(borrower_timezone="America/New_York", calls_today=6, calls_this_week=20)
    assert make_validator().validate(call, under).is_compliant


def test_prohibited_language_is_critical_per_pattern():
    call = make_call(
        datetime(2024, 3, 12, 10, 0, tzinfo=NEW_YORK),
        transcript="As a debt collector I can tell you we will take legal action and garnish your wages.",
    )
    result = make_validator().validate(call, FDCPACallContext(borrower_timezone="America/New_York"))
    assert rule_ids(result) == ["FDCPA-LANG-001", "FDCPA-LANG-001"]
    assert all(v.severity == ViolationSeverity.CRITICAL for v in result.violations)
    matched = {v.context["matched_text"].lower() for v in result.violations}
    assert matched == {"legal action", "garnish"}


def test_missing_disclosure_is_a_violation():
    call = make_call(datetime(2024, 3, 12, 10, 0, tzinfo=NEW_YORK))
    context = FDCPACallContext(borrower_timezone="America/New_York", has_disclosure=False)
    result = make_validator().validate(call, context)
    assert rule_ids(result) == ["FDCPA-DISC-001"]
    assert result.violations[0].severity == ViolationSeverity.VIOLATION


def test_unverifiable_disclosure_is_only_a_warning():
    call = make_call(datetime(2024, 3, 12, 10, 0, tzinfo=NEW_YORK), transcript="Hi, calling about your loan.")
    result = make_validator().validate(call, FDCPACallContext(borrower_timezone="America/New_York"))
    assert result.is_compliant
    assert result.warnings == [DISCLOSURE_WARNING]


def test_hostile_sentiment_adds_warning():
    call = make_call(datetime(2024, 3, 12, 10, 0, tzinfo=NEW_YORK), sentiment=CallSentiment.HOSTILE)
    result = make_validator().validate(call, FDCPACallContext(borrower_timezone="America/New_York"))
    assert result.is_compliant
    assert HOSTILE_SENTIMENT_WARNING in result.warnings


def test_violation_carries_call_context():
    call = make_call(datetime(2024, 3, 12, 23, 0, tzinfo=NEW_YORK))
    violation = make_validator().validate(call, FDCPACallContext(borrower_timezone="America/New_York")).violations[0]
    assert violation.agent_id == "voice-agent"
    assert violation.source_id == "call-1"
    assert violation.context["loan_id"] == "loan-1"
    assert violation.violation_id.startswith("FDCPA-TIME-001-")


def test_can_make_call_gate():
    validator = make_validator()
    morning = datetime(2024, 3, 12, 14, 0, tzinfo=timezone.utc)  # 10:00 in New York
    assert validator.can_make_call("a", "America/New_York", 0, 0, now=morning).allowed

    late = datetime(2024, 3, 13, 2, 0, tzinfo=timezone.utc)  # 22:00 in New York
    denied = validator.can_make_call("a", "America/New_York", 0, 0, now=late)
    assert not denied.allowed
    assert "outside FDCPA allowed hours" in denied.reason

    daily = validator.can_make_call("a", "America/New_York", 7, 0, now=morning)
    assert not daily.allowed and "Daily call limit" in daily.reason
    weekly = validator.can_make_call("a", "America/New_York", 0, 21, now=morning)
    assert not weekly.allowed and "Weekly call limit" in weekly.reason


def test_call_window_is_configurable():
    validator = FDCPAValidator(settings=ComplianceSettings(call_end_hour=23))
    call = make_call(datetime(2024, 3, 12, 22, 0, tzinfo=NEW_YORK))
    assert validator.validate(call, FDCPACallContext(borrower_timezone="America/New_York")).is_compliant


def test_call_from_dict_accepts_camel_case():
    call = LoanRecoveryCall.from_dict(
        {
            "callId": "c-9",
            "agentId": "agent",
            "borrowerId": "b",
            "loanId": "l",
            "startTime": "2024-03-12T15:00:00Z",
            "sentiment": "HOSTILE",
            "outcome": "VOICEMAIL",
        }
    )
    assert call.start_time.tzinfo is not None
    assert call.sentiment == CallSentiment.HOSTILE
    assert call.outcome == CallOutcome.VOICEMAIL
    context = FDCPACallContext.from_dict({"borrowerTimezone": "Europe/London", "callsToday": 2})
    assert context.calls_today == 2
