import os

from axiom_governance.compliance import AGENT_REGULATORY_MAPPING, BankingAgentType, RegulatoryFramework, frameworks_for_agent
from axiom_governance.config import ComplianceSettings, load_settings


def test_defaults_match_statutory_limits(monkeypatch):
    for name in [key for key in os.environ if key.startswith("AXIOM_")]:
        monkeypatch.delenv(name)
    settings = load_settings()
    assert settings == ComplianceSettings()
    assert (settings.call_start_hour, settings.call_end_hour) == (8, 21)
    assert settings.disparate_impact_threshold == 0.80


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("AXIOM_FDCPA_MAX_CALLS_PER_DAY", "3")
    monkeypatch.setenv("AXIOM_ECOA_DISPARATE_IMPACT_THRESHOLD", "0.9")
    settings = load_settings()
    assert settings.max_calls_per_day == 3
    assert settings.disparate_impact_threshold == 0.9


def test_bad_values_fall_back_to_defaults(monkeypatch, caplog):
    monkeypatch.setenv("AXIOM_FDCPA_CALL_END_HOUR", "late")
    with caplog.at_level("WARNING"):
        settings = load_settings()
    assert settings.call_end_hour == 21
    assert "AXIOM_FDCPA_CALL_END_HOUR" in caplog.text


def test_agent_regulatory_mapping():
    assert frameworks_for_agent("CREDIT_SCORING") == (
        RegulatoryFramework.FCRA,
        RegulatoryFramework.ECOA,
        RegulatoryFramework.CFPB,
    )
    assert RegulatoryFramework.FDCPA in frameworks_for_agent(BankingAgentType.LOAN_RECOVERY_VOICE)
    assert set(AGENT_REGULATORY_MAPPING) == set(BankingAgentType)
