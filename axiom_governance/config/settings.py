"""
Environment-driven thresholds for the compliance validators and CLIs.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger("axiom_governance.config")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r; using %s", name, raw, default)
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r; using %s", name, raw, default)
        return default


@dataclass(slots=True, frozen=True)
class ComplianceSettings:
    """Statutory limits applied by the FDCPA, FCRA and ECOA validators."""

    # FDCPA: borrower-local calling window is [start, end)
    call_start_hour: int = 8
    call_end_hour: int = 21
    max_calls_per_day: int = 7
    max_calls_per_week: int = 21

    # FCRA
    min_explanation_factors: int = 4
    recommended_denial_factors: int = 5
    max_dispute_response_days: int = 30
    min_dispute_reason_length: int = 10

    # ECOA
    disparate_impact_threshold: float = 0.80
    statistical_parity_threshold: float = 0.10
    protected_age: int = 62


def load_settings() -> ComplianceSettings:
    """Build settings from AXIOM_* environment variables."""
    defaults = ComplianceSettings()
    return ComplianceSettings(
        call_start_hour=_env_int("AXIOM_FDCPA_CALL_START_HOUR", defaults.call_start_hour),
        call_end_hour=_env_int("AXIOM_FDCPA_CALL_END_HOUR", defaults.call_end_hour),
        max_calls_per_day=_env_int("AXIOM_FDCPA_MAX_CALLS_PER_DAY", defaults.max_calls_per_day),
        max_calls_per_week=_env_int("AXIOM_FDCPA_MAX_CALLS_PER_WEEK", defaults.max_calls_per_week),
        min_explanation_factors=_env_int(
            "AXIOM_FCRA_MIN_EXPLANATION_FACTORS", defaults.min_explanation_factors
        ),
        recommended_denial_factors=_env_int(
            "AXIOM_FCRA_RECOMMENDED_DENIAL_FACTORS", defaults.recommended_denial_factors
        ),
        max_dispute_response_days=_env_int(
            "AXIOM_FCRA_MAX_DISPUTE_RESPONSE_DAYS", defaults.max_dispute_response_days
        ),
        min_dispute_reason_length=_env_int(
            "AXIOM_FCRA_MIN_DISPUTE_REASON_LENGTH", defaults.min_dispute_reason_length
        ),
        disparate_impact_threshold=_env_float(
            "AXIOM_ECOA_DISPARATE_IMPACT_THRESHOLD", defaults.disparate_impact_threshold
        ),
        statistical_parity_threshold=_env_float(
            "AXIOM_ECOA_STATISTICAL_PARITY_THRESHOLD", defaults.statistical_parity_threshold
        ),
        protected_age=_env_int("AXIOM_ECOA_PROTECTED_AGE", defaults.protected_age),
    )


# Default locations used by the CLIs
POLICY_DIR = Path(os.getenv("AXIOM_POLICY_DIR", str(Path("project_bundle") / "policies")))
AUDIT_LOG_PATH = Path(
    os.getenv("AXIOM_AUDIT_LOG", str(Path("project_bundle") / "governance_audit.jsonl"))
)
LOG_LEVEL = os.getenv("AXIOM_LOG_LEVEL", "INFO")


def configure_logging(level: Optional[str | int] = None) -> None:
    """Install a basic handler unless the host application already did."""
    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=level or LOG_LEVEL,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


__all__ = [
    "AUDIT_LOG_PATH",
    "ComplianceSettings",
    "LOG_LEVEL",
    "POLICY_DIR",
    "configure_logging",
    "load_settings",
]
