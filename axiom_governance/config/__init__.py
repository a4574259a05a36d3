"""Runtime configuration for axiom_governance."""

from .settings import (
    AUDIT_LOG_PATH,
    LOG_LEVEL,
    POLICY_DIR,
    ComplianceSettings,
    configure_logging,
    load_settings,
)

__all__ = [
    "AUDIT_LOG_PATH",
    "ComplianceSettings",
    "LOG_LEVEL",
    "POLICY_DIR",
    "configure_logging",
    "load_settings",
]
