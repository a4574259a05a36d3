"""Persistence helpers (append-only audit logs)."""

from .audit import EvaluationAuditRecord, JsonlAuditLogger

__all__ = ["EvaluationAuditRecord", "JsonlAuditLogger"]
