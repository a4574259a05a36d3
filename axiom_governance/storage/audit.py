"""
Audit logging for policy decisions and compliance findings.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping

from axiom_governance.compliance.types import ComplianceViolation
from axiom_governance.policy.types import EvaluationResult


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    return str(value)


@dataclass(slots=True)
class EvaluationAuditRecord:
    """Structured log entry for one policy evaluation."""

    timestamp: str
    agent_id: str | None
    task_type: str | None
    allowed: bool
    status: str
    reason: str
    policy_id: str | None
    actions: list[str]
    confidence: float
    latency_ms: float
    policy_version: str | None
    context: Dict[str, Any]
    metadata: Dict[str, Any]
    event_type: str = "policy_evaluation"
    run_id: str | None = None


class JsonlAuditLogger:
    """Append-only JSONL logger for evaluations and violations."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def log_evaluation(
        self,
        context: Mapping[str, Any],
        result: EvaluationResult,
        metadata: Dict[str, Any] | None = None,
    ) -> EvaluationAuditRecord:
        meta = dict(metadata or {})
        run_id = meta.get("run_id")
        agent_id = context.get("agentId", context.get("agent_id"))
        task_type = context.get("taskType", context.get("task_type"))

        record = EvaluationAuditRecord(
            timestamp=_timestamp(),
            agent_id=str(agent_id) if agent_id is not None else None,
            task_type=str(task_type) if task_type is not None else None,
            allowed=result.allowed,
            status=result.status,
            reason=result.reason,
            policy_id=result.policy_id,
            actions=list(result.actions),
            confidence=result.confidence,
            latency_ms=result.latency_ms,
            policy_version=meta.get("policy_version"),
            context=dict(context),
            metadata=meta,
            run_id=str(run_id) if run_id else None,
        )
        self._append(asdict(record))
        return record

    def log_violations(
        self,
        violations: Iterable[ComplianceViolation],
        metadata: Dict[str, Any] | None = None,
    ) -> int:
        """Append one line per violation; returns the number written."""
        meta = dict(metadata or {})
        count = 0
        for violation in violations:
            payload: Dict[str, Any] = {
                "timestamp": _timestamp(),
                "event_type": "compliance_violation",
                "violation": violation.as_dict(),
                "metadata": meta,
            }
            run_id = meta.get("run_id")
            if run_id:
                payload["run_id"] = str(run_id)
            self._append(payload)
            count += 1
        return count

    def _append(self, payload: Dict[str, Any]) -> None:
        with self.path.open("a", encoding="utf-8") as fh:
            fh.write(json.dumps(payload, ensure_ascii=False, default=_json_default) + "\n")


__all__ = ["EvaluationAuditRecord", "JsonlAuditLogger"]
