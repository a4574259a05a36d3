import json

from axiom_governance.compliance import ComplianceViolation, RegulatoryFramework, ViolationSeverity
from axiom_governance.policy import EvaluationResult
from axiom_governance.storage import JsonlAuditLogger


def read_lines(path):
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]


def test_log_evaluation_appends_record(tmp_path):
    path = tmp_path / "nested" / "audit.jsonl"
    logger = JsonlAuditLogger(path)
    result = EvaluationResult(
        allowed=False,
        status="deny",
        reason="Matched policy: No SQL (no-sql)",
        policy_id="no-sql",
        actions=["log"],
        latency_ms=0.12,
        confidence=1.0,
    )
    logger.log_evaluation(
        {"agentId": "bot-1", "input": "DROP TABLE users;"},
        result,
        metadata={"policy_version": "abc123", "run_id": "run-7"},
    )
    logger.log_evaluation({"task_type": "collections"}, result)

    records = read_lines(path)
    assert len(records) == 2
    first = records[0]
    assert first["event_type"] == "policy_evaluation"
    assert first["agent_id"] == "bot-1"
    assert first["policy_id"] == "no-sql"
    assert first["policy_version"] == "abc123"
    assert first["run_id"] == "run-7"
    assert first["timestamp"].endswith("Z")
    assert records[1]["task_type"] == "collections"
    assert records[1]["agent_id"] is None


def test_log_violations_writes_one_line_each(tmp_path):
    path = tmp_path / "audit.jsonl"
    violations = [
        ComplianceViolation(
            violation_id=f"ECOA-PROH-001-{index}",
            agent_id="underwriter",
            framework=RegulatoryFramework.ECOA,
            severity=ViolationSeverity.CRITICAL,
            rule_id="ECOA-PROH-001",
            rule_name="Prohibited Factor in Decision",
            description="uses gender",
        )
        for index in range(2)
    ]
    written = JsonlAuditLogger(path).log_violations(violations, metadata={"framework": "ECOA"})

    records = read_lines(path)
    assert written == 2
    assert [record["violation"]["violation_id"] for record in records] == ["ECOA-PROH-001-0", "ECOA-PROH-001-1"]
    assert all(record["event_type"] == "compliance_violation" for record in records)
    assert records[0]["violation"]["severity"] == "CRITICAL"
    assert records[0]["metadata"] == {"framework": "ECOA"}
