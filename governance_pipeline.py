#!/usr/bin/env python3
"""
Batch driver for agent governance.

Loads the policy directory, evaluates a JSONL file of runtime contexts,
validates loan-recovery calls (FDCPA) and credit decisions (FCRA, ECOA,
disparate impact per protected attribute), appends everything to the
audit log and writes a JSON report.
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

load_dotenv()

from axiom_governance import get_version
from axiom_governance.compliance import (
    CreditScoringDecision,
    ECOAValidator,
    FCRAValidator,
    FDCPACallContext,
    FDCPAValidator,
    LoanRecoveryCall,
    ValidationResult,
)
from axiom_governance.config import AUDIT_LOG_PATH, POLICY_DIR, configure_logging, load_settings
from axiom_governance.policy import PolicyStore
from axiom_governance.storage import JsonlAuditLogger

DEFAULT_ATTRIBUTES = "race,gender,age"


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Agent governance batch pipeline")
    parser.add_argument("--policies-dir", type=Path, default=POLICY_DIR, help="Directory of policy files")
    parser.add_argument("--contexts-file", type=Path, default=None, help="JSONL of runtime contexts to evaluate")
    parser.add_argument(
        "--calls-file",
        type=Path,
        default=None,
        help='JSONL of {"call": {...}, "context": {...}} records for FDCPA validation',
    )
    parser.add_argument("--decisions-file", type=Path, default=None, help="JSONL of credit decisions")
    parser.add_argument(
        "--protected-attributes",
        default=DEFAULT_ATTRIBUTES,
        help="Comma-separated attributes for disparate impact analysis",
    )
    parser.add_argument("--audit-log", type=Path, default=AUDIT_LOG_PATH)
    parser.add_argument(
        "--json-out",
        type=Path,
        default=Path("project_bundle") / "governance_report.json",
    )
    parser.add_argument("--run-id", default=None, help="Optional identifier stamped on audit records")
    parser.add_argument("--log-level", default=None)
    return parser.parse_args(argv)


def print_step(message: str) -> None:
    print(f"[pipeline] {message}")


def read_jsonl(path: Path) -> List[Dict[str, Any]]:
    records: List[Dict[str, Any]] = []
    for line_number, line in enumerate(path.read_text(encoding="utf-8").splitlines(), start=1):
        if not line.strip():
            continue
        record = json.loads(line)
        if not isinstance(record, dict):
            raise ValueError(f"{path.name}:{line_number} is not a JSON object")
        records.append(record)
    return records


def summarise_result(result: ValidationResult) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "is_compliant": result.is_compliant,
        "violations": [violation.as_dict() for violation in result.violations],
        "warnings": list(result.warnings),
        "recommendations": list(result.recommendations),
    }
    if result.fairness_metrics is not None:
        payload["fairness_metrics"] = asdict(result.fairness_metrics)
    return payload


def evaluate_contexts(
    store: PolicyStore, contexts: List[Dict[str, Any]], audit: JsonlAuditLogger, metadata: Dict[str, Any]
) -> List[Dict[str, Any]]:
    results: List[Dict[str, Any]] = []
    for context in contexts:
        result = store.evaluate(context)
        audit.log_evaluation(context, result, metadata=metadata)
        results.append({"context": context, "result": asdict(result)})
    return results


def validate_calls(
    records: List[Dict[str, Any]], validator: FDCPAValidator, audit: JsonlAuditLogger, metadata: Dict[str, Any]
) -> List[Dict[str, Any]]:
    results: List[Dict[str, Any]] = []
    for record in records:
        call = LoanRecoveryCall.from_dict(record.get("call") or {})
        context = FDCPACallContext.from_dict(record.get("context") or {})
        result = validator.validate(call, context)
        audit.log_violations(result.violations, metadata={**metadata, "framework": "FDCPA"})
        results.append({"call_id": call.call_id, **summarise_result(result)})
    return results


def validate_decisions(
    decisions: List[CreditScoringDecision],
    fcra: FCRAValidator,
    ecoa: ECOAValidator,
    attributes: List[str],
    audit: JsonlAuditLogger,
    metadata: Dict[str, Any],
) -> Dict[str, Any]:
    per_decision: List[Dict[str, Any]] = []
    for decision in decisions:
        fcra_result = fcra.validate(decision)
        ecoa_result = ecoa.validate_decision(decision)
        audit.log_violations(fcra_result.violations, metadata={**metadata, "framework": "FCRA"})
        audit.log_violations(ecoa_result.violations, metadata={**metadata, "framework": "ECOA"})
        per_decision.append(
            {
                "decision_id": decision.decision_id,
                "fcra": summarise_result(fcra_result),
                "ecoa": summarise_result(ecoa_result),
            }
        )

    disparate_impact: Dict[str, Any] = {}
    for attribute in attributes:
        result = ecoa.analyze_disparate_impact(decisions, attribute)
        audit.log_violations(
            result.violations, metadata={**metadata, "framework": "ECOA", "protected_attribute": attribute}
        )
        disparate_impact[attribute] = summarise_result(result)

    report = ecoa.generate_fair_lending_report(decisions, attributes)
    return {
        "decisions": per_decision,
        "disparate_impact": disparate_impact,
        "fair_lending_report": {
            "summary": report.summary,
            "metrics": {name: asdict(metrics) for name, metrics in report.metrics.items()},
            "recommendations": report.recommendations,
        },
    }


def count_violations(report: Dict[str, Any]) -> int:
    total = sum(len(item["violations"]) for item in report.get("calls", []))
    decisions = report.get("decisions") or {}
    for item in decisions.get("decisions", []):
        total += len(item["fcra"]["violations"]) + len(item["ecoa"]["violations"])
    for item in decisions.get("disparate_impact", {}).values():
        total += len(item["violations"])
    return total


def run_pipeline(argv: Optional[List[str]] = None) -> Dict[str, Any]:
    args = parse_args(argv)
    configure_logging(args.log_level)

    attributes = [token.strip() for token in args.protected_attributes.split(",") if token.strip()]
    settings = load_settings()
    audit = JsonlAuditLogger(args.audit_log)

    store = PolicyStore.from_directory(args.policies_dir)
    snapshot = store.snapshot()
    print_step(f"Loaded {len(snapshot)} policies from {args.policies_dir} (version {snapshot.version[:12]})")
    metadata: Dict[str, Any] = {
        "policy_version": snapshot.version,
        "source": "governance_pipeline",
        "axiom_version": get_version(),
    }
    if args.run_id:
        metadata["run_id"] = args.run_id

    report: Dict[str, Any] = {
        "axiom_version": metadata["axiom_version"],
        "policy_version": snapshot.version,
        "policy_count": len(snapshot),
    }

    try:
        if args.contexts_file:
            contexts = read_jsonl(args.contexts_file)
            print_step(f"Evaluating {len(contexts)} contexts …")
            report["evaluations"] = evaluate_contexts(store, contexts, audit, metadata)

        if args.calls_file:
            calls = read_jsonl(args.calls_file)
            print_step(f"Validating {len(calls)} loan-recovery calls (FDCPA) …")
            report["calls"] = validate_calls(calls, FDCPAValidator(settings=settings), audit, metadata)

        if args.decisions_file:
            decisions = [CreditScoringDecision.from_dict(item) for item in read_jsonl(args.decisions_file)]
            print_step(f"Validating {len(decisions)} credit decisions (FCRA, ECOA) …")
            report["decisions"] = validate_decisions(
                decisions,
                FCRAValidator(settings=settings),
                ECOAValidator(settings=settings),
                attributes,
                audit,
                metadata,
            )
    except (OSError, ValueError, KeyError) as exc:
        print_step(f"ERROR: failed to read input: {exc}")
        sys.exit(1)

    report["violation_count"] = count_violations(report)
    args.json_out.parent.mkdir(parents=True, exist_ok=True)
    args.json_out.write_text(json.dumps(report, indent=2, default=str), encoding="utf-8")

    print_step(f"Violations found: {report['violation_count']}")
    print_step(f"JSON report written to {args.json_out}")
    print_step(f"Audit log appended at {args.audit_log}")
    return report


def main(argv: Optional[List[str]] = None) -> int:
    run_pipeline(argv)
    return 0


if __name__ == "__main__":
    sys.exit(main())
