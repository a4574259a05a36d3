import json
import runpy
from pathlib import Path
from typing import Any, Callable, Dict, Iterable

REPO_ROOT = Path(__file__).resolve().parents[2]
SAMPLE_POLICY_DIR = REPO_ROOT / "project_bundle" / "policies"


def write_jsonl(path: Path, records: Iterable[Dict[str, Any]]) -> Path:
    path.write_text("\n".join(json.dumps(record) for record in records) + "\n", encoding="utf-8")
    return path


def load_pipeline(name: str = "run_pipeline") -> Callable[..., Any]:
    """Import the root-level batch driver without installing it."""
    namespace = runpy.run_path(str(REPO_ROOT / "governance_pipeline.py"))
    return namespace[name]


def decision_payload(decision_id: str, outcome: str, race: str, **overrides) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "decisionId": decision_id,
        "agentId": "underwriter",
        "applicantId": f"app-{decision_id}",
        "decision": outcome,
        "creditScore": 700 if outcome == "APPROVED" else 580,
        "primaryFactors": [
            {"factor": "payment history", "impact": "NEGATIVE", "weight": 0.35},
            {"factor": "credit utilisation", "impact": "NEGATIVE", "weight": 0.3},
            {"factor": "income", "impact": "POSITIVE", "weight": 0.2},
            {"factor": "recent inquiries", "impact": "NEGATIVE", "weight": 0.1},
            {"factor": "employment length", "impact": "POSITIVE", "weight": 0.05},
        ],
        "protectedAttributes": {"race": race},
        "modelName": "scorecard",
        "modelVersion": "3.1.0",
    }
    if outcome == "DENIED":
        payload["adverseActionCode"] = "AA004"
        payload["adverseActionReason"] = "Recent late payments or delinquencies on credit report"
    payload.update(overrides)
    return payload
