"""
CLI to evaluate one runtime context against a policy directory.
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from axiom_governance.config import AUDIT_LOG_PATH, POLICY_DIR, configure_logging
from axiom_governance.policy import PolicyStore
from axiom_governance.storage import JsonlAuditLogger


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Evaluate an agent action against governance policies.")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--context",
        help="Runtime context as an inline JSON object.",
    )
    source.add_argument(
        "--context-file",
        type=Path,
        help="Path to a JSON file holding the runtime context.",
    )
    parser.add_argument(
        "--policies-dir",
        type=Path,
        default=POLICY_DIR,
        help="Directory of *.json / *.yaml policy files.",
    )
    parser.add_argument(
        "--audit",
        action="store_true",
        help="Append the decision to the audit log.",
    )
    parser.add_argument(
        "--audit-log",
        type=Path,
        default=AUDIT_LOG_PATH,
        help="Audit log path used with --audit.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (defaults to AXIOM_LOG_LEVEL).",
    )
    return parser.parse_args(argv)


def load_context(args: argparse.Namespace) -> Dict[str, Any]:
    raw = args.context if args.context is not None else args.context_file.read_text(encoding="utf-8")
    context = json.loads(raw)
    if not isinstance(context, dict):
        raise ValueError("Context must be a JSON object")
    return context


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    args = parse_args(argv)
    configure_logging(args.log_level)

    try:
        context = load_context(args)
    except (OSError, ValueError) as exc:
        print(f"ERROR: could not read context: {exc}", file=sys.stderr)
        return 2

    store = PolicyStore.from_directory(args.policies_dir)
    result = store.evaluate(context)
    payload = asdict(result)
    payload["policy_version"] = store.snapshot().version

    if args.audit:
        JsonlAuditLogger(args.audit_log).log_evaluation(
            context,
            result,
            metadata={"policy_version": payload["policy_version"], "source": "evaluate_policy"},
        )

    print(json.dumps(payload, indent=2))
    return 0 if result.allowed else 1


if __name__ == "__main__":
    sys.exit(main())
