"""Checksum helpers used to version policy snapshots and detect edited policy files."""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any, Dict, Iterable, Tuple

POLICY_FILE_PATTERNS = ("*.json", "*.yaml", "*.yml")


def compute_directory_checksums(path: Path, patterns: Iterable[str] = POLICY_FILE_PATTERNS) -> Dict[str, str]:
    """Compute SHA256 checksums for matching files in a directory."""
    checksums: Dict[str, str] = {}
    for pattern in patterns:
        for file_path in sorted(path.glob(pattern)):
            checksums[file_path.name] = sha256_of_file(file_path)
    return checksums


def sha256_of_file(path: Path) -> str:
    hasher = hashlib.sha256()
    with path.open("rb") as fh:
        for chunk in iter(lambda: fh.read(8192), b""):
            hasher.update(chunk)
    return hasher.hexdigest()


def fingerprint_payload(payload: Any) -> str:
    """Stable SHA256 over a JSON-serialisable structure (keys sorted)."""
    canonical = json.dumps(payload, sort_keys=True, ensure_ascii=False, separators=(",", ":"), default=str)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def verify_checksums(actual: Dict[str, str], expected: Dict[str, str]) -> Tuple[bool, Dict[str, Tuple[str, str]]]:
    """Compare computed checksums with expected mapping."""
    mismatches: Dict[str, Tuple[str, str]] = {}
    success = True
    for name, expected_hash in expected.items():
        actual_hash = actual.get(name)
        if actual_hash != expected_hash:
            mismatches[name] = (expected_hash, actual_hash or "missing")
            success = False
    for name, actual_hash in actual.items():
        if name not in expected:
            mismatches[name] = ("unexpected", actual_hash)
            success = False
    return success, mismatches
