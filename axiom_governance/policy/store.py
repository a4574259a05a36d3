"""
Policy store with copy-on-write snapshots.

Readers grab the current `PolicySnapshot` reference and evaluate against it;
`reload()` builds a complete new snapshot and swaps the reference in one
assignment, so an in-flight evaluation never sees a mix of old and new
policies.
"""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Sequence, Tuple

import yaml

from axiom_governance.policy.evaluator import RuleEvaluator
from axiom_governance.policy.types import EvaluationResult, Policy, PolicyValidationError
from axiom_governance.utils.checksum import (
    POLICY_FILE_PATTERNS,
    compute_directory_checksums,
    fingerprint_payload,
    verify_checksums,
)

logger = logging.getLogger("axiom_governance.policy.store")


class PolicySource(Protocol):
    """Anything that can produce the current policy list."""

    def load(self) -> List[Policy]:
        ...


def parse_policies(entries: Iterable[Any], *, origin: str = "<memory>") -> List[Policy]:
    """Convert declarative entries, skipping (and logging) malformed ones."""
    policies: List[Policy] = []
    for index, entry in enumerate(entries):
        if isinstance(entry, Policy):
            policies.append(entry)
            continue
        try:
            policies.append(Policy.from_dict(entry))
        except PolicyValidationError as exc:
            logger.warning("Skipping policy #%d from %s: %s", index, origin, exc)
    return policies


@dataclass(slots=True)
class StaticPolicySource:
    """In-memory policy list (tests, embedding applications)."""

    entries: Sequence[Any] = ()

    def load(self) -> List[Policy]:
        return parse_policies(self.entries)


@dataclass(slots=True)
class DirectoryPolicySource:
    """Loads every JSON/YAML file in a directory; each file holds a list of policies."""

    path: Path
    patterns: Tuple[str, ...] = POLICY_FILE_PATTERNS

    def load(self) -> List[Policy]:
        if not self.path.exists():
            logger.warning("Policy directory not found: %s", self.path)
            return []

        policies: List[Policy] = []
        for file_path in self._files():
            try:
                document = self._read(file_path)
            except (OSError, ValueError, yaml.YAMLError) as exc:
                logger.error("Failed to load policy file %s: %s", file_path.name, exc)
                continue
            if not isinstance(document, list):
                logger.warning("Policy file %s does not contain a list; skipping", file_path.name)
                continue
            loaded = parse_policies(document, origin=file_path.name)
            logger.info("Loaded %d policies from %s", len(loaded), file_path.name)
            policies.extend(loaded)
        return policies

    def checksums(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        return compute_directory_checksums(self.path, self.patterns)

    def _files(self) -> List[Path]:
        seen: Dict[str, Path] = {}
        for pattern in self.patterns:
            for file_path in self.path.glob(pattern):
                seen[file_path.name] = file_path
        return [seen[name] for name in sorted(seen)]

    @staticmethod
    def _read(file_path: Path) -> Any:
        text = file_path.read_text(encoding="utf-8")
        if file_path.suffix == ".json":
            return json.loads(text)
        return yaml.safe_load(text)


@dataclass(slots=True, frozen=True)
class PolicySnapshot:
    """Immutable, versioned view of the policy set."""

    policies: Tuple[Policy, ...] = ()
    version: str = ""
    loaded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    file_checksums: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def build(cls, policies: Iterable[Policy], file_checksums: Optional[Mapping[str, str]] = None) -> "PolicySnapshot":
        frozen = tuple(policies)
        version = fingerprint_payload([policy.to_dict() for policy in frozen])
        return cls(policies=frozen, version=version, file_checksums=dict(file_checksums or {}))

    def __len__(self) -> int:
        return len(self.policies)


class PolicyStore:
    """Owns the current snapshot and hands it to evaluations."""

    def __init__(
        self,
        source: Optional[PolicySource] = None,
        *,
        evaluator: Optional[RuleEvaluator] = None,
        autoload: bool = True,
    ) -> None:
        self.source = source
        self.evaluator = evaluator or RuleEvaluator()
        self._write_lock = threading.Lock()
        self._snapshot = PolicySnapshot.build(())
        if source is not None and autoload:
            self.reload()

    @classmethod
    def from_directory(cls, path: Path, **kwargs: Any) -> "PolicyStore":
        return cls(DirectoryPolicySource(Path(path)), **kwargs)

    def snapshot(self) -> PolicySnapshot:
        return self._snapshot

    @property
    def policies(self) -> Tuple[Policy, ...]:
        return self._snapshot.policies

    def evaluate(self, context: Mapping[str, Any]) -> EvaluationResult:
        snapshot = self._snapshot
        return self.evaluator.evaluate(snapshot.policies, context)

    def reload(self) -> PolicySnapshot:
        """Re-read the source and atomically publish the new snapshot."""
        if self.source is None:
            raise RuntimeError("PolicyStore has no source to reload from")
        # checksum before reading so an edit made during load() is seen as a change
        checksums = self._source_checksums()
        policies = self.source.load()
        return self._publish(PolicySnapshot.build(policies, checksums))

    def replace(self, policies: Iterable[Any]) -> PolicySnapshot:
        """Swap in an explicit policy set (declarative mappings or Policy objects)."""
        return self._publish(PolicySnapshot.build(parse_policies(policies)))

    def reload_if_changed(self) -> bool:
        """Reload only when the source's files differ from the current snapshot."""
        if not isinstance(self.source, DirectoryPolicySource):
            return False
        unchanged, mismatches = verify_checksums(self.source.checksums(), dict(self._snapshot.file_checksums))
        if unchanged:
            return False
        logger.info("Policy files changed (%s); reloading", ", ".join(sorted(mismatches)))
        self.reload()
        return True

    def _source_checksums(self) -> Dict[str, str]:
        if isinstance(self.source, DirectoryPolicySource):
            return self.source.checksums()
        return {}

    def _publish(self, snapshot: PolicySnapshot) -> PolicySnapshot:
        with self._write_lock:
            previous = self._snapshot
            self._snapshot = snapshot
        logger.info(
            "Published policy snapshot %s (%d policies, previous %s)",
            snapshot.version[:12],
            len(snapshot),
            previous.version[:12],
        )
        return snapshot


__all__ = [
    "DirectoryPolicySource",
    "PolicySnapshot",
    "PolicySource",
    "PolicyStore",
    "StaticPolicySource",
    "parse_policies",
]
