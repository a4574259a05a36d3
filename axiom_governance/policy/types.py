"""
Dataclasses describing declarative policies and evaluation results.

Policies arrive as plain JSON/YAML mappings; `Policy.from_dict` turns them
into an immutable rule tree whose nodes carry an explicit `kind` tag
("condition" or "group").
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Tuple, Union

POLICY_TYPES = ("content_filter", "rate_limit", "access_control", "task_restriction", "compliance")
POLICY_SCOPES = ("global", "agent", "task")
POLICY_EFFECTS = ("allow", "deny", "warn")
GROUP_LOGIC = ("AND", "OR")
OPERATORS = (
    "equals",
    "not_equals",
    "contains",
    "not_contains",
    "regex",
    "gt",
    "lt",
    "in_list",
    "matches_pii",
    "is_toxic",
    "rate_limit_exceeded",
)


class PolicyValidationError(ValueError):
    """Raised when a declarative policy cannot be turned into a rule tree."""


@dataclass(slots=True, frozen=True)
class PolicyCondition:
    """Leaf comparison of a context field against a value."""

    kind: ClassVar[str] = "condition"

    field: str
    operator: str
    value: Any = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PolicyCondition":
        field_path = data.get("field")
        operator = data.get("operator")
        if not isinstance(field_path, str) or not field_path:
            raise PolicyValidationError(f"Condition is missing a field path: {dict(data)!r}")
        if not isinstance(operator, str) or not operator:
            raise PolicyValidationError(f"Condition on '{field_path}' is missing an operator")
        value = data.get("value")
        if isinstance(value, list):
            value = tuple(value)
        return cls(field=field_path, operator=operator, value=value)

    def to_dict(self) -> Dict[str, Any]:
        value = list(self.value) if isinstance(self.value, tuple) else self.value
        return {"field": self.field, "operator": self.operator, "value": value}


@dataclass(slots=True, frozen=True)
class PolicyGroup:
    """AND/OR combination of conditions and nested groups."""

    kind: ClassVar[str] = "group"

    logic: str = "AND"
    conditions: Tuple["RuleNode", ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PolicyGroup":
        logic = str(data.get("logic", "AND")).upper()
        if logic not in GROUP_LOGIC:
            raise PolicyValidationError(f"Unsupported group logic '{logic}'")
        raw_items = data.get("conditions") or []
        if not isinstance(raw_items, (list, tuple)):
            raise PolicyValidationError("Group conditions must be a list")
        return cls(logic=logic, conditions=tuple(parse_rule_node(item) for item in raw_items))

    def to_dict(self) -> Dict[str, Any]:
        return {"logic": self.logic, "conditions": [item.to_dict() for item in self.conditions]}


RuleNode = Union[PolicyCondition, PolicyGroup]


def parse_rule_node(data: Mapping[str, Any]) -> RuleNode:
    """Build a condition or group from its declarative form."""
    if not isinstance(data, Mapping):
        raise PolicyValidationError(f"Rule entries must be mappings, got {type(data).__name__}")
    kind = data.get("kind")
    if kind == "group" or (kind is None and "logic" in data):
        return PolicyGroup.from_dict(data)
    if kind not in (None, "condition"):
        raise PolicyValidationError(f"Unknown rule kind '{kind}'")
    return PolicyCondition.from_dict(data)


@dataclass(slots=True, frozen=True)
class Policy:
    """Declarative rule with scope, effect and priority."""

    id: str
    name: str
    type: str
    scope: str
    effect: str
    priority: int
    rules: PolicyGroup = field(default_factory=PolicyGroup)
    actions: Tuple[Any, ...] = ()
    target: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Policy":
        if not isinstance(data, Mapping):
            raise PolicyValidationError(f"Policy must be a mapping, got {type(data).__name__}")
        policy_id = data.get("id")
        if not policy_id:
            raise PolicyValidationError("Policy is missing an id")
        rules = data.get("rules")
        if not isinstance(rules, Mapping):
            raise PolicyValidationError(f"Policy '{policy_id}' has no root rule group")

        scope = data.get("scope", "global")
        effect = data.get("effect", "deny")
        policy_type = data.get("type", "access_control")
        if scope not in POLICY_SCOPES:
            raise PolicyValidationError(f"Policy '{policy_id}' has unknown scope '{scope}'")
        if effect not in POLICY_EFFECTS:
            raise PolicyValidationError(f"Policy '{policy_id}' has unknown effect '{effect}'")
        if policy_type not in POLICY_TYPES:
            raise PolicyValidationError(f"Policy '{policy_id}' has unknown type '{policy_type}'")
        raw_priority = data.get("priority", 0)
        if isinstance(raw_priority, float) and not raw_priority.is_integer():
            raise PolicyValidationError(f"Policy '{policy_id}' has a non-integer priority {raw_priority!r}")
        try:
            priority = int(raw_priority)
        except (TypeError, ValueError) as exc:
            raise PolicyValidationError(f"Policy '{policy_id}' has a non-integer priority") from exc

        target = data.get("target")
        return cls(
            id=str(policy_id),
            name=str(data.get("name") or policy_id),
            type=policy_type,
            scope=scope,
            effect=effect,
            priority=priority,
            rules=PolicyGroup.from_dict(rules),
            actions=tuple(data.get("actions") or ()),
            target=str(target) if target is not None else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "scope": self.scope,
            "effect": self.effect,
            "priority": self.priority,
            "rules": self.rules.to_dict(),
            "actions": list(self.actions),
        }
        if self.target is not None:
            payload["target"] = self.target
        return payload


@dataclass(slots=True)
class EvaluationResult:
    """Decision returned by the dispatcher; `allowed` is False only for deny."""

    allowed: bool
    status: str  # "allow", "deny", "warn"
    reason: str
    policy_id: Optional[str] = None
    actions: List[Any] = field(default_factory=list)
    latency_ms: float = 0.0
    confidence: float = 0.0

    @property
    def is_default(self) -> bool:
        return self.policy_id is None


__all__ = [
    "EvaluationResult",
    "GROUP_LOGIC",
    "OPERATORS",
    "POLICY_EFFECTS",
    "POLICY_SCOPES",
    "POLICY_TYPES",
    "Policy",
    "PolicyCondition",
    "PolicyGroup",
    "PolicyValidationError",
    "RuleNode",
    "parse_rule_node",
]
