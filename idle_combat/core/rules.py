"""Combat rules — externally authored condition → action pairs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from idle_combat.core.enums import ConditionType

_CONDITION_NAMES: dict[str, ConditionType] = {
    "hp_below": ConditionType.HP_BELOW,
    "hp_above": ConditionType.HP_ABOVE,
    "always": ConditionType.ALWAYS,
}


def parse_condition(raw: Any) -> ConditionType:
    """Parse a persisted condition string.  Anything unrecognized → UNKNOWN."""
    if isinstance(raw, ConditionType):
        return raw
    if isinstance(raw, str):
        return _CONDITION_NAMES.get(raw.strip().lower(), ConditionType.UNKNOWN)
    return ConditionType.UNKNOWN


_FALSE_STRINGS = frozenset({"false", "0", "no", "off", ""})


def parse_flag(raw: Any, default: bool = True) -> bool:
    """Parse a persisted boolean.  Strings like ``"false"`` and ``"0"`` are False."""
    if raw is None:
        return default
    if isinstance(raw, str):
        return raw.strip().lower() not in _FALSE_STRINGS
    return bool(raw)


def condition_name(cond: ConditionType) -> str:
    for name, value in _CONDITION_NAMES.items():
        if value == cond:
            return name
    return "unknown"


@dataclass(frozen=True, slots=True)
class CombatRule:
    """One prioritized rule.  Lower priority numbers are evaluated first."""

    rule_id: str
    priority: int
    condition_type: ConditionType
    condition_value: float = 0.0
    action: str = "none"
    enabled: bool = True

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CombatRule:
        """Build a rule from a persisted record.

        Accepts both the camelCase keys the game saved
        (``conditionType``, ``conditionValue``) and snake_case keys.
        """
        def pick(*keys: str, default: Any = None) -> Any:
            for k in keys:
                if k in data:
                    return data[k]
            return default

        try:
            value = float(pick("conditionValue", "condition_value", default=0) or 0)
        except (TypeError, ValueError):
            value = 0.0
        try:
            priority = int(pick("priority", default=0))
        except (TypeError, ValueError):
            priority = 0

        return cls(
            rule_id=str(pick("id", "rule_id", default="")),
            priority=priority,
            condition_type=parse_condition(pick("conditionType", "condition_type")),
            condition_value=value,
            action=str(pick("action", default="none")),
            enabled=parse_flag(pick("enabled")),
        )

    def to_dict(self) -> dict[str, Any]:
        """Persisted record in the game's camelCase format."""
        value: float | int = self.condition_value
        if float(value).is_integer():
            value = int(value)
        return {
            "id": self.rule_id,
            "priority": self.priority,
            "conditionType": condition_name(self.condition_type),
            "conditionValue": value,
            "action": self.action,
            "enabled": self.enabled,
        }


def default_rules() -> list[CombatRule]:
    """Starter rule set: Holy Strike below 75% HP, otherwise melee."""
    return [
        CombatRule("rule_1", 1, ConditionType.HP_BELOW, 75, "holy_strike", True),
        CombatRule("rule_2", 2, ConditionType.ALWAYS, 0, "melee", True),
    ]


def sort_rules(rules: list[CombatRule]) -> list[CombatRule]:
    """Stable sort by ascending priority; ties keep list order."""
    return sorted(rules, key=lambda r: r.priority)
