"""Rule persistence — a JSON file of camelCase rule records."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable

from idle_combat.core.rules import CombatRule, default_rules

logger = logging.getLogger(__name__)


class JsonRuleStore:
    """Loads and saves the rule set as a JSON list.

    Each record looks like::

        {"id": "rule_1", "priority": 1, "conditionType": "hp_below",
         "conditionValue": 75, "action": "holy_strike", "enabled": true}

    A missing or unreadable file yields the default rules.
    """

    __slots__ = ("_path",)

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[CombatRule]:
        if not self._path.exists():
            logger.info("No rules file at %s; using defaults", self._path)
            return default_rules()
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Could not read rules from %s (%s); using defaults", self._path, exc)
            return default_rules()
        if not isinstance(data, list):
            logger.warning("Rules file %s does not hold a list; using defaults", self._path)
            return default_rules()

        rules = [CombatRule.from_dict(rec) for rec in data if isinstance(rec, dict)]
        logger.info("Loaded %d rules from %s", len(rules), self._path)
        return rules

    def save(self, rules: Iterable[CombatRule]) -> None:
        records = [r.to_dict() for r in rules]
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(records, indent=2), encoding="utf-8")
        logger.info("Saved %d rules to %s", len(records), self._path)
