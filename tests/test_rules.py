"""Tests for rule parsing, persistence, and rule-engine selection."""

import json
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from tests.helpers.combat_bench import CombatBench, rule
from idle_combat.ai.rule_engine import RuleEngine
from idle_combat.core.abilities import ABILITY_REGISTRY
from idle_combat.core.enums import ActionKind, ConditionType
from idle_combat.core.rules import CombatRule, default_rules, parse_condition, parse_flag, sort_rules
from idle_combat.utils.rules_store import JsonRuleStore


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

class TestRuleParsing:

    def test_camel_case_record(self):
        r = CombatRule.from_dict({
            "id": "rule_1", "priority": 1, "conditionType": "hp_below",
            "conditionValue": 75, "action": "holy_strike", "enabled": True,
        })
        assert r.rule_id == "rule_1"
        assert r.condition_type == ConditionType.HP_BELOW
        assert r.condition_value == 75
        assert r.action == "holy_strike"

    def test_unknown_condition_becomes_unknown(self):
        assert parse_condition("mana_below") == ConditionType.UNKNOWN
        assert parse_condition(None) == ConditionType.UNKNOWN
        assert parse_condition(" HP_ABOVE ") == ConditionType.HP_ABOVE

    def test_bad_numbers_clamp_to_zero(self):
        r = CombatRule.from_dict({"id": "x", "priority": "high", "conditionValue": "lots"})
        assert r.priority == 0
        assert r.condition_value == 0.0

    def test_enabled_flag_parsing(self):
        assert CombatRule.from_dict({"id": "x", "enabled": "false"}).enabled is False
        assert CombatRule.from_dict({"id": "x", "enabled": "0"}).enabled is False
        assert CombatRule.from_dict({"id": "x", "enabled": 0}).enabled is False
        assert CombatRule.from_dict({"id": "x", "enabled": "True"}).enabled is True
        assert CombatRule.from_dict({"id": "x"}).enabled is True
        assert parse_flag(None, default=False) is False

    def test_to_dict_keeps_integer_values(self):
        d = default_rules()[0].to_dict()
        assert d == {
            "id": "rule_1", "priority": 1, "conditionType": "hp_below",
            "conditionValue": 75, "action": "holy_strike", "enabled": True,
        }
        assert isinstance(d["conditionValue"], int)

    def test_sort_is_stable(self):
        a = rule("melee", priority=2, rule_id="a")
        b = rule("holy_strike", priority=1, rule_id="b")
        c = rule("none", priority=2, rule_id="c")
        assert [r.rule_id for r in sort_rules([a, b, c])] == ["b", "a", "c"]


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------

class TestRuleSelection:

    def test_first_satisfied_rule_wins(self):
        bench = CombatBench()
        engine = RuleEngine([rule("melee", 2), rule("holy_strike", 1)])
        proposal = engine.select(bench.state)
        assert proposal.kind == ActionKind.CAST_INSTANT
        assert proposal.rule_id == "r1"

    def test_unaffordable_cast_falls_through(self):
        bench = CombatBench()
        bench.player.mana = 10
        engine = RuleEngine([rule("holy_strike", 1), rule("melee", 2)])
        proposal = engine.select(bench.state)
        assert proposal.kind == ActionKind.MELEE
        assert proposal.rule_id == "r2"

    def test_cooldown_falls_through(self):
        bench = CombatBench()
        bench.timers.ability_cooldowns["holy_strike"] = 3000
        engine = RuleEngine([rule("holy_strike", 1), rule("melee", 2)])
        assert engine.select(bench.state).kind == ActionKind.MELEE

    def test_hp_below_is_strict(self):
        bench = CombatBench()
        engine = RuleEngine([rule("holy_strike", 1, ConditionType.HP_BELOW, 75)])
        bench.player.hp = 75
        assert engine.select(bench.state) is None
        bench.player.hp = 74
        assert engine.select(bench.state).kind == ActionKind.CAST_INSTANT

    def test_hp_above_is_inclusive(self):
        bench = CombatBench()
        engine = RuleEngine([rule("melee", 1, ConditionType.HP_ABOVE, 75)])
        bench.player.hp = 75
        assert engine.select(bench.state) is not None
        bench.player.hp = 74
        assert engine.select(bench.state) is None

    def test_disabled_rules_are_skipped(self):
        bench = CombatBench()
        engine = RuleEngine([rule("holy_strike", 1, enabled=False), rule("melee", 2)])
        assert engine.select(bench.state).kind == ActionKind.MELEE

    def test_unknown_condition_never_matches(self):
        bench = CombatBench()
        engine = RuleEngine([rule("melee", 1, ConditionType.UNKNOWN)])
        assert engine.select(bench.state) is None

    def test_no_match_means_idle(self):
        bench = CombatBench()
        engine = RuleEngine([rule("holy_strike", 1, ConditionType.HP_BELOW, 10)])
        assert engine.select(bench.state) is None

    def test_skipped_during_gcd(self):
        bench = CombatBench()
        bench.timers.global_cooldown = 1
        assert RuleEngine([rule("melee")]).select(bench.state) is None

    def test_skipped_while_dead(self):
        bench = CombatBench()
        bench.player.hp = 0
        assert RuleEngine([rule("melee")]).select(bench.state) is None

    def test_summon_cap_falls_through(self):
        bench = CombatBench(max_summons=2)
        ability = ABILITY_REGISTRY["summon_guardian"]
        bench.state.summons.spawn(ability, 5)
        bench.state.summons.spawn(ability, 5)
        engine = RuleEngine([rule("summon_guardian", 1), rule("melee", 2)])
        assert engine.select(bench.state).kind == ActionKind.MELEE

    def test_unknown_action_still_selected(self):
        bench = CombatBench()
        proposal = RuleEngine([rule("dance")]).select(bench.state)
        assert proposal.kind == ActionKind.UNKNOWN
        assert proposal.action == "dance"


class TestAuraToggleFeasibility:

    def test_always_toggle_only_when_inactive(self):
        bench = CombatBench()
        engine = RuleEngine([rule("toggle_windfury", 1), rule("melee", 2)])
        assert engine.select(bench.state).kind == ActionKind.TOGGLE_AURA
        bench.state.active_auras.add("windfury_aura")
        assert engine.select(bench.state).kind == ActionKind.MELEE

    def test_hp_condition_toggles_toward_desired_state(self):
        bench = CombatBench()
        engine = RuleEngine([rule("toggle_windfury", 1, ConditionType.HP_ABOVE, 50), rule("melee", 2)])
        # Healthy and inactive: wants it on
        assert engine.select(bench.state).kind == ActionKind.TOGGLE_AURA
        bench.state.active_auras.add("windfury_aura")
        # Healthy and active: nothing to change
        assert engine.select(bench.state).kind == ActionKind.MELEE
        # Hurt and active: wants it off
        bench.player.hp = 30
        assert engine.select(bench.state).kind == ActionKind.TOGGLE_AURA


# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------

class TestJsonRuleStore:

    def test_missing_file_gives_defaults(self, tmp_path):
        store = JsonRuleStore(tmp_path / "rules.json")
        assert store.load() == default_rules()

    def test_corrupt_file_gives_defaults(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text("{not json", encoding="utf-8")
        assert JsonRuleStore(path).load() == default_rules()

    def test_non_list_gives_defaults(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text('{"id": "x"}', encoding="utf-8")
        assert JsonRuleStore(path).load() == default_rules()

    def test_save_writes_camel_case(self, tmp_path):
        path = tmp_path / "nested" / "rules.json"
        store = JsonRuleStore(path)
        store.save([rule("melee", 3, ConditionType.HP_ABOVE, 20, rule_id="m")])
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data == [{
            "id": "m", "priority": 3, "conditionType": "hp_above",
            "conditionValue": 20, "action": "melee", "enabled": True,
        }]
        loaded = store.load()
        assert loaded[0].condition_type == ConditionType.HP_ABOVE
        assert loaded[0].priority == 3
