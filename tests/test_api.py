"""Tests for the EngineManager and the FastAPI route handlers.

Route functions are called directly with an EngineManager that is never
started, so every test runs on the calling thread.
"""

import json
import sys
import os
import time
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from fastapi import HTTPException

from idle_combat.api.app import create_app
from idle_combat.api.dependencies import get_engine_manager, set_engine_manager
from idle_combat.api.engine_manager import EngineManager
from idle_combat.api.routes.actions import cast, toggle
from idle_combat.api.routes.config import get_config
from idle_combat.api.routes.control import ControlAction, control, get_speed, set_speed
from idle_combat.api.routes.equipment import equip, unequip
from idle_combat.api.routes.metadata import get_abilities, get_enemies, get_enums, get_items
from idle_combat.api.routes.rules import get_rules, put_rules
from idle_combat.api.routes.state import get_state
from idle_combat.api.schemas import RuleSchema, RulesResponse
from idle_combat.config import CombatConfig
from idle_combat.core.items import ITEM_REGISTRY


@pytest.fixture
def manager():
    m = EngineManager(CombatConfig(seed=5))
    yield m
    m.stop()


def _wait_for(predicate, timeout: float = 3.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return False


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------

class TestStateEndpoint:

    def test_initial_state(self, manager):
        resp = get_state(since_tick=0, manager=manager)
        assert resp.tick == 0
        assert resp.running is False
        assert resp.player.name == "Cleric"
        assert resp.player.hp == resp.player.max_hp == 100
        assert resp.player.status == "Ready"
        assert resp.enemy.name == "Skeleton"
        assert resp.summons == []
        assert resp.combat_log[0].message == "A wild Skeleton appears!"
        assert resp.tally.kills == 0

    def test_events_reach_the_log(self, manager):
        manager.cast_ability("holy_strike")
        resp = get_state(since_tick=0, manager=manager)
        assert any("Holy Strike" in e.message for e in resp.events)
        assert any(n.target == "enemy" for n in resp.numbers)


# ---------------------------------------------------------------------------
# Actions and equipment
# ---------------------------------------------------------------------------

class TestActionEndpoints:

    def test_cast_then_rejected_on_gcd(self, manager):
        first = cast("holy_strike", manager=manager)
        assert first.status == "ok"
        second = cast("holy_strike", manager=manager)
        assert second.status == "rejected"
        assert "global cooldown" in second.message

    def test_manager_reports_reason_with_command(self, manager):
        assert manager.cast_ability("holy_strike").ok
        outcome = manager.cast_ability("holy_strike")
        assert outcome.ok is False
        assert outcome.message.startswith("Cannot cast Holy Strike: global cooldown")
        assert outcome.tick == 0

    def test_rejection_does_not_read_published_snapshot(self, manager, monkeypatch):
        manager.cast_ability("holy_strike")
        # A snapshot published by a later tick must not supply the reason
        monkeypatch.setattr(manager, "get_snapshot", lambda: None)
        resp = cast("holy_strike", manager=manager)
        assert resp.status == "rejected"
        assert "global cooldown" in resp.message

    def test_cast_unknown_ability_404(self, manager):
        with pytest.raises(HTTPException) as exc:
            cast("fireball", manager=manager)
        assert exc.value.status_code == 404

    def test_toggle_aura(self, manager):
        resp = toggle("windfury_aura", manager=manager)
        assert resp.status == "ok"
        state = get_state(since_tick=0, manager=manager)
        assert state.player.active_auras == ["windfury_aura"]
        assert state.player.max_mana == 50
        assert state.player.mana_reserved == 50

    def test_toggle_unknown_aura_404(self, manager):
        with pytest.raises(HTTPException) as exc:
            toggle("thorns", manager=manager)
        assert exc.value.status_code == 404

    def test_summon_listed_in_state(self, manager):
        assert cast("summon_guardian", manager=manager).status == "ok"
        state = get_state(since_tick=0, manager=manager)
        assert len(state.summons) == 1
        assert state.summons[0].name == "Spirit Guardian"


class TestEquipmentEndpoints:

    def test_equip_item_not_in_bag_rejected(self, manager):
        resp = equip("iron_mace", manager=manager)
        assert resp.status == "rejected"

    def test_equip_and_unequip(self, manager):
        with manager._engine_lock:
            manager._engine.state.player.inventory.add_item("iron_mace")
        assert equip("iron_mace", manager=manager).status == "ok"
        state = get_state(since_tick=0, manager=manager)
        assert state.player.equipment.weapon == "iron_mace"
        assert state.player.damage == 14
        assert unequip("weapon", manager=manager).status == "ok"
        assert get_state(since_tick=0, manager=manager).player.bag == ["iron_mace"]

    def test_unknown_item_and_slot_404(self, manager):
        with pytest.raises(HTTPException):
            equip("excalibur", manager=manager)
        with pytest.raises(HTTPException):
            unequip("boots", manager=manager)


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------

class TestRulesEndpoints:

    def test_get_default_rules(self, manager):
        resp = get_rules(manager=manager)
        assert [r.action for r in resp.rules] == ["holy_strike", "melee"]
        assert resp.rules[0].condition_type == "hp_below"

    def test_put_replaces_and_sorts(self, manager):
        body = RulesResponse(rules=[
            RuleSchema(id="b", priority=5, conditionType="always", conditionValue=0, action="melee"),
            RuleSchema(id="a", priority=1, conditionType="hp_below", conditionValue=40, action="holy_strike"),
        ])
        resp = put_rules(body, manager=manager)
        assert [r.id for r in resp.rules] == ["a", "b"]
        assert [r.id for r in get_rules(manager=manager).rules] == ["a", "b"]

    def test_unknown_condition_kept(self, manager):
        body = RulesResponse(rules=[
            RuleSchema(id="x", priority=1, conditionType="mana_below", conditionValue=10, action="melee"),
        ])
        resp = put_rules(body, manager=manager)
        assert resp.rules[0].condition_type == "unknown"

    def test_rules_persisted_to_file(self, tmp_path):
        path = tmp_path / "rules.json"
        m = EngineManager(CombatConfig(rules_file=str(path)))
        body = RulesResponse(rules=[RuleSchema(id="only", priority=1, action="melee")])
        put_rules(body, manager=m)
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data[0]["id"] == "only"
        assert data[0]["conditionType"] == "always"

        reloaded = EngineManager(CombatConfig(rules_file=str(path)))
        assert [r.rule_id for r in reloaded.get_rules()] == ["only"]


# ---------------------------------------------------------------------------
# Control and config
# ---------------------------------------------------------------------------

class TestControlEndpoints:

    def test_pause_when_not_running_is_error(self, manager):
        resp = control(ControlAction.pause, manager=manager)
        assert resp.status == "error"

    def test_reset_keeps_rules(self, manager):
        put_rules(RulesResponse(rules=[RuleSchema(id="m", priority=1, action="melee")]), manager=manager)
        manager.cast_ability("holy_strike")
        resp = control(ControlAction.reset, manager=manager)
        assert resp.status == "ok"
        assert resp.tick == 0
        state = get_state(since_tick=0, manager=manager)
        assert state.enemy.hp == 100
        assert state.player.mana == 100
        assert [r.id for r in get_rules(manager=manager).rules] == ["m"]

    def test_speed_changes_time_scale(self, manager):
        resp = set_speed(scale=2.0, manager=manager)
        assert resp.time_scale == pytest.approx(2.0)
        assert resp.tick_rate == pytest.approx(0.025)
        assert get_speed(manager=manager).time_scale == pytest.approx(2.0)
        assert manager.time_scale == pytest.approx(2.0)
        assert get_config(manager=manager).time_scale == pytest.approx(2.0)

    def test_config_reports_timings(self, manager):
        cfg = get_config(manager=manager)
        assert cfg.seed == 5
        assert cfg.gcd_duration_ms == 1000
        assert cfg.melee_swing_time_ms == 4500
        assert cfg.time_scale == pytest.approx(1.0)

    def test_start_ticks_and_stop(self, manager):
        manager.tick_rate = 0.001
        assert control(ControlAction.start, manager=manager).status == "ok"
        assert control(ControlAction.start, manager=manager).status == "noop"
        assert _wait_for(lambda: manager.get_snapshot().tick >= 3)
        assert control(ControlAction.stop, manager=manager).status == "ok"
        assert not manager.running
        assert control(ControlAction.stop, manager=manager).status == "error"
        stopped_at = manager.get_snapshot().tick
        time.sleep(0.05)
        assert manager.get_snapshot().tick == stopped_at

    def test_step_advances_one_tick_while_paused(self, manager):
        manager.start()
        manager.pause()
        time.sleep(0.1)
        before = manager.get_snapshot().tick
        control(ControlAction.step, manager=manager)
        assert _wait_for(lambda: manager.get_snapshot().tick == before + 1)
        time.sleep(0.1)
        assert manager.get_snapshot().tick == before + 1


# ---------------------------------------------------------------------------
# Metadata and wiring
# ---------------------------------------------------------------------------

class TestMetadataEndpoints:

    def test_enums(self):
        resp = get_enums()
        assert "unknown" not in resp.condition_types
        assert set(resp.condition_types) == {"always", "hp_below", "hp_above"}
        assert "toggle_windfury" in resp.actions
        assert resp.equipment_slots == ["weapon", "armor", "accessory"]

    def test_items(self):
        resp = get_items()
        assert len(resp["items"]) == len(ITEM_REGISTRY)
        assert "skeleton" in resp["loot_tables"]

    def test_abilities_and_auras(self):
        resp = get_abilities()
        assert {a["ability_id"] for a in resp["abilities"]} == {"holy_strike", "summon_guardian"}
        assert resp["auras"][0]["aura_id"] == "windfury_aura"

    def test_enemies(self):
        names = {e["name"] for e in get_enemies()["enemies"]}
        assert names == {"Skeleton", "Zombie"}


class TestWiring:

    def test_dependency_requires_manager(self):
        set_engine_manager(None)
        with pytest.raises(RuntimeError):
            get_engine_manager()

    def test_dependency_returns_manager(self, manager):
        set_engine_manager(manager)
        try:
            assert get_engine_manager() is manager
        finally:
            set_engine_manager(None)

    def test_app_mounts_versioned_routes(self):
        app = create_app(CombatConfig(), autostart=False)
        paths = set(app.openapi()["paths"])
        assert "/api/v1/state" in paths
        assert "/api/v1/control/{action}" in paths
        assert "/api/v1/actions/cast/{ability_id}" in paths
        assert "/api/v1/metadata/enums" in paths
