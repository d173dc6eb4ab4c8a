"""Tests for the action executor: melee swings, casts, auras and procs."""

import dataclasses
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from tests.helpers.combat_bench import CombatBench, melee_rule, rule
from idle_combat.actions.damage import FlatArmorMitigation, NoMitigation, round_half_up
from idle_combat.core.abilities import ABILITY_REGISTRY, AURA_REGISTRY
from idle_combat.core.enums import DamageType, LogCategory, TargetSide


@pytest.fixture
def sure_proc(monkeypatch):
    """Make the bonus-strike aura proc on every qualifying attack."""
    aura = dataclasses.replace(AURA_REGISTRY["windfury_aura"], proc_chance=1.0)
    monkeypatch.setitem(AURA_REGISTRY, "windfury_aura", aura)
    return aura


def _state_key(bench: CombatBench) -> tuple:
    t = bench.timers
    return (
        bench.player.hp, bench.player.mana, bench.player.max_mana, bench.enemy.hp,
        t.global_cooldown, dict(t.ability_cooldowns), t.is_swinging, t.swing_remaining,
        len(bench.state.summons),
    )


# ---------------------------------------------------------------------------
# Damage policy
# ---------------------------------------------------------------------------

class TestDamagePolicy:

    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(3.5) == 4
        assert round_half_up(2.49) == 2

    def test_flat_armor_floor_is_one(self):
        assert FlatArmorMitigation().apply(10, 3) == 7
        assert FlatArmorMitigation().apply(10, 50) == 1

    def test_no_mitigation_ignores_armor(self):
        assert NoMitigation().apply(10, 50) == 10


# ---------------------------------------------------------------------------
# Melee
# ---------------------------------------------------------------------------

class TestMeleeSwing:

    def test_swing_lands_after_swing_time(self):
        bench = CombatBench(rules=[melee_rule()])
        bench.run_ticks(1)
        assert bench.timers.is_swinging
        assert bench.timers.swing_remaining == 4500
        bench.run_ticks(89)
        assert bench.enemy.hp == 100
        bench.run_ticks(1)
        assert bench.enemy.hp == 90
        assert bench.messages("strikes with their mace for 10 damage")

    def test_new_swing_starts_on_the_landing_tick(self):
        bench = CombatBench(rules=[melee_rule()])
        bench.run_ticks(91)
        assert bench.timers.is_swinging
        assert bench.timers.swing_remaining == 4500

    def test_cast_interrupts_swing(self):
        bench = CombatBench(rules=[melee_rule()])
        bench.run_ticks(10)
        assert bench.timers.is_swinging
        assert bench.engine.cast_ability("holy_strike")
        assert not bench.timers.is_swinging
        assert bench.messages("interrupts their swing")
        # Interrupted swing deals nothing; only the Holy Strike landed
        assert bench.enemy.hp == 75


# ---------------------------------------------------------------------------
# Casting
# ---------------------------------------------------------------------------

class TestInstantCast:

    def test_holy_strike_costs_and_cooldowns(self):
        bench = CombatBench()
        assert bench.engine.cast_ability("holy_strike")
        assert bench.player.mana == 75
        assert bench.timers.global_cooldown == 1000
        assert bench.timers.ability_cooldowns["holy_strike"] == 6000
        # 2.5x a 10-damage melee roll
        assert bench.enemy.hp == 75

    def test_holy_strike_heals_for_damage_dealt(self):
        bench = CombatBench()
        bench.player.hp = 50
        bench.engine.cast_ability("holy_strike")
        assert bench.player.hp == 75
        assert bench.events_by_category(LogCategory.HEAL)

    def test_heal_capped_at_max_hp(self):
        bench = CombatBench()
        bench.player.hp = 90
        bench.engine.cast_ability("holy_strike")
        assert bench.player.hp == 100

    def test_floating_numbers_emitted(self):
        bench = CombatBench()
        bench.player.hp = 50
        bench.engine.cast_ability("holy_strike")
        amounts = sorted(n.amount for n in bench.sink.numbers)
        assert amounts == [25, 25]


class TestRejectedCasts:

    @pytest.mark.parametrize("setup, reason", [
        (lambda b: setattr(b.player, "mana", 10), "not enough mana"),
        (lambda b: setattr(b.timers, "global_cooldown", 300), "global cooldown"),
        (lambda b: b.timers.ability_cooldowns.update(holy_strike=2000), "on cooldown"),
        (lambda b: setattr(b.player, "hp", 0), "dead"),
    ])
    def test_rejection_leaves_state_untouched(self, setup, reason):
        bench = CombatBench(rules=[melee_rule()])
        bench.run_ticks(2)
        setup(bench)
        before = _state_key(bench)
        assert bench.engine.cast_ability("holy_strike") is False
        assert _state_key(bench) == before
        last = bench.engine.combat_log[0]
        assert last.category == LogCategory.SYSTEM
        assert reason in last.message

    def test_unknown_ability(self):
        bench = CombatBench()
        before = _state_key(bench)
        assert bench.engine.cast_ability("fireball") is False
        assert _state_key(bench) == before
        assert "Unknown ability 'fireball'" in bench.engine.combat_log[0].message

    def test_summon_cap_rejected(self):
        bench = CombatBench(max_summons=1)
        bench.state.summons.spawn(ABILITY_REGISTRY["summon_guardian"], 5)
        before = _state_key(bench)
        assert bench.engine.cast_ability("summon_guardian") is False
        assert _state_key(bench) == before
        assert "too many summons" in bench.engine.combat_log[0].message


class TestSummonCast:

    def test_summon_damage_captured_at_cast(self):
        bench = CombatBench()
        assert bench.engine.cast_ability("summon_guardian")
        summons = list(bench.state.summons)
        assert len(summons) == 1
        assert summons[0].damage == 5
        assert summons[0].hp == 30
        assert summons[0].time_remaining == 20000
        assert bench.player.mana == 60
        assert bench.timers.global_cooldown == 1000
        assert bench.timers.ability_cooldowns["summon_guardian"] == 10000

        # Later gear changes do not touch the existing summon
        bench.player.inventory.add_item("lightbringer")
        bench.engine.equip("lightbringer")
        assert bench.player.damage == 22
        assert list(bench.state.summons)[0].damage == 5


# ---------------------------------------------------------------------------
# Auras
# ---------------------------------------------------------------------------

class TestAuraToggle:

    def test_reservation_halves_max_mana(self):
        bench = CombatBench()
        assert bench.engine.toggle_aura("windfury_aura")
        assert bench.player.max_mana == 50
        assert bench.player.mana == 50
        assert bench.timers.global_cooldown == 500

    def test_deactivation_restores_pool_but_not_mana(self):
        bench = CombatBench()
        bench.engine.toggle_aura("windfury_aura")
        bench.engine.toggle_aura("windfury_aura")
        assert "windfury_aura" not in bench.state.active_auras
        assert bench.player.max_mana == 100
        assert bench.player.mana == 50

    def test_reservation_includes_equipment_pool(self):
        bench = CombatBench()
        bench.player.inventory.add_item("mana_pendant")
        bench.engine.equip("mana_pendant")
        assert bench.player.max_mana == 120
        bench.engine.toggle_aura("windfury_aura")
        assert bench.player.max_mana == 60

    def test_odd_pool_floors(self):
        bench = CombatBench(player_base_mana=101)
        bench.engine.toggle_aura("windfury_aura")
        assert bench.player.max_mana == 50

    def test_lockout_does_not_shorten_gcd(self):
        bench = CombatBench()
        bench.engine.cast_ability("holy_strike")
        bench.engine.toggle_aura("windfury_aura")
        assert bench.timers.global_cooldown == 1000

    def test_unknown_aura(self):
        bench = CombatBench()
        assert bench.engine.toggle_aura("thorns") is False
        assert bench.timers.global_cooldown == 0

    def test_rule_toggle_then_melee(self):
        bench = CombatBench(rules=[rule("toggle_windfury", 1), melee_rule(2)])
        bench.run_ticks(1)
        assert "windfury_aura" in bench.state.active_auras
        assert not bench.timers.is_swinging
        # Lockout of 500 ms, then the melee rule takes over
        bench.run_ticks(10)
        assert bench.timers.is_swinging
        assert "windfury_aura" in bench.state.active_auras


# ---------------------------------------------------------------------------
# Procs
# ---------------------------------------------------------------------------

class TestBonusStrikes:

    def test_melee_proc_adds_two_staggered_strikes(self, sure_proc):
        bench = CombatBench(rules=[melee_rule()])
        bench.engine.toggle_aura("windfury_aura")
        bench.run_until(lambda b: b.enemy.hp < 100)
        assert bench.enemy.hp == 90
        bench.run_ticks(2)
        assert bench.enemy.hp == 80
        bench.run_ticks(2)
        assert bench.enemy.hp == 70
        assert len(bench.messages("Windfury strike")) == 2

    def test_no_proc_without_aura(self, sure_proc):
        bench = CombatBench(rules=[melee_rule()])
        bench.run_until(lambda b: b.enemy.hp < 100)
        bench.run_ticks(4)
        assert bench.enemy.hp == 90
        assert len(bench.engine.scheduler) == 0

    def test_holy_strike_proc_heals_per_strike(self, sure_proc):
        bench = CombatBench()
        bench.engine.toggle_aura("windfury_aura")
        bench.timers.global_cooldown = 0
        bench.player.hp = 20
        assert bench.engine.cast_ability("holy_strike")
        assert bench.player.hp == 45
        bench.run_ticks(4)
        assert bench.enemy.hp == 25
        assert bench.player.hp == 95

    def test_strikes_against_replaced_enemy_are_dropped(self, sure_proc):
        bench = CombatBench(rules=[melee_rule()])
        bench.engine.toggle_aura("windfury_aura")
        bench.run_until(lambda b: b.enemy.hp < 100)
        assert len(bench.engine.scheduler) == 2
        bench.enemy.hp = 0
        bench.run_ticks(1)
        assert bench.enemy.generation == 2
        bench.run_ticks(4)
        assert bench.enemy.hp == 100
        assert not bench.messages("Windfury strike")


# ---------------------------------------------------------------------------
# Damage variance
# ---------------------------------------------------------------------------

class TestDamageVariance:
    """Every landing hit rolls the configured multiplier band."""

    @pytest.fixture
    def varied(self, sure_proc):
        bench = CombatBench(
            rules=[rule("toggle_windfury", 1), rule("summon_guardian", 2), melee_rule(3)],
            damage_variance_min=0.8,
            damage_variance_max=1.2,
        )
        bench.run_ticks(4000)
        return bench

    @staticmethod
    def _melee(bench: CombatBench, bonus: bool) -> list[int]:
        return [
            e.metadata["damage"]
            for e in bench.events_by_category(LogCategory.MELEE)
            if bool(e.metadata.get("bonus")) == bonus
        ]

    @staticmethod
    def _numbers(bench: CombatBench, damage_type: DamageType, target: TargetSide) -> list[int]:
        return [n.amount for n in bench.sink.numbers if n.damage_type == damage_type and n.target == target]

    def test_melee_swings_vary_within_band(self, varied):
        hits = self._melee(varied, bonus=False)
        assert hits
        assert set(hits) <= set(range(8, 13))
        assert len(set(hits)) > 1

    def test_bonus_strikes_vary_within_band(self, varied):
        hits = self._melee(varied, bonus=True)
        assert hits
        assert set(hits) <= set(range(8, 13))
        assert len(set(hits)) > 1

    def test_enemy_attacks_vary_within_band(self, varied):
        hits = self._numbers(varied, DamageType.ENEMY, TargetSide.PLAYER)
        assert hits
        assert set(hits) <= set(range(8, 13))
        assert len(set(hits)) > 1

    def test_summon_attacks_vary_within_band(self, varied):
        # Guardian damage is half of the Cleric's 10
        hits = self._numbers(varied, DamageType.SUMMON, TargetSide.ENEMY)
        assert hits
        assert set(hits) <= {4, 5, 6}
        assert len(set(hits)) > 1

    def test_holy_strike_scales_a_varied_roll(self):
        bench = CombatBench(damage_variance_min=0.8, damage_variance_max=1.2)
        for _ in range(40):
            bench.timers.global_cooldown = 0
            bench.timers.ability_cooldowns.clear()
            bench.player.mana = bench.player.max_mana
            bench.enemy.hp = bench.enemy.max_hp
            assert bench.engine.cast_ability("holy_strike")
        hits = self._numbers(bench, DamageType.HOLY, TargetSide.ENEMY)
        assert len(hits) == 40
        assert set(hits) <= set(range(20, 31))
        assert len(set(hits)) > 1
