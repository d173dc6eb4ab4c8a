"""ActionExecutor — carries out the player's chosen action.

Player activity is a small state machine:

  Idle ──start_melee──▶ Swinging ──complete_melee──▶ Idle
                          │
                          └──cancel_melee (a cast)──▶ Idle

The global cooldown runs orthogonally: instant casts and summons set it,
aura toggles apply a short lockout.  Casting while swinging always
cancels the swing first, so a swing and a cast never overlap.

Every landing hit goes through ``roll_damage``; there is no un-varied
damage path.  Melee completions and holy-type instant casts roll the
bonus-strike proc when an aura that grants one is active.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from idle_combat.actions.base import ActionProposal
from idle_combat.actions.damage import get_mitigation, roll_damage, round_half_up
from idle_combat.core.abilities import ABILITY_REGISTRY, AURA_REGISTRY, AbilityDef, proc_aura
from idle_combat.core.enums import AbilityKind, ActionKind, DamageType, Domain, LogCategory, TargetSide

if TYPE_CHECKING:
    from idle_combat.config import CombatConfig
    from idle_combat.core.combat_state import CombatState
    from idle_combat.systems.clock import CombatClock
    from idle_combat.systems.deferred import DeferredScheduler
    from idle_combat.systems.rng import RollStream
    from idle_combat.utils.event_log import TickRecorder

logger = logging.getLogger(__name__)


class ActionExecutor:
    """Applies ActionProposals and manual requests to the CombatState."""

    __slots__ = ("_config", "_rolls", "_recorder", "_scheduler", "_clock", "_unknown_reported")

    def __init__(
        self,
        config: CombatConfig,
        rolls: RollStream,
        recorder: TickRecorder,
        scheduler: DeferredScheduler,
        clock: CombatClock,
    ) -> None:
        self._config = config
        self._rolls = rolls
        self._recorder = recorder
        self._scheduler = scheduler
        self._clock = clock
        self._unknown_reported: set[str] = set()

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def execute(self, proposal: ActionProposal, state: CombatState) -> bool:
        """Carry out a rule-selected action.  Returns True if state changed."""
        kind = proposal.kind
        if kind == ActionKind.MELEE:
            if state.timers.is_swinging:
                return False
            self.start_melee(state)
            return True
        if kind in (ActionKind.CAST_INSTANT, ActionKind.CAST_SUMMON):
            return self.cast_ability(proposal.ref_id or proposal.action, state)
        if kind == ActionKind.TOGGLE_AURA:
            return self.toggle_aura(proposal.ref_id or proposal.action, state)
        if kind == ActionKind.NONE:
            return False

        # Unknown action strings are reported once per rule set
        if proposal.action not in self._unknown_reported:
            self._unknown_reported.add(proposal.action)
            logger.warning("Rule %r names unknown action %r — ignored", proposal.rule_id, proposal.action)
            self._recorder.log(
                LogCategory.SYSTEM,
                f"Unknown action '{proposal.action}' in rule {proposal.rule_id or '?'} — ignored",
            )
        return False

    def reset_diagnostics(self) -> None:
        """Forget which unknown actions were already reported (new rule set)."""
        self._unknown_reported.clear()

    # ------------------------------------------------------------------
    # Melee
    # ------------------------------------------------------------------

    def start_melee(self, state: CombatState) -> None:
        timers = state.timers
        if timers.is_swinging:
            return
        timers.is_swinging = True
        timers.swing_remaining = float(self._config.melee_swing_time_ms)
        self._recorder.log(LogCategory.SYSTEM, f"{state.player.name} begins swinging their mace...")

    def complete_melee(self, state: CombatState) -> None:
        """Resolve a finished swing.  Called by the TimerBank."""
        state.timers.clear_swing()
        player = state.player
        dmg = roll_damage(player.damage, self._rolls, self._config)
        self._hit_enemy(state, dmg, DamageType.PHYSICAL)
        self._recorder.log(
            LogCategory.MELEE,
            f"{player.name} strikes with their mace for {dmg} damage!",
            {"damage": dmg},
        )
        self._roll_proc(state, "melee", self._bonus_melee_strike(state))

    def cancel_melee(self, state: CombatState) -> None:
        if not state.timers.is_swinging:
            return
        state.timers.clear_swing()
        self._recorder.log(LogCategory.SYSTEM, f"{state.player.name} interrupts their swing to cast a spell")

    # ------------------------------------------------------------------
    # Casting
    # ------------------------------------------------------------------

    def rejection_reason(self, ability: AbilityDef, state: CombatState) -> str | None:
        """Why *ability* cannot be cast right now, or None if it can."""
        player = state.player
        timers = state.timers
        if not player.alive:
            return "you are dead"
        if timers.global_cooldown > 0:
            return f"global cooldown ({timers.global_cooldown / 1000:.1f}s)"
        if not timers.ability_ready(ability.ability_id):
            return f"on cooldown ({timers.ability_cooldowns[ability.ability_id] / 1000:.1f}s)"
        if player.mana < ability.mana_cost:
            return f"not enough mana ({player.mana}/{ability.mana_cost})"
        if ability.kind == AbilityKind.SUMMON and state.summons.at_cap():
            return f"too many summons ({state.summons.count}/{state.summons.max_summons})"
        return None

    def cast_ability(self, ability_id: str, state: CombatState) -> bool:
        """Validate and cast.  A rejected request changes nothing but the log."""
        ability = ABILITY_REGISTRY.get(ability_id)
        if ability is None:
            self._recorder.log(LogCategory.SYSTEM, f"Unknown ability '{ability_id}'")
            return False

        reason = self.rejection_reason(ability, state)
        if reason is not None:
            logger.debug("Cast of %s rejected: %s", ability.ability_id, reason)
            self._recorder.log(LogCategory.SYSTEM, f"Cannot cast {ability.name}: {reason}")
            return False

        if state.timers.is_swinging:
            self.cancel_melee(state)

        if ability.kind == AbilityKind.SUMMON:
            self.cast_summon(ability, state)
        else:
            self.cast_instant(ability, state)
        return True

    def _pay(self, ability: AbilityDef, state: CombatState) -> None:
        state.player.mana -= ability.mana_cost
        state.timers.global_cooldown = float(self._config.gcd_duration_ms)
        if ability.cooldown > 0:
            state.timers.ability_cooldowns[ability.ability_id] = float(ability.cooldown)

    def cast_instant(self, ability: AbilityDef, state: CombatState) -> None:
        self._pay(ability, state)
        self._strike_with(ability, state)
        if ability.damage_type == DamageType.HOLY:
            self._roll_proc(state, ability.ability_id, self._bonus_ability_strike(ability, state))

    def cast_summon(self, ability: AbilityDef, state: CombatState) -> None:
        self._pay(ability, state)
        # Damage is captured now; later gear changes do not affect this summon
        damage = round_half_up(state.player.damage * ability.summon_damage_fraction)
        summon = state.summons.spawn(ability, damage)
        self._recorder.log(
            LogCategory.SUMMON,
            f"{state.player.name} summons a {summon.name}! ({summon.hp} HP, {summon.damage} dmg, "
            f"{ability.summon_lifespan / 1000:.0f}s)",
            {"summon_id": summon.summon_id},
        )

    def ability_damage(self, ability: AbilityDef, state: CombatState) -> int:
        """Damage for one application of *ability*: multiplier of a fresh melee roll, or flat."""
        if ability.damage_multiplier > 0:
            melee_roll = roll_damage(state.player.damage, self._rolls, self._config)
            return max(round_half_up(melee_roll * ability.damage_multiplier), 0)
        return roll_damage(ability.damage, self._rolls, self._config)

    def _strike_with(self, ability: AbilityDef, state: CombatState, bonus: bool = False) -> int:
        player = state.player
        dmg = self.ability_damage(ability, state)
        self._hit_enemy(state, dmg, ability.damage_type)
        if bonus:
            msg = f"Windfury {ability.name} for {dmg} damage!"
        else:
            msg = f"{player.name} casts {ability.name} for {dmg} damage!"
        self._recorder.log(LogCategory.PLAYER_MAGIC, msg, {"damage": dmg, "ability": ability.ability_id})

        if ability.heal_on_damage and dmg > 0:
            healed = player.heal(dmg)
            if healed > 0:
                self._recorder.number(healed, DamageType.HEALING, TargetSide.PLAYER)
                self._recorder.log(LogCategory.HEAL, f"{player.name} healed for {healed} HP!", {"heal": healed})
        return dmg

    # ------------------------------------------------------------------
    # Auras
    # ------------------------------------------------------------------

    def toggle_aura(self, aura_id: str, state: CombatState) -> bool:
        aura = AURA_REGISTRY.get(aura_id)
        if aura is None:
            self._recorder.log(LogCategory.SYSTEM, f"Unknown aura '{aura_id}'")
            return False
        player = state.player
        if not player.alive:
            self._recorder.log(LogCategory.SYSTEM, f"Cannot toggle {aura.name}: you are dead")
            return False

        if aura_id in state.active_auras:
            state.active_auras.discard(aura_id)
            state.recalculate_player()
            self._recorder.log(
                LogCategory.MANA,
                f"{player.name} deactivates {aura.name}. Max mana restored to {player.max_mana}.",
            )
        else:
            state.active_auras.add(aura_id)
            state.recalculate_player()
            self._recorder.log(
                LogCategory.MANA,
                f"{player.name} activates {aura.name}! {int(aura.mana_reserve * 100)}% mana reserved "
                f"(max {player.max_mana}).",
            )

        # Lockout stops a rule whose condition depends on the toggle from oscillating
        state.timers.global_cooldown = max(
            state.timers.global_cooldown, float(self._config.aura_toggle_lockout_ms))
        return True

    # ------------------------------------------------------------------
    # Procs
    # ------------------------------------------------------------------

    def _roll_proc(self, state: CombatState, source: str, strike: Callable[[], None]) -> bool:
        aura = proc_aura(state.active_auras)
        if aura is None:
            return False
        if not self._rolls.chance(Domain.PROC, aura.proc_chance):
            return False

        ability = ABILITY_REGISTRY.get(source)
        suffix = f" on {ability.name}" if ability is not None else ""
        self._recorder.log(LogCategory.SYSTEM, f"{aura.name.split()[0]} triggers{suffix}!")
        now = self._clock.elapsed_ms
        for i in range(aura.proc_attacks):
            self._scheduler.schedule(
                due_ms=now + aura.proc_stagger_ms * (i + 1),
                enemy_generation=state.enemy.generation,
                player_generation=state.player.generation,
                callback=strike,
                label=f"{source}#{i + 1}",
            )
        return True

    def _bonus_melee_strike(self, state: CombatState) -> Callable[[], None]:
        def strike() -> None:
            if not state.enemy.alive or not state.player.alive:
                return
            dmg = roll_damage(state.player.damage, self._rolls, self._config)
            self._hit_enemy(state, dmg, DamageType.PHYSICAL)
            self._recorder.log(LogCategory.MELEE, f"Windfury strike for {dmg} damage!", {"damage": dmg, "bonus": True})
        return strike

    def _bonus_ability_strike(self, ability: AbilityDef, state: CombatState) -> Callable[[], None]:
        def strike() -> None:
            if not state.enemy.alive or not state.player.alive:
                return
            self._strike_with(ability, state, bonus=True)
        return strike

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _hit_enemy(self, state: CombatState, raw: int, damage_type: DamageType) -> int:
        dealt = get_mitigation(TargetSide.ENEMY).apply(raw, state.enemy.armor)
        state.enemy.hp -= dealt
        self._recorder.number(dealt, damage_type, TargetSide.ENEMY)
        return dealt
