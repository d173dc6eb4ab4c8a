"""Combat configuration with sensible defaults."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CombatConfig:
    """Immutable configuration for a combat session."""

    # RNG
    seed: int = 42

    # Timing (milliseconds)
    tick_interval_ms: int = 50             # driver cadence (20 tps)
    gcd_duration_ms: int = 1000            # global cooldown after an instant cast
    aura_toggle_lockout_ms: int = 500      # short GCD after any aura toggle

    # Player
    player_name: str = "Cleric"
    player_base_hp: int = 100
    player_base_mana: int = 100
    player_base_mana_regen: float = 1.0    # mana per second
    player_base_damage: int = 10
    player_base_armor: int = 0
    player_starting_gold: int = 0
    melee_swing_time_ms: int = 4500

    # Damage variance (uniform multiplier band, rounded half-up)
    damage_variance_min: float = 0.8
    damage_variance_max: float = 1.2

    # Enemy
    enemy_type: str = "skeleton"
    summon_target_chance: float = 0.3      # chance an enemy attack is redirected to a summon

    # Rewards
    gold_reward_min: int = 3
    gold_reward_max: int = 8
    bonus_gold_chance: float = 0.05
    bonus_gold_min: int = 10
    bonus_gold_max: int = 25
    death_gold_penalty: float = 0.1        # fraction of current gold lost on death

    # Summons
    max_summons: int = 3

    # Presentation
    max_log_entries: int = 20

    # Rules
    rules_file: str = ""                   # empty = in-memory defaults only

    # API server
    host: str = "127.0.0.1"
    port: int = 8000

    # Logging
    log_level: str = "INFO"
