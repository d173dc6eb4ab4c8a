"""Pydantic request/response models for the REST API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


# --- Combatants ---

class EquipmentSchema(BaseModel):
    weapon: str | None = None
    armor: str | None = None
    accessory: str | None = None


class PlayerSchema(BaseModel):
    name: str
    hp: int
    max_hp: int
    mana: int
    max_mana: int
    mana_reserved: int = 0
    mana_regen: float = 0.0
    damage: int
    armor: int = 0
    gold: int = 0
    status: str = "Ready"
    is_swinging: bool = False
    swing_remaining: float = 0.0
    global_cooldown: float = 0.0
    ability_cooldowns: dict[str, float] = Field(default_factory=dict)
    active_auras: list[str] = Field(default_factory=list)
    equipment: EquipmentSchema = Field(default_factory=EquipmentSchema)
    bag: list[str] = Field(default_factory=list)
    generation: int = 0


class EnemySchema(BaseModel):
    kind: str
    name: str
    hp: int
    max_hp: int
    damage: int
    attack_speed: int
    next_attack_ms: float
    generation: int
    sprite: str = "?"


class SummonSchema(BaseModel):
    summon_id: int
    name: str
    hp: int
    max_hp: int
    damage: int
    attack_speed: int
    time_remaining: float
    sprite: str = "G"


# --- Events ---

class EventSchema(BaseModel):
    tick: int
    elapsed_ms: float
    category: str
    message: str


class FloatingNumberSchema(BaseModel):
    tick: int
    amount: int
    damage_type: str
    target: str
    target_id: int = 0


class TallySchema(BaseModel):
    kills: int = 0
    deaths: int = 0
    gold_earned: int = 0
    gold_lost: int = 0
    items_found: int = 0


class CombatStateResponse(BaseModel):
    tick: int
    elapsed_ms: float
    running: bool = False
    paused: bool = False
    player: PlayerSchema
    enemy: EnemySchema
    summons: list[SummonSchema] = Field(default_factory=list)
    combat_log: list[EventSchema] = Field(default_factory=list)
    events: list[EventSchema] = Field(default_factory=list)
    numbers: list[FloatingNumberSchema] = Field(default_factory=list)
    tally: TallySchema = Field(default_factory=TallySchema)


# --- Control ---

class ControlResponse(BaseModel):
    status: str
    message: str
    tick: int = 0


class SpeedResponse(BaseModel):
    tick_rate: float        # real seconds between ticks
    time_scale: float       # combat ms per real ms
    tick_interval_ms: int


# --- Rules ---

class RuleSchema(BaseModel):
    """A rule in the persisted camelCase shape."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    priority: int = 0
    condition_type: str = Field("always", alias="conditionType")
    condition_value: float = Field(0, alias="conditionValue")
    action: str = "none"
    enabled: bool = True


class RulesResponse(BaseModel):
    rules: list[RuleSchema]


# --- Config ---

class CombatConfigResponse(BaseModel):
    seed: int
    tick_interval_ms: int
    gcd_duration_ms: int
    aura_toggle_lockout_ms: int
    melee_swing_time_ms: int
    damage_variance_min: float
    damage_variance_max: float
    enemy_type: str
    summon_target_chance: float
    death_gold_penalty: float
    max_summons: int
    max_log_entries: int
    tick_rate: float
    time_scale: float
