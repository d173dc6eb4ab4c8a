"""GET /api/v1/state — live combat state and events (polled by UI)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from idle_combat.api.dependencies import get_engine_manager
from idle_combat.api.engine_manager import EngineManager
from idle_combat.api.schemas import (
    CombatStateResponse,
    EnemySchema,
    EquipmentSchema,
    EventSchema,
    FloatingNumberSchema,
    PlayerSchema,
    SummonSchema,
    TallySchema,
)
from idle_combat.utils.event_log import CombatEvent, FloatingNumber

router = APIRouter()


def _serialize_event(e: CombatEvent) -> EventSchema:
    return EventSchema(tick=e.tick, elapsed_ms=e.elapsed_ms, category=e.category.value, message=e.message)


def _serialize_number(n: FloatingNumber) -> FloatingNumberSchema:
    return FloatingNumberSchema(
        tick=n.tick,
        amount=n.amount,
        damage_type=n.damage_type.name.lower(),
        target=n.target.name.lower(),
        target_id=n.target_id,
    )


@router.get("/state", response_model=CombatStateResponse)
def get_state(
    since_tick: int = Query(0, ge=0, description="Only return events from this tick onward"),
    manager: EngineManager = Depends(get_engine_manager),
) -> CombatStateResponse:
    snapshot = manager.get_snapshot()
    if snapshot is None:
        raise HTTPException(status_code=503, detail="Combat not initialized")

    p = snapshot.player
    e = snapshot.enemy
    tally = manager.tally

    player = PlayerSchema(
        name=p.name,
        hp=p.hp,
        max_hp=p.max_hp,
        mana=p.mana,
        max_mana=p.max_mana,
        mana_reserved=p.mana_reserved,
        mana_regen=p.mana_regen,
        damage=p.damage,
        armor=p.armor,
        gold=p.gold,
        status=p.status,
        is_swinging=p.is_swinging,
        swing_remaining=p.swing_remaining,
        global_cooldown=p.global_cooldown,
        ability_cooldowns=dict(p.ability_cooldowns),
        active_auras=list(p.active_auras),
        equipment=EquipmentSchema(**dict(p.equipment)),
        bag=list(p.bag),
        generation=p.generation,
    )
    enemy = EnemySchema(
        kind=e.kind,
        name=e.name,
        hp=e.hp,
        max_hp=e.max_hp,
        damage=e.damage,
        attack_speed=e.attack_speed,
        next_attack_ms=e.next_attack_ms,
        generation=e.generation,
        sprite=e.sprite,
    )
    summons = [
        SummonSchema(
            summon_id=s.summon_id,
            name=s.name,
            hp=s.hp,
            max_hp=s.max_hp,
            damage=s.damage,
            attack_speed=s.attack_speed,
            time_remaining=s.time_remaining,
            sprite=s.sprite,
        )
        for s in snapshot.summons
    ]

    log = manager.event_log
    return CombatStateResponse(
        tick=snapshot.tick,
        elapsed_ms=snapshot.elapsed_ms,
        running=manager.running,
        paused=manager.paused,
        player=player,
        enemy=enemy,
        summons=summons,
        combat_log=[_serialize_event(ev) for ev in snapshot.combat_log],
        events=[_serialize_event(ev) for ev in log.since_tick(since_tick)],
        numbers=[_serialize_number(n) for n in log.numbers_since_tick(since_tick)],
        tally=TallySchema(
            kills=tally.kills,
            deaths=tally.deaths,
            gold_earned=tally.gold_earned,
            gold_lost=tally.gold_lost,
            items_found=tally.items_found,
        ),
    )
