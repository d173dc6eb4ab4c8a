"""GET /api/v1/config — expose combat configuration."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from idle_combat.api.dependencies import get_engine_manager
from idle_combat.api.engine_manager import EngineManager
from idle_combat.api.schemas import CombatConfigResponse

router = APIRouter()


@router.get("/config", response_model=CombatConfigResponse)
def get_config(
    manager: EngineManager = Depends(get_engine_manager),
) -> CombatConfigResponse:
    cfg = manager.config
    return CombatConfigResponse(
        seed=cfg.seed,
        tick_interval_ms=cfg.tick_interval_ms,
        gcd_duration_ms=cfg.gcd_duration_ms,
        aura_toggle_lockout_ms=cfg.aura_toggle_lockout_ms,
        melee_swing_time_ms=cfg.melee_swing_time_ms,
        damage_variance_min=cfg.damage_variance_min,
        damage_variance_max=cfg.damage_variance_max,
        enemy_type=cfg.enemy_type,
        summon_target_chance=cfg.summon_target_chance,
        death_gold_penalty=cfg.death_gold_penalty,
        max_summons=cfg.max_summons,
        max_log_entries=cfg.max_log_entries,
        tick_rate=manager.tick_rate,
        time_scale=manager.time_scale,
    )
