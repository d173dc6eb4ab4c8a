"""POST /api/v1/actions/* — manual casts and aura toggles."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from idle_combat.api.dependencies import get_engine_manager
from idle_combat.api.engine_manager import CommandOutcome, EngineManager
from idle_combat.api.schemas import ControlResponse
from idle_combat.core.abilities import ABILITY_REGISTRY, AURA_REGISTRY

router = APIRouter(prefix="/actions")


def _outcome(outcome: CommandOutcome, success: str) -> ControlResponse:
    if outcome.ok:
        return ControlResponse(status="ok", message=success, tick=outcome.tick)
    # The engine explains every rejection in the newest log line
    return ControlResponse(status="rejected", message=outcome.message or "Rejected.", tick=outcome.tick)


@router.post("/cast/{ability_id}", response_model=ControlResponse)
def cast(
    ability_id: str,
    manager: EngineManager = Depends(get_engine_manager),
) -> ControlResponse:
    ability = ABILITY_REGISTRY.get(ability_id)
    if ability is None:
        raise HTTPException(status_code=404, detail=f"Unknown ability '{ability_id}'")
    return _outcome(manager.cast_ability(ability_id), f"{ability.name} cast.")


@router.post("/toggle/{aura_id}", response_model=ControlResponse)
def toggle(
    aura_id: str,
    manager: EngineManager = Depends(get_engine_manager),
) -> ControlResponse:
    aura = AURA_REGISTRY.get(aura_id)
    if aura is None:
        raise HTTPException(status_code=404, detail=f"Unknown aura '{aura_id}'")
    return _outcome(manager.toggle_aura(aura_id), f"{aura.name} toggled.")
