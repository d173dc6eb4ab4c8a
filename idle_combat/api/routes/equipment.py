"""POST /api/v1/equipment/* — move items between the bag and equipment slots."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from idle_combat.api.dependencies import get_engine_manager
from idle_combat.api.engine_manager import EngineManager
from idle_combat.api.routes.actions import _outcome
from idle_combat.api.schemas import ControlResponse
from idle_combat.core.items import EQUIPMENT_SLOTS, get_item

router = APIRouter(prefix="/equipment")


@router.post("/equip/{item_id}", response_model=ControlResponse)
def equip(
    item_id: str,
    manager: EngineManager = Depends(get_engine_manager),
) -> ControlResponse:
    item = get_item(item_id)
    if item is None:
        raise HTTPException(status_code=404, detail=f"Unknown item '{item_id}'")
    return _outcome(manager.equip(item_id), f"Equipped {item.name}.")


@router.post("/unequip/{slot}", response_model=ControlResponse)
def unequip(
    slot: str,
    manager: EngineManager = Depends(get_engine_manager),
) -> ControlResponse:
    if slot not in EQUIPMENT_SLOTS:
        raise HTTPException(status_code=404, detail=f"Unknown slot '{slot}'")
    return _outcome(manager.unequip(slot), f"Unequipped {slot}.")
