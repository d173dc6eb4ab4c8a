"""Metadata endpoints — expose all game definitions so the frontend has zero hardcoded data.

The core registries (items, abilities, auras, enemies) are dataclasses
defined in idle_combat/core/ and serialized directly through pydantic
TypeAdapters.  This module adds only the thin enum listing.
"""

from __future__ import annotations

from pydantic import BaseModel, TypeAdapter

from fastapi import APIRouter

from idle_combat.core.abilities import ABILITY_REGISTRY, ACTION_TABLE, AURA_REGISTRY, AbilityDef, AuraDef
from idle_combat.core.enemies import ENEMY_REGISTRY, EnemyTemplate
from idle_combat.core.enums import ConditionType, DamageType, ItemType, LogCategory, Rarity
from idle_combat.core.items import EQUIPMENT_SLOTS, ITEM_REGISTRY, LOOT_TABLES, ItemTemplate

router = APIRouter(prefix="/metadata", tags=["Metadata"])


class EnumEntry(BaseModel):
    id: int
    name: str


class EnumsResponse(BaseModel):
    condition_types: list[str]
    actions: list[str]
    damage_types: list[EnumEntry]
    rarities: list[EnumEntry]
    item_types: list[EnumEntry]
    log_categories: list[str]
    equipment_slots: list[str]


# TypeAdapters for core models: serialize dataclasses to dicts
_item_ta = TypeAdapter(ItemTemplate)
_ability_ta = TypeAdapter(AbilityDef)
_aura_ta = TypeAdapter(AuraDef)
_enemy_ta = TypeAdapter(EnemyTemplate)


@router.get("/enums", response_model=EnumsResponse)
def get_enums() -> EnumsResponse:
    """Rule vocabulary plus display enums."""
    return EnumsResponse(
        condition_types=[c.name.lower() for c in ConditionType if c != ConditionType.UNKNOWN],
        actions=sorted(ACTION_TABLE),
        damage_types=[EnumEntry(id=d.value, name=d.name.lower()) for d in DamageType],
        rarities=[EnumEntry(id=r.value, name=r.name.lower()) for r in Rarity],
        item_types=[EnumEntry(id=it.value, name=it.name.lower()) for it in ItemType],
        log_categories=[c.value for c in LogCategory],
        equipment_slots=list(EQUIPMENT_SLOTS),
    )


@router.get("/items")
def get_items() -> dict:
    """Full item registry and loot tables."""
    items = [_item_ta.dump_python(t, mode="json") for t in ITEM_REGISTRY.values()]
    loot = {k: [{"item_id": i, "weight": w} for i, w in table] for k, table in LOOT_TABLES.items()}
    return {"items": items, "loot_tables": loot}


@router.get("/abilities")
def get_abilities() -> dict:
    abilities = [_ability_ta.dump_python(a, mode="json") for a in ABILITY_REGISTRY.values()]
    auras = [_aura_ta.dump_python(a, mode="json") for a in AURA_REGISTRY.values()]
    return {"abilities": abilities, "auras": auras}


@router.get("/enemies")
def get_enemies() -> dict:
    return {"enemies": [_enemy_ta.dump_python(e, mode="json") for e in ENEMY_REGISTRY.values()]}
