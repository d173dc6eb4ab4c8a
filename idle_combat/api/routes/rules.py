"""GET/PUT /api/v1/rules — read and replace the player's combat rules."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from idle_combat.api.dependencies import get_engine_manager
from idle_combat.api.engine_manager import EngineManager
from idle_combat.api.schemas import RuleSchema, RulesResponse
from idle_combat.core.rules import CombatRule

router = APIRouter()


def _to_schema(rule: CombatRule) -> RuleSchema:
    return RuleSchema.model_validate(rule.to_dict())


@router.get("/rules", response_model=RulesResponse)
def get_rules(
    manager: EngineManager = Depends(get_engine_manager),
) -> RulesResponse:
    return RulesResponse(rules=[_to_schema(r) for r in manager.get_rules()])


@router.put("/rules", response_model=RulesResponse)
def put_rules(
    body: RulesResponse,
    manager: EngineManager = Depends(get_engine_manager),
) -> RulesResponse:
    """Replace the whole rule set.  Unknown condition types are kept but never match."""
    rules = [CombatRule.from_dict(r.model_dump(by_alias=True)) for r in body.rules]
    active = manager.replace_rules(rules)
    return RulesResponse(rules=[_to_schema(r) for r in active])
