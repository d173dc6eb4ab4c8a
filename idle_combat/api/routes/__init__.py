"""Versioned API route modules."""

from fastapi import APIRouter

from idle_combat.api.routes.actions import router as actions_router
from idle_combat.api.routes.config import router as config_router
from idle_combat.api.routes.control import router as control_router
from idle_combat.api.routes.equipment import router as equipment_router
from idle_combat.api.routes.metadata import router as metadata_router
from idle_combat.api.routes.rules import router as rules_router
from idle_combat.api.routes.state import router as state_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(state_router, tags=["State"])
api_router.include_router(control_router, tags=["Control"])
api_router.include_router(rules_router, tags=["Rules"])
api_router.include_router(actions_router, tags=["Actions"])
api_router.include_router(equipment_router, tags=["Equipment"])
api_router.include_router(config_router, tags=["Config"])
api_router.include_router(metadata_router)

__all__ = ["api_router"]
