"""FastAPI application factory with lifespan management."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from idle_combat.api.dependencies import set_engine_manager
from idle_combat.api.engine_manager import EngineManager
from idle_combat.api.routes import api_router
from idle_combat.config import CombatConfig
from idle_combat.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def create_app(config: CombatConfig | None = None, autostart: bool = True) -> FastAPI:
    """Build and return the fully-configured FastAPI application."""
    if config is None:
        config = CombatConfig()

    _config = config

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(_config.log_level)
        manager = EngineManager(_config)
        set_engine_manager(manager)
        if autostart:
            manager.start()
        logger.info("API server started — combat %s.", "running" if autostart else "paused")
        yield
        manager.stop()
        set_engine_manager(None)
        logger.info("API server shutting down.")

    app = FastAPI(
        title="Idle Combat Engine",
        description=(
            "Real-time idle RPG combat — a Cleric against a stream of respawning enemies.\n\n"
            "## API Groups\n\n"
            "- **State** — Live combat snapshot, combat log, floating numbers\n"
            "- **Control** — Lifecycle: start, pause, resume, step, reset; speed\n"
            "- **Rules** — Read and replace the priority rule set\n"
            "- **Actions** — Manual ability casts and aura toggles\n"
            "- **Equipment** — Equip and unequip items from the bag\n"
            "- **Config** — Read-only combat configuration\n"
            "- **Metadata** — Abilities, auras, enemies, items and enums\n"
        ),
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "State", "description": "Live combat state polled by the frontend."},
            {"name": "Control", "description": "Combat lifecycle controls and time scale."},
            {"name": "Rules", "description": "The player's prioritized condition → action rules."},
            {"name": "Actions", "description": "Manual casts and toggles; rejected requests return status 'rejected'."},
            {"name": "Equipment", "description": "Move items between the bag and the weapon / armor / accessory slots."},
            {"name": "Config", "description": "Read-only combat configuration parameters."},
            {"name": "Metadata", "description": "Game definitions served straight from the core registries."},
        ],
    )

    # CORS: allow any origin in dev
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)
    return app
