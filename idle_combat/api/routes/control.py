"""POST /api/v1/control/{action} and /speed — combat lifecycle and time scale."""

from __future__ import annotations

from enum import Enum

from fastapi import APIRouter, Depends, Query

from idle_combat.api.dependencies import get_engine_manager
from idle_combat.api.engine_manager import EngineManager
from idle_combat.api.schemas import ControlResponse, SpeedResponse

router = APIRouter()


class ControlAction(str, Enum):
    start = "start"
    pause = "pause"
    resume = "resume"
    step = "step"
    stop = "stop"
    reset = "reset"


def _tick(manager: EngineManager) -> int:
    snapshot = manager.get_snapshot()
    return snapshot.tick if snapshot else 0


def _reply(manager: EngineManager, status: str, message: str) -> ControlResponse:
    return ControlResponse(status=status, message=message, tick=_tick(manager))


@router.post("/control/{action}", response_model=ControlResponse)
def control(
    action: ControlAction,
    manager: EngineManager = Depends(get_engine_manager),
) -> ControlResponse:
    match action:
        case ControlAction.start if manager.running:
            return _reply(manager, "noop", "Combat is already running.")
        case ControlAction.start:
            manager.start()
            return _reply(manager, "ok", "Combat started.")

        case ControlAction.pause | ControlAction.resume | ControlAction.stop if not manager.running:
            return _reply(manager, "error", "Combat is not running.")
        case ControlAction.pause:
            manager.pause()
            return _reply(manager, "ok", f"Combat paused at tick {_tick(manager)}.")
        case ControlAction.resume:
            # The manager resyncs the clock, so the paused interval is never credited
            manager.resume()
            return _reply(manager, "ok", "Combat resumed.")
        case ControlAction.stop:
            manager.stop()
            return _reply(manager, "ok", "Combat stopped.")

        case ControlAction.step:
            if not manager.running:
                manager.start()
                manager.pause()
            manager.step()
            return _reply(manager, "ok", f"Advancing one {manager.config.tick_interval_ms} ms tick.")

        case ControlAction.reset:
            manager.reset()
            return _reply(manager, "ok", f"New {manager.config.enemy_type} fight ready; rules kept.")


def _speed(manager: EngineManager) -> SpeedResponse:
    return SpeedResponse(
        tick_rate=manager.tick_rate,
        time_scale=manager.time_scale,
        tick_interval_ms=manager.config.tick_interval_ms,
    )


@router.get("/speed", response_model=SpeedResponse)
def get_speed(manager: EngineManager = Depends(get_engine_manager)) -> SpeedResponse:
    return _speed(manager)


@router.post("/speed", response_model=SpeedResponse)
def set_speed(
    scale: float = Query(1.0, gt=0.0, le=50.0, description="Combat time per real time"),
    manager: EngineManager = Depends(get_engine_manager),
) -> SpeedResponse:
    """Change how fast combat runs relative to real time; each tick still covers the same combat time."""
    manager.tick_rate = (manager.config.tick_interval_ms / 1000) / scale
    return _speed(manager)
