"""Action system: proposals, damage policy, and execution."""

from idle_combat.actions.base import ActionProposal
from idle_combat.actions.executor import ActionExecutor

__all__ = ["ActionExecutor", "ActionProposal"]
