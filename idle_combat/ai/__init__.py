"""AI layer: the player's rule engine and the enemy attacker."""

from idle_combat.ai.rule_engine import RuleEngine
from idle_combat.ai.enemy import EnemyAI

__all__ = ["EnemyAI", "RuleEngine"]
