"""Core simulation primitives for the combat core."""

from ember_combat.sim.core.battle_state import BattleState
from ember_combat.sim.core.context import BattleContext, LogEntry, Severity
from ember_combat.sim.core.entities import (
    AbilityStat,
    Actor,
    Enemy,
    Memory,
    PendingIntent,
    Player,
    ResourceKind,
    Stats,
    StatusContainer,
)
from ember_combat.sim.core.rng import CombatRNG, DrawRecord

__all__ = [
    # rng
    "CombatRNG",
    "DrawRecord",
    # entities
    "Stats",
    "StatusContainer",
    "Actor",
    "Player",
    "ResourceKind",
    "Enemy",
    "AbilityStat",
    "Memory",
    "PendingIntent",
    # battle_state
    "BattleState",
    # context
    "BattleContext",
    "LogEntry",
    "Severity",
]
