"""Battle-runtime fields of a spawned enemy: kit, cooldowns, posture, memory."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ember_combat.sim.core.entities import Memory
from ember_combat.sim.mechanics.posture import compute_posture_max
from ember_combat.sim.mechanics.status_effects import reset_combat_status

if TYPE_CHECKING:
    from ember_combat.sim.core.entities import Enemy
    from ember_combat.sim.spawn.context import SpawnContext

_CASTER_SET = "caster"
_DEFAULT_SET = "basic"


def default_ability_set(enemy: Enemy, ability_sets: dict[str, list[str]]) -> list[str]:
    """Kit for *enemy*: its behavior's set, else caster/basic by stat lean."""
    if enemy.behavior in ability_sets:
        return list(ability_sets[enemy.behavior])
    if enemy.stats.magic > enemy.stats.attack and _CASTER_SET in ability_sets:
        return list(ability_sets[_CASTER_SET])
    return list(ability_sets.get(_DEFAULT_SET, []))


def ensure_runtime(enemy: Enemy, ctx: SpawnContext) -> None:
    """Initialise kit, cooldowns, posture and a fresh memory."""
    if not enemy.abilities:
        if ctx.pick_ability_set is not None:
            enemy.abilities = list(ctx.pick_ability_set(enemy))
        else:
            enemy.abilities = default_ability_set(enemy, ctx.ability_sets)
    enemy.ability_cooldowns = {ability_id: 0 for ability_id in enemy.abilities}
    enemy.intent = None
    enemy.memory = Memory()
    enemy.posture_max = compute_posture_max(enemy.level, enemy.is_elite, enemy.is_boss)
    enemy.posture = 0
    reset_combat_status(enemy)
