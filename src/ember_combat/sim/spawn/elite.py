"""Elite modifier -- a chance-based power bump, separate from affixes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ember_combat.sim.mechanics.posture import compute_posture_max
from ember_combat.sim.spawn.scaling import apply_multipliers

if TYPE_CHECKING:
    from ember_combat.ir.rarity import EliteDefinition
    from ember_combat.sim.core.entities import Enemy
    from ember_combat.sim.spawn.context import SpawnContext

logger = logging.getLogger(__name__)

ELITE_BASE_CHANCE = 0.08
_HARD_MULT = 1.35


def elite_chance(difficulty_id: str) -> float:
    if difficulty_id == "easy":
        return 0.0
    if difficulty_id == "hard":
        return ELITE_BASE_CHANCE * _HARD_MULT
    return ELITE_BASE_CHANCE


def apply_elite(enemy: Enemy, ctx: SpawnContext) -> EliteDefinition | None:
    """Maybe turn *enemy* into an elite.  Never bosses, easy or the village."""
    if enemy.is_boss or ctx.in_village or not ctx.elites:
        return None
    chance = elite_chance(ctx.difficulty_id)
    if chance <= 0 or ctx.rand("elite.affixChance") >= chance:
        return None

    elite = ctx.elites[ctx.rand_int(0, len(ctx.elites) - 1, "elite.affixPick")]
    enemy.is_elite = True
    enemy.elite_id = elite.id
    enemy.elite_label = elite.label
    enemy.regen_pct += elite.regen_pct
    apply_multipliers(enemy, elite.mults)
    enemy.hp = enemy.max_hp
    enemy.posture_max = compute_posture_max(enemy.level, True, enemy.is_boss)
    logger.debug("%s rolled elite %s", enemy.base_name, elite.id)
    return elite
