"""Affixes: weighted, level-gated modifiers with behavior hooks."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ember_combat.sim.mechanics.posture import compute_posture_max
from ember_combat.sim.spawn.scaling import apply_multipliers

if TYPE_CHECKING:
    from ember_combat.ir.rarity import AffixDefinition, RarityDefinition
    from ember_combat.sim.core.entities import Enemy
    from ember_combat.sim.spawn.context import SpawnContext

logger = logging.getLogger(__name__)

AFFIX_CEILING = 3
BOSS_EXTRA_CHANCE = 0.5
_MIN_WEIGHT = 0.0001


def roll_affix_count(enemy: Enemy, rarity: RarityDefinition, ctx: SpawnContext) -> int:
    """How many affixes *enemy* gets at *rarity*.

    Base count from the tier, plus an upgrade roll, plus a boss-only
    extra roll, clamped to :data:`AFFIX_CEILING`.  Non-boss enemies on
    easy or in the village get none.
    """
    if not enemy.is_boss and (ctx.difficulty_id == "easy" or ctx.in_village):
        return 0
    count = rarity.affix_count
    if rarity.affix_upgrade_chance > 0 and ctx.rand("affix.upgrade") < rarity.affix_upgrade_chance:
        count += 1
    if enemy.is_boss and ctx.rand("affix.bossExtra") < BOSS_EXTRA_CHANCE:
        count += 1
    return max(0, min(AFFIX_CEILING, count))


def pick_affixes(enemy: Enemy, count: int, ctx: SpawnContext) -> list[AffixDefinition]:
    """Weighted pick of *count* distinct affixes eligible at the enemy's level."""
    picked: list[AffixDefinition] = []
    for _ in range(count):
        pool = [
            a for a in ctx.affixes
            if a not in picked and a.id not in enemy.affixes and enemy.level >= a.min_level
        ]
        if not pool:
            break
        total = sum(max(_MIN_WEIGHT, a.weight) for a in pool)
        roll = ctx.rand("affix.pick") * total
        choice = pool[-1]
        for affix in pool:
            roll -= max(_MIN_WEIGHT, affix.weight)
            if roll <= 0:
                choice = affix
                break
        picked.append(choice)
    return picked


def apply_affix(enemy: Enemy, affix: AffixDefinition) -> None:
    """Apply one affix's stat multipliers and hook fields."""
    was_full = enemy.hp >= enemy.max_hp
    apply_multipliers(enemy, affix.mults)
    if was_full:
        enemy.hp = enemy.max_hp
    enemy.hp = min(enemy.hp, enemy.max_hp)

    enemy.vampiric_heal_pct = max(enemy.vampiric_heal_pct, affix.heal_pct)
    enemy.thorns_pct = max(enemy.thorns_pct, affix.thorns_pct)
    if affix.hex_turns > 0:
        enemy.hex_turns = max(enemy.hex_turns, affix.hex_turns)
        enemy.hex_atk_down = max(enemy.hex_atk_down, affix.hex_atk_down)
        enemy.hex_armor_down = max(enemy.hex_armor_down, affix.hex_armor_down)
        enemy.hex_res_down = max(enemy.hex_res_down, affix.hex_res_down)
    if affix.chill_chance > 0:
        enemy.chill_chance = max(enemy.chill_chance, affix.chill_chance)
        enemy.chill_turns = max(enemy.chill_turns, affix.chill_turns)
    if affix.berserk_threshold > 0:
        enemy.berserk_threshold = max(enemy.berserk_threshold, affix.berserk_threshold)
        enemy.berserk_atk_pct = max(enemy.berserk_atk_pct, affix.berserk_atk_pct)
    enemy.regen_pct += affix.regen_pct

    enemy.affixes.append(affix.id)
    enemy.affix_labels.append(affix.label)


def roll_affixes(enemy: Enemy, rarity: RarityDefinition, ctx: SpawnContext) -> list[str]:
    """Roll and apply affixes; returns the ids applied."""
    count = roll_affix_count(enemy, rarity, ctx)
    if count <= 0 or not ctx.affixes:
        return []
    chosen = pick_affixes(enemy, count, ctx)
    for affix in chosen:
        apply_affix(enemy, affix)
    if chosen:
        enemy.posture_max = compute_posture_max(enemy.level, enemy.is_elite, enemy.is_boss)
        logger.debug("%s affixes: %s", enemy.base_name, [a.id for a in chosen])
    return [a.id for a in chosen]
