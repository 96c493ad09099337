"""Rarity tiers: rolling a tier and applying its multipliers once."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ember_combat.sim.spawn.scaling import apply_multipliers

if TYPE_CHECKING:
    from ember_combat.ir.rarity import RarityDefinition
    from ember_combat.sim.core.entities import Enemy
    from ember_combat.sim.spawn.context import SpawnContext

logger = logging.getLogger(__name__)

# (rarity id, weight, minimum enemy level) per difficulty
_NORMAL_TABLE = (
    ("common", 5.0, 1),
    ("uncommon", 88.0, 1),
    ("rare", 7.0, 1),
)
_NORMAL_LOW_LEVEL = 4
_HARD_TABLE = (
    ("uncommon", 12.0, 1),
    ("rare", 73.0, 1),
    ("epic", 10.0, 8),
    ("legendary", 4.0, 10),
    ("mythic", 0.2, 20),
)

# Elite table: (rarity id, cumulative threshold) tried in order
_ELITE_THRESHOLDS = {
    "hard": (("mythic", 0.01), ("legendary", 0.09), ("epic", 0.34)),
    "normal": (("legendary", 0.03), ("epic", 0.20)),
}
_ELITE_FALLBACK = {"hard": "rare", "normal": "rare"}


def top_tier(rarities: list[RarityDefinition]) -> RarityDefinition:
    return max(rarities, key=lambda r: r.tier)


def lowest_tier(rarities: list[RarityDefinition]) -> RarityDefinition:
    return min(rarities, key=lambda r: r.tier)


def _weighted_pick(
    entries: list[tuple[RarityDefinition, float]],
    ctx: SpawnContext,
    tag: str,
) -> RarityDefinition | None:
    total = sum(w for _, w in entries)
    if total <= 0:
        return None
    roll = ctx.rand(tag) * total
    for rarity, weight in entries:
        roll -= weight
        if roll <= 0:
            return rarity
    return entries[-1][0]


def _table_entries(
    table: tuple[tuple[str, float, int], ...],
    level: int,
    by_id: dict[str, RarityDefinition],
) -> list[tuple[RarityDefinition, float]]:
    return [
        (by_id[rid], weight)
        for rid, weight, min_level in table
        if rid in by_id and level >= min_level and weight > 0
    ]


def _normal_table(level: int) -> tuple[tuple[str, float, int], ...]:
    if level >= _NORMAL_LOW_LEVEL:
        return _NORMAL_TABLE
    # Early zones lean uncommon instead of rare
    return (("common", 5.0, 1), ("uncommon", 91.0, 1), ("rare", 4.0, 1))


def _roll_elite_rarity(
    enemy: Enemy,
    ctx: SpawnContext,
    by_id: dict[str, RarityDefinition],
) -> RarityDefinition | None:
    thresholds = _ELITE_THRESHOLDS.get(ctx.difficulty_id, _ELITE_THRESHOLDS["normal"])
    roll = ctx.rand("rarity.elite")
    for rid, threshold in thresholds:
        rarity = by_id.get(rid)
        if rarity is not None and enemy.level >= rarity.min_level and roll < threshold:
            return rarity
    fallback = _ELITE_FALLBACK.get(ctx.difficulty_id, "rare")
    return by_id.get(fallback)


def roll_rarity(enemy: Enemy, ctx: SpawnContext) -> RarityDefinition:
    """Pick a rarity tier for *enemy*.

    Bosses always get the top configured tier.  Non-boss enemies on easy
    never exceed the lowest tier.  Elites use a threshold table; everybody
    else draws from the difficulty's level-gated weight table.  Difficulties
    without a dedicated table use each tier's configured weight.
    """
    if not ctx.rarities:
        raise ValueError("No rarity tiers configured")
    if enemy.is_boss:
        return top_tier(ctx.rarities)
    floor = lowest_tier(ctx.rarities)
    if ctx.difficulty_id == "easy":
        return floor

    by_id = {r.id: r for r in ctx.rarities}
    if enemy.is_elite:
        return _roll_elite_rarity(enemy, ctx, by_id) or floor

    if ctx.difficulty_id == "hard":
        entries = _table_entries(_HARD_TABLE, enemy.level, by_id)
        fallback = by_id.get("rare", floor)
    elif ctx.difficulty_id == "normal":
        entries = _table_entries(_normal_table(enemy.level), enemy.level, by_id)
        fallback = by_id.get("uncommon", floor)
    else:
        entries = [
            (r, r.weight) for r in ctx.rarities
            if enemy.level >= r.min_level and r.weight > 0
        ]
        fallback = floor

    return _weighted_pick(entries, ctx, "rarity.roll") or fallback


def apply_rarity(enemy: Enemy, rarity: RarityDefinition) -> bool:
    """Apply *rarity* to *enemy* exactly once.

    A full-HP enemy stays at full HP; a damaged one keeps its absolute HP
    deficit.  Returns ``False`` when a rarity was already applied.
    """
    if enemy.rarity_applied:
        return False

    was_full = enemy.hp >= enemy.max_hp
    deficit = max(0, enemy.max_hp - enemy.hp)

    apply_multipliers(enemy, rarity.mults)
    if was_full:
        enemy.hp = enemy.max_hp
    else:
        enemy.hp = min(enemy.max_hp, max(1, enemy.max_hp - deficit))

    enemy.rarity = rarity.id
    enemy.rarity_tier = rarity.tier
    enemy.rarity_label = rarity.label
    enemy.drop_mult = rarity.drop
    enemy.rarity_applied = True
    logger.debug("%s rarity -> %s", enemy.base_name, rarity.id)
    return True
