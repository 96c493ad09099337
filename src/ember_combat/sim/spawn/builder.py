"""Template -> battle-ready enemy.

Steps, in order: copy the template, roll a level and scale to it, set up
runtime fields, maybe make it elite, roll and apply rarity, roll affixes,
tune elemental resists and offense elements, mirror base stats, and build
the display name.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ember_combat.sim.core.entities import Enemy, Stats
from ember_combat.sim.spawn.affixes import roll_affixes
from ember_combat.sim.spawn.display import rebuild_display_name
from ember_combat.sim.spawn.elite import apply_elite
from ember_combat.sim.spawn.elements import apply_elemental_tuning
from ember_combat.sim.spawn.rarity import apply_rarity, lowest_tier, roll_rarity
from ember_combat.sim.spawn.runtime import ensure_runtime
from ember_combat.sim.spawn.scaling import scale_to_level, sync_base_stats

if TYPE_CHECKING:
    from ember_combat.ir.enemies import EnemyTemplate
    from ember_combat.sim.spawn.context import SpawnContext

logger = logging.getLogger(__name__)


def copy_template(template: EnemyTemplate) -> Enemy:
    """Fresh enemy at the template's own level.  Shares no mutable state."""
    stats = Stats(
        attack=template.attack,
        magic=template.magic,
        armor=template.armor,
        magic_res=template.magic_res,
        speed=template.speed,
        dodge_chance=template.dodge_chance,
        crit_chance=template.crit_chance,
        thorns=template.thorns,
        elemental_resist=dict(template.elemental_resist),
    )
    return Enemy(
        template_id=template.id,
        name=template.name,
        base_name=template.name,
        level=template.level,
        max_hp=template.max_hp,
        hp=template.max_hp,
        stats=stats,
        xp=template.xp,
        gold_min=template.gold_min,
        gold_max=template.gold_max,
        is_boss=template.is_boss,
        behavior=template.behavior,
        abilities=list(template.abilities or []),
        affinities=dict(template.affinities),
        attack_element=template.attack_element,
        magic_element=template.magic_element,
    )


def roll_level(template: EnemyTemplate, ctx: SpawnContext) -> int:
    """Bosses spawn at the zone maximum; others roll within the zone."""
    if template.is_boss:
        return ctx.zone_max_level
    return ctx.rand_int(ctx.zone_min_level, ctx.zone_max_level, "spawn.levelRoll")


def spawn_enemy(template: EnemyTemplate, ctx: SpawnContext) -> Enemy:
    enemy = copy_template(template)
    level = roll_level(template, ctx)
    scale_to_level(enemy, template.level, level, ctx.difficulty.enemy_hp_mod)

    ensure_runtime(enemy, ctx)
    apply_elite(enemy, ctx)

    if ctx.rarities:
        apply_rarity(enemy, roll_rarity(enemy, ctx))
        floor = lowest_tier(ctx.rarities).tier
        rarity = next(r for r in ctx.rarities if r.id == enemy.rarity)
        roll_affixes(enemy, rarity, ctx)
    else:
        floor = enemy.rarity_tier

    apply_elemental_tuning(enemy, level - template.level, ctx)
    sync_base_stats(enemy)
    rebuild_display_name(enemy, floor)
    logger.debug(
        "Spawned %s (lvl %d, hp %d, rarity %s)",
        enemy.name, enemy.level, enemy.max_hp, enemy.rarity,
    )
    return enemy


def spawn_group(templates: list[EnemyTemplate], ctx: SpawnContext) -> list[Enemy]:
    """Spawn several enemies from the same context, in order."""
    return [spawn_enemy(t, ctx) for t in templates]
