"""Stat scaling shared by level curves, elites, rarities and affixes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ember_combat.sim.mechanics.damage import round_half_up

if TYPE_CHECKING:
    from ember_combat.ir.rarity import StatMultipliers
    from ember_combat.sim.core.entities import Enemy

# Per-level exponential growth
HP_GROWTH = 1.14
OFFENSE_GROWTH = 1.11
DEFENSE_GROWTH = 1.05
XP_GROWTH = 1.16
GOLD_GROWTH = 1.13


def scale_stats(
    enemy: Enemy,
    hp: float = 1.0,
    attack: float = 1.0,
    magic: float = 1.0,
    armor: float = 1.0,
    magic_res: float = 1.0,
    xp: float = 1.0,
    gold: float = 1.0,
) -> None:
    """Multiply the enemy's stat block.  Every result is rounded and clamped.

    Current HP is left untouched; callers decide how HP follows max HP.
    """
    stats = enemy.stats
    enemy.max_hp = max(1, round_half_up(enemy.max_hp * hp))
    stats.attack = max(0, round_half_up(stats.attack * attack))
    stats.magic = max(0, round_half_up(stats.magic * magic))
    stats.armor = max(0, round_half_up(stats.armor * armor))
    stats.magic_res = max(0, round_half_up(stats.magic_res * magic_res))
    enemy.xp = max(1, round_half_up(enemy.xp * xp))
    enemy.gold_min = max(0, round_half_up(enemy.gold_min * gold))
    enemy.gold_max = max(enemy.gold_min, round_half_up(enemy.gold_max * gold))


def apply_multipliers(enemy: Enemy, mults: StatMultipliers) -> None:
    scale_stats(
        enemy,
        hp=mults.hp,
        attack=mults.attack,
        magic=mults.magic,
        armor=mults.armor,
        magic_res=mults.magic_res,
        xp=mults.xp,
        gold=mults.gold,
    )


def scale_to_level(enemy: Enemy, base_level: int, level: int, hp_mod: float = 1.0) -> None:
    """Scale a freshly copied template from *base_level* to *level*.

    ``hp_mod`` is the difficulty HP multiplier.  The enemy ends at full HP.
    """
    delta = level - base_level
    scale_stats(
        enemy,
        hp=HP_GROWTH ** delta * hp_mod,
        attack=OFFENSE_GROWTH ** delta,
        magic=OFFENSE_GROWTH ** delta,
        armor=DEFENSE_GROWTH ** delta,
        magic_res=DEFENSE_GROWTH ** delta,
        xp=XP_GROWTH ** delta,
        gold=GOLD_GROWTH ** delta,
    )
    enemy.level = level
    enemy.hp = enemy.max_hp


def sync_base_stats(enemy: Enemy) -> None:
    """Mirror the final attack/magic so flat debuffs work off scaled values."""
    enemy.base_attack = enemy.stats.attack
    enemy.base_magic = enemy.stats.magic
