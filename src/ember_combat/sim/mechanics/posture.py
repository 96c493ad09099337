"""Posture -- a secondary enemy pool that breaks into a lost turn."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ember_combat.sim.core.context import Severity
from ember_combat.sim.mechanics.damage import round_half_up

if TYPE_CHECKING:
    from ember_combat.sim.core.context import BattleContext
    from ember_combat.sim.core.entities import Enemy

_POSTURE_BASE = 34
_POSTURE_PER_LEVEL = 6
_ELITE_MULT = 1.2
_BOSS_MULT = 1.6
_POSTURE_MIN = 25
_POSTURE_MAX = 420

_GAIN_PCT = 0.25
_PER_HIT_CAP_PCT = 0.35


def compute_posture_max(level: int, is_elite: bool = False, is_boss: bool = False) -> int:
    """Posture pool size for an enemy of *level*."""
    value = float(_POSTURE_BASE + max(1, level) * _POSTURE_PER_LEVEL)
    if is_elite:
        value *= _ELITE_MULT
    if is_boss:
        value *= _BOSS_MULT
    return max(_POSTURE_MIN, min(_POSTURE_MAX, round_half_up(value)))


def apply_posture_damage(
    ctx: BattleContext,
    enemy: Enemy,
    damage_dealt: int,
    crit: bool = False,
    basic: bool = False,
) -> bool:
    """Build posture on *enemy* from a player hit.

    A full bar resets to 0, sets ``broken_turns`` to at least 1 and
    discards any pending intent.  Returns ``True`` if the enemy broke.
    """
    dmg = max(0, int(damage_dealt))
    if dmg <= 0 or enemy.is_dead:
        return False
    if enemy.posture_max <= 0:
        enemy.posture_max = compute_posture_max(enemy.level, enemy.is_elite, enemy.is_boss)

    gain = max(1, round_half_up(dmg * _GAIN_PCT))
    if basic:
        gain += 1
    if crit:
        gain = round_half_up(gain * 1.5)
    if enemy.is_boss:
        gain = max(1, round_half_up(gain * 0.75))
    if enemy.is_elite:
        gain = max(1, round_half_up(gain * 0.85))

    per_hit_cap = max(1, round_half_up(enemy.posture_max * _PER_HIT_CAP_PCT))
    enemy.posture += min(per_hit_cap, gain)

    if enemy.posture < enemy.posture_max:
        return False

    enemy.posture = 0
    enemy.status.broken_turns = max(enemy.status.broken_turns, 1)
    if enemy.intent is not None:
        enemy.intent = None
        ctx.log(f"{enemy.name}'s focus shatters!", Severity.GOOD)
    ctx.log(f"{enemy.name} is Broken!", Severity.GOOD)
    return True
