"""Damage calculation.

Implements the fixed, order-sensitive damage pipeline:

    attack stat * potency * enrage
        -> elemental affinity (and attacker elemental bonus)
        -> flat elemental resistance, resist-all
        -> armor / magic-resist mitigation (after penetration),
           then vulnerable / damage-reduction / chill / mark / difficulty
        -> crit
        -> round, floor(0)

Dodge is evaluated *before* the pipeline by :func:`roll_dodge`; a dodged
hit never reaches it.  Nothing here mutates an actor.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, NamedTuple

from ember_combat.ir.abilities import DamageType

if TYPE_CHECKING:
    from ember_combat.ir.abilities import AbilityDefinition
    from ember_combat.sim.core.entities import Actor
    from ember_combat.sim.core.rng import CombatRNG

CRIT_MULT = 1.5

_VULNERABLE_MULT = 1.15
_DMG_REDUCTION_MULT = 0.75
_CHILLED_MULT = 0.9
_MARKED_MULT = 1.10

_MAX_CRIT = 75.0
_MAX_DODGE = 60.0
_MAX_DODGE_WITH_EVASION = 75.0
_MAX_ELEMENT_RESIST = 75.0
_MAX_RESIST_ALL = 80.0


class DamageRoll(NamedTuple):
    """Result of one pass through the pipeline."""

    amount: int
    crit: bool = False


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (``round`` is banker's)."""
    return int(math.floor(value + 0.5))


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


# ---------------------------------------------------------------------------
# Pure pipeline
# ---------------------------------------------------------------------------

def mitigation(defense: float, penetration_pct: float, damage_type: DamageType) -> float:
    """Fraction of damage that gets through *defense*."""
    effective = max(0.0, defense) * (1 - _clamp(penetration_pct, 0, 100) / 100)
    if damage_type == DamageType.MAGIC:
        return 100 / (100 + effective * 9)
    return 100 / (100 + effective * 10)


def resolve_damage(
    attack_stat: float,
    potency: float,
    damage_type: DamageType,
    element: str | None,
    defense: float,
    penetration_pct: float = 0.0,
    affinity: float = 1.0,
    element_resist_pct: float = 0.0,
    crit_chance: float = 0.0,
    crit_mult: float = CRIT_MULT,
    *,
    enrage_mult: float = 1.0,
    resist_all_pct: float = 0.0,
    modifier: float = 1.0,
    rng: CombatRNG | None = None,
) -> DamageRoll:
    """Compute final damage.  ``amount`` is always a non-negative int.

    Pipeline (order matters):
        1. ``attack_stat * potency * enrage_mult``
        2. Multiply by elemental affinity
        3. Reduce by flat elemental resist % and resist-all %
        4. Mitigate by defense (after penetration), then *modifier*
        5. Crit multiplier if the crit roll succeeds
        6. Round, floor at 0

    The crit roll draws from *rng* only when ``crit_chance > 0``.
    """
    damage = max(0.0, attack_stat) * max(0.0, potency) * enrage_mult

    # Step 2: affinity
    if element:
        damage *= max(0.0, affinity)

    # Step 3: flat resists
    if element:
        damage *= 1 - _clamp(element_resist_pct, 0, _MAX_ELEMENT_RESIST) / 100
    damage *= 1 - _clamp(resist_all_pct, 0, _MAX_RESIST_ALL) / 100

    # Step 4: defense mitigation + situational modifiers
    damage *= mitigation(defense, penetration_pct, damage_type)
    damage *= max(0.0, modifier)

    # Step 5: crit
    crit = False
    chance = _clamp(crit_chance, 0, _MAX_CRIT) / 100
    if rng is not None and chance > 0:
        crit = rng.random_float("combat.crit") < chance
        if crit:
            damage *= crit_mult

    # Step 6: round, floor at 0
    if not math.isfinite(damage):
        damage = 0.0
    return DamageRoll(max(0, round_half_up(damage)), crit)


# ---------------------------------------------------------------------------
# Actor-derived inputs
# ---------------------------------------------------------------------------

def attack_stat(actor: Actor, damage_type: DamageType) -> int:
    """Scaling stat after flat buffs and debuffs."""
    s = actor.status
    if damage_type == DamageType.MAGIC:
        value = actor.stats.magic + s.buff_magic - s.magic_down
    else:
        value = actor.stats.attack + s.buff_attack + s.buff_from_companion - s.atk_down
    return max(0, value)


def defense_stat(actor: Actor, damage_type: DamageType) -> int:
    s = actor.status
    if damage_type == DamageType.MAGIC:
        value = actor.stats.magic_res + s.magic_res_buff - s.magic_res_down
    else:
        value = actor.stats.armor + s.armor_buff - s.armor_down
    return max(0, value)


def enrage_multiplier(actor: Actor, damage_type: DamageType) -> float:
    """Enrage adds its full bonus to physical hits and half to magic."""
    s = actor.status
    if s.enrage_turns <= 0 or s.enrage_atk_pct <= 0:
        return 1.0
    scale = 0.5 if damage_type == DamageType.MAGIC else 1.0
    return 1 + s.enrage_atk_pct * scale


def affinity_for(attacker: Actor, defender: Actor, element: str | None) -> float:
    """Defender weakness/resistance times the attacker's elemental bonus."""
    if not element:
        return 1.0
    weakness = getattr(defender, "affinities", {}).get(element, 1.0)
    bonus = attacker.stats.elemental_bonus.get(element, 0.0)
    return weakness * (1 + bonus / 100)


def hit_element(attacker: Actor, ability: AbilityDefinition) -> str | None:
    """The ability's own element, else the attacker's offense element for its damage type."""
    if ability.element:
        return ability.element
    if ability.damage_type == DamageType.MAGIC:
        return getattr(attacker, "magic_element", None)
    return getattr(attacker, "attack_element", None)


def element_resist_for(defender: Actor, element: str | None) -> float:
    if not element:
        return 0.0
    return _clamp(defender.stats.elemental_resist.get(element, 0.0), 0, _MAX_ELEMENT_RESIST)


def outcome_modifier(attacker: Actor, defender: Actor, difficulty_mod: float = 1.0) -> float:
    """Situational multipliers applied after mitigation."""
    mod = difficulty_mod
    if defender.status.vulnerable_turns > 0:
        mod *= _VULNERABLE_MULT
    if defender.status.dmg_reduction_turns > 0:
        mod *= _DMG_REDUCTION_MULT
    if defender.status.marked_turns > 0:
        mod *= _MARKED_MULT
    if attacker.status.chilled_turns > 0:
        mod *= _CHILLED_MULT
    return mod


def dodge_chance(defender: Actor) -> float:
    """Effective dodge percent, including evasion and vanish."""
    if defender.status.vanish_turns > 0:
        return 100.0
    base = _clamp(defender.stats.dodge_chance, 0, _MAX_DODGE)
    if defender.status.evasion_turns > 0:
        base += defender.status.evasion_bonus
    return _clamp(base, 0, _MAX_DODGE_WITH_EVASION)


def roll_dodge(rng: CombatRNG, defender: Actor, ability: AbilityDefinition | None = None) -> bool:
    """Return ``True`` if the hit is dodged.

    Undodgeable abilities never draw.  Vanish dodges without drawing.
    """
    if ability is not None and ability.undodgeable:
        return False
    chance = dodge_chance(defender)
    if chance <= 0:
        return False
    if chance >= 100:
        return True
    return rng.random_float("combat.dodge") * 100 < chance


# ---------------------------------------------------------------------------
# Ability-level helpers
# ---------------------------------------------------------------------------

def roll_ability_damage(
    attacker: Actor,
    defender: Actor,
    ability: AbilityDefinition,
    rng: CombatRNG | None = None,
    difficulty_mod: float = 1.0,
) -> DamageRoll:
    """Run *ability* through the pipeline for a concrete attacker/defender.

    Pass ``rng=None`` to skip the crit roll entirely (estimates).
    """
    damage_type = ability.damage_type
    element = hit_element(attacker, ability)
    return resolve_damage(
        attack_stat(attacker, damage_type),
        ability.potency,
        damage_type,
        element,
        defense_stat(defender, damage_type),
        penetration_pct=attacker.stats.armor_pen,
        affinity=affinity_for(attacker, defender, element),
        element_resist_pct=element_resist_for(defender, element),
        crit_chance=attacker.stats.crit_chance,
        enrage_mult=enrage_multiplier(attacker, damage_type),
        resist_all_pct=defender.stats.resist_all,
        modifier=outcome_modifier(attacker, defender, difficulty_mod),
        rng=rng,
    )


def estimate_damage(
    attacker: Actor,
    defender: Actor,
    ability: AbilityDefinition,
    difficulty_mod: float = 1.0,
) -> int:
    """Expected non-crit damage.  Never draws from an RNG."""
    if not ability.kind.deals_damage:
        return 0
    return roll_ability_damage(attacker, defender, ability, None, difficulty_mod).amount
