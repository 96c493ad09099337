"""Elemental tuning -- resist scaling, rolled elemental traits and the
element an enemy's untagged hits carry.

Affinities are multipliers (``> 1`` weak, ``< 1`` resistant); flat resists
are percent reductions kept in ``stats.elemental_resist``.  Scaling stays
bounded so no enemy becomes immune from tuning alone.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from ember_combat.sim.core.entities import ElementalTrait
from ember_combat.sim.mechanics.damage import round_half_up

if TYPE_CHECKING:
    from ember_combat.sim.core.entities import Enemy
    from ember_combat.sim.spawn.context import SpawnContext

logger = logging.getLogger(__name__)

_MAX_FLAT_RESIST = 75
_MIN_RESIST_MULT = 0.4
_MAX_WEAK_MULT = 2.5

_TRAIT_MAX_CHANCE = 0.55
_TRAIT_PICK_TRIES = 4

_DEFAULT_BIAS: tuple[tuple[str, float], ...] = (
    ("arcane", 18), ("shadow", 18), ("fire", 12), ("frost", 12), ("lightning", 12),
    ("nature", 10), ("poison", 10), ("holy", 8), ("earth", 8),
)

_ZONE_BIAS: dict[str, tuple[tuple[str, float], ...]] = {
    "forest": (("nature", 28), ("poison", 18), ("frost", 10), ("fire", 10),
               ("lightning", 10), ("shadow", 12), ("arcane", 12)),
    "marsh": (("poison", 32), ("nature", 22), ("shadow", 16), ("frost", 10),
              ("fire", 8), ("arcane", 12)),
    "ruins": (("arcane", 26), ("shadow", 18), ("fire", 12), ("lightning", 14),
              ("frost", 10), ("holy", 10), ("earth", 10)),
    "frostpeak": (("frost", 34), ("lightning", 14), ("earth", 14), ("shadow", 12),
                  ("arcane", 12), ("fire", 8), ("holy", 6)),
    "catacombs": (("shadow", 34), ("holy", 16), ("poison", 12), ("arcane", 14),
                  ("frost", 10), ("fire", 6), ("earth", 8)),
    "keep": (("holy", 22), ("arcane", 20), ("fire", 14), ("lightning", 14),
             ("earth", 12), ("shadow", 10), ("frost", 8)),
}

_OPPOSING = {
    "fire": "frost",
    "frost": "fire",
    "lightning": "earth",
    "earth": "lightning",
    "poison": "holy",
    "holy": "poison",
    "nature": "shadow",
    "shadow": "nature",
    "arcane": "shadow",
}

# First match wins.
_KEYWORDS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("frost", re.compile(r"frozen|frost|ice|chill|glacier|snow")),
    ("fire", re.compile(r"ember|flame|fire|burn|cinder|dragon")),
    ("lightning", re.compile(r"lightning|storm|thunder|shock|spark")),
    ("holy", re.compile(r"holy|radiant|sun|blessed")),
    ("shadow", re.compile(r"void|shadow|wraith|nec|vampir|curse")),
    ("arcane", re.compile(r"arcane|mage|witch|sorcer|mystic")),
    ("poison", re.compile(r"poison|toxic|venom|plague|spit")),
    ("nature", re.compile(r"thorn|vine|nature|mire|swamp|bog|marsh")),
    ("earth", re.compile(r"earth|stone|golem|rock|sand")),
)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _round3(value: float) -> float:
    return round_half_up(value * 1000) / 1000


def _tuning_id(difficulty_id: str) -> str:
    """Fixed preset that drives tuning.  ``dynamic`` tunes like normal."""
    return difficulty_id if difficulty_id in ("easy", "hard") else "normal"


def opposing_element(element: str) -> str:
    return _OPPOSING.get(element, "fire")


def zone_element_bias(zone_id: str) -> tuple[tuple[str, float], ...]:
    return _ZONE_BIAS.get(zone_id.lower(), _DEFAULT_BIAS)


# ---------------------------------------------------------------------------
# Scaling of template resists
# ---------------------------------------------------------------------------

def _scale_affinities(enemy: Enemy, factor: float, scale_weak: bool) -> None:
    for element, mult in enemy.affinities.items():
        if mult < 1:
            scaled = 1 - (1 - mult) * factor
            enemy.affinities[element] = _clamp(_round3(scaled), _MIN_RESIST_MULT, 1.0)
        elif mult > 1 and scale_weak:
            scaled = 1 + (mult - 1) * factor
            enemy.affinities[element] = _clamp(_round3(scaled), 1.0, _MAX_WEAK_MULT)


def _scale_flat_resists(enemy: Enemy, factor: float) -> None:
    resists = enemy.stats.elemental_resist
    for element, value in resists.items():
        if value > 0:
            resists[element] = _clamp(round_half_up(value * factor), 0, _MAX_FLAT_RESIST)


def scale_elements_to_level(enemy: Enemy, delta: int) -> None:
    """Strengthen resists and weaknesses for levels gained above the template.

    Flat resists grow 2 % per 5 levels; affinity offsets from 1.0 grow 1 %
    per level.  Both factors cap at 1.25.
    """
    if delta <= 0:
        return
    _scale_flat_resists(enemy, _clamp(1 + 0.02 * (delta / 5), 1, 1.25))
    _scale_affinities(enemy, _clamp(1 + 0.01 * delta, 1, 1.25), scale_weak=True)


def scale_elements_to_difficulty(enemy: Enemy, difficulty_id: str) -> None:
    """Easy softens resists (x0.85), hard hardens them (x1.25).  Weaknesses are left alone."""
    tuning = _tuning_id(difficulty_id)
    factor = {"easy": 0.85, "hard": 1.25}.get(tuning, 1.0)
    _scale_flat_resists(enemy, factor)
    _scale_affinities(enemy, factor, scale_weak=False)


# ---------------------------------------------------------------------------
# Rolled traits
# ---------------------------------------------------------------------------

def trait_chance(enemy: Enemy, difficulty_id: str) -> float:
    tuning = _tuning_id(difficulty_id)
    chance = {"easy": 0.05, "hard": 0.18}.get(tuning, 0.10)
    chance += _clamp((enemy.level - 5) * 0.005, 0, 0.12)
    tier = enemy.rarity_tier
    if tier >= 3:
        chance += 0.05
    if tier >= 4:
        chance += 0.08
    if tier >= 5:
        chance += 0.10
    if tier >= 6:
        chance += 0.12
    if enemy.is_elite:
        chance += 0.05
    return _clamp(chance, 0, _TRAIT_MAX_CHANCE)


def _pick_weighted(pairs: tuple[tuple[str, float], ...], ctx: SpawnContext, tag: str) -> str:
    weights = [max(0.0001, w) for _, w in pairs]
    r = ctx.rand(tag) * sum(weights)
    for (element, _), weight in zip(pairs, weights):
        r -= weight
        if r <= 0:
            return element
    return pairs[-1][0]


def roll_elemental_trait(enemy: Enemy, ctx: SpawnContext) -> ElementalTrait | None:
    """Maybe give a non-boss a themed resist plus the opposing weakness.

    Never rolls for bosses or in the village.
    """
    if enemy.is_boss or ctx.in_village:
        return None
    if ctx.rand("spawn.elemTrait.roll") >= trait_chance(enemy, ctx.difficulty_id):
        return None

    bias = zone_element_bias(ctx.zone_id)
    chosen = None
    for attempt in range(_TRAIT_PICK_TRIES):
        chosen = _pick_weighted(bias, ctx, f"spawn.elemTrait.pick.{attempt}")
        already = (
            enemy.stats.elemental_resist.get(chosen, 0) > 0
            or enemy.affinities.get(chosen, 1.0) < 1
        )
        if not already:
            break

    tuning = _tuning_id(ctx.difficulty_id)
    delta = _clamp(enemy.level - 1, 0, 30)
    weak = opposing_element(chosen)

    resist_mult = {"easy": 0.94, "hard": 0.90}.get(tuning, 0.92)
    resist_mult -= _clamp(delta * 0.002, 0, 0.06)
    resist_mult = _clamp(_round3(resist_mult), 0.75, 0.98)

    weak_mult = {"easy": 1.08, "hard": 1.12}.get(tuning, 1.10)
    weak_mult += _clamp(delta * 0.002, 0, 0.06)
    weak_mult = _clamp(_round3(weak_mult), 1.05, 1.30)

    flat = {"easy": 6, "hard": 10}.get(tuning, 8)
    flat = int(_clamp(flat + round_half_up(_clamp(delta * 0.25, 0, 10)), 0, _MAX_FLAT_RESIST))

    # Keep the stronger of any existing resist or weakness.
    existing = enemy.affinities.get(chosen, 1.0)
    enemy.affinities[chosen] = min(existing, resist_mult) if existing < 1 else resist_mult
    existing = enemy.affinities.get(weak, 1.0)
    enemy.affinities[weak] = max(existing, weak_mult) if existing > 1 else weak_mult

    resists = enemy.stats.elemental_resist
    resists[chosen] = _clamp(round_half_up(resists.get(chosen, 0) + flat), 0, _MAX_FLAT_RESIST)

    trait = ElementalTrait(
        element=chosen, label=f"{chosen.capitalize()}-Touched", flat_resist=flat, weak=weak,
    )
    cap = 2 if tuning == "hard" else 1
    if len(enemy.elemental_traits) < cap:
        enemy.elemental_traits.append(trait)
    logger.debug("%s rolled elemental trait %s", enemy.base_name, trait.label)
    return trait


# ---------------------------------------------------------------------------
# Offense elements
# ---------------------------------------------------------------------------

def infer_offense_element(enemy: Enemy, zone_id: str = "") -> str | None:
    """Best guess at the element an enemy fights with.

    Strongest trait, then strongest resist affinity, then highest flat
    resist, then keywords in its name, template id, affixes and zone.
    """
    if enemy.elemental_traits:
        return max(enemy.elemental_traits, key=lambda t: t.flat_resist).element

    resists = {e: m for e, m in enemy.affinities.items() if m < 1}
    if resists:
        return min(resists, key=resists.get)

    flats = {e: v for e, v in enemy.stats.elemental_resist.items() if v > 0}
    if flats:
        return max(flats, key=flats.get)

    corpus = " ".join(
        [enemy.base_name or enemy.name, enemy.template_id, *enemy.affixes, zone_id]
    ).lower()
    for element, pattern in _KEYWORDS:
        if pattern.search(corpus):
            return element
    return None


def assign_offense_elements(enemy: Enemy, zone_id: str = "") -> None:
    """Fill ``attack_element`` / ``magic_element``.  Explicit choices win.

    A single explicit element is mirrored onto the other slot.
    """
    if enemy.attack_element:
        enemy.attack_element = enemy.attack_element.strip().lower()
    if enemy.magic_element:
        enemy.magic_element = enemy.magic_element.strip().lower()

    if enemy.attack_element and not enemy.magic_element:
        enemy.magic_element = enemy.attack_element
    elif enemy.magic_element and not enemy.attack_element:
        enemy.attack_element = enemy.magic_element
    elif not enemy.attack_element and not enemy.magic_element:
        primary = infer_offense_element(enemy, zone_id)
        enemy.attack_element = primary
        enemy.magic_element = primary


def apply_elemental_tuning(enemy: Enemy, delta: int, ctx: SpawnContext) -> None:
    """Level scaling, difficulty scaling, trait roll, then offense elements."""
    scale_elements_to_level(enemy, delta)
    scale_elements_to_difficulty(enemy, ctx.difficulty_id)
    roll_elemental_trait(enemy, ctx)
    assign_offense_elements(enemy, ctx.zone_id)
