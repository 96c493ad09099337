"""Ability definitions -- the static data behind every enemy and player action."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class AbilityKind(str, Enum):
    """Broad role of an ability.  Drives both resolution and AI scoring."""

    DAMAGE = "damage"
    DAMAGE_BLEED = "damage+bleed"
    DAMAGE_DEBUFF = "damage+debuff"
    DAMAGE_UTILITY = "damage+utility"
    DAMAGE_HEAL = "damage+heal"
    GUARD = "guard"
    BUFF = "buff"
    DEBUFF = "debuff"
    HEAL = "heal"

    @property
    def deals_damage(self) -> bool:
        return self.value.startswith("damage")


class DamageType(str, Enum):
    """Which attacker stat scales the hit and which defense mitigates it."""

    PHYSICAL = "physical"
    MAGIC = "magic"


class AbilityDefinition(BaseModel):
    """Complete definition of a single ability.

    Only the payload fields relevant to the ability's :class:`AbilityKind`
    need to be set; everything else stays at its neutral default.
    """

    id: str
    """Unique identifier (e.g. ``"heavyCleave"``)."""

    name: str
    """Display name used in combat log messages."""

    description: str = ""

    kind: AbilityKind

    damage_type: DamageType = DamageType.PHYSICAL

    element: str | None = None
    """Elemental tag (``"fire"``, ``"frost"``, ``"shadow"`` ...) or None."""

    potency: float = 1.0
    """Multiplier applied to the attacker's scaling stat."""

    cooldown: int = 0
    """Turns before the ability can be used again."""

    cost: int = 0
    """Player resource cost.  Enemies ignore it."""

    telegraph_turns: int = 0
    """Turns of wind-up before the ability resolves.  0 = instant."""

    telegraph_text: str | None = None

    undodgeable: bool = False

    # -- damage-over-time / debuffs ------------------------------------------

    bleed_turns: int = 0
    bleed_base: int = 0
    chill_turns: int = 0
    vulnerable_turns: int = 0
    armor_down: int = 0
    magic_res_down: int = 0
    atk_down: int = 0
    debuff_turns: int = 3
    mark_turns: int = 0
    stun_turns: int = 0
    forces_guard: bool = False
    """Target enemy spends its next turn bracing instead of acting."""

    # -- drains / utility ----------------------------------------------------

    drain_heal_pct: float = 0.0
    """Fraction of damage dealt healed back to the attacker."""

    drain_resource_pct: float = 0.0
    """Fraction of the target's max resource removed on hit."""

    shatter_flat: int = 0
    """Shield removed before the hit is absorbed."""

    heal_pct: float = 0.0
    """Fraction of the user's max HP restored (guards and heals)."""

    # -- self buffs ----------------------------------------------------------

    guard_turns: int = 2
    armor_bonus: int = 3
    enrage_turns: int = 2
    enrage_atk_pct: float = 0.2
    shield_flat: int = 0
    buff_attack: int = 0
    buff_magic: int = 0
    buff_turns: int = 0
    dmg_reduction_turns: int = 0
    evasion_bonus: int = 0
    evasion_turns: int = 0
    vanish_turns: int = 0
