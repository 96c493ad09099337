"""Rarity tiers, elite modifiers and mini-affixes rolled onto spawned enemies."""

from __future__ import annotations

from pydantic import BaseModel, Field


class StatMultipliers(BaseModel):
    """Per-stat multipliers shared by rarities, elites and affixes."""

    hp: float = 1.0
    attack: float = 1.0
    magic: float = 1.0
    armor: float = 1.0
    magic_res: float = 1.0
    xp: float = 1.0
    gold: float = 1.0


class RarityDefinition(BaseModel):
    """One discrete power band, applied once per enemy lifetime."""

    id: str
    label: str
    tier: int
    min_level: int = 1
    weight: float = 0.0
    mults: StatMultipliers = Field(default_factory=StatMultipliers)
    drop: float = 1.0
    """Multiplier on the loot drop chance."""

    affix_count: int = 0
    """Base number of affixes rolled for this tier."""

    affix_upgrade_chance: float = 0.0
    """Chance of one extra affix on top of :attr:`affix_count`."""

    @property
    def max_affix_count(self) -> int:
        """Most affixes this tier can produce before the boss bonus."""
        return self.affix_count + (1 if self.affix_upgrade_chance > 0 else 0)


class EliteDefinition(BaseModel):
    """Elite modifier, independent of rarity and affixes."""

    id: str
    label: str
    mults: StatMultipliers = Field(default_factory=StatMultipliers)
    regen_pct: float = 0.0


class AffixDefinition(BaseModel):
    """Named mini-modifier.  Stat multipliers plus an optional combat hook."""

    id: str
    label: str
    weight: float = 1.0
    min_level: int = 1
    mults: StatMultipliers = Field(default_factory=StatMultipliers)

    heal_pct: float = 0.0
    """Vampiric: fraction of HP damage dealt healed back."""

    thorns_pct: float = 0.0
    """Fraction of the player's damage reflected back at them."""

    hex_turns: int = 0
    hex_atk_down: int = 0
    hex_armor_down: int = 0
    hex_res_down: int = 0

    chill_chance: float = 0.0
    chill_turns: int = 0

    berserk_threshold: float = 0.0
    """HP ratio at or below which the berserk latch fires."""

    berserk_atk_pct: float = 0.0

    regen_pct: float = 0.0
