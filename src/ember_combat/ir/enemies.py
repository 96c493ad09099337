"""Enemy templates -- the unscaled stat blocks the spawn pipeline starts from."""

from __future__ import annotations

from pydantic import BaseModel, Field


class EnemyTemplate(BaseModel):
    """Static definition of an enemy before level, difficulty and rarity
    scaling are applied."""

    id: str
    name: str

    level: int = 1
    """Level the stat block is authored at."""

    max_hp: int
    attack: int = 0
    magic: int = 0
    armor: int = 0
    magic_res: int = 0
    speed: int = 0
    dodge_chance: float = 0.0
    crit_chance: float = 0.0
    thorns: int = 0

    xp: int = 1
    gold_min: int = 0
    gold_max: int = 0

    is_boss: bool = False
    behavior: str = "basic"
    """Ability-set key (``"basic"``, ``"caster"``, ``"bossDragon"`` ...)."""

    abilities: list[str] | None = None
    """Explicit kit.  When set it overrides the behavior's ability set."""

    affinities: dict[str, float] = Field(default_factory=dict)
    """Element -> damage multiplier (> 1 weak, < 1 resistant)."""

    elemental_resist: dict[str, float] = Field(default_factory=dict)
    """Element -> flat resist percent."""

    attack_element: str | None = None
    magic_element: str | None = None
    """Offense elements for untagged hits.  Inferred at spawn when unset."""
