"""Inputs to the spawn pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

from pydantic import BaseModel, Field

from ember_combat.ir.difficulty import DifficultyConfig
from ember_combat.ir.rarity import AffixDefinition, EliteDefinition, RarityDefinition
from ember_combat.sim.core.rng import CombatRNG

if TYPE_CHECKING:
    from ember_combat.sim.content.registry import ContentRegistry
    from ember_combat.sim.core.entities import Enemy

VILLAGE_ZONE = "village"


class SpawnContext(BaseModel):
    """Zone, difficulty, tables and RNG for one or more spawn calls."""

    model_config = {"arbitrary_types_allowed": True}

    zone_min_level: int = 1
    zone_max_level: int = 1
    zone_id: str = "wilds"
    """``"village"`` suppresses elites and affixes."""

    difficulty: DifficultyConfig
    rng: CombatRNG

    rarities: list[RarityDefinition] = Field(default_factory=list)
    affixes: list[AffixDefinition] = Field(default_factory=list)
    elites: list[EliteDefinition] = Field(default_factory=list)
    ability_sets: dict[str, list[str]] = Field(default_factory=dict)

    pick_ability_set: Callable[..., list[str]] | None = None
    """Optional override: ``pick_ability_set(enemy) -> list of ability ids``."""

    # -- RNG shorthands ------------------------------------------------------

    def rand(self, tag: str) -> float:
        return self.rng.random_float(tag)

    def rand_int(self, low: int, high: int, tag: str) -> int:
        return self.rng.random_int(low, high, tag)

    # -- queries -------------------------------------------------------------

    @property
    def difficulty_id(self) -> str:
        return self.difficulty.id

    @property
    def in_village(self) -> bool:
        return self.zone_id == VILLAGE_ZONE

    @classmethod
    def from_registry(
        cls,
        registry: ContentRegistry,
        rng: CombatRNG,
        difficulty: DifficultyConfig | str = "normal",
        zone_min_level: int = 1,
        zone_max_level: int = 1,
        zone_id: str = "wilds",
        **kwargs: Any,
    ) -> SpawnContext:
        """Build a context whose tables come from *registry*."""
        if isinstance(difficulty, str):
            difficulty = registry.get_difficulty(difficulty)
        return cls(
            zone_min_level=zone_min_level,
            zone_max_level=zone_max_level,
            zone_id=zone_id,
            difficulty=difficulty,
            rng=rng,
            rarities=list(registry.rarities.values()),
            affixes=list(registry.affixes.values()),
            elites=list(registry.elites.values()),
            ability_sets=dict(registry.ability_sets),
            **kwargs,
        )
