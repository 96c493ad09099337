"""Static content schema for the combat core.

Abilities, enemy templates, rarity/affix/elite tables and difficulty
presets are Pydantic models that load straight from the JSON files shipped
in ``ember_combat/data``.
"""

from .abilities import AbilityDefinition, AbilityKind, DamageType
from .difficulty import DifficultyConfig
from .enemies import EnemyTemplate
from .rarity import (
    AffixDefinition,
    EliteDefinition,
    RarityDefinition,
    StatMultipliers,
)

__all__ = [
    # abilities
    "AbilityDefinition",
    "AbilityKind",
    "DamageType",
    # difficulty
    "DifficultyConfig",
    # enemies
    "EnemyTemplate",
    # rarity
    "AffixDefinition",
    "EliteDefinition",
    "RarityDefinition",
    "StatMultipliers",
]
