"""Enemy spawn pipeline: template -> level -> elite -> rarity -> affixes -> elements."""

from ember_combat.sim.spawn.affixes import (
    AFFIX_CEILING,
    apply_affix,
    pick_affixes,
    roll_affix_count,
    roll_affixes,
)
from ember_combat.sim.spawn.builder import copy_template, roll_level, spawn_enemy, spawn_group
from ember_combat.sim.spawn.context import SpawnContext
from ember_combat.sim.spawn.display import rebuild_display_name
from ember_combat.sim.spawn.elements import (
    apply_elemental_tuning,
    assign_offense_elements,
    infer_offense_element,
    roll_elemental_trait,
    scale_elements_to_difficulty,
    scale_elements_to_level,
)
from ember_combat.sim.spawn.elite import apply_elite, elite_chance
from ember_combat.sim.spawn.rarity import apply_rarity, lowest_tier, roll_rarity, top_tier
from ember_combat.sim.spawn.runtime import default_ability_set, ensure_runtime
from ember_combat.sim.spawn.scaling import apply_multipliers, scale_to_level, sync_base_stats

__all__ = [
    "AFFIX_CEILING",
    "SpawnContext",
    "apply_affix",
    "apply_elemental_tuning",
    "apply_elite",
    "apply_multipliers",
    "apply_rarity",
    "assign_offense_elements",
    "copy_template",
    "default_ability_set",
    "elite_chance",
    "ensure_runtime",
    "infer_offense_element",
    "lowest_tier",
    "pick_affixes",
    "rebuild_display_name",
    "roll_affix_count",
    "roll_affixes",
    "roll_elemental_trait",
    "roll_level",
    "roll_rarity",
    "scale_elements_to_difficulty",
    "scale_elements_to_level",
    "scale_to_level",
    "spawn_enemy",
    "spawn_group",
    "sync_base_stats",
    "top_tier",
]
