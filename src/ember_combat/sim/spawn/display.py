"""Display names built from rarity, elite and affix labels."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ember_combat.sim.core.entities import Enemy


def rebuild_display_name(enemy: Enemy, lowest_tier: int = 1) -> str:
    """Set and return ``enemy.name``.

    Order: rarity label (only above the lowest tier), elite label, affix
    labels, then the template name.
    """
    parts: list[str] = []
    if enemy.rarity_tier > lowest_tier and enemy.rarity_label:
        parts.append(enemy.rarity_label)
    if enemy.elite_label:
        parts.append(enemy.elite_label)
    parts.extend(enemy.affix_labels)
    parts.append(enemy.base_name)
    enemy.name = " ".join(parts)
    return enemy.name
