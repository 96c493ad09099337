"""Difficulty presets."""

from __future__ import annotations

from pydantic import BaseModel, Field


class DifficultyConfig(BaseModel):
    """Knobs the active difficulty exposes to spawning, damage and the AI."""

    id: str
    name: str = ""

    enemy_hp_mod: float = 1.0
    """HP multiplier applied at spawn time."""

    enemy_dmg_mod: float = 1.0
    player_dmg_mod: float = 1.0

    ai_smartness: float = Field(default=0.6, ge=0.0, le=1.0)
    """0 = sloppy, 1 = ruthless.  Scales exploration and learned weighting."""
