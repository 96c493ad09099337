"""Pydantic v2 models for difficulty baselines.

Structured output of balance analysis: global outcome statistics,
per-enemy and per-ability metrics and the rarity mix the spawn pipeline
produced.  All are serializable to/from JSON.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class GlobalMetrics(BaseModel):
    """Aggregate battle statistics."""

    total_runs: int
    wins: int
    losses: int
    fled: int = 0
    win_rate: float
    avg_rounds: float
    avg_hp_lost: float
    avg_damage_dealt: float
    avg_xp: float
    avg_gold: float


class EnemyMetrics(BaseModel):
    """Per-template outcome metrics."""

    enemy_id: str
    battles: int
    """Battles this template appeared in."""
    wins_against: int
    win_rate_against: float
    avg_hp_lost: float
    """Average player HP lost in battles featuring this template."""


class AbilityMetrics(BaseModel):
    """Per-player-ability usage metrics."""

    ability_id: str
    times_used: int
    use_share: float
    """times_used / all ability uses."""
    win_rate_when_used: float


class DifficultyBaseline(BaseModel):
    """Top-level baseline for one difficulty preset."""

    difficulty: str
    agent: str
    """Agent type used for generation (e.g. 'heuristic')."""
    num_runs: int
    generated_at: str
    """ISO 8601 timestamp."""
    global_metrics: GlobalMetrics
    enemy_metrics: list[EnemyMetrics] = Field(default_factory=list)
    ability_metrics: list[AbilityMetrics] = Field(default_factory=list)
    rarity_distribution: dict[str, float] = Field(default_factory=dict)
    """Rarity id -> share of spawned enemies."""
    affix_rate: float = 0.0
    """Share of spawned enemies carrying at least one affix."""
    elite_rate: float = 0.0
