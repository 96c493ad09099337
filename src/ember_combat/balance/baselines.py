"""Baseline generation: run sims, compute metrics, save/load JSON.

Orchestrates BatchRunner -> metric computation -> DifficultyBaseline.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, TYPE_CHECKING

from ember_combat.balance.metrics import (
    compute_ability_metrics,
    compute_affix_rate,
    compute_elite_rate,
    compute_enemy_metrics,
    compute_global_metrics,
    compute_rarity_distribution,
)
from ember_combat.balance.models import DifficultyBaseline
from ember_combat.sim.play_agents.heuristic_agent import HeuristicAgent
from ember_combat.sim.runner import BatchRunner

if TYPE_CHECKING:
    from ember_combat.sim.content.registry import ContentRegistry
    from ember_combat.sim.telemetry import RunTelemetry


def build_baseline(
    runs: list[RunTelemetry],
    difficulty: str,
    agent: str = "heuristic",
) -> DifficultyBaseline:
    """Compute every metric over already-collected *runs*."""
    return DifficultyBaseline(
        difficulty=difficulty,
        agent=agent,
        num_runs=len(runs),
        generated_at=datetime.now(timezone.utc).isoformat(),
        global_metrics=compute_global_metrics(runs),
        enemy_metrics=compute_enemy_metrics(runs),
        ability_metrics=compute_ability_metrics(runs),
        rarity_distribution=compute_rarity_distribution(runs),
        affix_rate=compute_affix_rate(runs),
        elite_rate=compute_elite_rate(runs),
    )


def generate_baseline(
    registry: ContentRegistry,
    difficulty: str = "normal",
    num_runs: int = 1_000,
    base_seed: int = 42,
    encounter_config: dict[str, Any] | None = None,
    parallel: bool = False,
) -> DifficultyBaseline:
    """Run batch simulations with the heuristic agent and summarise them.

    Parameters
    ----------
    registry:
        Fully loaded ContentRegistry.
    difficulty:
        Difficulty preset id; overrides any ``difficulty`` key in
        *encounter_config*.
    num_runs:
        Number of seeded battles to simulate.
    base_seed:
        Starting seed for reproducible runs.
    encounter_config:
        Passed to :meth:`BatchRunner.run_batch` (enemy ids, zone levels,
        player level ...).
    """
    config = dict(encounter_config or {})
    config["difficulty"] = difficulty
    runner = BatchRunner(registry, agent_class=HeuristicAgent)
    results = runner.run_batch(num_runs, config, base_seed=base_seed, parallel=parallel)
    return build_baseline(results, difficulty, agent="heuristic")


def save_baseline(baseline: DifficultyBaseline, path: Path) -> None:
    """Save baseline to JSON file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(baseline.model_dump(), indent=2))


def load_baseline(path: Path) -> DifficultyBaseline:
    """Load baseline from JSON file."""
    data = json.loads(path.read_text())
    return DifficultyBaseline.model_validate(data)
