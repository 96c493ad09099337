"""Balance analysis: difficulty baselines, metrics, and reports."""

from ember_combat.balance.baselines import (
    build_baseline,
    generate_baseline,
    load_baseline,
    save_baseline,
)
from ember_combat.balance.metrics import (
    compute_ability_metrics,
    compute_affix_rate,
    compute_elite_rate,
    compute_enemy_metrics,
    compute_global_metrics,
    compute_rarity_distribution,
)
from ember_combat.balance.models import (
    AbilityMetrics,
    DifficultyBaseline,
    EnemyMetrics,
    GlobalMetrics,
)
from ember_combat.balance.report import generate_text_report

__all__ = [
    "AbilityMetrics",
    "DifficultyBaseline",
    "EnemyMetrics",
    "GlobalMetrics",
    "build_baseline",
    "compute_ability_metrics",
    "compute_affix_rate",
    "compute_elite_rate",
    "compute_enemy_metrics",
    "compute_global_metrics",
    "compute_rarity_distribution",
    "generate_baseline",
    "generate_text_report",
    "load_baseline",
    "save_baseline",
]
