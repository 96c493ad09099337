"""Pure metric computation functions for balance analysis.

All functions take a list of RunTelemetry and return structured metrics.
No side effects, no I/O.
"""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

from ember_combat.balance.models import AbilityMetrics, EnemyMetrics, GlobalMetrics

if TYPE_CHECKING:
    from ember_combat.sim.telemetry import BattleTelemetry, RunTelemetry


def _battles(runs: list[RunTelemetry]) -> list[BattleTelemetry]:
    return [b for r in runs for b in r.battles]


def compute_global_metrics(runs: list[RunTelemetry]) -> GlobalMetrics:
    """Compute aggregate battle statistics."""
    battles = _battles(runs)
    total = len(battles)
    if total == 0:
        return GlobalMetrics(
            total_runs=len(runs), wins=0, losses=0, fled=0, win_rate=0.0,
            avg_rounds=0.0, avg_hp_lost=0.0, avg_damage_dealt=0.0,
            avg_xp=0.0, avg_gold=0.0,
        )

    results = Counter(b.result for b in battles)
    return GlobalMetrics(
        total_runs=len(runs),
        wins=results["win"],
        losses=results["loss"],
        fled=results["fled"],
        win_rate=results["win"] / total,
        avg_rounds=sum(b.rounds for b in battles) / total,
        avg_hp_lost=sum(b.hp_lost for b in battles) / total,
        avg_damage_dealt=sum(b.damage_dealt for b in battles) / total,
        avg_xp=sum(b.xp_gained for b in battles) / total,
        avg_gold=sum(b.gold_gained for b in battles) / total,
    )


def compute_enemy_metrics(runs: list[RunTelemetry]) -> list[EnemyMetrics]:
    """Per-template win rate and HP cost, sorted by template id."""
    battles = _battles(runs)
    if not battles:
        return []

    results: list[EnemyMetrics] = []
    for enemy_id in sorted({eid for b in battles for eid in b.enemy_ids}):
        featuring = [b for b in battles if enemy_id in b.enemy_ids]
        wins = sum(1 for b in featuring if b.result == "win")
        results.append(EnemyMetrics(
            enemy_id=enemy_id,
            battles=len(featuring),
            wins_against=wins,
            win_rate_against=wins / len(featuring),
            avg_hp_lost=sum(b.hp_lost for b in featuring) / len(featuring),
        ))
    return results


def compute_ability_metrics(runs: list[RunTelemetry]) -> list[AbilityMetrics]:
    """Per-ability use counts, sorted by most used."""
    battles = _battles(runs)
    uses: Counter[str] = Counter()
    for b in battles:
        uses.update(b.abilities_used_by_id)
    total_uses = sum(uses.values())
    if total_uses == 0:
        return []

    results: list[AbilityMetrics] = []
    for ability_id, count in uses.most_common():
        used_in = [b for b in battles if b.abilities_used_by_id.get(ability_id)]
        wins = sum(1 for b in used_in if b.result == "win")
        results.append(AbilityMetrics(
            ability_id=ability_id,
            times_used=count,
            use_share=count / total_uses,
            win_rate_when_used=wins / len(used_in) if used_in else 0.0,
        ))
    return results


def compute_rarity_distribution(runs: list[RunTelemetry]) -> dict[str, float]:
    """Share of spawned enemies per rarity id."""
    counts = Counter(r for b in _battles(runs) for r in b.enemy_rarities)
    total = sum(counts.values())
    if total == 0:
        return {}
    return {rarity: n / total for rarity, n in sorted(counts.items())}


def compute_affix_rate(runs: list[RunTelemetry]) -> float:
    """Share of spawned enemies with at least one affix."""
    affix_lists = [a for b in _battles(runs) for a in b.enemy_affixes]
    if not affix_lists:
        return 0.0
    return sum(1 for a in affix_lists if a) / len(affix_lists)


def compute_elite_rate(runs: list[RunTelemetry]) -> float:
    battles = _battles(runs)
    spawned = sum(len(b.enemy_ids) for b in battles)
    if spawned == 0:
        return 0.0
    return sum(b.elites for b in battles) / spawned
