"""Compare difficulty presets over many seeded battles.

Usage:
    python scripts/compare_difficulties.py [--runs N] [--enemy troll] [--zone 10 14]
"""

from __future__ import annotations

import argparse
import time

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from ember_combat.balance.metrics import compute_rarity_distribution
from ember_combat.sim.content.registry import ContentRegistry
from ember_combat.sim.play_agents.heuristic_agent import HeuristicAgent
from ember_combat.sim.runner import BatchRunner

_DIFFICULTIES = ("easy", "normal", "hard")
_COLORS = {"easy": "#2ecc71", "normal": "#3498db", "hard": "#e74c3c"}


def run_comparison(n_runs: int, config: dict) -> None:
    print("Loading registry...")
    registry = ContentRegistry().load_all()

    results = {}
    for difficulty in _DIFFICULTIES:
        print(f"\nRunning {n_runs} battles on {difficulty}...")
        runner = BatchRunner(registry, agent_class=HeuristicAgent)
        t0 = time.time()
        telemetry = runner.run_batch(n_runs, {**config, "difficulty": difficulty}, base_seed=0)
        elapsed = time.time() - t0

        battles = [b for r in telemetry for b in r.battles]
        wins = sum(1 for b in battles if b.result == "win")
        rounds = [b.rounds for b in battles]
        hp_lost = [b.hp_lost for b in battles]

        results[difficulty] = {
            "wins": wins,
            "win_rate": wins / n_runs * 100,
            "rounds": rounds,
            "hp_lost": hp_lost,
            "rarity": compute_rarity_distribution(telemetry),
            "elapsed": elapsed,
        }
        print(f"  Time: {elapsed:.1f}s ({elapsed/n_runs*1000:.0f}ms/battle)")
        print(f"  Win rate: {wins}/{n_runs} ({wins/n_runs*100:.1f}%)")
        print(f"  Avg rounds: {np.mean(rounds):.1f} (median {np.median(rounds):.0f})")
        print(f"  Avg HP lost: {np.mean(hp_lost):.1f}")

    generate_charts(results, n_runs)


def generate_charts(results: dict, n_runs: int) -> None:
    fig, axes = plt.subplots(2, 2, figsize=(14, 10))
    fig.suptitle(f"Difficulty comparison: {n_runs} battles each", fontsize=16, fontweight="bold")
    labels = list(results.keys())

    # --- Chart 1: Win Rate ---
    ax = axes[0, 0]
    win_rates = [results[l]["win_rate"] for l in labels]
    bars = ax.bar(labels, win_rates, color=[_COLORS[l] for l in labels], edgecolor="black", linewidth=0.5)
    for bar, rate in zip(bars, win_rates):
        ax.text(bar.get_x() + bar.get_width()/2, bar.get_height() + 0.5,
                f"{rate:.1f}%", ha="center", va="bottom", fontsize=11, fontweight="bold")
    ax.set_ylabel("Win Rate (%)")
    ax.set_title("Win Rate")
    ax.set_ylim(0, 110)

    # --- Chart 2: Battle length ---
    ax = axes[0, 1]
    max_rounds = max(max(results[l]["rounds"]) for l in labels)
    bins = np.arange(0.5, max_rounds + 1.5, 1)
    for label in labels:
        rounds = results[label]["rounds"]
        ax.hist(rounds, bins=bins, alpha=0.6, label=f"{label} (avg={np.mean(rounds):.1f})",
                color=_COLORS[label], edgecolor="black", linewidth=0.3)
    ax.set_xlabel("Rounds")
    ax.set_ylabel("Count")
    ax.set_title("Battle Length")
    ax.legend()

    # --- Chart 3: HP lost ---
    ax = axes[1, 0]
    ax.boxplot([results[l]["hp_lost"] for l in labels])
    ax.set_xticks(range(1, len(labels) + 1))
    ax.set_xticklabels(labels)
    ax.set_ylabel("HP lost")
    ax.set_title("Player HP Lost per Battle")

    # --- Chart 4: Rarity mix ---
    ax = axes[1, 1]
    rarities = sorted({r for l in labels for r in results[l]["rarity"]})
    x = np.arange(len(rarities))
    width = 0.8 / len(labels)
    for i, label in enumerate(labels):
        shares = [results[label]["rarity"].get(r, 0.0) * 100 for r in rarities]
        ax.bar(x + i * width, shares, width, label=label, color=_COLORS[label])
    ax.set_xticks(x + width * (len(labels) - 1) / 2)
    ax.set_xticklabels(rarities)
    ax.set_ylabel("Share of spawns (%)")
    ax.set_title("Rarity Mix")
    ax.legend()

    plt.tight_layout()
    out_path = "difficulty_comparison.png"
    plt.savefig(out_path, dpi=150, bbox_inches="tight")
    print(f"\nChart saved to {out_path}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("--runs", type=int, default=300, help="Number of battles per difficulty")
    parser.add_argument("--enemy", action="append", default=None, help="Enemy template id (repeatable)")
    parser.add_argument("--zone", type=int, nargs=2, default=(1, 3), metavar=("MIN", "MAX"))
    parser.add_argument("--player-level", type=int, default=3)
    args = parser.parse_args()
    run_comparison(args.runs, {
        "enemy_ids": args.enemy or ["goblin"],
        "zone_min_level": args.zone[0],
        "zone_max_level": args.zone[1],
        "player_level": args.player_level,
    })
