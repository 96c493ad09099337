"""Generate a difficulty baseline from seeded batch battles.

Usage:
    python scripts/simulate_battles.py [--runs 1000] [--difficulty normal]
        [--enemy goblin --enemy wolf] [--zone 1 3] [--output baselines/]
"""

from __future__ import annotations

import argparse
import logging
import time
from pathlib import Path

from ember_combat.balance.baselines import generate_baseline, save_baseline
from ember_combat.balance.report import generate_text_report
from ember_combat.sim.content.registry import ContentRegistry


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate a difficulty baseline")
    parser.add_argument("--runs", type=int, default=1_000, help="Number of battles")
    parser.add_argument("--difficulty", default="normal", help="Difficulty preset id")
    parser.add_argument("--enemy", action="append", default=None, help="Enemy template id (repeatable)")
    parser.add_argument("--zone", type=int, nargs=2, default=(1, 3), metavar=("MIN", "MAX"))
    parser.add_argument("--player-level", type=int, default=3)
    parser.add_argument("--seed", type=int, default=42, help="Base seed")
    parser.add_argument("--parallel", action="store_true")
    parser.add_argument("--output", type=str, default=None, help="Directory for the JSON baseline")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.INFO)

    print("Loading registry...")
    registry = ContentRegistry().load_all()

    config = {
        "enemy_ids": args.enemy or ["goblin"],
        "zone_min_level": args.zone[0],
        "zone_max_level": args.zone[1],
        "player_level": args.player_level,
    }

    print(f"Running {args.runs:,} battles on {args.difficulty}...")
    t0 = time.perf_counter()
    baseline = generate_baseline(
        registry,
        difficulty=args.difficulty,
        num_runs=args.runs,
        base_seed=args.seed,
        encounter_config=config,
        parallel=args.parallel,
    )
    elapsed = time.perf_counter() - t0
    print(f"Done in {elapsed:.1f}s")

    if args.output:
        json_path = Path(args.output) / f"{args.difficulty}_heuristic_{args.runs}.json"
        save_baseline(baseline, json_path)
        print(f"Saved baseline to {json_path}")

    print()
    print(generate_text_report(baseline))


if __name__ == "__main__":
    main()
