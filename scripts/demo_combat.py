"""Narrated single battle: spawn enemies, let an agent fight, print the log.

Usage:
    python scripts/demo_combat.py [--enemy goblin --enemy wolf] [--difficulty hard]
                                  [--zone 3 6] [--seed 7] [--agent heuristic] [--verbose]
"""

from __future__ import annotations

import argparse
import logging

from ember_combat.sim.content.registry import ContentRegistry
from ember_combat.sim.core.context import LogEntry
from ember_combat.sim.core.rng import CombatRNG
from ember_combat.sim.play_agents import HeuristicAgent, RandomAgent
from ember_combat.sim.runner import CombatSimulator, build_player
from ember_combat.sim.spawn import SpawnContext, spawn_enemy


def print_entry(entry: LogEntry) -> None:
    print(f"  [{entry.severity.value:6s}] {entry.message}")


def separator(title: str) -> None:
    print(f"\n{'=' * 60}")
    print(f"  {title}")
    print(f"{'=' * 60}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Run and narrate one battle")
    parser.add_argument("--enemy", action="append", default=None, help="Enemy template id (repeatable)")
    parser.add_argument("--difficulty", default="normal", help="Difficulty preset id")
    parser.add_argument("--zone", type=int, nargs=2, default=(1, 3), metavar=("MIN", "MAX"))
    parser.add_argument("--zone-id", default="wilds")
    parser.add_argument("--player-level", type=int, default=3)
    parser.add_argument("--seed", type=int, default=7)
    parser.add_argument("--agent", choices=("heuristic", "random"), default="heuristic")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s %(levelname)s %(message)s")

    registry = ContentRegistry().load_all()
    difficulty = registry.get_difficulty(args.difficulty)
    master_rng = CombatRNG(args.seed)

    spawn_ctx = SpawnContext.from_registry(
        registry,
        master_rng.fork("spawn"),
        difficulty,
        zone_min_level=args.zone[0],
        zone_max_level=args.zone[1],
        zone_id=args.zone_id,
    )
    enemy_ids = args.enemy or ["goblin"]
    enemies = [spawn_enemy(registry.get_enemy_template(eid), spawn_ctx) for eid in enemy_ids]

    separator("Spawned")
    for e in enemies:
        affixes = ", ".join(e.affixes) or "-"
        print(
            f"  {e.name} (lvl {e.level}) hp={e.max_hp} atk={e.stats.attack} "
            f"mag={e.stats.magic} rarity={e.rarity} affixes={affixes}"
        )

    player = build_player({"player_level": args.player_level})
    if args.agent == "heuristic":
        agent = HeuristicAgent()
    else:
        agent = RandomAgent(rng=master_rng.fork("agent"))

    simulator = CombatSimulator(registry, agent, difficulty, log_sink=print_entry)

    separator("Battle log")
    telemetry = simulator.run_combat(player, enemies, master_rng.fork("combat"))

    separator("Result")
    print(f"  Result:       {telemetry.result} after {telemetry.rounds} rounds")
    print(f"  HP:           {telemetry.player_hp_start} -> {telemetry.player_hp_end}")
    print(f"  Damage dealt: {telemetry.damage_dealt}")
    print(f"  XP / gold:    {telemetry.xp_gained} / {telemetry.gold_gained} ({telemetry.drops} drops)")
    print(f"  Abilities:    {telemetry.abilities_used_by_id}")


if __name__ == "__main__":
    main()
