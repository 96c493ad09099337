"""Battle simulation runner -- ties spawning, the turn sequencer, a play
agent and telemetry together.

Provides two key classes:

- **CombatSimulator**: Runs a single battle to completion.
- **BatchRunner**: Orchestrates many seeded runs (optionally in parallel).
"""

from __future__ import annotations

import logging
import multiprocessing
from typing import Any, Callable, TYPE_CHECKING

from ember_combat.sim.core.context import BattleContext, LogEntry
from ember_combat.sim.core.entities import Player, ResourceKind, Stats
from ember_combat.sim.core.rng import CombatRNG
from ember_combat.sim.play_agents.base import PlayAgent
from ember_combat.sim.play_agents.random_agent import RandomAgent
from ember_combat.sim.sequencer import TurnSequencer
from ember_combat.sim.spawn import SpawnContext, spawn_enemy
from ember_combat.sim.telemetry import BattleTelemetry, RunTelemetry

if TYPE_CHECKING:
    from ember_combat.ir.abilities import AbilityDefinition
    from ember_combat.ir.difficulty import DifficultyConfig
    from ember_combat.sim.content.registry import ContentRegistry
    from ember_combat.sim.core.entities import Enemy
    from ember_combat.sim.mechanics.defeat import DefeatRewards

logger = logging.getLogger(__name__)

_MAX_ROUNDS = 200

_DEFAULT_PLAYER_ABILITIES = [
    "strike", "fireball", "frostBolt", "rend", "shieldBash",
    "huntersMark", "shieldWall", "mend",
]


# =====================================================================
# Player setup
# =====================================================================

def build_player(config: dict[str, Any]) -> Player:
    """Create a player for an encounter config.

    Recognised keys: ``player_level``, ``player_abilities``,
    ``resource_kind``.  Stats grow linearly with level.
    """
    level = max(1, int(config.get("player_level", 1)))
    max_hp = 90 + 12 * (level - 1)
    max_resource = 60 + 4 * (level - 1)
    stats = Stats(
        attack=8 + 2 * level,
        magic=7 + 2 * level,
        armor=2 + level // 2,
        magic_res=2 + level // 2,
        speed=5,
        crit_chance=10.0,
        dodge_chance=5.0,
    )
    return Player(
        name="Hero",
        level=level,
        max_hp=max_hp,
        hp=max_hp,
        max_resource=max_resource,
        resource=max_resource,
        resource_kind=ResourceKind(config.get("resource_kind", "mana")),
        abilities=list(config.get("player_abilities", _DEFAULT_PLAYER_ABILITIES)),
        stats=stats,
    )


# =====================================================================
# CombatSimulator
# =====================================================================

class CombatSimulator:
    """Runs a single battle to completion with *agent* playing the player."""

    def __init__(
        self,
        registry: ContentRegistry,
        agent: PlayAgent,
        difficulty: DifficultyConfig,
        log_sink: Callable[[LogEntry], None] | None = None,
    ) -> None:
        self.registry = registry
        self.agent = agent
        self.difficulty = difficulty
        self.log_sink = log_sink

    def _usable_abilities(self, player: Player) -> list[AbilityDefinition]:
        usable: list[AbilityDefinition] = []
        for ability_id in player.abilities:
            ability = self.registry.get_ability(ability_id)
            if ability is not None and ability.cost <= player.resource:
                usable.append(ability)
        return usable

    def run_combat(
        self,
        player: Player,
        enemies: list[Enemy],
        rng: CombatRNG,
    ) -> BattleTelemetry:
        """Run a battle to completion, returning telemetry."""
        telemetry = BattleTelemetry(
            enemy_ids=[e.template_id for e in enemies],
            result="aborted",
            rounds=0,
            player_hp_start=player.hp,
            player_hp_end=player.hp,
            hp_lost=0,
            damage_dealt=0,
            enemy_rarities=[e.rarity for e in enemies],
            enemy_affixes=[list(e.affixes) for e in enemies],
            elites=sum(1 for e in enemies if e.is_elite),
        )

        def collect_rewards(enemy: Enemy, rewards: DefeatRewards) -> None:
            telemetry.xp_gained += rewards.xp
            telemetry.gold_gained += rewards.gold
            telemetry.drops += rewards.drops

        ctx = BattleContext(
            rng=rng,
            catalog=self.registry,
            difficulty=self.difficulty,
            reward_hook=collect_rewards,
            log_sink=self.log_sink,
        )
        sequencer = TurnSequencer(ctx)
        state = sequencer.start_battle(player, enemies)
        enemy_hp_start = sum(e.hp for e in enemies)

        # Main battle loop
        while state.in_combat and state.round <= _MAX_ROUNDS:
            telemetry.rounds = state.round

            if not sequencer.begin_player_turn(state):
                if state.in_combat:
                    sequencer.end_player_turn(state)
                continue

            if self.agent.wants_to_flee(state):
                telemetry.flee_attempts += 1
                sequencer.flee(state)
                continue

            choice = self.agent.choose_action(state, self._usable_abilities(player))
            if choice is not None:
                ability, target_index = choice
                outcome = sequencer.player_act(state, ability.id, target_index)
                if outcome is not None:
                    telemetry.abilities_used += 1
                    telemetry.abilities_used_by_id[ability.id] = (
                        telemetry.abilities_used_by_id.get(ability.id, 0) + 1
                    )

            if state.in_combat:
                sequencer.end_player_turn(state)

        if state.in_combat:
            logger.warning("Battle hit the %d-round limit; aborting", _MAX_ROUNDS)
            sequencer.abort(state)

        telemetry.result = state.result or "aborted"
        telemetry.player_hp_end = player.hp
        telemetry.hp_lost = max(0, telemetry.player_hp_start - player.hp)
        telemetry.damage_dealt = max(0, enemy_hp_start - sum(max(0, e.hp) for e in enemies))
        return telemetry


# =====================================================================
# BatchRunner
# =====================================================================

def _run_single_encounter(
    registry: ContentRegistry,
    agent: PlayAgent,
    seed: int,
    encounter_config: dict[str, Any],
) -> RunTelemetry:
    """Spawn and fight one encounter with the given seed and configuration."""
    master_rng = CombatRNG(seed)
    spawn_rng = master_rng.fork("spawn")
    combat_rng = master_rng.fork("combat")

    difficulty = registry.get_difficulty(encounter_config.get("difficulty", "normal"))
    spawn_ctx = SpawnContext.from_registry(
        registry,
        spawn_rng,
        difficulty,
        zone_min_level=encounter_config.get("zone_min_level", 1),
        zone_max_level=encounter_config.get("zone_max_level", 3),
        zone_id=encounter_config.get("zone_id", "wilds"),
    )
    enemy_ids = encounter_config.get("enemy_ids", ["goblin"])
    enemies = [spawn_enemy(registry.get_enemy_template(eid), spawn_ctx) for eid in enemy_ids]
    player = build_player(encounter_config)

    simulator = CombatSimulator(registry, agent, difficulty)
    battle_telemetry = simulator.run_combat(player, enemies, combat_rng)

    return RunTelemetry(
        seed=seed,
        difficulty=difficulty.id,
        battles=[battle_telemetry],
        final_result=battle_telemetry.result,
    )


def _make_agent(agent_class: type[PlayAgent], seed: int) -> PlayAgent:
    agent_rng = CombatRNG(seed).fork("agent")
    if agent_class is RandomAgent:
        return RandomAgent(rng=agent_rng)
    try:
        return agent_class(rng=agent_rng)  # type: ignore[call-arg]
    except TypeError:
        return agent_class()  # type: ignore[call-arg]


def _worker_run_single(args: tuple) -> RunTelemetry:
    """Top-level worker function for multiprocessing (must be picklable)."""
    agent_class, content_paths, seed, encounter_config = args

    from ember_combat.sim.content.registry import ContentRegistry

    registry = ContentRegistry.from_paths(content_paths)
    return _run_single_encounter(
        registry, _make_agent(agent_class, seed), seed, encounter_config,
    )


class BatchRunner:
    """Runs multiple seeded simulations, optionally in parallel."""

    def __init__(
        self,
        registry: ContentRegistry,
        agent_class: type[PlayAgent] = RandomAgent,
    ) -> None:
        self.registry = registry
        self.agent_class = agent_class

    def run_batch(
        self,
        n_runs: int,
        encounter_config: dict[str, Any],
        base_seed: int = 42,
        parallel: bool = False,
    ) -> list[RunTelemetry]:
        """Run *n_runs* encounters with seeds ``base_seed + i``."""
        seeds = [base_seed + i for i in range(n_runs)]

        if parallel and n_runs > 1:
            return self._run_parallel(seeds, encounter_config)
        return self._run_sequential(seeds, encounter_config)

    def _run_sequential(
        self,
        seeds: list[int],
        encounter_config: dict[str, Any],
    ) -> list[RunTelemetry]:
        results: list[RunTelemetry] = []
        for seed in seeds:
            agent = _make_agent(self.agent_class, seed)
            results.append(
                _run_single_encounter(self.registry, agent, seed, encounter_config)
            )
        return results

    def _run_parallel(
        self,
        seeds: list[int],
        encounter_config: dict[str, Any],
    ) -> list[RunTelemetry]:
        """Run simulations in parallel.

        Each worker reloads the tables from the files this runner's
        registry was loaded from.
        """
        content_paths = {k: str(p) for k, p in self.registry.source_paths.items()}
        work_items = [
            (self.agent_class, content_paths, seed, encounter_config) for seed in seeds
        ]
        n_workers = min(len(seeds), multiprocessing.cpu_count() or 1)

        with multiprocessing.Pool(processes=n_workers) as pool:
            results = pool.map(_worker_run_single, work_items)

        return results
