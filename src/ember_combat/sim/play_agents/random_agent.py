"""Random action agent -- picks abilities and targets uniformly at random.

The baseline for batch runs: it exercises the whole combat loop and gives
a lower bound on how punishing an enemy or difficulty preset is.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ember_combat.sim.core.rng import CombatRNG
from ember_combat.sim.play_agents.base import PlayAgent

if TYPE_CHECKING:
    from ember_combat.ir.abilities import AbilityDefinition
    from ember_combat.sim.core.battle_state import BattleState


class RandomAgent(PlayAgent):
    """Agent that uses a random affordable ability each round.

    Parameters
    ----------
    rng:
        Seeded RNG.  Defaults to ``CombatRNG(seed=0)``.
    flee_chance:
        Probability of trying to flee instead of acting.  Default 0.
    """

    def __init__(self, rng: CombatRNG | None = None, flee_chance: float = 0.0) -> None:
        self._rng = rng or CombatRNG(seed=0)
        self._flee_chance = flee_chance

    def choose_action(
        self,
        battle: BattleState,
        usable: list[AbilityDefinition],
    ) -> tuple[AbilityDefinition, int | None] | None:
        if not usable:
            return None
        ability = self._rng.random_choice(usable, "agent.ability")
        living_indices = [i for i, e in enumerate(battle.enemies) if not e.is_dead]
        if not living_indices:
            return None
        return ability, self._rng.random_choice(living_indices, "agent.target")

    def wants_to_flee(self, battle: BattleState) -> bool:
        if self._flee_chance <= 0:
            return False
        return self._rng.random_float("agent.flee") < self._flee_chance
