"""Base class for agents that pick the player's actions in headless battles.

The combat simulator calls these at each decision point: once per round
to ask whether to flee, then to pick an ability and a target.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ember_combat.ir.abilities import AbilityDefinition
    from ember_combat.sim.core.battle_state import BattleState


class PlayAgent(ABC):
    """Base class for agents that play the player's side."""

    @abstractmethod
    def choose_action(
        self,
        battle: BattleState,
        usable: list[AbilityDefinition],
    ) -> tuple[AbilityDefinition, int | None] | None:
        """Choose an ability to use this round.

        Parameters
        ----------
        battle:
            The current combat state, giving the agent full observability.
        usable:
            Player abilities whose resource cost is currently affordable.
            Never empty while the player knows at least one free ability.

        Returns
        -------
        tuple[AbilityDefinition, int | None] | None
            ``(ability, target_index)`` where *target_index* indexes
            ``battle.enemies`` (``None`` keeps the current target).
            Return ``None`` to pass the turn.
        """

    @abstractmethod
    def wants_to_flee(self, battle: BattleState) -> bool:
        """Return ``True`` to spend this round attempting to escape."""
