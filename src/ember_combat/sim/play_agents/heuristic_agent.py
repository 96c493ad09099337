"""Heuristic agent -- a priority waterfall over the player's kit.

Each round, in order:

- **Survive**: heal when low, or brace when an enemy telegraph is about
  to land.
- **Lethal**: finish the focused enemy with the cheapest ability that
  kills it.
- **Setup**: mark or stun a healthy enemy that is not already affected.
- **Damage**: otherwise use the ability with the best expected damage.

Focus is always the living enemy with the least HP.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ember_combat.ir.abilities import AbilityKind
from ember_combat.sim.mechanics.damage import estimate_damage
from ember_combat.sim.play_agents.base import PlayAgent

if TYPE_CHECKING:
    from ember_combat.ir.abilities import AbilityDefinition
    from ember_combat.sim.core.battle_state import BattleState
    from ember_combat.sim.core.entities import Enemy

_HEAL_BELOW = 0.35
_SETUP_ABOVE = 0.6


class HeuristicAgent(PlayAgent):
    """Deterministic priority-based agent.

    Parameters
    ----------
    flee_below:
        HP ratio under which the agent tries to flee.  ``0`` never flees.
    """

    def __init__(self, flee_below: float = 0.0) -> None:
        self.flee_below = flee_below

    def wants_to_flee(self, battle: BattleState) -> bool:
        return self.flee_below > 0 and battle.player.hp_ratio < self.flee_below

    def choose_action(
        self,
        battle: BattleState,
        usable: list[AbilityDefinition],
    ) -> tuple[AbilityDefinition, int | None] | None:
        if not usable:
            return None
        focus = self._focus(battle)
        if focus is None:
            return None
        target_index = battle.enemies.index(focus)
        player = battle.player

        # Survive
        if player.hp_ratio < _HEAL_BELOW:
            heal = self._first(usable, AbilityKind.HEAL)
            if heal is not None:
                return heal, target_index
        if self._telegraph_imminent(battle) and player.status.shield <= 0:
            guard = self._first(usable, AbilityKind.GUARD)
            if guard is not None:
                return guard, target_index

        damaging = [a for a in usable if a.kind.deals_damage]
        estimates = {a.id: estimate_damage(player, focus, a) for a in damaging}

        # Lethal
        lethal = [a for a in damaging if estimates[a.id] >= focus.hp]
        if lethal:
            return min(lethal, key=lambda a: (a.cost, -estimates[a.id])), target_index

        # Setup
        if focus.hp_ratio > _SETUP_ABOVE:
            for ability in usable:
                if ability.mark_turns > 0 and focus.status.marked_turns <= 0:
                    return ability, target_index
                if ability.stun_turns > 0 and focus.intent is not None and focus.status.stun_turns <= 0:
                    return ability, target_index

        if damaging:
            best = max(damaging, key=lambda a: (estimates[a.id], -a.cost))
            return best, target_index
        return usable[0], target_index

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _focus(battle: BattleState) -> Enemy | None:
        living = battle.living_enemies
        if not living:
            return None
        return min(living, key=lambda e: e.hp)

    @staticmethod
    def _first(usable: list[AbilityDefinition], kind: AbilityKind) -> AbilityDefinition | None:
        for ability in usable:
            if ability.kind == kind:
                return ability
        return None

    @staticmethod
    def _telegraph_imminent(battle: BattleState) -> bool:
        return any(
            e.intent is not None and e.intent.turns_remaining <= 1
            for e in battle.living_enemies
        )
