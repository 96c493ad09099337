"""Turn sequencing -- the single writer of :class:`BattleState` during a battle.

A round is: player turn start (DOT, once per round), one player action,
the enemy phase, then the round boundary (resource and HP regeneration,
player timers, cooldowns).  Every exit path -- victory, defeat, flee,
abort -- goes through :meth:`BattleState.clear` so the state is wiped in
one step.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ember_combat.sim.core.battle_state import BattleState
from ember_combat.sim.core.context import Severity
from ember_combat.sim.core.entities import ResourceKind
from ember_combat.sim.enemy_ai import AbilityOutcome, EnemyAI, decrement_cooldowns, resolve_ability
from ember_combat.sim.mechanics import status_effects
from ember_combat.sim.mechanics.damage import round_half_up
from ember_combat.sim.mechanics.defeat import check_player_defeat, handle_enemy_defeat
from ember_combat.sim.mechanics.status_effects import reset_combat_status, tick_start_of_turn

if TYPE_CHECKING:
    from ember_combat.sim.core.context import BattleContext
    from ember_combat.sim.core.entities import Enemy, Player

logger = logging.getLogger(__name__)

FLEE_CHANCE = 0.45

_MANA_REGEN = 6
_ESSENCE_REGEN = 5
_BLOOD_REGEN = 4


def haste_multiplier(speed: int) -> float:
    return 1.0 + speed / 100


def resource_regen(kind: ResourceKind, speed: int) -> int:
    """Resource restored at the round boundary.  Fury only builds on hits."""
    if kind == ResourceKind.MANA:
        return max(1, round_half_up(_MANA_REGEN * haste_multiplier(speed)))
    if kind == ResourceKind.ESSENCE:
        return _ESSENCE_REGEN
    if kind == ResourceKind.BLOOD:
        return _BLOOD_REGEN
    return 0


class TurnSequencer:
    """Drives a battle round by round.

    Parameters
    ----------
    ctx:
        Shared collaborators (rng, log, catalog, difficulty, hooks).
    enemy_ai:
        Enemy decision maker.  A fresh :class:`EnemyAI` on *ctx* by default.
    """

    def __init__(self, ctx: BattleContext, enemy_ai: EnemyAI | None = None) -> None:
        self.ctx = ctx
        self.enemy_ai = enemy_ai if enemy_ai is not None else EnemyAI(ctx)

    # ------------------------------------------------------------------
    # Battle lifecycle
    # ------------------------------------------------------------------

    def start_battle(self, player: Player, enemies: list[Enemy]) -> BattleState:
        """Create the state for a new battle.  Stale intents are discarded."""
        reset_combat_status(player)
        for enemy in enemies:
            enemy.intent = None
            enemy.defeat_handled = False
        state = BattleState(player=player)
        state.begin(enemies)
        if not state.in_combat:
            logger.warning("start_battle called with no enemies")
            return state
        names = ", ".join(e.name for e in enemies)
        self.ctx.log(f"Battle begins: {names}", Severity.SYSTEM)
        return state

    def abort(self, state: BattleState) -> None:
        """End the battle without a winner (e.g. the player left the area)."""
        if not state.in_combat:
            return
        reset_combat_status(state.player)
        state.clear("aborted")
        self.ctx.log("The battle is interrupted.", Severity.SYSTEM)

    def flee(self, state: BattleState) -> bool:
        """Try to run away.  A failed attempt costs the player's turn."""
        if not state.in_combat or state.busy:
            return False
        if self.ctx.rng.random_float("combat.flee") < FLEE_CHANCE:
            reset_combat_status(state.player)
            state.clear("fled")
            self.ctx.log("You escape!", Severity.SYSTEM)
            self.ctx.save("fled")
            return True
        self.ctx.log("You fail to escape!", Severity.DANGER)
        self.end_player_turn(state)
        return False

    # ------------------------------------------------------------------
    # Player turn
    # ------------------------------------------------------------------

    def begin_player_turn(self, state: BattleState) -> bool:
        """Apply start-of-turn ticks to the player once per round.

        Returns ``True`` if the player is alive and may act.
        """
        if not state.in_combat:
            return False
        if state.last_player_turn_round == state.round:
            return not state.player.is_dead
        state.last_player_turn_round = state.round
        tick_start_of_turn(self.ctx, state.player)
        if state.player.hp <= 0 and check_player_defeat(self.ctx, state):
            return False
        return True

    def player_act(
        self,
        state: BattleState,
        ability_id: str,
        target_index: int | None = None,
    ) -> AbilityOutcome | None:
        """Resolve one player ability.  Returns ``None`` if nothing happened."""
        if not state.in_combat or state.busy:
            return None
        player = state.player
        ability = self.ctx.ability(ability_id)
        if ability is None or ability_id not in player.abilities:
            logger.warning("Player cannot use ability %r", ability_id)
            return None
        if ability.cost > player.resource:
            self.ctx.log(f"Not enough {player.resource_kind.value} for {ability.name}.", Severity.SYSTEM)
            return None

        if target_index is not None:
            state.target_index = target_index
        target = state.target
        if target is None:
            logger.warning("Player acted with no living target")
            return None

        state.busy = True
        try:
            player.spend_resource(ability.cost)
            outcome = resolve_ability(self.ctx, state, player, target, ability)
        finally:
            state.busy = False

        for enemy in list(state.enemies):
            if enemy.is_dead and not enemy.defeat_handled:
                handle_enemy_defeat(self.ctx, state, enemy)
        if state.in_combat and player.hp <= 0:
            check_player_defeat(self.ctx, state)
        return outcome

    # ------------------------------------------------------------------
    # Enemy phase and round boundary
    # ------------------------------------------------------------------

    def run_enemy_phase(self, state: BattleState) -> None:
        if state.in_combat:
            self.enemy_ai.run_enemy_turn(state)

    def tick_round_boundary(self, state: BattleState) -> None:
        """Count down the player's round-based timers."""
        status_effects.tick_round_boundary(self.ctx, state.player)

    def post_enemy_turn(self, state: BattleState) -> None:
        """Close the round: regeneration, timers, cooldowns, round counter."""
        if not state.in_combat:
            return
        player = state.player

        gained = resource_regen(player.resource_kind, player.stats.speed)
        if gained:
            player.gain_resource(gained)
        if player.stats.hp_regen > 0 and not player.is_dead:
            player.heal(player.stats.hp_regen)

        self.tick_round_boundary(state)

        decrement_cooldowns(state.companion_cooldowns)
        for enemy in state.living_enemies:
            decrement_cooldowns(enemy.ability_cooldowns)

        state.round += 1
        if player.hp <= 0:
            check_player_defeat(self.ctx, state)

    def end_player_turn(self, state: BattleState) -> None:
        self.run_enemy_phase(state)
        self.post_enemy_turn(state)

    def play_round(
        self,
        state: BattleState,
        ability_id: str,
        target_index: int | None = None,
    ) -> AbilityOutcome | None:
        """Run a whole round with the player using *ability_id*."""
        outcome = None
        if self.begin_player_turn(state):
            outcome = self.player_act(state, ability_id, target_index)
        if state.in_combat:
            self.end_player_turn(state)
        return outcome
