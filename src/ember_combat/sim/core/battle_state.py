"""Shared mutable state of a single battle.

The sequencer is the only writer while a battle is running.  When the
battle ends by any path the state is wiped in one :meth:`BattleState.clear`
call so nothing is ever left half-populated.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from ember_combat.sim.core.entities import Enemy, Player


# ---------------------------------------------------------------------------
# BattleState
# ---------------------------------------------------------------------------

class BattleState(BaseModel):
    """Full mutable state of a single combat encounter."""

    player: Player
    enemies: list[Enemy] = Field(default_factory=list)
    in_combat: bool = False
    target_index: int = 0
    round: int = 1
    busy: bool = False
    """Set while an action resolves to reject re-entrant input."""

    last_player_turn_round: int = 0
    """Round whose start-of-turn ticks were already applied to the player."""

    result: str | None = None
    """``"win"``, ``"loss"``, ``"fled"`` or ``"aborted"`` once cleared."""

    multi_enemy: bool = False
    drops_granted: int = 0
    companion_cooldowns: dict[str, int] = Field(default_factory=dict)

    # -- queries -------------------------------------------------------------

    @property
    def living_enemies(self) -> list[Enemy]:
        """Return the sub-list of enemies that are still alive."""
        return [e for e in self.enemies if not e.is_dead]

    @property
    def is_over(self) -> bool:
        return not self.in_combat

    @property
    def target(self) -> Enemy | None:
        """Current target, falling back to the first living enemy."""
        if 0 <= self.target_index < len(self.enemies):
            enemy = self.enemies[self.target_index]
            if not enemy.is_dead:
                return enemy
        living = self.living_enemies
        return living[0] if living else None

    # -- lifecycle -----------------------------------------------------------

    def begin(self, enemies: list[Enemy]) -> None:
        """Populate the state for a fresh battle."""
        self.enemies = list(enemies)
        self.in_combat = bool(self.enemies)
        self.target_index = 0
        self.round = 1
        self.busy = False
        self.last_player_turn_round = 0
        self.result = None
        self.multi_enemy = len(self.enemies) > 1
        self.drops_granted = 0

    def clear(self, result: str | None = None) -> None:
        """End the battle: every per-battle field is reset in one step.

        Pending enemy intents are discarded along with the enemies so a
        telegraph can never carry into a later battle.
        """
        for enemy in self.enemies:
            enemy.intent = None
        self.in_combat = False
        self.enemies = []
        self.target_index = 0
        self.busy = False
        self.multi_enemy = False
        self.drops_granted = 0
        self.companion_cooldowns = {}
        if result is not None:
            self.result = result
