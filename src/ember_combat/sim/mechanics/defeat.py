"""Defeat resolution for both sides of a battle.

Enemy defeat stamps ``defeat_handled`` *before* anything else so a second
call (a thorns reflect and a DOT tick in the same turn, say) is a no-op.
Reward and quest hooks are collaborator code: their failures are logged
and swallowed so they can never abort the surrounding transition.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ember_combat.sim.core.context import Severity
from ember_combat.sim.mechanics.status_effects import reset_combat_status

if TYPE_CHECKING:
    from ember_combat.sim.core.battle_state import BattleState
    from ember_combat.sim.core.context import BattleContext
    from ember_combat.sim.core.entities import Enemy

logger = logging.getLogger(__name__)

_BOSS_DROP_CHANCE = 1.0
_ELITE_DROP_CHANCE = 0.9
_BASE_DROP_CHANCE = 0.7
_MULTI_ENEMY_DROP_MULT = 0.85
_MAX_DROPS_MULTI_ENEMY = 2


@dataclass
class DefeatRewards:
    """What a defeated enemy granted.  ``drops`` is the number of loot rolls
    handed to the reward generator."""

    xp: int = 0
    gold: int = 0
    drops: int = 0


def drop_chance(enemy: Enemy, multi_enemy: bool) -> float:
    if enemy.is_boss:
        chance = _BOSS_DROP_CHANCE
    elif enemy.is_elite:
        chance = _ELITE_DROP_CHANCE
    else:
        chance = _BASE_DROP_CHANCE
    if multi_enemy and not enemy.is_boss:
        chance *= _MULTI_ENEMY_DROP_MULT
    return max(0.0, min(1.0, chance * enemy.drop_mult))


def handle_enemy_defeat(ctx: BattleContext, state: BattleState, enemy: Enemy) -> bool:
    """Resolve *enemy*'s defeat exactly once.

    If nothing is left alive the battle state is cleared (victory) before
    XP and gold are granted.  Returns ``True`` if this call handled it.
    """
    if enemy is None or enemy.defeat_handled:
        return False
    enemy.defeat_handled = True
    enemy.hp = 0
    enemy.intent = None

    ctx.log(f"{enemy.name} is defeated!", Severity.GOOD, enemy=enemy.template_id)

    multi_enemy = state.multi_enemy
    drops_so_far = state.drops_granted
    if state.in_combat and not state.living_enemies:
        state.clear("win")
        ctx.log("Victory!", Severity.GOOD)

    player = state.player
    rewards = DefeatRewards(xp=max(0, enemy.xp))
    spread = max(0, enemy.gold_max - enemy.gold_min)
    rewards.gold = max(0, enemy.gold_min + ctx.rng.random_int(0, spread, "loot.gold"))
    player.xp += rewards.xp
    player.gold += rewards.gold
    ctx.log(f"You gain {rewards.xp} XP and {rewards.gold} gold.", Severity.GOOD)

    if not (multi_enemy and drops_so_far >= _MAX_DROPS_MULTI_ENEMY):
        if ctx.rng.random_float("loot.drop") < drop_chance(enemy, multi_enemy):
            rewards.drops = 1
            if state.in_combat:
                state.drops_granted += 1

    if ctx.reward_hook is not None:
        try:
            ctx.reward_hook(enemy, rewards)
        except Exception:
            logger.exception("Reward hook failed for %s", enemy.name)
    if ctx.quest_hook is not None:
        try:
            ctx.quest_hook(enemy)
        except Exception:
            logger.exception("Quest hook failed for %s", enemy.name)

    ctx.save("enemy_defeated")
    return True


def handle_player_defeat(ctx: BattleContext, state: BattleState) -> bool:
    """Resolve the player's defeat.

    Invulnerable players are left on 1 HP and the battle continues.
    Otherwise HP is clamped to 0, the battle state is cleared and combat
    statuses are reset.  Returns ``True`` if the player was defeated.
    """
    player = state.player
    if player.invulnerable:
        player.hp = max(1, player.hp)
        ctx.log(f"{player.name} refuses to fall!", Severity.SYSTEM)
        return False

    player.hp = 0
    state.clear("loss")
    reset_combat_status(player)
    ctx.log("You have been defeated.", Severity.DANGER)
    ctx.save("player_defeated")
    return True


def check_player_defeat(ctx: BattleContext, state: BattleState) -> bool:
    """Run :func:`handle_player_defeat` if the player is at or below 0 HP."""
    if state.player.hp > 0:
        return False
    return handle_player_defeat(ctx, state)
