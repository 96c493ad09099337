"""Combat-time effects of enemy affixes.

:func:`on_enemy_hit` fires after an enemy lands a hit on the player;
:func:`on_player_hit` fires after the player lands a hit on an enemy.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ember_combat.sim.core.context import Severity
from ember_combat.sim.mechanics.damage import round_half_up

if TYPE_CHECKING:
    from ember_combat.sim.core.context import BattleContext
    from ember_combat.sim.core.entities import Enemy, Player


def on_enemy_hit(ctx: BattleContext, enemy: Enemy, player: Player, hp_damage: int) -> None:
    """Vampiric heal, frozen chill proc and hexed debuffs."""
    if enemy.vampiric_heal_pct > 0 and hp_damage > 0:
        gained = enemy.heal(max(1, round_half_up(hp_damage * enemy.vampiric_heal_pct)))
        if gained > 0:
            ctx.log(f"{enemy.name} siphons {gained} HP.", Severity.SYSTEM)

    s = player.status
    if enemy.chill_chance > 0 and enemy.chill_turns > 0:
        if ctx.rng.random_float("affix.frozen.proc") < enemy.chill_chance:
            s.chilled_turns = max(s.chilled_turns, enemy.chill_turns)
            ctx.log(f"Cold bites into you ({s.chilled_turns}t).", Severity.DANGER)

    if enemy.hex_turns > 0:
        turns = enemy.hex_turns
        if enemy.hex_atk_down:
            s.atk_down = max(s.atk_down, enemy.hex_atk_down)
            s.atk_down_turns = max(s.atk_down_turns, turns)
        if enemy.hex_armor_down:
            s.armor_down = max(s.armor_down, enemy.hex_armor_down)
            s.armor_down_turns = max(s.armor_down_turns, turns)
        if enemy.hex_res_down:
            s.magic_res_down = max(s.magic_res_down, enemy.hex_res_down)
            s.magic_res_down_turns = max(s.magic_res_down_turns, turns)


def on_player_hit(ctx: BattleContext, enemy: Enemy, player: Player, damage_dealt: int) -> int:
    """Thorned enemies reflect part of the damage.  Returns HP the player lost."""
    if enemy.thorns_pct <= 0 or damage_dealt <= 0:
        return 0
    reflect = max(1, round_half_up(damage_dealt * enemy.thorns_pct))
    lost = player.take_damage(reflect)
    ctx.log(f"{enemy.name}'s thorns deal {lost} damage to you.", Severity.DANGER)
    return lost
