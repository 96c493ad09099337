"""Landing a single damaging hit.

:func:`perform_hit` is the one place that turns a resolved damage number
into state changes:

    dodge check -> damage pipeline -> shield (shatter, absorb) -> HP
        -> lifesteal -> status synergies -> fury -> posture
        -> affix hooks -> thorns

A reflect that drops the *attacker* to 0 HP resolves that side's defeat
before returning.  Defeat of the *defender* is left to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ember_combat.sim.core.context import Severity
from ember_combat.sim.core.entities import Enemy, Player, ResourceKind
from ember_combat.sim.mechanics import affix_hooks
from ember_combat.sim.mechanics.damage import roll_ability_damage, roll_dodge, round_half_up
from ember_combat.sim.mechanics.defeat import handle_enemy_defeat, handle_player_defeat
from ember_combat.sim.mechanics.posture import apply_posture_damage
from ember_combat.sim.mechanics.shield import absorb
from ember_combat.sim.mechanics.status_effects import apply_synergy_on_hit

if TYPE_CHECKING:
    from ember_combat.ir.abilities import AbilityDefinition
    from ember_combat.sim.core.battle_state import BattleState
    from ember_combat.sim.core.context import BattleContext
    from ember_combat.sim.core.entities import Actor

_FURY_ON_HIT = 10
_BASIC_ABILITIES = frozenset({"strike", "enemyStrike"})


@dataclass
class HitResult:
    """Everything one hit did."""

    dodged: bool = False
    damage: int = 0
    """Damage out of the pipeline (before shields)."""

    hp_damage: int = 0
    shield_shattered: int = 0
    shield_absorbed: int = 0
    bonus_damage: int = 0
    crit: bool = False
    reflected: int = 0

    @property
    def landed(self) -> bool:
        return not self.dodged

    @property
    def shield_consumed(self) -> int:
        return self.shield_shattered + self.shield_absorbed


def damage_mod_for(ctx: BattleContext, attacker: Actor) -> float:
    """Difficulty-side damage scaling for *attacker*'s side."""
    if isinstance(attacker, Player):
        return ctx.difficulty.player_dmg_mod
    return ctx.difficulty.enemy_dmg_mod


def perform_hit(
    ctx: BattleContext,
    state: BattleState,
    attacker: Actor,
    defender: Actor,
    ability: AbilityDefinition,
) -> HitResult:
    """Resolve one damaging hit of *ability* from *attacker* on *defender*."""
    if attacker is None or defender is None or ability is None:
        return HitResult()

    if roll_dodge(ctx.rng, defender, ability):
        ctx.log(f"{defender.name} dodges {attacker.name}'s {ability.name}!", Severity.SYSTEM)
        return HitResult(dodged=True)

    roll = roll_ability_damage(
        attacker, defender, ability, ctx.rng, damage_mod_for(ctx, attacker),
    )
    split = absorb(defender.status, roll.amount, ability.shatter_flat)
    hp_lost = defender.take_damage(split.hp_damage)
    result = HitResult(
        damage=roll.amount,
        hp_damage=hp_lost,
        shield_shattered=split.shattered,
        shield_absorbed=split.absorbed,
        crit=roll.crit,
    )

    crit_text = " Critical hit!" if roll.crit else ""
    ctx.log(
        f"{attacker.name}'s {ability.name} hits {defender.name} for {roll.amount}.{crit_text}",
        Severity.DAMAGE,
        ability=ability.id,
        amount=roll.amount,
        absorbed=split.absorbed,
    )
    if split.shattered > 0:
        ctx.log(f"{ability.name} shatters {split.shattered} shield.", Severity.DAMAGE)

    # Lifesteal
    if attacker.stats.lifesteal > 0 and hp_lost > 0:
        attacker.heal(max(1, round_half_up(hp_lost * attacker.stats.lifesteal / 100)))

    result.bonus_damage = apply_synergy_on_hit(
        ctx, defender, roll.amount, ability.element, ability.damage_type,
    )

    if isinstance(defender, Player) and defender.resource_kind == ResourceKind.FURY and hp_lost > 0:
        defender.gain_resource(_FURY_ON_HIT)

    if isinstance(attacker, Player) and isinstance(defender, Enemy):
        apply_posture_damage(
            ctx, defender, roll.amount, crit=roll.crit, basic=ability.id in _BASIC_ABILITIES,
        )
        result.reflected += affix_hooks.on_player_hit(ctx, defender, attacker, roll.amount)
    elif isinstance(attacker, Enemy) and isinstance(defender, Player):
        affix_hooks.on_enemy_hit(ctx, attacker, defender, hp_lost)

    # Flat thorns
    if defender.stats.thorns > 0 and roll.amount > 0 and not attacker.is_dead:
        lost = attacker.take_damage(defender.stats.thorns)
        result.reflected += lost
        ctx.log(f"{attacker.name} takes {lost} thorns damage.", Severity.DAMAGE)

    if result.reflected > 0 and attacker.is_dead:
        if isinstance(attacker, Enemy):
            handle_enemy_defeat(ctx, state, attacker)
        elif isinstance(attacker, Player):
            handle_player_defeat(ctx, state)

    return result
