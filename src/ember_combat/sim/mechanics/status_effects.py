"""Timed status effects: reset, synergies and the two tick phases.

Damage-over-time (bleed, burn) ticks at the **start of the afflicted
actor's own turn** via :func:`tick_start_of_turn`.  Every other player
timer ticks once per **round boundary** via :func:`tick_round_boundary`;
enemy timers tick at the enemy's own turn start via
:func:`tick_enemy_timers`.  The phases are kept apart: running DOT at the
round boundary as well would double-apply it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ember_combat.ir.abilities import DamageType
from ember_combat.sim.core.context import Severity
from ember_combat.sim.core.entities import Player, StatusContainer
from ember_combat.sim.mechanics.damage import round_half_up

if TYPE_CHECKING:
    from ember_combat.sim.core.context import BattleContext
    from ember_combat.sim.core.entities import Actor, Enemy

_SANCTUARY_TALENT = "cleric_sanctuary"
_SANCTUARY_SHIELD = 20

_IGNITE_PCT = 0.12
_IGNITE_MIN = 2
_IGNITE_TURNS = 2
_SHATTER_PCT = 0.18

# (turns field, magnitude field or None, expiry message)
_DOT_FIELDS = (
    ("bleed_turns", "bleed_damage", "bleeds", "The bleeding slows."),
    ("burn_turns", "burn_damage", "burns", "The flames die down."),
)

_ROUND_TIMERS = (
    ("dmg_reduction_turns", None, "Your Shield Wall fades."),
    ("vulnerable_turns", None, "You feel less exposed."),
    ("armor_down_turns", "armor_down", "Your footing steadies; your armor holds again."),
    ("magic_res_down_turns", "magic_res_down", "Arcane resistance returns."),
    ("chilled_turns", None, "Warmth returns to your limbs."),
    ("atk_down_turns", "atk_down", "Your strength returns."),
    ("magic_down_turns", "magic_down", "Your focus returns."),
    ("buff_attack_turns", "buff_attack", "Your battle rhythm fades."),
    ("buff_magic_turns", "buff_magic", "Your arcane charge dissipates."),
    ("buff_from_companion_turns", "buff_from_companion", "Your companion's boon fades."),
    ("evasion_turns", "evasion_bonus", "You stop moving so evasively."),
    ("vanish_turns", None, "You step back into the light."),
)

_ENEMY_TIMERS = (
    ("atk_down_turns", ("atk_down",), None),
    ("magic_down_turns", ("magic_down",), None),
    ("armor_down_turns", ("armor_down",), None),
    ("magic_res_down_turns", ("magic_res_down",), None),
    ("guard_turns", ("armor_buff", "magic_res_buff"), "{name} lowers its guard."),
    ("enrage_turns", ("enrage_atk_pct",), "{name} calms down."),
    ("chilled_turns", (), "{name} shakes off the chill."),
    ("marked_turns", (), "The mark on {name} fades."),
)


# ---------------------------------------------------------------------------
# Battle start
# ---------------------------------------------------------------------------

def reset_combat_status(actor: Actor) -> None:
    """Zero every fight-scoped field, then re-apply combat-start passives."""
    actor.status = StatusContainer()
    if isinstance(actor, Player) and _SANCTUARY_TALENT in actor.talents:
        actor.status.shield = _SANCTUARY_SHIELD


# ---------------------------------------------------------------------------
# On-hit synergies
# ---------------------------------------------------------------------------

def apply_synergy_on_hit(
    ctx: BattleContext,
    target: Actor,
    damage_dealt: int,
    element: str | None,
    damage_type: DamageType | None,
) -> int:
    """Evaluate cross-effect combos for a landed hit.

    * Fire into an active bleed ignites a burn.  The ignite message is
      logged only when burn goes from inactive to active.
    * Physical into an active chill shatters it for a bonus burst.

    Returns
    -------
    int
        Bonus HP damage dealt by the combos (0 if none fired).
    """
    if target is None or damage_dealt <= 0:
        return 0

    s = target.status
    bonus = 0

    if element == "fire" and s.bleeding:
        before = s.burn_turns
        magnitude = max(_IGNITE_MIN, round_half_up(damage_dealt * _IGNITE_PCT))
        s.burn_damage = max(s.burn_damage, magnitude)
        s.burn_turns = max(before, _IGNITE_TURNS)
        if before <= 0:
            ctx.log(f"{target.name} ignites from the bleeding wound!", Severity.GOOD)

    if damage_type == DamageType.PHYSICAL and s.chilled_turns > 0:
        burst = max(1, round_half_up(damage_dealt * _SHATTER_PCT))
        s.chilled_turns = 0
        bonus += target.take_damage(burst)
        ctx.log(
            f"Shatter! The chill on {target.name} breaks for {burst} bonus damage.",
            Severity.DAMAGE,
        )

    return bonus


# ---------------------------------------------------------------------------
# Start-of-turn (damage over time)
# ---------------------------------------------------------------------------

def tick_start_of_turn(ctx: BattleContext, actor: Actor) -> int:
    """Apply bleed and burn to *actor*, then decrement their durations.

    Invulnerable actors still count down but take no damage.  Returns the
    total HP lost.
    """
    if actor is None:
        return 0

    s = actor.status
    total = 0
    for turns_field, dmg_field, verb, fade_msg in _DOT_FIELDS:
        turns = getattr(s, turns_field)
        if turns <= 0:
            continue

        dmg = max(0, getattr(s, dmg_field))
        if dmg > 0 and not actor.invulnerable and not actor.is_dead:
            lost = actor.take_damage(dmg)
            total += lost
            ctx.log(f"{actor.name} {verb} for {lost}.", Severity.DAMAGE)

        turns -= 1
        setattr(s, turns_field, max(0, turns))
        if turns <= 0:
            setattr(s, dmg_field, 0)
            ctx.log(fade_msg, Severity.SYSTEM)
    return total


# ---------------------------------------------------------------------------
# Round boundary (everything else)
# ---------------------------------------------------------------------------

def tick_round_boundary(ctx: BattleContext, actor: Actor) -> None:
    """Decrement every non-DOT timer on *actor* by exactly one.

    A timer reaching 0 resets its magnitude and logs its expiry line once.
    """
    if actor is None:
        return

    s = actor.status
    for turns_field, mag_field, expiry_msg in _ROUND_TIMERS:
        turns = getattr(s, turns_field)
        if turns <= 0:
            continue
        turns -= 1
        setattr(s, turns_field, turns)
        if turns == 0:
            if mag_field is not None:
                setattr(s, mag_field, 0)
            ctx.log(expiry_msg, Severity.SYSTEM)


def tick_enemy_timers(ctx: BattleContext, enemy: Enemy) -> None:
    """Decrement guard, enrage, chill, mark and debuff timers on *enemy*."""
    s = enemy.status
    for turns_field, mag_fields, expiry_msg in _ENEMY_TIMERS:
        turns = getattr(s, turns_field)
        if turns <= 0:
            continue
        turns -= 1
        setattr(s, turns_field, turns)
        if turns == 0:
            for mag_field in mag_fields:
                setattr(s, mag_field, 0)
            if expiry_msg:
                ctx.log(expiry_msg.format(name=enemy.name), Severity.SYSTEM)


def apply_regeneration(ctx: BattleContext, enemy: Enemy) -> int:
    """Elite / affix regeneration.  Returns HP restored."""
    if enemy.regen_pct <= 0 or enemy.is_dead or enemy.hp >= enemy.max_hp:
        return 0
    healed = enemy.heal(max(1, round_half_up(enemy.max_hp * enemy.regen_pct)))
    if healed > 0:
        ctx.log(f"{enemy.name} regenerates {healed} HP.", Severity.SYSTEM)
    return healed
