"""Enemy decision-making -- heuristic scoring blended with a learned preference.

Each enemy turn walks a small state machine::

    Idle -> (ResolveIntent | ChooseAbility) -> DeclareIntent | ApplyAbility
         -> UpdateLearning -> TurnEnd

with early exits (Broken, Stunned, ForcedGuard) that consume the turn
before an ability is ever chosen.

Selection is epsilon-greedy: with probability ``epsilon`` a usable ability
is picked uniformly at random, otherwise the highest-scoring one wins
(first seen on ties).  The score mixes role heuristics with the enemy's
own exponential moving average of past rewards.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ember_combat.ir.abilities import AbilityKind
from ember_combat.sim.core.context import Severity
from ember_combat.sim.core.entities import Enemy, PendingIntent
from ember_combat.sim.mechanics.damage import estimate_damage, round_half_up
from ember_combat.sim.mechanics.defeat import check_player_defeat, handle_enemy_defeat
from ember_combat.sim.mechanics.hits import perform_hit
from ember_combat.sim.mechanics.shield import gain_shield
from ember_combat.sim.mechanics.status_effects import (
    apply_regeneration,
    tick_enemy_timers,
    tick_start_of_turn,
)

if TYPE_CHECKING:
    from ember_combat.ir.abilities import AbilityDefinition
    from ember_combat.sim.core.battle_state import BattleState
    from ember_combat.sim.core.context import BattleContext
    from ember_combat.sim.core.entities import Actor

logger = logging.getLogger(__name__)

FALLBACK_ABILITY = "enemyStrike"

EMA_ALPHA = 0.18
_EXPLORATION_DECAY = 0.996
_EXPLORATION_FLOOR = 0.06
_EPSILON_MIN = 0.05
_EPSILON_MAX = 0.35
_DEFAULT_SMARTNESS = 0.6

_HEAL_REWARD_WEIGHT = 0.8
_SHIELD_REWARD_WEIGHT = 0.35

_BLEED_LEVEL_SCALE = 0.7
_FORCED_GUARD_BONUS = 2
_BERSERK_TURNS = 999


# =====================================================================
# Outcomes / learning
# =====================================================================

@dataclass
class AbilityOutcome:
    """What one resolved ability did.  All zeros is the neutral result."""

    damage_dealt: int = 0
    heal_done: int = 0
    shield_shattered: int = 0
    """Shield removed from the target (shatter plus absorption)."""

    dodged: bool = False
    crit: bool = False

    @property
    def reward(self) -> float:
        return (
            self.damage_dealt
            + self.heal_done * _HEAL_REWARD_WEIGHT
            + self.shield_shattered * _SHIELD_REWARD_WEIGHT
        )


def ema_update(previous: float, reward: float, alpha: float = EMA_ALPHA) -> float:
    """Blend *reward* into *previous*.  Never overshoots *reward*."""
    return previous * (1 - alpha) + reward * alpha


def epsilon_for(exploration: float, smartness: float) -> float:
    """Exploration probability, clamped to ``[0.05, 0.35]``."""
    return max(_EPSILON_MIN, min(_EPSILON_MAX, exploration * (1.2 - smartness)))


def decrement_cooldowns(cooldowns: dict[str, int]) -> None:
    """Tick every cooldown down by one, flooring at zero."""
    for ability_id, turns in cooldowns.items():
        if turns > 0:
            cooldowns[ability_id] = turns - 1


# =====================================================================
# EnemyAI
# =====================================================================

class EnemyAI:
    """Chooses, declares and resolves enemy abilities.

    Parameters
    ----------
    ctx:
        Battle collaborators.  All randomness is drawn from ``ctx.rng``.
    """

    def __init__(self, ctx: BattleContext) -> None:
        self.ctx = ctx

    @property
    def smartness(self) -> float:
        value = self.ctx.difficulty.ai_smartness if self.ctx.difficulty else None
        return _DEFAULT_SMARTNESS if value is None else value

    # ------------------------------------------------------------------
    # Turn entry points
    # ------------------------------------------------------------------

    def run_enemy_turn(self, state: BattleState) -> None:
        """Give every living enemy its turn, in order.

        Stops as soon as the battle ends or the player is defeated.
        """
        for enemy in list(state.enemies):
            if not state.in_combat or state.player.is_dead:
                break
            if enemy.is_dead or enemy.defeat_handled:
                continue
            self.take_turn(state, enemy)
            if state.player.hp <= 0 and check_player_defeat(self.ctx, state):
                break

    def take_turn(self, state: BattleState, enemy: Enemy) -> AbilityOutcome | None:
        """Run one enemy's turn.  Returns the outcome if an ability resolved."""
        ctx = self.ctx

        # (a) damage over time, then regeneration
        tick_start_of_turn(ctx, enemy)
        if enemy.is_dead:
            handle_enemy_defeat(ctx, state, enemy)
            return None
        apply_regeneration(ctx, enemy)

        # (b) timers
        tick_enemy_timers(ctx, enemy)

        # (c) berserk latch -- only ever checked here
        self._check_berserk(enemy)

        # (d) lost turns
        if self._consume_disabled_turn(enemy):
            return None

        player = state.player
        if enemy.intent is not None:
            return self._advance_intent(state, enemy)

        ability_id = self.choose_ability(enemy, player)
        ability = ctx.ability(ability_id)
        if ability is None:
            logger.warning("Enemy %s chose unknown ability %r", enemy.name, ability_id)
            return None

        if ability.telegraph_turns > 0:
            self.declare_intent(enemy, ability)
            return None

        self._commit_cooldown(enemy, ability)
        outcome = self.apply_ability(state, enemy, player, ability.id)
        if not enemy.is_dead:
            self.update_learning(enemy, ability.id, outcome)
        return outcome

    # ------------------------------------------------------------------
    # Turn-start gating
    # ------------------------------------------------------------------

    def _check_berserk(self, enemy: Enemy) -> None:
        if enemy.berserk_threshold <= 0 or enemy.berserk_consumed:
            return
        if enemy.hp_ratio > enemy.berserk_threshold:
            return
        enemy.berserk_consumed = True
        s = enemy.status
        s.enrage_turns = max(s.enrage_turns, _BERSERK_TURNS)
        s.enrage_atk_pct = max(s.enrage_atk_pct, enemy.berserk_atk_pct)
        self.ctx.log(f"{enemy.name} enters a berserk frenzy!", Severity.DANGER)

    def _consume_disabled_turn(self, enemy: Enemy) -> bool:
        ctx = self.ctx
        s = enemy.status

        if s.broken_turns > 0:
            s.broken_turns -= 1
            self._clear_intent(enemy, f"{enemy.name} can't keep their focus!")
            ctx.log(f"{enemy.name} is Broken and cannot act!", Severity.GOOD)
            return True

        if s.stun_turns > 0:
            s.stun_turns -= 1
            self._clear_intent(enemy, f"{enemy.name} loses their intent!")
            ctx.log(f"{enemy.name} is stunned and cannot act!", Severity.GOOD)
            return True

        if s.forced_guard:
            s.forced_guard = False
            s.guard_turns = max(s.guard_turns, 1)
            s.armor_buff += _FORCED_GUARD_BONUS
            s.magic_res_buff += _FORCED_GUARD_BONUS
            ctx.log(f"{enemy.name} braces for impact.", Severity.SYSTEM)
            return True

        return False

    def _clear_intent(self, enemy: Enemy, reason: str) -> None:
        if enemy.intent is None:
            return
        enemy.intent = None
        self.ctx.log(reason, Severity.SYSTEM)

    # ------------------------------------------------------------------
    # Telegraphs
    # ------------------------------------------------------------------

    def declare_intent(self, enemy: Enemy, ability: AbilityDefinition) -> None:
        """Commit the cooldown and start the wind-up.  Nothing resolves yet."""
        self._commit_cooldown(enemy, ability)
        enemy.intent = PendingIntent(ability_id=ability.id, turns_remaining=ability.telegraph_turns)
        text = ability.telegraph_text or f"prepares {ability.name}!"
        self.ctx.log(f"{enemy.name} {text}", Severity.DANGER, ability=ability.id)

    def _advance_intent(self, state: BattleState, enemy: Enemy) -> AbilityOutcome | None:
        intent = enemy.intent
        intent.turns_remaining -= 1
        if intent.turns_remaining > 0:
            self.ctx.log(
                f"{enemy.name} continues to ready a powerful attack...", Severity.DANGER,
            )
            return None

        enemy.intent = None
        outcome = self.apply_ability(state, enemy, state.player, intent.ability_id)
        if not enemy.is_dead:
            self.update_learning(enemy, intent.ability_id, outcome)
        return outcome

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def usable_abilities(self, enemy: Enemy) -> list[str]:
        return [
            a for a in enemy.abilities
            if enemy.cooldown_of(a) <= 0 and self.ctx.ability(a) is not None
        ]

    def choose_ability(self, enemy: Enemy, player: Actor) -> str:
        """Epsilon-greedy pick over the usable kit."""
        usable = self.usable_abilities(enemy)
        if not usable:
            return FALLBACK_ABILITY

        rng = self.ctx.rng
        if rng.random_float("ai.explore") < epsilon_for(enemy.memory.exploration, self.smartness):
            return rng.random_choice(usable, "ai.explorePick")

        best_id = usable[0]
        best_score = -math.inf
        for ability_id in usable:
            score = self.score_ability(enemy, player, self.ctx.ability(ability_id))
            if score > best_score:
                best_id, best_score = ability_id, score
        return best_id

    def score_ability(self, enemy: Enemy, player: Actor, ability: AbilityDefinition) -> float:
        """Role heuristics plus the learned preference."""
        smart = self.smartness
        hp_ratio = enemy.hp_ratio
        player_ratio = player.hp_ratio
        ps = player.status
        kind = ability.kind
        score = 0.0

        if kind == AbilityKind.GUARD:
            score += 8
            if hp_ratio < 0.45:
                score += 18
            if enemy.status.guard_turns > 0:
                score -= 25

        if kind == AbilityKind.BUFF:
            score += 6
            if hp_ratio < 0.6:
                score += 10
            if enemy.status.enrage_turns > 0:
                score -= 30

        if kind in (AbilityKind.DEBUFF, AbilityKind.DAMAGE_DEBUFF):
            score += 10
            if player_ratio > 0.6:
                score += 8
            if ps.shield > 0:
                score += 6

        if kind.deals_damage:
            est = estimate_damage(enemy, player, ability, self.ctx.difficulty.enemy_dmg_mod)
            score += est
            if est >= player.hp:
                score += 65
            if player_ratio < 0.35:
                score += 15
            if ability.shatter_flat > 0:
                score += min(ps.shield, ability.shatter_flat) * 0.35
            if ability.bleed_turns > 0:
                score += 4 if ps.bleeding else 10
                if player_ratio < 0.5:
                    score += 6
            if ability.vulnerable_turns > 0 and ps.vulnerable_turns <= 0:
                score += 12

        if kind == AbilityKind.DAMAGE_HEAL:
            if hp_ratio < 0.7:
                score += 12
            if hp_ratio < 0.4:
                score += 18

        stat = enemy.memory.ability_stats.get(ability.id)
        learned = stat.value if stat is not None else 0.0
        return score + learned * (0.35 + smart * 0.45)

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def apply_ability(
        self,
        state: BattleState,
        actor: Actor,
        target: Actor,
        ability_id: str,
    ) -> AbilityOutcome:
        """Resolve *ability_id* from *actor* against *target*.

        Missing actors or unknown abilities resolve to a neutral outcome.
        """
        ability = self.ctx.ability(ability_id)
        if actor is None or target is None or ability is None:
            logger.warning("apply_ability(%r) skipped: missing actor, target or ability", ability_id)
            return AbilityOutcome()
        return resolve_ability(self.ctx, state, actor, target, ability)

    def update_learning(self, enemy: Enemy, ability_id: str, outcome: AbilityOutcome) -> None:
        """EMA update of the ability's value, then decay exploration."""
        stat = enemy.memory.stat_for(ability_id)
        stat.value = ema_update(stat.value, outcome.reward)
        stat.uses += 1
        enemy.memory.exploration = max(
            _EXPLORATION_FLOOR, enemy.memory.exploration * _EXPLORATION_DECAY,
        )

    @staticmethod
    def _commit_cooldown(enemy: Enemy, ability: AbilityDefinition) -> None:
        if ability.cooldown > 0:
            enemy.ability_cooldowns[ability.id] = ability.cooldown


# =====================================================================
# Ability resolution (shared by enemies and the player)
# =====================================================================

def resolve_ability(
    ctx: BattleContext,
    state: BattleState,
    actor: Actor,
    target: Actor,
    ability: AbilityDefinition,
) -> AbilityOutcome:
    """Apply *ability*'s effects.  Dodged hits apply no payload at all."""
    outcome = AbilityOutcome()
    kind = ability.kind

    if kind.deals_damage:
        hit = perform_hit(ctx, state, actor, target, ability)
        outcome.dodged = hit.dodged
        outcome.crit = hit.crit
        if hit.dodged:
            return outcome
        outcome.damage_dealt = hit.hp_damage + hit.bonus_damage
        outcome.shield_shattered = hit.shield_consumed
        # Killed by a reflect: the payload never lands.
        if actor.is_dead:
            return outcome
        _apply_debuffs(ctx, actor, target, ability)
        outcome.heal_done += _apply_drain(ctx, actor, target, ability, hit.damage)
        return outcome

    if kind == AbilityKind.GUARD:
        outcome.heal_done += _apply_guard(ctx, actor, ability)
    elif kind == AbilityKind.BUFF:
        _apply_self_buff(ctx, actor, ability)
    elif kind == AbilityKind.DEBUFF:
        _apply_debuffs(ctx, actor, target, ability)
        ctx.log(f"{actor.name} uses {ability.name} on {target.name}.", Severity.SYSTEM)
    elif kind == AbilityKind.HEAL:
        outcome.heal_done += _heal_pct(actor, ability.heal_pct)
        ctx.log(f"{actor.name} uses {ability.name} and recovers {outcome.heal_done} HP.", Severity.GOOD)
    return outcome


def _heal_pct(actor: Actor, pct: float) -> int:
    if pct <= 0:
        return 0
    return actor.heal(max(1, round_half_up(actor.max_hp * pct)))


def _apply_debuffs(ctx: BattleContext, actor: Actor, target: Actor, ability: AbilityDefinition) -> None:
    """Bleed, debuffs, chill, stun, mark and forced guard on *target*."""
    s = target.status
    turns = ability.debuff_turns

    if ability.bleed_turns > 0:
        magnitude = ability.bleed_base + math.floor(actor.level * _BLEED_LEVEL_SCALE)
        s.bleed_turns = max(s.bleed_turns, ability.bleed_turns)
        s.bleed_damage = max(s.bleed_damage, magnitude)
        ctx.log(f"{target.name} is bleeding ({s.bleed_damage} per turn).", Severity.DANGER)
    if ability.armor_down > 0:
        s.armor_down = max(s.armor_down, ability.armor_down)
        s.armor_down_turns = max(s.armor_down_turns, turns)
    if ability.magic_res_down > 0:
        s.magic_res_down = max(s.magic_res_down, ability.magic_res_down)
        s.magic_res_down_turns = max(s.magic_res_down_turns, turns)
    if ability.atk_down > 0:
        s.atk_down = max(s.atk_down, ability.atk_down)
        s.atk_down_turns = max(s.atk_down_turns, turns)
    if ability.vulnerable_turns > 0:
        s.vulnerable_turns = max(s.vulnerable_turns, ability.vulnerable_turns)
    if ability.chill_turns > 0:
        s.chilled_turns = max(s.chilled_turns, ability.chill_turns)
    if ability.stun_turns > 0:
        s.stun_turns = max(s.stun_turns, ability.stun_turns)
        ctx.log(f"{target.name} is stunned!", Severity.GOOD)
    if ability.mark_turns > 0:
        s.marked_turns = max(s.marked_turns, ability.mark_turns)
    if ability.forces_guard:
        s.forced_guard = True


def _apply_drain(
    ctx: BattleContext,
    actor: Actor,
    target: Actor,
    ability: AbilityDefinition,
    damage: int,
) -> int:
    healed = 0
    if ability.drain_heal_pct > 0 and damage > 0:
        healed = actor.heal(max(1, round_half_up(damage * ability.drain_heal_pct)))
        if healed > 0:
            ctx.log(f"{actor.name} drains {healed} HP.", Severity.DANGER)
    if ability.drain_resource_pct > 0 and target.max_resource > 0:
        drained = target.spend_resource(round_half_up(target.max_resource * ability.drain_resource_pct))
        if drained > 0:
            ctx.log(f"{target.name} loses {drained} resource.", Severity.DANGER)
    return healed


def _apply_guard(ctx: BattleContext, actor: Actor, ability: AbilityDefinition) -> int:
    s = actor.status
    if isinstance(actor, Enemy):
        # Refreshing an active guard extends it but never stacks the bonus.
        if s.guard_turns <= 0:
            s.armor_buff += ability.armor_bonus
            s.magic_res_buff += ability.armor_bonus
        s.guard_turns = max(s.guard_turns, ability.guard_turns)
        ctx.log(f"{actor.name} raises its guard.", Severity.SYSTEM)
    else:
        if ability.shield_flat > 0:
            gain_shield(s, ability.shield_flat)
        if ability.dmg_reduction_turns > 0:
            s.dmg_reduction_turns = max(s.dmg_reduction_turns, ability.dmg_reduction_turns)
        ctx.log(f"{actor.name} uses {ability.name}.", Severity.GOOD)
    return _heal_pct(actor, ability.heal_pct)


def _apply_self_buff(ctx: BattleContext, actor: Actor, ability: AbilityDefinition) -> None:
    s = actor.status
    if isinstance(actor, Enemy):
        s.enrage_turns = max(s.enrage_turns, ability.enrage_turns)
        s.enrage_atk_pct = max(s.enrage_atk_pct, ability.enrage_atk_pct)
        ctx.log(f"{actor.name} becomes enraged!", Severity.DANGER)
        return

    if ability.buff_attack > 0:
        s.buff_attack = max(s.buff_attack, ability.buff_attack)
        s.buff_attack_turns = max(s.buff_attack_turns, ability.buff_turns)
    if ability.buff_magic > 0:
        s.buff_magic = max(s.buff_magic, ability.buff_magic)
        s.buff_magic_turns = max(s.buff_magic_turns, ability.buff_turns)
    if ability.evasion_turns > 0:
        s.evasion_bonus = max(s.evasion_bonus, ability.evasion_bonus)
        s.evasion_turns = max(s.evasion_turns, ability.evasion_turns)
    if ability.vanish_turns > 0:
        s.vanish_turns = max(s.vanish_turns, ability.vanish_turns)
    ctx.log(f"{actor.name} uses {ability.name}.", Severity.GOOD)
