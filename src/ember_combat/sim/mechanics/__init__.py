"""Game mechanics modules -- damage, shields, statuses, posture, hits, defeat."""

# -- damage ---
from ember_combat.sim.mechanics.damage import (
    CRIT_MULT,
    DamageRoll,
    estimate_damage,
    resolve_damage,
    roll_ability_damage,
    roll_dodge,
    round_half_up,
)

# -- shield ---
from ember_combat.sim.mechanics.shield import ShieldResult, absorb, gain_shield

# -- status effects ---
from ember_combat.sim.mechanics.status_effects import (
    apply_regeneration,
    apply_synergy_on_hit,
    reset_combat_status,
    tick_enemy_timers,
    tick_round_boundary,
    tick_start_of_turn,
)

# -- posture ---
from ember_combat.sim.mechanics.posture import apply_posture_damage, compute_posture_max

# -- defeat ---
from ember_combat.sim.mechanics.defeat import (
    DefeatRewards,
    check_player_defeat,
    handle_enemy_defeat,
    handle_player_defeat,
)

# -- hits ---
from ember_combat.sim.mechanics.hits import HitResult, perform_hit

__all__ = [
    "CRIT_MULT",
    "DamageRoll",
    "estimate_damage",
    "resolve_damage",
    "roll_ability_damage",
    "roll_dodge",
    "round_half_up",
    "ShieldResult",
    "absorb",
    "gain_shield",
    "apply_regeneration",
    "apply_synergy_on_hit",
    "reset_combat_status",
    "tick_enemy_timers",
    "tick_round_boundary",
    "tick_start_of_turn",
    "apply_posture_damage",
    "compute_posture_max",
    "DefeatRewards",
    "check_player_defeat",
    "handle_enemy_defeat",
    "handle_player_defeat",
    "HitResult",
    "perform_hit",
]
