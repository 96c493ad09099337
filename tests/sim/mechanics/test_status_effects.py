"""Tests for timed status effects -- DOT ticks, synergies, timer expiry."""

from ember_combat.ir.abilities import DamageType
from ember_combat.sim.core.entities import Enemy, Player
from ember_combat.sim.mechanics.status_effects import (
    apply_regeneration,
    apply_synergy_on_hit,
    reset_combat_status,
    tick_enemy_timers,
    tick_round_boundary,
    tick_start_of_turn,
)


def _make_player(hp: int = 100, **kwargs) -> Player:
    return Player(name="Hero", max_hp=100, hp=hp, **kwargs)


def _make_enemy(hp: int = 40, max_hp: int = 40, **kwargs) -> Enemy:
    return Enemy(name="Goblin", template_id="goblin", max_hp=max_hp, hp=hp, **kwargs)


# ---------------------------------------------------------------------------
# Damage over time
# ---------------------------------------------------------------------------

class TestDamageOverTime:
    def test_bleed_kills_and_clears(self, ctx):
        player = _make_player(hp=10)
        player.status.bleed_turns = 2
        player.status.bleed_damage = 5

        assert tick_start_of_turn(ctx, player) == 5
        assert player.hp == 5
        assert tick_start_of_turn(ctx, player) == 5
        assert player.hp == 0
        assert player.is_dead
        assert player.status.bleed_turns == 0
        assert player.status.bleed_damage == 0
        assert ctx.messages().count("Hero bleeds for 5.") == 2
        assert "The bleeding slows." in ctx.messages()

    def test_burn_message(self, ctx):
        enemy = _make_enemy()
        enemy.status.burn_turns = 1
        enemy.status.burn_damage = 3
        tick_start_of_turn(ctx, enemy)
        assert enemy.hp == 37
        assert ctx.messages() == ["Goblin burns for 3.", "The flames die down."]

    def test_invulnerable_counts_down_without_damage(self, ctx):
        player = _make_player(invulnerable=True)
        player.status.bleed_turns = 2
        player.status.bleed_damage = 50
        assert tick_start_of_turn(ctx, player) == 0
        assert player.hp == 100
        assert player.status.bleed_turns == 1

    def test_no_dot_is_noop(self, ctx):
        assert tick_start_of_turn(ctx, _make_player()) == 0
        assert ctx.entries == []


# ---------------------------------------------------------------------------
# Synergies
# ---------------------------------------------------------------------------

class TestSynergies:
    def test_fire_ignites_bleed(self, ctx):
        enemy = _make_enemy()
        enemy.status.bleed_turns = 3
        enemy.status.bleed_damage = 2

        apply_synergy_on_hit(ctx, enemy, 10, "fire", DamageType.MAGIC)
        assert enemy.status.burn_damage == 2
        assert enemy.status.burn_turns == 2

        apply_synergy_on_hit(ctx, enemy, 10, "fire", DamageType.MAGIC)
        ignites = [m for m in ctx.messages() if "ignites" in m]
        assert ignites == ["Goblin ignites from the bleeding wound!"]

    def test_ignite_scales_with_damage(self, ctx):
        enemy = _make_enemy()
        enemy.status.bleed_turns = 1
        apply_synergy_on_hit(ctx, enemy, 50, "fire", DamageType.MAGIC)
        assert enemy.status.burn_damage == 6

    def test_fire_without_bleed_does_nothing(self, ctx):
        enemy = _make_enemy()
        apply_synergy_on_hit(ctx, enemy, 10, "fire", DamageType.MAGIC)
        assert enemy.status.burn_turns == 0

    def test_physical_shatters_chill(self, ctx):
        enemy = _make_enemy()
        enemy.status.chilled_turns = 2
        bonus = apply_synergy_on_hit(ctx, enemy, 20, None, DamageType.PHYSICAL)
        assert bonus == 4
        assert enemy.hp == 36
        assert enemy.status.chilled_turns == 0
        assert ctx.messages() == ["Shatter! The chill on Goblin breaks for 4 bonus damage."]

    def test_zero_damage_never_triggers(self, ctx):
        enemy = _make_enemy()
        enemy.status.chilled_turns = 2
        assert apply_synergy_on_hit(ctx, enemy, 0, None, DamageType.PHYSICAL) == 0
        assert enemy.status.chilled_turns == 2


# ---------------------------------------------------------------------------
# Timers
# ---------------------------------------------------------------------------

class TestRoundBoundary:
    def test_expiry_resets_magnitude_and_logs_once(self, ctx):
        player = _make_player()
        player.status.vulnerable_turns = 1
        player.status.armor_down_turns = 2
        player.status.armor_down = 5

        tick_round_boundary(ctx, player)
        assert player.status.vulnerable_turns == 0
        assert player.status.armor_down == 5
        assert ctx.messages() == ["You feel less exposed."]

        tick_round_boundary(ctx, player)
        assert player.status.armor_down == 0
        assert ctx.messages().count("You feel less exposed.") == 1

    def test_dot_untouched(self, ctx):
        player = _make_player()
        player.status.bleed_turns = 2
        player.status.bleed_damage = 4
        tick_round_boundary(ctx, player)
        assert player.status.bleed_turns == 2
        assert player.hp == 100


class TestEnemyTimers:
    def test_guard_expiry(self, ctx):
        enemy = _make_enemy()
        enemy.status.guard_turns = 1
        enemy.status.armor_buff = 3
        enemy.status.magic_res_buff = 3
        tick_enemy_timers(ctx, enemy)
        assert enemy.status.armor_buff == 0
        assert enemy.status.magic_res_buff == 0
        assert ctx.messages() == ["Goblin lowers its guard."]

    def test_silent_debuff_expiry(self, ctx):
        enemy = _make_enemy()
        enemy.status.atk_down_turns = 1
        enemy.status.atk_down = 2
        tick_enemy_timers(ctx, enemy)
        assert enemy.status.atk_down == 0
        assert ctx.entries == []


# ---------------------------------------------------------------------------
# Regeneration / reset
# ---------------------------------------------------------------------------

class TestRegeneration:
    def test_heals_percent_of_max(self, ctx):
        enemy = _make_enemy(hp=50, max_hp=100, regen_pct=0.03)
        assert apply_regeneration(ctx, enemy) == 3
        assert enemy.hp == 53

    def test_minimum_one(self, ctx):
        enemy = _make_enemy(hp=5, max_hp=10, regen_pct=0.01)
        assert apply_regeneration(ctx, enemy) == 1

    def test_full_hp_or_dead_skips(self, ctx):
        assert apply_regeneration(ctx, _make_enemy(regen_pct=0.1)) == 0
        assert apply_regeneration(ctx, _make_enemy(hp=0, regen_pct=0.1)) == 0


class TestResetCombatStatus:
    def test_clears_everything(self):
        player = _make_player()
        player.status.bleed_turns = 3
        player.status.shield = 12
        reset_combat_status(player)
        assert player.status.bleed_turns == 0
        assert player.status.shield == 0

    def test_sanctuary_talent_grants_shield(self):
        player = _make_player(talents=["cleric_sanctuary"])
        reset_combat_status(player)
        assert player.status.shield == 20
