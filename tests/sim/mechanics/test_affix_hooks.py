"""Tests for affix combat hooks."""

from ember_combat.sim.core.entities import Enemy, Player
from ember_combat.sim.core.rng import CombatRNG
from ember_combat.sim.mechanics.affix_hooks import on_enemy_hit, on_player_hit


def _make_enemy(**kwargs) -> Enemy:
    defaults = dict(name="Wraith", template_id="wraith", max_hp=50, hp=30)
    defaults.update(kwargs)
    return Enemy(**defaults)


def _make_player() -> Player:
    return Player(name="Hero", max_hp=100, hp=100)


class TestOnEnemyHit:
    def test_vampiric_heals(self, ctx):
        enemy = _make_enemy(vampiric_heal_pct=0.5)
        on_enemy_hit(ctx, enemy, _make_player(), 10)
        assert enemy.hp == 35
        assert ctx.messages() == ["Wraith siphons 5 HP."]

    def test_vampiric_needs_hp_damage(self, ctx):
        enemy = _make_enemy(vampiric_heal_pct=0.5)
        on_enemy_hit(ctx, enemy, _make_player(), 0)
        assert enemy.hp == 30

    def test_frozen_proc(self, ctx):
        ctx.rng = CombatRNG(7, log_draws=True)
        player = _make_player()
        on_enemy_hit(ctx, _make_enemy(chill_chance=1.0, chill_turns=2), player, 5)
        assert player.status.chilled_turns == 2
        assert [d.tag for d in ctx.rng.draw_log] == ["affix.frozen.proc"]

    def test_hex_applies_debuffs(self, ctx):
        player = _make_player()
        enemy = _make_enemy(hex_turns=3, hex_atk_down=2, hex_armor_down=4)
        on_enemy_hit(ctx, enemy, player, 5)
        assert player.status.atk_down == 2
        assert player.status.atk_down_turns == 3
        assert player.status.armor_down == 4
        assert player.status.magic_res_down == 0

    def test_plain_enemy_does_nothing(self, ctx):
        player = _make_player()
        on_enemy_hit(ctx, _make_enemy(), player, 10)
        assert ctx.entries == []
        assert ctx.rng.draw_index == 0


class TestOnPlayerHit:
    def test_thorns_reflect(self, ctx):
        player = _make_player()
        assert on_player_hit(ctx, _make_enemy(thorns_pct=0.2), player, 10) == 2
        assert player.hp == 98

    def test_thorns_minimum_one(self, ctx):
        player = _make_player()
        assert on_player_hit(ctx, _make_enemy(thorns_pct=0.01), player, 3) == 1

    def test_no_thorns(self, ctx):
        assert on_player_hit(ctx, _make_enemy(), _make_player(), 10) == 0
