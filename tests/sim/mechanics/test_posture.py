"""Tests for the posture pool and breaks."""

import pytest

from ember_combat.sim.core.entities import Enemy, PendingIntent
from ember_combat.sim.mechanics.posture import apply_posture_damage, compute_posture_max


def _make_enemy(posture_max: int = 40, **kwargs) -> Enemy:
    return Enemy(
        name="Ogre", template_id="ogre", max_hp=80, hp=80,
        posture_max=posture_max, **kwargs,
    )


class TestComputePostureMax:
    @pytest.mark.parametrize(
        "level, elite, boss, expected",
        [
            (1, False, False, 40),
            (0, False, False, 40),
            (10, False, False, 94),
            (10, True, False, 113),
            (10, False, True, 150),
            (100, True, True, 420),
        ],
    )
    def test_values(self, level, elite, boss, expected):
        assert compute_posture_max(level, elite, boss) == expected


class TestPostureGain:
    def test_quarter_of_damage(self, ctx):
        enemy = _make_enemy()
        apply_posture_damage(ctx, enemy, 20)
        assert enemy.posture == 5

    def test_basic_bonus(self, ctx):
        enemy = _make_enemy()
        apply_posture_damage(ctx, enemy, 20, basic=True)
        assert enemy.posture == 6

    def test_crit_bonus(self, ctx):
        enemy = _make_enemy()
        apply_posture_damage(ctx, enemy, 20, crit=True)
        assert enemy.posture == 8

    def test_boss_resists(self, ctx):
        enemy = _make_enemy(is_boss=True)
        apply_posture_damage(ctx, enemy, 20)
        assert enemy.posture == 4

    def test_per_hit_cap(self, ctx):
        enemy = _make_enemy()
        apply_posture_damage(ctx, enemy, 200)
        assert enemy.posture == 14

    def test_minimum_gain_is_one(self, ctx):
        enemy = _make_enemy()
        apply_posture_damage(ctx, enemy, 1)
        assert enemy.posture == 1

    def test_zero_damage_no_gain(self, ctx):
        enemy = _make_enemy()
        assert not apply_posture_damage(ctx, enemy, 0)
        assert enemy.posture == 0

    def test_missing_max_is_computed(self, ctx):
        enemy = _make_enemy(posture_max=0)
        apply_posture_damage(ctx, enemy, 4)
        assert enemy.posture_max == 40


class TestBreak:
    def test_break_resets_and_stuns(self, ctx):
        enemy = _make_enemy(posture=30)
        assert apply_posture_damage(ctx, enemy, 40)
        assert enemy.posture == 0
        assert enemy.status.broken_turns == 1
        assert ctx.messages() == ["Ogre is Broken!"]

    def test_break_discards_intent(self, ctx):
        enemy = _make_enemy(posture=30)
        enemy.intent = PendingIntent(ability_id="heavyCleave", turns_remaining=1)
        apply_posture_damage(ctx, enemy, 40)
        assert enemy.intent is None
        assert ctx.messages() == ["Ogre's focus shatters!", "Ogre is Broken!"]

    def test_below_max_does_not_break(self, ctx):
        enemy = _make_enemy(posture=20)
        assert not apply_posture_damage(ctx, enemy, 40)
        assert enemy.posture == 30
