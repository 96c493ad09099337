"""Tests for the damage pipeline, dodge and ability-level helpers."""

import math

import pytest

from ember_combat.ir.abilities import AbilityDefinition, AbilityKind, DamageType
from ember_combat.sim.core.entities import Enemy, Player, Stats
from ember_combat.sim.mechanics.damage import (
    dodge_chance,
    estimate_damage,
    mitigation,
    resolve_damage,
    roll_ability_damage,
    roll_dodge,
    round_half_up,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

class _FixedRNG:
    """Returns a constant and records the tags it was asked for."""

    def __init__(self, value: float) -> None:
        self.value = value
        self.tags: list[str | None] = []

    def random_float(self, tag: str | None = None) -> float:
        self.tags.append(tag)
        return self.value


def _make_player(**stats) -> Player:
    defaults = dict(attack=10, magic=10, crit_chance=0.0)
    defaults.update(stats)
    return Player(name="Hero", max_hp=100, hp=100, stats=Stats(**defaults))


def _make_enemy(**stats) -> Enemy:
    return Enemy(name="Goblin", template_id="goblin", max_hp=40, hp=40, stats=Stats(**stats))


def _strike(**kwargs) -> AbilityDefinition:
    defaults = dict(id="strike", name="Strike", kind=AbilityKind.DAMAGE)
    defaults.update(kwargs)
    return AbilityDefinition(**defaults)


# ---------------------------------------------------------------------------
# round_half_up / mitigation
# ---------------------------------------------------------------------------

class TestRounding:
    def test_half_rounds_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(0.5) == 1

    def test_below_half_rounds_down(self):
        assert round_half_up(2.49) == 2


class TestMitigation:
    def test_physical_curve(self):
        assert mitigation(10, 0, DamageType.PHYSICAL) == pytest.approx(0.5)

    def test_magic_curve_is_softer(self):
        assert mitigation(10, 0, DamageType.MAGIC) > mitigation(10, 0, DamageType.PHYSICAL)

    def test_penetration(self):
        assert mitigation(10, 50, DamageType.PHYSICAL) == pytest.approx(100 / 150)

    def test_negative_defense_treated_as_zero(self):
        assert mitigation(-20, 0, DamageType.PHYSICAL) == 1.0


# ---------------------------------------------------------------------------
# resolve_damage
# ---------------------------------------------------------------------------

class TestResolveDamage:
    def test_no_defense(self):
        assert resolve_damage(10, 1.0, DamageType.PHYSICAL, None, 0) == (10, False)

    def test_armor_halves_at_ten(self):
        assert resolve_damage(10, 1.0, DamageType.PHYSICAL, None, 10).amount == 5

    def test_magic_resist(self):
        # 10 * 100 / 190 = 5.26
        assert resolve_damage(10, 1.0, DamageType.MAGIC, None, 10).amount == 5

    def test_affinity_then_element_resist(self):
        roll = resolve_damage(
            10, 1.0, DamageType.MAGIC, "fire", 0, affinity=1.5, element_resist_pct=20,
        )
        assert roll.amount == 12

    def test_affinity_ignored_without_element(self):
        assert resolve_damage(10, 1.0, DamageType.PHYSICAL, None, 0, affinity=2.0).amount == 10

    def test_enrage_and_modifier(self):
        roll = resolve_damage(10, 1.0, DamageType.PHYSICAL, None, 0, enrage_mult=1.2, modifier=1.15)
        assert roll.amount == round_half_up(10 * 1.2 * 1.15)

    def test_crit_applies_after_mitigation(self):
        rng = _FixedRNG(0.0)
        roll = resolve_damage(10, 1.0, DamageType.PHYSICAL, None, 10, crit_chance=50, rng=rng)
        assert roll.crit
        assert roll.amount == round_half_up(5 * 1.5)
        assert rng.tags == ["combat.crit"]

    def test_crit_miss(self):
        roll = resolve_damage(10, 1.0, DamageType.PHYSICAL, None, 0, crit_chance=50, rng=_FixedRNG(0.99))
        assert roll == (10, False)

    def test_zero_crit_chance_draws_nothing(self):
        rng = _FixedRNG(0.0)
        resolve_damage(10, 1.0, DamageType.PHYSICAL, None, 0, crit_chance=0, rng=rng)
        assert rng.tags == []

    def test_no_rng_never_crits(self):
        assert not resolve_damage(10, 1.0, DamageType.PHYSICAL, None, 0, crit_chance=75).crit

    def test_result_is_non_negative_int(self):
        roll = resolve_damage(-50, 3.0, DamageType.PHYSICAL, None, 0, modifier=-1)
        assert roll.amount == 0
        assert isinstance(roll.amount, int)

    def test_non_finite_becomes_zero(self):
        assert resolve_damage(math.inf, 1.0, DamageType.PHYSICAL, None, 0).amount == 0


# ---------------------------------------------------------------------------
# Dodge
# ---------------------------------------------------------------------------

class TestDodge:
    def test_undodgeable_never_draws(self):
        rng = _FixedRNG(0.0)
        defender = _make_enemy(dodge_chance=50)
        assert not roll_dodge(rng, defender, _strike(undodgeable=True))
        assert rng.tags == []

    def test_zero_chance_never_draws(self):
        rng = _FixedRNG(0.0)
        assert not roll_dodge(rng, _make_enemy(), _strike())
        assert rng.tags == []

    def test_vanish_always_dodges(self):
        rng = _FixedRNG(0.99)
        defender = _make_player()
        defender.status.vanish_turns = 1
        assert dodge_chance(defender) == 100.0
        assert roll_dodge(rng, defender, _strike())
        assert rng.tags == []

    def test_roll(self):
        defender = _make_enemy(dodge_chance=10)
        assert roll_dodge(_FixedRNG(0.05), defender, _strike())
        assert not roll_dodge(_FixedRNG(0.5), defender, _strike())

    def test_evasion_adds_to_dodge(self):
        defender = _make_player(dodge_chance=10)
        defender.status.evasion_turns = 2
        defender.status.evasion_bonus = 25
        assert dodge_chance(defender) == 35


# ---------------------------------------------------------------------------
# Actor-level helpers
# ---------------------------------------------------------------------------

class TestRollAbilityDamage:
    def test_basic_hit(self):
        assert roll_ability_damage(_make_player(), _make_enemy(), _strike()).amount == 10

    def test_vulnerable_defender(self):
        enemy = _make_enemy()
        enemy.status.vulnerable_turns = 2
        assert roll_ability_damage(_make_player(), enemy, _strike()).amount == 12

    def test_marked_defender(self):
        enemy = _make_enemy()
        enemy.status.marked_turns = 2
        assert roll_ability_damage(_make_player(), enemy, _strike()).amount == 11

    def test_damage_reduction(self):
        player = _make_player()
        player.status.dmg_reduction_turns = 1
        attacker = _make_enemy(attack=10)
        assert roll_ability_damage(attacker, player, _strike()).amount == 8

    def test_chilled_attacker(self):
        attacker = _make_enemy(attack=10)
        attacker.status.chilled_turns = 1
        assert roll_ability_damage(attacker, _make_player(), _strike()).amount == 9

    def test_enrage_half_for_magic(self):
        attacker = _make_enemy(attack=10, magic=10)
        attacker.status.enrage_turns = 1
        attacker.status.enrage_atk_pct = 0.2
        bolt = _strike(id="bolt", damage_type=DamageType.MAGIC)
        assert roll_ability_damage(attacker, _make_player(), _strike()).amount == 12
        assert roll_ability_damage(attacker, _make_player(), bolt).amount == 11

    def test_flat_debuffs(self):
        attacker = _make_enemy(attack=10)
        attacker.status.atk_down = 4
        defender = _make_player(armor=10)
        defender.status.armor_down = 10
        assert roll_ability_damage(attacker, defender, _strike()).amount == 6

    def test_enemy_affinity(self):
        enemy = _make_enemy()
        enemy.affinities = {"fire": 1.5}
        fireball = _strike(id="fireball", damage_type=DamageType.MAGIC, element="fire")
        assert roll_ability_damage(_make_player(), enemy, fireball).amount == 15

    def test_difficulty_mod(self):
        assert roll_ability_damage(_make_enemy(attack=10), _make_player(), _strike(), None, 1.25).amount == 13


class TestEstimateDamage:
    def test_ignores_crit(self):
        assert estimate_damage(_make_player(crit_chance=75), _make_enemy(), _strike()) == 10

    def test_non_damaging_is_zero(self):
        guard = AbilityDefinition(id="guardUp", name="Guard", kind=AbilityKind.GUARD)
        assert estimate_damage(_make_player(), _make_enemy(), guard) == 0


class TestOffenseElementFallback:
    def _target(self) -> Player:
        return _make_player(elemental_resist={"fire": 50})

    def test_attack_element_used_for_untagged_hits(self):
        plain = _make_enemy(attack=10)
        fiery = Enemy(
            name="Imp", template_id="imp", max_hp=40, hp=40,
            stats=Stats(attack=10), attack_element="fire",
        )
        assert estimate_damage(plain, self._target(), _strike()) == 10
        assert estimate_damage(fiery, self._target(), _strike()) == 5

    def test_magic_hits_use_magic_element(self):
        caster = Enemy(
            name="Imp", template_id="imp", max_hp=40, hp=40,
            stats=Stats(magic=10), attack_element="fire",
        )
        bolt = _strike(damage_type=DamageType.MAGIC)
        assert estimate_damage(caster, self._target(), bolt) == 10
        caster.magic_element = "fire"
        assert estimate_damage(caster, self._target(), bolt) == 5

    def test_ability_element_wins(self):
        fiery = Enemy(
            name="Imp", template_id="imp", max_hp=40, hp=40,
            stats=Stats(attack=10), attack_element="fire",
        )
        assert estimate_damage(fiery, self._target(), _strike(element="frost")) == 10
