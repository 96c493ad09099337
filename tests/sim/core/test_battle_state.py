"""Tests for BattleState -- targeting, begin and one-step clear."""

from ember_combat.sim.core.battle_state import BattleState
from ember_combat.sim.core.entities import Enemy, PendingIntent, Player


def _make_player() -> Player:
    return Player(name="Hero", max_hp=100, hp=100)


def _make_enemy(name: str = "Goblin", hp: int = 30) -> Enemy:
    return Enemy(name=name, template_id=name.lower(), max_hp=30, hp=hp)


class TestBegin:
    def test_single_enemy(self):
        state = BattleState(player=_make_player())
        state.begin([_make_enemy()])
        assert state.in_combat
        assert state.round == 1
        assert not state.multi_enemy

    def test_multi_enemy_flag(self):
        state = BattleState(player=_make_player())
        state.begin([_make_enemy("A"), _make_enemy("B")])
        assert state.multi_enemy

    def test_no_enemies_not_in_combat(self):
        state = BattleState(player=_make_player())
        state.begin([])
        assert not state.in_combat


class TestTarget:
    def test_falls_back_to_first_living(self):
        state = BattleState(player=_make_player())
        state.begin([_make_enemy("A", hp=0), _make_enemy("B")])
        state.target_index = 0
        assert state.target.name == "B"

    def test_none_when_all_dead(self):
        state = BattleState(player=_make_player())
        state.begin([_make_enemy("A", hp=0)])
        assert state.target is None


class TestClear:
    def test_clear_resets_everything(self):
        state = BattleState(player=_make_player())
        enemy = _make_enemy()
        enemy.intent = PendingIntent(ability_id="heavyCleave", turns_remaining=1)
        state.begin([enemy, _make_enemy("B")])
        state.busy = True
        state.drops_granted = 2
        state.companion_cooldowns = {"wolf": 2}

        state.clear("win")

        assert not state.in_combat
        assert state.enemies == []
        assert state.result == "win"
        assert not state.busy
        assert state.drops_granted == 0
        assert state.companion_cooldowns == {}
        assert enemy.intent is None
