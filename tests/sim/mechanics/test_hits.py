"""Tests for perform_hit -- the full per-hit state change sequence."""

from ember_combat.ir.abilities import AbilityDefinition, AbilityKind, DamageType
from ember_combat.ir.difficulty import DifficultyConfig
from ember_combat.sim.core.battle_state import BattleState
from ember_combat.sim.core.entities import Enemy, Player, ResourceKind, Stats
from ember_combat.sim.mechanics.hits import damage_mod_for, perform_hit


# Crit and dodge are left at 0 throughout so no hit ever draws from the RNG.

def _make_player(**kwargs) -> Player:
    defaults = dict(name="Hero", max_hp=100, hp=100, stats=Stats(attack=10, magic=10))
    defaults.update(kwargs)
    return Player(**defaults)


def _make_enemy(**kwargs) -> Enemy:
    defaults = dict(
        name="Goblin", template_id="goblin", max_hp=40, hp=40,
        stats=Stats(attack=10), posture_max=40,
    )
    defaults.update(kwargs)
    return Enemy(**defaults)


def _make_state(player: Player, *enemies: Enemy) -> BattleState:
    state = BattleState(player=player)
    state.begin(list(enemies))
    return state


def _ability(ability_id: str = "strike", **kwargs) -> AbilityDefinition:
    defaults = dict(id=ability_id, name=ability_id.title(), kind=AbilityKind.DAMAGE)
    defaults.update(kwargs)
    return AbilityDefinition(**defaults)


class TestPlayerHits:
    def test_basic_strike(self, ctx):
        player, enemy = _make_player(), _make_enemy()
        state = _make_state(player, enemy)
        result = perform_hit(ctx, state, player, enemy, _ability())

        assert result.landed
        assert result.damage == 10
        assert result.hp_damage == 10
        assert enemy.hp == 30
        assert enemy.posture == 4
        assert ctx.rng.draw_index == 0
        assert ctx.messages()[0] == "Hero's Strike hits Goblin for 10."

    def test_non_basic_posture(self, ctx):
        player, enemy = _make_player(), _make_enemy()
        perform_hit(ctx, _make_state(player, enemy), player, enemy, _ability("rend"))
        assert enemy.posture == 3

    def test_enemy_thorns_affix_reflects(self, ctx):
        player, enemy = _make_player(), _make_enemy(thorns_pct=0.5)
        result = perform_hit(ctx, _make_state(player, enemy), player, enemy, _ability())
        assert result.reflected == 5
        assert player.hp == 95

    def test_lifesteal(self, ctx):
        player = _make_player(hp=50, stats=Stats(attack=10, lifesteal=50))
        enemy = _make_enemy()
        perform_hit(ctx, _make_state(player, enemy), player, enemy, _ability())
        assert player.hp == 55

    def test_chill_shatter_bonus(self, ctx):
        player, enemy = _make_player(), _make_enemy()
        enemy.status.chilled_turns = 2
        result = perform_hit(ctx, _make_state(player, enemy), player, enemy, _ability())
        assert result.bonus_damage == 2
        assert enemy.hp == 28

    def test_player_damage_mod(self, ctx):
        ctx.difficulty = DifficultyConfig(id="easy", player_dmg_mod=1.1)
        player, enemy = _make_player(), _make_enemy()
        result = perform_hit(ctx, _make_state(player, enemy), player, enemy, _ability())
        assert result.damage == 11


class TestEnemyHits:
    def test_vanish_dodges_without_draw(self, ctx):
        player, enemy = _make_player(), _make_enemy()
        player.status.vanish_turns = 1
        result = perform_hit(ctx, _make_state(player, enemy), enemy, player, _ability("enemyStrike"))
        assert result.dodged
        assert player.hp == 100
        assert ctx.rng.draw_index == 0
        assert ctx.messages() == ["Hero dodges Goblin's Enemystrike!"]

    def test_shield_absorbs_first(self, ctx):
        player, enemy = _make_player(), _make_enemy()
        player.status.shield = 6
        result = perform_hit(ctx, _make_state(player, enemy), enemy, player, _ability("enemyStrike"))
        assert result.shield_absorbed == 6
        assert result.hp_damage == 4
        assert player.hp == 96
        assert player.status.shield == 0

    def test_shatter_strips_shield(self, ctx):
        player, enemy = _make_player(), _make_enemy()
        player.status.shield = 10
        ability = _ability("shieldBreaker", shatter_flat=5)
        result = perform_hit(ctx, _make_state(player, enemy), enemy, player, ability)
        assert result.shield_shattered == 5
        assert result.shield_consumed == 10
        assert player.hp == 95

    def test_fury_builds_when_hit(self, ctx):
        player = _make_player(resource_kind=ResourceKind.FURY, max_resource=100, resource=0)
        enemy = _make_enemy()
        perform_hit(ctx, _make_state(player, enemy), enemy, player, _ability("enemyStrike"))
        assert player.resource == 10

    def test_enemy_damage_mod(self, ctx):
        ctx.difficulty = DifficultyConfig(id="hard", enemy_dmg_mod=1.25)
        player, enemy = _make_player(), _make_enemy()
        result = perform_hit(ctx, _make_state(player, enemy), enemy, player, _ability("enemyStrike"))
        assert result.damage == 13

    def test_flat_thorns_kill_resolves_defeat(self, ctx):
        player = _make_player(stats=Stats(attack=10, thorns=50))
        enemy = _make_enemy(hp=5)
        state = _make_state(player, enemy)
        result = perform_hit(ctx, state, enemy, player, _ability("enemyStrike"))
        assert result.reflected == 5
        assert enemy.defeat_handled
        assert state.result == "win"

    def test_magic_uses_magic_res(self, ctx):
        player = _make_player(stats=Stats(magic_res=10))
        enemy = _make_enemy(stats=Stats(magic=10))
        bolt = _ability("shadowBolt", damage_type=DamageType.MAGIC)
        assert perform_hit(ctx, _make_state(player, enemy), enemy, player, bolt).damage == 5


class TestDamageModFor:
    def test_sides(self, ctx):
        ctx.difficulty = DifficultyConfig(id="x", enemy_dmg_mod=1.3, player_dmg_mod=0.9)
        assert damage_mod_for(ctx, _make_player()) == 0.9
        assert damage_mod_for(ctx, _make_enemy()) == 1.3
