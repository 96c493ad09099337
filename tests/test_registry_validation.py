"""Validation that the bundled content loads and bad content is rejected."""

import json

import pytest

from ember_combat.sim.content.registry import ContentRegistry


def _write(tmp_path, name, payload):
    path = tmp_path / name
    path.write_text(json.dumps(payload))
    return path


def _with_enemy_abilities() -> ContentRegistry:
    registry = ContentRegistry()
    registry.load_enemy_abilities()
    return registry


# ---------------------------------------------------------------------------
# Bundled content
# ---------------------------------------------------------------------------

def test_load_all():
    registry = ContentRegistry().load_all()

    assert "enemyStrike" in registry.abilities
    assert "strike" in registry.player_ability_ids
    assert set(registry.difficulties) == {"easy", "normal", "hard", "dynamic"}
    assert [r.tier for r in registry.rarities.values()] == sorted(
        r.tier for r in registry.rarities.values()
    )
    assert registry.templates(bosses=True)
    assert registry.templates(bosses=False)

    # Every set and explicit kit resolves
    for behavior, ability_ids in registry.ability_sets.items():
        assert ability_ids, behavior
        for ability_id in ability_ids:
            assert registry.get_ability(ability_id) is not None
    for template in registry.templates():
        assert template.abilities or registry.get_ability_set(template.behavior) or "basic" in registry.ability_sets


def test_accessors():
    registry = ContentRegistry().load_all()
    assert registry.get_ability("noSuchThing") is None
    with pytest.raises(KeyError):
        registry.get_enemy_template("noSuchThing")
    with pytest.raises(KeyError):
        registry.get_difficulty("nightmare")
    assert registry.get_ability_set("noSuchBehavior") == []

    kit = registry.get_ability_set("basic")
    kit.append("mutated")
    assert "mutated" not in registry.get_ability_set("basic")

    assert [a.id for a in registry.player_abilities()] == registry.player_ability_ids


def test_templates_filter():
    registry = ContentRegistry().load_all()
    bosses = registry.templates(bosses=True)
    others = registry.templates(bosses=False)
    assert all(t.is_boss for t in bosses)
    assert not any(t.is_boss for t in others)
    assert len(bosses) + len(others) == len(registry.templates())


# ---------------------------------------------------------------------------
# Load-time rejection
# ---------------------------------------------------------------------------

class TestRejection:
    def test_duplicate_ids(self, tmp_path):
        path = _write(tmp_path, "abilities.json", [
            {"id": "zap", "name": "Zap", "kind": "damage"},
            {"id": "zap", "name": "Zap Again", "kind": "damage"},
        ])
        with pytest.raises(ValueError, match="duplicate id"):
            ContentRegistry().load_enemy_abilities(path)

    def test_ability_registered_twice(self):
        registry = _with_enemy_abilities()
        with pytest.raises(ValueError, match="already registered"):
            registry.load_enemy_abilities()

    def test_invalid_entry(self, tmp_path):
        path = _write(tmp_path, "abilities.json", [{"id": "zap", "name": "Zap", "kind": "teleport"}])
        with pytest.raises(ValueError, match="invalid entry"):
            ContentRegistry().load_enemy_abilities(path)

    def test_section_markers_skipped(self, tmp_path):
        path = _write(tmp_path, "abilities.json", [
            {"_section": "bolts"},
            {"id": "zap", "name": "Zap", "kind": "damage"},
        ])
        registry = ContentRegistry()
        registry.load_enemy_abilities(path)
        assert list(registry.abilities) == ["zap"]

    def test_set_with_unknown_ability(self, tmp_path):
        registry = _with_enemy_abilities()
        path = _write(tmp_path, "sets.json", {"basic": ["enemyStrike", "noSuchThing"]})
        with pytest.raises(ValueError, match="unknown abilities"):
            registry.load_ability_sets(path)

    def test_empty_set(self, tmp_path):
        registry = _with_enemy_abilities()
        path = _write(tmp_path, "sets.json", {"basic": []})
        with pytest.raises(ValueError, match="empty"):
            registry.load_ability_sets(path)

    def test_enemy_with_unknown_ability(self, tmp_path):
        registry = _with_enemy_abilities()
        path = _write(tmp_path, "enemies.json", [
            {"id": "imp", "name": "Imp", "max_hp": 10, "abilities": ["noSuchThing"]},
        ])
        with pytest.raises(ValueError, match="unknown abilities"):
            registry.load_enemies(path)

    def test_duplicate_rarity_tiers(self, tmp_path):
        path = _write(tmp_path, "rarities.json", [
            {"id": "common", "label": "Common", "tier": 1},
            {"id": "plain", "label": "Plain", "tier": 1},
        ])
        with pytest.raises(ValueError, match="tiers must be unique"):
            ContentRegistry().load_rarities(path)

    def test_behavior_without_set_or_fallback(self, tmp_path):
        registry = _with_enemy_abilities()
        registry.load_ability_sets(_write(tmp_path, "sets.json", {"caster": ["arcaneBurst"]}))
        registry.load_enemies(_write(tmp_path, "enemies.json", [
            {"id": "imp", "name": "Imp", "max_hp": 10, "behavior": "sneaky"},
        ]))
        with pytest.raises(ValueError, match="no ability set"):
            registry.validate()


# ---------------------------------------------------------------------------
# Source paths
# ---------------------------------------------------------------------------

class TestSourcePaths:
    def test_load_all_records_every_table(self):
        registry = ContentRegistry().load_all()
        assert list(registry.source_paths) == [
            "enemy_abilities", "player_abilities", "ability_sets", "enemies",
            "rarities", "affixes", "elites", "difficulty",
        ]
        assert all(p.suffix == ".json" for p in registry.source_paths.values())

    def test_from_paths_rebuilds_custom_tables(self, tmp_path):
        registry = ContentRegistry().load_all()
        registry.load_difficulties(_write(tmp_path, "difficulty.json", [
            {"id": "brutal", "enemy_hp_mod": 2.0},
        ]))
        paths = {table: str(p) for table, p in registry.source_paths.items()}

        rebuilt = ContentRegistry.from_paths(paths)
        assert set(rebuilt.difficulties) == {"brutal"}
        assert rebuilt.get_difficulty("brutal").enemy_hp_mod == 2.0
        assert set(rebuilt.abilities) == set(registry.abilities)
        assert rebuilt.player_ability_ids == registry.player_ability_ids
        assert set(rebuilt.enemies) == set(registry.enemies)

    def test_from_paths_rejects_unknown_table(self, tmp_path):
        with pytest.raises(ValueError, match="Unknown content tables"):
            ContentRegistry.from_paths({"potions": tmp_path / "potions.json"})
