"""Integration tests for baseline generation, save, and load."""

from __future__ import annotations

from pathlib import Path

import pytest

from ember_combat.balance.baselines import (
    build_baseline,
    generate_baseline,
    load_baseline,
    save_baseline,
)
from ember_combat.balance.models import DifficultyBaseline, GlobalMetrics
from ember_combat.sim.content.registry import ContentRegistry


@pytest.fixture(scope="module")
def registry() -> ContentRegistry:
    """Fully loaded bundled registry."""
    return ContentRegistry().load_all()


class TestGenerateBaseline:
    def test_small_batch(self, registry: ContentRegistry) -> None:
        """A short batch should produce a populated baseline."""
        baseline = generate_baseline(
            registry, difficulty="normal", num_runs=20,
            encounter_config={"enemy_ids": ["goblin"], "zone_max_level": 2},
        )
        assert baseline.agent == "heuristic"
        assert baseline.difficulty == "normal"
        assert baseline.num_runs == 20
        assert baseline.global_metrics.total_runs == 20
        assert 0.0 <= baseline.global_metrics.win_rate <= 1.0
        assert [m.enemy_id for m in baseline.enemy_metrics] == ["goblin"]
        assert sum(baseline.rarity_distribution.values()) == pytest.approx(1.0)

    def test_difficulty_overrides_config(self, registry: ContentRegistry) -> None:
        baseline = generate_baseline(
            registry, difficulty="easy", num_runs=5,
            encounter_config={"difficulty": "hard"},
        )
        assert baseline.difficulty == "easy"
        assert baseline.rarity_distribution == {"common": 1.0}

    def test_build_from_empty(self) -> None:
        baseline = build_baseline([], "hard", agent="random")
        assert baseline.num_runs == 0
        assert baseline.global_metrics.win_rate == 0.0


class TestSaveLoadBaseline:
    def test_roundtrip(self, registry: ContentRegistry, tmp_path: Path) -> None:
        """Generate -> save -> load should produce identical data."""
        baseline = generate_baseline(registry, num_runs=5)
        path = tmp_path / "baseline.json"
        save_baseline(baseline, path)

        assert path.exists()
        assert load_baseline(path) == baseline

    def test_save_creates_dirs(self, tmp_path: Path) -> None:
        """save_baseline should create parent directories."""
        baseline = DifficultyBaseline(
            difficulty="normal", agent="heuristic", num_runs=0,
            generated_at="2026-01-01T00:00:00+00:00",
            global_metrics=GlobalMetrics(
                total_runs=0, wins=0, losses=0, win_rate=0.0, avg_rounds=0.0,
                avg_hp_lost=0.0, avg_damage_dealt=0.0, avg_xp=0.0, avg_gold=0.0,
            ),
        )
        path = tmp_path / "nested" / "dir" / "baseline.json"
        save_baseline(baseline, path)
        assert path.exists()
