"""Tests for the text report generator."""

from __future__ import annotations

from ember_combat.balance.models import (
    AbilityMetrics,
    DifficultyBaseline,
    EnemyMetrics,
    GlobalMetrics,
)
from ember_combat.balance.report import generate_text_report


def _make_baseline(**overrides) -> DifficultyBaseline:
    defaults = dict(
        difficulty="normal",
        agent="heuristic",
        num_runs=1000,
        generated_at="2026-01-01T00:00:00+00:00",
        global_metrics=GlobalMetrics(
            total_runs=1000, wins=700, losses=250, fled=50, win_rate=0.7,
            avg_rounds=6.2, avg_hp_lost=31.0, avg_damage_dealt=52.0,
            avg_xp=14.0, avg_gold=7.0,
        ),
    )
    defaults.update(overrides)
    return DifficultyBaseline(**defaults)


class TestTextReport:
    def test_header_and_globals(self):
        report = generate_text_report(_make_baseline())
        assert "Difficulty Baseline: normal (heuristic agent)" in report
        assert "Runs: 1,000" in report
        assert "70.0% (700/1000)" in report

    def test_optional_sections_omitted(self):
        report = generate_text_report(_make_baseline())
        assert "## Spawn Mix" not in report
        assert "## Enemies" not in report
        assert "## Player Abilities" not in report

    def test_enemies_hardest_first(self):
        report = generate_text_report(_make_baseline(enemy_metrics=[
            EnemyMetrics(enemy_id="goblin", battles=5, wins_against=5, win_rate_against=1.0, avg_hp_lost=10.0),
            EnemyMetrics(enemy_id="troll", battles=5, wins_against=1, win_rate_against=0.2, avg_hp_lost=80.0),
        ]))
        assert report.index("troll") < report.index("goblin")

    def test_spawn_mix_and_abilities(self):
        report = generate_text_report(_make_baseline(
            rarity_distribution={"uncommon": 0.9, "rare": 0.1},
            affix_rate=0.25,
            ability_metrics=[AbilityMetrics(
                ability_id="fireball", times_used=30, use_share=0.3, win_rate_when_used=0.75,
            )],
        ))
        assert "## Spawn Mix" in report
        assert "uncommon" in report
        assert "25.0%" in report
        assert "fireball" in report
