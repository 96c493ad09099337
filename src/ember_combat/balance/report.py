"""Human-readable text report for difficulty baselines."""

from __future__ import annotations

from ember_combat.balance.models import DifficultyBaseline


def generate_text_report(baseline: DifficultyBaseline) -> str:
    """Generate a terminal/markdown summary of *baseline*."""
    g = baseline.global_metrics
    lines: list[str] = []

    lines.append("=" * 60)
    lines.append(f"Difficulty Baseline: {baseline.difficulty} ({baseline.agent} agent)")
    lines.append(f"Runs: {baseline.num_runs:,} | Generated: {baseline.generated_at}")
    lines.append("=" * 60)

    lines.append("")
    lines.append("## Global Stats")
    lines.append(f"  Win rate:        {g.win_rate:.1%} ({g.wins}/{g.wins + g.losses + g.fled})")
    lines.append(f"  Fled:            {g.fled}")
    lines.append(f"  Avg rounds:      {g.avg_rounds:.1f}")
    lines.append(f"  Avg HP lost:     {g.avg_hp_lost:.1f}")
    lines.append(f"  Avg damage:      {g.avg_damage_dealt:.1f}")
    lines.append(f"  Avg XP / gold:   {g.avg_xp:.1f} / {g.avg_gold:.1f}")

    if baseline.rarity_distribution:
        lines.append("")
        lines.append("## Spawn Mix")
        for rarity, share in baseline.rarity_distribution.items():
            lines.append(f"  {rarity:12s}  {share:6.1%}")
        lines.append(f"  with affixes  {baseline.affix_rate:6.1%}")
        lines.append(f"  elites        {baseline.elite_rate:6.1%}")

    if baseline.enemy_metrics:
        lines.append("")
        lines.append("## Enemies (hardest first)")
        for e in sorted(baseline.enemy_metrics, key=lambda m: m.win_rate_against):
            lines.append(
                f"  {e.enemy_id:20s}  wr={e.win_rate_against:.1%}"
                f"  hp_lost={e.avg_hp_lost:.1f}  battles={e.battles}"
            )

    if baseline.ability_metrics:
        lines.append("")
        lines.append("## Player Abilities")
        for a in baseline.ability_metrics:
            lines.append(
                f"  {a.ability_id:20s}  share={a.use_share:.2f}"
                f"  wr={a.win_rate_when_used:.1%}  uses={a.times_used}"
            )

    return "\n".join(lines)
