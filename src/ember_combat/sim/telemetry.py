"""Telemetry data models for per-battle and per-run statistics.

Lightweight dataclasses that capture what balance analysis needs without
storing the battle history:

- **BattleTelemetry**: outcome, rounds, damage dealt/taken, abilities used,
  rewards and what the spawn pipeline produced.
- **RunTelemetry**: seed, difficulty, ordered battle results, final outcome.

Plain ``dataclass`` instances (not pydantic) to keep collection cheap
during batch runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class BattleTelemetry:
    """Stats from a single battle.

    Attributes
    ----------
    enemy_ids:
        Template ids of the enemies in this battle (in position order).
    result:
        ``"win"``, ``"loss"``, ``"fled"`` or ``"aborted"``.
    rounds:
        Number of rounds started.
    player_hp_start / player_hp_end:
        Player HP before and after (0 on loss).
    hp_lost:
        ``max(0, player_hp_start - player_hp_end)``.
    damage_dealt:
        Total HP removed from enemies.
    abilities_used_by_id:
        Player ability id -> use count.
    enemy_rarities:
        Rarity id per enemy, in position order.
    """

    enemy_ids: list[str]
    result: str
    rounds: int
    player_hp_start: int
    player_hp_end: int
    hp_lost: int
    damage_dealt: int
    abilities_used: int = 0
    abilities_used_by_id: dict[str, int] = field(default_factory=dict)
    xp_gained: int = 0
    gold_gained: int = 0
    drops: int = 0
    enemy_rarities: list[str] = field(default_factory=list)
    enemy_affixes: list[list[str]] = field(default_factory=list)
    elites: int = 0
    flee_attempts: int = 0


@dataclass
class RunTelemetry:
    """Stats from one seeded run (currently a single battle).

    Attributes
    ----------
    seed:
        The master RNG seed used for this run.
    difficulty:
        Difficulty preset id.
    battles:
        Ordered list of battle telemetry.
    final_result:
        Result of the last battle.
    """

    seed: int
    difficulty: str = "normal"
    battles: list[BattleTelemetry] = field(default_factory=list)
    final_result: str = "loss"
