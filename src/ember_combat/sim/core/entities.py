"""Entity models for the headless combat core.

All data classes use Pydantic v2 BaseModel for validation and
serialization.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Stats / status
# ---------------------------------------------------------------------------

class Stats(BaseModel):
    """Combat stat block.  Percent fields are on a 0--100 scale."""

    attack: int = 0
    magic: int = 0
    armor: int = 0
    magic_res: int = 0
    speed: int = 0
    crit_chance: float = 0.0
    dodge_chance: float = 0.0
    resist_all: float = 0.0
    armor_pen: float = 0.0
    lifesteal: float = 0.0
    thorns: int = 0
    """Flat damage reflected to anyone who lands a hit."""

    hp_regen: int = 0
    """Flat HP restored at each round boundary."""

    elemental_bonus: dict[str, float] = Field(default_factory=dict)
    elemental_resist: dict[str, float] = Field(default_factory=dict)


class StatusContainer(BaseModel):
    """Flat record of timed modifiers.

    Each ``*_turns`` counter is paired with the magnitude it gates.  When a
    counter reaches 0 the magnitude is reset in the same tick.
    """

    shield: int = 0

    # damage over time -- ticks at the start of the afflicted actor's turn
    bleed_turns: int = 0
    bleed_damage: int = 0
    burn_turns: int = 0
    burn_damage: int = 0

    # round-boundary timers
    chilled_turns: int = 0
    dmg_reduction_turns: int = 0
    vulnerable_turns: int = 0
    armor_down: int = 0
    armor_down_turns: int = 0
    magic_res_down: int = 0
    magic_res_down_turns: int = 0
    atk_down: int = 0
    atk_down_turns: int = 0
    magic_down: int = 0
    magic_down_turns: int = 0
    buff_attack: int = 0
    buff_attack_turns: int = 0
    buff_magic: int = 0
    buff_magic_turns: int = 0
    buff_from_companion: int = 0
    buff_from_companion_turns: int = 0
    evasion_bonus: int = 0
    evasion_turns: int = 0
    vanish_turns: int = 0

    # enemy-side timers -- tick at the enemy's own turn start
    guard_turns: int = 0
    armor_buff: int = 0
    magic_res_buff: int = 0
    enrage_turns: int = 0
    enrage_atk_pct: float = 0.0
    marked_turns: int = 0
    stun_turns: int = 0
    broken_turns: int = 0
    forced_guard: bool = False

    @property
    def bleeding(self) -> bool:
        return self.bleed_turns > 0

    @property
    def burning(self) -> bool:
        return self.burn_turns > 0


# ---------------------------------------------------------------------------
# Actor base
# ---------------------------------------------------------------------------

class Actor(BaseModel):
    """Common base for anything that can fight."""

    name: str
    level: int = 1
    max_hp: int
    hp: int
    max_resource: int = 0
    resource: int = 0
    stats: Stats = Field(default_factory=Stats)
    status: StatusContainer = Field(default_factory=StatusContainer)
    invulnerable: bool = False
    """No-death override: DOT is skipped and lethal damage leaves 1 HP."""

    # -- HP queries ----------------------------------------------------------

    @property
    def is_dead(self) -> bool:
        return self.hp <= 0

    @property
    def hp_ratio(self) -> float:
        if self.max_hp <= 0:
            return 0.0
        return self.hp / self.max_hp

    # -- damage / heal -------------------------------------------------------

    def take_damage(self, amount: int) -> int:
        """Subtract *amount* HP (shields are handled by the caller).

        Returns the HP actually lost.  HP never drops below 0.
        """
        if amount <= 0:
            return 0
        lost = min(self.hp, int(amount))
        self.hp -= lost
        return lost

    def heal(self, amount: int) -> int:
        """Heal *amount* HP, capped at ``max_hp``.  Returns HP restored."""
        if amount <= 0 or self.is_dead:
            return 0
        before = self.hp
        self.hp = min(self.max_hp, self.hp + int(amount))
        return self.hp - before

    # -- resource ------------------------------------------------------------

    def gain_resource(self, amount: int) -> int:
        if amount <= 0:
            return 0
        before = self.resource
        self.resource = min(self.max_resource, self.resource + int(amount))
        return self.resource - before

    def spend_resource(self, amount: int) -> int:
        """Remove up to *amount* resource.  Returns what was removed."""
        if amount <= 0:
            return 0
        spent = min(self.resource, int(amount))
        self.resource -= spent
        return spent


# ---------------------------------------------------------------------------
# Player
# ---------------------------------------------------------------------------

class ResourceKind(str, Enum):
    """Player resource flavours.  Each regenerates differently."""

    MANA = "mana"
    FURY = "fury"
    BLOOD = "blood"
    ESSENCE = "essence"


class Player(Actor):
    """The player character."""

    resource_kind: ResourceKind = ResourceKind.MANA
    xp: int = 0
    gold: int = 0
    talents: list[str] = Field(default_factory=list)
    abilities: list[str] = Field(default_factory=lambda: ["strike"])
    stats: Stats = Field(default_factory=lambda: Stats(crit_chance=10.0))


# ---------------------------------------------------------------------------
# Enemy runtime state
# ---------------------------------------------------------------------------

class AbilityStat(BaseModel):
    """Learned preference for one ability."""

    value: float = 0.0
    uses: int = 0


class Memory(BaseModel):
    """Per-enemy learning state.  Never shared between enemies."""

    ability_stats: dict[str, AbilityStat] = Field(default_factory=dict)
    exploration: float = 0.22

    def stat_for(self, ability_id: str) -> AbilityStat:
        stat = self.ability_stats.get(ability_id)
        if stat is None:
            stat = AbilityStat()
            self.ability_stats[ability_id] = stat
        return stat


class ElementalTrait(BaseModel):
    """A rolled elemental package: a themed resist and the opposing weakness."""

    element: str
    label: str
    flat_resist: int = 0
    weak: str | None = None


class PendingIntent(BaseModel):
    """A declared-but-unresolved telegraphed ability."""

    ability_id: str
    turns_remaining: int


# ---------------------------------------------------------------------------
# Enemy
# ---------------------------------------------------------------------------

class Enemy(Actor):
    """A single battle-ready enemy instance."""

    template_id: str
    """Identifier that ties this instance back to its template."""

    base_name: str = ""
    is_boss: bool = False
    behavior: str = "basic"

    abilities: list[str] = Field(default_factory=list)
    ability_cooldowns: dict[str, int] = Field(default_factory=dict)
    intent: PendingIntent | None = None
    memory: Memory = Field(default_factory=Memory)

    affinities: dict[str, float] = Field(default_factory=dict)
    elemental_traits: list[ElementalTrait] = Field(default_factory=list)

    attack_element: str | None = None
    """Element carried by physical hits whose ability has none."""

    magic_element: str | None = None

    xp: int = 1
    gold_min: int = 0
    gold_max: int = 0

    base_attack: int = 0
    """Mirror of the final scaled attack, used by flat debuffs."""

    base_magic: int = 0

    posture: int = 0
    posture_max: int = 0

    # -- elite / rarity / affixes --------------------------------------------

    is_elite: bool = False
    elite_id: str | None = None
    elite_label: str | None = None
    regen_pct: float = 0.0
    """Combined elite + affix regeneration per turn (fraction of max HP)."""

    rarity: str = "common"
    rarity_tier: int = 1
    rarity_label: str = "Common"
    rarity_applied: bool = False
    drop_mult: float = 1.0

    affixes: list[str] = Field(default_factory=list)
    affix_labels: list[str] = Field(default_factory=list)
    thorns_pct: float = 0.0
    vampiric_heal_pct: float = 0.0
    chill_chance: float = 0.0
    chill_turns: int = 0
    hex_turns: int = 0
    hex_atk_down: int = 0
    hex_armor_down: int = 0
    hex_res_down: int = 0
    berserk_threshold: float = 0.0
    berserk_atk_pct: float = 0.0
    berserk_consumed: bool = False

    defeat_handled: bool = False
    """Stamped before rewards are granted so defeat resolves exactly once."""

    def cooldown_of(self, ability_id: str) -> int:
        return self.ability_cooldowns.get(ability_id, 0)
