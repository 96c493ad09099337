"""Content registry -- loads and serves abilities, ability sets, enemy
templates, rarity/elite/affix tables and difficulty presets.

Bundled content lives in ``ember_combat/data/``.  Every loader accepts an
alternative path so balance experiments can swap a single table.  Bad
content is rejected here, at load time, so the combat core never has to
raise mid-battle.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from ember_combat.ir.abilities import AbilityDefinition
from ember_combat.ir.difficulty import DifficultyConfig
from ember_combat.ir.enemies import EnemyTemplate
from ember_combat.ir.rarity import AffixDefinition, EliteDefinition, RarityDefinition

logger = logging.getLogger(__name__)

# Default paths relative to the package root.
_DATA_DIR = Path(__file__).resolve().parents[2] / "data"  # sim/content -> ember_combat
_DEFAULT_ENEMY_ABILITIES_PATH = _DATA_DIR / "enemy_abilities.json"
_DEFAULT_PLAYER_ABILITIES_PATH = _DATA_DIR / "player_abilities.json"
_DEFAULT_ABILITY_SETS_PATH = _DATA_DIR / "ability_sets.json"
_DEFAULT_ENEMIES_PATH = _DATA_DIR / "enemies.json"
_DEFAULT_RARITIES_PATH = _DATA_DIR / "rarities.json"
_DEFAULT_AFFIXES_PATH = _DATA_DIR / "affixes.json"
_DEFAULT_ELITES_PATH = _DATA_DIR / "elites.json"
_DEFAULT_DIFFICULTY_PATH = _DATA_DIR / "difficulty.json"

M = TypeVar("M", bound=BaseModel)


def _read_json(path: str | Path) -> Any:
    with open(path) as f:
        return json.load(f)


def _parse_models(raw: list[dict[str, Any]], model: type[M], source: Path) -> list[M]:
    """Validate each entry of *raw* as *model*.

    Entries carrying a ``_section`` key are organizational markers and are
    skipped.  Duplicate ids raise :class:`ValueError`.
    """
    parsed: list[M] = []
    seen: set[str] = set()
    for entry in raw:
        if "_section" in entry:
            continue
        try:
            item = model(**entry)
        except ValidationError as exc:
            raise ValueError(f"{source.name}: invalid entry {entry.get('id')!r}: {exc}") from exc
        item_id = getattr(item, "id")
        if item_id in seen:
            raise ValueError(f"{source.name}: duplicate id {item_id!r}")
        seen.add(item_id)
        parsed.append(item)
    return parsed


class ContentRegistry:
    """Single source of truth for the content a battle runs on.

    Usage::

        registry = ContentRegistry()
        registry.load_all()

        ability = registry.get_ability("heavyCleave")
        template = registry.get_enemy_template("goblin")
        hard = registry.get_difficulty("hard")
    """

    def __init__(self) -> None:
        self.abilities: dict[str, AbilityDefinition] = {}
        self.player_ability_ids: list[str] = []
        self.ability_sets: dict[str, list[str]] = {}
        self.enemies: dict[str, EnemyTemplate] = {}
        self.rarities: dict[str, RarityDefinition] = {}
        self.affixes: dict[str, AffixDefinition] = {}
        self.elites: dict[str, EliteDefinition] = {}
        self.difficulties: dict[str, DifficultyConfig] = {}
        self.source_paths: dict[str, Path] = {}
        """Table name -> file each table was loaded from, in load order."""

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _load_abilities(self, path: Path) -> list[AbilityDefinition]:
        loaded = _parse_models(_read_json(path), AbilityDefinition, path)
        for ability in loaded:
            if ability.id in self.abilities:
                raise ValueError(f"{path.name}: ability {ability.id!r} already registered")
            self.abilities[ability.id] = ability
        return loaded

    def load_enemy_abilities(self, path: str | Path | None = None) -> None:
        """Load enemy abilities.

        Parameters
        ----------
        path:
            JSON list of ability objects.  Defaults to the bundled
            ``enemy_abilities.json``.
        """
        path = Path(path) if path is not None else _DEFAULT_ENEMY_ABILITIES_PATH
        self.source_paths["enemy_abilities"] = path
        loaded = self._load_abilities(path)
        logger.debug("Loaded %d enemy abilities from %s", len(loaded), path)

    def load_player_abilities(self, path: str | Path | None = None) -> None:
        """Load player abilities (same schema as enemy abilities)."""
        path = Path(path) if path is not None else _DEFAULT_PLAYER_ABILITIES_PATH
        self.source_paths["player_abilities"] = path
        loaded = self._load_abilities(path)
        self.player_ability_ids.extend(a.id for a in loaded)
        logger.debug("Loaded %d player abilities from %s", len(loaded), path)

    def load_ability_sets(self, path: str | Path | None = None) -> None:
        """Load behavior -> ability-id lists.

        Every referenced ability must already be registered.
        """
        path = Path(path) if path is not None else _DEFAULT_ABILITY_SETS_PATH
        self.source_paths["ability_sets"] = path
        raw: dict[str, list[str]] = _read_json(path)
        for behavior, ability_ids in raw.items():
            if not ability_ids:
                raise ValueError(f"{path.name}: ability set {behavior!r} is empty")
            missing = [a for a in ability_ids if a not in self.abilities]
            if missing:
                raise ValueError(
                    f"{path.name}: ability set {behavior!r} references unknown abilities {missing}"
                )
            self.ability_sets[behavior] = list(ability_ids)

    def load_enemies(self, path: str | Path | None = None) -> None:
        """Load enemy templates.

        A template must either list its own abilities or name a behavior
        with a registered ability set (once sets are loaded).
        """
        path = Path(path) if path is not None else _DEFAULT_ENEMIES_PATH
        self.source_paths["enemies"] = path
        for template in _parse_models(_read_json(path), EnemyTemplate, path):
            if template.abilities:
                missing = [a for a in template.abilities if a not in self.abilities]
                if missing:
                    raise ValueError(
                        f"{path.name}: enemy {template.id!r} references unknown abilities {missing}"
                    )
            self.enemies[template.id] = template

    def load_rarities(self, path: str | Path | None = None) -> None:
        path = Path(path) if path is not None else _DEFAULT_RARITIES_PATH
        self.source_paths["rarities"] = path
        loaded = _parse_models(_read_json(path), RarityDefinition, path)
        tiers = [r.tier for r in loaded]
        if len(set(tiers)) != len(tiers):
            raise ValueError(f"{path.name}: rarity tiers must be unique")
        self.rarities = {r.id: r for r in sorted(loaded, key=lambda r: r.tier)}

    def load_affixes(self, path: str | Path | None = None) -> None:
        path = Path(path) if path is not None else _DEFAULT_AFFIXES_PATH
        self.source_paths["affixes"] = path
        self.affixes = {a.id: a for a in _parse_models(_read_json(path), AffixDefinition, path)}

    def load_elites(self, path: str | Path | None = None) -> None:
        path = Path(path) if path is not None else _DEFAULT_ELITES_PATH
        self.source_paths["elites"] = path
        self.elites = {e.id: e for e in _parse_models(_read_json(path), EliteDefinition, path)}

    def load_difficulties(self, path: str | Path | None = None) -> None:
        path = Path(path) if path is not None else _DEFAULT_DIFFICULTY_PATH
        self.source_paths["difficulty"] = path
        loaded = _parse_models(_read_json(path), DifficultyConfig, path)
        self.difficulties = {d.id: d for d in loaded}

    def load_all(self) -> ContentRegistry:
        """Load every bundled table and cross-check behaviors.  Returns self."""
        self.load_enemy_abilities()
        self.load_player_abilities()
        self.load_ability_sets()
        self.load_enemies()
        self.load_rarities()
        self.load_affixes()
        self.load_elites()
        self.load_difficulties()
        self.validate()
        return self

    def validate(self) -> None:
        """Cross-table checks that need more than one table loaded."""
        for template in self.enemies.values():
            if template.abilities:
                continue
            if template.behavior not in self.ability_sets and "basic" not in self.ability_sets:
                raise ValueError(
                    f"enemy {template.id!r} has behavior {template.behavior!r} "
                    "with no ability set and no 'basic' fallback"
                )

    @classmethod
    def from_paths(cls, paths: dict[str, str | Path]) -> ContentRegistry:
        """Rebuild a registry from a :attr:`source_paths` mapping.

        Only the named tables are loaded, in dependency order.  Used by
        batch workers, which cannot share the parent's registry.
        """
        registry = cls()
        loaders = {
            "enemy_abilities": registry.load_enemy_abilities,
            "player_abilities": registry.load_player_abilities,
            "ability_sets": registry.load_ability_sets,
            "enemies": registry.load_enemies,
            "rarities": registry.load_rarities,
            "affixes": registry.load_affixes,
            "elites": registry.load_elites,
            "difficulty": registry.load_difficulties,
        }
        unknown = set(paths) - set(loaders)
        if unknown:
            raise ValueError(f"Unknown content tables: {sorted(unknown)}")
        for table, load in loaders.items():
            if table in paths:
                load(paths[table])
        return registry

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def get_ability(self, ability_id: str) -> AbilityDefinition | None:
        """Look up an ability.  Returns ``None`` for unknown ids."""
        return self.abilities.get(ability_id)

    def get_enemy_template(self, template_id: str) -> EnemyTemplate:
        """Look up an enemy template.  Raises ``KeyError`` if unknown."""
        if template_id not in self.enemies:
            raise KeyError(f"Unknown enemy template: {template_id!r}")
        return self.enemies[template_id]

    def get_difficulty(self, difficulty_id: str) -> DifficultyConfig:
        """Look up a difficulty preset.  Raises ``KeyError`` if unknown."""
        if difficulty_id not in self.difficulties:
            raise KeyError(f"Unknown difficulty: {difficulty_id!r}")
        return self.difficulties[difficulty_id]

    def get_ability_set(self, behavior: str) -> list[str]:
        """Copy of the ability set for *behavior*; ``[]`` when unknown."""
        return list(self.ability_sets.get(behavior, []))

    def player_abilities(self) -> list[AbilityDefinition]:
        return [self.abilities[a] for a in self.player_ability_ids]

    def templates(self, bosses: bool | None = None) -> list[EnemyTemplate]:
        """All templates, optionally filtered to bosses or non-bosses."""
        if bosses is None:
            return list(self.enemies.values())
        return [t for t in self.enemies.values() if t.is_boss == bosses]
