"""Battle context -- the collaborators every core call receives.

Instead of reaching for ambient globals, each core function takes a
:class:`BattleContext` that bundles the RNG, the log sink, the ability
catalog, the active difficulty and the optional reward / quest / save
hooks.  It is built once per battle (or batch) and passed by reference.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Protocol

from pydantic import BaseModel, Field

from ember_combat.ir.abilities import AbilityDefinition
from ember_combat.ir.difficulty import DifficultyConfig
from ember_combat.sim.core.rng import CombatRNG

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    """Combat-log message categories."""

    SYSTEM = "system"
    GOOD = "good"
    DANGER = "danger"
    DAMAGE = "damage"


_LOG_LEVELS = {
    Severity.SYSTEM: logging.DEBUG,
    Severity.GOOD: logging.DEBUG,
    Severity.DAMAGE: logging.DEBUG,
    Severity.DANGER: logging.INFO,
}


class LogEntry(BaseModel):
    """One combat-log line."""

    message: str
    severity: Severity = Severity.SYSTEM
    meta: dict[str, Any] = Field(default_factory=dict)


class AbilityCatalog(Protocol):
    """Anything that can look abilities up by id."""

    def get_ability(self, ability_id: str) -> AbilityDefinition | None: ...


class BattleContext(BaseModel):
    """Collaborators threaded through every combat-core call."""

    model_config = {"arbitrary_types_allowed": True}

    rng: CombatRNG
    catalog: Any
    """An :class:`AbilityCatalog`, normally the ``ContentRegistry``."""

    difficulty: DifficultyConfig = Field(
        default_factory=lambda: DifficultyConfig(id="normal", ai_smartness=0.7)
    )

    log_sink: Callable[[LogEntry], None] | None = None
    """External sink (UI, recorder).  Failures are logged and ignored."""

    reward_hook: Callable[..., None] | None = None
    """Called as ``reward_hook(enemy, rewards)`` once per defeated enemy."""

    quest_hook: Callable[..., None] | None = None
    """Called as ``quest_hook(enemy)`` once per defeated enemy."""

    request_save: Callable[[str], None] | None = None
    """Asks the persistence layer for a save after state-changing events."""

    entries: list[LogEntry] = Field(default_factory=list)
    """Every line logged through this context, in order."""

    # -- logging -------------------------------------------------------------

    def log(self, message: str, severity: Severity | str = Severity.SYSTEM, **meta: Any) -> None:
        """Record a combat-log line and mirror it to the module logger."""
        try:
            level = Severity(severity)
        except ValueError:
            logger.warning("Unknown log severity %r; using system", severity)
            level = Severity.SYSTEM
        entry = LogEntry(message=message, severity=level, meta=meta)
        self.entries.append(entry)
        logger.log(_LOG_LEVELS[entry.severity], "[%s] %s", entry.severity.value, message)
        if self.log_sink is not None:
            try:
                self.log_sink(entry)
            except Exception:
                logger.exception("Log sink failed for %r", message)

    def messages(self) -> list[str]:
        """Plain text of every logged line."""
        return [e.message for e in self.entries]

    # -- catalog -------------------------------------------------------------

    def ability(self, ability_id: str | None) -> AbilityDefinition | None:
        """Look up an ability; unknown or missing ids yield ``None``."""
        if not ability_id or self.catalog is None:
            return None
        return self.catalog.get_ability(ability_id)

    # -- persistence ---------------------------------------------------------

    def save(self, reason: str) -> None:
        if self.request_save is None:
            return
        try:
            self.request_save(reason)
        except Exception:
            logger.exception("Save request failed (%s)", reason)
