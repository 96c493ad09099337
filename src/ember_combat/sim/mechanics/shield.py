"""Shield absorption.

A shield soaks damage before HP.  Some abilities carry a flat *shatter*
amount that strips shield before the hit lands.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from ember_combat.sim.core.entities import StatusContainer


class ShieldResult(NamedTuple):
    shattered: int
    """Shield removed by the flat shatter amount."""

    absorbed: int
    """Damage soaked by the remaining shield."""

    hp_damage: int
    """Damage left over for HP."""

    @property
    def consumed(self) -> int:
        """Total shield removed by this hit."""
        return self.shattered + self.absorbed


def gain_shield(status: StatusContainer, amount: int) -> None:
    """Add *amount* shield (must be >= 0)."""
    status.shield = max(0, status.shield + max(0, int(amount)))


def absorb(status: StatusContainer, damage: int, shatter_flat: int = 0) -> ShieldResult:
    """Apply shatter then absorption to *status* and return the split."""
    shattered = min(status.shield, max(0, int(shatter_flat)))
    status.shield -= shattered

    damage = max(0, int(damage))
    absorbed = min(status.shield, damage)
    status.shield -= absorbed
    return ShieldResult(shattered, absorbed, damage - absorbed)
