"""Shared fixtures for simulation tests."""

from __future__ import annotations

import pytest

from ember_combat.sim.content.registry import ContentRegistry
from ember_combat.sim.core.context import BattleContext
from ember_combat.sim.core.rng import CombatRNG


@pytest.fixture(scope="module")
def registry() -> ContentRegistry:
    """Module-scoped registry with the bundled content loaded once."""
    return ContentRegistry().load_all()


@pytest.fixture
def ctx(registry: ContentRegistry) -> BattleContext:
    """Fresh battle context on the bundled catalog, normal difficulty."""
    return BattleContext(
        rng=CombatRNG(42),
        catalog=registry,
        difficulty=registry.get_difficulty("normal"),
    )


@pytest.fixture
def saves() -> list[str]:
    """Collects ``request_save`` reasons; wire it with ``ctx.request_save = saves.append``."""
    return []
