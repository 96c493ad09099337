"""Tests for shield absorption and shatter."""

from ember_combat.sim.core.entities import StatusContainer
from ember_combat.sim.mechanics.shield import absorb, gain_shield


class TestAbsorb:
    def test_partial_absorb(self):
        status = StatusContainer(shield=6)
        result = absorb(status, 10)
        assert result == (0, 6, 4)
        assert status.shield == 0

    def test_full_absorb(self):
        status = StatusContainer(shield=10)
        result = absorb(status, 6)
        assert result == (0, 6, 0)
        assert status.shield == 4

    def test_shatter_before_absorb(self):
        status = StatusContainer(shield=10)
        result = absorb(status, 8, shatter_flat=5)
        assert result == (5, 5, 3)
        assert result.consumed == 10
        assert status.shield == 0

    def test_no_shield(self):
        status = StatusContainer()
        assert absorb(status, 7, shatter_flat=3) == (0, 0, 7)

    def test_negative_damage_is_zero(self):
        status = StatusContainer(shield=4)
        assert absorb(status, -3) == (0, 0, 0)
        assert status.shield == 4


class TestGainShield:
    def test_adds(self):
        status = StatusContainer(shield=2)
        gain_shield(status, 5)
        assert status.shield == 7

    def test_negative_ignored(self):
        status = StatusContainer(shield=2)
        gain_shield(status, -5)
        assert status.shield == 2
