"""Seeded random number generator for deterministic combat simulation.

Every roll in the combat core (dodge and crit checks, AI exploration,
spawn level, rarity, elite and affix rolls) goes through :class:`CombatRNG`
so that an identical seed and identical inputs produce bit-identical
battles.

Two modes are supported:

* **stream** (default): wraps Python's ``random.Random``.
* **deterministic replay**: draw *i* is a pure function of ``(seed, i)``,
  computed with a 32-bit avalanche hash.  The draw index can be saved and
  restored with :meth:`CombatRNG.seek`, which makes any prefix of a battle
  replayable without re-running it.

Sub-systems should use a *forked* RNG so that consuming random values in
one system does not perturb another.
"""

from __future__ import annotations

import hashlib
import math
import random
from collections import deque
from dataclasses import dataclass
from typing import Sequence, TypeVar

T = TypeVar("T")

_MASK32 = 0xFFFFFFFF
_GOLDEN = 0x9E3779B9
_MAX_LOGGED_DRAWS = 200


def hash32(x: int) -> int:
    """32-bit integer avalanche (xor-shift / multiply mix)."""
    x &= _MASK32
    x ^= x >> 16
    x = (x * 0x7FEB352D) & _MASK32
    x ^= x >> 15
    x = (x * 0x846CA68B) & _MASK32
    x ^= x >> 16
    return x


@dataclass(frozen=True)
class DrawRecord:
    """One logged draw: its index, the caller's tag, and the value."""

    index: int
    tag: str | None
    value: float


class CombatRNG:
    """Deterministic RNG that can be forked into independent sub-streams.

    Parameters
    ----------
    seed:
        Integer seed.
    deterministic:
        Use the hash-based replay mode instead of a Mersenne Twister stream.
    log_draws:
        Keep the last 200 draws (index, tag, value) for debugging.
    """

    def __init__(
        self,
        seed: int,
        deterministic: bool = False,
        log_draws: bool = False,
    ) -> None:
        self._seed = seed
        self._deterministic = deterministic
        self._rng = random.Random(seed)
        self._index = 0
        self._log: deque[DrawRecord] | None = (
            deque(maxlen=_MAX_LOGGED_DRAWS) if log_draws else None
        )

    # -- public properties ---------------------------------------------------

    @property
    def seed(self) -> int:
        """Return the seed this RNG was initialised with."""
        return self._seed

    @property
    def deterministic(self) -> bool:
        return self._deterministic

    @property
    def draw_index(self) -> int:
        """Number of values drawn so far."""
        return self._index

    @property
    def draw_log(self) -> list[DrawRecord]:
        """Most recent draws, oldest first.  Empty when logging is off."""
        return list(self._log) if self._log is not None else []

    # -- core random methods -------------------------------------------------

    def random_float(self, tag: str | None = None) -> float:
        """Return a random float in the half-open interval ``[0.0, 1.0)``."""
        if self._deterministic:
            mixed = hash32((self._seed & _MASK32) ^ hash32(self._index + _GOLDEN))
            value = mixed / 2**32
        else:
            value = self._rng.random()

        if self._log is not None:
            self._log.append(DrawRecord(self._index, tag, value))
        self._index += 1
        return value

    def random_int(self, low: int, high: int, tag: str | None = None) -> int:
        """Return a random integer *N* such that ``low <= N <= high``.

        Always consumes exactly one draw, in both modes.
        """
        if high < low:
            low, high = high, low
        r = self.random_float(tag)
        return math.floor(r * (high - low + 1)) + low

    def random_choice(self, seq: Sequence[T], tag: str | None = None) -> T:
        """Return a random element from a non-empty sequence."""
        if not seq:
            raise IndexError("random_choice() on an empty sequence")
        return seq[self.random_int(0, len(seq) - 1, tag)]

    def chance(self, probability: float, tag: str | None = None) -> bool:
        """Return ``True`` with the given probability (one draw)."""
        return self.random_float(tag) < probability

    # -- replay --------------------------------------------------------------

    def seek(self, index: int) -> None:
        """Reposition a deterministic RNG so the next draw is *index*."""
        if not self._deterministic:
            raise ValueError("seek() requires deterministic mode")
        self._index = max(0, index)

    # -- forking -------------------------------------------------------------

    def fork(self, name: str) -> CombatRNG:
        """Create a child RNG whose seed is derived from this RNG's seed and
        *name*.

        Forking with the same *name* always produces the same child seed,
        so ``"spawn"``, ``"combat"`` and ``"agent"`` streams stay independent
        of each other.  The child inherits the replay mode and logging flag.
        """
        digest = hashlib.sha256(f"{self._seed}:{name}".encode()).digest()
        child_seed = int.from_bytes(digest[:8], "big")
        return CombatRNG(
            child_seed,
            deterministic=self._deterministic,
            log_draws=self._log is not None,
        )

    # -- dunder helpers ------------------------------------------------------

    def __repr__(self) -> str:
        mode = "deterministic" if self._deterministic else "stream"
        return f"CombatRNG(seed={self._seed}, mode={mode}, draws={self._index})"
