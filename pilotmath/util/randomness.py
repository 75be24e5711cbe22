from __future__ import annotations

"""Randomness helpers: an injectable random source and env seeding."""

import os
import random
from typing import Optional, Protocol, Sequence, TypeVar

T = TypeVar("T")


class Randomness(Protocol):
    """Sampling capability consumed by the problem generators."""

    def pick(self, items: Sequence[T]) -> T: ...

    def randint(self, low: int, high: int) -> int: ...

    def chance(self, p: float = 0.5) -> bool: ...


class RandomSource:
    """Default `Randomness` backed by a private `random.Random` instance."""

    def __init__(self, seed: Optional[int] = None) -> None:
        self._rng = random.Random(seed)

    def pick(self, items: Sequence[T]) -> T:
        if not items:
            raise ValueError("cannot pick from an empty sequence")
        return items[self._rng.randrange(len(items))]

    def randint(self, low: int, high: int) -> int:
        """Inclusive on both ends."""
        return self._rng.randint(low, high)

    def chance(self, p: float = 0.5) -> bool:
        """True with probability `p` (strictly greater draw, like `Math.random() > 1 - p`)."""
        return self._rng.random() > (1.0 - p)


def seed_from_env() -> Optional[int]:
    """Return the integer in the SEED env var, if set and valid."""
    seed = os.environ.get("SEED")
    if seed is None:
        return None
    try:
        return int(seed)
    except ValueError:
        return None


_default: Optional[RandomSource] = None


def default_source() -> RandomSource:
    """Process-wide source, seeded from SEED on first use."""
    global _default
    if _default is None:
        _default = RandomSource(seed_from_env())
    return _default
