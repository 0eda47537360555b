from __future__ import annotations

import hashlib
import random
from typing import Any, Sequence, TypeVar

from hds.contracts import RandomSource

T = TypeVar("T")


class PythonRandomSource(RandomSource):
    """Injected randomness source for gameplay and test determinism."""

    def __init__(self, seed: int | None = None) -> None:
        self._seed = seed
        self._rng = random.Random(seed)

    def rand(self) -> float:
        return self._rng.random()

    def randint(self, a: int, b: int) -> int:
        return self._rng.randint(a, b)

    def roll(self, sides: int) -> int:
        if sides < 1:
            raise ValueError(f"die must have at least one side, got {sides}")
        return self._rng.randint(1, sides)

    def percent(self) -> float:
        return self._rng.random() * 100.0

    def choice(self, items: Sequence[Any]) -> Any:
        if not items:
            raise ValueError("choice items must not be empty")
        return self._rng.choice(items)

    def shuffle(self, items: list[Any]) -> None:
        self._rng.shuffle(items)

    def spawn(self, substream_id: str) -> RandomSource:
        seed = self._seed
        if seed is None:
            return PythonRandomSource(seed=None)
        digest = hashlib.sha256(f"{seed}:{substream_id}".encode("ascii", "ignore")).hexdigest()
        child_seed = int(digest[:16], 16)
        return PythonRandomSource(seed=child_seed)


def weighted_choice(random_source: RandomSource, options: Sequence[tuple[T, float]]) -> T:
    """Pick one item from ``(item, weight)`` pairs with a single ``rand()`` draw.

    Zero-weight items are never picked. Items are scanned in the given order, so
    the same draw always maps to the same item.
    """
    if not options:
        raise ValueError("weighted choice options must not be empty")
    total = 0.0
    for item, weight in options:
        if weight < 0:
            raise ValueError(f"weight for {item!r} must be non-negative, got {weight}")
        total += weight
    if total <= 0:
        raise ValueError("weighted choice weights must sum to a positive value")

    draw = random_source.rand() * total
    cumulative = 0.0
    for item, weight in options:
        cumulative += weight
        if weight > 0 and draw < cumulative:
            return item
    # Float drift at the upper edge lands on the last weighted item.
    return next(item for item, weight in reversed(options) if weight > 0)


def gameplay_random() -> PythonRandomSource:
    return PythonRandomSource(seed=None)


def seeded_random(seed: int) -> PythonRandomSource:
    return PythonRandomSource(seed=seed)
