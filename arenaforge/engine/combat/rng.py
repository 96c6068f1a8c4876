"""Seedable roll utility shared by every probabilistic decision."""

import random
from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


class Roller:
    """Wraps a random.Random so battles can be replayed from a seed.

    Pass either a seed or an existing generator. Two rollers built from the same
    seed produce the same sequence of draws, which makes battle logs
    reproducible within one Python random implementation.
    """

    def __init__(self, seed: int | None = None, rng: random.Random | None = None):
        if seed is not None and rng is not None:
            raise ValueError("Provide a seed or a generator, not both")
        self.seed = seed
        self._rng = rng if rng is not None else random.Random(seed)

    def random(self) -> float:
        """Uniform draw in [0, 1)."""
        return self._rng.random()

    def uniform(self, low: float, high: float) -> float:
        return self._rng.uniform(low, high)

    def randint(self, low: int, high: int) -> int:
        """Integer draw in [low, high], both ends inclusive."""
        return self._rng.randint(low, high)

    def chance(self, probability: float) -> bool:
        """Return True with the given probability (values above 1 always hit)."""
        if probability <= 0:
            return False
        return self._rng.random() < probability

    def pick(self, items: Sequence[T]) -> T:
        if not items:
            raise ValueError("Cannot pick from an empty sequence")
        return self._rng.choice(items)

    def weighted_pick(self, items: Sequence[T], weights: Sequence[float]) -> T:
        """Pick one item with probability proportional to its weight."""
        if not items:
            raise ValueError("Cannot pick from an empty sequence")
        if len(items) != len(weights):
            raise ValueError(
                f"Got {len(items)} items but {len(weights)} weights"
            )
        if any(w < 0 for w in weights) or sum(weights) <= 0:
            raise ValueError("Weights must be non-negative with a positive total")
        return self._rng.choices(items, weights=weights, k=1)[0]

    def shuffled(self, items: Sequence[T]) -> list[T]:
        """Return a uniformly shuffled copy, leaving the input untouched."""
        result = list(items)
        self._rng.shuffle(result)
        return result
