import random
import secrets
from abc import ABC, abstractmethod
from typing import List


class RandomSource(ABC):
    """Uniform randomness handed to the resolvers."""

    @abstractmethod
    def randbelow(self, n: int) -> int:
        """Uniform int in [0, n)."""

    @abstractmethod
    def random(self) -> float:
        """Uniform float in [0, 1)."""

    def uniform(self, low: float, high: float) -> float:
        return low + (high - low) * self.random()

    def sample(self, n: int, k: int) -> List[int]:
        """k distinct values from range(n), drawn without replacement."""
        pool = list(range(n))
        result = []
        for _ in range(k):
            idx = self.randbelow(len(pool))
            result.append(pool.pop(idx))
        return result


class SecretsSource(RandomSource):
    """OS entropy; the default for real play."""

    def __init__(self):
        self._sys = secrets.SystemRandom()

    def randbelow(self, n: int) -> int:
        return secrets.randbelow(n)

    def random(self) -> float:
        return self._sys.random()


class SeededSource(RandomSource):
    """Reproducible source for simulations and tests."""

    def __init__(self, seed: int = 42):
        self._rng = random.Random(seed)

    def randbelow(self, n: int) -> int:
        return self._rng.randrange(n)

    def random(self) -> float:
        return self._rng.random()
