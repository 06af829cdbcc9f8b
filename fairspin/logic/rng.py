"""Injectable random sources for draws."""
import hashlib
import random
import secrets
from abc import ABC, abstractmethod
from collections.abc import Iterable


def seed_to_int(seed_str: str) -> int:
    """Convert string seed to integer deterministically."""
    return int(hashlib.sha256(seed_str.encode()).hexdigest(), 16) % (2**31)


class RNGBase(ABC):
    """
    Abstract random source.

    Instances are callable, so any RNGBase can be passed where a
    ``() -> float`` random source is expected.
    """

    @abstractmethod
    def random(self) -> float:
        """Return random float in [0, 1)."""
        pass

    def __call__(self) -> float:
        return self.random()


class ProductionRNG(RNGBase):
    """
    Production RNG.

    Uses cryptographically secure source, no fixed seed. Safe to share
    between threads.
    """

    def random(self) -> float:
        return secrets.randbelow(2**53) / (2**53)


class SeededRNG(RNGBase):
    """
    Test/audit RNG.

    Deterministic, fully controlled by seed. Not meant to be shared
    between concurrent callers; use fork() to give each caller its own
    reproducible stream.
    """

    def __init__(self, seed: int):
        self._rng = random.Random(seed)
        self.seed = seed

    @classmethod
    def from_string(cls, seed_str: str) -> "SeededRNG":
        return cls(seed_to_int(seed_str))

    def fork(self, stream: str | int) -> "SeededRNG":
        """Independent stream derived from this seed and a stream key."""
        return SeededRNG(seed_to_int(f"{self.seed}:{stream}"))

    def random(self) -> float:
        return self._rng.random()


class SequenceRNG(RNGBase):
    """
    Replays a fixed list of uniform values, in order.

    Used to re-run recorded draws. Raises IndexError when exhausted.
    """

    def __init__(self, values: Iterable[float]):
        self._values = list(values)
        self._pos = 0

    @property
    def consumed(self) -> int:
        return self._pos

    def random(self) -> float:
        if self._pos >= len(self._values):
            raise IndexError("SequenceRNG exhausted")
        value = self._values[self._pos]
        self._pos += 1
        return value
