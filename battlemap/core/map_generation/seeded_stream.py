"""
Seeded pseudo-random stream for map generation.

Every layout algorithm draws from one of these instead of the ``random``
module, so a seed alone reproduces a map. A stream belongs to exactly one
generation run; never share an instance between concurrent callers.
"""
import math
from typing import Sequence, TypeVar

from ..errors import ConfigurationError

T = TypeVar("T")

# Lehmer recurrence constants
MULTIPLIER = 185852
MODULUS = 2 ** 35 - 31


class SeededStream:
    """
    Deterministic stream of floats in [0, 1).

    State advances as ``s = (s * MULTIPLIER) % MODULUS`` starting from
    ``seed % MODULUS``; each draw returns ``s / MODULUS``.

    Note: a seed that is a multiple of MODULUS (including 0) yields a stream
    of zeros. That is the recurrence's behaviour and is kept as-is.
    """

    def __init__(self, seed: int):
        if isinstance(seed, bool) or not isinstance(seed, int):
            raise ConfigurationError(
                message=f"Seed must be an integer, got {type(seed).__name__}",
                details={"seed": repr(seed)}
            )
        if seed < 0:
            raise ConfigurationError(
                message=f"Seed must be non-negative, got {seed}",
                details={"seed": seed}
            )
        self.seed = seed
        self._state = seed % MODULUS
        self.draws = 0

    def next(self) -> float:
        """Advance the stream and return the next value in [0, 1)."""
        self._state = (self._state * MULTIPLIER) % MODULUS
        self.draws += 1
        return self._state / MODULUS

    def next_int(self, upper: int) -> int:
        """Return ``floor(next() * upper)``; one draw."""
        return math.floor(self.next() * upper)

    def chance(self, probability: float) -> bool:
        """True with the given probability; one draw."""
        return self.next() < probability

    def choice(self, options: Sequence[T]) -> T:
        """Pick one element uniformly; one draw."""
        return options[self.next_int(len(options))]

    def __repr__(self) -> str:
        return f"SeededStream(seed={self.seed}, draws={self.draws})"
