"""Linear congruential generator feeding the simulation with uniforms."""

from __future__ import annotations

MODULUS = 2**31
MULTIPLIER = 1103515245
INCREMENT = 12345


class UniformGenerator:
    """Reproducible source of uniforms in [0, 1) built from an integer seed.

    Uses the classic glibc constants. Python integers are unbounded, so the
    state update is exact and any seed (zero, negative, larger than the
    modulus) is accepted after reduction modulo 2^31.
    """

    def __init__(self, seed: int):
        self._state = seed % MODULUS

    def next_int(self) -> int:
        """Advance the state and return it as an integer in [0, 2^31)."""
        self._state = (MULTIPLIER * self._state + INCREMENT) % MODULUS
        return self._state

    def next(self) -> float:
        """Return the next uniform value in [0, 1)."""
        return self.next_int() / MODULUS
