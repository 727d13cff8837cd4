"""Random sources injected into the ballot encoder.

Algorithms never reach for a global generator; they draw from the source they
were constructed with, so tests can substitute deterministic stubs.
"""

from __future__ import annotations

import secrets
from typing import Protocol

from .params import PrimeOrderGroup


class RandomSource(Protocol):
    def random_in_zq(self, q: int) -> int:
        """Return a uniform integer in [0, q)"""
        ...

    def random_in_gq(self, group: PrimeOrderGroup) -> int:
        """Return a uniform element of the group"""
        ...


class SecureRandomSource:
    """RandomSource backed by the `secrets` module

    Safe to share between threads: it holds no state of its own.
    """

    def random_in_zq(self, q: int) -> int:
        if q < 1:
            raise ValueError("The upper bound must be positive")

        return secrets.randbelow(q)

    def random_in_gq(self, group: PrimeOrderGroup) -> int:
        return group.gen(self.random_in_zq(group.q))
