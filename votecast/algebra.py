"""Group membership tests, in-group prime enumeration and Fiat-Shamir challenges."""

from __future__ import annotations

from math import isqrt
from typing import Sequence, Tuple

from .codec import to_integer
from .errors import NotEnoughPrimesInGroup
from .hashing import RecursiveHash
from .params import PublicParameters


def is_prime(n: int) -> bool:
    """Trial-division primality test, meant for the small primes used as
    candidate encodings"""

    if n < 2:
        return False
    if n % 2 == 0:
        return n == 2

    for d in range(3, isqrt(n) + 1, 2):
        if n % d == 0:
            return False

    return True


class GroupAlgebra:
    """General algorithms shared by the vote casting components"""

    def __init__(self, params: PublicParameters, hasher: RecursiveHash):
        self.params = params
        self.hasher = hasher

    def is_member(self, x: int) -> bool:
        """Membership in the encryption group G_q"""

        return self.params.encryption_group.is_member(x)

    def is_member_g_q_hat(self, x: int) -> bool:
        """Membership in the identification group G_q_hat"""

        return self.params.identification_group.is_member(x)

    def is_in_z_p_prime(self, x: int) -> bool:
        return self.params.prime_field.is_member(x)

    def get_primes(self, n: int) -> Tuple[int, ...]:
        """Return the first n primes that are members of G_q, in increasing order

        Raises NotEnoughPrimesInGroup if fewer than n such primes lie below p.
        """

        p = self.params.encryption_group.p
        primes = []
        x = 1
        while len(primes) < n:
            x += 1
            if x >= p:
                raise NotEnoughPrimesInGroup(f"G_q holds fewer than {n} primes")
            if is_prime(x) and self.is_member(x):
                primes.append(x)

        return tuple(primes)

    def get_nizkp_challenge(self, y: Sequence[int], t: Sequence[int], modulus: int) -> int:
        """Fiat-Shamir challenge over public values y and commitments t"""

        return to_integer(self.hasher.rec_hash_l(tuple(y), tuple(t))) % modulus
