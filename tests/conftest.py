import os
import sys

import pytest

# Ensure the repository root is on sys.path for tests
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from votecast.algebra import GroupAlgebra  # noqa: E402
from votecast.codec import to_byte_array, xor  # noqa: E402
from votecast.hashing import RecursiveHash  # noqa: E402
from votecast.models import EncryptionPublicKey, ObliviousTransferResponse  # noqa: E402
from votecast.params import (  # noqa: E402
    PrimeField,
    PrimeOrderGroup,
    PublicParameters,
    default_public_parameters,
)


class StubRandomSource:
    """Deterministic random source returning queued values in order"""

    def __init__(self, values=()):
        self.values = list(values)
        self.draws = 0

    def _next(self):
        self.draws += 1
        return self.values.pop(0)

    def random_in_zq(self, q):
        return self._next()

    def random_in_gq(self, group):
        return self._next()


def make_toy_params(authority_count=2):
    # G_11 < Z_23^*, G_23 < Z_47^*, p' = 7; the primes in G_11 are 2, 3 and 13
    return PublicParameters(
        encryption_group=PrimeOrderGroup(p=23, q=11, g=2),
        identification_group=PrimeOrderGroup(p=47, q=23, g=2),
        prime_field=PrimeField(p_prime=7),
        security_length=256,
        message_length=16,
        return_code_length=16,
        authority_count=authority_count,
        credential_alphabet="0123456789",
        return_code_alphabet="0123456789ABCDEF",
    )


def respond(params, bold_a, pk, bold_k, bold_n, points, betas):
    """Reference authority: answer an OT query

    Args
    - bold_a: the voter's query
    - bold_k: selections allowed per election
    - bold_n: candidates per election
    - points: one Point per candidate, across all elections
    - betas: the authority's secret exponent for each election
    """

    eg = params.encryption_group
    hasher = RecursiveHash.for_parameters(params)
    primes = GroupAlgebra(params, hasher).get_primes(sum(bold_n))
    upper_l_m = params.message_length // 8
    half = upper_l_m // 2

    candidate_elections = [j for j, n_j in enumerate(bold_n) for _ in range(n_j)]
    query_elections = [j for j, k_j in enumerate(bold_k) for _ in range(k_j)]

    b = tuple(eg.exp(a_i, betas[j]) for a_i, j in zip(bold_a, query_elections))
    c = tuple(
        xor(
            to_byte_array(point.x, half) + to_byte_array(point.y, half),
            hasher.key_stream(eg.exp(prime, betas[j]), upper_l_m),
        )
        for prime, point, j in zip(primes, points, candidate_elections)
    )
    d = tuple(eg.exp(pk.public_key, beta) for beta in betas)

    return ObliviousTransferResponse(b=b, c=c, d=d)


@pytest.fixture
def toy_params():
    return make_toy_params()


@pytest.fixture
def toy_pk():
    # g^3 mod 23
    return EncryptionPublicKey(public_key=8)


@pytest.fixture(scope="session")
def default_params():
    return default_public_parameters(authority_count=3)


@pytest.fixture(scope="session")
def default_sk():
    return 0x1D2C3B4A59687786950A1B2C3D4E5F


@pytest.fixture(scope="session")
def default_pk(default_params, default_sk):
    return EncryptionPublicKey(public_key=default_params.encryption_group.gen(default_sk))
