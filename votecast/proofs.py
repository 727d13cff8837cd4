"""Combined Sigma-protocol NIZK of ballot well-formedness.

The proof shows knowledge of (x, m, r) such that

    x_hat = g_hat^x mod p_hat
    a     = m * pk^r mod p
    b     = g^r mod p

A single Fiat-Shamir challenge, reduced modulo min(q, q_hat), bridges the
identification and encryption groups; responses for each statement are reduced
modulo the order of its own group.
"""

from __future__ import annotations

import logging

from .algebra import GroupAlgebra
from .errors import InvalidInput
from .models import EncryptionPublicKey, NonInteractiveZKP
from .params import PublicParameters
from .randomness import RandomSource

logger = logging.getLogger(__name__)


def _challenge_modulus(params: PublicParameters) -> int:
    return min(params.encryption_group.q, params.identification_group.q)


def gen_ballot_proof(
    params: PublicParameters,
    algebra: GroupAlgebra,
    random_source: RandomSource,
    x: int,
    m: int,
    r: int,
    x_hat: int,
    a: int,
    b: int,
    pk: EncryptionPublicKey,
) -> NonInteractiveZKP:
    """Generate the ballot proof

    Args
    - x: private credential, in [0, q_hat)
    - m: encoded selections, in G_q
    - r: aggregated encryption randomness, in [0, q)
    - x_hat: public credential g_hat^x
    - a, b: ElGamal encryption of m under pk with randomness r
    - pk: encryption key

    Raises InvalidInput if any input lies outside its domain.
    """

    eg = params.encryption_group
    ig = params.identification_group

    if not 0 <= x < ig.q:
        raise InvalidInput("The private credential must be in Z_q_hat")
    if not algebra.is_member_g_q_hat(x_hat):
        raise InvalidInput("x_hat must be in G_q_hat")
    if not algebra.is_member(m):
        raise InvalidInput("m must be in G_q")
    if not 0 <= r < eg.q:
        raise InvalidInput("r must be in Z_q")
    if not algebra.is_member(a):
        raise InvalidInput("a must be in G_q")
    if not algebra.is_member(b):
        raise InvalidInput("b must be in G_q")
    if not algebra.is_member(pk.public_key):
        raise InvalidInput("The key must be a member of G_q")

    logger.debug("gen_ballot_proof: a = %s", a)

    omega_1 = random_source.random_in_zq(ig.q)
    omega_2 = random_source.random_in_gq(eg)
    omega_3 = random_source.random_in_zq(eg.q)

    t_1 = ig.gen(omega_1)
    t_2 = (omega_2 * eg.exp(pk.public_key, omega_3)) % eg.p
    t_3 = eg.gen(omega_3)

    t = (t_1, t_2, t_3)
    c = algebra.get_nizkp_challenge((x_hat, a, b), t, _challenge_modulus(params))
    logger.debug("gen_ballot_proof: c = %s", c)

    s_1 = (omega_1 + c * x) % ig.q
    s_2 = (omega_2 * eg.exp(m, c)) % eg.p
    s_3 = (omega_3 + c * r) % eg.q

    return NonInteractiveZKP(t=t, s=(s_1, s_2, s_3))


def check_ballot_proof(
    params: PublicParameters,
    algebra: GroupAlgebra,
    pi: NonInteractiveZKP,
    x_hat: int,
    a: int,
    b: int,
    pk: EncryptionPublicKey,
) -> bool:
    """Check a ballot proof produced by gen_ballot_proof

    Recomputes the commitments from the responses and the challenge, and
    accepts iff they equal the transcript's commitments. Out-of-domain values
    make the check fail rather than raise.
    """

    eg = params.encryption_group
    ig = params.identification_group

    if len(pi.t) != 3 or len(pi.s) != 3:
        return False
    if not all(isinstance(v, int) and not isinstance(v, bool) for v in (*pi.t, *pi.s, x_hat, a, b, pk.public_key)):
        return False
    if not (algebra.is_member_g_q_hat(x_hat) and algebra.is_member(a) and algebra.is_member(b)):
        return False
    if not algebra.is_member(pk.public_key):
        return False

    t_1, t_2, t_3 = pi.t
    if not (algebra.is_member_g_q_hat(t_1) and algebra.is_member(t_2) and algebra.is_member(t_3)):
        return False

    s_1, s_2, s_3 = pi.s
    if not (0 <= s_1 < ig.q and algebra.is_member(s_2) and 0 <= s_3 < eg.q):
        return False

    c = algebra.get_nizkp_challenge((x_hat, a, b), pi.t, _challenge_modulus(params))

    t_1_prime = (ig.exp(x_hat, -c) * ig.gen(s_1)) % ig.p
    t_2_prime = (eg.exp(a, -c) * s_2 * eg.exp(pk.public_key, s_3)) % eg.p
    t_3_prime = (eg.exp(b, -c) * eg.gen(s_3)) % eg.p

    return (t_1_prime, t_2_prime, t_3_prime) == (t_1, t_2, t_3)
