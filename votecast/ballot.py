"""Ballot generation: selection encoding, OT query, encryption and proof.

A ballot is built once per vote-casting attempt. The encoder is stateless
apart from its injected random source, so a single instance may serve many
voters concurrently as long as that source is safe to share.
"""

from __future__ import annotations

import logging
from functools import reduce
from typing import Optional, Sequence, Tuple

from .algebra import GroupAlgebra
from .codec import string_to_integer
from .errors import IncompatibleParameters, InvalidInput, NotEnoughPrimesInGroup
from .hashing import RecursiveHash
from .models import (
    BallotAndQuery,
    BallotQueryAndRand,
    EncryptionPublicKey,
    NonInteractiveZKP,
    ObliviousTransferQuery,
)
from .params import PublicParameters
from .proofs import gen_ballot_proof
from .randomness import RandomSource, SecureRandomSource

logger = logging.getLogger(__name__)


def check_selections(bold_s: Sequence[int]) -> None:
    """Raise InvalidInput unless bold_s is non-empty, strictly increasing and
    made of strictly positive integers"""

    if len(bold_s) == 0:
        raise InvalidInput("There needs to be at least one selection")
    if any(isinstance(s, bool) or not isinstance(s, int) for s in bold_s):
        raise InvalidInput("Selections must be integers")
    if any(s < 1 for s in bold_s):
        raise InvalidInput("Selections must be strictly positive")
    if len(set(bold_s)) != len(bold_s):
        raise InvalidInput("All selections must be distinct")
    if any(s >= t for s, t in zip(bold_s, bold_s[1:])):
        raise InvalidInput("The list of selections needs to be ordered")


class BallotEncoder:
    """Voter-side ballot construction

    Args
    - params: election public parameters
    - random_source: source for OT blinding factors and proof commitments;
      defaults to a `secrets`-backed source
    - hasher: recursive hash; derived from params if None
    """

    def __init__(
        self,
        params: PublicParameters,
        random_source: Optional[RandomSource] = None,
        hasher: Optional[RecursiveHash] = None,
    ):
        self.params = params
        self.random_source = random_source if random_source is not None else SecureRandomSource()
        self.hasher = hasher if hasher is not None else RecursiveHash.for_parameters(params)
        self.algebra = GroupAlgebra(params, self.hasher)

    def _check_public_key(self, pk: EncryptionPublicKey) -> None:
        if not self.algebra.is_member(pk.public_key):
            raise InvalidInput("The key must be a member of G_q")
        if pk.public_key == 1:
            raise InvalidInput("The key must not be 1")

    def _credential_to_integer(self, credential: str) -> int:
        if self.params.credential_length is not None and len(credential) != self.params.credential_length:
            raise InvalidInput(f"The credential must have {self.params.credential_length} characters")

        x = string_to_integer(credential, self.params.credential_alphabet)
        if x >= self.params.identification_group.q:
            raise InvalidInput("The credential does not encode an element of Z_q_hat")

        return x

    def gen_ballot(self, credential: str, bold_s: Sequence[int], pk: EncryptionPublicKey) -> BallotQueryAndRand:
        """Build the ballot for the selections bold_s

        Args
        - credential: the voter's voting code, written in the credential alphabet
        - bold_s: selected candidate indices, 1-based and strictly increasing
        - pk: the authorities' combined encryption key

        Returns: the ballot to submit and the randomness bold_r to keep

        Raises
        - InvalidInput: malformed selections, key or credential
        - IncompatibleParameters: the encryption group cannot encode the
          selections
        """

        check_selections(bold_s)
        self._check_public_key(pk)
        x = self._credential_to_integer(credential)

        eg = self.params.encryption_group
        x_hat = self.params.identification_group.gen(x)

        try:
            bold_q = self.get_selected_primes(bold_s)
        except NotEnoughPrimesInGroup as e:
            raise IncompatibleParameters("Encryption group too small for selection") from e

        m = reduce(lambda u, v: u * v, bold_q, 1)
        if m >= eg.p:
            raise IncompatibleParameters("(k,n) is incompatible with p")

        query = self.gen_query(bold_q, pk)
        a = reduce(lambda u, v: (u * v) % eg.p, query.bold_a, 1)
        r = sum(query.bold_r) % eg.q
        b = eg.gen(r)

        pi = self.gen_ballot_proof(x, m, r, x_hat, a, b, pk)
        alpha = BallotAndQuery(x_hat=x_hat, bold_a=query.bold_a, b=b, pi=pi)

        return BallotQueryAndRand(alpha=alpha, bold_r=query.bold_r)

    def get_selected_primes(self, bold_s: Sequence[int]) -> Tuple[int, ...]:
        """Map 1-based selection indices to the matching primes of G_q

        Raises NotEnoughPrimesInGroup when G_q holds fewer than max(bold_s)
        primes.
        """

        check_selections(bold_s)
        primes = self.algebra.get_primes(bold_s[-1])

        return tuple(primes[s - 1] for s in bold_s)

    def gen_query(self, bold_q: Sequence[int], pk: EncryptionPublicKey) -> ObliviousTransferQuery:
        """Blind each selected prime under pk: a_i = q_i * pk^r_i mod p"""

        self._check_public_key(pk)
        eg = self.params.encryption_group

        bold_r = tuple(self.random_source.random_in_zq(eg.q) for _ in bold_q)
        bold_a = tuple((q_i * eg.exp(pk.public_key, r_i)) % eg.p for q_i, r_i in zip(bold_q, bold_r))

        return ObliviousTransferQuery(bold_a=bold_a, bold_r=bold_r)

    def gen_ballot_proof(
        self,
        x: int,
        m: int,
        r: int,
        x_hat: int,
        a: int,
        b: int,
        pk: EncryptionPublicKey,
    ) -> NonInteractiveZKP:
        """Proof that (a, b) encrypts m under pk and x_hat commits to x"""

        return gen_ballot_proof(self.params, self.algebra, self.random_source, x, m, r, x_hat, a, b, pk)
