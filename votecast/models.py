"""Immutable value objects exchanged by the vote casting algorithms."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class EncryptionPublicKey:
    """Authorities' combined public key, an element of G_q"""

    public_key: int


@dataclass(frozen=True)
class ObliviousTransferQuery:
    """OT query

    Attributes
    - bold_a: blinded selected primes, sent to the authorities
    - bold_r: blinding randomness, kept by the voter and never transmitted
    """

    bold_a: Tuple[int, ...]
    bold_r: Tuple[int, ...]


@dataclass(frozen=True)
class NonInteractiveZKP:
    """Fiat-Shamir transcript: commitments t and responses s"""

    t: Tuple[int, ...]
    s: Tuple[int, ...]


@dataclass(frozen=True)
class BallotAndQuery:
    """The ballot submitted to the election server

    Attributes
    - x_hat: credential commitment in the identification group
    - bold_a: OT query vector
    - b: second ElGamal component g^r
    - pi: proof of ballot well-formedness
    """

    x_hat: int
    bold_a: Tuple[int, ...]
    b: int
    pi: NonInteractiveZKP


@dataclass(frozen=True)
class BallotQueryAndRand:
    """Result of ballot generation: the ballot plus the randomness the voter
    must keep until its return codes have been derived"""

    alpha: BallotAndQuery
    bold_r: Tuple[int, ...]


@dataclass(frozen=True)
class ObliviousTransferResponse:
    """One authority's reply to an OT query

    Attributes
    - b: one element per query entry, a_i raised to the election's secret
    - c: one ciphertext row per candidate, across all elections
    - d: one element per election, used to unblind the keys
    """

    b: Tuple[int, ...]
    c: Tuple[bytes, ...]
    d: Tuple[int, ...]


@dataclass(frozen=True)
class Point:
    """Point of Z_p' x Z_p' decoded from an OT response"""

    x: int
    y: int
