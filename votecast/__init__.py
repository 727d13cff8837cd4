"""votecast package - voter-side core of a return-code verifiable voting protocol

This package turns a voter's selections into an encrypted ballot with an
oblivious-transfer query and a proof of well-formedness, and turns the
authorities' OT responses back into return codes the voter can check against
their voting card.
"""

import logging

from .algebra import GroupAlgebra
from .ballot import BallotEncoder
from .errors import (
    IncompatibleParameters,
    InvalidInput,
    InvalidObliviousTransferResponse,
    NotEnoughPrimesInGroup,
    VoteCastingError,
)
from .hashing import RecursiveHash
from .models import (
    BallotAndQuery,
    BallotQueryAndRand,
    EncryptionPublicKey,
    NonInteractiveZKP,
    ObliviousTransferQuery,
    ObliviousTransferResponse,
    Point,
)
from .params import PublicParameters, default_public_parameters, load_public_parameters
from .proofs import check_ballot_proof
from .return_codes import ReturnCodeDecoder

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "BallotEncoder",
    "ReturnCodeDecoder",
    "check_ballot_proof",
    "GroupAlgebra",
    "RecursiveHash",
    "PublicParameters",
    "default_public_parameters",
    "load_public_parameters",
    "BallotAndQuery",
    "BallotQueryAndRand",
    "EncryptionPublicKey",
    "NonInteractiveZKP",
    "ObliviousTransferQuery",
    "ObliviousTransferResponse",
    "Point",
    "VoteCastingError",
    "InvalidInput",
    "IncompatibleParameters",
    "NotEnoughPrimesInGroup",
    "InvalidObliviousTransferResponse",
]
