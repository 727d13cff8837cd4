"""Error kinds raised by the vote casting core.

Every error is terminal for the operation that raised it. Nothing here is
retried internally: the caller decides whether to abort the session, restart
it or alert an operator.
"""


class VoteCastingError(Exception):
    """Base class for all errors raised by votecast"""


class InvalidInput(VoteCastingError, ValueError):
    """A precondition on caller-supplied data is violated

    Raised before any randomness is drawn or any cryptographic computation is
    performed, so nothing partial is ever returned.
    """


class IncompatibleParameters(VoteCastingError):
    """The election parameters cannot accommodate the requested selections

    This points at an upstream configuration error (encryption group too
    small for the number of selections) and should be surfaced to operators.
    """


class NotEnoughPrimesInGroup(IncompatibleParameters):
    """The encryption group holds fewer primes than the selection requires"""


class InvalidObliviousTransferResponse(VoteCastingError):
    """An authority's OT response is malformed or adversarial

    The whole response of that authority must be rejected.
    """
