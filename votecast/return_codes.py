"""Return code derivation from the authorities' OT responses.

Each authority answers the voter's OT query independently. For every
selection the voter unblinds the authority's key, decrypts the selected
candidate's row into a point, and finally folds the hashes of the points of
all authorities into one printable return code per selection.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence, Tuple

from .ballot import check_selections
from .codec import bytes_to_string, to_integer, truncate, xor, xor_all
from .errors import InvalidInput, InvalidObliviousTransferResponse
from .hashing import RecursiveHash
from .models import ObliviousTransferResponse, Point
from .params import PublicParameters

logger = logging.getLogger(__name__)


class ReturnCodeDecoder:
    """Voter-side decoding of OT responses into return codes

    Args
    - params: election public parameters
    - hasher: recursive hash; derived from params if None
    """

    def __init__(self, params: PublicParameters, hasher: Optional[RecursiveHash] = None):
        self.params = params
        self.hasher = hasher if hasher is not None else RecursiveHash.for_parameters(params)

    def _reject(self, reason: str, authority: Optional[int], selection: Optional[int] = None):
        logger.warning(
            "Rejecting OT response of authority %s (selection %s): %s",
            "?" if authority is None else authority,
            "-" if selection is None else selection,
            reason,
        )
        raise InvalidObliviousTransferResponse(reason)

    def _check_response_shape(
        self,
        response: ObliviousTransferResponse,
        bold_k: Sequence[int],
        bold_s: Sequence[int],
        authority: Optional[int],
    ) -> None:
        eg = self.params.encryption_group
        upper_l_m = self.params.message_length // 8

        if len(response.b) != len(bold_s):
            self._reject(f"expected {len(bold_s)} values in b, got {len(response.b)}", authority)
        if len(response.d) != len(bold_k):
            self._reject(f"expected {len(bold_k)} values in d, got {len(response.d)}", authority)
        if bold_s[-1] > len(response.c):
            self._reject(f"no ciphertext row for candidate {bold_s[-1]}", authority)
        if any(len(response.c[s - 1]) != upper_l_m for s in bold_s):
            self._reject(f"ciphertext rows must be {upper_l_m} bytes long", authority)
        if not all(eg.is_member(v) for v in (*response.b, *response.d)):
            self._reject("b and d must be members of G_q", authority)

    def get_points(
        self,
        response: ObliviousTransferResponse,
        bold_k: Sequence[int],
        bold_s: Sequence[int],
        bold_r: Sequence[int],
        authority: Optional[int] = None,
    ) -> Tuple[Point, ...]:
        """Decode one authority's OT response into one point per selection

        Args
        - response: the authority's response (b, c, d)
        - bold_k: number of selections allowed in each election
        - bold_s: selected candidate indices, 1-based, across all elections
        - bold_r: randomness kept from ballot generation
        - authority: index of the responding authority, for audit logging

        Raises
        - InvalidInput: bold_k, bold_s and bold_r are inconsistent
        - InvalidObliviousTransferResponse: the response is malformed or a
          decoded coordinate falls outside Z_p'; no point is returned
        """

        check_selections(bold_s)
        if any(k_j < 0 for k_j in bold_k):
            raise InvalidInput("Selection counts must not be negative")
        if sum(bold_k) != len(bold_s):
            raise InvalidInput("The selection counts must add up to the number of selections")
        if len(bold_r) != len(bold_s):
            raise InvalidInput("There must be one randomness per selection")

        self._check_response_shape(response, bold_k, bold_s, authority)

        # election index of each flattened selection
        elections = tuple(j for j, k_j in enumerate(bold_k) for _ in range(k_j))

        return tuple(
            self._decode_point(response, i, j, bold_s[i], bold_r[i], authority)
            for i, j in enumerate(elections)
        )

    def _decode_point(
        self,
        response: ObliviousTransferResponse,
        i: int,
        j: int,
        s_i: int,
        r_i: int,
        authority: Optional[int],
    ) -> Point:
        eg = self.params.encryption_group
        upper_l_m = self.params.message_length // 8
        half = upper_l_m // 2

        k = (response.b[i] * eg.exp(response.d[j], -r_i)) % eg.p
        bold_upper_k = self.hasher.key_stream(k, upper_l_m)
        # selections are 1-based
        m_i = xor(response.c[s_i - 1], bold_upper_k)

        x_i = to_integer(m_i[:half])
        y_i = to_integer(m_i[half:])
        logger.debug("Decoded point %d of authority %s", i, authority)

        if not (self.params.prime_field.is_member(x_i) and self.params.prime_field.is_member(y_i)):
            self._reject("x_i >= p' or y_i >= p'", authority, i)

        return Point(x=x_i, y=y_i)

    def get_point_matrix(
        self,
        responses: Sequence[ObliviousTransferResponse],
        bold_k: Sequence[int],
        bold_s: Sequence[int],
        bold_r: Sequence[int],
    ) -> Tuple[Tuple[Point, ...], ...]:
        """Decode the responses of all authorities, preserving their order"""

        return tuple(
            self.get_points(response, bold_k, bold_s, bold_r, authority=j)
            for j, response in enumerate(responses)
        )

    def get_return_codes(self, point_matrix: Sequence[Sequence[Point]]) -> Tuple[str, ...]:
        """Fold the point matrix into one printable return code per selection

        Raises InvalidInput unless the matrix has exactly one row per
        authority and all rows have the same length.
        """

        if len(point_matrix) != self.params.authority_count:
            raise InvalidInput(
                f"Expected {self.params.authority_count} rows of points, got {len(point_matrix)}"
            )
        length = len(point_matrix[0])
        if any(len(row) != length for row in point_matrix):
            raise InvalidInput("All rows of the point matrix must have the same length")

        upper_l_r = self.params.return_code_length // 8

        return tuple(
            bytes_to_string(
                xor_all([truncate(self.hasher.rec_hash_l(row[i]), upper_l_r) for row in point_matrix], upper_l_r),
                self.params.return_code_alphabet,
            )
            for i in range(length)
        )
