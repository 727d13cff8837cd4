import dataclasses
import hashlib
import logging

import pytest

from votecast.ballot import BallotEncoder
from votecast.codec import bytes_to_string, to_byte_array, xor_all
from votecast.errors import InvalidInput, InvalidObliviousTransferResponse
from votecast.models import Point
from votecast.return_codes import ReturnCodeDecoder

from conftest import StubRandomSource, make_toy_params, respond


def sha256(data):
    return hashlib.sha256(data).digest()


def toy_setup(points, toy_params, toy_pk, beta=5):
    """One election of three candidates, candidate 2 selected, r = 4"""

    query = BallotEncoder(toy_params, random_source=StubRandomSource([4])).gen_query((3,), toy_pk)
    response = respond(toy_params, query.bold_a, toy_pk, [1], [3], points, [beta])

    return query, response


def test_decodes_the_selected_point(toy_params, toy_pk):
    points = [Point(1, 1), Point(6, 6), Point(2, 2)]
    query, response = toy_setup(points, toy_params, toy_pk)

    decoder = ReturnCodeDecoder(toy_params)
    assert decoder.get_points(response, [1], [2], query.bold_r) == (Point(6, 6),)


@pytest.mark.parametrize("point", [Point(7, 0), Point(0, 7), Point(255, 255)])
def test_points_outside_the_field_are_rejected(toy_params, toy_pk, point, caplog):
    query, response = toy_setup([Point(1, 1), point, Point(2, 2)], toy_params, toy_pk)

    with caplog.at_level(logging.WARNING, logger="votecast.return_codes"):
        with pytest.raises(InvalidObliviousTransferResponse):
            ReturnCodeDecoder(toy_params).get_points(response, [1], [2], query.bold_r, authority=1)

    assert any("authority 1" in record.getMessage() for record in caplog.records)


@pytest.mark.parametrize(
    "mutate",
    [
        lambda resp: dataclasses.replace(resp, b=()),
        lambda resp: dataclasses.replace(resp, b=resp.b + resp.b),
        lambda resp: dataclasses.replace(resp, d=resp.d + (1,)),
        lambda resp: dataclasses.replace(resp, c=resp.c[:1]),
        lambda resp: dataclasses.replace(resp, c=tuple(row[:1] for row in resp.c)),
        lambda resp: dataclasses.replace(resp, c=tuple(row + b"\x00" for row in resp.c)),
        lambda resp: dataclasses.replace(resp, b=(5,)),
        lambda resp: dataclasses.replace(resp, d=(0,)),
    ],
)
def test_malformed_responses_are_rejected(toy_params, toy_pk, mutate):
    query, response = toy_setup([Point(1, 1), Point(6, 6), Point(2, 2)], toy_params, toy_pk)

    with pytest.raises(InvalidObliviousTransferResponse):
        ReturnCodeDecoder(toy_params).get_points(mutate(response), [1], [2], query.bold_r)


@pytest.mark.parametrize(
    "bold_k, bold_s, bold_r",
    [
        ([2], [2], (4,)),
        ([1], [2], ()),
        ([1], [2], (4, 4)),
        ([-1, 2], [2], (4,)),
        ([1], [], ()),
        ([2], [2, 1], (4, 4)),
    ],
)
def test_inconsistent_caller_inputs(toy_params, toy_pk, bold_k, bold_s, bold_r):
    _, response = toy_setup([Point(1, 1), Point(6, 6), Point(2, 2)], toy_params, toy_pk)

    with pytest.raises(InvalidInput):
        ReturnCodeDecoder(toy_params).get_points(response, bold_k, bold_s, bold_r)


def test_point_matrix_stops_at_a_bad_authority(toy_params, toy_pk, caplog):
    query, good = toy_setup([Point(1, 1), Point(6, 6), Point(2, 2)], toy_params, toy_pk, beta=5)
    _, bad = toy_setup([Point(1, 1), Point(7, 6), Point(2, 2)], toy_params, toy_pk, beta=3)
    decoder = ReturnCodeDecoder(toy_params)

    assert decoder.get_point_matrix([good, good], [1], [2], query.bold_r) == ((Point(6, 6),), (Point(6, 6),))

    with caplog.at_level(logging.WARNING, logger="votecast.return_codes"):
        with pytest.raises(InvalidObliviousTransferResponse):
            decoder.get_point_matrix([good, bad], [1], [2], query.bold_r)

    assert any("authority 1" in record.getMessage() for record in caplog.records)


class StubHash:
    def __init__(self, table):
        self.table = table

    def rec_hash_l(self, point):
        return self.table[point]


def test_return_code_is_xor_of_truncated_point_hashes(toy_params):
    p_1, p_2 = Point(1, 2), Point(3, 4)
    decoder = ReturnCodeDecoder(toy_params, hasher=StubHash({p_1: b"\x3c\x5a\xff", p_2: b"\x11\x22\xee"}))

    assert decoder.get_return_codes([[p_1], [p_2]]) == ("2D78",)
    assert decoder.get_return_codes([[p_2], [p_1]]) == ("2D78",)


def test_return_codes_check_matrix_dimensions(toy_params):
    decoder = ReturnCodeDecoder(toy_params)
    row = (Point(1, 1), Point(2, 2))

    with pytest.raises(InvalidInput):
        decoder.get_return_codes([row])
    with pytest.raises(InvalidInput):
        decoder.get_return_codes([row, row, row])
    with pytest.raises(InvalidInput):
        decoder.get_return_codes([row, row[:1]])

    assert len(decoder.get_return_codes([row, row])) == 2


def test_return_codes_do_not_depend_on_authority_order():
    params = make_toy_params(authority_count=3)
    decoder = ReturnCodeDecoder(params)
    rows = [
        (Point(1, 2), Point(3, 4)),
        (Point(5, 6), Point(0, 1)),
        (Point(2, 2), Point(4, 4)),
    ]

    codes = decoder.get_return_codes(rows)
    assert decoder.get_return_codes([rows[2], rows[0], rows[1]]) == codes
    assert decoder.get_return_codes([rows[1], rows[2], rows[0]]) == codes
    assert all(len(code) == 4 for code in codes)


def expected_return_code(points, upper_l_r, alphabet):
    """Return code of one selection, computed directly with hashlib"""

    hashes = [
        sha256(sha256(to_byte_array(point.x)) + sha256(to_byte_array(point.y)))[:upper_l_r]
        for point in points
    ]
    return bytes_to_string(xor_all(hashes, upper_l_r), alphabet)


def test_full_vote_casting_round(default_params, default_pk):
    # two elections: 3 candidates with 2 selections, 2 candidates with 1
    bold_n = [3, 2]
    bold_k = [2, 1]
    bold_s = [1, 3, 5]
    betas = [[0x1234567, 0x7654321], [0xABCDEF, 0xFEDCBA], [0x13579B, 0x2468AC]]
    points = [
        [Point(1000 * j + i, 7 * i + j + 1) for i in range(1, sum(bold_n) + 1)]
        for j in range(default_params.authority_count)
    ]

    encoder = BallotEncoder(default_params)
    ballot = encoder.gen_ballot("Vote4Me", bold_s, default_pk)
    responses = [
        respond(default_params, ballot.alpha.bold_a, default_pk, bold_k, bold_n, points[j], betas[j])
        for j in range(default_params.authority_count)
    ]

    decoder = ReturnCodeDecoder(default_params)
    matrix = decoder.get_point_matrix(responses, bold_k, bold_s, ballot.bold_r)

    assert matrix == tuple(tuple(points[j][s - 1] for s in bold_s) for j in range(3))

    codes = decoder.get_return_codes(matrix)
    upper_l_r = default_params.return_code_length // 8
    assert codes == tuple(
        expected_return_code([row[i] for row in matrix], upper_l_r, default_params.return_code_alphabet)
        for i in range(len(bold_s))
    )
    # ceil(64 / log2(62))
    assert all(len(code) == 11 for code in codes)
