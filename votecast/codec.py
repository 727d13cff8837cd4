"""Conversions between integers, byte strings and alphabet strings.

These conventions must be bit-exact across independent implementations:
integers are big-endian, fixed-width conversions never silently truncate, and
alphabet strings put the most significant digit first.
"""

from __future__ import annotations

import math
from functools import reduce
from typing import Optional, Sequence

from .errors import InvalidInput


def to_byte_array(x: int, length: Optional[int] = None) -> bytes:
    """Encode a non-negative integer as big-endian bytes

    Args
    - x: the integer to encode
    - length: output width in bytes; the minimal width is used if None,
      which encodes 0 as the empty byte string

    Raises ValueError if x is negative or does not fit in `length` bytes.
    """

    if x < 0:
        raise ValueError("Cannot encode a negative integer")

    if length is None:
        length = (x.bit_length() + 7) // 8

    try:
        return x.to_bytes(length, "big")
    except OverflowError:
        raise ValueError(f"{x} does not fit in {length} bytes") from None


def to_integer(data: bytes) -> int:
    """Decode big-endian bytes as a non-negative integer"""

    return int.from_bytes(data, "big")


def xor(a: bytes, b: bytes) -> bytes:
    """XOR two byte strings of equal length"""

    if len(a) != len(b):
        raise ValueError(f"Cannot xor byte strings of length {len(a)} and {len(b)}")

    return bytes(u ^ v for u, v in zip(a, b))


def xor_all(blocks: Sequence[bytes], length: int) -> bytes:
    """Fold `xor` over `blocks`, starting from `length` zero bytes"""

    return reduce(xor, blocks, bytes(length))


def truncate(data: bytes, length: int) -> bytes:
    """Keep the first `length` bytes of `data`"""

    if length > len(data):
        raise ValueError(f"Cannot truncate {len(data)} bytes to {length}")

    return data[:length]


def string_to_integer(text: str, alphabet: Sequence[str]) -> int:
    """Read `text` as a number written in base len(alphabet)

    Raises InvalidInput when a character is not part of the alphabet.
    """

    ranks = {char: rank for rank, char in enumerate(alphabet)}
    base = len(alphabet)

    x = 0
    for char in text:
        if char not in ranks:
            raise InvalidInput(f"Character {char!r} is not part of the alphabet")
        x = x * base + ranks[char]

    return x


def integer_to_string(x: int, length: int, alphabet: Sequence[str]) -> str:
    """Write `x` with exactly `length` digits of `alphabet`"""

    base = len(alphabet)
    if x < 0 or x >= base ** length:
        raise ValueError(f"{x} cannot be written with {length} digits in base {base}")

    digits = []
    for _ in range(length):
        x, rank = divmod(x, base)
        digits.append(alphabet[rank])

    return "".join(reversed(digits))


def bytes_to_string(data: bytes, alphabet: Sequence[str]) -> str:
    """Encode a byte string with `alphabet`

    The output length is ceil(8 * len(data) / log2(len(alphabet))), so every
    byte string of a given length maps to a string of the same length.
    """

    length = math.ceil(8 * len(data) / math.log2(len(alphabet)))

    return integer_to_string(to_integer(data), length, alphabet)
