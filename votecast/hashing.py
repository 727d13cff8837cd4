"""Recursive hashing of structured values.

recHash_L maps a value to an L-bit digest:
- bytes are hashed as they are
- strings are hashed as their UTF-8 encoding
- integers are hashed as their minimal big-endian byte array
- sequences and dataclass records are hashed as the concatenation of the
  hashes of their elements
Several arguments are hashed like the tuple of those arguments.
"""

from __future__ import annotations

import hashlib
import math
from dataclasses import astuple, is_dataclass
from typing import Any

from .codec import to_byte_array, truncate


class RecursiveHash:
    """recHash_L over a hashlib digest

    Args
    - algorithm: hashlib algorithm name
    - length: output length in bytes (L / 8), at most the digest size
    """

    def __init__(self, algorithm: str = "sha256", length: int = 32):
        digest_size = hashlib.new(algorithm).digest_size
        if not 0 < length <= digest_size:
            raise ValueError(f"Hash length must be in [1, {digest_size}] bytes for {algorithm}")

        self.algorithm = algorithm
        self.length = length

    @classmethod
    def for_parameters(cls, params) -> "RecursiveHash":
        return cls(params.hash_algorithm, params.security_length // 8)

    def _digest(self, data: bytes) -> bytes:
        return hashlib.new(self.algorithm, data).digest()

    def _hash(self, value: Any) -> bytes:
        if isinstance(value, (bytes, bytearray)):
            return self._digest(bytes(value))
        if isinstance(value, str):
            return self._digest(value.encode("utf-8"))
        if isinstance(value, bool):
            raise TypeError("Cannot hash a boolean")
        if isinstance(value, int):
            return self._digest(to_byte_array(value))
        if is_dataclass(value) and not isinstance(value, type):
            value = astuple(value)
        if isinstance(value, (list, tuple)):
            return self._digest(b"".join(self._hash(v) for v in value))

        raise TypeError(f"Cannot hash value of type {type(value).__name__}")

    def rec_hash_l(self, *values: Any) -> bytes:
        """Hash one value, or the tuple of several values, to `length` bytes"""

        if not values:
            raise TypeError("rec_hash_l needs at least one value")

        value = values[0] if len(values) == 1 else values

        return truncate(self._hash(value), self.length)

    def key_stream(self, k: int, length: int) -> bytes:
        """Stretch `k` into `length` bytes

        Concatenates rec_hash_l(k, z) for z = 1..ceil(length / L) and
        truncates the result.
        """

        blocks = math.ceil(length / self.length)
        stream = b"".join(self.rec_hash_l(k, z) for z in range(1, blocks + 1))

        return truncate(stream, length)
