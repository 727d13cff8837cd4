"""Election-wide public parameters.

The parameters are an immutable value built once by the surrounding system and
passed to every component's constructor. Group parameters are assumed to have
been generated and validated upstream; only cheap structural checks happen
here.
"""

from __future__ import annotations

import hashlib
import string
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

# 1024-bit MODP group prime (RFC 2409, group 2). A safe prime p = 2q + 1.
_SAFE_P_HEX = (
    "FFFFFFFFFFFFFFFFC90FDAA22168C234C4C6628B80DC1CD1"
    "29024E088A67CC74020BBEA63B139B22514A08798E3404DD"
    "EF9519B3CD3A431B302B0A6DF25F14374FE1356D6D51C245"
    "E485B576625E7EC6F44C42E9A637ED6B0BFF5CB6F406B7ED"
    "EE386BFB5A899FA5AE9F24117C4B1FE649286651ECE65381"
    "FFFFFFFFFFFFFFFF"
)

# 2048-bit MODP group with 256-bit prime order subgroup (RFC 5114, section 2.3)
_RFC5114_P = 0x87A8E61DB4B6663CFFBBD19C651959998CEEF608660DD0F25D2CEED4435E3B00E00DF8F1D61957D4FAF7DF4561B2AA3016C3D91134096FAA3BF4296D830E9A7C209E0C6497517ABD5A8A9D306BCF67ED91F9E6725B4758C022E0B1EF4275BF7B6C5BFC11D45F9088B941F54EB1E59BB8BC39A0BF12307F5C4FDB70C581B23F76B63ACAE1CAA6B7902D52526735488A0EF13C6D9A51BFA4AB3AD8347796524D8EF6A167B5A41825D967E144E5140564251CCACB83E6B486F6B3CA3F7971506026C0B857F689962856DED4010ABD0BE621C3A3960A54E710C375F26375D7014103A4B54330C198AF126116D2276E11715F693877FAD7EF09CADB094AE91E1A1597
_RFC5114_Q = 0x8CF83642A709A097B447997640129DA299B1A47D1EB3750BA308B0FE64F5FBD3
_RFC5114_G = 0x3FB32C9B73134D0B2E77506660EDBD484CA7B18F21EF205407F4793A1A0BA12510DBC15077BE463FFF4FED4AAC0BB555BE3A6C1B0C6B47B1BC3773BF7E8C6F62901228F8C28CBB18A55AE31341000A650196F931C77A57F2DDF463E5E9EC144B777DE62AAAB8A8628AC376D282D6ED3864E67982428EBC831D14348F6F2F9193B5045AF2767164E1DFC967C1FB3F2E55A4BD1BFFE83B9C80D052B985D182EA0ADB2A3B7313D3FE14C8484B1E052588B9B7D2BBD2DF016199ECD06E1557CD0915B3353BBB64E0EC377FD028370DF92B52C7891428CDC67EB6184B523D1DB246C32F63078490F00EF8D647D148D47954515E2327CFEF98C582664B4C0F6CC41659

# Mersenne prime 2^127 - 1
_DEFAULT_P_PRIME = (1 << 127) - 1

ALPHANUMERIC = string.digits + string.ascii_uppercase + string.ascii_lowercase


@dataclass(frozen=True)
class PrimeOrderGroup:
    """Subgroup G_q of Z_p^* of prime order q

    Used for both the encryption group (p, q, g) and the identification group
    (p_hat, q_hat, g_hat); the two only differ by their parameters.

    Attributes
    - p: prime modulus
    - q: prime order of the subgroup, q | p - 1
    - g: generator of the subgroup
    """

    p: int
    q: int
    g: int

    def is_member(self, x: int) -> bool:
        """Return True iff x is an element of G_q"""

        return 1 <= x < self.p and pow(x, self.q, self.p) == 1

    def exp(self, base: int, exponent: int) -> int:
        """Modular exponentiation in Z_p^*; negative exponents invert"""

        return pow(base, exponent, self.p)

    def gen(self, exponent: int) -> int:
        """Return g^exponent mod p"""

        return pow(self.g, exponent, self.p)


@dataclass(frozen=True)
class PrimeField:
    """Prime field Z_p' in which return-code points live"""

    p_prime: int

    def is_member(self, x: int) -> bool:
        return 0 <= x < self.p_prime


@dataclass(frozen=True)
class PublicParameters:
    """Immutable election-wide configuration

    Attributes
    - encryption_group: (p, q, g), used for ballot encryption and OT
    - identification_group: (p_hat, q_hat, g_hat), used for credentials
    - prime_field: Z_p' holding the return-code points
    - security_length: L, in bits; recHash_L output length
    - message_length: L_m, in bits; length of one OT plaintext
    - return_code_length: L_r, in bits; length of one raw return code
    - authority_count: S, number of authorities
    - credential_alphabet: A_x
    - return_code_alphabet: A_r
    - credential_length: expected number of credential characters, if fixed
    - hash_algorithm: hashlib name of the underlying digest
    """

    encryption_group: PrimeOrderGroup
    identification_group: PrimeOrderGroup
    prime_field: PrimeField
    security_length: int
    message_length: int
    return_code_length: int
    authority_count: int
    credential_alphabet: str = ALPHANUMERIC
    return_code_alphabet: str = ALPHANUMERIC
    credential_length: Optional[int] = None
    hash_algorithm: str = "sha256"

    def __post_init__(self):
        for name, group in (("encryption", self.encryption_group), ("identification", self.identification_group)):
            if (group.p - 1) % group.q != 0:
                raise ValueError(f"The {name} group order must divide p - 1")
            if group.g == 1 or not group.is_member(group.g):
                raise ValueError(f"The {name} group generator must be a non-unit member of G_q")

        if not 1 < self.prime_field.p_prime < self.encryption_group.q:
            raise ValueError("The prime field modulus must be smaller than q")

        if self.security_length <= 0 or self.security_length % 8 != 0:
            raise ValueError("L must be a positive multiple of 8")
        if self.message_length <= 0 or self.message_length % 16 != 0:
            raise ValueError("L_m must be a positive multiple of 16")
        if self.return_code_length <= 0 or self.return_code_length % 8 != 0:
            raise ValueError("L_r must be a positive multiple of 8")
        if self.return_code_length > self.security_length:
            raise ValueError("L_r must not exceed L")
        if self.authority_count < 1:
            raise ValueError("There must be at least one authority")

        for name, alphabet in (("credential", self.credential_alphabet), ("return code", self.return_code_alphabet)):
            if len(alphabet) < 2 or len(set(alphabet)) != len(alphabet):
                raise ValueError(f"The {name} alphabet needs at least two distinct characters")

        if self.credential_length is not None and self.credential_length < 1:
            raise ValueError("The credential length must be positive")

        digest_bits = hashlib.new(self.hash_algorithm).digest_size * 8
        if self.security_length > digest_bits:
            raise ValueError(f"L = {self.security_length} exceeds the {self.hash_algorithm} digest size")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain mapping; group elements are hex strings"""

        def group(g: PrimeOrderGroup) -> Dict[str, str]:
            return {"p": hex(g.p), "q": hex(g.q), "g": hex(g.g)}

        return {
            "encryption_group": group(self.encryption_group),
            "identification_group": group(self.identification_group),
            "prime_field": {"p_prime": hex(self.prime_field.p_prime)},
            "security_length": self.security_length,
            "message_length": self.message_length,
            "return_code_length": self.return_code_length,
            "authority_count": self.authority_count,
            "credential_alphabet": self.credential_alphabet,
            "return_code_alphabet": self.return_code_alphabet,
            "credential_length": self.credential_length,
            "hash_algorithm": self.hash_algorithm,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PublicParameters":
        """Build parameters from a plain mapping

        Integers may be given as ints or as strings in any base accepted by
        int(value, 0), e.g. "0x1f". Raises ValueError on missing or ill-typed
        entries.
        """

        try:
            def group(raw: Mapping[str, Any]) -> PrimeOrderGroup:
                return PrimeOrderGroup(p=_as_int(raw["p"]), q=_as_int(raw["q"]), g=_as_int(raw["g"]))

            optional = {
                key: data[key]
                for key in ("credential_alphabet", "return_code_alphabet", "credential_length", "hash_algorithm")
                if data.get(key) is not None
            }

            return cls(
                encryption_group=group(data["encryption_group"]),
                identification_group=group(data["identification_group"]),
                prime_field=PrimeField(p_prime=_as_int(data["prime_field"]["p_prime"])),
                security_length=_as_int(data["security_length"]),
                message_length=_as_int(data["message_length"]),
                return_code_length=_as_int(data["return_code_length"]),
                authority_count=_as_int(data["authority_count"]),
                **optional,
            )
        except (KeyError, TypeError) as e:
            raise ValueError(f"Malformed public parameters: {e!r}") from e


def _as_int(value: Union[int, str]) -> int:
    if isinstance(value, bool):
        raise TypeError(f"Expected an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        return int(value, 0)
    raise TypeError(f"Expected an integer, got {value!r}")


def default_public_parameters(authority_count: int = 4) -> PublicParameters:
    """Return the default parameters

    - encryption group: 1024-bit safe prime p = 2q + 1 with g = 2
      (p = 7 mod 8, so 2 is a quadratic residue and generates G_q)
    - identification group: RFC 5114 2048-bit group, 256-bit q_hat
    - prime field: p' = 2^127 - 1, so one coordinate fits in 16 bytes
    """

    p = int(_SAFE_P_HEX, 16)

    return PublicParameters(
        encryption_group=PrimeOrderGroup(p=p, q=(p - 1) // 2, g=2),
        identification_group=PrimeOrderGroup(p=_RFC5114_P, q=_RFC5114_Q, g=_RFC5114_G),
        prime_field=PrimeField(p_prime=_DEFAULT_P_PRIME),
        security_length=256,
        message_length=256,
        return_code_length=64,
        authority_count=authority_count,
    )


def load_public_parameters(path: Union[str, Path]) -> PublicParameters:
    """Load parameters from a YAML file

    Raises ValueError if the file cannot be parsed or is not a valid
    parameter mapping.
    """

    path = Path(path)
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Could not parse {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"{path} does not contain a parameter mapping")

    return PublicParameters.from_dict(data)


def save_public_parameters(params: PublicParameters, path: Union[str, Path]) -> None:
    """Write parameters to a YAML file"""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        yaml.safe_dump(params.to_dict(), f, default_flow_style=False, sort_keys=False)
