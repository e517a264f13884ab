"""
Key material of the Paillier cryptosystem and its generation.
"""

from __future__ import annotations

import logging
import numbers
import sys
import typing
import warnings
from dataclasses import dataclass, field
from functools import cached_property
from typing import Any, Iterator, Union

from tno.mpc.encryption_schemes.utils import mod_inv, pow_mod

from tno.mpc.encryption_schemes.paillier_crypto.exceptions import (
    WARN_KEY_LENGTH_NOT_POWER_OF_TWO,
    EncryptionSchemeWarning,
    InvalidConfigurationError,
    InvalidLengthError,
    KeyInvariantViolationError,
    RangeViolationError,
)
from tno.mpc.encryption_schemes.paillier_crypto.randomness import (
    prime_of_bit_length,
    random_between,
)
from tno.mpc.encryption_schemes.paillier_crypto.utils import (
    DEFAULT_PRIMALITY_ROUNDS,
    lcm,
)

if sys.version_info < (3, 11):
    from typing_extensions import NotRequired, TypedDict
else:
    from typing import NotRequired, TypedDict

logger = logging.getLogger(__name__)

DEFAULT_KEY_LENGTH = 512
MIN_KEY_LENGTH = 64

KeyValue = Union[int, str]


class SerializedPaillierPublicKey(TypedDict):
    n: KeyValue
    n2: NotRequired[KeyValue]
    g: KeyValue


SerializedPaillierSecretKey = TypedDict(
    "SerializedPaillierSecretKey",
    {
        "lambda": KeyValue,
        "mu": KeyValue,
        "p": NotRequired[KeyValue],
        "q": NotRequired[KeyValue],
        "n": KeyValue,
        "n2": NotRequired[KeyValue],
    },
)


class SerializedPaillierKeyPair(TypedDict):
    public_key: SerializedPaillierPublicKey
    secret_key: SerializedPaillierSecretKey


def _export(value: int, decimal_strings: bool) -> KeyValue:
    return str(value) if decimal_strings else value


def _check_derived_square(obj: dict[str, Any], n: int) -> None:
    if "n2" in obj and int(obj["n2"]) != n * n:
        raise KeyInvariantViolationError(
            f"deserialize: field n2 does not equal n^2 for a {n.bit_length()}-bit modulus n."
        )


@dataclass(frozen=True, eq=True)
class PaillierPublicKey:
    r"""
    PublicKey for the Paillier encryption scheme.

    Constructs a new Paillier public key $(n, g)$, should have $n=pq$, with $p, q$ prime, and
    $g \in \mathbb{Z}^*_{n^2}$.

    :param n: Modulus $n$ of the plaintext space.
    :param g: Plaintext base $g$ for encryption.
    :raise TypeError: When n or g is not an integer.
    :raise InvalidConfigurationError: When $n \leq 1$ or $g \notin (0, n^2)$.
    """

    n: int
    g: int

    def __post_init__(self) -> None:
        for name in ("n", "g"):
            if not isinstance(getattr(self, name), numbers.Integral):
                raise TypeError(
                    f"PaillierPublicKey: {name} should be an integer, not "
                    f"{type(getattr(self, name))}."
                )
        if self.n <= 1:
            raise InvalidConfigurationError(
                f"PaillierPublicKey: modulus n should be larger than 1, got {self.n}."
            )
        if not 0 < self.g < self.n_squared:
            raise InvalidConfigurationError(
                f"PaillierPublicKey: generator g should lie in (0, n^2) for the "
                f"{self.n.bit_length()}-bit modulus n."
            )

    @cached_property
    def n_squared(self) -> int:
        """
        Modulus of the ciphertext space.
        """
        return self.n**2

    # region Serialization logic

    def serialize(self, decimal_strings: bool = False) -> SerializedPaillierPublicKey:
        """
        Export this public key, including the derived $n^2$.

        :param decimal_strings: Export every field as its decimal string instead of an integer.
        :return: Serialized version of this PaillierPublicKey.
        """
        return {
            "n": _export(self.n, decimal_strings),
            "n2": _export(self.n_squared, decimal_strings),
            "g": _export(self.g, decimal_strings),
        }

    @staticmethod
    def deserialize(obj: SerializedPaillierPublicKey) -> PaillierPublicKey:
        """
        Import a public key that was exported with serialize.

        :param obj: Serialized version of a PaillierPublicKey, with integer or decimal string
            fields.
        :raise KeyInvariantViolationError: When the included n2 does not match n.
        :return: Deserialized PaillierPublicKey from the given dict.
        """
        n = int(obj["n"])
        _check_derived_square(typing.cast(dict[str, Any], obj), n)
        return PaillierPublicKey(n=n, g=int(obj["g"]))

    # endregion


@dataclass(frozen=True, eq=True)
class PaillierSecretKey:
    r"""
    SecretKey for the Paillier encryption scheme.

    Constructs a new Paillier secret key $(\lambda, \mu)$, also contains $n$ and optionally the
    factors $p, q$. Should have $n=pq$, with $p, q$ prime, $\lambda = \text{lcm}(p-1, q-1)$, and
    $\mu = (L(g^\lambda \mod n^2))^{-1} \mod n$, where $L(\cdot)$ is defined as $L(x) = (x-1)/n$.

    :param lambda_: Decryption exponent $\lambda$ of the ciphertext.
    :param mu: Decryption divisor $\mu$ for the ciphertext.
    :param n: Modulus $n$ of the plaintext space.
    :param p: First prime factor of $n$, if known.
    :param q: Second prime factor of $n$, if known.
    :raise InvalidConfigurationError: When the fields are out of range, or only one factor is
        given.
    :raise KeyInvariantViolationError: When the factors do not match $n$ or $\lambda$.
    """

    lambda_: int = field(repr=False)
    mu: int = field(repr=False)
    n: int
    p: int | None = field(default=None, repr=False)
    q: int | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        for name in ("lambda_", "mu", "n"):
            if not isinstance(getattr(self, name), numbers.Integral):
                raise TypeError(
                    f"PaillierSecretKey: {name} should be an integer, not "
                    f"{type(getattr(self, name))}."
                )
        if self.n <= 1:
            raise InvalidConfigurationError(
                f"PaillierSecretKey: modulus n should be larger than 1, got {self.n}."
            )
        if self.lambda_ <= 0 or not 0 < self.mu < self.n:
            raise InvalidConfigurationError(
                f"PaillierSecretKey: lambda should be positive and mu should lie in (0, n) for "
                f"the {self.n.bit_length()}-bit modulus n."
            )
        if (self.p is None) != (self.q is None):
            raise InvalidConfigurationError(
                "PaillierSecretKey: either both prime factors p and q are given, or neither."
            )
        if self.p is not None and self.q is not None:
            if self.p * self.q != self.n:
                raise KeyInvariantViolationError(
                    f"PaillierSecretKey: p * q does not equal the {self.n.bit_length()}-bit "
                    f"modulus n."
                )
            if lcm(self.p - 1, self.q - 1) != self.lambda_:
                raise KeyInvariantViolationError(
                    "PaillierSecretKey: lambda does not equal lcm(p - 1, q - 1)."
                )

    @cached_property
    def n_squared(self) -> int:
        """
        Modulus of the ciphertext space.
        """
        return self.n**2

    # region Serialization logic

    def serialize(self, decimal_strings: bool = False) -> SerializedPaillierSecretKey:
        """
        Export this secret key, including the derived $n^2$ and the factors when known.

        :param decimal_strings: Export every field as its decimal string instead of an integer.
        :return: Serialized version of this PaillierSecretKey.
        """
        serialized: SerializedPaillierSecretKey = {
            "lambda": _export(self.lambda_, decimal_strings),
            "mu": _export(self.mu, decimal_strings),
            "n": _export(self.n, decimal_strings),
            "n2": _export(self.n_squared, decimal_strings),
        }
        if self.p is not None and self.q is not None:
            serialized["p"] = _export(self.p, decimal_strings)
            serialized["q"] = _export(self.q, decimal_strings)
        return serialized

    @staticmethod
    def deserialize(obj: SerializedPaillierSecretKey) -> PaillierSecretKey:
        """
        Import a secret key that was exported with serialize.

        :param obj: Serialized version of a PaillierSecretKey, with integer or decimal string
            fields.
        :raise KeyInvariantViolationError: When the included n2 does not match n.
        :return: Deserialized PaillierSecretKey from the given dict.
        """
        n = int(obj["n"])
        _check_derived_square(typing.cast(dict[str, Any], obj), n)
        return PaillierSecretKey(
            lambda_=int(obj["lambda"]),
            mu=int(obj["mu"]),
            n=n,
            p=int(obj["p"]) if "p" in obj else None,
            q=int(obj["q"]) if "q" in obj else None,
        )

    # endregion


@dataclass(frozen=True, eq=True)
class PaillierKeyPair:
    """
    Matching public and secret key. Construction verifies that both halves belong together.

    :param public_key: Public key of the pair.
    :param secret_key: Secret key of the pair.
    :raise KeyInvariantViolationError: When the keys do not form a valid Paillier key pair.
    """

    public_key: PaillierPublicKey
    secret_key: PaillierSecretKey

    def __post_init__(self) -> None:
        check_key_pair(self.public_key, self.secret_key)

    def __iter__(self) -> Iterator[PaillierPublicKey | PaillierSecretKey]:
        """
        Unpack the pair as (public_key, secret_key).
        """
        return iter((self.public_key, self.secret_key))

    def serialize(self, decimal_strings: bool = False) -> SerializedPaillierKeyPair:
        """
        Export both keys.

        :param decimal_strings: Export every field as its decimal string instead of an integer.
        :return: Serialized version of this PaillierKeyPair.
        """
        return {
            "public_key": self.public_key.serialize(decimal_strings),
            "secret_key": self.secret_key.serialize(decimal_strings),
        }

    @staticmethod
    def deserialize(obj: SerializedPaillierKeyPair) -> PaillierKeyPair:
        """
        Import a key pair that was exported with serialize.

        :param obj: Serialized version of a PaillierKeyPair.
        :return: Deserialized and validated PaillierKeyPair.
        """
        return PaillierKeyPair(
            public_key=PaillierPublicKey.deserialize(obj["public_key"]),
            secret_key=PaillierSecretKey.deserialize(obj["secret_key"]),
        )


def func_l(input_x: int, n: int) -> int:
    r"""
    Paillier specific $L(\cdot)$ function: $L(x) = (x-1)/n$.

    The division is exact for every valid input; a remainder means that $x \neq 1 \mod n$.

    :param input_x: input $x$
    :param n: input $n$ (public key modulus)
    :raise RangeViolationError: When $x - 1$ is not divisible by $n$.
    :return: value of $L(x) = (x-1)/n$.
    """
    quotient, remainder = divmod(input_x - 1, n)
    if remainder != 0:
        raise RangeViolationError(
            f"L: input is not congruent to 1 modulo the {n.bit_length()}-bit modulus n."
        )
    return quotient


def get_generator(n: int, n_squared: int | None = None) -> int:
    r"""
    Construct a generator $g = (\alpha n + 1) \beta^n \mod n^2$ with $\alpha, \beta$ uniformly
    random in $[2, n]$. The order of $g$ is a multiple of $n$ by construction.

    :param n: Modulus $n$ of the plaintext space.
    :param n_squared: Square of n. Can be passed for efficiency reasons.
    :return: Generator $g \in \mathbb{Z}_{n^2}$.
    """
    if not n_squared:
        n_squared = n**2
    alpha = random_between(2, n)
    beta = random_between(2, n)
    return (alpha * n + 1) * pow_mod(beta, n, n_squared) % n_squared


def check_key_pair(public_key: PaillierPublicKey, secret_key: PaillierSecretKey) -> None:
    r"""
    Verify that a public and secret key belong together: both share $n$ and
    $L(g^\lambda \mod n^2) \cdot \mu = 1 \mod n$.

    :param public_key: Public key to check.
    :param secret_key: Secret key to check.
    :raise KeyInvariantViolationError: When the keys do not form a valid key pair.
    """
    if public_key.n != secret_key.n:
        raise KeyInvariantViolationError(
            f"check_key_pair: secret key modulus ({secret_key.n.bit_length()} bits) differs "
            f"from public key modulus ({public_key.n.bit_length()} bits)."
        )
    g_lambda = pow_mod(public_key.g, secret_key.lambda_, public_key.n_squared)
    try:
        l_value = func_l(g_lambda, public_key.n)
    except RangeViolationError as exc:
        raise KeyInvariantViolationError(
            "check_key_pair: g^lambda mod n^2 is not congruent to 1 modulo n."
        ) from exc
    if l_value * secret_key.mu % public_key.n != 1:
        raise KeyInvariantViolationError(
            "check_key_pair: mu is not the inverse of L(g^lambda mod n^2) modulo n."
        )


def validate_key_length(key_length: int) -> None:
    """
    Check that a key of the given bit length can be generated.

    :param key_length: Bit length of the public key $n$.
    :raise TypeError: When key_length is not an integer.
    :raise InvalidLengthError: When key_length is not positive.
    :raise InvalidConfigurationError: When key_length is odd or smaller than MIN_KEY_LENGTH.
    """
    if isinstance(key_length, bool) or not isinstance(key_length, numbers.Integral):
        raise TypeError(f"Key length should be an integer, not {type(key_length)}.")
    if key_length <= 0:
        raise InvalidLengthError(
            f"generate_key_material: requested key length {key_length}, which is not positive."
        )
    if key_length % 2:
        raise InvalidConfigurationError(
            f"generate_key_material: key length {key_length} is odd, while n should be the "
            f"product of two primes of equal bit length."
        )
    if key_length < MIN_KEY_LENGTH:
        raise InvalidConfigurationError(
            f"generate_key_material: key length {key_length} is smaller than the minimum of "
            f"{MIN_KEY_LENGTH} bits."
        )
    if key_length & (key_length - 1):
        warnings.warn(
            WARN_KEY_LENGTH_NOT_POWER_OF_TWO.format(key_length=key_length),
            EncryptionSchemeWarning,
            stacklevel=3,
        )


def generate_key_material(
    key_length: int = DEFAULT_KEY_LENGTH,
    primality_rounds: int = DEFAULT_PRIMALITY_ROUNDS,
) -> PaillierKeyPair:
    r"""
    Method to generate key material (PaillierPublicKey and PaillierSecretKey).

    Draws distinct primes $p, q$ of key_length / 2 bits until $n = pq$ has exactly key_length
    bits, constructs a random generator $g$ and derives $\lambda = \text{lcm}(p-1, q-1)$ and
    $\mu = L(g^\lambda \mod n^2)^{-1} \mod n$.

    :param key_length: Bit length of the public key $n$.
    :param primality_rounds: Number of Miller-Rabin rounds for the prime search.
    :raise KeyInvariantViolationError: When the generated $g$ does not yield a valid $\mu$.
    :return: PaillierKeyPair with the public key and the secret key.
    """
    validate_key_length(key_length)
    prime_length = key_length // 2

    attempts = 0
    while True:
        attempts += 1
        p = prime_of_bit_length(prime_length, primality_rounds)
        q = prime_of_bit_length(prime_length, primality_rounds)
        n = p * q
        if p != q and n.bit_length() == key_length:
            break
    logger.debug(
        "Found primes for a %d-bit modulus after %d attempt(s).", key_length, attempts
    )

    n_squared = n**2
    g = get_generator(n, n_squared)
    lambda_ = lcm(p - 1, q - 1)
    try:
        mu = mod_inv(func_l(pow_mod(g, lambda_, n_squared), n), n)
    except (ValueError, ZeroDivisionError) as exc:
        raise KeyInvariantViolationError(
            f"generate_key_material: generator does not yield an invertible L(g^lambda mod n^2) "
            f"for the {key_length}-bit modulus n."
        ) from exc
    return PaillierKeyPair(
        PaillierPublicKey(n, g), PaillierSecretKey(lambda_, mu, n, p, q)
    )

