"""
Generation of random integers and random primes for the Paillier cryptosystem.

Every draw takes fresh entropy from the operating system through the secrets module, so there is
no seed that could be reused or observed by a caller. All generators are rejection loops over
uniform draws; rejected candidates are simply retried.
"""

from __future__ import annotations

import numbers
import secrets

from tno.mpc.encryption_schemes.paillier_crypto.exceptions import (
    InvalidLengthError,
    RangeViolationError,
)
from tno.mpc.encryption_schemes.paillier_crypto.utils import (
    DEFAULT_PRIMALITY_ROUNDS,
    is_prime,
)


def _check_bit_length(bit_length: int, operation: str, minimum: int = 1) -> None:
    if isinstance(bit_length, bool) or not isinstance(bit_length, numbers.Integral):
        raise TypeError(
            f"{operation}: bit length should be an integer, not {type(bit_length)}."
        )
    if bit_length < minimum:
        raise InvalidLengthError(
            f"{operation}: requested bit length {bit_length}, but at least {minimum} bit(s) "
            f"are required."
        )


def random_bits(bit_length: int) -> int:
    r"""
    Draw a uniformly random non-negative integer of at most bit_length bits.

    :param bit_length: Number of random bits, should be positive.
    :raise TypeError: When bit_length is not an integer.
    :raise InvalidLengthError: When bit_length is not positive.
    :return: Uniformly random integer in $[0, 2^{bit\_length})$.
    """
    _check_bit_length(bit_length, "random_bits")
    return secrets.randbits(int(bit_length))


def prime_of_bit_length(
    bit_length: int, rounds: int = DEFAULT_PRIMALITY_ROUNDS
) -> int:
    r"""
    Draw a random prime whose bit length is exactly bit_length.

    :param bit_length: Bit length of the prime, at least 2.
    :param rounds: Number of Miller-Rabin rounds a candidate needs to pass.
    :raise TypeError: When bit_length is not an integer.
    :raise InvalidLengthError: When bit_length is smaller than 2.
    :return: A probable prime $p$ with $2^{bit\_length - 1} \leq p < 2^{bit\_length}$.
    """
    _check_bit_length(bit_length, "prime_of_bit_length", minimum=2)
    while True:
        candidate = random_bits(bit_length)
        if candidate.bit_length() == bit_length and is_prime(candidate, rounds):
            return candidate


def prime_less_than(
    bound: int | str, rounds: int = DEFAULT_PRIMALITY_ROUNDS
) -> int:
    r"""
    Draw a random prime that is at most bound. Candidates are drawn with the bit length of bound.

    :param bound: Inclusive upper bound, either an integer or its decimal string representation.
    :param rounds: Number of Miller-Rabin rounds a candidate needs to pass.
    :raise RangeViolationError: When bound is smaller than 2, as no prime exists below it.
    :return: A probable prime $p \leq bound$.
    """
    bound = int(bound)
    if bound < 2:
        raise RangeViolationError(
            f"prime_less_than: no prime exists that is at most {bound}."
        )
    bit_length = bound.bit_length()
    while True:
        candidate = random_bits(bit_length)
        if candidate <= bound and is_prime(candidate, rounds):
            return candidate


def random_between(lower: int, upper: int) -> int:
    r"""
    Draw a uniformly random integer from the inclusive range [lower, upper].

    Candidates have the bit length of upper, so the expected number of draws grows when lower
    is large compared to the range width.

    :param lower: Inclusive lower bound, non-negative.
    :param upper: Inclusive upper bound.
    :raise RangeViolationError: When lower is negative or the range is empty.
    :return: Uniformly random integer $r$ with $lower \leq r \leq upper$.
    """
    if lower < 0 or lower > upper:
        raise RangeViolationError(
            f"random_between: [{lower}, {upper}] is not a non-empty range of non-negative "
            f"integers."
        )
    if lower == upper:
        return int(lower)
    bit_length = int(upper).bit_length()
    while True:
        candidate = random_bits(bit_length)
        if lower <= candidate <= upper:
            return candidate
