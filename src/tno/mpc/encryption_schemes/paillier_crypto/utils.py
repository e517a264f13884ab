"""
Number-theoretic helpers backed by gmpy2 that complement tno.mpc.encryption_schemes.utils.

All functions accept Python integers (or gmpy2 integers) and return Python integers, so that
gmpy2 types never leak into key material or ciphertexts.
"""

from __future__ import annotations

import gmpy2

DEFAULT_PRIMALITY_ROUNDS = 25


def gcd(first: int, second: int) -> int:
    """
    Greatest common divisor of two integers.
    """
    return int(gmpy2.gcd(first, second))


def lcm(first: int, second: int) -> int:
    """
    Least common multiple of two positive integers. The first argument is divided by the gcd
    before multiplying to keep the intermediate result small.

    :param first: First integer.
    :param second: Second integer.
    :return: $lcm(first, second)$.
    """
    return first // gcd(first, second) * second


def is_prime(candidate: int, rounds: int = DEFAULT_PRIMALITY_ROUNDS) -> bool:
    """
    Probabilistic primality test (trial division followed by Miller-Rabin).

    :param candidate: Integer to test.
    :param rounds: Number of Miller-Rabin rounds.
    :return: False if candidate is composite, True if it is prime with high probability.
    """
    return bool(gmpy2.is_prime(candidate, rounds))
