"""
Encryption and decryption transforms of the Paillier cryptosystem.

Plaintexts are integers in $[0, n)$ and ciphertexts are integers in $[0, n^2)$. The product of
two ciphertexts modulo $n^2$ decrypts to the sum of their plaintexts modulo $n$.
"""

from __future__ import annotations

import numbers

from tno.mpc.encryption_schemes.utils import pow_mod

from tno.mpc.encryption_schemes.paillier_crypto.encoding import int_to_text, text_to_int
from tno.mpc.encryption_schemes.paillier_crypto.exceptions import RangeViolationError
from tno.mpc.encryption_schemes.paillier_crypto.keys import (
    PaillierPublicKey,
    PaillierSecretKey,
    func_l,
)
from tno.mpc.encryption_schemes.paillier_crypto.randomness import random_between
from tno.mpc.encryption_schemes.paillier_crypto.utils import gcd


def _check_in_range(value: int, upper: int, name: str, operation: str) -> None:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise TypeError(f"{operation}: {name} should be an integer, not {type(value)}.")
    if not 0 <= value < upper:
        raise RangeViolationError(
            f"{operation}: {name} should lie in [0, {upper.bit_length()}-bit bound), got a "
            f"{'negative' if value < 0 else 'too large'} value of {int(value).bit_length()} "
            f"bits."
        )


def sample_blinding_factor(public_key: PaillierPublicKey, strict: bool = False) -> int:
    """
    Draw the blinding factor $r$ for a single encryption, uniformly from $[2, n]$.

    :param public_key: Public key whose modulus bounds $r$.
    :param strict: Redraw until $r$ is coprime to $n$. Otherwise a non-invertible $r$ is
        accepted, which happens with negligible probability for properly sized keys.
    :return: Blinding factor $r$.
    """
    while True:
        r = random_between(2, public_key.n)
        if not strict or gcd(r, public_key.n) == 1:
            return r


def encrypt(public_key: PaillierPublicKey, plaintext: int, strict: bool = False) -> int:
    r"""
    Encrypt a plaintext message $m \in [0, n)$ as $c = g^m \cdot r^n \mod n^2$, with a fresh
    blinding factor $r$. Encrypting the same message twice yields different ciphertexts.

    The plaintext is not reduced modulo $n$; it is the caller's responsibility to do so.

    :param public_key: Public key to encrypt with.
    :param plaintext: Plaintext message $m$.
    :param strict: Require a blinding factor that is coprime to $n$.
    :raise TypeError: When plaintext is not an integer.
    :raise RangeViolationError: When plaintext is outside of $[0, n)$.
    :return: Ciphertext $c \in [0, n^2)$.
    """
    _check_in_range(plaintext, public_key.n, "plaintext", "encrypt")
    n_squared = public_key.n_squared
    r = sample_blinding_factor(public_key, strict)
    return (
        pow_mod(public_key.g, plaintext, n_squared)
        * pow_mod(r, public_key.n, n_squared)
        % n_squared
    )


def decrypt(secret_key: PaillierSecretKey, ciphertext: int) -> int:
    r"""
    Decrypt a ciphertext $c \in \mathbb{Z}^*_{n^2}$ to its plaintext
    $m = L(c^\lambda \mod n^2) \cdot \mu \mod n$.

    :param secret_key: Secret key to decrypt with.
    :param ciphertext: Ciphertext $c$.
    :raise TypeError: When ciphertext is not an integer.
    :raise RangeViolationError: When ciphertext is outside of $[0, n^2)$, or is not invertible
        modulo $n$ and therefore not produced by encrypt.
    :return: Plaintext $m \in [0, n)$.
    """
    n = secret_key.n
    n_squared = secret_key.n_squared
    _check_in_range(ciphertext, n_squared, "ciphertext", "decrypt")
    c_lambda = pow_mod(ciphertext, secret_key.lambda_, n_squared)
    try:
        m = func_l(c_lambda, n)
    except RangeViolationError as exc:
        raise RangeViolationError(
            f"decrypt: ciphertext is not a unit modulo the {n.bit_length()}-bit modulus n."
        ) from exc
    m *= secret_key.mu
    m %= n
    return m


def add(public_key: PaillierPublicKey, ciphertext: int, other: int) -> int:
    r"""
    Secure addition: combine ciphertexts $c_1, c_2$ into $c' = c_1 \cdot c_2 \mod n^2$, which
    decrypts to the sum of both plaintexts modulo $n$.

    :param public_key: Public key both ciphertexts were encrypted with.
    :param ciphertext: First ciphertext $c_1$.
    :param other: Second ciphertext $c_2$.
    :raise RangeViolationError: When a ciphertext is outside of $[0, n^2)$.
    :return: Ciphertext $c'$ of the sum.
    """
    n_squared = public_key.n_squared
    _check_in_range(ciphertext, n_squared, "ciphertext", "add")
    _check_in_range(other, n_squared, "other", "add")
    return ciphertext * other % n_squared


def encrypt_text(public_key: PaillierPublicKey, text: str, strict: bool = False) -> int:
    """
    Encrypt a text through its integer representation.

    :param public_key: Public key to encrypt with.
    :param text: Text to encrypt. Its UTF-8 encoding should be numerically smaller than $n$.
    :param strict: Require a blinding factor that is coprime to $n$.
    :raise RangeViolationError: When the text is too long for the modulus.
    :return: Ciphertext of the text.
    """
    return encrypt(public_key, text_to_int(text), strict=strict)


def decrypt_text(secret_key: PaillierSecretKey, ciphertext: int) -> str:
    """
    Decrypt a ciphertext that was produced by encrypt_text.

    :param secret_key: Secret key to decrypt with.
    :param ciphertext: Ciphertext of a text.
    :raise DecodingError: When the plaintext is not valid UTF-8.
    :return: Decrypted text.
    """
    return int_to_text(decrypt(secret_key, ciphertext))
