"""
This module tests the generation, validation and serialization of Paillier key material.
"""

from __future__ import annotations

import logging

import pytest

from tno.mpc.encryption_schemes.paillier_crypto import (
    InvalidConfigurationError,
    InvalidLengthError,
    KeyInvariantViolationError,
    PaillierKeyPair,
    PaillierPublicKey,
    PaillierSecretKey,
    RangeViolationError,
    generate_key_material,
    keys,
)
from tno.mpc.encryption_schemes.paillier_crypto.exceptions import (
    WARN_KEY_LENGTH_NOT_POWER_OF_TWO,
)
from tno.mpc.encryption_schemes.paillier_crypto.keys import (
    MIN_KEY_LENGTH,
    func_l,
    get_generator,
    validate_key_length,
)
from tno.mpc.encryption_schemes.paillier_crypto.test import conditional_pywarn
from tno.mpc.encryption_schemes.paillier_crypto.utils import is_prime, lcm


def test_generated_key_satisfies_paillier_invariants(key_pair: PaillierKeyPair) -> None:
    """
    Test that generated key material satisfies all algebraic relations of the scheme.

    :param key_pair: Key pair under test.
    """
    public_key, secret_key = key_pair.public_key, key_pair.secret_key
    n, g = public_key.n, public_key.g
    p, q = secret_key.p, secret_key.q
    assert p is not None and q is not None

    assert p != q
    assert p.bit_length() == q.bit_length()
    assert is_prime(p) and is_prime(q)
    assert p * q == n == secret_key.n
    assert public_key.n_squared == n * n == secret_key.n_squared
    assert 0 < g < public_key.n_squared
    assert secret_key.lambda_ == lcm(p - 1, q - 1)
    assert (p - 1) * (q - 1) % secret_key.lambda_ == 0
    l_value = func_l(pow(g, secret_key.lambda_, public_key.n_squared), n)
    assert l_value * secret_key.mu % n == 1


@pytest.mark.parametrize("key_length", [64, 128, 256, 512])
def test_generated_modulus_has_requested_bit_length(key_length: int) -> None:
    """
    Test that the modulus has exactly the requested bit length.

    :param key_length: Requested key length.
    """
    key_pair = generate_key_material(key_length)
    assert key_pair.public_key.n.bit_length() == key_length


def test_generated_keys_differ() -> None:
    """
    Test that two independent key generations do not yield the same modulus.
    """
    assert generate_key_material(128).public_key != generate_key_material(128).public_key


@pytest.mark.parametrize("key_length", [0, -2, -512])
def test_non_positive_key_length_raises_invalidlengtherror(key_length: int) -> None:
    """
    Test that non-positive key lengths are rejected.

    :param key_length: Invalid key length.
    """
    with pytest.raises(InvalidLengthError):
        generate_key_material(key_length)


@pytest.mark.parametrize("key_length", [511, 129, 7, 2, 4, 6, 8, 16, 62])
def test_unsupported_key_length_raises_invalidconfigurationerror(
    key_length: int,
) -> None:
    """
    Test that odd or too small key lengths are rejected.

    :param key_length: Invalid key length.
    """
    with pytest.raises(InvalidConfigurationError):
        generate_key_material(key_length)


@pytest.mark.parametrize("key_length", [512.0, "512", None])
def test_non_integer_key_length_raises_typeerror(key_length: object) -> None:
    """
    Test that key lengths of the wrong type are rejected.

    :param key_length: Key length of an invalid type.
    """
    with pytest.raises(TypeError):
        validate_key_length(key_length)  # type: ignore[arg-type]


@pytest.mark.parametrize("key_length", [64, 96, 128, 192, 256])
def test_key_length_not_power_of_two_warns(key_length: int) -> None:
    """
    Test that only key lengths that are not a power of two trigger an advisory warning.

    :param key_length: Requested key length.
    """
    with conditional_pywarn(
        bool(key_length & (key_length - 1)),
        WARN_KEY_LENGTH_NOT_POWER_OF_TWO.format(key_length=key_length),
    ):
        key_pair = generate_key_material(key_length)
    assert key_pair.public_key.n.bit_length() == key_length


def test_key_generation_logs_prime_search(caplog: pytest.LogCaptureFixture) -> None:
    """
    Test that the prime search is traced at debug level.

    :param caplog: Pytest log capturing fixture.
    """
    caplog.set_level(
        logging.DEBUG, logger="tno.mpc.encryption_schemes.paillier_crypto.keys"
    )
    generate_key_material(64)
    assert any("64-bit modulus" in record.getMessage() for record in caplog.records)


def test_minimum_key_length_generates_reliably() -> None:
    """
    Test that the smallest accepted key length does not run into the fatal generator path.
    """
    for _ in range(50):
        key_pair = generate_key_material(MIN_KEY_LENGTH)
        assert key_pair.public_key.n.bit_length() == MIN_KEY_LENGTH


@pytest.mark.parametrize(
    "generator",
    [lambda n, n_squared=None: n, lambda n, n_squared=None: 1],
    ids=["l_not_exact", "l_not_invertible"],
)
def test_unusable_generator_raises_keyinvariantviolationerror(
    monkeypatch: pytest.MonkeyPatch, generator: object
) -> None:
    r"""
    Test that key generation fails when $L(g^\lambda \mod n^2)$ has a remainder or no inverse
    modulo n.

    :param monkeypatch: Pytest monkeypatch fixture.
    :param generator: Replacement for get_generator.
    """
    monkeypatch.setattr(keys, "get_generator", generator)
    with pytest.raises(KeyInvariantViolationError):
        generate_key_material(64)


def test_func_l_divides_exactly() -> None:
    """
    Test the L-function on an input that is congruent to one.
    """
    assert func_l(1 + 5 * 7, 7) == 5
    assert func_l(1, 7) == 0


def test_func_l_with_remainder_raises_rangeviolationerror() -> None:
    """
    Test that the L-function refuses to truncate.
    """
    with pytest.raises(RangeViolationError):
        func_l(3, 7)


def test_generator_lies_in_group(small_key_pair: PaillierKeyPair) -> None:
    """
    Test that a freshly constructed generator is usable with the existing lambda.

    :param small_key_pair: Key pair under test.
    """
    public_key, secret_key = small_key_pair.public_key, small_key_pair.secret_key
    g = get_generator(public_key.n)
    assert 0 < g < public_key.n_squared
    l_value = func_l(
        pow(g, secret_key.lambda_, public_key.n_squared), public_key.n
    )
    assert 0 < l_value < public_key.n


def test_key_pair_unpacks_to_public_and_secret_key(
    small_key_pair: PaillierKeyPair,
) -> None:
    """
    Test that a key pair unpacks as (public_key, secret_key).

    :param small_key_pair: Key pair under test.
    """
    public_key, secret_key = small_key_pair
    assert public_key is small_key_pair.public_key
    assert secret_key is small_key_pair.secret_key


def test_mixing_key_pairs_raises_keyinvariantviolationerror(
    small_key_pair: PaillierKeyPair,
) -> None:
    """
    Test that halves of independently generated key pairs cannot be combined.

    :param small_key_pair: Key pair under test.
    """
    other_key_pair = generate_key_material(128)
    with pytest.raises(KeyInvariantViolationError):
        PaillierKeyPair(small_key_pair.public_key, other_key_pair.secret_key)


def test_inconsistent_mu_raises_keyinvariantviolationerror(
    small_key_pair: PaillierKeyPair,
) -> None:
    """
    Test that a secret key with a wrong mu is rejected for the public key.

    :param small_key_pair: Key pair under test.
    """
    secret_key = small_key_pair.secret_key
    wrong_mu = secret_key.mu + 1 if secret_key.mu + 1 < secret_key.n else 1
    with pytest.raises(KeyInvariantViolationError):
        PaillierKeyPair(
            small_key_pair.public_key,
            PaillierSecretKey(lambda_=secret_key.lambda_, mu=wrong_mu, n=secret_key.n),
        )


@pytest.mark.parametrize(
    "n, g, error",
    [
        (1, 1, InvalidConfigurationError),
        (10, 0, InvalidConfigurationError),
        (10, 100, InvalidConfigurationError),
        (10.0, 3, TypeError),
        (10, "3", TypeError),
    ],
)
def test_invalid_public_key_is_rejected(n: object, g: object, error: type) -> None:
    """
    Test that public keys outside of their domain are rejected.

    :param n: Modulus.
    :param g: Generator.
    :param error: Expected error.
    """
    with pytest.raises(error):
        PaillierPublicKey(n=n, g=g)  # type: ignore[arg-type]


def test_secret_key_with_single_factor_raises_invalidconfigurationerror() -> None:
    """
    Test that a secret key cannot be constructed with only one of its prime factors.
    """
    with pytest.raises(InvalidConfigurationError):
        PaillierSecretKey(lambda_=60, mu=2, n=143, p=11)


def test_secret_key_with_wrong_factors_raises_keyinvariantviolationerror() -> None:
    """
    Test that the prime factors need to match the modulus and lambda.
    """
    with pytest.raises(KeyInvariantViolationError):
        PaillierSecretKey(lambda_=60, mu=2, n=143, p=11, q=17)
    with pytest.raises(KeyInvariantViolationError):
        PaillierSecretKey(lambda_=120, mu=2, n=143, p=11, q=13)


@pytest.mark.parametrize("lambda_, mu", [(0, 2), (60, 0), (60, 143)])
def test_secret_key_out_of_range_raises_invalidconfigurationerror(
    lambda_: int, mu: int
) -> None:
    """
    Test that lambda and mu need to lie in their domains.

    :param lambda_: Decryption exponent.
    :param mu: Decryption divisor.
    """
    with pytest.raises(InvalidConfigurationError):
        PaillierSecretKey(lambda_=lambda_, mu=mu, n=143)


def test_secret_key_repr_hides_secret_values(small_key_pair: PaillierKeyPair) -> None:
    """
    Test that the representation of a secret key does not disclose its secret values.

    :param small_key_pair: Key pair under test.
    """
    secret_key = small_key_pair.secret_key
    representation = repr(secret_key)
    assert str(secret_key.mu) not in representation
    assert str(secret_key.lambda_) not in representation
    assert str(secret_key.p) not in representation


@pytest.mark.parametrize("decimal_strings", [False, True])
def test_serialization_public_key_produces_equal_key(
    small_key_pair: PaillierKeyPair, decimal_strings: bool
) -> None:
    """
    Test to determine whether the public key serialization works properly.

    :param small_key_pair: Key pair under test.
    :param decimal_strings: Whether to export decimal strings.
    """
    public_key = small_key_pair.public_key
    serialized = public_key.serialize(decimal_strings)
    assert set(serialized) == {"n", "n2", "g"}
    assert PaillierPublicKey.deserialize(serialized) == public_key


@pytest.mark.parametrize("decimal_strings", [False, True])
def test_serialization_secret_key_produces_equal_key(
    small_key_pair: PaillierKeyPair, decimal_strings: bool
) -> None:
    """
    Test to determine whether the secret key serialization works properly.

    :param small_key_pair: Key pair under test.
    :param decimal_strings: Whether to export decimal strings.
    """
    secret_key = small_key_pair.secret_key
    serialized = secret_key.serialize(decimal_strings)
    assert set(serialized) == {"lambda", "mu", "p", "q", "n", "n2"}
    secret_key_prime = PaillierSecretKey.deserialize(serialized)
    assert secret_key_prime == secret_key
    assert secret_key_prime.p == secret_key.p
    assert secret_key_prime.q == secret_key.q


def test_serialization_key_pair_with_decimal_strings(
    small_key_pair: PaillierKeyPair,
) -> None:
    """
    Test that the decimal string export contains canonical decimal strings and imports back.

    :param small_key_pair: Key pair under test.
    """
    serialized = small_key_pair.serialize(decimal_strings=True)
    assert serialized["public_key"]["n"] == str(small_key_pair.public_key.n)
    assert serialized["secret_key"]["mu"] == str(small_key_pair.secret_key.mu)
    assert all(
        isinstance(value, str)
        for key in (serialized["public_key"], serialized["secret_key"])
        for value in key.values()
    )
    assert PaillierKeyPair.deserialize(serialized) == small_key_pair


def test_serialization_secret_key_without_factors_omits_them() -> None:
    """
    Test that unknown prime factors are not exported.
    """
    serialized = PaillierSecretKey(lambda_=60, mu=2, n=143).serialize()
    assert "p" not in serialized and "q" not in serialized
    assert PaillierSecretKey.deserialize(serialized).p is None


def test_deserialization_with_wrong_square_raises_keyinvariantviolationerror(
    small_key_pair: PaillierKeyPair,
) -> None:
    """
    Test that an imported n2 has to match n.

    :param small_key_pair: Key pair under test.
    """
    serialized = small_key_pair.public_key.serialize()
    serialized["n2"] = int(serialized["n2"]) + 1
    with pytest.raises(KeyInvariantViolationError):
        PaillierPublicKey.deserialize(serialized)
