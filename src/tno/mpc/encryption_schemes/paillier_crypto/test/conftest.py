"""
Fixtures for Paillier tests
"""

import pytest

from tno.mpc.encryption_schemes.paillier_crypto import (
    Paillier,
    PaillierKeyPair,
    generate_key_material,
)

KEY_LENGTHS = [256, 512, 1024]


@pytest.fixture(
    name="key_pair",
    params=KEY_LENGTHS,
    ids=[f"{key_length}_bits" for key_length in KEY_LENGTHS],
    scope="module",
)
def fixture_key_pair(request: pytest.FixtureRequest) -> PaillierKeyPair:
    """
    Generates key pairs of all key lengths under test.

    :param request: Pytest request fixture.
    :return: Freshly generated key pair.
    """
    return generate_key_material(key_length=request.param)


@pytest.fixture(name="small_key_pair", scope="module")
def fixture_small_key_pair() -> PaillierKeyPair:
    """
    Generates a small key pair for tests that do not depend on the key length.

    :return: Freshly generated 128-bit key pair.
    """
    return generate_key_material(key_length=128)


@pytest.fixture(name="scheme")
def fixture_scheme() -> Paillier:
    """
    Constructs a Paillier context with a bound key pair.

    :return: Initialized Paillier context.
    """
    return Paillier.from_security_parameter(key_length=128)
