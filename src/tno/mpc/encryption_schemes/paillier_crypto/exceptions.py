"""
Custom exceptions and warnings for the Paillier cryptosystem.
"""

from tno.mpc.encryption_schemes.templates import (
    EncryptionSchemeWarning as EncryptionSchemeWarning,
)

WARN_KEY_LENGTH_NOT_POWER_OF_TWO = (
    "Key length {key_length} is not a power of two. This may cause some trouble, consider "
    "changing the key length."
)


class PaillierCryptoError(Exception):
    """
    Base class for all errors raised by this package.
    """


class InvalidLengthError(PaillierCryptoError, ValueError):
    """
    Raised when a non-positive bit length is requested.
    """


class InvalidConfigurationError(PaillierCryptoError, ValueError):
    """
    Raised when the scheme or its keys are configured inconsistently, e.g. an odd key length
    or a secret key without a public key.
    """


class KeyInvariantViolationError(PaillierCryptoError, ArithmeticError):
    """
    Raised when key material violates the algebraic relations of the Paillier scheme.
    """


class RangeViolationError(PaillierCryptoError, ValueError):
    """
    Raised when a value lies outside of its required domain.
    """


class DecodingError(PaillierCryptoError, ValueError):
    """
    Raised when an integer does not represent a valid UTF-8 byte sequence.
    """
