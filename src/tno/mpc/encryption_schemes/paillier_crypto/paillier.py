"""
Crypto context for the Asymmetric Encryption Scheme known as Paillier.
"""

from __future__ import annotations

import logging
import threading

from tno.mpc.encryption_schemes.paillier_crypto import cipher
from tno.mpc.encryption_schemes.paillier_crypto.exceptions import (
    InvalidConfigurationError,
)
from tno.mpc.encryption_schemes.paillier_crypto.keys import (
    DEFAULT_KEY_LENGTH,
    PaillierKeyPair,
    PaillierPublicKey,
    PaillierSecretKey,
    SerializedPaillierKeyPair,
    SerializedPaillierPublicKey,
    SerializedPaillierSecretKey,
    check_key_pair,
    func_l,
    generate_key_material,
    get_generator,
    validate_key_length,
)
from tno.mpc.encryption_schemes.paillier_crypto.utils import DEFAULT_PRIMALITY_ROUNDS

logger = logging.getLogger(__name__)


class Paillier:
    """
    Paillier Encryption Scheme bound to at most one key pair. The context either holds a full
    key pair, only a public key (encryption only) or no keys at all until generate_keys is
    called.

    Keys are immutable and are replaced as a whole: generating keys, changing the key length or
    injecting a public key discards the keys that were bound before. Every cryptographic
    operation reads the bound keys once, so a concurrent key replacement never mixes two key
    epochs within a single call.
    """

    func_l = staticmethod(func_l)
    get_generator = staticmethod(get_generator)

    def __init__(
        self,
        public_key: PaillierPublicKey | None = None,
        secret_key: PaillierSecretKey | None = None,
        key_length: int = DEFAULT_KEY_LENGTH,
        strict: bool = False,
        primality_rounds: int = DEFAULT_PRIMALITY_ROUNDS,
    ):
        """
        Construct a new Paillier context.

        :param public_key: Public key for this Paillier context. Its modulus determines the key
            length.
        :param secret_key: Secret key for this Paillier context, requires the matching public key.
        :param key_length: Bit length of $n$ for keys generated by this context, when no public key
            is given.
        :param strict: Default for requiring a blinding factor that is coprime to $n$ during
            encryption.
        :param primality_rounds: Number of Miller-Rabin rounds used in the prime search.
        :raise InvalidConfigurationError: When a secret key is given without a public key, or the
            key length is invalid.
        :raise KeyInvariantViolationError: When the given keys do not belong together.
        """
        validate_key_length(key_length)
        self._key_length = (
            key_length if public_key is None else public_key.n.bit_length()
        )
        self.strict = strict
        self.primality_rounds = primality_rounds
        self._lock = threading.Lock()
        if secret_key is not None:
            if public_key is None:
                raise InvalidConfigurationError(
                    "Paillier: a secret key can only be bound together with its public key."
                )
            check_key_pair(public_key, secret_key)
        self._keys: tuple[PaillierPublicKey | None, PaillierSecretKey | None] = (
            public_key,
            secret_key,
        )

    @classmethod
    def from_security_parameter(
        cls,
        key_length: int = DEFAULT_KEY_LENGTH,
        strict: bool = False,
        primality_rounds: int = DEFAULT_PRIMALITY_ROUNDS,
    ) -> Paillier:
        """
        Construct a Paillier context with freshly generated keys.

        :param key_length: Bit length of the public key $n$.
        :param strict: Default for requiring a blinding factor that is coprime to $n$.
        :param primality_rounds: Number of Miller-Rabin rounds used in the prime search.
        :return: Paillier context with a bound key pair.
        """
        scheme = cls(
            key_length=key_length, strict=strict, primality_rounds=primality_rounds
        )
        scheme.generate_keys()
        return scheme

    def __repr__(self) -> str:
        public_key, secret_key = self._keys
        return (
            f"{type(self).__name__}(key_length={self._key_length}, strict={self.strict}, "
            f"has_public_key={public_key is not None}, has_secret_key={secret_key is not None})"
        )

    # region Key management

    @property
    def key_length(self) -> int:
        """
        Bit length of $n$ of the bound public key, which is also used for keys generated by this
        context.
        """
        return self._key_length

    @property
    def public_key(self) -> PaillierPublicKey | None:
        """
        Currently bound public key, if any.
        """
        return self._keys[0]

    @property
    def secret_key(self) -> PaillierSecretKey | None:
        """
        Currently bound secret key, if any.
        """
        return self._keys[1]

    def change_key_length(self, key_length: int) -> None:
        """
        Change the bit length for subsequently generated keys. The currently bound keys belong to
        the old length and are discarded.

        :param key_length: New bit length of $n$.
        """
        validate_key_length(key_length)
        with self._lock:
            self._key_length = key_length
            self._keys = (None, None)
        logger.debug("Key length changed to %d bits, keys discarded.", key_length)

    def generate_keys(self, key_length: int | None = None) -> PaillierKeyPair:
        """
        Generate a new key pair and bind it to this context, replacing the current keys.

        :param key_length: Optional new bit length of $n$, see change_key_length.
        :return: The newly generated key pair.
        """
        if key_length is None:
            key_length = self._key_length
        else:
            self.change_key_length(key_length)
        key_pair = generate_key_material(key_length, self.primality_rounds)
        with self._lock:
            self._key_length = key_length
            self._keys = (key_pair.public_key, key_pair.secret_key)
        logger.debug("Bound a freshly generated %d-bit key pair.", key_length)
        return key_pair

    def set_public_key(self, n: int, g: int) -> PaillierPublicKey:
        """
        Bind an externally issued public key $(n, g)$; $n^2$ is derived automatically. Any bound
        secret key is discarded, as it belongs to the previous public key.

        :param n: Modulus $n$ of the plaintext space.
        :param g: Plaintext base $g$ for encryption.
        :return: The bound public key.
        """
        public_key = PaillierPublicKey(n=n, g=g)
        with self._lock:
            self._key_length = n.bit_length()
            self._keys = (public_key, None)
        return public_key

    def set_secret_key(
        self, lambda_: int, mu: int, p: int | None = None, q: int | None = None
    ) -> PaillierSecretKey:
        r"""
        Bind an externally issued secret key $(\lambda, \mu)$ to the bound public key.

        :param lambda_: Decryption exponent $\lambda$.
        :param mu: Decryption divisor $\mu$.
        :param p: First prime factor of $n$, if known.
        :param q: Second prime factor of $n$, if known.
        :raise InvalidConfigurationError: When no public key is bound.
        :raise KeyInvariantViolationError: When the secret key does not match the public key.
        :return: The bound secret key.
        """
        with self._lock:
            public_key = self._keys[0]
            if public_key is None:
                raise InvalidConfigurationError(
                    "set_secret_key: bind the matching public key with set_public_key first."
                )
            secret_key = PaillierSecretKey(lambda_=lambda_, mu=mu, n=public_key.n, p=p, q=q)
            check_key_pair(public_key, secret_key)
            self._keys = (public_key, secret_key)
        return secret_key

    def get_public_key(self) -> PaillierPublicKey:
        """
        :raise InvalidConfigurationError: When no public key is bound.
        :return: The bound public key.
        """
        return self._require_public_key("get_public_key")

    def get_secret_key(self) -> PaillierSecretKey:
        """
        :raise InvalidConfigurationError: When no secret key is bound.
        :return: The bound secret key.
        """
        return self._require_secret_key("get_secret_key")

    def get_keys(self) -> PaillierKeyPair:
        """
        :raise InvalidConfigurationError: When no full key pair is bound.
        :return: The bound key pair.
        """
        public_key, secret_key = self._keys
        if public_key is None or secret_key is None:
            raise InvalidConfigurationError("get_keys: no key pair is bound.")
        return PaillierKeyPair(public_key, secret_key)

    def get_public_key_str(self) -> SerializedPaillierPublicKey:
        """
        :return: The bound public key with every field as a decimal string.
        """
        return self.get_public_key().serialize(decimal_strings=True)

    def get_secret_key_str(self) -> SerializedPaillierSecretKey:
        """
        :return: The bound secret key with every field as a decimal string.
        """
        return self.get_secret_key().serialize(decimal_strings=True)

    def get_keys_str(self) -> SerializedPaillierKeyPair:
        """
        :return: The bound key pair with every field as a decimal string.
        """
        return self.get_keys().serialize(decimal_strings=True)

    def _require_public_key(self, operation: str) -> PaillierPublicKey:
        public_key = self._keys[0]
        if public_key is None:
            raise InvalidConfigurationError(f"{operation}: no public key is bound.")
        return public_key

    def _require_secret_key(self, operation: str) -> PaillierSecretKey:
        secret_key = self._keys[1]
        if secret_key is None:
            raise InvalidConfigurationError(f"{operation}: no secret key is bound.")
        return secret_key

    # endregion

    # region Cryptographic operations

    def encrypt(self, plaintext: int, strict: bool | None = None) -> int:
        """
        Encrypt a plaintext with the bound public key.

        :param plaintext: Plaintext message in $[0, n)$.
        :param strict: Require a blinding factor coprime to $n$, defaults to the context setting.
        :return: Ciphertext in $[0, n^2)$.
        """
        return cipher.encrypt(
            self._require_public_key("encrypt"),
            plaintext,
            strict=self.strict if strict is None else strict,
        )

    def decrypt(self, ciphertext: int) -> int:
        """
        Decrypt a ciphertext with the bound secret key.

        :param ciphertext: Ciphertext in $[0, n^2)$.
        :return: Plaintext in $[0, n)$.
        """
        return cipher.decrypt(self._require_secret_key("decrypt"), ciphertext)

    def encrypt_text(self, text: str, strict: bool | None = None) -> int:
        """
        Encrypt a text with the bound public key.

        :param text: Text to encrypt.
        :param strict: Require a blinding factor coprime to $n$, defaults to the context setting.
        :return: Ciphertext of the text.
        """
        return cipher.encrypt_text(
            self._require_public_key("encrypt_text"),
            text,
            strict=self.strict if strict is None else strict,
        )

    def decrypt_text(self, ciphertext: int) -> str:
        """
        Decrypt a ciphertext of a text with the bound secret key.

        :param ciphertext: Ciphertext produced by encrypt_text.
        :return: Decrypted text.
        """
        return cipher.decrypt_text(self._require_secret_key("decrypt_text"), ciphertext)

    def add(self, ciphertext: int, other: int) -> int:
        """
        Secure addition of two ciphertexts under the bound public key.

        :param ciphertext: First ciphertext.
        :param other: Second ciphertext.
        :return: Ciphertext of the sum of both plaintexts modulo $n$.
        """
        return cipher.add(self._require_public_key("add"), ciphertext, other)

    # endregion
