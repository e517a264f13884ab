"""
Implementation of the Paillier cryptosystem.
"""

import logging

# Explicit re-export of all functionalities, such that they can be imported properly. Following
# https://www.python.org/dev/peps/pep-0484/#stub-files and
# https://mypy.readthedocs.io/en/stable/command_line.html#cmdoption-mypy-no-implicit-reexport
from tno.mpc.encryption_schemes.paillier_crypto.cipher import add as add
from tno.mpc.encryption_schemes.paillier_crypto.cipher import decrypt as decrypt
from tno.mpc.encryption_schemes.paillier_crypto.cipher import (
    decrypt_text as decrypt_text,
)
from tno.mpc.encryption_schemes.paillier_crypto.cipher import encrypt as encrypt
from tno.mpc.encryption_schemes.paillier_crypto.cipher import (
    encrypt_text as encrypt_text,
)
from tno.mpc.encryption_schemes.paillier_crypto.encoding import (
    int_to_text as int_to_text,
)
from tno.mpc.encryption_schemes.paillier_crypto.encoding import (
    text_to_int as text_to_int,
)
from tno.mpc.encryption_schemes.paillier_crypto.exceptions import (
    DecodingError as DecodingError,
)
from tno.mpc.encryption_schemes.paillier_crypto.exceptions import (
    EncryptionSchemeWarning as EncryptionSchemeWarning,
)
from tno.mpc.encryption_schemes.paillier_crypto.exceptions import (
    InvalidConfigurationError as InvalidConfigurationError,
)
from tno.mpc.encryption_schemes.paillier_crypto.exceptions import (
    InvalidLengthError as InvalidLengthError,
)
from tno.mpc.encryption_schemes.paillier_crypto.exceptions import (
    KeyInvariantViolationError as KeyInvariantViolationError,
)
from tno.mpc.encryption_schemes.paillier_crypto.exceptions import (
    PaillierCryptoError as PaillierCryptoError,
)
from tno.mpc.encryption_schemes.paillier_crypto.exceptions import (
    RangeViolationError as RangeViolationError,
)
from tno.mpc.encryption_schemes.paillier_crypto.keys import (
    PaillierKeyPair as PaillierKeyPair,
)
from tno.mpc.encryption_schemes.paillier_crypto.keys import (
    PaillierPublicKey as PaillierPublicKey,
)
from tno.mpc.encryption_schemes.paillier_crypto.keys import (
    PaillierSecretKey as PaillierSecretKey,
)
from tno.mpc.encryption_schemes.paillier_crypto.keys import (
    generate_key_material as generate_key_material,
)
from tno.mpc.encryption_schemes.paillier_crypto.paillier import Paillier as Paillier

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "1.0.0"
