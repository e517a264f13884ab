"""
Conversion between text and the integers that the Paillier scheme encrypts.

Text is represented by its UTF-8 bytes, read as an unsigned big-endian integer. The conversion
back uses the minimal unsigned big-endian byte representation, so leading zero bytes (U+0000
characters at the start of a text) do not survive a round trip.
"""

from __future__ import annotations

from tno.mpc.encryption_schemes.paillier_crypto.exceptions import (
    DecodingError,
    RangeViolationError,
)


def bytes_to_int(data: bytes) -> int:
    """
    Interpret a byte string as an unsigned big-endian integer.

    :param data: Bytes to convert.
    :return: Non-negative integer with the same big-endian magnitude.
    """
    return int.from_bytes(data, "big", signed=False)


def int_to_bytes(value: int) -> bytes:
    """
    Minimal unsigned big-endian byte representation of a non-negative integer.

    :param value: Integer to convert.
    :raise RangeViolationError: When value is negative.
    :return: Byte string without leading zero bytes; empty for zero.
    """
    if value < 0:
        raise RangeViolationError(
            f"int_to_bytes: only non-negative integers have an unsigned representation, "
            f"got a negative value of {int(value).bit_length()} bits."
        )
    value = int(value)
    return value.to_bytes((value.bit_length() + 7) // 8, "big", signed=False)


def text_to_int(text: str) -> int:
    """
    Encode a text as an integer, such that it can be encrypted.

    :param text: Text to encode.
    :raise TypeError: When text is not a string.
    :return: Integer representation of the UTF-8 encoding of text.
    """
    if not isinstance(text, str):
        raise TypeError(f"Expected a string to encode, got {type(text)}.")
    return bytes_to_int(text.encode("utf-8"))


def int_to_text(value: int) -> str:
    """
    Decode an integer that was produced by text_to_int back into a text.

    :param value: Integer to decode.
    :raise RangeViolationError: When value is negative.
    :raise DecodingError: When the bytes of value are not valid UTF-8.
    :return: Decoded text.
    """
    data = int_to_bytes(value)
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecodingError(
            f"int_to_text: the {len(data)} byte(s) of the {int(value).bit_length()}-bit value "
            f"are not valid UTF-8."
        ) from exc
