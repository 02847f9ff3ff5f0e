"""Message <-> integer codec.

Byte i of the message contributes ``byte << (8 * i)``: little-endian packing
with no length prefix. Decoding emits the minimal number of bytes for the
integer, so a message ending in NUL bytes does not survive a round trip.
"""

from __future__ import annotations

from typing import Optional, Union

from .errors import MessageTooLarge


def encode_bytes(data: bytes) -> int:
    return int.from_bytes(bytes(data), byteorder="little", signed=False)


def decode_bytes(value: int) -> bytes:
    if value < 0:
        raise ValueError("message integer must be non-negative")
    length = (value.bit_length() + 7) // 8
    return value.to_bytes(length, byteorder="little", signed=False)


def encode(message: Union[str, bytes]) -> int:
    """Encode text (UTF-8) or raw bytes into a single integer."""
    if isinstance(message, str):
        message = message.encode("utf-8")
    return encode_bytes(message)


def decode(value: int) -> str:
    """Decode an integer back into UTF-8 text; raises UnicodeDecodeError on invalid data."""
    return decode_bytes(value).decode("utf-8")


def try_decode(value: int) -> Optional[str]:
    """Attempt to decode an integer as UTF-8.

    Returns None if decoding fails.
    """
    if value < 0:
        return None
    try:
        return decode(value)
    except UnicodeDecodeError:
        return None


def max_message_bytes(modulus: int) -> int:
    """Longest message, in bytes, that always encodes below `modulus`."""
    return max(0, (modulus.bit_length() - 1) // 8)


def ensure_fits(value: int, modulus: int) -> int:
    if value >= modulus:
        raise MessageTooLarge(
            f"Encoded message needs {value.bit_length()} bits but the modulus is "
            f"{modulus.bit_length()} bits; at most {max_message_bytes(modulus)} bytes fit.",
            detail={
                "message_bits": value.bit_length(),
                "modulus_bits": modulus.bit_length(),
                "max_message_bytes": max_message_bytes(modulus),
            },
        )
    return value


def encode_for(message: Union[str, bytes], modulus: int) -> int:
    """Encode `message` and check that it is strictly below `modulus`."""
    return ensure_fits(encode(message), modulus)
