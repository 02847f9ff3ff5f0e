"""Textbook RSA transforms.

No padding: equal plaintexts under the same key give equal ciphertexts.
"""

from __future__ import annotations

from typing import Union

from . import codec
from .keys import PrivateKey, PublicKey


def _check_operand(value: int, n: int, name: str) -> None:
    if value < 0:
        raise ValueError(f"{name} must be non-negative")
    codec.ensure_fits(value, n)


def encrypt(message_int: int, public_key: PublicKey) -> int:
    """c = m**e mod n."""
    _check_operand(message_int, public_key.n, "plaintext")
    return pow(message_int, public_key.e, public_key.n)


def decrypt(cipher_int: int, private_key: PrivateKey) -> int:
    """m = c**d mod n."""
    _check_operand(cipher_int, private_key.n, "ciphertext")
    return pow(cipher_int, private_key.d, private_key.n)


def encrypt_text(message: Union[str, bytes], public_key: PublicKey) -> int:
    return encrypt(codec.encode_for(message, public_key.n), public_key)


def decrypt_bytes(cipher_int: int, private_key: PrivateKey) -> bytes:
    return codec.decode_bytes(decrypt(cipher_int, private_key))


def decrypt_text(cipher_int: int, private_key: PrivateKey) -> str:
    return codec.decode(decrypt(cipher_int, private_key))
