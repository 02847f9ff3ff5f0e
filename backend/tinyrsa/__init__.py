"""Minimal textbook RSA: key generation, encryption and decryption."""

from .cipher import decrypt, decrypt_bytes, decrypt_text, encrypt, encrypt_text
from .codec import decode, decode_bytes, encode, encode_bytes
from .errors import (
    InvalidKeySize,
    MalformedCiphertext,
    MalformedKeyRecord,
    MessageTooLarge,
    NoInverseExists,
    PrimeSearchExhausted,
    TinyRsaError,
)
from .keygen import PUBLIC_EXPONENT, generate_keypair
from .keys import KeyPair, PrivateKey, PublicKey
from .primality import is_probably_prime

__all__ = [
    "InvalidKeySize",
    "KeyPair",
    "MalformedCiphertext",
    "MalformedKeyRecord",
    "MessageTooLarge",
    "NoInverseExists",
    "PUBLIC_EXPONENT",
    "PrimeSearchExhausted",
    "PrivateKey",
    "PublicKey",
    "TinyRsaError",
    "decode",
    "decode_bytes",
    "decrypt",
    "decrypt_bytes",
    "decrypt_text",
    "encode",
    "encode_bytes",
    "encrypt",
    "encrypt_text",
    "generate_keypair",
    "is_probably_prime",
]
