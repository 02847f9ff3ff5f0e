"""RSA key-pair generation.

Primes are found by drawing a random odd candidate with its top two bits set
and stepping it by 2 until it passes Miller-Rabin. Setting the top two bits of
both primes guarantees the product has exactly the requested bit length.
"""

from __future__ import annotations

import logging
import random
import secrets
import time
from typing import Optional, Tuple

from .arith import modinv
from .config import ALLOWED_KEY_SIZES, settings
from .errors import InvalidKeySize, PrimeSearchExhausted
from .keys import KeyPair
from .primality import is_probably_prime


logger = logging.getLogger(__name__)

PUBLIC_EXPONENT = 65537

_SMALL_PRIMES = (
    3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41, 43,
    47, 53, 59, 61, 67, 71, 73, 79, 83, 89, 97,
)

_SYSTEM_RANDOM = secrets.SystemRandom()


def split_key_bits(total_bits: int) -> Tuple[int, int]:
    """Split a modulus size into (p_bits, q_bits)."""
    if total_bits not in ALLOWED_KEY_SIZES:
        raise InvalidKeySize(
            f"Unsupported key size {total_bits}; expected one of {ALLOWED_KEY_SIZES}.",
            detail={"bits": total_bits, "allowed": list(ALLOWED_KEY_SIZES)},
        )
    p_bits = total_bits // 2
    return p_bits, total_bits - p_bits


def random_candidate(bits: int, rng: Optional[random.Random] = None) -> int:
    """Random odd integer of exactly `bits` bits with the two top bits set."""
    if bits < 3:
        raise ValueError("bits must be >= 3")
    rng = rng or _SYSTEM_RANDOM
    candidate = rng.getrandbits(bits)
    candidate |= 1 << (bits - 1)
    candidate |= 1 << (bits - 2)
    candidate |= 1
    return candidate


def _has_small_factor(candidate: int) -> bool:
    for p in _SMALL_PRIMES:
        if candidate == p:
            return False
        if candidate % p == 0:
            return True
    return False


def search_prime(
    bits: int,
    *,
    rounds: Optional[int] = None,
    max_steps: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> int:
    """Find a probable prime of exactly `bits` bits.

    Raises PrimeSearchExhausted after `max_steps` candidates.
    """
    if rounds is None:
        rounds = settings.miller_rabin_rounds
    if max_steps is None:
        max_steps = settings.prime_search_max_steps
    rng = rng or _SYSTEM_RANDOM

    candidate = random_candidate(bits, rng)
    for step in range(max_steps):
        if candidate.bit_length() > bits:
            # Stepping carried past 2**bits; start over from a fresh draw.
            candidate = random_candidate(bits, rng)
        if not _has_small_factor(candidate) and is_probably_prime(candidate, rounds, rng=rng):
            logger.debug("prime accepted", extra={"prime_bits": bits, "steps": step + 1})
            return candidate
        candidate += 2

    raise PrimeSearchExhausted(
        f"No probable prime of {bits} bits found within {max_steps} candidates.",
        detail={"prime_bits": bits, "max_steps": max_steps},
    )


def generate_keypair(
    total_bits: int,
    *,
    rounds: Optional[int] = None,
    max_steps: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> KeyPair:
    """Generate an RSA key pair with a `total_bits`-bit modulus and e=65537.

    Does not verify gcd(e, phi) == 1 up front: a non-invertible e surfaces as
    NoInverseExists rather than a silent retry.
    """
    p_bits, q_bits = split_key_bits(total_bits)
    t0 = time.perf_counter()

    p = search_prime(p_bits, rounds=rounds, max_steps=max_steps, rng=rng)
    q = search_prime(q_bits, rounds=rounds, max_steps=max_steps, rng=rng)
    while q == p:
        q = search_prime(q_bits, rounds=rounds, max_steps=max_steps, rng=rng)

    n = p * q
    phi = (p - 1) * (q - 1)
    e = PUBLIC_EXPONENT
    d = modinv(e, phi)

    logger.info(
        "key pair generated",
        extra={
            "key_bits": total_bits,
            "modulus_bits": n.bit_length(),
            "runtime_ms": round((time.perf_counter() - t0) * 1000, 2),
        },
    )
    return KeyPair(n=n, e=e, d=d, p=p, q=q, phi=phi)
