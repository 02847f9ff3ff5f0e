"""Miller-Rabin probabilistic primality test."""

from __future__ import annotations

import random
import secrets
from typing import Optional

from .config import settings


_SYSTEM_RANDOM = secrets.SystemRandom()


def _decompose(n: int) -> tuple[int, int]:
    """Write n - 1 = 2**s * d with d odd; returns (s, d)."""
    d = n - 1
    s = 0
    while d % 2 == 0:
        d //= 2
        s += 1
    return s, d


def _witness_passes(a: int, s: int, d: int, n: int) -> bool:
    x = pow(a, d, n)
    if x in (1, n - 1):
        return True
    for _ in range(s - 1):
        x = pow(x, 2, n)
        if x == n - 1:
            return True
        if x == 1:
            # Non-trivial square root of 1: a is a compositeness witness.
            return False
    return False


def is_probably_prime(
    n: int,
    rounds: Optional[int] = None,
    *,
    rng: Optional[random.Random] = None,
) -> bool:
    """Return True if `n` survives `rounds` Miller-Rabin rounds.

    A composite survives a single round with probability at most 1/4, so the
    false-positive rate is bounded by 4**-rounds. Witnesses are drawn from the
    OS CSPRNG unless `rng` is supplied.
    """
    if rounds is None:
        rounds = settings.miller_rabin_rounds
    if rounds < 1:
        raise ValueError("rounds must be >= 1")

    if n <= 1 or n == 4:
        return False
    if n <= 3:
        return True
    if n % 2 == 0:
        return False

    rng = rng or _SYSTEM_RANDOM
    s, d = _decompose(n)
    for _ in range(rounds):
        a = rng.randint(2, n - 2)
        if not _witness_passes(a, s, d, n):
            return False
    return True
