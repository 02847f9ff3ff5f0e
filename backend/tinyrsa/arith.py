"""Integer helpers layered on top of Python's arbitrary-precision ints."""

from __future__ import annotations

from typing import Tuple

from .errors import NoInverseExists


def egcd(a: int, b: int) -> Tuple[int, int, int]:
    """Extended Euclidean algorithm: returns (g, x, y) s.t. ax + by = g = gcd(a,b)."""
    # Iterative: the recursive form overflows the default recursion limit on 4096-bit operands.
    old_r, r = a, b
    old_x, x = 1, 0
    old_y, y = 0, 1
    while r != 0:
        q = old_r // r
        old_r, r = r, old_r - q * r
        old_x, x = x, old_x - q * x
        old_y, y = y, old_y - q * y
    if old_r < 0:
        return (-old_r, -old_x, -old_y)
    return (old_r, old_x, old_y)


def modinv(a: int, m: int) -> int:
    """Modular inverse of a modulo m, in [0, m)."""
    if m <= 1:
        raise NoInverseExists(f"No modular inverse modulo m={m}.", detail={"modulus": m})
    g, x, _ = egcd(a % m, m)
    if g != 1:
        raise NoInverseExists(
            f"No modular inverse for a={a} mod m (gcd={g}).",
            detail={"gcd": g},
        )
    return x % m
