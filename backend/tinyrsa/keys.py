from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class PublicKey:
    n: int
    e: int

    @property
    def bits(self) -> int:
        return self.n.bit_length()


@dataclass(frozen=True)
class PrivateKey:
    n: int
    d: int = field(repr=False)

    @property
    def bits(self) -> int:
        return self.n.bit_length()


@dataclass(frozen=True)
class KeyPair:
    """Result of one generation run.

    `public` and `private` are the two serialization views; they are derived
    from the same fields, so they always share the modulus.
    """

    n: int
    e: int
    d: int = field(repr=False)
    p: int = field(repr=False)
    q: int = field(repr=False)
    phi: int = field(repr=False)

    @property
    def public(self) -> PublicKey:
        return PublicKey(n=self.n, e=self.e)

    @property
    def private(self) -> PrivateKey:
        return PrivateKey(n=self.n, d=self.d)

    @property
    def bits(self) -> int:
        return self.n.bit_length()
