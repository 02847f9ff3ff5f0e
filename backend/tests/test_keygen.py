import logging
import random

import pytest

from tinyrsa import keygen
from tinyrsa.errors import InvalidKeySize, NoInverseExists, PrimeSearchExhausted
from tinyrsa.keygen import PUBLIC_EXPONENT, generate_keypair, random_candidate, search_prime, split_key_bits
from tinyrsa.models import ErrorCode
from tinyrsa.primality import is_probably_prime


@pytest.fixture(scope="module")
def keypair_1024():
    return generate_keypair(1024, rounds=8, rng=random.Random(2024))


@pytest.mark.parametrize("bits,expected", [(512, (256, 256)), (1024, (512, 512)), (2048, (1024, 1024)), (4096, (2048, 2048))])
def test_split_key_bits(bits, expected):
    assert split_key_bits(bits) == expected


@pytest.mark.parametrize("bits", [0, 256, 768, 1023, 3072, 8192])
def test_invalid_key_size_rejected(bits):
    with pytest.raises(InvalidKeySize) as excinfo:
        generate_keypair(bits)
    assert excinfo.value.code == ErrorCode.INVALID_KEY_SIZE
    assert excinfo.value.detail["bits"] == bits


def test_invalid_key_size_does_not_search(monkeypatch):
    def fail_search(*args, **kwargs):
        raise AssertionError("prime search must not run for an invalid size")

    monkeypatch.setattr(keygen, "search_prime", fail_search)
    with pytest.raises(InvalidKeySize):
        generate_keypair(768)


def test_random_candidate_forces_bits():
    rng = random.Random(99)
    for bits in (8, 64, 256, 512):
        for _ in range(25):
            c = random_candidate(bits, rng)
            assert c.bit_length() == bits
            assert c >> (bits - 2) == 0b11
            assert c & 1 == 1


def test_random_candidate_all_zero_draw():
    class ZeroRng:
        def getrandbits(self, k):
            return 0

    assert random_candidate(8, ZeroRng()) == 0b11000001


def test_keypair_1024_shape(keypair_1024):
    kp = keypair_1024
    assert kp.p.bit_length() == 512
    assert kp.q.bit_length() == 512
    assert kp.n.bit_length() in (1023, 1024)
    assert kp.n == kp.p * kp.q
    assert kp.p != kp.q


def test_keypair_exponents(keypair_1024):
    kp = keypair_1024
    assert kp.e == PUBLIC_EXPONENT == 65537
    assert kp.phi == (kp.p - 1) * (kp.q - 1)
    assert (kp.e * kp.d) % kp.phi == 1
    assert 0 < kp.d < kp.phi


def test_keypair_primes_are_probable_primes(keypair_1024):
    assert is_probably_prime(keypair_1024.p, rounds=16)
    assert is_probably_prime(keypair_1024.q, rounds=16)


def test_public_and_private_views_share_modulus(keypair_1024):
    pub = keypair_1024.public
    priv = keypair_1024.private
    assert pub.n == priv.n == keypair_1024.n
    assert pub.e == keypair_1024.e
    assert priv.d == keypair_1024.d


def test_repr_hides_secrets(keypair_1024):
    text = repr(keypair_1024)
    assert str(keypair_1024.d) not in text
    assert str(keypair_1024.p) not in text
    assert str(keypair_1024.d) not in repr(keypair_1024.private)


def test_search_prime_steps_by_two(monkeypatch):
    seen: list[int] = []

    def fake_is_prime(n, rounds=None, *, rng=None):
        seen.append(n)
        return len(seen) == 4

    monkeypatch.setattr(keygen, "is_probably_prime", fake_is_prime)
    monkeypatch.setattr(keygen, "_has_small_factor", lambda n: False)

    p = search_prime(64, rounds=1, max_steps=10, rng=random.Random(5))
    assert p == seen[-1]
    assert [b - a for a, b in zip(seen, seen[1:])] == [2, 2, 2]


def test_search_prime_exhausted(monkeypatch):
    calls = {"n": 0}

    def never_prime(n, rounds=None, *, rng=None):
        calls["n"] += 1
        return False

    monkeypatch.setattr(keygen, "is_probably_prime", never_prime)
    monkeypatch.setattr(keygen, "_has_small_factor", lambda n: False)

    with pytest.raises(PrimeSearchExhausted) as excinfo:
        search_prime(64, rounds=1, max_steps=5, rng=random.Random(0))
    assert calls["n"] == 5
    assert excinfo.value.code == ErrorCode.PRIME_SEARCH_EXHAUSTED
    assert excinfo.value.detail == {"prime_bits": 64, "max_steps": 5}


def test_generate_keypair_propagates_exhaustion(monkeypatch):
    monkeypatch.setattr(keygen, "is_probably_prime", lambda n, rounds=None, *, rng=None: False)
    with pytest.raises(PrimeSearchExhausted):
        generate_keypair(512, max_steps=3)


def test_search_prime_redraws_on_overflow():
    # Every 4-bit candidate is 13 or 15; 15 + 2 overflows to 5 bits and must be redrawn.
    rng = random.Random(3)
    for _ in range(20):
        assert search_prime(4, rounds=4, max_steps=100, rng=rng) == 13


def test_no_inverse_aborts_generation(monkeypatch):
    # phi = (2*65537) * 6 is a multiple of e, so e has no inverse.
    values = iter([2 * 65537 + 1, 7])
    monkeypatch.setattr(keygen, "search_prime", lambda bits, **kwargs: next(values))

    with pytest.raises(NoInverseExists) as excinfo:
        generate_keypair(512)
    assert excinfo.value.code == ErrorCode.NO_INVERSE_EXISTS


def test_equal_primes_are_redrawn(monkeypatch):
    values = iter([1000003, 1000003, 1000033])
    monkeypatch.setattr(keygen, "search_prime", lambda bits, **kwargs: next(values))

    kp = generate_keypair(512)
    assert (kp.p, kp.q) == (1000003, 1000033)


def test_generation_logs_without_secrets(caplog):
    with caplog.at_level(logging.INFO, logger="tinyrsa.keygen"):
        kp = generate_keypair(512, rounds=8)
    records = [r for r in caplog.records if r.name == "tinyrsa.keygen" and r.getMessage() == "key pair generated"]
    assert len(records) == 1
    assert records[0].modulus_bits == kp.bits
    assert str(kp.d) not in caplog.text
