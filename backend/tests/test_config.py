import pytest
from pydantic import ValidationError

from tinyrsa.config import ALLOWED_KEY_SIZES, TinyRsaSettings


def test_defaults(monkeypatch):
    for name in (
        "TINYRSA_MILLER_RABIN_ROUNDS",
        "TINYRSA_PRIME_SEARCH_MAX_STEPS",
        "TINYRSA_DEFAULT_KEY_BITS",
        "TINYRSA_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)

    s = TinyRsaSettings(_env_file=None)
    assert s.miller_rabin_rounds == 40
    assert s.prime_search_max_steps == 100_000
    assert s.default_key_bits == 2048
    assert s.public_key_path == "rsa.pub"
    assert s.private_key_path == "rsa"
    assert s.log_level == "WARNING"
    assert ALLOWED_KEY_SIZES == (512, 1024, 2048, 4096)


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("TINYRSA_MILLER_RABIN_ROUNDS", "12")
    monkeypatch.setenv("TINYRSA_DEFAULT_KEY_BITS", "1024")
    monkeypatch.setenv("TINYRSA_PUBLIC_KEY_PATH", "keys/alice.pub")
    monkeypatch.setenv("TINYRSA_LOG_LEVEL", "debug")
    monkeypatch.setenv("TINYRSA_LOG_JSON", "false")

    s = TinyRsaSettings(_env_file=None)
    assert s.miller_rabin_rounds == 12
    assert s.default_key_bits == 1024
    assert s.public_key_path == "keys/alice.pub"
    assert s.log_level == "DEBUG"
    assert s.log_json is False


@pytest.mark.parametrize(
    "name,value",
    [
        ("TINYRSA_DEFAULT_KEY_BITS", "768"),
        ("TINYRSA_MILLER_RABIN_ROUNDS", "0"),
        ("TINYRSA_PRIME_SEARCH_MAX_STEPS", "0"),
    ],
)
def test_invalid_values(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValidationError):
        TinyRsaSettings(_env_file=None)
