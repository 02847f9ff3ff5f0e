from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


ALLOWED_KEY_SIZES: tuple[int, ...] = (512, 1024, 2048, 4096)


class TinyRsaSettings(BaseSettings):
    """Environment-backed configuration for tinyrsa."""

    model_config = SettingsConfigDict(
        env_prefix="TINYRSA_",
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
    )

    # Primality / prime search
    miller_rabin_rounds: int = Field(
        default=40,
        ge=1,
        description="Miller-Rabin rounds per candidate; error probability <= 4**-rounds.",
    )
    prime_search_max_steps: int = Field(
        default=100_000,
        ge=1,
        description="Candidates examined per prime before giving up with PrimeSearchExhausted.",
    )
    default_key_bits: int = Field(default=2048, description="Key size used when --bits is omitted")

    # Key files
    public_key_path: str = Field(default="rsa.pub")
    private_key_path: str = Field(default="rsa")

    # Logging
    log_level: str = Field(default="WARNING")
    log_json: bool = Field(default=True, description="Emit JSON log lines instead of plain text")

    @field_validator("default_key_bits")
    @classmethod
    def _validate_default_key_bits(cls, value: int) -> int:
        if value not in ALLOWED_KEY_SIZES:
            raise ValueError(f"TINYRSA_DEFAULT_KEY_BITS must be one of {ALLOWED_KEY_SIZES}")
        return value

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        return value.strip().upper()


settings = TinyRsaSettings()
