from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from .config import settings


class ErrorCode(str, Enum):
    """Structured error code taxonomy surfaced by the CLI and the HTTP API."""

    INVALID_KEY_SIZE = "INVALID_KEY_SIZE"
    NO_INVERSE_EXISTS = "NO_INVERSE_EXISTS"
    MESSAGE_TOO_LARGE = "MESSAGE_TOO_LARGE"
    MALFORMED_KEY_RECORD = "MALFORMED_KEY_RECORD"
    MALFORMED_CIPHERTEXT = "MALFORMED_CIPHERTEXT"
    PRIME_SEARCH_EXHAUSTED = "PRIME_SEARCH_EXHAUSTED"
    INVALID_REQUEST = "INVALID_REQUEST"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ErrorReport(BaseModel):
    """Uniform error payload surfaced to operators, logs, and API clients."""

    error_code: ErrorCode
    error_message: str
    error_detail: Optional[dict] = None
    action_hint: Optional[str] = Field(
        default=None,
        description="Operator hint for recovering from the failure.",
    )

    def as_detail(self) -> dict:
        """Flatten into the `detail` body of an HTTP error."""

        detail = dict(self.error_detail or {})
        detail.setdefault("code", self.error_code.value)
        detail.setdefault("message", self.error_message)
        if self.action_hint:
            detail.setdefault("action_hint", self.action_hint)
        return detail


def _decimal_field(value: str) -> str:
    value = value.strip()
    if not (value.isascii() and value.isdigit()):
        raise ValueError("must be a non-negative base-10 integer string")
    return value


# ----------------------------
# HTTP request / response models
# ----------------------------


class KeyGenRequest(BaseModel):
    bits: int = Field(
        default_factory=lambda: settings.default_key_bits,
        description="Total modulus size: 512 | 1024 | 2048 | 4096",
    )
    rounds: Optional[int] = Field(
        None,
        ge=1,
        le=256,
        description="Miller-Rabin rounds per candidate (defaults to TINYRSA_MILLER_RABIN_ROUNDS).",
    )


class KeyGenResponse(BaseModel):
    bits: int
    modulus_bits: int
    n: str
    e: str
    d: str
    public_record: str
    private_record: str
    runtime_ms: float


class EncryptRequest(BaseModel):
    n: str = Field(..., description="Modulus as a decimal string")
    e: str = Field(..., description="Public exponent as a decimal string")
    message: Optional[str] = Field(None, description="UTF-8 text to encrypt")
    message_int: Optional[str] = Field(None, description="Pre-encoded message integer as a decimal string")

    @field_validator("n", "e")
    @classmethod
    def _check_key_fields(cls, value: str) -> str:
        return _decimal_field(value)

    @field_validator("message_int")
    @classmethod
    def _check_message_int(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else _decimal_field(value)


class EncryptResponse(BaseModel):
    ciphertext: str


class DecryptRequest(BaseModel):
    n: str = Field(..., description="Modulus as a decimal string")
    d: str = Field(..., description="Private exponent as a decimal string")
    ciphertext: str = Field(..., description="Ciphertext as a decimal string")

    @field_validator("n", "d", "ciphertext")
    @classmethod
    def _check_fields(cls, value: str) -> str:
        return _decimal_field(value)


class DecryptResponse(BaseModel):
    plaintext_int: str
    plaintext_text: Optional[str] = None


class HealthResponse(BaseModel):
    ok: bool = True
    allowed_key_sizes: List[int]
    miller_rabin_rounds: int
