from __future__ import annotations

from typing import Optional

from .models import ErrorCode, ErrorReport


class TinyRsaError(RuntimeError):
    """Base class for every failure the RSA core reports to its callers."""

    default_code: ErrorCode = ErrorCode.INTERNAL_ERROR
    default_hint: Optional[str] = None

    def __init__(
        self,
        message: str,
        *,
        code: Optional[ErrorCode] = None,
        action_hint: str | None = None,
        detail: dict | None = None,
    ) -> None:
        self.code = code or self.default_code
        self.action_hint = action_hint or self.default_hint
        self.detail = detail or {}
        super().__init__(message)

    def to_report(self) -> ErrorReport:
        return ErrorReport(
            error_code=self.code,
            error_message=str(self),
            error_detail=self.detail or None,
            action_hint=self.action_hint,
        )


class InvalidKeySize(TinyRsaError):
    """Requested key size is not in the allow-list."""

    default_code = ErrorCode.INVALID_KEY_SIZE
    default_hint = "Use one of 512, 1024, 2048 or 4096 bits."


class NoInverseExists(TinyRsaError):
    """The value has no inverse modulo the given modulus (gcd != 1)."""

    default_code = ErrorCode.NO_INVERSE_EXISTS
    default_hint = "Generate a new key pair; the chosen primes are unusable with e=65537."


class MessageTooLarge(TinyRsaError):
    """Encoded operand is not strictly below the modulus."""

    default_code = ErrorCode.MESSAGE_TOO_LARGE
    default_hint = "Shorten the message or use a larger key size."


class MalformedKeyRecord(TinyRsaError):
    """A persisted key record is missing fields or holds non-integer data."""

    default_code = ErrorCode.MALFORMED_KEY_RECORD
    default_hint = "Regenerate the key files with `tinyrsa gen`."


class MalformedCiphertext(TinyRsaError):
    """Ciphertext transport is not a base-10 integer."""

    default_code = ErrorCode.MALFORMED_CIPHERTEXT


class PrimeSearchExhausted(TinyRsaError):
    """Prime search hit its step cap without finding a probable prime."""

    default_code = ErrorCode.PRIME_SEARCH_EXHAUSTED
    default_hint = "Retry generation or raise TINYRSA_PRIME_SEARCH_MAX_STEPS."
