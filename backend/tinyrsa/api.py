"""FastAPI router exposing key generation, encryption and decryption.

Add this router into an existing FastAPI app:

    from tinyrsa.api import router as rsa_router
    app.include_router(rsa_router)

Endpoints:
  - GET  /api/rsa/health
  - POST /api/rsa/keys
  - POST /api/rsa/encrypt
  - POST /api/rsa/decrypt

Integers travel as base-10 strings, the same transport the CLI uses.
"""

from __future__ import annotations

import time
import uuid

from fastapi import APIRouter, FastAPI, HTTPException, status

from . import cipher, codec, keystore
from .config import ALLOWED_KEY_SIZES, settings
from .errors import TinyRsaError
from .keygen import generate_keypair
from .logging_utils import configure_json_logging, get_logger, log_context
from .models import (
    DecryptRequest,
    DecryptResponse,
    EncryptRequest,
    EncryptResponse,
    ErrorCode,
    ErrorReport,
    HealthResponse,
    KeyGenRequest,
    KeyGenResponse,
)


logger = get_logger(__name__)

router = APIRouter(prefix="/api/rsa", tags=["rsa"])


def _raise_http(exc: TinyRsaError) -> None:
    logger.warning("request rejected", extra={"error_code": exc.code.value})
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.to_report().as_detail()) from exc


def _bad_request(message: str) -> None:
    report = ErrorReport(error_code=ErrorCode.INVALID_REQUEST, error_message=message)
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=report.as_detail())


# ----------------------------
# Routes
# ----------------------------


@router.get("/health", response_model=HealthResponse)
def rsa_health() -> HealthResponse:
    return HealthResponse(
        allowed_key_sizes=list(ALLOWED_KEY_SIZES),
        miller_rabin_rounds=settings.miller_rabin_rounds,
    )


@router.post("/keys", response_model=KeyGenResponse)
def rsa_keys(req: KeyGenRequest) -> KeyGenResponse:
    with log_context(operation="gen", request_id=str(uuid.uuid4())):
        t0 = time.perf_counter()
        try:
            keypair = generate_keypair(req.bits, rounds=req.rounds)
        except TinyRsaError as exc:
            _raise_http(exc)
        return KeyGenResponse(
            bits=req.bits,
            modulus_bits=keypair.bits,
            n=str(keypair.n),
            e=str(keypair.e),
            d=str(keypair.d),
            public_record=keystore.dump_public_key(keypair.public),
            private_record=keystore.dump_private_key(keypair.private),
            runtime_ms=(time.perf_counter() - t0) * 1000,
        )


@router.post("/encrypt", response_model=EncryptResponse)
def rsa_encrypt(req: EncryptRequest) -> EncryptResponse:
    if (req.message is None) == (req.message_int is None):
        _bad_request("Provide exactly one of 'message' or 'message_int'.")

    with log_context(operation="encrypt", request_id=str(uuid.uuid4())):
        try:
            public_key = keystore.load_public_key(f"{req.n}\n{req.e}\n")
            if req.message is not None:
                c = cipher.encrypt_text(req.message, public_key)
            else:
                c = cipher.encrypt(int(req.message_int), public_key)
        except TinyRsaError as exc:
            _raise_http(exc)
        return EncryptResponse(ciphertext=keystore.format_ciphertext(c))


@router.post("/decrypt", response_model=DecryptResponse)
def rsa_decrypt(req: DecryptRequest) -> DecryptResponse:
    with log_context(operation="decrypt", request_id=str(uuid.uuid4())):
        try:
            private_key = keystore.load_private_key(f"{req.n}\n{req.d}\n")
            m = cipher.decrypt(keystore.parse_ciphertext(req.ciphertext), private_key)
        except TinyRsaError as exc:
            _raise_http(exc)
        return DecryptResponse(plaintext_int=str(m), plaintext_text=codec.try_decode(m))


def create_app() -> FastAPI:
    configure_json_logging(settings.log_level, json_lines=settings.log_json)
    app = FastAPI(title="tinyrsa", version="0.1.0")
    app.include_router(router)
    return app


app = create_app()
