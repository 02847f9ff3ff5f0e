"""Persisted key record layout.

Public record:  ``n`` then ``e``, one base-10 integer per line.
Private record: ``n`` then ``d``, one base-10 integer per line.
No header, no versioning, no integrity check.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Tuple, Union

from .errors import MalformedCiphertext, MalformedKeyRecord
from .keys import KeyPair, PrivateKey, PublicKey


logger = logging.getLogger(__name__)


PathLike = Union[str, os.PathLike]


def _is_decimal(field: str) -> bool:
    return field.isascii() and field.isdigit()


def _dump_record(first: int, second: int) -> str:
    return f"{first}\n{second}\n"


def _parse_record(text: str, kind: str, second_name: str) -> Tuple[int, int]:
    fields = text.split()
    if len(fields) != 2:
        raise MalformedKeyRecord(
            f"{kind} key record must hold exactly 2 fields (n, {second_name}); found {len(fields)}.",
            detail={"kind": kind, "fields": len(fields)},
        )
    bad = [name for name, raw in zip(("n", second_name), fields) if not _is_decimal(raw)]
    if bad:
        raise MalformedKeyRecord(
            f"{kind} key record field(s) {', '.join(bad)} are not base-10 integers.",
            detail={"kind": kind, "fields": bad},
        )
    n, exponent = (int(raw, 10) for raw in fields)
    if n < 3 or exponent < 1:
        raise MalformedKeyRecord(
            f"{kind} key record holds out-of-range values.",
            detail={"kind": kind},
        )
    return n, exponent


def dump_public_key(key: PublicKey) -> str:
    return _dump_record(key.n, key.e)


def dump_private_key(key: PrivateKey) -> str:
    return _dump_record(key.n, key.d)


def load_public_key(text: str) -> PublicKey:
    n, e = _parse_record(text, "public", "e")
    return PublicKey(n=n, e=e)


def load_private_key(text: str) -> PrivateKey:
    n, d = _parse_record(text, "private", "d")
    return PrivateKey(n=n, d=d)


# ----------------------------
# Files
# ----------------------------


def _staging_path(path: Path) -> Path:
    return path.with_name(f".{path.name}.tmp")


def _stage(path: Path, text: str, mode: int) -> Path:
    """Write ``text`` next to ``path`` in a file created with ``mode``."""
    staged = _staging_path(path)
    staged.unlink(missing_ok=True)
    fd = os.open(staged, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
    with os.fdopen(fd, "w", encoding="ascii") as fh:
        fh.write(text)
    return staged


def write_keypair(keypair: KeyPair, public_path: PathLike, private_path: PathLike) -> Tuple[Path, Path]:
    """Write both records of one generation run.

    Both records are staged first and only moved into place once both writes
    succeeded, so the files on disk never hold different moduli. The private
    record is created owner-only. Concurrent writers targeting the same paths
    are not coordinated: last writer wins.
    """
    pub = Path(public_path)
    priv = Path(private_path)
    try:
        staged_pub = _stage(pub, dump_public_key(keypair.public), 0o644)
        staged_priv = _stage(priv, dump_private_key(keypair.private), 0o600)
    except OSError:
        for path in (pub, priv):
            _staging_path(path).unlink(missing_ok=True)
        raise
    os.replace(staged_pub, pub)
    os.replace(staged_priv, priv)
    logger.info("key files written", extra={"public_path": str(pub), "private_path": str(priv)})
    return pub, priv


def _read(path: PathLike, kind: str) -> str:
    p = Path(path)
    try:
        return p.read_text(encoding="ascii")
    except FileNotFoundError as exc:
        raise MalformedKeyRecord(
            f"{kind} key file not found: {p}",
            detail={"kind": kind, "path": str(p)},
        ) from exc
    except UnicodeDecodeError as exc:
        raise MalformedKeyRecord(
            f"{kind} key file is not ASCII text: {p}",
            detail={"kind": kind, "path": str(p)},
        ) from exc


def read_public_key(path: PathLike) -> PublicKey:
    return load_public_key(_read(path, "public"))


def read_private_key(path: PathLike) -> PrivateKey:
    return load_private_key(_read(path, "private"))


# ----------------------------
# Ciphertext transport
# ----------------------------


def format_ciphertext(value: int) -> str:
    return str(value)


def parse_ciphertext(text: str) -> int:
    raw = text.strip()
    if not _is_decimal(raw):
        raise MalformedCiphertext(
            "Ciphertext must be a single base-10 integer.",
            detail={"length": len(raw)},
        )
    return int(raw, 10)
