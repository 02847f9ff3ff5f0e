"""Command line for tinyrsa.

Usage:
    tinyrsa gen --bits 2048
    tinyrsa encrypt "hello"            # prints the decimal ciphertext
    echo 1234... | tinyrsa decrypt     # writes the plaintext to stdout
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import BinaryIO, List, Optional, TextIO

from . import cipher, keystore
from .config import ALLOWED_KEY_SIZES, settings
from .errors import TinyRsaError
from .keygen import generate_keypair
from .logging_utils import configure_json_logging, log_context


logger = logging.getLogger(__name__)


def _read_input(value: Optional[str], stdin: TextIO) -> bytes:
    """Return the argument or one stdin line as raw bytes, trailing newline stripped."""
    if value is not None:
        return os.fsencode(value)
    buffer: Optional[BinaryIO] = getattr(stdin, "buffer", None)
    if buffer is not None:
        return buffer.readline().rstrip(b"\r\n")
    return stdin.readline().rstrip("\r\n").encode("utf-8", errors="surrogateescape")


def _cmd_gen(args: argparse.Namespace, stdout: TextIO) -> int:
    keypair = generate_keypair(args.bits, rounds=args.rounds)
    pub, priv = keystore.write_keypair(keypair, args.pub, args.priv)

    stdout.write(f"Modulus ({keypair.bits} bits):\n{keypair.n}\n\n")
    stdout.write(f"Public Exponent:\n{keypair.e}\n\n")
    stdout.write(f"Public key written to {pub}\nPrivate key written to {priv}\n")
    return 0


def _cmd_encrypt(args: argparse.Namespace, stdin: TextIO, stdout: TextIO) -> int:
    public_key = keystore.read_public_key(args.pub)
    message = _read_input(args.message, stdin)
    ciphertext = cipher.encrypt_text(message, public_key)
    stdout.write(keystore.format_ciphertext(ciphertext) + "\n")
    return 0


def _cmd_decrypt(args: argparse.Namespace, stdin: TextIO, stdout: TextIO) -> int:
    private_key = keystore.read_private_key(args.priv)
    ciphertext = keystore.parse_ciphertext(_read_input(args.ciphertext, stdin).decode("ascii", errors="replace"))
    plaintext = cipher.decrypt_bytes(ciphertext, private_key)

    # Plaintext is raw bytes; write through the binary buffer when there is one.
    buffer: Optional[BinaryIO] = getattr(stdout, "buffer", None)
    if buffer is not None:
        stdout.flush()
        buffer.write(plaintext + b"\n")
        buffer.flush()
    else:
        stdout.write(plaintext.decode("utf-8", errors="backslashreplace") + "\n")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tinyrsa", description="Minimal textbook RSA: gen, encrypt, decrypt.")
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level (default: %(default)s)")
    parser.add_argument("--plain-logs", action="store_true", help="Plain-text log lines instead of JSON")
    subparsers = parser.add_subparsers(dest="command", required=True)

    p_gen = subparsers.add_parser("gen", help="Generate a key pair and write both key files")
    p_gen.add_argument(
        "--bits",
        type=int,
        default=settings.default_key_bits,
        help=f"Modulus size in bits, one of {', '.join(map(str, ALLOWED_KEY_SIZES))} (default: %(default)s)",
    )
    p_gen.add_argument(
        "--rounds",
        type=int,
        default=settings.miller_rabin_rounds,
        help="Miller-Rabin rounds per prime candidate (default: %(default)s)",
    )
    p_gen.add_argument("--pub", default=settings.public_key_path, help="Public key file (default: %(default)s)")
    p_gen.add_argument("--priv", default=settings.private_key_path, help="Private key file (default: %(default)s)")

    p_enc = subparsers.add_parser("encrypt", help="Encrypt a message with the public key")
    p_enc.add_argument("--pub", default=settings.public_key_path, help="Public key file (default: %(default)s)")
    p_enc.add_argument("message", nargs="?", help="Message text; read from stdin when omitted")

    p_dec = subparsers.add_parser("decrypt", help="Decrypt a ciphertext with the private key")
    p_dec.add_argument("--priv", default=settings.private_key_path, help="Private key file (default: %(default)s)")
    p_dec.add_argument("ciphertext", nargs="?", help="Decimal ciphertext; read from stdin when omitted")

    return parser


def main(
    argv: Optional[List[str]] = None,
    *,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
    stderr: Optional[TextIO] = None,
) -> int:
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    stderr = stderr or sys.stderr

    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == "gen" and args.rounds < 1:
        parser.error("--rounds must be >= 1")

    configure_json_logging(args.log_level.upper(), stream=stderr, json_lines=settings.log_json and not args.plain_logs)

    with log_context(operation=args.command):
        try:
            if args.command == "gen":
                return _cmd_gen(args, stdout)
            if args.command == "encrypt":
                return _cmd_encrypt(args, stdin, stdout)
            return _cmd_decrypt(args, stdin, stdout)
        except TinyRsaError as exc:
            logger.error("operation failed", extra={"error_code": exc.code.value})
            stderr.write(f"error [{exc.code.value}]: {exc}\n")
            if exc.action_hint:
                stderr.write(f"hint: {exc.action_hint}\n")
            return 1


if __name__ == "__main__":
    sys.exit(main())
