"""
Command line front end for subtleshield.

    subtleshield encrypt-text "hello world" --secret correct-horse
    subtleshield decrypt-text 9f86d0...   --secret correct-horse
    subtleshield encrypt-file notes.txt -o notes.txt.enc
    subtleshield decrypt-file notes.txt.enc -o notes.txt

Options not given on the command line fall back to ``SUBTLESHIELD_*``
environment variables (see :meth:`ShieldConfig.from_env`). The secret is read
from ``--secret``, then ``SUBTLESHIELD_SECRET``, then an interactive prompt.
"""

from __future__ import annotations

import argparse
import asyncio
import getpass
import logging
import sys
from typing import List, Optional

from subtleshield.core.config import FORMAT_PADDED, FORMAT_SEALED, ShieldConfig
from subtleshield.core.exceptions import ShieldError
from subtleshield.core.shield import SubtleShield
from .logging_config import configure_logging

logger = logging.getLogger(__name__)


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="subtleshield",
        description="Passphrase-based AES-CBC / AES-GCM encryption for text and files.",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0, help="-v for info, -vv for debug logs")
    parser.add_argument("--secret", default=None, help="Passphrase (default: $SUBTLESHIELD_SECRET or prompt)")
    parser.add_argument("--algorithm", choices=["AES-CBC", "AES-GCM"], default=None)
    parser.add_argument("--key-length", type=int, choices=[128, 192, 256], default=None)
    parser.add_argument("--tag-length", type=int, default=None, help="AES-GCM tag length in bits")
    parser.add_argument("--encoding", default=None, help="hex, base64, base64url or latin1")
    parser.add_argument("--iterations", type=int, default=None, help="PBKDF2 iterations")
    parser.add_argument("--salt", type=int, default=None, help="Salt / padding length in bytes")
    parser.add_argument("--format", dest="frame_format", choices=[FORMAT_SEALED, FORMAT_PADDED], default=None)

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("encrypt-text", help="Encrypt a string and print the encoded result")
    p.add_argument("text")
    p = sub.add_parser("decrypt-text", help="Decrypt an encoded string and print the text")
    p.add_argument("text")

    for name, help_text in (("encrypt-file", "Encrypt a file"), ("decrypt-file", "Decrypt a file")):
        p = sub.add_parser(name, help=f"{help_text} (in place unless -o is given)")
        p.add_argument("path")
        p.add_argument("-o", "--output", default=None, help="Output path (default: overwrite input)")

    return parser


def _resolve_secret(args: argparse.Namespace, config: ShieldConfig) -> str:
    if args.secret:
        return args.secret
    if config.secret_key:
        return config.secret_key
    return getpass.getpass("Passphrase: ")


async def _run(args: argparse.Namespace) -> None:
    config = ShieldConfig.from_env(
        algorithm=args.algorithm,
        key_length=args.key_length,
        tag_length=args.tag_length,
        encoding=args.encoding,
        iterations=args.iterations,
        salt=args.salt,
        frame_format=args.frame_format,
    )
    shield = SubtleShield(config)
    shield.set_secret_key(_resolve_secret(args, config))

    if args.command == "encrypt-text":
        print(await shield.encrypt_text(args.text))
    elif args.command == "decrypt-text":
        print(await shield.decrypt_text(args.text))
    elif args.command == "encrypt-file":
        await shield.encrypt_file(args.path, args.output)
        print(f"Encrypted {args.path} -> {args.output or args.path}")
    elif args.command == "decrypt-file":
        await shield.decrypt_file(args.path, args.output)
        print(f"Decrypted {args.path} -> {args.output or args.path}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_arg_parser()
    args = parser.parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    configure_logging(level)

    try:
        asyncio.run(_run(args))
    except ShieldError as e:
        logger.debug("command failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
