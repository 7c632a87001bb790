"""Byte-level pipeline shared by the text and file services.

``seal`` goes derive key -> build parameters -> encrypt -> frame, ``open_sealed``
does the reverse. Both take a config snapshot and never touch engine state.
PBKDF2 and the cipher calls run in a worker thread.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Optional

from subtleshield.core.config import AES_GCM, FORMAT_PADDED, FORMAT_SEALED, ShieldConfig
from subtleshield.core.exceptions import FramingError
from .crypto import decrypt_bytes, encrypt_bytes
from .framing import BufferFramer, SealedFramer
from .kdf import generate_salt
from .params import generate_iv, normalize_algorithm, prepare_key_and_algorithm

logger = logging.getLogger(__name__)


def _check_format(config: ShieldConfig) -> str:
    if config.frame_format not in (FORMAT_SEALED, FORMAT_PADDED):
        raise FramingError(f"Unknown frame format {config.frame_format!r}")
    return config.frame_format


def seal_sync(config: ShieldConfig, data: bytes, secret: Optional[str] = None) -> bytes:
    if _check_format(config) == FORMAT_PADDED:
        logger.info("padded format reuses a fixed all-zero IV; the sealed format carries a fresh one")
        key, params = prepare_key_and_algorithm(config, secret)
        ciphertext = encrypt_bytes(data, key, params)
        return BufferFramer(config.salt).frame(ciphertext)

    salt = generate_salt(config.salt)
    iv = generate_iv(config.algorithm)
    key, params = prepare_key_and_algorithm(config, secret, salt=salt, iv=iv)
    header = SealedFramer.header(params, salt)
    aad = header if params.name == AES_GCM else None
    return header + encrypt_bytes(data, key, params, associated_data=aad)


def open_sync(config: ShieldConfig, blob: bytes, secret: Optional[str] = None) -> bytes:
    if _check_format(config) == FORMAT_PADDED:
        key, params = prepare_key_and_algorithm(config, secret)
        return decrypt_bytes(BufferFramer(config.salt).deframe(blob), key, params)

    envelope = SealedFramer.unpack(blob)
    algorithm = normalize_algorithm(config.algorithm)
    if envelope.algorithm != algorithm:
        raise FramingError(f"buffer was sealed with {envelope.algorithm}, configured for {algorithm}")
    if algorithm == AES_GCM and envelope.tag_bytes * 8 != config.tag_length:
        raise FramingError(
            f"buffer carries a {envelope.tag_bytes * 8}-bit tag, configured for {config.tag_length}"
        )
    key, params = prepare_key_and_algorithm(config, secret, salt=envelope.salt, iv=envelope.iv)
    aad = envelope.header if params.name == AES_GCM else None
    return decrypt_bytes(envelope.body, key, params, associated_data=aad)


async def seal(config: ShieldConfig, data: bytes, secret: Optional[str] = None) -> bytes:
    """Encrypt ``data`` and frame it according to ``config.frame_format``."""
    return await asyncio.to_thread(seal_sync, config, data, secret)


async def open_sealed(config: ShieldConfig, blob: bytes, secret: Optional[str] = None) -> bytes:
    """Deframe and decrypt a buffer produced by :func:`seal`."""
    return await asyncio.to_thread(open_sync, config, blob, secret)
