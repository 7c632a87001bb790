"""Whole-file encryption.

Files are processed in one shot: the full content is held in memory as both
plaintext and ciphertext. Output defaults to the input path, which is then
replaced in place.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from subtleshield.security.envelope import open_sealed, seal
from .exceptions import DecryptionFailure, EncryptionFailure
from .fileio import read_file, write_file
from .text_service import ConfigSource, snapshot

logger = logging.getLogger(__name__)


class FileEncryptionService:
    def __init__(self, config: ConfigSource):
        self._config = config

    async def encrypt_file(
        self,
        input_path: str | Path,
        output_path: Optional[str | Path] = None,
        secret: Optional[str] = None,
    ) -> bool:
        config = snapshot(self._config)
        out_path = output_path or input_path
        try:
            data = await read_file(input_path)
            framed = await seal(config, data, secret)
            await write_file(out_path, framed)
        except Exception as e:
            raise EncryptionFailure("encrypt_file", e) from e
        logger.info("encrypted %s -> %s (%d bytes)", input_path, out_path, len(framed))
        return True

    async def decrypt_file(
        self,
        encrypted_path: str | Path,
        output_path: Optional[str | Path] = None,
        secret: Optional[str] = None,
    ) -> bool:
        config = snapshot(self._config)
        out_path = output_path or encrypted_path
        try:
            blob = await read_file(encrypted_path)
            data = await open_sealed(config, blob, secret)
            await write_file(out_path, data)
        except Exception as e:
            raise DecryptionFailure("decrypt_file", e) from e
        logger.info("decrypted %s -> %s (%d bytes)", encrypted_path, out_path, len(data))
        return True
