"""
The subtleshield engine.

:class:`SubtleShield` owns one configuration and exposes the text, file and
key-export operations on top of it. All operations are coroutines and can run
concurrently on the same instance; none of them takes a lock.

Reconfiguration (:meth:`SubtleShield.set_secret_key`,
:meth:`SubtleShield.set_algorithm`) replaces the immutable config object in a
single assignment. Every operation reads ``self.config`` once on entry, so an
in-flight call keeps using the snapshot it started with.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from pathlib import Path
from typing import Optional

from subtleshield.security.kdf import derive_key
from subtleshield.security.params import import_key
from .config import ShieldConfig
from .exceptions import EncryptionFailure
from .file_service import FileEncryptionService
from .text_service import TextEncryptionService

logger = logging.getLogger(__name__)


class SubtleShield:
    """
    Passphrase-based AES-CBC / AES-GCM encryption for strings and files.

    Construct with a ready :class:`ShieldConfig`, with keyword options
    (``algorithm``, ``secret_key``, ``key_length``, ``tag_length``,
    ``encoding``, ``iterations``, ``salt``, ``frame_format`` ...), or both, in
    which case the keywords override the config.
    """

    def __init__(self, config: Optional[ShieldConfig] = None, **options):
        base = config or ShieldConfig()
        self.config: ShieldConfig = replace(base, **options) if options else base
        self.text = TextEncryptionService(lambda: self.config)
        self.files = FileEncryptionService(lambda: self.config)

    def set_secret_key(self, secret_key: str) -> None:
        self.config = self.config.with_secret_key(secret_key)

    def set_algorithm(self, algorithm: str, key_length: int) -> None:
        self.config = self.config.with_algorithm(algorithm, key_length)
        logger.debug("algorithm set to %s-%s", algorithm, key_length)

    async def encrypt_text(self, text: str, secret: Optional[str] = None) -> str:
        return await self.text.encrypt_text(text, secret)

    async def decrypt_text(self, encoded: str, secret: Optional[str] = None) -> str:
        return await self.text.decrypt_text(encoded, secret)

    async def encrypt_file(
        self,
        input_path: str | Path,
        output_path: Optional[str | Path] = None,
        secret: Optional[str] = None,
    ) -> bool:
        return await self.files.encrypt_file(input_path, output_path, secret)

    async def decrypt_file(
        self,
        encrypted_path: str | Path,
        output_path: Optional[str | Path] = None,
        secret: Optional[str] = None,
    ) -> bool:
        return await self.files.decrypt_file(encrypted_path, output_path, secret)

    async def export_key(self, secret: Optional[str] = None) -> bytes:
        """
        Return the raw key derived on the compatibility (self-salted) path.

        Only allowed when the config is ``extractable``. Sealed buffers use a
        per-message salt, so their keys are not reproducible from the secret
        alone and cannot be exported this way.
        """
        config = self.config
        try:
            chosen = secret or config.secret_key
            material = await asyncio.to_thread(derive_key, chosen, config.key_length, config.iterations)
            return import_key(material, config).export_raw()
        except Exception as e:
            raise EncryptionFailure("export_key", e) from e
