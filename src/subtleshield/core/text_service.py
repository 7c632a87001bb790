"""String encryption: UTF-8 text in, encoded framed ciphertext out."""

from __future__ import annotations

import logging
from typing import Callable, Optional, Union

from subtleshield.security.envelope import open_sealed, seal
from .codecs import decode_text, encode_bytes
from .config import ShieldConfig
from .exceptions import DecryptionFailure, EncryptionFailure

logger = logging.getLogger(__name__)

ConfigSource = Union[ShieldConfig, Callable[[], ShieldConfig]]


def snapshot(source: ConfigSource) -> ShieldConfig:
    return source if isinstance(source, ShieldConfig) else source()


class TextEncryptionService:
    def __init__(self, config: ConfigSource):
        self._config = config

    async def encrypt_text(self, text: str, secret: Optional[str] = None) -> str:
        """
        Encrypt ``text`` and return it rendered in the configured encoding.

        Raises ``EncryptionFailure`` (with the step's error as ``cause``) if
        any step fails.
        """
        config = snapshot(self._config)
        try:
            if not isinstance(text, str):
                raise TypeError(f"text must be a string, got {type(text).__name__}")
            framed = await seal(config, text.encode("utf-8"), secret)
            encoded = encode_bytes(framed, config.encoding)
        except Exception as e:
            raise EncryptionFailure("encrypt_text", e) from e
        logger.debug("encrypted %d chars into %d %s chars", len(text), len(encoded), config.encoding)
        return encoded

    async def decrypt_text(self, encoded: str, secret: Optional[str] = None) -> str:
        """Reverse :meth:`encrypt_text`; failures raise ``DecryptionFailure``."""
        config = snapshot(self._config)
        try:
            framed = decode_text(encoded, config.encoding)
            data = await open_sealed(config, framed, secret)
            text = data.decode("utf-8")
        except Exception as e:
            raise DecryptionFailure("decrypt_text", e) from e
        logger.debug("decrypted %d %s chars", len(encoded), config.encoding)
        return text
