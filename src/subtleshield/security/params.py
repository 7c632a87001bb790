"""Algorithm parameters and key import.

Mirrors the WebCrypto ``importKey("raw", ...)`` step: the derived bytes are
bound to one algorithm, a set of usages and an extractable flag before any
cipher call sees them.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Optional, Tuple

from subtleshield.core.config import AES_CBC, AES_GCM, ShieldConfig
from subtleshield.core.exceptions import (
    KeyAccessError,
    KeyImportFailure,
    KeyPreparationFailure,
)
from .kdf import derive_key

logger = logging.getLogger(__name__)

ZERO_IV = bytes(16)

SUPPORTED_ALGORITHMS = (AES_CBC, AES_GCM)
SUPPORTED_KEY_LENGTHS = (128, 192, 256)
SUPPORTED_USAGES = frozenset({"encrypt", "decrypt", "wrapKey", "unwrapKey"})

IV_SIZES = {AES_CBC: 16, AES_GCM: 12}


@dataclass(frozen=True)
class AlgorithmParameters:
    name: str
    iv: bytes
    tag_length: int


@dataclass(frozen=True)
class ImportedKey:
    """Raw AES key material restricted to an algorithm and usage set."""

    algorithm: str
    length: int
    usages: frozenset
    extractable: bool
    material: bytes = field(repr=False)

    def allows(self, usage: str) -> bool:
        return usage in self.usages

    def export_raw(self) -> bytes:
        if not self.extractable:
            raise KeyAccessError("key is not extractable")
        return self.material


def normalize_algorithm(name) -> str:
    # WebCrypto matches algorithm names case-insensitively.
    if isinstance(name, str):
        for candidate in SUPPORTED_ALGORITHMS:
            if candidate.lower() == name.strip().lower():
                return candidate
    raise KeyImportFailure(f"Unrecognized algorithm name: {name!r}")


def generate_iv(algorithm: str) -> bytes:
    """Return a fresh random IV/nonce sized for ``algorithm``."""
    return os.urandom(IV_SIZES[normalize_algorithm(algorithm)])


def build_parameters(config: ShieldConfig, iv: Optional[bytes] = None) -> AlgorithmParameters:
    """Cipher parameters for ``config``; ``iv=None`` selects the all-zero IV."""
    return AlgorithmParameters(
        name=normalize_algorithm(config.algorithm),
        iv=ZERO_IV if iv is None else iv,
        tag_length=config.tag_length,
    )


def import_key(material: bytes, config: ShieldConfig) -> ImportedKey:
    algorithm = normalize_algorithm(config.algorithm)
    if config.key_length not in SUPPORTED_KEY_LENGTHS:
        raise KeyImportFailure(f"AES key length must be 128, 192 or 256 bits, got {config.key_length}")
    if len(material) * 8 != config.key_length:
        raise KeyImportFailure(
            f"derived key is {len(material) * 8} bits but {config.key_length} bits were configured"
        )
    usages = frozenset(config.key_usages)
    if not usages:
        raise KeyImportFailure("Usages cannot be empty when creating a key.")
    unknown = usages - SUPPORTED_USAGES
    if unknown:
        raise KeyImportFailure(f"Unsupported key usage(s) for {algorithm}: {', '.join(sorted(unknown))}")
    return ImportedKey(
        algorithm=algorithm,
        length=config.key_length,
        usages=usages,
        extractable=bool(config.extractable),
        material=bytes(material),
    )


def prepare_key_and_algorithm(
    config: ShieldConfig,
    secret: Optional[str] = None,
    salt: Optional[bytes] = None,
    iv: Optional[bytes] = None,
) -> Tuple[ImportedKey, AlgorithmParameters]:
    """
    Derive, import and parameterize a key for one call.

    ``secret`` wins over the configured secret when it is truthy. ``salt`` and
    ``iv`` default to the compatibility behaviour (self-salted derivation,
    zero IV). Every failure is raised as a ``KeyPreparationFailure``.
    """
    try:
        chosen = secret or config.secret_key
        material = derive_key(chosen, config.key_length, config.iterations, salt=salt)
        key = import_key(material, config)
        params = build_parameters(config, iv=iv)
    except KeyPreparationFailure:
        raise
    except Exception as e:
        raise KeyPreparationFailure(f"Error while generating key: {e}") from e
    logger.debug("prepared %s-%d key", params.name, key.length)
    return key, params
