"""Key derivation for subtleshield."""
import logging
import os
from typing import Optional

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from subtleshield.core.exceptions import InvalidSecretKey, KeyDerivationFailure

logger = logging.getLogger(__name__)


def generate_salt(length: int = 16) -> bytes:
    """Return a cryptographically secure random salt."""
    return os.urandom(length)


def secret_length(secret: str) -> int:
    # Length in UTF-16 code units, matching JavaScript string length.
    return len(secret.encode("utf-16-le")) // 2


def derive_key(
    secret: str,
    key_length: int = 256,
    iterations: int = 1000,
    salt: Optional[bytes] = None,
) -> bytes:
    """
    Turn a passphrase into ``key_length // 8`` raw key bytes.

    If the passphrase is exactly as long as the key in bytes, its UTF-8 bytes
    are returned unchanged. Otherwise PBKDF2-HMAC-SHA256 is run with
    ``iterations`` rounds. With ``salt=None`` the passphrase bytes double as
    the salt; this is the compatibility path and is deterministic per
    (secret, iterations, key_length).
    """
    if not isinstance(secret, str) or not secret.strip():
        raise InvalidSecretKey("Invalid secret key!")

    size = key_length // 8
    secret_bytes = secret.encode("utf-8")
    if secret_length(secret) == size:
        logger.debug("using pass-through key path (%d bytes)", size)
        return secret_bytes

    try:
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=size,
            salt=secret_bytes if salt is None else salt,
            iterations=iterations,
        )
        return kdf.derive(secret_bytes)
    except Exception as e:
        raise KeyDerivationFailure(f"PBKDF2 derivation failed: {e}") from e

