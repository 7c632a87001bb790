"""Security helpers: key derivation, cipher calls and buffer framing.

This package provides the byte-level engine behind subtleshield:
- PBKDF2-HMAC-SHA256 key derivation with a pass-through path
- WebCrypto-style key import and algorithm parameters
- AES-CBC / AES-GCM encryption and decryption
- padded (compatibility) and sealed (nonce-carrying) framing
"""

from .kdf import generate_salt, derive_key
from .params import (
    AlgorithmParameters,
    ImportedKey,
    build_parameters,
    generate_iv,
    import_key,
    prepare_key_and_algorithm,
)
from .crypto import encrypt_bytes, decrypt_bytes
from .framing import BufferFramer, SealedFramer, SealedEnvelope
from .envelope import seal, open_sealed

__all__ = [
    "generate_salt",
    "derive_key",
    "AlgorithmParameters",
    "ImportedKey",
    "build_parameters",
    "generate_iv",
    "import_key",
    "prepare_key_and_algorithm",
    "encrypt_bytes",
    "decrypt_bytes",
    "BufferFramer",
    "SealedFramer",
    "SealedEnvelope",
    "seal",
    "open_sealed",
]
