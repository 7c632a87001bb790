"""AES-CBC / AES-GCM cipher calls.

Output layout follows WebCrypto so buffers stay interchangeable with
JavaScript clients built on crypto.subtle:

- AES-GCM: ``ciphertext || tag`` where the tag is truncated to
  ``tag_length // 8`` bytes
- AES-CBC: PKCS#7 padded ciphertext, no tag
"""
import logging
from typing import Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from subtleshield.core.config import AES_CBC, AES_GCM
from subtleshield.core.exceptions import (
    AuthenticationFailure,
    DecryptionFailure,
    EncryptionFailure,
)
from .params import AlgorithmParameters, ImportedKey

logger = logging.getLogger(__name__)

BLOCK_SIZE = 128
GCM_TAG_LENGTHS = (32, 64, 96, 104, 112, 120, 128)


def _tag_bytes(params: AlgorithmParameters) -> int:
    if params.tag_length not in GCM_TAG_LENGTHS:
        raise ValueError(f"invalid AES-GCM tag length: {params.tag_length}")
    return params.tag_length // 8


def _check_key(key: ImportedKey, params: AlgorithmParameters, usage: str) -> None:
    if key.algorithm != params.name:
        raise ValueError(f"key was imported for {key.algorithm}, not {params.name}")
    if not key.allows(usage):
        raise ValueError(f"key usages do not permit {usage!r}")


def encrypt_bytes(
    plaintext: bytes,
    key: ImportedKey,
    params: AlgorithmParameters,
    associated_data: Optional[bytes] = None,
) -> bytes:
    try:
        _check_key(key, params, "encrypt")
        if params.name == AES_GCM:
            tag_len = _tag_bytes(params)
            encryptor = Cipher(algorithms.AES(key.material), modes.GCM(params.iv)).encryptor()
            if associated_data:
                encryptor.authenticate_additional_data(associated_data)
            ct = encryptor.update(plaintext) + encryptor.finalize()
            out = ct + encryptor.tag[:tag_len]
        elif params.name == AES_CBC:
            padder = padding.PKCS7(BLOCK_SIZE).padder()
            padded = padder.update(plaintext) + padder.finalize()
            encryptor = Cipher(algorithms.AES(key.material), modes.CBC(params.iv)).encryptor()
            out = encryptor.update(padded) + encryptor.finalize()
        else:
            raise ValueError(f"unsupported algorithm {params.name}")
    except Exception as e:
        raise EncryptionFailure("encrypt_bytes", e) from e
    logger.debug("%s encrypted %d bytes -> %d", params.name, len(plaintext), len(out))
    return out


def decrypt_bytes(
    ciphertext: bytes,
    key: ImportedKey,
    params: AlgorithmParameters,
    associated_data: Optional[bytes] = None,
) -> bytes:
    """
    Reverse :func:`encrypt_bytes`.

    Raises:
        AuthenticationFailure: AES-GCM tag verification failed
        DecryptionFailure: any other cipher or padding error
    """
    try:
        _check_key(key, params, "decrypt")
        if params.name == AES_GCM:
            tag_len = _tag_bytes(params)
            if len(ciphertext) < tag_len:
                raise ValueError("ciphertext is shorter than the authentication tag")
            ct, tag = ciphertext[:-tag_len], ciphertext[-tag_len:]
            decryptor = Cipher(
                algorithms.AES(key.material),
                modes.GCM(params.iv, tag, min_tag_length=tag_len),
            ).decryptor()
            if associated_data:
                decryptor.authenticate_additional_data(associated_data)
            out = decryptor.update(ct) + decryptor.finalize()
        elif params.name == AES_CBC:
            decryptor = Cipher(algorithms.AES(key.material), modes.CBC(params.iv)).decryptor()
            padded = decryptor.update(ciphertext) + decryptor.finalize()
            unpadder = padding.PKCS7(BLOCK_SIZE).unpadder()
            out = unpadder.update(padded) + unpadder.finalize()
        else:
            raise ValueError(f"unsupported algorithm {params.name}")
    except InvalidTag as e:
        raise AuthenticationFailure(
            "decrypt_bytes", e, message="decrypt_bytes failed: authentication tag mismatch"
        ) from e
    except Exception as e:
        raise DecryptionFailure("decrypt_bytes", e) from e
    logger.debug("%s decrypted %d bytes -> %d", params.name, len(ciphertext), len(out))
    return out
