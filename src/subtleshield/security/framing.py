"""Buffer framing.

Two layouts are supported.

``padded`` (compatibility with WebCrypto-based JavaScript clients)::

    random(N) || ciphertext || random(N)

N is the configured ``salt``. The padding is non-authenticated filler: it is
never inspected and is stripped by length alone, so the same N must be
configured on both sides.

``sealed``, header layout (binary, big-endian):

- 4 bytes: magic b'SSLD'
- 1 byte: version (1)
- 1 byte: alg_id (1 = AES-CBC, 2 = AES-GCM)
- 1 byte: tag length in bytes (0 for AES-CBC)
- 2 bytes: len_salt (S)
- 2 bytes: len_iv (L)
- S bytes: PBKDF2 salt
- L bytes: IV / nonce

Body: ciphertext (with the GCM tag appended). Under AES-GCM the header bytes
are passed as associated data, so they are covered by the tag.
"""
import os
import struct
from dataclasses import dataclass

from subtleshield.core.config import AES_CBC, AES_GCM
from subtleshield.core.exceptions import FramingError
from .params import AlgorithmParameters

MAGIC = b"SSLD"
VERSION = 1
ALG_IDS = {AES_CBC: 1, AES_GCM: 2}
ALG_NAMES = {v: k for k, v in ALG_IDS.items()}

_FIXED = struct.Struct(">4sBBBHH")


class BufferFramer:
    """Wraps ciphertext in two blocks of random padding."""

    def __init__(self, salt: int = 16):
        if not isinstance(salt, int) or salt < 0:
            raise FramingError(f"padding length must be a non-negative integer, got {salt!r}")
        self.salt = salt

    def frame(self, data: bytes) -> bytes:
        return os.urandom(self.salt) + bytes(data) + os.urandom(self.salt)

    def deframe(self, framed: bytes) -> bytes:
        if len(framed) < 2 * self.salt:
            raise FramingError(
                f"framed buffer is {len(framed)} bytes, shorter than its {2 * self.salt} bytes of padding"
            )
        return bytes(framed[self.salt:len(framed) - self.salt])


@dataclass(frozen=True)
class SealedEnvelope:
    header: bytes
    algorithm: str
    tag_bytes: int
    salt: bytes
    iv: bytes
    body: bytes


class SealedFramer:
    """Packs and parses ``header || ciphertext`` buffers."""

    @staticmethod
    def header(params: AlgorithmParameters, salt: bytes) -> bytes:
        if len(salt) > 0xFFFF or len(params.iv) > 0xFFFF:
            raise FramingError("salt and IV must each fit in 65535 bytes")
        tag_bytes = params.tag_length // 8 if params.name == AES_GCM else 0
        fixed = _FIXED.pack(MAGIC, VERSION, ALG_IDS[params.name], tag_bytes, len(salt), len(params.iv))
        return fixed + salt + params.iv

    @classmethod
    def pack(cls, params: AlgorithmParameters, salt: bytes, ciphertext: bytes) -> bytes:
        return cls.header(params, salt) + ciphertext

    @staticmethod
    def unpack(blob: bytes) -> SealedEnvelope:
        blob = bytes(blob)
        if len(blob) < _FIXED.size:
            raise FramingError("buffer too short to contain a header")
        magic, version, alg_id, tag_bytes, salt_len, iv_len = _FIXED.unpack_from(blob)
        if magic != MAGIC:
            raise FramingError("Invalid buffer format (magic mismatch)")
        if version != VERSION:
            raise FramingError(f"Unsupported version {version}")
        if alg_id not in ALG_NAMES:
            raise FramingError(f"Unsupported algorithm id {alg_id}")
        end = _FIXED.size + salt_len + iv_len
        if len(blob) < end:
            raise FramingError("truncated header")
        salt = blob[_FIXED.size:_FIXED.size + salt_len]
        iv = blob[_FIXED.size + salt_len:end]
        return SealedEnvelope(
            header=blob[:end],
            algorithm=ALG_NAMES[alg_id],
            tag_bytes=tag_bytes,
            salt=salt,
            iv=iv,
            body=blob[end:],
        )
