"""
Unit tests for padded and sealed buffer framing.
"""

import struct

import pytest
from subtleshield.core.exceptions import FramingError
from subtleshield.security.framing import (
    ALG_IDS,
    MAGIC,
    VERSION,
    BufferFramer,
    SealedFramer,
)
from subtleshield.security.params import AlgorithmParameters


# ==============================================================================
# Tests: BufferFramer (padded)
# ==============================================================================

@pytest.mark.parametrize("salt", [0, 1, 16, 64])
@pytest.mark.parametrize("size", [0, 1, 33, 4096])
def test_frame_length_invariant(salt, size):
    data = b"\xab" * size
    framed = BufferFramer(salt).frame(data)
    assert len(framed) == size + 2 * salt


def test_frame_keeps_ciphertext_in_the_middle():
    framed = BufferFramer(16).frame(b"ciphertext")
    assert framed[16:-16] == b"ciphertext"


def test_padding_is_fresh_each_time():
    framer = BufferFramer(16)
    a = framer.frame(b"x")
    b = framer.frame(b"x")
    assert a[:16] != b[:16]
    assert a[:16] != a[-16:]


def test_deframe_strips_padding_without_inspecting_it():
    framer = BufferFramer(4)
    assert framer.deframe(b"AAAA" + b"payload" + b"ZZZZ") == b"payload"


def test_deframe_exactly_two_pads_is_empty():
    assert BufferFramer(8).deframe(b"\x00" * 16) == b""


def test_deframe_short_buffer_raises():
    with pytest.raises(FramingError, match="shorter than"):
        BufferFramer(16).deframe(b"\x00" * 31)


def test_zero_salt_is_identity():
    framer = BufferFramer(0)
    assert framer.frame(b"abc") == b"abc"
    assert framer.deframe(b"abc") == b"abc"


@pytest.mark.parametrize("salt", [-1, "16", None])
def test_invalid_padding_length(salt):
    with pytest.raises(FramingError):
        BufferFramer(salt)


# ==============================================================================
# Tests: SealedFramer
# ==============================================================================

@pytest.fixture
def gcm_params():
    return AlgorithmParameters(name="AES-GCM", iv=b"\x11" * 12, tag_length=128)


def test_sealed_header_layout(gcm_params):
    salt = b"\x22" * 16
    header = SealedFramer.header(gcm_params, salt)
    assert header[:4] == MAGIC
    assert header[4:11] == struct.pack(">BBBHH", VERSION, ALG_IDS["AES-GCM"], 16, 16, 12)
    assert header[11:27] == salt
    assert header[27:] == gcm_params.iv


def test_sealed_cbc_header_has_no_tag():
    params = AlgorithmParameters(name="AES-CBC", iv=b"\x33" * 16, tag_length=128)
    header = SealedFramer.header(params, b"")
    assert header[6] == 0
    assert header[7:9] == b"\x00\x00"
    assert header[9:11] == b"\x00\x10"


def test_sealed_pack_unpack(gcm_params):
    salt = b"\x22" * 16
    blob = SealedFramer.pack(gcm_params, salt, b"body-bytes")
    env = SealedFramer.unpack(blob)
    assert env.algorithm == "AES-GCM"
    assert env.tag_bytes == 16
    assert env.salt == salt
    assert env.iv == gcm_params.iv
    assert env.body == b"body-bytes"
    assert env.header == SealedFramer.header(gcm_params, salt)


def test_unpack_too_short():
    with pytest.raises(FramingError, match="too short"):
        SealedFramer.unpack(b"SSL")


def test_unpack_bad_magic(gcm_params):
    blob = bytearray(SealedFramer.pack(gcm_params, b"", b"x"))
    blob[:4] = b"BADX"
    with pytest.raises(FramingError, match="magic mismatch"):
        SealedFramer.unpack(bytes(blob))


def test_unpack_bad_version(gcm_params):
    blob = bytearray(SealedFramer.pack(gcm_params, b"", b"x"))
    blob[4] = 99
    with pytest.raises(FramingError, match="Unsupported version"):
        SealedFramer.unpack(bytes(blob))


def test_unpack_bad_algorithm(gcm_params):
    blob = bytearray(SealedFramer.pack(gcm_params, b"", b"x"))
    blob[5] = 99
    with pytest.raises(FramingError, match="Unsupported algorithm"):
        SealedFramer.unpack(bytes(blob))


def test_unpack_truncated_header(gcm_params):
    header = SealedFramer.header(gcm_params, b"\x00" * 16)
    with pytest.raises(FramingError, match="truncated"):
        SealedFramer.unpack(header[:-1])


def test_header_rejects_oversized_salt(gcm_params):
    with pytest.raises(FramingError):
        SealedFramer.header(gcm_params, b"\x00" * 0x10000)


def test_header_holds_salt_longer_than_one_byte_length(gcm_params):
    salt = b"\x44" * 1024
    env = SealedFramer.unpack(SealedFramer.pack(gcm_params, salt, b"body"))
    assert env.salt == salt
    assert env.iv == gcm_params.iv
    assert env.body == b"body"
