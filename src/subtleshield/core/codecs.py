""" Text encodings for string payloads. """

import base64
import binascii

from .exceptions import EncodingError


ALIASES = {"binary": "latin1", "latin-1": "latin1"}
SUPPORTED_ENCODINGS = ("hex", "base64", "base64url", "latin1")


def _canonical(encoding: str) -> str:
    name = str(encoding).strip().lower()
    name = ALIASES.get(name, name)
    if name not in SUPPORTED_ENCODINGS:
        raise EncodingError(f"Unsupported encoding {encoding!r}")
    return name


def encode_bytes(data: bytes, encoding: str = "hex") -> str:
    name = _canonical(encoding)
    if name == "hex":
        return data.hex()
    if name == "base64":
        return base64.b64encode(data).decode("ascii")
    if name == "base64url":
        # unpadded, like Node's Buffer#toString("base64url")
        return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")
    return data.decode("latin-1")


def decode_text(text: str, encoding: str = "hex") -> bytes:
    name = _canonical(encoding)
    if not isinstance(text, str):
        raise EncodingError(f"expected an encoded string, got {type(text).__name__}")
    try:
        if name == "hex":
            return bytes.fromhex(text)
        if name == "base64":
            return base64.b64decode(text, validate=True)
        if name == "base64url":
            stripped = text.strip().rstrip("=")
            return base64.urlsafe_b64decode(stripped + "=" * (-len(stripped) % 4))
        return text.encode("latin-1")
    except (ValueError, binascii.Error) as e:
        raise EncodingError(f"input is not valid {name}: {e}") from e
