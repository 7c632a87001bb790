"""
Exceptions for the subtleshield engine
Everything derives from ShieldError so callers have one general error catcher
"""

from __future__ import annotations

from typing import Optional


class ShieldError(Exception):
    # general container for errors
    pass


class ConfigurationError(ShieldError):
    # raised when configuration values cannot be parsed (env, CLI)
    pass


class KeyPreparationFailure(ShieldError):
    # raised when a key + algorithm parameters could not be prepared
    pass


class InvalidSecretKey(KeyPreparationFailure):
    # raised when the secret is not a string or is blank after trim
    pass


class KeyDerivationFailure(KeyPreparationFailure):
    # raised when PBKDF2 (or the pass-through path) fails
    pass


class KeyImportFailure(KeyPreparationFailure):
    # raised when derived bytes, algorithm or usages are rejected
    pass


class KeyAccessError(ShieldError):
    # raised when exporting a non-extractable key
    pass


class FramingError(ShieldError):
    # raised on short, truncated or malformed framed buffers
    pass


class EncodingError(ShieldError):
    # raised when a text encoding is unknown or the input is not valid for it
    pass


class FileIOFailure(ShieldError):
    # raised when reading or writing a path fails
    pass


class OperationFailure(ShieldError):
    """A failed pipeline step, tagged with the operation name and its cause."""

    def __init__(self, operation: str, cause: Optional[BaseException] = None, message: Optional[str] = None):
        self.operation = operation
        self.cause = cause
        if message is None:
            message = f"{operation} failed" if cause is None else f"{operation} failed: {cause}"
        super().__init__(message)


class EncryptionFailure(OperationFailure):
    # raised when an encrypt step or operation fails
    pass


class DecryptionFailure(OperationFailure):
    # raised when a decrypt step or operation fails
    pass


class AuthenticationFailure(DecryptionFailure):
    # raised on an AES-GCM tag mismatch (tampered data or wrong secret)
    pass
