"""Engine configuration.

A :class:`ShieldConfig` is an immutable snapshot. The engine swaps its config
reference on reconfiguration, so an operation that already took a snapshot
keeps working against a consistent set of values.

Values are only type-checked here. Unknown algorithms, odd key or tag lengths
and unsupported encodings surface when a cipher call is attempted.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Iterable, Mapping, Optional

from .exceptions import ConfigurationError, InvalidSecretKey


AES_CBC = "AES-CBC"
AES_GCM = "AES-GCM"

FORMAT_SEALED = "sealed"
FORMAT_PADDED = "padded"

DEFAULT_KEY_USAGES = frozenset({"encrypt", "decrypt"})

ENV_PREFIX = "SUBTLESHIELD_"


@dataclass(frozen=True)
class ShieldConfig:
    """Options for one engine instance; every field has a default."""

    algorithm: str = AES_GCM
    secret_key: str = ""
    extractable: bool = False
    key_length: int = 256
    tag_length: int = 128
    key_usages: frozenset = field(default_factory=lambda: DEFAULT_KEY_USAGES)
    encoding: str = "hex"
    iterations: int = 1000
    salt: int = 16
    frame_format: str = FORMAT_PADDED

    def __post_init__(self) -> None:
        if self.secret_key is None:
            object.__setattr__(self, "secret_key", "")
        if not isinstance(self.secret_key, str):
            raise InvalidSecretKey("secret key must be a string")
        object.__setattr__(self, "secret_key", self.secret_key.strip())
        object.__setattr__(self, "key_usages", frozenset(self.key_usages))

    def with_secret_key(self, secret_key: str) -> "ShieldConfig":
        return replace(self, secret_key=secret_key)

    def with_algorithm(self, algorithm: str, key_length: int) -> "ShieldConfig":
        return replace(self, algorithm=algorithm, key_length=key_length)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "ShieldConfig":
        """
        Build a config from ``SUBTLESHIELD_*`` environment variables.

        Unset variables keep their defaults; ``overrides`` win over the
        environment. Raises ``ConfigurationError`` for unparseable values.
        """
        env = os.environ if environ is None else environ
        values = {}

        def read(name: str) -> Optional[str]:
            raw = env.get(ENV_PREFIX + name)
            if raw is None or raw.strip() == "":
                return None
            return raw.strip()

        for name, key in (("ALGORITHM", "algorithm"), ("ENCODING", "encoding"), ("FORMAT", "frame_format")):
            raw = read(name)
            if raw is not None:
                values[key] = raw

        # secrets are not stripped here; __post_init__ trims them
        secret = env.get(ENV_PREFIX + "SECRET")
        if secret:
            values["secret_key"] = secret

        for name, key in (
            ("KEY_LENGTH", "key_length"),
            ("TAG_LENGTH", "tag_length"),
            ("ITERATIONS", "iterations"),
            ("SALT", "salt"),
        ):
            raw = read(name)
            if raw is not None:
                values[key] = _parse_int(ENV_PREFIX + name, raw)

        raw = read("EXTRACTABLE")
        if raw is not None:
            values["extractable"] = _parse_bool(ENV_PREFIX + "EXTRACTABLE", raw)

        raw = read("KEY_USAGES")
        if raw is not None:
            values["key_usages"] = parse_usages(raw)

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


def parse_usages(raw: str | Iterable[str]) -> frozenset:
    """Accept ``"encrypt,decrypt"`` or an iterable of usage names."""
    if isinstance(raw, str):
        items = raw.split(",")
    else:
        items = list(raw)
    return frozenset(item.strip() for item in items if item and item.strip())


def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e


def _parse_bool(name: str, raw: str) -> bool:
    lowered = raw.lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {raw!r}")
