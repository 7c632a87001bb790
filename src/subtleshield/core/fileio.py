"""Whole-file reads and writes for the file service.

Blocking calls run in a worker thread. Writes go to a temporary file in the
destination directory and are moved into place, so overwriting the input
path either fully succeeds or leaves the original untouched.
"""

from __future__ import annotations

import asyncio
import os
import shutil
import tempfile
from pathlib import Path

from .exceptions import FileIOFailure


def _read(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as e:
        raise FileIOFailure(f"cannot read {path}: {e}") from e


def _write(path: Path, data: bytes) -> None:
    tmp_path = None
    try:
        with tempfile.NamedTemporaryFile(dir=path.parent, prefix=f".{path.name}.", delete=False) as tmpf:
            tmp_path = Path(tmpf.name)
            tmpf.write(data)
        if path.exists():
            shutil.copymode(path, tmp_path)
        os.replace(tmp_path, path)
    except OSError as e:
        if tmp_path is not None:
            try:
                tmp_path.unlink(missing_ok=True)
            except OSError:
                pass
        raise FileIOFailure(f"cannot write {path}: {e}") from e


async def read_file(path: str | Path) -> bytes:
    return await asyncio.to_thread(_read, Path(path).expanduser())


async def write_file(path: str | Path, data: bytes) -> None:
    await asyncio.to_thread(_write, Path(path).expanduser(), data)
