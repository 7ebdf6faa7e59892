"""Async storage backends for source chunks and generated artifacts.

WHY: The store and the compiler should not care whether files live on
disk or in memory. Tests use the in-memory backend; the CLI uses the
filesystem. Every I/O call is a coroutine so the pipeline has explicit
suspend points and callers await each step before the next one.

HOW: Storage is an ABC with four async methods. FileStorage runs the
blocking pathlib calls in a worker thread via asyncio.to_thread and
writes through a temporary sibling file followed by os.replace, so a
reader never sees a half-written artifact. MemoryStorage keeps a dict
keyed by Path.

RULES:
- write_text() replaces the whole file atomically and creates parent dirs
- list_files() returns file names sorted, empty when the folder is absent
- FileStorage wraps every OSError in StorageError, chained with from
- All text is UTF-8 with "\\n" newlines
"""

from __future__ import annotations

import asyncio
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List

from resx_compiler.errors import StorageError


class Storage(ABC):
    """Abstract async file-like storage."""

    @abstractmethod
    async def exists(self, path: Path) -> bool:
        """True if a file exists at ``path``."""

    @abstractmethod
    async def read_text(self, path: Path) -> str:
        """Return the full UTF-8 content of ``path``.

        Raises:
            StorageError: If the file cannot be read.
        """

    @abstractmethod
    async def write_text(self, path: Path, content: str) -> None:
        """Replace ``path`` with ``content`` atomically."""

    @abstractmethod
    async def list_files(self, folder: Path, suffix: str) -> List[str]:
        """Sorted names of files in ``folder`` ending with ``suffix``."""


def _atomic_write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=".{}.".format(path.name), suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(content)
        os.replace(tmp_name, path)
    except BaseException:
        # The temp file is ours; never leave it behind
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


def _list_files(folder: Path, suffix: str) -> List[str]:
    if not folder.is_dir():
        return []
    return sorted(
        entry.name
        for entry in folder.iterdir()
        if entry.is_file() and entry.name.endswith(suffix)
    )


class FileStorage(Storage):
    """Filesystem backend with thread-offloaded blocking I/O."""

    async def exists(self, path: Path) -> bool:
        return await asyncio.to_thread(path.is_file)

    async def read_text(self, path: Path) -> str:
        try:
            return await asyncio.to_thread(path.read_text, encoding="utf-8")
        except OSError as e:
            raise StorageError(path, e.strerror or str(e)) from e

    async def write_text(self, path: Path, content: str) -> None:
        try:
            await asyncio.to_thread(_atomic_write, path, content)
        except OSError as e:
            raise StorageError(path, e.strerror or str(e)) from e

    async def list_files(self, folder: Path, suffix: str) -> List[str]:
        try:
            return await asyncio.to_thread(_list_files, folder, suffix)
        except OSError as e:
            raise StorageError(folder, e.strerror or str(e)) from e


class MemoryStorage(Storage):
    """In-memory backend keyed by Path. Used by tests and dry runs."""

    def __init__(self) -> None:
        self.files: Dict[Path, str] = {}

    async def exists(self, path: Path) -> bool:
        return path in self.files

    async def read_text(self, path: Path) -> str:
        try:
            return self.files[path]
        except KeyError:
            raise StorageError(path, "No such file") from None

    async def write_text(self, path: Path, content: str) -> None:
        self.files[path] = content

    async def list_files(self, folder: Path, suffix: str) -> List[str]:
        return sorted(
            path.name
            for path in self.files
            if path.parent == folder and path.name.endswith(suffix)
        )
