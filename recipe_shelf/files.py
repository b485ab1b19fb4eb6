"""
File system access used by the :py:class:`~recipe_shelf.store.RecipeStore`.

All operations are coroutines so that the store yields to other tasks while
waiting on the disk. :py:class:`LocalFileSystem` is the implementation for
ordinary local folders; other implementations (e.g. for tests or for
platforms requiring scoped access to a folder) need only provide the
:py:class:`FileSystem` interface.

.. autoclass:: FileSystem
    :members:

.. autoclass:: LocalFileSystem
"""

from typing import AsyncContextManager, AsyncIterator, List, Optional, Protocol

import os
import asyncio
import tempfile

from pathlib import Path

from contextlib import asynccontextmanager


__all__ = [
    "FileSystem",
    "LocalFileSystem",
]


class FileSystem(Protocol):
    async def exists(self, path: Path) -> bool:
        """True if a file exists at the given path."""
        ...

    async def read_text(self, path: Path, encoding: str = "utf-8") -> str:
        """
        Read a whole file. Raises :py:exc:`OSError` on failure and
        :py:exc:`UnicodeDecodeError` if the file is not valid for the encoding.
        """
        ...

    async def write_text_atomically(
        self, path: Path, content: str, encoding: str = "utf-8"
    ) -> None:
        """
        Replace the contents of a file (creating it if necessary) such that
        readers never observe a partially written file.
        """
        ...

    async def remove(self, path: Path) -> None:
        ...

    async def modification_date(self, path: Path) -> Optional[int]:
        """
        The modification time of a file in nanoseconds, or None if the file
        does not exist.
        """
        ...

    async def list_entries(self, folder: Path) -> List[Path]:
        """The regular files directly within a folder."""
        ...

    def access(self, path: Path) -> AsyncContextManager[None]:
        """
        An async context manager which must surround every other operation on
        ``path`` (or on the files within it when ``path`` is a folder).
        """
        ...


class LocalFileSystem:
    """A :py:class:`FileSystem` backed by the local disk."""

    async def exists(self, path: Path) -> bool:
        return await asyncio.to_thread(path.is_file)

    async def read_text(self, path: Path, encoding: str = "utf-8") -> str:
        data = await asyncio.to_thread(path.read_bytes)
        return data.decode(encoding)

    async def write_text_atomically(
        self, path: Path, content: str, encoding: str = "utf-8"
    ) -> None:
        await asyncio.to_thread(self._write_text_atomically, path, content, encoding)

    @staticmethod
    def _write_text_atomically(path: Path, content: str, encoding: str) -> None:
        fd, temporary = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding=encoding, newline="") as f:
                f.write(content)
            os.replace(temporary, path)
        except BaseException:
            os.unlink(temporary)
            raise

    async def remove(self, path: Path) -> None:
        await asyncio.to_thread(path.unlink)

    async def modification_date(self, path: Path) -> Optional[int]:
        try:
            stat = await asyncio.to_thread(path.stat)
        except FileNotFoundError:
            return None
        return stat.st_mtime_ns

    async def list_entries(self, folder: Path) -> List[Path]:
        return await asyncio.to_thread(self._list_entries, folder)

    @staticmethod
    def _list_entries(folder: Path) -> List[Path]:
        return sorted(entry for entry in folder.iterdir() if entry.is_file())

    @asynccontextmanager
    async def access(self, path: Path) -> AsyncIterator[None]:
        # Local files need no special access
        yield
