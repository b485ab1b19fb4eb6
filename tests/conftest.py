import errno
import asyncio

import pytest

from typing import AsyncIterator, Dict, List, Optional, Tuple, Union

from pathlib import Path

from contextlib import asynccontextmanager

from recipe_shelf.store import RecipeStore


class FakeFileSystem:
    """
    In-memory stand-in for :py:class:`recipe_shelf.files.LocalFileSystem`.

    Modification times come from a counter which advances on every write so
    that each write is distinguishable. Failures are injected by adding an
    :py:exc:`OSError` to :py:attr:`failures` keyed by operation name and path.
    Setting :py:attr:`listing_gate` holds up every listing and an event in
    :py:attr:`stat_gates` holds up the next stat of that path.
    """

    def __init__(self) -> None:
        self.files: Dict[Path, bytes] = {}
        self.mtimes: Dict[Path, int] = {}
        self.clock = 1000
        self.failures: Dict[Tuple[str, Path], OSError] = {}
        self.reads: List[Path] = []
        self.listings = 0
        self.listing_gate: Optional[asyncio.Event] = None
        self.stat_gates: Dict[Path, asyncio.Event] = {}
        self.open_accesses = 0
        self.accesses = 0

    def add(self, path: Path, content: Union[str, bytes]) -> None:
        if isinstance(content, str):
            content = content.encode("utf-8")
        self.files[path] = content
        self.touch(path)

    def touch(self, path: Path) -> None:
        self.clock += 1
        self.mtimes[path] = self.clock

    def _check(self, operation: str, path: Path) -> None:
        assert self.open_accesses > 0, f"{operation} {path} outside access()"
        error = self.failures.get((operation, path))
        if error is not None:
            raise error

    async def exists(self, path: Path) -> bool:
        self._check("exists", path)
        return path in self.files

    async def read_text(self, path: Path, encoding: str = "utf-8") -> str:
        self._check("read", path)
        if path not in self.files:
            raise FileNotFoundError(errno.ENOENT, "No such file", str(path))
        self.reads.append(path)
        return self.files[path].decode(encoding)

    async def write_text_atomically(
        self, path: Path, content: str, encoding: str = "utf-8"
    ) -> None:
        self._check("write", path)
        self.add(path, content.encode(encoding))

    async def remove(self, path: Path) -> None:
        self._check("remove", path)
        if path not in self.files:
            raise FileNotFoundError(errno.ENOENT, "No such file", str(path))
        del self.files[path]
        del self.mtimes[path]

    async def modification_date(self, path: Path) -> Optional[int]:
        self._check("modification_date", path)
        gate = self.stat_gates.pop(path, None)
        if gate is not None:
            await gate.wait()
        return self.mtimes.get(path)

    async def list_entries(self, folder: Path) -> List[Path]:
        self._check("list", folder)
        self.listings += 1
        if self.listing_gate is not None:
            await self.listing_gate.wait()
        return sorted(path for path in self.files if path.parent == folder)

    @asynccontextmanager
    async def access(self, path: Path) -> AsyncIterator[None]:
        self.accesses += 1
        self.open_accesses += 1
        try:
            yield
        finally:
            self.open_accesses -= 1


@pytest.fixture
def fs() -> FakeFileSystem:
    return FakeFileSystem()


@pytest.fixture
def folder() -> Path:
    return Path("/recipes")


@pytest.fixture
def store(fs: FakeFileSystem, folder: Path) -> RecipeStore:
    return RecipeStore(folder, fs)
