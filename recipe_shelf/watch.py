"""
Polling watcher which reports changes to the recipes in a folder.

.. autoclass:: FolderWatcher
    :members:
"""

from typing import Awaitable, Callable, Dict, Optional

import asyncio
import logging

from pathlib import Path

from recipe_shelf.files import FileSystem, LocalFileSystem

from recipe_shelf.filenames import EXTENSION

from recipe_shelf.exceptions import RecipeWriteError


__all__ = [
    "FolderWatcher",
    "is_recipe_path",
]


logger = logging.getLogger(__name__)


def is_recipe_path(path: Path) -> bool:
    """True for non-hidden Markdown files."""
    return path.suffix.lower() == EXTENSION and not path.name.startswith(".")


class FolderWatcher:
    """
    Polls a folder for added, removed or modified recipe files.

    After a change is seen, the watcher waits until nothing further has
    changed for ``debounce`` seconds before awaiting ``on_change()``. A burst
    of changes (e.g. a sync client downloading many files) therefore results
    in a single call.
    """

    def __init__(
        self,
        folder: Path,
        on_change: Callable[[], Awaitable[None]],
        file_system: Optional[FileSystem] = None,
        interval: float = 0.5,
        debounce: float = 0.5,
    ) -> None:
        self.folder = Path(folder)
        self.on_change = on_change
        self.file_system: FileSystem = (
            file_system if file_system is not None else LocalFileSystem()
        )
        self.interval = interval
        self.debounce = debounce
        self._running = False

    async def snapshot(self) -> Dict[Path, Optional[int]]:
        """The modification time of every recipe file in the folder."""
        async with self.file_system.access(self.folder):
            entries = await self.file_system.list_entries(self.folder)
            return {
                path: await self.file_system.modification_date(path)
                for path in entries
                if is_recipe_path(path)
            }

    async def run(self, max_cycles: Optional[int] = None) -> None:
        """
        Poll until :py:meth:`stop` is called or, if given, ``max_cycles``
        polls have been made.

        A folder which cannot be listed, or an ``on_change()`` which fails
        because the folder cannot be accessed, is logged and polling
        continues. A failed ``on_change()`` is retried after the next
        debounce period.
        """
        loop = asyncio.get_running_loop()
        self._running = True
        last = await self._try_snapshot()
        changed_at: Optional[float] = None
        cycles = 0

        while self._running:
            await asyncio.sleep(self.interval)

            current = await self._try_snapshot()
            if current is not None and current != last:
                logger.debug("Change detected in %s", self.folder)
                last = current
                changed_at = loop.time()

            if changed_at is not None and loop.time() - changed_at >= self.debounce:
                try:
                    await self.on_change()
                except (OSError, RecipeWriteError) as e:
                    logger.warning("Cannot process changes in %s: %s", self.folder, e)
                    changed_at = loop.time()
                else:
                    changed_at = None

            cycles += 1
            if max_cycles is not None and cycles >= max_cycles:
                break

        self._running = False

    async def _try_snapshot(self) -> Optional[Dict[Path, Optional[int]]]:
        try:
            return await self.snapshot()
        except OSError as e:
            logger.warning("Cannot list %s: %s", self.folder, e)
            return None

    def stop(self) -> None:
        self._running = False
