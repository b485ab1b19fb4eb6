"""
The :py:class:`RecipeStore` manages a folder of RecipeMD files.

The store keeps a parsed copy of every recipe in the folder, keyed by path and
tagged with the file's modification time. Rescanning the folder only re-parses
files whose modification time has changed. Recipes are created, updated and
deleted through the store which keeps its cache in step with the files it
writes and refuses to overwrite files which have been changed by another
program (e.g. a sync client) since they were read.

Usage::

    store = RecipeStore(Path("~/Recipes").expanduser())
    await store.refresh()
    for recipe_file in store.recipes:
        print(recipe_file.title)

.. autoclass:: RecipeStore
    :members:

.. autoclass:: BulkOperationResult
"""

from typing import (
    Callable,
    Dict,
    Iterable,
    List,
    Mapping,
    NamedTuple,
    Optional,
    Tuple,
    Union,
)

import errno
import logging

from pathlib import Path

from types import MappingProxyType

from dataclasses import dataclass

from recipe_shelf.recipe import Recipe, RecipeFile

from recipe_shelf.files import FileSystem, LocalFileSystem

from recipe_shelf.filenames import generate_filename

from recipe_shelf.markdown import parse_recipe, serialize_recipe

from recipe_shelf.watch import FolderWatcher, is_recipe_path

from recipe_shelf.exceptions import (
    DeleteError,
    EncodingError,
    FileLockedError,
    FileModifiedExternallyError,
    FileNotReadableError,
    FilenameError,
    FolderNotAccessibleError,
    InvalidFilenameError,
    PermissionDeniedError,
    RecipeFileNotFoundError,
    RecipeParseError,
    RecipeWriteError,
    SerializationError,
    WriteError,
)


__all__ = [
    "RecipeStore",
    "BulkOperationResult",
]


logger = logging.getLogger(__name__)


ENCODING = "utf-8"

LOCKED_ERRNOS = frozenset([errno.EBUSY, errno.ETXTBSY, errno.EAGAIN])
"""Error numbers indicating a file is in use by another program."""


@dataclass(frozen=True)
class CacheEntry:
    recipe_file: RecipeFile

    modified: int
    """The modification time of the file when it was last read or written."""


class BulkOperationResult(NamedTuple):
    succeeded: Tuple[RecipeFile, ...]
    """The updated recipe files."""

    failed: Tuple[Tuple[RecipeFile, Exception], ...]
    """Recipe files which could not be updated, along with the reason."""


def sort_key(recipe_file: RecipeFile) -> Tuple[str, str]:
    return (recipe_file.title.casefold(), str(recipe_file.path))


class RecipeStore:
    """
    Manages the recipes in a single folder.

    Parameters
    ==========
    folder : Path
        The folder containing the recipes.
    file_system : FileSystem
        The file system to access the folder through. Defaults to a
        :py:class:`~recipe_shelf.files.LocalFileSystem`.
    parse : fn(str) -> Recipe
        The RecipeMD parser.
    serialize : fn(Recipe) -> str
        The RecipeMD serializer.
    """

    def __init__(
        self,
        folder: Path,
        file_system: Optional[FileSystem] = None,
        parse: Callable[[str], Recipe] = parse_recipe,
        serialize: Callable[[Recipe], str] = serialize_recipe,
    ) -> None:
        self.folder = Path(folder)
        self.file_system: FileSystem = (
            file_system if file_system is not None else LocalFileSystem()
        )
        self._parse = parse
        self._serialize = serialize

        self._cache: Dict[Path, CacheEntry] = {}
        self._recipes: Tuple[RecipeFile, ...] = ()
        self._errors: Dict[Path, RecipeParseError] = {}

        self._is_loading = False
        self._is_saving = False
        self._rescan_requested = False

        # Paths written or deleted, against the generation of their last write
        self._generation = 0
        self._written: Dict[Path, int] = {}

    @property
    def recipes(self) -> Tuple[RecipeFile, ...]:
        """
        All recipes in the folder (including fallbacks for recipes which
        could not be parsed), sorted by title.
        """
        return self._recipes

    @property
    def errors(self) -> Mapping[Path, RecipeParseError]:
        """Files which could not be read at all, along with the reason."""
        return MappingProxyType(dict(self._errors))

    @property
    def is_loading(self) -> bool:
        """True while the folder is being scanned."""
        return self._is_loading

    @property
    def is_saving(self) -> bool:
        """
        True while a recipe is being written or deleted. This flag is
        advisory: writes are not queued.
        """
        return self._is_saving

    def get(self, path: Path) -> Optional[RecipeFile]:
        """Look up a recipe by path."""
        entry = self._cache.get(Path(path))
        return entry.recipe_file if entry is not None else None

    def _mark_written(self, path: Path) -> None:
        self._generation += 1
        self._written[path] = self._generation

    def _publish(self) -> None:
        self._recipes = tuple(
            sorted((entry.recipe_file for entry in self._cache.values()), key=sort_key)
        )

    # Scanning

    async def refresh(self) -> bool:
        """
        Scan the folder, re-reading any files which have changed since the
        last scan.

        Returns False (and does nothing) if a scan is already in progress.

        Raises
        ======
        FolderNotAccessibleError
            If the folder cannot be listed. The previously loaded recipes are
            retained.
        """
        if self._is_loading:
            logger.debug("Scan of %s already in progress", self.folder)
            return False

        self._is_loading = True
        try:
            while True:
                self._rescan_requested = False
                await self._scan()
                if not self._rescan_requested:
                    break
        finally:
            self._is_loading = False
        return True

    async def load(self) -> bool:
        """Alias of :py:meth:`refresh`."""
        return await self.refresh()

    async def folder_changed(self) -> None:
        """
        Notify the store that the folder contents have changed. If a scan is
        already in progress, exactly one further scan follows it.
        """
        self._rescan_requested = True
        await self.refresh()

    async def _scan(self) -> None:
        logger.debug("Scanning %s", self.folder)
        started = self._generation
        cache: Dict[Path, CacheEntry] = {}
        errors: Dict[Path, RecipeParseError] = {}
        parsed = 0

        async with self.file_system.access(self.folder):
            entries = await self._list_folder()
            for path in sorted(p for p in entries if is_recipe_path(p)):
                modified = await self.file_system.modification_date(path)
                if modified is None:
                    continue  # Deleted since listing

                entry = self._cache.get(path)
                if (
                    entry is not None
                    and entry.modified == modified
                    and not entry.recipe_file.is_fallback
                ):
                    cache[path] = entry
                    continue

                try:
                    recipe_file = await self._read(path, modified)
                except RecipeFileNotFoundError:
                    continue  # Deleted since listing
                except (FileNotReadableError, EncodingError) as e:
                    logger.warning("Cannot read %s: %s", path, e)
                    errors[path] = e
                    continue
                parsed += 1
                cache[path] = CacheEntry(recipe_file, modified)

        # Writes and deletes completed during the scan take precedence over
        # what the scan saw
        for path, generation in self._written.items():
            if generation <= started:
                continue
            errors.pop(path, None)
            live = self._cache.get(path)
            if live is None:
                cache.pop(path, None)
            else:
                cache[path] = live
        self._written.clear()

        self._cache = cache
        self._errors = errors
        self._publish()
        logger.debug(
            "Scanned %s: %d recipes (%d parsed), %d unreadable",
            self.folder,
            len(cache),
            parsed,
            len(errors),
        )

    async def _list_folder(self) -> List[Path]:
        try:
            return await self.file_system.list_entries(self.folder)
        except OSError as e:
            raise FolderNotAccessibleError(self.folder, e) from e

    async def _read(self, path: Path, modified: Optional[int]) -> RecipeFile:
        try:
            text = await self.file_system.read_text(path, ENCODING)
        except FileNotFoundError as e:
            raise RecipeFileNotFoundError(path) from e
        except UnicodeDecodeError as e:
            raise EncodingError(path) from e
        except OSError as e:
            raise FileNotReadableError(path, e) from e

        try:
            recipe = self._parse(text)
        except RecipeParseError as e:
            logger.warning("Cannot parse %s: %s", path, e)
            return RecipeFile.fallback(path, e, modified)
        return RecipeFile(path, recipe, modified)

    # Writing

    async def _write(self, path: Path, content: str, recipe: Recipe) -> RecipeFile:
        try:
            await self.file_system.write_text_atomically(path, content, ENCODING)
        except OSError as e:
            raise WriteError(path, e) from e

        modified = await self.file_system.modification_date(path)
        if modified is None:
            raise WriteError(path, FileNotFoundError(errno.ENOENT, "File vanished", str(path)))

        recipe_file = RecipeFile(path, recipe, modified)
        self._cache[path] = CacheEntry(recipe_file, modified)
        self._errors.pop(path, None)
        self._mark_written(path)
        self._publish()
        logger.info("Saved %s", path)
        return recipe_file

    def _parse_markdown(self, text: str) -> Recipe:
        try:
            return self._parse(text)
        except RecipeParseError as e:
            raise SerializationError(str(e)) from e

    async def _create(self, recipe: Recipe, content: str) -> RecipeFile:
        self._is_saving = True
        try:
            async with self.file_system.access(self.folder):
                entries = await self._list_folder()
                try:
                    filename = generate_filename(recipe.title, (p.name for p in entries))
                except FilenameError as e:
                    raise InvalidFilenameError(recipe.title, e) from e
                return await self._write(self.folder / filename, content, recipe)
        finally:
            self._is_saving = False

    async def create(self, recipe: Recipe) -> RecipeFile:
        """
        Write a new recipe to a new file named after its title.

        Raises
        ======
        FolderNotAccessibleError
        InvalidFilenameError
            If the title is not usable as a filename.
        SerializationError
        WriteError
        """
        return await self._create(recipe, self._serialize(recipe))

    async def create_from_markdown(self, text: str) -> RecipeFile:
        """
        Write a new recipe given as RecipeMD text. The text is written
        verbatim, but must be a valid recipe.

        Raises
        ======
        SerializationError
            If the text is not a valid recipe.
        FolderNotAccessibleError
        InvalidFilenameError
        WriteError
        """
        return await self._create(self._parse_markdown(text), text)

    async def _update(
        self, recipe_file: RecipeFile, recipe: Recipe, content: str, force: bool
    ) -> RecipeFile:
        path = recipe_file.path
        entry = self._cache.get(path)
        if entry is None:
            raise WriteError(path, ValueError(f"{path} is not in {self.folder}"))

        self._is_saving = True
        try:
            async with self.file_system.access(self.folder):
                if not await self.file_system.exists(path):
                    raise WriteError(
                        path,
                        FileNotFoundError(errno.ENOENT, "No such file", str(path)),
                    )

                if not force:
                    expected = (
                        recipe_file.modified
                        if recipe_file.modified is not None
                        else entry.modified
                    )
                    actual = await self.file_system.modification_date(path)
                    if actual != entry.modified or actual != expected:
                        logger.info("%s was modified externally", path)
                        raise FileModifiedExternallyError(path, expected, actual)

                return await self._write(path, content, recipe)
        finally:
            self._is_saving = False

    async def update(
        self,
        recipe_file: RecipeFile,
        recipe: Optional[Recipe] = None,
        force: bool = False,
    ) -> RecipeFile:
        """
        Overwrite an existing recipe file.

        Parameters
        ==========
        recipe_file : RecipeFile
            The file to overwrite, as previously returned by this store. Its
            :py:attr:`~recipe_shelf.recipe.RecipeFile.modified` time is used to
            detect changes made since it was read.
        recipe : Recipe
            The new recipe. Defaults to ``recipe_file.recipe``.
        force : bool
            If True, overwrite the file even if it has been changed by another
            program.

        Raises
        ======
        FileModifiedExternallyError
            If the file has changed since it was read and ``force`` is False.
        SerializationError
        WriteError
            If the file is not managed by this store, no longer exists or
            cannot be written.
        """
        if recipe is None:
            recipe = recipe_file.recipe
        return await self._update(recipe_file, recipe, self._serialize(recipe), force)

    async def update_from_markdown(
        self, recipe_file: RecipeFile, text: str, force: bool = False
    ) -> RecipeFile:
        """
        Overwrite an existing recipe file with RecipeMD text. The text is
        written verbatim, but must be a valid recipe. See :py:meth:`update`.
        """
        return await self._update(recipe_file, self._parse_markdown(text), text, force)

    async def has_external_changes(self, recipe_file: RecipeFile) -> bool:
        """
        True if the file's modification time differs from when this store
        last read or wrote it.
        """
        entry = self._cache.get(recipe_file.path)
        expected = entry.modified if entry is not None else recipe_file.modified
        async with self.file_system.access(self.folder):
            actual = await self.file_system.modification_date(recipe_file.path)
        return actual != expected

    # Deleting

    async def delete(self, target: Union[RecipeFile, Path]) -> None:
        """
        Delete a recipe file. Deleting a file which no longer exists succeeds.

        Raises
        ======
        PermissionDeniedError
        FileLockedError
        DeleteError
        """
        path = target.path if isinstance(target, RecipeFile) else Path(target)

        self._is_saving = True
        try:
            async with self.file_system.access(self.folder):
                if await self.file_system.exists(path):
                    await self._remove(path)
                else:
                    logger.debug("%s already deleted", path)
        finally:
            self._is_saving = False

        self._cache.pop(path, None)
        self._errors.pop(path, None)
        self._mark_written(path)
        self._publish()
        logger.info("Deleted %s", path)

    async def _remove(self, path: Path) -> None:
        try:
            await self.file_system.remove(path)
        except FileNotFoundError:
            logger.debug("%s deleted by another program", path)
        except PermissionError as e:
            raise PermissionDeniedError(path) from e
        except OSError as e:
            if e.errno in LOCKED_ERRNOS:
                raise FileLockedError(path) from e
            raise DeleteError(path, e) from e

    # Bulk tag editing

    async def _edit_tags(
        self,
        recipe_files: Iterable[RecipeFile],
        edit: Callable[[Tuple[str, ...]], Tuple[str, ...]],
    ) -> BulkOperationResult:
        succeeded: List[RecipeFile] = []
        failed: List[Tuple[RecipeFile, Exception]] = []
        for recipe_file in recipe_files:
            tags = edit(recipe_file.recipe.tags)
            if tags == recipe_file.recipe.tags:
                succeeded.append(recipe_file)
                continue
            try:
                updated = await self.update(recipe_file, recipe_file.recipe.with_tags(tags))
            except RecipeWriteError as e:
                logger.warning("Cannot update tags of %s: %s", recipe_file.path, e)
                failed.append((recipe_file, e))
            else:
                succeeded.append(updated)
        return BulkOperationResult(tuple(succeeded), tuple(failed))

    async def add_tags(
        self, recipe_files: Iterable[RecipeFile], tags: Iterable[str]
    ) -> BulkOperationResult:
        """
        Add tags to several recipes. Tags already present (ignoring case) are
        not duplicated and existing tags keep their order.
        """
        new_tags = tuple(tags)

        def edit(existing: Tuple[str, ...]) -> Tuple[str, ...]:
            result = list(existing)
            for tag in new_tags:
                if tag.casefold() not in {t.casefold() for t in result}:
                    result.append(tag)
            return tuple(result)

        return await self._edit_tags(recipe_files, edit)

    async def remove_tags(
        self, recipe_files: Iterable[RecipeFile], tags: Iterable[str]
    ) -> BulkOperationResult:
        """Remove tags (ignoring case) from several recipes."""
        removed = {tag.casefold() for tag in tags}

        def edit(existing: Tuple[str, ...]) -> Tuple[str, ...]:
            return tuple(t for t in existing if t.casefold() not in removed)

        return await self._edit_tags(recipe_files, edit)

    def watch(self, interval: float = 0.5, debounce: float = 0.5) -> FolderWatcher:
        """
        Create a :py:class:`~recipe_shelf.watch.FolderWatcher` which rescans
        this store's folder whenever its contents change.
        """
        return FolderWatcher(
            self.folder,
            self.folder_changed,
            file_system=self.file_system,
            interval=interval,
            debounce=debounce,
        )
