"""
Exceptions raised while reading, writing and deleting recipe files.

Each stage has its own base class so that callers may handle a whole stage at
once:

.. autoexception:: RecipeParseError

.. autoexception:: RecipeWriteError

.. autoexception:: RecipeDeleteError

.. autoexception:: FilenameError
"""

from typing import Optional

from pathlib import Path


class RecipeParseError(Exception):
    """Base class for exceptions thrown when a recipe cannot be read."""


class RecipeFileNotFoundError(RecipeParseError):
    """Thrown when the recipe file does not exist."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Recipe file not found: {path}")
        self.path = path


class FileNotReadableError(RecipeParseError):
    """Thrown when the recipe file exists but could not be read."""

    def __init__(self, path: Path, underlying: Exception) -> None:
        super().__init__(f"Could not read {path}: {underlying}")
        self.path = path
        self.underlying = underlying


class EncodingError(RecipeParseError):
    """Thrown when the recipe file is not valid UTF-8."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"{path} is not valid UTF-8 text")
        self.path = path


class MissingTitleError(RecipeParseError):
    """Thrown when a recipe does not have a level 1 heading title."""

    def __init__(self) -> None:
        super().__init__("Recipe has no title (a level 1 heading)")


class InvalidFormatError(RecipeParseError):
    """Thrown when a recipe document does not follow the RecipeMD structure."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Invalid recipe format: {reason}")
        self.reason = reason


class RecipeWriteError(Exception):
    """Base class for exceptions thrown when a recipe cannot be saved."""


class FolderNotAccessibleError(RecipeWriteError):
    """Thrown when the recipe folder cannot be listed."""

    def __init__(self, folder: Path, underlying: Optional[Exception] = None) -> None:
        message = f"Recipe folder not accessible: {folder}"
        if underlying is not None:
            message += f" ({underlying})"
        super().__init__(message)
        self.folder = folder
        self.underlying = underlying


class InvalidFilenameError(RecipeWriteError):
    """Thrown when no filename can be generated from a recipe's title."""

    def __init__(self, title: str, underlying: Exception) -> None:
        super().__init__(f"Cannot generate a filename for {title!r}: {underlying}")
        self.title = title
        self.underlying = underlying


class WriteError(RecipeWriteError):
    """Thrown when writing a recipe file fails."""

    def __init__(self, path: Path, underlying: Exception) -> None:
        super().__init__(f"Could not write {path}: {underlying}")
        self.path = path
        self.underlying = underlying


class SerializationError(RecipeWriteError):
    """Thrown when a recipe cannot be converted into a RecipeMD document."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Cannot serialize recipe: {reason}")
        self.reason = reason


class FileModifiedExternallyError(RecipeWriteError):
    """
    Thrown when a recipe file has changed on disk since it was last read,
    e.g. by a sync client. The write may be retried with ``force=True`` to
    overwrite the external changes.
    """

    def __init__(
        self, path: Path, expected: Optional[int], actual: Optional[int]
    ) -> None:
        super().__init__(f"{path} was modified by another program")
        self.path = path
        self.expected = expected
        self.actual = actual


class RecipeDeleteError(Exception):
    """Base class for exceptions thrown when a recipe file cannot be deleted."""


class PermissionDeniedError(RecipeDeleteError):
    """Thrown when the user lacks permission to delete the file."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Permission denied deleting {path}")
        self.path = path


class FileLockedError(RecipeDeleteError):
    """Thrown when the file is in use by another program."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"{path} is in use by another program")
        self.path = path


class DeleteError(RecipeDeleteError):
    """Thrown when deleting a file fails for any other reason."""

    def __init__(self, path: Path, underlying: Exception) -> None:
        super().__init__(f"Could not delete {path}: {underlying}")
        self.path = path
        self.underlying = underlying


class FilenameError(ValueError):
    """Base class for exceptions thrown when generating a filename."""


class EmptyTitleError(FilenameError):
    """Thrown when the title is empty or consists only of whitespace."""


class EmptySlugError(FilenameError):
    """Thrown when a title contains no characters usable in a filename."""
