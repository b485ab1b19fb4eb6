"""
Generation of filenames for new recipes from their titles.

.. autofunction:: slugify

.. autofunction:: generate_filename
"""

from typing import Iterable

import re

from recipe_shelf.exceptions import EmptySlugError, EmptyTitleError


__all__ = [
    "slugify",
    "generate_filename",
]


QUOTES = "'\"‘’“”"

EXTENSION = ".md"


def slugify(title: str) -> str:
    """
    Convert a title into a lower case, hyphen-separated string containing
    only alphanumeric characters and hyphens. For example, ``Mom's "Special"
    Cookies!`` becomes ``moms-special-cookies``.

    The result may be empty.
    """
    slug = title.lower()
    slug = slug.translate({ord(q): None for q in QUOTES})
    slug = re.sub(r"[ _]", "-", slug)
    slug = "".join(c for c in slug if c.isalnum() or c == "-")
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def generate_filename(title: str, existing_names: Iterable[str]) -> str:
    """
    Pick a filename for a recipe titled ``title`` which does not collide with
    any of ``existing_names`` (compared case-insensitively).

    The first choice is ``<slug>.md``, followed by ``<slug>-1.md``,
    ``<slug>-2.md`` and so on. The existing names should be read from the
    folder immediately before calling this function.

    Raises
    ======
    EmptyTitleError
    EmptySlugError
    """
    if not title.strip():
        raise EmptyTitleError("Recipe title is empty")

    slug = slugify(title)
    if not slug:
        raise EmptySlugError(f"Recipe title {title!r} contains no usable characters")

    taken = {name.casefold() for name in existing_names}

    candidate = f"{slug}{EXTENSION}"
    suffix = 0
    while candidate.casefold() in taken:
        suffix += 1
        candidate = f"{slug}-{suffix}{EXTENSION}"
    return candidate
