r"""
The :py:mod:`recipe_shelf.recipe` module defines the data structures used to
describe a recipe read from (or to be written to) a RecipeMD document.


Overview
========

A :py:class:`Recipe` has a title, an optional description, a list of tags, a
:py:class:`~recipe_shelf.amount.Yield` and optional instructions. Its
ingredients are arranged into a tree of :py:class:`IngredientGroup`\ s
mirroring the heading structure of the document. For example, the following
document::

    # Pancakes

    ---

    - *200 g* flour

    ## Topping

    - *2 tbsp* sugar

    ### Optional

    - lemon juice

    ---

    Mix and fry.

Is represented by a recipe with two top-level groups: an untitled group
containing the flour and a 'Topping' group containing the sugar and an
'Optional' subgroup containing the lemon juice.

Recipes read from files are wrapped in a :py:class:`RecipeFile` which records
where the recipe came from and the file's modification time.


Data structures
===============

.. autoclass:: Recipe
    :members:

.. autoclass:: IngredientGroup
    :members:

.. autoclass:: Ingredient
    :members:

.. autoclass:: RecipeFile
    :members:


Exceptions
----------

.. autoexception:: RecipeInvariantError
"""

from typing import Iterable, Iterator, Optional, Tuple, Union

from pathlib import Path

from fractions import Fraction

from dataclasses import dataclass, field, replace

from recipe_shelf.amount import Amount, AmountDisplayFormat, Yield


__all__ = [
    "RecipeInvariantError",
    "Ingredient",
    "IngredientGroup",
    "Recipe",
    "RecipeFile",
]


class RecipeInvariantError(ValueError):
    """
    Thrown when an invariant of the :py:class:`Recipe` data structures is
    violated (e.g. an ingredient with no name).
    """


@dataclass(frozen=True)
class Ingredient:
    name: str
    """The name of the ingredient (e.g. 'plain flour'). Never empty."""

    amount: Optional[Amount] = None
    """The quantity required, or None when no quantity is given."""

    linked_recipe: Optional[str] = None
    """
    A reference to another recipe which produces this ingredient, given as a
    (relative) filename or recipe title.
    """

    preparation: Optional[str] = None
    """Preparation notes, e.g. 'finely chopped'."""

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise RecipeInvariantError("ingredient name must not be empty")

    def scale(self, multiplier: Union[int, float, Fraction]) -> "Ingredient":
        if self.amount is None:
            return self
        return replace(self, amount=self.amount.scale(multiplier))

    def display_text(
        self,
        multiplier: Union[int, float, Fraction] = 1,
        display_format: AmountDisplayFormat = AmountDisplayFormat.original,
    ) -> str:
        """
        A human readable description of this ingredient, e.g. '1½ cups flour
        (sifted)'.
        """
        parts = []
        if self.amount is not None:
            parts.append(self.amount.format_scaled(multiplier, display_format))
        parts.append(self.name)
        if self.preparation:
            parts.append(f"({self.preparation})")
        return " ".join(part for part in parts if part)


@dataclass(frozen=True)
class IngredientGroup:
    title: Optional[str] = None
    """The heading of this group, or None for an implicit, untitled group."""

    ingredients: Tuple[Ingredient, ...] = ()
    """The ingredients listed directly within this group, in document order."""

    subgroups: Tuple["IngredientGroup", ...] = ()
    """Groups nested within this one (i.e. under deeper headings)."""

    def __post_init__(self) -> None:
        object.__setattr__(self, "ingredients", tuple(self.ingredients))
        object.__setattr__(self, "subgroups", tuple(self.subgroups))

    def iter_ingredients(self) -> Iterator[Ingredient]:
        """
        Iterate over all ingredients in this group, depth first: this group's
        own ingredients followed by those of each subgroup in turn.
        """
        yield from self.ingredients
        for subgroup in self.subgroups:
            yield from subgroup.iter_ingredients()

    @property
    def all_ingredients(self) -> Tuple[Ingredient, ...]:
        return tuple(self.iter_ingredients())

    def scale(self, multiplier: Union[int, float, Fraction]) -> "IngredientGroup":
        return replace(
            self,
            ingredients=tuple(i.scale(multiplier) for i in self.ingredients),
            subgroups=tuple(g.scale(multiplier) for g in self.subgroups),
        )


@dataclass(frozen=True)
class Recipe:
    title: str
    """The recipe's title (from the level 1 heading)."""

    description: Optional[str] = None
    """
    Free-form Markdown text describing the recipe. Multiple paragraphs are
    separated by a blank line.
    """

    tags: Tuple[str, ...] = ()
    """Tags, in the order they appear in the document."""

    yields: Yield = field(default_factory=Yield)

    ingredient_groups: Tuple[IngredientGroup, ...] = ()

    instructions: Optional[str] = None
    """The Markdown source of the instructions, verbatim."""

    def __post_init__(self) -> None:
        object.__setattr__(self, "tags", tuple(self.tags))
        object.__setattr__(self, "ingredient_groups", tuple(self.ingredient_groups))

    @property
    def all_ingredients(self) -> Tuple[Ingredient, ...]:
        """Every ingredient in the recipe, in document order."""
        return tuple(
            ingredient
            for group in self.ingredient_groups
            for ingredient in group.iter_ingredients()
        )

    def scale(self, multiplier: Union[int, float, Fraction]) -> "Recipe":
        """
        Return a copy of this recipe with all ingredient amounts and yields
        multiplied by ``multiplier``.
        """
        return replace(
            self,
            yields=self.yields.scale(multiplier),
            ingredient_groups=tuple(g.scale(multiplier) for g in self.ingredient_groups),
        )

    def with_tags(self, tags: Iterable[str]) -> "Recipe":
        return replace(self, tags=tuple(tags))


@dataclass(frozen=True)
class RecipeFile:
    path: Path
    """The file the recipe is stored in."""

    recipe: Recipe

    modified: Optional[int] = None
    """
    The modification time of the file (in nanoseconds, as in
    :py:attr:`os.stat_result.st_mtime_ns`) when the recipe was read or
    written, or None if unknown.
    """

    parse_error: Optional[Exception] = field(default=None, compare=False)
    """
    For fallback recipes (see :py:meth:`fallback`), the reason the file could
    not be parsed.
    """

    @classmethod
    def fallback(
        cls, path: Path, error: Exception, modified: Optional[int] = None
    ) -> "RecipeFile":
        """
        Construct a minimal stand-in for a recipe file which could not be
        parsed. The title is taken from the filename (without extension) and
        the recipe has no ingredients.
        """
        return cls(path, Recipe(title=path.stem), modified, parse_error=error)

    @property
    def is_fallback(self) -> bool:
        return self.parse_error is not None

    @property
    def title(self) -> str:
        return self.recipe.title

    @property
    def filename(self) -> str:
        return self.path.name
