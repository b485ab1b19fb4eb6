"""
Searching and filtering collections of recipes.

.. autofunction:: filter_recipes

.. autofunction:: tag_counts

.. autofunction:: result_count_message
"""

from typing import Dict, Iterable, List, NamedTuple

from recipe_shelf.recipe import RecipeFile


__all__ = [
    "filter_recipes",
    "tag_counts",
    "TagCount",
    "result_count_message",
]


class TagCount(NamedTuple):
    name: str
    count: int


def normalize_tag(tag: str) -> str:
    return tag.strip().casefold()


def matches_text(recipe_file: RecipeFile, term: str) -> bool:
    recipe = recipe_file.recipe
    fields = [recipe.title, recipe.description or "", recipe.instructions or ""]
    fields.extend(recipe.tags)
    fields.extend(ingredient.name for ingredient in recipe.all_ingredients)
    return any(term in field.casefold() for field in fields)


def filter_recipes(
    recipe_files: Iterable[RecipeFile], text: str = "", tags: Iterable[str] = ()
) -> List[RecipeFile]:
    """
    Select the recipes containing ``text`` (in their title, description,
    tags, ingredient names or instructions) and carrying all of the given
    tags. Comparisons ignore case. The input order is preserved.
    """
    term = text.strip().casefold()
    required = {normalize_tag(tag) for tag in tags}

    results = []
    for recipe_file in recipe_files:
        if required - {normalize_tag(tag) for tag in recipe_file.recipe.tags}:
            continue
        if term and not matches_text(recipe_file, term):
            continue
        results.append(recipe_file)
    return results


def tag_counts(recipe_files: Iterable[RecipeFile]) -> List[TagCount]:
    """
    Count the recipes using each tag. Tags are compared in lower case. The
    result is sorted most-used first, then alphabetically.
    """
    counts: Dict[str, int] = {}
    for recipe_file in recipe_files:
        for tag in set(normalize_tag(tag) for tag in recipe_file.recipe.tags):
            if tag:
                counts[tag] = counts.get(tag, 0) + 1
    return sorted(
        (TagCount(name, count) for name, count in counts.items()),
        key=lambda tc: (-tc.count, tc.name),
    )


def result_count_message(count: int, has_filters: bool) -> str:
    """
    A summary of the number of search results, or an empty string when no
    filters are in use.
    """
    if not has_filters:
        return ""
    elif count == 0:
        return "No recipes match your search"
    elif count == 1:
        return "1 recipe found"
    else:
        return f"{count} recipes found"
