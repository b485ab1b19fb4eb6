"""
Serialise :py:class:`~recipe_shelf.recipe.Recipe` objects as RecipeMD
documents.

The output is canonical: a recipe always produces the same text and parsing
that text with :py:func:`~recipe_shelf.markdown.reader.parse_recipe` gives back
an equivalent recipe.
"""

from typing import List, Sequence

import re

from recipe_shelf.amount import AmountDisplayFormat

from recipe_shelf.recipe import Ingredient, IngredientGroup, Recipe

from recipe_shelf.exceptions import SerializationError


__all__ = [
    "serialize_recipe",
]


def format_link_destination(destination: str) -> str:
    if re.search(r"[\s()<>]", destination):
        return f"<{destination}>"
    else:
        return destination


def escape_leading_emphasis(text: str) -> str:
    """
    Escape a leading '*' or '_' which would otherwise be read back as
    emphasis (e.g. as an ingredient amount or the tags line).
    """
    if text[:1] in ("*", "_"):
        return "\\" + text
    else:
        return text


def serialize_ingredient(
    ingredient: Ingredient, display_format: AmountDisplayFormat
) -> str:
    parts = ["-"]
    if ingredient.amount is not None:
        parts.append(f"*{ingredient.amount.format(display_format)}*")
    if ingredient.linked_recipe is not None:
        destination = format_link_destination(ingredient.linked_recipe)
        parts.append(f"[{ingredient.name}]({destination})")
    elif ingredient.amount is None:
        parts.append(escape_leading_emphasis(ingredient.name))
    else:
        parts.append(ingredient.name)
    if ingredient.preparation:
        parts.append(f"({ingredient.preparation})")
    return " ".join(parts)


def serialize_group(
    group: IngredientGroup, level: int, display_format: AmountDisplayFormat
) -> List[str]:
    """
    Produce the blocks for a group: its heading (if titled), its list of
    ingredients and then the blocks for each subgroup one heading level down.
    """
    blocks = []
    if group.title is not None:
        blocks.append(f"{'#' * level} {group.title}")
    if group.ingredients:
        blocks.append(
            "\n".join(serialize_ingredient(i, display_format) for i in group.ingredients)
        )
    for subgroup in group.subgroups:
        blocks.extend(serialize_group(subgroup, level + 1, display_format))
    return blocks


def check_groups(groups: Sequence[IngredientGroup], level: int) -> None:
    """
    Reject groupings which cannot be written as headings and read back: an
    untitled group may only be the first top-level group, must have
    ingredients and may not have subgroups. Headings may not nest beyond
    level 6.
    """
    for index, group in enumerate(groups):
        if group.title is None:
            if level != 2 or index != 0:
                raise SerializationError(
                    "only the first top-level ingredient group may be untitled"
                )
            if group.subgroups:
                raise SerializationError("an untitled ingredient group cannot have subgroups")
            if not group.ingredients:
                raise SerializationError("an untitled ingredient group must have ingredients")
        elif level > 6:
            raise SerializationError(f"ingredient group '{group.title}' is nested too deeply")
        check_groups(group.subgroups, level + 1)


def serialize_description(description: str) -> str:
    return "\n\n".join(
        escape_leading_emphasis(paragraph)
        for paragraph in re.split(r"\n[ \t]*\n", description.strip())
    )


def serialize_recipe(
    recipe: Recipe,
    display_format: AmountDisplayFormat = AmountDisplayFormat.original,
) -> str:
    """
    Produce a RecipeMD document describing ``recipe``. Ingredient and yield
    amounts are written in the given display format.

    Raises
    ======
    SerializationError
        If the recipe has no title or no ingredients, if a tag contains a
        comma or if its ingredient groups cannot be written as headings.
    """
    if not recipe.title.strip():
        raise SerializationError("recipe has no title")
    if not recipe.all_ingredients:
        raise SerializationError("recipe has no ingredients")
    if any("," in tag for tag in recipe.tags):
        raise SerializationError("tags may not contain commas")
    check_groups(recipe.ingredient_groups, 2)

    blocks = [f"# {recipe.title.strip()}"]

    if recipe.description and recipe.description.strip():
        blocks.append(serialize_description(recipe.description))

    if recipe.tags:
        blocks.append(f"*{', '.join(recipe.tags)}*")

    if recipe.yields:
        blocks.append(f"**{recipe.yields.format(display_format)}**")

    blocks.append("---")

    for group in recipe.ingredient_groups:
        blocks.extend(serialize_group(group, 2, display_format))

    blocks.append("---")

    if recipe.instructions and recipe.instructions.strip():
        blocks.append(recipe.instructions.strip("\n").rstrip())

    return "\n\n".join(blocks) + "\n"
