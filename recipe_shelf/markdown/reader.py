"""
Parse RecipeMD documents into :py:class:`~recipe_shelf.recipe.Recipe`
objects.

A RecipeMD document looks like this::

    # Guacamole

    A classic dip.

    *mexican, dip, vegan*

    **4 servings, 1 bowl**

    ---

    - *2* avocados
    - *1 ½ tbsp* lime juice

    ## To serve

    - *1 bag* [tortilla chips](tortilla-chips.md)

    ---

    Mash everything together.

The level 1 heading is the title. Paragraphs before the first horizontal rule
form the description, except for the first paragraph consisting entirely of
``*emphasis*`` (the tags) and the first consisting entirely of ``**strong
emphasis**`` (the yields). List items between the first and second horizontal
rules are ingredients, grouped by any headings among them. Everything after the
second horizontal rule is the instructions.
"""

from typing import Any, List, Optional, Sequence, Tuple

import re

from pathlib import Path

from peggie import ParseError

from marko import block, inline

from recipe_shelf.amount import Amount, Yield

from recipe_shelf.recipe import Ingredient, IngredientGroup, Recipe

from recipe_shelf.parser import parse_amount

from recipe_shelf.unicode_fractions import GLYPHS

from recipe_shelf.exceptions import (
    EncodingError,
    FileNotReadableError,
    InvalidFormatError,
    MissingTitleError,
    RecipeFileNotFoundError,
)

from recipe_shelf.markdown.common import (
    Document,
    block_source,
    parse_markdown,
    render_markdown,
    render_text,
    significant_children,
)


__all__ = [
    "parse_recipe",
    "read_recipe_file",
    "parse_amount_text",
]


numeral_pattern = re.compile(r"[0-9{}]|\.[0-9]".format(GLYPHS))

preparation_pattern = re.compile(r"(?P<name>.*\S)\s*\((?P<preparation>[^()]*)\)", re.DOTALL)

HEADINGS = (block.Heading, block.SetextHeading)

# Blocks which carry no content of their own
IGNORED_BLOCKS = (block.BlankLine, block.LinkRefDef)


def parse_amount_text(text: str) -> Amount:
    """
    Parse an amount as written in an ingredient's emphasis span or a yield
    phrase.

    Parsing starts at the first number in the text so that, for example,
    'makes 12' has the value 12. Text with no parseable number becomes a
    non-numeric amount. In all cases the whole text is retained as the
    amount's raw text.
    """
    text = " ".join(text.split())
    match = numeral_pattern.search(text)
    if match is not None:
        try:
            amount = parse_amount(text[match.start():])
        except (ParseError, ValueError):
            pass
        else:
            return Amount(amount.value, amount.unit, raw_text=text)
    return Amount.text(text)


def heading_level(element: Any) -> int:
    return max(2, int(element.level))


def is_rule(element: Any) -> bool:
    return isinstance(element, block.ThematicBreak)


def is_underlined_paragraph(element: Any) -> bool:
    """
    A paragraph immediately followed by '---' is, in CommonMark, a level 2
    setext heading. Before the ingredients, this is treated as a paragraph
    followed by a horizontal rule.
    """
    return isinstance(element, block.SetextHeading) and element.level == 2


def emphasised_text(element: Any, emphasis_type: type) -> Optional[str]:
    """
    If the inline content of ``element`` consists of a single span of the
    given emphasis type, return the (markdown) text within it. Otherwise
    return None.
    """
    children = significant_children(element)
    if len(children) == 1 and type(children[0]) is emphasis_type:
        return render_text(children[0])
    else:
        return None


def is_escaped_emphasis(element: Any) -> bool:
    """
    True for a backslash-escaped '*' or '_', as written by the serializer at
    the start of an ingredient name which would otherwise be read as an amount.
    """
    return isinstance(element, inline.Literal) and element.children in ("*", "_")


def split_list(text: str) -> List[str]:
    return [part.strip() for part in text.split(",") if part.strip()]


class HeaderParser:
    """
    Accumulates the description, tags and yields from the blocks between the
    title and first horizontal rule.
    """

    def __init__(self, document: Document) -> None:
        self.document = document
        self.description: List[str] = []
        self.tags: Optional[Tuple[str, ...]] = None
        self.yields: Optional[Yield] = None

    def add_paragraph(self, element: Any, source: str) -> None:
        if self.tags is None:
            tags = emphasised_text(element, inline.Emphasis)
            if tags is not None:
                self.tags = tuple(split_list(tags))
                return

        if self.yields is None:
            yields = emphasised_text(element, inline.StrongEmphasis)
            if yields is not None:
                self.yields = Yield(
                    tuple(parse_amount_text(phrase) for phrase in split_list(yields))
                )
                return

        # Escaped so as not to be read as the tags or yields
        if source.startswith(("\\*", "\\_")):
            source = source[1:]
        self.description.append(source)

    def add_block(self, element: Any) -> None:
        if isinstance(element, block.Paragraph):
            self.add_paragraph(element, block_source(self.document, element))
        elif is_underlined_paragraph(element):
            # Drop the underline
            source = block_source(self.document, element).rsplit("\n", 1)[0]
            self.add_paragraph(element, source.strip())


class IngredientGroupBuilder:
    """
    Builds the tree of :py:class:`IngredientGroup` from a sequence of headings
    and ingredients using a stack of currently open groups.
    """

    class OpenGroup:
        def __init__(self, title: Optional[str], level: int) -> None:
            self.title = title
            self.level = level
            self.ingredients: List[Ingredient] = []
            self.subgroups: List["IngredientGroupBuilder.OpenGroup"] = []

        def build(self) -> IngredientGroup:
            return IngredientGroup(
                self.title,
                tuple(self.ingredients),
                tuple(g.build() for g in self.subgroups),
            )

    def __init__(self) -> None:
        self.top_level: List["IngredientGroupBuilder.OpenGroup"] = []
        self.stack: List["IngredientGroupBuilder.OpenGroup"] = []

    def open_group(self, title: str, level: int) -> None:
        # The implicit untitled group never has subgroups
        while self.stack and (
            self.stack[-1].title is None or self.stack[-1].level >= level
        ):
            self.stack.pop()

        group = self.OpenGroup(title, level)
        if self.stack:
            self.stack[-1].subgroups.append(group)
        else:
            self.top_level.append(group)
        self.stack.append(group)

    def add_ingredient(self, ingredient: Ingredient) -> None:
        if not self.stack:
            # Ingredients before any heading go into an untitled group
            self.open_group_untitled()
        self.stack[-1].ingredients.append(ingredient)

    def open_group_untitled(self) -> None:
        group = self.OpenGroup(None, 0)
        self.top_level.append(group)
        self.stack.append(group)

    def build(self) -> Tuple[IngredientGroup, ...]:
        return tuple(group.build() for group in self.top_level)


def parse_ingredient(paragraph: Any) -> Optional[Ingredient]:
    """
    Parse the first paragraph of an ingredient list item. Returns None for an
    empty item.
    """
    children = list(paragraph.children)
    leading = significant_children(paragraph)

    amount: Optional[Amount] = None
    if leading and type(leading[0]) is inline.Emphasis:
        amount = parse_amount_text(render_text(leading[0]))
        children = children[children.index(leading[0]) + 1:]

    name_parts = []
    linked_recipe: Optional[str] = None
    for child in children:
        if not "".join(name_parts).strip() and is_escaped_emphasis(child):
            name_parts.append(child.children)
        elif isinstance(child, inline.Link):
            link_text = render_text(child)
            if linked_recipe is None:
                linked_recipe = child.dest or link_text
            name_parts.append(link_text)
        else:
            name_parts.append(render_markdown([child]))
    name = " ".join("".join(name_parts).split())

    preparation: Optional[str] = None
    match = preparation_pattern.fullmatch(name)
    if match is not None:
        name = match["name"]
        preparation = match["preparation"].strip() or None

    if not name:
        if amount is None:
            return None
        raise InvalidFormatError(f"ingredient '{amount.format()}' has no name")

    return Ingredient(name, amount, linked_recipe, preparation)


def iter_list_ingredients(element: Any) -> List[Ingredient]:
    """Parse every item of a list, including those of nested lists."""
    ingredients = []
    for item in element.children:
        if not isinstance(item, block.ListItem):
            continue
        for child in item.children:
            if isinstance(child, block.Paragraph) and child is item.children[0]:
                ingredient = parse_ingredient(child)
                if ingredient is not None:
                    ingredients.append(ingredient)
            elif isinstance(child, block.List):
                ingredients.extend(iter_list_ingredients(child))
    return ingredients


def strip_blank_lines(text: str) -> Optional[str]:
    """
    Remove leading blank lines and trailing whitespace, returning None if
    nothing remains.
    """
    text = re.sub(r"\A(?:[ \t]*\n)+", "", text).rstrip()
    return text if text else None


def find_instructions_start(blocks: Sequence[Any]) -> int:
    """
    For documents without a second horizontal rule, find the index of the
    block at which the instructions start: the first block which is neither a
    list nor a heading, moved back over any headings which directly precede
    it (e.g. a 'Method' heading).
    """
    for index, element in enumerate(blocks):
        if isinstance(element, IGNORED_BLOCKS + HEADINGS + (block.List,)):
            continue

        start = index
        while start > 0 and isinstance(blocks[start - 1], IGNORED_BLOCKS + HEADINGS):
            start -= 1
        while start < index and isinstance(blocks[start], IGNORED_BLOCKS):
            start += 1
        return start
    return len(blocks)


def parse_recipe(text: str) -> Recipe:
    """
    Parse a RecipeMD document.

    Raises
    ======
    MissingTitleError
        If the document has no level 1 heading.
    InvalidFormatError
        If the document has no horizontal rule separating the header from the
        ingredients, if it lists no ingredients or if an ingredient has an
        amount but no name.
    """
    document = parse_markdown(text)
    blocks = list(document.children)

    # The header ends at the first horizontal rule (or underlined paragraph)
    header_end = next(
        (
            i
            for i, element in enumerate(blocks)
            if is_rule(element) or is_underlined_paragraph(element)
        ),
        None,
    )
    header = blocks if header_end is None else blocks[:header_end]

    title_index = next(
        (
            i
            for i, element in enumerate(header)
            if isinstance(element, HEADINGS) and element.level == 1
        ),
        None,
    )
    if title_index is None:
        raise MissingTitleError()
    title = render_text(header[title_index])
    if not title:
        raise MissingTitleError()

    if header_end is None:
        raise InvalidFormatError("missing horizontal rule after the recipe header")

    header_parser = HeaderParser(document)
    for element in blocks[title_index + 1:header_end + 1]:
        header_parser.add_block(element)

    # Find the ingredients and instructions
    body = blocks[header_end + 1:]
    second_rule = next((i for i, element in enumerate(body) if is_rule(element)), None)
    instructions: Optional[str]
    if second_rule is not None:
        ingredient_blocks = body[:second_rule]
        end = body[second_rule].source_span[1]
        instructions = strip_blank_lines(document.text[end:])
    else:
        instructions_start = find_instructions_start(body)
        ingredient_blocks = body[:instructions_start]
        if instructions_start < len(body):
            start = body[instructions_start].source_span[0]
            instructions = strip_blank_lines(document.text[start:])
        else:
            instructions = None

    builder = IngredientGroupBuilder()
    for element in ingredient_blocks:
        if isinstance(element, HEADINGS):
            builder.open_group(render_text(element), heading_level(element))
        elif isinstance(element, block.List):
            for ingredient in iter_list_ingredients(element):
                builder.add_ingredient(ingredient)
    ingredient_groups = builder.build()

    recipe = Recipe(
        title=title,
        description="\n\n".join(header_parser.description) or None,
        tags=header_parser.tags or (),
        yields=header_parser.yields or Yield(),
        ingredient_groups=ingredient_groups,
        instructions=instructions,
    )
    if not recipe.all_ingredients:
        raise InvalidFormatError("recipe lists no ingredients")
    return recipe


def read_recipe_file(path: Path) -> Recipe:
    """
    Read and parse a UTF-8 encoded RecipeMD file.

    Raises
    ======
    RecipeFileNotFoundError
    FileNotReadableError
    EncodingError
    MissingTitleError
    InvalidFormatError
    """
    try:
        text = path.read_bytes().decode("utf-8")
    except FileNotFoundError:
        raise RecipeFileNotFoundError(path)
    except UnicodeDecodeError:
        raise EncodingError(path)
    except OSError as e:
        raise FileNotReadableError(path, e)
    return parse_recipe(text)
