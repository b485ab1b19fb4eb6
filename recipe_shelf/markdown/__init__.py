"""
This module reads and writes recipes in the RecipeMD Markdown format.

Markdown syntax
===============

Recipes are formatted as in the example below::

    # Pancakes

    Thin, French-style pancakes.

    *breakfast, quick*

    **8 pancakes**

    ---

    - *200 g* plain flour
    - *3* eggs (beaten)
    - *½ l* milk

    ## To serve

    - *1* lemon
    - sugar

    ---

    Whisk everything together and rest for 30 minutes.

    Fry in a hot, lightly oiled pan.

Ingredient amounts are given in an emphasised span at the start of a list
item. The number may be written as an integer, decimal, fraction (``1/2``),
mixed number (``1 1/2``) or using a Unicode fraction (``½`` or ``1½``). Any
text following the number within the span is the unit.

An ingredient may link to another recipe (e.g. ``- *1 batch*
[pizza dough](pizza-dough.md)``).

API
===

.. autofunction:: parse_recipe

.. autofunction:: read_recipe_file

.. autofunction:: serialize_recipe


Internals
=========

Internally the :py:mod:`marko` markdown parser is used providing support for
`CommonMark <https://commonmark.org/>`_ markdown syntax. A small extension,
defined in :py:mod:`recipe_shelf.markdown.common`, keeps a copy of the source
so that parts of a document (such as the instructions) can be extracted
verbatim.
"""


from recipe_shelf.markdown.reader import parse_recipe, read_recipe_file
from recipe_shelf.markdown.writer import serialize_recipe

__all__ = [
    "parse_recipe",
    "read_recipe_file",
    "serialize_recipe",
]
