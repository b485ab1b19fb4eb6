"""
The ``recipe-shelf`` command lists a folder of RecipeMD recipes or prints a
single recipe, optionally scaled.

.. highlight:: bash

Listing a folder
================

.. code:: text

    $ recipe-shelf FOLDER

Prints the title, filename and tags of every recipe in the folder. Files
which could not be parsed or read are reported at the end.

Printing a recipe
=================

.. code:: text

    $ recipe-shelf RECIPE_FILE [--scale MULTIPLIER] [--format FORMAT]

Prints the recipe re-written in the canonical RecipeMD layout. The
``--scale`` or ``-S`` argument takes integers (e.g. '2'), decimal numbers
(e.g. '1.5') and fractions (e.g. '1/2', '1 1/3' or '½').
"""

import sys
import asyncio
import logging

from argparse import ArgumentParser

from pathlib import Path

from recipe_shelf.amount import AmountDisplayFormat

from recipe_shelf.number_parser import number

from recipe_shelf.markdown import read_recipe_file, serialize_recipe

from recipe_shelf.store import RecipeStore

from recipe_shelf.exceptions import RecipeParseError, RecipeWriteError


def list_folder(folder: Path) -> bool:
    """Print the recipes in a folder. Returns True if any had problems."""
    store = RecipeStore(folder)
    asyncio.run(store.refresh())

    for recipe_file in store.recipes:
        tags = ", ".join(recipe_file.recipe.tags)
        print(f"{recipe_file.title}\t{recipe_file.filename}\t{tags}".rstrip())

    failed = False
    for recipe_file in store.recipes:
        if recipe_file.is_fallback:
            failed = True
            print(f"{recipe_file.path}: Warning: {recipe_file.parse_error}")
    for path, error in store.errors.items():
        failed = True
        print(f"{path}: Error: {error}")
    return failed


def main() -> None:
    parser = ArgumentParser(
        description="""
            List a folder of RecipeMD recipes or print a single recipe.
        """,
    )

    parser.add_argument(
        "path",
        type=Path,
        help="""
            A folder of recipes to list, or a single recipe file to print.
        """,
    )

    parser.add_argument(
        "--scale",
        "-S",
        type=number,
        metavar="MULTIPLIER",
        default=1,
        help="""
            Multiplier to scale the recipe by. May be a decimal (e.g. '3' or
            '3.14') or a fraction (e.g. '1/2' or '9 3/4').
        """,
    )

    parser.add_argument(
        "--format",
        "-f",
        choices=[f.name for f in AmountDisplayFormat],
        default=AmountDisplayFormat.original.name,
        help="""
            How to write amounts. 'original' keeps amounts as written where
            possible, 'decimal' and 'fraction' rewrite every amount.
        """,
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="""
            Log progress to stderr.
        """,
    )

    args = parser.parse_args()

    if not 0 < args.scale < float("inf"):
        parser.error(f"argument --scale/-S: must be a positive number, not {args.scale}")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(name)s: %(message)s",
    )

    try:
        if args.path.is_dir():
            failed = list_folder(args.path)
            sys.exit(1 if failed else 0)

        recipe = read_recipe_file(args.path)
        if args.scale != 1:
            recipe = recipe.scale(args.scale)
        sys.stdout.write(
            serialize_recipe(recipe, AmountDisplayFormat[args.format])
        )
    except (RecipeParseError, RecipeWriteError) as e:
        sys.stderr.write(f"{args.path}: Error: {e}\n")
        sys.exit(1)


if __name__ == "__main__":
    main()
