"""
The ``recipe-shelf-lint`` command checks that RecipeMD files can be parsed.

Usage::

    $ recipe-shelf-lint FILENAME [...]

If any file cannot be read or parsed, an explanation is printed to stdout and
a non-zero exit status is returned. Otherwise, no messages are produced and
the exit status is 0.
"""

import sys

from argparse import ArgumentParser

from pathlib import Path

from recipe_shelf.markdown import read_recipe_file

from recipe_shelf.exceptions import RecipeParseError


def main() -> None:
    parser = ArgumentParser(
        description="""
            Check RecipeMD files for errors.
        """,
    )

    parser.add_argument(
        "recipe",
        type=Path,
        nargs="*",
        help="""
            The filename of the RecipeMD file to check. Pass multiple
            filenames to check multiple files.
        """,
    )

    args = parser.parse_args()

    failed = False
    for page in args.recipe:
        try:
            read_recipe_file(page)
        except RecipeParseError as e:
            failed = True
            print(f"{page}: Error: {e}")

    sys.exit(1 if failed else 0)


if __name__ == "__main__":
    main()
