from typing import Union

import re

from fractions import Fraction

from recipe_shelf.unicode_fractions import GLYPHS, value_of


fraction_pattern = re.compile(
    r"((?P<integer>[0-9]+)[ \t]+)?(?P<numerator>[0-9]+)[ \t]*/[ \t]*(?P<denominator>[0-9]+)"
)

glyph_pattern = re.compile(
    r"((?P<integer>[0-9]+)[ \t]*)?(?P<glyph>[{}])".format(GLYPHS)
)


def number(value: str) -> Union[int, float, Fraction]:
    """
    Attempt to parse a number formatted as a fraction (e.g. 9 3/4), a fraction
    glyph optionally preceded by an integer (e.g. ½ or 1½), a float (e.g.
    3.14) or integer (e.g. 123). Throws a :py:exc:`ValueError` if this fails.
    """
    value = value.strip()

    match = fraction_pattern.fullmatch(value)
    if match is not None:
        integer = int(match["integer"]) if match["integer"] is not None else 0
        numerator = int(match["numerator"])
        denominator = int(match["denominator"])
        if denominator == 0:
            raise ValueError(f"zero denominator in {value!r}")
        return integer + Fraction(numerator, denominator)

    match = glyph_pattern.fullmatch(value)
    if match is not None:
        integer = int(match["integer"]) if match["integer"] is not None else 0
        return integer + Fraction(value_of(match["glyph"]))

    try:
        return int(value)
    except ValueError:
        return float(value)
