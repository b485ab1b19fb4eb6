"""
Lookup between Unicode vulgar fraction glyphs (e.g. '½') and their values.

.. autofunction:: value_of

.. autofunction:: glyph_of

.. autodata:: GLYPHS
"""

from typing import Mapping, Optional, Tuple, Union

from fractions import Fraction


__all__ = [
    "TOLERANCE",
    "GLYPHS",
    "value_of",
    "glyph_of",
]


TOLERANCE = 0.01
"""
The maximum difference between a value and a glyph's value for
:py:func:`glyph_of` to consider them a match.
"""


FRACTION_TABLE: Tuple[Tuple[str, Fraction], ...] = (
    ("⅛", Fraction(1, 8)),
    ("⅙", Fraction(1, 6)),
    ("⅕", Fraction(1, 5)),
    ("¼", Fraction(1, 4)),
    ("⅓", Fraction(1, 3)),
    ("⅜", Fraction(3, 8)),
    ("⅖", Fraction(2, 5)),
    ("½", Fraction(1, 2)),
    ("⅗", Fraction(3, 5)),
    ("⅝", Fraction(5, 8)),
    ("⅔", Fraction(2, 3)),
    ("¾", Fraction(3, 4)),
    ("⅘", Fraction(4, 5)),
    ("⅚", Fraction(5, 6)),
    ("⅞", Fraction(7, 8)),
)
"""(glyph, value) pairs in ascending order of value."""

GLYPH_VALUES: Mapping[str, Fraction] = dict(FRACTION_TABLE)

GLYPHS = "".join(glyph for glyph, _value in FRACTION_TABLE)
"""All supported glyphs, in ascending order of value."""


def value_of(glyph: str) -> Optional[Fraction]:
    """
    Return the value of a fraction glyph, or None if the string is not a
    (single) supported glyph.
    """
    return GLYPH_VALUES.get(glyph)


def glyph_of(value: Union[int, float, Fraction]) -> Optional[str]:
    """
    Return the glyph whose value lies within :py:data:`TOLERANCE` of the
    supplied value, or None if there isn't one.

    Glyphs are tested in ascending order of value and the first match is
    returned, so where two glyphs are within tolerance, the smaller wins.
    """
    for glyph, glyph_value in FRACTION_TABLE:
        if abs(float(value) - float(glyph_value)) <= TOLERANCE:
            return glyph
    return None
