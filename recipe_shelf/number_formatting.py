"""
Number formatting routines for ingredient amounts.

Three styles are provided:

.. autofunction:: format_decimal

.. autofunction:: format_fraction

.. autofunction:: format_exact
"""

import math

from typing import Union

from fractions import Fraction

from recipe_shelf.unicode_fractions import glyph_of, value_of


__all__ = [
    "format_decimal",
    "format_fraction",
    "format_exact",
]


QUARTER_TOLERANCE = 0.001
"""
How close the fractional part of a number must be to a multiple of 0.25 to be
rendered with a fixed number of decimal places by :py:func:`format_decimal`.
"""


def format_decimal(number: Union[int, float, Fraction]) -> str:
    """
    Format a number as a decimal.

    * Integers are shown without a decimal point (e.g. '3').
    * Numbers whose fractional part is a multiple of 0.25 are shown with one
      decimal place when the fractional part is also a multiple of 0.5 (e.g.
      '1.5') and two otherwise (e.g. '1.25').
    * All other numbers are shown with up to two decimal places, dropping
      trailing zeros and the decimal point (e.g. '0.33', '0.1').
    """
    value = float(number)
    if value == math.floor(value):
        return f"{value:.0f}"

    fractional = value - math.floor(value)
    remainder = fractional % 0.25
    if min(remainder, 0.25 - remainder) < QUARTER_TOLERANCE:
        halves = fractional % 0.5
        if min(halves, 0.5 - halves) < QUARTER_TOLERANCE:
            return f"{value:.1f}"
        else:
            return f"{value:.2f}"

    return f"{value:.2f}".rstrip("0").rstrip(".")


def format_fraction(number: Union[int, float, Fraction]) -> str:
    """
    Format a number as an integer followed by a Unicode fraction glyph (e.g.
    '1½' or '¾').

    When the fractional part does not correspond with any glyph (see
    :py:func:`recipe_shelf.unicode_fractions.glyph_of`), the number is instead
    formatted by :py:func:`format_decimal`.
    """
    value = float(number)
    integer = math.floor(value)
    fractional = value - integer
    if fractional == 0:
        return str(integer)

    glyph = glyph_of(fractional)
    if glyph is None:
        return format_decimal(number)
    elif integer == 0:
        return glyph
    else:
        return f"{integer}{glyph}"


def format_exact(number: Union[int, Fraction]) -> str:
    """
    Format a number such that parsing the result gives back exactly the same
    value.

    Integers are shown as-is, numbers whose fractional part is exactly a
    Unicode fraction glyph use that glyph (e.g. '1½'), numbers with at most
    three decimal places are shown as decimals (e.g. '0.1') and anything else
    is shown as an ASCII fraction, with improper fractions broken down into an
    integer and fractional part (e.g. '1 1/7').
    """
    number = Fraction(number)
    if number.denominator == 1:  # Integer case
        return str(number.numerator)

    integer_part = number.numerator // number.denominator
    fractional = number - integer_part

    glyph = glyph_of(fractional)
    if glyph is not None and value_of(glyph) == fractional:  # Glyph case
        return glyph if integer_part == 0 else f"{integer_part}{glyph}"

    if 1000 % number.denominator == 0:  # Short decimal case
        return format(number.numerator / number.denominator, ".3f").rstrip("0")

    numerator = fractional.numerator
    denominator = fractional.denominator
    if integer_part:  # Improper fraction case
        return f"{integer_part} {numerator}/{denominator}"
    else:  # Ordinary fraction case
        return f"{numerator}/{denominator}"
