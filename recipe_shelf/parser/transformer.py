"""
Transforms :py:mod:`peggie` parse trees of the amount grammar into values.
"""

from typing import Any, NamedTuple, Optional

from fractions import Fraction

from peggie import ParseTree, ParseTreeTransformer

from recipe_shelf.unicode_fractions import value_of


class ParsedAmount(NamedTuple):
    value: Fraction
    """The numeric part of the amount."""

    unit: Optional[str]
    """Any text following the number, or None."""


class AmountTransformer(ParseTreeTransformer):
    def amount(self, _pt: ParseTree, children: Any) -> ParsedAmount:
        _hsp, value, unit, _hsp2, _eof = children
        return ParsedAmount(value, unit)

    def mixed_glyph(self, _pt: ParseTree, children: Any) -> Fraction:
        integer, _hsp, glyph = children
        return integer + glyph

    def glyph(self, _pt: ParseTree, glyph: str) -> Fraction:
        value = value_of(glyph)
        assert value is not None
        return value

    def fraction(self, _pt: ParseTree, children: Any) -> Fraction:
        whole, numerator, _hsp, _slash, _hsp2, denominator = children
        if denominator == 0:
            raise ValueError("fraction has a zero denominator")
        value = Fraction(numerator, denominator)
        if whole is not None:
            integer, _space = whole
            value += integer
        return value

    def decimal(self, _pt: ParseTree, string: str) -> Fraction:
        return Fraction(string)

    def integer(self, _pt: ParseTree, string: str) -> int:
        return int(string)

    def unit(self, _pt: ParseTree, children: Any) -> str:
        _hsp, text = children
        return str(text)
