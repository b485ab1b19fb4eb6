"""
Ingredient and yield amounts (e.g. '1 ½ cups') are parsed using a small
:py:mod:`peggie` grammar by :py:func:`recipe_shelf.parser.parse_amount`:

.. autofunction:: recipe_shelf.parser.parse_amount

The numeric part may be an integer ('2'), a decimal ('1.5' or '.5'), a
fraction ('1/2'), a mixed number ('1 1/2'), a Unicode fraction glyph ('½') or
an integer followed by a glyph ('1½' or '1 ½'). All text following the number
is taken to be the unit, which may therefore contain several words (e.g.
'2 heaped tbsp').
"""

from typing import cast

from peggie import Parser, ParseError

from recipe_shelf.amount import Amount

from recipe_shelf.parser.grammar import grammar, prettify_parse_error

from recipe_shelf.parser.transformer import AmountTransformer, ParsedAmount


__all__ = [
    "parse_amount",
]


def parse_amount(source: str) -> Amount:
    """
    Parse an amount into an :py:class:`~recipe_shelf.amount.Amount`. The
    (stripped) source text is retained as the amount's
    :py:attr:`~recipe_shelf.amount.Amount.raw_text`.

    Raises
    ======
    peggie.ParseError
        If the text does not start with a number.
    ValueError
        If the number is malformed (e.g. a fraction with a zero denominator).
    """
    parser = Parser(grammar)
    try:
        parse_tree = parser.parse(source)
    except ParseError as e:
        raise prettify_parse_error(e)
    parsed = cast(ParsedAmount, AmountTransformer().transform(parse_tree))
    return Amount(parsed.value, parsed.unit, raw_text=source.strip())
