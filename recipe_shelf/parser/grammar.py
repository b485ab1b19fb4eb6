"""
The :py:mod:`peggie` grammar for ingredient and yield amounts (read from
``grammar.peg``).

.. autodata:: grammar

.. autodata:: grammar_source

"""

import os

from peggie import compile_grammar, ParseError, RuleExpr, RegexExpr

from recipe_shelf.unicode_fractions import GLYPHS

__all__ = [
    "grammar",
    "grammar_source",
    "prettify_parse_error",
]

grammar_source_path = os.path.join(os.path.dirname(__file__), "grammar.peg")

with open(grammar_source_path, encoding="utf-8") as f:
    grammar_source = f.read().replace("@GLYPHS@", GLYPHS)
    """
    The amount syntax :py:mod:`peggie` grammar source in a string.
    """

grammar = compile_grammar(grammar_source)
"""
The compiled :py:class:`peggie.Grammar` for the amount syntax.
"""


def prettify_parse_error(parse_error: ParseError) -> ParseError:
    parse_error.expr_explanations = {
        RuleExpr("amount"): "<amount>",
        RuleExpr("number"): "<number>",
        RuleExpr("mixed_glyph"): "<number>",
        RuleExpr("glyph"): "<fraction>",
        RuleExpr("fraction"): "<fraction>",
        RuleExpr("decimal"): "<number>",
        RuleExpr("integer"): "<number>",
        RuleExpr("unit"): "<unit>",
        RuleExpr("eof"): "<end of amount>",
        # Add regex descriptions
        RegexExpr("[0-9]+"): "<number>",
        RegexExpr(r"[0-9]+(\.[0-9]+)?|\.[0-9]+"): "<number>",
        RegexExpr(f"[{GLYPHS}]"): "<fraction>",
        RegexExpr("[ \t]+"): None,
        # Display literals without escapes
        RegexExpr.literal("/"): "'/'",
        # Omit insignificant whitespace
        RuleExpr("hsp"): None,
    }
    parse_error.last_resort_exprs = {
        RuleExpr("eof"),
    }
    return parse_error
