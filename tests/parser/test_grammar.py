import pytest

from typing import Optional

from fractions import Fraction

from peggie import ParseError

from recipe_shelf.parser import parse_amount


@pytest.mark.parametrize(
    "source, exp_value, exp_unit",
    [
        # Integers and decimals
        ("2", Fraction(2), None),
        ("200 g", Fraction(200), "g"),
        ("1.5 l", Fraction(3, 2), "l"),
        (".5 cup", Fraction(1, 2), "cup"),
        # Fractions
        ("1/2", Fraction(1, 2), None),
        ("1 / 2 tsp", Fraction(1, 2), "tsp"),
        ("1 1/2 cups", Fraction(3, 2), "cups"),
        # Glyphs
        ("½", Fraction(1, 2), None),
        ("1½ cups", Fraction(3, 2), "cups"),
        ("1 ½ tbsp", Fraction(3, 2), "tbsp"),
        # Units without a space
        ("200g", Fraction(200), "g"),
        # Multi-word units
        ("2 heaped tbsp", Fraction(2), "heaped tbsp"),
        # Surrounding whitespace
        ("  3   large  ", Fraction(3), "large"),
    ],
)
def test_valid(source: str, exp_value: Fraction, exp_unit: Optional[str]) -> None:
    amount = parse_amount(source)
    assert amount.value == exp_value
    assert amount.unit == exp_unit
    assert amount.raw_text == source.strip()
    assert amount.numeric


@pytest.mark.parametrize("source", ["", "cups", "a pinch", "/2", "-1 cup"])
def test_invalid(source: str) -> None:
    with pytest.raises(ParseError):
        parse_amount(source)


def test_zero_denominator() -> None:
    with pytest.raises(ValueError):
        parse_amount("1/0 cups")
