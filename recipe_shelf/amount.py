"""
Ingredient and yield quantities.

An :py:class:`Amount` pairs a numeric value with an optional unit and,
when parsed from a document, the original text it was written as. Amounts
may be scaled (e.g. when doubling a recipe) and formatted in one of several
styles enumerated by :py:class:`AmountDisplayFormat`.

.. autoclass:: Amount
    :members:

.. autoclass:: AmountDisplayFormat

.. autoclass:: Yield
    :members:

.. autoexception:: AmountInvariantError
"""

from typing import Optional, Tuple, Union

from enum import Enum

from fractions import Fraction

from dataclasses import dataclass, field, replace

from recipe_shelf.number_formatting import (
    format_decimal,
    format_exact,
    format_fraction,
)


__all__ = [
    "AmountInvariantError",
    "AmountDisplayFormat",
    "Amount",
    "Yield",
]


Number = Union[int, float, Fraction]


class AmountInvariantError(ValueError):
    """
    Thrown when an :py:class:`Amount` is constructed with a negative value.
    """


class AmountDisplayFormat(Enum):
    """Styles in which an :py:class:`Amount` may be formatted."""

    original = "original"
    """
    The text originally written in the document, when available and the
    amount has not been scaled. Otherwise the number is written exactly (see
    :py:func:`~recipe_shelf.number_formatting.format_exact`).
    """

    decimal = "decimal"
    """Decimal numbers, e.g. '1.5 cups'."""

    fraction = "fraction"
    """Unicode fraction glyphs where possible, e.g. '1½ cups'."""


def to_fraction(value: Number) -> Fraction:
    if isinstance(value, float):
        # NB: 0.1 becomes 1/10, not the nearest binary fraction
        return Fraction(repr(value))
    else:
        return Fraction(value)


@dataclass(frozen=True)
class Amount:
    """
    A quantity of an ingredient or of a recipe's yield.

    Suggested rendering is given by :py:meth:`format`.
    """

    value: Fraction
    """
    The numerical quantity. Always a :py:class:`~fractions.Fraction`; other
    numeric types are converted on construction.
    """

    unit: Optional[str] = None
    """
    The unit of measure (e.g. 'cups', 'g'), or None for unit-less amounts
    (e.g. a count of eggs). Never an empty string.
    """

    raw_text: Optional[str] = None
    """
    The amount exactly as written in the source document, including the unit
    (e.g. '1 ½ cups'). None for amounts not read from a document or which have
    been scaled.
    """

    numeric: bool = True
    """
    False for amounts which were written without any number (e.g. a yield of
    'a few'). Such amounts have a value of zero, always display their
    :py:attr:`raw_text` and are unaffected by scaling.
    """

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", to_fraction(self.value))

        if self.value < 0:
            raise AmountInvariantError(f"amount must not be negative: {self.value}")

        if self.unit is not None:
            unit = self.unit.strip()
            object.__setattr__(self, "unit", unit if unit else None)

    @classmethod
    def text(cls, raw_text: str) -> "Amount":
        """Construct a non-numeric amount consisting only of some text."""
        return cls(0, raw_text=raw_text, numeric=False)

    def scale(self, multiplier: Number) -> "Amount":
        """
        Return a copy of this amount with the value multiplied by
        ``multiplier``. The unit is retained but the raw text is dropped.
        """
        if not self.numeric:
            return self
        return replace(self, value=self.value * to_fraction(multiplier), raw_text=None)

    def format(self, display_format: AmountDisplayFormat = AmountDisplayFormat.original) -> str:
        """
        Format this amount as a string in the style given (see
        :py:class:`AmountDisplayFormat`). The unit, when present, follows the
        number, separated by a single space.
        """
        if not self.numeric:
            return self.raw_text or ""

        if display_format is AmountDisplayFormat.original and self.raw_text is not None:
            return self.raw_text

        if display_format is AmountDisplayFormat.decimal:
            number = format_decimal(self.value)
        elif display_format is AmountDisplayFormat.fraction:
            number = format_fraction(self.value)
        else:
            number = format_exact(self.value)

        if self.unit is not None:
            return f"{number} {self.unit}"
        else:
            return number

    def format_scaled(
        self,
        multiplier: Number,
        display_format: AmountDisplayFormat = AmountDisplayFormat.original,
    ) -> str:
        """
        Format this amount scaled by ``multiplier``. A multiplier of exactly 1
        leaves the original text available for display.
        """
        if multiplier == 1:
            return self.format(display_format)
        else:
            return self.scale(multiplier).format(display_format)

    def __str__(self) -> str:
        return self.format()


@dataclass(frozen=True)
class Yield:
    """The quantities a recipe produces, e.g. '4 servings, 12 cookies'."""

    amounts: Tuple[Amount, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "amounts", tuple(self.amounts))

    def __bool__(self) -> bool:
        return bool(self.amounts)

    def scale(self, multiplier: Number) -> "Yield":
        return Yield(tuple(amount.scale(multiplier) for amount in self.amounts))

    def format(self, display_format: AmountDisplayFormat = AmountDisplayFormat.original) -> str:
        """Format all amounts, separated by commas."""
        return ", ".join(amount.format(display_format) for amount in self.amounts)

    def format_scaled(
        self,
        multiplier: Number,
        display_format: AmountDisplayFormat = AmountDisplayFormat.original,
    ) -> str:
        return ", ".join(
            amount.format_scaled(multiplier, display_format) for amount in self.amounts
        )
