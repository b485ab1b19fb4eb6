"""
Helpers for presenting a recipe's free-form instructions.

.. autofunction:: number_steps

.. autofunction:: contains_amounts
"""

import re

from recipe_shelf.unicode_fractions import GLYPHS


__all__ = [
    "number_steps",
    "contains_amounts",
]


numbered_pattern = re.compile(r"[0-9]+[.)]|[Ss]tep\s+[0-9]+[:\-\s]")

rule_pattern = re.compile(r"[-*_]{3,}")

# Temperatures, times and bare numbers are deliberately not matched
amount_pattern = re.compile(
    r"(?:^|\b|(?<=\s))([0-9][0-9./]*|[{}])\s*"
    r"(cups?|tablespoons?|tbsp|teaspoons?|tsp|ounces?|oz|pounds?|lbs?|grams?|g"
    r"|kilograms?|kg|milliliters?|ml|liters?|l|quarts?|qt|pints?|pt|gallons?|gal"
    r"|sticks?|cloves?|slices?|pieces?|t|c)\b".format(GLYPHS),
    re.IGNORECASE,
)


def is_numbered(line: str) -> bool:
    return numbered_pattern.match(line.strip()) is not None


def ends_steps(line: str) -> bool:
    """
    True for lines after which steps are no longer numbered: headings,
    horizontal rules and lines in italics (e.g. an attribution).
    """
    line = line.strip()
    if line.startswith("#") or rule_pattern.fullmatch(line):
        return True
    if len(line) >= 3:
        for marker in "*_":
            if (
                line.startswith(marker)
                and line.endswith(marker)
                and not line.startswith(marker * 2)
            ):
                return True
    return False


def number_steps(instructions: str) -> str:
    """
    Number each non-blank line of the instructions as a step ('1. ...',
    '2. ...'). Numbering stops at the first heading, horizontal rule or
    italic line; the remaining lines are left unchanged. Instructions which
    are already numbered are returned unchanged.
    """
    lines = instructions.split("\n")

    first = next((line for line in lines if line.strip()), None)
    if first is None or is_numbered(first):
        return instructions

    out = []
    step = 1
    stopped = False
    for line in lines:
        if not line.strip():
            out.append(line)
            continue

        stopped = stopped or ends_steps(line)
        if stopped:
            out.append(line)
        else:
            out.append(f"{step}. {line.strip()}")
            step += 1

    return "\n".join(out)


def contains_amounts(instructions: str) -> bool:
    """
    True if the instructions mention quantities of ingredients (e.g. '2 cups
    broth'). Such quantities are not adjusted when a recipe is scaled.
    """
    return amount_pattern.search(instructions) is not None
