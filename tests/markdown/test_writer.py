import pytest

from typing import Any, Tuple

from fractions import Fraction

from recipe_shelf.amount import Amount, AmountDisplayFormat, Yield

from recipe_shelf.recipe import Ingredient, IngredientGroup, Recipe

from recipe_shelf.exceptions import SerializationError

from recipe_shelf.markdown import parse_recipe, serialize_recipe


PANCAKES = Recipe(
    title="Pancakes",
    description="Thin, French-style pancakes.",
    tags=("breakfast", "quick"),
    yields=Yield((Amount(8, "pancakes"),)),
    ingredient_groups=(
        IngredientGroup(
            None,
            (
                Ingredient("plain flour", Amount(200, "g")),
                Ingredient("eggs", Amount(3), preparation="beaten"),
                Ingredient("milk", Amount(Fraction(1, 2), "l")),
            ),
        ),
        IngredientGroup("To serve", (Ingredient("lemon", Amount(1)), Ingredient("sugar"))),
    ),
    instructions="Whisk everything together.\n\nFry in a hot pan.",
)

PANCAKES_MARKDOWN = """# Pancakes

Thin, French-style pancakes.

*breakfast, quick*

**8 pancakes**

---

- *200 g* plain flour
- *3* eggs (beaten)
- *½ l* milk

## To serve

- *1* lemon
- sugar

---

Whisk everything together.

Fry in a hot pan.
"""


def structure(recipe: Recipe) -> Any:
    """The parts of a recipe which survive a round trip through markdown."""

    def amount(a: Any) -> Any:
        return None if a is None else (a.value, a.unit, a.numeric)

    def group(g: IngredientGroup) -> Tuple[Any, ...]:
        return (
            g.title,
            tuple(
                (i.name, amount(i.amount), i.linked_recipe, i.preparation)
                for i in g.ingredients
            ),
            tuple(group(s) for s in g.subgroups),
        )

    return (
        recipe.title,
        recipe.description,
        recipe.tags,
        tuple(amount(a) for a in recipe.yields.amounts),
        tuple(group(g) for g in recipe.ingredient_groups),
        recipe.instructions,
    )


def test_serialize() -> None:
    assert serialize_recipe(PANCAKES) == PANCAKES_MARKDOWN


def test_minimal() -> None:
    recipe = Recipe(
        "Tea", ingredient_groups=(IngredientGroup(None, (Ingredient("bag", Amount(1)),)),)
    )
    assert serialize_recipe(recipe) == "# Tea\n\n---\n\n- *1* bag\n\n---\n"


def test_original_text_retained() -> None:
    recipe = parse_recipe("# Tea\n\n**makes 2 mugs**\n\n---\n\n- *1 1/2 tsp*   leaves\n")
    assert "**makes 2 mugs**" in serialize_recipe(recipe)
    assert "- *1 1/2 tsp* leaves" in serialize_recipe(recipe)


@pytest.mark.parametrize(
    "display_format, exp",
    [
        (AmountDisplayFormat.original, "- *1 1/2 cups* flour"),
        (AmountDisplayFormat.decimal, "- *1.5 cups* flour"),
        (AmountDisplayFormat.fraction, "- *1½ cups* flour"),
    ],
)
def test_display_format(display_format: AmountDisplayFormat, exp: str) -> None:
    recipe = parse_recipe("# Cake\n\n---\n\n- *1 1/2 cups* flour\n")
    assert exp in serialize_recipe(recipe, display_format)


def test_scaled() -> None:
    scaled = parse_recipe(PANCAKES_MARKDOWN).scale(Fraction(1, 3))
    markdown = serialize_recipe(scaled)
    assert "**2⅔ pancakes**" in markdown
    assert "- *1* eggs (beaten)" in markdown
    assert "- *⅙ l* milk" in markdown


def test_linked_recipe() -> None:
    recipe = Recipe(
        "Pizza",
        ingredient_groups=(
            IngredientGroup(
                None,
                (
                    Ingredient("dough", Amount(1, "batch"), linked_recipe="pizza-dough.md"),
                    Ingredient("tomato sauce", linked_recipe="tomato sauce.md"),
                ),
            ),
        ),
    )
    markdown = serialize_recipe(recipe)
    assert "- *1 batch* [dough](pizza-dough.md)\n" in markdown
    assert "- [tomato sauce](<tomato sauce.md>)\n" in markdown
    assert structure(parse_recipe(markdown)) == structure(recipe)


def test_nested_groups() -> None:
    recipe = Recipe(
        "Cake",
        ingredient_groups=(
            IngredientGroup(
                "Sponge",
                (Ingredient("flour"),),
                (
                    IngredientGroup("Wet", (Ingredient("egg", Amount(2)),)),
                    IngredientGroup("Dry", (Ingredient("sugar"),)),
                ),
            ),
            IngredientGroup("Icing", (Ingredient("butter"),)),
        ),
    )
    markdown = serialize_recipe(recipe)
    assert "## Sponge\n\n- flour\n\n### Wet\n\n- *2* egg\n\n### Dry\n\n- sugar\n\n## Icing" in markdown
    assert structure(parse_recipe(markdown)) == structure(recipe)


@pytest.mark.parametrize(
    "recipe",
    [
        PANCAKES,
        PANCAKES.scale(Fraction(2, 7)),
        PANCAKES.scale(0.1),
        Recipe(
            "Text amounts",
            yields=Yield((Amount.text("a few"), Amount(2, "loaves"))),
            ingredient_groups=(
                IngredientGroup(None, (Ingredient("salt", Amount.text("a pinch")),)),
            ),
        ),
    ],
)
def test_round_trip(recipe: Recipe) -> None:
    assert structure(parse_recipe(serialize_recipe(recipe))) == structure(recipe)


@pytest.mark.parametrize(
    "recipe",
    [
        Recipe("", ingredient_groups=(IngredientGroup(None, (Ingredient("x"),)),)),
        Recipe("   ", ingredient_groups=(IngredientGroup(None, (Ingredient("x"),)),)),
        Recipe("No ingredients"),
        Recipe("Empty group", ingredient_groups=(IngredientGroup("Nothing"),)),
    ],
)
def test_invalid(recipe: Recipe) -> None:
    with pytest.raises(SerializationError):
        serialize_recipe(recipe)


@pytest.mark.parametrize(
    "groups",
    [
        # Untitled group after a titled one
        (
            IngredientGroup("Dough", (Ingredient("flour"),)),
            IngredientGroup(None, (Ingredient("salt"),)),
        ),
        # Untitled group with subgroups
        (
            IngredientGroup(
                None,
                (Ingredient("salt"),),
                (IngredientGroup("Sub", (Ingredient("flour"),)),),
            ),
        ),
        # Empty untitled group
        (IngredientGroup(None), IngredientGroup("Dough", (Ingredient("flour"),))),
        # Untitled subgroup
        (
            IngredientGroup(
                "Dough",
                (Ingredient("flour"),),
                (IngredientGroup(None, (Ingredient("salt"),)),),
            ),
        ),
        # Nested beyond a level 6 heading
        (
            IngredientGroup(
                "A",
                (),
                (
                    IngredientGroup(
                        "B",
                        (),
                        (
                            IngredientGroup(
                                "C",
                                (),
                                (
                                    IngredientGroup(
                                        "D",
                                        (),
                                        (
                                            IngredientGroup(
                                                "E", (), (IngredientGroup("F", (Ingredient("x"),)),)
                                            ),
                                        ),
                                    ),
                                ),
                            ),
                        ),
                    ),
                ),
            ),
        ),
    ],
)
def test_unwritable_groups(groups: Tuple[IngredientGroup, ...]) -> None:
    with pytest.raises(SerializationError):
        serialize_recipe(Recipe("Bread", ingredient_groups=groups))


def test_tag_with_comma() -> None:
    recipe = Recipe(
        "Tea",
        tags=("hot, sweet",),
        ingredient_groups=(IngredientGroup(None, (Ingredient("bag"),)),),
    )
    with pytest.raises(SerializationError):
        serialize_recipe(recipe)


@pytest.mark.parametrize(
    "recipe",
    [
        # Names which begin with emphasis
        Recipe(
            "Salad",
            ingredient_groups=(
                IngredientGroup(
                    None,
                    (
                        Ingredient("*fresh* basil"),
                        Ingredient("_ripe_ tomatoes"),
                        Ingredient("*extra* oil", Amount(2, "tbsp")),
                    ),
                ),
            ),
        ),
        # Descriptions which look like tags or yields
        Recipe(
            "Soup",
            description="*Serve warm*",
            tags=("a",),
            ingredient_groups=(IngredientGroup(None, (Ingredient("stock"),)),),
        ),
        Recipe(
            "Soup",
            description="*Serve warm*\n\n**Really warm**",
            ingredient_groups=(IngredientGroup(None, (Ingredient("stock"),)),),
        ),
        Recipe(
            "Soup",
            description="_Serve warm_",
            yields=Yield((Amount(4, "bowls"),)),
            ingredient_groups=(IngredientGroup(None, (Ingredient("stock"),)),),
        ),
    ],
)
def test_round_trip_emphasis(recipe: Recipe) -> None:
    assert structure(parse_recipe(serialize_recipe(recipe))) == structure(recipe)


def test_escaped_name() -> None:
    recipe = Recipe(
        "Salad",
        ingredient_groups=(IngredientGroup(None, (Ingredient("*fresh* basil"),)),),
    )
    assert "- \\*fresh* basil\n" in serialize_recipe(recipe)
