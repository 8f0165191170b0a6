"""
Recipe document reader.

Parses recipe JSON text back into a RecipeBook. The whole document is
checked before anything is returned: the first structural or semantic
problem raises and nothing from the document escapes.

Structural problems (wrong shapes, malformed containers) raise
``StructuralError``; values that are well-shaped but break a recipe rule
raise ``RecipeValidationError``. Both derive from ``RecipeLoadError``.
"""

import logging
import math
import re
from typing import List, Optional

from .errors import RecipeValidationError, StructuralError
from .models import Ingredient, Recipe, RecipeBook
from .scanner import (
    NUMBER_RE,
    Segment,
    decode_string,
    find_matching,
    parse_members,
    split_array,
    strip_segment,
)

logger = logging.getLogger(__name__)

RECIPES_KEY = "recipes"
NAME_KEY = "name"
SERVINGS_KEY = "servings"
INGREDIENTS_KEY = "ingredients"
AMOUNT_KEY = "amount"

MAX_SERVINGS = 2**31 - 1

_INTEGER_RE = re.compile(r"[+-]?\d+")


def deserialize(text: str) -> RecipeBook:
    """
    Parse a recipe document.

    Args:
        text: The full document text.

    Returns:
        A new RecipeBook holding every recipe in document order.

    Raises:
        StructuralError: If the text is not a recipe document.
        RecipeValidationError: If a recipe or ingredient breaks a rule.
    """
    if not isinstance(text, str):
        raise TypeError("Document text must be a string")

    root = strip_segment(text, 0, len(text))
    if not root.text.startswith("{"):
        raise StructuralError("Invalid JSON: root must be an object", position=root.start)
    close = find_matching(text, root.start)
    if close != root.start + len(root.text) - 1:
        raise StructuralError("Invalid JSON: unexpected text after root object", position=close + 1)

    members = parse_members(text, root)
    recipes_value = members.get(RECIPES_KEY)
    if recipes_value is None:
        raise StructuralError("Invalid JSON: missing 'recipes' field")
    if not recipes_value.text.startswith("["):
        raise StructuralError(
            "Invalid JSON: 'recipes' must be an array",
            position=recipes_value.start,
            path="$.recipes",
        )

    recipes = [
        _parse_recipe(text, element, i)
        for i, element in enumerate(split_array(text, recipes_value, "$.recipes"))
    ]

    logger.debug(f"Parsed {len(recipes)} recipe(s) from {len(text)} characters")
    return RecipeBook(recipes)


def _parse_recipe(text: str, element: Segment, index: int) -> Recipe:
    path = f"$.recipes[{index}]"
    if not element.text.startswith("{"):
        raise StructuralError(
            f"Recipe [{index}]: expected an object",
            index=index,
            position=element.start,
            path=path,
        )
    members = parse_members(text, element, path)

    name = _string_value(members.get(NAME_KEY))
    if name is None or not name.strip():
        raise RecipeValidationError("missing or invalid 'name' field", index, field=NAME_KEY)

    servings = _servings_value(members.get(SERVINGS_KEY), index)

    ingredients: List[Ingredient] = []
    ingredients_value = members.get(INGREDIENTS_KEY)
    if ingredients_value is not None:
        ingredients_path = f"{path}.ingredients"
        if not ingredients_value.text.startswith("["):
            raise StructuralError(
                f"Recipe [{index}]: 'ingredients' must be an array",
                index=index,
                position=ingredients_value.start,
                path=ingredients_path,
            )
        for j, item in enumerate(split_array(text, ingredients_value, ingredients_path)):
            ingredients.append(_parse_ingredient(text, item, index, j))

    recipe = Recipe(name, servings)
    for ingredient in ingredients:
        recipe.add_ingredient(ingredient.name, ingredient.amount)
    return recipe


def _parse_ingredient(text: str, item: Segment, recipe_index: int, index: int) -> Ingredient:
    path = f"$.recipes[{recipe_index}].ingredients[{index}]"
    if not item.text.startswith("{"):
        raise StructuralError(
            f"Recipe [{recipe_index}]: ingredient [{index}]: expected an object",
            index=index,
            position=item.start,
            path=path,
        )
    members = parse_members(text, item, path)

    name = _string_value(members.get(NAME_KEY))
    if name is None or not name.strip():
        raise RecipeValidationError(
            "missing or invalid 'name'", recipe_index, index, field=NAME_KEY
        )

    amount_value = members.get(AMOUNT_KEY)
    if amount_value is None:
        raise RecipeValidationError(
            "missing 'amount'", recipe_index, index, field=AMOUNT_KEY
        )
    amount = _number_value(amount_value)
    if amount is None:
        raise RecipeValidationError(
            "'amount' must be a valid number", recipe_index, index, field=AMOUNT_KEY
        )
    if amount <= 0:
        raise RecipeValidationError(
            "'amount' must be greater than 0", recipe_index, index, field=AMOUNT_KEY
        )
    return Ingredient(name, amount)


def _string_value(value: Optional[Segment]) -> Optional[str]:
    """Decoded string for a string token, None for anything else."""
    if value is None or not value.text.startswith('"'):
        return None
    return decode_string(value)


def _servings_value(value: Optional[Segment], index: int) -> int:
    if value is None:
        raise RecipeValidationError("missing 'servings' field", index, field=SERVINGS_KEY)
    if not _INTEGER_RE.fullmatch(value.text):
        raise RecipeValidationError(
            "'servings' must be a valid integer", index, field=SERVINGS_KEY
        )
    negative = value.text.startswith("-")
    digits = value.text.lstrip("+-").lstrip("0")
    if negative or not digits:
        raise RecipeValidationError(
            "'servings' must be greater than 0", index, field=SERVINGS_KEY
        )
    # int() refuses very long digit strings, so check the length first.
    if len(digits) > len(str(MAX_SERVINGS)) or int(digits) > MAX_SERVINGS:
        raise RecipeValidationError(
            f"'servings' must not exceed {MAX_SERVINGS}", index, field=SERVINGS_KEY
        )
    return int(digits)


def _number_value(value: Segment) -> Optional[float]:
    """Finite float for decimal number text, None otherwise."""
    if not NUMBER_RE.fullmatch(value.text):
        return None
    number = float(value.text)
    if not math.isfinite(number):
        return None
    return number

