"""
Recipe document writer.

Turns a RecipeBook into the canonical JSON text stored on disk. Recipes and
ingredients are written in iteration order; amounts keep full precision.
"""

import logging
from decimal import Decimal
from typing import List

from .models import Ingredient, Recipe, RecipeBook
from .scanner import encode_string

logger = logging.getLogger(__name__)

INDENT = "  "


def format_number(value: float) -> str:
    """
    Full-precision decimal text for ``value``, never in exponent form.

    Uses the shortest representation that reads back to the same float,
    so 1.234567 is written as ``1.234567`` and 1e-05 as ``0.00001``.
    """
    text = format(Decimal(repr(float(value))), "f")
    if "." not in text:
        text += ".0"
    return text


def _ingredient_lines(ingredient: Ingredient, depth: int) -> List[str]:
    pad = INDENT * depth
    return [
        f"{pad}{{",
        f'{pad}{INDENT}"name": {encode_string(ingredient.name)},',
        f'{pad}{INDENT}"amount": {format_number(ingredient.amount)}',
        f"{pad}}}",
    ]


def _recipe_lines(recipe: Recipe, depth: int) -> List[str]:
    pad = INDENT * depth
    inner = pad + INDENT
    lines = [
        f"{pad}{{",
        f'{inner}"name": {encode_string(recipe.name)},',
        f'{inner}"servings": {recipe.servings},',
        f'{inner}"ingredients": [',
    ]
    ingredients = recipe.ingredients
    for j, ingredient in enumerate(ingredients):
        block = _ingredient_lines(ingredient, depth + 2)
        if j < len(ingredients) - 1:
            block[-1] += ","
        lines.extend(block)
    lines.append(f"{inner}]")
    lines.append(f"{pad}}}")
    return lines


def serialize(book: RecipeBook) -> str:
    """
    Convert a recipe book into JSON text.

    Args:
        book: The recipes to write. An empty book gives an empty array.

    Returns:
        The document text, without a trailing newline.

    Raises:
        TypeError: If ``book`` is not a RecipeBook.
    """
    if not isinstance(book, RecipeBook):
        raise TypeError("RecipeBook must not be None")

    recipes = book.all_recipes()
    lines = ["{", f'{INDENT}"recipes": [']
    for i, recipe in enumerate(recipes):
        block = _recipe_lines(recipe, 2)
        if i < len(recipes) - 1:
            block[-1] += ","
        lines.extend(block)
    lines.append(f"{INDENT}]")
    lines.append("}")

    text = "\n".join(lines)
    logger.debug(f"Serialized {len(recipes)} recipe(s) into {len(text)} characters")
    return text
