"""
Recipe domain objects.

Provides:
- Ingredient and Recipe records with their construction rules
- RecipeBook, the ordered recipe collection with search helpers
- Name sorting and display formatting of amounts

The persistence layer reads these objects only through the public
attributes and methods defined here.
"""

import logging
import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)


def _is_blank(value: object) -> bool:
    return not isinstance(value, str) or not value.strip()


def _is_positive_amount(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value > 0


@dataclass(frozen=True)
class Ingredient:
    """A named component of a recipe with a positive quantity."""

    name: str
    amount: float

    def __post_init__(self):
        if _is_blank(self.name):
            raise ValueError("ingredient name must be non-empty")
        if not _is_positive_amount(self.amount):
            raise ValueError("ingredient amount must be a finite number greater than 0")
        object.__setattr__(self, "amount", float(self.amount))


class Recipe:
    """
    A named dish with a serving count and an ordered list of ingredients.

    Args:
        name: Recipe name, must not be blank.
        servings: Number of servings, a positive integer.

    Raises:
        ValueError: If name or servings break those rules.
    """

    def __init__(self, name: str, servings: int):
        if _is_blank(name):
            raise ValueError("name must be non-empty")
        if isinstance(servings, bool) or not isinstance(servings, int) or servings <= 0:
            raise ValueError("servings must be positive")
        self._name = name
        self._servings = servings
        self._ingredients: List[Ingredient] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def servings(self) -> int:
        return self._servings

    @property
    def ingredients(self) -> Tuple[Ingredient, ...]:
        return tuple(self._ingredients)

    def add_ingredient(self, name: str, amount: float) -> bool:
        """
        Append an ingredient when both inputs are valid.

        Invalid input leaves the recipe unchanged.

        Returns:
            True if the ingredient was added.
        """
        if _is_blank(name):
            logger.debug(f"Invalid ingredient name for {self._name!r}; ingredient not added")
            return False
        if not _is_positive_amount(amount):
            logger.debug(f"Invalid ingredient amount {amount!r} for {self._name!r}; ingredient not added")
            return False
        self._ingredients.append(Ingredient(name, amount))
        return True

    def total_ingredient_count(self) -> int:
        return len(self._ingredients)

    def scale_to_servings(self, new_servings: int) -> None:
        """
        Scale every ingredient amount proportionally to ``new_servings``.

        Raises:
            ValueError: If ``new_servings`` is not a positive integer.
        """
        if isinstance(new_servings, bool) or not isinstance(new_servings, int) or new_servings <= 0:
            raise ValueError("new_servings must be positive")

        factor = new_servings / self._servings
        self._ingredients = [
            Ingredient(ingredient.name, ingredient.amount * factor)
            for ingredient in self._ingredients
        ]
        self._servings = new_servings

    def scaled(self, new_servings: int) -> "Recipe":
        """Return a scaled copy, leaving this recipe untouched."""
        copy = Recipe(self._name, self._servings)
        copy._ingredients = list(self._ingredients)
        copy.scale_to_servings(new_servings)
        return copy

    def matches(self, token: str) -> bool:
        """True if the lower-case ``token`` occurs in the name or any ingredient name."""
        return token in self._name.lower() or self.has_ingredient(token)

    def has_ingredient(self, token: str) -> bool:
        return any(token in ingredient.name.lower() for ingredient in self._ingredients)

    def format(self) -> str:
        lines = [f"{self._name} (serves {self._servings})"]
        for ingredient in self._ingredients:
            lines.append(f"- {format_amount(ingredient.amount)} {ingredient.name}")
        return "\n".join(lines) + "\n"

    def __str__(self) -> str:
        return self.format()

    def __repr__(self) -> str:
        return (
            f"Recipe(name={self._name!r}, servings={self._servings}, "
            f"ingredients={self._ingredients!r})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Recipe):
            return NotImplemented
        return (
            self._name == other._name
            and self._servings == other._servings
            and self._ingredients == other._ingredients
        )

    __hash__ = None  # type: ignore[assignment]


class RecipeBook:
    """
    Ordered collection of recipes.

    Recipes keep insertion order. Names are not required to be unique;
    lookups by name return the first exact (case-sensitive) match.
    """

    def __init__(self, recipes: Optional[Iterable[Recipe]] = None):
        self._recipes: List[Recipe] = []
        for recipe in recipes or ():
            self.add_recipe(recipe)

    def add_recipe(self, recipe: Recipe) -> None:
        if not isinstance(recipe, Recipe):
            raise TypeError("Recipe must not be None")
        self._recipes.append(recipe)

    def remove_recipe(self, name: str) -> bool:
        """Remove the first recipe called ``name``. Returns True if one was removed."""
        for i, recipe in enumerate(self._recipes):
            if recipe.name == name:
                del self._recipes[i]
                return True
        return False

    def get_recipe(self, name: str) -> Optional[Recipe]:
        for recipe in self._recipes:
            if recipe.name == name:
                return recipe
        return None

    def all_recipes(self) -> List[Recipe]:
        """Return a copy of the recipes in insertion order."""
        return list(self._recipes)

    def search_by_name(self, query: Optional[str]) -> List[Recipe]:
        if not query:
            return []
        needle = query.lower()
        return [r for r in self._recipes if needle in r.name.lower()]

    def search_by_ingredient(self, query: Optional[str]) -> List[Recipe]:
        if not query:
            return []
        needle = query.lower()
        return [r for r in self._recipes if r.has_ingredient(needle)]

    def search_multi_token(self, query: Optional[str]) -> List[Recipe]:
        """
        Recipes matching every whitespace-separated token of ``query``.

        A token matches when it occurs (case-insensitively) in the recipe
        name or in one of its ingredient names.
        """
        if not query:
            return []
        tokens = [token.lower() for token in query.split()]
        if not tokens:
            return []
        return [r for r in self._recipes if all(r.matches(token) for token in tokens)]

    def __len__(self) -> int:
        return len(self._recipes)

    def __iter__(self) -> Iterator[Recipe]:
        return iter(list(self._recipes))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RecipeBook):
            return NotImplemented
        return self._recipes == other._recipes

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"RecipeBook({self._recipes!r})"


def sort_by_name(recipes: Optional[Iterable[Recipe]]) -> List[Recipe]:
    """
    Return recipes sorted by name, ignoring case.

    Names equal apart from case are ordered case-sensitively so the result
    is deterministic. The input is not modified.
    """
    if recipes is None:
        return []
    return sorted(recipes, key=lambda r: (r.name.lower(), r.name))


def format_amount(amount: float) -> str:
    """
    Format an amount for display.

    Whole numbers print without decimals; anything else prints with at
    most two decimals and no trailing zeros.

    >>> format_amount(200.0), format_amount(7.5), format_amount(0.625), format_amount(1.333)
    ('200', '7.5', '0.63', '1.33')
    """
    rounded = round(amount)
    if abs(amount - rounded) < 1e-9:
        return str(int(rounded))
    # Half-up on the shortest repr, so 0.625 shows as 0.63.
    text = str(Decimal(repr(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
    return text.rstrip("0").rstrip(".")
