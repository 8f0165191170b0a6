"""
Shopping cart aggregation across recipes.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List

from .models import Recipe, format_amount

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CartItem:
    """One aggregated ingredient line."""

    name: str
    amount: float


def normalize_ingredient_name(name: str) -> str:
    return name.strip().lower()


class ShoppingCart:
    """
    Ingredients of several recipes summed by normalized name.

    Names are compared trimmed and case-insensitively, so "Garlic" and
    " garlic" land on the same line. Totals keep full precision; rounding
    only happens in ``format``. The recipes themselves are not modified.
    """

    def __init__(self, recipes: Iterable[Recipe]):
        if recipes is None:
            raise TypeError("Recipes list must not be None")

        self._totals: Dict[str, float] = {}
        count = 0
        for recipe in recipes:
            count += 1
            for ingredient in recipe.ingredients:
                key = normalize_ingredient_name(ingredient.name)
                self._totals[key] = self._totals.get(key, 0.0) + ingredient.amount

        logger.debug(f"Aggregated {len(self._totals)} ingredient(s) from {count} recipe(s)")

    def __len__(self) -> int:
        return len(self._totals)

    def amount(self, name: str) -> float:
        """Total for ``name`` (matched like the cart does), 0.0 when absent."""
        return self._totals.get(normalize_ingredient_name(name), 0.0)

    def aggregated(self) -> Dict[str, float]:
        """Copy of the totals in first-seen order."""
        return dict(self._totals)

    def items(self) -> List[CartItem]:
        """Totals as CartItem entries sorted by name."""
        return [CartItem(name, self._totals[name]) for name in sorted(self._totals)]

    def format(self) -> str:
        return "".join(f"- {format_amount(item.amount)} {item.name}\n" for item in self.items())

    def __str__(self) -> str:
        return self.format()
