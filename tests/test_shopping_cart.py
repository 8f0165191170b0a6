"""
Tests for recipe_store.shopping_cart module.
"""

import pytest

from recipe_store.shopping_cart import CartItem, ShoppingCart, normalize_ingredient_name


class TestShoppingCart:
    """Tests for ShoppingCart aggregation."""

    def test_sums_across_recipes(self, sample_book):
        """Test that equal names are summed ignoring case and whitespace."""
        pancakes = sample_book.get_recipe("Pancakes")
        salad = sample_book.get_recipe("apple salad")
        cart = ShoppingCart([pancakes, salad])
        assert cart.amount("salt") == pytest.approx(0.6)
        assert cart.amount("  SALT ") == pytest.approx(0.6)
        assert len(cart) == 6

    def test_items_sorted(self, sample_book):
        """Test that items are ordered by normalized name."""
        cart = ShoppingCart(sample_book.all_recipes())
        names = [item.name for item in cart.items()]
        assert names == sorted(names)
        assert names[0] == "apple"

    def test_first_seen_order(self, sample_book):
        """Test that aggregated() keeps first-seen order."""
        cart = ShoppingCart([sample_book.get_recipe("Garlic Soup")])
        assert cart.aggregated() == {"garlic": 4.0, "broth": 1000.0}

    def test_same_recipe_twice(self, garlic_soup):
        """Test that selecting a recipe twice doubles its amounts."""
        cart = ShoppingCart([garlic_soup, garlic_soup])
        assert cart.amount("garlic") == 8.0
        assert garlic_soup.ingredients[0].amount == 4.0

    def test_trimmed_names_merge(self, recipe_factory):
        """Test that surrounding whitespace does not split a line."""
        a = recipe_factory("A", 1, ("Garlic", 1))
        b = recipe_factory("B", 1, (" garlic ", 2))
        assert ShoppingCart([a, b]).items() == [CartItem("garlic", 3.0)]

    def test_empty(self):
        """Test a cart with no recipes."""
        cart = ShoppingCart([])
        assert len(cart) == 0
        assert cart.format() == ""
        assert cart.amount("salt") == 0.0

    def test_none_rejected(self):
        """Test that None is a caller error."""
        with pytest.raises(TypeError):
            ShoppingCart(None)

    def test_format(self, recipe_factory):
        """Test formatted lines with rounding for display."""
        a = recipe_factory("A", 1, ("sugar", 0.3333), ("flour", 100))
        b = recipe_factory("B", 1, ("Sugar", 1))
        assert ShoppingCart([a, b]).format() == "- 100 flour\n- 1.33 sugar\n"
        assert str(ShoppingCart([a])) == "- 100 flour\n- 0.33 sugar\n"


def test_normalize_ingredient_name():
    """Test trimming and lower-casing."""
    assert normalize_ingredient_name("  Lemon Juice\t") == "lemon juice"
