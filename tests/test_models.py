"""
Tests for recipe_store.models module.

Tests recipe construction rules, the recipe book and amount formatting.
"""

import math

import pytest

from recipe_store.models import Ingredient, Recipe, RecipeBook, format_amount, sort_by_name


class TestIngredient:
    """Tests for Ingredient."""

    def test_amount_coerced_to_float(self):
        """Test that integer amounts are stored as floats."""
        ingredient = Ingredient("egg", 2)
        assert ingredient.amount == 2.0
        assert isinstance(ingredient.amount, float)

    @pytest.mark.parametrize("name", ["", "   ", None, 5])
    def test_invalid_name(self, name):
        """Test that blank or non-string names are rejected."""
        with pytest.raises(ValueError):
            Ingredient(name, 1)

    @pytest.mark.parametrize("amount", [0, -1, math.nan, math.inf, True, "2"])
    def test_invalid_amount(self, amount):
        """Test that non-positive, non-finite and non-numeric amounts are rejected."""
        with pytest.raises(ValueError):
            Ingredient("salt", amount)

    def test_immutable(self):
        """Test that ingredients cannot be changed after creation."""
        ingredient = Ingredient("salt", 1)
        with pytest.raises(AttributeError):
            ingredient.amount = 5


class TestRecipe:
    """Tests for Recipe."""

    def test_construction(self):
        """Test a new recipe has no ingredients."""
        recipe = Recipe("Soup", 4)
        assert recipe.name == "Soup"
        assert recipe.servings == 4
        assert recipe.ingredients == ()
        assert recipe.total_ingredient_count() == 0

    @pytest.mark.parametrize("name", ["", "  \t", None])
    def test_blank_name_rejected(self, name):
        """Test that a blank name raises ValueError."""
        with pytest.raises(ValueError, match="name must be non-empty"):
            Recipe(name, 2)

    @pytest.mark.parametrize("servings", [0, -3, 2.5, "4", True])
    def test_invalid_servings_rejected(self, servings):
        """Test that servings must be a positive integer."""
        with pytest.raises(ValueError, match="servings must be positive"):
            Recipe("Soup", servings)

    def test_add_ingredient(self):
        """Test adding valid ingredients in order."""
        recipe = Recipe("Soup", 2)
        assert recipe.add_ingredient("water", 500)
        assert recipe.add_ingredient("salt", 0.5)
        assert recipe.ingredients == (Ingredient("water", 500.0), Ingredient("salt", 0.5))

    @pytest.mark.parametrize("name,amount", [("", 1), ("   ", 1), ("salt", 0), ("salt", -1), ("salt", math.nan)])
    def test_invalid_ingredient_ignored(self, name, amount):
        """Test that invalid ingredients are refused without raising."""
        recipe = Recipe("Soup", 2)
        assert recipe.add_ingredient(name, amount) is False
        assert recipe.total_ingredient_count() == 0

    def test_ingredients_view_is_read_only(self):
        """Test that the ingredients property cannot mutate the recipe."""
        recipe = Recipe("Soup", 2)
        recipe.add_ingredient("water", 1)
        assert isinstance(recipe.ingredients, tuple)

    def test_scale_to_servings(self, garlic_soup):
        """Test proportional scaling."""
        garlic_soup.scale_to_servings(8)
        assert garlic_soup.servings == 8
        assert [i.amount for i in garlic_soup.ingredients] == [8.0, 2000.0]

    def test_scale_down(self, recipe_factory):
        """Test scaling to fewer servings."""
        recipe = recipe_factory("Pancakes", 2, ("flour", 200), ("egg", 2))
        recipe.scale_to_servings(1)
        assert [i.amount for i in recipe.ingredients] == [100.0, 1.0]

    @pytest.mark.parametrize("servings", [0, -2, 1.5])
    def test_scale_invalid(self, garlic_soup, servings):
        """Test that scaling to an invalid count leaves the recipe unchanged."""
        with pytest.raises(ValueError):
            garlic_soup.scale_to_servings(servings)
        assert garlic_soup.servings == 4
        assert garlic_soup.ingredients[0].amount == 4.0

    def test_scaled_copy(self, garlic_soup):
        """Test that scaled returns a new recipe."""
        copy = garlic_soup.scaled(2)
        assert copy.servings == 2
        assert copy.ingredients[1].amount == 500.0
        assert garlic_soup.servings == 4
        assert garlic_soup.ingredients[1].amount == 1000.0

    def test_format(self, recipe_factory):
        """Test the plain-text rendering."""
        recipe = recipe_factory("Pancakes", 2, ("flour", 200), ("Salt", 0.5), ("sugar", 1.333))
        assert recipe.format() == "Pancakes (serves 2)\n- 200 flour\n- 0.5 Salt\n- 1.33 sugar\n"
        assert str(recipe) == recipe.format()

    def test_equality(self, recipe_factory):
        """Test value equality."""
        a = recipe_factory("Soup", 2, ("water", 1))
        b = recipe_factory("Soup", 2, ("water", 1.0))
        c = recipe_factory("Soup", 3, ("water", 1))
        assert a == b
        assert a != c

    def test_matches(self, garlic_soup):
        """Test token matching against name and ingredient names."""
        assert garlic_soup.matches("soup")
        assert garlic_soup.matches("broth")
        assert not garlic_soup.matches("salt")


class TestRecipeBook:
    """Tests for RecipeBook."""

    def test_insertion_order(self, sample_book):
        """Test that recipes keep the order they were added in."""
        assert [r.name for r in sample_book.all_recipes()] == ["Garlic Soup", "Pancakes", "apple salad"]

    def test_add_none_rejected(self):
        """Test that None cannot be added."""
        with pytest.raises(TypeError):
            RecipeBook().add_recipe(None)

    def test_all_recipes_is_a_copy(self, sample_book):
        """Test that changing the returned list does not change the book."""
        sample_book.all_recipes().clear()
        assert len(sample_book) == 3

    def test_duplicate_names_allowed(self):
        """Test that two recipes may share a name."""
        book = RecipeBook([Recipe("Soup", 1), Recipe("Soup", 2)])
        assert len(book) == 2
        assert book.get_recipe("Soup").servings == 1

    def test_get_recipe_exact(self, sample_book):
        """Test that lookups are exact and case-sensitive."""
        assert sample_book.get_recipe("Pancakes").servings == 2
        assert sample_book.get_recipe("pancakes") is None

    def test_remove_recipe(self, sample_book):
        """Test removing by name."""
        assert sample_book.remove_recipe("Pancakes")
        assert sample_book.get_recipe("Pancakes") is None
        assert not sample_book.remove_recipe("Pancakes")
        assert len(sample_book) == 2

    def test_remove_first_of_duplicates(self):
        """Test that only the first recipe of a name is removed."""
        book = RecipeBook([Recipe("Soup", 1), Recipe("Soup", 2)])
        book.remove_recipe("Soup")
        assert [r.servings for r in book] == [2]

    def test_search_by_name(self, sample_book):
        """Test case-insensitive substring search on names."""
        assert [r.name for r in sample_book.search_by_name("SOUP")] == ["Garlic Soup"]
        assert [r.name for r in sample_book.search_by_name("a")] == ["Garlic Soup", "Pancakes", "apple salad"]

    def test_search_by_ingredient(self, sample_book):
        """Test case-insensitive substring search on ingredient names."""
        assert [r.name for r in sample_book.search_by_ingredient("salt")] == ["Pancakes", "apple salad"]

    def test_search_multi_token(self, sample_book):
        """Test that every token must match."""
        assert [r.name for r in sample_book.search_multi_token("salt apple")] == ["apple salad"]
        assert [r.name for r in sample_book.search_multi_token("garlic BROTH")] == ["Garlic Soup"]
        assert sample_book.search_multi_token("salt garlic") == []

    @pytest.mark.parametrize("query", [None, "", "   "])
    def test_empty_queries(self, sample_book, query):
        """Test that empty queries match nothing."""
        assert sample_book.search_multi_token(query) == []
        assert sample_book.search_by_name(query or "") == []

    def test_equality(self, sample_book):
        """Test that books compare by their recipes."""
        assert RecipeBook(sample_book.all_recipes()) == sample_book
        assert RecipeBook() != sample_book


class TestSortByName:
    """Tests for sort_by_name."""

    def test_case_insensitive(self, sample_book):
        """Test that sorting ignores case."""
        assert [r.name for r in sort_by_name(sample_book)] == ["apple salad", "Garlic Soup", "Pancakes"]

    def test_input_not_modified(self, sample_book):
        """Test that the original order is kept."""
        recipes = sample_book.all_recipes()
        sort_by_name(recipes)
        assert recipes[0].name == "Garlic Soup"

    def test_none(self):
        """Test that None gives an empty list."""
        assert sort_by_name(None) == []


class TestFormatAmount:
    """Tests for format_amount."""

    @pytest.mark.parametrize(
        "amount,expected",
        [
            (200.0, "200"),
            (4.0, "4"),
            (7.5, "7.5"),
            (0.25, "0.25"),
            (1.333, "1.33"),
            (0.625, "0.63"),
            (1.005, "1.01"),
            (0.1 + 0.2, "0.3"),
            (2.9999999999999, "3"),
        ],
    )
    def test_format(self, amount, expected):
        """Test whole numbers, trimmed decimals and half-up rounding."""
        assert format_amount(amount) == expected
