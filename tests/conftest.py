"""Test configuration and fixtures for Recipe Store tests."""

import logging
import sys
from pathlib import Path

import pytest

# Add src to path for development testing
_src_dir = Path(__file__).parent.parent / "src"
if _src_dir.exists():
    sys.path.insert(0, str(_src_dir))

from recipe_store.models import Recipe, RecipeBook  # noqa: E402


# ==============================================================================
# Fixture paths
# ==============================================================================

FIXTURES_DIR = Path(__file__).parent / "fixtures"
FIXTURES_VALID_DIR = FIXTURES_DIR / "valid"
FIXTURES_INVALID_DIR = FIXTURES_DIR / "invalid"


# ==============================================================================
# Recipe helpers
# ==============================================================================

def make_recipe(name, servings, *ingredients):
    """Build a recipe from (name, amount) pairs."""
    recipe = Recipe(name, servings)
    for ingredient_name, amount in ingredients:
        assert recipe.add_ingredient(ingredient_name, amount)
    return recipe


# ==============================================================================
# Shared pytest fixtures
# ==============================================================================

@pytest.fixture
def valid_fixtures_dir() -> Path:
    """Return the path to the valid fixtures directory."""
    return FIXTURES_VALID_DIR


@pytest.fixture
def invalid_fixtures_dir() -> Path:
    """Return the path to the invalid fixtures directory."""
    return FIXTURES_INVALID_DIR


@pytest.fixture
def recipe_factory():
    """Return the ``make_recipe`` helper."""
    return make_recipe


@pytest.fixture
def garlic_soup() -> Recipe:
    """Return the Garlic Soup recipe."""
    return make_recipe("Garlic Soup", 4, ("garlic", 4), ("broth", 1000))


@pytest.fixture
def sample_book(garlic_soup) -> RecipeBook:
    """Return a book with three recipes in a known order."""
    pancakes = make_recipe(
        "Pancakes", 2, ("flour", 200), ("milk", 300), ("egg", 2), ("Salt", 0.5)
    )
    salad = make_recipe("apple salad", 1, ("apple", 1.5), ("lemon juice", 0.25), ("salt", 0.1))
    return RecipeBook([garlic_soup, pancakes, salad])


@pytest.fixture
def recipes_file(tmp_path, sample_book) -> Path:
    """Return a saved copy of ``sample_book``."""
    from recipe_store.io import save_recipes

    path = tmp_path / "recipes.json"
    save_recipes(sample_book, path)
    return path


@pytest.fixture
def isolated_logging():
    """Put the root logger back the way the test found it."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
