"""
Recipe Store - JSON persistence for recipe collections.

This package provides:
- A dependency-free reader and writer for recipe collection documents
- All-or-nothing validation of recipes and ingredients on load
- Recipe, ingredient and recipe book objects with search and scaling
- A `recipes` command-line tool for managing a recipes file
"""

__version__ = "1.0.0"
__author__ = "Recipe Store Contributors"

# Error types
from .errors import (
    ConfigurationError,
    RecipeLoadError,
    RecipeStoreError,
    RecipeValidationError,
    StorageError,
    StructuralError,
)

# File persistence
from .io import load_recipes, save_recipes

# Domain objects
from .models import Ingredient, Recipe, RecipeBook, format_amount, sort_by_name

# Document codec
from .reader import deserialize
from .shopping_cart import CartItem, ShoppingCart
from .writer import serialize

__all__ = [
    # Document codec
    "serialize",
    "deserialize",
    # File persistence
    "save_recipes",
    "load_recipes",
    # Domain objects
    "Ingredient",
    "Recipe",
    "RecipeBook",
    "ShoppingCart",
    "CartItem",
    "sort_by_name",
    "format_amount",
    # Errors
    "RecipeStoreError",
    "ConfigurationError",
    "RecipeLoadError",
    "StructuralError",
    "RecipeValidationError",
    "StorageError",
    # Version
    "__version__",
]
